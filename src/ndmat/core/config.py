"""
Configuration for ndmat.

Provides:
- Default element kind for matrices built without an explicit type
- Whether trailing unit dimensions are ignored when comparing sizes

A ``Config`` is an immutable value. Every Matrix keeps the Config it was
built with and hands it on to the matrices derived from it, so a whole
computation can run under an explicit configuration:

Example:
    >>> cfg = Config(default_type=DType.FLOAT32)
    >>> m = Matrix([2, 2], config=cfg)
    >>> m.type_name
    'single'

The process-wide default is read once from the environment
(``NDMAT_DEFAULT_TYPE``, ``NDMAT_IGNORE_TRAILING_DIMS``) and can be
replaced with ``set_config``.
"""

from __future__ import annotations

import os
import logging
from dataclasses import dataclass, replace
from typing import Optional, Union

from .._dtypes import DType, normalize_dtype

logger = logging.getLogger("ndmat.config")


# =============================================================================
# Configuration Value
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Immutable matrix configuration.

    Attributes:
        default_type: Element kind used when none is given (float64).
        ignore_trailing_dims: When True, sizes that differ only by trailing
            unit dimensions compare equal.
    """
    default_type: DType = DType.FLOAT64
    ignore_trailing_dims: bool = True

    def __post_init__(self):
        object.__setattr__(self, "default_type", normalize_dtype(self.default_type))
        if self.default_type.is_integer or self.default_type.is_logical:
            raise ValueError(
                f"default_type must be a float kind, got '{self.default_type.type_name}'"
            )

    @property
    def default_numpy_dtype(self):
        """numpy dtype of the default element kind."""
        return self.default_type.numpy_dtype

    def with_changes(self, **changes) -> "Config":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _config_from_env() -> Config:
    """Build the initial global configuration from the environment."""
    kwargs = {}
    default_type = os.environ.get("NDMAT_DEFAULT_TYPE")
    if default_type:
        kwargs["default_type"] = default_type
    ignore = os.environ.get("NDMAT_IGNORE_TRAILING_DIMS")
    if ignore:
        kwargs["ignore_trailing_dims"] = _env_flag(ignore)
    if kwargs:
        logger.debug("Configuration overridden from environment: %s", kwargs)
    return Config(**kwargs)


# Global config instance
_config = _config_from_env()


# =============================================================================
# Public API
# =============================================================================

def get_config() -> Config:
    """Get the global configuration."""
    return _config


def set_config(
    config: Optional[Config] = None,
    *,
    default_type: Optional[Union[DType, str]] = None,
    ignore_trailing_dims: Optional[bool] = None,
) -> Config:
    """
    Replace the global configuration.

    Args:
        config: Complete configuration to install. If None, the current one
            is updated with the keyword arguments.
        default_type: Default element kind ('double', 'single').
        ignore_trailing_dims: Trailing unit dimension policy.

    Returns:
        The previous configuration, so callers can restore it.

    Example:
        >>> previous = set_config(default_type='single')
        >>> ...
        >>> set_config(previous)
    """
    global _config
    previous = _config
    new = config if config is not None else _config
    changes = {}
    if default_type is not None:
        changes["default_type"] = default_type
    if ignore_trailing_dims is not None:
        changes["ignore_trailing_dims"] = ignore_trailing_dims
    if changes:
        new = new.with_changes(**changes)
    _config = new
    logger.debug("Global configuration set to %s", new)
    return previous


def resolve_config(config: Optional[Config]) -> Config:
    """Return ``config`` or the global configuration when it is None."""
    return _config if config is None else config
