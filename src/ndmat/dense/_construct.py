"""
Matrix constructors.

Matlab-style argument handling: sizes are given either as separate
integers, as one list, or as a single integer for a square matrix; an
optional trailing type name selects the element kind.

Example:
    >>> zeros(3).size
    [3, 3]
    >>> ones(2, 4, 'uint8').type_name
    'uint8'
    >>> colon(0, 0.1, 0.3).get_data()
    array([0. , 0.1, 0.2, 0.3])
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from .._dtypes import DType, is_type_name, normalize_dtype
from ..core.config import Config, resolve_config
from ..core.error import (
    ComplexStateError,
    InvalidParameterError,
    ShapeMismatchError,
)
from ._matrix import Matrix, to_matrix
from ._tools import check_size, check_size_equals, is_integer, numel, round_half_away

logger = logging.getLogger("ndmat.dense")

_EPS = float(np.finfo(np.float64).eps)


# =============================================================================
# Random State
# =============================================================================

_rng = np.random.default_rng()


def seed(n: Optional[int] = None) -> None:
    """Reseed the generator shared by every random constructor."""
    global _rng
    _rng = np.random.default_rng(n)
    logger.debug("Random generator reseeded with %r", n)


def get_rng() -> np.random.Generator:
    return _rng


# =============================================================================
# Argument Parsing
# =============================================================================

def _parse_size_args(args: Sequence[Any], unidim: str = 'square') -> Tuple[list, Optional[DType]]:
    """Split ``(*size, type)`` into a normalized size and an optional DType."""
    args = list(args)
    dtype = None
    if args and is_type_name(args[-1]):
        dtype = normalize_dtype(args.pop())
    if not args:
        return [1, 1], dtype
    size = args[0] if len(args) == 1 else args
    return check_size(size, unidim), dtype


def _filled(size: list, dtype: Optional[DType], values: np.ndarray, config: Optional[Config]) -> Matrix:
    config = resolve_config(config)
    return Matrix._from_parts(size, values, None, dtype or config.default_type, config)


# =============================================================================
# Deterministic Constructors
# =============================================================================

def zeros(*args, config: Optional[Config] = None) -> Matrix:
    """Matrix of zeros: ``zeros(n)``, ``zeros(m, n, ...)``, ``zeros([m, n], 'uint8')``."""
    size, dtype = _parse_size_args(args)
    return _filled(size, dtype, np.zeros(numel(size)), config)


def ones(*args, config: Optional[Config] = None) -> Matrix:
    size, dtype = _parse_size_args(args)
    return _filled(size, dtype, np.ones(numel(size)), config)


def eye(*args, config: Optional[Config] = None) -> Matrix:
    """Ones on the main diagonal of every 2-D page, zeros elsewhere."""
    size, dtype = _parse_size_args(args)
    arr = np.zeros(size)
    k = np.arange(min(size[0], size[1]))
    arr[k, k] = 1
    return _filled(size, dtype, arr.ravel(order='F'), config)


def complex(real: Any, imag: Any, config: Optional[Config] = None) -> Matrix:
    """
    Build a complex matrix from real and imaginary parts.

    Raises:
        ComplexStateError: If either part is complex.
        ShapeMismatchError: If the parts differ in size.
    """
    real = to_matrix(real, config)
    imag = to_matrix(imag, config)
    if not real.is_real() or not imag.is_real():
        raise ComplexStateError("complex: real and imaginary parts must be real")
    if not check_size_equals(real.size, imag.size, real.config.ignore_trailing_dims):
        raise ShapeMismatchError(
            f"complex: parts have sizes {real.size} and {imag.size}"
        )
    return real._new(real.size, real.get_real_data(), imag.get_real_data())


def diag(vector: Any, k: int = 0, config: Optional[Config] = None) -> Matrix:
    """
    Square matrix with ``vector`` on diagonal ``k`` (above the main one when positive).
    """
    vector = to_matrix(vector, config)
    if not is_integer(k):
        raise InvalidParameterError(f"diag: shift must be an integer, got {k!r}")
    k = int(k)
    n = vector.numel() + abs(k)
    rows = np.arange(vector.numel()) + max(-k, 0)
    cols = np.arange(vector.numel()) + max(k, 0)

    def spread(values):
        arr = np.zeros((n, n), dtype=np.float64)
        arr[rows, cols] = values
        return arr.ravel(order='F')

    re, im = vector._parts()
    return vector._new([n, n], spread(re), spread(im) if im is not None else None)


def colon(*args, config: Optional[Config] = None) -> Matrix:
    """
    Matlab colon operator: ``colon(first, last)`` or ``colon(first, step, last)``.

    Returns a column. The end point is kept when it lies within
    ``2 * eps * max(|first|, |last|)`` of the last step, and values are
    filled symmetrically from both ends so that the sequence does not
    drift.

    Raises:
        InvalidParameterError: On a non-finite argument or a zero step.
    """
    if len(args) == 2:
        first, step, last = args[0], 1.0, args[1]
    elif len(args) == 3:
        first, step, last = args
    else:
        raise InvalidParameterError(f"colon takes 2 or 3 arguments, got {len(args)}")
    first, step, last = float(first), float(step), float(last)
    if not all(math.isfinite(v) for v in (first, step, last)):
        raise InvalidParameterError("colon: arguments must be finite")
    if step == 0:
        raise InvalidParameterError("colon: step must be non-zero")

    tol = 2.0 * _EPS * max(abs(first), abs(last))
    sign = 1.0 if step > 0 else -1.0

    if first.is_integer() and step == 1:
        n = math.floor(last) - first
    elif first.is_integer() and step.is_integer():
        q = math.floor(first / step)
        r = first - q * step
        n = math.floor((last - r) / step) - q
    else:
        n = round_half_away((last - first) / step)
        if sign * (first + n * step - last) > tol:
            n -= 1
    n = int(n)

    if n < 0:
        return _filled([0, 1], None, np.zeros(0), config)

    right = first + n * step
    if sign * (right - last) > -tol:
        right = last

    out = np.empty(n + 1)
    k = np.arange(n // 2 + 1)
    out[k] = first + k * step
    out[n - k] = right - k * step
    if n % 2 == 0:
        out[n // 2] = (first + right) / 2
    return _filled([n + 1, 1], None, out, config)


def linspace(minimum: float, maximum: float, bins: int = 100, config: Optional[Config] = None) -> Matrix:
    """``bins`` values evenly spaced from ``minimum`` to ``maximum`` (column)."""
    if not is_integer(bins, 1):
        raise InvalidParameterError(f"linspace: bins must be a positive integer, got {bins!r}")
    if bins == 1:
        return _filled([1, 1], None, np.array([float(maximum)]), config)
    if minimum == maximum:
        return _filled([int(bins), 1], None, np.full(int(bins), float(minimum)), config)
    return colon(minimum, (maximum - minimum) / (bins - 1), maximum, config=config)


# =============================================================================
# Random Constructors
# =============================================================================

def rand(*args, config: Optional[Config] = None) -> Matrix:
    """Uniform values in ``[0, 1)``."""
    size, dtype = _parse_size_args(args)
    return _filled(size, dtype, _rng.random(numel(size)), config)


def randn(*args, config: Optional[Config] = None) -> Matrix:
    """Standard normal values."""
    size, dtype = _parse_size_args(args)
    return _filled(size, dtype, _rng.standard_normal(numel(size)), config)


def randi(limits, *args, config: Optional[Config] = None) -> Matrix:
    """
    Uniform integers in ``[0, imax]`` or ``[imin, imax]``.

    Example:
        >>> randi(9, 3)               # 3x3 digits
        >>> randi([-1, 1], 2, 5, 'int8')
    """
    if isinstance(limits, (list, tuple, np.ndarray)) and len(limits) == 2:
        imin, imax = limits
    elif isinstance(limits, (list, tuple, np.ndarray)) and len(limits) == 1:
        imin, imax = 0, limits[0]
    else:
        imin, imax = 0, limits
    if not is_integer(imin) or not is_integer(imax) or imax < imin:
        raise InvalidParameterError(f"randi: invalid range {limits!r}")
    size, dtype = _parse_size_args(args) if args else ([1, 1], None)
    values = _rng.integers(int(imin), int(imax) + 1, numel(size))
    return _filled(size, dtype, values, config)


def poissrnd(lam, *args, config: Optional[Config] = None) -> Matrix:
    """
    Poisson random numbers.

    ``lam`` is a number (then ``args`` gives the size) or a Matrix of
    rates (then the result has its size).
    """
    if isinstance(lam, Matrix):
        rates = lam.get_real_data().astype(np.float64)
        if np.any(rates < 0):
            raise InvalidParameterError("poissrnd: rates must be non-negative")
        return lam._new(lam.size, _rng.poisson(rates).astype(np.float64),
                        dtype=lam.dtype if lam.is_float() else lam.config.default_type)
    if lam < 0:
        raise InvalidParameterError(f"poissrnd: rate must be non-negative, got {lam}")
    size, dtype = _parse_size_args(args)
    return _filled(size, dtype, _rng.poisson(lam, numel(size)), config)


def exprnd(mu: float, *args, config: Optional[Config] = None) -> Matrix:
    """Exponential random numbers of mean ``mu``."""
    if mu <= 0:
        raise InvalidParameterError(f"exprnd: mean must be positive, got {mu}")
    size, dtype = _parse_size_args(args)
    return _filled(size, dtype, _rng.exponential(mu, numel(size)), config)


__all__ = [
    "zeros",
    "ones",
    "eye",
    "complex",
    "diag",
    "colon",
    "linspace",
    "rand",
    "randn",
    "randi",
    "poissrnd",
    "exprnd",
    "seed",
    "get_rng",
    "to_matrix",
]
