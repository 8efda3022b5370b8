"""Core configuration and error types."""

from .config import Config, get_config, set_config
from .error import (
    MatrixError,
    InvalidShapeError,
    ShapeMismatchError,
    ReshapeError,
    BroadcastShapeError,
    OutOfBoundsError,
    InvalidRangeError,
    InvalidPermutationError,
    ComplexStateError,
    ComplexUnsupportedError,
    MatrixNotImplementedError,
    InvalidModeError,
    InvalidParameterError,
    KernelTooLargeError,
)

__all__ = [
    "Config",
    "get_config",
    "set_config",
    "MatrixError",
    "InvalidShapeError",
    "ShapeMismatchError",
    "ReshapeError",
    "BroadcastShapeError",
    "OutOfBoundsError",
    "InvalidRangeError",
    "InvalidPermutationError",
    "ComplexStateError",
    "ComplexUnsupportedError",
    "MatrixNotImplementedError",
    "InvalidModeError",
    "InvalidParameterError",
    "KernelTooLargeError",
]
