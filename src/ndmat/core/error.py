"""
Error handling for ndmat.

Every error is a contract violation reported synchronously at the point
of detection. Each class carries a numeric code and also derives from
the builtin exception a Python caller would expect, so both of these
work:

    >>> try:
    ...     m.reshape(5, 5)
    ... except ReshapeError:
    ...     ...
    >>> try:
    ...     m.reshape(5, 5)
    ... except ValueError:
    ...     ...
"""

from __future__ import annotations

from typing import Dict, Optional, Type


# =============================================================================
# Error Codes
# =============================================================================

NDMAT_OK = 0

# Shape errors (10-19)
NDMAT_ERROR_INVALID_SHAPE = 10
NDMAT_ERROR_SHAPE_MISMATCH = 11
NDMAT_ERROR_RESHAPE = 12
NDMAT_ERROR_BROADCAST_SHAPE = 13

# Indexing errors (20-29)
NDMAT_ERROR_OUT_OF_BOUNDS = 20
NDMAT_ERROR_INVALID_RANGE = 21
NDMAT_ERROR_INVALID_PERMUTATION = 22

# Complex errors (30-39)
NDMAT_ERROR_COMPLEX_STATE = 30
NDMAT_ERROR_COMPLEX_UNSUPPORTED = 31

# Feature errors (40-49)
NDMAT_ERROR_NOT_IMPLEMENTED = 40

# Parameter errors (50-59)
NDMAT_ERROR_INVALID_MODE = 50
NDMAT_ERROR_INVALID_PARAMETER = 51
NDMAT_ERROR_KERNEL_TOO_LARGE = 52


_ERROR_MESSAGES = {
    NDMAT_OK: "Success",
    NDMAT_ERROR_INVALID_SHAPE: "Invalid shape",
    NDMAT_ERROR_SHAPE_MISMATCH: "Shape mismatch",
    NDMAT_ERROR_RESHAPE: "Invalid reshape",
    NDMAT_ERROR_BROADCAST_SHAPE: "Operand sizes do not broadcast",
    NDMAT_ERROR_OUT_OF_BOUNDS: "Index out of bounds",
    NDMAT_ERROR_INVALID_RANGE: "Invalid range",
    NDMAT_ERROR_INVALID_PERMUTATION: "Invalid permutation",
    NDMAT_ERROR_COMPLEX_STATE: "Invalid complex state",
    NDMAT_ERROR_COMPLEX_UNSUPPORTED: "Complex operands not supported",
    NDMAT_ERROR_NOT_IMPLEMENTED: "Not implemented",
    NDMAT_ERROR_INVALID_MODE: "Invalid mode",
    NDMAT_ERROR_INVALID_PARAMETER: "Invalid parameter",
    NDMAT_ERROR_KERNEL_TOO_LARGE: "Kernel is too large",
}


# =============================================================================
# Exception Classes
# =============================================================================

class MatrixError(Exception):
    """
    Base exception for all ndmat errors.

    Subclasses set ``code``; the message defaults to the code's text.
    """

    code: int = NDMAT_OK

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        if code is not None:
            self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(self.code, f"Unknown error (code={self.code})")
        self.message = message
        super().__init__(message)

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "MatrixError":
        """Create the exception matching ``code`` with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        klass = _ERROR_CLASSES.get(code, MatrixError)
        return klass(msg, code)


class InvalidShapeError(MatrixError, ValueError):
    """A size vector contains negative or non-integer entries."""
    code = NDMAT_ERROR_INVALID_SHAPE


class ShapeMismatchError(MatrixError, ValueError):
    """Data length or operand sizes do not match the expected size."""
    code = NDMAT_ERROR_SHAPE_MISMATCH


class ReshapeError(MatrixError, ValueError):
    """The new size does not hold the same number of elements."""
    code = NDMAT_ERROR_RESHAPE


class BroadcastShapeError(MatrixError, ValueError):
    """Binary operands have incompatible sizes."""
    code = NDMAT_ERROR_BROADCAST_SHAPE


class OutOfBoundsError(MatrixError, IndexError):
    """A coordinate lies outside ``[0, length)``."""
    code = NDMAT_ERROR_OUT_OF_BOUNDS


class InvalidRangeError(MatrixError, IndexError):
    """A colon selection exceeds its dimension or has an invalid step."""
    code = NDMAT_ERROR_INVALID_RANGE


class InvalidPermutationError(MatrixError, ValueError):
    """A dimension order is not a permutation."""
    code = NDMAT_ERROR_INVALID_PERMUTATION


class ComplexStateError(MatrixError, TypeError):
    """The operation needs a real matrix and got a complex one, or vice versa."""
    code = NDMAT_ERROR_COMPLEX_STATE


class ComplexUnsupportedError(MatrixError, TypeError):
    """The operation does not accept complex operands."""
    code = NDMAT_ERROR_COMPLEX_UNSUPPORTED


class MatrixNotImplementedError(MatrixError, NotImplementedError):
    """The requested operand combination is not implemented."""
    code = NDMAT_ERROR_NOT_IMPLEMENTED


class InvalidModeError(MatrixError, ValueError):
    """A string mode argument is not one of the accepted values."""
    code = NDMAT_ERROR_INVALID_MODE


class InvalidParameterError(MatrixError, ValueError):
    """A numeric algorithm parameter is out of its domain."""
    code = NDMAT_ERROR_INVALID_PARAMETER


class KernelTooLargeError(MatrixError, ValueError):
    """A filter kernel does not fit the signal it is applied to."""
    code = NDMAT_ERROR_KERNEL_TOO_LARGE


_ERROR_CLASSES: Dict[int, Type[MatrixError]] = {
    klass.code: klass
    for klass in (
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
}


def check_mode(mode: str, valid_modes, context: str) -> str:
    """
    Validate a string mode argument.

    Raises:
        InvalidModeError: If ``mode`` is not in ``valid_modes``.
    """
    if not isinstance(mode, str) or mode.lower() not in valid_modes:
        raise InvalidModeError(f"{context}: mode must be one of {tuple(valid_modes)}, got '{mode}'")
    return mode.lower()


__all__ = [
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
    "check_mode",
]
