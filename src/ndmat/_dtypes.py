"""
ndmat DTypes - Element Kind Definitions

Defines the element kinds a Matrix storage buffer may hold, their numpy
storage dtypes, their natural (image-convention) ranges and the rules
used to coerce arbitrary values into storage.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Tuple, Union

import numpy as np


# =============================================================================
# Data Type Enumeration
# =============================================================================

class DType(IntEnum):
    """
    Supported element kinds.

    ``UINT8C`` behaves like ``UINT8`` but clamps on assignment instead of
    wrapping. ``LOGICAL`` is stored as ``uint8`` and tagged so that type
    queries report a boolean matrix.
    """
    FLOAT64 = 0
    FLOAT32 = 1
    INT8 = 2
    UINT8 = 3
    UINT8C = 4
    INT16 = 5
    UINT16 = 6
    INT32 = 7
    UINT32 = 8
    LOGICAL = 9

    @property
    def numpy_dtype(self) -> np.dtype:
        """numpy dtype used for the storage buffer."""
        return np.dtype(_DTYPE_INFO[self]["numpy"])

    @property
    def type_name(self) -> str:
        """Name reported by ``Matrix.type_name``."""
        return _DTYPE_INFO[self]["name"]

    @property
    def itemsize(self) -> int:
        """Size in bytes of one element."""
        return self.numpy_dtype.itemsize

    @property
    def is_float(self) -> bool:
        return self in (DType.FLOAT64, DType.FLOAT32)

    @property
    def is_integer(self) -> bool:
        return not self.is_float and self is not DType.LOGICAL

    @property
    def is_logical(self) -> bool:
        return self is DType.LOGICAL

    @property
    def intmin(self) -> int:
        """Smallest representable value of an integer kind."""
        if not self.is_integer:
            raise ValueError(f"intmin is only defined for integer kinds, got '{self.type_name}'")
        return _DTYPE_INFO[self]["range"][0]

    @property
    def intmax(self) -> int:
        """Largest representable value of an integer kind."""
        if not self.is_integer:
            raise ValueError(f"intmax is only defined for integer kinds, got '{self.type_name}'")
        return _DTYPE_INFO[self]["range"][1]

    @property
    def natural_range(self) -> Tuple[float, float]:
        """Image-convention range: [0, 1] for float and logical, else [intmin, intmax]."""
        if self.is_integer:
            return _DTYPE_INFO[self]["range"]
        return (0, 1)

    @classmethod
    def from_name(cls, name: str) -> "DType":
        """Get DType from string name or alias."""
        name_lower = name.lower()
        for dtype, info in _DTYPE_INFO.items():
            if info["name"] == name_lower:
                return dtype
        aliases = {
            "float64": cls.FLOAT64,
            "float32": cls.FLOAT32,
            "float": cls.FLOAT64,
            "bool": cls.LOGICAL,
            "boolean": cls.LOGICAL,
            "uint8clamped": cls.UINT8C,
            "uint8-clamped": cls.UINT8C,
        }
        if name_lower in aliases:
            return aliases[name_lower]
        raise ValueError(f"Unknown dtype name: {name}")

    @classmethod
    def from_numpy(cls, dtype: Any) -> "DType":
        """Get DType from a numpy dtype, falling back to FLOAT64 for unsupported kinds."""
        dtype = np.dtype(dtype)
        if dtype == np.bool_:
            return cls.LOGICAL
        return _NUMPY_MAP.get(dtype, cls.FLOAT64)


# Type information table
_DTYPE_INFO: Dict[DType, Dict[str, Any]] = {
    DType.FLOAT64: {"numpy": np.float64, "name": "double", "range": (0, 1)},
    DType.FLOAT32: {"numpy": np.float32, "name": "single", "range": (0, 1)},
    DType.INT8: {"numpy": np.int8, "name": "int8", "range": (-128, 127)},
    DType.UINT8: {"numpy": np.uint8, "name": "uint8", "range": (0, 255)},
    DType.UINT8C: {"numpy": np.uint8, "name": "uint8c", "range": (0, 255)},
    DType.INT16: {"numpy": np.int16, "name": "int16", "range": (-32768, 32767)},
    DType.UINT16: {"numpy": np.uint16, "name": "uint16", "range": (0, 65535)},
    DType.INT32: {"numpy": np.int32, "name": "int32", "range": (-2147483648, 2147483647)},
    DType.UINT32: {"numpy": np.uint32, "name": "uint32", "range": (0, 4294967295)},
    DType.LOGICAL: {"numpy": np.uint8, "name": "logical", "range": (0, 1)},
}

_NUMPY_MAP: Dict[np.dtype, DType] = {
    np.dtype(np.float64): DType.FLOAT64,
    np.dtype(np.float32): DType.FLOAT32,
    np.dtype(np.int8): DType.INT8,
    np.dtype(np.uint8): DType.UINT8,
    np.dtype(np.int16): DType.INT16,
    np.dtype(np.uint16): DType.UINT16,
    np.dtype(np.int32): DType.INT32,
    np.dtype(np.uint32): DType.UINT32,
}


DTypeLike = Union[DType, str, np.dtype, type]


# =============================================================================
# Normalization and Coercion
# =============================================================================

def normalize_dtype(dtype: DTypeLike) -> DType:
    """
    Normalize a type specification to a DType.

    Accepts a DType, a type name ('double', 'uint8c', 'logical', ...) or
    anything numpy understands as a dtype.

    Raises:
        ValueError: If the type is not recognized.
    """
    if isinstance(dtype, DType):
        return dtype
    if isinstance(dtype, str):
        return DType.from_name(dtype)
    if dtype is None:
        raise ValueError("dtype cannot be None")
    try:
        np_dtype = np.dtype(dtype)
    except TypeError as e:
        raise ValueError(f"Unknown dtype: {dtype!r}") from e
    if np_dtype != np.bool_ and np_dtype not in _NUMPY_MAP:
        raise ValueError(f"Unsupported dtype: {np_dtype}")
    return DType.from_numpy(np_dtype)


def is_type_name(value: Any) -> bool:
    """Check whether ``value`` names an element kind."""
    if isinstance(value, DType):
        return True
    if not isinstance(value, str):
        return False
    try:
        DType.from_name(value)
    except ValueError:
        return False
    return True


def coerce(values: Any, dtype: DType) -> np.ndarray:
    """
    Convert values to the storage representation of ``dtype``.

    Float kinds cast directly. ``UINT8C`` rounds half to even and clamps
    to [0, 255]. Other integer kinds truncate toward zero and wrap modulo
    2**bits; NaN becomes 0. ``LOGICAL`` stores ``value != 0``.
    """
    arr = np.asarray(values)
    target = dtype.numpy_dtype

    if dtype.is_float:
        return arr.astype(target)

    if dtype is DType.LOGICAL:
        return (arr != 0).astype(target)

    if arr.dtype.kind in "biu":
        if dtype is DType.UINT8C:
            return np.clip(arr, 0, 255).astype(target)
        return arr.astype(np.int64).astype(target)

    arr = np.asarray(arr, dtype=np.float64)
    if dtype is DType.UINT8C:
        out = np.clip(np.rint(np.nan_to_num(arr, nan=0.0)), 0, 255)
        return out.astype(target)

    out = np.trunc(arr)
    out = np.where(np.isfinite(out), out, 0.0)
    span = float(2 ** (8 * dtype.itemsize))
    out = np.mod(out, span)
    if dtype.intmin < 0:
        out = np.where(out > dtype.intmax, out - span, out)
    return out.astype(target)


__all__ = [
    "DType",
    "DTypeLike",
    "normalize_dtype",
    "is_type_name",
    "coerce",
]
