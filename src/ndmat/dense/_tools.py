"""
Argument checking helpers shared by the dense modules.

Sizes follow the column-major convention ``[rows, cols, ...]``.
"""

from __future__ import annotations

import math
import numbers
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..core.error import InvalidRangeError, InvalidShapeError

SizeLike = Union[int, Sequence[int], np.ndarray]


# =============================================================================
# Scalars
# =============================================================================

def is_integer(value, minimum: Optional[int] = None) -> bool:
    """True for integral numbers (``2`` and ``2.0``), excluding bools."""
    if isinstance(value, (bool, np.bool_)):
        return False
    if isinstance(value, numbers.Integral):
        ok = True
    elif isinstance(value, numbers.Real):
        ok = float(value).is_integer()
    else:
        return False
    return ok and (minimum is None or value >= minimum)


def is_number(value) -> bool:
    return isinstance(value, numbers.Number) and not isinstance(value, (bool, np.bool_))


def round_half_away(x: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def is_array_like(value) -> bool:
    return isinstance(value, (list, tuple, np.ndarray))


def is_boolean_array(value) -> bool:
    """True for non-empty sequences made only of bools, or bool ndarrays."""
    if isinstance(value, np.ndarray):
        return value.dtype == np.bool_
    if not isinstance(value, (list, tuple)) or len(value) == 0:
        return False
    return all(isinstance(v, (bool, np.bool_)) for v in value)


# =============================================================================
# Sizes
# =============================================================================

def check_size(size: SizeLike, unidim: str = "column") -> List[int]:
    """
    Validate and normalize a size vector.

    A scalar ``n`` (or a one-entry size) expands according to ``unidim``:
    ``'column'`` -> ``[n, 1]``, ``'row'`` -> ``[1, n]``, ``'square'`` ->
    ``[n, n]``. Trailing unit dimensions are dropped while more than two
    dimensions remain.

    Raises:
        InvalidShapeError: If an entry is negative or not an integer.
    """
    if isinstance(size, np.ndarray):
        size = size.ravel().tolist()
    elif not is_array_like(size):
        size = [size]
    else:
        size = list(size)

    if len(size) == 0:
        raise InvalidShapeError("Size must have at least one entry")

    for s in size:
        if not is_integer(s, 0):
            raise InvalidShapeError(f"Size entries must be non-negative integers, got {s!r}")
    size = [int(s) for s in size]

    if len(size) == 1:
        n = size[0]
        if unidim == "square":
            size = [n, n]
        elif unidim == "row":
            size = [1, n]
        else:
            size = [n, 1]

    while len(size) > 2 and size[-1] == 1:
        size.pop()
    return size


def check_size_equals(
    size_a: Sequence[int],
    size_b: Sequence[int],
    ignore_trailing_dims: bool = True,
) -> bool:
    """
    Compare two sizes.

    Common dimensions must be equal. Extra dimensions must be 1 when
    ``ignore_trailing_dims`` is True, and are forbidden otherwise.
    """
    n = min(len(size_a), len(size_b))
    if list(size_a[:n]) != list(size_b[:n]):
        return False
    extra = list(size_a[n:]) + list(size_b[n:])
    if not extra:
        return True
    return ignore_trailing_dims and all(s == 1 for s in extra)


def numel(size: Sequence[int]) -> int:
    return int(np.prod(size, dtype=np.int64)) if len(size) else 0


# =============================================================================
# Colon Selections
# =============================================================================

def check_colon(sel: Union[int, Sequence[int]], length: int) -> Tuple[int, int, int]:
    """
    Resolve a Matlab-style colon selection against a dimension length.

    ``sel`` is ``a``, ``[a]``, ``[a, b]`` or ``[a, step, b]`` with inclusive
    bounds. Negative bounds count from the end (``-1`` is the last
    element). Without an explicit step, it is ``+1`` when ``a <= b`` and
    ``-1`` otherwise.

    Returns:
        ``(first, step, last)`` with both bounds in ``[0, length)``.

    Raises:
        InvalidRangeError: If a bound falls outside the dimension or the
            step is zero or points away from ``last``.
    """
    if not is_array_like(sel):
        sel = [sel]
    sel = list(sel)
    for v in sel:
        if not is_integer(v):
            raise InvalidRangeError(f"Selection values must be integers, got {v!r}")
    sel = [int(v) for v in sel]

    if len(sel) == 1:
        first, step, last = sel[0], None, sel[0]
    elif len(sel) == 2:
        first, step, last = sel[0], None, sel[1]
    elif len(sel) == 3:
        first, step, last = sel
    else:
        raise InvalidRangeError(f"Selection must have 1 to 3 values, got {len(sel)}")

    if first < 0:
        first += length
    if last < 0:
        last += length
    if not (0 <= first < length) or not (0 <= last < length):
        raise InvalidRangeError(
            f"Selection {sel} exceeds dimension of length {length}"
        )

    if step is None:
        step = 1 if first <= last else -1
    if step == 0 or (last - first) * step < 0:
        raise InvalidRangeError(f"Invalid step {step} for selection {sel}")
    return first, step, last


def colon_length(first: int, step: int, last: int) -> int:
    return abs(last - first) // abs(step) + 1


__all__ = [
    "is_integer",
    "is_number",
    "is_array_like",
    "is_boolean_array",
    "check_size",
    "check_size_equals",
    "check_colon",
    "colon_length",
    "numel",
    "round_half_away",
]
