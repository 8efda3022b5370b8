"""Strided Views over Flat Storage.

A View maps logical N-d coordinates to linear offsets into a flat,
column-major storage buffer. It never touches the data itself: slicing,
permuting, flipping or index-selecting a View only produces a new View.

Design Philosophy:
    Each dimension is one of two shapes, and every consumer handles both:

    - Regular: ``{first, step, length}``; coordinate ``c`` maps to
      ``first + c * step``.
    - Indexed: an explicit tuple of offsets; coordinate ``c`` maps to
      ``offsets[c]``. Produced by index or boolean selection.

    The offset of a full coordinate tuple is the sum of the per-dimension
    offsets. Selecting on a Regular dimension keeps it Regular whenever the
    result is an arithmetic progression.

Example:
    >>> v = View([3, 4])            # canonical column-major view
    >>> v.get_index([1, 2])         # 1 + 2 * 3
    7
    >>> v.permute([1, 0]).size
    [4, 3]
    >>> list(v.select_dimension(0, [-1, 0]).dim_offsets(0))
    [2, 1, 0]
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..core.error import (
    InvalidPermutationError,
    InvalidRangeError,
    OutOfBoundsError,
    ShapeMismatchError,
)
from ._tools import (
    check_colon,
    colon_length,
    is_array_like,
    is_boolean_array,
    is_integer,
)

__all__ = [
    'Regular',
    'Indexed',
    'Dimension',
    'View',
    'ViewIterator',
]


# =============================================================================
# Dimensions
# =============================================================================

@dataclass(frozen=True)
class Regular:
    """Strided dimension: offset of coordinate ``c`` is ``first + c * step``."""
    first: int
    step: int
    length: int

    def offsets(self) -> np.ndarray:
        return self.first + np.arange(self.length, dtype=np.int64) * self.step

    def offset(self, c: int) -> int:
        return self.first + c * self.step

    def take(self, first: int, step: int, length: int) -> "Regular":
        """Sub-progression starting at coordinate ``first``."""
        return Regular(self.first + first * self.step, self.step * step, length)


@dataclass(frozen=True)
class Indexed:
    """Gathered dimension: offset of coordinate ``c`` is ``indices[c]``."""
    indices: Tuple[int, ...]

    @property
    def length(self) -> int:
        return len(self.indices)

    def offsets(self) -> np.ndarray:
        return np.asarray(self.indices, dtype=np.int64)

    def offset(self, c: int) -> int:
        return self.indices[c]

    def take(self, first: int, step: int, length: int) -> "Indexed":
        stop = first + step * length
        return Indexed(self.indices[first:stop if stop >= 0 else None:step])


Dimension = Union[Regular, Indexed]

_SINGLETON = Regular(0, 1, 1)


# =============================================================================
# View
# =============================================================================

class View:
    """Mapping from N-d coordinates to linear storage offsets.

    Views are immutable: every transform returns a new View.

    Attributes:
        dims: Tuple of Regular/Indexed dimensions.
        size: Length of each dimension.
        ndims: Number of dimensions.
        numel: Number of logical elements.
    """

    __slots__ = ('_dims',)

    def __init__(self, size: Sequence[int]):
        """Build the canonical view of ``size``.

        ``first`` is 0 and ``step`` is the product of the previous lengths.

        Args:
            size: Non-negative dimension lengths (already validated).
        """
        dims = []
        step = 1
        for length in size:
            dims.append(Regular(0, step, int(length)))
            step *= int(length)
        self._dims: Tuple[Dimension, ...] = tuple(dims)

    @classmethod
    def _from_dims(cls, dims: Sequence[Dimension]) -> "View":
        view = cls.__new__(cls)
        view._dims = tuple(dims)
        return view

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def dims(self) -> Tuple[Dimension, ...]:
        return self._dims

    @property
    def ndims(self) -> int:
        return len(self._dims)

    @property
    def size(self) -> List[int]:
        return [d.length for d in self._dims]

    @property
    def numel(self) -> int:
        n = 1
        for d in self._dims:
            n *= d.length
        return n

    def get_size(self, dim: Optional[int] = None) -> Union[int, List[int]]:
        """Length of ``dim`` (1 beyond ``ndims``), or the full size."""
        if dim is None:
            return self.size
        return self._dim(dim).length

    def is_regular(self, dim: int) -> bool:
        return isinstance(self._dim(dim), Regular)

    def get_first(self, dim: int) -> int:
        return self._dim(dim).offset(0)

    def get_step(self, dim: int) -> Optional[int]:
        """Step of a Regular dimension, None for an Indexed one."""
        d = self._dim(dim)
        return d.step if isinstance(d, Regular) else None

    def is_canonical(self) -> bool:
        """True when the view enumerates storage ``0..numel-1`` in order."""
        step = 1
        for d in self._dims:
            if not isinstance(d, Regular) or d.first != 0:
                return False
            if d.length > 1 and d.step != step:
                return False
            step *= d.length
        return True

    def _dim(self, dim: int) -> Dimension:
        if dim < 0:
            raise OutOfBoundsError(f"Dimension index must be non-negative, got {dim}")
        if dim >= len(self._dims):
            return _SINGLETON
        return self._dims[dim]

    def _padded(self, ndims: int) -> List[Dimension]:
        dims = list(self._dims)
        while len(dims) < ndims:
            dims.append(_SINGLETON)
        return dims

    # -------------------------------------------------------------------------
    # Offsets
    # -------------------------------------------------------------------------

    def get_index(self, coords: Sequence[int]) -> int:
        """Linear storage offset of a coordinate tuple.

        Coordinates beyond ``ndims`` must be 0.

        Raises:
            OutOfBoundsError: If a coordinate is outside ``[0, length)``.
        """
        index = 0
        for i, c in enumerate(coords):
            d = self._dim(i)
            if not is_integer(c) or not (0 <= c < d.length):
                raise OutOfBoundsError(
                    f"Coordinate {c!r} out of bounds for dimension {i} of length {d.length}"
                )
            index += d.offset(int(c))
        if len(coords) < self.ndims:
            for d in self._dims[len(coords):]:
                if d.length == 0:
                    raise OutOfBoundsError("Cannot index an empty dimension")
                index += d.offset(0)
        return index

    def dim_offsets(self, dim: int) -> np.ndarray:
        """Offsets contributed by each coordinate of one dimension."""
        return self._dim(dim).offsets()

    def offsets(self, start: int = 0, stop: Optional[int] = None) -> np.ndarray:
        """Offsets of every coordinate over dimensions ``[start, stop)``.

        Ordered column-major (dimension ``start`` varies fastest). Dimensions
        outside the range are held at coordinate 0 and contribute nothing.
        """
        stop = self.ndims if stop is None else stop
        acc = np.zeros(1, dtype=np.int64)
        for d in self._dims[start:stop]:
            acc = np.add.outer(d.offsets(), acc).ravel()
        return acc

    def get_iterator(self, start_dim: int = 0) -> "ViewIterator":
        """Lazy sequence of offsets over the dimensions ``>= start_dim``."""
        return ViewIterator(self, start_dim)

    def extract_from(self, data: np.ndarray) -> np.ndarray:
        """Gather the viewed elements of ``data`` in view order (copy)."""
        return np.asarray(data)[self.offsets()]

    def extract_to(self, values: np.ndarray, data: np.ndarray) -> None:
        """Scatter ``values`` (in view order) into ``data`` at the viewed offsets."""
        data[self.offsets()] = values

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def select_dimension(self, dim: int, sel) -> "View":
        """Restrict ``dim`` to a colon selection ``a``, ``[a, b]`` or ``[a, s, b]``.

        Raises:
            InvalidRangeError: If the selection exceeds the dimension.
        """
        dims = self._padded(dim + 1)
        d = dims[dim]
        first, step, last = check_colon(sel, d.length)
        dims[dim] = d.take(first, step, colon_length(first, step, last))
        return View._from_dims(dims)

    def select_indices_dimension(self, dim: int, indices) -> "View":
        """Replace ``dim`` by an explicit list of coordinates (gather).

        Raises:
            OutOfBoundsError: If an index is outside ``[0, length)``.
        """
        dims = self._padded(dim + 1)
        d = dims[dim]
        idx = np.asarray(indices).ravel()
        if idx.size and not np.issubdtype(idx.dtype, np.integer):
            if not np.all(np.mod(idx, 1) == 0):
                raise OutOfBoundsError("Indices must be integers")
            idx = idx.astype(np.int64)
        idx = idx.astype(np.int64)
        if idx.size and (idx.min() < 0 or idx.max() >= d.length):
            raise OutOfBoundsError(
                f"Indices must lie in [0, {d.length - 1}] for dimension {dim}"
            )
        dims[dim] = Indexed(tuple(int(o) for o in d.offsets()[idx]))
        return View._from_dims(dims)

    def select_boolean_dimension(self, dim: int, mask) -> "View":
        """Keep the coordinates of ``dim`` where ``mask`` is true.

        Raises:
            ShapeMismatchError: If ``len(mask)`` differs from the dimension length.
        """
        mask = np.asarray(mask, dtype=bool).ravel()
        length = self._dim(dim).length
        if mask.size != length:
            raise ShapeMismatchError(
                f"Boolean selection of length {mask.size} for dimension {dim} of length {length}"
            )
        return self.select_indices_dimension(dim, np.flatnonzero(mask))

    def select_slice_dimension(self, dim: int, key: slice) -> "View":
        """Python slice (exclusive stop) on one dimension."""
        dims = self._padded(dim + 1)
        d = dims[dim]
        start, stop, step = key.indices(d.length)
        length = len(range(start, stop, step))
        if length == 0:
            dims[dim] = Regular(d.offset(0) if d.length else 0, 1, 0)
        else:
            dims[dim] = d.take(start, step, length)
        return View._from_dims(dims)

    def select(self, *selectors) -> "View":
        """Apply one selector per dimension, starting at dimension 0.

        Each selector may be an int, a colon list (``[a]``, ``[a, b]``,
        ``[a, s, b]``), ``[]`` for the whole dimension, ``[[i, j, ...]]`` for
        explicit indices, a boolean list or array, an integer ndarray or a
        slice. Unlisted dimensions are kept whole.
        """
        view = self
        for dim, sel in enumerate(selectors):
            view = view._select_one(dim, sel)
        return view

    def _select_one(self, dim: int, sel) -> "View":
        if isinstance(sel, slice):
            return self.select_slice_dimension(dim, sel)
        if isinstance(sel, np.ndarray):
            if sel.dtype == np.bool_:
                return self.select_boolean_dimension(dim, sel)
            return self.select_indices_dimension(dim, sel)
        if is_array_like(sel):
            if len(sel) == 0:
                return self
            if is_array_like(sel[0]):
                return self.select_indices_dimension(dim, sel[0])
            if is_boolean_array(sel):
                return self.select_boolean_dimension(dim, sel)
            return self.select_dimension(dim, sel)
        if is_integer(sel):
            return self.select_dimension(dim, sel)
        raise InvalidRangeError(f"Invalid selection for dimension {dim}: {sel!r}")

    # -------------------------------------------------------------------------
    # Structural Transforms
    # -------------------------------------------------------------------------

    def permute(self, order: Sequence[int]) -> "View":
        """Reorder dimensions: new dimension ``i`` is old dimension ``order[i]``.

        Raises:
            InvalidPermutationError: If ``order`` is not a permutation of
                ``range(len(order))`` or is shorter than ``ndims``.
        """
        order = list(order)
        n = len(order)
        if n < self.ndims or sorted(order) != list(range(n)) or not all(is_integer(o) for o in order):
            raise InvalidPermutationError(f"Dimension permutation {order} is invalid")
        dims = self._padded(n)
        return View._from_dims([dims[int(o)] for o in order])

    def ipermute(self, order: Sequence[int]) -> "View":
        """Inverse of ``permute(order)``."""
        order = list(order)
        if sorted(order) != list(range(len(order))):
            raise InvalidPermutationError(f"Dimension permutation {order} is invalid")
        inverse = [0] * len(order)
        for i, o in enumerate(order):
            inverse[o] = i
        return self.permute(inverse)

    def swap_dimensions(self, i: int, j: int) -> "View":
        dims = self._padded(max(i, j) + 1)
        dims[i], dims[j] = dims[j], dims[i]
        return View._from_dims(dims)

    def shift_dimension(self, n: Optional[int] = None) -> Tuple["View", int]:
        """Matlab ``shiftdim``.

        With ``n`` None, leading singleton dimensions are removed and their
        count returned. A positive ``n`` rotates dimensions left by ``n``; a
        negative ``n`` prepends ``-n`` singleton dimensions.
        """
        dims = list(self._dims)
        if n is None:
            n = 0
            while n < len(dims) - 1 and dims[n].length == 1:
                n += 1
            dims = dims[n:]
        elif n > 0:
            n %= max(len(dims), 1)
            dims = dims[n:] + dims[:n]
        elif n < 0:
            dims = [_SINGLETON] * (-n) + dims
        while len(dims) < 2:
            dims.append(_SINGLETON)
        return View._from_dims(dims), n

    def circshift(self, k: Union[int, Sequence[int]], dim: Optional[int] = None) -> "View":
        """Circularly shift coordinates; element ``c`` moves to ``c + k``.

        ``k`` may be a list giving one shift per leading dimension.
        """
        if is_array_like(k) and dim is None:
            if len(k) > self.ndims:
                raise InvalidRangeError("More shifts than dimensions")
            view = self
            for d, kd in enumerate(k):
                view = view._circshift_one(int(kd), d)
            return view
        if is_integer(k) and (dim is None or is_integer(dim, 0)):
            return self._circshift_one(int(k), 0 if dim is None else int(dim))
        raise InvalidRangeError(f"Invalid circshift arguments: {k!r}, {dim!r}")

    def _circshift_one(self, k: int, dim: int) -> "View":
        length = self._dim(dim).length
        if length == 0:
            return self
        sel = np.roll(np.arange(length), k)
        return self.select_indices_dimension(dim, sel)

    def flipdim(self, dim: int) -> "View":
        if self._dim(dim).length == 0:
            return self
        return self.select_dimension(dim, [-1, 0])

    def fliplr(self) -> "View":
        return self.flipdim(1)

    def flipud(self) -> "View":
        return self.flipdim(0)

    def rot90(self, k: int = 1) -> "View":
        """Rotate the first two dimensions counterclockwise ``k`` times."""
        if not is_integer(k):
            raise InvalidRangeError(f"rot90 argument must be an integer, got {k!r}")
        k = int(k) % 4
        if k == 1:
            return self.swap_dimensions(0, 1).flipud()
        if k == 2:
            return self.flipud().fliplr()
        if k == 3:
            return self.swap_dimensions(0, 1).fliplr()
        return self

    # -------------------------------------------------------------------------
    # Representation
    # -------------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        return isinstance(other, View) and self._dims == other._dims

    def __hash__(self) -> int:
        return hash(self._dims)

    def __repr__(self) -> str:
        parts = []
        for d in self._dims:
            if isinstance(d, Regular):
                parts.append(f"{d.first}:{d.step}:{d.length}")
            else:
                parts.append(f"[{d.length} idx]")
        return f"View({', '.join(parts)})"


# =============================================================================
# Iteration
# =============================================================================

class ViewIterator:
    """Restartable sequence of fiber start offsets.

    Dimensions below ``start_dim`` are held at coordinate 0; dimensions at
    or above it vary in column-major order. Adding ``view.dim_offsets(0)``
    (or the offsets of any held dimension) to each yielded value walks a
    fiber.

    Example:
        >>> v = View([2, 3])
        >>> list(v.get_iterator(1))
        [0, 2, 4]
    """

    __slots__ = ('_view', '_start')

    def __init__(self, view: View, start_dim: int = 0):
        self._view = view
        self._start = start_dim

    def __iter__(self) -> Iterator[int]:
        dims = self._view.dims[self._start:]
        columns = [d.offsets() for d in reversed(dims)]
        for combo in itertools.product(*columns):
            yield int(sum(combo))

    def __len__(self) -> int:
        n = 1
        for d in self._view.dims[self._start:]:
            n *= d.length
        return n

    def offsets(self) -> np.ndarray:
        """All yielded offsets at once."""
        return self._view.offsets(self._start)
