"""Dense N-d Matrix.

This module provides Matrix, a column-major N-dimensional array that
couples a View with a flat numpy storage buffer:

- Real storage holds ``N`` elements
- Complex storage holds ``2N`` elements: the real half then the imaginary half
- Logical matrices store 0/1 in ``uint8`` and report type ``'logical'``

Design Philosophy:
    A Matrix exclusively owns its storage. Every structural operation
    (selection, permutation, reshaping into a new matrix, reduction,
    filtering) materializes a fresh Matrix; only the explicit in-place
    operations (``+=``, ``reshape``, ``set``, ``sort``, ``to_complex``)
    mutate the receiver.

Example:
    >>> m = Matrix([2, 3], [1, 2, 3, 4, 5, 6])   # column-major data
    >>> m.value([1, 2])
    6.0
    >>> m.get(0).get_data()                        # first row
    array([1., 3., 5.])
    >>> (m + 1).sum().get_data_scalar()
    27.0
"""

from __future__ import annotations

import logging
import numbers
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np

from .._dtypes import DType, DTypeLike, coerce, is_type_name, normalize_dtype
from ..core.config import Config, resolve_config
from ..core.error import (
    ComplexStateError,
    OutOfBoundsError,
    ReshapeError,
    ShapeMismatchError,
)
from ._tools import check_size, check_size_equals, is_integer, numel
from ._view import View

logger = logging.getLogger("ndmat.dense")

__all__ = ['Matrix', 'to_matrix']


class Matrix:
    """Column-major N-d array over real or complex typed storage.

    Attributes:
        size: Dimension lengths, trailing unit dimensions dropped past two.
        dtype: Element kind (DType).
        config: Configuration the matrix was built with.

    Example:
        >>> Matrix(3)                       # 3x1 zeros, default type
        >>> Matrix([2, 2], 'uint8')         # 2x2 zeros of uint8
        >>> Matrix([2, 2], [1, 2, 3, 4])    # literal data
        >>> Matrix([1, 2], [1, 2, 3, 4], is_complex=True)   # 1+3i, 2+4i
    """

    __slots__ = ('_size', '_data', '_dtype', '_is_complex', '_config')

    # Defer ndarray <op> Matrix to the Matrix reflected operators
    __array_ufunc__ = None

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(
        self,
        size,
        data: Any = None,
        is_complex: bool = False,
        is_boolean: bool = False,
        dtype: Optional[DTypeLike] = None,
        config: Optional[Config] = None,
    ):
        """Create a matrix.

        Args:
            size: Size vector, or a single length ``n`` for an ``n x 1`` column.
            data: Element values in column-major order, or a type name. For a
                complex matrix the values hold the real part then the
                imaginary part; a numpy complex array is split automatically.
            is_complex: Allocate (or interpret ``data`` as) complex storage.
            is_boolean: Tag the matrix as logical.
            dtype: Element kind; defaults to the kind of a numpy ``data``
                array, else to ``config.default_type``.
            config: Configuration; the global one when omitted.

        Raises:
            InvalidShapeError: If ``size`` is invalid.
            ShapeMismatchError: If the data length is not ``N`` (or ``2N``).
        """
        self._config = resolve_config(config)
        self._size = check_size(size)
        n = numel(self._size)

        if is_type_name(data):
            dtype, data = data, None

        if is_boolean:
            dtype = DType.LOGICAL
        elif dtype is not None:
            dtype = normalize_dtype(dtype)
        elif isinstance(data, np.ndarray) and not np.iscomplexobj(data):
            dtype = DType.from_numpy(data.dtype)
        else:
            dtype = self._config.default_type
        self._dtype = dtype

        if data is None:
            self._is_complex = bool(is_complex)
            length = 2 * n if is_complex else n
            self._data = np.zeros(length, dtype=dtype.numpy_dtype)
            return

        arr = np.asarray(data)
        if arr.ndim > 1:
            arr = arr.ravel(order='F')
        else:
            arr = arr.ravel()

        if np.iscomplexobj(arr):
            if arr.size != n:
                raise ShapeMismatchError(
                    f"Data length {arr.size} does not match size {self._size}"
                )
            arr = np.concatenate([arr.real, arr.imag])
            is_complex = True

        expected = 2 * n if is_complex else n
        if arr.size != expected:
            raise ShapeMismatchError(
                f"Data length {arr.size} does not match size {self._size}"
                + (" (complex: 2N expected)" if is_complex else "")
            )
        self._is_complex = bool(is_complex)
        self._data = coerce(arr, dtype)
        if self._data is arr or np.shares_memory(self._data, arr):
            self._data = self._data.copy()

    @classmethod
    def _from_parts(
        cls,
        size: Sequence[int],
        re: np.ndarray,
        im: Optional[np.ndarray],
        dtype: DType,
        config: Optional[Config] = None,
    ) -> "Matrix":
        """Build a matrix from real/imaginary value arrays (coerced, copied)."""
        mat = cls.__new__(cls)
        mat._config = resolve_config(config)
        mat._size = check_size(list(size))
        mat._dtype = dtype
        re = coerce(np.asarray(re).ravel(), dtype)
        if im is None:
            mat._is_complex = False
            mat._data = re.copy() if re.base is not None else re
        else:
            mat._is_complex = True
            mat._data = np.concatenate([re, coerce(np.asarray(im).ravel(), dtype)])
        if mat._data.size != (2 if im is not None else 1) * numel(mat._size):
            raise ShapeMismatchError(
                f"Data length {mat._data.size} does not match size {mat._size}"
            )
        return mat

    @classmethod
    def from_array(
        cls,
        array: Any,
        dtype: Optional[DTypeLike] = None,
        config: Optional[Config] = None,
    ) -> "Matrix":
        """Create a matrix with the shape and values of a numpy array.

        A 0-d array becomes ``1x1`` and a 1-d array becomes a column.
        Boolean arrays become logical matrices.

        Example:
            >>> Matrix.from_array(np.arange(6).reshape(2, 3)).size
            [2, 3]
        """
        arr = np.asarray(array)
        if arr.ndim == 0:
            size = [1, 1]
        elif arr.ndim == 1:
            size = [arr.shape[0], 1]
        else:
            size = list(arr.shape)
        flat = arr.ravel(order='F')
        if dtype is None and arr.dtype == np.bool_:
            dtype = DType.LOGICAL
        if dtype is None and np.iscomplexobj(arr):
            dtype = resolve_config(config).default_type
        return cls(size, flat, dtype=dtype, config=config)

    @classmethod
    def from_pixels(cls, data: Any, width: int, height: int, alpha: bool = False) -> "Matrix":
        """Create an image from a row-major RGBA pixel buffer (see ``_image``)."""
        from ._image import from_pixels
        return from_pixels(data, width, height, alpha)

    def _new(
        self,
        size: Sequence[int],
        re: np.ndarray,
        im: Optional[np.ndarray] = None,
        dtype: Optional[DType] = None,
    ) -> "Matrix":
        """Derived matrix sharing this matrix's configuration."""
        return Matrix._from_parts(size, re, im, dtype or self._dtype, self._config)

    def _set_storage(self, re: np.ndarray, im: Optional[np.ndarray], dtype: Optional[DType] = None) -> None:
        """Replace the storage in place (same number of elements)."""
        if dtype is not None:
            self._dtype = dtype
        re = coerce(np.asarray(re).ravel(), self._dtype)
        if im is None:
            self._data = re.copy() if re.base is not None else re
            self._is_complex = False
        else:
            self._data = np.concatenate([re, coerce(np.asarray(im).ravel(), self._dtype)])
            self._is_complex = True

    # =========================================================================
    # Shape Queries
    # =========================================================================

    @property
    def size(self) -> List[int]:
        return list(self._size)

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(self._size)

    @property
    def config(self) -> Config:
        return self._config

    def get_size(self, dim: Optional[int] = None) -> Union[int, List[int]]:
        """Size vector, or the length of ``dim`` (1 beyond ``ndims``)."""
        if dim is None:
            return list(self._size)
        if not is_integer(dim, 0):
            raise OutOfBoundsError(f"Dimension must be a non-negative integer, got {dim!r}")
        return self._size[dim] if dim < len(self._size) else 1

    def ndims(self) -> int:
        return len(self._size)

    def numel(self) -> int:
        return numel(self._size)

    def get_length(self) -> int:
        """Length of the largest dimension (0 if empty)."""
        return 0 if self.numel() == 0 else max(self._size)

    def get_view(self) -> View:
        """Fresh canonical view of this matrix's size."""
        return View(self._size)

    def is_scalar(self) -> bool:
        return self.numel() == 1

    def is_empty(self) -> bool:
        return self.numel() == 0

    def is_row(self) -> bool:
        return len(self._size) == 2 and self._size[0] == 1

    def is_column(self) -> bool:
        return len(self._size) == 2 and self._size[1] == 1

    def is_vector(self) -> bool:
        return len(self._size) == 2 and (self._size[0] == 1 or self._size[1] == 1)

    def is_matrix(self) -> bool:
        return len(self._size) <= 2

    def is_square(self) -> bool:
        return len(self._size) == 2 and self._size[0] == self._size[1]

    # =========================================================================
    # Type Queries
    # =========================================================================

    @property
    def dtype(self) -> DType:
        return self._dtype

    @property
    def type_name(self) -> str:
        """Element kind name ('double', 'uint8c', 'logical', ...)."""
        return self._dtype.type_name

    def get_data_type(self) -> str:
        return self._dtype.type_name

    def is_complex(self) -> bool:
        return self._is_complex

    def is_real(self) -> bool:
        """True when the matrix has no non-zero imaginary value.

        A complex matrix whose imaginary half is all zero is demoted to real
        storage as a side effect.
        """
        if not self._is_complex:
            return True
        n = self.numel()
        if np.any(self._data[n:] != 0):
            return False
        logger.debug("Dropping all-zero imaginary part of %s", self)
        self._data = self._data[:n].copy()
        self._is_complex = False
        return True

    def is_integer(self) -> bool:
        return self._dtype.is_integer

    def is_float(self) -> bool:
        return self._dtype.is_float

    def is_logical(self) -> bool:
        return self._dtype.is_logical

    # =========================================================================
    # Data Access
    # =========================================================================

    def get_data(self) -> np.ndarray:
        """Storage buffer in storage order (real half then imaginary half)."""
        return self._data

    def get_real_data(self) -> np.ndarray:
        """Real half of the storage (a view into it)."""
        return self._data[:self.numel()]

    def get_imag_data(self) -> np.ndarray:
        """Imaginary half of the storage (a view into it).

        Raises:
            ComplexStateError: If the matrix is real.
        """
        if not self._is_complex:
            raise ComplexStateError("get_imag_data: matrix is not complex")
        return self._data[self.numel():]

    def _parts(self) -> Tuple[np.ndarray, Optional[np.ndarray]]:
        n = self.numel()
        if self._is_complex:
            return self._data[:n], self._data[n:]
        return self._data, None

    def _parts_float(self) -> Tuple[np.ndarray, Optional[np.ndarray]]:
        """Real and imaginary halves as float64 copies."""
        re, im = self._parts()
        re = re.astype(np.float64)
        return re, (im.astype(np.float64) if im is not None else None)

    def _scalar(self, index: int):
        re, im = self._parts()
        if self._dtype.is_logical:
            return bool(re[index])
        if im is not None:
            return complex(re[index], im[index])
        return re[index].item()

    def get_data_scalar(self):
        """The single element of a 1x1 matrix as a Python scalar.

        Raises:
            ShapeMismatchError: If the matrix is not scalar.
        """
        if not self.is_scalar():
            raise ShapeMismatchError(f"Matrix of size {self._size} is not scalar")
        return self._scalar(0)

    def value(self, index: Union[int, Sequence[int]], value: Any = None):
        """Get or set one element.

        Args:
            index: Linear (column-major) index, or a coordinate list.
            value: New value. When given, the element is written and the
                matrix returned.

        Raises:
            OutOfBoundsError: If the index is out of range.
        """
        if isinstance(index, (list, tuple, np.ndarray)):
            offset = self.get_view().get_index(list(index))
        else:
            if not is_integer(index) or not (0 <= index < self.numel()):
                raise OutOfBoundsError(
                    f"Index {index!r} out of bounds for {self.numel()} elements"
                )
            offset = int(index)

        if value is None:
            return self._scalar(offset)

        if isinstance(value, Matrix):
            value = value.get_data_scalar()
        n = self.numel()
        if isinstance(value, complex) and value.imag != 0:
            if not self._is_complex:
                self.to_complex()
            self._data[offset] = coerce(value.real, self._dtype)
            self._data[n + offset] = coerce(value.imag, self._dtype)
        else:
            self._data[offset] = coerce(getattr(value, 'real', value), self._dtype)
            if self._is_complex:
                self._data[n + offset] = 0
        return self

    def to_array(self) -> np.ndarray:
        """numpy array of shape ``size`` (complex dtype when complex, bool when logical)."""
        re, im = self._parts()
        if im is not None:
            flat = re.astype(np.float64) + 1j * im.astype(np.float64)
        elif self._dtype.is_logical:
            flat = re != 0
        else:
            flat = re.copy()
        return flat.reshape(self._size, order='F')

    def __array__(self, dtype=None, copy=None):
        arr = self.to_array()
        return arr if dtype is None else arr.astype(dtype)

    def tolist(self) -> list:
        """Flat list of values in column-major order."""
        re, im = self._parts()
        if im is not None:
            return [complex(r, i) for r, i in zip(re.tolist(), im.tolist())]
        return re.tolist()

    # =========================================================================
    # Structure
    # =========================================================================

    def reshape(self, *size) -> "Matrix":
        """Change the size in place (column-major order is preserved).

        Raises:
            ReshapeError: If the element count differs.
        """
        if len(size) == 1:
            size = size[0]
        new_size = check_size(size, 'column')
        if numel(new_size) != self.numel():
            raise ReshapeError(
                f"Cannot reshape {self._size} ({self.numel()} elements) into {new_size}"
            )
        self._size = new_size
        return self

    def _clone(self) -> "Matrix":
        """Exact copy, complex state preserved."""
        mat = Matrix.__new__(Matrix)
        mat._config = self._config
        mat._size = list(self._size)
        mat._dtype = self._dtype
        mat._is_complex = self._is_complex
        mat._data = self._data.copy()
        return mat

    def get_copy(self) -> "Matrix":
        """Deep copy materialized through the canonical view.

        The copy is real when every imaginary value is zero.
        """
        view = self.get_view()
        re, im = self._parts()
        re = view.extract_from(re)
        if im is not None:
            im = view.extract_from(im)
            if not np.any(im != 0):
                im = None
        return self._new(view.size, re, im)

    copy = get_copy

    def astype(self, dtype: DTypeLike) -> "Matrix":
        """Copy with values converted (not rescaled) to another element kind."""
        re, im = self._parts()
        return self._new(self._size, re, im, normalize_dtype(dtype))

    def to_complex(self, imag: Any = None) -> "Matrix":
        """Turn the matrix complex in place.

        Args:
            imag: Imaginary part (Matrix or array-like of the same size);
                zeros when omitted.

        Raises:
            ComplexStateError: If the matrix is already complex.
            ShapeMismatchError: If ``imag`` has another size.
        """
        if self._is_complex:
            raise ComplexStateError("to_complex: matrix is already complex")
        n = self.numel()
        if imag is None:
            im = np.zeros(n, dtype=self._dtype.numpy_dtype)
        else:
            imag = to_matrix(imag, self._config)
            if not imag.is_real() or not check_size_equals(
                self._size, imag.size, self._config.ignore_trailing_dims
            ):
                raise ShapeMismatchError(
                    f"Imaginary part of size {imag.size} does not match {self._size}"
                )
            im = coerce(imag.get_real_data(), self._dtype)
        self._data = np.concatenate([self._data, im])
        self._is_complex = True
        return self

    def real(self) -> "Matrix":
        """Real part as a new real matrix."""
        re, _ = self._parts()
        return self._new(self._size, re)

    def imag(self) -> "Matrix":
        """Imaginary part as a new real matrix (zeros for a real matrix)."""
        _, im = self._parts()
        if im is None:
            im = np.zeros(self.numel(), dtype=self._dtype.numpy_dtype)
        return self._new(self._size, im)

    # =========================================================================
    # Indexing
    # =========================================================================

    def get(self, *selectors) -> "Matrix":
        """Extract a sub-matrix (copy). See ``ndmat.dense._select.get``."""
        from ._select import get
        return get(self, *selectors)

    def set(self, *args) -> "Matrix":
        """Assign into a selection in place: ``m.set(sel0, sel1, ..., value)``."""
        from ._select import set_
        return set_(self, *args)

    def __getitem__(self, key):
        from ._select import getitem
        return getitem(self, key)

    def __setitem__(self, key, value):
        from ._select import setitem
        setitem(self, key, value)

    def extract_view(self, view: View) -> "Matrix":
        """Materialize an arbitrary view of this matrix into a new matrix."""
        from ._select import extract_view
        return extract_view(self, view)

    # =========================================================================
    # Structural Transforms
    # =========================================================================

    def permute(self, order: Sequence[int]) -> "Matrix":
        from ._select import permute
        return permute(self, order)

    def ipermute(self, order: Sequence[int]) -> "Matrix":
        from ._select import ipermute
        return ipermute(self, order)

    def shiftdim(self, n: Optional[int] = None) -> Tuple["Matrix", int]:
        from ._select import shiftdim
        return shiftdim(self, n)

    def circshift(self, k, dim: Optional[int] = None) -> "Matrix":
        from ._select import circshift
        return circshift(self, k, dim)

    def flipdim(self, dim: int) -> "Matrix":
        from ._select import flipdim
        return flipdim(self, dim)

    def fliplr(self) -> "Matrix":
        return self.flipdim(1)

    def flipud(self) -> "Matrix":
        return self.flipdim(0)

    def rot90(self, k: int = 1) -> "Matrix":
        from ._select import rot90
        return rot90(self, k)

    def repmat(self, *size) -> "Matrix":
        from ._select import repmat
        return repmat(self, *size)

    def cat(self, dim: int, *others: "Matrix") -> "Matrix":
        from ._select import cat
        return cat(dim, self, *others)

    # =========================================================================
    # Casts
    # =========================================================================

    def cast(self, dtype: DTypeLike) -> "Matrix":
        """Image-convention cast: values are rescaled between natural ranges."""
        from ._image import convert_image
        return convert_image(self, dtype)

    convert_image = cast

    def im2double(self) -> "Matrix":
        return self.cast(DType.FLOAT64)

    def im2single(self) -> "Matrix":
        return self.cast(DType.FLOAT32)

    def im2uint8(self) -> "Matrix":
        return self.cast(DType.UINT8)

    def im2uint8c(self) -> "Matrix":
        return self.cast(DType.UINT8C)

    def isnan(self) -> "Matrix":
        from ..math.elementwise import isnan
        return isnan(self)

    def isinf(self) -> "Matrix":
        from ..math.elementwise import isinf
        return isinf(self)

    def isfinite(self) -> "Matrix":
        from ..math.elementwise import isfinite
        return isfinite(self)

    # =========================================================================
    # Arithmetic (in place)
    # =========================================================================

    def plus(self, other) -> "Matrix":
        from ..math.arithmetic import inplace
        return inplace('plus', self, other)

    def minus(self, other) -> "Matrix":
        from ..math.arithmetic import inplace
        return inplace('minus', self, other)

    def times(self, other) -> "Matrix":
        from ..math.arithmetic import inplace
        return inplace('times', self, other)

    def rdivide(self, other) -> "Matrix":
        from ..math.arithmetic import inplace
        return inplace('rdivide', self, other)

    def ldivide(self, other) -> "Matrix":
        from ..math.arithmetic import inplace
        return inplace('ldivide', self, other)

    def power(self, other) -> "Matrix":
        from ..math.arithmetic import inplace
        return inplace('power', self, other)

    __iadd__ = plus
    __isub__ = minus
    __imul__ = times
    __itruediv__ = rdivide
    __ipow__ = power

    # =========================================================================
    # Arithmetic (copying)
    # =========================================================================

    def __add__(self, other):
        from ..math.arithmetic import plus
        return plus(self, other)

    def __radd__(self, other):
        from ..math.arithmetic import plus
        return plus(other, self)

    def __sub__(self, other):
        from ..math.arithmetic import minus
        return minus(self, other)

    def __rsub__(self, other):
        from ..math.arithmetic import minus
        return minus(other, self)

    def __mul__(self, other):
        from ..math.arithmetic import times
        return times(self, other)

    def __rmul__(self, other):
        from ..math.arithmetic import times
        return times(other, self)

    def __truediv__(self, other):
        from ..math.arithmetic import rdivide
        return rdivide(self, other)

    def __rtruediv__(self, other):
        from ..math.arithmetic import rdivide
        return rdivide(other, self)

    def __pow__(self, other):
        from ..math.arithmetic import power
        return power(self, other)

    def __rpow__(self, other):
        from ..math.arithmetic import power
        return power(other, self)

    def uminus(self) -> "Matrix":
        from ..math.arithmetic import uminus
        return uminus(self)

    __neg__ = uminus

    def __pos__(self) -> "Matrix":
        return self._clone()

    def neg(self) -> "Matrix":
        """Logical not."""
        from ..math.arithmetic import neg
        return neg(self)

    __invert__ = neg

    # =========================================================================
    # Comparisons
    # =========================================================================

    def eq(self, other) -> "Matrix":
        from ..math.arithmetic import compare
        return compare('eq', self, other)

    def ne(self, other) -> "Matrix":
        from ..math.arithmetic import compare
        return compare('ne', self, other)

    def lt(self, other) -> "Matrix":
        from ..math.arithmetic import compare
        return compare('lt', self, other)

    def le(self, other) -> "Matrix":
        from ..math.arithmetic import compare
        return compare('le', self, other)

    def gt(self, other) -> "Matrix":
        from ..math.arithmetic import compare
        return compare('gt', self, other)

    def ge(self, other) -> "Matrix":
        from ..math.arithmetic import compare
        return compare('ge', self, other)

    def and_(self, other) -> "Matrix":
        from ..math.arithmetic import compare
        return compare('and', self, other)

    def or_(self, other) -> "Matrix":
        from ..math.arithmetic import compare
        return compare('or', self, other)

    __eq__ = eq
    __ne__ = ne
    __lt__ = lt
    __le__ = le
    __gt__ = gt
    __ge__ = ge
    __and__ = and_
    __or__ = or_
    __hash__ = None

    def __rand__(self, other):
        from ..math.arithmetic import compare
        return compare('and', other, self)

    def __ror__(self, other):
        from ..math.arithmetic import compare
        return compare('or', other, self)

    def __bool__(self) -> bool:
        """Matlab truth value: non-empty and every element non-zero."""
        re, im = self._parts()
        if re.size == 0:
            return False
        nonzero = re != 0
        if im is not None:
            nonzero |= im != 0
        return bool(np.all(nonzero))

    # =========================================================================
    # Elementwise Math
    # =========================================================================

    def abs(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.abs(self)

    __abs__ = abs

    def sign(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.sign(self)

    def sqrt(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.sqrt(self)

    def exp(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.exp(self)

    def log(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.log(self)

    def log2(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.log2(self)

    def log10(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.log10(self)

    def cos(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.cos(self)

    def sin(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.sin(self)

    def tan(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.tan(self)

    def acos(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.acos(self)

    def asin(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.asin(self)

    def atan(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.atan(self)

    def atan2(self, x) -> "Matrix":
        from ..math import elementwise
        return elementwise.atan2(self, x)

    def hypot(self, other) -> "Matrix":
        from ..math import elementwise
        return elementwise.hypot(self, other)

    def floor(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.floor(self)

    def ceil(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.ceil(self)

    def round(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.round(self)

    def conj(self) -> "Matrix":
        from ..math import elementwise
        return elementwise.conj(self)

    def arrayfun(self, fn) -> "Matrix":
        from ..math import elementwise
        return elementwise.arrayfun(self, fn)

    # =========================================================================
    # Linear Algebra Helpers
    # =========================================================================

    def transpose(self) -> "Matrix":
        from ..math import linalg
        return linalg.transpose(self)

    def ctranspose(self) -> "Matrix":
        from ..math import linalg
        return linalg.ctranspose(self)

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    def mtimes(self, other) -> "Matrix":
        from ..math import linalg
        return linalg.mtimes(self, other)

    __matmul__ = mtimes

    def norm(self, p=2) -> float:
        from ..math import linalg
        return linalg.norm(self, p)

    def trace(self):
        from ..math import linalg
        return linalg.trace(self)

    def triu(self, k: int = 0) -> "Matrix":
        from ..math import linalg
        return linalg.triu(self, k)

    def tril(self, k: int = 0) -> "Matrix":
        from ..math import linalg
        return linalg.tril(self, k)

    def diag(self, k: int = 0) -> "Matrix":
        from ..math import linalg
        return linalg.diag(self, k)

    # =========================================================================
    # Reductions
    # =========================================================================

    def sum(self, dim: Optional[int] = None) -> "Matrix":
        from ..statistics import reduce
        return reduce.sum(self, dim)

    def prod(self, dim: Optional[int] = None) -> "Matrix":
        from ..statistics import reduce
        return reduce.prod(self, dim)

    def mean(self, dim: Optional[int] = None) -> "Matrix":
        from ..statistics import reduce
        return reduce.mean(self, dim)

    def min(self, dim: Optional[int] = None) -> "Matrix":
        from ..statistics import reduce
        return reduce.min(self, dim)

    def max(self, dim: Optional[int] = None) -> "Matrix":
        from ..statistics import reduce
        return reduce.max(self, dim)

    def argmin(self, dim: Optional[int] = None) -> "Matrix":
        from ..statistics import reduce
        return reduce.argmin(self, dim)

    def argmax(self, dim: Optional[int] = None) -> "Matrix":
        from ..statistics import reduce
        return reduce.argmax(self, dim)

    def amin(self, dim: Optional[int] = None) -> Tuple["Matrix", "Matrix"]:
        from ..statistics import reduce
        return reduce.amin(self, dim)

    def amax(self, dim: Optional[int] = None) -> Tuple["Matrix", "Matrix"]:
        from ..statistics import reduce
        return reduce.amax(self, dim)

    def variance(self, dim: Optional[int] = None, norm: int = 0) -> "Matrix":
        from ..statistics import reduce
        return reduce.variance(self, dim, norm)

    def std(self, dim: Optional[int] = None, norm: int = 0) -> "Matrix":
        from ..statistics import reduce
        return reduce.std(self, dim, norm)

    def cumsum(self, dim: Optional[int] = None) -> "Matrix":
        from ..statistics import reduce
        return reduce.cumsum(self, dim)

    def cumprod(self, dim: Optional[int] = None) -> "Matrix":
        from ..statistics import reduce
        return reduce.cumprod(self, dim)

    def median(self, dim: Optional[int] = None) -> "Matrix":
        from ..statistics.sort import median as _median
        return _median(self, dim)

    def sort(self, dim: Optional[int] = None, mode: str = 'ascend') -> "Matrix":
        from ..statistics.sort import sort as _sort
        return _sort(self, dim, mode)

    def asort(self, dim: Optional[int] = None, mode: str = 'ascend') -> "Matrix":
        from ..statistics.sort import asort as _asort
        return _asort(self, dim, mode)

    # =========================================================================
    # Filtering
    # =========================================================================

    def filter(self, kernel, boundary: str = 'mirror') -> "Matrix":
        from ..filtering import window
        return window.filter2d(self, kernel, boundary)

    def imfilter(self, kernel) -> "Matrix":
        from ..filtering import window
        return window.filter2d(self, kernel, 'crop')

    def bilateral(self, sigma_space: float, sigma_intensity: float, precision: float = 3) -> "Matrix":
        from ..filtering import window
        return window.bilateral(self, sigma_space, sigma_intensity, precision)

    imbilateral = bilateral

    def imdilate(self, mask) -> "Matrix":
        from ..filtering import window
        return window.imdilate(self, mask)

    def imerode(self, mask) -> "Matrix":
        from ..filtering import window
        return window.imerode(self, mask)

    def imopen(self, mask) -> "Matrix":
        from ..filtering import window
        return window.imopen(self, mask)

    def imclose(self, mask) -> "Matrix":
        from ..filtering import window
        return window.imclose(self, mask)

    def filter1d(self, kernel, origin: Union[str, int] = 'C') -> "Matrix":
        from ..filtering import linear
        return linear.filter1d(self, kernel, origin)

    def separable_filter(self, h_kernel, v_kernel=None) -> "Matrix":
        from ..filtering import linear
        return linear.separable_filter(self, h_kernel, v_kernel)

    def gaussian(self, sigma_x: float, sigma_y: Optional[float] = None, precision: float = 3) -> "Matrix":
        from ..filtering import linear
        return linear.gaussian(self, sigma_x, sigma_y, precision)

    def gaussian_gradient(self, sigma: float = 2):
        from ..filtering import linear
        return linear.gaussian_gradient(self, sigma)

    def conv(self, vect, shape: str = 'full') -> "Matrix":
        from ..filtering import linear
        return linear.conv(self, vect, shape)

    def fast_gaussian(self, sigma_x: float, sigma_y: Optional[float] = None, numsteps: int = 4) -> "Matrix":
        from ..filtering import recursive
        return recursive.fast_gaussian(self, sigma_x, sigma_y, numsteps)

    def block_filter(
        self,
        wx: int,
        wy: Optional[int] = None,
        is_cumulative: bool = False,
        edge_mode: str = 'normalize',
    ) -> "Matrix":
        from ..filtering import recursive
        return recursive.block_filter(self, wx, wy, is_cumulative, edge_mode)

    def fast_blur(self, sigma_x: float, sigma_y: Optional[float] = None, k: int = 3) -> "Matrix":
        from ..filtering import recursive
        return recursive.fast_blur(self, sigma_x, sigma_y, k)

    def integral_image(self) -> "Matrix":
        from ..filtering import recursive
        return recursive.integral_image(self)

    # =========================================================================
    # Image Helpers
    # =========================================================================

    def to_pixel_array(self):
        from ._image import to_pixel_array
        return to_pixel_array(self)

    get_image_data = to_pixel_array

    def rgb2gray(self) -> "Matrix":
        from ._image import rgb2gray
        return rgb2gray(self)

    def imhist(self, bins: int = 256) -> "Matrix":
        from ._image import imhist
        return imhist(self, bins)

    # =========================================================================
    # Representation
    # =========================================================================

    def __len__(self) -> int:
        return self.numel()

    def __iter__(self):
        return iter(self.tolist())

    def __repr__(self) -> str:
        kind = "complex " if self._is_complex else ""
        return f"Matrix(size={self._size}, dtype={kind}{self.type_name})"

    def __str__(self) -> str:
        arr = self.to_array()
        if arr.ndim == 2:
            return f"{self!r}\n{arr}"
        return repr(self)


# =============================================================================
# Coercion
# =============================================================================

def to_matrix(value: Any, config: Optional[Config] = None) -> Matrix:
    """Coerce a scalar, array-like or Matrix to a Matrix.

    Scalars become ``1x1`` matrices (complex numbers complex ones),
    sequences and numpy arrays keep their shape (1-d becomes a column).
    """
    if isinstance(value, Matrix):
        return value
    if isinstance(value, (bool, np.bool_)):
        return Matrix([1, 1], [value], dtype=DType.LOGICAL, config=config)
    if isinstance(value, numbers.Number):
        if isinstance(value, numbers.Complex) and not isinstance(value, numbers.Real):
            return Matrix([1, 1], [value.real, value.imag], is_complex=True, config=config)
        return Matrix([1, 1], [value], config=config)
    arr = np.asarray(value)
    if arr.dtype == object:
        raise ShapeMismatchError(f"Cannot convert {type(value).__name__} to a Matrix")
    if not isinstance(value, np.ndarray) and arr.dtype != np.bool_ and not np.iscomplexobj(arr):
        return Matrix.from_array(arr, dtype=resolve_config(config).default_type, config=config)
    return Matrix.from_array(arr, config=config)
