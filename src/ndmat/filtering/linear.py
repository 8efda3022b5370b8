"""
Separable linear filtering.

- ``filter1d``: correlation along dimension 0 with mirror boundaries
- ``separable_filter``: ``filter1d`` on dimension 0, then on dimension 1
- ``gaussian``: separable Gaussian blur
- ``gaussian_gradient``: Gaussian-derivative gradient, norm and phase
- ``conv``: full/same/valid convolution of two vectors

Boundary convention:
    Samples outside the signal are mirrored about the edge sample without
    repeating it: ``in[-1] == in[1]`` and ``in[L] == in[L - 2]``. This is
    numpy's ``'reflect'`` padding (scipy.ndimage's ``'mirror'`` mode).

Example:
    >>> im = Matrix([4, 1], [1, 2, 3, 4])
    >>> im.filter1d(Matrix([3, 1], [1, 1, 1])).get_data()
    array([5., 6., 9., 10.])
"""

from __future__ import annotations

import logging
import math
from collections import namedtuple
from typing import Any, Optional, Union

import numpy as np

from ..core.error import (
    ComplexUnsupportedError,
    InvalidModeError,
    InvalidParameterError,
    InvalidShapeError,
    KernelTooLargeError,
    check_mode,
)
from ..dense._matrix import Matrix, to_matrix
from ..dense._tools import is_integer
from .kernel import gaussian_kernel

logger = logging.getLogger("ndmat.filtering")

GaussianGradient = namedtuple("GaussianGradient", ["x", "y", "norm", "phase"])


# =============================================================================
# 1-D Filtering
# =============================================================================

def resolve_origin(origin: Union[str, int], length: int) -> int:
    """
    Kernel origin as a tap index in ``[0, length)``.

    ``'C'``/``'CL'`` is ``floor((K - 1) / 2)``, ``'CR'`` is
    ``ceil((K - 1) / 2)``, ``'L'`` is 0 and ``'R'`` is ``K - 1``. A negative
    integer counts from the end.

    Raises:
        InvalidModeError: For an unknown origin name.
        InvalidParameterError: For an integer origin outside the kernel.
    """
    if isinstance(origin, str):
        name = origin.upper()
        positions = {
            'C': (length - 1) // 2,
            'CL': (length - 1) // 2,
            'CR': math.ceil((length - 1) / 2),
            'L': 0,
            'R': length - 1,
        }
        if name not in positions:
            raise InvalidModeError(f"filter1d: unknown origin position '{origin}'")
        return positions[name]
    if not is_integer(origin):
        raise InvalidParameterError(f"filter1d: origin must be a name or an integer, got {origin!r}")
    origin = int(origin)
    if origin < 0:
        origin += length
    if not 0 <= origin < length:
        raise InvalidParameterError("filter1d: origin must satisfy |origin| < kernel length")
    return origin


def filter1d(mat: Matrix, kernel: Any, origin: Union[str, int] = 'C') -> Matrix:
    """
    Correlate every column (and channel) with a 1-D kernel along dimension 0.

    ``out[y] = sum_k kernel[k] * in[mirror(y - origin + k)]``. The result
    keeps the input's size and kind.

    Args:
        kernel: Vector of taps.
        origin: Tap aligned with the output sample (see ``resolve_origin``).

    Raises:
        InvalidShapeError: If the kernel is not a vector.
        KernelTooLargeError: If ``origin >= size(0) / 2``.
        ComplexUnsupportedError: If the matrix or kernel is complex.
    """
    kernel = to_matrix(kernel, mat.config)
    if not kernel.is_vector():
        raise InvalidShapeError("filter1d: kernel must be a vector")
    if not mat.is_real() or not kernel.is_real():
        raise ComplexUnsupportedError("filter1d: complex matrices are not supported")
    taps = kernel.get_real_data().astype(np.float64)
    count = taps.size
    if count == 0:
        raise InvalidShapeError("filter1d: kernel is empty")
    origin = resolve_origin(origin, count)

    if mat.is_empty():
        return mat._clone()
    length = mat.get_size(0)
    if origin >= length / 2:
        raise KernelTooLargeError(
            f"filter1d: kernel origin {origin} is too large for length {length}"
        )

    columns = mat.get_real_data().astype(np.float64).reshape((length, -1), order='F')
    padded = np.pad(columns, ((origin, count - 1 - origin), (0, 0)), mode='reflect')
    out = np.zeros_like(columns)
    for k in range(count):
        out += taps[k] * padded[k:k + length]
    return mat._new(mat.size, out.ravel(order='F'))


def separable_filter(mat: Matrix, h_kernel: Any, v_kernel: Optional[Any] = None) -> Matrix:
    """
    Apply ``h_kernel`` along dimension 0, then ``v_kernel`` along dimension 1.

    ``v_kernel`` defaults to ``h_kernel``. Dimensions beyond the second are
    filtered independently.
    """
    if v_kernel is None:
        v_kernel = h_kernel
    order = [1, 0] + list(range(2, mat.ndims()))
    out = filter1d(mat, h_kernel)
    out = filter1d(out.permute(order), v_kernel)
    return out.permute(order)


def gaussian(
    mat: Matrix,
    sigma_x: float,
    sigma_y: Optional[float] = None,
    precision: float = 3,
) -> Matrix:
    """
    Separable Gaussian blur.

    Args:
        sigma_x: Standard deviation along dimension 0 (the ``h_kernel``
            pass of ``separable_filter``).
        sigma_y: Standard deviation along dimension 1; ``sigma_x`` when None.
        precision: Kernel truncation, in decimal digits.
    """
    kernel_x = gaussian_kernel(sigma_x, 0, precision)
    if sigma_y is None or sigma_y == sigma_x:
        kernel_y = kernel_x
    else:
        kernel_y = gaussian_kernel(sigma_y, 0, precision)
    return separable_filter(mat, kernel_x, kernel_y)


def gaussian_gradient(mat: Matrix, sigma: float = 2) -> GaussianGradient:
    """
    Image gradient by Gaussian-derivative filtering.

    Returns:
        GaussianGradient with ``x`` (derivative along dimension 1), ``y``
        (along dimension 0), ``norm = sqrt(x^2 + y^2)`` and ``phase =
        atan2(y, x) / (2 pi)`` wrapped into ``[0, 1)``.

    Example:
        >>> grad = im.gaussian_gradient(1.5)
        >>> grad.norm.size == im.size
        True
    """
    if not mat.is_float():
        mat = mat.astype(mat.config.default_type)
    smooth = gaussian_kernel(sigma, 0, 3)
    derive = gaussian_kernel(sigma, 1, 3)
    x = separable_filter(mat, smooth, derive)
    y = separable_filter(mat, derive, smooth)

    xd = x.get_real_data().astype(np.float64)
    yd = y.get_real_data().astype(np.float64)
    phase = np.arctan2(yd, xd) / (2 * math.pi)
    phase = np.where(phase < 0, phase + 1, phase)
    norm = mat._new(mat.size, np.hypot(xd, yd))
    return GaussianGradient(x, y, norm, mat._new(mat.size, phase))


# =============================================================================
# Vector Convolution
# =============================================================================

_CONV_SHAPES = ('full', 'same', 'valid')


def conv(mat: Matrix, vect: Any, shape: str = 'full') -> Matrix:
    """
    Convolution of two vectors (the kernel is reversed).

    Args:
        vect: Second vector.
        shape: 'full' (length ``n1 + n2 - 1``), 'same' (central part of
            length ``n1``) or 'valid' (length ``|n1 - n2| + 1``).
            'same' starts at ``floor(n2 / 2)`` in the full result, as
            Matlab's ``conv`` does; for an odd ``n2`` the window is
            centered on the kernel's middle tap.

    Returns:
        A row when ``mat`` is a row, a column otherwise.

    Raises:
        InvalidShapeError: If an operand is not a vector.
        InvalidModeError: For an unknown shape.
    """
    shape = check_mode(shape, _CONV_SHAPES, "conv")
    vect = to_matrix(vect, mat.config)
    if not mat.is_vector() or not vect.is_vector():
        raise InvalidShapeError("conv: both operands must be vectors")

    def values(m):
        re, im = m._parts_float()
        return re if im is None else re + 1j * im

    a, b = values(mat), values(vect)
    n1, n2 = a.size, b.size
    if n1 == 0 or n2 == 0:
        out = np.zeros(0)
    else:
        full = np.convolve(a, b)
        if shape == 'full':
            out = full
        elif shape == 'same':
            start = n2 // 2
            out = full[start:start + n1]
        else:
            lo, hi = min(n1, n2), max(n1, n2)
            out = full[lo - 1:hi]

    size = [1, out.size] if mat.is_row() else [out.size, 1]
    dtype = mat.dtype if mat.is_float() else mat.config.default_type
    if np.iscomplexobj(out):
        return mat._new(size, out.real, out.imag, dtype)
    return mat._new(size, out, dtype=dtype)


__all__ = [
    "GaussianGradient",
    "resolve_origin",
    "filter1d",
    "separable_filter",
    "gaussian",
    "gaussian_gradient",
    "conv",
]
