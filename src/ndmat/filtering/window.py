"""
2-D windowed filters.

Every output pixel is computed from the ``fy x fx`` window of input
pixels under the kernel, with the kernel origin at
``floor((size - 1) / 2)`` on each axis. Channels (dimension 2 and
beyond) are filtered independently.

Boundary policies:

- ``'mirror'``: out-of-image taps read the image mirrored about its edge
  sample, without repeating it. Kernels wider than the image reflect
  back and forth, so any kernel size is accepted.
- ``'crop'``: out-of-image taps are dropped. Linear filtering treats them
  as zeros; bilateral filtering and morphology leave them out of the
  weights and of the max/min.

Design Philosophy:
    Windows are gathered once per channel with
    ``numpy.lib.stride_tricks.sliding_window_view`` over a padded copy,
    then every filter is a reduction over the two trailing window axes.
    No separability is assumed.

Example:
    >>> im = Matrix([2, 2], [1, 2, 3, 4])
    >>> im.filter(Matrix([1, 1], [1])).get_data()
    array([1., 2., 3., 4.])
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Tuple

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from ..core.error import (
    ComplexUnsupportedError,
    InvalidParameterError,
    InvalidShapeError,
    check_mode,
)
from ..dense._matrix import Matrix, to_matrix
from ..dense._tools import round_half_away
from .kernel import fspecial

logger = logging.getLogger("ndmat.filtering")

_BOUNDARIES = ('mirror', 'crop')


# =============================================================================
# Window Gathering
# =============================================================================

def _kernel_2d(kernel: Any, mat: Matrix, name: str) -> np.ndarray:
    kernel = to_matrix(kernel, mat.config)
    if not kernel.is_matrix():
        raise InvalidShapeError(f"{name}: kernel must be a 2-D matrix")
    if not kernel.is_real():
        raise ComplexUnsupportedError(f"{name}: complex kernels are not supported")
    if kernel.is_empty():
        raise InvalidShapeError(f"{name}: kernel is empty")
    return kernel.get_real_data().astype(np.float64).reshape(kernel.size[:2], order='F')


def _channels(mat: Matrix) -> np.ndarray:
    """Image values as a float64 ``(h, w, C)`` block."""
    size = mat.size
    channels = int(np.prod(size[2:], dtype=np.int64))
    return mat.get_real_data().astype(np.float64).reshape((size[0], size[1], channels), order='F')


def _windows(
    plane: np.ndarray,
    shape: Tuple[int, int],
    boundary: str,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Windows of one channel and their in-image mask.

    Returns:
        ``(windows, valid)``, both ``(h, w, fy, fx)``. ``valid`` is all
        ones under the mirror boundary.
    """
    fy, fx = shape
    oy, ox = (fy - 1) // 2, (fx - 1) // 2
    pad = ((oy, fy - 1 - oy), (ox, fx - 1 - ox))
    if boundary == 'mirror':
        padded = np.pad(plane, pad, mode='reflect')
        valid = np.ones_like(padded)
    else:
        padded = np.pad(plane, pad, mode='constant')
        valid = np.pad(np.ones_like(plane), pad, mode='constant')
    return sliding_window_view(padded, shape), sliding_window_view(valid, shape)


def _check_real(mat: Matrix, name: str) -> None:
    if not mat.is_real():
        raise ComplexUnsupportedError(f"{name}: complex matrices are not supported")


def _per_channel(
    mat: Matrix,
    shape: Tuple[int, int],
    boundary: str,
    reduce: Callable[[np.ndarray, np.ndarray], np.ndarray],
) -> Matrix:
    """Apply ``reduce(windows, valid) -> (h, w)`` to every channel."""
    values = _channels(mat)
    out = np.empty_like(values)
    for c in range(values.shape[2]):
        windows, valid = _windows(values[:, :, c], shape, boundary)
        out[:, :, c] = reduce(windows, valid)
    return mat._new(mat.size, out.ravel(order='F'))


# =============================================================================
# Linear Filtering
# =============================================================================

def filter2d(mat: Matrix, kernel: Any, boundary: str = 'mirror') -> Matrix:
    """
    2-D correlation (the kernel is not flipped).

    Args:
        kernel: 2-D matrix of weights.
        boundary: 'mirror' (default) or 'crop' (zeros outside the image).

    Returns:
        Matrix of the input size and kind.

    Raises:
        InvalidShapeError: If the kernel is not a non-empty 2-D matrix.
        ComplexUnsupportedError: For complex input.
    """
    boundary = check_mode(boundary, _BOUNDARIES, "filter")
    weights = _kernel_2d(kernel, mat, "filter")
    if mat.is_empty():
        return mat._clone()
    _check_real(mat, "filter")
    logger.debug("filter2d kernel=%s boundary=%s", weights.shape, boundary)
    return _per_channel(
        mat, weights.shape, boundary,
        lambda windows, valid: np.einsum('hwij,ij->hw', windows, weights),
    )


def bilateral(
    mat: Matrix,
    sigma_space: float,
    sigma_intensity: float,
    precision: float = 3,
) -> Matrix:
    """
    Edge-preserving bilateral filter.

    Each tap is weighted by a spatial Gaussian of standard deviation
    ``sigma_space`` times ``exp(-(center - tap)^2 / (2 sigma_intensity))``.
    Weights are renormalized per pixel over the in-image taps.

    Args:
        sigma_space: Spatial standard deviation (> 0).
        sigma_intensity: Intensity scale (> 0).
        precision: Spatial window width in units of ``sigma_space``; the
            window is ``round(precision * sigma_space / 2) * 2 + 1``
            pixels on a side.

    Example:
        >>> flat = Matrix([5, 5], 'double').plus(0.5)
        >>> flat.bilateral(1, 0.1).get_data().max()
        0.5
    """
    if not sigma_space > 0 or not sigma_intensity > 0:
        raise InvalidParameterError("bilateral: sigmas must be positive")
    size = round_half_away(precision * sigma_space / 2) * 2 + 1
    spatial = fspecial('gaussian', size, sigma_space)
    weights = spatial.get_real_data().astype(np.float64).reshape((size, size), order='F')
    if not mat.is_real():
        raise ComplexUnsupportedError("bilateral: complex matrices are not supported")
    if mat.is_empty():
        return mat._clone()
    oy, ox = (size - 1) // 2, (size - 1) // 2

    def reduce(windows, valid):
        center = windows[:, :, oy, ox][:, :, None, None]
        w = weights * valid * np.exp(-(center - windows) ** 2 / (2 * sigma_intensity))
        return (w * windows).sum(axis=(2, 3)) / w.sum(axis=(2, 3))

    logger.debug("bilateral window=%d sigma_space=%g sigma_intensity=%g",
                 size, sigma_space, sigma_intensity)
    return _per_channel(mat, (size, size), 'crop', reduce)


# =============================================================================
# Morphology
# =============================================================================

def _morphology(mat: Matrix, mask: Any, name: str, take_max: bool) -> Matrix:
    support = _kernel_2d(mask, mat, name) != 0
    if not support.any():
        raise InvalidParameterError(f"{name}: structuring mask has no nonzero element")
    _check_real(mat, name)
    if mat.is_empty():
        return mat._clone()
    fill = -np.inf if take_max else np.inf
    fold = np.max if take_max else np.min

    def reduce(windows, valid):
        taps = np.where(support & (valid != 0), windows, fill)
        return fold(taps, axis=(2, 3))

    return _per_channel(mat, support.shape, 'crop', reduce)


def imdilate(mat: Matrix, mask: Any) -> Matrix:
    """Maximum over the nonzero taps of ``mask`` that fall inside the image."""
    return _morphology(mat, mask, "imdilate", True)


def imerode(mat: Matrix, mask: Any) -> Matrix:
    """Minimum over the nonzero taps of ``mask`` that fall inside the image."""
    return _morphology(mat, mask, "imerode", False)


def imopen(mat: Matrix, mask: Any) -> Matrix:
    return imdilate(imerode(mat, mask), mask)


def imclose(mat: Matrix, mask: Any) -> Matrix:
    return imerode(imdilate(mat, mask), mask)


__all__ = [
    "filter2d",
    "bilateral",
    "imdilate",
    "imerode",
    "imopen",
    "imclose",
]
