"""
Filter kernels.

- ``gaussian_kernel``: sampled 1-D Gaussian and its first two derivatives
- ``fspecial``: Matlab's predefined 2-D filters

Kernels are plain Matrices of the configured default type, so they can
be inspected, combined and passed to any filtering function.

Example:
    >>> k = gaussian_kernel(1.0)
    >>> k.size
    [9, 1]
    >>> fspecial('sobel').get_data()
    array([ 1.,  0., -1.,  2.,  0., -2.,  1.,  0., -1.])
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional, Tuple

import numpy as np

from ..core.error import InvalidParameterError, check_mode
from ..dense._matrix import Matrix
from ..dense._tools import is_integer

logger = logging.getLogger("ndmat.filtering")


# =============================================================================
# Gaussian Kernels
# =============================================================================

def gaussian_size(sigma: float, precision: float = 3) -> int:
    """Odd kernel length whose tail beyond it is below ``10 ** -precision``."""
    return 1 + 2 * math.ceil(sigma * math.sqrt(precision * 2 * math.log(10)))


def gaussian_kernel(sigma: float, order: int = 0, precision: float = 3) -> Matrix:
    """
    Sampled Gaussian (order 0) or Gaussian derivative (order 1, 2) column.

    Normalizations (L1):

    - order 0: ``sum |k| == 1``
    - order 1: ``sum |x k| == 1``
    - order 2: zero-mean shift, then ``sum |x^2 k / 2| == 1``

    Args:
        sigma: Standard deviation (> 0).
        order: Derivative order, 0, 1 or 2.
        precision: Tail truncation, in decimal digits.

    Raises:
        InvalidParameterError: If ``sigma <= 0`` or ``order`` is not 0, 1 or 2.
    """
    if not sigma > 0:
        raise InvalidParameterError(f"gaussian_kernel: sigma must be positive, got {sigma}")
    if order not in (0, 1, 2) or isinstance(order, bool):
        raise InvalidParameterError(
            f"gaussian_kernel: derivative order can be 0, 1 or 2 but not {order!r}"
        )

    size = gaussian_size(sigma, precision)
    x = np.arange(size, dtype=np.float64) - (size - 1) / 2
    k = np.exp(-(x * x) / (2 * sigma * sigma)) / (math.sqrt(2 * math.pi) * sigma)

    if order == 0:
        total = np.abs(k).sum()
    elif order == 1:
        k *= -x / sigma ** 2
        total = np.abs(x * k).sum()
    else:
        k *= x * x / sigma ** 4 - 1 / sigma ** 2
        k -= abs(np.abs(k).sum() / size)
        total = np.abs(0.5 * x * x * k).sum()

    if total != 0:
        k /= total
    logger.debug("Gaussian kernel sigma=%g order=%d size=%d", sigma, order, size)
    return Matrix([size, 1], k)


# =============================================================================
# Predefined 2-D Filters
# =============================================================================

_FSPECIAL_TYPES = ('average', 'gaussian', 'laplacian', 'log', 'unsharp', 'prewitt', 'sobel')


def _kernel_size(p1: Any) -> Tuple[int, int]:
    if p1 is None:
        return 3, 3
    if isinstance(p1, (list, tuple, np.ndarray)):
        ysize, xsize = p1[0], p1[1]
    else:
        ysize = xsize = p1
    if not is_integer(ysize, 1) or not is_integer(xsize, 1):
        raise InvalidParameterError(f"fspecial: invalid kernel size {p1!r}")
    return int(ysize), int(xsize)


def _grid(ysize: int, xsize: int) -> Tuple[np.ndarray, np.ndarray]:
    """Centered row (n2) and column (n1) coordinates, shape ``(ysize, xsize)``."""
    n2 = np.arange(ysize) - (ysize - 1) / 2
    n1 = np.arange(xsize) - (xsize - 1) / 2
    return np.meshgrid(n1, n2)


def _from_2d(arr: np.ndarray) -> Matrix:
    return Matrix(list(arr.shape), arr.ravel(order='F'))


def fspecial(type: str, p1: Optional[Any] = None, p2: Optional[float] = None) -> Matrix:
    """
    Predefined 2-D filter kernels.

    Args:
        type: 'average', 'gaussian', 'laplacian', 'log', 'unsharp',
            'prewitt' or 'sobel'.
        p1: Size (``n`` or ``[rows, cols]``, default 3) for 'average',
            'gaussian' and 'log'; ``alpha`` (default 0.2) for 'laplacian'
            and 'unsharp'.
        p2: ``sigma`` (default 0.5) for 'gaussian' and 'log'.

    Raises:
        InvalidModeError: For an unknown type.
    """
    kind = check_mode(type, _FSPECIAL_TYPES, "fspecial")

    if kind == 'average':
        ysize, xsize = _kernel_size(p1)
        return _from_2d(np.full((ysize, xsize), 1.0 / (ysize * xsize)))

    if kind in ('gaussian', 'log'):
        ysize, xsize = _kernel_size(p1)
        sigma = 0.5 if p2 is None else float(p2)
        if not sigma > 0:
            raise InvalidParameterError(f"fspecial: sigma must be positive, got {sigma}")
        n1, n2 = _grid(ysize, xsize)
        r2 = n1 * n1 + n2 * n2
        g = np.exp(-r2 / (2 * sigma * sigma))
        if kind == 'gaussian':
            return _from_2d(g / g.sum())
        h = (r2 - 2 * sigma * sigma) * g / sigma ** 4 / g.sum()
        return _from_2d(h - h.mean())

    if kind in ('laplacian', 'unsharp'):
        a = 0.2 if p1 is None else float(p1)
        if kind == 'laplacian':
            b = (1 - a) / 4
            data = np.array([a / 4, b, a / 4, b, -1, b, a / 4, b, a / 4]) * (4 / (a + 1))
        else:
            data = np.array([-a, a - 1, -a, a - 1, a + 5, a - 1, -a, a - 1, -a]) / (a + 1)
        return Matrix([3, 3], data)

    if kind == 'prewitt':
        return Matrix([3, 3], [1, 0, -1, 1, 0, -1, 1, 0, -1])
    return Matrix([3, 3], [1, 0, -1, 2, 0, -2, 1, 0, -1])


__all__ = ["gaussian_size", "gaussian_kernel", "fspecial"]
