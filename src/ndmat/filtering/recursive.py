"""
Constant-time-per-pixel smoothing.

- ``fast_gaussian``: recursive (IIR) approximation of a Gaussian blur,
  ``numsteps`` causal/anti-causal first-order passes per axis
- ``integral_image``: 2-D cumulative sum of each channel
- ``block_filter``: box average from four integral-image corners
- ``fast_blur``: repeated box averages approximating a Gaussian

The cost of every filter here is independent of sigma or window size.

Example:
    >>> im = Matrix([8, 8], 'double').plus(2)
    >>> im.block_filter(3).get_data().max()
    2.0
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
from scipy.signal import lfilter

from .._dtypes import DType
from ..core.error import ComplexUnsupportedError, InvalidParameterError, check_mode
from ..dense._matrix import Matrix
from ..dense._tools import is_integer, round_half_away

logger = logging.getLogger("ndmat.filtering")

_EDGE_MODES = ('normalize', 'constant')


def _float_type(mat: Matrix) -> DType:
    return mat.dtype if mat.is_float() else mat.config.default_type


def _check_real(mat: Matrix, name: str) -> None:
    if not mat.is_real():
        raise ComplexUnsupportedError(f"{name}: complex matrices are not supported")


def _planes(mat: Matrix) -> np.ndarray:
    """Values as a float64 ``(h, w, C)`` block."""
    size = mat.size
    channels = int(np.prod(size[2:], dtype=np.int64))
    return mat.get_real_data().astype(np.float64).reshape((size[0], size[1], channels), order='F')


# =============================================================================
# Recursive Gaussian
# =============================================================================

def _recursive_pass(values: np.ndarray, nu: float, boundary_scale: float, numsteps: int) -> np.ndarray:
    """``numsteps`` forward/backward exponential passes along axis 0."""
    b, a = [1.0], [1.0, -nu]
    for _ in range(numsteps):
        zi = (nu * boundary_scale * values[0])[None, :]
        values, _ = lfilter(b, a, values, axis=0, zi=zi)
        values = values[::-1]
        zi = (nu * boundary_scale * values[0])[None, :]
        values, _ = lfilter(b, a, values, axis=0, zi=zi)
        values = values[::-1]
    return values


def _recursive_coefficients(sigma: float, numsteps: int):
    lam = sigma * sigma / (2.0 * numsteps)
    nu = (1 + 2 * lam - math.sqrt(1 + 4 * lam)) / (2 * lam)
    boundary_scale = 1.0 / (1.0 - nu)
    post_scale = (nu / lam) ** numsteps
    logger.debug("Recursive Gaussian sigma=%g steps=%d nu=%g", sigma, numsteps, nu)
    return nu, boundary_scale, post_scale


def fast_gaussian(
    mat: Matrix,
    sigma_x: float,
    sigma_y: Optional[float] = None,
    numsteps: int = 4,
) -> Matrix:
    """
    Approximate Gaussian blur by repeated first-order recursive filtering.

    Each pass runs ``y[n] = x[n] + nu * y[n - 1]`` forward then backward.
    The first sample of each pass is scaled by ``1 / (1 - nu)``, the
    steady-state response of a constant signal extending past the edge.
    With ``lambda = sigma^2 / (2 N)``::

        nu = (1 + 2 lambda - sqrt(1 + 4 lambda)) / (2 lambda)
        post_scale = (nu / lambda) ^ N

    Args:
        sigma_x: Standard deviation along dimension 0.
        sigma_y: Standard deviation along dimension 1; ``sigma_x`` when None.
        numsteps: Number of passes per axis (accuracy improves with N).

    Returns:
        Matrix of the input size, of the input's float kind (the default
        type for integer and logical input).

    Raises:
        InvalidParameterError: If a sigma is not positive or ``numsteps``
            is not a positive integer.
    """
    if sigma_y is None:
        sigma_y = sigma_x
    if not sigma_x > 0 or not sigma_y > 0:
        raise InvalidParameterError("fast_gaussian: sigma must be positive")
    if not is_integer(numsteps, 1):
        raise InvalidParameterError(f"fast_gaussian: numsteps must be a positive integer, got {numsteps!r}")
    _check_real(mat, "fast_gaussian")
    numsteps = int(numsteps)

    values = _planes(mat)
    if values.size == 0:
        return mat._new(mat.size, values.ravel(), dtype=_float_type(mat))
    for axis, sigma in ((0, sigma_x), (1, sigma_y)):
        nu, boundary_scale, post_scale = _recursive_coefficients(sigma, numsteps)
        moved = np.moveaxis(values, axis, 0)
        shape = moved.shape
        flat = moved.reshape((shape[0], -1))
        flat = _recursive_pass(flat, nu, boundary_scale, numsteps) * post_scale
        values = np.moveaxis(flat.reshape(shape), 0, axis)
    return mat._new(mat.size, values.ravel(order='F'), dtype=_float_type(mat))


# =============================================================================
# Integral Images and Box Filters
# =============================================================================

def integral_image(mat: Matrix) -> Matrix:
    """
    Cumulative sum over dimensions 0 and 1, per channel.

    ``out[y, x] = sum(in[:y + 1, :x + 1])``.
    """
    _check_real(mat, "integral_image")
    values = _planes(mat)
    values = values.cumsum(axis=0).cumsum(axis=1)
    return mat._new(mat.size, values.ravel(order='F'), dtype=_float_type(mat))


def _window_bounds(length: int, width: int):
    """Integral-image corner indices of the window around each position."""
    pos = np.arange(length)
    lo = np.clip(pos - (width - 1) // 2, 0, length)
    hi = np.clip(pos + width // 2 + 1, 0, length)
    return lo, hi


def block_filter(
    mat: Matrix,
    wx: int,
    wy: Optional[int] = None,
    is_cumulative: bool = False,
    edge_mode: str = 'normalize',
) -> Matrix:
    """
    Box average over a ``wx x wy`` window.

    Window sums come from the integral image with four corner lookups.
    Near the border the window is cut to the image: ``'normalize'``
    divides by the number of covered pixels, so a constant image stays
    constant; ``'constant'`` divides by ``wx * wy``, as if the image were
    padded with zeros.

    Args:
        wx: Window extent along dimension 0.
        wy: Window extent along dimension 1; ``wx`` when None.
        is_cumulative: The matrix already is an integral image.
        edge_mode: 'normalize' or 'constant'.

    Raises:
        InvalidParameterError: If a window size is not a positive integer.
        InvalidModeError: For an unknown edge mode.
    """
    if wy is None:
        wy = wx
    if not is_integer(wx, 1) or not is_integer(wy, 1):
        raise InvalidParameterError(f"block_filter: window sizes must be positive integers, got {wx!r}, {wy!r}")
    edge_mode = check_mode(edge_mode, _EDGE_MODES, "block_filter")
    wx, wy = int(wx), int(wy)

    summed = mat if is_cumulative else integral_image(mat)
    _check_real(summed, "block_filter")
    h, w = mat.get_size(0), mat.get_size(1)
    table = _planes(summed)
    table = np.pad(table, ((1, 0), (1, 0), (0, 0)), mode='constant')

    r_lo, r_hi = _window_bounds(h, wx)
    c_lo, c_hi = _window_bounds(w, wy)
    total = (
        table[np.ix_(r_hi, c_hi)]
        - table[np.ix_(r_lo, c_hi)]
        - table[np.ix_(r_hi, c_lo)]
        + table[np.ix_(r_lo, c_lo)]
    )
    if edge_mode == 'normalize':
        area = np.outer(r_hi - r_lo, c_hi - c_lo).astype(np.float64)
        out = total / area[:, :, None]
    else:
        out = total / float(wx * wy)
    return mat._new(mat.size, out.ravel(order='F'), dtype=_float_type(summed))


def fast_blur(mat: Matrix, sigma_x: float, sigma_y: Optional[float] = None, k: int = 3) -> Matrix:
    """
    Gaussian approximation by ``k`` successive box filters.

    The box width for a standard deviation ``sigma`` is
    ``round(sqrt(12 / k * sigma^2 + 1) / 2) * 2 + 1``. The image is
    converted with ``im2double`` first. ``sigma_x`` acts along dimension 0
    and ``sigma_y`` along dimension 1, as in ``gaussian``.
    """
    if sigma_y is None:
        sigma_y = sigma_x
    if not sigma_x > 0 or not sigma_y > 0:
        raise InvalidParameterError("fast_blur: sigma must be positive")
    if not is_integer(k, 1):
        raise InvalidParameterError(f"fast_blur: k must be a positive integer, got {k!r}")

    def width(sigma):
        return round_half_away(math.sqrt(12.0 / k * sigma * sigma + 1) / 2) * 2 + 1

    wx, wy = width(sigma_x), width(sigma_y)
    logger.debug("fast_blur k=%d box=%dx%d", k, wx, wy)
    out = mat.im2double()
    for _ in range(int(k)):
        out = block_filter(out, wx, wy)
    return out


__all__ = ["fast_gaussian", "integral_image", "block_filter", "fast_blur"]
