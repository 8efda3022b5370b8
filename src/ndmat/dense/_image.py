"""
Image-convention helpers.

Images are ``height x width x channels`` matrices. Each element kind has
a natural range: ``[0, 1]`` for float and logical kinds and
``[intmin, intmax]`` for integer kinds. Casting between kinds rescales
linearly from one natural range to the other.

Example:
    >>> im = Matrix([1, 2], [0, 255], 'uint8')
    >>> im.im2double().get_data()
    array([0., 1.])
"""

from __future__ import annotations

import logging
import math
from collections import namedtuple
from typing import Any, Optional

import numpy as np

from .._dtypes import DType, DTypeLike, normalize_dtype
from ..core.error import (
    ComplexUnsupportedError,
    InvalidParameterError,
    InvalidShapeError,
    ShapeMismatchError,
)
from ._matrix import Matrix, to_matrix
from ._tools import check_size_equals, is_integer

logger = logging.getLogger("ndmat.dense")

PixelArray = namedtuple("PixelArray", ["data", "width", "height"])


# =============================================================================
# Casts
# =============================================================================

def convert_image(mat: Matrix, dtype: DTypeLike) -> Matrix:
    """
    Cast with linear rescaling between natural ranges.

    ``out = (in - a) * (d - c) / (b - a) + c`` where ``[a, b]`` is the
    source range and ``[c, d]`` the destination range.

    Raises:
        ComplexUnsupportedError: If the matrix is complex.
    """
    if not mat.is_real():
        raise ComplexUnsupportedError("convert_image: complex matrices are not supported")
    target = normalize_dtype(dtype)
    a, b = mat.dtype.natural_range
    c, d = target.natural_range
    values = mat.get_real_data().astype(np.float64)
    if (a, b) != (c, d):
        values = (values - a) * ((d - c) / (b - a)) + c
    if target.is_integer and target is not DType.UINT8C:
        values = np.rint(values)
    logger.debug("convert_image %s -> %s", mat.type_name, target.type_name)
    return mat._new(mat.size, values, dtype=target)


# =============================================================================
# Pixel Interop
# =============================================================================

def from_pixels(data: Any, width: int, height: int, alpha: bool = False) -> Matrix:
    """
    Build an image from a row-major RGBA buffer of ``4 * width * height`` values.

    Integer buffers give a ``uint8c`` image; float buffers are taken to
    be in ``[0, 1]`` and give a ``double`` image.

    Args:
        data: Flat RGBA values, row-major.
        width: Image width.
        height: Image height.
        alpha: Keep the alpha channel (4 channels instead of 3).

    Raises:
        ShapeMismatchError: If the buffer length is not ``4 * width * height``.
    """
    if not is_integer(width, 0) or not is_integer(height, 0):
        raise InvalidShapeError(f"Invalid image size {width}x{height}")
    arr = np.asarray(data)
    if arr.size != 4 * width * height:
        raise ShapeMismatchError(
            f"Pixel buffer of length {arr.size} does not match {width}x{height} RGBA"
        )
    arr = arr.reshape(int(height), int(width), 4)
    if not alpha:
        arr = arr[:, :, :3]
    dtype = DType.FLOAT64 if arr.dtype.kind == 'f' else DType.UINT8C
    return Matrix.from_array(arr, dtype=dtype)


def to_pixel_array(mat: Matrix) -> PixelArray:
    """
    Row-major RGBA ``uint8`` buffer of an image.

    One channel is gray, two channels are gray plus alpha, three are RGB
    and four RGBA; the alpha is 255 when absent.

    Raises:
        InvalidShapeError: If the image does not have 1 to 4 channels.
    """
    if not mat.is_real():
        raise ComplexUnsupportedError("to_pixel_array: complex matrices are not supported")
    if mat.ndims() > 3:
        raise InvalidShapeError(f"Image of size {mat.size} has too many dimensions")
    height, width = mat.get_size(0), mat.get_size(1)
    channels = mat.get_size(2)
    if not 1 <= channels <= 4:
        raise InvalidShapeError(f"Image must have 1 to 4 channels, got {channels}")

    a, b = mat.dtype.natural_range
    img = mat.get_real_data().astype(np.float64).reshape((height, width, channels), order='F')
    img = np.clip(np.rint((img - a) * (255.0 / (b - a))), 0, 255).astype(np.uint8)

    out = np.full((height, width, 4), 255, dtype=np.uint8)
    if channels in (1, 2):
        out[:, :, :3] = img[:, :, :1]
        if channels == 2:
            out[:, :, 3] = img[:, :, 1]
    else:
        out[:, :, :channels] = img
    return PixelArray(out.ravel(), width, height)


# =============================================================================
# Image Operations
# =============================================================================

def rgb2gray(mat: Matrix) -> Matrix:
    """
    Luminance ``0.3 R + 0.59 G + 0.11 B``; a fourth (alpha) channel is kept.

    Raises:
        InvalidShapeError: If the image does not have at least 3 channels.
    """
    if mat.ndims() != 3 or mat.get_size(2) < 3:
        raise InvalidShapeError(f"rgb2gray: image of size {mat.size} is not RGB")
    if not mat.is_real():
        raise ComplexUnsupportedError("rgb2gray: complex matrices are not supported")
    h, w, c = mat.size
    img = mat.get_real_data().astype(np.float64).reshape((h, w, c), order='F')
    gray = 0.3 * img[:, :, 0] + 0.59 * img[:, :, 1] + 0.11 * img[:, :, 2]
    out = gray[:, :, None]
    if c == 4:
        out = np.concatenate([out, img[:, :, 3:4]], axis=2)
    return mat._new(list(out.shape), out.ravel(order='F'))


def imhist(mat: Matrix, bins: int = 256) -> Matrix:
    """
    Histogram of a 2-D image over its natural range (column of counts).

    Logical images always use 2 bins.

    Raises:
        InvalidShapeError: If the matrix has more than 2 dimensions.
    """
    if not mat.is_matrix():
        raise InvalidShapeError("imhist: input must be a 2-D matrix")
    if not mat.is_real():
        raise ComplexUnsupportedError("imhist: complex matrices are not supported")
    if mat.is_logical():
        bins = 2
    if not is_integer(bins, 1):
        raise InvalidParameterError(f"imhist: bins must be a positive integer, got {bins!r}")
    bins = int(bins)
    top = mat.dtype.intmax if mat.is_integer() else 1
    values = mat.get_real_data().astype(np.float64)
    values = values[np.isfinite(values)]
    idx = np.clip(np.floor(values * bins / top), 0, bins - 1).astype(np.int64)
    counts = np.bincount(idx, minlength=bins)
    return mat._new([bins, 1], counts, dtype=mat.config.default_type)


def psnr(a: Any, b: Any, peakval: Optional[float] = None) -> float:
    """
    Peak signal-to-noise ratio in dB.

    The peak defaults to the largest natural span of the two inputs (1 for
    float images, ``intmax - intmin`` for integer ones).

    Raises:
        ShapeMismatchError: If the sizes differ.
    """
    a = to_matrix(a)
    b = to_matrix(b)
    if not check_size_equals(a.size, b.size, a.config.ignore_trailing_dims):
        raise ShapeMismatchError(f"psnr: sizes {a.size} and {b.size} differ")
    if not a.is_real() or not b.is_real():
        raise ComplexUnsupportedError("psnr: complex matrices are not supported")
    if peakval is None:
        def span(m):
            return 1 if not m.is_integer() else m.dtype.intmax - m.dtype.intmin
        peakval = max(span(a), span(b))
    diff = a.get_real_data().astype(np.float64) - b.get_real_data().astype(np.float64)
    mse = float(np.mean(diff * diff)) if diff.size else 0.0
    if mse == 0:
        return math.inf
    return 10.0 * math.log10(peakval * peakval / mse)


__all__ = [
    "PixelArray",
    "convert_image",
    "from_pixels",
    "to_pixel_array",
    "rgb2gray",
    "imhist",
    "psnr",
]
