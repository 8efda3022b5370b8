"""
Dense N-d matrices.

Matrix:
    Matrix: column-major N-d array over real or complex storage
    View: coordinate-to-offset mapping (Regular / Indexed dimensions)

Construction:
    zeros, ones, eye, rand, randn, randi, poissrnd, exprnd,
    colon, linspace, complex, diag, seed

Structure:
    repmat, cat, horzcat, vertcat

Images:
    convert_image, from_pixels, to_pixel_array, rgb2gray, imhist, psnr
"""

from ._view import Regular, Indexed, View, ViewIterator
from ._matrix import Matrix, to_matrix
from ._construct import (
    zeros,
    ones,
    eye,
    rand,
    randn,
    randi,
    poissrnd,
    exprnd,
    colon,
    linspace,
    complex,
    diag,
    seed,
)
from ._select import repmat, cat, horzcat, vertcat
from ._image import (
    PixelArray,
    convert_image,
    from_pixels,
    to_pixel_array,
    rgb2gray,
    imhist,
    psnr,
)

__all__ = [
    # Core
    "Matrix",
    "to_matrix",
    "View",
    "ViewIterator",
    "Regular",
    "Indexed",
    # Construction
    "zeros",
    "ones",
    "eye",
    "rand",
    "randn",
    "randi",
    "poissrnd",
    "exprnd",
    "colon",
    "linspace",
    "complex",
    "diag",
    "seed",
    # Structure
    "repmat",
    "cat",
    "horzcat",
    "vertcat",
    # Images
    "PixelArray",
    "convert_image",
    "from_pixels",
    "to_pixel_array",
    "rgb2gray",
    "imhist",
    "psnr",
]
