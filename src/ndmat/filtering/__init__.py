"""
Image and signal filtering.

Kernels:
    gaussian_kernel, gaussian_size, fspecial

Separable linear filters:
    filter1d, separable_filter, gaussian, gaussian_gradient, conv

2-D windowed filters:
    filter2d, bilateral, imdilate, imerode, imopen, imclose

Constant-time smoothing:
    fast_gaussian, integral_image, block_filter, fast_blur
"""

from .kernel import gaussian_size, gaussian_kernel, fspecial
from .linear import (
    GaussianGradient,
    resolve_origin,
    filter1d,
    separable_filter,
    gaussian,
    gaussian_gradient,
    conv,
)
from .window import filter2d, bilateral, imdilate, imerode, imopen, imclose
from .recursive import fast_gaussian, integral_image, block_filter, fast_blur

__all__ = [
    # Kernels
    "gaussian_size",
    "gaussian_kernel",
    "fspecial",
    # Separable
    "GaussianGradient",
    "resolve_origin",
    "filter1d",
    "separable_filter",
    "gaussian",
    "gaussian_gradient",
    "conv",
    # Windowed
    "filter2d",
    "bilateral",
    "imdilate",
    "imerode",
    "imopen",
    "imclose",
    # Recursive
    "fast_gaussian",
    "integral_image",
    "block_filter",
    "fast_blur",
]
