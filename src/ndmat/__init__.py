"""
ndmat - N-dimensional matrices for numeric and image processing

Column-major N-d matrices over flat numpy storage with:
- Real and complex data (split real/imaginary halves)
- Matlab-style selectors, views and structural transforms
- Broadcasting arithmetic with in-place and copying forms
- Dimensional reductions, stable sorting and accumulation
- Image filtering: 2-D windows, separable Gaussians, recursive and box filters

Modules:
- dense: Matrix, views, construction, image helpers
- math: arithmetic, elementwise math, linear algebra helpers
- statistics: reductions, sorting, accumarray
- filtering: kernels and filters
- core: configuration and errors

Architecture:
    ┌──────────────────────────────────────────────┐
    │   Matrix (size, dtype, config, flat data)    │
    ├──────────────────────────────────────────────┤
    │  View: Regular | Indexed per dimension       │
    │  Storage: numpy 1-D, re[N] (+ im[N])         │
    └──────────────────────────────────────────────┘

Example:
    >>> import ndmat
    >>> from ndmat import Matrix
    >>>
    >>> im = Matrix([4, 4], 'uint8').plus(200)
    >>> im.im2double().gaussian(1.0).get_size()
    [4, 4]
    >>>
    >>> ndmat.zeros([3, 3]).plus(1) == ndmat.ones([3, 3])
"""

import logging

__version__ = '0.1.0'

# Import main modules
from . import core
from . import dense
from . import math
from . import statistics
from . import filtering

from ._dtypes import DType
from .core import (
    Config,
    get_config,
    set_config,
    MatrixError,
    InvalidShapeError,
    ShapeMismatchError,
    ReshapeError,
    BroadcastShapeError,
    OutOfBoundsError,
    InvalidRangeError,
    InvalidPermutationError,
    ComplexStateError,
    ComplexUnsupportedError,
    MatrixNotImplementedError,
    InvalidModeError,
    InvalidParameterError,
    KernelTooLargeError,
)

# Re-export common entry points
from .dense import (
    # Core classes
    Matrix,
    View,
    to_matrix,

    # Construction
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

    # Structure
    repmat,
    cat,
    horzcat,
    vertcat,

    # Images
    from_pixels,
    psnr,
)
from .math import bsxfun, mtimes
from .statistics import apply_dim, accumarray
from .filtering import fspecial, gaussian_kernel

__all__ = [
    # Version
    '__version__',

    # Modules
    'core',
    'dense',
    'math',
    'statistics',
    'filtering',

    # Types and configuration
    'DType',
    'Config',
    'get_config',
    'set_config',

    # Errors
    'MatrixError',
    'InvalidShapeError',
    'ShapeMismatchError',
    'ReshapeError',
    'BroadcastShapeError',
    'OutOfBoundsError',
    'InvalidRangeError',
    'InvalidPermutationError',
    'ComplexStateError',
    'ComplexUnsupportedError',
    'MatrixNotImplementedError',
    'InvalidModeError',
    'InvalidParameterError',
    'KernelTooLargeError',

    # Core classes
    'Matrix',
    'View',
    'to_matrix',

    # Construction
    'zeros',
    'ones',
    'eye',
    'rand',
    'randn',
    'randi',
    'poissrnd',
    'exprnd',
    'colon',
    'linspace',
    'complex',
    'diag',
    'seed',

    # Structure
    'repmat',
    'cat',
    'horzcat',
    'vertcat',

    # Images
    'from_pixels',
    'psnr',

    # Functions
    'bsxfun',
    'mtimes',
    'apply_dim',
    'accumarray',
    'fspecial',
    'gaussian_kernel',
]

logging.getLogger("ndmat").addHandler(logging.NullHandler())
