"""
Reductions, sorting and accumulation.

Reductions:
    apply_dim: generic column-wise fold or scan along a dimension
    sum, prod, mean, min, max, argmin, argmax, amin, amax
    variance, std, cumsum, cumprod

Sorting:
    sort (in place), asort (permutation), median

Accumulation:
    accumarray
"""

from .reduce import (
    apply_dim,
    sum,
    prod,
    mean,
    min,
    max,
    argmin,
    argmax,
    amin,
    amax,
    variance,
    std,
    cumsum,
    cumprod,
)
from .sort import sort, asort, median
from .accum import accumarray

__all__ = [
    # Reductions
    "apply_dim",
    "sum",
    "prod",
    "mean",
    "min",
    "max",
    "argmin",
    "argmax",
    "amin",
    "amax",
    "variance",
    "std",
    "cumsum",
    "cumprod",
    # Sorting
    "sort",
    "asort",
    "median",
    # Accumulation
    "accumarray",
]
