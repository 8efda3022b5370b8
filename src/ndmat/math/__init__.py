"""
Mathematical operations on dense matrices.

Arithmetic:
    plus, minus, times, rdivide, ldivide, power: copying binary operators
    inplace: in-place form of a binary operator
    uminus, neg: negation and logical not
    compare: comparisons and boolean combinations (logical result)

Elementwise:
    abs, sign, sqrt, exp, log, log2, log10, cos, sin, tan, acos, asin,
    atan, atan2, hypot, floor, ceil, round, conj, isnan, isinf, isfinite,
    arrayfun

Linear algebra helpers:
    transpose, ctranspose, mtimes, norm, trace, triu, tril, diag, bsxfun
"""

from .arithmetic import (
    binary,
    plus,
    minus,
    times,
    rdivide,
    ldivide,
    power,
    inplace,
    uminus,
    neg,
    compare,
)
from .elementwise import (
    abs,
    sign,
    sqrt,
    exp,
    log,
    log2,
    log10,
    cos,
    sin,
    tan,
    acos,
    asin,
    atan,
    atan2,
    hypot,
    floor,
    ceil,
    round,
    conj,
    isnan,
    isinf,
    isfinite,
    arrayfun,
)
from .linalg import (
    transpose,
    ctranspose,
    mtimes,
    norm,
    trace,
    triu,
    tril,
    diag,
    bsxfun,
)

__all__ = [
    # Arithmetic
    "binary",
    "plus",
    "minus",
    "times",
    "rdivide",
    "ldivide",
    "power",
    "inplace",
    "uminus",
    "neg",
    "compare",
    # Elementwise
    "abs",
    "sign",
    "sqrt",
    "exp",
    "log",
    "log2",
    "log10",
    "cos",
    "sin",
    "tan",
    "acos",
    "asin",
    "atan",
    "atan2",
    "hypot",
    "floor",
    "ceil",
    "round",
    "conj",
    "isnan",
    "isinf",
    "isfinite",
    "arrayfun",
    # Linear algebra
    "transpose",
    "ctranspose",
    "mtimes",
    "norm",
    "trace",
    "triu",
    "tril",
    "diag",
    "bsxfun",
]
