"""
spectconv.core
==============

Low-level computational primitives.

Submodules
----------
- :mod:`spectconv.core.factors` : FFT-friendly working-size selection.
- :mod:`spectconv.core.fft`     : Per-axis transform state and the packed
  real-pair spectral product.
"""

from .factors import (
    DEFAULT_FACTORS,
    normalize_factors,
    factorize,
    is_composite_of,
    find_closest_factor,
)
from .fft import (
    AxisTransform,
    mirror_indices,
    pair_spectrum_product,
)

__all__ = [
    # factors
    "DEFAULT_FACTORS",
    "normalize_factors",
    "factorize",
    "is_composite_of",
    "find_closest_factor",
    # fft
    "AxisTransform",
    "mirror_indices",
    "pair_spectrum_product",
]
