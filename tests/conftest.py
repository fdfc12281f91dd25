# tests/conftest.py
from __future__ import annotations

import numpy as np
import pytest

from spectconv.conv2d.modes import ConvolutionMode

ALL_MODES = list(ConvolutionMode)
LINEAR_MODES = [ConvolutionMode.LINEAR, ConvolutionMode.LINEAR_OPTIMAL]
CIRCULAR_MODES = [ConvolutionMode.CIRCULAR, ConvolutionMode.CIRCULAR_OPTIMAL]

# (source shape, kernel shape) pairs, odd/even/rectangular and kernels
# larger than the source
SHAPE_CASES = [
    ((4, 4), (3, 3)),
    ((5, 7), (3, 3)),
    ((6, 5), (4, 2)),
    ((8, 8), (5, 5)),
    ((3, 4), (1, 1)),
    ((2, 3), (6, 5)),
    ((1, 1), (5, 4)),
    ((10, 9), (2, 6)),
]


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
