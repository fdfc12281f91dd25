"""
spectconv.conv2d
================

2D convolution through a single packed complex FFT.

Submodules
----------
- :mod:`spectconv.conv2d.modes`     : Convolution modes and working geometry.
- :mod:`spectconv.conv2d.workspace` : Buffers and transform state per shape.
- :mod:`spectconv.conv2d.layout`    : Packing of source/kernel per mode.
- :mod:`spectconv.conv2d.engine`    : Spectral pipeline and public API.
- :mod:`spectconv.conv2d.direct`    : Spatial-domain reference convolution.
- :mod:`spectconv.conv2d.kernels`   : Common kernels.
"""

from .modes import ConvolutionMode, Geometry
from .workspace import Workspace
from .engine import (
    init_workspace,
    update_workspace,
    clear_workspace,
    convolve,
    fft_convolve2d,
)
from .direct import direct_convolve
from .kernels import (
    identity_kernel,
    box_kernel,
    gaussian_2d,
    laplacian_3x3,
)

__all__ = [
    # modes / workspace
    "ConvolutionMode",
    "Geometry",
    "Workspace",
    # engine
    "init_workspace",
    "update_workspace",
    "clear_workspace",
    "convolve",
    "fft_convolve2d",
    # reference
    "direct_convolve",
    # kernels
    "identity_kernel",
    "box_kernel",
    "gaussian_2d",
    "laplacian_3x3",
]
