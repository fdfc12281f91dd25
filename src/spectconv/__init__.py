"""
spectconv
2D FFT convolution with source and kernel packed into one complex transform.
"""

# Robust version detection that works even when not installed
try:
    from importlib import metadata as _metadata
except Exception:
    _metadata = None  # type: ignore

try:
    __version__ = _metadata.version("spectconv") if _metadata else "0.0.0.dev0"
except Exception:
    # Not installed (dev mode) or no metadata available
    __version__ = "0.0.0.dev0"

from . import core, conv2d  # noqa: E402
from .core.factors import DEFAULT_FACTORS, find_closest_factor  # noqa: E402
from .conv2d import (  # noqa: E402
    ConvolutionMode,
    Geometry,
    Workspace,
    init_workspace,
    update_workspace,
    clear_workspace,
    convolve,
    fft_convolve2d,
    direct_convolve,
)
from .errors import (  # noqa: E402
    SpectconvError,
    UnknownModeError,
    WorkspaceStateError,
    SettingsError,
)

__all__ = [
    "core",
    "conv2d",
    "DEFAULT_FACTORS",
    "find_closest_factor",
    "ConvolutionMode",
    "Geometry",
    "Workspace",
    "init_workspace",
    "update_workspace",
    "clear_workspace",
    "convolve",
    "fft_convolve2d",
    "direct_convolve",
    "SpectconvError",
    "UnknownModeError",
    "WorkspaceStateError",
    "SettingsError",
    "__version__",
]
