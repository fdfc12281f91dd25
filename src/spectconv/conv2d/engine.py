# src/spectconv/conv2d/engine.py
"""2D convolution via a single packed complex FFT: pipeline and public API."""
from __future__ import annotations

from typing import Callable, Iterable, Optional, Tuple

import numpy as np

from spectconv.core.factors import DEFAULT_FACTORS
from spectconv.core.fft import pair_spectrum_product
from spectconv.conv2d.layout import pack_circular, pack_circular_extended, pack_linear
from spectconv.conv2d.modes import ConvolutionMode, Geometry, ModeLike
from spectconv.conv2d.workspace import Workspace
from spectconv.errors import UnknownModeError

ArrayLike = np.ndarray
Packer = Callable[[np.ndarray, Geometry, np.ndarray, np.ndarray], None]

__all__ = [
    "init_workspace",
    "update_workspace",
    "clear_workspace",
    "convolve",
    "fft_convolve2d",
]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _as_matrix(x, shape: Tuple[int, int]) -> np.ndarray:
    return np.asarray(x, dtype=np.float64).reshape(shape)


def _strategy(mode: ConvolutionMode, geometry: Geometry) -> Tuple[Packer, Tuple[int, int]]:
    """
    Packing function and extraction offset for `mode`.
    """
    if mode is ConvolutionMode.LINEAR or mode is ConvolutionMode.LINEAR_OPTIMAL:
        return pack_linear, (0, 0)
    if mode is ConvolutionMode.CIRCULAR:
        return pack_circular, (0, 0)
    if mode is ConvolutionMode.CIRCULAR_OPTIMAL:
        # the extended source starts at half a kernel (rounded up)
        offset = ((geometry.kernel_height + 1) // 2, (geometry.kernel_width + 1) // 2)
        return pack_circular_extended, offset
    raise UnknownModeError(mode, ConvolutionMode.names())


def _spectral_convolve(ws: Workspace) -> np.ndarray:
    """
    Forward transform of the packed buffer, spectral product, inverse.

    Rows first, then columns, in both directions. The spatial result is
    left in ``ws.product``.
    """
    spectrum = ws.spectrum
    product = ws.product
    rows, cols = ws.row_transform, ws.col_transform

    rows.forward(spectrum)
    cols.forward(spectrum)

    pair_spectrum_product(spectrum, out=product)

    rows.inverse(product)
    cols.inverse(product)
    return product


def _extract(buf: np.ndarray, geometry: Geometry, offset: Tuple[int, int], dst: np.ndarray) -> None:
    r0, c0 = offset
    dst[...] = buf.real[r0 : r0 + geometry.src_height, c0 : c0 + geometry.src_width]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def init_workspace(
    mode: ModeLike,
    src_height: int,
    src_width: int,
    kernel_height: int,
    kernel_width: int,
    *,
    factors: Iterable[int] = DEFAULT_FACTORS,
) -> Workspace:
    """
    Allocate a workspace for `mode` and the given source/kernel shapes.

    Equivalent to constructing :class:`Workspace` directly.
    """
    return Workspace(mode, src_height, src_width, kernel_height, kernel_width, factors=factors)


def update_workspace(
    ws: Workspace,
    mode: ModeLike,
    src_height: int,
    src_width: int,
    kernel_height: int,
    kernel_width: int,
    *,
    factors: Optional[Iterable[int]] = None,
) -> Workspace:
    """Rebuild `ws` for a new mode/shape (atomic, see :meth:`Workspace.update`)."""
    return ws.update(mode, src_height, src_width, kernel_height, kernel_width, factors=factors)


def clear_workspace(ws: Workspace) -> None:
    """Release every resource owned by `ws`."""
    ws.clear()


def convolve(
    ws: Workspace,
    src: ArrayLike,
    kernel: ArrayLike,
    dst: Optional[ArrayLike] = None,
) -> ArrayLike:
    """
    Convolve `src` with `kernel` using the mode and shapes stored in `ws`.

    The kernel is centered: output (i, j) sums
    ``kernel[m, n] * src[i - m + kh//2, j - n + kw//2]`` with zero boundary
    (linear modes) or periodic boundary (circular modes).

    Parameters
    ----------
    ws : Workspace
        Active workspace created for exactly these source/kernel shapes.
        Shapes are not validated beyond numpy's reshape of the inputs.
    src : array_like
        Source, 2D (H, W) or flat row-major of H*W values.
    kernel : array_like
        Kernel, 2D (kh, kw) or flat row-major.
    dst : ndarray, optional
        Pre-allocated float64 C-contiguous output of H*W values (flat or
        2D). Allocated when omitted.

    Returns
    -------
    ndarray
        `dst` when given, otherwise a new (H, W) array.

    Raises
    ------
    UnknownModeError
        If the workspace holds a mode outside the four supported ones.
    WorkspaceStateError
        If the workspace has been cleared.
    """
    geometry = ws.geometry
    packer, offset = _strategy(ws.mode, geometry)

    src2d = _as_matrix(src, geometry.src_shape)
    ker2d = _as_matrix(kernel, geometry.kernel_shape)

    packer(ws.spectrum, geometry, src2d, ker2d)
    result = _spectral_convolve(ws)

    if dst is None:
        out = np.empty(geometry.src_shape, dtype=np.float64)
        _extract(result, geometry, offset, out)
        return out

    view = dst.reshape(geometry.src_shape)
    if not np.shares_memory(view, dst):
        raise ValueError("dst must be a C-contiguous array the result can be written into")
    _extract(result, geometry, offset, view)
    return dst


def fft_convolve2d(
    src: ArrayLike,
    kernel: ArrayLike,
    mode: ModeLike = "linear",
    *,
    factors: Iterable[int] = DEFAULT_FACTORS,
) -> ArrayLike:
    """
    One-shot convolution of two 2D arrays.

    Builds a workspace for the input shapes, convolves once and releases
    it. Use :class:`Workspace` with :func:`convolve` to amortize allocation
    over repeated convolutions of the same shapes.
    """
    src2d = np.asarray(src, dtype=np.float64)
    ker2d = np.asarray(kernel, dtype=np.float64)
    if src2d.ndim != 2 or ker2d.ndim != 2:
        raise ValueError(
            f"Expected 2D source and kernel, got shapes {src2d.shape} and {ker2d.shape}"
        )
    with Workspace(mode, *src2d.shape, *ker2d.shape, factors=factors) as ws:
        return convolve(ws, src2d, ker2d)
