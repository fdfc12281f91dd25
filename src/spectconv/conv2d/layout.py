# src/spectconv/conv2d/layout.py
"""
Packing of a real source and a real kernel into one complex buffer.

The source goes to the real channel and the kernel to the imaginary channel,
so a single complex 2-D transform yields both spectra. Modes differ only in
where the samples land:

- linear            : source at the origin, zero padding, centered kernel
- circular          : as linear, with the padding band filled periodically
- circular-extended : periodically extended source, then as linear
"""
from __future__ import annotations

import numpy as np

from spectconv.conv2d.modes import Geometry

ArrayLike = np.ndarray

__all__ = [
    "centered_indices",
    "periodic_band_indices",
    "extended_indices",
    "place_kernel_centered",
    "pack_linear",
    "pack_circular",
    "pack_circular_extended",
]


# ---------------------------------------------------------------------------
# Index maps (one axis at a time; 2D placements use np.ix_)
# ---------------------------------------------------------------------------

def centered_indices(kernel_len: int, working_len: int) -> np.ndarray:
    """
    Buffer positions of the kernel taps with the center tap at 0.

    Tap m lands on ``(m - kernel_len // 2) mod working_len``: taps left of
    (or above) the center wrap to the far end of the axis.
    """
    return (np.arange(kernel_len) - kernel_len // 2) % working_len


def periodic_band_indices(src_len: int, kernel_len: int, working_len: int) -> np.ndarray:
    """
    Source index read at every buffer position for circular packing.

    Positions ``[0, src_len)`` hold the source itself. The band beyond it is
    shared by two wraparounds of a centered kernel: positions just past the
    source are read as positive overflow (``p mod src_len``), positions at
    the far end as negative indices (``(p - working_len) mod src_len``).
    The two uses never overlap when ``working_len >= src_len + kernel_len``.
    """
    p = np.arange(working_len)
    overflow_end = src_len + kernel_len // 2
    return np.where(p < overflow_end, p, p - working_len) % src_len


def extended_indices(src_len: int, kernel_len: int) -> np.ndarray:
    """
    Source index of each sample of a periodically extended source.

    The extension has ``src_len + kernel_len`` samples; sample e reads
    ``(e - (kernel_len + 1) // 2) mod src_len``, so the original source
    starts at offset ``(kernel_len + 1) // 2``.
    """
    return (np.arange(src_len + kernel_len) - (kernel_len + 1) // 2) % src_len


# ---------------------------------------------------------------------------
# Packing strategies
# ---------------------------------------------------------------------------

def place_kernel_centered(buf: ArrayLike, kernel: ArrayLike) -> None:
    """
    Write `kernel` into the imaginary channel of `buf`, centered on (0, 0).

    Taps aliasing onto the same cell (kernel larger than the buffer)
    accumulate, which keeps the buffer equal to the periodized kernel.
    """
    H, W = buf.shape
    kh, kw = kernel.shape
    rows = centered_indices(kh, H)
    cols = centered_indices(kw, W)
    if kh <= H and kw <= W:
        buf.imag[np.ix_(rows, cols)] = kernel
    else:
        np.add.at(buf.imag, (rows[:, None], cols[None, :]), kernel)


def pack_linear(buf: ArrayLike, geometry: Geometry, src: ArrayLike, kernel: ArrayLike) -> None:
    """Zero-padded source at the origin, centered wrapped kernel."""
    buf.fill(0.0)
    buf.real[: geometry.src_height, : geometry.src_width] = src
    place_kernel_centered(buf, kernel)


def pack_circular(buf: ArrayLike, geometry: Geometry, src: ArrayLike, kernel: ArrayLike) -> None:
    """
    Source at its natural position with periodic wraparound in the padding
    band, kernel split into four quadrants around its center.
    """
    buf.fill(0.0)
    rows = periodic_band_indices(geometry.src_height, geometry.kernel_height, geometry.working_height)
    cols = periodic_band_indices(geometry.src_width, geometry.kernel_width, geometry.working_width)
    buf.real = src[np.ix_(rows, cols)]

    # quadrants: columns left of center go to the rightmost columns, rows
    # above center to the bottom rows
    H, W = buf.shape
    ch = geometry.kernel_height // 2
    cw = geometry.kernel_width // 2
    buf.imag[H - ch :, W - cw :] = kernel[:ch, :cw]
    buf.imag[: geometry.kernel_height - ch, W - cw :] = kernel[ch:, :cw]
    buf.imag[H - ch :, : geometry.kernel_width - cw] = kernel[:ch, cw:]
    buf.imag[: geometry.kernel_height - ch, : geometry.kernel_width - cw] = kernel[ch:, cw:]


def pack_circular_extended(buf: ArrayLike, geometry: Geometry, src: ArrayLike, kernel: ArrayLike) -> None:
    """
    Periodically extended source of (src + kernel) samples per axis,
    packed like :func:`pack_linear`.
    """
    rows = extended_indices(geometry.src_height, geometry.kernel_height)
    cols = extended_indices(geometry.src_width, geometry.kernel_width)
    extended = src[np.ix_(rows, cols)]

    buf.fill(0.0)
    buf.real[: extended.shape[0], : extended.shape[1]] = extended
    place_kernel_centered(buf, kernel)
