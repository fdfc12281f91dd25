# src/spectconv/conv2d/direct.py
"""Spatial-domain (direct) 2D convolution used as a reference."""
from __future__ import annotations

import numpy as np

ArrayLike = np.ndarray

__all__ = ["direct_convolve"]


def _ensure_2d(x: ArrayLike) -> ArrayLike:
    x = np.asarray(x, dtype=np.float64)
    if x.ndim != 2:
        raise ValueError(f"Expected 2D array for conv, got shape {x.shape}")
    return x


def _shifted_linear(src: ArrayLike, dr: int, dc: int) -> ArrayLike:
    """``out[i, j] = src[i - dr, j - dc]``, zero outside the source."""
    H, W = src.shape
    out = np.zeros_like(src)
    r_lo, r_hi = max(0, dr), min(H, H + dr)
    c_lo, c_hi = max(0, dc), min(W, W + dc)
    if r_lo < r_hi and c_lo < c_hi:
        out[r_lo:r_hi, c_lo:c_hi] = src[r_lo - dr : r_hi - dr, c_lo - dc : c_hi - dc]
    return out


def direct_convolve(src: ArrayLike, kernel: ArrayLike, circular: bool = False) -> ArrayLike:
    """
    Centered 2D convolution computed tap by tap in the spatial domain.

    Output has the source's shape::

        y[i, j] = sum_{m, n} kernel[m, n] * src[i - m + kh//2, j - n + kw//2]

    Parameters
    ----------
    src : ndarray, shape (H, W)
        Source.
    kernel : ndarray, shape (kh, kw)
        Kernel.
    circular : bool
        If True, source indices wrap around (periodic boundary); otherwise
        samples outside the source are zero.

    Returns
    -------
    y : ndarray, shape (H, W)
    """
    src = _ensure_2d(src)
    kernel = _ensure_2d(kernel)
    kh, kw = kernel.shape
    ch, cw = kh // 2, kw // 2

    y = np.zeros_like(src)
    for m in range(kh):
        for n in range(kw):
            w = kernel[m, n]
            if w == 0.0:
                continue
            dr, dc = m - ch, n - cw
            if circular:
                y += w * np.roll(src, (dr, dc), axis=(0, 1))
            else:
                y += w * _shifted_linear(src, dr, dc)
    return y
