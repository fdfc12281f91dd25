# src/spectconv/conv2d/kernels.py
"""Common 2D kernels: identity, box, Gaussian, Laplacian."""
from __future__ import annotations

from typing import Optional
import numpy as np

__all__ = [
    "identity_kernel",
    "box_kernel",
    "gaussian_2d",
    "laplacian_3x3",
]


ArrayLike = np.ndarray


def identity_kernel(height: int = 1, width: int = 1) -> ArrayLike:
    """
    Kernel with a single 1 at its center tap (height//2, width//2).

    Convolution with it returns the source unchanged in every mode.
    """
    if height <= 0 or width <= 0:
        raise ValueError("height and width must be positive")
    k = np.zeros((height, width), dtype=np.float64)
    k[height // 2, width // 2] = 1.0
    return k


def box_kernel(height: int, width: Optional[int] = None, normalize: bool = True) -> ArrayLike:
    """Constant (mean) filter; sums to 1 if `normalize`."""
    if width is None:
        width = height
    if height <= 0 or width <= 0:
        raise ValueError("height and width must be positive")
    k = np.ones((height, width), dtype=np.float64)
    if normalize:
        k /= k.size
    return k


# ---------------------------------------------------------------------------
# Gaussian kernel
# ---------------------------------------------------------------------------

def gaussian_2d(
    sigma: float,
    radius: Optional[int] = None,
    truncate: float = 3.0,
    normalize: bool = True,
) -> ArrayLike:
    """
    Isotropic 2D Gaussian kernel.

    Parameters
    ----------
    sigma : float
        Standard deviation in samples.
    radius : int | None
        Samples on each side of the center. If None, computed as
        round(truncate * sigma), at least 1.
    truncate : float
        Truncation in standard deviations if radius is None.
    normalize : bool
        If True, kernel sums to 1.

    Returns
    -------
    k : ndarray, shape (2*radius+1, 2*radius+1)
    """
    if sigma <= 0:
        raise ValueError("sigma must be positive")

    if radius is None:
        radius = max(1, int(round(truncate * sigma)))

    x = np.arange(-radius, radius + 1, dtype=np.float64)
    g = np.exp(-0.5 * (x / sigma) ** 2)
    k = np.outer(g, g)
    if normalize:
        k /= k.sum()
    return k


def laplacian_3x3(center_weight: float = -4.0, eight_connected: bool = False) -> ArrayLike:
    """
    Classic 3x3 Laplacian (4- or 8-connected).
    """
    edge = 1.0 if eight_connected else 0.0
    return np.array(
        [
            [edge, 1.0, edge],
            [1.0, center_weight, 1.0],
            [edge, 1.0, edge],
        ],
        dtype=np.float64,
    )
