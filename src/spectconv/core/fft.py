# src/spectconv/core/fft.py
"""Per-axis FFT state and the packed real-pair spectral product."""
from __future__ import annotations

from typing import Optional, Tuple
import numpy as np
from scipy import fft as sp_fft

from spectconv.core.factors import DEFAULT_FACTORS, factorize

ArrayLike = np.ndarray

__all__ = [
    "AxisTransform",
    "mirror_indices",
    "pair_spectrum_product",
]


# ---------------------------------------------------------------------------
# 1-D transform state
# ---------------------------------------------------------------------------

class AxisTransform:
    """
    Reusable complex 1-D DFT along one axis of a 2-D working buffer.

    One instance serves every row (``axis=1``) or every column (``axis=0``)
    of a buffer whose extent along `axis` equals `length`. The instance
    keeps the mixed-radix decomposition of its length and a scratch buffer
    reused across calls.

    Parameters
    ----------
    length : int
        Transform length (buffer extent along `axis`).
    axis : {0, 1}
        0 transforms columns, 1 transforms rows.
    """

    def __init__(self, length: int, axis: int):
        length = int(length)
        if length < 1:
            raise ValueError(f"Transform length must be >= 1, got {length}")
        if axis not in (0, 1):
            raise ValueError(f"axis must be 0 or 1, got {axis!r}")
        self.length = length
        self.axis = axis
        self.radices: Optional[Tuple[int, ...]] = factorize(length, DEFAULT_FACTORS)
        self._scratch: Optional[np.ndarray] = None

    @property
    def is_fast(self) -> bool:
        """True if the length factors fully into small radices."""
        return self.radices is not None

    def __repr__(self) -> str:
        return f"AxisTransform(length={self.length}, axis={self.axis}, radices={self.radices})"

    def _check(self, buf: np.ndarray) -> None:
        if buf.ndim != 2 or buf.shape[self.axis] != self.length:
            raise ValueError(
                f"Buffer shape {buf.shape} does not match transform length "
                f"{self.length} along axis {self.axis}"
            )

    def _scratch_for(self, buf: np.ndarray) -> np.ndarray:
        if self._scratch is None or self._scratch.shape != buf.shape:
            self._scratch = np.empty(buf.shape, dtype=np.complex128)
        return self._scratch

    def forward(self, buf: np.ndarray) -> np.ndarray:
        """Forward transform of `buf` along the axis, in place."""
        self._check(buf)
        scratch = self._scratch_for(buf)
        scratch[...] = buf
        buf[...] = sp_fft.fft(scratch, axis=self.axis, overwrite_x=True)
        return buf

    def inverse(self, buf: np.ndarray) -> np.ndarray:
        """Inverse transform (normalized by 1/length) along the axis, in place."""
        self._check(buf)
        scratch = self._scratch_for(buf)
        scratch[...] = buf
        buf[...] = sp_fft.ifft(scratch, axis=self.axis, overwrite_x=True)
        return buf

    def release(self) -> None:
        self._scratch = None


# ---------------------------------------------------------------------------
# Spectral product
# ---------------------------------------------------------------------------

def mirror_indices(n: int) -> np.ndarray:
    """
    Index map k -> (-k) mod n, i.e. ``[0, n-1, n-2, ..., 1]``.
    """
    n = int(n)
    if n <= 0:
        raise ValueError("Empty axis has no mirror indices.")
    idx = np.empty(n, dtype=np.intp)
    idx[0] = 0
    if n > 1:
        idx[1:] = np.arange(n - 1, 0, -1)
    return idx


def pair_spectrum_product(spectrum: ArrayLike, out: Optional[ArrayLike] = None) -> ArrayLike:
    """
    Convolution spectrum A*B from the transform Z of a packed real pair.

    The spatial buffer held signal ``a`` in its real channel and ``b`` in its
    imaginary channel, so ``Z = A + iB``. With ``Zs`` the conjugate of Z at
    the Hermitian-mirrored index ((-i) mod H, (-j) mod W), both spectra are
    recoverable as ``A = (Z + Zs)/2`` and ``B = (Z - Zs)/2i``; their product
    is evaluated directly as::

        re(A*B) =  0.5  * (Re Z * Im Z - Re Zs * Im Zs)
        im(A*B) = -0.25 * (Re Z^2 - Im Z^2 - Re Zs^2 + Im Zs^2)

    Parameters
    ----------
    spectrum : ndarray, complex, shape (H, W)
        Unshifted 2-D spectrum of the packed pair.
    out : ndarray, complex, shape (H, W), optional
        Destination buffer. Must not alias `spectrum`.

    Returns
    -------
    ndarray
        The product spectrum (`out` when given).
    """
    Z = np.asarray(spectrum)
    if Z.ndim != 2:
        raise ValueError(f"Expected 2D spectrum, got shape {Z.shape}")
    if out is None:
        out = np.empty(Z.shape, dtype=np.complex128)
    elif out.shape != Z.shape:
        raise ValueError(f"out shape {out.shape} does not match spectrum shape {Z.shape}")
    elif np.may_share_memory(out, Z):
        raise ValueError("out must not share memory with spectrum")

    H, W = Z.shape
    mirrored = Z[np.ix_(mirror_indices(H), mirror_indices(W))]

    re_h = Z.real
    im_h = Z.imag
    re_hs = mirrored.real
    im_hs = -mirrored.imag

    out.real = 0.5 * (re_h * im_h - re_hs * im_hs)
    out.imag = -0.25 * (re_h * re_h - im_h * im_h - re_hs * re_hs + im_hs * im_hs)
    return out
