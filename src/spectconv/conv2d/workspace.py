# src/spectconv/conv2d/workspace.py
"""Workspace: buffers and transform state sized for one (mode, geometry)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from spectconv.core.factors import DEFAULT_FACTORS, normalize_factors
from spectconv.core.fft import AxisTransform
from spectconv.conv2d.modes import ConvolutionMode, Geometry, ModeLike
from spectconv.errors import WorkspaceStateError

__all__ = ["Workspace"]

logger = logging.getLogger(__name__)


@dataclass
class _Resources:
    spectrum: np.ndarray
    product: np.ndarray
    row_transform: AxisTransform
    col_transform: AxisTransform

    @classmethod
    def allocate(cls, geometry: Geometry) -> "_Resources":
        shape = geometry.working_shape
        return cls(
            spectrum=np.zeros(shape, dtype=np.complex128),
            product=np.zeros(shape, dtype=np.complex128),
            row_transform=AxisTransform(geometry.working_width, axis=1),
            col_transform=AxisTransform(geometry.working_height, axis=0),
        )

    def release(self) -> None:
        self.row_transform.release()
        self.col_transform.release()


class Workspace:
    """
    Everything one convolution shape needs, acquired at construction.

    A workspace is bound to a single mode and a single (source, kernel)
    shape. It owns two complex working buffers (the packed spectrum and the
    product spectrum) plus one row and one column transform. Use it as a
    context manager, or call :meth:`clear` exactly once when done.

    Buffers are mutated in place by every convolution: do not share one
    workspace between concurrent callers.

    Parameters
    ----------
    mode : ConvolutionMode | str
        One of "linear", "linear-optimal", "circular", "circular-optimal".
    src_height, src_width : int
        Source shape.
    kernel_height, kernel_width : int
        Kernel shape.
    factors : iterable of int
        Allowed factors for the optimal modes' working sizes.
    """

    def __init__(
        self,
        mode: ModeLike,
        src_height: int,
        src_width: int,
        kernel_height: int,
        kernel_width: int,
        *,
        factors: Iterable[int] = DEFAULT_FACTORS,
    ):
        self._resources: Optional[_Resources] = None
        self._mode, self._geometry, self._factors, self._resources = self._build(
            mode, src_height, src_width, kernel_height, kernel_width, factors
        )
        logger.debug("Allocated workspace mode=%s geometry=%s", self._mode.value, self._geometry)

    @staticmethod
    def _build(mode, src_height, src_width, kernel_height, kernel_width, factors):
        mode = ConvolutionMode.coerce(mode)
        factors = normalize_factors(factors)
        geometry = Geometry.for_mode(
            mode, src_height, src_width, kernel_height, kernel_width, factors=factors
        )
        return mode, geometry, factors, _Resources.allocate(geometry)

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def update(
        self,
        mode: ModeLike,
        src_height: int,
        src_width: int,
        kernel_height: int,
        kernel_width: int,
        *,
        factors: Optional[Iterable[int]] = None,
    ) -> "Workspace":
        """
        Rebind to a new mode/shape. Nothing is reused from the old state.

        The new state is fully built before the old one is released, so a
        failure (invalid arguments, ``MemoryError``) leaves the workspace
        exactly as it was. `factors` defaults to the current factor set.
        """
        if factors is None:
            factors = self._factors
        built = self._build(mode, src_height, src_width, kernel_height, kernel_width, factors)
        old = self._resources
        self._mode, self._geometry, self._factors, self._resources = built
        if old is not None:
            old.release()
        logger.debug("Updated workspace mode=%s geometry=%s", self._mode.value, self._geometry)
        return self

    def clear(self) -> None:
        """Release every owned resource. A second call raises."""
        if self._resources is None:
            raise WorkspaceStateError("Workspace has already been cleared")
        self._resources.release()
        self._resources = None
        logger.debug("Released workspace mode=%s geometry=%s", self._mode.value, self._geometry)

    @property
    def is_active(self) -> bool:
        return self._resources is not None

    def __enter__(self) -> "Workspace":
        self._live()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.is_active:
            self.clear()

    def __repr__(self) -> str:
        state = "active" if self.is_active else "cleared"
        return f"Workspace(mode={self._mode.value!r}, geometry={self._geometry}, {state})"

    # ------------------------------------------------------------------
    # accessors
    # ------------------------------------------------------------------

    def _live(self) -> _Resources:
        if self._resources is None:
            raise WorkspaceStateError("Workspace has been cleared; create or update it first")
        return self._resources

    @property
    def mode(self) -> ConvolutionMode:
        return self._mode

    @property
    def geometry(self) -> Geometry:
        return self._geometry

    @property
    def factors(self):
        return self._factors

    @property
    def spectrum(self) -> np.ndarray:
        """Packed (source, kernel) buffer; holds its spectrum after the forward pass."""
        return self._live().spectrum

    @property
    def product(self) -> np.ndarray:
        """Product-spectrum buffer; holds the spatial result after the inverse pass."""
        return self._live().product

    @property
    def row_transform(self) -> AxisTransform:
        return self._live().row_transform

    @property
    def col_transform(self) -> AxisTransform:
        return self._live().col_transform
