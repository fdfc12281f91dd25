# src/spectconv/conv2d/modes.py
"""Convolution modes and the working-size geometry they imply."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple, Union

from spectconv.core.factors import DEFAULT_FACTORS, find_closest_factor, normalize_factors
from spectconv.errors import UnknownModeError

__all__ = ["ConvolutionMode", "ModeLike", "Geometry"]


class ConvolutionMode(Enum):
    LINEAR = "linear"
    LINEAR_OPTIMAL = "linear-optimal"
    CIRCULAR = "circular"
    CIRCULAR_OPTIMAL = "circular-optimal"

    @classmethod
    def names(cls) -> Tuple[str, ...]:
        return tuple(m.value for m in cls)

    @classmethod
    def coerce(cls, value: "ModeLike") -> "ConvolutionMode":
        """
        Accept a member or its string value ("linear", "LINEAR_OPTIMAL", ...).

        Raises
        ------
        UnknownModeError
            For anything outside the four modes.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "-")
            for m in cls:
                if m.value == key:
                    return m
        raise UnknownModeError(value, cls.names())

    @property
    def is_optimal(self) -> bool:
        return self in (ConvolutionMode.LINEAR_OPTIMAL, ConvolutionMode.CIRCULAR_OPTIMAL)

    @property
    def is_circular(self) -> bool:
        return self in (ConvolutionMode.CIRCULAR, ConvolutionMode.CIRCULAR_OPTIMAL)


ModeLike = Union[ConvolutionMode, str]


def _positive(name: str, value: int) -> int:
    if isinstance(value, bool) or int(value) != value or int(value) < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class Geometry:
    """
    Source, kernel and working extents of one convolution.

    Attributes
    ----------
    src_height, src_width : int
        Source (and destination) shape.
    kernel_height, kernel_width : int
        Kernel shape.
    working_height, working_width : int
        Extent of the complex buffers the transforms run on.
    """
    src_height: int
    src_width: int
    kernel_height: int
    kernel_width: int
    working_height: int
    working_width: int

    @property
    def src_shape(self) -> Tuple[int, int]:
        return (self.src_height, self.src_width)

    @property
    def kernel_shape(self) -> Tuple[int, int]:
        return (self.kernel_height, self.kernel_width)

    @property
    def working_shape(self) -> Tuple[int, int]:
        return (self.working_height, self.working_width)

    @staticmethod
    def required_length(mode: ConvolutionMode, src_len: int, kernel_len: int) -> int:
        """
        Minimal working length along one axis.

        Linear modes need room for the half kernel that overhangs the
        source (``src + (kernel+1)//2``); circular modes reserve a full
        kernel (``src + kernel``).
        """
        if mode.is_circular:
            return src_len + kernel_len
        return src_len + (kernel_len + 1) // 2

    @classmethod
    def for_mode(
        cls,
        mode: ModeLike,
        src_height: int,
        src_width: int,
        kernel_height: int,
        kernel_width: int,
        factors: Iterable[int] = DEFAULT_FACTORS,
    ) -> "Geometry":
        """
        Geometry for `mode`. Optimal modes round each working length up to
        the nearest product of `factors`.
        """
        mode = ConvolutionMode.coerce(mode)
        sh = _positive("src_height", src_height)
        sw = _positive("src_width", src_width)
        kh = _positive("kernel_height", kernel_height)
        kw = _positive("kernel_width", kernel_width)

        wh = cls.required_length(mode, sh, kh)
        ww = cls.required_length(mode, sw, kw)
        if mode.is_optimal:
            factors = normalize_factors(factors)
            wh = find_closest_factor(wh, factors)
            ww = find_closest_factor(ww, factors)

        return cls(sh, sw, kh, kw, wh, ww)
