# src/spectconv/errors.py
"""Exception types raised by spectconv."""
from __future__ import annotations

from typing import Iterable

__all__ = [
    "SpectconvError",
    "UnknownModeError",
    "WorkspaceStateError",
    "SettingsError",
]


class SpectconvError(Exception):
    """Base class for all spectconv errors."""


class UnknownModeError(SpectconvError, ValueError):
    """
    Raised for a convolution mode outside the closed mode set.

    The message lists the valid modes so the caller can recover.
    """

    def __init__(self, value: object, valid: Iterable[str]):
        self.value = value
        self.valid = tuple(valid)
        super().__init__(
            f"Unrecognized convolution mode {value!r}, possible modes are: "
            + ", ".join(self.valid)
        )


class WorkspaceStateError(SpectconvError, RuntimeError):
    """Raised when a released workspace is used or released again."""


class SettingsError(SpectconvError, ValueError):
    """Raised for a missing or malformed settings file."""
