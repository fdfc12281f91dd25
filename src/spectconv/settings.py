# src/spectconv/settings.py
"""Engine settings stored as JSON objects or two-column CSV files."""
from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Tuple

from spectconv.core.factors import DEFAULT_FACTORS, normalize_factors
from spectconv.conv2d.modes import ConvolutionMode
from spectconv.conv2d.workspace import Workspace
from spectconv.errors import SettingsError, UnknownModeError

__all__ = ["EngineSettings", "load_settings", "save_settings"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineSettings:
    """
    Mode and working-size factor set used to build workspaces.

    Attributes
    ----------
    mode : ConvolutionMode
        Convolution mode.
    factors : tuple[int, ...]
        Allowed factors for the optimal modes' working sizes.
    """
    mode: ConvolutionMode = ConvolutionMode.LINEAR
    factors: Tuple[int, ...] = field(default=DEFAULT_FACTORS)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineSettings":
        unknown = set(data) - {"mode", "factors"}
        if unknown:
            raise SettingsError(f"Unknown settings keys: {sorted(unknown)}")
        try:
            mode = ConvolutionMode.coerce(data.get("mode", ConvolutionMode.LINEAR))
        except UnknownModeError as exc:
            raise SettingsError(str(exc)) from exc
        raw_factors = data.get("factors", DEFAULT_FACTORS)
        if isinstance(raw_factors, (str, bytes)) or not hasattr(raw_factors, "__iter__"):
            raise SettingsError(f"'factors' must be a list of integers, got {raw_factors!r}")
        try:
            factors = normalize_factors(raw_factors)
        except (TypeError, ValueError) as exc:
            raise SettingsError(f"Invalid 'factors': {exc}") from exc
        return cls(mode=mode, factors=factors)

    def to_dict(self) -> dict[str, Any]:
        return {"mode": self.mode.value, "factors": list(self.factors)}

    def workspace(
        self,
        src_height: int,
        src_width: int,
        kernel_height: int,
        kernel_width: int,
    ) -> Workspace:
        return Workspace(
            self.mode, src_height, src_width, kernel_height, kernel_width, factors=self.factors
        )


def _parse_csv_value(raw: str) -> Any:
    text = raw.strip()
    if text == "":
        return ""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _load_csv(path: Path) -> dict[str, Any]:
    data: dict[str, Any] = {}
    with path.open("r", newline="", encoding="utf-8") as handle:
        reader = csv.reader(handle)
        for row in reader:
            if not row:
                continue
            key = row[0].strip()
            if not key:
                continue
            if key.lower() in {"key", "name"} and len(row) > 1:
                if row[1].strip().lower() in {"value", "val"}:
                    continue
            if len(row) < 2:
                data[key] = ""
                continue
            data[key] = _parse_csv_value(row[1])
    return data


def _save_csv(path: Path, data: dict[str, Any]) -> None:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["key", "value"])
        for key in sorted(data):
            writer.writerow([key, json.dumps(data[key], ensure_ascii=True)])


def load_settings(path: str | Path) -> EngineSettings:
    """
    Read settings from a ``.json`` object or a ``key,value`` ``.csv`` file.

    Raises
    ------
    SettingsError
        If the file is missing, unparsable or holds invalid values.
    """
    path = Path(path)
    if not path.exists():
        raise SettingsError(f"Settings file not found: {path}")

    if path.suffix.lower() == ".csv":
        data = _load_csv(path)
    else:
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise SettingsError(f"Settings file is not valid JSON: {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file must be a JSON object: {path}")

    settings = EngineSettings.from_dict(data)
    logger.debug("Loaded settings from %s: %s", path, settings)
    return settings


def save_settings(path: str | Path, settings: EngineSettings) -> Path:
    """Write `settings` as JSON, or as CSV if `path` ends in ``.csv``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = settings.to_dict()
    if path.suffix.lower() == ".csv":
        _save_csv(path, data)
    else:
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, sort_keys=True)
            handle.write("\n")
    logger.debug("Saved settings to %s", path)
    return path
