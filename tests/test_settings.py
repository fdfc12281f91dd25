# tests/test_settings.py
import json

import pytest

from spectconv.conv2d.modes import ConvolutionMode
from spectconv.core.factors import DEFAULT_FACTORS
from spectconv.errors import SettingsError
from spectconv.settings import EngineSettings, load_settings, save_settings


def test_defaults():
    s = EngineSettings()
    assert s.mode is ConvolutionMode.LINEAR
    assert s.factors == DEFAULT_FACTORS


@pytest.mark.parametrize("suffix", [".json", ".csv"])
def test_save_and_load(tmp_path, suffix):
    s = EngineSettings(mode=ConvolutionMode.CIRCULAR_OPTIMAL, factors=(5, 3, 2))
    path = save_settings(tmp_path / f"engine{suffix}", s)
    assert load_settings(path) == s


def test_csv_with_header_and_blank_rows(tmp_path):
    path = tmp_path / "engine.csv"
    path.write_text('key,value\n\nmode,"""circular"""\nfactors,"[2, 3]"\n', encoding="utf-8")
    s = load_settings(path)
    assert s.mode is ConvolutionMode.CIRCULAR
    assert s.factors == (3, 2)


def test_csv_bare_string_value(tmp_path):
    path = tmp_path / "engine.csv"
    path.write_text("mode,linear-optimal\n", encoding="utf-8")
    assert load_settings(path).mode is ConvolutionMode.LINEAR_OPTIMAL


def test_workspace_from_settings():
    s = EngineSettings.from_dict({"mode": "linear-optimal", "factors": [2]})
    ws = s.workspace(10, 10, 3, 3)
    assert ws.geometry.working_shape == (16, 16)
    ws.clear()


@pytest.mark.parametrize(
    "payload",
    [
        {"mode": "sideways"},
        {"factors": [1, 2]},
        {"factors": "2,3"},
        {"factors": []},
        {"mode": "linear", "threads": 4},
    ],
)
def test_invalid_values_raise_settings_error(tmp_path, payload):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(SettingsError):
        load_settings(path)


def test_missing_and_malformed_files(tmp_path):
    with pytest.raises(SettingsError):
        load_settings(tmp_path / "nope.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(SettingsError):
        load_settings(bad)
    arr = tmp_path / "list.json"
    arr.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(SettingsError):
        load_settings(arr)
