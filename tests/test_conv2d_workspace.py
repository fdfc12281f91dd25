# tests/test_conv2d_workspace.py
import numpy as np
import pytest

from spectconv.conv2d.engine import clear_workspace, convolve, init_workspace, update_workspace
from spectconv.conv2d.modes import ConvolutionMode
from spectconv.conv2d.workspace import Workspace
from spectconv.errors import UnknownModeError, WorkspaceStateError


def test_init_allocates_buffers_and_transforms():
    ws = init_workspace("linear", 10, 6, 3, 4)
    try:
        assert ws.mode is ConvolutionMode.LINEAR
        assert ws.geometry.working_shape == (12, 8)
        assert ws.spectrum.shape == (12, 8)
        assert ws.product.shape == (12, 8)
        assert ws.spectrum.dtype == np.complex128
        assert not np.shares_memory(ws.spectrum, ws.product)
        assert ws.row_transform.length == 8 and ws.row_transform.axis == 1
        assert ws.col_transform.length == 12 and ws.col_transform.axis == 0
    finally:
        clear_workspace(ws)


def test_clear_twice_raises():
    ws = Workspace("circular", 4, 4, 3, 3)
    ws.clear()
    assert not ws.is_active
    with pytest.raises(WorkspaceStateError):
        ws.clear()


def test_use_after_clear_raises():
    ws = Workspace("linear", 4, 4, 3, 3)
    ws.clear()
    with pytest.raises(WorkspaceStateError):
        _ = ws.spectrum
    with pytest.raises(WorkspaceStateError):
        convolve(ws, np.zeros((4, 4)), np.zeros((3, 3)))


def test_context_manager_releases_on_error():
    with pytest.raises(RuntimeError):
        with Workspace("linear", 4, 4, 3, 3) as ws:
            assert ws.is_active
            raise RuntimeError("boom")
    assert not ws.is_active


def test_context_manager_tolerates_explicit_clear():
    with Workspace("linear", 4, 4, 3, 3) as ws:
        ws.clear()
    assert not ws.is_active


def test_update_rebuilds_for_new_shape_and_mode():
    ws = Workspace("linear", 4, 4, 3, 3)
    old_spectrum = ws.spectrum
    update_workspace(ws, "circular-optimal", 6, 5, 2, 2)
    assert ws.mode is ConvolutionMode.CIRCULAR_OPTIMAL
    assert ws.geometry.src_shape == (6, 5)
    assert ws.geometry.working_shape == (8, 7)
    assert ws.spectrum.shape == (8, 7)
    assert ws.spectrum is not old_spectrum
    ws.clear()


def test_update_reactivates_cleared_workspace():
    ws = Workspace("linear", 4, 4, 3, 3)
    ws.clear()
    ws.update("circular", 4, 4, 3, 3)
    assert ws.is_active
    assert ws.spectrum.shape == (7, 7)
    ws.clear()


@pytest.mark.parametrize(
    "args, exc",
    [
        (("bogus", 4, 4, 3, 3), UnknownModeError),
        (("linear", 0, 4, 3, 3), ValueError),
    ],
)
def test_failed_update_keeps_previous_state(rng, args, exc):
    ws = Workspace("linear", 4, 4, 3, 3)
    before_geometry = ws.geometry
    before_spectrum = ws.spectrum
    with pytest.raises(exc):
        ws.update(*args)
    assert ws.is_active
    assert ws.geometry == before_geometry
    assert ws.spectrum is before_spectrum
    src = rng.standard_normal((4, 4))
    out = convolve(ws, src, np.array([[0, 0, 0], [0, 1, 0], [0, 0, 0]], dtype=float))
    np.testing.assert_allclose(out, src, atol=1e-12)
    ws.clear()


def test_failed_allocation_keeps_previous_state(monkeypatch):
    import spectconv.conv2d.workspace as workspace_mod

    ws = Workspace("linear", 4, 4, 3, 3)
    before = ws.geometry

    def _fail(geometry):
        raise MemoryError("no room")

    monkeypatch.setattr(workspace_mod._Resources, "allocate", staticmethod(_fail))
    with pytest.raises(MemoryError):
        ws.update("linear", 40, 40, 3, 3)
    assert ws.is_active
    assert ws.geometry == before
    monkeypatch.undo()
    ws.clear()


def test_factor_set_is_kept_across_updates():
    ws = Workspace("linear-optimal", 10, 10, 3, 3, factors=(2,))
    assert ws.geometry.working_shape == (16, 16)
    ws.update("circular-optimal", 10, 10, 3, 3)
    assert ws.geometry.working_shape == (16, 16)
    ws.update("circular-optimal", 10, 10, 3, 3, factors=(7, 2))
    assert ws.geometry.working_shape == (14, 14)
    ws.clear()
