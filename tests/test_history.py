"""Tests for snapshot-based undo/redo."""

import pytest

from textual_doodle.history import HistoryManager, Snapshot, SnapshotFailure
from textual_doodle.raster import RGBA, RasterBuffer

RED = RGBA(255, 0, 0, 255)
GREEN = RGBA(0, 255, 0, 255)


def marked(buffer: RasterBuffer, value: int) -> RasterBuffer:
    """Mark the buffer's first pixel so states can be told apart."""
    buffer.set(0, 0, RGBA(value, 0, 0, 255))
    return buffer


@pytest.fixture
def history(buffer: RasterBuffer) -> HistoryManager:
    history = HistoryManager("drawing")
    history.reset(buffer)
    return history


def test_baseline_is_the_undo_floor(buffer: RasterBuffer, history: HistoryManager):
    assert not history.undo_available
    assert not history.redo_available
    assert not history.undo(buffer)
    assert not history.redo(buffer)
    assert len(history.undos) == 1

def test_undo_restores_baseline_exactly(buffer: RasterBuffer, history: HistoryManager):
    baseline = buffer.copy()
    buffer.set(3, 4, RED)
    assert history.push(buffer)
    assert history.undo_available
    assert history.undo(buffer)
    assert buffer == baseline
    assert history.redo_available
    assert not history.undo_available

def test_redo_after_undo_restores_the_snapshot(buffer: RasterBuffer, history: HistoryManager):
    buffer.set(3, 4, RED)
    history.push(buffer)
    pushed_state = buffer.copy()
    history.undo(buffer)
    assert buffer != pushed_state
    assert history.redo(buffer)
    assert buffer == pushed_state
    assert not history.redo_available
    assert history.undo_available

def test_push_after_undo_discards_redo(buffer: RasterBuffer, history: HistoryManager):
    buffer.set(1, 1, RED)
    history.push(buffer)
    history.undo(buffer)
    buffer.set(2, 2, GREEN)
    history.push(buffer)
    state_y = buffer.copy()
    assert not history.redo_available
    assert not history.redo(buffer)
    assert buffer == state_y

def test_capacity_evicts_oldest(buffer: RasterBuffer, history: HistoryManager):
    for i in range(1, 52):
        history.push(marked(buffer, i))
    assert len(history.undos) == 50
    undo_count = 0
    while history.undo(buffer):
        undo_count += 1
    assert undo_count == 49
    # The baseline and the first push were evicted; the second push is as far back as it goes.
    assert buffer.get(0, 0) == RGBA(2, 0, 0, 255)

def test_undo_fifty_times_stops_at_the_floor(buffer: RasterBuffer, history: HistoryManager):
    for i in range(1, 52):
        history.push(marked(buffer, i))
    for _ in range(50):
        history.undo(buffer)
    assert buffer.get(0, 0) == RGBA(2, 0, 0, 255)
    assert len(history.redos) == 49

def test_small_capacity(buffer: RasterBuffer):
    history = HistoryManager("tiny", capacity=2)
    history.reset(marked(buffer, 0))
    history.push(marked(buffer, 1))
    history.push(marked(buffer, 2))
    assert [snapshot.data[0] for snapshot in history.undos] == [1, 2]
    assert history.undo(buffer)
    assert buffer.get(0, 0).r == 1
    assert not history.undo(buffer)
    assert history.redo(buffer)
    assert buffer.get(0, 0).r == 2
    assert len(history.undos) == 2

def test_invalid_capacity():
    with pytest.raises(ValueError):
        HistoryManager("none", capacity=0)

def test_snapshots_are_copies(buffer: RasterBuffer, history: HistoryManager):
    buffer.set(5, 5, RED)
    history.push(buffer)
    snapshot = history.undos[-1]
    assert isinstance(snapshot.data, bytes)
    buffer.set(5, 5, GREEN)
    assert not snapshot.matches(buffer)
    snapshot.restore(buffer)
    assert buffer.get(5, 5) == RED
    assert snapshot.matches(buffer)

def test_snapshot_failure_is_absorbed(buffer: RasterBuffer, history: HistoryManager, capsys: pytest.CaptureFixture[str]):
    buffer.set(1, 1, RED)
    history.push(buffer)
    undos_before = list(history.undos)
    broken = RasterBuffer(4, 4)
    broken.data = bytearray(3)
    assert not history.push(broken)
    assert history.undos == undos_before
    assert "Warning" in capsys.readouterr().out

def test_snapshot_failure_keeps_redos(buffer: RasterBuffer, history: HistoryManager):
    buffer.set(1, 1, RED)
    history.push(buffer)
    history.undo(buffer)
    broken = RasterBuffer(4, 4)
    broken.data = bytearray(3)
    history.push(broken)
    assert history.redo_available

def test_capture_rejects_mismatched_data():
    broken = RasterBuffer(2, 2)
    broken.data = bytearray(15)
    with pytest.raises(SnapshotFailure):
        Snapshot.capture(broken)

def test_reset_discards_everything(buffer: RasterBuffer, history: HistoryManager):
    history.push(marked(buffer, 1))
    history.push(marked(buffer, 2))
    history.undo(buffer)
    history.reset(buffer)
    assert len(history.undos) == 1
    assert not history.redo_available
