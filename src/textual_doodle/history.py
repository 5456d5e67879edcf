"""Snapshot-based undo/redo history for a single layer."""

from textual_doodle.raster import RasterBuffer

DEFAULT_CAPACITY = 50


class SnapshotFailure(Exception):
    """The buffer's pixel data couldn't be captured."""


class Snapshot:
    """An immutable copy of a buffer's pixel data at one instant.

    Snapshots store the whole layer, so restoring one never depends on other history entries.
    """

    __slots__ = ("width", "height", "data")

    def __init__(self, width: int, height: int, data: bytes) -> None:
        self.width = width
        self.height = height
        self.data = data

    def __repr__(self) -> str:
        return f"Snapshot({self.width}, {self.height})"

    @staticmethod
    def capture(buffer: RasterBuffer) -> 'Snapshot':
        """Copy the buffer's current pixel data.

        Raises SnapshotFailure if the buffer's data doesn't match its size.
        """
        expected_length = buffer.width * buffer.height * 4
        if buffer.data is None or len(buffer.data) != expected_length:
            raise SnapshotFailure(f"{buffer!r} has {0 if buffer.data is None else len(buffer.data)} bytes of pixel data, expected {expected_length}")
        return Snapshot(buffer.width, buffer.height, bytes(buffer.data))

    def restore(self, buffer: RasterBuffer) -> None:
        """Write the snapshot's pixel data back into the buffer."""
        assert (buffer.width, buffer.height) == (self.width, self.height), f"Snapshot size {self.width}x{self.height} doesn't match {buffer!r}"
        buffer.data[:] = self.data

    def matches(self, buffer: RasterBuffer) -> bool:
        """Returns True if the buffer holds exactly the pixel data of this snapshot."""
        return (buffer.width, buffer.height) == (self.width, self.height) and buffer.data == self.data


class HistoryManager:
    """Bounded undo/redo stacks of snapshots for one layer.

    The bottom of the undo stack is the state to return to when everything is undone,
    so it is never popped; pushing past capacity silently drops the oldest entry.
    """

    def __init__(self, name: str, capacity: int = DEFAULT_CAPACITY) -> None:
        """Initialize an empty history. Call reset() to capture the baseline state."""
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")

        self.name = name
        """The name of the layer, for messages."""

        self.capacity = capacity
        """The maximum number of snapshots in the undo stack, including the baseline."""

        self.undos: list[Snapshot] = []
        """Past states; the last entry is the current state."""

        self.redos: list[Snapshot] = []
        """Undone states that can be redone."""

    def __repr__(self) -> str:
        return f"HistoryManager({self.name!r}, undos={len(self.undos)}, redos={len(self.redos)})"

    @property
    def undo_available(self) -> bool:
        """Whether there is a state to undo back to."""
        return len(self.undos) > 1

    @property
    def redo_available(self) -> bool:
        """Whether there is an undone state to redo."""
        return len(self.redos) > 0

    def reset(self, buffer: RasterBuffer) -> None:
        """Discard all history, and capture the buffer as the baseline state."""
        self.undos = [Snapshot.capture(buffer)]
        self.redos = []

    def _append_undo(self, snapshot: Snapshot) -> None:
        if len(self.undos) >= self.capacity:
            self.undos.pop(0)
        self.undos.append(snapshot)

    def push(self, buffer: RasterBuffer) -> bool:
        """Record the buffer's current state as a new history entry, clearing redos.

        If the state can't be captured, history is left unchanged, and False is returned.
        The drawing operation that led here is not rolled back.
        """
        try:
            snapshot = Snapshot.capture(buffer)
        except (SnapshotFailure, MemoryError) as e:
            print(f"Warning: Unable to snapshot {self.name} layer for history:", e)
            return False
        self._append_undo(snapshot)
        if len(self.redos) > 0:
            self.redos = []
        return True

    def undo(self, buffer: RasterBuffer) -> bool:
        """Restore the buffer to the previous state. Returns False if there was nothing to undo."""
        if not self.undo_available:
            return False
        self.redos.append(self.undos.pop())
        self.undos[-1].restore(buffer)
        return True

    def redo(self, buffer: RasterBuffer) -> bool:
        """Restore the buffer to the last undone state. Returns False if there was nothing to redo."""
        if not self.redo_available:
            return False
        snapshot = self.redos.pop()
        self._append_undo(snapshot)
        snapshot.restore(buffer)
        return True
