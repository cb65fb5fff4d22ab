"""
Growable bidirectional tape.

Both the loaded program and the data memory live on a Tape. The only way
to move is one cell at a time; stepping off either end materializes a new
zero cell there. Cells are stored in fixed-size numpy chunks addressed by a
signed position relative to the origin cell:

    chunk n >= 0   ->  _forward[n]
    chunk n < 0    ->  _backward[-n - 1]

so growth to the left appends to `_backward` and never shifts the
positions of cells that already exist.
"""

from enum import IntEnum
from typing import List, Optional, Tuple

import numpy as np

from bftape.errors import TapeExhaustedError

DEFAULT_CHUNK_SIZE = 4096
FILL = 0


class Direction(IntEnum):
    FORWARD = 1
    BACKWARD = -1


class Tape:
    """Lazily extended sequence of byte cells with a single cursor."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE, max_cells: Optional[int] = None):
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        if max_cells is not None and max_cells < 1:
            raise ValueError("max_cells must be positive")
        self.chunk_size = chunk_size
        self.max_cells = max_cells
        self._forward: List[np.ndarray] = []
        self._backward: List[np.ndarray] = []
        self.low = 0
        self.high = 0
        self.position = 0
        self._forward.append(self._new_chunk())
        self._chunk = self._forward[0]
        self._offset = 0
        self._chunk[0] = FILL

    def __len__(self) -> int:
        return self.high - self.low + 1

    def __repr__(self) -> str:
        return f"Tape(cells={len(self)}, position={self.position}, value={self.value})"

    # ── Cursor movement ───────────────────────────────────────────────────────

    def advance(self, direction: Direction) -> int:
        """Step the cursor and return the value of the new current cell."""
        step = int(direction)
        if step not in (1, -1):
            raise ValueError(f"Tape moves one cell at a time, got {direction!r}")
        target = self.position + step
        if target > self.high or target < self.low:
            self._grow(target)
        self.position = target
        offset = self._offset + step
        if 0 <= offset < self.chunk_size:
            self._offset = offset
        else:
            self._chunk, self._offset = self._locate(target)
        return int(self._chunk[self._offset])

    def forward(self) -> int:
        return self.advance(Direction.FORWARD)

    def backward(self) -> int:
        return self.advance(Direction.BACKWARD)

    def rewind(self) -> None:
        """Put the cursor back on the origin cell."""
        self.position = 0
        self._chunk, self._offset = self._locate(0)

    # ── Current cell ──────────────────────────────────────────────────────────

    @property
    def value(self) -> int:
        return int(self._chunk[self._offset])

    @value.setter
    def value(self, value: int) -> None:
        self._chunk[self._offset] = int(value) & 0xFF

    def increment(self) -> None:
        self._chunk[self._offset] = (int(self._chunk[self._offset]) + 1) & 0xFF

    def decrement(self) -> None:
        self._chunk[self._offset] = (int(self._chunk[self._offset]) - 1) & 0xFF

    # ── Introspection ─────────────────────────────────────────────────────────

    def snapshot(self) -> np.ndarray:
        """Copy of every allocated cell, lowest position first."""
        arena = np.concatenate(self._backward[::-1] + self._forward)
        base = len(self._backward) * self.chunk_size
        return arena[self.low + base:self.high + base + 1]

    def window(self, radius: int) -> Tuple[np.ndarray, np.ndarray]:
        """Positions and values of the allocated cells within `radius` of the cursor."""
        start = max(self.low, self.position - radius)
        end = min(self.high, self.position + radius)
        cells = self.snapshot()[start - self.low:end - self.low + 1]
        return np.arange(start, end + 1), cells

    # ── Allocation ────────────────────────────────────────────────────────────

    def _new_chunk(self) -> np.ndarray:
        try:
            return np.empty(self.chunk_size, dtype=np.uint8)
        except MemoryError as exc:
            raise TapeExhaustedError(len(self)) from exc

    def _locate(self, position: int) -> Tuple[np.ndarray, int]:
        n, offset = divmod(position, self.chunk_size)
        if n >= 0:
            return self._forward[n], offset
        return self._backward[-n - 1], offset

    def _grow(self, target: int) -> None:
        if self.max_cells is not None and len(self) >= self.max_cells:
            raise TapeExhaustedError(len(self))
        n = target // self.chunk_size
        if n >= 0 and n == len(self._forward):
            self._forward.append(self._new_chunk())
        elif n < 0 and -n - 1 == len(self._backward):
            self._backward.append(self._new_chunk())
        chunk, offset = self._locate(target)
        chunk[offset] = FILL
        if target > self.high:
            self.high = target
        else:
            self.low = target
