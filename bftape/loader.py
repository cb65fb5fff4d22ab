from typing import Optional, Union

from bftape.tape import DEFAULT_CHUNK_SIZE, Tape

# Commands
MOVE_FORWARD = ord('>')
MOVE_BACKWARD = ord('<')
INCREMENT = ord('+')
DECREMENT = ord('-')
OUTPUT = ord('.')
INPUT = ord(',')
LOOP_START = ord('[')
LOOP_END = ord(']')

INSTRUCTIONS = b"><+-.,[]"

# Marks the cell one past the last instruction
SENTINEL = 0

Source = Union[bytes, bytearray, str]


def as_bytes(source: Source) -> bytes:
    if isinstance(source, str):
        return source.encode("utf-8")
    return bytes(source)


def strip_comments(source: Source) -> bytes:
    """Keep only the eight instruction bytes."""
    return bytes(b for b in as_bytes(source) if b in INSTRUCTIONS)


def load_program(source: Source, chunk_size: int = DEFAULT_CHUNK_SIZE,
                 max_cells: Optional[int] = None) -> Tape:
    """Load the instructions of `source` onto a fresh tape.

    The cell after the last instruction holds SENTINEL and the returned
    tape is rewound to the first instruction.
    """
    tape = Tape(chunk_size=chunk_size, max_cells=max_cells)
    for command in as_bytes(source):
        if command in INSTRUCTIONS:
            tape.value = command
            tape.forward()
    tape.value = SENTINEL
    tape.rewind()
    return tape
