from typing import Optional

from bftape.errors import UnbalancedBracketsError
from bftape.loader import LOOP_END, LOOP_START, Source, as_bytes


def check_brackets(source: Source) -> bool:
    """True if every '[' has a matching ']' and no ']' comes before its '['."""
    depth = 0
    for command in as_bytes(source):
        if command == LOOP_START:
            depth += 1
        elif command == LOOP_END:
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def find_unbalanced(source: Source) -> Optional[int]:
    """Offset of the first unmatched ']', else of the innermost unclosed '['.

    Returns None for a balanced program.
    """
    opened = []
    for offset, command in enumerate(as_bytes(source)):
        if command == LOOP_START:
            opened.append(offset)
        elif command == LOOP_END:
            if not opened:
                return offset
            opened.pop()
    if opened:
        return opened[-1]
    return None


def validate(source: Source) -> None:
    offset = find_unbalanced(source)
    if offset is not None:
        raise UnbalancedBracketsError(offset)
