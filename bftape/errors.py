"""Exceptions raised by the interpreter."""

from typing import Optional


class BrainfuckError(Exception):
    pass


class UnbalancedBracketsError(BrainfuckError):
    """Loop delimiters do not pair up. `offset` is the byte that broke the scan."""

    def __init__(self, offset: int, message: Optional[str] = None):
        self.offset = offset
        super().__init__(message or f"Unmatched brackets at offset {offset}")


class TapeExhaustedError(BrainfuckError):
    """A tape could not grow. There is no recovery from this."""

    def __init__(self, cells: int, message: Optional[str] = None):
        self.cells = cells
        super().__init__(message or f"Memory allocation failed after {cells} cells")


class StepLimitExceeded(BrainfuckError):
    def __init__(self, steps: int):
        self.steps = steps
        super().__init__(f"Execution stopped after {steps} steps")


class ProgramFileError(BrainfuckError):
    pass


class ConfigError(BrainfuckError, ValueError):
    pass
