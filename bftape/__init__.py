"""
bftape: a Brainfuck interpreter built on a growable bidirectional tape.

Brainfuck has only 8 commands:
    >   Move the pointer to the right
    <   Move the pointer to the left
    +   Increment the memory cell at the pointer
    -   Decrement the memory cell at the pointer
    .   Output the byte in the cell at the pointer
    ,   Input a byte and store it in the cell at the pointer
    [   Jump past the matching ] if the cell at the pointer is 0
    ]   Jump back to the matching [ if the cell at the pointer is nonzero

All other characters are treated as comments and ignored.
"""

from bftape.config import EofPolicy, InterpreterConfig, load_config, resolve_config
from bftape.debugger import TraceDebugger
from bftape.engine import Interpreter, RunResult, RunStatus, run_program
from bftape.errors import (BrainfuckError, ConfigError, ProgramFileError, StepLimitExceeded,
                           TapeExhaustedError, UnbalancedBracketsError)
from bftape.loader import INSTRUCTIONS, SENTINEL, load_program, strip_comments
from bftape.tape import Direction, Tape
from bftape.validator import check_brackets, find_unbalanced, validate

__version__ = "0.1.0"

__all__ = [
    "BrainfuckError",
    "ConfigError",
    "Direction",
    "EofPolicy",
    "INSTRUCTIONS",
    "Interpreter",
    "InterpreterConfig",
    "ProgramFileError",
    "RunResult",
    "RunStatus",
    "SENTINEL",
    "StepLimitExceeded",
    "Tape",
    "TapeExhaustedError",
    "TraceDebugger",
    "UnbalancedBracketsError",
    "check_brackets",
    "find_unbalanced",
    "load_config",
    "load_program",
    "resolve_config",
    "run_program",
    "strip_comments",
    "validate",
]
