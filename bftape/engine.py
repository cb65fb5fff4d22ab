"""
Execution engine.

Walks the instruction tape with its cursor and applies each command to a
fresh data tape. Loops are matched at run time: '[' on a zero cell scans
forward for its ']' and ']' on a nonzero cell scans back for its '[',
counting nesting depth on the way. After every command, jumps included,
the instruction cursor steps forward once, so a taken '[' resumes just
past its ']' and a taken ']' resumes at the first command of the body.
"""

import io
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Optional, Type, Union

from bftape.config import EofPolicy, InterpreterConfig
from bftape.errors import StepLimitExceeded, TapeExhaustedError, UnbalancedBracketsError
from bftape.loader import (DECREMENT, INCREMENT, INPUT, LOOP_END, LOOP_START, MOVE_BACKWARD,
                           MOVE_FORWARD, OUTPUT, SENTINEL, Source, load_program)
from bftape.tape import Tape
from bftape.validator import check_brackets, find_unbalanced

InputSource = Union[bytes, bytearray, str, BinaryIO]


class RunStatus(Enum):
    COMPLETED = 0
    MALFORMED = 1
    EXHAUSTED = 2
    STEP_LIMIT = 3


@dataclass
class RunResult:
    """Outcome of one program run."""
    status: RunStatus
    steps: int = 0
    input_reads: int = 0
    output_writes: int = 0
    output: Optional[bytes] = None
    data: Optional[Tape] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is RunStatus.COMPLETED

    @property
    def exit_code(self) -> int:
        return self.status.value


def as_stream(source: Optional[InputSource]) -> Optional[BinaryIO]:
    if isinstance(source, str):
        return io.BytesIO(source.encode("utf-8"))
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(bytes(source))
    return source


class Interpreter:
    def __init__(self, config: Optional[InterpreterConfig] = None,
                 stdin: Optional[InputSource] = None, stdout: Optional[BinaryIO] = None):
        self.config = config or InterpreterConfig()
        self.stdin = as_stream(stdin)
        self.stdout = stdout
        self.instructions: Optional[Tape] = None
        self.data: Optional[Tape] = None
        self.steps = 0
        self.input_reads = 0
        self.output_writes = 0

    # ── Public ────────────────────────────────────────────────────────────────

    def run(self, source: Source) -> RunResult:
        """Validate, load and execute `source`.

        Malformed programs, tape exhaustion and the step limit come back as
        a RunResult status instead of an exception.
        """
        self.instructions = self.data = None
        self.steps = self.input_reads = self.output_writes = 0
        if not check_brackets(source):
            error = UnbalancedBracketsError(find_unbalanced(source))
            return RunResult(RunStatus.MALFORMED, error=str(error))
        try:
            program = load_program(source, chunk_size=self.config.chunk_size)
            self.execute(program)
        except TapeExhaustedError as e:
            return self._result(RunStatus.EXHAUSTED, str(e))
        except StepLimitExceeded as e:
            return self._result(RunStatus.STEP_LIMIT, str(e))
        return self._result(RunStatus.COMPLETED)

    def execute(self, instructions: Tape) -> Tape:
        """Run a loaded program until its sentinel and return the data tape."""
        self.instructions = instructions
        self.data = Tape(chunk_size=self.config.chunk_size, max_cells=self.config.max_cells)
        self.steps = 0
        self.input_reads = 0
        self.output_writes = 0
        max_steps = self.config.max_steps

        while instructions.value != SENTINEL:
            if max_steps is not None and self.steps >= max_steps:
                raise StepLimitExceeded(self.steps)
            self._step(instructions.value)
            self.steps += 1
            instructions.forward()
        return self.data

    # ── Inner loop ────────────────────────────────────────────────────────────

    def _step(self, command: int) -> None:
        data = self.data
        if command == MOVE_FORWARD:
            data.forward()
        elif command == MOVE_BACKWARD:
            data.backward()
        elif command == INCREMENT:
            data.increment()
        elif command == DECREMENT:
            data.decrement()
        elif command == OUTPUT:
            self._write(data.value)
        elif command == INPUT:
            self._read()
        elif command == LOOP_START:
            if data.value == 0:
                self._skip_forward()
        elif command == LOOP_END:
            if data.value != 0:
                self._skip_backward()

    def _skip_forward(self) -> None:
        """Move the instruction cursor onto the ']' matching the current '['."""
        depth = 1
        while depth:
            command = self.instructions.forward()
            if command == LOOP_START:
                depth += 1
            elif command == LOOP_END:
                depth -= 1
            elif command == SENTINEL:
                raise UnbalancedBracketsError(self.instructions.position)

    def _skip_backward(self) -> None:
        """Move the instruction cursor onto the '[' matching the current ']'."""
        depth = 1
        while depth:
            command = self.instructions.backward()
            if command == LOOP_END:
                depth += 1
            elif command == LOOP_START:
                depth -= 1
            elif command == SENTINEL:
                raise UnbalancedBracketsError(self.instructions.position)

    # ── I/O ───────────────────────────────────────────────────────────────────

    def _write(self, value: int) -> None:
        out = self.stdout if self.stdout is not None else sys.stdout.buffer
        out.write(bytes((value,)))
        if self.config.flush_output:
            out.flush()
        self.output_writes += 1

    def _read(self) -> None:
        stream = self.stdin if self.stdin is not None else sys.stdin.buffer
        byte = stream.read(1)
        if byte:
            self.data.value = byte[0]
            self.input_reads += 1
            return
        policy = self.config.eof_policy
        if policy is EofPolicy.ZERO:
            self.data.value = 0
        elif policy is EofPolicy.MAX:
            self.data.value = 0xFF

    def _result(self, status: RunStatus, error: Optional[str] = None) -> RunResult:
        return RunResult(
            status=status,
            steps=self.steps,
            input_reads=self.input_reads,
            output_writes=self.output_writes,
            data=self.data,
            error=error,
        )


def run_program(source: Source, config: Optional[InterpreterConfig] = None,
                stdin: Optional[InputSource] = None, stdout: Optional[BinaryIO] = None,
                capture: bool = False, interpreter_cls: Type[Interpreter] = Interpreter,
                **kwargs: Any) -> RunResult:
    """Run `source` once. With `capture`, output is collected into result.output."""
    if capture:
        stdout = io.BytesIO()
    interpreter = interpreter_cls(config, stdin=stdin, stdout=stdout, **kwargs)
    result = interpreter.run(source)
    if capture:
        result.output = stdout.getvalue()
    return result
