"""
Step-by-step trace debugger.

Runs a program exactly like Interpreter does, but prints each executed
command, what it did, and the state of the data tape around the cursor.
"""

import sys
from typing import Optional, TextIO

from bftape.engine import Interpreter
from bftape.loader import (DECREMENT, INCREMENT, INPUT, LOOP_END, LOOP_START, MOVE_BACKWARD,
                           MOVE_FORWARD, OUTPUT)
from bftape.tape import Tape

DEFAULT_TRACE_LIMIT = 100


class TraceDebugger(Interpreter):
    """Interpreter that reports every step to a log stream (stderr by default)."""

    def __init__(self, config=None, stdin=None, stdout=None, log: Optional[TextIO] = None,
                 trace_limit: int = DEFAULT_TRACE_LIMIT, show_memory_range: int = 10):
        super().__init__(config, stdin=stdin, stdout=stdout)
        self.log = log
        self.trace_limit = trace_limit
        self.show_memory_range = show_memory_range
        self.output = bytearray()

    def _print(self, text: str = "") -> None:
        print(text, file=self.log if self.log is not None else sys.stderr)

    def execute(self, instructions: Tape) -> Tape:
        self.output = bytearray()
        self._print("🐛 BRAINFUCK DEBUGGER")
        self._print(f"Program: {self._program_text(instructions)}")
        self._print("=" * 80)
        try:
            data = super().execute(instructions)
        except Exception as e:
            self._print(f"\n⚠️ Execution stopped after {self.steps} steps: {e}")
            raise
        self._print("\n🎯 FINAL RESULT:")
        self._print(f"Steps:  {self.steps}")
        self._print(f"Output: {bytes(self.output)!r} → {list(self.output)}")
        return data

    def _step(self, command: int) -> None:
        if self.steps >= self.trace_limit:
            if self.steps == self.trace_limit:
                self._print(f"\n... trace limit of {self.trace_limit} steps reached, continuing without trace")
            super()._step(command)
            return

        ip = self.instructions.position
        ptr = self.data.position
        before = self.data.value
        reads = self.input_reads
        super()._step(command)

        self._print(f"\nStep {self.steps + 1}: Execute '{chr(command)}' at position {ip}")
        self._print(f"  {self._describe(command, ip, ptr, before, reads)}")
        self._show_state()

    def _write(self, value: int) -> None:
        super()._write(value)
        self.output.append(value)

    def _describe(self, command: int, ip: int, ptr: int, before: int, reads: int) -> str:
        value = self.data.value
        if command == MOVE_FORWARD:
            return f"Move pointer right → position {self.data.position}"
        if command == MOVE_BACKWARD:
            return f"Move pointer left → position {self.data.position}"
        if command == INCREMENT:
            return f"Increment cell[{ptr}] → {value}"
        if command == DECREMENT:
            return f"Decrement cell[{ptr}] → {value}"
        if command == OUTPUT:
            return f"Output cell[{ptr}] = {value} → {chr(value)!r}"
        if command == INPUT:
            if self.input_reads > reads:
                return f"Read input byte {value} → cell[{ptr}]"
            return f"Read input: EOF ({self.config.eof_policy.value}), cell[{ptr}] {before} → {value}"
        if command == LOOP_START:
            if self.instructions.position != ip:
                return f"Loop start: cell[{ptr}] = 0, jump to position {self.instructions.position}"
            return f"Loop start: cell[{ptr}] ≠ 0, enter loop"
        if command == LOOP_END:
            if self.instructions.position != ip:
                return f"Loop end: cell[{ptr}] ≠ 0, jump back to position {self.instructions.position}"
            return f"Loop end: cell[{ptr}] = 0, exit loop"
        return "No-op"

    def _show_state(self) -> None:
        positions, values = self.data.window(self.show_memory_range // 2)
        memory_vals = [f"{int(v):3d}" for v in values]
        memory_ptrs = [" ^ " if p == self.data.position else "   " for p in positions]
        memory_addrs = [f"{int(p):3d}" for p in positions]

        self._print("Memory:   [" + "|".join(memory_vals) + "]")
        self._print("Pointer:   " + " ".join(memory_ptrs))
        self._print("Address:   " + " ".join(memory_addrs))
        if self.output:
            self._print(f"Output:   {bytes(self.output)!r} → {list(self.output)}")
        else:
            self._print("Output:   (empty)")

    @staticmethod
    def _program_text(instructions: Tape) -> str:
        cells = instructions.snapshot()
        return bytes(cells[cells != 0]).decode("ascii")
