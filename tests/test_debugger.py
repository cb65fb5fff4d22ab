import io

import pytest

from bftape.config import InterpreterConfig
from bftape.debugger import TraceDebugger
from bftape.engine import RunStatus, run_program


def trace(source, stdin=b"", **kwargs):
    log = io.StringIO()
    config = InterpreterConfig(max_steps=kwargs.pop("max_steps", None))
    result = run_program(source, config, stdin=stdin, capture=True,
                         interpreter_cls=TraceDebugger, log=log, **kwargs)
    return result, log.getvalue()


@pytest.mark.parametrize("source", ["++>+++++[<+>-]<.", ",[.,]", "[[+]+]+."])
def test_trace_does_not_change_behavior(run, source):
    traced, _ = trace(source, stdin=b"ok")
    plain = run(source, stdin=b"ok")
    assert traced.output == plain.output
    assert traced.steps == plain.steps


def test_steps_are_described():
    _, log = trace("+[-].")
    assert "🐛 BRAINFUCK DEBUGGER" in log
    assert "Program: +[-]." in log
    assert "Step 1: Execute '+' at position 0" in log
    assert "Increment cell[0] → 1" in log
    assert "Loop start: cell[0] ≠ 0, enter loop" in log
    assert "Loop end: cell[0] = 0, exit loop" in log
    assert "Output cell[0] = 0 → '\\x00'" in log
    assert "🎯 FINAL RESULT:" in log


def test_jumps_report_target_position():
    _, log = trace("[+]")
    assert "Loop start: cell[0] = 0, jump to position 2" in log


def test_memory_window_marks_the_cursor():
    _, log = trace(">++")
    assert "Memory:   [  0|  2]" in log
    assert "Pointer:        ^ " in log
    assert "Address:     0   1" in log


def test_end_of_input_is_described():
    _, log = trace(",", stdin=b"")
    assert "Read input: EOF (zero), cell[0] 0 → 0" in log


def test_trace_limit():
    result, log = trace("+++++", trace_limit=2)
    assert result.steps == 5
    assert "Step 2:" in log
    assert "Step 3:" not in log
    assert "trace limit of 2 steps reached" in log


def test_stopped_runs_are_reported():
    result, log = trace("+[]", max_steps=20)
    assert result.status is RunStatus.STEP_LIMIT
    assert "⚠️ Execution stopped after 20 steps" in log
