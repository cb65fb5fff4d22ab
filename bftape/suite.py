from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml

from bftape.config import InterpreterConfig
from bftape.engine import RunResult, RunStatus, run_program


@dataclass
class ProgramCase:
    name: str
    program: str
    input: bytes = b""
    expect: Optional[bytes] = None
    expect_status: RunStatus = RunStatus.COMPLETED
    max_steps: Optional[int] = None


@dataclass
class CaseOutcome:
    case: ProgramCase
    result: RunResult
    passed: bool
    reason: str = ""


def _coerce_bytes(val: Any, what: str) -> bytes:
    """Accept a string or a list of byte values."""
    if isinstance(val, str):
        return val.encode("utf-8")
    if isinstance(val, (list, tuple)):
        out = bytearray()
        for v in val:
            if not isinstance(v, int) or isinstance(v, bool):
                raise ValueError(f"{what} elements must be integers")
            out.append(v % 256)
        return bytes(out)
    raise ValueError(f"{what} must be a string or a list of integers")


def _coerce_status(val: Any) -> RunStatus:
    try:
        return RunStatus[str(val).upper()]
    except KeyError:
        choices = ", ".join(s.name.lower() for s in RunStatus)
        raise ValueError(f"expect_status must be one of {choices}, got {val!r}") from None


def _coerce_max_steps(val: Any, name: str) -> int:
    if isinstance(val, bool) or not isinstance(val, int) or val < 1:
        raise ValueError(f"Case '{name}': max_steps must be a positive integer, got {val!r}")
    return val


def _coerce_case(obj: Dict[str, Any]) -> ProgramCase:
    if not isinstance(obj, dict):
        raise ValueError(f"Each case must be a mapping, got {obj!r}")
    name = obj.get("name")
    if not name:
        raise ValueError("Each case must have 'name'")
    if "program" not in obj or not isinstance(obj["program"], str):
        raise ValueError(f"Case '{name}' must have a 'program' string")
    case = ProgramCase(name=str(name), program=obj["program"])
    if obj.get("input") is not None:
        case.input = _coerce_bytes(obj["input"], "input")
    if obj.get("expect") is not None:
        case.expect = _coerce_bytes(obj["expect"], "expect")
    if obj.get("expect_status") is not None:
        case.expect_status = _coerce_status(obj["expect_status"])
    if obj.get("max_steps") is not None:
        case.max_steps = _coerce_max_steps(obj["max_steps"], case.name)
    return case


def load_cases(path: str) -> List[ProgramCase]:
    """Load program cases from a YAML file.
    Supported formats:
      1) { cases: [ { name, program, input?, expect?, expect_status?, max_steps? }, ... ] }
      2) Mapping of name -> case fields, e.g. { add: { program: "++>+[<+>-]<.", expect: [3] } }
      3) A list of case objects
    """
    with open(path, "r") as f:
        data = yaml.safe_load(f)

    items: List[Dict[str, Any]]
    if isinstance(data, dict):
        if "cases" in data and isinstance(data["cases"], list):
            items = data["cases"]
        else:
            items = [dict(v, name=k) for k, v in data.items() if isinstance(v, dict)]
    elif isinstance(data, list):
        items = data
    else:
        raise ValueError("Unsupported suite structure; expected dict or list")

    return [_coerce_case(obj) for obj in items]


def run_case(case: ProgramCase, config: Optional[InterpreterConfig] = None) -> CaseOutcome:
    config = config or InterpreterConfig()
    if case.max_steps is not None:
        config = config.replace(max_steps=case.max_steps)
    result = run_program(case.program, config, stdin=case.input, capture=True)

    if result.status is not case.expect_status:
        reason = f"status {result.status.name.lower()}, expected {case.expect_status.name.lower()}"
        return CaseOutcome(case, result, False, reason)
    if case.expect is not None and result.output != case.expect:
        return CaseOutcome(case, result, False, f"output {result.output!r}, expected {case.expect!r}")
    return CaseOutcome(case, result, True)


def run_suite(cases: List[ProgramCase], config: Optional[InterpreterConfig] = None) -> List[CaseOutcome]:
    return [run_case(case, config) for case in cases]
