"""Command line front end: file handling, flags and exit statuses."""

import argparse
import os
import sys
from typing import List, Optional

import yaml

from bftape.config import EofPolicy, InterpreterConfig, resolve_config
from bftape.debugger import DEFAULT_TRACE_LIMIT, TraceDebugger
from bftape.engine import Interpreter, RunStatus
from bftape.errors import ConfigError, ProgramFileError
from bftape.suite import load_cases, run_suite
from bftape.validator import find_unbalanced


def has_extension(filename: str, extension: str) -> bool:
    """True if `filename` ends in '.<extension>' and is not just a dotfile."""
    name, dot, ext = os.path.basename(filename).rpartition(".")
    return bool(dot) and bool(name) and ext == extension


def read_program(path: str, config: InterpreterConfig) -> bytes:
    if config.check_extension and not has_extension(path, config.extension):
        raise ProgramFileError(f"Invalid file extension. Please provide a '{config.extension}' file.")
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise ProgramFileError("Error opening file") from e


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="bftape", description="Brainfuck interpreter with a growable tape")
    ap.add_argument("--config", help="YAML file with interpreter settings")
    sub = ap.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run a program")
    run.add_argument("file", help="Program source file")
    run.add_argument("--eof", choices=[p.value for p in EofPolicy], help="What ',' stores at end of input")
    run.add_argument("--max-steps", type=int, help="Stop after this many executed commands")
    run.add_argument("--max-cells", type=int, help="Largest data tape allowed")
    run.add_argument("--input", help="Use this text as program input instead of stdin")
    run.add_argument("--no-extension-check", action="store_true", help="Accept any file name")
    run.add_argument("--trace", action="store_true", help="Print every step to stderr")
    run.add_argument("--trace-limit", type=int, default=DEFAULT_TRACE_LIMIT, help="Steps to trace")
    run.add_argument("--stats", action="store_true", help="Print a run summary to stderr")

    check = sub.add_parser("check", help="Only check that brackets are balanced")
    check.add_argument("file", help="Program source file")
    check.add_argument("--no-extension-check", action="store_true", help="Accept any file name")

    suite = sub.add_parser("suite", help="Run a YAML suite of program cases")
    suite.add_argument("file", help="YAML suite file")
    return ap


def _apply_flags(config: InterpreterConfig, args: argparse.Namespace) -> InterpreterConfig:
    changes = {}
    if getattr(args, "eof", None):
        changes["eof_policy"] = args.eof
    if getattr(args, "max_steps", None) is not None:
        changes["max_steps"] = args.max_steps
    if getattr(args, "max_cells", None) is not None:
        changes["max_cells"] = args.max_cells
    if getattr(args, "no_extension_check", False):
        changes["check_extension"] = False
    return config.replace(**changes)


def cmd_run(args: argparse.Namespace, config: InterpreterConfig) -> int:
    source = read_program(args.file, config)
    if args.trace:
        interpreter = TraceDebugger(config, stdin=args.input, trace_limit=args.trace_limit)
    else:
        interpreter = Interpreter(config, stdin=args.input)
    result = interpreter.run(source)

    if not result.ok:
        print(f"Error: {result.error}", file=sys.stderr)
    if args.stats:
        cells = len(result.data) if result.data is not None else 0
        mark = "✅" if result.ok else "❌"
        print(f"{mark} {result.status.name.lower()} in {result.steps} steps "
              f"({result.input_reads} reads, {result.output_writes} writes, {cells} data cells)",
              file=sys.stderr)
    return result.exit_code


def cmd_check(args: argparse.Namespace, config: InterpreterConfig) -> int:
    source = read_program(args.file, config)
    offset = find_unbalanced(source)
    if offset is None:
        print("OK")
        return 0
    print(f"Error: Unmatched brackets at offset {offset}", file=sys.stderr)
    return RunStatus.MALFORMED.value


def cmd_suite(args: argparse.Namespace, config: InterpreterConfig) -> int:
    try:
        cases = load_cases(args.file)
    except OSError as e:
        raise ProgramFileError("Error opening file") from e
    except (ValueError, yaml.YAMLError) as e:
        raise ProgramFileError(f"Invalid suite {args.file}: {e}") from e

    outcomes = run_suite(cases, config)
    for outcome in outcomes:
        if outcome.passed:
            print(f"  ✓ {outcome.case.name}")
        else:
            print(f"  ✗ {outcome.case.name}: {outcome.reason}")
    passed = sum(o.passed for o in outcomes)
    print(f"{passed}/{len(outcomes)} cases passed")
    return 0 if passed == len(outcomes) else 1


COMMANDS = {"run": cmd_run, "check": cmd_check, "suite": cmd_suite}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = _apply_flags(resolve_config(args.config), args)
    except (ConfigError, OSError, yaml.YAMLError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1
    try:
        return COMMANDS[args.command](args, config)
    except ProgramFileError as e:
        print(e, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
