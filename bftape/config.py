"""
Interpreter configuration.

Settings are layered, later layers winning:

  1) InterpreterConfig defaults
  2) a YAML file of field names -> values (load_config)
  3) BF_* environment variables (InterpreterConfig.from_env)
  4) command-line flags (applied by the CLI through replace())
"""

import dataclasses
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

import yaml

from bftape.errors import ConfigError
from bftape.tape import DEFAULT_CHUNK_SIZE


class EofPolicy(str, Enum):
    """What ',' stores once the input stream is exhausted."""
    ZERO = "zero"            # store 0
    UNCHANGED = "unchanged"  # leave the cell alone
    MAX = "max"              # store 255, i.e. getchar()'s EOF squeezed into a byte


ENV_VARS: Dict[str, str] = {
    "BF_EOF": "eof_policy",
    "BF_STEP_LIMIT": "max_steps",
    "BF_MAX_CELLS": "max_cells",
    "BF_CHUNK_SIZE": "chunk_size",
    "BF_FLUSH": "flush_output",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class InterpreterConfig:
    eof_policy: EofPolicy = EofPolicy.ZERO
    max_steps: Optional[int] = None
    max_cells: Optional[int] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    flush_output: bool = True
    extension: str = "bf"
    check_extension: bool = True

    def __post_init__(self):
        try:
            self.eof_policy = EofPolicy(self.eof_policy)
        except ValueError:
            choices = ", ".join(p.value for p in EofPolicy)
            raise ConfigError(f"eof_policy must be one of {choices}, got {self.eof_policy!r}") from None
        for name in ("max_steps", "max_cells"):
            value = getattr(self, name)
            if value is not None and (not _is_int(value) or value < 1):
                raise ConfigError(f"{name} must be a positive integer or None, got {value!r}")
        if not _is_int(self.chunk_size) or self.chunk_size < 1:
            raise ConfigError(f"chunk_size must be a positive integer, got {self.chunk_size!r}")
        for name in ("flush_output", "check_extension"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be a boolean, got {getattr(self, name)!r}")
        self.extension = str(self.extension).lstrip(".")

    def replace(self, **changes) -> "InterpreterConfig":
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = dataclasses.asdict(self)
        data["eof_policy"] = self.eof_policy.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: Optional["InterpreterConfig"] = None) -> "InterpreterConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return (base or cls()).replace(**dict(data))

    @classmethod
    def from_env(cls, base: Optional["InterpreterConfig"] = None,
                 environ: Optional[Mapping[str, str]] = None) -> "InterpreterConfig":
        """Overlay BF_* environment variables onto `base`."""
        environ = os.environ if environ is None else environ
        changes: Dict[str, Any] = {}
        for var, name in ENV_VARS.items():
            raw = environ.get(var)
            if raw is None:
                continue
            changes[name] = _parse_env(var, name, raw.strip())
        return (base or cls()).replace(**changes)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_env(var: str, name: str, raw: str) -> Any:
    if name == "eof_policy":
        return raw.lower()
    if name == "flush_output":
        if raw.lower() in _TRUE:
            return True
        if raw.lower() in _FALSE:
            return False
        raise ConfigError(f"{var} must be a boolean, got {raw!r}")
    if name in ("max_steps", "max_cells") and raw.lower() in ("", "none"):
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{var} must be an integer, got {raw!r}") from None


def load_config(path: str, base: Optional[InterpreterConfig] = None) -> InterpreterConfig:
    """Load settings from a YAML mapping of field names to values."""
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping of settings, got {type(data).__name__}")
    return InterpreterConfig.from_dict(data, base=base)


def resolve_config(path: Optional[str] = None,
                   environ: Optional[Mapping[str, str]] = None) -> InterpreterConfig:
    """Defaults, then the YAML file (if any), then the environment."""
    config = InterpreterConfig()
    if path:
        config = load_config(path, base=config)
    return InterpreterConfig.from_env(base=config, environ=environ)
