import pytest

from bftape.config import EofPolicy, InterpreterConfig, load_config, resolve_config
from bftape.errors import ConfigError
from bftape.tape import DEFAULT_CHUNK_SIZE


def test_defaults():
    config = InterpreterConfig()
    assert config.eof_policy is EofPolicy.ZERO
    assert config.max_steps is None
    assert config.max_cells is None
    assert config.chunk_size == DEFAULT_CHUNK_SIZE
    assert config.flush_output is True
    assert config.extension == "bf"
    assert config.check_extension is True


def test_eof_policy_accepts_strings():
    assert InterpreterConfig(eof_policy="max").eof_policy is EofPolicy.MAX


def test_extension_leading_dot_is_dropped():
    assert InterpreterConfig(extension=".b").extension == "b"


@pytest.mark.parametrize("settings", [
    {"eof_policy": "bogus"},
    {"max_steps": 0},
    {"max_cells": -3},
    {"max_steps": True},
    {"chunk_size": "big"},
    {"flush_output": "yes"},
])
def test_invalid_values(settings):
    with pytest.raises(ConfigError):
        InterpreterConfig(**settings)


def test_config_error_is_a_value_error():
    assert issubclass(ConfigError, ValueError)


def test_replace_returns_a_copy():
    base = InterpreterConfig()
    changed = base.replace(max_steps=10)
    assert changed.max_steps == 10
    assert base.max_steps is None


def test_to_dict_round_trips_through_from_dict():
    config = InterpreterConfig(eof_policy=EofPolicy.UNCHANGED, max_cells=64)
    data = config.to_dict()
    assert data["eof_policy"] == "unchanged"
    assert InterpreterConfig.from_dict(data) == config


def test_load_yaml(write_file):
    path = write_file("bf.yaml", "eof_policy: unchanged\nmax_steps: 500\nflush_output: false\n")
    config = load_config(path)
    assert config.eof_policy is EofPolicy.UNCHANGED
    assert config.max_steps == 500
    assert config.flush_output is False


def test_empty_yaml_gives_defaults(write_file):
    assert load_config(write_file("empty.yaml", "")) == InterpreterConfig()


@pytest.mark.parametrize("text", ["- 1\n- 2\n", "tape_size: 30000\n"])
def test_bad_yaml_contents(write_file, text):
    with pytest.raises(ConfigError):
        load_config(write_file("bad.yaml", text))


def test_from_env():
    environ = {
        "BF_EOF": "MAX",
        "BF_STEP_LIMIT": "100",
        "BF_MAX_CELLS": "none",
        "BF_CHUNK_SIZE": "64",
        "BF_FLUSH": "off",
    }
    config = InterpreterConfig.from_env(environ=environ)
    assert config.eof_policy is EofPolicy.MAX
    assert config.max_steps == 100
    assert config.max_cells is None
    assert config.chunk_size == 64
    assert config.flush_output is False


@pytest.mark.parametrize("environ", [{"BF_STEP_LIMIT": "lots"}, {"BF_FLUSH": "maybe"}])
def test_bad_env_values(environ):
    with pytest.raises(ConfigError):
        InterpreterConfig.from_env(environ=environ)


def test_environment_overrides_yaml(write_file):
    path = write_file("bf.yaml", "eof_policy: max\nmax_steps: 500\n")
    config = resolve_config(path, environ={"BF_STEP_LIMIT": "50"})
    assert config.max_steps == 50
    assert config.eof_policy is EofPolicy.MAX


def test_resolve_reads_process_environment(monkeypatch):
    monkeypatch.setenv("BF_STEP_LIMIT", "7")
    assert resolve_config().max_steps == 7
