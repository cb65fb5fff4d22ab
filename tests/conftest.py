import pytest

from bftape.config import ENV_VARS, InterpreterConfig
from bftape.engine import run_program


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep BF_* settings from the calling shell out of the tests."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def run():
    """Run a program with in-memory streams; keyword arguments go to InterpreterConfig."""
    def _run(source, stdin=b"", **settings):
        return run_program(source, InterpreterConfig(**settings), stdin=stdin, capture=True)
    return _run


@pytest.fixture
def write_file(tmp_path):
    def _write(name, text):
        path = tmp_path / name
        path.write_text(text)
        return str(path)
    return _write
