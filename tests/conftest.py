import json
import sys
from pathlib import Path

import pytest
import yaml

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'fsmkit'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from fsmkit.core.stdlib_logging import reset_logging_for_tests
from fsmkit.data import clear_caches
from helpers.machines import ORDER_TRANSITIONS


@pytest.fixture(autouse=True)
def _reset_fsmkit_globals(monkeypatch):
    """Each test starts without fsmkit log handlers, env overrides or cached schemas."""
    monkeypatch.delenv("FSMKIT_LOG_LEVEL", raising=False)
    reset_logging_for_tests()
    yield
    reset_logging_for_tests()
    clear_caches()


@pytest.fixture
def order_transitions():
    """Order-processing transitions with a detour through review."""
    return {name: dict(definition) for name, definition in ORDER_TRANSITIONS.items()}


@pytest.fixture
def write_definition(tmp_path):
    """Write a definition document to ``tmp_path`` and return its path."""

    def _write(data, name="machine.yaml"):
        path = tmp_path / name
        if path.suffix == ".json":
            path.write_text(json.dumps(data), encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write
