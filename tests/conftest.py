# natural-language-commander/tests/conftest.py
import sys
from pathlib import Path

# --- Path Setup ---
# Must run before any application import so `commander`, `common`, ... resolve
# from the repo root without an install.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import pytest

from commander import NaturalLanguageCommander


class CallRecorder:
    """Callable stand-in for intent/question callbacks; remembers every call."""

    def __init__(self, name: str = "callback", result=None):
        self.name = name
        self.calls = []
        self.result = result

    def __call__(self, *args):
        self.calls.append(args)
        return self.result

    @property
    def called(self) -> bool:
        return bool(self.calls)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_args(self):
        return self.calls[-1] if self.calls else None

    def assert_called_with(self, *args):
        assert self.calls, f"{self.name} was never called"
        assert self.calls[-1] == args, f"{self.name} called with {self.calls[-1]!r}, expected {args!r}"

    def assert_not_called(self):
        assert not self.calls, f"{self.name} unexpectedly called with {self.calls!r}"


@pytest.fixture
def nlc() -> NaturalLanguageCommander:
    return NaturalLanguageCommander()


@pytest.fixture
def recorder():
    """Factory for named CallRecorders."""
    def _make(name: str = "callback", result=None) -> CallRecorder:
        return CallRecorder(name, result)
    return _make


@pytest.fixture
def match_callback(recorder) -> CallRecorder:
    return recorder("match_callback")
