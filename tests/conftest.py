"""
Shared pytest fixtures.
"""
import io
import os
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


NO_TASKS = "INFO: No tasks are running which match the specified criteria.\n"


def make_popen(output):
    """Popen stand-in usable as a context manager, streaming ``output`` on stdout."""
    proc = MagicMock()
    proc.stdout = io.StringIO(output)
    proc.__enter__.return_value = proc
    proc.__exit__.return_value = False
    return proc


class FakeTasklist:
    """Answers tasklist invocations from an in-memory process table."""

    def __init__(self):
        self.rows = []
        self.calls = []
        self.error = None
        self.fail_on_call = None

    def add(self, name, pid):
        self.rows.append((name, pid))
        return self

    @staticmethod
    def _csv(rows):
        return "".join(f'"{name}","{pid}","Console","1","10,240 K"\n' for name, pid in rows)

    def popen(self, args, **kwargs):
        self.calls.append(list(args))
        if self.error is not None and self.fail_on_call in (None, len(self.calls)):
            raise self.error
        if "/fi" in args:
            pid = int(args[args.index("/fi") + 1].split()[-1])
            rows = [row for row in self.rows if row[1] == pid]
            return make_popen(self._csv(rows) if rows else NO_TASKS)
        return make_popen(self._csv(self.rows))


@pytest.fixture
def fake_tasklist(monkeypatch):
    fake = FakeTasklist()
    monkeypatch.setattr("core.process_table.subprocess.Popen", fake.popen)
    return fake


class FakeWinError(Exception):
    """Mimics pywintypes.error: carries a ``winerror`` code."""

    def __init__(self, winerror, funcname="", strerror=""):
        super().__init__(winerror, funcname, strerror)
        self.winerror = winerror


@pytest.fixture
def fake_pywintypes():
    return SimpleNamespace(error=FakeWinError)
