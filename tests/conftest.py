"""Shared fixtures and fakes for the cmdwrap test suite."""

# Standard library imports
import io
import itertools
import os
import subprocess
import threading

# Third-party imports
import pytest

# Local/package imports
from cmdwrap.config import clear_config
from cmdwrap.execution import set_default_spawner
from cmdwrap.syntax import clear_formatter_registry

_pids = itertools.count(1000)


class RecordingStream(io.StringIO):
    """StringIO that remembers its contents after being closed."""

    captured = ""

    def close(self):
        if not self.closed:
            self.captured = self.getvalue()
        super().close()


class FakeProcess:
    """In-memory stand-in for subprocess.Popen."""

    def __init__(
        self,
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
        block: bool = False,
        stdin: bool = False,
    ):
        self.pid = next(_pids)
        self.returncode = None
        self.stdout = io.StringIO(stdout)
        self.stderr = io.StringIO(stderr)
        self.stdin = RecordingStream() if stdin else None
        self.terminated = False
        self.killed = False
        self._exited = threading.Event()
        if not block:
            self.exit(returncode)

    def exit(self, returncode: int = 0):
        if self.returncode is None:
            self.returncode = returncode
        self._exited.set()

    def poll(self):
        return self.returncode

    def wait(self, timeout=None):
        if not self._exited.wait(timeout):
            raise subprocess.TimeoutExpired("fake", timeout)
        return self.returncode

    def terminate(self):
        self.terminated = True
        self.exit(-15)

    def kill(self):
        self.killed = True
        self.exit(-9)


class StubbornProcess(FakeProcess):
    """Ignores terminate() and only exits when killed."""

    def terminate(self):
        self.terminated = True


class FakeSpawner:
    """Records spawn requests and hands out fake processes."""

    def __init__(self, process_factory=FakeProcess, **process_kwargs):
        self.process_factory = process_factory
        self.process_kwargs = process_kwargs
        self.requests = []
        self.processes = []

    def spawn(self, request):
        self.requests.append(request)
        process = self.process_factory(**self.process_kwargs)
        self.processes.append(process)
        return process


class FailingSpawner:
    """Fails like an executable that does not exist."""

    def __init__(self):
        self.requests = []

    def spawn(self, request):
        self.requests.append(request)
        raise FileNotFoundError(2, "No such file or directory", request.executable)


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    """Reset global configuration, formatters and spawner around each test."""
    for name in [name for name in os.environ if name.startswith("CMDWRAP_")]:
        monkeypatch.delenv(name)
    clear_config()
    clear_formatter_registry()
    set_default_spawner(None)
    yield
    clear_config()
    clear_formatter_registry()
    set_default_spawner(None)


@pytest.fixture
def spawner():
    """A spawner whose processes exit immediately with code 0."""
    return FakeSpawner()
