"""Hand-written test doubles for connection adapters, hosts and dispatchers."""

from typing import Any, Dict, List, Optional

import pytest
import structlog

from deckhand.connection import ConnectionAdapter
from deckhand.events import LifecycleEvent

DEFAULT_RESULTS = {
    "connect": True,
    "is_connected": True,
    "is_directory": False,
    "create_directory": True,
    "is_file": False,
    "is_link": False,
    "link": True,
    "read_link": None,
    "delete": True,
    "put_file": True,
    "get_file": True,
}


class RecordingConnection(ConnectionAdapter):
    """Connection adapter returning scripted results and recording every call.

    A result given as a list is returned one item per call; the last item
    repeats once the list is exhausted.
    """

    def __init__(self, **results):
        self.calls: List[tuple] = []
        self._results: Dict[str, Any] = dict(DEFAULT_RESULTS)
        for name, result in results.items():
            self._results[name] = list(result) if isinstance(result, list) else result

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        result = self._results[name]
        if isinstance(result, list):
            return result.pop(0) if len(result) > 1 else result[0]
        return result

    def calls_to(self, name) -> List[tuple]:
        return [call[1:] for call in self.calls if call[0] == name]

    def method_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def connect(self):
        return self._record("connect")

    def is_connected(self):
        return self._record("is_connected")

    def is_directory(self, path):
        return self._record("is_directory", path)

    def create_directory(self, path):
        return self._record("create_directory", path)

    def is_file(self, path):
        return self._record("is_file", path)

    def is_link(self, path):
        return self._record("is_link", path)

    def link(self, target, link_path):
        return self._record("link", target, link_path)

    def read_link(self, path):
        return self._record("read_link", path)

    def delete(self, path, recursive=False):
        return self._record("delete", path, recursive)

    def put_file(self, local_path, remote_path):
        return self._record("put_file", local_path, remote_path)

    def get_file(self, remote_path, local_path):
        return self._record("get_file", remote_path, local_path)


class FakeHost:
    """Host double recording accessor use."""

    def __init__(
        self,
        connection: Optional[ConnectionAdapter] = None,
        path: str = "{workspace}",
        stage: str = "test",
        hostname: str = "example.com",
    ):
        self.hostname = hostname
        self._connection = connection
        self._path = path
        self._stage = stage
        self.accessed: List[str] = []

    def has_connection(self):
        self.accessed.append("has_connection")
        return self._connection is not None

    def get_connection(self):
        self.accessed.append("get_connection")
        return self._connection

    @property
    def path(self):
        self.accessed.append("path")
        return self._path

    @property
    def stage(self):
        self.accessed.append("stage")
        return self._stage


class FakeWorkspace:
    """Workspace double recording host lookups."""

    def __init__(self, host):
        self._host = host
        self.host_reads = 0

    @property
    def host(self):
        self.host_reads += 1
        return self._host


class RecordingDispatcher:
    """Dispatcher double recording dispatched sub-events."""

    def __init__(self):
        self.dispatched: List[tuple] = []

    def dispatch(self, event_name, event):
        self.dispatched.append((event_name, event))

    def log_events(self):
        return [event for name, event in self.dispatched if name is LifecycleEvent.LOG]


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def maintenance_source(tmp_path):
    """A local maintenance tree holding a single page."""
    source = tmp_path / "maintenance-source"
    source.mkdir()
    (source / "index.html").write_text("<h1>Maintenance</h1>")
    return source


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by command line tests."""
    yield
    structlog.reset_defaults()
