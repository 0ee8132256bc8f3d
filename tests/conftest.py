# tests/conftest.py
"""Pytest configuration with shared fixtures for the revtui tests.

Compatibility: Python 3.11+
Tooling: pytest, unittest.mock
"""

from __future__ import annotations

import copy
import queue
import threading
from typing import Any, Generator, Optional
from unittest.mock import MagicMock, Mock, patch

import pytest

from revtui.core.Params import CommitDetails, CommitFilesParams, StatusItem
from revtui.core.Queue import NavigationQueue
from revtui.integrations.AsyncCommitFiles import NOTIFICATION_COMMIT_FILES, FetchError
from revtui.integrations.GitBridge import GitBridge
from revtui.ui.KeyBinder import KeyBinder
from revtui.ui.Theme import Theme
from revtui.utils.utils import DEFAULT_CONFIG


# --- Automatic mocking of curses calls that need a live terminal ---
@pytest.fixture(autouse=True)
def mock_curses_functions() -> Generator[None, None, None]:
    """Mock the `curses` calls that require `initscr()`.

    Color support is reported as missing, so every `Theme` built in a test
    uses its deterministic monochrome attributes.
    """
    with (
        patch("curses.curs_set"),
        patch("curses.has_colors", return_value=False),
        patch("curses.doupdate"),
    ):
        yield


# --- Base fixtures for curses and configuration ---
@pytest.fixture
def mock_stdscr() -> MagicMock:
    """Create a mock of the `curses` stdscr for testing UI components.

    Returns:
        MagicMock: A mocked `stdscr` with terminal size set to (24, 80).
    """
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    return stdscr


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Provide a private copy of the embedded default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def key_binder(mock_config: dict[str, Any]) -> KeyBinder:
    return KeyBinder(mock_config)


@pytest.fixture
def theme(mock_config: dict[str, Any]) -> Theme:
    return Theme(mock_config)


@pytest.fixture
def nav_queue() -> NavigationQueue:
    return NavigationQueue()


@pytest.fixture
def notifications() -> queue.Queue:
    return queue.Queue()


# --- Fetch service doubles ---
class FakeFilesService:
    """In-memory `get_commit_files` with optional gates and failures.

    Attributes:
        files: Params to the files returned for them.
        errors: Params to the exception raised for them.
        gates: Params to an event the call waits on before returning.
        calls: Every params the service was called with, in order.
    """

    def __init__(self) -> None:
        self.files: dict[CommitFilesParams, list[StatusItem]] = {}
        self.errors: dict[CommitFilesParams, BaseException] = {}
        self.gates: dict[CommitFilesParams, threading.Event] = {}
        self.calls: list[CommitFilesParams] = []
        self._lock = threading.Lock()

    def get_commit_files(self, params: CommitFilesParams) -> list[StatusItem]:
        with self._lock:
            self.calls.append(params)
        gate = self.gates.get(params)
        if gate is not None:
            gate.wait(timeout=5)
        if params in self.errors:
            raise self.errors[params]
        return list(self.files.get(params, []))


class FakeCommitFiles:
    """Synchronous stand-in for `AsyncCommitFiles`.

    `fetch` only records the request; `complete` plays the worker's part
    and returns the notification the UI loop would receive.
    """

    def __init__(self) -> None:
        self.result: Optional[tuple[CommitFilesParams, list[StatusItem]]] = None
        self.error: Optional[FetchError] = None
        self.fetch_calls: list[CommitFilesParams] = []
        self.pending: set[CommitFilesParams] = set()
        self.latest: Optional[CommitFilesParams] = None

    def current(self) -> Optional[tuple[CommitFilesParams, list[StatusItem]]]:
        if self.error is not None:
            error, self.error = self.error, None
            raise error
        return self.result

    def is_pending(self) -> bool:
        return bool(self.pending)

    def fetch(self, params: CommitFilesParams) -> None:
        self.latest = params
        if params in self.pending:
            return
        self.pending.add(params)
        self.fetch_calls.append(params)

    def complete(self, params: CommitFilesParams, paths: list[str]) -> dict[str, Any]:
        self.pending.discard(params)
        if params == self.latest:
            self.result = (params, [StatusItem(p) for p in paths])
        return {"type": NOTIFICATION_COMMIT_FILES, "params": params}

    def fail(self, params: CommitFilesParams, cause: BaseException) -> dict[str, Any]:
        self.pending.discard(params)
        if params == self.latest:
            self.result = None
            self.error = FetchError(params, cause)
        return {"type": NOTIFICATION_COMMIT_FILES, "params": params}


@pytest.fixture
def files_service() -> FakeFilesService:
    return FakeFilesService()


@pytest.fixture
def commit_files() -> FakeCommitFiles:
    return FakeCommitFiles()


@pytest.fixture
def mock_git_bridge() -> Mock:
    """Create a `GitBridge` mock returning details for any commit id.

    Returns:
        Mock: Configured `GitBridge` mock with sample data.
    """
    git_bridge = Mock(spec=GitBridge)
    git_bridge.get_commit_details.side_effect = lambda commit_id: CommitDetails(
        id=commit_id,
        author="Alice",
        email="alice@example.com",
        date="2024-05-01 10:00:00 +0200",
        message=(f"Summary of {commit_id}", "", "Body line."),
    )
    git_bridge.get_commit_tags.return_value = ()
    git_bridge.get_file_history.return_value = ["abc1234 First", "def5678 Second"]
    git_bridge.get_log.return_value = []
    return git_bridge

