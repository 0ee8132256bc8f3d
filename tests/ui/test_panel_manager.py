# tests/ui/test_panel_manager.py
"""Unit tests PanelManager class.
=================================

This module validates how the PanelManager drains the navigation queue and
replays the popup stack.

Covered areas:
- Stacking a reopen token and reopening it on the next pop
- File history requests opening the text popup
- Status messages forwarded to the application
- Fetch errors reported on the status bar instead of propagating
- Key routing and draw order of the popups

The file list bridge is replaced by the synchronous `FakeCommitFiles`
double, so no worker thread is started.
"""

import curses
import queue
from typing import Any
from unittest.mock import MagicMock, Mock, patch

import pytest

from revtui.core.Params import CommitFilesParams, InspectCommitOpen
from revtui.core.Queue import (
    NavigationQueue,
    OpenFileHistory,
    PopupStackPop,
    PopupStackPush,
    StatusMessage,
)
from revtui.integrations.GitBridge import GitCommandError
from revtui.ui.Component import CommandInfo
from revtui.ui.KeyBinder import KeyBinder
from revtui.ui.Layout import Rect
from revtui.ui.PanelManager import PanelManager
from revtui.ui.Theme import Theme

X = CommitFilesParams("abc123")
FILES = ["docs/guide.md", "src/a.py", "src/b.py"]


# ====== Fixtures =======


@pytest.fixture
def mock_app(
    mock_git_bridge: Mock, nav_queue: NavigationQueue, theme: Theme, key_binder: KeyBinder
) -> Mock:
    """Create a mock application object compatible with `PanelManager` expectations."""
    app = Mock()
    app.git = mock_git_bridge
    app.queue = nav_queue
    app.notifications = queue.Queue()
    app.theme = theme
    app.keybinder = key_binder
    app._set_status_message = Mock()
    return app


@pytest.fixture
def panel_manager(mock_app: Mock, commit_files: Any) -> PanelManager:
    with patch("revtui.ui.PanelManager.AsyncCommitFiles", return_value=commit_files):
        return PanelManager(mock_app)


def _open_with_files(pm: PanelManager, commit_files: Any) -> None:
    pm.open_commit(InspectCommitOpen(X, ("v1.0",)))
    pm.update(commit_files.complete(X, FILES))


# ====== Tests =======


def test_initial_state(panel_manager: PanelManager) -> None:
    assert not panel_manager.is_popup_active()
    assert panel_manager.popup_stack == []
    assert panel_manager.process_queue() is False
    assert panel_manager.handle_key(27) is False


def test_open_commit_shows_popup(panel_manager: PanelManager, commit_files: Any) -> None:
    _open_with_files(panel_manager, commit_files)
    assert panel_manager.is_popup_active()
    assert panel_manager.inspect_popup.details.file_count() == 3


def test_open_commit_reports_fetch_error(
    panel_manager: PanelManager, commit_files: Any, mock_app: Mock
) -> None:
    commit_files.latest = X
    commit_files.fail(X, RuntimeError("boom"))

    panel_manager.open_commit(InspectCommitOpen(X))

    assert not panel_manager.is_popup_active()
    message = mock_app._set_status_message.call_args.args[0]
    assert "abc123" in message and "boom" in message


def test_update_reports_fetch_error(
    panel_manager: PanelManager, commit_files: Any, mock_app: Mock
) -> None:
    panel_manager.open_commit(InspectCommitOpen(X))
    panel_manager.update(commit_files.fail(X, RuntimeError("boom")))
    mock_app._set_status_message.assert_called_once()


def test_push_then_pop_reopens_stacked_popup(
    panel_manager: PanelManager, commit_files: Any, nav_queue: NavigationQueue
) -> None:
    commit_files.latest = X
    commit_files.complete(X, FILES)
    token = InspectCommitOpen(X, ("v1.0",), 3)

    nav_queue.push(PopupStackPush(token))
    assert panel_manager.process_queue() is True
    assert panel_manager.popup_stack == [token]
    assert not panel_manager.is_popup_active()

    nav_queue.push(PopupStackPop())
    panel_manager.process_queue()

    assert panel_manager.popup_stack == []
    assert panel_manager.inspect_popup.is_visible()
    assert panel_manager.inspect_popup.details.selection() == 3
    assert panel_manager.inspect_popup.details.tags() == ("v1.0",)


def test_pop_with_empty_stack_does_nothing(
    panel_manager: PanelManager, nav_queue: NavigationQueue
) -> None:
    nav_queue.push(PopupStackPop())
    assert panel_manager.process_queue() is True
    assert not panel_manager.is_popup_active()


def test_file_history_round_trip(
    panel_manager: PanelManager, commit_files: Any, mock_git_bridge: Mock
) -> None:
    _open_with_files(panel_manager, commit_files)
    for _ in range(3):
        panel_manager.handle_key(curses.KEY_DOWN)

    assert panel_manager.handle_key(ord("H")) is True
    panel_manager.process_queue()

    mock_git_bridge.get_file_history.assert_called_once_with("src/a.py", "abc123")
    assert not panel_manager.inspect_popup.is_visible()
    assert panel_manager.text_popup.is_visible()
    assert panel_manager.text_popup.title == "History: src/a.py"
    assert panel_manager.popup_stack == [InspectCommitOpen(X, ("v1.0",), 3)]

    # Closing the history brings the commit back with the same file selected.
    assert panel_manager.handle_key(27) is True
    panel_manager.process_queue()

    assert not panel_manager.text_popup.is_visible()
    assert panel_manager.inspect_popup.is_visible()
    assert panel_manager.inspect_popup.details.file_tree.selected_item().path == "src/a.py"


def test_exit_from_commit_popup_does_not_stack(
    panel_manager: PanelManager, commit_files: Any
) -> None:
    _open_with_files(panel_manager, commit_files)
    panel_manager.handle_key(27)
    panel_manager.process_queue()
    assert panel_manager.popup_stack == []
    assert not panel_manager.is_popup_active()


def test_file_history_error_shows_placeholder(
    panel_manager: PanelManager, mock_git_bridge: Mock, mock_app: Mock, nav_queue: NavigationQueue
) -> None:
    mock_git_bridge.get_file_history.side_effect = GitCommandError(
        ["git", "log", "--follow"], 128, "fatal: bad revision"
    )
    nav_queue.push(OpenFileHistory("gone.txt", "abc123"))
    panel_manager.process_queue()

    assert panel_manager.text_popup.lines == ["(no history)"]
    mock_app._set_status_message.assert_called_once()


def test_status_message_forwarded(
    panel_manager: PanelManager, nav_queue: NavigationQueue, mock_app: Mock
) -> None:
    nav_queue.push(StatusMessage("Copied: a.txt"))
    panel_manager.process_queue()
    mock_app._set_status_message.assert_called_once_with("Copied: a.txt")


def test_text_popup_blocks_commands_of_popup_below(
    panel_manager: PanelManager, commit_files: Any
) -> None:
    _open_with_files(panel_manager, commit_files)
    panel_manager.show_text("Help", ["a"])
    out: list[CommandInfo] = []
    panel_manager.commands(out, False)
    assert [c.text for c in out if c.text.startswith("Close")] == ["Close [esc]"]


def test_draw_order_bottom_first(panel_manager: PanelManager, commit_files: Any) -> None:
    _open_with_files(panel_manager, commit_files)
    panel_manager.show_text("Help", ["a"])
    calls: list[str] = []
    with (
        patch.object(panel_manager.inspect_popup, "draw", side_effect=lambda *a: calls.append("inspect")),
        patch.object(panel_manager.text_popup, "draw", side_effect=lambda *a: calls.append("text")),
    ):
        panel_manager.draw_active_popups(MagicMock(), Rect(0, 0, 80, 24))
    assert calls == ["inspect", "text"]


def test_any_work_pending_follows_visible_popup(
    panel_manager: PanelManager, commit_files: Any
) -> None:
    panel_manager.open_commit(InspectCommitOpen(X))
    assert panel_manager.any_work_pending()
    panel_manager.update(commit_files.complete(X, FILES))
    assert not panel_manager.any_work_pending()
