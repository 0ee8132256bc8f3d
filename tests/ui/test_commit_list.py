# tests/ui/test_commit_list.py
"""Tests for `CommitListComponent`: loading, movement, marking and drawing."""

import curses
from unittest.mock import MagicMock, Mock

import pytest

from revtui.core.Params import CommitFilesParams, LogEntry
from revtui.ui.CommitList import CommitListComponent
from revtui.ui.Component import CommandBlocking, CommandInfo, EventState
from revtui.ui.KeyBinder import KeyBinder
from revtui.ui.Layout import Rect
from revtui.ui.Theme import Theme

ENTRIES = [
    LogEntry("c3c3c3c3c3", "Alice", "2024-05-03", "Third"),
    LogEntry("b2b2b2b2b2", "Bob", "2024-05-02", "Second"),
    LogEntry("a1a1a1a1a1", "Alice", "2024-05-01", "First"),
]


@pytest.fixture
def commit_list(mock_git_bridge: Mock, theme: Theme, key_binder: KeyBinder) -> CommitListComponent:
    mock_git_bridge.get_log.return_value = list(ENTRIES)
    cl = CommitListComponent(mock_git_bridge, theme, key_binder)
    cl.focus(True)
    cl.refresh()
    return cl


def test_refresh_loads_entries(commit_list: CommitListComponent) -> None:
    assert commit_list.selected_entry() == ENTRIES[0]
    assert commit_list.selected_params() == CommitFilesParams("c3c3c3c3c3")


def test_empty_log(mock_git_bridge: Mock, theme: Theme, key_binder: KeyBinder) -> None:
    cl = CommitListComponent(mock_git_bridge, theme, key_binder)
    cl.focus(True)
    cl.refresh()
    assert cl.selected_entry() is None
    assert cl.selected_params() is None
    assert cl.event(curses.KEY_DOWN) == EventState.NOT_CONSUMED
    assert cl.event(ord("m")) == EventState.NOT_CONSUMED


def test_movement_is_clamped(commit_list: CommitListComponent) -> None:
    assert commit_list.event(curses.KEY_UP) == EventState.NOT_CONSUMED
    assert commit_list.event(ord("j")).is_consumed
    assert commit_list.event(curses.KEY_END).is_consumed
    assert commit_list.selected == 2
    assert commit_list.event(curses.KEY_DOWN) == EventState.NOT_CONSUMED


def test_unfocused_list_ignores_keys(commit_list: CommitListComponent) -> None:
    commit_list.focus(False)
    assert commit_list.event(curses.KEY_DOWN) == EventState.NOT_CONSUMED


def test_mark_selects_comparison(commit_list: CommitListComponent) -> None:
    commit_list.event(ord("m"))
    assert commit_list.marked == 0
    assert commit_list.selected_params() == CommitFilesParams("c3c3c3c3c3")

    commit_list.event(curses.KEY_END)
    assert commit_list.selected_params() == CommitFilesParams("a1a1a1a1a1", "c3c3c3c3c3")


def test_mark_toggles_off(commit_list: CommitListComponent) -> None:
    commit_list.event(ord("m"))
    commit_list.event(ord("m"))
    assert commit_list.marked is None


def test_refresh_clears_mark(commit_list: CommitListComponent) -> None:
    commit_list.event(ord("m"))
    commit_list.refresh()
    assert commit_list.marked is None


def test_commands_pass_on(commit_list: CommitListComponent) -> None:
    out: list[CommandInfo] = []
    assert commit_list.commands(out, False) is CommandBlocking.PASSING_ON
    assert [c.text for c in out] == ["Inspect [⏎]", "Mark [m]"]


def test_draw_rows(commit_list: CommitListComponent, mock_stdscr: MagicMock) -> None:
    commit_list.event(ord("m"))
    commit_list.draw(mock_stdscr, Rect(0, 0, 60, 10))
    texts = [c.args[2] for c in mock_stdscr.addstr.call_args_list]
    assert "Commits (3)" in texts
    assert "*c3c3c3c 2024-05-03 Third" in texts
    assert " b2b2b2b 2024-05-02 Second" in texts
