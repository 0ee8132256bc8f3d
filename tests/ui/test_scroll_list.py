# tests/ui/test_scroll_list.py
"""Unit tests for the stateless list rendering helpers.
=======================================================

The curses window is a `MagicMock`; assertions inspect its `addstr` calls.
"""

import curses
from unittest.mock import MagicMock

from revtui.ui.Layout import Rect
from revtui.ui.ScrollList import (
    Block,
    clear_area,
    draw_block,
    draw_list,
    draw_list_block,
    fit_to_width,
    put_text,
)
from revtui.ui.Theme import Theme


def _texts(win: MagicMock) -> list[str]:
    return [c.args[2] for c in win.addstr.call_args_list]


def test_fit_to_width_counts_terminal_cells() -> None:
    assert fit_to_width("hello", 3) == "hel"
    assert fit_to_width("hello", 10) == "hello"
    assert fit_to_width("日本語", 4) == "日本"
    assert fit_to_width("x", 0) == ""


def test_put_text_skips_curses_errors() -> None:
    win = MagicMock()
    win.addstr.side_effect = curses.error
    put_text(win, 0, 0, "abc", 3)
    win.addstr.assert_called_once()


def test_draw_block_returns_inner_area_and_draws_title() -> None:
    win = MagicMock()
    inner = draw_block(win, Rect(0, 0, 10, 4), Block(title="Files"))
    assert inner == Rect(1, 1, 8, 2)
    assert "Files" in _texts(win)


def test_draw_block_too_small() -> None:
    win = MagicMock()
    assert draw_block(win, Rect(0, 0, 1, 1), Block()).is_empty()


def test_draw_list_block_consumes_generator_and_clips_rows() -> None:
    win = MagicMock()
    produced: list[int] = []

    def rows():
        for n in range(5):
            produced.append(n)
            yield f"row {n}"

    draw_list_block(win, Rect(0, 0, 20, 4), Block(title="T"), rows())

    assert produced == [0, 1, 2, 3, 4]
    texts = _texts(win)
    assert "row 0" in texts and "row 1" in texts
    assert "row 2" not in texts


def test_draw_list_block_accepts_attr_pairs() -> None:
    win = MagicMock()
    draw_list_block(win, Rect(0, 0, 20, 3), Block(borders=False), [("abc", curses.A_BOLD)])
    assert any(c.args[2] == "abc" and c.args[3] == curses.A_BOLD for c in win.addstr.call_args_list)


def test_draw_list_is_restartable(theme: Theme) -> None:
    win = MagicMock()
    draw_list(win, Rect(0, 0, 20, 5), "Title", iter(["a", "b"]), True, theme)
    first = _texts(win)
    win.reset_mock()
    draw_list(win, Rect(0, 0, 20, 5), "Title", iter(["a", "b"]), True, theme)
    assert _texts(win) == first


def test_clear_area_blanks_every_row() -> None:
    win = MagicMock()
    clear_area(win, Rect(2, 1, 5, 3))
    assert [c.args[:3] for c in win.addstr.call_args_list] == [
        (1, 2, "     "),
        (2, 2, "     "),
        (3, 2, "     "),
    ]
