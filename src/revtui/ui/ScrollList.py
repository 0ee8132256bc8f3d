# revtui/ui/ScrollList.py
"""ScrollList.py
========================
Stateless list rendering: materialise a sequence of rows into a bordered,
titled box inside a rectangle of a curses window.

The helpers keep no scroll position; callers pass exactly the rows they want
shown, starting at their own scroll offset. The ``items`` iterable is
consumed completely on every call, so a generator may be rebuilt per frame.
Rows are plain strings or ``(text, attr)`` pairs. Widths are measured in
terminal cells with ``wcwidth``, so wide characters are clipped correctly.
"""

import curses
from dataclasses import dataclass
from typing import Any, Iterable, Union

from wcwidth import wcswidth, wcwidth

from .Layout import Rect
from .Theme import Theme

CursesWindow = Any
Row = Union[str, tuple[str, int]]

BOX_H, BOX_V = "─", "│"
BOX_TL, BOX_TR, BOX_BL, BOX_BR = "┌", "┐", "└", "┘"


@dataclass(frozen=True)
class Block:
    title: str = ""
    title_attr: int = 0
    border_attr: int = 0
    borders: bool = True


def fit_to_width(text: str, width: int) -> str:
    """Clips ``text`` to at most ``width`` terminal cells."""
    if width <= 0:
        return ""
    if 0 <= wcswidth(text) <= width:
        return text
    out, used = [], 0
    for ch in text:
        w = max(wcwidth(ch), 0)
        if used + w > width:
            break
        out.append(ch)
        used += w
    return "".join(out)


def put_text(win: CursesWindow, y: int, x: int, text: str, width: int, attr: int = 0) -> None:
    """Writes clipped text; writes outside the window are skipped."""
    clipped = fit_to_width(text, width)
    if not clipped:
        return
    try:
        win.addstr(y, x, clipped, attr)
    except curses.error:
        # The bottom-right cell of a window cannot be written without error.
        pass


def clear_area(win: CursesWindow, rect: Rect) -> None:
    """Blanks ``rect`` so nothing drawn underneath in an earlier frame shows through."""
    blank = " " * max(rect.width, 0)
    for y in range(rect.y, rect.bottom):
        put_text(win, y, rect.x, blank, rect.width)


def draw_block(win: CursesWindow, rect: Rect, block: Block) -> Rect:
    """Draws the border and title of ``block``; returns the inner area."""
    if not block.borders:
        return rect
    if rect.width < 2 or rect.height < 2:
        return Rect(rect.x, rect.y, 0, 0)

    inner_w = rect.width - 2
    put_text(win, rect.y, rect.x, BOX_TL + BOX_H * inner_w + BOX_TR, rect.width, block.border_attr)
    for y in range(rect.y + 1, rect.bottom - 1):
        put_text(win, y, rect.x, BOX_V, 1, block.border_attr)
        put_text(win, y, rect.right - 1, BOX_V, 1, block.border_attr)
    put_text(win, rect.bottom - 1, rect.x, BOX_BL + BOX_H * inner_w + BOX_BR, rect.width, block.border_attr)
    if block.title:
        put_text(win, rect.y, rect.x + 1, block.title, inner_w, block.title_attr)
    return rect.inner()


def draw_list_block(win: CursesWindow, rect: Rect, block: Block, items: Iterable[Row]) -> None:
    rows = [(item, 0) if isinstance(item, str) else item for item in items]
    inner = draw_block(win, rect, block)
    if inner.is_empty():
        return
    blank = " " * inner.width
    for n in range(inner.height):
        put_text(win, inner.y + n, inner.x, blank, inner.width)
        if n < len(rows):
            text, attr = rows[n]
            put_text(win, inner.y + n, inner.x, text, inner.width, attr)


def draw_list(
    win: CursesWindow,
    rect: Rect,
    title: str,
    items: Iterable[Row],
    selected: bool,
    theme: Theme,
) -> None:
    """Draws ``items`` in a titled box styled as focused or unfocused."""
    block = Block(
        title=title,
        title_attr=theme.title(selected),
        border_attr=theme.block(selected),
    )
    draw_list_block(win, rect, block, items)
