# revtui/ui/CommitList.py
"""CommitList.py
========================
The list of commits on the left side of the main screen.

A leaf over ``GitBridge.get_log``: it keeps the loaded entries, a selected
row and a scroll offset. A second commit can be marked with ``mark_key`` to
compare it with the selected one.
"""

import logging
from typing import Optional, Protocol

from revtui.core.Params import CommitFilesParams, LogEntry

from .Component import (
    CommandBlocking,
    CommandInfo,
    Component,
    CursesWindow,
    EventState,
    Key,
)
from .KeyBinder import KeyBinder
from .Layout import Rect
from .ScrollList import draw_list
from .StatusTree import VerticalScroll
from .Theme import Theme

logger = logging.getLogger("revtui")


class LogService(Protocol):
    def get_log(self, limit: Optional[int] = None) -> list[LogEntry]: ...


# ==================== CommitListComponent Class ====================
class CommitListComponent(Component):
    """Selectable list of log entries.

    Attributes:
        entries (list[LogEntry]): Commits, newest first.
        selected (int): Index of the selected entry.
        marked (Optional[int]): Index of the entry marked for comparison.
    """

    def __init__(self, service: LogService, theme: Theme, key_config: KeyBinder) -> None:
        super().__init__()
        self.visible = True
        self.service = service
        self.theme = theme
        self.key_config = key_config
        self.entries: list[LogEntry] = []
        self.selected = 0
        self.marked: Optional[int] = None
        self.scroll = VerticalScroll()
        self.viewport_height = 10

    def refresh(self) -> None:
        self.entries = self.service.get_log()
        self.selected = min(self.selected, max(0, len(self.entries) - 1))
        self.marked = None
        logger.info("CommitList: loaded %d commits", len(self.entries))

    def selected_entry(self) -> Optional[LogEntry]:
        if not self.entries:
            return None
        return self.entries[self.selected]

    def selected_params(self) -> Optional[CommitFilesParams]:
        """Params of the selected commit, compared against the marked one if any."""
        entry = self.selected_entry()
        if entry is None:
            return None
        if self.marked is not None and self.marked != self.selected:
            return CommitFilesParams(entry.id, self.entries[self.marked].id)
        return CommitFilesParams(entry.id)

    def _move(self, delta: int) -> bool:
        if not self.entries:
            return False
        new = max(0, min(self.selected + delta, len(self.entries) - 1))
        if new == self.selected:
            return False
        self.selected = new
        return True

    def _handle_event(self, ev: Key) -> EventState:
        if not self.focused():
            return EventState.NOT_CONSUMED
        kc = self.key_config
        if kc.key_match(ev, "move_down"):
            moved = self._move(1)
        elif kc.key_match(ev, "move_up"):
            moved = self._move(-1)
        elif kc.key_match(ev, "page_down"):
            moved = self._move(self.viewport_height)
        elif kc.key_match(ev, "page_up"):
            moved = self._move(-self.viewport_height)
        elif kc.key_match(ev, "home"):
            moved = self._move(-len(self.entries))
        elif kc.key_match(ev, "end"):
            moved = self._move(len(self.entries))
        elif kc.key_match(ev, "mark_commit") and self.entries:
            self.marked = None if self.marked == self.selected else self.selected
            moved = True
        else:
            moved = False
        return EventState.CONSUMED if moved else EventState.NOT_CONSUMED

    def commands(self, out: list[CommandInfo], force_all: bool) -> CommandBlocking:
        if self.is_visible() or force_all:
            kc = self.key_config
            out.append(CommandInfo(f"Inspect [{kc.key_label('open_commit')}]", bool(self.entries)))
            out.append(CommandInfo(f"Mark [{kc.key_label('mark_commit')}]", bool(self.entries)))
        return CommandBlocking.PASSING_ON

    def _format(self, idx: int, entry: LogEntry) -> tuple[str, int]:
        mark = "*" if idx == self.marked else " "
        text = f"{mark}{entry.id[:7]} {entry.date} {entry.summary}"
        if idx == self.selected:
            return text, self.theme.text(True, self.focused())
        return text, 0

    def draw(self, win: CursesWindow, rect: Rect) -> None:
        if not self.is_visible():
            return
        self.viewport_height = max(1, rect.height - 2)
        top = self.scroll.update(self.selected, len(self.entries), self.viewport_height)
        rows = (
            self._format(idx, self.entries[idx])
            for idx in range(top, min(len(self.entries), top + self.viewport_height))
        )
        draw_list(win, rect, f"Commits ({len(self.entries)})", rows, self.focused(), self.theme)
