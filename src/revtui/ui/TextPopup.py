# revtui/ui/TextPopup.py
"""TextPopup.py
========================
A read-only, scrollable popup of text lines. Used for the history of a file
and for the help listing of all commands.

Closing it with the ``exit_popup`` key pushes ``PopupStackPop`` so the shell
can reopen whatever popup was stacked underneath.
"""

import logging
from typing import Optional

from revtui.core.Queue import NavigationQueue, PopupStackPop

from .Component import (
    CommandBlocking,
    CommandInfo,
    Component,
    CursesWindow,
    EventState,
    Key,
    visibility_blocking,
)
from .KeyBinder import KeyBinder
from .Layout import Rect
from .ScrollList import clear_area, draw_list
from .Theme import Theme

logger = logging.getLogger("revtui")


# ==================== TextPopup Class ====================
class TextPopup(Component):
    def __init__(
        self,
        queue: Optional[NavigationQueue],
        theme: Theme,
        key_config: KeyBinder,
    ) -> None:
        super().__init__()
        self.queue = queue
        self.theme = theme
        self.key_config = key_config
        self.title = ""
        self.lines: list[str] = []
        self.scroll_top = 0
        self.viewport_height = 10

    def open(self, title: str, lines: list[str]) -> None:
        logger.info(f"TextPopup '{title}' opened with {len(lines)} lines.")
        self.title = title
        self.lines = list(lines)
        self.scroll_top = 0
        self.show()
        self.focus(True)

    def _scroll(self, delta: int) -> bool:
        max_top = max(0, len(self.lines) - self.viewport_height)
        new_top = max(0, min(self.scroll_top + delta, max_top))
        if new_top == self.scroll_top:
            return False
        self.scroll_top = new_top
        return True

    def _handle_event(self, ev: Key) -> EventState:
        if not self.is_visible():
            return EventState.NOT_CONSUMED
        kc = self.key_config
        if kc.key_match(ev, "exit_popup"):
            self.hide()
            if self.queue is not None:
                self.queue.push(PopupStackPop())
        elif kc.key_match(ev, "move_down"):
            self._scroll(1)
        elif kc.key_match(ev, "move_up"):
            self._scroll(-1)
        elif kc.key_match(ev, "page_down"):
            self._scroll(self.viewport_height)
        elif kc.key_match(ev, "page_up"):
            self._scroll(-self.viewport_height)
        elif kc.key_match(ev, "home"):
            self.scroll_top = 0
        elif kc.key_match(ev, "end"):
            self._scroll(len(self.lines))
        # Modal: every key is consumed while the popup is open.
        return EventState.CONSUMED

    def commands(self, out: list[CommandInfo], force_all: bool) -> CommandBlocking:
        if self.is_visible() or force_all:
            kc = self.key_config
            out.append(CommandInfo(f"Close [{kc.key_label('exit_popup')}]", order=1))
            out.append(
                CommandInfo(
                    f"Scroll [{kc.key_label('move_up')}{kc.key_label('move_down')}]",
                    len(self.lines) > self.viewport_height,
                )
            )
        return visibility_blocking(self)

    def draw(self, win: CursesWindow, rect: Rect) -> None:
        if not self.is_visible():
            return
        area = rect.centered(max(40, rect.width * 3 // 4), max(8, rect.height * 3 // 4))
        clear_area(win, area)
        self.viewport_height = max(1, area.height - 2)
        visible = self.lines[self.scroll_top : self.scroll_top + self.viewport_height]
        draw_list(win, area, self.title, iter(visible), True, self.theme)
