# revtui/ui/InspectCommitPopup.py
"""InspectCommitPopup.py
========================
A full-screen popup around ``CommitDetailsComponent``.

The popup can be dismissed in two ways:

- The ``exit_popup`` key closes it for good. Nothing is saved; the shell is
  told to pop its popup layer.
- The inner content hides itself while handling a key (the file tree
  opening a file's history). The popup then "stacks": it pushes a reopen
  token with the current commit, tags and file selection, so the shell can
  reopen it in the same state once the other view is closed.

The exit key is checked before the event is offered to the content, so an
exit key press is never stacked.
"""

import logging
from typing import Any, Optional

from revtui.core.Params import InspectCommitOpen
from revtui.core.Queue import NavigationQueue, PopupStackPop, PopupStackPush

from .CommitDetails import CommitDetailsComponent
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
from .ScrollList import clear_area

logger = logging.getLogger("revtui")


# ==================== InspectCommitPopup Class ====================
class InspectCommitPopup(Component):
    """Stackable popup showing the details and files of one commit."""

    def __init__(
        self,
        details: CommitDetailsComponent,
        queue: NavigationQueue,
        key_config: KeyBinder,
    ) -> None:
        super().__init__()
        self.details = details
        self.queue = queue
        self.key_config = key_config
        self.open_request: Optional[InspectCommitOpen] = None

    def open(self, request: InspectCommitOpen) -> None:
        """Shows the popup for ``request``.

        Raises:
            FetchError: Propagated from ``CommitDetailsComponent.set_commits``.
        """
        logger.info("Opening commit popup for %s", request.params.short())
        self.details.set_commits(request.params, request.tags)
        self.open_request = request
        self.show()
        self.details.show()
        self.details.focus(True)
        self.details.select_index(request.selection)

    def update(self, notification: dict[str, Any]) -> None:
        self.details.update(notification)

    def any_work_pending(self) -> bool:
        return self.is_visible() and self.details.any_work_pending()

    def hide_stacked(self, stack: bool) -> None:
        if stack:
            params = self.details.commit()
            if params is not None:
                token = InspectCommitOpen(params, self.details.tags(), self.details.selection())
                logger.debug("Stacking commit popup for %s", params.short())
                self.queue.push(PopupStackPush(token))
        else:
            self.queue.push(PopupStackPop())
        self.open_request = None
        self.hide()

    def focused(self) -> bool:
        return self.details.focused()

    def focus(self, focus: bool) -> None:
        self.details.focus(focus and self.is_visible())

    def hide(self) -> None:
        super().hide()
        self.details.focus(False)

    def _handle_event(self, ev: Key) -> EventState:
        if not self.is_visible():
            return EventState.NOT_CONSUMED

        if self.key_config.key_match(ev, "exit_popup"):
            self.hide_stacked(False)
            return EventState.CONSUMED

        state = self.details.event(ev)
        if state.is_consumed and state.became_hidden:
            self.hide_stacked(True)
            return EventState.CONSUMED
        return EventState.CONSUMED if state.is_consumed else EventState.NOT_CONSUMED

    def commands(self, out: list[CommandInfo], force_all: bool) -> CommandBlocking:
        if self.is_visible() or force_all:
            out.append(
                CommandInfo(f"Close [{self.key_config.key_label('exit_popup')}]", order=1)
            )
            self.details.commands(out, force_all)
        return visibility_blocking(self)

    def draw(self, win: CursesWindow, rect: Rect) -> None:
        if not self.is_visible():
            return
        clear_area(win, rect)
        self.details.draw(win, rect)
