# revtui/ui/PanelManager.py
"""PanelManager.py
========================
This module defines the PanelManager class, which owns the popups of revtui
(the commit inspection popup and the text popup) and the popup stack.

Components never open or close each other directly; they push internal
events on the navigation queue. Once per frame the PanelManager drains that
queue and acts on each event:

- ``PopupStackPush``: remember a popup that was closed in a resumable way.
- ``PopupStackPop``: reopen the most recently stacked popup, if any.
- ``OpenFileHistory``: show the history of a file in the text popup.
- ``StatusMessage``: forward a message to the status bar.
"""

import logging
from typing import TYPE_CHECKING, Any

from revtui.core.Params import InspectCommitOpen
from revtui.core.Queue import (
    OpenFileHistory,
    PopupStackPop,
    PopupStackPush,
    StatusMessage,
)
from revtui.integrations.AsyncCommitFiles import AsyncCommitFiles, FetchError
from revtui.integrations.GitBridge import GitCommandError

from .CommitDetails import CommitDetailsComponent
from .Component import CommandInfo, Component, CursesWindow, command_pump, event_pump
from .InspectCommitPopup import InspectCommitPopup
from .Layout import Rect
from .TextPopup import TextPopup


if TYPE_CHECKING:
    from revtui.core.App import App


## ================= PanelManager Class ===============================
class PanelManager:
    """PanelManager Class
    ==========================
    Manages the popups drawn on top of the main screen and replays the
    popup stack.

    Attributes:
        app (App): Reference to the application shell.
        inspect_popup (InspectCommitPopup): Details and files of one commit.
        text_popup (TextPopup): File history and help listing.
        popup_stack (list[InspectCommitOpen]): Reopen tokens, newest last.

    Methods:
        is_popup_active() -> bool:
            True if any popup is visible.
        open_commit(request) -> None:
            Opens the inspection popup, reporting fetch errors to the status bar.
        show_text(title, lines) -> None:
            Opens the text popup.
        process_queue() -> bool:
            Drains the navigation queue. Returns True if a redraw is needed.
        handle_key(key) -> bool:
            Offers a key to the visible popups, topmost first.
        draw_active_popups(win, rect) -> None:
            Draws the visible popups, bottom first.
    """

    def __init__(self, app_instance: "App"):
        self.app = app_instance
        details = CommitDetailsComponent(
            app_instance.git,
            AsyncCommitFiles(app_instance.git, app_instance.notifications),
            app_instance.queue,
            app_instance.theme,
            app_instance.keybinder,
        )
        self.inspect_popup = InspectCommitPopup(details, app_instance.queue, app_instance.keybinder)
        self.text_popup = TextPopup(app_instance.queue, app_instance.theme, app_instance.keybinder)
        self.popup_stack: list[InspectCommitOpen] = []
        logging.info("PanelManager initialised.")

    def _popups(self) -> list[Component]:
        """Popups in event order: the one drawn on top comes first."""
        return [self.text_popup, self.inspect_popup]

    def is_popup_active(self) -> bool:
        return any(p.is_visible() for p in self._popups())

    def any_work_pending(self) -> bool:
        return self.inspect_popup.any_work_pending()

    def open_commit(self, request: InspectCommitOpen) -> None:
        try:
            self.inspect_popup.open(request)
        except FetchError as e:
            logging.error(f"Failed to open commit {request.params.short()}: {e}", exc_info=True)
            self.app._set_status_message(str(e))

    def show_text(self, title: str, lines: list[str]) -> None:
        self.text_popup.open(title, lines)

    def _open_file_history(self, event: OpenFileHistory) -> None:
        try:
            lines = self.app.git.get_file_history(event.path, event.commit_id)
        except GitCommandError as e:
            logging.error(f"Could not load history of {event.path}: {e}", exc_info=True)
            self.app._set_status_message(str(e))
            lines = []
        self.show_text(f"History: {event.path}", lines or ["(no history)"])

    def process_queue(self) -> bool:
        """Drains the navigation queue; returns True if any event was handled."""
        handled = False
        for event in self.app.queue.drain():
            handled = True
            logging.debug("PanelManager: internal event %r", event)
            if isinstance(event, PopupStackPush):
                self.popup_stack.append(event.token)
            elif isinstance(event, PopupStackPop):
                if self.popup_stack:
                    self.open_commit(self.popup_stack.pop())
            elif isinstance(event, OpenFileHistory):
                self._open_file_history(event)
            elif isinstance(event, StatusMessage):
                self.app._set_status_message(event.text)
        return handled

    def update(self, notification: dict[str, Any]) -> None:
        try:
            self.inspect_popup.update(notification)
        except FetchError as e:
            logging.error(f"Commit files fetch failed: {e}", exc_info=True)
            self.app._set_status_message(str(e))

    def handle_key(self, key: int | str) -> bool:
        """Passes a key to the visible popups.
        Returns True if a popup consumed the event.
        """
        if not self.is_popup_active():
            return False
        return event_pump(key, self._popups()).is_consumed

    def commands(self, out: list[CommandInfo], force_all: bool) -> None:
        command_pump(out, force_all, self._popups())

    def draw_active_popups(self, win: CursesWindow, rect: Rect) -> None:
        for popup in reversed(self._popups()):
            popup.draw(win, rect)

