# revtui/core/App.py
"""revtui.core.App
============================
App: the application shell of revtui.

The App owns everything that is not a reusable component:

- the curses screen and the main loop (input, queues, rendering);
- the commit list on the left and the commit details on the right;
- the navigation queue, drained through the PanelManager;
- the notification queue on which background fetches report completion;
- the status bar with the command bar and the busy indicator.

Key dispatch goes to the visible popups first. When no popup is open, keys
go to the focused side of the main screen, then to the global bindings
(``open_commit``, ``toggle_focus``, ``help``, ``quit``).
"""

import curses
import locale
import logging
import os
import queue
import sys
from typing import Any, Optional

from revtui.core.Params import InspectCommitOpen
from revtui.core.Queue import NavigationQueue
from revtui.integrations.AsyncCommitFiles import AsyncCommitFiles, FetchError
from revtui.integrations.GitBridge import GitBridge, GitCommandError
from revtui.ui.CommitDetails import CommitDetailsComponent
from revtui.ui.CommitList import CommitListComponent
from revtui.ui.Component import CommandInfo
from revtui.ui.KeyBinder import KeyBinder
from revtui.ui.Layout import Constraint, Rect, split
from revtui.ui.PanelManager import PanelManager
from revtui.ui.ScrollList import put_text
from revtui.ui.Theme import Theme
from revtui.utils.logging_config import logger, setup_logging
from revtui.utils.utils import load_config

BUSY_FRAMES = "|/-\\"


# ==================== App Class ====================
class App:
    """The revtui application shell.

    Attributes:
        stdscr: The curses standard screen.
        config (dict): Merged configuration.
        git (GitBridge): Git fetch service.
        queue (NavigationQueue): Internal events pushed by components.
        notifications (queue.Queue): Completion notices from worker threads.
        focus (str): ``"list"`` or ``"details"``.
    """

    def __init__(self, stdscr: Any, config: dict[str, Any], repo_dir: Optional[str] = None):
        self.stdscr = stdscr
        self.config = config
        self.running = False
        self.status_message = ""
        self.focus = "list"
        self._tick = 0
        self._force_full_redraw = True

        self.keybinder = KeyBinder(config, stdscr)
        self.theme = Theme(config)
        self.git = GitBridge(config, repo_dir)
        self.queue = NavigationQueue()
        self.notifications: "queue.Queue[dict[str, Any]]" = queue.Queue()

        self.commit_list = CommitListComponent(self.git, self.theme, self.keybinder)
        self.details = CommitDetailsComponent(
            self.git,
            AsyncCommitFiles(self.git, self.notifications),
            self.queue,
            self.theme,
            self.keybinder,
        )
        self.details.show()
        self.panel_manager = PanelManager(self)
        self._apply_focus()

    def _set_status_message(self, message: str) -> None:
        if self.status_message != message:
            self.status_message = message
            logging.debug(f"Status message set to: '{message}'")

    # --- main screen state ---

    def _apply_focus(self) -> None:
        self.commit_list.focus(self.focus == "list")
        self.details.focus(self.focus == "details")

    def toggle_focus(self) -> bool:
        self.focus = "details" if self.focus == "list" else "list"
        self._apply_focus()
        return True

    def _sync_details(self) -> None:
        """Points the details pane at the selected commit of the list."""
        try:
            self.details.set_commits(self.commit_list.selected_params())
        except FetchError as e:
            logger.error(f"Commit files fetch failed: {e}", exc_info=True)
            self._set_status_message(str(e))

    def load_log(self) -> None:
        try:
            self.commit_list.refresh()
        except GitCommandError as e:
            logger.error(f"Could not read the git log: {e}", exc_info=True)
            self._set_status_message(str(e))
        self._sync_details()

    def open_selected_commit(self) -> bool:
        params = self.commit_list.selected_params()
        if params is None:
            return False
        tags: tuple[str, ...] = ()
        if not params.is_compare:
            try:
                tags = self.git.get_commit_tags(params.id)
            except GitCommandError as e:
                logger.warning(f"Could not read tags of {params.id[:7]}: {e}")
        self.panel_manager.open_commit(InspectCommitOpen(params, tags))
        return True

    def command_list(self, force_all: bool = False) -> list[CommandInfo]:
        out: list[CommandInfo] = []
        if self.panel_manager.is_popup_active():
            self.panel_manager.commands(out, force_all)
            if not force_all:
                return sorted(out, key=lambda c: c.order)
        kb = self.keybinder
        out.append(CommandInfo(f"Focus [{kb.key_label('toggle_focus')}]", order=2))
        self.commit_list.commands(out, force_all)
        self.details.commands(out, force_all)
        out.append(CommandInfo(f"Help [{kb.key_label('help')}]", order=3))
        out.append(CommandInfo(f"Quit [{kb.key_label('quit')}]", order=4))
        return sorted(out, key=lambda c: c.order)

    def show_help(self) -> bool:
        lines = [c.text for c in self.command_list(force_all=True)]
        self.panel_manager.show_text("Help", lines)
        return True

    def exit_app(self) -> None:
        logger.info("Exit requested.")
        self.running = False

    # --- event processing ---

    def _process_all_queues(self) -> bool:
        """Drains background notifications and the navigation queue."""
        changed = False
        try:
            while True:
                notification = self.notifications.get_nowait()
                logging.debug(f"Processed notification: {notification}")
                changed = True
                try:
                    self.details.update(notification)
                except FetchError as e:
                    logger.error(f"Commit files fetch failed: {e}", exc_info=True)
                    self._set_status_message(str(e))
                self.panel_manager.update(notification)
        except queue.Empty:
            pass

        changed |= self.panel_manager.process_queue()
        if not self.details.is_visible():
            # The file tree hid the details pane to show a file history.
            self.details.show()
            self._apply_focus()
        return changed

    def handle_key(self, key: int | str) -> bool:
        if self.panel_manager.is_popup_active():
            self.panel_manager.handle_key(key)
            return True

        kb = self.keybinder
        if self.focus == "list":
            if self.commit_list.event(key).is_consumed:
                self._sync_details()
                return True
        elif self.details.event(key).is_consumed:
            return True

        if kb.key_match(key, "open_commit"):
            return self.open_selected_commit()
        if kb.key_match(key, "toggle_focus"):
            return self.toggle_focus()
        if kb.key_match(key, "help"):
            return self.show_help()
        if kb.key_match(key, "quit"):
            self.exit_app()
            return True
        return False

    def _process_events_and_input(self) -> bool:
        redraw_needed = self._process_all_queues()

        key_input = self.keybinder.get_key_input()
        if key_input != curses.ERR and key_input != -1:
            if key_input == curses.KEY_RESIZE:
                self._force_full_redraw = True
            elif self.handle_key(key_input):
                redraw_needed = True

        # Keep the busy indicator spinning while a fetch is in flight.
        if self.any_work_pending():
            self._tick += 1
            redraw_needed = True
        return redraw_needed

    def any_work_pending(self) -> bool:
        return self.details.any_work_pending() or self.panel_manager.any_work_pending()

    # --- rendering ---

    def _draw_status_bar(self, rect: Rect) -> None:
        commands = "  ".join(c.text for c in self.command_list() if c.available)
        busy = BUSY_FRAMES[self._tick % len(BUSY_FRAMES)] + " " if self.any_work_pending() else ""
        put_text(self.stdscr, rect.y, rect.x, " " * rect.width, rect.width, curses.A_REVERSE)
        put_text(self.stdscr, rect.y, rect.x, f"{busy}{self.status_message}", rect.width, curses.A_REVERSE)
        put_text(self.stdscr, rect.y + 1, rect.x, commands, rect.width)

    def _render_screen(self, redraw_needed: bool) -> None:
        if not redraw_needed and not self._force_full_redraw:
            return
        if self._force_full_redraw:
            self.stdscr.erase()

        height, width = self.stdscr.getmaxyx()
        screen = Rect(0, 0, width, height)
        body, status = split(screen, [Constraint.min(0), Constraint.length(2)])
        left, right = split(
            body, [Constraint.percentage(40), Constraint.min(0)], direction="horizontal"
        )
        self.commit_list.draw(self.stdscr, left)
        self.details.draw(self.stdscr, right)
        self.panel_manager.draw_active_popups(self.stdscr, body)
        self._draw_status_bar(status)

        self.stdscr.noutrefresh()
        curses.doupdate()
        self._force_full_redraw = False

    # ------------------  Main loop  ------------------------
    def run(self) -> None:
        """The main event loop.

        Each iteration drains the queues, reads one key (waiting at most
        100 ms) and redraws the screen if anything changed. It runs until
        ``self.running`` is set to False by ``exit_app``.
        """
        logger.info("revtui main loop started.")
        self.running = True
        self.stdscr.keypad(True)
        self.stdscr.timeout(100)
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        self.load_log()

        while self.running:
            try:
                redraw_needed = self._process_events_and_input()
                self._render_screen(redraw_needed)
            except KeyboardInterrupt:
                logger.info("Main loop interrupted by KeyboardInterrupt.")
                self.exit_app()
            except Exception as e:
                logger.critical("Unhandled exception in main loop: %s", e, exc_info=True)
                self.exit_app()
                break

        logger.info("revtui main loop finished.")


def _run(stdscr: Any, config: dict[str, Any], repo_dir: Optional[str]) -> None:
    try:
        curses.set_escdelay(25)
    except AttributeError:
        os.environ.setdefault("ESCDELAY", "25")
    App(stdscr, config, repo_dir).run()


def main() -> None:
    """Console entry point: load config, set up logging, run under curses.wrapper."""
    config = load_config()
    setup_logging(config)
    repo_dir = sys.argv[1] if len(sys.argv) > 1 else None

    git = GitBridge(config, repo_dir)
    if not git.is_repo():
        print(f"revtui: {git.get_repo_dir()} is not inside a git work tree", file=sys.stderr)
        sys.exit(1)

    logger.info("revtui starting up...")
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    try:
        curses.wrapper(_run, config, repo_dir)
        logger.info("revtui shut down gracefully.")
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)
