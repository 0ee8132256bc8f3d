# revtui/ui/CommitDetails.py
"""CommitDetails.py
========================
Description:
-----------------------
The "commit details" composite and its two detail leaves.

``CommitDetailsComponent`` owns three children, always offered events and
commands in this order:

1. ``DetailsComponent``: author, date, hash, tags and message of one commit.
2. ``CompareDetailsComponent``: the headers of the two commits being compared.
3. ``StatusTreeComponent``: the files changed by the commit (or pair).

Only one of the detail leaves is active at a time, chosen by the shape of
the ``CommitFilesParams`` given to ``set_commits``. The file list is fetched
in the background through ``AsyncCommitFiles``; the composite re-checks the
identity of the bridge's current result every time, so results that arrive
for a commit no longer shown are never put into the tree.

Focus moves between the active detail leaf and the tree with the
``move_down`` / ``move_up`` keys when the children do not use them.
"""

import logging
from typing import Any, Optional, Protocol

from revtui.core.Params import (
    CommitDetails,
    CommitFilesParams,
    CommitId,
    CommitTags,
)
from revtui.core.Queue import NavigationQueue
from revtui.integrations.AsyncCommitFiles import (
    NOTIFICATION_COMMIT_FILES,
    AsyncCommitFiles,
    FetchError,
)
from revtui.integrations.GitBridge import GitCommandError

from .Component import (
    CommandBlocking,
    CommandInfo,
    Component,
    ComponentError,
    CursesWindow,
    EventState,
    Key,
    command_pump,
    event_pump,
)
from .KeyBinder import KeyBinder
from .Layout import Constraint, Rect, split
from .ScrollList import draw_list
from .StatusTree import StatusTreeComponent
from .Theme import Theme

logger = logging.getLogger("revtui")

COMPARE_DETAILS_HEIGHT = 10


class DetailsFetchService(Protocol):
    def get_commit_details(self, commit_id: CommitId) -> CommitDetails: ...


# ==================== DetailsComponent Class ====================
class DetailsComponent(Component):
    """Header and message of a single commit.

    Details are loaded synchronously on ``set_commit``; the last loaded
    commit is kept so selecting the same commit again does not re-run git.
    """

    def __init__(self, service: DetailsFetchService, theme: Theme, key_config: KeyBinder) -> None:
        super().__init__()
        self.visible = True
        self.service = service
        self.theme = theme
        self.key_config = key_config
        self.commit_id: Optional[CommitId] = None
        self.tags: CommitTags = ()
        self.data: Optional[CommitDetails] = None
        self.error: Optional[str] = None

    def set_commit(self, commit_id: Optional[CommitId], tags: CommitTags = ()) -> None:
        self.tags = tuple(tags)
        if commit_id is None:
            self.commit_id, self.data, self.error = None, None, None
            return
        if commit_id == self.commit_id and self.data is not None:
            return
        self.commit_id = commit_id
        try:
            self.data = self.service.get_commit_details(commit_id)
            self.error = None
        except GitCommandError as e:
            logger.error(f"Could not load details of {commit_id[:7]}: {e}", exc_info=True)
            self.data = None
            self.error = str(e)

    def lines(self) -> list[tuple[str, int]]:
        if self.error:
            return [(self.error, self.theme.item_status("D"))]
        data = self.data
        if data is None:
            return []
        rows = [
            (f"Author: {data.author} <{data.email}>", 0),
            (f"Date:   {data.date}", 0),
            (f"Commit: {data.id}", self.theme.commit_hash()),
        ]
        if self.tags:
            rows.append((f"Tags:   {', '.join(self.tags)}", 0))
        rows.append(("", 0))
        rows.extend((line, 0) for line in data.message)
        return rows

    def commands(self, out: list[CommandInfo], force_all: bool) -> CommandBlocking:
        return CommandBlocking.PASSING_ON

    def draw(self, win: CursesWindow, rect: Rect) -> None:
        if not self.is_visible():
            return
        draw_list(win, rect, "Info", iter(self.lines()), self.focused(), self.theme)


# ==================== CompareDetailsComponent Class ====================
class CompareDetailsComponent(Component):
    """Summary headers of the two commits of a comparison."""

    def __init__(self, service: DetailsFetchService, theme: Theme, key_config: KeyBinder) -> None:
        super().__init__()
        self.service = service
        self.theme = theme
        self.key_config = key_config
        self.commits: Optional[tuple[CommitId, CommitId]] = None
        self.data: list[Optional[CommitDetails]] = []

    def set_commits(self, ids: Optional[tuple[CommitId, CommitId]]) -> None:
        if ids == self.commits:
            return
        self.commits = ids
        self.data = []
        if ids is None:
            return
        for commit_id in ids:
            try:
                self.data.append(self.service.get_commit_details(commit_id))
            except GitCommandError as e:
                logger.error(f"Could not load details of {commit_id[:7]}: {e}", exc_info=True)
                self.data.append(None)

    def lines(self) -> list[tuple[str, int]]:
        if self.commits is None:
            return []
        rows: list[tuple[str, int]] = []
        for label, commit_id, data in zip(("A", "B"), self.commits, self.data):
            rows.append((f"{label}: {commit_id[:7]}", self.theme.commit_hash()))
            if data is None:
                rows.append(("   (details unavailable)", 0))
                continue
            rows.append((f"   {data.summary}", 0))
            rows.append((f"   {data.author}, {data.date}", 0))
        return rows

    def commands(self, out: list[CommandInfo], force_all: bool) -> CommandBlocking:
        return CommandBlocking.PASSING_ON

    def draw(self, win: CursesWindow, rect: Rect) -> None:
        if not self.is_visible():
            return
        draw_list(win, rect, "Compare", iter(self.lines()), self.focused(), self.theme)


# ==================== CommitDetailsComponent Class ====================
class CommitDetailsComponent(Component):
    """Composite of a detail leaf and the file tree of one commit or pair.

    Attributes:
        single_details (DetailsComponent): Active outside comparison mode.
        compare_details (CompareDetailsComponent): Active in comparison mode.
        file_tree (StatusTreeComponent): Files of the current params.
        git_commit_files (AsyncCommitFiles): Background file list fetcher.
        params (Optional[CommitFilesParams]): What is currently shown.
    """

    def __init__(
        self,
        git_bridge: DetailsFetchService,
        git_commit_files: AsyncCommitFiles,
        queue: Optional[NavigationQueue],
        theme: Theme,
        key_config: KeyBinder,
    ) -> None:
        super().__init__()
        self.theme = theme
        self.key_config = key_config
        self.git_commit_files = git_commit_files
        self.single_details = DetailsComponent(git_bridge, theme, key_config)
        self.compare_details = CompareDetailsComponent(git_bridge, theme, key_config)
        self.file_tree = StatusTreeComponent("Files", queue, theme, key_config)
        self.params: Optional[CommitFilesParams] = None
        self.commit_tags: CommitTags = ()

    def _components(self) -> list[Component]:
        return [self.single_details, self.compare_details, self.file_tree]

    def is_compare(self) -> bool:
        return self.params is not None and self.params.is_compare

    def _active_details(self) -> Component:
        return self.compare_details if self.is_compare() else self.single_details

    def _route_details(self) -> None:
        """Shows the detail leaf matching the params and hides the other."""
        had_focus = self.details_focused()
        active, inactive = self.compare_details, self.single_details
        if not self.is_compare():
            active, inactive = inactive, active
        inactive.hide()
        active.show()
        if had_focus:
            active.focus(True)

    def set_commits(self, params: Optional[CommitFilesParams], tags: CommitTags = ()) -> None:
        """Points the composite at ``params``, reusing or fetching its file list.

        Raises:
            FetchError: If the latest fetch for ``params`` failed. The tree is
                left cleared.
        """
        self.params = params
        self.commit_tags = tuple(tags)

        if params is None:
            self.single_details.set_commit(None)
            self.compare_details.set_commits(None)
            self.file_tree.set_commit(None)
            self.file_tree.clear()
            self._update_title()
            return

        self._route_details()
        if params.is_compare:
            self.compare_details.set_commits((params.id, params.other))
        else:
            self.single_details.set_commit(params.id, self.commit_tags)
        self.file_tree.set_commit(params.id)

        try:
            current = self.git_commit_files.current()
        except FetchError as e:
            if e.params != params:
                current = None
            else:
                self.file_tree.clear()
                self._update_title()
                raise

        if current is not None and current[0] == params:
            self.file_tree.update(current[1])
        else:
            self.file_tree.clear()
            self.git_commit_files.fetch(params)
        self._update_title()

    def _update_title(self) -> None:
        self.file_tree.set_title(f"Files: {self.file_tree.file_count()}")

    def update(self, notification: dict[str, Any]) -> None:
        """Re-checks the bridge after a background completion."""
        if notification.get("type") != NOTIFICATION_COMMIT_FILES or self.params is None:
            return
        if notification.get("params") != self.params:
            return
        self.set_commits(self.params, self.commit_tags)

    def any_work_pending(self) -> bool:
        return self.git_commit_files.is_pending()

    def commit(self) -> Optional[CommitFilesParams]:
        return self.params

    def tags(self) -> CommitTags:
        return self.commit_tags

    def selection(self) -> Optional[int]:
        return self.file_tree.selection()

    def select_index(self, idx: Optional[int]) -> None:
        """Selects tree item ``idx``; None drops a selection still waiting for files."""
        if idx is None:
            self.file_tree.forget_pending_selection()
        else:
            self.file_tree.select_index(idx)

    def file_count(self) -> int:
        return self.file_tree.file_count()

    # --- focus ---

    def details_focused(self) -> bool:
        return self.single_details.focused() or self.compare_details.focused()

    def focus_details(self) -> None:
        if self.params is None:
            raise ComponentError("No commit is shown; there are no details to focus.")
        self.file_tree.focus(False)
        self._active_details().focus(True)

    def focused(self) -> bool:
        return self.details_focused() or self.file_tree.focused()

    def focus(self, focus: bool) -> None:
        self.single_details.focus(False)
        self.compare_details.focus(False)
        self.file_tree.focus(focus and self.is_visible())
        self.file_tree.show_selection(True)

    def show(self) -> None:
        super().show()
        self._active_details().show()
        self.file_tree.show()

    def hide(self) -> None:
        super().hide()
        self.focus(False)

    # --- Component ---

    def _handle_event(self, ev: Key) -> EventState:
        if event_pump(ev, self._components()).is_consumed:
            if not self.file_tree.is_visible():
                self.hide()
            return EventState.CONSUMED

        if self.focused():
            kc = self.key_config
            if kc.key_match(ev, "move_down") and self.details_focused():
                self.focus(True)
                return EventState.CONSUMED
            if kc.key_match(ev, "move_up") and self.file_tree.focused() and not self.is_compare():
                self.focus_details()
                return EventState.CONSUMED
        return EventState.NOT_CONSUMED

    def commands(self, out: list[CommandInfo], force_all: bool) -> CommandBlocking:
        if self.is_visible() or force_all:
            command_pump(out, force_all, self._components())
        return CommandBlocking.PASSING_ON

    def draw(self, win: CursesWindow, rect: Rect) -> None:
        if not self.is_visible():
            return
        if self.is_compare():
            constraints = [Constraint.length(COMPARE_DETAILS_HEIGHT), Constraint.min(0)]
        elif self.details_focused():
            constraints = [Constraint.percentage(60), Constraint.percentage(40)]
        else:
            constraints = [Constraint.percentage(40), Constraint.percentage(60)]
        top, bottom = split(rect, constraints)
        self._active_details().draw(win, top)
        self.file_tree.draw(win, bottom)
