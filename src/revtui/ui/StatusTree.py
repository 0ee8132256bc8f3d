# revtui/ui/StatusTree.py
"""StatusTree.py
========================
The file tree shown under a commit: a collapsible folder hierarchy built
from the flat list of changed paths, with its own selection and scrolling.

The tree is tied to a revision (``set_commit``) and can be emptied
(``clear``) while the files of a new revision are still being fetched.
Selection is an index into the full item list, folders included, so it
survives collapsing and can be restored after the same files are loaded
again.

Two keys make the tree act beyond itself:

- ``copy_path`` copies the selected path to the clipboard.
- ``file_history`` asks the shell to open the history of the selected file
  and hides the tree. The enclosing popup sees that hide and stacks itself,
  so it can be reopened when the history view is closed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

import pyperclip

from revtui.core.Params import CommitId, StatusItem
from revtui.core.Queue import NavigationQueue, OpenFileHistory, StatusMessage

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
from .Theme import Theme

logger = logging.getLogger("revtui")


@dataclass
class TreeItem:
    path: str
    name: str
    indent: int
    is_folder: bool
    status: Optional[str] = None
    collapsed: bool = False


class FileTreeItems:
    """Flat, path-ordered list of folders and files with collapse state."""

    def __init__(self, items: list[TreeItem]) -> None:
        self.items = items

    @classmethod
    def from_status_items(cls, files: Iterable[StatusItem]) -> FileTreeItems:
        items: list[TreeItem] = []
        seen_folders: set[str] = set()
        for f in sorted(files, key=lambda s: s.path.split("/")):
            parts = f.path.split("/")
            for depth in range(len(parts) - 1):
                folder = "/".join(parts[: depth + 1])
                if folder not in seen_folders:
                    seen_folders.add(folder)
                    items.append(TreeItem(folder, parts[depth], depth, True))
            items.append(TreeItem(f.path, parts[-1], len(parts) - 1, False, f.status))
        return cls(items)

    def __len__(self) -> int:
        return len(self.items)

    def file_count(self) -> int:
        return sum(1 for item in self.items if not item.is_folder)

    def visible(self) -> Iterator[tuple[int, TreeItem]]:
        """Yields ``(index, item)`` for items not inside a collapsed folder."""
        hidden_prefix: Optional[str] = None
        for idx, item in enumerate(self.items):
            if hidden_prefix is not None and item.path.startswith(hidden_prefix):
                continue
            hidden_prefix = None
            yield idx, item
            if item.is_folder and item.collapsed:
                hidden_prefix = item.path + "/"

    def find_path(self, path: str) -> Optional[int]:
        for idx, item in enumerate(self.items):
            if item.path == path:
                return idx
        return None

    def parent_index(self, idx: int) -> Optional[int]:
        path = self.items[idx].path
        if "/" not in path:
            return None
        return self.find_path(path.rsplit("/", 1)[0])

    def expand_ancestors(self, idx: int) -> None:
        parent = self.parent_index(idx)
        while parent is not None:
            self.items[parent].collapsed = False
            parent = self.parent_index(parent)

    def collapsed_folders(self) -> set[str]:
        return {item.path for item in self.items if item.is_folder and item.collapsed}

    def collapse(self, paths: set[str]) -> None:
        for item in self.items:
            if item.is_folder and item.path in paths:
                item.collapsed = True


class VerticalScroll:
    """Keeps a selected row inside a viewport of a given height."""

    def __init__(self) -> None:
        self.top = 0

    def reset(self) -> None:
        self.top = 0

    def update(self, selection: int, total: int, height: int) -> int:
        if height <= 0 or total <= height:
            self.top = 0
        elif selection < self.top:
            self.top = selection
        elif selection >= self.top + height:
            self.top = selection - height + 1
        self.top = max(0, min(self.top, max(0, total - height)))
        return self.top


# ==================== StatusTreeComponent Class ====================
class StatusTreeComponent(Component):
    """Collapsible tree of the files changed by one revision."""

    def __init__(
        self,
        title: str,
        queue: Optional[NavigationQueue],
        theme: Theme,
        key_config: KeyBinder,
    ) -> None:
        super().__init__()
        self.title = title
        self.queue = queue
        self.theme = theme
        self.key_config = key_config
        self.tree = FileTreeItems([])
        self.selected_index: Optional[int] = None
        self.pending_selection: Optional[int] = None
        self.commit: Optional[CommitId] = None
        self.selection_shown: bool = True
        self.scroll = VerticalScroll()
        self.viewport_height = 10
        self.internal_clipboard = ""

    # --- state ---

    def set_commit(self, commit: Optional[CommitId]) -> None:
        if commit != self.commit:
            self.pending_selection = None
        self.commit = commit

    def revision(self) -> Optional[CommitId]:
        return self.commit

    def set_title(self, title: str) -> None:
        self.title = title

    def file_count(self) -> int:
        return self.tree.file_count()

    def is_empty(self) -> bool:
        return len(self.tree) == 0

    def show_selection(self, show: bool) -> None:
        self.selection_shown = show

    def clear(self) -> None:
        self.tree = FileTreeItems([])
        self.selected_index = None
        self.pending_selection = None
        self.scroll.reset()

    def update(self, files: Iterable[StatusItem]) -> None:
        """Replaces the items, keeping the selected path and collapsed folders when they still exist."""
        previous = self.selected_item()
        collapsed = self.tree.collapsed_folders()
        self.tree = FileTreeItems.from_status_items(files)
        self.tree.collapse(collapsed)
        self.selected_index = None
        if self.pending_selection is not None:
            self.select_index(self.pending_selection)
            self.pending_selection = None
        elif previous is not None:
            self.selected_index = self.tree.find_path(previous.path)
        if self.selected_index is None and len(self.tree):
            self.selected_index = 0

    def selection(self) -> Optional[int]:
        return self.selected_index

    def selected_item(self) -> Optional[TreeItem]:
        if self.selected_index is None or self.selected_index >= len(self.tree):
            return None
        return self.tree.items[self.selected_index]

    def selected_file(self) -> Optional[TreeItem]:
        item = self.selected_item()
        return item if item is not None and not item.is_folder else None

    def forget_pending_selection(self) -> None:
        self.pending_selection = None

    def select_index(self, idx: int) -> None:
        """Selects item ``idx``; remembered until items arrive if the tree is empty."""
        if not len(self.tree):
            self.pending_selection = idx
            return
        idx = max(0, min(idx, len(self.tree) - 1))
        self.tree.expand_ancestors(idx)
        self.selected_index = idx

    # --- navigation ---

    def _visible_indices(self) -> list[int]:
        return [idx for idx, _ in self.tree.visible()]

    def _move(self, delta: int) -> bool:
        visible = self._visible_indices()
        if not visible or self.selected_index is None:
            return False
        pos = visible.index(self.selected_index) if self.selected_index in visible else 0
        new_pos = max(0, min(pos + delta, len(visible) - 1))
        if visible[new_pos] == self.selected_index:
            return False
        self.selected_index = visible[new_pos]
        return True

    def _move_to(self, first: bool) -> bool:
        visible = self._visible_indices()
        if not visible:
            return False
        target = visible[0] if first else visible[-1]
        if target == self.selected_index:
            return False
        self.selected_index = target
        return True

    def _collapse(self) -> bool:
        item = self.selected_item()
        if item is None or self.selected_index is None:
            return False
        if item.is_folder and not item.collapsed:
            item.collapsed = True
            return True
        parent = self.tree.parent_index(self.selected_index)
        if parent is None:
            return False
        self.selected_index = parent
        return True

    def _expand(self) -> bool:
        item = self.selected_item()
        if item is None or not item.is_folder:
            return False
        if item.collapsed:
            item.collapsed = False
            return True
        return self._move(1)

    def _copy_path(self) -> None:
        item = self.selected_item()
        if item is None:
            return
        try:
            pyperclip.copy(item.path)
            message = f"Copied '{item.path}' to the system clipboard"
        except pyperclip.PyperclipException as e:
            logger.warning(f"System clipboard unavailable: {e}")
            self.internal_clipboard = item.path
            message = f"Copied '{item.path}' to the internal clipboard"
        if self.queue is not None:
            self.queue.push(StatusMessage(message))

    def _open_history(self) -> bool:
        item = self.selected_file()
        if item is None or self.commit is None or self.queue is None:
            return False
        logger.info("Opening history of %s at %s", item.path, self.commit[:7])
        self.hide()
        self.queue.push(OpenFileHistory(item.path, self.commit))
        return True

    # --- Component ---

    def _handle_event(self, ev: Key) -> EventState:
        if not self.focused():
            return EventState.NOT_CONSUMED
        kc = self.key_config
        page = max(1, self.viewport_height - 1)

        if kc.key_match(ev, "move_down"):
            changed = self._move(1)
        elif kc.key_match(ev, "move_up"):
            changed = self._move(-1)
        elif kc.key_match(ev, "page_down"):
            changed = self._move(page)
        elif kc.key_match(ev, "page_up"):
            changed = self._move(-page)
        elif kc.key_match(ev, "home"):
            changed = self._move_to(first=True)
        elif kc.key_match(ev, "end"):
            changed = self._move_to(first=False)
        elif kc.key_match(ev, "tree_collapse"):
            changed = self._collapse()
        elif kc.key_match(ev, "tree_expand"):
            changed = self._expand()
        elif kc.key_match(ev, "copy_path"):
            self._copy_path()
            changed = True
        elif kc.key_match(ev, "file_history"):
            changed = self._open_history()
        else:
            changed = False
        return EventState.CONSUMED if changed else EventState.NOT_CONSUMED

    def commands(self, out: list[CommandInfo], force_all: bool) -> CommandBlocking:
        if self.is_visible() or force_all:
            kc = self.key_config
            has_file = self.selected_file() is not None
            out.append(
                CommandInfo(f"Scroll [{kc.key_label('move_up')}{kc.key_label('move_down')}]", len(self.tree) > 0)
            )
            out.append(
                CommandInfo(f"Fold [{kc.key_label('tree_collapse')}{kc.key_label('tree_expand')}]", len(self.tree) > 0)
            )
            out.append(
                CommandInfo(f"Copy path [{kc.key_label('copy_path')}]", self.selected_item() is not None)
            )
            out.append(CommandInfo(f"History [{kc.key_label('file_history')}]", has_file))
        return CommandBlocking.PASSING_ON

    def _format(self, idx: int, item: TreeItem) -> tuple[str, int]:
        indent = "  " * item.indent
        if item.is_folder:
            text = f"{indent}{'▸' if item.collapsed else '▾'} {item.name}/"
            attr = 0
        else:
            text = f"{indent}{item.status or ' '} {item.name}"
            attr = self.theme.item_status(item.status or "")
        if idx == self.selected_index and self.selection_shown:
            attr = self.theme.text(True, self.focused())
        return text, attr

    def draw(self, win: CursesWindow, rect: Rect) -> None:
        if not self.is_visible():
            return
        self.viewport_height = max(1, rect.height - 2)
        rows = list(self.tree.visible())
        visible = [idx for idx, _ in rows]
        sel_row = visible.index(self.selected_index) if self.selected_index in visible else 0
        top = self.scroll.update(sel_row, len(rows), self.viewport_height)
        items = (
            self._format(idx, item)
            for idx, item in rows[top : top + self.viewport_height]
        )
        draw_list(win, rect, self.title, items, self.focused(), self.theme)
