# revtui/core/Params.py
"""Params.py
=============
Value types shared by the git fetch service, the async bridge, the UI
components and the navigation queue.

All types are frozen dataclasses: they are compared and hashed by value, so
a ``CommitFilesParams`` can key the bridge's in-flight set and two requests
for the same commit (or commit pair) are recognised as the same identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


CommitId = str
CommitTags = tuple[str, ...]


@dataclass(frozen=True)
class CommitFilesParams:
    """Identity of what the file tree is showing.

    ``other`` is set in comparison mode: the files changed between ``other``
    and ``id``.
    """

    id: CommitId
    other: Optional[CommitId] = None

    @property
    def is_compare(self) -> bool:
        return self.other is not None

    def short(self) -> str:
        if self.other is None:
            return self.id[:7]
        return f"{self.other[:7]}..{self.id[:7]}"


@dataclass(frozen=True)
class StatusItem:
    """A changed path and its one-letter git status (M, A, D, R, C, T)."""

    path: str
    status: str = "M"


@dataclass(frozen=True)
class LogEntry:
    id: CommitId
    author: str
    date: str
    summary: str


@dataclass(frozen=True)
class CommitDetails:
    id: CommitId
    author: str
    email: str
    date: str
    message: tuple[str, ...] = ()

    @property
    def summary(self) -> str:
        return self.message[0] if self.message else ""


@dataclass(frozen=True)
class InspectCommitOpen:
    """How the inspect-commit popup was asked to open.

    Doubles as the reopen token pushed to the popup stack: ``selection`` is
    the file tree index to restore once the files have been loaded.
    """

    params: CommitFilesParams
    tags: CommitTags = ()
    selection: Optional[int] = None
