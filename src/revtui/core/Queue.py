# revtui/core/Queue.py
"""Queue.py
============
The navigation queue: a FIFO of internal events that components push while
handling input and that the application shell drains once per frame.

Components never talk to the shell directly. A popup that wants to be
resumed pushes ``PopupStackPush``; a popup that is dismissed for good
pushes ``PopupStackPop``; the file tree asks for a file history view with
``OpenFileHistory``. The queue lives on the UI thread only, so it is a
plain ``deque`` rather than a ``queue.Queue``.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from .Params import CommitId, InspectCommitOpen


@dataclass(frozen=True)
class PopupStackPush:
    token: InspectCommitOpen


@dataclass(frozen=True)
class PopupStackPop:
    pass


@dataclass(frozen=True)
class OpenFileHistory:
    path: str
    commit_id: CommitId


@dataclass(frozen=True)
class StatusMessage:
    text: str


InternalEvent = Union[PopupStackPush, PopupStackPop, OpenFileHistory, StatusMessage]


class NavigationQueue:
    """FIFO of ``InternalEvent`` values shared by all components of one app."""

    def __init__(self) -> None:
        self._events: deque[InternalEvent] = deque()

    def push(self, event: InternalEvent) -> None:
        self._events.append(event)

    def pop(self) -> Optional[InternalEvent]:
        """Removes and returns the oldest event, or None if the queue is empty."""
        return self._events.popleft() if self._events else None

    def drain(self) -> Iterator[InternalEvent]:
        """Yields events until the queue is empty, including ones pushed meanwhile."""
        while self._events:
            yield self._events.popleft()

    def __len__(self) -> int:
        return len(self._events)
