# src/revtui/core/__init__.py
"""Public facade for revtui.core: re-export main classes from CamelCase modules.

Keeps Java-like file names (App.py, Params.py, Queue.py),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .App import App  # noqa: F401
from .Params import (  # noqa: F401
    CommitDetails,
    CommitFilesParams,
    InspectCommitOpen,
    LogEntry,
    StatusItem,
)
from .Queue import (  # noqa: F401
    NavigationQueue,
    OpenFileHistory,
    PopupStackPop,
    PopupStackPush,
    StatusMessage,
)


__all__ = [
    "App",
    "CommitDetails",
    "CommitFilesParams",
    "InspectCommitOpen",
    "LogEntry",
    "StatusItem",
    "NavigationQueue",
    "OpenFileHistory",
    "PopupStackPop",
    "PopupStackPush",
    "StatusMessage",
]
