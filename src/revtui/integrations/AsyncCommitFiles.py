# revtui/integrations/AsyncCommitFiles.py
"""AsyncCommitFiles.py
========================
Asynchronous bridge between the UI loop and the git fetch service for the
list of files changed by a commit (or by a pair of commits).

The UI thread calls ``fetch(params)``; the request runs on a daemon worker
thread and, once finished, the result is stored under a lock and a
``{"type": "commit_files", "params": ...}`` notification is put on the shared
notification queue. The UI loop drains that queue between frames and asks
the components to re-check ``current()``.

Rules:
    - At most one fetch per ``CommitFilesParams`` is in flight; a repeated
      ``fetch`` for the same params is a no-op.
    - A new request does not cancel older ones. When an older request
      finishes after a newer one was issued, its result is dropped and never
      becomes ``current()``.
    - A failed fetch is reported once: ``current()`` raises ``FetchError``
      and forgets it, so the next ``fetch`` for the same params retries.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from revtui.core.Params import CommitFilesParams, StatusItem

logger = logging.getLogger("revtui")

NOTIFICATION_COMMIT_FILES = "commit_files"


class FilesFetchService(Protocol):
    def get_commit_files(self, params: CommitFilesParams) -> list[StatusItem]: ...


class FetchError(RuntimeError):
    """The fetch service failed to produce the file list for ``params``."""

    def __init__(self, params: CommitFilesParams, cause: BaseException) -> None:
        super().__init__(f"Could not load files of {params.short()}: {cause}")
        self.params = params
        self.cause = cause


@dataclass(frozen=True)
class Request:
    params: CommitFilesParams
    files: tuple[StatusItem, ...] = ()
    error: Optional[BaseException] = None


# ================= AsyncCommitFiles Class ==============================
class AsyncCommitFiles:
    """Holds the latest completed commit-files result and the in-flight set."""

    def __init__(
        self, fetch_service: FilesFetchService, sender: "queue.Queue[dict[str, Any]]"
    ) -> None:
        self.fetch_service = fetch_service
        self.sender = sender
        self._lock = threading.Lock()
        self._current: Optional[Request] = None
        self._pending: set[CommitFilesParams] = set()
        self._latest: Optional[CommitFilesParams] = None

    def current(self) -> Optional[tuple[CommitFilesParams, list[StatusItem]]]:
        """Returns the latest completed ``(params, files)`` pair without blocking.

        Raises:
            FetchError: If the latest completed request failed.
        """
        with self._lock:
            request = self._current
            if request is not None and request.error is not None:
                self._current = None
        if request is None:
            return None
        if request.error is not None:
            raise FetchError(request.params, request.error)
        return request.params, list(request.files)

    def is_pending(self) -> bool:
        with self._lock:
            return bool(self._pending)

    def fetch(self, params: CommitFilesParams) -> None:
        """Dispatches a background fetch for ``params`` unless one is in flight."""
        with self._lock:
            self._latest = params
            if params in self._pending:
                logger.debug("AsyncCommitFiles: fetch for %s already in flight", params.short())
                return
            self._pending.add(params)

        logger.debug("AsyncCommitFiles: dispatching fetch for %s", params.short())
        thread = threading.Thread(
            target=self._fetch_worker,
            args=(params,),
            daemon=True,
            name=f"CommitFilesThread-{params.short()}",
        )
        thread.start()

    def _fetch_worker(self, params: CommitFilesParams) -> None:
        """Runs on the worker thread; stores the outcome, then notifies the UI."""
        try:
            files = self.fetch_service.get_commit_files(params)
            request = Request(params, tuple(files))
        except Exception as e:
            logger.error(f"Fetching files of {params.short()} failed: {e}", exc_info=True)
            request = Request(params, error=e)

        with self._lock:
            self._pending.discard(params)
            if params == self._latest:
                self._current = request
            else:
                logger.debug(
                    "AsyncCommitFiles: dropping stale result for %s (latest is %s)",
                    params.short(),
                    self._latest.short() if self._latest else None,
                )

        self.sender.put({"type": NOTIFICATION_COMMIT_FILES, "params": params})
