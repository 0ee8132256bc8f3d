# revtui/integrations/GitBridge.py
"""GitBridge.py
========================
Backend service for all git queries made by revtui.

GitBridge contains no UI code. Every method is synchronous and shells out
through ``safe_run``; callers that must not block (the file list of a
commit) run it from a worker thread via ``AsyncCommitFiles``. Failures are
raised as ``GitCommandError`` so the caller decides how to surface them.
"""

import functools
import logging
import os
import subprocess
from typing import Any, Optional

from revtui.core.Params import (
    CommitDetails,
    CommitFilesParams,
    CommitId,
    CommitTags,
    LogEntry,
    StatusItem,
)
from revtui.utils.utils import safe_run

logger = logging.getLogger("revtui")

FIELD_SEP = "\x1f"


class GitCommandError(RuntimeError):
    """A git command exited with a non-zero status."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str) -> None:
        first_line = stderr.strip().splitlines()[0] if stderr.strip() else "no output"
        super().__init__(f"{' '.join(cmd[:3])} failed ({returncode}): {first_line}")
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr


# ================= GitBridge Class ==============================
class GitBridge:
    """Runs git commands against one repository and parses their output."""

    def __init__(self, config: dict[str, Any], repo_dir: Optional[str] = None):
        self.config = config
        self.repo_dir = repo_dir
        git_config = config.get("git", {})
        self.timeout: int = int(git_config.get("timeout", 10))
        self.log_limit: int = int(git_config.get("log_limit", 500))

    def get_repo_dir(self) -> str:
        return self.repo_dir or os.getcwd()

    def _run_git(self, args: list[str]) -> subprocess.CompletedProcess:
        run_git = functools.partial(safe_run, cwd=self.get_repo_dir(), timeout=self.timeout)
        cmd = ["git", *args]
        logger.debug("GitBridge: running %s", " ".join(cmd))
        res = run_git(cmd)
        if res.returncode != 0:
            raise GitCommandError(cmd, res.returncode, res.stderr or "")
        return res

    def is_repo(self) -> bool:
        try:
            res = self._run_git(["rev-parse", "--is-inside-work-tree"])
        except GitCommandError:
            return False
        return res.stdout.strip() == "true"

    def get_log(self, limit: Optional[int] = None) -> list[LogEntry]:
        """Returns the newest commits of HEAD, newest first."""
        fmt = FIELD_SEP.join(["%H", "%an", "%ad", "%s"])
        res = self._run_git(
            ["log", f"--format={fmt}", "--date=short", "-n", str(limit or self.log_limit)]
        )
        entries = []
        for line in res.stdout.splitlines():
            parts = line.split(FIELD_SEP)
            if len(parts) == 4:
                entries.append(LogEntry(*parts))
        return entries

    def get_commit_files(self, params: CommitFilesParams) -> list[StatusItem]:
        """Lists the paths changed by a commit, or between a pair of commits."""
        if params.other is None:
            args = ["diff-tree", "--no-commit-id", "--name-status", "-r", "--root", "-M", params.id]
        else:
            args = ["diff", "--name-status", "-M", params.other, params.id]
        return parse_name_status(self._run_git(args).stdout)

    def get_commit_details(self, commit_id: CommitId) -> CommitDetails:
        fmt = FIELD_SEP.join(["%H", "%an", "%ae", "%ad", "%B"])
        res = self._run_git(["show", "-s", f"--format={fmt}", "--date=iso", commit_id])
        parts = res.stdout.split(FIELD_SEP, 4)
        if len(parts) != 5:
            raise GitCommandError(["git", "show", commit_id], 0, "unexpected output")
        message = tuple(parts[4].rstrip("\n").splitlines())
        return CommitDetails(parts[0], parts[1], parts[2], parts[3], message)

    def get_commit_tags(self, commit_id: CommitId) -> CommitTags:
        res = self._run_git(["tag", "--points-at", commit_id])
        return tuple(t for t in res.stdout.split() if t)

    def get_file_history(
        self, path: str, commit_id: CommitId, limit: int = 200
    ) -> list[str]:
        res = self._run_git(
            ["log", "--oneline", "-n", str(limit), commit_id, "--", path]
        )
        return res.stdout.splitlines()


def parse_name_status(output: str) -> list[StatusItem]:
    """Parses ``--name-status`` output; renames and copies keep the new path."""
    items = []
    for line in output.splitlines():
        fields = line.split("\t")
        if len(fields) < 2 or not fields[0]:
            continue
        items.append(StatusItem(path=fields[-1], status=fields[0][0]))
    return items
