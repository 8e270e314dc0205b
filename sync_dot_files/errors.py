"""Exception types for sync-dot-files.

Filesystem failures are reported with the builtin ``OSError`` family;
everything specific to settings, the git checkout or the link farm derives
from :class:`SyncDotFilesError`.
"""

from __future__ import annotations

from typing import Sequence


class SyncDotFilesError(Exception):
    """Base class for all sync-dot-files errors."""


class NotInitializedError(SyncDotFilesError):
    """Settings have not been created yet (run ``init`` first)."""


class InvalidRepoStateError(SyncDotFilesError):
    """The repository path is occupied by something that is not a usable checkout."""


class RemoteMismatchError(SyncDotFilesError):
    """The checkout's ``origin`` remote is missing or points somewhere else."""

    def __init__(self, expected: str, actual: str | None):
        self.expected = expected
        self.actual = actual
        if actual is None:
            message = f"Repository has no 'origin' remote (expected {expected})"
        else:
            message = f"Repository remote {actual} does not match expected {expected}"
        super().__init__(message)


class GitCommandError(SyncDotFilesError):
    """A git command exited with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"'{' '.join(self.command)}' failed: {detail}")


class LinkConflictError(SyncDotFilesError):
    """A home path is occupied by something other than the expected link."""

    def __init__(self, dotfile: str, state: object):
        self.dotfile = dotfile
        self.state = state
        super().__init__(f"{dotfile} cannot be linked: {state}")
