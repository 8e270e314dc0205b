"""Sync Dot Files - keep dotfiles synchronized with a GitHub repository.

This package moves dotfiles into a git checkout, links them back into the
home directory and keeps the checkout in step with its GitHub remote.
"""

from .config import Settings, SettingsStore
from .errors import (
    GitCommandError,
    InvalidRepoStateError,
    LinkConflictError,
    NotInitializedError,
    RemoteMismatchError,
    SyncDotFilesError,
)
from .git import GitRepository
from .links import LinkManager, LinkState
from .sync import DotfileSync, SyncResult

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "SettingsStore",
    "GitRepository",
    "LinkManager",
    "LinkState",
    "DotfileSync",
    "SyncResult",
    "SyncDotFilesError",
    "NotInitializedError",
    "InvalidRepoStateError",
    "RemoteMismatchError",
    "GitCommandError",
    "LinkConflictError",
]
