"""Synchronization logic for sync-dot-files.

This module decides whether the dotfiles checkout and the link farm in the
home directory agree with the remote repository, and reconciles them:
clone if needed, pull, commit and push local edits, then relink dotfiles.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import Settings, SettingsStore
from .errors import LinkConflictError
from .git import GitRepository
from .links import LinkManager, LinkState

logger = logging.getLogger(__name__)

COMMIT_MESSAGE = "Update dotfiles by Sync-dot-files"


class SyncResult:
    """Result of a reconciliation pass.

    Records whether local changes were committed, which links were
    recreated and which dotfiles could not be linked.
    """

    def __init__(self):
        """Initialize empty sync result."""
        self.committed = False
        self.relinked: list[str] = []
        self.ok_dotfiles: list[str] = []
        self.warnings: list[tuple[str, str]] = []

    def add_relinked(self, dotfile: str) -> None:
        self.relinked.append(dotfile)

    def add_ok(self, dotfile: str) -> None:
        self.ok_dotfiles.append(dotfile)

    def add_warning(self, dotfile: str, reason: str) -> None:
        """Record a dotfile that was left as it is.

        Args:
            dotfile: Home-relative dotfile name
            reason: Why it could not be linked
        """
        self.warnings.append((dotfile, reason))

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def is_success(self) -> bool:
        """True if every dotfile ended up correctly linked."""
        return self.warning_count == 0

    def __str__(self) -> str:
        """String representation of sync results."""
        return (
            f"Sync completed: {'committed and pushed' if self.committed else 'no local changes'}, "
            f"{len(self.ok_dotfiles)} linked, {len(self.relinked)} relinked, "
            f"{self.warning_count} warnings"
        )


class DotfileSync:
    """Main synchronization orchestrator.

    Settings are reloaded and the repository is re-checked on every
    operation, since either may change between calls.
    """

    def __init__(
        self,
        store: SettingsStore,
        repository: Optional[GitRepository] = None,
        home_dir: Optional[Path] = None,
    ):
        """Initialize the orchestrator.

        Args:
            store: Settings store
            repository: Git gateway, defaults to one using the real git client
            home_dir: Home directory holding the links, defaults to ``Path.home()``
        """
        self.store = store
        self.repository = repository or GitRepository()
        self.home_dir = Path(home_dir) if home_dir else Path.home()

    def repo_path(self) -> str:
        return self.store.load()["repo_path"]

    def remote_url(self) -> str:
        return self.repository.remote_url_for(self.store.load()["github_account"])

    def _links(self, settings: Settings) -> LinkManager:
        return LinkManager(self.home_dir, settings["repo_path"])

    def _is_ready(self, settings: Settings) -> bool:
        return self.repository.is_ready(
            settings["repo_path"],
            self.repository.remote_url_for(settings["github_account"]),
        )

    def is_clean(self) -> bool:
        """Check for uncommitted changes; a missing repository counts as clean."""
        settings = self.store.load()
        if not self._is_ready(settings):
            logger.info("The repository is not ready")
            return True

        return self.repository.is_working_tree_clean(settings["repo_path"])

    def is_synced(self) -> bool:
        """Check that history matches the remote and every dotfile is linked.

        A missing repository is never synced.
        """
        settings = self.store.load()
        if not self._is_ready(settings):
            logger.info("The repository is not ready")
            return False

        repo_path = settings["repo_path"]
        self.repository.fetch_all(repo_path)

        count = self.repository.ahead_behind_count(repo_path)
        if count:
            logger.info(f"Local and remote history differ by {count} commits")
            return False

        links = self._links(settings)
        for dotfile in settings["dotfiles"]:
            state = links.verify(dotfile)
            if state is not LinkState.CORRECT_LINK:
                logger.info(f"{dotfile} is {state}")
                return False

        return True

    def sync(self) -> SyncResult:
        """Reconcile the checkout with the remote and relink dotfiles.

        Cloning, pulling, committing and pushing stop at the first failure
        and leave the checkout as it is. Link problems are per dotfile: they
        are recorded in the result and the remaining dotfiles are still
        processed.

        Returns:
            Result describing commits, relinked dotfiles and warnings

        Raises:
            NotInitializedError: If no settings exist
            InvalidRepoStateError: If the repository path is not a usable checkout
            RemoteMismatchError: If the checkout tracks another remote
            GitCommandError: If clone, pull, commit or push fails
        """
        settings = self.store.load()
        repo_path = settings["repo_path"]
        result = SyncResult()

        self.repository.ensure_initialized(
            repo_path, self.repository.remote_url_for(settings["github_account"])
        )

        logger.info("Pulling the repository")
        self.repository.pull(repo_path)

        if not self.repository.is_working_tree_clean(repo_path):
            logger.info("Committing the changes")
            self.repository.commit_all(repo_path, COMMIT_MESSAGE)
            logger.info("Pushing the changes")
            self.repository.push(repo_path)
            result.committed = True

        logger.info("Repository is synced")

        logger.info("Checking dotfiles")
        links = self._links(settings)
        for dotfile in settings["dotfiles"]:
            self._sync_link(links, dotfile, result)

        for dotfile, reason in result.warnings:
            logger.warning(f"{dotfile}: {reason}")
        logger.info(str(result))
        return result

    def _sync_link(self, links: LinkManager, dotfile: str, result: SyncResult) -> None:
        logger.debug(f"Checking {dotfile}")
        try:
            state = links.verify(dotfile)
            if state is LinkState.CORRECT_LINK:
                result.add_ok(dotfile)
            elif state is LinkState.ABSENT:
                logger.info(f"Linking {dotfile} from the repository")
                links.repair(dotfile)
                result.add_relinked(dotfile)
            else:
                result.add_warning(dotfile, f"home path is {state}, left untouched")
        except (OSError, LinkConflictError) as e:
            result.add_warning(dotfile, f"could not be linked: {e}")

    def add(self, path: str) -> str:
        """Move a dotfile into the repository, link it back and track it.

        The repository is cloned first if it is not there yet. The dotfile
        is staged but not committed; the next ``sync`` commits it.

        Args:
            path: Dotfile path, absolute, ``~``-prefixed or home-relative

        Returns:
            The home-relative name the dotfile is tracked under

        Raises:
            NotInitializedError: If no settings exist
            ValueError: If the path is outside the home directory
            OSError: If the file is missing or already in the repository
            GitCommandError: If staging fails; the dotfile stays tracked
        """
        settings = self.store.load()
        repo_path = settings["repo_path"]
        links = self._links(settings)
        dotfile = links.relative_name(path)

        self.repository.ensure_initialized(
            repo_path, self.repository.remote_url_for(settings["github_account"])
        )

        links.materialize(dotfile)
        # tracked before staging; the next sync commits it even if git add fails
        self.store.add_dotfile(dotfile)
        self.repository.stage(repo_path, dotfile)
        return dotfile
