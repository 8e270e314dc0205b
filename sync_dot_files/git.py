"""Git repository gateway for sync-dot-files.

All interaction with the dotfiles checkout goes through :class:`GitRepository`,
which drives the installed ``git`` client via a :class:`CommandRunner`.
Nothing about the checkout is cached: each check inspects the directory
again, because it can be cloned, deleted or reconfigured between calls.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from .errors import GitCommandError, InvalidRepoStateError, RemoteMismatchError
from .shell import CommandResult, CommandRunner, run_command

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_HOST = "git@github.com"
DEFAULT_REPO_NAME = "my-dot-files"


class GitRepository:
    """Gateway to the local dotfiles checkout and its ``origin`` remote."""

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        host: str = DEFAULT_HOST,
        repo_name: str = DEFAULT_REPO_NAME,
    ):
        """Initialize the gateway.

        Args:
            runner: Command runner, defaults to running real processes
            host: SSH host part of the remote URL
            repo_name: Name of the dotfiles repository on the host
        """
        self.runner = runner or run_command
        self.host = host
        self.repo_name = repo_name

    def remote_url_for(self, github_account: str) -> str:
        """Build the expected ``origin`` URL for an account.

        Example:
            >>> GitRepository().remote_url_for("alice")
            'git@github.com:alice/my-dot-files.git'
        """
        return f"{self.host}:{github_account}/{self.repo_name}.git"

    def is_ready(self, repo_path: PathLike, expected_url: str) -> bool:
        """Check whether ``repo_path`` holds a usable checkout of ``expected_url``.

        Args:
            repo_path: Local checkout directory
            expected_url: URL the ``origin`` remote must have

        Returns:
            False if the path does not exist, True if it is a matching checkout

        Raises:
            InvalidRepoStateError: If the path is bare or not a checkout root
            RemoteMismatchError: If ``origin`` is missing or points elsewhere
        """
        path = Path(repo_path)
        if not path.exists():
            logger.debug(f"Repository path {path} does not exist")
            return False

        bare = self._git(path, "rev-parse", "--is-bare-repository", check=False)
        if not bare.ok:
            raise InvalidRepoStateError(f"{path} is not a git repository")
        if bare.stdout.strip() == "true":
            raise InvalidRepoStateError(f"{path} is a bare repository")

        toplevel = self._git(path, "rev-parse", "--show-toplevel").stdout.strip()
        if Path(toplevel).resolve() != path.resolve():
            raise InvalidRepoStateError(
                f"{path} is inside the git checkout {toplevel}, not a checkout itself"
            )

        remote = self._git(path, "config", "--get", "remote.origin.url", check=False)
        actual_url = remote.stdout.strip() if remote.ok else None
        if actual_url != expected_url:
            raise RemoteMismatchError(expected_url, actual_url)

        return True

    def ensure_initialized(self, repo_path: PathLike, remote_url: str) -> None:
        """Clone ``remote_url`` into ``repo_path`` unless it is already there.

        Raises:
            InvalidRepoStateError: If a non-checkout occupies the path
            RemoteMismatchError: If a checkout of another remote occupies the path
            GitCommandError: If the clone fails
        """
        path = Path(repo_path)
        if self.is_ready(path, remote_url):
            logger.info(f"The repository already exists at {path}")
            return

        path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Cloning the repository from {remote_url} to {path}")
        self._run(["git", "clone", remote_url, str(path)])

    def is_working_tree_clean(self, repo_path: PathLike) -> bool:
        """True when there are no staged, unstaged or untracked changes."""
        status = self._git(Path(repo_path), "status", "--porcelain")
        return not status.stdout.strip()

    def fetch_all(self, repo_path: PathLike) -> None:
        self._git(Path(repo_path), "fetch", "--all")

    def pull(self, repo_path: PathLike) -> None:
        self._git(Path(repo_path), "pull")

    def stage(self, repo_path: PathLike, path: str) -> None:
        self._git(Path(repo_path), "add", "--", path)

    def commit_all(self, repo_path: PathLike, message: str) -> None:
        """Stage every change in the working tree and commit it."""
        repo = Path(repo_path)
        self._git(repo, "add", "--all")
        self._git(repo, "commit", "-m", message)

    def push(self, repo_path: PathLike) -> None:
        self._git(Path(repo_path), "push")

    def ahead_behind_count(self, repo_path: PathLike) -> int:
        """Count commits on either ``HEAD`` or its upstream but not both.

        Call :meth:`fetch_all` first so the upstream ref is current.

        Raises:
            GitCommandError: If the branch has no upstream
        """
        result = self._git(
            Path(repo_path), "rev-list", "--count", "HEAD...@{upstream}"
        )
        try:
            return int(result.stdout.strip())
        except ValueError as e:
            raise GitCommandError(
                ["git", "rev-list", "--count", "HEAD...@{upstream}"],
                result.returncode,
                f"unexpected output: {result.stdout!r}",
            ) from e

    def _git(self, repo_path: Path, *args: str, check: bool = True) -> CommandResult:
        return self._run(["git", "-C", str(repo_path), *args], check=check)

    def _run(self, command: list[str], check: bool = True) -> CommandResult:
        result = self.runner(command)
        if check and not result.ok:
            logger.debug(f"Command failed ({result.returncode}): {result.stderr.strip()}")
            raise GitCommandError(command, result.returncode, result.stderr)
        return result
