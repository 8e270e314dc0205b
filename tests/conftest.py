"""Pytest configuration and shared fixtures."""

import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

import pytest

from sync_dot_files.config import SettingsStore
from sync_dot_files.shell import CommandResult

requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git is not installed"
)


class FakeGitRunner:
    """Scripted stand-in for the command runner.

    Responses are keyed by the git arguments that follow ``-C <path>``
    (or by the bare subcommand, e.g. ``("clone",)``). Unscripted commands
    succeed with empty output. ``clone`` creates the target directory.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.responses: dict[tuple[str, ...], CommandResult] = {}

    def set(self, *args: str, stdout: str = "", stderr: str = "", returncode: int = 0) -> None:
        self.responses[args] = CommandResult(stdout, stderr, returncode)

    def make_ready(self, repo_path: Path, remote_url: str) -> None:
        """Script the answers of a healthy, synced checkout."""
        self.set("rev-parse", "--is-bare-repository", stdout="false\n")
        self.set("rev-parse", "--show-toplevel", stdout=f"{repo_path}\n")
        self.set("config", "--get", "remote.origin.url", stdout=f"{remote_url}\n")
        self.set("rev-list", "--count", "HEAD...@{upstream}", stdout="0\n")

    def __call__(self, args: Sequence[str], cwd: Optional[Path] = None) -> CommandResult:
        args = list(args)
        self.calls.append(args)
        if args[1] == "clone":
            Path(args[3]).mkdir(parents=True, exist_ok=True)
        return self.responses.get(self.key(args), CommandResult("", "", 0))

    @staticmethod
    def key(args: Sequence[str]) -> tuple[str, ...]:
        if len(args) > 2 and args[1] == "-C":
            return tuple(args[3:])
        return tuple(args[1:2])

    @property
    def subcommands(self) -> list[str]:
        """First git argument of every call, in order (``clone``, ``pull``...)."""
        return [self.key(call)[0] for call in self.calls]


@pytest.fixture
def fake_git() -> FakeGitRunner:
    return FakeGitRunner()


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    """Return an empty directory standing in for the user's home."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    return tmp_path / "config" / "sync-dot-files"


@pytest.fixture
def store(config_dir: Path) -> SettingsStore:
    """Return a settings store initialized for the account 'alice'."""
    settings_store = SettingsStore(config_dir)
    settings_store.initialize("alice")
    return settings_store


@pytest.fixture
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate real git commands from the user's git configuration."""
    git_home = tmp_path / "git-home"
    git_home.mkdir()
    monkeypatch.setenv("HOME", str(git_home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")


def git(*args: str) -> str:
    """Run git for test setup and return stdout."""
    result = subprocess.run(
        ["git", *args], check=True, capture_output=True, text=True
    )
    return result.stdout


@pytest.fixture
def remote_repo(tmp_path: Path, git_env: None) -> Path:
    """Return a bare repository with one commit, usable as ``origin``."""
    seed = tmp_path / "seed"
    git("init", str(seed))
    (seed / "README.md").write_text("# dotfiles\n", encoding="utf-8")
    git("-C", str(seed), "add", "README.md")
    git("-C", str(seed), "commit", "-m", "Initial commit")

    remote = tmp_path / "remote.git"
    git("clone", "--bare", str(seed), str(remote))
    return remote
