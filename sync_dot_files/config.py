"""Settings persistence for sync-dot-files.

This module reads and writes the YAML settings file that records the
GitHub account, the local repository path and the list of tracked dotfiles.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml
from typing_extensions import TypedDict

from .errors import NotInitializedError

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "sync-dot-files.yaml"
REPO_DIRNAME = "repo"


def default_config_dir() -> Path:
    """Return the per-user settings directory."""
    env_dir = os.getenv("SYNC_DOT_FILES_CONFIG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / ".config" / "sync-dot-files"


class Settings(TypedDict):
    """Persisted settings record.

    ``dotfiles`` holds paths relative to the home directory, in the order
    they were added.
    """

    github_account: str
    repo_path: str
    dotfiles: list[str]


class SettingsStore:
    """Loads and saves :class:`Settings` under a configurable directory."""

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = Path(config_dir) if config_dir else default_config_dir()

    @property
    def settings_path(self) -> Path:
        return self.config_dir / SETTINGS_FILENAME

    @property
    def default_repo_path(self) -> Path:
        return self.config_dir / REPO_DIRNAME

    def exists(self) -> bool:
        return self.settings_path.exists()

    def load(self) -> Settings:
        """Load and validate the settings file.

        Every call reads the file again and returns a new dictionary, so
        callers never share a mutable record.

        Returns:
            Parsed and validated settings

        Raises:
            NotInitializedError: If no settings have been saved yet
            yaml.YAMLError: If the YAML is malformed
            ValueError: If the settings structure is invalid
        """
        if not self.settings_path.exists():
            raise NotInitializedError(
                f"Settings file not found: {self.settings_path} (run 'init' first)"
            )

        logger.debug(f"Loading settings from {self.settings_path}")

        try:
            with self.settings_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Failed to parse settings file: {e}") from e

        return validate_settings(data)

    def save(self, settings: Settings) -> None:
        """Write settings, replacing the previous record in one step.

        The YAML is written to a temporary file next to the settings file
        and then renamed over it.

        Raises:
            OSError: If the file cannot be written
        """
        self.config_dir.mkdir(parents=True, exist_ok=True)
        data = {
            "github_account": settings["github_account"],
            "repo_path": settings["repo_path"],
            "dotfiles": list(settings["dotfiles"]),
        }

        fd, tmp_name = tempfile.mkstemp(
            dir=self.config_dir, prefix=".sync-dot-files-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
            os.replace(tmp_name, self.settings_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Saved settings to {self.settings_path}")

    def initialize(self, github_account: str) -> Settings:
        """Create settings for ``github_account`` or switch the account.

        Existing settings keep their repository path and dotfile list; only
        the account changes.
        """
        if not github_account:
            raise ValueError("GitHub account must not be empty")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        if self.exists():
            settings = self.load()
            logger.info(
                f"Updating GitHub account from {settings['github_account']} "
                f"to {github_account}"
            )
        else:
            settings = {
                "github_account": "",
                "repo_path": str(self.default_repo_path),
                "dotfiles": [],
            }
            logger.info(f"Creating settings at {self.settings_path}")

        settings["github_account"] = github_account
        self.save(settings)
        return settings

    def add_dotfile(self, dotfile: str) -> Settings:
        """Append ``dotfile`` to the tracked list and persist it.

        Raises:
            NotInitializedError: If no settings have been saved yet
        """
        settings = self.load()
        settings["dotfiles"].append(dotfile)
        self.save(settings)
        logger.info(f"Tracking {dotfile} ({len(settings['dotfiles'])} dotfiles)")
        return settings


def validate_settings(data: Any) -> Settings:
    """Validate a raw settings mapping.

    Args:
        data: Result of parsing the settings YAML

    Returns:
        Validated settings with ``dotfiles`` defaulted to an empty list

    Raises:
        ValueError: If the settings structure is invalid
    """
    if not isinstance(data, dict):
        raise ValueError("Settings must be a dictionary")

    for field in ("github_account", "repo_path"):
        if field not in data:
            raise ValueError(f"Settings missing required field: {field}")

    github_account = data["github_account"]
    repo_path = data["repo_path"]
    dotfiles = data.get("dotfiles") or []

    if not isinstance(github_account, str):
        raise ValueError("'github_account' must be a string")
    if not isinstance(repo_path, str) or not repo_path:
        raise ValueError("'repo_path' must be a non-empty string")
    if not isinstance(dotfiles, list):
        raise ValueError("'dotfiles' must be a list")

    for i, dotfile in enumerate(dotfiles):
        if not isinstance(dotfile, str):
            raise ValueError(f"Dotfile {i}: must be a string")

    settings: Settings = {
        "github_account": github_account,
        "repo_path": repo_path,
        "dotfiles": list(dotfiles),
    }
    return settings
