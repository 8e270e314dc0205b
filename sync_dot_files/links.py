"""Symlink management between the home directory and the dotfiles checkout.

A tracked dotfile lives inside the repository; the home directory holds a
symlink to it. This module moves files into the repository, checks the
links and recreates missing ones. It never overwrites something that is
already at a home path.
"""

from __future__ import annotations

import logging
import os
import shutil
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Union

from .errors import LinkConflictError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class LinkState(Enum):
    """State of a dotfile's home path."""

    ABSENT = "absent"
    CORRECT_LINK = "correct link"
    WRONG_TARGET = "linked to the wrong target"
    NOT_A_LINK = "not a symlink"

    def __str__(self) -> str:
        return self.value


class DotfileLink(NamedTuple):
    """Where a dotfile's link and its repository copy should be."""

    home_path: Path
    repo_path: Path


class LinkManager:
    """Creates and checks the links for dotfiles tracked in ``repo_path``."""

    def __init__(self, home_dir: PathLike, repo_path: PathLike):
        self.home_dir = Path(home_dir)
        self.repo_path = Path(repo_path)

    def expected_link(self, dotfile: str) -> DotfileLink:
        return DotfileLink(self.home_dir / dotfile, self.repo_path / dotfile)

    def relative_name(self, path: PathLike) -> str:
        """Turn a user-supplied path into a home-relative dotfile name.

        Accepts ``.bashrc``, ``~/.bashrc`` and absolute paths under the home
        directory. The path itself is not resolved, so a symlinked dotfile
        keeps its own name.

        Raises:
            ValueError: If the path is outside the home directory
        """
        raw = str(path)
        if raw == "~" or raw.startswith("~/"):
            candidate = self.home_dir / raw[2:]
        else:
            candidate = Path(raw)
        if not candidate.is_absolute():
            candidate = self.home_dir / candidate
        candidate = Path(os.path.normpath(candidate))
        home = Path(os.path.normpath(self.home_dir))

        try:
            relative = candidate.relative_to(home)
        except ValueError as e:
            raise ValueError(f"{path} is not inside the home directory {home}") from e

        if not relative.parts:
            raise ValueError("The home directory itself cannot be tracked")
        return relative.as_posix()

    def materialize(self, dotfile: str) -> DotfileLink:
        """Move a dotfile into the repository and link it back.

        Raises:
            FileNotFoundError: If the dotfile does not exist in the home directory
            FileExistsError: If the repository already has a copy of it
        """
        link = self.expected_link(dotfile)

        if not os.path.lexists(link.home_path):
            raise FileNotFoundError(f"Dotfile not found: {link.home_path}")
        if os.path.lexists(link.repo_path):
            raise FileExistsError(f"Already in the repository: {link.repo_path}")

        link.repo_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(link.home_path), str(link.repo_path))
        logger.debug(f"Moved {link.home_path} -> {link.repo_path}")

        link.home_path.symlink_to(link.repo_path)
        logger.info(f"Linked {link.home_path} -> {link.repo_path}")
        return link

    def verify(self, dotfile: str) -> LinkState:
        link = self.expected_link(dotfile)
        home_path = link.home_path

        # lexists: a dangling link still occupies the path
        if not os.path.lexists(home_path):
            return LinkState.ABSENT
        if not home_path.is_symlink():
            return LinkState.NOT_A_LINK

        target = Path(os.readlink(home_path))
        if not target.is_absolute():
            target = home_path.parent / target

        if os.path.normpath(target) == os.path.normpath(link.repo_path):
            return LinkState.CORRECT_LINK
        # realpath tolerates symlink loops
        if os.path.realpath(target) == os.path.realpath(link.repo_path):
            return LinkState.CORRECT_LINK
        return LinkState.WRONG_TARGET

    def repair(self, dotfile: str) -> DotfileLink:
        """Recreate a missing link from the repository copy.

        Raises:
            LinkConflictError: If anything already occupies the home path
            FileNotFoundError: If the repository has no copy of the dotfile
        """
        state = self.verify(dotfile)
        if state is not LinkState.ABSENT:
            raise LinkConflictError(dotfile, state)

        link = self.expected_link(dotfile)
        if not os.path.lexists(link.repo_path):
            raise FileNotFoundError(f"Missing from the repository: {link.repo_path}")

        link.home_path.parent.mkdir(parents=True, exist_ok=True)
        link.home_path.symlink_to(link.repo_path)
        logger.info(f"Linked {link.home_path} -> {link.repo_path}")
        return link
