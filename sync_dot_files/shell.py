"""Blocking command execution.

Git operations depend on the :class:`CommandRunner` call signature rather
than on ``subprocess`` directly, so tests can substitute a scripted runner.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Captured output of a finished command."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    def __call__(
        self, args: Sequence[str], cwd: Optional[Path] = None
    ) -> CommandResult: ...


def run_command(args: Sequence[str], cwd: Optional[Path] = None) -> CommandResult:
    """Run a command to completion and capture its output.

    Args:
        args: Program and arguments, not passed through a shell
        cwd: Optional working directory

    Returns:
        Captured stdout, stderr and exit status

    Raises:
        OSError: If the program cannot be started (e.g. git is not installed)
    """
    logger.debug(f"Running: {' '.join(args)}")
    completed = subprocess.run(
        list(args),
        cwd=cwd,
        capture_output=True,
        text=True,
    )
    return CommandResult(
        stdout=completed.stdout,
        stderr=completed.stderr,
        returncode=completed.returncode,
    )
