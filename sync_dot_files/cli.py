"""Command-line interface for sync-dot-files.

This module provides the CLI commands and options for keeping dotfiles
synchronized with a GitHub repository.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import SettingsStore, default_config_dir
from .errors import SyncDotFilesError
from .github import GitHubClient
from .sync import DotfileSync


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration.

    Args:
        verbose: Enable debug logging if True
    """
    level = logging.DEBUG if verbose else logging.INFO
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level, format=format_str, handlers=[logging.StreamHandler()]
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="sync-dot-files",
        description="Keep dotfiles in the home directory synchronized with a GitHub repository",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Set up for a GitHub account (uses git@github.com:alice/my-dot-files.git)
  sync-dot-files init alice

  # Move ~/.bashrc into the repository and link it back
  sync-dot-files add .bashrc

  # Pull, commit and push changes, then relink dotfiles
  sync-dot-files sync

  # Exit 0 only if the repository is clean and synced
  sync-dot-files
        """.strip(),
    )

    parser.add_argument(
        "-c",
        "--config-dir",
        type=Path,
        default=default_config_dir(),
        help="Settings directory (default: $SYNC_DOT_FILES_CONFIG_DIR or ~/.config/sync-dot-files)",
    )

    parser.add_argument(
        "--timeout",
        type=int,
        default=30,
        help="GitHub API request timeout in seconds (default: 30)",
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    init_parser = subparsers.add_parser("init", help="Initialize the repository")
    init_parser.add_argument("github_account", help="GitHub account owning my-dot-files")

    add_parser = subparsers.add_parser("add", help="Add a dotfile to the repository")
    add_parser.add_argument("dotfile", help="Path of the dotfile, relative to the home directory")

    subparsers.add_parser("is-clean", help="Check if the repository is clean")
    subparsers.add_parser("is-synced", help="Check if the repository is synced")
    subparsers.add_parser("repo-path", help="Print the local repository path")
    subparsers.add_parser("sync", help="Sync the repository")
    subparsers.add_parser(
        "check-remote", help="Check that the dotfiles repository exists on GitHub"
    )

    return parser


def dispatch(app: DotfileSync, args: argparse.Namespace) -> int:
    """Run the selected subcommand and return the process exit code."""
    logger = logging.getLogger(__name__)
    command = args.command

    if command == "init":
        logger.info(f"Initializing the repository for {args.github_account}")
        app.store.initialize(args.github_account)
        logger.info(f"Remote repository: {app.remote_url()}")
        logger.info(f"Local repository: {app.repo_path()}")
        return 0

    if command == "add":
        logger.info(f"Adding the dotfile {args.dotfile}")
        dotfile = app.add(args.dotfile)
        logger.info(f"✓ {dotfile} is tracked; run 'sync' to commit and push it")
        return 0

    if command == "is-clean":
        if app.is_clean():
            logger.info("The repository is clean")
            return 0
        logger.error("The repository is not clean")
        return 1

    if command == "is-synced":
        if app.is_synced():
            logger.info("The repository is synced")
            return 0
        logger.error("The repository is not synced")
        return 1

    if command == "repo-path":
        print(app.repo_path().strip())
        return 0

    if command == "sync":
        logger.info("Syncing the repository")
        result = app.sync()
        if result.is_success:
            logger.info(f"✓ {result}")
        else:
            logger.warning(f"✗ {result}")
            for dotfile, reason in result.warnings:
                logger.warning(f"  {dotfile}: {reason}")
        return 0

    if command == "check-remote":
        account = app.store.load()["github_account"]
        with GitHubClient(timeout=args.timeout) as client:
            exists = client.repository_exists(account, app.repository.repo_name)
        return 0 if exists else 1

    is_clean = app.is_clean()
    if is_clean:
        logger.info("Clean")
    else:
        logger.error("Not clean")

    is_synced = app.is_synced()
    if is_synced:
        logger.info("Synced")
    else:
        logger.error("Not synced")

    return 0 if is_clean and is_synced else 1


def main() -> None:
    """Main entry point for the CLI application."""
    parser = create_parser()
    args = parser.parse_args()

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    app = DotfileSync(SettingsStore(args.config_dir))

    try:
        exit_code = dispatch(app, args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except (SyncDotFilesError, OSError, ValueError) as e:
        logger.error(str(e))
        if args.verbose:
            logger.exception("Full traceback:")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.verbose:
            logger.exception("Full traceback:")
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
