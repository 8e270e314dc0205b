"""GitHub API client for checking the dotfiles repository.

Cloning, pulling and pushing go through the git client; this module only
asks the GitHub REST API whether the account's dotfiles repository exists,
so ``init`` can be followed by a quick sanity check before the first sync.
"""

from __future__ import annotations

import logging
import os
from typing import Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)


class GitHubClient:
    """Client for the GitHub REST API.

    Works anonymously for public repositories; a token (argument or
    ``GITHUB_TOKEN``) is needed to see private ones.
    """

    API_URL = "https://api.github.com"

    def __init__(self, timeout: int = 30, token: Optional[str] = None):
        """Initialize the GitHub client.

        Args:
            timeout: Request timeout in seconds
            token: Optional GitHub token for private repository access
        """
        self.timeout = timeout
        self.token = token or os.getenv("GITHUB_TOKEN")
        self.session = requests.Session()

        self.session.headers.update(
            {
                "User-Agent": "sync-dot-files/0.1.0",
                "Accept": "application/vnd.github+json",
            }
        )

        if self.token:
            self.session.headers.update({"Authorization": f"token {self.token}"})
            logger.debug("GitHub token configured for private repository access")

    def repository_exists(self, owner: str, repo_name: str) -> bool:
        """Check whether ``owner/repo_name`` exists and is visible.

        Args:
            owner: GitHub account or organization
            repo_name: Repository name

        Returns:
            True if the API reports the repository, False if it is missing,
            private without a token, or the API could not be reached

        Example:
            >>> with GitHubClient() as client:
            ...     client.repository_exists("alice", "my-dot-files")
            True
        """
        url = f"{self.API_URL}/repos/{quote(owner, safe='')}/{quote(repo_name, safe='')}"
        logger.debug(f"Checking {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to reach GitHub: {e}")
            return False

        if response.status_code == 200:
            logger.info(f"Found repository {owner}/{repo_name} on GitHub")
            return True
        if response.status_code == 404:
            logger.error(f"Repository {owner}/{repo_name} not found on GitHub")
            return False

        logger.error(
            f"Unexpected GitHub response for {owner}/{repo_name}: "
            f"{response.status_code} {response.reason}"
        )
        return False

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self) -> GitHubClient:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
