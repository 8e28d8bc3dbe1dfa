"""
Repository scanning service for changelog-digest.

Collects the commits of a single repository over a date window, resolving
defaults from configuration.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

from core.config import ChangelogDigestConfig, get_config
from digest.date_utils import resolve_since_date
from digest.git_utils import get_commits
from digest.models import CommitRecord

logger = logging.getLogger(__name__)


class RepositoryScanner:
    """
    Service for reading commit history from one Git repository.
    """

    def __init__(self, config: Optional[ChangelogDigestConfig] = None):
        """
        Initialize the repository scanner.

        Args:
            config: Configuration instance. If None, uses global config.
        """
        self.config = config if config is not None else get_config()
        logger.debug(f"RepositoryScanner initialized (repo_path={self.config.git.repo_path})")

    def resolve_repo_path(self, repo_path: Optional[Path] = None) -> Path:
        """Return the absolute repository path, defaulting to the configured one."""
        if repo_path is None:
            return self.config.get_expanded_repo_path()
        return Path(os.path.expanduser(str(repo_path))).resolve()

    def scan(
        self,
        repo_path: Optional[Path] = None,
        since: Optional[str] = None,
        until: Optional[str] = None,
    ) -> List[CommitRecord]:
        """
        Scan a repository for commits within the window.

        Args:
            repo_path: Repository to read. If None, uses config git.repo_path.
            since: git --since expression or window keyword. If None, uses config.
            until: git --until expression. If None, uses config.

        Returns:
            Commit records, newest first

        Raises:
            NotARepositoryError: If repo_path is not inside a Git repository
            GitCommandError: If git fails
        """
        path = self.resolve_repo_path(repo_path)
        since_value = resolve_since_date(since or self.config.git.since)
        until_value = until if until is not None else self.config.git.until

        logger.info(f"Scanning repository: {path}")
        logger.debug(f"Window: since={since_value!r} until={until_value or 'now'!r}")

        commits = get_commits(path, since_value, until_value)

        logger.info(f"Found {len(commits)} commits in {path.name}")
        return commits
