"""
Git Operations Module - Remote setup and diff retrieval

This module wraps the downstream repository with GitPython: it makes sure
the upstream remote exists, fetches the tracked upstream branch, and
produces the raw diff between an upstream path and its forked copy.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from .config import UpstreamSettings
from .exceptions import SourceUnavailable

logger = logging.getLogger(__name__)


class UpstreamRepository:
    """The downstream git checkout, seen through its upstream remote."""

    def __init__(self, repo: git.Repo, upstream: UpstreamSettings):
        self.repo = repo
        self.upstream = upstream

    @classmethod
    def open(cls, upstream: UpstreamSettings, path: Optional[Union[str, Path]] = None) -> "UpstreamRepository":
        """
        Open the git repository containing ``path`` (default: cwd).

        Raises:
            SourceUnavailable: If no git repository can be found
        """
        location = str(path) if path is not None else "."
        try:
            repo = git.Repo(location, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise SourceUnavailable("repository", f"{location} is not a git repository ({e})") from e
        logger.debug(f"Using repository at {repo.working_tree_dir}")
        return cls(repo, upstream)

    def ensure_remote(self) -> None:
        """
        Add the upstream remote when it is missing.

        An existing remote with the same name is left untouched, even if its
        URL differs from the configured one.
        """
        name = self.upstream.remote
        existing = {remote.name: remote for remote in self.repo.remotes}

        if name in existing:
            current_url = existing[name].url
            if current_url != self.upstream.repository:
                logger.warning(
                    f"Remote '{name}' points to {current_url}, "
                    f"config expects {self.upstream.repository}"
                )
            return

        try:
            logger.info(f"Adding remote '{name}' -> {self.upstream.repository}")
            self.repo.create_remote(name, self.upstream.repository)
        except GitCommandError as e:
            raise SourceUnavailable(f"remote {name}", str(e)) from e

    def fetch(self) -> None:
        """Fetch the upstream branch so its remote-tracking ref is current."""
        try:
            logger.info(f"Fetching {self.upstream.tracking_ref}...")
            self.repo.git.fetch(self.upstream.remote, self.upstream.branch)
        except GitCommandError as e:
            raise SourceUnavailable(f"fetch {self.upstream.tracking_ref}", str(e)) from e

    def diff(self, tracked_path: str) -> str:
        """
        Raw diff from the upstream copy of ``tracked_path`` to the local one.

        File names inside the diff are relative to the compared directories,
        so ``a/<file>`` names the upstream side.

        Args:
            tracked_path: Project-relative path mirrored from upstream

        Returns:
            Unified diff text, empty when both sides are identical

        Raises:
            SourceUnavailable: If git cannot produce the comparison
        """
        upstream_side = f"{self.upstream.tracking_ref}:{self.upstream.upstream_path(tracked_path)}"
        local_side = f"{self.upstream.local_ref}:{tracked_path}"

        try:
            logger.debug(f"git diff {upstream_side} {local_side}")
            # Header layout must not depend on the user's git config
            return self.repo.git(c="core.quotePath=false").diff(
                "--no-color",
                "--no-ext-diff",
                "--src-prefix=a/",
                "--dst-prefix=b/",
                "--find-renames",
                upstream_side,
                local_side,
                strip_newline_in_stdout=False,
            )
        except GitCommandError as e:
            raise SourceUnavailable(tracked_path, str(e)) from e
