"""Configuration management for the upstream drift detector."""

import os
import posixpath
import tempfile
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .exceptions import ConfigError
from .models import IgnoreEntry, IgnoredDiff, Report

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".upstream-drift.yml"
DEFAULT_REMOTE = "upstream"
DEFAULT_BRANCH = "main"
DEFAULT_LOCAL_REF = "HEAD"


def get_config_path(override: Optional[str] = None) -> Path:
    """
    Resolve the configuration file location.

    Priority:
    1. Explicit override (the --config flag)
    2. UPSTREAM_DRIFT_CONFIG environment variable
    3. .upstream-drift.yml in the current directory
    """
    if override:
        return Path(override)
    return Path(os.getenv("UPSTREAM_DRIFT_CONFIG", DEFAULT_CONFIG_FILE))


@dataclass
class UpstreamSettings:
    """Where the forked files come from."""

    repository: str
    remote: str = DEFAULT_REMOTE
    branch: str = DEFAULT_BRANCH
    path: str = ""
    local_ref: str = DEFAULT_LOCAL_REF

    @property
    def tracking_ref(self) -> str:
        return f"{self.remote}/{self.branch}"

    def upstream_path(self, tracked_path: str) -> str:
        """Map a project path onto its location in the upstream tree."""
        if not self.path:
            return tracked_path
        return posixpath.join(self.path, tracked_path)


@dataclass
class DriftConfig:
    """Central configuration: upstream location, tracked paths and baseline."""

    upstream: UpstreamSettings
    paths: List[str] = field(default_factory=list)
    ignore: List[IgnoreEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "DriftConfig":
        """Build a fully populated config from parsed YAML, applying defaults."""
        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping at the top level")

        upstream_data = data.get("upstream")
        if not isinstance(upstream_data, dict):
            raise ConfigError("Config file missing 'upstream' section")
        repository = upstream_data.get("repository")
        if not repository:
            raise ConfigError("Config file missing 'upstream.repository'")

        upstream = UpstreamSettings(
            repository=str(repository),
            remote=str(upstream_data.get("remote") or DEFAULT_REMOTE),
            branch=str(upstream_data.get("branch") or DEFAULT_BRANCH),
            path=str(upstream_data.get("path") or ""),
            local_ref=str(upstream_data.get("local_ref") or DEFAULT_LOCAL_REF),
        )

        paths = data.get("paths") or []
        if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
            raise ConfigError("'paths' must be a list of strings")

        duplicates = sorted({p for p in paths if paths.count(p) > 1})
        if duplicates:
            raise ConfigError(f"Duplicate tracked paths in config: {', '.join(duplicates)}")

        return cls(
            upstream=upstream,
            paths=list(paths),
            ignore=_parse_ignore(data.get("ignore") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "upstream": {
                "repository": self.upstream.repository,
                "remote": self.upstream.remote,
                "branch": self.upstream.branch,
                "path": self.upstream.path,
                "local_ref": self.upstream.local_ref,
            },
            "paths": list(self.paths),
            "ignore": [
                {
                    "path": entry.path,
                    "diffs": [
                        {"file": diff.file, "hash": diff.hash, "skip": diff.skip}
                        for diff in entry.diffs
                    ],
                }
                for entry in self.ignore
            ],
        }

    def ignored_for(self, path: str) -> List[IgnoredDiff]:
        """Acknowledged diffs for a tracked path; empty when none are stored."""
        for entry in self.ignore:
            if entry.path == path:
                return entry.diffs
        return []


def _parse_ignore(raw: Any) -> List[IgnoreEntry]:
    if not isinstance(raw, list):
        raise ConfigError("'ignore' must be a list")

    entries: List[IgnoreEntry] = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("path"):
            raise ConfigError("Ignore entry missing 'path' field")

        diffs = item.get("diffs") or []
        if not isinstance(diffs, list):
            raise ConfigError(f"Ignore entry '{item['path']}': 'diffs' must be a list")

        parsed: List[IgnoredDiff] = []
        for diff in diffs:
            if not isinstance(diff, dict) or "file" not in diff:
                raise ConfigError(f"Ignore entry '{item['path']}': diff missing 'file' field")
            skip = diff.get("skip", False)
            if not isinstance(skip, bool):
                raise ConfigError(
                    f"Ignore entry '{item['path']}': 'skip' must be true or false, got {skip!r}"
                )
            parsed.append(IgnoredDiff(
                file=diff.get("file"),
                hash=diff.get("hash"),
                skip=skip,
            ))
        entries.append(IgnoreEntry(path=str(item["path"]), diffs=parsed))
    return entries


def load_config(config_path: Path) -> DriftConfig:
    """
    Load and validate the configuration file.

    Args:
        config_path: Path to the YAML config file

    Returns:
        Parsed DriftConfig

    Raises:
        ConfigError: If the file is missing, unreadable or malformed
    """
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading config: {e}") from e

    config = DriftConfig.from_dict(data)
    logger.info(f"Loaded config {config_path}: {len(config.paths)} tracked paths, "
                f"{len(config.ignore)} ignore entries")
    return config


def with_baseline(config: DriftConfig, report: Report) -> DriftConfig:
    """
    Return a copy of the config whose ignore list acknowledges every record
    in the report, keeping skip markers and dropping diff text.
    """
    ignore = [
        IgnoreEntry(
            path=path,
            diffs=[IgnoredDiff(file=r.file, hash=r.hash, skip=r.skip) for r in records],
        )
        for path, records in report.items()
    ]
    return replace(config, paths=list(config.paths), ignore=ignore)


def save_config(config: DriftConfig, config_path: Path) -> None:
    """Rewrite the whole config file, replacing it atomically."""
    config_path = Path(config_path)
    directory = config_path.parent
    fd, tmp_name = tempfile.mkstemp(prefix=".upstream-drift-", suffix=".yml", dir=directory)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config.to_dict(), f, sort_keys=False, default_flow_style=False)
        if config_path.exists():
            os.chmod(tmp_name, config_path.stat().st_mode & 0o777)
        os.replace(tmp_name, config_path)
    except OSError as e:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ConfigError(f"Error writing config {config_path}: {e}") from e

    logger.info(f"✅ Baseline written to {config_path}")
