"""Diff samples and a fake diff source shared by the tests."""

from __future__ import annotations

from typing import Dict, List

from upstream_drift.exceptions import SourceUnavailable

CHANGED_A = (
    "diff --git a/lib/a.rb b/lib/a.rb\n"
    "index 3b18e51..4c2e0f9 100644\n"
    "--- a/lib/a.rb\n"
    "+++ b/lib/a.rb\n"
    "@@ -1,3 +1,3 @@\n"
    " module A\n"
    '-  VERSION = "1.0"\n'
    '+  VERSION = "1.1"\n'
    " end\n"
)

RENAMED_B = (
    "diff --git a/lib/b.rb b/lib/c.rb\n"
    "similarity index 100%\n"
    "rename from lib/b.rb\n"
    "rename to lib/c.rb\n"
)

CHANGED_D = (
    "diff --git a/d.rb b/d.rb\n"
    "index 0a1b2c3..d4e5f60 100644\n"
    "--- a/d.rb\n"
    "+++ b/d.rb\n"
    "@@ -1 +1,2 @@\n"
    " puts 'd'\n"
    "+puts 'local patch'\n"
)


class FakeSource:
    """Stands in for UpstreamRepository: canned diff text per tracked path."""

    def __init__(self, diffs: Dict[str, str], failing: tuple = ()):
        self.diffs = dict(diffs)
        self.failing = set(failing)
        self.calls: List[str] = []
        self.fetched = False
        self.remote_checked = False

    def ensure_remote(self) -> None:
        self.remote_checked = True

    def fetch(self) -> None:
        self.fetched = True

    def diff(self, tracked_path: str) -> str:
        self.calls.append(tracked_path)
        if tracked_path in self.failing:
            raise SourceUnavailable(tracked_path, "fatal: path does not exist")
        return self.diffs.get(tracked_path, "")
