from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from upstream_drift.config import DriftConfig, UpstreamSettings


@pytest.fixture
def upstream() -> UpstreamSettings:
    return UpstreamSettings(repository="https://example.com/upstream.git")


@pytest.fixture
def make_config(upstream):
    def _make(paths, ignore=None) -> DriftConfig:
        data = {
            "upstream": {"repository": upstream.repository},
            "paths": list(paths),
            "ignore": ignore or [],
        }
        return DriftConfig.from_dict(data)

    return _make


@pytest.fixture
def write_config(tmp_path: Path):
    def _write(data: dict, name: str = ".upstream-drift.yml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write
