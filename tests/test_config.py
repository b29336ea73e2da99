from __future__ import annotations

from pathlib import Path

import pytest

from upstream_drift.config import (
    DriftConfig,
    get_config_path,
    load_config,
    save_config,
    with_baseline,
)
from upstream_drift.exceptions import ConfigError
from upstream_drift.models import DiffRecord


def test_defaults_applied_at_construction(write_config) -> None:
    path = write_config({"upstream": {"repository": "https://example.com/up.git"}})

    config = load_config(path)

    assert config.upstream.remote == "upstream"
    assert config.upstream.branch == "main"
    assert config.upstream.path == ""
    assert config.upstream.local_ref == "HEAD"
    assert config.paths == []
    assert config.ignore == []


def test_full_config_is_parsed(write_config) -> None:
    path = write_config({
        "upstream": {
            "repository": "git@example.com:org/up.git",
            "remote": "rails",
            "branch": "7-1-stable",
            "path": "activesupport",
        },
        "paths": ["lib/core_ext", "lib/cache"],
        "ignore": [
            {"path": "lib/core_ext", "diffs": [
                {"file": "string.rb", "hash": "abc", "skip": False},
                {"file": "hash.rb", "hash": "def", "skip": True},
            ]},
        ],
    })

    config = load_config(path)

    assert config.upstream.tracking_ref == "rails/7-1-stable"
    assert config.upstream.upstream_path("lib/cache") == "activesupport/lib/cache"
    assert config.paths == ["lib/core_ext", "lib/cache"]
    assert [d.file for d in config.ignored_for("lib/core_ext")] == ["string.rb", "hash.rb"]
    assert config.ignored_for("lib/core_ext")[1].skip is True
    assert config.ignored_for("lib/cache") == []


@pytest.mark.parametrize(
    ("data", "message"),
    [
        (["not", "a", "mapping"], "mapping"),
        ({"paths": []}, "'upstream' section"),
        ({"upstream": {"remote": "x"}}, "upstream.repository"),
        ({"upstream": {"repository": "r"}, "paths": "lib"}, "list of strings"),
        ({"upstream": {"repository": "r"}, "paths": ["a", "a"]}, "Duplicate tracked paths"),
        ({"upstream": {"repository": "r"}, "ignore": [{"diffs": []}]}, "missing 'path'"),
        ({"upstream": {"repository": "r"}, "ignore": [{"path": "a", "diffs": [{"hash": "x"}]}]}, "missing 'file'"),
        ({"upstream": {"repository": "r"}, "ignore": [{"path": "a", "diffs": [{"file": "x", "skip": "false"}]}]}, "'skip' must be"),
        ({"upstream": {"repository": "r"}, "ignore": [{"path": "a", "diffs": [{"file": "x", "skip": 1}]}]}, "'skip' must be"),
    ],
)
def test_invalid_config_raises(write_config, data, message) -> None:
    path = write_config(data)

    with pytest.raises(ConfigError, match=message):
        load_config(path)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.yml")


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    path = tmp_path / "bad.yml"
    path.write_text("upstream: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(path)


def test_with_baseline_returns_new_config(make_config) -> None:
    config = make_config(
        ["vendor/one", "vendor/two"],
        ignore=[{"path": "vendor/old", "diffs": [{"file": "x.rb", "hash": "1"}]}],
    )
    report = {
        "vendor/one": [
            DiffRecord(file="a.rb", hash="h1", diff_text="diff --git a/a.rb b/a.rb\n"),
            DiffRecord(file="b.rb", hash="h2", diff_text=None, skip=True),
        ],
    }

    updated = with_baseline(config, report)

    assert [e.path for e in config.ignore] == ["vendor/old"]
    assert updated.paths == config.paths
    assert updated.upstream == config.upstream
    assert [e.path for e in updated.ignore] == ["vendor/one"]
    assert [(d.file, d.hash, d.skip) for d in updated.ignore[0].diffs] == [
        ("a.rb", "h1", False),
        ("b.rb", "h2", True),
    ]


def test_save_config_rewrites_file_without_diff_text(write_config) -> None:
    path = write_config({"upstream": {"repository": "r"}, "paths": ["vendor/one"]})
    config = load_config(path)
    report = {"vendor/one": [DiffRecord(file="a.rb", hash="h1", diff_text="SECRET DIFF BODY")]}

    save_config(with_baseline(config, report), path)

    text = path.read_text(encoding="utf-8")
    assert "SECRET DIFF BODY" not in text
    reloaded = load_config(path)
    assert reloaded.paths == ["vendor/one"]
    assert [(d.file, d.hash, d.skip) for d in reloaded.ignored_for("vendor/one")] == [("a.rb", "h1", False)]
    assert [p.name for p in path.parent.iterdir()] == [path.name]


def test_config_path_resolution(monkeypatch) -> None:
    monkeypatch.delenv("UPSTREAM_DRIFT_CONFIG", raising=False)
    assert get_config_path() == Path(".upstream-drift.yml")

    monkeypatch.setenv("UPSTREAM_DRIFT_CONFIG", "conf/drift.yml")
    assert get_config_path() == Path("conf/drift.yml")
    assert get_config_path("explicit.yml") == Path("explicit.yml")


def test_to_dict_round_trips_through_from_dict(make_config) -> None:
    config = make_config(
        ["a"],
        ignore=[{"path": "a", "diffs": [{"file": None, "hash": "h", "skip": False}]}],
    )

    assert DriftConfig.from_dict(config.to_dict()) == config
