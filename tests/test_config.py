"""Tests for specbook.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from specbook.config import (
    atomic_write,
    get_config_dir,
    get_data_dir,
    load_global_config,
    load_project_config,
    resolve_config,
    save_global_config,
)
from specbook.exceptions import ConfigError
from specbook.models import BundleConfig, GlobalConfig, UnknownTagPolicy


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# Directories
# ---------------------------------------------------------------------------


class TestDirectories:
    def test_config_dir_uses_xdg(self, isolated_config: Path) -> None:
        path = get_config_dir()
        assert path == isolated_config / "config" / "specbook"
        assert path.is_dir()

    def test_data_dir_uses_xdg(self, isolated_config: Path) -> None:
        path = get_data_dir()
        assert path == isolated_config / "data" / "specbook"
        assert path.is_dir()

    def test_non_xdg_fallback(self, tmp_path: Path) -> None:
        with patch("specbook.config._is_xdg_platform", return_value=False), patch(
            "specbook.config.Path.home", return_value=tmp_path
        ):
            assert get_config_dir() == tmp_path / ".specbook"
            assert get_data_dir() == tmp_path / ".specbook" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_text(self, tmp_path: Path) -> None:
        target = tmp_path / "out.json"
        atomic_write(target, '{"a": 1}')
        assert target.read_text(encoding="utf-8") == '{"a": 1}'

    def test_writes_bytes(self, tmp_path: Path) -> None:
        target = tmp_path / "bundle.zip"
        atomic_write(target, b"PK\x03\x04")
        assert target.read_bytes() == b"PK\x03\x04"

    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "out.txt"
        atomic_write(target, "x")
        assert target.read_text() == "x"

    def test_failure_leaves_target_and_no_temp(self, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        target.write_text("original")
        with patch("specbook.config.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                atomic_write(target, "new")
        assert target.read_text() == "original"
        assert os.listdir(tmp_path) == ["out.txt"]


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.bundle.unknown_tags is UnknownTagPolicy.ERROR
        assert config.bundle.output == "bundle.zip"

    def test_round_trip(self, isolated_config: Path) -> None:
        config = GlobalConfig(
            bundle=BundleConfig(unknown_tags=UnknownTagPolicy.PLACEHOLDER, output="docs.zip")
        )
        save_global_config(config)
        assert load_global_config() == config

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        path = get_config_dir() / "config.json"
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_value_raises(self, isolated_config: Path) -> None:
        _write_json(get_config_dir() / "config.json", {"bundle": {"unknown_tags": "ignore"}})
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_missing_returns_none(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_reads_specbook_json(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specbook.json", {"bundle": {"output": "site.zip"}})
        assert load_project_config() == {"bundle": {"output": "site.zip"}}

    def test_non_object_raises(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specbook.json", ["not", "an", "object"])
        with pytest.raises(ConfigError, match="JSON object"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config() == GlobalConfig()

    def test_project_overrides_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(bundle=BundleConfig(output="global.zip")))
        _write_json(isolated_config / "specbook.json", {"bundle": {"output": "project.zip"}})
        config = resolve_config()
        assert config.bundle.output == "project.zip"
        assert config.bundle.unknown_tags is UnknownTagPolicy.ERROR

    def test_env_overrides_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(
            isolated_config / "specbook.json",
            {"bundle": {"output": "project.zip", "unknown_tags": "error"}},
        )
        monkeypatch.setenv("SPECBOOK_OUTPUT", "env.zip")
        monkeypatch.setenv("SPECBOOK_UNKNOWN_TAGS", "placeholder")
        config = resolve_config()
        assert config.bundle.output == "env.zip"
        assert config.bundle.unknown_tags is UnknownTagPolicy.PLACEHOLDER

    def test_cli_overrides_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SPECBOOK_OUTPUT", "env.zip")
        monkeypatch.setenv("SPECBOOK_UNKNOWN_TAGS", "placeholder")
        config = resolve_config(
            cli_unknown_tags="error", cli_output="cli.zip", cli_format="json"
        )
        assert config.bundle.output == "cli.zip"
        assert config.bundle.unknown_tags is UnknownTagPolicy.ERROR
        assert config.output.format == "json"

    def test_invalid_cli_value_raises(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config(cli_unknown_tags="ignore")

    def test_project_section_must_be_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specbook.json", {"bundle": "zip"})
        with pytest.raises(ConfigError, match="'bundle' must be an object"):
            resolve_config()
