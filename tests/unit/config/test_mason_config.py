"""Tests for layered configuration loading and domain accessors."""
from __future__ import annotations

from pathlib import Path

import pytest

from mason.core.config import ConfigManager, DeferConfig, FiltersConfig
from mason.core.exceptions import ConfigError


def write_project_config(root: Path, name: str, text: str) -> None:
    config_dir = root / ".mason" / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / name).write_text(text, encoding="utf-8")


class TestConfigManager:
    def test_bundled_defaults(self, tmp_path: Path) -> None:
        cfg = ConfigManager(tmp_path).load_config()
        assert cfg["defer"]["nested"] == "same_flush"
        assert cfg["defer"]["marker_prefix"] == "__MASON_DEFER_"
        assert cfg["filters"]["pipe_separator"] == ","
        assert cfg["cache"]["default_expires_in"] is None

    def test_project_overlay_merges_over_defaults(self, tmp_path: Path) -> None:
        write_project_config(tmp_path, "defer.yaml", "defer:\n  nested: next_flush\n")
        cfg = ConfigManager(tmp_path).load_config()
        assert cfg["defer"]["nested"] == "next_flush"
        assert cfg["defer"]["max_entries_per_flush"] == 10000

    def test_overlays_apply_in_alphabetical_order(self, tmp_path: Path) -> None:
        write_project_config(tmp_path, "a.yaml", "defer:\n  max_entries_per_flush: 5\n")
        write_project_config(tmp_path, "b.yml", "defer:\n  max_entries_per_flush: 6\n")
        assert ConfigManager(tmp_path).get("defer.max_entries_per_flush") == 6

    def test_env_overrides_win(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        write_project_config(tmp_path, "defer.yaml", "defer:\n  max_entries_per_flush: 5\n")
        monkeypatch.setenv("MASON_DEFER__MAX_ENTRIES_PER_FLUSH", "42")
        monkeypatch.setenv("MASON_CACHE__DEFAULT_EXPIRES_IN", "1.5")
        monkeypatch.setenv("MASON_LOGGING__LEVEL", "DEBUG")
        cfg = ConfigManager(tmp_path).load_config()
        assert cfg["defer"]["max_entries_per_flush"] == 42
        assert cfg["cache"]["default_expires_in"] == 1.5
        assert cfg["logging"]["level"] == "DEBUG"

    def test_malformed_env_key(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MASON_DEFER____NESTED", "next_flush")
        with pytest.raises(ConfigError):
            ConfigManager(tmp_path).load_config()

    def test_schema_violation(self, tmp_path: Path) -> None:
        write_project_config(tmp_path, "defer.yaml", "defer:\n  nested: sometimes\n")
        with pytest.raises(ConfigError) as exc_info:
            ConfigManager(tmp_path).load_config()
        assert any("defer.nested" in e for e in exc_info.value.context["errors"])

    def test_unsafe_marker_prefix_is_rejected(self, tmp_path: Path) -> None:
        write_project_config(tmp_path, "defer.yaml", 'defer:\n  marker_prefix: "(.*)"\n')
        with pytest.raises(ConfigError):
            ConfigManager(tmp_path).load_config()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        write_project_config(tmp_path, "broken.yaml", "defer: [unclosed\n")
        with pytest.raises(ConfigError):
            ConfigManager(tmp_path).load_config()

    def test_get_with_default(self, tmp_path: Path) -> None:
        manager = ConfigManager(tmp_path)
        assert manager.get("defer.nested") == "same_flush"
        assert manager.get("no.such.key", "fallback") == "fallback"


class TestDomainConfigs:
    def test_defer_config_accessors(self, tmp_path: Path) -> None:
        cfg = DeferConfig(repo_root=tmp_path)
        assert cfg.marker_prefix == "__MASON_DEFER_"
        assert cfg.marker_suffix == "__"
        assert cfg.nested_policy == "same_flush"
        assert cfg.max_entries_per_flush == 10000

    def test_filters_config_accessors(self, tmp_path: Path) -> None:
        write_project_config(
            tmp_path,
            "filters.yaml",
            'filters:\n  pipe_separator: ";"\ncache:\n  default_expires_in: 60\n',
        )
        cfg = FiltersConfig(repo_root=tmp_path)
        assert cfg.pipe_separator == ";"
        assert cfg.cache_default_expires_in == 60.0

    def test_preloaded_config_skips_loading(self) -> None:
        cfg = DeferConfig(config={"defer": {"nested": "next_flush"}})
        assert cfg.nested_policy == "next_flush"
        assert cfg.marker_prefix == "__MASON_DEFER_"

    def test_request_uses_configured_separator(self, default_config) -> None:
        from mason.core.request import Request

        cfg = dict(default_config)
        cfg["filters"] = {"pipe_separator": "|"}
        req = Request(config=cfg)
        assert req.apply_pipe("  <i>  ", "H|Trim") == "&lt;i&gt;"


class TestBundledData:
    def test_config_schema_is_loaded_from_package(self) -> None:
        from mason.data import config_schema

        schema = config_schema()
        assert schema["properties"]["defer"]["properties"]["nested"]["enum"] == ["same_flush", "next_flush"]
        assert config_schema() is schema

    def test_bundled_defaults_satisfy_schema(self, tmp_path: Path) -> None:
        manager = ConfigManager(tmp_path)
        manager.validate_schema(manager.load_config(validate=False))
