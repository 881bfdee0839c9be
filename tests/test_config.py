"""
Tests for specatlas.config module.
"""

import pytest

from specatlas.config import (
    DEFAULT_CONFIG,
    find_config_file,
    get_config,
    get_spec_directory,
    load_config,
    merge_configs,
    parse_toml,
)
from specatlas.errors import ConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the developer's SPECATLAS_* variables out of these tests."""
    import os

    for name in list(os.environ):
        if name.startswith("SPECATLAS_"):
            monkeypatch.delenv(name)


class TestConfigLoader:
    """Tests for configuration loading."""

    def test_load_config_with_defaults(self, tmp_path):
        """Minimal config merges with defaults."""
        config_file = tmp_path / ".specatlas.toml"
        config_file.write_text('[project]\nname = "test"\n\n[search]\nlimit = 5\n')

        config = load_config(config_file)

        assert config["project"]["name"] == "test"
        assert config["search"]["limit"] == 5
        assert config["search"]["fuzzy_distance"] == 0
        assert config["directories"]["specs"] == "specs"

    def test_load_config_returns_plain_types(self, tmp_path):
        config_file = tmp_path / ".specatlas.toml"
        config_file.write_text("[deps]\ndepth = 2\n")
        config = load_config(config_file)
        assert type(config["deps"]["depth"]) is int

    def test_invalid_toml(self, tmp_path):
        config_file = tmp_path / ".specatlas.toml"
        config_file.write_text("[search\nlimit = ")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(config_file)

    def test_find_config_file(self, tmp_path):
        (tmp_path / ".specatlas.toml").write_text("")
        config_path = find_config_file(tmp_path)
        assert config_path is not None
        assert config_path.name == ".specatlas.toml"

    def test_find_config_file_not_found(self, tmp_path):
        assert find_config_file(tmp_path) is None

    def test_find_config_in_parent(self, tmp_path):
        (tmp_path / ".specatlas.toml").write_text("")
        nested = tmp_path / "specs" / "001-x"
        nested.mkdir(parents=True)
        config_path = find_config_file(nested)
        assert config_path is not None
        assert config_path.parent == tmp_path.resolve()


class TestGetConfig:
    def test_defaults_when_no_file(self, tmp_path):
        assert get_config(start=tmp_path) == DEFAULT_CONFIG

    def test_defaults_not_mutated(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SPECATLAS_SEARCH_LIMIT", "99")
        config = get_config(start=tmp_path)
        assert config["search"]["limit"] == 99
        assert DEFAULT_CONFIG["search"]["limit"] == 20

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text('[directories]\nspecs = "docs/specs"\n')
        assert get_config(path)["directories"]["specs"] == "docs/specs"

    def test_explicit_path_missing(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            get_config(tmp_path / "missing.toml")


class TestConfigMerge:
    """Tests for configuration merging."""

    def test_merge_configs_override(self):
        defaults = {"search": {"limit": 20, "min_score": 0.0}, "deps": {"depth": 3}}
        merged = merge_configs(defaults, {"search": {"limit": 5}})

        assert merged["search"]["limit"] == 5
        assert merged["search"]["min_score"] == 0.0
        assert merged["deps"]["depth"] == 3

    def test_merge_does_not_alias_defaults(self):
        defaults = {"search": {"limit": 20}}
        merged = merge_configs(defaults, {})
        merged["search"]["limit"] = 1
        assert defaults["search"]["limit"] == 20


class TestSpecDirectory:
    def test_override_wins(self, tmp_path):
        assert get_spec_directory(tmp_path / "x", DEFAULT_CONFIG) == tmp_path / "x"

    def test_relative_to_base(self, tmp_path):
        config = merge_configs(DEFAULT_CONFIG, {"directories": {"specs": "docs"}})
        assert get_spec_directory(None, config, base=tmp_path) == tmp_path / "docs"


def test_parse_toml_unwraps():
    data = parse_toml('[project]\nname = "x"\n')
    assert data == {"project": {"name": "x"}}
    assert type(data["project"]) is dict


def test_default_config_structure():
    for section in ("project", "directories", "search", "deps", "validation"):
        assert section in DEFAULT_CONFIG
