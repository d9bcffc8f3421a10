#!/usr/bin/env python3
"""
Tests for the plugin loader.

Tests cover:
- Accepted top-level shapes
- Load policy for invalid functions (abort plugin vs skip function)
- Reading definitions from JSON files
- Building a manager from configuration
"""

import logging
from pathlib import Path

import pytest

from markline.plugins.errors import (
    IndexGivenWithoutPattern,
    InvalidRegexError,
    PluginDefinitionError,
)
from markline.plugins.loader import (
    create_manager,
    load_plugins_file,
    plugin_from_dict,
    plugin_to_dict,
    plugins_from_data,
)


FIXTURES_DIR = Path(__file__).parent / "fixtures" / "plugins"
HEADINGS_FILE = FIXTURES_DIR / "headings.json"
MIXED_FILE = FIXTURES_DIR / "mixed_validity.json"


@pytest.fixture
def quote_plugin_data():
    return {
        "name": "quote",
        "line_functions": [
            {"name": "quote", "pattern": None, "effects": [[{"Insert": "LineStart"}, "> "]]}
        ],
    }


class TestPluginsFromData:
    """Test accepted shapes."""

    def test_single_plugin(self, quote_plugin_data):
        plugins = plugins_from_data(quote_plugin_data)
        assert [p.name for p in plugins] == ["quote"]

    def test_list_of_plugins(self, quote_plugin_data):
        second = dict(quote_plugin_data, name="quote2")
        plugins = plugins_from_data([quote_plugin_data, second])
        assert [p.name for p in plugins] == ["quote", "quote2"]

    def test_plugins_key(self, quote_plugin_data):
        plugins = plugins_from_data({"plugins": [quote_plugin_data]})
        assert len(plugins) == 1

    def test_invalid_top_level(self):
        with pytest.raises(PluginDefinitionError):
            plugins_from_data("not a plugin")

    def test_plugin_requires_name(self):
        with pytest.raises(PluginDefinitionError):
            plugin_from_dict({"line_functions": []})

    def test_line_functions_must_be_list(self):
        with pytest.raises(PluginDefinitionError):
            plugin_from_dict({"name": "p", "line_functions": {"name": "f"}})

    def test_duplicate_names_warn(self, quote_plugin_data, caplog):
        with caplog.at_level(logging.WARNING):
            plugins = plugins_from_data([quote_plugin_data, quote_plugin_data])
        assert len(plugins) == 2
        assert "Duplicate plugin names: quote" in caplog.text

    def test_round_trip(self, quote_plugin_data):
        plugin = plugin_from_dict(quote_plugin_data)
        assert plugin_to_dict(plugin) == quote_plugin_data


class TestLoadPolicy:
    """Test handling of invalid line functions."""

    def test_invalid_function_fails_plugin(self):
        with pytest.raises(IndexGivenWithoutPattern):
            load_plugins_file(MIXED_FILE)

    def test_invalid_regex_fails_plugin(self):
        data = {"name": "p", "line_functions": [{"name": "bad", "pattern": "([", "effects": []}]}
        with pytest.raises(InvalidRegexError):
            plugin_from_dict(data)

    def test_skip_invalid_keeps_valid_functions(self, caplog):
        with caplog.at_level(logging.WARNING):
            plugins = load_plugins_file(MIXED_FILE, skip_invalid=True)

        assert len(plugins) == 1
        assert [f.name for f in plugins[0].line_functions] == ["quote"]
        assert "Skipping invalid line function in plugin 'mixed'" in caplog.text

    def test_skip_invalid_does_not_hide_malformed_plugin(self):
        with pytest.raises(PluginDefinitionError):
            plugins_from_data([{"line_functions": []}], skip_invalid=True)


class TestLoadPluginsFile:
    """Test reading plugin files."""

    def test_load_fixture(self):
        plugins = load_plugins_file(HEADINGS_FILE)
        assert [p.name for p in plugins] == ["headings", "notes"]
        assert [f.name for f in plugins[0].line_functions] == ["h2", "h1"]

    def test_loaded_functions_are_compiled(self):
        plugins = load_plugins_file(HEADINGS_FILE)
        assert all(f.is_compiled for p in plugins for f in p.line_functions)

    def test_string_path(self):
        assert len(load_plugins_file(str(HEADINGS_FILE))) == 2

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError, match="Plugin file not found"):
            load_plugins_file(FIXTURES_DIR / "nonexistent.json")

    def test_invalid_json(self, tmp_path):
        bad_file = tmp_path / "bad.json"
        bad_file.write_text("{not json", encoding="utf-8")
        with pytest.raises(PluginDefinitionError, match="Invalid JSON"):
            load_plugins_file(bad_file)


class TestCreateManager:
    """Test building a manager from configuration."""

    def test_from_plugins_file(self):
        manager = create_manager(plugins_file=str(HEADINGS_FILE), debug=False)
        result = manager.transform("# Title\n## Sub")
        assert result.output == "<h1>Title</h1>\n<h2>Sub</h2>"

    def test_debug_without_file_uses_builtin(self, monkeypatch):
        monkeypatch.delenv("MARKLINE_PLUGINS_FILE", raising=False)
        manager = create_manager(debug=True)
        assert manager.plugin_names() == ["core"]

    def test_release_without_file_is_empty(self, monkeypatch):
        monkeypatch.delenv("MARKLINE_PLUGINS_FILE", raising=False)
        manager = create_manager(debug=False)
        assert manager.plugins == []

    def test_plugins_file_from_environment(self, monkeypatch):
        monkeypatch.setenv("MARKLINE_PLUGINS_FILE", str(HEADINGS_FILE))
        manager = create_manager()
        assert manager.plugin_names() == ["headings", "notes"]

    def test_lock_timeout_from_environment(self, monkeypatch):
        monkeypatch.delenv("MARKLINE_PLUGINS_FILE", raising=False)
        monkeypatch.setenv("MARKLINE_LOCK_TIMEOUT", "2.5")
        assert create_manager(debug=False).lock_timeout == 2.5

    def test_skip_invalid_from_environment(self, monkeypatch):
        monkeypatch.setenv("MARKLINE_SKIP_INVALID_FUNCTIONS", "true")
        manager = create_manager(plugins_file=str(MIXED_FILE))
        assert manager.transform("x").output == "> x"


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
