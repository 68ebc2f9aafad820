"""Tests for the shared YAML config loader."""

import pytest

from shared.config_loader import load_yaml, section
from shared.errors import ConfigError


class TestLoadYaml:
    def test_missing_file_is_empty(self, tmp_path):
        assert load_yaml(str(tmp_path / "nope.yml")) == {}

    def test_reads_sections(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("syncer:\n  log_directory: /var/log/openclaw\napi:\n  port: 9000\n")
        data = load_yaml(str(path))
        assert section(data, "syncer") == {"log_directory": "/var/log/openclaw"}
        assert section(data, "api")["port"] == 9000
        assert section(data, "other") == {}

    def test_config_path_env(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yml"
        path.write_text("api:\n  host: 127.0.0.1\n")
        monkeypatch.setenv("CONFIG_PATH", str(path))
        assert load_yaml()["api"]["host"] == "127.0.0.1"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("")
        assert load_yaml(str(path)) == {}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("syncer: [unclosed\n")
        with pytest.raises(ConfigError):
            load_yaml(str(path))

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_yaml(str(path))

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigError):
            section({"syncer": "oops"}, "syncer")
