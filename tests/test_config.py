"""Tests for configuration loading."""

from pathlib import Path

import pytest
import yaml

from booklib.config import (
    LibrarySettings,
    config_paths,
    default_data_dir,
    load_config,
    load_settings,
    read_config_file,
)


class TestConfigFiles:
    def test_read_config_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"data_dir": "/data", "native_host": True}))

        assert read_config_file(path) == {"data_dir": "/data", "native_host": True}

    def test_empty_file_is_empty_config(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert read_config_file(path) == {}

    def test_unknown_keys_are_dropped(self, tmp_path, caplog):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"data_dir": "/data", "theme": "dark"}))

        assert read_config_file(path) == {"data_dir": "/data"}
        assert "theme" in caplog.text

    def test_invalid_yaml_raises_value_error(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("invalid: yaml: content:")

        with pytest.raises(ValueError, match="Invalid YAML"):
            read_config_file(path)

    def test_non_mapping_raises_value_error(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError, match="mapping"):
            read_config_file(path)

    def test_missing_file_raises_value_error(self, tmp_path):
        with pytest.raises(ValueError, match="Cannot read"):
            read_config_file(tmp_path / "nope.yaml")

    def test_config_paths(self, tmp_path):
        paths = config_paths()

        assert paths[0] == tmp_path / "xdg-config" / "booklib" / "config.yaml"
        assert paths[1:] == [Path(".booklib.yaml"), Path("booklib.yaml")]


class TestLoadConfig:
    def test_defaults_to_empty(self):
        assert load_config() == {}

    def test_project_file_overrides_user_file(self, tmp_path):
        user = tmp_path / "xdg-config" / "booklib" / "config.yaml"
        user.parent.mkdir(parents=True)
        user.write_text(yaml.dump({"data_dir": "/user", "native_host": True}))
        (tmp_path / "booklib.yaml").write_text(yaml.dump({"data_dir": "/project"}))

        assert load_config() == {"data_dir": "/project", "native_host": True}

    def test_broken_default_file_is_skipped(self, tmp_path):
        (tmp_path / ".booklib.yaml").write_text("invalid: yaml: content:")

        assert load_config() == {}

    def test_explicit_file_wins_and_must_be_valid(self, tmp_path):
        (tmp_path / "booklib.yaml").write_text(yaml.dump({"data_dir": "/project"}))
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text(yaml.dump({"data_dir": "/explicit"}))

        assert load_config(explicit) == {"data_dir": "/explicit"}

        explicit.write_text("invalid: yaml: content:")
        with pytest.raises(ValueError):
            load_config(explicit)

    def test_environment_overrides_files(self, tmp_path, monkeypatch):
        (tmp_path / "booklib.yaml").write_text(
            yaml.dump({"data_dir": "/project", "native_host": True})
        )
        monkeypatch.setenv("BOOKLIB_DATA_DIR", "/env")
        monkeypatch.setenv("BOOKLIB_NATIVE_HOST", "no")
        monkeypatch.setenv("BOOKLIB_FLAT_QUOTA", "5000")

        settings = load_settings()

        assert settings == LibrarySettings(Path("/env"), False, 5000)


class TestLibrarySettings:
    def test_defaults(self, tmp_path):
        settings = load_settings()

        assert settings.data_dir == tmp_path / "xdg-data" / "booklib"
        assert settings.data_dir == default_data_dir()
        assert settings.native_host is False
        assert settings.flat_quota_bytes is None

    def test_from_mapping(self):
        settings = LibrarySettings.from_mapping(
            {"data_dir": "/data", "native_host": "yes", "flat_quota_bytes": "100"}
        )

        assert settings == LibrarySettings(Path("/data"), True, 100)

    def test_bad_quota_raises_value_error(self):
        with pytest.raises(ValueError, match="flat_quota_bytes"):
            LibrarySettings.from_mapping({"flat_quota_bytes": "lots"})
