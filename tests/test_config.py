"""Tests for YAML filter settings."""

from pathlib import Path

import pytest

from synonym_graph import ConfigError, FilterSettings, load_settings


class TestLoadSettings:
    """Reading filter settings from YAML and mappings."""

    def test_defaults(self):
        settings = load_settings({})
        assert settings == FilterSettings()
        assert settings.system_dict_id == "dummy_system_dict"

    def test_from_dict(self):
        settings = load_settings({
            "dict_list": ["a.txt", "b.txt"],
            "ignore_case": True,
            "restrict_mode": True,
        })
        assert settings.dict_list == ("a.txt", "b.txt")
        assert settings.ignore_case is True
        assert settings.restrict_mode is True

    def test_from_yaml_string(self):
        settings = load_settings(
            "system_dict: system.txt\n"
            "user_dict_list:\n"
            "  - user.txt\n"
            "enable_cache: true\n"
        )
        assert settings.system_dict == "system.txt"
        assert settings.user_dict_list == ("user.txt",)
        assert settings.enable_cache is True

    def test_single_string_list(self):
        settings = load_settings({"dict_list": "only.txt"})
        assert settings.dict_list == ("only.txt",)

    def test_empty_yaml(self):
        assert load_settings("\n") == FilterSettings()

    def test_from_file_sets_config_dir(self, tmp_path):
        path = tmp_path / "synonyms.yaml"
        path.write_text("system_dict: dicts/system.txt\n", encoding="utf-8")
        settings = load_settings(path)
        assert settings.config_dir == tmp_path
        assert settings.resolve(settings.system_dict) == tmp_path / "dicts" / "system.txt"

    def test_relative_config_dir_from_file(self, tmp_path):
        path = tmp_path / "synonyms.yaml"
        path.write_text("config_dir: conf\n", encoding="utf-8")
        assert load_settings(path).config_dir == tmp_path / "conf"

    def test_absolute_paths_are_kept(self):
        settings = load_settings({"config_dir": "/etc/synonyms"})
        absolute = Path("/data/system.txt")
        assert settings.resolve(absolute) == absolute
        assert settings.resolve("user.txt") == Path("/etc/synonyms/user.txt")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.yaml")


class TestRejections:
    """Invalid settings and their error messages."""

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="Unknown setting"):
            load_settings({"synonyms_path": "x.txt"})

    def test_wrong_bool_type(self):
        with pytest.raises(ConfigError, match="ignore_case"):
            load_settings({"ignore_case": "yes"})

    def test_wrong_list_type(self):
        with pytest.raises(ConfigError, match="dict_list"):
            load_settings({"dict_list": [1, 2]})

    def test_empty_system_dict_id(self):
        with pytest.raises(ConfigError):
            load_settings({"system_dict_id": ""})

    def test_bad_yaml(self):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings("dict_list: [a\nignore_case: true\n")

    def test_non_mapping_root(self):
        with pytest.raises(ConfigError, match="mapping"):
            load_settings("- a\n- b\n")

    def test_rejection_is_logged(self, caplog):
        with caplog.at_level("ERROR"):
            with pytest.raises(ConfigError):
                load_settings({"bogus": 1})
        assert "Rejected settings" in caplog.text
