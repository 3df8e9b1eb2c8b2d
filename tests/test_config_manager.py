"""
Tests for config/config_manager.py.
"""

import os

import yaml

from config.config_manager import ConfigManager


def _write(tmp_path, data):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(data), encoding="utf-8")
    return path


class TestDefaults:
    def test_creates_directories_and_default_file(self, tmp_path):
        config_dir = tmp_path / "cfg"
        manager = ConfigManager(str(config_dir))
        assert os.path.isdir(manager.log_dir)
        assert os.path.isfile(manager.config_file)
        with open(manager.config_file, encoding="utf-8") as f:
            assert yaml.safe_load(f) == ConfigManager.default_config()

    def test_default_values(self, tmp_path):
        manager = ConfigManager(str(tmp_path))
        assert manager.app_name == "OpenRune"
        assert manager.launcher_executable == "JagexLauncher.exe"
        assert manager.helper_process == "svchost.exe"
        assert manager.parent_strategy == "tasklist"
        assert manager.elevation_probe == "token"
        assert manager.launcher_identifier == "table"
        assert manager.show_notifications is True
        assert manager.debug_mode is False

    def test_empty_file_uses_defaults(self, tmp_path):
        (tmp_path / "config.yaml").write_text("", encoding="utf-8")
        manager = ConfigManager(str(tmp_path))
        assert manager.parent_strategy == "tasklist"

    def test_unparseable_file_is_replaced(self, tmp_path):
        (tmp_path / "config.yaml").write_text("detection: [unclosed", encoding="utf-8")
        manager = ConfigManager(str(tmp_path))
        assert manager.elevation_probe == "token"
        with open(manager.config_file, encoding="utf-8") as f:
            assert yaml.safe_load(f) == ConfigManager.default_config()


class TestLoad:
    def test_reads_custom_values(self, tmp_path):
        _write(tmp_path, {
            "application": {"name": "RuneLite"},
            "launcher": {"executable": "Launcher.exe", "helper_process": "conhost.exe"},
            "detection": {"parent_strategy": "psutil", "elevation_probe": "whoami",
                          "launcher_identifier": "command_line"},
            "notifications": {"enabled": False},
            "logging": {"retention_days": 3, "rotation": "12 hours", "debug_mode": True},
        })
        manager = ConfigManager(str(tmp_path))
        assert manager.app_name == "RuneLite"
        assert manager.launcher_executable == "Launcher.exe"
        assert manager.helper_process == "conhost.exe"
        assert manager.parent_strategy == "psutil"
        assert manager.elevation_probe == "whoami"
        assert manager.launcher_identifier == "command_line"
        assert manager.show_notifications is False
        assert manager.log_retention_days == 3
        assert manager.log_rotation == "12 hours"
        assert manager.debug_mode is True

    def test_invalid_strategy_falls_back(self, tmp_path):
        _write(tmp_path, {"detection": {"parent_strategy": "wmi", "elevation_probe": "token"}})
        manager = ConfigManager(str(tmp_path))
        assert manager.parent_strategy == "tasklist"

    def test_retention_is_clamped(self, tmp_path):
        _write(tmp_path, {"logging": {"retention_days": 0}})
        assert ConfigManager(str(tmp_path)).log_retention_days == 1

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        _write(tmp_path, {"notifications": {"enabled": False}})
        manager = ConfigManager(str(tmp_path))
        assert manager.show_notifications is False
        assert manager.launcher_executable == "JagexLauncher.exe"


class TestSave:
    def test_saved_settings_are_reloaded(self, tmp_path):
        manager = ConfigManager(str(tmp_path))
        manager.elevation_probe = "whoami"
        manager.debug_mode = True
        assert manager.save_config() is True

        reloaded = ConfigManager(str(tmp_path))
        assert reloaded.elevation_probe == "whoami"
        assert reloaded.debug_mode is True


class TestInvalidValues:
    def test_bad_retention_keeps_other_settings(self, tmp_path):
        path = _write(tmp_path, {
            "detection": {"parent_strategy": "psutil", "elevation_probe": "whoami"},
            "logging": {"retention_days": "seven"},
        })
        before = path.read_text(encoding="utf-8")
        manager = ConfigManager(str(tmp_path))
        assert manager.parent_strategy == "psutil"
        assert manager.elevation_probe == "whoami"
        assert manager.log_retention_days == 7
        assert path.read_text(encoding="utf-8") == before

    def test_non_string_rotation_falls_back(self, tmp_path):
        _write(tmp_path, {"logging": {"rotation": ["daily"], "debug_mode": True}})
        manager = ConfigManager(str(tmp_path))
        assert manager.log_rotation == "1 day"
        assert manager.debug_mode is True

    def test_malformed_section_is_ignored(self, tmp_path):
        _write(tmp_path, {"logging": 5, "detection": {"parent_strategy": "psutil"}})
        manager = ConfigManager(str(tmp_path))
        assert manager.log_retention_days == 7
        assert manager.parent_strategy == "psutil"
