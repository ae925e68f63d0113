"""Tests for the persistent GUI config file (wavepeaksgui.settings)."""

from __future__ import annotations

import json
import os

import pytest

from wavepeaksgui import settings


@pytest.fixture
def cfg_file(tmp_path, monkeypatch):
    path = tmp_path / "wavepeaks" / settings.CONFIG_FILENAME
    monkeypatch.setattr(settings, "config_path", lambda: str(path))
    return path


class TestConfigPath:
    def test_linux_honours_xdg(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setattr(settings.platform, "system", lambda: "Linux")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert settings.config_path() == os.path.join(
            str(tmp_path), "wavepeaks", settings.CONFIG_FILENAME)

    def test_windows_uses_appdata(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setattr(settings.platform, "system", lambda: "Windows")
        monkeypatch.setenv("APPDATA", str(tmp_path))
        assert settings.config_path().startswith(str(tmp_path))


class TestLoadConfig:
    def test_first_launch_writes_defaults(self, cfg_file) -> None:
        config = settings.load_config()
        assert config == settings.build_defaults()
        assert json.loads(cfg_file.read_text(encoding="utf-8")) == config

    def test_user_values_survive(self, cfg_file) -> None:
        cfg_file.parent.mkdir(parents=True)
        cfg_file.write_text(json.dumps({
            "view": {"mode": "rms", "retired_option": 1},
            "gui": {"last_directory": "/music"},
        }), encoding="utf-8")

        config = settings.load_config()
        assert config["view"]["mode"] == "rms"
        assert "retired_option" not in config["view"]
        assert config["gui"]["last_directory"] == "/music"
        assert config["cache"] == settings.build_defaults()["cache"]

    def test_corrupt_json_is_backed_up(self, cfg_file) -> None:
        cfg_file.parent.mkdir(parents=True)
        cfg_file.write_text("{oops", encoding="utf-8")

        config = settings.load_config()
        assert config == settings.build_defaults()
        assert os.path.isfile(str(cfg_file) + ".bak")

    def test_non_object_root(self, cfg_file) -> None:
        cfg_file.parent.mkdir(parents=True)
        cfg_file.write_text("[]", encoding="utf-8")
        assert settings.load_config() == settings.build_defaults()

    def test_invalid_values_reset_but_gui_kept(self, cfg_file) -> None:
        cfg_file.parent.mkdir(parents=True)
        cfg_file.write_text(json.dumps({
            "cache": {"multiplicator": 1},
            "view": {"mode": "rms"},
            "gui": {"last_directory": "/music"},
        }), encoding="utf-8")

        config = settings.load_config()
        defaults = settings.build_defaults()
        assert config["cache"] == defaults["cache"]
        assert config["view"] == defaults["view"]
        assert config["gui"]["last_directory"] == "/music"
        assert os.path.isfile(str(cfg_file) + ".bak")

    def test_save_returns_path(self, cfg_file) -> None:
        assert settings.save_config(settings.build_defaults()) == str(cfg_file)
