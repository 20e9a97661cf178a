"""Unit tests for settings loading and SnapshotSettings."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

import pytest

from snapreg.config import (
    ConfigError,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    Settings,
    SettingsFactory,
    SnapshotSettings,
)


@dataclass
class AppSettings(Settings):
    _prefix: ClassVar[str] = "APP"

    name: str
    port: int = 8080
    debug: bool = False
    ratio: float = 0.5
    tags: list[str] = field(default_factory=list)
    home: Path = Path(".")


class TestEnvSettingsLoader:
    def test_loads_and_coerces(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_NAME", "svc")
        monkeypatch.setenv("APP_PORT", "9000")
        monkeypatch.setenv("APP_DEBUG", "yes")
        monkeypatch.setenv("APP_RATIO", "0.25")
        settings = EnvSettingsLoader().load(AppSettings)
        assert settings.name == "svc"
        assert settings.port == 9000
        assert settings.debug is True
        assert settings.ratio == 0.25

    def test_coerces_paths(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("APP_NAME", "svc")
        monkeypatch.setenv("APP_HOME", str(tmp_path))
        assert EnvSettingsLoader().load(AppSettings).home == tmp_path

    def test_missing_required(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("APP_NAME", raising=False)
        with pytest.raises(MissingRequiredSettingError) as exc_info:
            EnvSettingsLoader().load(AppSettings)
        assert exc_info.value.setting_name == "APP_NAME"

    def test_bad_value_wrapped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_NAME", "svc")
        monkeypatch.setenv("APP_PORT", "not-a-number")
        with pytest.raises(ValueError):
            EnvSettingsLoader().load(AppSettings)


class TestSettingsFactory:
    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_NAME", "env")
        settings = SettingsFactory.create(AppSettings, [EnvSettingsLoader()], {"name": "override"})
        assert settings.name == "override"

    def test_missing_required_without_loaders(self) -> None:
        with pytest.raises(MissingRequiredSettingError):
            SettingsFactory.create(AppSettings)

    def test_construction_failure_is_config_error(self) -> None:
        with pytest.raises(ConfigError):
            SettingsFactory.create(AppSettings, overrides={"name": "x", "bogus": 1})


class TestSnapshotSettings:
    def test_env_keys(self) -> None:
        assert SnapshotSettings.env_keys() == {
            "save_folder": "SNAPREG_SAVE_FOLDER",
            "save_name": "SNAPREG_SAVE_NAME",
            "fsync": "SNAPREG_FSYNC",
            "log_level": "SNAPREG_LOG_LEVEL",
        }

    def test_defaults(self) -> None:
        settings = SnapshotSettings()
        assert settings.save_path == Path("snapshots") / "snapshot.msgpack"
        assert settings.fsync is True
        assert settings.level == logging.INFO

    @pytest.mark.parametrize("name", ["", "a/b.bin", "../up.bin"])
    def test_rejects_non_bare_file_names(self, name: str) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            SnapshotSettings(save_name=name)
        assert exc_info.value.setting_name == "save_name"

    def test_rejects_empty_folder(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            SnapshotSettings(save_folder="")

    def test_rejects_unknown_log_level(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            SnapshotSettings(log_level="LOUD")

    def test_log_level_is_case_insensitive(self) -> None:
        assert SnapshotSettings(log_level="debug").level == logging.DEBUG

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("SNAPREG_SAVE_FOLDER", str(tmp_path))
        monkeypatch.setenv("SNAPREG_SAVE_NAME", "world.bin")
        monkeypatch.setenv("SNAPREG_FSYNC", "false")
        settings = SnapshotSettings.from_env()
        assert settings.save_path == tmp_path / "world.bin"
        assert settings.fsync is False

    def test_from_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SNAPREG_SAVE_NAME", raising=False)
        assert SnapshotSettings.from_env(save_name="x.bin").save_name == "x.bin"

    def test_from_env_invalid_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SNAPREG_LOG_LEVEL", "LOUD")
        with pytest.raises(InvalidSettingValueError):
            SnapshotSettings.from_env()

    def test_dotenv_loader(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        # load_dotenv writes os.environ; register the key so it is restored afterwards
        monkeypatch.setenv("SNAPREG_SAVE_NAME", "unset")
        monkeypatch.delenv("SNAPREG_SAVE_NAME")
        env_file = tmp_path / ".env"
        env_file.write_text("SNAPREG_SAVE_NAME=dotenv.bin\n")
        settings = SnapshotSettings.from_env([DotenvSettingsLoader(str(env_file))])
        assert settings.save_name == "dotenv.bin"
