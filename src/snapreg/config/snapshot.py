"""Config – SnapshotSettings for the save/load destination and logging."""
from __future__ import annotations

import dataclasses
import logging
from pathlib import Path, PurePath
from typing import ClassVar, Sequence

from snapreg.config.settings.base import Settings
from snapreg.config.settings.factory import SettingsFactory
from snapreg.config.settings.loaders import EnvSettingsLoader, SettingsLoader
from snapreg.config.validation.errors import InvalidSettingValueError

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclasses.dataclass
class SnapshotSettings(Settings):
    """Where snapshots are written and how the engine logs.

    Read from ``SNAPREG_SAVE_FOLDER``, ``SNAPREG_SAVE_NAME``,
    ``SNAPREG_FSYNC`` and ``SNAPREG_LOG_LEVEL``.
    """

    _prefix: ClassVar[str] = "SNAPREG"

    save_folder: str = "snapshots"
    save_name: str = "snapshot.msgpack"
    fsync: bool = True
    log_level: str = "INFO"

    def _validate(self) -> None:
        if not self.save_name or PurePath(self.save_name).name != self.save_name:
            raise InvalidSettingValueError("save_name", self.save_name, "must be a bare file name")
        if not self.save_folder:
            raise InvalidSettingValueError("save_folder", self.save_folder, "must not be empty")
        if self.log_level.upper() not in _LEVELS:
            raise InvalidSettingValueError("log_level", self.log_level, f"must be one of {', '.join(_LEVELS)}")

    @property
    def save_path(self) -> Path:
        return Path(self.save_folder) / self.save_name

    @property
    def level(self) -> int:
        return logging.getLevelName(self.log_level.upper())

    @classmethod
    def from_env(
        cls,
        loaders: Sequence[SettingsLoader] | None = None,
        **overrides: object,
    ) -> "SnapshotSettings":
        return SettingsFactory.create(cls, loaders or [EnvSettingsLoader()], overrides or None)


__all__ = ["SnapshotSettings"]
