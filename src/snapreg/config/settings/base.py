"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings.

    Each field is read from ``<_prefix>_<FIELD>``; :class:`SnapshotSettings`
    uses ``_prefix = "SNAPREG"``, so ``save_folder`` comes from
    ``SNAPREG_SAVE_FOLDER``.
    """

    _prefix: dataclasses.ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to reject invalid values with ``InvalidSettingValueError``."""

    @classmethod
    def env_key(cls, field_name: str) -> str:
        """Environment variable name for *field_name*."""
        return f"{cls._prefix}_{field_name}".upper().lstrip("_")

    @classmethod
    def env_keys(cls) -> dict[str, str]:
        return {field.name: cls.env_key(field.name) for field in dataclasses.fields(cls)}


__all__ = ["Settings"]
