"""Config settings – 12-factor env-based configuration."""
from snapreg.config.settings.base import Settings
from snapreg.config.settings.factory import SettingsFactory
from snapreg.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "Settings", "SettingsFactory", "SettingsLoader"]
