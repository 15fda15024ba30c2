"""Config – settings, loaders and configuration errors."""

from es_bus_bridge.config.settings import BridgeSettings, EnvSettingsLoader, Settings, SettingsLoader
from es_bus_bridge.config.validation import (
    ConfigError,
    InvalidConfigurationError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "BridgeSettings",
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidConfigurationError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
