"""Config settings – 12-factor env-based configuration."""
from es_bus_bridge.config.settings.base import Settings
from es_bus_bridge.config.settings.bridge import (
    DEFAULT_CAUSATION_ID_KEY,
    DEFAULT_CAUSATION_NAME_KEY,
    BridgeSettings,
)
from es_bus_bridge.config.settings.loaders import EnvSettingsLoader, SettingsLoader

__all__ = [
    "DEFAULT_CAUSATION_ID_KEY",
    "DEFAULT_CAUSATION_NAME_KEY",
    "BridgeSettings",
    "EnvSettingsLoader",
    "Settings",
    "SettingsLoader",
]
