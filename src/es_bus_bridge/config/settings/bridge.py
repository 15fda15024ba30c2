"""Config settings – BridgeSettings."""
from __future__ import annotations

import dataclasses

from es_bus_bridge.config.settings.base import Settings
from es_bus_bridge.config.validation import InvalidSettingValueError

DEFAULT_CAUSATION_ID_KEY = "_causation_id"
DEFAULT_CAUSATION_NAME_KEY = "_causation_name"


@dataclasses.dataclass
class BridgeSettings(Settings):
    """Options for wiring the event store to the message bus.

    Read from ``ES_BRIDGE_CAUSATION_ID_KEY`` / ``ES_BRIDGE_CAUSATION_NAME_KEY``
    by :class:`EnvSettingsLoader`.
    """

    _prefix = "ES_BRIDGE"

    causation_id_key: str = DEFAULT_CAUSATION_ID_KEY
    causation_name_key: str = DEFAULT_CAUSATION_NAME_KEY

    def _validate(self) -> None:
        for name in ("causation_id_key", "causation_name_key"):
            if not getattr(self, name):
                raise InvalidSettingValueError(name, getattr(self, name), "must not be empty")


__all__ = ["DEFAULT_CAUSATION_ID_KEY", "DEFAULT_CAUSATION_NAME_KEY", "BridgeSettings"]
