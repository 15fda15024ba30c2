"""Testing fakes – RecordingEventBus."""
from __future__ import annotations

from typing import Any

from es_bus_bridge.service_bus import EventBus


class RecordingEventBus(EventBus):
    """Event bus that remembers every message it was asked to dispatch."""

    def __init__(self) -> None:
        super().__init__()
        self._messages: list[Any] = []

    def dispatch(self, message: Any) -> None:
        self._messages.append(message)
        super().dispatch(message)

    @property
    def published(self) -> list[Any]:
        return list(self._messages)

    def clear(self) -> None:
        self._messages.clear()

    def of_name(self, name: str) -> list[Any]:
        return [m for m in self._messages if getattr(m, "name", None) == name]


__all__ = ["RecordingEventBus"]
