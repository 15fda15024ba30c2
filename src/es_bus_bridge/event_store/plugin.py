"""Event store – plugin port and listener-tracking base class."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from es_bus_bridge.kernel.events import ListenerRegistry

if TYPE_CHECKING:
    from es_bus_bridge.event_store.action_event_store import ActionEventEmitterEventStore


class EventStorePlugin(abc.ABC):
    """Port: something that hooks into an :class:`ActionEventEmitterEventStore`."""

    @abc.abstractmethod
    def attach_to_event_store(self, event_store: ActionEventEmitterEventStore) -> None: ...

    @abc.abstractmethod
    def detach_from_event_store(self, event_store: ActionEventEmitterEventStore) -> None: ...


class AbstractEventStorePlugin(EventStorePlugin):
    """Tracks the handles obtained in ``attach_to_event_store`` and releases them on detach."""

    def __init__(self) -> None:
        self._store_listeners = ListenerRegistry()

    def detach_from_event_store(self, event_store: ActionEventEmitterEventStore) -> None:
        self._store_listeners.release(event_store)


__all__ = ["AbstractEventStorePlugin", "EventStorePlugin"]
