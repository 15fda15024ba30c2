"""Service bus – plugin port and listener-tracking base class."""
from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from es_bus_bridge.kernel.events import ListenerRegistry

if TYPE_CHECKING:
    from es_bus_bridge.service_bus.message_bus import MessageBus


class MessageBusPlugin(abc.ABC):
    """Port: something that hooks into a :class:`MessageBus`."""

    @abc.abstractmethod
    def attach_to_message_bus(self, message_bus: MessageBus) -> None: ...

    @abc.abstractmethod
    def detach_from_message_bus(self, message_bus: MessageBus) -> None: ...


class AbstractMessageBusPlugin(MessageBusPlugin):
    """Tracks the handles obtained in ``attach_to_message_bus`` and releases them on detach."""

    def __init__(self) -> None:
        self._bus_listeners = ListenerRegistry()

    def detach_from_message_bus(self, message_bus: MessageBus) -> None:
        self._bus_listeners.release(message_bus)


__all__ = ["AbstractMessageBusPlugin", "MessageBusPlugin"]
