"""Kernel events – hook context, emitter and listener bookkeeping."""
from es_bus_bridge.kernel.events.action_event import ActionEvent
from es_bus_bridge.kernel.events.emitter import (
    DEFAULT_PRIORITY,
    ActionEventEmitter,
    Listener,
    ListenerHandler,
)
from es_bus_bridge.kernel.events.registry import ListenerHost, ListenerRegistry

__all__ = [
    "DEFAULT_PRIORITY",
    "ActionEvent",
    "ActionEventEmitter",
    "Listener",
    "ListenerHandler",
    "ListenerHost",
    "ListenerRegistry",
]
