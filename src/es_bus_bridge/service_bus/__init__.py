"""Service bus – hook-driven command and event dispatch."""
from es_bus_bridge.service_bus.message_bus import (
    CommandBus,
    EventBus,
    MessageBus,
    MessageHandler,
    message_name_of,
)
from es_bus_bridge.service_bus.plugin import AbstractMessageBusPlugin, MessageBusPlugin
from es_bus_bridge.service_bus.router import CommandRouter, EventRouter

__all__ = [
    "AbstractMessageBusPlugin",
    "CommandBus",
    "CommandRouter",
    "EventBus",
    "EventRouter",
    "MessageBus",
    "MessageBusPlugin",
    "MessageHandler",
    "message_name_of",
]
