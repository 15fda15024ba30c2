"""Kernel messaging – commands, events and their common envelope."""
from es_bus_bridge.kernel.messaging.message import (
    Command,
    DomainEvent,
    Message,
    MessageId,
    MessageName,
    MessageType,
)

__all__ = ["Command", "DomainEvent", "Message", "MessageId", "MessageName", "MessageType"]
