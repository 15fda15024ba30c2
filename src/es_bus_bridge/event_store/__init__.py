"""Event store – streams, store ports, in-memory stores and hook decorators."""

from es_bus_bridge.event_store.action_event_store import (
    ActionEventEmitterEventStore,
    TransactionalActionEventEmitterEventStore,
)
from es_bus_bridge.event_store.metadata import MetadataEnricher
from es_bus_bridge.event_store.plugin import AbstractEventStorePlugin, EventStorePlugin
from es_bus_bridge.event_store.store import (
    EventStore,
    InMemoryEventStore,
    SupportsTransactions,
    TransactionalEventStore,
    TransactionalInMemoryEventStore,
)
from es_bus_bridge.event_store.stream import Stream, StreamName

__all__ = [
    "AbstractEventStorePlugin",
    "ActionEventEmitterEventStore",
    "EventStore",
    "EventStorePlugin",
    "InMemoryEventStore",
    "MetadataEnricher",
    "Stream",
    "StreamName",
    "SupportsTransactions",
    "TransactionalActionEventEmitterEventStore",
    "TransactionalEventStore",
    "TransactionalInMemoryEventStore",
]
