"""
es_bus_bridge – glue between an event store and a message bus.

Import path convention::

    from es_bus_bridge.bridge import CausationMetadataEnricher, EventPublisher, TransactionManager
    from es_bus_bridge.event_store import ActionEventEmitterEventStore, InMemoryEventStore
    from es_bus_bridge.service_bus import CommandBus, CommandRouter, EventBus
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
