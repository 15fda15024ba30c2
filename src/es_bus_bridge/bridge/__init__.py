"""Bridge – causation metadata, transaction boundaries and event publication."""
from es_bus_bridge.bridge.causation import CausationMetadataEnricher
from es_bus_bridge.bridge.event_publisher import CachedEventStreams, EventPublisher
from es_bus_bridge.bridge.transaction_manager import TransactionManager

__all__ = ["CachedEventStreams", "CausationMetadataEnricher", "EventPublisher", "TransactionManager"]
