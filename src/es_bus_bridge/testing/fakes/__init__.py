"""Testing fakes – in-memory stand-ins."""
from es_bus_bridge.testing.fakes.event_bus import RecordingEventBus

__all__ = ["RecordingEventBus"]
