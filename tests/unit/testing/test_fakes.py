"""Unit tests for testing fakes."""

from __future__ import annotations

from typing import Any

from es_bus_bridge.kernel.messaging import DomainEvent
from es_bus_bridge.service_bus import EventRouter
from es_bus_bridge.testing.fakes import RecordingEventBus


class TestRecordingEventBus:
    def test_records_and_still_delivers(self) -> None:
        bus = RecordingEventBus()
        delivered: list[Any] = []
        EventRouter({"DomainEvent": [delivered.append]}).attach_to_message_bus(bus)
        event = DomainEvent()

        bus.dispatch(event)

        assert bus.published == [event]
        assert delivered == [event]

    def test_of_name_and_clear(self) -> None:
        bus = RecordingEventBus()
        bus.dispatch(DomainEvent(name="a"))
        bus.dispatch(DomainEvent(name="b"))

        assert [m.name for m in bus.of_name("a")] == ["a"]
        bus.clear()
        assert bus.published == []
