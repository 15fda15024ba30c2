"""Unit tests for CommandBus, EventBus and the routers."""

from __future__ import annotations

import dataclasses
from typing import Any

import pytest

from es_bus_bridge.kernel.errors import NoHandlerFoundError, UnknownHookError
from es_bus_bridge.kernel.events import ActionEvent
from es_bus_bridge.kernel.messaging import Command, DomainEvent
from es_bus_bridge.service_bus import (
    CommandBus,
    CommandRouter,
    EventBus,
    EventRouter,
    MessageBus,
    message_name_of,
)


@dataclasses.dataclass(frozen=True)
class PlaceOrder(Command):
    pass


@dataclasses.dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    pass


class PlaceOrderHandler:
    def __init__(self) -> None:
        self.handled: list[Any] = []

    def handle(self, command: Any) -> None:
        self.handled.append(command)


def _command_bus(handler: Any) -> CommandBus:
    bus = CommandBus()
    router = CommandRouter()
    router.route(PlaceOrder).to(handler)
    router.attach_to_message_bus(bus)
    return bus


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestMessageNameOf:
    def test_message_name(self) -> None:
        assert message_name_of(PlaceOrder()) == "PlaceOrder"

    def test_plain_object_falls_back_to_class(self) -> None:
        assert message_name_of("text") == "str"
        assert message_name_of(None) == "NoneType"


# ---------------------------------------------------------------------------
# CommandBus
# ---------------------------------------------------------------------------


class TestCommandBus:
    def test_dispatch_to_callable(self) -> None:
        handled: list[Any] = []
        command = PlaceOrder()
        _command_bus(handled.append).dispatch(command)
        assert handled == [command]

    def test_dispatch_to_handler_object(self) -> None:
        handler = PlaceOrderHandler()
        command = PlaceOrder()
        _command_bus(handler).dispatch(command)
        assert handler.handled == [command]

    def test_route_by_string_name(self) -> None:
        handled: list[Any] = []
        bus = CommandBus()
        CommandRouter({"PlaceOrder": handled.append}).attach_to_message_bus(bus)
        bus.dispatch(PlaceOrder())
        assert len(handled) == 1

    def test_unrouted_command_raises(self) -> None:
        with pytest.raises(NoHandlerFoundError):
            CommandBus().dispatch(PlaceOrder())

    def test_lifecycle_order(self) -> None:
        calls: list[str] = []
        bus = _command_bus(lambda c: calls.append("handler"))
        bus.attach(MessageBus.EVENT_DISPATCH, lambda e: calls.append("before"), MessageBus.PRIORITY_INVOKE_HANDLER + 1000)
        bus.attach(MessageBus.EVENT_FINALIZE, lambda e: calls.append("finalize"))

        bus.dispatch(PlaceOrder())

        assert calls == ["before", "handler", "finalize"]

    def test_finalize_sees_no_exception_on_success(self) -> None:
        seen: list[ActionEvent] = []
        bus = _command_bus(lambda c: None)
        bus.attach(MessageBus.EVENT_FINALIZE, seen.append)

        bus.dispatch(PlaceOrder())

        assert seen[0].param(MessageBus.EVENT_PARAM_EXCEPTION) is None
        assert seen[0].param(MessageBus.EVENT_PARAM_MESSAGE_HANDLED) is True

    def test_handler_error_reaches_finalize_and_is_reraised_unchanged(self) -> None:
        error = ValueError("boom")
        seen: list[Any] = []

        def failing(command: Any) -> None:
            raise error

        bus = _command_bus(failing)
        bus.attach(MessageBus.EVENT_FINALIZE, lambda e: seen.append(e.param(MessageBus.EVENT_PARAM_EXCEPTION)))

        with pytest.raises(ValueError) as exc_info:
            bus.dispatch(PlaceOrder())

        assert exc_info.value is error
        assert seen == [error]

    def test_interrupt_in_handler_still_finalizes(self) -> None:
        class Interrupted(BaseException):
            pass

        seen: list[Any] = []

        def interrupted(command: Any) -> None:
            raise Interrupted()

        bus = _command_bus(interrupted)
        bus.attach(MessageBus.EVENT_FINALIZE, lambda e: seen.append(e.param(MessageBus.EVENT_PARAM_EXCEPTION)))

        with pytest.raises(Interrupted) as exc_info:
            bus.dispatch(PlaceOrder())

        assert seen == [exc_info.value]

    def test_finalize_runs_even_when_propagation_was_stopped(self) -> None:
        calls: list[str] = []
        bus = _command_bus(lambda c: None)
        bus.attach(MessageBus.EVENT_DISPATCH, lambda e: e.set_param(MessageBus.EVENT_PARAM_MESSAGE_HANDLED, True) or e.stop_propagation(), MessageBus.PRIORITY_ROUTE + 1)
        bus.attach(MessageBus.EVENT_FINALIZE, lambda e: calls.append("finalize"))

        bus.dispatch(PlaceOrder())

        assert calls == ["finalize"]

    def test_detach_router(self) -> None:
        handled: list[Any] = []
        bus = CommandBus()
        router = CommandRouter()
        router.route(PlaceOrder).to(handled.append)
        router.attach_to_message_bus(bus)
        router.detach_from_message_bus(bus)

        with pytest.raises(NoHandlerFoundError):
            bus.dispatch(PlaceOrder())

    def test_unknown_hook(self) -> None:
        with pytest.raises(UnknownHookError):
            CommandBus().attach("commit", lambda e: None)

    def test_to_without_route(self) -> None:
        with pytest.raises(RuntimeError):
            CommandRouter().to(lambda c: None)


# ---------------------------------------------------------------------------
# EventBus
# ---------------------------------------------------------------------------


class TestEventBus:
    def test_fans_out_to_all_listeners(self) -> None:
        first: list[Any] = []
        second: list[Any] = []
        bus = EventBus()
        router = EventRouter()
        router.route(OrderPlaced).to(first.append).to(second.append)
        router.attach_to_message_bus(bus)
        event = OrderPlaced()

        bus.dispatch(event)

        assert first == [event]
        assert second == [event]

    def test_no_listeners_is_fine(self) -> None:
        EventBus().dispatch(OrderPlaced())

    def test_listener_error_propagates(self) -> None:
        bus = EventBus()

        def failing(event: Any) -> None:
            raise RuntimeError("listener failed")

        EventRouter({"OrderPlaced": [failing]}).attach_to_message_bus(bus)

        with pytest.raises(RuntimeError, match="listener failed"):
            bus.dispatch(OrderPlaced())

    def test_two_routers_accumulate(self) -> None:
        calls: list[str] = []
        bus = EventBus()
        EventRouter({"OrderPlaced": [lambda e: calls.append("a")]}).attach_to_message_bus(bus)
        EventRouter({"OrderPlaced": [lambda e: calls.append("b")]}).attach_to_message_bus(bus)

        bus.dispatch(OrderPlaced())

        assert sorted(calls) == ["a", "b"]

    def test_to_without_route(self) -> None:
        with pytest.raises(RuntimeError):
            EventRouter().to(lambda e: None)
