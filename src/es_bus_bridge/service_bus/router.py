"""Service bus – CommandRouter and EventRouter plugins."""
from __future__ import annotations

from typing import Any, Self

from es_bus_bridge.kernel.events import ActionEvent
from es_bus_bridge.service_bus.message_bus import MessageBus
from es_bus_bridge.service_bus.plugin import AbstractMessageBusPlugin


def _route_key(message_name: str | type[Any]) -> str:
    return message_name if isinstance(message_name, str) else message_name.__name__


class CommandRouter(AbstractMessageBusPlugin):
    """Route command names to a single handler.

    Usage::

        router = CommandRouter()
        router.route(PlaceOrder).to(place_order_handler)
        router.attach_to_message_bus(command_bus)
    """

    def __init__(self, routing_map: dict[str, Any] | None = None) -> None:
        super().__init__()
        self._routing_map: dict[str, Any] = dict(routing_map or {})
        self._pending: str | None = None

    def route(self, message_name: str | type[Any]) -> Self:
        self._pending = _route_key(message_name)
        return self

    def to(self, handler: Any) -> Self:
        if self._pending is None:
            raise RuntimeError("Call route() before to()")
        self._routing_map[self._pending] = handler
        self._pending = None
        return self

    def attach_to_message_bus(self, message_bus: MessageBus) -> None:
        self._bus_listeners.track(
            message_bus.attach(MessageBus.EVENT_DISPATCH, self._on_route, MessageBus.PRIORITY_ROUTE)
        )

    def _on_route(self, action_event: ActionEvent) -> None:
        handler = self._routing_map.get(str(action_event.param(MessageBus.EVENT_PARAM_MESSAGE_NAME)))
        if handler is not None:
            action_event.set_param(MessageBus.EVENT_PARAM_MESSAGE_HANDLER, handler)


class EventRouter(AbstractMessageBusPlugin):
    """Route event names to any number of listeners."""

    def __init__(self, routing_map: dict[str, list[Any]] | None = None) -> None:
        super().__init__()
        self._routing_map: dict[str, list[Any]] = {k: list(v) for k, v in (routing_map or {}).items()}
        self._pending: str | None = None

    def route(self, message_name: str | type[Any]) -> Self:
        self._pending = _route_key(message_name)
        self._routing_map.setdefault(self._pending, [])
        return self

    def to(self, listener: Any) -> Self:
        if self._pending is None:
            raise RuntimeError("Call route() before to()")
        self._routing_map[self._pending].append(listener)
        return self

    def attach_to_message_bus(self, message_bus: MessageBus) -> None:
        self._bus_listeners.track(
            message_bus.attach(MessageBus.EVENT_DISPATCH, self._on_route, MessageBus.PRIORITY_ROUTE)
        )

    def _on_route(self, action_event: ActionEvent) -> None:
        listeners = self._routing_map.get(str(action_event.param(MessageBus.EVENT_PARAM_MESSAGE_NAME)), [])
        if listeners:
            current = list(action_event.param(MessageBus.EVENT_PARAM_MESSAGE_HANDLER) or [])
            action_event.set_param(MessageBus.EVENT_PARAM_MESSAGE_HANDLER, current + listeners)


__all__ = ["CommandRouter", "EventRouter"]
