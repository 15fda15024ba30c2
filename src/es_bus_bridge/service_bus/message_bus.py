"""Service bus – MessageBus, CommandBus and EventBus.

A dispatch is one :class:`ActionEvent` that goes through two hooks:

1. ``dispatch`` – listeners detect the message name, route it to a handler
   and finally invoke the handler at :attr:`MessageBus.PRIORITY_INVOKE_HANDLER`.
2. ``finalize`` – always emitted afterwards, on the same context. If
   anything in step 1 raised, the error is available under
   :attr:`MessageBus.EVENT_PARAM_EXCEPTION` and is re-raised unchanged once
   the finalize listeners have run.
"""
from __future__ import annotations

import abc
from collections.abc import Callable
from typing import Any, TypeAlias

from es_bus_bridge.kernel.errors import NoHandlerFoundError
from es_bus_bridge.kernel.events import (
    DEFAULT_PRIORITY,
    ActionEvent,
    ActionEventEmitter,
    Listener,
    ListenerHandler,
)

MessageHandler: TypeAlias = Callable[[Any], Any]


def message_name_of(message: Any) -> str:
    """Logical name of *message*: its ``name`` attribute, else its class name."""
    name = getattr(message, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(message).__name__


def resolve_handler(handler: Any) -> MessageHandler:
    """Accept plain callables as well as objects exposing ``handle``."""
    handle = getattr(handler, "handle", None)
    if callable(handle):
        return handle
    if callable(handler):
        return handler
    raise TypeError(f"Message handler {handler!r} is not callable")


class MessageBus(abc.ABC):
    EVENT_DISPATCH = "dispatch"
    EVENT_FINALIZE = "finalize"

    EVENT_PARAM_MESSAGE = "message"
    EVENT_PARAM_MESSAGE_NAME = "message-name"
    EVENT_PARAM_MESSAGE_HANDLER = "message-handler"
    EVENT_PARAM_MESSAGE_HANDLED = "message-handled"
    EVENT_PARAM_EXCEPTION = "exception"

    PRIORITY_INITIALIZE = 400000
    PRIORITY_DETECT_MESSAGE_NAME = 300000
    PRIORITY_ROUTE = 200000
    PRIORITY_LOCATE_HANDLER = 100000
    PRIORITY_INVOKE_HANDLER = 0

    def __init__(self, emitter: ActionEventEmitter | None = None) -> None:
        self._emitter = emitter or ActionEventEmitter((self.EVENT_DISPATCH, self.EVENT_FINALIZE))
        self._emitter.attach(self.EVENT_DISPATCH, self._detect_message_name, self.PRIORITY_DETECT_MESSAGE_NAME)
        self._emitter.attach(self.EVENT_DISPATCH, self._invoke_handler, self.PRIORITY_INVOKE_HANDLER)

    def attach(self, event_name: str, listener: Listener, priority: int = DEFAULT_PRIORITY) -> ListenerHandler:
        return self._emitter.attach(event_name, listener, priority)

    def detach(self, handler: ListenerHandler) -> bool:
        return self._emitter.detach(handler)

    @abc.abstractmethod
    def dispatch(self, message: Any) -> None: ...

    @abc.abstractmethod
    def _invoke_handler(self, action_event: ActionEvent) -> None: ...

    def _ensure_handled(self, action_event: ActionEvent) -> None:
        """Hook for buses that require a handler; the default accepts anything."""

    def _dispatch(self, message: Any) -> ActionEvent:
        action_event = self._emitter.new_action_event(
            self.EVENT_DISPATCH,
            self,
            {self.EVENT_PARAM_MESSAGE: message, self.EVENT_PARAM_MESSAGE_HANDLED: False},
        )
        try:
            self._emitter.dispatch(action_event)
            self._ensure_handled(action_event)
        except BaseException as exc:  # noqa: BLE001
            action_event.set_param(self.EVENT_PARAM_EXCEPTION, exc)
        self._trigger_finalize(action_event)
        return action_event

    def _trigger_finalize(self, action_event: ActionEvent) -> None:
        action_event.set_name(self.EVENT_FINALIZE)
        action_event.stop_propagation(False)
        self._emitter.dispatch(action_event)
        exc = action_event.param(self.EVENT_PARAM_EXCEPTION)
        if exc is not None:
            raise exc

    def _detect_message_name(self, action_event: ActionEvent) -> None:
        if action_event.param(self.EVENT_PARAM_MESSAGE_NAME) is None:
            message = action_event.param(self.EVENT_PARAM_MESSAGE)
            action_event.set_param(self.EVENT_PARAM_MESSAGE_NAME, message_name_of(message))


class CommandBus(MessageBus):
    """Dispatches each command to exactly one routed handler."""

    def dispatch(self, message: Any) -> None:
        self._dispatch(message)

    def _invoke_handler(self, action_event: ActionEvent) -> None:
        handler = action_event.param(self.EVENT_PARAM_MESSAGE_HANDLER)
        if handler is None:
            return
        resolve_handler(handler)(action_event.param(self.EVENT_PARAM_MESSAGE))
        action_event.set_param(self.EVENT_PARAM_MESSAGE_HANDLED, True)

    def _ensure_handled(self, action_event: ActionEvent) -> None:
        if not action_event.param(self.EVENT_PARAM_MESSAGE_HANDLED, False):
            raise NoHandlerFoundError(str(action_event.param(self.EVENT_PARAM_MESSAGE_NAME)))


class EventBus(MessageBus):
    """Delivers each event to every routed listener; zero listeners is fine."""

    def dispatch(self, message: Any) -> None:
        self._dispatch(message)

    def _invoke_handler(self, action_event: ActionEvent) -> None:
        message = action_event.param(self.EVENT_PARAM_MESSAGE)
        for handler in action_event.param(self.EVENT_PARAM_MESSAGE_HANDLER) or []:
            resolve_handler(handler)(message)
        action_event.set_param(self.EVENT_PARAM_MESSAGE_HANDLED, True)


__all__ = ["CommandBus", "EventBus", "MessageBus", "MessageHandler", "message_name_of", "resolve_handler"]
