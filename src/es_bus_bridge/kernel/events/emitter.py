"""Kernel events – ActionEventEmitter with prioritised listeners."""
from __future__ import annotations

import dataclasses
import itertools
from collections.abc import Callable, Iterable
from typing import Any, TypeAlias

from es_bus_bridge.kernel.errors import UnknownHookError
from es_bus_bridge.kernel.events.action_event import ActionEvent

Listener: TypeAlias = Callable[[ActionEvent], Any]

DEFAULT_PRIORITY = 1


@dataclasses.dataclass(frozen=True)
class ListenerHandler:
    """Opaque token returned by :meth:`ActionEventEmitter.attach`.

    Equality is by ``(event_name, token)``; the listener callable itself
    plays no part, so attaching the same function twice yields two
    independent handles.
    """

    event_name: str
    token: int
    priority: int = dataclasses.field(compare=False)
    listener: Listener = dataclasses.field(compare=False, repr=False)


class ActionEventEmitter:
    """Synchronous hook host.

    Listeners for one event name run in strictly descending priority;
    listeners sharing a priority run in attach order, which callers should
    not depend on.
    """

    def __init__(self, available_event_names: Iterable[str] | None = None) -> None:
        self._available = frozenset(available_event_names) if available_event_names is not None else None
        self._listeners: dict[str, list[ListenerHandler]] = {}
        self._tokens = itertools.count(1)

    def new_action_event(
        self,
        name: str | None = None,
        target: Any = None,
        params: dict[str, Any] | None = None,
    ) -> ActionEvent:
        return ActionEvent(name or "action_event", target, params)

    def attach(self, event_name: str, listener: Listener, priority: int = DEFAULT_PRIORITY) -> ListenerHandler:
        if self._available is not None and event_name not in self._available:
            raise UnknownHookError(event_name)
        handler = ListenerHandler(event_name, next(self._tokens), priority, listener)
        listeners = self._listeners.setdefault(event_name, [])
        listeners.append(handler)
        # stable sort keeps attach order among equal priorities
        listeners.sort(key=lambda h: -h.priority)
        return handler

    def detach(self, handler: ListenerHandler) -> bool:
        listeners = self._listeners.get(handler.event_name)
        if not listeners or handler not in listeners:
            return False
        listeners.remove(handler)
        return True

    def listeners(self, event_name: str) -> list[ListenerHandler]:
        return list(self._listeners.get(event_name, []))

    def dispatch(self, event: ActionEvent) -> None:
        for handler in self.listeners(event.name):
            handler.listener(event)
            if event.propagation_is_stopped():
                return

    def dispatch_until(self, event: ActionEvent, callback: Callable[[ActionEvent], bool]) -> None:
        for handler in self.listeners(event.name):
            handler.listener(event)
            if event.propagation_is_stopped() or callback(event):
                return


__all__ = ["DEFAULT_PRIORITY", "ActionEventEmitter", "Listener", "ListenerHandler"]
