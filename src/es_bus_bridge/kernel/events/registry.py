"""Kernel events – ListenerRegistry, bookkeeping for attached listeners."""
from __future__ import annotations

from typing import Protocol

from es_bus_bridge.kernel.events.emitter import ListenerHandler


class ListenerHost(Protocol):
    def detach(self, handler: ListenerHandler) -> bool: ...


class ListenerRegistry:
    """Remembers the handles a plugin obtained so it can release them later."""

    def __init__(self) -> None:
        self._handlers: list[ListenerHandler] = []

    def track(self, handler: ListenerHandler) -> ListenerHandler:
        self._handlers.append(handler)
        return handler

    def release(self, host: ListenerHost) -> None:
        """Detach every tracked handle from *host*; safe when nothing is tracked."""
        for handler in self._handlers:
            host.detach(handler)
        self._handlers = []

    def __len__(self) -> int:
        return len(self._handlers)


__all__ = ["ListenerHost", "ListenerRegistry"]
