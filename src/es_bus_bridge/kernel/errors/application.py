"""Application-layer errors – hook wiring and message dispatch."""

from __future__ import annotations

from typing import Any

from es_bus_bridge.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class UnknownHookError(ApplicationError):
    """A listener was attached to a hook the emitter does not publish."""

    default_code = "unknown_hook"

    def __init__(self, event_name: str, **kwargs: Any) -> None:
        super().__init__(f"Unknown hook '{event_name}'", detail={"event_name": event_name}, **kwargs)
        self.event_name = event_name


class NoHandlerFoundError(ApplicationError):
    """A command was dispatched but no handler was routed for it."""

    default_code = "no_handler_found"

    def __init__(self, message_name: str, **kwargs: Any) -> None:
        super().__init__(
            f"Message '{message_name}' was not handled",
            detail={"message_name": message_name},
            **kwargs,
        )
        self.message_name = message_name


__all__ = ["ApplicationError", "NoHandlerFoundError", "UnknownHookError"]
