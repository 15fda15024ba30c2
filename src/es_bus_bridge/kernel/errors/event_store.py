"""Event store errors – stream lifecycle, concurrency and transactions."""

from __future__ import annotations

from typing import Any

from es_bus_bridge.kernel.errors.base import BaseError


class EventStoreError(BaseError):
    """Raised by an event store when a read or write cannot be carried out."""

    default_code = "event_store_error"


class StreamNotFoundError(EventStoreError):
    default_code = "stream_not_found"

    def __init__(self, stream_name: str, **kwargs: Any) -> None:
        super().__init__(f"Stream '{stream_name}' not found", detail={"stream_name": stream_name}, **kwargs)
        self.stream_name = stream_name


class StreamExistsAlreadyError(EventStoreError):
    default_code = "stream_exists_already"

    def __init__(self, stream_name: str, **kwargs: Any) -> None:
        super().__init__(f"Stream '{stream_name}' already exists", detail={"stream_name": stream_name}, **kwargs)
        self.stream_name = stream_name


class ConcurrencyError(EventStoreError):
    """Raised when the expected stream version does not match the current one."""

    default_code = "concurrency_conflict"

    def __init__(
        self,
        stream_name: str,
        expected: int | None = None,
        actual: int | None = None,
        **kwargs: Any,
    ) -> None:
        message = f"Concurrency conflict on stream '{stream_name}'"
        if expected is not None:
            message += f": expected version {expected}, found {actual}"
        super().__init__(
            message,
            detail={"stream_name": stream_name, "expected": expected, "actual": actual},
            **kwargs,
        )
        self.stream_name = stream_name
        self.expected = expected
        self.actual = actual


class TransactionAlreadyStartedError(EventStoreError):
    default_code = "transaction_already_started"

    def __init__(self, message: str = "Transaction already started", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class TransactionNotStartedError(EventStoreError):
    default_code = "transaction_not_started"

    def __init__(self, message: str = "Transaction not started", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


__all__ = [
    "ConcurrencyError",
    "EventStoreError",
    "StreamExistsAlreadyError",
    "StreamNotFoundError",
    "TransactionAlreadyStartedError",
    "TransactionNotStartedError",
]
