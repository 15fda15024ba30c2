"""Event store – EventStore ports and in-memory implementations."""

from __future__ import annotations

import abc
from collections.abc import Callable, Iterable, Iterator
from typing import Any, Protocol, TypeVar, runtime_checkable

from es_bus_bridge.event_store.stream import Stream, StreamName, as_stream_name
from es_bus_bridge.kernel.errors import (
    ConcurrencyError,
    StreamExistsAlreadyError,
    StreamNotFoundError,
    TransactionAlreadyStartedError,
    TransactionNotStartedError,
)
from es_bus_bridge.kernel.messaging import Message

T = TypeVar("T")


class EventStore(abc.ABC):
    """Port: durable append-only event store.

    ``expected_version`` on :meth:`append_to` is optional optimistic locking:
    pass the number of events the caller believes the stream holds and the
    store raises :class:`ConcurrencyError` if that is no longer true.
    """

    @abc.abstractmethod
    def create(self, stream: Stream) -> None:
        """Create *stream*; raises :class:`StreamExistsAlreadyError`."""

    @abc.abstractmethod
    def append_to(
        self,
        stream_name: StreamName | str,
        stream_events: Iterable[Message],
        expected_version: int | None = None,
    ) -> None:
        """Append to an existing stream; raises :class:`StreamNotFoundError`."""

    @abc.abstractmethod
    def load(
        self,
        stream_name: StreamName | str,
        from_number: int = 1,
        count: int | None = None,
    ) -> Iterator[Message]:
        """Yield events starting at the 1-based position *from_number*."""

    @abc.abstractmethod
    def has_stream(self, stream_name: StreamName | str) -> bool: ...

    @abc.abstractmethod
    def fetch_stream_metadata(self, stream_name: StreamName | str) -> dict[str, Any]: ...

    @abc.abstractmethod
    def update_stream_metadata(self, stream_name: StreamName | str, metadata: dict[str, Any]) -> None: ...

    @abc.abstractmethod
    def delete(self, stream_name: StreamName | str) -> None: ...


@runtime_checkable
class SupportsTransactions(Protocol):
    """Capability probe for stores that can group writes in a transaction."""

    def begin_transaction(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def in_transaction(self) -> bool: ...


class TransactionalEventStore(EventStore):
    """Port: an :class:`EventStore` whose writes can be committed atomically."""

    @abc.abstractmethod
    def begin_transaction(self) -> None: ...

    @abc.abstractmethod
    def commit(self) -> None: ...

    @abc.abstractmethod
    def rollback(self) -> None: ...

    @abc.abstractmethod
    def in_transaction(self) -> bool: ...

    def transactional(self, fn: Callable[[TransactionalEventStore], T]) -> T:
        """Run *fn* inside a transaction, committing on success."""
        self.begin_transaction()
        try:
            result = fn(self)
        except Exception:
            self.rollback()
            raise
        self.commit()
        return result


class InMemoryEventStore(EventStore):
    """Non-transactional in-memory :class:`EventStore` for tests and local development."""

    def __init__(self) -> None:
        # stream name → ordered list of events
        self._streams: dict[str, list[Message]] = {}
        self._metadata: dict[str, dict[str, Any]] = {}

    def create(self, stream: Stream) -> None:
        name = str(stream.stream_name)
        if name in self._streams:
            raise StreamExistsAlreadyError(name)
        self._streams[name] = list(stream.stream_events)
        self._metadata[name] = dict(stream.metadata)

    def append_to(
        self,
        stream_name: StreamName | str,
        stream_events: Iterable[Message],
        expected_version: int | None = None,
    ) -> None:
        stream = self._require(stream_name)
        if expected_version is not None and expected_version != len(stream):
            raise ConcurrencyError(str(stream_name), expected_version, len(stream))
        stream.extend(stream_events)

    def load(
        self,
        stream_name: StreamName | str,
        from_number: int = 1,
        count: int | None = None,
    ) -> Iterator[Message]:
        stream = self._require(stream_name)
        start = max(from_number, 1) - 1
        stop = None if count is None else start + count
        return iter(stream[start:stop])

    def has_stream(self, stream_name: StreamName | str) -> bool:
        return str(stream_name) in self._streams

    def fetch_stream_metadata(self, stream_name: StreamName | str) -> dict[str, Any]:
        self._require(stream_name)
        return dict(self._metadata[str(stream_name)])

    def update_stream_metadata(self, stream_name: StreamName | str, metadata: dict[str, Any]) -> None:
        self._require(stream_name)
        self._metadata[str(stream_name)] = dict(metadata)

    def delete(self, stream_name: StreamName | str) -> None:
        self._require(stream_name)
        del self._streams[str(stream_name)]
        del self._metadata[str(stream_name)]

    def stream_names(self) -> list[StreamName]:
        return [StreamName(name) for name in self._streams]

    def _require(self, stream_name: StreamName | str) -> list[Message]:
        name = str(as_stream_name(stream_name))
        try:
            return self._streams[name]
        except KeyError:
            raise StreamNotFoundError(name) from None


class TransactionalInMemoryEventStore(InMemoryEventStore, TransactionalEventStore):
    """In-memory store that snapshots its state on :meth:`begin_transaction`.

    Writes inside a transaction are applied immediately; :meth:`rollback`
    restores the snapshot and :meth:`commit` discards it.
    """

    def __init__(self) -> None:
        super().__init__()
        self._snapshot: tuple[dict[str, list[Message]], dict[str, dict[str, Any]]] | None = None

    def begin_transaction(self) -> None:
        if self._snapshot is not None:
            raise TransactionAlreadyStartedError()
        self._snapshot = (
            {name: list(events) for name, events in self._streams.items()},
            {name: dict(meta) for name, meta in self._metadata.items()},
        )

    def commit(self) -> None:
        if self._snapshot is None:
            raise TransactionNotStartedError()
        self._snapshot = None

    def rollback(self) -> None:
        if self._snapshot is None:
            raise TransactionNotStartedError()
        self._streams, self._metadata = self._snapshot
        self._snapshot = None

    def in_transaction(self) -> bool:
        return self._snapshot is not None


__all__ = [
    "EventStore",
    "InMemoryEventStore",
    "SupportsTransactions",
    "TransactionalEventStore",
    "TransactionalInMemoryEventStore",
]
