"""Event store – decorators that expose store operations as hooks.

Every operation emits an :class:`ActionEvent` named after it. The real
store call is itself a listener, attached at :attr:`WRITE_PRIORITY`, so
plugins can run before it (to rewrite the payload) or after it (to react
to the outcome)::

    store = ActionEventEmitterEventStore(InMemoryEventStore())
    store.attach(store.EVENT_APPEND_TO, lambda event: ..., priority=1000)  # before the write
    store.attach(store.EVENT_APPEND_TO, lambda event: ...)                  # after the write

Store errors raised by the write listener are recorded on the context as
boolean markers (``stream_not_found``, ``concurrency_conflict``,
``stream_exists_already``) so later listeners can see them, and re-raised
to the caller once the emission completes.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from es_bus_bridge.event_store.store import EventStore, TransactionalEventStore
from es_bus_bridge.event_store.stream import Stream, StreamName, as_stream_name
from es_bus_bridge.kernel.errors import (
    ConcurrencyError,
    StreamExistsAlreadyError,
    StreamNotFoundError,
)
from es_bus_bridge.kernel.events import (
    DEFAULT_PRIORITY,
    ActionEvent,
    ActionEventEmitter,
    Listener,
    ListenerHandler,
)
from es_bus_bridge.kernel.messaging import Message


class ActionEventEmitterEventStore(EventStore):
    """Hook-emitting decorator around any :class:`EventStore`."""

    EVENT_CREATE = "create"
    EVENT_APPEND_TO = "append_to"
    EVENT_LOAD = "load"
    EVENT_HAS_STREAM = "has_stream"
    EVENT_FETCH_STREAM_METADATA = "fetch_stream_metadata"
    EVENT_UPDATE_STREAM_METADATA = "update_stream_metadata"
    EVENT_DELETE = "delete"

    PARAM_STREAM = "stream"
    PARAM_STREAM_NAME = "stream_name"
    PARAM_STREAM_EVENTS = "stream_events"
    PARAM_EXPECTED_VERSION = "expected_version"
    PARAM_FROM_NUMBER = "from_number"
    PARAM_COUNT = "count"
    PARAM_METADATA = "metadata"
    PARAM_RESULT = "result"
    PARAM_ERROR = "error"

    PARAM_STREAM_NOT_FOUND = "stream_not_found"
    PARAM_CONCURRENCY_CONFLICT = "concurrency_conflict"
    PARAM_STREAM_EXISTS_ALREADY = "stream_exists_already"

    WRITE_PRIORITY = 100

    def __init__(self, event_store: EventStore, emitter: ActionEventEmitter | None = None) -> None:
        self._event_store = event_store
        self._emitter = emitter or ActionEventEmitter(self.available_event_names())
        self._attach_store_listeners()

    @classmethod
    def available_event_names(cls) -> tuple[str, ...]:
        return (
            cls.EVENT_CREATE,
            cls.EVENT_APPEND_TO,
            cls.EVENT_LOAD,
            cls.EVENT_HAS_STREAM,
            cls.EVENT_FETCH_STREAM_METADATA,
            cls.EVENT_UPDATE_STREAM_METADATA,
            cls.EVENT_DELETE,
        )

    @property
    def inner_event_store(self) -> EventStore:
        return self._event_store

    # ------------------------------------------------------------------
    # Observable host
    # ------------------------------------------------------------------

    def attach(self, event_name: str, listener: Listener, priority: int = DEFAULT_PRIORITY) -> ListenerHandler:
        return self._emitter.attach(event_name, listener, priority)

    def detach(self, handler: ListenerHandler) -> bool:
        return self._emitter.detach(handler)

    # ------------------------------------------------------------------
    # EventStore
    # ------------------------------------------------------------------

    def create(self, stream: Stream) -> None:
        self._emit(self.EVENT_CREATE, {self.PARAM_STREAM: stream})

    def append_to(
        self,
        stream_name: StreamName | str,
        stream_events: Iterable[Message],
        expected_version: int | None = None,
    ) -> None:
        self._emit(
            self.EVENT_APPEND_TO,
            {
                self.PARAM_STREAM_NAME: as_stream_name(stream_name),
                self.PARAM_STREAM_EVENTS: list(stream_events),
                self.PARAM_EXPECTED_VERSION: expected_version,
            },
        )

    def load(
        self,
        stream_name: StreamName | str,
        from_number: int = 1,
        count: int | None = None,
    ) -> Iterator[Message]:
        event = self._emit(
            self.EVENT_LOAD,
            {
                self.PARAM_STREAM_NAME: as_stream_name(stream_name),
                self.PARAM_FROM_NUMBER: from_number,
                self.PARAM_COUNT: count,
            },
        )
        return iter(event.param(self.PARAM_RESULT, []))

    def has_stream(self, stream_name: StreamName | str) -> bool:
        event = self._emit(self.EVENT_HAS_STREAM, {self.PARAM_STREAM_NAME: as_stream_name(stream_name)})
        return bool(event.param(self.PARAM_RESULT, False))

    def fetch_stream_metadata(self, stream_name: StreamName | str) -> dict[str, Any]:
        event = self._emit(
            self.EVENT_FETCH_STREAM_METADATA, {self.PARAM_STREAM_NAME: as_stream_name(stream_name)}
        )
        return dict(event.param(self.PARAM_RESULT, {}))

    def update_stream_metadata(self, stream_name: StreamName | str, metadata: dict[str, Any]) -> None:
        self._emit(
            self.EVENT_UPDATE_STREAM_METADATA,
            {self.PARAM_STREAM_NAME: as_stream_name(stream_name), self.PARAM_METADATA: dict(metadata)},
        )

    def delete(self, stream_name: StreamName | str) -> None:
        self._emit(self.EVENT_DELETE, {self.PARAM_STREAM_NAME: as_stream_name(stream_name)})

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _emit(self, name: str, params: dict[str, Any]) -> ActionEvent:
        event = self._emitter.new_action_event(name, self, params)
        self._emitter.dispatch(event)
        error = event.param(self.PARAM_ERROR)
        if error is not None:
            raise error
        return event

    def _attach_store_listeners(self) -> None:
        self._emitter.attach(self.EVENT_CREATE, self._on_create, self.WRITE_PRIORITY)
        self._emitter.attach(self.EVENT_APPEND_TO, self._on_append_to, self.WRITE_PRIORITY)
        self._emitter.attach(self.EVENT_LOAD, self._on_load, self.WRITE_PRIORITY)
        self._emitter.attach(self.EVENT_HAS_STREAM, self._on_has_stream, self.WRITE_PRIORITY)
        self._emitter.attach(self.EVENT_FETCH_STREAM_METADATA, self._on_fetch_stream_metadata, self.WRITE_PRIORITY)
        self._emitter.attach(self.EVENT_UPDATE_STREAM_METADATA, self._on_update_stream_metadata, self.WRITE_PRIORITY)
        self._emitter.attach(self.EVENT_DELETE, self._on_delete, self.WRITE_PRIORITY)

    def _on_create(self, event: ActionEvent) -> None:
        try:
            self._event_store.create(event.param(self.PARAM_STREAM))
        except StreamExistsAlreadyError as exc:
            event.set_param(self.PARAM_STREAM_EXISTS_ALREADY, True)
            event.set_param(self.PARAM_ERROR, exc)
        else:
            event.set_param(self.PARAM_RESULT, True)

    def _on_append_to(self, event: ActionEvent) -> None:
        try:
            self._event_store.append_to(
                event.param(self.PARAM_STREAM_NAME),
                event.param(self.PARAM_STREAM_EVENTS, []),
                event.param(self.PARAM_EXPECTED_VERSION),
            )
        except StreamNotFoundError as exc:
            event.set_param(self.PARAM_STREAM_NOT_FOUND, True)
            event.set_param(self.PARAM_ERROR, exc)
        except ConcurrencyError as exc:
            event.set_param(self.PARAM_CONCURRENCY_CONFLICT, True)
            event.set_param(self.PARAM_ERROR, exc)
        else:
            event.set_param(self.PARAM_RESULT, True)

    def _on_load(self, event: ActionEvent) -> None:
        try:
            events = self._event_store.load(
                event.param(self.PARAM_STREAM_NAME),
                event.param(self.PARAM_FROM_NUMBER, 1),
                event.param(self.PARAM_COUNT),
            )
            event.set_param(self.PARAM_RESULT, list(events))
        except StreamNotFoundError as exc:
            event.set_param(self.PARAM_STREAM_NOT_FOUND, True)
            event.set_param(self.PARAM_ERROR, exc)

    def _on_has_stream(self, event: ActionEvent) -> None:
        event.set_param(self.PARAM_RESULT, self._event_store.has_stream(event.param(self.PARAM_STREAM_NAME)))

    def _on_fetch_stream_metadata(self, event: ActionEvent) -> None:
        try:
            metadata = self._event_store.fetch_stream_metadata(event.param(self.PARAM_STREAM_NAME))
            event.set_param(self.PARAM_RESULT, metadata)
        except StreamNotFoundError as exc:
            event.set_param(self.PARAM_STREAM_NOT_FOUND, True)
            event.set_param(self.PARAM_ERROR, exc)

    def _on_update_stream_metadata(self, event: ActionEvent) -> None:
        try:
            self._event_store.update_stream_metadata(
                event.param(self.PARAM_STREAM_NAME), event.param(self.PARAM_METADATA, {})
            )
        except StreamNotFoundError as exc:
            event.set_param(self.PARAM_STREAM_NOT_FOUND, True)
            event.set_param(self.PARAM_ERROR, exc)

    def _on_delete(self, event: ActionEvent) -> None:
        try:
            self._event_store.delete(event.param(self.PARAM_STREAM_NAME))
        except StreamNotFoundError as exc:
            event.set_param(self.PARAM_STREAM_NOT_FOUND, True)
            event.set_param(self.PARAM_ERROR, exc)


class TransactionalActionEventEmitterEventStore(ActionEventEmitterEventStore, TransactionalEventStore):
    """Hook-emitting decorator that also exposes the transaction boundary.

    ``begin_transaction``, ``commit`` and ``rollback`` each emit a hook of the
    same name; listeners attached at the default priority run after the
    underlying store has completed the operation.
    """

    EVENT_BEGIN_TRANSACTION = "begin_transaction"
    EVENT_COMMIT = "commit"
    EVENT_ROLLBACK = "rollback"

    _event_store: TransactionalEventStore

    def __init__(self, event_store: TransactionalEventStore, emitter: ActionEventEmitter | None = None) -> None:
        super().__init__(event_store, emitter)

    @classmethod
    def available_event_names(cls) -> tuple[str, ...]:
        return (
            *super().available_event_names(),
            cls.EVENT_BEGIN_TRANSACTION,
            cls.EVENT_COMMIT,
            cls.EVENT_ROLLBACK,
        )

    def begin_transaction(self) -> None:
        self._emit(self.EVENT_BEGIN_TRANSACTION, {})

    def commit(self) -> None:
        self._emit(self.EVENT_COMMIT, {})

    def rollback(self) -> None:
        self._emit(self.EVENT_ROLLBACK, {})

    def in_transaction(self) -> bool:
        return self._event_store.in_transaction()

    def _attach_store_listeners(self) -> None:
        super()._attach_store_listeners()
        self._emitter.attach(
            self.EVENT_BEGIN_TRANSACTION, lambda event: self._event_store.begin_transaction(), self.WRITE_PRIORITY
        )
        self._emitter.attach(self.EVENT_COMMIT, lambda event: self._event_store.commit(), self.WRITE_PRIORITY)
        self._emitter.attach(self.EVENT_ROLLBACK, lambda event: self._event_store.rollback(), self.WRITE_PRIORITY)


__all__ = ["ActionEventEmitterEventStore", "TransactionalActionEventEmitterEventStore"]
