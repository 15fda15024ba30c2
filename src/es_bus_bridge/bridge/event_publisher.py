"""Bridge – EventPublisher.

Publishes persisted events on an event bus once the write that produced
them has durably succeeded:

* outside a transaction, right after the write, in order;
* inside a transaction, buffered until ``commit`` and dropped on ``rollback``.

Writes flagged ``stream_not_found``, ``concurrency_conflict`` or
``stream_exists_already`` are never published nor buffered.

The buffer is taken off before the store commits or rolls back, so it is
empty even when the store call itself raises; a failed commit publishes
nothing. If publishing one of the committed events raises, the remaining
events of that commit are lost: they are neither retried nor buffered
again.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from es_bus_bridge.event_store import (
    AbstractEventStorePlugin,
    ActionEventEmitterEventStore,
    SupportsTransactions,
    TransactionalActionEventEmitterEventStore,
)
from es_bus_bridge.kernel.events import ActionEvent
from es_bus_bridge.kernel.messaging import Message
from es_bus_bridge.observability.logging import get_logger
from es_bus_bridge.service_bus import MessageBus

logger = get_logger(__name__)


class CachedEventStreams:
    """Event collections written inside the open transaction, in write order."""

    def __init__(self) -> None:
        self._streams: list[tuple[Message, ...]] = []

    def stage(self, stream_events: Iterable[Message]) -> None:
        self._streams.append(tuple(stream_events))

    def take(self) -> list[tuple[Message, ...]]:
        streams, self._streams = self._streams, []
        return streams

    def flush(self, publish: Callable[[Message], Any]) -> int:
        return _publish_all(self.take(), publish)

    def discard(self) -> int:
        discarded = sum(len(stream_events) for stream_events in self._streams)
        self._streams = []
        return discarded

    def __len__(self) -> int:
        return len(self._streams)


def _publish_all(streams: Iterable[Iterable[Message]], publish: Callable[[Message], Any]) -> int:
    published = 0
    for stream_events in streams:
        for recorded in stream_events:
            publish(recorded)
            published += 1
    return published


def _in_transaction(event_store: Any) -> bool:
    return isinstance(event_store, SupportsTransactions) and event_store.in_transaction()


class EventPublisher(AbstractEventStorePlugin):
    # Above the store's own commit/rollback listener.
    RELEASE_PRIORITY = TransactionalActionEventEmitterEventStore.WRITE_PRIORITY + 1

    def __init__(self, event_bus: MessageBus) -> None:
        super().__init__()
        self._event_bus = event_bus
        self._cached = CachedEventStreams()
        self._committing: list[tuple[Message, ...]] = []

    @property
    def pending(self) -> int:
        """Number of event collections waiting for the transaction to commit."""
        return len(self._cached)

    def attach_to_event_store(self, event_store: ActionEventEmitterEventStore) -> None:
        self._store_listeners.track(
            event_store.attach(
                ActionEventEmitterEventStore.EVENT_APPEND_TO,
                lambda event: self._on_append_to(event_store, event),
            )
        )
        self._store_listeners.track(
            event_store.attach(
                ActionEventEmitterEventStore.EVENT_CREATE,
                lambda event: self._on_create(event_store, event),
            )
        )

        if isinstance(event_store, SupportsTransactions):
            self._store_listeners.track(
                event_store.attach(
                    TransactionalActionEventEmitterEventStore.EVENT_COMMIT, self._on_before_commit, self.RELEASE_PRIORITY
                )
            )
            self._store_listeners.track(
                event_store.attach(TransactionalActionEventEmitterEventStore.EVENT_COMMIT, self._on_commit)
            )
            self._store_listeners.track(
                event_store.attach(
                    TransactionalActionEventEmitterEventStore.EVENT_ROLLBACK, self._on_rollback, self.RELEASE_PRIORITY
                )
            )

    def _on_append_to(self, event_store: ActionEventEmitterEventStore, event: ActionEvent) -> None:
        if event.param(ActionEventEmitterEventStore.PARAM_STREAM_NOT_FOUND, False) or event.param(
            ActionEventEmitterEventStore.PARAM_CONCURRENCY_CONFLICT, False
        ):
            logger.debug("event_publisher.skipped", operation=event.name)
            return
        self._publish_or_stage(event_store, event.param(ActionEventEmitterEventStore.PARAM_STREAM_EVENTS, []))

    def _on_create(self, event_store: ActionEventEmitterEventStore, event: ActionEvent) -> None:
        if event.param(ActionEventEmitterEventStore.PARAM_STREAM_EXISTS_ALREADY, False):
            logger.debug("event_publisher.skipped", operation=event.name)
            return
        stream = event.param(ActionEventEmitterEventStore.PARAM_STREAM)
        self._publish_or_stage(event_store, stream.stream_events)

    def _publish_or_stage(self, event_store: ActionEventEmitterEventStore, stream_events: Iterable[Message]) -> None:
        if _in_transaction(event_store):
            self._cached.stage(stream_events)
            logger.debug("event_publisher.buffered", pending=len(self._cached))
            return
        published = 0
        for recorded in stream_events:
            self._event_bus.dispatch(recorded)
            published += 1
        logger.debug("event_publisher.published", count=published)

    def _on_before_commit(self, event: ActionEvent) -> None:
        self._committing = self._cached.take()

    def _on_commit(self, event: ActionEvent) -> None:
        committing, self._committing = self._committing, []
        published = _publish_all(committing, self._event_bus.dispatch)
        logger.debug("event_publisher.flushed", count=published)

    def _on_rollback(self, event: ActionEvent) -> None:
        discarded = self._cached.discard()
        logger.debug("event_publisher.discarded", count=discarded)


__all__ = ["CachedEventStreams", "EventPublisher"]
