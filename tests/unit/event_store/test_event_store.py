"""Unit tests for streams and the in-memory event stores."""

from __future__ import annotations

import dataclasses

import pytest

from es_bus_bridge.event_store import (
    InMemoryEventStore,
    Stream,
    StreamName,
    SupportsTransactions,
    TransactionalInMemoryEventStore,
)
from es_bus_bridge.kernel.errors import (
    ConcurrencyError,
    StreamExistsAlreadyError,
    StreamNotFoundError,
    TransactionAlreadyStartedError,
    TransactionNotStartedError,
)
from es_bus_bridge.kernel.messaging import DomainEvent


@dataclasses.dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    pass


def _events(n: int) -> list[OrderPlaced]:
    return [OrderPlaced(payload={"n": i}) for i in range(n)]


# ---------------------------------------------------------------------------
# StreamName / Stream
# ---------------------------------------------------------------------------


class TestStream:
    def test_stream_name_str(self) -> None:
        assert str(StreamName("orders")) == "orders"

    def test_empty_stream_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            StreamName("")

    def test_accepts_plain_string_name(self) -> None:
        assert Stream("orders").stream_name == StreamName("orders")

    def test_events_become_tuple(self) -> None:
        events = _events(2)
        stream = Stream("orders", iter(events))
        assert stream.stream_events == tuple(events)
        assert list(stream.stream_events) == list(stream.stream_events)

    def test_with_events_keeps_name_and_metadata(self) -> None:
        stream = Stream("orders", _events(1), {"owner": "a"})
        replaced = stream.with_events(_events(3))
        assert replaced.stream_name == stream.stream_name
        assert replaced.metadata == {"owner": "a"}
        assert len(replaced.stream_events) == 3


# ---------------------------------------------------------------------------
# InMemoryEventStore
# ---------------------------------------------------------------------------


class TestInMemoryEventStore:
    def test_create_and_load(self) -> None:
        store = InMemoryEventStore()
        events = _events(3)
        store.create(Stream("orders", events))

        assert list(store.load("orders")) == events
        assert list(store.load("orders", from_number=2)) == events[1:]
        assert list(store.load("orders", from_number=2, count=1)) == events[1:2]

    def test_create_twice_raises(self) -> None:
        store = InMemoryEventStore()
        store.create(Stream("orders"))
        with pytest.raises(StreamExistsAlreadyError):
            store.create(Stream("orders"))

    def test_append_to_missing_stream(self) -> None:
        with pytest.raises(StreamNotFoundError):
            InMemoryEventStore().append_to("orders", _events(1))

    def test_append_preserves_order(self) -> None:
        store = InMemoryEventStore()
        first, second = _events(2)
        store.create(Stream("orders", [first]))
        store.append_to(StreamName("orders"), [second])
        assert list(store.load("orders")) == [first, second]

    def test_expected_version_conflict(self) -> None:
        store = InMemoryEventStore()
        store.create(Stream("orders", _events(2)))
        with pytest.raises(ConcurrencyError) as exc_info:
            store.append_to("orders", _events(1), expected_version=1)
        assert exc_info.value.actual == 2

    def test_expected_version_match(self) -> None:
        store = InMemoryEventStore()
        store.create(Stream("orders", _events(2)))
        store.append_to("orders", _events(1), expected_version=2)
        assert len(list(store.load("orders"))) == 3

    def test_metadata_round_trip(self) -> None:
        store = InMemoryEventStore()
        store.create(Stream("orders", metadata={"a": 1}))
        assert store.fetch_stream_metadata("orders") == {"a": 1}
        store.update_stream_metadata("orders", {"b": 2})
        assert store.fetch_stream_metadata("orders") == {"b": 2}

    def test_has_stream_and_delete(self) -> None:
        store = InMemoryEventStore()
        store.create(Stream("orders"))
        assert store.has_stream("orders") is True
        store.delete("orders")
        assert store.has_stream("orders") is False
        with pytest.raises(StreamNotFoundError):
            store.delete("orders")

    def test_stream_names(self) -> None:
        store = InMemoryEventStore()
        store.create(Stream("a"))
        store.create(Stream("b"))
        assert store.stream_names() == [StreamName("a"), StreamName("b")]

    def test_is_not_transactional(self) -> None:
        assert not isinstance(InMemoryEventStore(), SupportsTransactions)


# ---------------------------------------------------------------------------
# TransactionalInMemoryEventStore
# ---------------------------------------------------------------------------


class TestTransactionalInMemoryEventStore:
    def test_supports_transactions(self) -> None:
        assert isinstance(TransactionalInMemoryEventStore(), SupportsTransactions)

    def test_commit_keeps_writes(self) -> None:
        store = TransactionalInMemoryEventStore()
        store.begin_transaction()
        assert store.in_transaction() is True
        store.create(Stream("orders", _events(1)))
        store.commit()

        assert store.in_transaction() is False
        assert store.has_stream("orders")

    def test_rollback_restores_state(self) -> None:
        store = TransactionalInMemoryEventStore()
        store.create(Stream("orders", _events(1)))
        store.begin_transaction()
        store.append_to("orders", _events(2))
        store.create(Stream("invoices"))
        store.rollback()

        assert len(list(store.load("orders"))) == 1
        assert not store.has_stream("invoices")
        assert store.in_transaction() is False

    def test_begin_twice_raises(self) -> None:
        store = TransactionalInMemoryEventStore()
        store.begin_transaction()
        with pytest.raises(TransactionAlreadyStartedError):
            store.begin_transaction()

    @pytest.mark.parametrize("operation", ["commit", "rollback"])
    def test_close_without_begin_raises(self, operation: str) -> None:
        store = TransactionalInMemoryEventStore()
        with pytest.raises(TransactionNotStartedError):
            getattr(store, operation)()

    def test_transactional_commits_on_success(self) -> None:
        store = TransactionalInMemoryEventStore()
        result = store.transactional(lambda s: s.create(Stream("orders")) or "done")
        assert result == "done"
        assert store.has_stream("orders")
        assert store.in_transaction() is False

    def test_transactional_rolls_back_on_error(self) -> None:
        store = TransactionalInMemoryEventStore()

        def work(s: TransactionalInMemoryEventStore) -> None:
            s.create(Stream("orders"))
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            store.transactional(work)
        assert not store.has_stream("orders")
        assert store.in_transaction() is False
