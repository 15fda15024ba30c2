"""Unit tests for TransactionManager."""

from __future__ import annotations

import dataclasses
from typing import Any

import pytest

from es_bus_bridge.bridge import TransactionManager
from es_bus_bridge.event_store import Stream, TransactionalInMemoryEventStore
from es_bus_bridge.kernel.errors import NoHandlerFoundError
from es_bus_bridge.kernel.messaging import Command, DomainEvent
from es_bus_bridge.service_bus import CommandBus, CommandRouter


@dataclasses.dataclass(frozen=True)
class DoSomething(Command):
    pass


@dataclasses.dataclass(frozen=True)
class SomethingDone(DomainEvent):
    pass


class SpyEventStore(TransactionalInMemoryEventStore):
    """Records every transaction call it receives."""

    def __init__(self, fail_on_commit: bool = False) -> None:
        super().__init__()
        self.calls: list[str] = []
        self._fail_on_commit = fail_on_commit

    def begin_transaction(self) -> None:
        self.calls.append("begin")
        super().begin_transaction()

    def commit(self) -> None:
        self.calls.append("commit")
        if self._fail_on_commit:
            raise RuntimeError("commit failed")
        super().commit()

    def rollback(self) -> None:
        self.calls.append("rollback")
        super().rollback()


def _command_bus(handler: Any) -> CommandBus:
    bus = CommandBus()
    router = CommandRouter()
    router.route(DoSomething).to(handler)
    router.attach_to_message_bus(bus)
    return bus


class TestTransactionManager:
    def test_commits_when_handler_succeeds(self) -> None:
        store = SpyEventStore()
        in_tx: list[bool] = []

        def handler(command: Any) -> None:
            in_tx.append(store.in_transaction())
            store.create(Stream("something", [SomethingDone()]))

        bus = _command_bus(handler)
        TransactionManager(store).attach_to_message_bus(bus)

        bus.dispatch(DoSomething())

        assert in_tx == [True]
        assert store.calls == ["begin", "commit"]
        assert store.in_transaction() is False
        assert store.has_stream("something")

    def test_rolls_back_when_handler_raises(self) -> None:
        store = SpyEventStore()

        def handler(command: Any) -> None:
            store.create(Stream("something", [SomethingDone()]))
            raise ValueError("handler failed")

        bus = _command_bus(handler)
        TransactionManager(store).attach_to_message_bus(bus)

        with pytest.raises(ValueError, match="handler failed"):
            bus.dispatch(DoSomething())

        assert store.calls == ["begin", "rollback"]
        assert store.has_stream("something") is False

    def test_rolls_back_when_no_handler_is_routed(self) -> None:
        store = SpyEventStore()
        bus = CommandBus()
        TransactionManager(store).attach_to_message_bus(bus)

        with pytest.raises(NoHandlerFoundError):
            bus.dispatch(DoSomething())

        assert store.calls == ["begin", "rollback"]

    def test_finalize_without_open_transaction_does_nothing(self) -> None:
        store = SpyEventStore()

        def handler(command: Any) -> None:
            store.commit()

        bus = _command_bus(handler)
        TransactionManager(store).attach_to_message_bus(bus)

        bus.dispatch(DoSomething())

        assert store.calls == ["begin", "commit"]

    def test_commit_failure_propagates(self) -> None:
        store = SpyEventStore(fail_on_commit=True)
        bus = _command_bus(lambda c: None)
        TransactionManager(store).attach_to_message_bus(bus)

        with pytest.raises(RuntimeError, match="commit failed"):
            bus.dispatch(DoSomething())

        assert store.calls == ["begin", "commit"]

    def test_detach(self) -> None:
        store = SpyEventStore()
        bus = _command_bus(lambda c: None)
        manager = TransactionManager(store)
        manager.attach_to_message_bus(bus)
        manager.detach_from_message_bus(bus)

        bus.dispatch(DoSomething())

        assert store.calls == []

    def test_detach_without_attach(self) -> None:
        bus = _command_bus(lambda c: None)
        TransactionManager(SpyEventStore()).detach_from_message_bus(bus)
        bus.dispatch(DoSomething())
