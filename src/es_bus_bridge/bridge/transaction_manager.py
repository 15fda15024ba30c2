"""Bridge – TransactionManager.

Opens an event-store transaction whenever a command dispatch begins and
closes it when the dispatch finalizes: commit if the handler succeeded,
rollback if it raised. Failures of commit or rollback propagate to the bus.

Only attach this to stores that support transactions.
"""
from __future__ import annotations

from es_bus_bridge.event_store import TransactionalEventStore
from es_bus_bridge.kernel.errors import BaseError
from es_bus_bridge.kernel.events import ActionEvent
from es_bus_bridge.observability.logging import get_logger
from es_bus_bridge.service_bus import AbstractMessageBusPlugin, MessageBus

logger = get_logger(__name__)


class TransactionManager(AbstractMessageBusPlugin):
    DISPATCH_PRIORITY = MessageBus.PRIORITY_INVOKE_HANDLER + 1000
    FINALIZE_PRIORITY = 1000

    def __init__(self, event_store: TransactionalEventStore) -> None:
        super().__init__()
        self._event_store = event_store

    def attach_to_message_bus(self, message_bus: MessageBus) -> None:
        self._bus_listeners.track(
            message_bus.attach(MessageBus.EVENT_DISPATCH, self._on_dispatch, self.DISPATCH_PRIORITY)
        )
        self._bus_listeners.track(
            message_bus.attach(MessageBus.EVENT_FINALIZE, self._on_finalize, self.FINALIZE_PRIORITY)
        )

    def _on_dispatch(self, event: ActionEvent) -> None:
        self._event_store.begin_transaction()
        logger.debug("transaction.begin", message_name=event.param(MessageBus.EVENT_PARAM_MESSAGE_NAME))

    def _on_finalize(self, event: ActionEvent) -> None:
        if not self._event_store.in_transaction():
            return
        error = event.param(MessageBus.EVENT_PARAM_EXCEPTION)
        if error:
            self._event_store.rollback()
            fields = error.log_fields() if isinstance(error, BaseError) else {"error": repr(error)}
            logger.debug("transaction.rollback", **fields)
        else:
            self._event_store.commit()
            logger.debug("transaction.commit")


__all__ = ["TransactionManager"]
