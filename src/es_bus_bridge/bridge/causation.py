"""Bridge – CausationMetadataEnricher.

Stamps every event persisted while a command is being handled with that
command's id and name, so consumers can rebuild causation chains.

Only the most recently dispatched command is remembered. A command handler
that dispatches another command on the same bus overwrites it, and once the
inner dispatch finalizes nothing is remembered until the next dispatch
begins, so events the outer handler writes after that point carry no
causation metadata.
"""
from __future__ import annotations

from typing import Any

from es_bus_bridge.config.settings import (
    DEFAULT_CAUSATION_ID_KEY,
    DEFAULT_CAUSATION_NAME_KEY,
    BridgeSettings,
)
from es_bus_bridge.config.validation import InvalidSettingValueError
from es_bus_bridge.event_store import ActionEventEmitterEventStore, EventStorePlugin, MetadataEnricher
from es_bus_bridge.kernel.events import ActionEvent, ListenerRegistry
from es_bus_bridge.kernel.messaging import Message
from es_bus_bridge.observability.logging import get_logger
from es_bus_bridge.service_bus import MessageBus, MessageBusPlugin, message_name_of

logger = get_logger(__name__)


class CausationMetadataEnricher(MetadataEnricher, EventStorePlugin, MessageBusPlugin):
    """Tag events with the id and name of the command that caused them."""

    # Must run before the store writes and before any publisher sees the events.
    STORE_PRIORITY = 1000
    DISPATCH_PRIORITY = MessageBus.PRIORITY_INVOKE_HANDLER + 1000
    # Below TransactionManager.FINALIZE_PRIORITY: the command stays recorded
    # while its committed events are published.
    FINALIZE_PRIORITY = 900

    def __init__(
        self,
        causation_id_key: str = DEFAULT_CAUSATION_ID_KEY,
        causation_name_key: str = DEFAULT_CAUSATION_NAME_KEY,
    ) -> None:
        if not causation_id_key:
            raise InvalidSettingValueError("causation_id_key", causation_id_key, "must not be empty")
        if not causation_name_key:
            raise InvalidSettingValueError("causation_name_key", causation_name_key, "must not be empty")
        self._causation_id_key = causation_id_key
        self._causation_name_key = causation_name_key
        self._current_command: Message | None = None
        self._store_listeners = ListenerRegistry()
        self._bus_listeners = ListenerRegistry()

    @classmethod
    def from_settings(cls, settings: BridgeSettings) -> CausationMetadataEnricher:
        return cls(settings.causation_id_key, settings.causation_name_key)

    @property
    def current_command(self) -> Message | None:
        return self._current_command

    def enrich(self, message: Message) -> Message:
        """Return *message* with the causation keys added.

        With no command recorded the message is returned unchanged, so
        causation metadata is either complete or absent.
        """
        command = self._current_command
        if command is None:
            return message
        message = message.with_added_metadata(self._causation_id_key, str(command.id))
        return message.with_added_metadata(self._causation_name_key, message_name_of(command))

    # ------------------------------------------------------------------
    # Event store
    # ------------------------------------------------------------------

    def attach_to_event_store(self, event_store: ActionEventEmitterEventStore) -> None:
        self._store_listeners.track(
            event_store.attach(event_store.EVENT_APPEND_TO, self._on_append_to, self.STORE_PRIORITY)
        )
        self._store_listeners.track(
            event_store.attach(event_store.EVENT_CREATE, self._on_create, self.STORE_PRIORITY)
        )

    def detach_from_event_store(self, event_store: ActionEventEmitterEventStore) -> None:
        self._store_listeners.release(event_store)

    def _on_append_to(self, event: ActionEvent) -> None:
        if self._current_command is None:
            return
        stream_events = event.param(ActionEventEmitterEventStore.PARAM_STREAM_EVENTS, [])
        event.set_param(
            ActionEventEmitterEventStore.PARAM_STREAM_EVENTS,
            [self.enrich(recorded) for recorded in stream_events],
        )

    def _on_create(self, event: ActionEvent) -> None:
        if self._current_command is None:
            return
        stream = event.param(ActionEventEmitterEventStore.PARAM_STREAM)
        event.set_param(
            ActionEventEmitterEventStore.PARAM_STREAM,
            stream.with_events(self.enrich(recorded) for recorded in stream.stream_events),
        )

    # ------------------------------------------------------------------
    # Message bus
    # ------------------------------------------------------------------

    def attach_to_message_bus(self, message_bus: MessageBus) -> None:
        self._bus_listeners.track(
            message_bus.attach(MessageBus.EVENT_DISPATCH, self._on_dispatch, self.DISPATCH_PRIORITY)
        )
        self._bus_listeners.track(
            message_bus.attach(MessageBus.EVENT_FINALIZE, self._on_finalize, self.FINALIZE_PRIORITY)
        )

    def detach_from_message_bus(self, message_bus: MessageBus) -> None:
        self._bus_listeners.release(message_bus)

    def _on_dispatch(self, event: ActionEvent) -> None:
        message: Any = event.param(MessageBus.EVENT_PARAM_MESSAGE)
        self._current_command = message if isinstance(message, Message) else None
        if self._current_command is not None:
            logger.debug(
                "causation.recorded",
                command_id=str(self._current_command.id),
                command_name=message_name_of(self._current_command),
            )

    def _on_finalize(self, event: ActionEvent) -> None:
        if self._current_command is not None:
            logger.debug("causation.cleared", command_id=str(self._current_command.id))
        self._current_command = None


__all__ = ["CausationMetadataEnricher"]
