"""Kernel messaging – immutable message primitives."""
from __future__ import annotations

import dataclasses
import enum
from datetime import UTC, datetime
from typing import Any, Self, TypeAlias
from uuid import uuid4

MessageId: TypeAlias = str
MessageName: TypeAlias = str


class MessageType(enum.StrEnum):
    COMMAND = "command"
    EVENT = "event"
    QUERY = "query"


@dataclasses.dataclass(frozen=True)
class Message:
    """Immutable message envelope shared by commands and events.

    ``name`` defaults to the concrete class name, so ``PlaceOrder()`` is
    named ``"PlaceOrder"`` unless a name is given explicitly.
    """

    payload: dict[str, Any] = dataclasses.field(default_factory=dict)
    metadata: dict[str, Any] = dataclasses.field(default_factory=dict)
    id: MessageId = dataclasses.field(default_factory=lambda: str(uuid4()))
    name: MessageName = ""
    created_at: datetime = dataclasses.field(default_factory=lambda: datetime.now(UTC))

    _: dataclasses.KW_ONLY
    message_type: dataclasses.InitVar[MessageType | None] = None

    kind: MessageType = dataclasses.field(default=MessageType.EVENT, init=False)

    def __post_init__(self, message_type: MessageType | None) -> None:
        if not self.name:
            object.__setattr__(self, "name", type(self).__name__)
        object.__setattr__(self, "kind", message_type or self._default_type())
        object.__setattr__(self, "metadata", dict(self.metadata))

    @classmethod
    def _default_type(cls) -> MessageType:
        return MessageType.EVENT

    def with_metadata(self, metadata: dict[str, Any]) -> Self:
        """Return a copy whose metadata is replaced by *metadata*."""
        return dataclasses.replace(self, metadata=dict(metadata), message_type=self.kind)

    def with_added_metadata(self, key: str, value: Any) -> Self:
        """Return a copy with *key* set; ``self`` is left untouched."""
        return dataclasses.replace(
            self, metadata={**self.metadata, key: value}, message_type=self.kind
        )

    def payload_value(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)


@dataclasses.dataclass(frozen=True)
class Command(Message):
    """Intent to change state."""

    @classmethod
    def _default_type(cls) -> MessageType:
        return MessageType.COMMAND


@dataclasses.dataclass(frozen=True)
class DomainEvent(Message):
    """Something that happened; the unit persisted in a stream.

    Subclasses usually carry no extra fields and keep their data in
    ``payload``::

        @dataclasses.dataclass(frozen=True)
        class OrderPlaced(DomainEvent):
            pass

        OrderPlaced(payload={"order_id": "1"})
    """


__all__ = ["Command", "DomainEvent", "Message", "MessageId", "MessageName", "MessageType"]
