"""Event store – StreamName and Stream."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from typing import Any

from es_bus_bridge.kernel.messaging import Message


@dataclasses.dataclass(frozen=True)
class StreamName:
    """Name of an append-only event stream (e.g. ``"orders"``)."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Stream name must not be empty")

    def __str__(self) -> str:
        return self.value


@dataclasses.dataclass(frozen=True, init=False)
class Stream:
    """A stream as handed to :meth:`EventStore.create`.

    ``stream_events`` is normalised to a tuple so a stream value can be
    iterated any number of times by successive hook listeners.
    """

    stream_name: StreamName
    stream_events: tuple[Message, ...] = ()
    metadata: dict[str, Any] = dataclasses.field(default_factory=dict)

    def __init__(
        self,
        stream_name: StreamName | str,
        stream_events: Iterable[Message] = (),
        metadata: dict[str, Any] | None = None,
    ) -> None:
        if isinstance(stream_name, str):
            stream_name = StreamName(stream_name)
        object.__setattr__(self, "stream_name", stream_name)
        object.__setattr__(self, "stream_events", tuple(stream_events))
        object.__setattr__(self, "metadata", dict(metadata or {}))

    def with_events(self, stream_events: Iterable[Message]) -> Stream:
        return Stream(self.stream_name, stream_events, self.metadata)


def as_stream_name(name: StreamName | str) -> StreamName:
    return name if isinstance(name, StreamName) else StreamName(name)


__all__ = ["Stream", "StreamName", "as_stream_name"]
