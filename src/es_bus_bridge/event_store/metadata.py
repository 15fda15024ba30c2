"""Event store – MetadataEnricher port."""

from __future__ import annotations

import abc

from es_bus_bridge.kernel.messaging import Message


class MetadataEnricher(abc.ABC):
    """Port: add metadata to an event before it is persisted."""

    @abc.abstractmethod
    def enrich(self, message: Message) -> Message: ...


__all__ = ["MetadataEnricher"]
