"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError             (application.py)
    │   ├── UnknownHookError
    │   ├── NoHandlerFoundError
    │   └── ConfigError              (es_bus_bridge.config.validation)
    └── EventStoreError              (event_store.py)
        ├── StreamNotFoundError
        ├── StreamExistsAlreadyError
        ├── ConcurrencyError
        ├── TransactionAlreadyStartedError
        └── TransactionNotStartedError
"""

from es_bus_bridge.kernel.errors.application import (
    ApplicationError,
    NoHandlerFoundError,
    UnknownHookError,
)
from es_bus_bridge.kernel.errors.base import BaseError
from es_bus_bridge.kernel.errors.event_store import (
    ConcurrencyError,
    EventStoreError,
    StreamExistsAlreadyError,
    StreamNotFoundError,
    TransactionAlreadyStartedError,
    TransactionNotStartedError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConcurrencyError",
    "EventStoreError",
    "NoHandlerFoundError",
    "StreamExistsAlreadyError",
    "StreamNotFoundError",
    "TransactionAlreadyStartedError",
    "TransactionNotStartedError",
    "UnknownHookError",
]
