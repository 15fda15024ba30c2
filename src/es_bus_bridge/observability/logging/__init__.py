"""Observability – structured logging helpers."""
from es_bus_bridge.observability.logging.factory import JsonLoggerFactory
from es_bus_bridge.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
