"""Observability – structured logging and snapshot lifecycle events."""
from snapreg.observability.events import EventEmitter, StructuredEvent
from snapreg.observability.logging import JsonLoggerFactory, get_logger

__all__ = ["EventEmitter", "JsonLoggerFactory", "StructuredEvent", "get_logger"]
