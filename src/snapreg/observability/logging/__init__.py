"""Observability – structured logging helpers."""
from snapreg.observability.logging.factory import JsonLoggerFactory
from snapreg.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
