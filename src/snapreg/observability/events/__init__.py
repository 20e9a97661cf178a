"""Observability – Structured Events."""
from snapreg.observability.events.emitter import EventEmitter, StructuredEvent

__all__ = ["EventEmitter", "StructuredEvent"]
