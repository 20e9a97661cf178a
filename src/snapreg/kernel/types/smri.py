"""Snapshot Manager Resource Identifiers (SMRIs) and their allocator."""

from __future__ import annotations

import threading
from typing import Any

from snapreg.kernel.errors.domain import InvariantViolationError, ValidationError

#: An SMRI is an unsigned 32-bit integer.
Smri = int

SMRI_MAX: Smri = 2**32 - 1


def validate_smri(value: Any) -> Smri:
    """Return *value* if it is a valid SMRI, else raise :class:`ValidationError`."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"SMRI must be an int, got {type(value).__name__}")
    if not 0 <= value <= SMRI_MAX:
        raise ValidationError(f"SMRI {value} is outside [0, {SMRI_MAX}]")
    return value


class SmriAllocator:
    """Issues strictly increasing SMRIs.

    Every value returned by :meth:`next` is greater than every value
    previously returned or adopted.  :meth:`adopt` only ever raises the
    counter, so identifiers restored from an artifact never collide with
    identifiers allocated afterwards.  Both operations are serialised by an
    internal lock.

    Example::

        alloc = SmriAllocator()
        alloc.next()     # 1
        alloc.adopt(40)
        alloc.next()     # 41
    """

    def __init__(self, start: Smri = 0) -> None:
        self._current = validate_smri(start)
        self._lock = threading.Lock()

    @property
    def current(self) -> Smri:
        """The highest SMRI issued or adopted so far."""
        return self._current

    def next(self) -> Smri:
        with self._lock:
            if self._current >= SMRI_MAX:
                raise InvariantViolationError("SMRI space exhausted")
            self._current += 1
            return self._current

    def adopt(self, smri: Smri) -> None:
        validate_smri(smri)
        with self._lock:
            if smri > self._current:
                self._current = smri

    def __repr__(self) -> str:
        return f"SmriAllocator(current={self._current})"


__all__ = ["SMRI_MAX", "Smri", "SmriAllocator", "validate_smri"]
