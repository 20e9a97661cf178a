"""Persistence – SavePipeline, the background encode-and-write stage.

A save cycle is handed a point-in-time copy of the model map.  On a single
dedicated worker thread it orders and groups the models, encodes them with
the serializer and atomically replaces the artifact, then notifies every
completion observer exactly once with a :class:`SnapshotResult`.

Overlapping saves are queued: cycles run one at a time in submission order,
each on its own captured copy.
"""

from __future__ import annotations

import itertools
import threading
import time
from collections.abc import Callable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from snapreg.kernel.errors import BaseError, EncodeError, InfrastructureError, PipelineClosedError
from snapreg.kernel.snapshot import SnapshotModel
from snapreg.kernel.time import Clock, SystemClock
from snapreg.kernel.types import Smri
from snapreg.observability.events import EventEmitter, StructuredEvent
from snapreg.observability.logging import get_logger
from snapreg.persistence.serializer import Serializer
from snapreg.persistence.storage import atomic_write_bytes
from snapreg.registry.catalog import ModelCatalog
from snapreg.registry.ordering import order_and_group

logger = get_logger(__name__)

_SERVICE = "snapreg"


@dataclass(frozen=True)
class SnapshotResult:
    """Outcome of one save cycle."""

    cycle: int
    path: Path
    model_count: int
    group_order: tuple[str, ...]
    started_at: datetime
    completed_at: datetime
    duration_ms: float
    error: BaseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


CompletionObserver = Callable[[SnapshotResult], None]


class SavePipeline:
    """Runs save cycles on a background worker and reports their completion.

    Parameters
    ----------
    serializer:
        Encodes the type-grouped models into the artifact bytes.
    catalog:
        Supplies per-type priorities and tags for ordering and grouping.
    clock:
        Source of ``started_at`` / ``completed_at`` timestamps.
    emitter:
        Optional sink for one ``snapshot.completed`` / ``snapshot.failed``
        :class:`StructuredEvent` per cycle.
    fsync:
        Whether the artifact is fsynced before it replaces the old file.
    """

    def __init__(
        self,
        serializer: Serializer,
        catalog: ModelCatalog,
        *,
        clock: Clock | None = None,
        emitter: EventEmitter | None = None,
        fsync: bool = True,
    ) -> None:
        self._serializer = serializer
        self._catalog = catalog
        self._clock = clock or SystemClock()
        self._emitter = emitter
        self._fsync = fsync
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="snapreg-save")
        self._observers: list[CompletionObserver] = []
        self._cycles = itertools.count(1)
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, observer: CompletionObserver) -> Callable[[], None]:
        """Register *observer*; the returned callable unsubscribes it."""
        with self._lock:
            self._observers.append(observer)
        return lambda: self.unsubscribe(observer)

    def unsubscribe(self, observer: CompletionObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def submit(
        self,
        models: Mapping[Smri, SnapshotModel],
        folder: str | Path,
        filename: str,
    ) -> Future[SnapshotResult]:
        """Queue a save cycle for *models* and return a future for its result.

        The future always resolves to a :class:`SnapshotResult`; failures are
        carried on ``result.error`` rather than raised.
        """
        path = Path(folder) / filename
        with self._lock:
            if self._closed:
                raise PipelineClosedError()
            cycle = next(self._cycles)
            return self._executor.submit(self._run, cycle, dict(models), path)

    def close(self, wait: bool = True) -> None:
        """Stop accepting saves; with *wait*, block until queued ones finish."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "SavePipeline":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Worker side
    # ------------------------------------------------------------------

    def _run(self, cycle: int, models: dict[Smri, SnapshotModel], path: Path) -> SnapshotResult:
        log = logger.bind(cycle=cycle, path=str(path))
        started_at = self._clock.now()
        start = time.monotonic()
        group_order: tuple[str, ...] = ()
        error: BaseError | None = None
        try:
            groups = order_and_group(models, self._catalog)
            group_order = tuple(groups)
            data = self._encode(groups)
            atomic_write_bytes(path, data, fsync=self._fsync)
        except BaseError as exc:
            error = exc
        except Exception as exc:  # noqa: BLE001
            error = InfrastructureError(f"Save cycle {cycle} failed: {exc}", cause=exc)

        duration_ms = (time.monotonic() - start) * 1000
        result = SnapshotResult(
            cycle=cycle,
            path=path,
            model_count=len(models),
            group_order=group_order,
            started_at=started_at,
            completed_at=self._clock.now(),
            duration_ms=duration_ms,
            error=error,
        )
        if error is None:
            log.info("snapshot.written", models=len(models), groups=list(group_order), duration_ms=round(duration_ms, 2))
        else:
            log.error("snapshot.failed", code=error.code, error=error.message, duration_ms=round(duration_ms, 2))
        self._notify(result)
        self._emit(result)
        return result

    def _encode(self, groups: dict[str, list[SnapshotModel]]) -> bytes:
        try:
            data = self._serializer.encode(groups)
        except BaseError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise EncodeError(f"Serializer failed: {exc}", cause=exc) from exc
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise EncodeError(f"Serializer returned {type(data).__name__}, expected bytes")
        return bytes(data)

    def _emit(self, result: SnapshotResult) -> None:
        if self._emitter is None:
            return
        fields: dict[str, object] = {
            "cycle": result.cycle,
            "path": str(result.path),
            "model_count": result.model_count,
            "group_order": list(result.group_order),
        }
        if result.error is not None:
            fields["error_code"] = result.error.code
        event = StructuredEvent(
            name="snapshot.completed" if result.ok else "snapshot.failed",
            service=_SERVICE,
            timestamp=result.completed_at,
            duration_ms=result.duration_ms,
            fields=fields,
        )
        try:
            self._emitter.emit(event)
        except Exception:  # noqa: BLE001
            logger.exception("snapshot.emit_failed", cycle=result.cycle)

    def _notify(self, result: SnapshotResult) -> None:
        with self._lock:
            observers = list(self._observers)
        for observer in observers:
            try:
                observer(result)
            except Exception:  # noqa: BLE001
                logger.exception("snapshot.observer_failed", cycle=result.cycle)


__all__ = ["CompletionObserver", "SavePipeline", "SnapshotResult"]
