"""Application – SnapshotManager, the engine facade.

Wires a :class:`SnapshotRegistry`, a :class:`Serializer` and a
:class:`SavePipeline` together behind the two lifecycle events of the
engine:

* ``on_take_snapshot()``: the external save trigger.  Pre-snapshot
  listeners run synchronously, then every snapshot is captured and the
  write is queued on the background worker.
* completion observers, called once per save cycle with its
  :class:`SnapshotResult` after the write attempt.

Example::

    with SnapshotManager(settings=SnapshotSettings(save_folder="saves")) as manager:
        Unit(manager.registry).register()
        result = manager.on_take_snapshot().result()
        result.raise_for_error()
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from concurrent.futures import Future
from pathlib import Path
from typing import Any

from snapreg.application.loading import Reviver, load_snapshots
from snapreg.config.snapshot import SnapshotSettings
from snapreg.kernel.snapshot import LoadableSnapshot, Snapshot, SnapshotModel
from snapreg.kernel.time import Clock
from snapreg.kernel.types import Smri
from snapreg.observability.events import EventEmitter
from snapreg.observability.logging import JsonLoggerFactory, get_logger
from snapreg.persistence.pipeline import CompletionObserver, SavePipeline, SnapshotResult
from snapreg.persistence.serializer import MsgpackSerializer, Serializer
from snapreg.persistence.storage import read_bytes
from snapreg.registry.registry import SnapshotRegistry

logger = get_logger(__name__)

TakeSnapshotListener = Callable[[], Any]


class SnapshotManager:
    def __init__(
        self,
        registry: SnapshotRegistry | None = None,
        *,
        serializer: Serializer | None = None,
        settings: SnapshotSettings | None = None,
        pipeline: SavePipeline | None = None,
        clock: Clock | None = None,
        emitter: EventEmitter | None = None,
    ) -> None:
        self._settings = settings or SnapshotSettings()
        self._registry = registry if registry is not None else SnapshotRegistry()
        self._serializer = serializer or MsgpackSerializer(self._registry.catalog)
        self._pipeline = pipeline or SavePipeline(
            self._serializer,
            self._registry.catalog,
            clock=clock,
            emitter=emitter,
            fsync=self._settings.fsync,
        )
        self._take_listeners: list[TakeSnapshotListener] = []
        self._lock = threading.Lock()
        self._save_lock = threading.RLock()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def registry(self) -> SnapshotRegistry:
        return self._registry

    @property
    def settings(self) -> SnapshotSettings:
        return self._settings

    @property
    def serializer(self) -> Serializer:
        return self._serializer

    @property
    def snapshots(self) -> Mapping[Smri, Snapshot]:
        return self._registry.snapshots

    @property
    def models(self) -> Mapping[Smri, SnapshotModel]:
        return self._registry.models

    @property
    def current_smri(self) -> Smri:
        return self._registry.current_smri

    def next_smri(self) -> Smri:
        return self._registry.next_smri()

    def remove(self, smri: Smri) -> bool:
        return self._registry.remove(smri)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def subscribe_take_snapshot(self, listener: TakeSnapshotListener) -> Callable[[], None]:
        """Run *listener* right before each triggered capture."""
        with self._lock:
            self._take_listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._take_listeners:
                    self._take_listeners.remove(listener)

        return unsubscribe

    def subscribe_completed(self, observer: CompletionObserver) -> Callable[[], None]:
        return self._pipeline.subscribe(observer)

    def on_take_snapshot(self) -> Future[SnapshotResult]:
        """External save trigger: notify listeners, then snapshot to the configured path."""
        with self._lock:
            listeners = list(self._take_listeners)
        logger.debug("snapshot.requested", listeners=len(listeners))
        for listener in listeners:
            listener()
        return self.take_snapshot()

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def take_snapshot(
        self,
        folder: str | Path | None = None,
        filename: str | None = None,
    ) -> Future[SnapshotResult]:
        """Capture every snapshot now and queue the write.

        Capture errors propagate immediately and nothing is queued.  Capture
        and submission happen under one lock, so cycles are written in the
        order their state was captured.
        """
        with self._save_lock:
            models = self._registry.capture()
            return self._pipeline.submit(
                models,
                folder if folder is not None else self._settings.save_folder,
                filename or self._settings.save_name,
            )

    async def take_snapshot_async(
        self,
        folder: str | Path | None = None,
        filename: str | None = None,
    ) -> SnapshotResult:
        return await asyncio.wrap_future(self.take_snapshot(folder, filename))

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def read_artifact(
        self,
        folder: str | Path | None = None,
        filename: str | None = None,
    ) -> dict[str, list[SnapshotModel]]:
        """Decode a saved artifact into its ordered model groups."""
        path = Path(folder if folder is not None else self._settings.save_folder)
        data = read_bytes(path / (filename or self._settings.save_name))
        return self._serializer.decode(data)

    def load(
        self,
        models: Mapping[str, Sequence[SnapshotModel]] | Iterable[SnapshotModel],
        revive: Reviver,
    ) -> list[LoadableSnapshot]:
        """Two-phase load of already decoded *models*."""
        return load_snapshots(self._registry, models, revive)

    def restore(
        self,
        revive: Reviver,
        folder: str | Path | None = None,
        filename: str | None = None,
    ) -> list[LoadableSnapshot]:
        """Read the artifact and load it into the registry."""
        return self.load(self.read_artifact(folder, filename), revive)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def configure_logging(self) -> None:
        """Route structlog output as JSON at the configured ``log_level``."""
        JsonLoggerFactory.configure(self._settings.level)

    def close(self, wait: bool = True) -> None:
        self._pipeline.close(wait=wait)

    def __enter__(self) -> "SnapshotManager":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SnapshotManager(registry={self._registry!r}, path={str(self._settings.save_path)!r})"


__all__ = ["SnapshotManager", "TakeSnapshotListener"]
