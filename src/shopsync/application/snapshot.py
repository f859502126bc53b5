"""Snapshot pipeline: store change -> projection -> durable storage.

Keeps the stores free of I/O. The persister subscribes to a store and,
after every change, writes the projection under a fixed key. Writes are
fire-and-forget: a failing save is logged and the mutation that caused it
is unaffected.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

import structlog

from shopsync.application.state import StateContainer
from shopsync.domain.repository.snapshot_storage import SnapshotStorage

logger = structlog.get_logger(__name__)

StoreT = TypeVar("StoreT", bound=StateContainer)


class SnapshotPersister(Generic[StoreT]):

    def __init__(
        self,
        store: StoreT,
        storage: SnapshotStorage,
        key: str,
        project: Callable[[StoreT], dict[str, Any]],
        seed: Callable[[StoreT, dict[str, Any]], None],
    ) -> None:
        self._store = store
        self._storage = storage
        self._key = key
        self._project = project
        self._seed = seed
        self._unsubscribe: Callable[[], None] | None = None

    def restore(self) -> bool:
        """Seed the store from storage. Returns True if a snapshot was applied.

        Call once at start-up, before ``attach``. An unreadable snapshot is
        logged and skipped so the store keeps its initial state.
        """
        try:
            projection = self._storage.load(self._key)
            if projection is None:
                return False
            self._seed(self._store, projection)
        except Exception:
            logger.exception("snapshot_restore_failed", key=self._key)
            return False
        logger.info("snapshot_restored", key=self._key)
        return True

    def attach(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(self._on_change)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, store: StoreT) -> None:
        try:
            self._storage.save(self._key, self._project(store))
        except Exception:
            logger.exception("snapshot_save_failed", key=self._key)
