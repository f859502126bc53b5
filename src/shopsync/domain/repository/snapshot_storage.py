"""Abstract durable key-value storage for state snapshots."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class SnapshotStorage(ABC):

    @abstractmethod
    def load(self, key: str) -> dict[str, Any] | None:
        """Return the projection saved under ``key``, or None."""

    @abstractmethod
    def save(self, key: str, projection: dict[str, Any]) -> None:
        """Persist a JSON-serializable projection under ``key``."""
