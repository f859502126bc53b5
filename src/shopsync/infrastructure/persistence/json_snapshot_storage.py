"""JSON-file-backed implementation of SnapshotStorage.

One ``<key>.json`` file per key inside a data directory.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from shopsync.domain.exceptions import ValidationError
from shopsync.domain.repository.snapshot_storage import SnapshotStorage


class JsonSnapshotStorage(SnapshotStorage):

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir

    # --- SnapshotStorage interface --------------------------------------------

    def load(self, key: str) -> dict[str, Any] | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValidationError(f"Snapshot '{key}' is not a JSON object")
        return raw

    def save(self, key: str, projection: dict[str, Any]) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        # atomic replace
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(projection, indent=2) + "\n", encoding="utf-8")
        tmp.replace(path)

    # --- Internal helpers -----------------------------------------------------

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValidationError(f"Invalid snapshot key: {key!r}")
        return self._data_dir / f"{key}.json"
