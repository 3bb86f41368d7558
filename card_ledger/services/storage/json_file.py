"""
JSON File Storage Implementation

All records live in one JSON object on local disk:

    {"creditCards": "<json text>", "alerts": "<json text>", ...}

Values are kept as strings so the file mirrors the key-value contract
exactly. Every write replaces the whole file through a temporary file
and os.replace, so a crash mid-write leaves the previous version intact.
"""

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from card_ledger.services.storage.interface import (
    CorruptRecordError,
    KeyValueStore,
    StorageUnavailableError,
)


class JsonFileKeyValueStore(KeyValueStore):
    """Key-value store backed by a single JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._cache: Optional[dict[str, str]] = None

    def _load(self) -> dict[str, str]:
        if self._cache is not None:
            return self._cache

        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self._cache = {}
            return self._cache
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read {self.path}: {e}") from e

        if not raw.strip():
            self._cache = {}
            return self._cache

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptRecordError(str(self.path), str(e)) from e
        if not isinstance(data, dict):
            raise CorruptRecordError(str(self.path), "top level is not an object")

        self._cache = {
            str(key): value if isinstance(value, str) else json.dumps(value)
            for key, value in data.items()
        }
        return self._cache

    def _write(self, data: dict[str, str]) -> None:
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_path)
            raise StorageUnavailableError(f"Cannot write {self.path}: {e}") from e
        self._cache = data

    def _current(self) -> dict[str, str]:
        """Loaded records, or an empty set if the file is corrupt."""
        try:
            return self._load()
        except CorruptRecordError:
            return {}

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = dict(self._current())
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = dict(self._current())
        if key not in data:
            return
        del data[key]
        self._write(data)
