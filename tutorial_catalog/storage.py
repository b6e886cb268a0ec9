# tutorial_catalog/storage.py
"""
Favourites persistence.

Favourites live in a single named slot of a key-value store, the same
shape as browser local storage: the slot holds a JSON-encoded array of
record identifiers. ``JsonFileStorage`` keeps every slot in one JSON
object on disk; ``MemoryStorage`` keeps them in a dict and is what the
tests use.

``FavoritesStore`` never fails on read. A missing slot, an unreadable
file or a value that is not a JSON array all degrade to an empty set.
Every mutation is written through to the storage immediately.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Union

from .ids import normalize_id

logger = logging.getLogger(__name__)

DEFAULT_FAVORITES_KEY = "favoris"


class StorageUnavailable(Exception):
    """The backing key-value store cannot be read or written."""


class MemoryStorage:
    """In-process key-value store."""

    def __init__(self, items: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class JsonFileStorage:
    """Key-value store backed by one JSON object file.

    Parameters
    ----------
    path : Union[str, Path]
        Location of the file. It is created, along with its parent
        directory, on the first write.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        try:
            if not self.path.exists():
                return {}
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageUnavailable(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageUnavailable(f"{self.path} does not hold a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except StorageUnavailable:
                # Corrupt file: start over.
                data = {}
            data[key] = value
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
            except OSError as exc:
                raise StorageUnavailable(f"cannot write {self.path}: {exc}") from exc


class FavoritesStore:
    """The set of favourite record ids, persisted in one storage slot."""

    def __init__(self, storage: Any, key: str = DEFAULT_FAVORITES_KEY) -> None:
        self.storage = storage
        self.key = key
        self._lock = threading.RLock()

    def _read(self) -> List[str]:
        try:
            raw = self.storage.get_item(self.key)
        except StorageUnavailable as exc:
            logger.warning("Favourites unavailable, using an empty set: %s", exc)
            return []
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Favourites slot %r is not valid JSON, ignoring it", self.key)
            return []
        if not isinstance(data, list):
            logger.warning("Favourites slot %r is not a list, ignoring it", self.key)
            return []
        ids: List[str] = []
        for value in data:
            try:
                fid = normalize_id(value)
            except ValueError:
                continue
            if fid not in ids:
                ids.append(fid)
        return ids

    def _write(self, ids: List[str]) -> None:
        try:
            self.storage.set_item(self.key, json.dumps(ids, ensure_ascii=False))
        except StorageUnavailable as exc:
            # Best-effort: ignore write errors
            logger.warning("Could not persist favourites: %s", exc)

    def ordered(self) -> List[str]:
        """Current favourites in the order they were added."""
        with self._lock:
            return self._read()

    def get(self) -> Set[str]:
        return set(self.ordered())

    def toggle(self, record_id: Any) -> Set[str]:
        """Add ``record_id`` if absent, remove it otherwise."""
        fid = normalize_id(record_id)
        with self._lock:
            ids = self._read()
            if fid in ids:
                ids.remove(fid)
            else:
                ids.append(fid)
            self._write(ids)
            return set(ids)

    def remove(self, record_id: Any) -> Set[str]:
        """Remove ``record_id``. Removing an absent id still re-persists."""
        fid = normalize_id(record_id)
        with self._lock:
            ids = [i for i in self._read() if i != fid]
            self._write(ids)
            return set(ids)

    def clear(self) -> Set[str]:
        with self._lock:
            self._write([])
            return set()
