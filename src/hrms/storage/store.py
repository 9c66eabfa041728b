from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Optional, Protocol

from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Durable key -> JSON store.

    `revision()` grows on every write, from any process sharing the store.
    Readers compare it to notice writes they did not make themselves.
    """

    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> list[str]:
        raise NotImplementedError

    def revision(self) -> int:
        raise NotImplementedError


def _dumps(key: str, value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise StorageError(f"Cannot serialize value for {key!r}: {e}") from e


class InMemoryStore:
    """Process-local store (tests, throwaway runs)."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, str] = {}
        self._revision = 0
        self._lock = threading.Lock()
        for k, v in (initial or {}).items():
            self.set(k, v)

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return copy.deepcopy(default)
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        raw = _dumps(key, value)
        with self._lock:
            self._data[key] = raw
            self._revision += 1

    def remove(self, key: str) -> None:
        with self._lock:
            if self._data.pop(key, None) is not None:
                self._revision += 1

    def keys(self) -> list[str]:
        return sorted(self._data)

    def revision(self) -> int:
        return self._revision


class JsonFileStore:
    """One JSON document on disk holding every key plus a revision counter.

    Every read goes to disk so writes made by other processes show up. Writes
    replace the file atomically; concurrent writers follow last-writer-wins.
    """

    def __init__(self, path: str | os.PathLike):
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict:
        try:
            with self._path.open("r", encoding="utf-8") as f:
                doc = json.load(f)
        except FileNotFoundError:
            return {"revision": 0, "data": {}}
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read store file {self._path}: {e}") from e
        if not isinstance(doc, dict) or not isinstance(doc.get("data"), dict):
            raise StorageError(f"Store file {self._path} has an unexpected layout")
        return doc

    def _write(self, doc: dict) -> None:
        raw = _dumps("<document>", doc)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=self._path.name, suffix=".tmp", dir=str(self._path.parent))
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(raw)
                os.replace(tmp, self._path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write store file {self._path}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        data = self._read()["data"]
        if key not in data:
            return copy.deepcopy(default)
        return data[key]

    def set(self, key: str, value: Any) -> None:
        # Serialize first so a bad value never touches the file.
        _dumps(key, value)
        with self._lock:
            doc = self._read()
            doc["data"][key] = value
            doc["revision"] = int(doc.get("revision", 0)) + 1
            self._write(doc)
        logger.debug("store write %s (revision=%s)", key, doc["revision"])

    def remove(self, key: str) -> None:
        with self._lock:
            doc = self._read()
            if key not in doc["data"]:
                return
            del doc["data"][key]
            doc["revision"] = int(doc.get("revision", 0)) + 1
            self._write(doc)

    def keys(self) -> list[str]:
        return sorted(self._read()["data"])

    def revision(self) -> int:
        return int(self._read().get("revision", 0))
