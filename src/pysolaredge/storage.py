"""Durable key/value stores backing the response cache.

The cache only needs string keys and string values, mirroring a browser's
``localStorage``.  Access is synchronous on purpose: under a single asyncio
loop a read followed by a write never interleaves with another task.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from pysolaredge.exceptions import StorageError

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Structural storage interface used by :class:`ResponseCache`.

    Test doubles only need these three methods.
    """

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStore:
    """Process-local store; contents are lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Store persisted as a single JSON object on disk.

    The file is read lazily on first access and rewritten atomically after
    every mutation, so entries survive process restarts.  A missing file is
    an empty store.  A corrupt file is logged and replaced on the next
    write.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data
        data: dict[str, str] = {}
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            text = ""
        except OSError as exc:
            _logger.warning("Could not read cache file %s: %s", self._path, exc)
            text = ""
        if text.strip():
            try:
                loaded = json.loads(text)
            except json.JSONDecodeError:
                _logger.warning("Cache file %s is not valid JSON; starting empty", self._path)
                loaded = {}
            if isinstance(loaded, dict):
                data = {str(k): v for k, v in loaded.items() if isinstance(v, str)}
            else:
                _logger.warning("Cache file %s does not hold an object; starting empty", self._path)
        self._data = data
        return data

    def _flush(self) -> None:
        data = self._load()
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, separators=(",", ":"))
                os.replace(tmp_name, self._path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise StorageError(f"Could not write cache file {self._path}: {exc}") from exc

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        self._load()[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._flush()
