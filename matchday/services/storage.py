"""
Key-value storage backends for persisted match state.

The persistence service only needs an asynchronous string-keyed store. Two
backends are provided: an in-memory dict and a directory of JSON files.
"""
import asyncio
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from .errors import PersistenceError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Asynchronous string-keyed store. All methods may raise PersistenceError."""

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        pass

    @abstractmethod
    async def clear(self) -> None:
        pass


class InMemoryStore(KeyValueStore):
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    async def clear(self) -> None:
        self._items.clear()

    def keys(self):
        return list(self._items)


class JsonFileStore(KeyValueStore):
    """
    Store each key as a file inside ``directory``.

    Writes go to a temporary file first and are moved into place, so a crash
    mid-write never leaves a truncated value behind. Blocking file I/O runs in
    a worker thread.
    """

    SUFFIX = ".json"

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        safe = "".join(ch if ch.isalnum() or ch in "._-" else "_" for ch in key)
        return self.directory / f"{safe}{self.SUFFIX}"

    def _write(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self._path_for(key)
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, target)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _read(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _remove(self, key: str) -> None:
        path = self._path_for(key)
        if path.exists():
            path.unlink()

    def _clear(self) -> None:
        if not self.directory.exists():
            return
        for path in self.directory.glob(f"*{self.SUFFIX}"):
            path.unlink()

    async def set_item(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._write, key, value)
        except OSError as e:
            raise PersistenceError(f"Could not write {key!r}: {e}") from e

    async def get_item(self, key: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._read, key)
        except OSError as e:
            raise PersistenceError(f"Could not read {key!r}: {e}") from e

    async def remove_item(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._remove, key)
        except OSError as e:
            raise PersistenceError(f"Could not remove {key!r}: {e}") from e

    async def clear(self) -> None:
        try:
            await asyncio.to_thread(self._clear)
        except OSError as e:
            raise PersistenceError(f"Could not clear {self.directory}: {e}") from e
        logger.info("Cleared file store at %s", self.directory)
