"""Persistence of conversion results keyed by content-derived identifiers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import json
import logging
from pathlib import Path
import tempfile
from threading import Lock
import time
from typing import Any, Protocol, runtime_checkable

from ..exceptions import CacheStorageError


_log = logging.getLogger(__name__)

ENTRY_SUFFIX = ".json"

_CLOCK_LOCK = Lock()
_LAST_TIMESTAMP = 0


def current_timestamp() -> int:
    """Return the current epoch time in milliseconds, never going backwards."""
    global _LAST_TIMESTAMP
    with _CLOCK_LOCK:
        now = max(time.time_ns() // 1_000_000, _LAST_TIMESTAMP)
        _LAST_TIMESTAMP = now
        return now


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Stored conversion output and its creation time."""

    content: str
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {"content": self.content, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> CacheEntry:
        """Build an entry from its JSON envelope, rejecting malformed payloads."""
        content = payload.get("content")
        timestamp = payload.get("timestamp")
        if not isinstance(content, str):
            raise ValueError("Cache entry is missing its 'content' string.")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise ValueError("Cache entry is missing its integer 'timestamp'.")
        return cls(content=content, timestamp=timestamp)


@runtime_checkable
class CacheStore(Protocol):
    """Key/value capability used by the conversion orchestrator."""

    def get(self, key: str) -> CacheEntry | None: ...

    def set(self, key: str, content: str) -> CacheEntry: ...


class MemoryCacheStore:
    """Process-local store backed by a dictionary."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = Lock()

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, content: str) -> CacheEntry:
        entry = CacheEntry(content=content, timestamp=current_timestamp())
        with self._lock:
            self._entries[key] = entry
        return entry

    def clear(self) -> int:
        """Drop every entry and return how many were removed."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class FileCacheStore:
    """Store writing one JSON envelope per key inside a directory.

    Entries are written to a temporary file in the same directory and moved
    into place, so readers see either the previous entry or the new one.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        """Return the file holding the entry for ``key``."""
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise CacheStorageError(f"Invalid cache key '{key}'.")
        return self.root / f"{key}{ENTRY_SUFFIX}"

    def get(self, key: str) -> CacheEntry | None:
        path = self.path_for(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise CacheStorageError(f"Unable to read cache entry '{path}': {exc}") from exc

        try:
            payload = json.loads(raw)
            if not isinstance(payload, dict):
                raise ValueError("Cache entry must be a JSON object.")
            return CacheEntry.from_dict(payload)
        except ValueError as exc:
            raise CacheStorageError(f"Corrupted cache entry '{path}': {exc}") from exc

    def set(self, key: str, content: str) -> CacheEntry:
        path = self.path_for(key)
        entry = CacheEntry(content=content, timestamp=current_timestamp())
        tmp_path: Path | None = None
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.root,
                prefix=f".{key}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_path = Path(handle.name)
                json.dump(entry.to_dict(), handle, ensure_ascii=False)
            tmp_path.replace(path)
        except (OSError, UnicodeEncodeError) as exc:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise CacheStorageError(f"Unable to write cache entry '{path}': {exc}") from exc

        _log.debug("stored cache entry %s", path)
        return entry

    def keys(self) -> list[str]:
        """Return the keys currently stored, sorted."""
        if not self.root.is_dir():
            return []
        return sorted(path.stem for path in self.root.glob(f"*{ENTRY_SUFFIX}"))

    def clear(self) -> int:
        """Remove every entry and return how many were deleted."""
        removed = 0
        for key in self.keys():
            try:
                self.path_for(key).unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise CacheStorageError(f"Unable to remove cache entry '{key}': {exc}") from exc
            removed += 1
        return removed


__all__ = [
    "ENTRY_SUFFIX",
    "CacheEntry",
    "CacheStore",
    "FileCacheStore",
    "MemoryCacheStore",
    "current_timestamp",
]
