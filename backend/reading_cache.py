from __future__ import annotations

import os
import threading
import time
from collections import OrderedDict
from typing import Any, Optional

DEFAULT_MAX_ITEMS = 256
DEFAULT_TTL_SEC = 1800


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


class ReadingCache:
    """Bounded LRU cache for generated readings, with optional per-entry TTL.

    Only narrative output is stored here; decomposition results are always
    recomputed.
    """

    def __init__(self, max_items: Optional[int] = None, default_ttl: Optional[int] = None):
        configured_max = max_items if max_items is not None else _env_int("READING_CACHE_MAX_ITEMS", DEFAULT_MAX_ITEMS)
        self._max_items = max(1, configured_max)
        self.default_ttl = default_ttl if default_ttl is not None else _env_int("READING_CACHE_TTL_SEC", DEFAULT_TTL_SEC)
        self._store: OrderedDict[str, tuple[Any, float | None]] = OrderedDict()
        self._lock = threading.RLock()

    def _now(self) -> float:
        return time.time()

    def _drop_expired_unlocked(self) -> None:
        now = self._now()
        for key in [k for k, (_v, expires_at) in self._store.items() if expires_at is not None and expires_at <= now]:
            self._store.pop(key, None)

    def get(self, key: str) -> Any:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and expires_at <= self._now():
                self._store.pop(key, None)
                return None
            self._store.move_to_end(key)
            return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl_sec = self.default_ttl if ttl is None else ttl
        try:
            ttl_sec = int(ttl_sec)
        except (TypeError, ValueError):
            ttl_sec = 0
        expires_at = self._now() + ttl_sec if ttl_sec > 0 else None
        with self._lock:
            self._drop_expired_unlocked()
            self._store[key] = (value, expires_at)
            self._store.move_to_end(key)
            while len(self._store) > self._max_items:
                self._store.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            self._drop_expired_unlocked()
            return len(self._store)


def reading_cache_key(profile_hash: str, prompt_version: str, model: str) -> str:
    return f"reading::{prompt_version}::{(model or '').strip().lower()}::{profile_hash}"


cache = ReadingCache()
