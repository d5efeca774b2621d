"""Build-once cache for shared system dictionaries."""

from __future__ import annotations

import hashlib
import logging
import threading
from collections.abc import Callable
from pathlib import Path

from synonym_graph.dictionary import SynonymDictionary

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str]


def content_hash(path: str | Path) -> str:
    """sha256 of a file's bytes, hex encoded."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1 << 16), b""):
            digest.update(chunk)
    return digest.hexdigest()


class DictionaryCache:
    """Holds one loaded dictionary per ``(dictionary id, content hash)``.

    ``get_or_build`` runs the builder at most once per key, even when called
    from several threads. Callers receive the shared instance and must
    :meth:`~SynonymDictionary.clone` it before loading anything on top.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, SynonymDictionary] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: CacheKey) -> SynonymDictionary | None:
        with self._lock:
            return self._entries.get(key)

    def get_or_build(
        self,
        key: CacheKey,
        build: Callable[[], SynonymDictionary],
    ) -> SynonymDictionary:
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                logger.debug("Dictionary cache hit for %s", key[0])
                return cached
            dictionary = build()
            self._entries[key] = dictionary
            return dictionary

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
