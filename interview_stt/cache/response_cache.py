"""In-memory, bounded response cache keyed by audio fingerprints."""
from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from ..models import AudioEncoding, TranscriptionResult
from .fingerprint import DEFAULT_SAMPLE_BYTES, compute_fingerprint

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 500


@dataclass(frozen=True)
class CacheEntry:
    """A stored transcription result."""

    fingerprint: str
    result: TranscriptionResult
    inserted_at: float = field(default_factory=time.time)


@dataclass
class CacheStats:
    """Counters reported by :meth:`ResponseCache.stats`."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class ResponseCache:
    """Process-local cache of successful transcriptions.

    Eviction is FIFO by insertion order, not LRU: reads never reorder
    entries, and re-inserting an existing fingerprint replaces its result in
    place without refreshing its position. One lock guards every
    read-modify-write, so the cache is safe to share between threads and
    concurrent requests.

    Nothing is persisted; a restart starts from an empty cache.
    """

    def __init__(
        self, max_entries: int = DEFAULT_MAX_ENTRIES, sample_size: int = DEFAULT_SAMPLE_BYTES
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if sample_size < 1:
            raise ValueError("sample_size must be at least 1")
        self.max_entries = max_entries
        self.sample_size = sample_size
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._stats = CacheStats()

    def fingerprint(
        self, data: bytes, encoding: AudioEncoding, language: Optional[str] = None
    ) -> str:
        """Key for a clip, sampled with this cache's sample size."""
        return compute_fingerprint(data, encoding, language, self.sample_size)

    def get(self, fingerprint: str) -> Optional[CacheEntry]:
        """Look up an entry.

        Returns:
            The entry with its result marked as served from cache (zero
            elapsed time), or None on a miss
        """
        with self._lock:
            entry = self._entries.get(fingerprint)
            if entry is None:
                self._stats.misses += 1
                return None
            self._stats.hits += 1
        return replace(entry, result=entry.result.as_cached())

    def lookup(self, fingerprint: str) -> Optional[TranscriptionResult]:
        """Return the cached result for ``fingerprint``, or None."""
        entry = self.get(fingerprint)
        return entry.result if entry else None

    def put(self, fingerprint: str, result: TranscriptionResult) -> None:
        """Store a result, evicting the oldest entry if the cap is exceeded."""
        with self._lock:
            existing = self._entries.get(fingerprint)
            if existing is not None:
                self._entries[fingerprint] = replace(existing, result=result)
                return

            self._entries[fingerprint] = CacheEntry(fingerprint=fingerprint, result=result)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self._stats.evictions += 1
                logger.debug(f"Evicted cache entry {evicted[:12]}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "hits": self._stats.hits,
                "misses": self._stats.misses,
                "evictions": self._stats.evictions,
                "hit_rate": round(self._stats.hit_rate, 3),
                "size": len(self._entries),
                "max_entries": self.max_entries,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, fingerprint: object) -> bool:
        with self._lock:
            return fingerprint in self._entries
