"""Response cache for completed transcriptions."""

from .fingerprint import DEFAULT_SAMPLE_BYTES, compute_fingerprint
from .response_cache import DEFAULT_MAX_ENTRIES, CacheEntry, CacheStats, ResponseCache

__all__ = [
    "DEFAULT_MAX_ENTRIES",
    "DEFAULT_SAMPLE_BYTES",
    "CacheEntry",
    "CacheStats",
    "ResponseCache",
    "compute_fingerprint",
]
