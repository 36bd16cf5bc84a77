"""Tests for the response cache and its fingerprints."""

import threading

import pytest

from interview_stt.cache import ResponseCache, compute_fingerprint
from interview_stt.models import AudioEncoding, TranscriptionResult


def _result(text: str = "hello world", elapsed_ms: int = 250) -> TranscriptionResult:
    return TranscriptionResult(text=text, provider_name="fake", elapsed_ms=elapsed_ms)


class TestComputeFingerprint:
    """Tests for compute_fingerprint()."""

    def test_same_input_same_fingerprint(self):
        data = b"\x01\x02" * 5000
        assert compute_fingerprint(data, AudioEncoding.WEBM, "en") == compute_fingerprint(
            data, AudioEncoding.WEBM, "en"
        )

    def test_encoding_and_language_are_part_of_the_key(self):
        data = b"\x01" * 3000
        base = compute_fingerprint(data, AudioEncoding.WEBM, "en")
        assert compute_fingerprint(data, AudioEncoding.OGG, "en") != base
        assert compute_fingerprint(data, AudioEncoding.WEBM, "de") != base
        assert compute_fingerprint(data, AudioEncoding.WEBM, None) != base

    def test_length_is_part_of_the_key(self):
        assert compute_fingerprint(b"\x00" * 100, AudioEncoding.WAV) != compute_fingerprint(
            b"\x00" * 101, AudioEncoding.WAV
        )

    def test_head_and_tail_are_sampled(self):
        data = bytearray(b"\x00" * 20000)
        base = compute_fingerprint(bytes(data), AudioEncoding.WAV, sample_size=4096)
        data[-1] = 1
        assert compute_fingerprint(bytes(data), AudioEncoding.WAV, sample_size=4096) != base

    def test_middle_bytes_are_not_sampled(self):
        """Only head and tail are hashed; a middle-only change collides by design."""
        original = b"\x00" * 20000
        changed = bytearray(original)
        changed[10000] = 1
        assert compute_fingerprint(original, AudioEncoding.WAV, sample_size=4096) == (
            compute_fingerprint(bytes(changed), AudioEncoding.WAV, sample_size=4096)
        )


class TestResponseCache:
    """Tests for ResponseCache."""

    def test_miss_returns_none(self):
        cache = ResponseCache(max_entries=3)
        assert cache.get("missing") is None
        assert cache.lookup("missing") is None

    def test_hit_is_marked_cached_with_zero_elapsed(self):
        cache = ResponseCache(max_entries=3)
        cache.put("fp", _result(elapsed_ms=900))

        entry = cache.get("fp")
        assert entry is not None
        assert entry.fingerprint == "fp"
        assert entry.result.served_from_cache is True
        assert entry.result.elapsed_ms == 0
        assert entry.result.text == "hello world"

    def test_stored_result_is_not_mutated_by_reads(self):
        cache = ResponseCache(max_entries=3)
        original = _result(elapsed_ms=900)
        cache.put("fp", original)
        cache.lookup("fp")
        assert original.served_from_cache is False
        assert original.elapsed_ms == 900

    def test_eviction_drops_first_inserted(self):
        capacity = 4
        cache = ResponseCache(max_entries=capacity)
        keys = [f"fp-{i}" for i in range(capacity + 1)]
        for key in keys:
            cache.put(key, _result(key))

        assert len(cache) == capacity
        assert keys[0] not in cache
        for key in keys[1:]:
            assert key in cache
        assert cache.stats()["evictions"] == 1

    def test_reads_do_not_refresh_position(self):
        cache = ResponseCache(max_entries=2)
        cache.put("a", _result("a"))
        cache.put("b", _result("b"))
        cache.lookup("a")
        cache.put("c", _result("c"))

        assert "a" not in cache
        assert "b" in cache
        assert "c" in cache

    def test_reput_replaces_value_without_moving_entry(self):
        cache = ResponseCache(max_entries=2)
        cache.put("a", _result("first"))
        cache.put("b", _result("b"))
        cache.put("a", _result("second"))
        assert cache.lookup("a").text == "second"

        cache.put("c", _result("c"))
        assert "a" not in cache
        assert len(cache) == 2

    def test_stats_and_clear(self):
        cache = ResponseCache(max_entries=5)
        cache.put("a", _result())
        cache.lookup("a")
        cache.lookup("b")

        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["size"] == 1
        assert stats["max_entries"] == 5
        assert stats["hit_rate"] == 0.5

        cache.clear()
        assert len(cache) == 0

    def test_fingerprint_uses_configured_sample_size(self):
        cache = ResponseCache(max_entries=5, sample_size=16)
        data = b"\x07" * 100
        assert cache.fingerprint(data, AudioEncoding.WEBM, "en") == compute_fingerprint(
            data, AudioEncoding.WEBM, "en", 16
        )

    @pytest.mark.parametrize("kwargs", [{"max_entries": 0}, {"sample_size": 0}])
    def test_invalid_sizes(self, kwargs):
        with pytest.raises(ValueError):
            ResponseCache(**kwargs)

    def test_concurrent_puts_respect_capacity(self):
        cache = ResponseCache(max_entries=50)

        def writer(offset: int):
            for i in range(200):
                cache.put(f"{offset}-{i}", _result())

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(cache) == 50
        assert cache.stats()["evictions"] == 8 * 200 - 50
