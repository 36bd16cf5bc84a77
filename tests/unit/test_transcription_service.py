"""Tests for the TranscriptionService facade."""

from unittest.mock import AsyncMock, Mock

import pytest

from interview_stt.cache import ResponseCache
from interview_stt.errors import (
    AllProvidersFailedError,
    AudioTooShortError,
    ConversionFailedError,
    EmptyAudioError,
    ProviderError,
    UnsupportedEncodingError,
)
from interview_stt.models import AudioEncoding
from interview_stt.orchestration import FallbackOrchestrator
from interview_stt.services.format_normalizer import FormatNormalizer
from interview_stt.services.transcription import TranscriptionService


@pytest.fixture
def cache():
    return ResponseCache(max_entries=10)


def _service(providers, cache=None, **kwargs):
    return TranscriptionService(FallbackOrchestrator(providers), cache=cache, **kwargs)


class TestValidation:
    @pytest.mark.asyncio
    async def test_empty_buffer(self, make_provider, cache):
        provider = make_provider("a")
        service = _service([provider], cache)

        with pytest.raises(EmptyAudioError):
            await service.transcribe_async(b"", "webm")

        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_short_clip_touches_nothing(self, make_provider, cache):
        provider = make_provider("a")
        service = _service([provider], cache, min_audio_bytes=1000)

        with pytest.raises(AudioTooShortError) as exc_info:
            await service.transcribe_async(b"\x00" * 50, "webm", "en")

        assert exc_info.value.size == 50
        assert "at least 1 second" in str(exc_info.value)
        assert provider.calls == []
        assert cache.stats()["misses"] == 0
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_unsupported_encoding(self, make_provider, webm_clip_bytes):
        with pytest.raises(UnsupportedEncodingError):
            await _service([make_provider("a")]).transcribe_async(webm_clip_bytes, "aiff")

    @pytest.mark.asyncio
    async def test_mime_style_encoding_is_accepted(self, make_provider, webm_clip_bytes):
        provider = make_provider("a")
        await _service([provider]).transcribe_async(webm_clip_bytes, "audio/webm;codecs=opus")
        assert provider.calls[0][1] is AudioEncoding.WEBM


class TestCaching:
    @pytest.mark.asyncio
    async def test_identical_request_is_served_from_cache(self, make_provider, cache, webm_clip_bytes):
        provider = make_provider("a", text="hello world", confidence=0.8)
        service = _service([provider], cache)

        first = await service.transcribe_async(webm_clip_bytes, "webm", "en")
        second = await service.transcribe_async(webm_clip_bytes, "webm", "en")

        assert len(provider.calls) == 1
        assert first.served_from_cache is False
        assert second.served_from_cache is True
        assert second.elapsed_ms == 0
        assert second.text == first.text
        assert second.provider_name == "a"
        assert second.confidence == 0.8

    @pytest.mark.asyncio
    async def test_language_is_part_of_the_key(self, make_provider, cache, webm_clip_bytes):
        provider = make_provider("a")
        service = _service([provider], cache)

        await service.transcribe_async(webm_clip_bytes, "webm", "en")
        await service.transcribe_async(webm_clip_bytes, "webm", "de")

        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_failures_are_not_cached(self, make_provider, cache, webm_clip_bytes):
        provider = make_provider("a", error=ProviderError("a", "HTTP 503"))
        service = _service([provider], cache)

        for _ in range(2):
            with pytest.raises(AllProvidersFailedError):
                await service.transcribe_async(webm_clip_bytes, "webm")

        assert len(provider.calls) == 2
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_caching_disabled(self, make_provider, webm_clip_bytes):
        provider = make_provider("a")
        service = _service([provider])

        await service.transcribe_async(webm_clip_bytes, "webm")
        await service.transcribe_async(webm_clip_bytes, "webm")

        assert len(provider.calls) == 2
        assert service.get_cache_stats() is None

    @pytest.mark.asyncio
    async def test_cache_stats(self, make_provider, cache, webm_clip_bytes):
        service = _service([make_provider("a")], cache)
        await service.transcribe_async(webm_clip_bytes, "webm")
        await service.transcribe_async(webm_clip_bytes, "webm")

        stats = service.get_cache_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["size"] == 1


class TestPreprocessing:
    @pytest.mark.asyncio
    async def test_clip_is_converted_before_chain(self, make_provider, webm_clip_bytes):
        normalizer = Mock()
        normalizer.convert = AsyncMock(return_value=b"RIFF" + b"\x00" * 2000)
        provider = make_provider("a")
        service = _service([provider], normalizer=normalizer, preprocess_encoding="wav")

        await service.transcribe_async(webm_clip_bytes, "webm", "en")

        normalizer.convert.assert_awaited_once_with(
            webm_clip_bytes, AudioEncoding.WEBM, AudioEncoding.WAV
        )
        audio, encoding, language = provider.calls[0]
        assert audio.startswith(b"RIFF")
        assert encoding is AudioEncoding.WAV
        assert language == "en"

    @pytest.mark.asyncio
    async def test_conversion_failure_uses_original(self, make_provider, webm_clip_bytes):
        normalizer = Mock()
        normalizer.convert = AsyncMock(side_effect=ConversionFailedError("ffmpeg exited 1"))
        provider = make_provider("a")
        service = _service([provider], normalizer=normalizer, preprocess_encoding="wav")

        result = await service.transcribe_async(webm_clip_bytes, "webm")

        assert result.provider_name == "a"
        assert provider.calls[0][:2] == (webm_clip_bytes, AudioEncoding.WEBM)

    @pytest.mark.asyncio
    async def test_cache_key_uses_original_clip(self, make_provider, cache, webm_clip_bytes):
        normalizer = Mock()
        normalizer.convert = AsyncMock(return_value=b"RIFF" + b"\x00" * 2000)
        provider = make_provider("a")
        service = _service([provider], cache, normalizer=normalizer, preprocess_encoding="wav")

        await service.transcribe_async(webm_clip_bytes, "webm")
        second = await service.transcribe_async(webm_clip_bytes, "webm")

        assert second.served_from_cache is True
        assert normalizer.convert.await_count == 1


class TestBrokenConverter:
    """A binary that exists but cannot run must not fail the request."""

    @pytest.fixture
    def broken_normalizer(self, tmp_path):
        bogus = tmp_path / "ffmpeg"
        bogus.write_bytes(b"\x00garbage\x00" * 16)
        bogus.chmod(0o755)
        return FormatNormalizer(str(bogus), timeout=5.0)

    @pytest.mark.asyncio
    async def test_preprocessing_falls_back_to_original(
        self, make_provider, broken_normalizer, webm_clip_bytes
    ):
        provider = make_provider("a")
        service = _service([provider], normalizer=broken_normalizer, preprocess_encoding="wav")

        result = await service.transcribe_async(webm_clip_bytes, "webm")

        assert result.provider_name == "a"
        assert provider.calls[0][:2] == (webm_clip_bytes, AudioEncoding.WEBM)

    @pytest.mark.asyncio
    async def test_wav_only_provider_still_receives_original(
        self, make_provider, broken_normalizer, webm_clip_bytes
    ):
        provider = make_provider("a", accepted={AudioEncoding.WAV})
        service = TranscriptionService(FallbackOrchestrator([provider], broken_normalizer))

        result = await service.transcribe_async(webm_clip_bytes, "webm")

        assert result.provider_name == "a"
        assert provider.calls[0][:2] == (webm_clip_bytes, AudioEncoding.WEBM)


class TestStatus:
    def test_provider_status(self, make_provider):
        service = _service(
            [make_provider("b", priority=3), make_provider("a", priority=1)], ResponseCache()
        )
        status = service.get_provider_status()

        assert status["primary"] == "a"
        assert status["total"] == 2
        assert status["caching"] is True
        assert [p["name"] for p in status["providers"]] == ["a", "b"]
        assert service.get_configured_providers() == ["a", "b"]

    def test_empty_status(self):
        status = _service([]).get_provider_status()
        assert status["primary"] is None
        assert status["providers"] == []

    @pytest.mark.asyncio
    async def test_health_keyed_by_name(self, make_provider):
        service = _service([make_provider("a"), make_provider("b", priority=2)])
        health = await service.check_provider_health()

        assert set(health) == {"a", "b"}
        assert health["a"]["healthy"] is True

    def test_sync_wrapper(self, make_provider, webm_clip_bytes):
        result = _service([make_provider("a", text="sync")]).transcribe(webm_clip_bytes, "webm")
        assert result.text == "sync"


class TestFromConfig:
    def test_wires_chain_and_cache(self, make_config):
        service = TranscriptionService.from_config(
            make_config(deepgram_api_key="dg", openai_api_key="sk", cache_max_entries=7)
        )

        assert service.get_configured_providers() == ["deepgram", "openai"]
        assert service.cache.max_entries == 7
        assert service.normalizer.available is False

    def test_caching_can_be_disabled(self, make_config):
        service = TranscriptionService.from_config(make_config(enable_caching=False))
        assert service.cache is None
        assert service.get_provider_status()["total"] == 0
