"""Transcription service facade."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

from ..cache import ResponseCache
from ..config import PipelineConfig, load_config
from ..errors import ConversionError
from ..models import AudioClip, AudioEncoding, TranscriptionResult
from ..orchestration import FallbackOrchestrator
from ..providers import TranscriptionProviderFactory
from ..utils.validation import DEFAULT_MIN_AUDIO_BYTES, build_clip, validate_clip
from .format_normalizer import FormatNormalizer

logger = logging.getLogger(__name__)


class TranscriptionService:
    """Single entry point for transcribing a recorded clip.

    A request moves through validation, cache lookup, optional
    preprocessing, provider fallback and cache write. Validation failures
    return before the cache or any provider is touched. Failed requests are
    never cached, so a retry can succeed once a provider recovers.
    """

    def __init__(
        self,
        orchestrator: FallbackOrchestrator,
        cache: Optional[ResponseCache] = None,
        normalizer: Optional[FormatNormalizer] = None,
        min_audio_bytes: int = DEFAULT_MIN_AUDIO_BYTES,
        preprocess_encoding: Union[str, AudioEncoding, None] = None,
    ):
        """Initialize the service.

        Args:
            orchestrator: Provider fallback chain
            cache: Response cache; None disables caching
            normalizer: Used for the optional preprocessing step
            min_audio_bytes: Smallest clip accepted
            preprocess_encoding: Encoding every clip is converted to before
                the provider chain, or None to skip preprocessing
        """
        self.orchestrator = orchestrator
        self.cache = cache
        self.normalizer = normalizer
        self.min_audio_bytes = min_audio_bytes
        self.preprocess_encoding = (
            AudioEncoding.parse(preprocess_encoding) if preprocess_encoding else None
        )

    @classmethod
    def from_config(cls, config: Optional[PipelineConfig] = None) -> "TranscriptionService":
        """Wire the cache, normalizer and provider chain from configuration."""
        config = config or load_config()
        normalizer = FormatNormalizer.from_config(config)
        cache = (
            ResponseCache(config.cache_max_entries, config.cache_sample_bytes)
            if config.enable_caching
            else None
        )
        providers = TranscriptionProviderFactory.build_chain(config)
        return cls(
            FallbackOrchestrator(providers, normalizer),
            cache=cache,
            normalizer=normalizer,
            min_audio_bytes=config.min_audio_bytes,
            preprocess_encoding=config.preprocess_encoding,
        )

    async def transcribe_async(
        self,
        audio_bytes: bytes,
        encoding: Union[str, AudioEncoding],
        language: Optional[str] = None,
    ) -> TranscriptionResult:
        """Transcribe a clip.

        Args:
            audio_bytes: Recorded audio
            encoding: Declared encoding, e.g. "webm" or "audio/webm;codecs=opus"
            language: Optional language hint such as "en"

        Returns:
            TranscriptionResult; ``served_from_cache`` is set on cache hits

        Raises:
            AudioValidationError: If the clip is empty, too short or in an
                unsupported encoding
            AllProvidersFailedError: If no provider could transcribe the clip
        """
        clip = build_clip(audio_bytes, encoding, language)
        validate_clip(clip, self.min_audio_bytes)

        fingerprint = None
        if self.cache is not None:
            fingerprint = self.cache.fingerprint(clip.data, clip.encoding, clip.language)
            cached = self.cache.lookup(fingerprint)
            if cached is not None:
                logger.debug(f"Cache hit for {clip!r} (provider {cached.provider_name})")
                return cached

        clip = await self._preprocess(clip)
        result = await self.orchestrator.run(clip)

        if self.cache is not None and fingerprint is not None:
            self.cache.put(fingerprint, result)
        return result

    def transcribe(
        self,
        audio_bytes: bytes,
        encoding: Union[str, AudioEncoding],
        language: Optional[str] = None,
    ) -> TranscriptionResult:
        """Blocking wrapper around :meth:`transcribe_async`."""
        return asyncio.run(self.transcribe_async(audio_bytes, encoding, language))

    async def _preprocess(self, clip: AudioClip) -> AudioClip:
        target = self.preprocess_encoding
        if target is None or target == clip.encoding or self.normalizer is None:
            return clip
        try:
            data = await self.normalizer.convert(clip.data, clip.encoding, target)
        except ConversionError as e:
            logger.warning(f"Preprocessing to {target.value} failed, using original audio: {e}")
            return clip
        return clip.with_audio(data, target)

    def get_provider_status(self) -> Dict[str, Any]:
        """Describe the provider chain in attempt order."""
        descriptors = self.orchestrator.descriptors
        return {
            "providers": [d.to_dict() for d in descriptors],
            "primary": descriptors[0].name if descriptors else None,
            "total": len(descriptors),
            "caching": self.cache is not None,
        }

    def get_configured_providers(self) -> List[str]:
        return [d.name for d in self.orchestrator.descriptors]

    async def check_provider_health(self) -> Dict[str, Dict[str, Any]]:
        """Probe every provider concurrently; keyed by provider name."""
        providers = self.orchestrator.providers
        results = await asyncio.gather(*(p.health_check_async() for p in providers))
        return {p.get_provider_name(): result for p, result in zip(providers, results)}

    def get_cache_stats(self) -> Optional[Dict[str, Any]]:
        return self.cache.stats() if self.cache is not None else None
