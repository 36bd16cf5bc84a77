"""Sequential provider fallback."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, Iterable, List, Optional, Tuple

from ..errors import AllProvidersFailedError, ConversionError, ProviderError
from ..models import (
    AudioClip,
    AudioEncoding,
    ProviderDescriptor,
    ProviderTranscript,
    TranscriptionResult,
)
from ..providers.base import BaseTranscriptionProvider
from ..services.format_normalizer import FormatNormalizer

logger = logging.getLogger(__name__)


class FallbackOrchestrator:
    """Try providers one at a time, in priority order, until one succeeds.

    Attempts are never run in parallel: provider calls cost latency and
    money, and the first provider normally succeeds. The provider tuple is
    fixed at construction and only read afterwards, so one orchestrator can
    serve concurrent requests.
    """

    def __init__(
        self,
        providers: Iterable[BaseTranscriptionProvider],
        normalizer: Optional[FormatNormalizer] = None,
    ) -> None:
        self._providers: Tuple[BaseTranscriptionProvider, ...] = tuple(
            sorted(providers, key=lambda p: p.priority)
        )
        self._normalizer = normalizer

    @property
    def providers(self) -> Tuple[BaseTranscriptionProvider, ...]:
        return self._providers

    @property
    def descriptors(self) -> List[ProviderDescriptor]:
        return [p.descriptor for p in self._providers]

    async def run(self, clip: AudioClip) -> TranscriptionResult:
        """Transcribe ``clip`` with the first provider that succeeds.

        Args:
            clip: Validated audio clip

        Returns:
            Result tagged with the winning provider and the elapsed time
            since the first attempt

        Raises:
            AllProvidersFailedError: If no provider is configured or every
                provider failed
        """
        if not self._providers:
            raise AllProvidersFailedError(
                "No transcription providers configured. Set at least one provider API key."
            )

        conversions: Dict[AudioEncoding, AudioClip] = {clip.encoding: clip}
        errors: Dict[str, str] = {}
        last_detail = ""
        start = time.perf_counter()

        for provider in self._providers:
            name = provider.get_provider_name()
            try:
                transcript = await self._attempt(provider, clip, conversions)
            except ProviderError as error:
                errors[name] = error.detail
                last_detail = str(error)
                logger.warning(f"Provider {name} failed: {error.detail}")
                continue

            elapsed_ms = int((time.perf_counter() - start) * 1000)
            logger.info(f"Transcribed with {name} in {elapsed_ms}ms")
            return TranscriptionResult(
                text=transcript.text,
                provider_name=name,
                elapsed_ms=elapsed_ms,
                confidence=transcript.confidence,
            )

        logger.error(f"All {len(self._providers)} transcription providers failed")
        raise AllProvidersFailedError(last_detail, errors)

    async def _attempt(
        self,
        provider: BaseTranscriptionProvider,
        clip: AudioClip,
        conversions: Dict[AudioEncoding, AudioClip],
    ) -> ProviderTranscript:
        """Run one provider attempt.

        Readiness is checked before any conversion, so a provider that cannot
        run is skipped without spawning ffmpeg.

        Raises:
            ProviderError: On any failure of this attempt
        """
        name = provider.get_provider_name()
        provider.check_ready()
        payload = await self._prepare(clip, provider.descriptor, conversions)
        logger.debug(f"Trying {name} with {payload.encoding.value} ({payload.size} bytes)")

        try:
            return await asyncio.wait_for(
                provider.transcribe_async(payload.data, payload.encoding, payload.language),
                timeout=provider.call_timeout,
            )
        except asyncio.TimeoutError:
            raise ProviderError(name, f"timed out after {provider.call_timeout}s") from None
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(name, f"{type(e).__name__}: {e}") from e

    async def _prepare(
        self,
        clip: AudioClip,
        descriptor: ProviderDescriptor,
        conversions: Dict[AudioEncoding, AudioClip],
    ) -> AudioClip:
        """Return ``clip`` in the encoding ``descriptor`` wants, converting at most once."""
        target = descriptor.target_for(clip.encoding)
        if target in conversions:
            return conversions[target]

        if self._normalizer is None:
            logger.debug(f"No normalizer; sending {clip.encoding.value} to {descriptor.name} as-is")
            converted = clip
        else:
            try:
                data = await self._normalizer.convert(clip.data, clip.encoding, target)
            except ConversionError as e:
                logger.warning(
                    f"Conversion {clip.encoding.value} -> {target.value} failed, "
                    f"sending original audio: {e}"
                )
                converted = clip
            else:
                converted = clip.with_audio(data, target)

        conversions[target] = converted
        return converted
