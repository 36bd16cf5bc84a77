"""ElevenLabs speech-to-text provider."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..errors import ProviderError
from ..models import AudioEncoding, ProviderTranscript
from .base import BaseTranscriptionProvider

logger = logging.getLogger(__name__)

try:
    from elevenlabs.client import AsyncElevenLabs

    PROVIDER_AVAILABLE = True
except ImportError as e:
    logger.warning(f"ElevenLabs provider dependencies not installed: {e}")
    PROVIDER_AVAILABLE = False
    AsyncElevenLabs = None


class ElevenLabsTranscriber(BaseTranscriptionProvider):
    """ElevenLabs Scribe transcription via multipart upload."""

    NAME = "elevenlabs"
    DEFAULT_PRIORITY = 6
    FEATURES = ["basic_transcription", "language_detection"]

    def __init__(self, api_key: Optional[str] = None, model: str = "scribe_v1", **kwargs: Any):
        super().__init__(api_key, **kwargs)
        self.model = model

    @classmethod
    def from_config(cls, config) -> Optional["ElevenLabsTranscriber"]:
        if not config.elevenlabs_api_key:
            return None
        return cls(
            api_key=config.elevenlabs_api_key,
            model=config.elevenlabs_model,
            priority=config.priority_for(cls.NAME, cls.DEFAULT_PRIORITY),
            request_timeout=config.request_timeout,
            probe_timeout=config.probe_timeout,
        )

    def check_ready(self) -> None:
        super().check_ready()
        if not PROVIDER_AVAILABLE:
            raise ProviderError(self.NAME, "ElevenLabs SDK not installed")

    def _create_client(self, http_client: httpx.AsyncClient):
        return AsyncElevenLabs(
            api_key=self.api_key, timeout=self.request_timeout, httpx_client=http_client
        )

    async def _transcribe_impl(
        self, audio: bytes, encoding: AudioEncoding, language: Optional[str]
    ) -> ProviderTranscript:
        kwargs = {"model_id": self.model}
        if language:
            kwargs["language_code"] = language
        # Connection pool is scoped to this call.
        async with httpx.AsyncClient(timeout=self.request_timeout) as http_client:
            client = self._create_client(http_client)
            response = await client.speech_to_text.convert(
                file=(f"audio{encoding.suffix}", audio, encoding.mime_type), **kwargs
            )
        return ProviderTranscript(text=getattr(response, "text", "") or "")
