"""OpenAI Whisper API transcription provider."""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..errors import ProviderError
from ..models import ALL_ENCODINGS, AudioEncoding, ProviderTranscript
from .base import BaseTranscriptionProvider

logger = logging.getLogger(__name__)

try:
    from openai import AsyncOpenAI

    PROVIDER_AVAILABLE = True
except ImportError as e:
    logger.warning(f"OpenAI provider dependencies not installed: {e}")
    PROVIDER_AVAILABLE = False
    AsyncOpenAI = None


class OpenAIWhisperTranscriber(BaseTranscriptionProvider):
    """Hosted Whisper through the OpenAI audio transcription endpoint.

    The endpoint rejects raw ``.opus`` uploads; those clips are converted to
    Ogg/Opus, which it accepts.
    """

    NAME = "openai"
    DEFAULT_PRIORITY = 5
    ACCEPTED_ENCODINGS = ALL_ENCODINGS - {AudioEncoding.OPUS}
    CONVERSION_TARGET = AudioEncoding.OGG

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "whisper-1",
        base_url: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(api_key, **kwargs)
        self.model = model
        self.base_url = base_url

    @classmethod
    def from_config(cls, config) -> Optional["OpenAIWhisperTranscriber"]:
        if not config.openai_api_key:
            return None
        return cls(
            api_key=config.openai_api_key,
            model=config.openai_model,
            base_url=config.openai_base_url,
            priority=config.priority_for(cls.NAME, cls.DEFAULT_PRIORITY),
            request_timeout=config.request_timeout,
            probe_timeout=config.probe_timeout,
        )

    def _create_client(self):
        # One attempt per call; the orchestrator owns the time bound.
        return AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.request_timeout,
            max_retries=0,
        )

    def check_ready(self) -> None:
        super().check_ready()
        if not PROVIDER_AVAILABLE:
            raise ProviderError(self.NAME, "OpenAI SDK not installed")

    async def _transcribe_impl(
        self, audio: bytes, encoding: AudioEncoding, language: Optional[str]
    ) -> ProviderTranscript:
        kwargs = {"model": self.model, "response_format": "json"}
        if language:
            kwargs["language"] = language
        async with self._create_client() as client:
            response = await client.audio.transcriptions.create(
                file=(f"audio{encoding.suffix}", audio), **kwargs
            )
        return ProviderTranscript(text=getattr(response, "text", "") or "")
