"""Deepgram prerecorded transcription provider.

Sends the clip inline through the Deepgram SDK's async REST client and reads
the transcript and confidence of the first alternative.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..errors import ProviderError
from ..models import AudioEncoding, ProviderTranscript
from .base import BaseTranscriptionProvider

logger = logging.getLogger(__name__)

# Check for Deepgram SDK availability
try:
    from deepgram import DeepgramClient, DeepgramClientOptions, PrerecordedOptions

    PROVIDER_AVAILABLE = True
except ImportError as e:
    logger.warning(f"Deepgram provider dependencies not installed: {e}")
    PROVIDER_AVAILABLE = False
    DeepgramClient = None
    DeepgramClientOptions = None
    PrerecordedOptions = None


class DeepgramTranscriber(BaseTranscriptionProvider):
    """Deepgram prerecorded API with smart formatting."""

    NAME = "deepgram"
    DEFAULT_PRIORITY = 2
    FEATURES = ["basic_transcription", "smart_format", "language_detection"]

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "nova-2",
        api_url: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(api_key, **kwargs)
        self.model = model
        self.api_url = api_url

    @classmethod
    def from_config(cls, config) -> Optional["DeepgramTranscriber"]:
        if not config.deepgram_api_key:
            return None
        return cls(
            api_key=config.deepgram_api_key,
            model=config.deepgram_model,
            api_url=config.deepgram_api_url,
            priority=config.priority_for(cls.NAME, cls.DEFAULT_PRIORITY),
            request_timeout=config.request_timeout,
            probe_timeout=config.probe_timeout,
        )

    def _create_client(self):
        """Create a Deepgram client, honouring an endpoint override."""
        if self.api_url:
            return DeepgramClient(self.api_key, DeepgramClientOptions(url=self.api_url))
        return DeepgramClient(self.api_key)

    def _build_options(self, language: Optional[str]):
        """Build request options; no language hint means auto-detection."""
        if language:
            return PrerecordedOptions(model=self.model, smart_format=True, language=language)
        return PrerecordedOptions(model=self.model, smart_format=True, detect_language=True)

    def check_ready(self) -> None:
        super().check_ready()
        if not PROVIDER_AVAILABLE:
            raise ProviderError(self.NAME, "Deepgram SDK not installed")

    async def _transcribe_impl(
        self, audio: bytes, encoding: AudioEncoding, language: Optional[str]
    ) -> ProviderTranscript:
        client = self._create_client()
        options = self._build_options(language)
        response = await client.listen.asyncrest.v("1").transcribe_file(
            {"buffer": audio},
            options,
            timeout=httpx.Timeout(self.request_timeout, connect=10.0),
        )
        return self._parse_response(response)

    def _parse_response(self, response: Any) -> ProviderTranscript:
        try:
            alternative = response.results.channels[0].alternatives[0]
        except (AttributeError, IndexError, TypeError) as e:
            raise ProviderError(self.NAME, f"malformed response: {e}") from e
        return ProviderTranscript(
            text=alternative.transcript or "",
            confidence=getattr(alternative, "confidence", None),
        )
