"""Google Cloud Speech-to-Text provider.

Uses the synchronous ``recognize`` method of the async Speech client with the
audio sent inline. Credentials come either from an API key or from the
service account file named by ``GOOGLE_APPLICATION_CREDENTIALS``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..errors import ProviderError
from ..models import AudioEncoding, ProviderTranscript
from .base import BaseTranscriptionProvider

logger = logging.getLogger(__name__)

try:
    from google.cloud import speech

    PROVIDER_AVAILABLE = True
except ImportError as e:
    logger.warning(f"Google Cloud Speech provider dependencies not installed: {e}")
    PROVIDER_AVAILABLE = False
    speech = None

# RecognitionConfig.AudioEncoding member per container
GOOGLE_ENCODINGS: Dict[AudioEncoding, str] = {
    AudioEncoding.WEBM: "WEBM_OPUS",
    AudioEncoding.OGG: "OGG_OPUS",
    AudioEncoding.WAV: "LINEAR16",
    AudioEncoding.FLAC: "FLAC",
    AudioEncoding.MP3: "MP3",
}

# Opus is always encoded at 48 kHz; WAV and FLAC carry their rate in the header.
SAMPLE_RATES: Dict[AudioEncoding, int] = {
    AudioEncoding.WEBM: 48000,
    AudioEncoding.OGG: 48000,
    AudioEncoding.MP3: 16000,
}


def google_language_code(language: Optional[str]) -> str:
    """Google needs a BCP-47 code; bare ``en`` (or no hint) means ``en-US``."""
    if not language or language == "en":
        return "en-US"
    return language


class GoogleCloudSpeechTranscriber(BaseTranscriptionProvider):
    """Google Cloud Speech-to-Text with automatic punctuation."""

    NAME = "google"
    DEFAULT_PRIORITY = 3
    ACCEPTED_ENCODINGS = frozenset(GOOGLE_ENCODINGS)
    CONVERSION_TARGET = AudioEncoding.WAV
    FEATURES = ["basic_transcription", "punctuation", "enhanced_models"]

    def __init__(
        self,
        api_key: Optional[str] = None,
        credentials_path: Optional[str] = None,
        model: str = "latest_long",
        **kwargs: Any,
    ):
        super().__init__(api_key, **kwargs)
        self.credentials_path = credentials_path
        self.model = model

    @classmethod
    def from_config(cls, config) -> Optional["GoogleCloudSpeechTranscriber"]:
        if not (config.google_speech_api_key or config.google_application_credentials):
            return None
        return cls(
            api_key=config.google_speech_api_key,
            credentials_path=config.google_application_credentials,
            model=config.google_speech_model,
            priority=config.priority_for(cls.NAME, cls.DEFAULT_PRIORITY),
            request_timeout=config.request_timeout,
            probe_timeout=config.probe_timeout,
        )

    def validate_configuration(self) -> bool:
        return bool(self.api_key or self.credentials_path)

    def check_ready(self) -> None:
        super().check_ready()
        if not PROVIDER_AVAILABLE:
            raise ProviderError(self.NAME, "Google Cloud Speech SDK not installed")

    def _create_client(self):
        """Create an async Speech client from the API key or service account file."""
        if self.api_key:
            return speech.SpeechAsyncClient(client_options={"api_key": self.api_key})
        return speech.SpeechAsyncClient.from_service_account_file(self.credentials_path)

    def _build_config(self, encoding: AudioEncoding, language: Optional[str]):
        kwargs = {
            "encoding": getattr(speech.RecognitionConfig.AudioEncoding, GOOGLE_ENCODINGS[encoding]),
            "language_code": google_language_code(language),
            "enable_automatic_punctuation": True,
            "model": self.model,
            "use_enhanced": True,
        }
        if encoding in SAMPLE_RATES:
            kwargs["sample_rate_hertz"] = SAMPLE_RATES[encoding]
        return speech.RecognitionConfig(**kwargs)

    async def _transcribe_impl(
        self, audio: bytes, encoding: AudioEncoding, language: Optional[str]
    ) -> ProviderTranscript:
        if encoding not in GOOGLE_ENCODINGS:
            raise ProviderError(self.NAME, f"unsupported encoding {encoding.value}")

        config = self._build_config(encoding, language)
        async with self._create_client() as client:
            response = await client.recognize(
                config=config,
                audio=speech.RecognitionAudio(content=audio),
                timeout=self.request_timeout,
            )
        return self._parse_response(response)

    def _parse_response(self, response: Any) -> ProviderTranscript:
        """Join the top alternative of every result, one line per result."""
        alternatives = [result.alternatives[0] for result in response.results if result.alternatives]
        text = "\n".join(alt.transcript for alt in alternatives if alt.transcript)
        confidence = alternatives[0].confidence if alternatives else None
        return ProviderTranscript(text=text, confidence=confidence or None)
