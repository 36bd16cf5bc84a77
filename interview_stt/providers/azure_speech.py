"""Azure Speech Services provider.

The Speech SDK is blocking, so recognition runs in the default executor. PCM
frames are pushed through an in-memory stream; every other encoding is
converted to WAV first.
"""

from __future__ import annotations

import asyncio
import io
import logging
import wave
from typing import Any, Optional, Tuple

from ..errors import ProviderError
from ..models import AudioEncoding, ProviderTranscript
from .base import BaseTranscriptionProvider

logger = logging.getLogger(__name__)

try:
    import azure.cognitiveservices.speech as speechsdk

    PROVIDER_AVAILABLE = True
except ImportError as e:
    logger.warning(f"Azure Speech provider dependencies not installed: {e}")
    PROVIDER_AVAILABLE = False
    speechsdk = None


def azure_language_code(language: Optional[str]) -> str:
    if not language or language == "en":
        return "en-US"
    return language


def read_pcm(audio: bytes) -> Tuple[bytes, int, int, int]:
    """Split a WAV file into raw frames and (rate, bits per sample, channels).

    Raises:
        ProviderError: If the bytes are not 8- or 16-bit PCM WAV
    """
    try:
        with wave.open(io.BytesIO(audio), "rb") as wav:
            params = wav.getparams()
            frames = wav.readframes(params.nframes)
    except (wave.Error, EOFError) as e:
        raise ProviderError(AzureSpeechTranscriber.NAME, f"unreadable WAV audio: {e}") from e
    if params.sampwidth not in (1, 2):
        raise ProviderError(
            AzureSpeechTranscriber.NAME, f"unsupported PCM width: {params.sampwidth * 8} bits"
        )
    return frames, params.framerate, params.sampwidth * 8, params.nchannels


class AzureSpeechTranscriber(BaseTranscriptionProvider):
    """Azure single-shot speech recognition."""

    NAME = "azure"
    DEFAULT_PRIORITY = 4
    ACCEPTED_ENCODINGS = frozenset({AudioEncoding.WAV})
    CONVERSION_TARGET = AudioEncoding.WAV

    def __init__(self, api_key: Optional[str] = None, region: Optional[str] = None, **kwargs: Any):
        super().__init__(api_key, **kwargs)
        self.region = region

    @classmethod
    def from_config(cls, config) -> Optional["AzureSpeechTranscriber"]:
        if not (config.azure_speech_key and config.azure_speech_region):
            if config.azure_speech_key or config.azure_speech_region:
                logger.warning(
                    "Azure Speech needs both AZURE_SPEECH_KEY and AZURE_SPEECH_REGION; skipping"
                )
            return None
        return cls(
            api_key=config.azure_speech_key,
            region=config.azure_speech_region,
            priority=config.priority_for(cls.NAME, cls.DEFAULT_PRIORITY),
            request_timeout=config.request_timeout,
            probe_timeout=config.probe_timeout,
        )

    def validate_configuration(self) -> bool:
        return bool(self.api_key and self.region)

    def check_ready(self) -> None:
        super().check_ready()
        if not PROVIDER_AVAILABLE:
            raise ProviderError(self.NAME, "Azure Speech SDK not installed")

    def _create_recognizer(self, stream_format, language: Optional[str]):
        """Return (recognizer, push stream) for one recognition."""
        speech_config = speechsdk.SpeechConfig(subscription=self.api_key, region=self.region)
        speech_config.speech_recognition_language = azure_language_code(language)
        stream = speechsdk.audio.PushAudioInputStream(stream_format=stream_format)
        audio_config = speechsdk.audio.AudioConfig(stream=stream)
        recognizer = speechsdk.SpeechRecognizer(
            speech_config=speech_config, audio_config=audio_config
        )
        return recognizer, stream

    def _recognize(self, audio: bytes, language: Optional[str]):
        frames, rate, bits, channels = read_pcm(audio)
        stream_format = speechsdk.audio.AudioStreamFormat(
            samples_per_second=rate, bits_per_sample=bits, channels=channels
        )
        recognizer, stream = self._create_recognizer(stream_format, language)
        stream.write(frames)
        stream.close()
        return recognizer.recognize_once()

    async def _transcribe_impl(
        self, audio: bytes, encoding: AudioEncoding, language: Optional[str]
    ) -> ProviderTranscript:
        if encoding is not AudioEncoding.WAV:
            raise ProviderError(self.NAME, f"unsupported encoding {encoding.value}")

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, self._recognize, audio, language)
        return self._parse_result(result)

    def _parse_result(self, result: Any) -> ProviderTranscript:
        reason = speechsdk.ResultReason
        if result.reason == reason.RecognizedSpeech:
            return ProviderTranscript(text=result.text or "")
        if result.reason == reason.NoMatch:
            raise ProviderError(self.NAME, "no speech could be recognized")
        if result.reason == reason.Canceled:
            details = result.cancellation_details
            message = f"recognition canceled: {details.reason}"
            if details.error_details:
                message += f" ({details.error_details})"
            raise ProviderError(self.NAME, message)
        raise ProviderError(self.NAME, f"unexpected result reason: {result.reason}")
