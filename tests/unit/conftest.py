"""Shared fixtures for unit tests.

Key Fixtures:
    - make_provider: Builds scripted in-memory providers
    - make_config: Builds a PipelineConfig with explicit values
    - webm_clip_bytes: A 5000-byte fake webm recording
"""

import asyncio
from typing import List, Optional

import pytest

from interview_stt.config import PipelineConfig
from interview_stt.models import ALL_ENCODINGS, AudioEncoding, ProviderTranscript
from interview_stt.providers.base import BaseTranscriptionProvider


class FakeProvider(BaseTranscriptionProvider):
    """Provider that returns scripted text or raises a scripted error."""

    REQUIRES_CREDENTIAL = False

    def __init__(
        self,
        name: str,
        priority: int = 1,
        text: str = "hello world",
        confidence: Optional[float] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        accepted=ALL_ENCODINGS,
        conversion_target: AudioEncoding = AudioEncoding.WAV,
        call_log: Optional[List[str]] = None,
        request_timeout: float = 5.0,
    ):
        super().__init__(priority=priority, request_timeout=request_timeout)
        self._name = name
        self.text = text
        self.confidence = confidence
        self.error = error
        self.delay = delay
        self.ACCEPTED_ENCODINGS = frozenset(accepted)
        self.CONVERSION_TARGET = conversion_target
        self.call_log = call_log
        self.calls = []

    @classmethod
    def from_config(cls, config):
        return None

    def get_provider_name(self) -> str:
        return self._name

    async def _transcribe_impl(self, audio, encoding, language):
        self.calls.append((audio, encoding, language))
        if self.call_log is not None:
            self.call_log.append(self._name)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return ProviderTranscript(text=self.text, confidence=self.confidence)


@pytest.fixture
def make_provider():
    """Return the FakeProvider constructor."""
    return FakeProvider


@pytest.fixture
def make_config():
    """Build a PipelineConfig from explicit keyword arguments.

    ffmpeg is disabled unless a test passes ``ffmpeg_path`` itself.
    """

    def _make(**overrides) -> PipelineConfig:
        overrides.setdefault("ffmpeg_path", None)
        return PipelineConfig(**overrides)

    return _make


@pytest.fixture
def webm_clip_bytes() -> bytes:
    """5000 bytes starting with the EBML magic used by webm containers."""
    header = b"\x1a\x45\xdf\xa3"
    return header + bytes(range(256)) * 19 + b"\x00" * (5000 - 4 - 256 * 19)
