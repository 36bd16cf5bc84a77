"""Abstract base class for transcription service providers."""

from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, List, Optional

import httpx

from ..errors import ProviderError
from ..models import (
    ALL_ENCODINGS,
    AudioEncoding,
    ProviderDescriptor,
    ProviderTranscript,
)
from .provider_utils import build_health_result

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_PROBE_TIMEOUT = 0.8


class BaseTranscriptionProvider(ABC):
    """Abstract base class for all transcription service providers.

    Subclasses describe themselves through class attributes and implement
    :meth:`_transcribe_impl`. The public :meth:`transcribe_async` guarantees
    that every failure, whatever the backend raised, surfaces as a
    :class:`ProviderError`, so callers only ever need to handle one type.
    Cancellation is not a failure and always propagates.

    Class Attributes:
        NAME: Provider name reported in results and errors
        DEFAULT_PRIORITY: Attempt order when no override is configured
        REQUIRES_CREDENTIAL: Whether an API key is needed
        ACCEPTED_ENCODINGS: Encodings the backend accepts natively
        CONVERSION_TARGET: Encoding to convert to for anything else
    """

    NAME: str = ""
    DEFAULT_PRIORITY: int = 100
    REQUIRES_CREDENTIAL: bool = True
    ACCEPTED_ENCODINGS: FrozenSet[AudioEncoding] = ALL_ENCODINGS
    CONVERSION_TARGET: AudioEncoding = AudioEncoding.WAV
    FEATURES: List[str] = ["basic_transcription"]

    def __init__(
        self,
        api_key: Optional[str] = None,
        priority: Optional[int] = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
    ):
        """Initialize the transcription provider.

        Args:
            api_key: API key for the service, if it needs one
            priority: Attempt order; defaults to DEFAULT_PRIORITY
            request_timeout: Seconds allowed for one transcription call
            probe_timeout: Seconds allowed for a liveness probe
        """
        self.api_key = api_key
        self.priority = self.DEFAULT_PRIORITY if priority is None else priority
        self.request_timeout = request_timeout
        self.probe_timeout = probe_timeout

    @classmethod
    @abstractmethod
    def from_config(cls, config) -> Optional["BaseTranscriptionProvider"]:
        """Build the provider from configuration, or None if it is not configured."""

    @property
    def descriptor(self) -> ProviderDescriptor:
        return ProviderDescriptor(
            name=self.get_provider_name(),
            priority=self.priority,
            requires_credential=self.REQUIRES_CREDENTIAL,
            accepted_encodings=frozenset(self.ACCEPTED_ENCODINGS),
            conversion_target=self.CONVERSION_TARGET,
        )

    @property
    def call_timeout(self) -> float:
        """Upper bound for a whole :meth:`transcribe_async` call."""
        return self.request_timeout

    def get_provider_name(self) -> str:
        return self.NAME

    def get_supported_features(self) -> List[str]:
        return list(self.FEATURES)

    def validate_configuration(self) -> bool:
        """Validate that the provider is properly configured.

        Returns:
            True if configuration is valid, False otherwise
        """
        return bool(self.api_key) or not self.REQUIRES_CREDENTIAL

    def check_ready(self) -> None:
        """Raise if this provider cannot attempt a transcription right now.

        The orchestrator calls it before any audio is converted for the
        provider. Subclasses add their own preconditions, such as an
        installed SDK.

        Raises:
            ProviderError: If the provider is not usable
        """
        if not self.validate_configuration():
            raise ProviderError(self.get_provider_name(), "provider is not configured")

    @abstractmethod
    async def _transcribe_impl(
        self, audio: bytes, encoding: AudioEncoding, language: Optional[str]
    ) -> ProviderTranscript:
        """Send one request to the backend and parse its response.

        Args:
            audio: Audio bytes, already in an accepted encoding when possible
            encoding: Encoding of ``audio``
            language: Language hint, or None for auto-detection

        Returns:
            Parsed transcript
        """

    async def transcribe_async(
        self, audio: bytes, encoding: AudioEncoding, language: Optional[str] = None
    ) -> ProviderTranscript:
        """Transcribe audio with this provider.

        Raises:
            ProviderError: On any failure, including an empty transcript
        """
        name = self.get_provider_name()
        self.check_ready()

        try:
            transcript = await self._transcribe_impl(audio, encoding, language)
        except ProviderError:
            raise
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise ProviderError(name, f"request timed out: {e}") from e
        except Exception as e:
            raise ProviderError(name, f"{type(e).__name__}: {e}") from e

        text = (transcript.text or "").strip() if transcript else ""
        if not text:
            raise ProviderError(name, "empty transcript")
        return ProviderTranscript(text=text, confidence=transcript.confidence)

    def transcribe(
        self, audio: bytes, encoding: AudioEncoding, language: Optional[str] = None
    ) -> ProviderTranscript:
        """Transcribe synchronously (runs its own event loop)."""
        return asyncio.run(self.transcribe_async(audio, encoding, language))

    async def health_check_async(self) -> Dict[str, Any]:
        """Report provider health.

        The default only checks configuration; HTTP providers override it
        with a short probe of their API.

        Returns:
            Dictionary containing health check results:
            {
                "healthy": bool,
                "status": str,
                "response_time_ms": float,
                "details": dict
            }
        """
        start_time = time.time()
        configured = self.validate_configuration()
        return build_health_result(
            configured,
            "configured" if configured else "not_configured",
            start_time,
            {"provider": self.get_provider_name(), "note": "configuration check only"},
        )

    def health_check(self) -> Dict[str, Any]:
        return asyncio.run(self.health_check_async())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.get_provider_name()!r}, priority={self.priority})"
