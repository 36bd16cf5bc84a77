"""Factory for building the ordered provider chain from configuration.

The set of adapters is closed: every provider class is listed in
``PROVIDER_CLASSES``. Which of them take part is decided once, from the
credentials present in :class:`~interview_stt.config.PipelineConfig`, and the
resulting chain is an immutable tuple sorted by priority.

Example:
    >>> config = load_config()
    >>> chain = TranscriptionProviderFactory.build_chain(config)
    >>> [p.get_provider_name() for p in chain]
    ['assemblyai', 'openai']
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple, Type

from .assemblyai import AssemblyAITranscriber
from .azure_speech import AzureSpeechTranscriber
from .base import BaseTranscriptionProvider
from .deepgram import DeepgramTranscriber
from .elevenlabs import ElevenLabsTranscriber
from .google_speech import GoogleCloudSpeechTranscriber
from .huggingface import HuggingFaceTranscriber
from .local import LocalModelPlaceholder
from .openai_whisper import OpenAIWhisperTranscriber

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: Tuple[Type[BaseTranscriptionProvider], ...] = (
    AssemblyAITranscriber,
    DeepgramTranscriber,
    GoogleCloudSpeechTranscriber,
    AzureSpeechTranscriber,
    OpenAIWhisperTranscriber,
    ElevenLabsTranscriber,
    HuggingFaceTranscriber,
)


class TranscriptionProviderFactory:
    """Create providers and the priority-ordered fallback chain.

    All methods are class methods; the factory holds no state of its own.
    """

    @classmethod
    def get_available_providers(cls) -> List[str]:
        """Names of every known provider, configured or not."""
        return [provider_class.NAME for provider_class in PROVIDER_CLASSES]

    @classmethod
    def get_provider_class(cls, name: str) -> Type[BaseTranscriptionProvider]:
        """Look up a provider class by name.

        Raises:
            ValueError: If the name is unknown
        """
        for provider_class in PROVIDER_CLASSES:
            if provider_class.NAME == name:
                return provider_class
        available = ", ".join(cls.get_available_providers())
        raise ValueError(f"Unknown provider: {name}. Available: {available}")

    @classmethod
    def create_provider(cls, name: str, config) -> Optional[BaseTranscriptionProvider]:
        """Create a single provider, or None when its credential is missing."""
        return cls.get_provider_class(name).from_config(config)

    @classmethod
    def build_chain(cls, config) -> Tuple[BaseTranscriptionProvider, ...]:
        """Build every configured provider, sorted by priority.

        Ties keep declaration order (the sort is stable).
        """
        providers: List[BaseTranscriptionProvider] = []
        for provider_class in PROVIDER_CLASSES:
            provider = provider_class.from_config(config)
            if provider is None:
                logger.debug(f"Provider {provider_class.NAME} not configured, skipping")
                continue
            providers.append(provider)
        providers.extend(LocalModelPlaceholder.all_from_config(config))

        chain = tuple(sorted(providers, key=lambda p: p.priority))
        if chain:
            logger.info(
                "Transcription providers (in order): "
                + ", ".join(p.get_provider_name() for p in chain)
            )
        else:
            logger.warning("No transcription providers configured")
        return chain

    @classmethod
    def get_configured_providers(cls, config) -> List[str]:
        """Names of the configured providers in attempt order."""
        return [p.get_provider_name() for p in cls.build_chain(config)]

    @classmethod
    def get_provider_status(cls, config) -> Dict[str, bool]:
        """Map every known provider name to whether it is configured."""
        configured = set(cls.get_configured_providers(config))
        return {name: name in configured for name in cls.get_available_providers()}
