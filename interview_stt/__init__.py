"""Resilient multi-provider speech-to-text for recorded interview answers."""

__version__ = "1.0.0"

from .config import PipelineConfig, load_config
from .errors import (
    AllProvidersFailedError,
    AudioTooShortError,
    AudioValidationError,
    EmptyAudioError,
    ProviderError,
    TranscriptionError,
    UnsupportedEncodingError,
)
from .models import AudioEncoding, TranscriptionResult
from .services.transcription import TranscriptionService

__all__ = [
    "AllProvidersFailedError",
    "AudioEncoding",
    "AudioTooShortError",
    "AudioValidationError",
    "EmptyAudioError",
    "PipelineConfig",
    "ProviderError",
    "TranscriptionError",
    "TranscriptionResult",
    "TranscriptionService",
    "UnsupportedEncodingError",
    "__version__",
    "load_config",
]
