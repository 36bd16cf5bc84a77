"""Data models shared across the transcription pipeline."""

from .transcription import (
    ALL_ENCODINGS,
    AudioClip,
    AudioEncoding,
    ProviderDescriptor,
    ProviderTranscript,
    TranscriptionResult,
)

__all__ = [
    "ALL_ENCODINGS",
    "AudioClip",
    "AudioEncoding",
    "ProviderDescriptor",
    "ProviderTranscript",
    "TranscriptionResult",
]
