"""Transcription provider adapters."""

from .assemblyai import AssemblyAITranscriber
from .azure_speech import AzureSpeechTranscriber
from .base import BaseTranscriptionProvider
from .deepgram import DeepgramTranscriber
from .elevenlabs import ElevenLabsTranscriber
from .factory import PROVIDER_CLASSES, TranscriptionProviderFactory
from .google_speech import GoogleCloudSpeechTranscriber
from .huggingface import HuggingFaceTranscriber
from .local import LocalModelPlaceholder
from .openai_whisper import OpenAIWhisperTranscriber

__all__ = [
    "PROVIDER_CLASSES",
    "AssemblyAITranscriber",
    "AzureSpeechTranscriber",
    "BaseTranscriptionProvider",
    "DeepgramTranscriber",
    "ElevenLabsTranscriber",
    "GoogleCloudSpeechTranscriber",
    "HuggingFaceTranscriber",
    "LocalModelPlaceholder",
    "OpenAIWhisperTranscriber",
    "TranscriptionProviderFactory",
]
