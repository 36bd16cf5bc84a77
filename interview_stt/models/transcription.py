"""Data models for audio clips, provider descriptors and transcription results."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional


class AudioEncoding(Enum):
    """Audio container/codec identifiers accepted by the pipeline."""

    WEBM = "webm"
    OGG = "ogg"
    OPUS = "opus"
    WAV = "wav"
    MP3 = "mp3"
    MP4 = "mp4"
    M4A = "m4a"
    FLAC = "flac"

    @property
    def mime_type(self) -> str:
        """MIME type sent to providers that want a Content-Type."""
        return _MIME_TYPES[self]

    @property
    def suffix(self) -> str:
        """File suffix (with dot) used for temp files and multipart uploads."""
        return f".{self.value}"

    @classmethod
    def parse(cls, value: "str | AudioEncoding") -> "AudioEncoding":
        """Parse a declared encoding, tolerating MIME prefixes and aliases.

        Browsers report recordings as e.g. ``audio/webm;codecs=opus``; the
        codec parameter and the ``audio/`` prefix are stripped before lookup.

        Raises:
            ValueError: If the encoding is not one of the supported identifiers
        """
        if isinstance(value, AudioEncoding):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Audio encoding must be a string, got {type(value).__name__}")

        normalized = value.strip().lower().split(";", 1)[0].strip()
        if normalized.startswith("audio/"):
            normalized = normalized[len("audio/"):]
        normalized = normalized.lstrip(".")
        normalized = _ALIASES.get(normalized, normalized)

        try:
            return cls(normalized)
        except ValueError:
            allowed = ", ".join(e.value for e in cls)
            raise ValueError(f"Unsupported audio encoding '{value}'. Allowed: {allowed}") from None


_MIME_TYPES = {
    AudioEncoding.WEBM: "audio/webm",
    AudioEncoding.OGG: "audio/ogg",
    AudioEncoding.OPUS: "audio/opus",
    AudioEncoding.WAV: "audio/wav",
    AudioEncoding.MP3: "audio/mpeg",
    AudioEncoding.MP4: "audio/mp4",
    AudioEncoding.M4A: "audio/mp4",
    AudioEncoding.FLAC: "audio/flac",
}

_ALIASES = {
    "mpeg": "mp3",
    "mpga": "mp3",
    "x-wav": "wav",
    "wave": "wav",
    "x-m4a": "m4a",
    "oga": "ogg",
    "x-flac": "flac",
}

ALL_ENCODINGS: FrozenSet[AudioEncoding] = frozenset(AudioEncoding)


@dataclass(frozen=True)
class AudioClip:
    """A recorded clip submitted for one transcription request.

    The pipeline never keeps ``data`` past the request; only the cache
    fingerprint derived from it outlives the call.
    """

    data: bytes
    encoding: AudioEncoding
    language: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"AudioClip(size={len(self.data)}, encoding={self.encoding.value}, "
            f"language={self.language!r})"
        )

    @property
    def size(self) -> int:
        return len(self.data)

    def with_audio(self, data: bytes, encoding: AudioEncoding) -> "AudioClip":
        """Return a copy carrying converted bytes, keeping the language hint."""
        return replace(self, data=data, encoding=encoding)


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static description of one provider adapter.

    Attributes:
        name: Provider name reported to callers
        priority: Attempt order, lower runs first
        requires_credential: Whether the adapter needs a configured secret
        accepted_encodings: Encodings the backend takes natively
        conversion_target: Encoding requested from the normalizer when the
            incoming encoding is not accepted
    """

    name: str
    priority: int
    requires_credential: bool
    accepted_encodings: FrozenSet[AudioEncoding]
    conversion_target: AudioEncoding = AudioEncoding.WAV

    def accepts(self, encoding: AudioEncoding) -> bool:
        return encoding in self.accepted_encodings

    def target_for(self, encoding: AudioEncoding) -> AudioEncoding:
        """Encoding the adapter should receive for a clip in ``encoding``."""
        return encoding if self.accepts(encoding) else self.conversion_target

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "priority": self.priority,
            "requiresCredential": self.requires_credential,
            "acceptedEncodings": sorted(e.value for e in self.accepted_encodings),
        }


@dataclass(frozen=True)
class ProviderTranscript:
    """Normalized output of a single adapter call."""

    text: str
    confidence: Optional[float] = None


@dataclass(frozen=True)
class TranscriptionResult:
    """Result returned to callers and stored in the response cache."""

    text: str
    provider_name: str
    elapsed_ms: int
    confidence: Optional[float] = None
    served_from_cache: bool = False
    generated_at: datetime = field(default_factory=datetime.now)

    def as_cached(self) -> "TranscriptionResult":
        """View of this result as served from cache (zero cost by convention)."""
        return replace(self, served_from_cache=True, elapsed_ms=0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape returned to the HTTP layer."""
        return {
            "success": True,
            "text": self.text,
            "provider": self.provider_name,
            "confidence": self.confidence,
            "durationMs": self.elapsed_ms,
            "cached": self.served_from_cache,
            "timestamp": self.generated_at.isoformat(),
        }
