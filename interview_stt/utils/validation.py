"""Audio clip validation performed before any cache or network access.

The length floor is a byte-count heuristic approximating "less than about one
second of audio"; clips are never decoded to measure their true duration.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..errors import AudioTooShortError, EmptyAudioError, UnsupportedEncodingError
from ..models import AudioClip, AudioEncoding

logger = logging.getLogger(__name__)

DEFAULT_MIN_AUDIO_BYTES = 1000


def validate_clip(clip: AudioClip, min_bytes: int = DEFAULT_MIN_AUDIO_BYTES) -> None:
    """Validate a clip's size.

    Args:
        clip: Clip to validate
        min_bytes: Minimum accepted byte length

    Raises:
        EmptyAudioError: If the clip has no bytes
        AudioTooShortError: If the clip is shorter than ``min_bytes``
    """
    size = len(clip.data)
    if size == 0:
        raise EmptyAudioError()
    if size < min_bytes:
        raise AudioTooShortError(size, min_bytes)


def build_clip(
    audio_bytes: Optional[bytes],
    encoding: "str | AudioEncoding",
    language: Optional[str] = None,
) -> AudioClip:
    """Build an :class:`AudioClip` from raw request inputs.

    Raises:
        EmptyAudioError: If no bytes were supplied
        UnsupportedEncodingError: If the declared encoding is unknown
    """
    if not audio_bytes:
        raise EmptyAudioError()
    try:
        parsed = AudioEncoding.parse(encoding)
    except ValueError as e:
        raise UnsupportedEncodingError(str(e)) from e

    language = language.strip() if isinstance(language, str) else None
    return AudioClip(data=bytes(audio_bytes), encoding=parsed, language=language or None)
