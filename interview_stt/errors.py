"""Error taxonomy for the transcription pipeline.

Only input validation errors and :class:`AllProvidersFailedError` cross the
service boundary. Conversion errors are soft (the original bytes are passed
through) and :class:`ProviderError` only advances the fallback chain.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class TranscriptionError(Exception):
    """Base class for all pipeline errors.

    Attributes:
        code: Stable machine-readable identifier used in API responses
    """

    code = "transcription_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON error shape returned to the HTTP layer."""
        return {"success": False, "error": self.code, "message": self.message}


class AudioValidationError(TranscriptionError):
    """The submitted audio was rejected before any cache or network access."""

    code = "invalid_audio"


class EmptyAudioError(AudioValidationError):
    code = "empty_audio"

    def __init__(self, message: str = "Audio buffer is empty") -> None:
        super().__init__(message)


class AudioTooShortError(AudioValidationError):
    code = "audio_too_short"

    def __init__(self, size: int, minimum: int) -> None:
        self.size = size
        self.minimum = minimum
        super().__init__(
            f"Audio too short ({size} bytes, minimum {minimum}) - "
            "please record at least 1 second"
        )


class UnsupportedEncodingError(AudioValidationError):
    code = "unsupported_encoding"


class ConversionError(TranscriptionError):
    """Format normalization failed; callers fall back to the original bytes."""

    code = "conversion_error"


class ToolUnavailableError(ConversionError):
    code = "tool_unavailable"


class ConversionFailedError(ConversionError):
    code = "conversion_failed"

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = "") -> None:
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class ProviderError(TranscriptionError):
    """A single adapter failed. Never fatal on its own."""

    code = "provider_error"

    def __init__(self, provider: str, detail: str) -> None:
        self.provider = provider
        self.detail = detail
        super().__init__(f"{provider}: {detail}")


class AllProvidersFailedError(TranscriptionError):
    """The fallback chain was empty or every adapter failed.

    Attributes:
        last_detail: Error detail of the most recently attempted adapter
        provider_errors: Detail per attempted provider, in attempt order
    """

    code = "all_providers_failed"

    def __init__(
        self, last_detail: str, provider_errors: Optional[Mapping[str, str]] = None
    ) -> None:
        self.last_detail = last_detail
        self.provider_errors = dict(provider_errors or {})
        super().__init__(f"All transcription providers failed. Last error: {last_detail}")

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["providers"] = list(self.provider_errors)
        return payload
