"""Shared utilities: input validation, scoped temp files and logging setup."""

from .logging_factory import LoggingFactory
from .secure_temp import secure_temp_file
from .validation import DEFAULT_MIN_AUDIO_BYTES, build_clip, validate_clip

__all__ = [
    "DEFAULT_MIN_AUDIO_BYTES",
    "LoggingFactory",
    "build_clip",
    "secure_temp_file",
    "validate_clip",
]
