"""Pipeline configuration loaded from environment variables.

The configuration is built once at process start and passed explicitly to the
service, factory and adapters. Field defaults read the environment, so
``PipelineConfig()`` reflects the current environment while tests can pass
explicit values.
"""
from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

logger = logging.getLogger(__name__)

PROVIDER_NAMES = (
    "assemblyai",
    "deepgram",
    "google",
    "azure",
    "openai",
    "elevenlabs",
    "huggingface",
)

DEFAULT_HUGGINGFACE_MODELS = "openai/whisper-tiny,openai/whisper-base,openai/whisper-small"


def _parse_bool(value: Union[str, bool, None]) -> bool:
    """Parse boolean value from various formats."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return value.strip().lower() in ("true", "1", "yes", "on", "enabled")


def _parse_list(value: Union[str, None], delimiter: str = ",") -> Tuple[str, ...]:
    """Parse a delimited string into a tuple of stripped, non-empty items."""
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(delimiter) if item.strip())


def _getenv(key: str, default: str = "") -> str:
    """Get environment variable with default."""
    return os.getenv(key, default)


def _getenv_optional(key: str) -> Optional[str]:
    """Get environment variable, treating empty strings as unset."""
    return os.getenv(key) or None


def _getenv_int(key: str, default: int) -> int:
    """Get integer environment variable with validation.

    Raises:
        ValueError: If value cannot be parsed as integer
    """
    value = os.getenv(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(
            f"Invalid integer value for {key}='{value}'. "
            f"Expected integer, got: {value}"
        ) from e


def _getenv_float(key: str, default: Optional[float]) -> Optional[float]:
    """Get float environment variable with validation.

    Raises:
        ValueError: If value cannot be parsed as float
    """
    value = os.getenv(key)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(
            f"Invalid float value for {key}='{value}'. "
            f"Expected float, got: {value}"
        ) from e


def _priority_overrides_from_env() -> Dict[str, int]:
    overrides = {}
    for name in PROVIDER_NAMES + ("local",):
        key = f"{name.upper()}_PRIORITY"
        if os.getenv(key):
            overrides[name] = _getenv_int(key, 0)
    return overrides


def _resolve_ffmpeg() -> Optional[str]:
    configured = _getenv_optional("FFMPEG_PATH")
    if configured:
        return configured
    return shutil.which("ffmpeg")


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable transcription pipeline configuration."""

    # ========== Input Validation ==========
    min_audio_bytes: int = field(default_factory=lambda: _getenv_int("MIN_AUDIO_BYTES", 1000))
    default_language: str = field(default_factory=lambda: _getenv("DEFAULT_LANGUAGE", "en"))

    # ========== Timeouts ==========
    request_timeout: float = field(
        default_factory=lambda: _getenv_float("STT_REQUEST_TIMEOUT", 30.0)
    )
    probe_timeout: float = field(default_factory=lambda: _getenv_float("STT_PROBE_TIMEOUT", 0.8))

    # ========== Response Cache ==========
    enable_caching: bool = field(
        default_factory=lambda: _parse_bool(_getenv("ENABLE_CACHING", "true"))
    )
    cache_max_entries: int = field(
        default_factory=lambda: _getenv_int("STT_CACHE_MAX_ENTRIES", 500)
    )
    cache_sample_bytes: int = field(
        default_factory=lambda: _getenv_int("STT_CACHE_SAMPLE_BYTES", 4096)
    )

    # ========== Format Conversion ==========
    ffmpeg_path: Optional[str] = field(default_factory=_resolve_ffmpeg)
    conversion_timeout: float = field(
        default_factory=lambda: _getenv_float("STT_CONVERSION_TIMEOUT", 20.0)
    )
    preprocess_encoding: Optional[str] = field(
        default_factory=lambda: _getenv_optional("STT_PREPROCESS_ENCODING")
    )

    # ========== AssemblyAI ==========
    assemblyai_api_key: Optional[str] = field(
        default_factory=lambda: _getenv_optional("ASSEMBLYAI_API_KEY"), repr=False
    )
    assemblyai_api_url: str = field(
        default_factory=lambda: _getenv("ASSEMBLYAI_API_URL", "https://api.assemblyai.com/v2")
    )
    assemblyai_model: Optional[str] = field(
        default_factory=lambda: _getenv_optional("ASSEMBLYAI_MODEL")
    )
    assemblyai_poll_interval: float = field(
        default_factory=lambda: _getenv_float("ASSEMBLYAI_POLL_INTERVAL", 1.0)
    )
    assemblyai_max_poll_seconds: Optional[float] = field(
        default_factory=lambda: _getenv_float("ASSEMBLYAI_MAX_POLL_SECONDS", None)
    )

    # ========== Deepgram ==========
    deepgram_api_key: Optional[str] = field(
        default_factory=lambda: _getenv_optional("DEEPGRAM_API_KEY"), repr=False
    )
    deepgram_api_url: Optional[str] = field(
        default_factory=lambda: _getenv_optional("DEEPGRAM_API_URL")
    )
    deepgram_model: str = field(default_factory=lambda: _getenv("DEEPGRAM_MODEL", "nova-2"))

    # ========== Google Cloud Speech ==========
    google_speech_api_key: Optional[str] = field(
        default_factory=lambda: _getenv_optional("GOOGLE_CLOUD_SPEECH_KEY"), repr=False
    )
    google_application_credentials: Optional[str] = field(
        default_factory=lambda: _getenv_optional("GOOGLE_APPLICATION_CREDENTIALS")
    )
    google_speech_model: str = field(
        default_factory=lambda: _getenv("GOOGLE_SPEECH_MODEL", "latest_long")
    )

    # ========== Azure Speech ==========
    azure_speech_key: Optional[str] = field(
        default_factory=lambda: _getenv_optional("AZURE_SPEECH_KEY"), repr=False
    )
    azure_speech_region: Optional[str] = field(
        default_factory=lambda: _getenv_optional("AZURE_SPEECH_REGION")
    )

    # ========== ElevenLabs ==========
    elevenlabs_api_key: Optional[str] = field(
        default_factory=lambda: _getenv_optional("ELEVENLABS_API_KEY"), repr=False
    )
    elevenlabs_model: str = field(
        default_factory=lambda: _getenv("ELEVENLABS_MODEL", "scribe_v1")
    )

    # ========== OpenAI ==========
    openai_api_key: Optional[str] = field(
        default_factory=lambda: _getenv_optional("OPENAI_API_KEY"), repr=False
    )
    openai_base_url: Optional[str] = field(
        default_factory=lambda: _getenv_optional("OPENAI_BASE_URL")
    )
    openai_model: str = field(default_factory=lambda: _getenv("OPENAI_MODEL", "whisper-1"))

    # ========== HuggingFace ==========
    huggingface_api_key: Optional[str] = field(
        default_factory=lambda: _getenv_optional("HUGGINGFACE_API_KEY")
        or _getenv_optional("HF_API_KEY"),
        repr=False,
    )
    huggingface_anonymous: bool = field(
        default_factory=lambda: _parse_bool(_getenv("HUGGINGFACE_ANONYMOUS", "false"))
    )
    huggingface_api_url: str = field(
        default_factory=lambda: _getenv(
            "HUGGINGFACE_API_URL", "https://api-inference.huggingface.co/models"
        )
    )
    huggingface_models: Tuple[str, ...] = field(
        default_factory=lambda: _parse_list(
            _getenv("HUGGINGFACE_MODELS", "") or _getenv("HF_MODEL", DEFAULT_HUGGINGFACE_MODELS)
        )
    )

    # ========== Local Model Placeholders ==========
    local_models: Tuple[str, ...] = field(
        default_factory=lambda: _parse_list(_getenv("LOCAL_STT_MODELS", ""))
    )

    # ========== Ordering ==========
    priority_overrides: Dict[str, int] = field(default_factory=_priority_overrides_from_env)

    # ========== Logging ==========
    log_level: str = field(default_factory=lambda: _getenv("LOG_LEVEL", "INFO").upper())
    log_file: Optional[str] = field(default_factory=lambda: _getenv_optional("LOG_FILE"))

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.min_audio_bytes < 1:
            raise ValueError("MIN_AUDIO_BYTES must be at least 1")
        if self.cache_max_entries < 1:
            raise ValueError("STT_CACHE_MAX_ENTRIES must be at least 1")
        if self.cache_sample_bytes < 1:
            raise ValueError("STT_CACHE_SAMPLE_BYTES must be at least 1")
        for name in ("request_timeout", "probe_timeout", "conversion_timeout"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.assemblyai_poll_interval <= 0:
            raise ValueError("ASSEMBLYAI_POLL_INTERVAL must be positive")
        if self.assemblyai_api_key and self.assemblyai_max_poll_seconds is None:
            raise ValueError(
                "ASSEMBLYAI_MAX_POLL_SECONDS is required when ASSEMBLYAI_API_KEY is set"
            )
        if self.assemblyai_max_poll_seconds is not None and self.assemblyai_max_poll_seconds <= 0:
            raise ValueError("ASSEMBLYAI_MAX_POLL_SECONDS must be positive")

    def priority_for(self, provider_name: str, default: int) -> int:
        """Return the configured priority override for a provider, or ``default``."""
        return self.priority_overrides.get(provider_name, default)


def load_environment() -> Optional[Path]:
    """Load a .env file into the process environment if one is found.

    Real environment variables always win over values from the file.

    Returns:
        Path of the loaded file, or None
    """
    from dotenv import load_dotenv

    env_paths = [Path(".env"), Path("../.env"), Path.home() / ".env"]
    for env_path in env_paths:
        if env_path.exists():
            load_dotenv(env_path, override=False)
            logger.debug(f"Loaded environment from {env_path}")
            return env_path
    return None


def load_config() -> PipelineConfig:
    """Load the environment (including .env) and build a fresh configuration."""
    load_environment()
    return PipelineConfig()


__all__ = ["PROVIDER_NAMES", "PipelineConfig", "load_config", "load_environment"]
