"""Global pytest fixtures and configuration.

This module provides shared fixtures for all tests including:
- A clean provider environment for every test
- FFmpeg binary detection
- Test audio generation for integration tests
"""
from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

PIPELINE_ENV_VARS = (
    "ASSEMBLYAI_API_KEY",
    "ASSEMBLYAI_API_URL",
    "ASSEMBLYAI_MODEL",
    "ASSEMBLYAI_POLL_INTERVAL",
    "ASSEMBLYAI_MAX_POLL_SECONDS",
    "ASSEMBLYAI_PRIORITY",
    "DEEPGRAM_API_KEY",
    "DEEPGRAM_API_URL",
    "DEEPGRAM_MODEL",
    "DEEPGRAM_PRIORITY",
    "GOOGLE_CLOUD_SPEECH_KEY",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "GOOGLE_SPEECH_MODEL",
    "GOOGLE_PRIORITY",
    "AZURE_SPEECH_KEY",
    "AZURE_SPEECH_REGION",
    "AZURE_PRIORITY",
    "ELEVENLABS_API_KEY",
    "ELEVENLABS_MODEL",
    "ELEVENLABS_PRIORITY",
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_MODEL",
    "OPENAI_PRIORITY",
    "HUGGINGFACE_API_KEY",
    "HF_API_KEY",
    "HUGGINGFACE_ANONYMOUS",
    "HUGGINGFACE_API_URL",
    "HUGGINGFACE_MODELS",
    "HF_MODEL",
    "HUGGINGFACE_PRIORITY",
    "LOCAL_STT_MODELS",
    "LOCAL_PRIORITY",
    "MIN_AUDIO_BYTES",
    "DEFAULT_LANGUAGE",
    "STT_REQUEST_TIMEOUT",
    "STT_PROBE_TIMEOUT",
    "ENABLE_CACHING",
    "STT_CACHE_MAX_ENTRIES",
    "STT_CACHE_SAMPLE_BYTES",
    "STT_CONVERSION_TIMEOUT",
    "STT_PREPROCESS_ENCODING",
    "FFMPEG_PATH",
    "LOG_LEVEL",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_pipeline_env(monkeypatch):
    """Remove every pipeline variable so host credentials never leak into tests.

    Tests that need a provider configured set its variables explicitly with
    monkeypatch.setenv().
    """
    for name in PIPELINE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def ffmpeg_binary() -> Path:
    """Locate FFmpeg binary, skip tests if not found.

    Returns:
        Path to FFmpeg binary

    Raises:
        pytest.skip: If FFmpeg is not available
    """
    ffmpeg_path = shutil.which("ffmpeg")
    if not ffmpeg_path:
        pytest.skip("FFmpeg not available - install FFmpeg to run integration tests")
    return Path(ffmpeg_path)


def _generate_tone(ffmpeg_binary: Path, output: Path, codec_args) -> Path:
    result = subprocess.run(
        [
            str(ffmpeg_binary),
            "-f", "lavfi",
            "-i", "sine=frequency=440:duration=2",
            *codec_args,
            "-y",
            str(output),
        ],
        capture_output=True,
        check=False,
    )
    if result.returncode != 0:
        pytest.skip(f"Failed to generate test audio: {result.stderr.decode()}")
    return output


@pytest.fixture(scope="session")
def sample_audio_wav(tmp_path_factory: pytest.TempPathFactory, ffmpeg_binary: Path) -> Path:
    """Generate a 2-second 44.1 kHz WAV tone (session-scoped for performance)."""
    output = tmp_path_factory.mktemp("fixtures") / "tone_2s.wav"
    return _generate_tone(ffmpeg_binary, output, ["-codec:a", "pcm_s16le", "-ar", "44100"])


@pytest.fixture(scope="session")
def sample_audio_mp3(tmp_path_factory: pytest.TempPathFactory, ffmpeg_binary: Path) -> Path:
    """Generate a 2-second MP3 tone."""
    output = tmp_path_factory.mktemp("fixtures") / "tone_2s.mp3"
    return _generate_tone(ffmpeg_binary, output, ["-codec:a", "libmp3lame", "-b:a", "128k"])
