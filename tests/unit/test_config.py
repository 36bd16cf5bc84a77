"""Tests for interview_stt.config."""

from pathlib import Path

import pytest

from interview_stt.config import PipelineConfig, load_config, load_environment


class TestPipelineConfigDefaults:
    def test_defaults(self):
        config = PipelineConfig(ffmpeg_path=None)
        assert config.min_audio_bytes == 1000
        assert config.default_language == "en"
        assert config.request_timeout == 30.0
        assert config.probe_timeout == 0.8
        assert config.enable_caching is True
        assert config.cache_max_entries == 500
        assert config.cache_sample_bytes == 4096
        assert config.conversion_timeout == 20.0
        assert config.preprocess_encoding is None
        assert config.deepgram_model == "nova-2"
        assert config.openai_model == "whisper-1"
        assert config.elevenlabs_model == "scribe_v1"
        assert config.google_speech_model == "latest_long"
        assert config.azure_speech_region is None
        assert config.huggingface_models == (
            "openai/whisper-tiny",
            "openai/whisper-base",
            "openai/whisper-small",
        )
        assert config.priority_overrides == {}

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("MIN_AUDIO_BYTES", "2048")
        monkeypatch.setenv("ENABLE_CACHING", "false")
        monkeypatch.setenv("HUGGINGFACE_MODELS", "a/one, b/two")
        monkeypatch.setenv("OPENAI_PRIORITY", "0")
        monkeypatch.setenv("STT_REQUEST_TIMEOUT", "12.5")

        config = PipelineConfig(ffmpeg_path=None)

        assert config.min_audio_bytes == 2048
        assert config.enable_caching is False
        assert config.huggingface_models == ("a/one", "b/two")
        assert config.priority_for("openai", 4) == 0
        assert config.priority_for("deepgram", 2) == 2
        assert config.request_timeout == 12.5

    def test_hf_api_key_alias(self, monkeypatch):
        monkeypatch.setenv("HF_API_KEY", "hf_alias")
        assert PipelineConfig(ffmpeg_path=None).huggingface_api_key == "hf_alias"

    def test_cloud_speech_credentials_from_environment(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", "/etc/gcp/sa.json")
        monkeypatch.setenv("AZURE_SPEECH_KEY", "az-secret")
        monkeypatch.setenv("AZURE_SPEECH_REGION", "eastus")
        monkeypatch.setenv("GOOGLE_PRIORITY", "9")

        config = PipelineConfig(ffmpeg_path=None)

        assert config.google_application_credentials == "/etc/gcp/sa.json"
        assert config.google_speech_api_key is None
        assert config.azure_speech_key == "az-secret"
        assert config.azure_speech_region == "eastus"
        assert config.priority_for("google", 3) == 9
        assert "az-secret" not in repr(config)

    def test_ffmpeg_path_from_environment(self, monkeypatch):
        monkeypatch.setenv("FFMPEG_PATH", "/opt/ffmpeg/bin/ffmpeg")
        assert PipelineConfig().ffmpeg_path == "/opt/ffmpeg/bin/ffmpeg"

    def test_secrets_hidden_from_repr(self):
        config = PipelineConfig(
            ffmpeg_path=None, openai_api_key="sk-secret", deepgram_api_key="dg-secret"
        )
        assert "sk-secret" not in repr(config)
        assert "dg-secret" not in repr(config)

    def test_config_is_immutable(self):
        config = PipelineConfig(ffmpeg_path=None)
        with pytest.raises(Exception):
            config.min_audio_bytes = 5


class TestPipelineConfigValidation:
    def test_invalid_integer_names_variable(self, monkeypatch):
        monkeypatch.setenv("STT_CACHE_MAX_ENTRIES", "lots")
        with pytest.raises(ValueError, match="STT_CACHE_MAX_ENTRIES"):
            PipelineConfig(ffmpeg_path=None)

    def test_invalid_float_names_variable(self, monkeypatch):
        monkeypatch.setenv("STT_REQUEST_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="STT_REQUEST_TIMEOUT"):
            PipelineConfig(ffmpeg_path=None)

    def test_cache_size_must_be_positive(self):
        with pytest.raises(ValueError):
            PipelineConfig(ffmpeg_path=None, cache_max_entries=0)

    def test_timeouts_must_be_positive(self):
        with pytest.raises(ValueError, match="request_timeout"):
            PipelineConfig(ffmpeg_path=None, request_timeout=0)

    def test_assemblyai_requires_poll_bound(self):
        with pytest.raises(ValueError, match="ASSEMBLYAI_MAX_POLL_SECONDS"):
            PipelineConfig(ffmpeg_path=None, assemblyai_api_key="aai-key")

    def test_assemblyai_with_poll_bound(self, monkeypatch):
        monkeypatch.setenv("ASSEMBLYAI_API_KEY", "aai-key")
        monkeypatch.setenv("ASSEMBLYAI_MAX_POLL_SECONDS", "45")
        config = PipelineConfig(ffmpeg_path=None)
        assert config.assemblyai_max_poll_seconds == 45.0


class TestLoadEnvironment:
    def test_loads_dotenv_without_overriding(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("DEEPGRAM_API_KEY=from-file\nOPENAI_API_KEY=from-file\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("OPENAI_API_KEY", "from-env")
        # load_dotenv writes os.environ directly; register the key for removal
        monkeypatch.setenv("DEEPGRAM_API_KEY", "placeholder")
        monkeypatch.delenv("DEEPGRAM_API_KEY")

        loaded = load_environment()

        assert loaded == Path(".env")
        config = PipelineConfig(ffmpeg_path=None)
        assert config.deepgram_api_key == "from-file"
        assert config.openai_api_key == "from-env"

    def test_load_config_returns_fresh_instance(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("FFMPEG_PATH", "ffmpeg")
        first = load_config()
        monkeypatch.setenv("MIN_AUDIO_BYTES", "10")
        second = load_config()
        assert first.min_audio_bytes == 1000
        assert second.min_audio_bytes == 10
