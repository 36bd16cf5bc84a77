"""HuggingFace Inference API transcription provider.

Posts raw audio bytes to hosted Whisper checkpoints, trying each configured
model in turn. Models on the free tier are frequently cold (HTTP 503 while
loading), so a failing model moves on to the next one instead of failing the
provider outright.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import httpx

from ..config import DEFAULT_HUGGINGFACE_MODELS
from ..errors import ProviderError
from ..models import AudioEncoding, ProviderTranscript
from .base import BaseTranscriptionProvider
from .provider_utils import MAX_ERROR_BODY, probe_endpoint

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api-inference.huggingface.co/models"


def _extract_text(payload: Any) -> str:
    """Pull the transcript out of either response shape the API returns."""
    if isinstance(payload, dict):
        if payload.get("error"):
            raise ValueError(str(payload["error"]))
        return str(payload.get("text") or "")
    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        return str(payload[0].get("generated_text") or payload[0].get("text") or "")
    raise ValueError(f"unexpected response shape: {type(payload).__name__}")


class HuggingFaceTranscriber(BaseTranscriptionProvider):
    """Free-tier transcription through the HuggingFace Inference API."""

    NAME = "huggingface"
    DEFAULT_PRIORITY = 7
    ACCEPTED_ENCODINGS = frozenset({AudioEncoding.WAV, AudioEncoding.MP3, AudioEncoding.FLAC})
    CONVERSION_TARGET = AudioEncoding.WAV

    def __init__(
        self,
        api_key: Optional[str] = None,
        models: Sequence[str] = tuple(DEFAULT_HUGGINGFACE_MODELS.split(",")),
        api_url: str = DEFAULT_API_URL,
        anonymous: bool = False,
        **kwargs: Any,
    ):
        super().__init__(api_key, **kwargs)
        self.models = tuple(models)
        self.api_url = api_url.rstrip("/")
        self.anonymous = anonymous

    @classmethod
    def from_config(cls, config) -> Optional["HuggingFaceTranscriber"]:
        if not (config.huggingface_api_key or config.huggingface_anonymous):
            return None
        return cls(
            api_key=config.huggingface_api_key,
            models=config.huggingface_models,
            api_url=config.huggingface_api_url,
            anonymous=config.huggingface_anonymous,
            priority=config.priority_for(cls.NAME, cls.DEFAULT_PRIORITY),
            request_timeout=config.request_timeout,
            probe_timeout=config.probe_timeout,
        )

    def validate_configuration(self) -> bool:
        return bool(self.models) and (bool(self.api_key) or self.anonymous)

    def _headers(self, encoding: Optional[AudioEncoding] = None) -> Dict[str, str]:
        headers = {}
        if encoding is not None:
            headers["Content-Type"] = encoding.mime_type
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _transcribe_impl(
        self, audio: bytes, encoding: AudioEncoding, language: Optional[str]
    ) -> ProviderTranscript:
        last_error = "no models configured"
        headers = self._headers(encoding)

        async with httpx.AsyncClient(timeout=self.request_timeout) as client:
            for model in self.models:
                url = f"{self.api_url}/{model}"
                try:
                    response = await client.post(url, content=audio, headers=headers)
                except httpx.TimeoutException:
                    last_error = f"{model}: timed out"
                    logger.warning(f"HuggingFace model {model} timed out")
                    continue
                except httpx.HTTPError as e:
                    last_error = f"{model}: {type(e).__name__}: {e}"
                    logger.warning(f"HuggingFace model {model} request failed: {e}")
                    continue

                if not response.is_success:
                    body = response.text.strip()[:MAX_ERROR_BODY]
                    last_error = f"{model}: HTTP {response.status_code}: {body}"
                    logger.warning(f"HuggingFace model {model} returned {response.status_code}")
                    continue

                try:
                    text = _extract_text(response.json()).strip()
                except ValueError as e:
                    last_error = f"{model}: {e}"
                    logger.warning(f"HuggingFace model {model} returned an unusable payload: {e}")
                    continue

                if text:
                    logger.debug(f"HuggingFace model {model} produced {len(text)} characters")
                    return ProviderTranscript(text=text)
                last_error = f"{model}: empty transcript"

        raise ProviderError(self.NAME, last_error)

    async def health_check_async(self) -> Dict[str, Any]:
        model = self.models[0] if self.models else ""
        return await probe_endpoint(
            self.NAME, f"{self.api_url}/{model}", self.probe_timeout, self._headers()
        )
