"""AssemblyAI transcription provider.

AssemblyAI is a two-phase API: the audio is uploaded first, a transcript job
is submitted against the returned URL, and the job is polled until it
completes or fails. Polling is bounded by a mandatory maximum wait.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from ..errors import ProviderError
from ..models import AudioEncoding, ProviderTranscript
from .base import BaseTranscriptionProvider
from .provider_utils import probe_endpoint, raise_for_status

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.assemblyai.com/v2"


class UploadResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    upload_url: str


class TranscriptRequest(BaseModel):
    audio_url: str
    language_code: Optional[str] = None
    language_detection: Optional[bool] = None
    speech_model: Optional[str] = None


class TranscriptStatus(BaseModel):
    """Subset of the transcript resource the provider reads."""

    model_config = ConfigDict(extra="ignore")

    id: str
    status: str
    text: Optional[str] = None
    confidence: Optional[float] = None
    error: Optional[str] = None


class AssemblyAITranscriber(BaseTranscriptionProvider):
    """Upload, submit and poll against the AssemblyAI v2 REST API."""

    NAME = "assemblyai"
    DEFAULT_PRIORITY = 1

    def __init__(
        self,
        api_key: Optional[str] = None,
        max_poll_seconds: float = 60.0,
        poll_interval: float = 1.0,
        api_url: str = DEFAULT_API_URL,
        model: Optional[str] = None,
        **kwargs: Any,
    ):
        """Initialize the transcriber.

        Args:
            api_key: AssemblyAI API key
            max_poll_seconds: Longest total wait for a submitted job
            poll_interval: Delay between status polls
            api_url: Base URL of the v2 API
            model: Optional speech model name sent with the job
        """
        super().__init__(api_key, **kwargs)
        if max_poll_seconds <= 0:
            raise ValueError("max_poll_seconds must be positive")
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self.max_poll_seconds = max_poll_seconds
        self.poll_interval = poll_interval
        self.api_url = api_url.rstrip("/")
        self.model = model

    @classmethod
    def from_config(cls, config) -> Optional["AssemblyAITranscriber"]:
        if not config.assemblyai_api_key:
            return None
        return cls(
            api_key=config.assemblyai_api_key,
            max_poll_seconds=config.assemblyai_max_poll_seconds,
            poll_interval=config.assemblyai_poll_interval,
            api_url=config.assemblyai_api_url,
            model=config.assemblyai_model,
            priority=config.priority_for(cls.NAME, cls.DEFAULT_PRIORITY),
            request_timeout=config.request_timeout,
            probe_timeout=config.probe_timeout,
        )

    @property
    def call_timeout(self) -> float:
        return self.request_timeout + self.max_poll_seconds

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_url,
            headers={"authorization": self.api_key or ""},
            timeout=self.request_timeout,
        )

    async def _transcribe_impl(
        self, audio: bytes, encoding: AudioEncoding, language: Optional[str]
    ) -> ProviderTranscript:
        async with self._create_client() as client:
            upload_url = await self._upload(client, audio)
            transcript_id = await self._submit(client, upload_url, language)
            logger.debug(f"AssemblyAI job {transcript_id} submitted")
            return await self._poll(client, transcript_id)

    async def _upload(self, client: httpx.AsyncClient, audio: bytes) -> str:
        response = await client.post(
            "/upload", content=audio, headers={"content-type": "application/octet-stream"}
        )
        raise_for_status(self.NAME, response, "upload")
        return self._parse(UploadResponse, response).upload_url

    async def _submit(
        self, client: httpx.AsyncClient, upload_url: str, language: Optional[str]
    ) -> str:
        request = TranscriptRequest(
            audio_url=upload_url,
            language_code=language,
            language_detection=None if language else True,
            speech_model=self.model,
        )
        response = await client.post("/transcript", json=request.model_dump(exclude_none=True))
        raise_for_status(self.NAME, response, "submit")
        return self._parse(TranscriptStatus, response).id

    async def _poll(self, client: httpx.AsyncClient, transcript_id: str) -> ProviderTranscript:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.max_poll_seconds

        while True:
            response = await client.get(f"/transcript/{transcript_id}")
            raise_for_status(self.NAME, response, "poll")
            job = self._parse(TranscriptStatus, response)

            if job.status == "completed":
                return ProviderTranscript(text=job.text or "", confidence=job.confidence)
            if job.status == "error":
                raise ProviderError(self.NAME, f"transcription failed: {job.error or 'unknown error'}")

            if loop.time() + self.poll_interval > deadline:
                raise ProviderError(
                    self.NAME,
                    f"polling timed out after {self.max_poll_seconds}s (last status: {job.status})",
                )
            await asyncio.sleep(self.poll_interval)

    def _parse(self, model: type, response: httpx.Response) -> Any:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ProviderError(self.NAME, f"malformed response: {e}") from e

    async def health_check_async(self) -> Dict[str, Any]:
        return await probe_endpoint(
            self.NAME,
            f"{self.api_url}/transcript?limit=1",
            self.probe_timeout,
            {"authorization": self.api_key or ""},
        )
