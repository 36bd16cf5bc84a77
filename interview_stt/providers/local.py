"""Placeholder slots for on-device models.

On-device inference is not bundled. A deployment can still list local models
in ``LOCAL_STT_MODELS`` to keep their position in the chain visible; each
slot fails immediately so the chain moves on without a network round trip.
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from ..errors import ProviderError
from ..models import AudioEncoding, ProviderTranscript
from .base import BaseTranscriptionProvider
from .provider_utils import build_health_result


class LocalModelPlaceholder(BaseTranscriptionProvider):
    NAME = "local"
    DEFAULT_PRIORITY = 90
    REQUIRES_CREDENTIAL = False
    ACCEPTED_ENCODINGS = frozenset({AudioEncoding.WAV})
    CONVERSION_TARGET = AudioEncoding.WAV

    def __init__(self, model: str, **kwargs: Any):
        super().__init__(None, **kwargs)
        self.model = model

    @classmethod
    def from_config(cls, config) -> Optional["LocalModelPlaceholder"]:
        providers = cls.all_from_config(config)
        return providers[0] if providers else None

    @classmethod
    def all_from_config(cls, config) -> List["LocalModelPlaceholder"]:
        """One placeholder per configured model, in configured order."""
        base = config.priority_for(cls.NAME, cls.DEFAULT_PRIORITY)
        return [
            cls(
                model,
                priority=base + index,
                request_timeout=config.request_timeout,
                probe_timeout=config.probe_timeout,
            )
            for index, model in enumerate(config.local_models)
        ]

    def get_provider_name(self) -> str:
        return f"local:{self.model}"

    def check_ready(self) -> None:
        raise ProviderError(self.get_provider_name(), "local model is not installed")

    async def _transcribe_impl(
        self, audio: bytes, encoding: AudioEncoding, language: Optional[str]
    ) -> ProviderTranscript:
        raise ProviderError(self.get_provider_name(), "local model is not installed")

    async def health_check_async(self) -> Dict[str, Any]:
        return build_health_result(
            False, "not_installed", time.time(), {"provider": self.get_provider_name()}
        )
