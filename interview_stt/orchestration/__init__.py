"""Provider fallback orchestration."""

from .fallback import FallbackOrchestrator

__all__ = ["FallbackOrchestrator"]
