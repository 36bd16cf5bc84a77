"""Audio services: ffmpeg-based format normalization.

The transcription facade lives in :mod:`interview_stt.services.transcription`
and is re-exported from the top-level package.
"""

from .ffmpeg_core import build_base_cmd, build_convert_command
from .format_normalizer import FormatNormalizer

__all__ = ["FormatNormalizer", "build_base_cmd", "build_convert_command"]
