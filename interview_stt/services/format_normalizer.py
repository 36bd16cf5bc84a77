"""Audio format normalization through an ffmpeg subprocess."""
from __future__ import annotations

import asyncio
import logging
import shutil
import time
from typing import Optional

from ..errors import ConversionFailedError, ToolUnavailableError
from ..models import AudioEncoding
from ..utils.secure_temp import secure_temp_file
from .ffmpeg_core import build_convert_command

logger = logging.getLogger(__name__)


class FormatNormalizer:
    """Convert audio bytes between encodings with ffmpeg.

    The binary is resolved once at construction. Each conversion writes the
    input and output to scoped temp files that are removed on every exit path.
    """

    def __init__(self, ffmpeg_path: Optional[str] = "ffmpeg", timeout: float = 20.0) -> None:
        """Initialize the normalizer.

        Args:
            ffmpeg_path: Binary name or path; resolved with shutil.which
            timeout: Seconds a single conversion may run before it is killed
        """
        self._ffmpeg_path = shutil.which(ffmpeg_path) if ffmpeg_path else None
        self.timeout = timeout
        if self._ffmpeg_path is None:
            logger.warning(
                f"ffmpeg not found ({ffmpeg_path!r}); audio format conversion is disabled"
            )

    @classmethod
    def from_config(cls, config) -> "FormatNormalizer":
        return cls(ffmpeg_path=config.ffmpeg_path, timeout=config.conversion_timeout)

    @property
    def available(self) -> bool:
        return self._ffmpeg_path is not None

    @property
    def ffmpeg_path(self) -> Optional[str]:
        return self._ffmpeg_path

    async def convert(
        self, data: bytes, from_encoding: AudioEncoding, to_encoding: AudioEncoding
    ) -> bytes:
        """Convert ``data`` from one encoding to another.

        Returns ``data`` itself when both encodings are equal.

        Raises:
            ToolUnavailableError: If ffmpeg could not be located
            ConversionFailedError: If ffmpeg exits non-zero, times out, or
                produces an empty file, or the temp files cannot be written
                or read
        """
        if from_encoding == to_encoding:
            return data
        if self._ffmpeg_path is None:
            raise ToolUnavailableError("ffmpeg is not installed or not on PATH")

        start = time.perf_counter()
        try:
            with secure_temp_file(suffix=from_encoding.suffix, data=data) as source, secure_temp_file(
                suffix=to_encoding.suffix
            ) as target:
                cmd = build_convert_command(self._ffmpeg_path, source, target, to_encoding)
                await self._run(cmd)
                output = target.read_bytes()
        except OSError as e:
            raise ConversionFailedError(f"Temporary file I/O failed during conversion: {e}") from e

        if not output:
            raise ConversionFailedError(
                f"ffmpeg produced an empty {to_encoding.value} file from {from_encoding.value}"
            )

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Converted {from_encoding.value} -> {to_encoding.value} "
            f"({len(data)} -> {len(output)} bytes) in {elapsed_ms:.0f}ms"
        )
        return output

    async def _run(self, cmd: list) -> None:
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ToolUnavailableError(f"Cannot execute ffmpeg: {e}") from e

        try:
            _, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            _kill(proc)
            await proc.wait()
            raise ConversionFailedError(f"ffmpeg timed out after {self.timeout}s") from None
        except asyncio.CancelledError:
            _kill(proc)
            raise

        if proc.returncode != 0:
            message = (stderr or b"").decode(errors="replace").strip()
            raise ConversionFailedError(
                f"ffmpeg exited with code {proc.returncode}: {message[:200]}",
                returncode=proc.returncode,
                stderr=message,
            )


def _kill(proc: asyncio.subprocess.Process) -> None:
    try:
        proc.kill()
    except ProcessLookupError:
        pass
