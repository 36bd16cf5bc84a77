"""Scoped temporary audio files for subprocess-based conversion.

Files are created with mkstemp (no predictable names, 0600 permissions) and
removed when the context exits, whether the body succeeded, failed or was
cancelled.
"""
from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

logger = logging.getLogger(__name__)


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink()
        logger.debug(f"Cleaned up temporary file: {path}")
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Failed to cleanup temp file {path}: {e}")


@contextmanager
def secure_temp_file(
    suffix: str = "",
    prefix: str = "stt-",
    dir: Optional[Path] = None,
    data: Optional[bytes] = None,
    permissions: int = 0o600,
) -> Generator[Path, None, None]:
    """Create a temporary file, optionally pre-filled with ``data``.

    Args:
        suffix: Filename suffix (e.g., ".webm"); ffmpeg infers formats from it
        prefix: Filename prefix
        dir: Directory for the file (defaults to the system temp dir)
        data: Bytes written to the file before it is yielded
        permissions: File permissions in octal

    Yields:
        Path to the temporary file
    """
    fd, path_str = tempfile.mkstemp(suffix=suffix, prefix=prefix, dir=str(dir) if dir else None)
    temp_path = Path(path_str)

    try:
        try:
            if data:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
            else:
                os.close(fd)
        except BaseException:
            _remove_quietly(temp_path)
            raise

        try:
            temp_path.chmod(permissions)
        except OSError as e:
            logger.warning(f"Failed to set permissions on {temp_path}: {e}")

        yield temp_path
    finally:
        if temp_path.exists():
            _remove_quietly(temp_path)
