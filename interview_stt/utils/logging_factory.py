"""One-shot logging configuration for the transcription pipeline.

Modules keep using ``logging.getLogger(__name__)``; this factory only decides
where records go and at which level, once per process.

Usage:
    LoggingFactory.initialize(level="INFO", log_file="stt.log")
    LoggingFactory.configure_verbose(True)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party clients log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "deepgram")


class LoggingFactory:
    """Configure the root logger once for the whole application.

    Class Attributes:
        _initialized: Flag to ensure single initialization
    """

    _initialized = False

    @classmethod
    def initialize(
        cls,
        level: Union[int, str] = logging.INFO,
        log_file: Optional[Union[str, Path]] = None,
        format_string: Optional[str] = None,
        console: bool = True,
    ) -> None:
        """Initialize logging; later calls are ignored.

        Args:
            level: Root level, as a logging constant or a name like "DEBUG"
            log_file: Optional file receiving the same records as the console
            format_string: Custom format; defaults to DEFAULT_FORMAT
            console: Whether to attach a stderr stream handler
        """
        if cls._initialized:
            return

        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                level = logging.INFO

        handlers: List[logging.Handler] = []
        if console:
            handlers.append(logging.StreamHandler())
        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_path))

        logging.basicConfig(
            level=level,
            format=format_string or DEFAULT_FORMAT,
            handlers=handlers or [logging.NullHandler()],
        )

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))

        cls._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger, initializing with defaults on first use."""
        if not cls._initialized:
            cls.initialize()
        return logging.getLogger(name)

    @classmethod
    def configure_verbose(cls, verbose: bool = False) -> None:
        """Switch the root and package loggers between INFO and DEBUG."""
        level = logging.DEBUG if verbose else logging.INFO
        logging.getLogger().setLevel(level)
        logging.getLogger("interview_stt").setLevel(level)

    @classmethod
    def reset(cls) -> None:
        """Allow initialize() to run again (used by tests)."""
        cls._initialized = False
