"""Command line interface for the interview transcription pipeline."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import PipelineConfig, load_config
from .errors import AllProvidersFailedError, AudioValidationError, UnsupportedEncodingError
from .services.transcription import TranscriptionService
from .ui.console import ConsoleManager
from .utils.logging_factory import LoggingFactory

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_INPUT = 1
EXIT_ALL_PROVIDERS_FAILED = 2


def setup_logging(verbose: bool = False) -> None:
    """Set the package log level from the verbosity flag."""
    LoggingFactory.configure_verbose(verbose)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="interview-stt",
        description="Transcribe recorded interview answers with multi-provider fallback",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  # Transcribe a browser recording
  interview-stt transcribe answer.webm --language en

  # Machine-readable output
  interview-stt --json-output transcribe answer.wav

  # Show the provider chain and probe each provider
  interview-stt providers --check

Providers are enabled by setting their API keys (ASSEMBLYAI_API_KEY,
DEEPGRAM_API_KEY, ELEVENLABS_API_KEY, OPENAI_API_KEY, HUGGINGFACE_API_KEY)
in the environment or a .env file.
        """,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "--json-output",
        action="store_true",
        help="Print the JSON result shape instead of formatted output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

    transcribe_parser = subparsers.add_parser(
        "transcribe",
        help="Transcribe an audio file",
        description="Transcribe an audio file, falling back across configured providers",
    )
    transcribe_parser.add_argument("audio_file", help="Input audio file path")
    transcribe_parser.add_argument(
        "--encoding",
        "-e",
        help="Audio encoding, e.g. webm or audio/webm;codecs=opus (default: file suffix)",
    )
    transcribe_parser.add_argument(
        "--language", "-l", help="Language hint (default: DEFAULT_LANGUAGE, usually en)"
    )

    providers_parser = subparsers.add_parser(
        "providers",
        help="List configured providers in attempt order",
    )
    providers_parser.add_argument(
        "--check", action="store_true", help="Probe each provider and report its health"
    )

    return parser


def transcribe_command(
    args: argparse.Namespace,
    console_manager: ConsoleManager,
    config: PipelineConfig,
    service: Optional[TranscriptionService] = None,
) -> int:
    """Execute the transcribe command.

    Returns:
        0 on success, 1 for unusable input, 2 when every provider failed
    """
    audio_path = Path(args.audio_file)
    encoding = args.encoding or audio_path.suffix.lstrip(".")
    if not encoding:
        console_manager.print_error(
            UnsupportedEncodingError(f"Cannot infer encoding from '{audio_path.name}'; use --encoding")
        )
        return EXIT_INVALID_INPUT

    try:
        audio_bytes = audio_path.read_bytes()
    except OSError as e:
        logger.error(f"Cannot read {audio_path}: {e}")
        return EXIT_INVALID_INPUT

    service = service or TranscriptionService.from_config(config)
    language = args.language or config.default_language

    try:
        with console_manager.status(f"Transcribing {audio_path.name}..."):
            result = asyncio.run(service.transcribe_async(audio_bytes, encoding, language))
    except AudioValidationError as e:
        console_manager.print_error(e)
        return EXIT_INVALID_INPUT
    except AllProvidersFailedError as e:
        console_manager.print_error(e)
        return EXIT_ALL_PROVIDERS_FAILED

    console_manager.print_result(result)
    return EXIT_OK


def providers_command(
    args: argparse.Namespace,
    console_manager: ConsoleManager,
    config: PipelineConfig,
    service: Optional[TranscriptionService] = None,
) -> int:
    """Execute the providers command."""
    service = service or TranscriptionService.from_config(config)
    health = asyncio.run(service.check_provider_health()) if args.check else None
    console_manager.print_providers(service.get_provider_status(), health)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    console_manager = ConsoleManager(verbose=args.verbose, json_output=args.json_output)
    console_manager.setup_logging(logging.getLogger("interview_stt"))
    setup_logging(args.verbose)

    try:
        config = load_config()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_INVALID_INPUT

    if config.log_file:
        LoggingFactory.initialize(level=config.log_level, log_file=config.log_file, console=False)

    try:
        if args.command == "transcribe":
            return transcribe_command(args, console_manager, config)
        if args.command == "providers":
            return providers_command(args, console_manager, config)
        parser.print_help()
        return EXIT_INVALID_INPUT
    except KeyboardInterrupt:
        logger.error("Operation cancelled by user")
        return EXIT_INVALID_INPUT


if __name__ == "__main__":
    sys.exit(main())
