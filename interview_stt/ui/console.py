"""Console output for the command line interface.

ConsoleManager renders results with Rich when attached to a terminal, and
prints the JSON wire shapes instead when ``json_output`` is set, so scripts
can consume exactly what an HTTP caller would receive.
"""

from __future__ import annotations

import json
import logging
import re
import sys
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..errors import TranscriptionError
from ..models import TranscriptionResult

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


class ThreadSafeConsole:
    """Thread-safe wrapper around Rich Console."""

    def __init__(self, console: Console):
        self._console = console
        self._lock = threading.RLock()

    @property
    def raw(self) -> Console:
        return self._console

    def print(self, *args, **kwargs):
        with self._lock:
            self._console.print(*args, **kwargs)

    @contextmanager
    def status(self, *args, **kwargs):
        with self._lock:
            with self._console.status(*args, **kwargs) as status:
                yield status


class ConsoleManager:
    """Manages console output with Rich integration."""

    def __init__(self, verbose: bool = False, json_output: bool = False, console: Optional[Console] = None):
        self.verbose = verbose
        self.json_output = json_output
        self.is_tty = sys.stderr.isatty()

        if self.json_output:
            self.console = None
        else:
            self.console = ThreadSafeConsole(console or Console(stderr=True))

    def setup_logging(self, logger: logging.Logger) -> None:
        """Attach a Rich handler (or a plain one in JSON mode) to ``logger``.

        Calling it twice does not add a second handler.
        """

        def _has_handler_of_type(h_type):
            return any(isinstance(h, h_type) for h in logger.handlers)

        if self.json_output:
            if not _has_handler_of_type(logging.StreamHandler):
                handler = logging.StreamHandler(sys.stderr)
                handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
                logger.addHandler(handler)
        elif not _has_handler_of_type(RichHandler):
            handler = RichHandler(
                console=self.console.raw if self.console else None,
                show_time=True,
                show_path=self.verbose,
                rich_tracebacks=True,
            )
            logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if self.verbose else logging.INFO)

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        """Show a spinner while the body runs (terminal mode only)."""
        if self.console is not None and self.is_tty:
            with self.console.status(message):
                yield
        else:
            yield

    def print_result(self, result: TranscriptionResult) -> None:
        if self.json_output:
            self._emit_json(result.to_dict())
            return

        subtitle = f"{escape(result.provider_name)} | {result.elapsed_ms}ms"
        if result.confidence is not None:
            subtitle += f" | confidence {result.confidence:.2f}"
        if result.served_from_cache:
            subtitle += " | cached"
        self.console.print(
            Panel(Text(result.text), title="Transcript", subtitle=subtitle, border_style="green")
        )

    def print_error(self, error: TranscriptionError) -> None:
        if self.json_output:
            self._emit_json(error.to_dict())
            return

        self.console.print(f"[red]ERROR ({error.code}): {_clean(error.message)}[/red]")
        for provider, detail in getattr(error, "provider_errors", {}).items():
            self.console.print(f"  [yellow]{_clean(provider)}[/yellow]: {_clean(detail)}")

    def print_providers(
        self, status: Dict[str, Any], health: Optional[Dict[str, Dict[str, Any]]] = None
    ) -> None:
        if self.json_output:
            payload = dict(status)
            if health is not None:
                payload["health"] = health
            self._emit_json(payload)
            return

        providers: List[Dict[str, Any]] = status.get("providers", [])
        if not providers:
            self.console.print("[yellow]No transcription providers configured[/yellow]")
            return

        table = Table(title="Transcription Providers")
        table.add_column("#", justify="right")
        table.add_column("Provider", style="cyan")
        table.add_column("Priority", justify="right")
        table.add_column("Encodings")
        if health is not None:
            table.add_column("Health", style="bold")
            table.add_column("Latency", justify="right")

        for index, provider in enumerate(providers, start=1):
            row = [
                str(index),
                escape(provider["name"]),
                str(provider["priority"]),
                ", ".join(provider["acceptedEncodings"]),
            ]
            if health is not None:
                check = health.get(provider["name"], {})
                color = "green" if check.get("healthy") else "red"
                row.append(f"[{color}]{check.get('status', 'unknown')}[/{color}]")
                row.append(f"{check.get('response_time_ms', 0):.0f}ms")
            table.add_row(*row)

        self.console.print(table)

    def _emit_json(self, payload: Dict[str, Any]) -> None:
        print(json.dumps(payload, ensure_ascii=False, default=str))


def _clean(value: str) -> str:
    """Strip control characters and escape Rich markup in untrusted text."""
    return escape(_CONTROL_CHARS.sub("", value))
