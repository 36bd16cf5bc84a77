"""User interface components."""

from .console import ConsoleManager

__all__ = ["ConsoleManager"]
