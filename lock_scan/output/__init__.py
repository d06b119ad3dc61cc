"""Output formatters for lock-scan."""

from .formatters import ConsoleFormatter, JSONFormatter, MarkdownFormatter, shorten_path

__all__ = [
    "ConsoleFormatter",
    "JSONFormatter",
    "MarkdownFormatter",
    "shorten_path",
]
