"""Logging utilities for lock-scan."""

import logging
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Reports go to stdout, diagnostics to stderr.
_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
    "critical": "red bold",
    "debug": "dim",
})


def _rich_handler() -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True, theme=_THEME),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s"))
    return handler


class LockScanLogger:
    """Named logger writing rich-formatted diagnostics to stderr."""

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        self.logger = logging.getLogger(f"lock_scan.{name}")
        self.logger.setLevel(level)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Install a single rich handler."""
        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()
        self.logger.addHandler(_rich_handler())
        self.logger.propagate = False

    def setLevel(self, level: int) -> None:
        self.logger.setLevel(level)

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(msg, extra=kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(msg, extra=kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(msg, extra=kwargs)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(msg, extra=kwargs)


_loggers = {}


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    verbose: bool = False
) -> None:
    """Setup logging configuration for lock-scan.

    Args:
        level: Logging level
        log_file: Optional log file path
        verbose: Enable verbose logging
    """
    if verbose:
        level = logging.DEBUG

    handlers: list = [_rich_handler()]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for scoped in _loggers.values():
        scoped.setLevel(level)
        if log_file:
            scoped.logger.addHandler(handlers[-1])


def get_logger(name: str) -> LockScanLogger:
    """Get a lock-scan logger instance.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    if name not in _loggers:
        _loggers[name] = LockScanLogger(name)
    return _loggers[name]
