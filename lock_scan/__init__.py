"""lock-scan - report occurrences of selected packages in npm and Yarn dependency files."""

__version__ = "0.1.0"

from .core import (
    LockfileScanner,
    Occurrence,
    OccurrenceAggregator,
    ScanReport,
    SourceFormat,
    aggregate,
    scan_paths,
)
from .core.parsers import NpmLockParser, PackageJsonParser, YarnLockParser
from .output.formatters import ConsoleFormatter, JSONFormatter, MarkdownFormatter

__all__ = [
    "LockfileScanner",
    "Occurrence",
    "OccurrenceAggregator",
    "ScanReport",
    "SourceFormat",
    "aggregate",
    "scan_paths",
    "NpmLockParser",
    "PackageJsonParser",
    "YarnLockParser",
    "ConsoleFormatter",
    "JSONFormatter",
    "MarkdownFormatter",
]
