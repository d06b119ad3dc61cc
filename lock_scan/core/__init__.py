"""Core parsing, aggregation and scanning logic for lock-scan."""

from .parsers import Occurrence, SourceFormat, LockfileDecodeError, registry
from .aggregator import OccurrenceAggregator, aggregate
from .scanner import LockfileScanner, ScanReport, scan_paths

__all__ = [
    "Occurrence",
    "SourceFormat",
    "LockfileDecodeError",
    "registry",
    "OccurrenceAggregator",
    "aggregate",
    "LockfileScanner",
    "ScanReport",
    "scan_paths",
]
