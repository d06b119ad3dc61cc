"""Utility functions and helpers for lock-scan."""

from .logging import setup_logging, get_logger
from .path_utils import CandidateFile, classify_file, find_lock_files

__all__ = [
    "setup_logging",
    "get_logger",
    "CandidateFile",
    "classify_file",
    "find_lock_files",
]
