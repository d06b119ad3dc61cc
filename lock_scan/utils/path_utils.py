"""Path utilities for finding lockfiles and filtering paths."""

import fnmatch
import os
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator, List, Optional

from ..config import SKIP_DIRS
from ..core.parsers import ParserRegistry, SourceFormat, registry
from .logging import get_logger

logger = get_logger("discovery")


@dataclass(frozen=True)
class CandidateFile:
    """A discovered file tagged with the format it is parsed as."""

    path: Path
    source: SourceFormat


class PathFilter:
    """Decides which directories are skipped during discovery."""

    def __init__(
        self,
        ignore_patterns: Optional[List[str]] = None,
        skip_dirs: FrozenSet[str] = SKIP_DIRS,
    ) -> None:
        """Initialize path filter.

        Args:
            ignore_patterns: Extra directory names or glob patterns to skip
            skip_dirs: Directory names that are always skipped
        """
        self.skip_dirs = skip_dirs
        self.ignore_patterns = ignore_patterns or []

    def is_ignored(self, path: Path) -> bool:
        """Check if a directory should be skipped.

        Args:
            path: Directory to check

        Returns:
            True if the directory should not be descended into
        """
        if path.name in self.skip_dirs:
            return True

        path_str = path.as_posix()
        for pattern in self.ignore_patterns:
            if path.name == pattern or fnmatch.fnmatch(path.name, pattern):
                return True
            if fnmatch.fnmatch(path_str, pattern):
                return True
        return False


class LockfileFinder:
    """Finds npm and Yarn dependency files in directory trees."""

    def __init__(
        self,
        ignore_patterns: Optional[List[str]] = None,
        parsers: ParserRegistry = registry,
    ) -> None:
        self.path_filter = PathFilter(ignore_patterns)
        # Filenames come from the registered parsers
        self.filename_formats = parsers.get_supported_filenames()

    def find_lock_files(self, roots: Iterable[Path]) -> List[CandidateFile]:
        """Find all known dependency files under the given roots.

        Missing roots are logged and skipped.

        Args:
            roots: Directories (or single files) to search

        Returns:
            Candidate files in a deterministic order
        """
        found = []
        for root in roots:
            abs_root = Path(root).resolve()
            if not abs_root.exists():
                logger.error(f"Path not found: {abs_root}")
                continue
            if abs_root.is_file():
                source = self.filename_formats.get(abs_root.name)
                if source is not None:
                    found.append(CandidateFile(abs_root, source))
                continue
            for file_path in self._walk_files(abs_root):
                found.append(CandidateFile(file_path, self.filename_formats[file_path.name]))
        return found

    def _walk_files(self, root_path: Path) -> Iterator[Path]:
        """Walk a directory tree, pruning skipped directories.

        Args:
            root_path: Root directory to walk

        Yields:
            Paths of files with a recognised name
        """
        # Unreadable directories are skipped (os.walk ignores errors)
        for dirpath, dirnames, filenames in os.walk(root_path):
            current = Path(dirpath)
            dirnames[:] = sorted(
                d for d in dirnames if not self.path_filter.is_ignored(current / d)
            )
            for name in sorted(filenames):
                if name in self.filename_formats and (current / name).is_file():
                    yield current / name


def classify_file(file_path: Path) -> Optional[SourceFormat]:
    """Map a file name to its source format.

    Args:
        file_path: Path to the file

    Returns:
        Source format or None if the name is not recognised
    """
    return registry.classify(Path(file_path))


def find_lock_files(
    roots: Iterable[Path],
    ignore_patterns: Optional[List[str]] = None
) -> List[CandidateFile]:
    """Convenience function to find dependency files.

    Args:
        roots: Directories to search
        ignore_patterns: Additional ignore patterns

    Returns:
        List of found candidate files
    """
    finder = LockfileFinder(ignore_patterns)
    return finder.find_lock_files(roots)
