"""Scanning of discovered files for target package occurrences."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Tuple

from ..utils.logging import get_logger
from ..utils.path_utils import CandidateFile, find_lock_files
from .aggregator import OccurrenceAggregator
from .parsers import LockfileDecodeError, Occurrence, ParserRegistry
from .parsers import registry as default_registry


@dataclass
class ScanReport:
    """Outcome of scanning a set of files."""

    occurrences: List[Occurrence] = field(default_factory=list)
    files_scanned: int = 0
    skipped: List[Tuple[str, str]] = field(default_factory=list)
    targets: FrozenSet[str] = frozenset()


class LockfileScanner:
    """Reads candidate files and collects occurrences of target packages."""

    def __init__(
        self,
        targets: Iterable[str],
        registry: Optional[ParserRegistry] = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            targets: Exact package names to report
            registry: Parser registry (defaults to the built-in parsers)
        """
        self.targets: FrozenSet[str] = frozenset(targets)
        self.registry = registry or default_registry
        self.logger = get_logger("scanner")

    def parse_file(self, candidate: CandidateFile) -> List[Occurrence]:
        """Read and parse one file.

        Args:
            candidate: File to parse

        Returns:
            Occurrences found in the file

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not UTF-8
            LockfileDecodeError: If the content cannot be decoded
        """
        # utf-8-sig tolerates the BOM some editors write into package.json
        content = candidate.path.read_text(encoding="utf-8-sig")
        return self.registry.parse(
            candidate.source, content, str(candidate.path), self.targets
        )

    def scan_file(self, candidate: CandidateFile) -> Tuple[List[Occurrence], Optional[str]]:
        """Parse one file, isolating read and decode failures.

        Args:
            candidate: File to parse

        Returns:
            Occurrences found, and the failure reason if the file was skipped
        """
        try:
            occurrences = self.parse_file(candidate)
        except LockfileDecodeError as e:
            reason = e.reason
        except (OSError, UnicodeDecodeError) as e:
            reason = str(e)
        else:
            self.logger.debug(f"{candidate.path}: {len(occurrences)} occurrence(s)")
            return occurrences, None

        self.logger.warning(f"Skipped read/parse: {candidate.path} -> {reason}")
        return [], reason

    def scan(self, candidates: Iterable[CandidateFile]) -> ScanReport:
        """Scan files and aggregate their occurrences.

        A file that cannot be read or decoded contributes nothing and is
        listed in ``ScanReport.skipped``.

        Args:
            candidates: Files to scan

        Returns:
            Sorted, duplicate-free occurrences plus scan statistics
        """
        aggregator = OccurrenceAggregator()
        report = ScanReport(targets=self.targets)

        for candidate in candidates:
            occurrences, failure = self.scan_file(candidate)
            report.files_scanned += 1
            if failure is not None:
                report.skipped.append((str(candidate.path), failure))
                continue
            aggregator.add(occurrences)

        report.occurrences = aggregator.results()
        return report


def scan_paths(
    roots: Iterable[Path],
    targets: Iterable[str],
    ignore_patterns: Optional[List[str]] = None,
) -> ScanReport:
    """Discover dependency files under ``roots`` and scan them.

    Args:
        roots: Directories to search
        targets: Exact package names to report
        ignore_patterns: Extra directory names or patterns to skip

    Returns:
        Scan report for every file found
    """
    candidates = find_lock_files(roots, ignore_patterns)
    return LockfileScanner(targets).scan(candidates)
