"""Output formatters for lock-scan results."""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from ..core.parsers import Occurrence
from ..core.scanner import ScanReport
from ..utils.logging import get_logger

CHECK_MARK = "✔"
NO_OCCURRENCES = "No occurrences found."


def shorten_path(path: str, cwd: Optional[str] = None) -> str:
    """Make a path relative to the working directory when it lies under it.

    Args:
        path: Path to shorten
        cwd: Working directory (defaults to ``os.getcwd()``)

    Returns:
        The relative path, or ``path`` unchanged
    """
    prefix = (cwd if cwd is not None else os.getcwd()).rstrip(os.sep) + os.sep
    return path[len(prefix):] if path.startswith(prefix) else path


def _flag(value: bool) -> str:
    return CHECK_MARK if value else ""


class MarkdownFormatter:
    """Renders occurrences as a markdown table."""

    HEADER = "| Package | Version | Dev | Optional | Source | File |"
    SEPARATOR = "|---|---|:---:|:---:|---|---|"

    def __init__(self, console: Optional[Console] = None, cwd: Optional[str] = None) -> None:
        """Initialize the markdown formatter.

        Args:
            console: Rich console instance
            cwd: Directory file paths are shortened against
        """
        self.console = console or Console()
        self.cwd = cwd

    def format_row(self, occ: Occurrence) -> str:
        return (
            f"| `{occ.package}` | `{occ.version}` | {_flag(occ.dev)} | {_flag(occ.optional)} "
            f"| {occ.source.value} | `{shorten_path(occ.lockfile_path, self.cwd)}` |"
        )

    def render(self, occurrences: List[Occurrence]) -> str:
        """Render occurrences as markdown text.

        Args:
            occurrences: Sorted occurrences

        Returns:
            The table, or a single "No occurrences found." line
        """
        if not occurrences:
            return NO_OCCURRENCES
        lines = [self.HEADER, self.SEPARATOR]
        lines.extend(self.format_row(occ) for occ in occurrences)
        return "\n".join(lines)

    def print_table(self, occurrences: List[Occurrence]) -> None:
        """Print the markdown table to the console."""
        for line in self.render(occurrences).split("\n"):
            self.console.print(line, markup=False, highlight=False, emoji=False, soft_wrap=True)


class ConsoleFormatter:
    """Rich table formatter for interactive use."""

    def __init__(self, console: Optional[Console] = None, cwd: Optional[str] = None) -> None:
        self.console = console or Console()
        self.cwd = cwd

    def _create_occurrences_table(self, occurrences: List[Occurrence]) -> Table:
        """Create occurrences table.

        Args:
            occurrences: Sorted occurrences

        Returns:
            Rich table with one row per occurrence
        """
        table = Table(title="Package Occurrences")

        table.add_column("Package", style="cyan", no_wrap=True)
        table.add_column("Version", style="blue")
        table.add_column("Dev", justify="center", style="yellow")
        table.add_column("Optional", justify="center", style="yellow")
        table.add_column("Source", style="magenta")
        table.add_column("File", style="white")

        for occ in occurrences:
            table.add_row(
                occ.package,
                occ.version,
                _flag(occ.dev),
                _flag(occ.optional),
                occ.source.value,
                shorten_path(occ.lockfile_path, self.cwd),
            )

        return table

    def print_table(self, occurrences: List[Occurrence]) -> None:
        if not occurrences:
            self.console.print(NO_OCCURRENCES)
            return
        self.console.print(self._create_occurrences_table(occurrences))


class JSONFormatter:
    """JSON formatter for lock-scan output."""

    def __init__(self, output_file: Optional[Path] = None) -> None:
        """Initialize the JSON formatter.

        Args:
            output_file: Optional output file path
        """
        self.output_file = output_file
        self.logger = get_logger("JSONFormatter")

    def format_scan_results(self, report: ScanReport) -> Dict[str, Any]:
        """Format a scan report as JSON-serialisable data.

        Args:
            report: Scan report

        Returns:
            Formatted JSON data
        """
        return {
            "scan_summary": {
                "targets": sorted(report.targets),
                "files_scanned": report.files_scanned,
                "total_occurrences": len(report.occurrences),
                "timestamp": datetime.now().isoformat(),
            },
            "skipped": [
                {"file": path, "reason": reason} for path, reason in report.skipped
            ],
            "occurrences": [occ.to_dict() for occ in report.occurrences],
        }

    def dumps(self, results: Dict[str, Any]) -> str:
        return json.dumps(results, indent=2, ensure_ascii=False)

    def save_results(
        self,
        results: Dict[str, Any],
        output_file: Optional[Path] = None
    ) -> None:
        """Save results to JSON file.

        Args:
            results: Results dictionary
            output_file: Output file path (uses instance default if None)
        """
        file_path = output_file or self.output_file
        if not file_path:
            raise ValueError("No output file specified")

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(self.dumps(results))
                f.write("\n")

            self.logger.info(f"Results saved to {file_path}")
        except IOError as e:
            self.logger.error(f"Failed to save results to {file_path}: {e}")
            raise
