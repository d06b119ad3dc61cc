"""Tests for output formatters."""

import json
import os

from rich.console import Console

from lock_scan.core.parsers import Occurrence, SourceFormat
from lock_scan.core.scanner import ScanReport
from lock_scan.output.formatters import (
    ConsoleFormatter,
    JSONFormatter,
    MarkdownFormatter,
    shorten_path,
)


def make(package, version, source, path, dev=False, optional=False):
    return Occurrence(package, version, dev, optional, source, path)


OCCURRENCES = [
    make("@pkgr/core", "0.1.1", SourceFormat.NPM_LOCK, "/work/app/package-lock.json", dev=True),
    make("is", "^3.0.0", SourceFormat.PACKAGE_JSON, "/work/app/package.json", optional=True),
    make("synckit", "0.9.2", SourceFormat.YARN_LOCK, "/elsewhere/yarn.lock"),
]


class TestShortenPath:
    """Test path shortening."""

    def test_path_under_cwd(self):
        assert shorten_path("/work/app/yarn.lock", "/work") == "app/yarn.lock"

    def test_trailing_separator_on_cwd(self):
        assert shorten_path("/work/app/yarn.lock", "/work/") == "app/yarn.lock"

    def test_path_outside_cwd(self):
        assert shorten_path("/elsewhere/yarn.lock", "/work") == "/elsewhere/yarn.lock"

    def test_sibling_prefix_is_not_shortened(self):
        assert shorten_path("/workspace/yarn.lock", "/work") == "/workspace/yarn.lock"

    def test_defaults_to_process_cwd(self):
        path = os.path.join(os.getcwd(), "package.json")
        assert shorten_path(path) == "package.json"


class TestMarkdownFormatter:
    """Test markdown table rendering."""

    def test_render_table(self):
        text = MarkdownFormatter(cwd="/work").render(OCCURRENCES)

        assert text.split("\n") == [
            "| Package | Version | Dev | Optional | Source | File |",
            "|---|---|:---:|:---:|---|---|",
            "| `@pkgr/core` | `0.1.1` | ✔ |  | npm-lock | `app/package-lock.json` |",
            "| `is` | `^3.0.0` |  | ✔ | package-json | `app/package.json` |",
            "| `synckit` | `0.9.2` |  |  | yarn-lock | `/elsewhere/yarn.lock` |",
        ]

    def test_render_empty(self):
        assert MarkdownFormatter().render([]) == "No occurrences found."

    def test_print_table(self):
        console = Console(record=True, width=40)
        MarkdownFormatter(console, cwd="/work").print_table(OCCURRENCES)

        output = console.export_text()
        assert "| `@pkgr/core` | `0.1.1` | ✔ |  | npm-lock | `app/package-lock.json` |" in output

    def test_print_empty(self):
        console = Console(record=True)
        MarkdownFormatter(console).print_table([])

        assert console.export_text().strip() == "No occurrences found."


class TestConsoleFormatter:
    """Test rich table rendering."""

    def test_print_table(self):
        console = Console(record=True, width=200)
        ConsoleFormatter(console, cwd="/work").print_table(OCCURRENCES)

        output = console.export_text()
        assert "Package Occurrences" in output
        assert "@pkgr/core" in output
        assert "app/package.json" in output

    def test_print_empty(self):
        console = Console(record=True)
        ConsoleFormatter(console).print_table([])

        assert "No occurrences found." in console.export_text()


class TestJSONFormatter:
    """Test JSON output."""

    def test_format_scan_results(self):
        report = ScanReport(
            occurrences=OCCURRENCES,
            files_scanned=4,
            skipped=[("/work/bad/package.json", "Expecting value")],
            targets=frozenset({"is", "synckit", "@pkgr/core"}),
        )
        results = JSONFormatter().format_scan_results(report)

        assert results["scan_summary"]["files_scanned"] == 4
        assert results["scan_summary"]["total_occurrences"] == 3
        assert results["scan_summary"]["targets"] == ["@pkgr/core", "is", "synckit"]
        assert results["skipped"] == [{"file": "/work/bad/package.json", "reason": "Expecting value"}]
        assert results["occurrences"][0] == {
            "package": "@pkgr/core",
            "version": "0.1.1",
            "dev": True,
            "optional": False,
            "source": "npm-lock",
            "lockfilePath": "/work/app/package-lock.json",
        }

    def test_save_results(self, tmp_path):
        output = tmp_path / "report.json"
        formatter = JSONFormatter(output)
        formatter.save_results(formatter.format_scan_results(ScanReport(occurrences=OCCURRENCES)))

        saved = json.loads(output.read_text(encoding="utf-8"))
        assert [occ["package"] for occ in saved["occurrences"]] == ["@pkgr/core", "is", "synckit"]
