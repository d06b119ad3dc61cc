"""Main CLI interface for lock-scan."""

from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from ..config import ConfigError, DEFAULT_TARGETS, SKIP_DIRS, load_scan_config
from ..core.parsers import registry
from ..core.scanner import scan_paths
from ..output.formatters import ConsoleFormatter, JSONFormatter, MarkdownFormatter
from ..utils.logging import setup_logging, get_logger

app = typer.Typer(
    name="lock-scan",
    help="Report occurrences of selected packages in npm and Yarn lockfiles and package.json manifests",
    add_completion=False
)

console = Console()
logger = get_logger("CLI")


class OutputFormat(str, Enum):
    markdown = "markdown"
    table = "table"
    json = "json"


@app.command()
def scan(
    roots: Optional[List[Path]] = typer.Argument(
        None,
        help="Directories to scan (default: current directory)"
    ),
    targets: Optional[List[str]] = typer.Option(
        None,
        "--target",
        "-t",
        help="Package name to report (repeatable)"
    ),
    targets_file: Optional[Path] = typer.Option(
        None,
        "--targets-file",
        help="File with one package name per line"
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.markdown,
        "--format",
        "-f",
        help="Output format: markdown, table or json"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the report to a file instead of stdout"
    ),
    ignore_patterns: Optional[List[str]] = typer.Option(
        None,
        "--ignore",
        help="Additional directory names or patterns to skip"
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to a lock-scan TOML config file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Scan directories for occurrences of the target packages."""

    setup_logging(verbose=verbose)

    try:
        config = load_scan_config(
            config_path=config_path,
            cli_targets=targets,
            targets_file=targets_file,
            cli_roots=[str(root) for root in roots or []],
            cli_ignore=ignore_patterns,
        )
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    logger.debug(f"Targets: {', '.join(sorted(config.targets))}")

    try:
        report = scan_paths(
            [Path(root) for root in config.roots],
            config.targets,
            config.ignore,
        )

        logger.debug(
            f"Scanned {report.files_scanned} file(s), "
            f"{len(report.skipped)} skipped, {len(report.occurrences)} occurrence(s)"
        )

        if output_format == OutputFormat.json:
            json_formatter = JSONFormatter(output)
            results = json_formatter.format_scan_results(report)
            if output:
                json_formatter.save_results(results)
            else:
                console.print(json_formatter.dumps(results), markup=False, highlight=False, soft_wrap=True)
        elif output_format == OutputFormat.table and not output:
            ConsoleFormatter(console).print_table(report.occurrences)
        else:
            markdown = MarkdownFormatter(console)
            if output:
                output.write_text(markdown.render(report.occurrences) + "\n", encoding="utf-8")
                logger.info(f"Report saved to {output}")
            else:
                markdown.print_table(report.occurrences)

    except Exception as e:
        logger.error(f"Scan failed: {e}")
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def info() -> None:
    """Show lock-scan information."""

    console.print(Panel.fit(
        "[bold blue]lock-scan[/bold blue]\n"
        "Finds selected packages in package-lock.json, yarn.lock (v1)\n"
        "and package.json files",
        title="Information"
    ))

    filenames = registry.get_supported_filenames()
    console.print("\n[bold]Supported Files:[/bold]")
    for filename, source in sorted(filenames.items()):
        console.print(f"  {filename} -> {source.value}", markup=False, highlight=False)

    console.print(f"\n[bold]Default Targets:[/bold] {', '.join(sorted(DEFAULT_TARGETS))}", highlight=False)
    console.print(f"[bold]Skipped Directories:[/bold] {', '.join(sorted(SKIP_DIRS))}", highlight=False)


def main() -> None:
    """Main entry point for lock-scan CLI."""
    app()


if __name__ == "__main__":
    main()
