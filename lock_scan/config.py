"""
Configuration management for lock-scan.

Settings are resolved from, in order of priority:
1. command-line options
2. .lock-scan.toml in the working directory
3. [tool.lock-scan] in pyproject.toml
4. the built-in defaults below
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional

# Packages reported when no targets are configured
DEFAULT_TARGETS: FrozenSet[str] = frozenset({
    "eslint-config-prettier",
    "eslint-plugin-prettier",
    "synckit",
    "@pkgr/core",
    "napi-postinstall",
    "got-fetch",
    "is",
})

DEFAULT_ROOTS: List[str] = ["."]

# Directories never descended into during discovery
SKIP_DIRS: FrozenSet[str] = frozenset({
    "node_modules",
    ".git",
    ".next",
    "dist",
    "build",
    "out",
    ".turbo",
    ".cache",
})

LOCAL_CONFIG_NAME = ".lock-scan.toml"
TOOL_SECTION = "lock-scan"


class ConfigError(ValueError):
    """Raised when a configuration or targets file cannot be used."""


@dataclass
class ScanConfig:
    """Resolved settings for one scan."""

    targets: FrozenSet[str] = DEFAULT_TARGETS
    roots: List[str] = field(default_factory=lambda: list(DEFAULT_ROOTS))
    ignore: List[str] = field(default_factory=list)


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to load config from {config_path}: {e}") from e


def _string_list(value: object, key: str, source: Path) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{key}' in {source} must be a list of strings")
    return value


def find_config_section(base_dir: Path, config_path: Optional[Path] = None) -> tuple[dict, Optional[Path]]:
    """
    Locate the lock-scan settings table.

    Args:
        base_dir: Directory searched for config files.
        config_path: Explicit config file; its top-level table is used.

    Returns:
        The settings table (possibly empty) and the file it came from.
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        return load_config_file(config_path), config_path

    local_path = base_dir / LOCAL_CONFIG_NAME
    if local_path.exists():
        return load_config_file(local_path), local_path

    pyproject_path = base_dir / "pyproject.toml"
    if pyproject_path.exists():
        section = load_config_file(pyproject_path).get("tool", {}).get(TOOL_SECTION, {})
        if section:
            return section, pyproject_path

    return {}, None


def read_targets_file(path: Path) -> FrozenSet[str]:
    """Read newline-separated package names, ignoring blanks and # comments."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read targets file {path}: {e}") from e

    names = set()
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            names.add(line)
    return frozenset(names)


def resolve_targets(
    cli_targets: Optional[Iterable[str]] = None,
    targets_file: Optional[Path] = None,
    configured: Optional[Iterable[str]] = None,
) -> FrozenSet[str]:
    """
    Build the immutable target set.

    Names given on the command line and in a targets file are combined;
    when neither is given the configured list, then the defaults, apply.
    """
    names = set(cli_targets or [])
    if targets_file is not None:
        names |= read_targets_file(targets_file)
    if names:
        return frozenset(names)
    if configured:
        return frozenset(configured)
    return DEFAULT_TARGETS


def load_scan_config(
    base_dir: Optional[Path] = None,
    config_path: Optional[Path] = None,
    cli_targets: Optional[Iterable[str]] = None,
    targets_file: Optional[Path] = None,
    cli_roots: Optional[Iterable[str]] = None,
    cli_ignore: Optional[Iterable[str]] = None,
) -> ScanConfig:
    """
    Resolve the settings for a scan.

    Args:
        base_dir: Directory searched for config files (default: cwd).
        config_path: Explicit config file.
        cli_targets: Target names from the command line.
        targets_file: File of target names from the command line.
        cli_roots: Roots from the command line.
        cli_ignore: Extra ignore patterns from the command line.

    Returns:
        ScanConfig with command-line values taking precedence.
    """
    section, source = find_config_section(base_dir or Path.cwd(), config_path)

    configured_targets = None
    configured_roots = None
    configured_ignore: List[str] = []
    if "targets" in section:
        configured_targets = _string_list(section["targets"], "targets", source)
    if "roots" in section:
        configured_roots = _string_list(section["roots"], "roots", source)
    if "ignore" in section:
        configured_ignore = _string_list(section["ignore"], "ignore", source)

    roots = list(cli_roots or []) or configured_roots or list(DEFAULT_ROOTS)
    ignore = configured_ignore + list(cli_ignore or [])

    return ScanConfig(
        targets=resolve_targets(cli_targets, targets_file, configured_targets),
        roots=roots,
        ignore=ignore,
    )
