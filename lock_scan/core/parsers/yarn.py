"""Parser for Yarn v1 lockfiles.

A v1 lockfile is a sequence of blocks separated by blank lines::

    "@pkgr/core@^1.0.0", "@pkgr/core@^1.1.0":
      version "1.2.3"
      resolved "https://registry.yarnpkg.com/..."

The first line lists one or more selectors, the indented body carries the
resolved ``version``. Yarn Berry lockfiles are YAML and are not handled.
"""

import re
from typing import Any, FrozenSet, List, Optional

from .base import BaseParser, Occurrence, SourceFormat

_BLOCK_SEPARATOR = re.compile(r"\n{2,}")


def split_blocks(content: str) -> List[List[str]]:
    """Split lockfile text into blocks of stripped lines.

    Empty blocks and comment blocks are dropped.

    Args:
        content: Raw lockfile text

    Returns:
        One list of lines per entry block
    """
    blocks = []
    for raw in _BLOCK_SEPARATOR.split(content.replace("\r\n", "\n")):
        block = raw.strip()
        if not block:
            continue
        lines = [line.strip() for line in block.split("\n")]
        if not lines[0] or lines[0].startswith("#"):
            continue
        blocks.append(lines)
    return blocks


def parse_header(header: str) -> List[str]:
    """Split a block header into its selectors.

    Handles ``is@^3.0.0:``, ``"@pkgr/core@^1.0.0":`` and the multi-selector
    form ``"a@^1", "a@^1.1":``. Selectors may keep a stray quote, which
    ``selector_to_package_name`` strips.
    """
    if header.startswith('"'):
        header = header[1:]
    if header.endswith('":'):
        header = header[:-2]
    elif header.endswith('"') or header.endswith(":"):
        header = header[:-1]
    return [selector.lstrip() for selector in header.split(",")]


def find_version(lines: List[str]) -> str:
    """Return the quoted value of the first ``version "x"`` line, or ``""``."""
    for line in lines:
        if not line.startswith("version "):
            continue
        rest = line[len("version"):].lstrip()
        if not rest.startswith('"'):
            return ""
        end = rest.find('"', 1)
        return rest[1:end] if end > 1 else ""
    return ""


def selector_to_package_name(selector: str) -> Optional[str]:
    """Convert a Yarn selector to a package name.

    The name is everything before the LAST ``@``, since scoped names start
    with one::

        @scope/name@^1.2.3  -> @scope/name
        is@^3.0.0           -> is
        "eslint@>=7"        -> eslint

    Args:
        selector: One selector from a block header

    Returns:
        Package name, or None when there is no ``@`` or it is the first
        character
    """
    selector = selector.strip('"')
    at = selector.rfind("@")
    if at <= 0:
        return None
    return selector[:at]


class YarnLockParser(BaseParser):
    """Parser for Yarn v1 yarn.lock files.

    The format does not record dev or optional classification, so those
    flags are always False.
    """

    def __init__(self) -> None:
        """Initialize the yarn.lock parser."""
        super().__init__()
        self.source = SourceFormat.YARN_LOCK
        self.filenames = ["yarn.lock"]

    def extract(self, data: Any, file_path: str, targets: FrozenSet[str]) -> List[Occurrence]:
        results = []
        for lines in split_blocks(data):
            version = find_version(lines[1:])
            for selector in parse_header(lines[0]):
                name = selector_to_package_name(selector)
                if name and name in targets:
                    results.append(self._occurrence(name, version, file_path))
        return results
