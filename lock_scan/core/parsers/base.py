"""Base parser class and data models for lockfile parsing."""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, FrozenSet, List, Tuple


class SourceFormat(str, Enum):
    """Dependency-declaration formats understood by the parsers."""

    NPM_LOCK = "npm-lock"
    YARN_LOCK = "yarn-lock"
    PACKAGE_JSON = "package-json"

    def __str__(self) -> str:
        return self.value


class LockfileDecodeError(ValueError):
    """Raised when a lockfile or manifest cannot be decoded."""

    def __init__(self, file_path: str, reason: str) -> None:
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"{file_path}: {reason}")


@dataclass(frozen=True)
class Occurrence:
    """A single occurrence of a target package in a dependency file.

    For lock sources ``version`` is the resolved version; for
    ``package-json`` it is the declared range (e.g. ``^9.0.0``).
    """

    package: str
    version: str
    dev: bool
    optional: bool
    source: SourceFormat
    lockfile_path: str

    @property
    def dedup_key(self) -> Tuple[str, str, str, str, bool, bool]:
        """Identity used when collapsing duplicates.

        Records that share path, package, version and source but disagree
        on the dev or optional flag are kept apart.
        """
        return (
            self.lockfile_path,
            self.package,
            self.version,
            self.source.value,
            self.dev,
            self.optional,
        )

    @property
    def sort_key(self) -> Tuple[str, str, str, str, bool, bool]:
        """Package name, then file path; the remaining fields break ties."""
        return (
            self.package,
            self.lockfile_path,
            self.source.value,
            self.version,
            self.dev,
            self.optional,
        )

    def to_dict(self) -> dict:
        return {
            "package": self.package,
            "version": self.version,
            "dev": self.dev,
            "optional": self.optional,
            "source": self.source.value,
            "lockfilePath": self.lockfile_path,
        }


class BaseParser(ABC):
    """Abstract base class for dependency file parsers.

    A parser turns the raw text of one file into occurrences of the
    target packages. Parsing is split in two steps: ``decode`` turns text
    into the format's native value and is the only step that may fail,
    ``extract`` walks that value and never raises on structural anomalies.
    """

    def __init__(self) -> None:
        """Initialize the parser."""
        self.filenames: List[str] = []
        self.source: SourceFormat = SourceFormat.NPM_LOCK

    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the given file.

        Args:
            file_path: Path to the file to check

        Returns:
            True if the file name is one this parser understands
        """
        return Path(file_path).name in self.filenames

    def decode(self, content: str, file_path: str) -> Any:
        """Decode raw file content.

        Args:
            content: Raw file text
            file_path: Path of the originating file, used in errors

        Returns:
            The decoded document
        """
        return content

    @abstractmethod
    def extract(self, data: Any, file_path: str, targets: FrozenSet[str]) -> List[Occurrence]:
        """Extract occurrences of target packages from a decoded document.

        Args:
            data: Value returned by ``decode``
            file_path: Path of the originating file
            targets: Exact package names to look for

        Returns:
            Occurrences found, in document order
        """

    def parse(self, content: str, file_path: str, targets: FrozenSet[str]) -> List[Occurrence]:
        """Decode and extract in one call.

        Raises:
            LockfileDecodeError: If the content cannot be decoded
        """
        return self.extract(self.decode(content, file_path), file_path, targets)

    def _occurrence(
        self,
        package: str,
        version: str,
        file_path: str,
        dev: bool = False,
        optional: bool = False,
    ) -> Occurrence:
        return Occurrence(
            package=package,
            version=version,
            dev=dev,
            optional=optional,
            source=self.source,
            lockfile_path=file_path,
        )


class JSONParser(BaseParser):
    """Base class for parsers whose input is a JSON document."""

    def decode(self, content: str, file_path: str) -> Any:
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise LockfileDecodeError(file_path, str(e)) from e
