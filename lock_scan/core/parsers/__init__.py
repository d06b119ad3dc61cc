"""Dependency file parsers for npm and Yarn projects."""

from .base import (
    BaseParser,
    JSONParser,
    LockfileDecodeError,
    Occurrence,
    SourceFormat,
)
from .nodejs import NpmLockParser, PackageJsonParser
from .yarn import YarnLockParser
from .registry import ParserRegistry

# Register built-in parsers
registry = ParserRegistry()
registry.register(SourceFormat.NPM_LOCK, NpmLockParser())
registry.register(SourceFormat.YARN_LOCK, YarnLockParser())
registry.register(SourceFormat.PACKAGE_JSON, PackageJsonParser())

__all__ = [
    "BaseParser",
    "JSONParser",
    "LockfileDecodeError",
    "Occurrence",
    "SourceFormat",
    "NpmLockParser",
    "PackageJsonParser",
    "YarnLockParser",
    "ParserRegistry",
    "registry",
]
