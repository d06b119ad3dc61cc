"""Registry of lockfile parsers keyed by source format."""

from pathlib import Path
from typing import Dict, FrozenSet, List, Optional

from .base import BaseParser, Occurrence, SourceFormat


class ParserRegistry:
    """Registry for dependency file parsers.

    Dispatch happens on the pre-classified ``SourceFormat`` tag; file
    content is never inspected to pick a parser.
    """

    def __init__(self) -> None:
        """Initialize the parser registry."""
        self._parsers: Dict[SourceFormat, BaseParser] = {}

    def register(self, source: SourceFormat, parser: BaseParser) -> None:
        """Register a parser for a source format.

        Args:
            source: Format tag the parser handles
            parser: Parser instance to register
        """
        self._parsers[source] = parser

    def get_parser(self, source: SourceFormat) -> Optional[BaseParser]:
        """Get the parser registered for a source format.

        Args:
            source: Format tag

        Returns:
            Parser instance or None if not found
        """
        return self._parsers.get(source)

    def classify(self, file_path: Path) -> Optional[SourceFormat]:
        """Classify a file by its name.

        Args:
            file_path: Path to the file

        Returns:
            Source format of the file or None if no parser handles it
        """
        for source, parser in self._parsers.items():
            if parser.can_parse(Path(file_path)):
                return source
        return None

    def get_supported_filenames(self) -> Dict[str, SourceFormat]:
        """Map every recognised filename to its source format."""
        return {
            filename: source
            for source, parser in self._parsers.items()
            for filename in parser.filenames
        }

    def parse(
        self,
        source: SourceFormat,
        content: str,
        file_path: str,
        targets: FrozenSet[str],
    ) -> List[Occurrence]:
        """Parse content with the parser registered for ``source``.

        Args:
            source: Format tag of the content
            content: Raw file text
            file_path: Path of the originating file
            targets: Package names to look for

        Returns:
            Occurrences found in the content

        Raises:
            KeyError: If no parser is registered for ``source``
            LockfileDecodeError: If the content cannot be decoded
        """
        parser = self._parsers.get(source)
        if parser is None:
            raise KeyError(f"No parser registered for {source}")
        return parser.parse(content, file_path, targets)
