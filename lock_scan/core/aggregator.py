"""Merging, deduplication and ordering of occurrences."""

from typing import Iterable, List, Set, Tuple

from .parsers import Occurrence


def sort_occurrences(occurrences: Iterable[Occurrence]) -> List[Occurrence]:
    """Sort by package name, then by file path.

    Source, version and flags break the remaining ties so the order does
    not depend on the input order.
    """
    return sorted(occurrences, key=lambda occ: occ.sort_key)


def dedupe_occurrences(occurrences: Iterable[Occurrence]) -> List[Occurrence]:
    """Drop exact duplicates, keeping the first occurrence.

    Two records are duplicates when path, package, version and source
    match and they agree on the dev and optional flags. Records that
    differ only in a flag are both kept.

    Args:
        occurrences: Records to deduplicate

    Returns:
        Records with duplicates removed, in input order
    """
    seen: Set[Tuple[str, str, str, str, bool, bool]] = set()
    unique = []
    for occ in occurrences:
        key = occ.dedup_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(occ)
    return unique


def aggregate(occurrences: Iterable[Occurrence]) -> List[Occurrence]:
    """Sort and deduplicate occurrences from any number of parsers."""
    return dedupe_occurrences(sort_occurrences(occurrences))


class OccurrenceAggregator:
    """Collects occurrences incrementally from many files.

    ``results()`` gives the same output as ``aggregate`` over everything
    added so far, whatever the order files were added in.
    """

    def __init__(self) -> None:
        self._occurrences: List[Occurrence] = []

    def add(self, occurrences: Iterable[Occurrence]) -> None:
        """Add the occurrences produced for one file.

        Args:
            occurrences: Records to merge in
        """
        self._occurrences.extend(occurrences)

    def results(self) -> List[Occurrence]:
        """Return the merged, sorted and duplicate-free occurrences."""
        return aggregate(self._occurrences)

    def __len__(self) -> int:
        return len(self._occurrences)
