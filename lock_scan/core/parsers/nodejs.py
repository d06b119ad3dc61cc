"""npm lockfile and package.json parsers."""

from typing import Any, Dict, FrozenSet, List, Optional

from .base import JSONParser, Occurrence, SourceFormat


def package_name_from_path(pkg_path: str) -> Optional[str]:
    """Derive a package name from an npm v2/v3 ``packages`` key.

    ``node_modules/a/node_modules/@scope/b`` resolves to ``@scope/b``. The
    root entry (empty key) has no name.

    Args:
        pkg_path: Key of the ``packages`` mapping

    Returns:
        Package name or None if the key carries none
    """
    segments = [seg for seg in pkg_path.split("node_modules/") if seg]
    if not segments:
        return None
    name = segments[-1]
    if name.endswith("/"):
        name = name[:-1]
    return name or None


def _version_of(meta: Dict[str, Any]) -> str:
    version = meta.get("version")
    return str(version) if version else ""


def _is_absent(value: Any) -> bool:
    """True for the JSON values npm treats as missing (null, false, 0, "")."""
    if value is None or value is False:
        return True
    if isinstance(value, (str, int, float)):
        return not value
    return False


def range_to_string(version_range: Any) -> str:
    """Render a declared manifest range the way npm's JSON tooling prints it.

    ``true`` stays ``"true"`` and integral numbers drop their fraction, so
    ``1.0`` becomes ``"1"``. Absent values become ``""``.
    """
    if _is_absent(version_range):
        return ""
    if isinstance(version_range, bool):
        return "true"
    if isinstance(version_range, float) and version_range.is_integer():
        return str(int(version_range))
    return str(version_range)


class NpmLockParser(JSONParser):
    """Parser for package-lock.json files.

    Both the v2/v3 ``packages`` layout and the v1 ``dependencies`` tree are
    scanned; lockfiles written by npm 7 and 8 carry both.
    """

    def __init__(self) -> None:
        """Initialize the package-lock.json parser."""
        super().__init__()
        self.source = SourceFormat.NPM_LOCK
        self.filenames = ["package-lock.json", "package.lock.json"]

    def extract(self, data: Any, file_path: str, targets: FrozenSet[str]) -> List[Occurrence]:
        if not isinstance(data, dict):
            return []
        results = self._extract_packages(data.get("packages"), file_path, targets)
        results.extend(self._extract_dependencies(data.get("dependencies"), file_path, targets))
        return results

    def _extract_packages(
        self, packages: Any, file_path: str, targets: FrozenSet[str]
    ) -> List[Occurrence]:
        """Scan the v2/v3 ``packages`` mapping.

        Args:
            packages: Value of the top-level ``packages`` field
            file_path: Path of the lockfile
            targets: Package names to look for

        Returns:
            Occurrences found in the mapping
        """
        if not packages or not isinstance(packages, dict):
            return []

        results = []
        for pkg_path, info in packages.items():
            if not isinstance(info, dict):
                info = {}
            # A declared name always wins, even one that can never match
            name = info.get("name") or package_name_from_path(pkg_path)
            if isinstance(name, str) and name in targets:
                results.append(self._occurrence(
                    name,
                    _version_of(info),
                    file_path,
                    dev=info.get("dev") is True,
                    optional=info.get("optional") is True,
                ))
        return results

    def _extract_dependencies(
        self, dependencies: Any, file_path: str, targets: FrozenSet[str]
    ) -> List[Occurrence]:
        """Walk the v1 ``dependencies`` tree.

        Args:
            dependencies: Value of the top-level ``dependencies`` field
            file_path: Path of the lockfile
            targets: Package names to look for

        Returns:
            Occurrences found anywhere in the tree
        """
        if not dependencies or not isinstance(dependencies, dict):
            return []

        results = []
        stack = [dependencies]
        while stack:
            deps = stack.pop()
            for name, meta in deps.items():
                if _is_absent(meta):
                    continue
                if not isinstance(meta, dict):
                    meta = {}
                if name in targets:
                    results.append(self._occurrence(
                        name,
                        _version_of(meta),
                        file_path,
                        dev=meta.get("dev") is True,
                        optional=meta.get("optional") is True,
                    ))
                nested = meta.get("dependencies")
                if nested and isinstance(nested, dict):
                    stack.append(nested)
        return results


class PackageJsonParser(JSONParser):
    """Parser for package.json manifests.

    Versions reported here are declared ranges, not resolved versions.
    """

    # (field, dev, optional)
    SECTIONS = [
        ("dependencies", False, False),
        ("devDependencies", True, False),
        ("optionalDependencies", False, True),
    ]

    def __init__(self) -> None:
        """Initialize the package.json parser."""
        super().__init__()
        self.source = SourceFormat.PACKAGE_JSON
        self.filenames = ["package.json"]

    def extract(self, data: Any, file_path: str, targets: FrozenSet[str]) -> List[Occurrence]:
        if not isinstance(data, dict):
            return []

        results = []
        for section, is_dev, is_optional in self.SECTIONS:
            deps = data.get(section)
            if not deps or not isinstance(deps, dict):
                continue
            for name, version_range in deps.items():
                if name in targets:
                    results.append(self._occurrence(
                        name,
                        range_to_string(version_range),
                        file_path,
                        dev=is_dev,
                        optional=is_optional,
                    ))
        return results
