"""Tests for file discovery and scanning."""

import json

import pytest

from lock_scan.core.parsers import NpmLockParser, ParserRegistry, SourceFormat
from lock_scan.core.scanner import LockfileScanner, scan_paths
from lock_scan.utils.path_utils import (
    CandidateFile,
    LockfileFinder,
    PathFilter,
    classify_file,
    find_lock_files,
)

TARGETS = frozenset({"is", "synckit", "@pkgr/core"})


@pytest.fixture
def project_tree(tmp_path):
    """Create a small monorepo with every supported file type."""
    (tmp_path / "package.json").write_text(json.dumps({
        "name": "root",
        "devDependencies": {"synckit": "^0.9.0"},
    }))
    (tmp_path / "package-lock.json").write_text(json.dumps({
        "lockfileVersion": 3,
        "packages": {
            "": {"name": "root"},
            "node_modules/synckit": {"version": "0.9.2", "dev": True},
            "node_modules/@pkgr/core": {"version": "0.1.1", "dev": True},
        },
    }))

    web = tmp_path / "apps" / "web"
    web.mkdir(parents=True)
    (web / "yarn.lock").write_text(
        '# yarn lockfile v1\n\n\n'
        'is@^3.0.0:\n  version "3.3.0"\n\n'
        '"@pkgr/core@^0.1.0":\n  version "0.1.1"\n'
    )
    (web / "package.json").write_text(json.dumps({"dependencies": {"is": "^3.0.0"}}))

    # Never visited
    nm = tmp_path / "node_modules" / "is"
    nm.mkdir(parents=True)
    (nm / "package.json").write_text(json.dumps({"dependencies": {"is": "^1.0.0"}}))
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "package.json").write_text("{broken")

    (tmp_path / "README.md").write_text("# readme")
    return tmp_path


class TestPathFilter:
    """Test directory pruning rules."""

    @pytest.mark.parametrize("name", [
        "node_modules", ".git", ".next", "dist", "build", "out", ".turbo", ".cache",
    ])
    def test_skip_dirs(self, tmp_path, name):
        assert PathFilter().is_ignored(tmp_path / name)

    def test_regular_dir_not_ignored(self, tmp_path):
        assert not PathFilter().is_ignored(tmp_path / "src")

    def test_extra_patterns(self, tmp_path):
        path_filter = PathFilter(["fixtures", "tmp-*"])

        assert path_filter.is_ignored(tmp_path / "fixtures")
        assert path_filter.is_ignored(tmp_path / "tmp-123")
        assert not path_filter.is_ignored(tmp_path / "src")


class TestFindLockFiles:
    """Test dependency file discovery."""

    def test_finds_known_files_and_prunes(self, project_tree):
        found = find_lock_files([project_tree])
        relative = [
            (c.path.relative_to(project_tree.resolve()).as_posix(), c.source) for c in found
        ]

        assert relative == [
            ("package-lock.json", SourceFormat.NPM_LOCK),
            ("package.json", SourceFormat.PACKAGE_JSON),
            ("apps/web/package.json", SourceFormat.PACKAGE_JSON),
            ("apps/web/yarn.lock", SourceFormat.YARN_LOCK),
        ]

    def test_ignore_patterns(self, project_tree):
        found = find_lock_files([project_tree], ["apps"])
        assert all("apps" not in c.path.parts for c in found)
        assert len(found) == 2

    def test_missing_root_is_skipped(self, project_tree, tmp_path):
        found = find_lock_files([tmp_path / "does-not-exist", project_tree])
        assert len(found) == 4

    def test_root_can_be_a_file(self, project_tree):
        found = find_lock_files([project_tree / "package-lock.json"])
        assert [c.source for c in found] == [SourceFormat.NPM_LOCK]

    def test_classify_file(self, tmp_path):
        assert classify_file(tmp_path / "package.lock.json") == SourceFormat.NPM_LOCK
        assert classify_file(tmp_path / "yarn.lock") == SourceFormat.YARN_LOCK
        assert classify_file(tmp_path / "bun.lockb") is None

    def test_filenames_follow_registered_parsers(self, tmp_path):
        """Test that a filename added to a parser is discovered."""
        shrinkwrap = NpmLockParser()
        shrinkwrap.filenames.append("npm-shrinkwrap.json")
        parsers = ParserRegistry()
        parsers.register(SourceFormat.NPM_LOCK, shrinkwrap)

        (tmp_path / "npm-shrinkwrap.json").write_text("{}")
        (tmp_path / "yarn.lock").write_text("")
        found = LockfileFinder(parsers=parsers).find_lock_files([tmp_path])

        assert [(c.path.name, c.source) for c in found] == [
            ("npm-shrinkwrap.json", SourceFormat.NPM_LOCK),
        ]


class TestLockfileScanner:
    """Test scanning and failure isolation."""

    def test_scan_tree(self, project_tree):
        report = scan_paths([project_tree], TARGETS)

        assert report.files_scanned == 4
        assert report.skipped == []
        rows = [
            (occ.package, occ.version, occ.source.value,
             occ.lockfile_path.replace(str(project_tree.resolve()), "<root>"))
            for occ in report.occurrences
        ]
        assert rows == [
            ("@pkgr/core", "0.1.1", "yarn-lock", "<root>/apps/web/yarn.lock"),
            ("@pkgr/core", "0.1.1", "npm-lock", "<root>/package-lock.json"),
            ("is", "^3.0.0", "package-json", "<root>/apps/web/package.json"),
            ("is", "3.3.0", "yarn-lock", "<root>/apps/web/yarn.lock"),
            ("synckit", "0.9.2", "npm-lock", "<root>/package-lock.json"),
            ("synckit", "^0.9.0", "package-json", "<root>/package.json"),
        ]

    def test_decode_failure_is_isolated(self, tmp_path):
        """Test that one broken file does not abort the scan."""
        broken = tmp_path / "broken" / "package.json"
        broken.parent.mkdir()
        broken.write_text('{"dependencies": {"is": ')
        good = tmp_path / "package.json"
        good.write_text(json.dumps({"dependencies": {"is": "^3.0.0"}}))

        scanner = LockfileScanner(TARGETS)
        report = scanner.scan([
            CandidateFile(broken, SourceFormat.PACKAGE_JSON),
            CandidateFile(good, SourceFormat.PACKAGE_JSON),
        ])

        assert report.files_scanned == 2
        assert [path for path, _ in report.skipped] == [str(broken)]
        assert [occ.lockfile_path for occ in report.occurrences] == [str(good)]

    def test_unreadable_file_is_isolated(self, tmp_path):
        missing = CandidateFile(tmp_path / "yarn.lock", SourceFormat.YARN_LOCK)
        occurrences, reason = LockfileScanner(TARGETS).scan_file(missing)

        assert occurrences == []
        assert reason

    def test_non_utf8_file_is_isolated(self, tmp_path):
        lockfile = tmp_path / "yarn.lock"
        lockfile.write_bytes(b"is@^3.0.0:\n  version \"\xff\xfe\"\n")
        report = LockfileScanner(TARGETS).scan([CandidateFile(lockfile, SourceFormat.YARN_LOCK)])

        assert report.occurrences == []
        assert len(report.skipped) == 1

    def test_bom_is_tolerated(self, tmp_path):
        manifest = tmp_path / "package.json"
        manifest.write_bytes(b"\xef\xbb\xbf" + json.dumps({"dependencies": {"is": "^3"}}).encode())
        report = LockfileScanner(TARGETS).scan([CandidateFile(manifest, SourceFormat.PACKAGE_JSON)])

        assert [occ.package for occ in report.occurrences] == ["is"]

    def test_duplicates_across_shapes_collapse(self, tmp_path):
        """Test that the same entry in v1 and v2 sections is reported once."""
        lockfile = tmp_path / "package-lock.json"
        lockfile.write_text(json.dumps({
            "packages": {"node_modules/is": {"version": "3.3.0"}},
            "dependencies": {"is": {"version": "3.3.0"}},
        }))
        report = LockfileScanner(TARGETS).scan([CandidateFile(lockfile, SourceFormat.NPM_LOCK)])

        assert len(report.occurrences) == 1

    def test_targets_are_frozen(self):
        scanner = LockfileScanner(["is", "is", "synckit"])
        assert scanner.targets == frozenset({"is", "synckit"})
