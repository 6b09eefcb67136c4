"""
Unit tests for wakatimekit.core.filesystem module.
"""

import os
import zipfile

import pytest

from wakatimekit.core.exceptions import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
)
from wakatimekit.core.filesystem import (
    extract_zip,
    install_archive,
    is_relative_to,
    purge_stale,
)


def _tree(root):
    """Snapshot of a directory: relative path -> file bytes (None for dirs)."""
    snapshot = {}
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root).as_posix()
        snapshot[rel] = None if path.is_dir() else path.read_bytes()
    return snapshot


class TestIsRelativeTo:
    """Tests for is_relative_to function."""

    def test_child(self, tmp_path):
        assert is_relative_to(tmp_path / "a" / "b", tmp_path) is True

    def test_sibling(self, tmp_path):
        assert is_relative_to(tmp_path.parent / "other", tmp_path) is False


class TestPurgeStale:
    """Tests for purge_stale function."""

    def test_removes_nested_tree(self, tmp_path):
        """Test files and directories are all removed."""
        root = tmp_path / "wakatime-master"
        (root / "wakatime" / "packages").mkdir(parents=True)
        (root / "wakatime" / "cli.py").write_text("x")
        (root / "wakatime" / "packages" / "lib.py").write_text("y")
        (root / "README.rst").write_text("z")

        purge_stale(root)

        assert not root.exists()
        assert tmp_path.exists()

    def test_missing_target_is_noop(self, tmp_path):
        """Test a missing directory is not an error."""
        purge_stale(tmp_path / "missing")

    def test_file_target_raises(self, tmp_path):
        """Test purging a regular file is refused."""
        target = tmp_path / "file.txt"
        target.write_text("x")

        with pytest.raises(FilesystemError):
            purge_stale(target)

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
    def test_symlinked_directory_not_followed(self, tmp_path):
        """Test a symlink inside the tree is unlinked, not descended into."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "keep.txt").write_text("keep")
        root = tmp_path / "tree"
        root.mkdir()
        os.symlink(outside, root / "link")

        purge_stale(root)

        assert not root.exists()
        assert (outside / "keep.txt").read_text() == "keep"


class TestExtractZip:
    """Tests for extract_zip function."""

    def test_extract_from_bytes(self, tmp_path, zip_builder):
        """Test directory and file entries are materialized."""
        data = zip_builder({"pkg/": "", "pkg/a.txt": "alpha", "pkg/sub/b.txt": "beta"})

        count = extract_zip(data, tmp_path / "out")

        assert count == 3
        assert (tmp_path / "out" / "pkg").is_dir()
        assert (tmp_path / "out" / "pkg" / "a.txt").read_text() == "alpha"
        assert (tmp_path / "out" / "pkg" / "sub" / "b.txt").read_text() == "beta"

    def test_extract_from_path(self, tmp_path, zip_builder):
        """Test a ZIP file on disk is accepted."""
        archive = tmp_path / "a.zip"
        archive.write_bytes(zip_builder({"x.txt": "x"}))

        extract_zip(archive, tmp_path / "out")

        assert (tmp_path / "out" / "x.txt").read_text() == "x"
        assert archive.exists()

    def test_traversal_blocked(self, tmp_path, zip_builder):
        """Test members escaping the destination are rejected."""
        data = zip_builder({"../evil.txt": "boom"})

        with pytest.raises(InsecureArchiveError, match="directory traversal"):
            extract_zip(data, tmp_path / "out")

        assert not (tmp_path / "evil.txt").exists()

    def test_corrupt_archive(self, tmp_path):
        """Test garbage input raises ArchiveExtractionError."""
        with pytest.raises(ArchiveExtractionError):
            extract_zip(b"not a zip", tmp_path / "out")

    def test_uncreatable_destination(self, blocked_resources_dir, zip_builder):
        """Test a destination under a regular file raises ArchiveExtractionError."""
        with pytest.raises(ArchiveExtractionError):
            extract_zip(zip_builder({"a.txt": "a"}), blocked_resources_dir)

    def test_entries_processed_in_archive_order(self, tmp_path):
        """Test a later entry with the same name overwrites an earlier one."""
        archive = tmp_path / "dup.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("f.txt", "first")
            with pytest.warns(UserWarning):
                zf.writestr("f.txt", "second")

        extract_zip(archive, tmp_path / "out")

        assert (tmp_path / "out" / "f.txt").read_text() == "second"


class TestInstallArchive:
    """Tests for install_archive function."""

    def test_purges_stale_tree_first(self, tmp_path, cli_zip):
        """Test leftovers from an older version are removed."""
        stale = tmp_path / "wakatime-master"
        stale.mkdir()
        (stale / "obsolete.py").write_text("old")

        install_archive(cli_zip, tmp_path, stale_dir=stale)

        assert not (stale / "obsolete.py").exists()
        assert (stale / "wakatime" / "cli.py").exists()

    def test_deletes_archive_file(self, tmp_path, cli_zip):
        """Test the ZIP file is removed after extraction."""
        archive = tmp_path / "wakatime-cli.zip"
        archive.write_bytes(cli_zip)

        install_archive(archive, tmp_path, stale_dir=tmp_path / "wakatime-master")

        assert not archive.exists()
        assert (tmp_path / "wakatime-master" / "wakatime" / "cli.py").exists()

    def test_idempotent(self, tmp_path, cli_zip):
        """Test installing twice gives the same tree as installing once."""
        once = tmp_path / "once"
        twice = tmp_path / "twice"

        install_archive(cli_zip, once, stale_dir=once / "wakatime-master")
        install_archive(cli_zip, twice, stale_dir=twice / "wakatime-master")
        install_archive(cli_zip, twice, stale_dir=twice / "wakatime-master")

        assert _tree(once) == _tree(twice)

    def test_default_stale_dir_is_destination(self, tmp_path, zip_builder):
        """Test the destination itself is purged when no stale_dir is given."""
        target = tmp_path / "python"
        target.mkdir()
        (target / "old.dll").write_text("old")

        install_archive(zip_builder({"python.exe": "exe"}), target)

        assert not (target / "old.dll").exists()
        assert (target / "python.exe").read_text() == "exe"
