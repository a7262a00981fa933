"""Tests for models module."""

import os
import stat

import pytest

from watchrun.models import (
    ChangeEvent,
    ExcludeSet,
    FileKind,
    Reaction,
    SpawnState,
    WatchTarget,
    canonicalize,
)


class TestFileKind:
    """Tests for FileKind enum."""

    def test_from_mode(self):
        assert FileKind.from_mode(stat.S_IFREG | 0o644) is FileKind.FILE
        assert FileKind.from_mode(stat.S_IFDIR | 0o755) is FileKind.DIRECTORY
        assert FileKind.from_mode(stat.S_IFIFO | 0o644) is FileKind.OTHER
        assert FileKind.from_mode(stat.S_IFSOCK | 0o644) is FileKind.OTHER


class TestCanonicalize:
    """Tests for canonicalize function."""

    def test_resolves_relative(self, tmp_path, monkeypatch):
        (tmp_path / "a.txt").write_text("a")
        monkeypatch.chdir(tmp_path)
        assert canonicalize("a.txt") == os.path.realpath(tmp_path / "a.txt")

    def test_resolves_symlink(self, tmp_path):
        real = tmp_path / "real.txt"
        real.write_text("x")
        link = tmp_path / "link.txt"
        link.symlink_to(real)
        assert canonicalize(str(link)) == os.path.realpath(real)

    def test_strict_missing_raises(self, tmp_path):
        with pytest.raises(OSError):
            canonicalize(str(tmp_path / "missing"))

    def test_non_strict_missing(self, tmp_path):
        path = canonicalize(str(tmp_path / "missing"), strict=False)
        assert path == os.path.join(os.path.realpath(tmp_path), "missing")


class TestExcludeSet:
    """Tests for ExcludeSet class."""

    def test_membership_is_exact(self):
        excludes = ExcludeSet(["/proj/sub", "/proj/a.txt"])
        assert "/proj/sub" in excludes
        assert "/proj/a.txt" in excludes
        assert "/proj/sub/b.txt" not in excludes
        assert "/proj/su" not in excludes
        assert "/proj/sub/" not in excludes

    def test_keeps_order(self):
        excludes = ExcludeSet(["/b", "/a", "/b"])
        assert list(excludes) == ["/b", "/a", "/b"]
        assert len(excludes) == 3

    def test_paths_is_tuple(self):
        excludes = ExcludeSet(["/a"])
        assert isinstance(excludes.paths, tuple)

    def test_from_entries_canonicalizes(self, tmp_path, monkeypatch):
        (tmp_path / "build").mkdir()
        monkeypatch.chdir(tmp_path)

        excludes = ExcludeSet.from_entries(["./build", "not-there"])

        root = os.path.realpath(tmp_path)
        assert os.path.join(root, "build") in excludes
        assert os.path.join(root, "not-there") in excludes

    def test_empty(self):
        assert "/anything" not in ExcludeSet()


class TestWatchTarget:
    """Tests for WatchTarget dataclass."""

    def test_create(self, tmp_path):
        target = WatchTarget(str(tmp_path / "a.txt"))
        assert target.path == str(tmp_path / "a.txt")
        assert str(target) == target.path

    def test_requires_absolute_path(self):
        with pytest.raises(ValueError, match="path must be absolute"):
            WatchTarget("relative/a.txt")

    def test_is_hashable_and_frozen(self):
        target = WatchTarget("/a")
        assert {target, WatchTarget("/a")} == {target}
        with pytest.raises(AttributeError):
            target.path = "/b"


class TestChangeEvent:
    """Tests for ChangeEvent dataclass."""

    def test_defaults(self):
        event = ChangeEvent("/a")
        assert event.modified is True
        assert event.timestamp > 0


class TestReaction:
    """Tests for Reaction dataclass."""

    def test_defaults(self):
        reaction = Reaction(command=("echo",), trigger="/a", wait=True)
        assert reaction.state is SpawnState.SPAWNING
        assert reaction.pid is None
        assert reaction.status is None
        assert reaction.failed is False

    def test_failed(self):
        reaction = Reaction(command=("echo",), trigger="/a", wait=False, state=SpawnState.FAILED)
        assert reaction.failed is True
