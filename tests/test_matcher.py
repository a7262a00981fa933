"""Tests for matcher module."""

from watchrun.matcher import is_excluded
from watchrun.models import ExcludeSet


class TestIsExcluded:
    """Tests for is_excluded function."""

    def test_every_member_is_excluded(self):
        paths = ["/proj/sub", "/proj/a.txt", "/", "/tmp/x y"]
        excludes = ExcludeSet(paths)
        for path in paths:
            assert is_excluded(path, excludes) is True

    def test_non_members_are_not_excluded(self):
        excludes = ExcludeSet(["/proj/sub", "/proj/a.txt"])
        for path in ["/proj", "/proj/sub/b.txt", "/proj/a.txt.bak", "proj/sub", "/proj/sub/"]:
            assert is_excluded(path, excludes) is False

    def test_empty_excludes(self):
        assert is_excluded("/proj", ExcludeSet()) is False
