"""Exclusion matching for canonical paths."""

from .models import ExcludeSet


def is_excluded(path: str, excludes: ExcludeSet) -> bool:
    """
    Check if a canonical path is in the exclude set.

    Only exact equality counts: excluding a directory does not exclude
    paths beneath it here, the walker prunes those by never descending.
    """
    return path in excludes
