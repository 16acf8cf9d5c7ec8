"""Ref name matching for show-ref patterns: tail match on path component boundaries."""

from __future__ import annotations

from typing import Sequence


def pattern_matches(refname: str, pattern: str) -> bool:
    """True if pattern is the whole of refname or a trailing run of its '/'-separated components.

    'main' and 'heads/main' match 'refs/heads/main'; 'ain' does not.
    """
    if len(pattern) > len(refname) or not refname.endswith(pattern):
        return False
    if len(pattern) == len(refname):
        return True
    return refname[len(refname) - len(pattern) - 1] == "/"


def ref_matches(refname: str, patterns: Sequence[str]) -> bool:
    """True if refname matches any pattern; an empty pattern list matches everything."""
    if not patterns:
        return True
    return any(pattern_matches(refname, p) for p in patterns)
