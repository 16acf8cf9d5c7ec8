"""showref: list, verify and diff the refs of a git repository (git show-ref)."""

from .repo import Repository
from .errors import FatalError, NotARepositoryError, ShowRefError
from .show_ref import ShowRefOptions, run_exclude_existing, run_listing, run_verify

__all__ = [
    "Repository",
    "ShowRefError",
    "FatalError",
    "NotARepositoryError",
    "ShowRefOptions",
    "run_listing",
    "run_verify",
    "run_exclude_existing",
]
