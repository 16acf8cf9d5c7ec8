"""Output of one shown ref: '<hash> <name>' plus an optional peeled '^{}' line."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from .constants import PEELED_SUFFIX
from .errors import BadRefError

if TYPE_CHECKING:
    from .repo import Repository
    from .show_ref import ShowRefOptions


class RefPrinter:
    """Prints refs according to the quiet/hash-only/dereference/abbrev options."""

    def __init__(self, repo: "Repository", options: "ShowRefOptions", out: TextIO) -> None:
        self.repo = repo
        self.options = options
        self.out = out

    def format_lines(self, refname: str, sha: str) -> list[str]:
        """Lines that show_one would print for this ref (without newlines)."""
        opts = self.options
        hex_ = self.repo.abbreviate(sha, opts.abbrev)
        lines = [hex_ if opts.hash_only else f"{hex_} {refname}"]
        if opts.dereference:
            peeled = self.repo.peel(sha)
            if peeled is not None:
                peeled_hex = self.repo.abbreviate(peeled, opts.abbrev)
                lines.append(f"{peeled_hex} {refname}{PEELED_SUFFIX}")
        return lines

    def show_one(self, refname: str, sha: str) -> None:
        """Print refname; a ref pointing at a missing object is fatal even when quiet."""
        if not self.repo.has_object(sha):
            raise BadRefError(f"git show-ref: bad ref {refname} ({sha})")
        if self.options.quiet:
            return
        for line in self.format_lines(refname, sha):
            print(line, file=self.out)
