"""show-ref: pattern listing, --verify and --exclude-existing modes."""

from __future__ import annotations

import enum
import os
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, BinaryIO, Iterable, Iterator, Optional, Sequence, TextIO, Tuple

from .constants import (
    ABBREV_FULL,
    HEAD_FILE,
    PEELED_SUFFIX,
    REF_HEADS_PREFIX,
    REF_PREFIX,
    REF_TAGS_PREFIX,
)
from .errors import InvalidRefError, UsageError
from .formatting import RefPrinter
from .matching import ref_matches
from .refs import check_ref_format

if TYPE_CHECKING:
    from .repo import Repository

# isspace() in the C locale
_C_WHITESPACE = b" \t\n\v\f\r"
_PEELED_SUFFIX_BYTES = PEELED_SUFFIX.encode()


class Mode(enum.Enum):
    LISTING = "listing"
    VERIFY = "verify"
    EXCLUDE_EXISTING = "exclude-existing"


@dataclass(frozen=True)
class ShowRefOptions:
    """Parsed show-ref flags; built once by the CLI and shared by every mode."""
    quiet: bool = False
    hash_only: bool = False
    dereference: bool = False
    abbrev: int = ABBREV_FULL
    show_head: bool = False
    heads_only: bool = False
    tags_only: bool = False
    verify: bool = False
    exclude_existing: bool = False
    exclude_pattern: Optional[str] = None

    @property
    def mode(self) -> Mode:
        if self.exclude_existing:
            return Mode.EXCLUDE_EXISTING
        if self.verify:
            return Mode.VERIFY
        return Mode.LISTING


def _listing_candidates(repo: "Repository", options: ShowRefOptions) -> Iterator[Tuple[str, str]]:
    """HEAD (if asked for), then heads and/or tags, or everything under refs/."""
    if options.show_head:
        head = repo.head_ref()
        if head is not None:
            yield head
    if options.heads_only or options.tags_only:
        if options.heads_only:
            yield from repo.iter_refs(REF_HEADS_PREFIX)
        if options.tags_only:
            yield from repo.iter_refs(REF_TAGS_PREFIX)
    else:
        yield from repo.iter_refs(REF_PREFIX)


def run_listing(
    repo: "Repository",
    patterns: Sequence[str],
    options: ShowRefOptions,
    out: Optional[TextIO] = None,
) -> int:
    """Show refs matching any pattern. Return 1 if nothing matched, else 0."""
    printer = RefPrinter(repo, options, out or sys.stdout)
    found_match = 0
    for refname, sha in _listing_candidates(repo, options):
        head_requested = options.show_head and refname == HEAD_FILE
        if not head_requested and not ref_matches(refname, patterns):
            continue
        found_match += 1
        printer.show_one(refname, sha)
    return 0 if found_match else 1


def run_verify(
    repo: "Repository",
    refs: Sequence[str],
    options: ShowRefOptions,
    out: Optional[TextIO] = None,
) -> int:
    """Show each ref given by exact name, in order.

    An unknown ref is fatal, unless quiet: then the result is 1 and the
    remaining refs are not looked at.
    """
    if not refs:
        raise UsageError("--verify requires a reference")
    printer = RefPrinter(repo, options, out or sys.stdout)
    for refname in refs:
        sha = None
        if refname.startswith(REF_PREFIX) or refname == HEAD_FILE:
            sha = repo.read_ref(refname)
        if sha is None:
            if not options.quiet:
                raise InvalidRefError(f"'{refname}' - not a valid ref")
            return 1
        printer.show_one(refname, sha)
    return 0


def exclude_line_refname(line: bytes) -> bytes:
    """Ref name of a '[<anything><space>]<refname>[^{}]' record, newline included or not."""
    if line.endswith(b"\n"):
        line = line[:-1]
    if line.endswith(_PEELED_SUFFIX_BYTES):
        line = line[: -len(_PEELED_SUFFIX_BYTES)]
    start = len(line)
    while start > 0 and line[start - 1] not in _C_WHITESPACE:
        start -= 1
    return line[start:]


def run_exclude_existing(
    repo: "Repository",
    pattern: Optional[str],
    inp: Iterable[bytes],
    out: BinaryIO,
    err: Optional[TextIO] = None,
) -> int:
    """Copy stdin records naming refs this repository does not have.

    For each line: drop a trailing '^{}', take the last whitespace-separated
    word as the ref name, skip it unless it starts with pattern, warn about
    and skip malformed names, and skip refs that exist locally. Everything
    else is written out unchanged. Always returns 0.
    """
    err = err or sys.stderr
    existing_refs = set(repo.ref_names(REF_PREFIX))
    pattern_bytes = os.fsencode(pattern) if pattern is not None else None
    for line in inp:
        ref = exclude_line_refname(line)
        if pattern_bytes is not None:
            if len(ref) < len(pattern_bytes):
                continue
            if not ref.startswith(pattern_bytes):
                continue
        refname = os.fsdecode(ref)
        if not check_ref_format(refname):
            print(f"warning: ref '{refname}' ignored", file=err)
            continue
        if refname in existing_refs:
            continue
        out.write(line if line.endswith(b"\n") else line + b"\n")
    out.flush()
    return 0


def dispatch(
    repo: "Repository",
    options: ShowRefOptions,
    args: Sequence[str],
    out: Optional[TextIO] = None,
    inp: Optional[Iterable[bytes]] = None,
    bout: Optional[BinaryIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Run the single mode selected by options; args are patterns or refs."""
    mode = options.mode
    if mode is Mode.EXCLUDE_EXISTING:
        return run_exclude_existing(
            repo,
            options.exclude_pattern,
            inp if inp is not None else sys.stdin.buffer,
            bout if bout is not None else sys.stdout.buffer,
            err,
        )
    if mode is Mode.VERIFY:
        return run_verify(repo, args, options, out)
    return run_listing(repo, args, options, out)
