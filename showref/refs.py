"""Refs: loose and packed ref reading, enumeration, HEAD, ref name validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from .constants import HEAD_FILE, MAX_SYMREF_DEPTH, PACKED_REFS_FILE, REF_PREFIX
from .util import is_hex_sha, read_text_safe

SYMREF_PREFIX = "ref: "

# Characters disallowed anywhere in a ref name (git-check-ref-format)
_REF_FORBIDDEN = set(" ~^:?*[\\\x7f")


@dataclass
class PackedRefs:
    """Contents of .git/packed-refs: refname -> sha, and tag sha -> peeled sha."""
    refs: Dict[str, str] = field(default_factory=dict)
    peeled: Dict[str, str] = field(default_factory=dict)


def _ref_path(repo_git: Path, refname: str) -> Path:
    """Path to loose ref file for HEAD or refs/..."""
    return repo_git / refname


def check_ref_format(refname: str) -> bool:
    """Return True if refname is a well-formed multi-level ref name.

    Same rules as git check-ref-format without options: at least two
    components, no component starting with '.' or ending with '.lock',
    no '..', '@{', control characters or any of ' ~^:?*[\\', and no
    trailing '/' or '.'.
    """
    if not refname or refname == "@":
        return False
    if refname.endswith("/") or refname.endswith("."):
        return False
    if ".." in refname or "@{" in refname:
        return False
    for c in refname:
        if ord(c) < 0o40 or c in _REF_FORBIDDEN:
            return False
    components = refname.split("/")
    if len(components) < 2:
        return False
    for component in components:
        if not component or component.startswith("."):
            return False
        if component.endswith(".lock"):
            return False
    return True


def read_packed_refs(repo_git: Path) -> PackedRefs:
    """Parse .git/packed-refs. Missing or unreadable file gives an empty result."""
    result = PackedRefs()
    raw = read_text_safe(repo_git / PACKED_REFS_FILE)
    if raw is None:
        return result
    last_sha: Optional[str] = None
    for line in raw.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("^"):
            # peeled value of the tag on the previous line
            peeled = line[1:]
            if last_sha is not None and is_hex_sha(peeled):
                result.peeled[last_sha] = peeled.lower()
            last_sha = None
            continue
        parts = line.split(None, 1)
        last_sha = None
        if len(parts) < 2:
            continue
        sha, refname = parts[0], parts[1]
        if is_hex_sha(sha):
            last_sha = sha.lower()
            result.refs[refname] = last_sha
    return result


def resolve_ref(
    repo_git: Path,
    refname: str,
    _packed: Optional[PackedRefs] = None,
    _depth: int = 0,
) -> Optional[str]:
    """Resolve ref to object hash; None if missing, malformed or a symref chain is too deep.

    Loose refs shadow packed ones; symbolic refs ("ref: <target>") are followed.
    Only HEAD and well-formed names are looked up, so the name can never be
    normalized into a different file path.
    """
    if _depth > MAX_SYMREF_DEPTH:
        return None
    if refname != HEAD_FILE and not check_ref_format(refname):
        return None
    content = read_text_safe(_ref_path(repo_git, refname))
    if content is None:
        if _packed is None:
            _packed = read_packed_refs(repo_git)
        return _packed.refs.get(refname)
    content = content.strip()
    if is_hex_sha(content):
        return content.lower()
    if content.startswith(SYMREF_PREFIX):
        target = content[len(SYMREF_PREFIX) :].strip()
        return resolve_ref(repo_git, target, _packed=_packed, _depth=_depth + 1)
    return None


def head_commit(repo_git: Path) -> Optional[str]:
    """Resolve HEAD to an object hash; None if no HEAD or the branch is unborn."""
    return resolve_ref(repo_git, HEAD_FILE)


def _loose_ref_names(repo_git: Path, prefix: str) -> Iterator[str]:
    """Yield names of loose ref files below prefix (e.g. refs/ or refs/heads/)."""
    base = repo_git / prefix.rstrip("/")
    if not base.is_dir():
        return
    for p in base.rglob("*"):
        if p.is_file():
            yield p.relative_to(repo_git).as_posix()


def iter_refs(repo_git: Path, prefix: str = REF_PREFIX) -> Iterator[Tuple[str, str]]:
    """Yield (refname, sha) for every ref starting with prefix, sorted by name.

    Loose and packed refs are merged (loose wins). Refs with malformed names,
    dangling symbolic refs and unreadable files are skipped.
    """
    packed = read_packed_refs(repo_git)
    names = set(_loose_ref_names(repo_git, prefix))
    names.update(r for r in packed.refs if r.startswith(prefix))
    for refname in sorted(names):
        if not check_ref_format(refname):
            continue
        sha = resolve_ref(repo_git, refname, _packed=packed)
        if sha is None:
            continue
        yield refname, sha


def list_ref_names(repo_git: Path, prefix: str = REF_PREFIX) -> list[str]:
    """List full ref names (e.g. refs/heads/main) with given prefix, from loose + packed-refs."""
    return [name for name, _ in iter_refs(repo_git, prefix)]
