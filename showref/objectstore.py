"""Unified object store: loose objects plus pack indexes (existence only for packs)."""

from __future__ import annotations

from pathlib import Path
from typing import List, Set

from .constants import DEFAULT_ABBREV_LEN, MIN_ABBREV, SHA1_HEX_LEN
from .errors import IdxError, ObjectNotFoundError
from .idx import IdxV2
from .objects import GitObject
from .odb import ObjectDB
from .util import is_hex_sha


class ObjectStore:
    """Object database view used by show-ref: exists, load (loose), abbreviate."""

    def __init__(self, objects_dir: Path) -> None:
        self.objects_dir = Path(objects_dir)
        self._loose = ObjectDB(self.objects_dir)
        self._packs: List[IdxV2] = []
        self._scan_packs()

    def _scan_packs(self) -> None:
        """Scan .git/objects/pack/*.idx; unreadable indexes are skipped."""
        pack_dir = self.objects_dir / "pack"
        if not pack_dir.is_dir():
            return
        for idx_path in sorted(pack_dir.glob("*.idx")):
            if not idx_path.with_suffix(".pack").is_file():
                continue
            try:
                self._packs.append(IdxV2(idx_path))
            except (IdxError, OSError):
                continue

    def exists(self, sha: str) -> bool:
        """Return True if object exists (loose or packed)."""
        if not is_hex_sha(sha):
            return False
        sha = sha.lower()
        if self._loose.exists(sha):
            return True
        return any(idx.lookup(sha) for idx in self._packs)

    def store(self, obj: GitObject) -> str:
        """Write object to loose ODB; return full 40-char hash."""
        return self._loose.store(obj)

    def load(self, sha: str) -> GitObject:
        """Load a loose object. Packed objects are not decoded: raises ObjectNotFoundError."""
        return self._loose.load(sha.lower())

    def prefix_matches(self, prefix: str) -> Set[str]:
        """Return all full hashes (loose + packed) starting with prefix."""
        prefix = prefix.lower()
        matches = set(self._loose.iter_shas(prefix))
        for idx in self._packs:
            matches.update(idx.iter_shas(prefix))
        return matches

    def find_unique_abbrev(self, sha: str, min_len: int = DEFAULT_ABBREV_LEN) -> str:
        """Shortest prefix of sha, at least min_len chars, that names no other object."""
        if not is_hex_sha(sha):
            raise ObjectNotFoundError(f"invalid object id: {sha}")
        sha = sha.lower()
        length = max(MIN_ABBREV, min(min_len, SHA1_HEX_LEN))
        # Every candidate sharing the shortest prefix; longer prefixes only filter this set
        candidates = self.prefix_matches(sha[:length]) - {sha}
        while candidates and length < SHA1_HEX_LEN:
            length += 1
            candidates = {c for c in candidates if c.startswith(sha[:length])}
        return sha[:length]
