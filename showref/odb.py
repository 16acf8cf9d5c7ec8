"""Loose object database: store/load/exists by hash, prefix iteration."""

from __future__ import annotations

import zlib
from pathlib import Path
from typing import Iterator

from .constants import SHA1_HEX_LEN
from .errors import ObjectNotFoundError
from .objects import GitObject
from .util import is_hex_sha, write_bytes_atomic

_HEX = "0123456789abcdef"


class ObjectDB:
    """Loose object storage under .git/objects/<aa>/<bb...>."""

    def __init__(self, objects_dir: Path) -> None:
        self.objects_dir = Path(objects_dir)

    def _object_path(self, sha: str) -> Path:
        """Path to loose object file. sha must be full 40-char hex."""
        if not is_hex_sha(sha):
            raise ValueError(f"invalid full sha: {sha}")
        sha = sha.lower()
        return self.objects_dir / sha[:2] / sha[2:]

    def exists(self, sha: str) -> bool:
        """Return True if a loose object file exists for sha."""
        if not is_hex_sha(sha):
            return False
        return self._object_path(sha).is_file()

    def store(self, obj: GitObject) -> str:
        """Write object to ODB; return full 40-char hash."""
        sha = obj.hash_id()
        path = self._object_path(sha)
        if path.exists():
            return sha
        write_bytes_atomic(path, obj.serialize())
        return sha

    def read_raw(self, sha: str) -> bytes:
        """Return uncompressed object bytes (header + content). Raises ObjectNotFoundError."""
        if not self.exists(sha):
            raise ObjectNotFoundError(f"object {sha} not found")
        try:
            return zlib.decompress(self._object_path(sha).read_bytes())
        except (OSError, zlib.error) as e:
            raise ObjectNotFoundError(f"object {sha} unreadable: {e}") from e

    def load(self, sha: str) -> GitObject:
        """Load object by full 40-char hash. Raises ObjectNotFoundError."""
        raw = self.read_raw(sha)
        try:
            return GitObject.from_raw(raw)
        except ValueError as e:
            raise ObjectNotFoundError(f"object {sha} is corrupt: {e}") from e

    def iter_shas(self, prefix: str = "") -> Iterator[str]:
        """Yield full hashes of loose objects starting with prefix (needs >= 2 chars to narrow)."""
        prefix = prefix.lower()
        if len(prefix) >= 2:
            fanout_dirs = [self.objects_dir / prefix[:2]]
        else:
            fanout_dirs = [self.objects_dir / f"{a}{b}" for a in _HEX for b in _HEX]
        for pre_dir in fanout_dirs:
            if not pre_dir.is_dir():
                continue
            for f in sorted(pre_dir.iterdir()):
                full_sha = pre_dir.name + f.name
                if len(full_sha) == SHA1_HEX_LEN and f.is_file() and full_sha.startswith(prefix):
                    yield full_sha
