"""Repository: ties paths, object store and refs together behind the show-ref collaborator surface."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .constants import (
    ABBREV_AUTO,
    ABBREV_FULL,
    DEFAULT_ABBREV_LEN,
    HEAD_FILE,
    OBJ_TAG,
    REF_PREFIX,
    SHA1_HEX_LEN,
)
from .errors import NotARepositoryError, ObjectNotFoundError
from .objects import GitObject, Tag
from .objectstore import ObjectStore
from .refs import head_commit, iter_refs, list_ref_names, read_packed_refs, resolve_ref


class Repository:
    """Git repository: .git dir, objects, refs."""

    def __init__(self, path: str | Path = ".", git_dir: str | Path | None = None) -> None:
        self.path = Path(path).resolve()
        self.git_dir = Path(git_dir).resolve() if git_dir is not None else self.path / ".git"
        self.objects_dir = self.git_dir / "objects"
        self.refs_dir = self.git_dir / "refs"
        self.odb = ObjectStore(self.objects_dir)

    @classmethod
    def discover(cls, start: str | Path = ".") -> "Repository":
        """Open $GIT_DIR, or the nearest directory at or above start that has a .git dir."""
        env_git_dir = os.environ.get("GIT_DIR")
        if env_git_dir:
            repo = cls(start, git_dir=env_git_dir)
            repo.require_repo()
            return repo
        start_path = Path(start).resolve()
        for candidate in (start_path, *start_path.parents):
            if (candidate / ".git").is_dir():
                return cls(candidate)
        raise NotARepositoryError("not a git repository (or any of the parent directories): .git")

    def require_repo(self) -> None:
        """Raise NotARepositoryError if not a git repo."""
        if not self.git_dir.is_dir():
            raise NotARepositoryError(f"not a git repository: {self.git_dir}")

    # --- refs ---

    def iter_refs(self, prefix: str = REF_PREFIX) -> Iterator[Tuple[str, str]]:
        """Yield (refname, sha) under prefix in name order."""
        return iter_refs(self.git_dir, prefix)

    def ref_names(self, prefix: str = REF_PREFIX) -> List[str]:
        return list_ref_names(self.git_dir, prefix)

    def head_ref(self) -> Optional[Tuple[str, str]]:
        """Return ("HEAD", sha) when HEAD resolves, else None."""
        sha = head_commit(self.git_dir)
        if sha is None:
            return None
        return HEAD_FILE, sha

    def read_ref(self, refname: str) -> Optional[str]:
        """Resolve a full ref name (or HEAD) to a sha; None if it does not exist."""
        return resolve_ref(self.git_dir, refname)

    # --- objects ---

    def store_object(self, obj: GitObject) -> str:
        """Store object in ODB; return full hash."""
        return self.odb.store(obj)

    def load_object(self, sha: str) -> GitObject:
        """Load object by full hash."""
        return self.odb.load(sha)

    def has_object(self, sha: str) -> bool:
        return self.odb.exists(sha)

    def abbreviate(self, sha: str, abbrev: int = ABBREV_FULL) -> str:
        """Render sha with abbrev digits (0: full, -1: auto), extended until unique."""
        if abbrev == ABBREV_FULL or abbrev >= SHA1_HEX_LEN:
            return sha
        min_len = DEFAULT_ABBREV_LEN if abbrev == ABBREV_AUTO else abbrev
        return self.odb.find_unique_abbrev(sha, min_len)

    def peel(self, sha: str) -> Optional[str]:
        """Peel a tag object to the first non-tag object it points at.

        Returns None when sha is not a tag or the chain cannot be followed.
        A tag only present in a pack falls back to the peeled value
        recorded in packed-refs.
        """
        packed_peeled: Optional[dict[str, str]] = None
        seen = set()
        current = sha
        while True:
            if current in seen:
                return None
            seen.add(current)
            try:
                obj = self.load_object(current)
            except ObjectNotFoundError:
                if not self.has_object(current):
                    return None
                if packed_peeled is None:
                    packed_peeled = read_packed_refs(self.git_dir).peeled
                peeled = packed_peeled.get(current)
                if peeled is not None:
                    return peeled
                # packed object without a peeled record is not a tag
                return None if current == sha else current
            if obj.type != OBJ_TAG:
                return None if current == sha else current
            tag = obj if isinstance(obj, Tag) else Tag.from_content(obj.content)
            if not tag.object_hash:
                return None
            current = tag.object_hash
