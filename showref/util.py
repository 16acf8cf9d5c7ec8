"""Helper functions: safe file ops, hashing, hex checks."""

from __future__ import annotations

import hashlib
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from .constants import SHA1_HEX_LEN

_HEX_SHA_RE = re.compile(r"[0-9a-fA-F]{40}")


def sha1_hash(data: bytes) -> str:
    """Compute SHA-1 hex digest of data."""
    return hashlib.sha1(data).hexdigest()


def is_hex_sha(s: str) -> bool:
    """Return True if s is a full 40-char hex object id."""
    return len(s) == SHA1_HEX_LEN and bool(_HEX_SHA_RE.fullmatch(s))


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Write bytes to file atomically (temp then replace)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".tmp_")
    try:
        os.write(fd, data)
        os.close(fd)
        os.replace(tmp, path)
    except Exception:
        try:
            os.close(fd)
        except OSError:
            pass
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def read_text_safe(path: Path) -> Optional[str]:
    """Read file as text; return None if not found or error."""
    try:
        return path.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError, UnicodeDecodeError):
        return None
