"""Pack index v2 reader: object existence and prefix enumeration for packed objects."""

from __future__ import annotations

import bisect
import struct
from pathlib import Path
from typing import Iterator, List

from .constants import SHA1_HEX_LEN
from .errors import IdxError

IDX_SIGNATURE = b"\xfftOc"
IDX_VERSION_V2 = 2
FANOUT_ENTRIES = 256 * 4  # 1024 bytes
TRAILER_LEN = 20 + 20  # pack sha1 + idx sha1


class IdxV2:
    """Pack index v2: only the sorted name table is needed here, offsets are not decoded."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._parse(self.path.read_bytes())

    def _parse(self, data: bytes) -> None:
        if len(data) < 8 + FANOUT_ENTRIES + TRAILER_LEN:
            raise IdxError("idx file too short")
        if data[:4] != IDX_SIGNATURE:
            raise IdxError("invalid idx signature")
        version = struct.unpack(">I", data[4:8])[0]
        if version != IDX_VERSION_V2:
            raise IdxError(f"unsupported idx version {version}")

        # Fanout: 256 * 4 bytes big-endian; last entry is the object count
        self._fanout: List[int] = list(struct.unpack(">256I", data[8 : 8 + FANOUT_ENTRIES]))
        n = self._fanout[255]
        names_start = 8 + FANOUT_ENTRIES
        names_end = names_start + n * 20
        # names + crc + 4-byte offsets must fit before the trailer
        if len(data) < names_end + n * 8 + TRAILER_LEN:
            raise IdxError("idx truncated at names/crc/offsets")
        self._names: List[str] = [
            data[start : start + 20].hex() for start in range(names_start, names_end, 20)
        ]

    def lookup(self, sha1_hex: str) -> bool:
        """Return True if the object is listed in this index."""
        if len(sha1_hex) != SHA1_HEX_LEN:
            return False
        sha1_hex = sha1_hex.lower()
        first_byte = int(sha1_hex[:2], 16)
        lo = self._fanout[first_byte - 1] if first_byte > 0 else 0
        hi = self._fanout[first_byte]
        i = bisect.bisect_left(self._names, sha1_hex, lo, hi)
        return i < hi and self._names[i] == sha1_hex

    def iter_shas(self, prefix: str = "") -> Iterator[str]:
        """Yield object SHAs in index order starting with prefix."""
        prefix = prefix.lower()
        start = bisect.bisect_left(self._names, prefix)
        for name in self._names[start:]:
            if not name.startswith(prefix):
                break
            yield name
