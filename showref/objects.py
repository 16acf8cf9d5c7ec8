"""Git objects: GitObject, Blob and annotated Tag with serialization/parsing."""

from __future__ import annotations

import zlib

from .constants import OBJ_BLOB, OBJ_TAG
from .util import sha1_hash


def _object_header(obj_type: str, content: bytes) -> bytes:
    """Header: '<type> <size>\\0'."""
    return f"{obj_type} {len(content)}\0".encode()


class GitObject:
    """Base git object. Any type not modelled below stays a plain GitObject."""

    def __init__(self, obj_type: str, content: bytes) -> None:
        self.type = obj_type
        self.content = content

    def hash_id(self) -> str:
        """SHA-1 of uncompressed representation: header + content."""
        header = _object_header(self.type, self.content)
        return sha1_hash(header + self.content)

    def serialize(self) -> bytes:
        """Compressed bytes for storage: zlib(header + content)."""
        header = _object_header(self.type, self.content)
        return zlib.compress(header + self.content)

    @classmethod
    def from_raw(cls, raw: bytes) -> "GitObject":
        """Parse uncompressed object bytes (header + content)."""
        null_idx = raw.find(b"\0")
        if null_idx == -1:
            raise ValueError("invalid object: no null byte in header")
        header = raw[:null_idx].decode()
        content = raw[null_idx + 1 :]
        parts = header.split(" ", 1)
        if len(parts) != 2 or not parts[1].isdigit():
            raise ValueError("invalid object header")
        obj_type, size = parts
        if int(size) != len(content):
            raise ValueError(f"object size mismatch: header {size}, content {len(content)}")
        if obj_type == OBJ_BLOB:
            return Blob(content)
        if obj_type == OBJ_TAG:
            return Tag.from_content(content)
        return cls(obj_type, content)

    @classmethod
    def deserialize(cls, data: bytes) -> "GitObject":
        """Parse compressed object bytes into a GitObject."""
        return cls.from_raw(zlib.decompress(data))


class Blob(GitObject):
    """Blob object: raw file content."""

    def __init__(self, content: bytes) -> None:
        super().__init__(OBJ_BLOB, content)


class Tag(GitObject):
    """Tag object: annotated tag with object, type, tag name, tagger, message."""

    def __init__(
        self,
        object_hash: str,
        object_type: str,
        tag_name: str,
        tagger: str,
        message: str,
        timestamp: int = 0,
        tz_offset: str = "+0000",
    ) -> None:
        self.object_hash = object_hash
        self.object_type = object_type
        self.tag_name = tag_name
        self.tagger = tagger
        self.message = message
        self._timestamp = timestamp
        self._tz_offset = tz_offset
        content = self._serialize_tag()
        super().__init__(OBJ_TAG, content)

    def _serialize_tag(self) -> bytes:
        lines = [
            f"object {self.object_hash}",
            f"type {self.object_type}",
            f"tag {self.tag_name}",
            f"tagger {self.tagger} {self._timestamp} {self._tz_offset}",
            "",
            self.message,
        ]
        return "\n".join(lines).encode()

    @classmethod
    def from_content(cls, content: bytes) -> "Tag":
        """Read the target headers ('object' and 'type') used for peeling.

        Only the header block is scanned; content is kept as-is.
        """
        object_hash = ""
        object_type = ""
        for line in content.decode(errors="replace").split("\n"):
            if line == "":
                break
            if line.startswith("object "):
                object_hash = line[7:].strip().lower()
            elif line.startswith("type "):
                object_type = line[5:]
        tag = cls.__new__(cls)
        tag.object_hash = object_hash
        tag.object_type = object_type
        tag.content = content
        tag.type = OBJ_TAG
        return tag
