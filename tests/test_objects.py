"""Tests for objects, loose ODB, pack index reading, abbreviation and tag peeling."""

import struct
import tempfile
import unittest
from pathlib import Path
from typing import List

from showref.errors import ObjectNotFoundError
from showref.idx import IdxV2
from showref.objects import Blob, GitObject, Tag
from showref.odb import ObjectDB
from showref.objectstore import ObjectStore
from showref.repo import Repository


def make_temp_repo() -> Repository:
    d = tempfile.mkdtemp(prefix="showref_objects_")
    p = Path(d)
    (p / ".git" / "objects").mkdir(parents=True)
    (p / ".git" / "refs" / "heads").mkdir(parents=True)
    (p / ".git" / "refs" / "tags").mkdir(parents=True)
    return Repository(str(p))


def touch_loose(objects_dir: Path, sha: str) -> None:
    """Fake loose object: only the file name matters for existence and abbreviation."""
    path = objects_dir / sha[:2] / sha[2:]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")


def write_idx_v2(path: Path, shas: List[str]) -> None:
    """Minimal pack index v2 with zero CRCs and offsets."""
    names = sorted(s.lower() for s in shas)
    fanout = [0] * 256
    for sha in names:
        fanout[int(sha[:2], 16)] += 1
    for i in range(1, 256):
        fanout[i] += fanout[i - 1]
    n = len(names)
    data = b"\xfftOc" + struct.pack(">I", 2) + struct.pack(">256I", *fanout)
    data += b"".join(bytes.fromhex(s) for s in names)
    data += b"\0" * (n * 4) + b"\0" * (n * 4) + b"\0" * 40
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    path.with_suffix(".pack").write_bytes(b"PACK")


class TestObjects(unittest.TestCase):
    def test_blob_hash_matches_git(self) -> None:
        # git hash-object of "hello\n"
        self.assertEqual(Blob(b"hello\n").hash_id(), "ce013625030ba8dba906f756967f9e9ca394464a")

    def test_tag_roundtrip_keeps_target(self) -> None:
        tag = Tag("a" * 40, "commit", "v1", "T <t@example.com>", "release\n", timestamp=1700000000)
        parsed = GitObject.deserialize(tag.serialize())
        self.assertIsInstance(parsed, Tag)
        self.assertEqual(parsed.object_hash, "a" * 40)
        self.assertEqual(parsed.object_type, "commit")
        self.assertEqual(parsed.hash_id(), tag.hash_id())

    def test_tag_body_lines_not_read_as_headers(self) -> None:
        content = (
            b"object " + b"b" * 40 + b"\ntype tag\ntag v2\ntagger T <t@example.com> 1 +0000\n\n"
            b"object " + b"c" * 40 + b"\ntype blob\n"
        )
        tag = Tag.from_content(content)
        self.assertEqual(tag.object_hash, "b" * 40)
        self.assertEqual(tag.object_type, "tag")
        self.assertEqual(tag.content, content)

    def test_unknown_type_stays_generic(self) -> None:
        obj = GitObject.deserialize(GitObject("commit", b"tree x\n").serialize())
        self.assertEqual(obj.type, "commit")
        self.assertNotIsInstance(obj, Tag)

    def test_size_mismatch_rejected(self) -> None:
        with self.assertRaises(ValueError):
            GitObject.from_raw(b"blob 10\0abc")


class TestObjectDB(unittest.TestCase):
    def setUp(self) -> None:
        self.odb = ObjectDB(Path(tempfile.mkdtemp(prefix="showref_odb_")))

    def test_store_load_exists(self) -> None:
        sha = self.odb.store(Blob(b"data"))
        self.assertTrue(self.odb.exists(sha))
        self.assertEqual(self.odb.load(sha).content, b"data")

    def test_missing_object(self) -> None:
        self.assertFalse(self.odb.exists("0" * 40))
        self.assertFalse(self.odb.exists("not-a-sha"))
        with self.assertRaises(ObjectNotFoundError):
            self.odb.load("0" * 40)

    def test_iter_shas_prefix(self) -> None:
        touch_loose(self.odb.objects_dir, "abcd" + "0" * 36)
        touch_loose(self.odb.objects_dir, "abce" + "0" * 36)
        self.assertEqual(list(self.odb.iter_shas("abcd")), ["abcd" + "0" * 36])
        self.assertEqual(len(list(self.odb.iter_shas("ab"))), 2)


class TestIdx(unittest.TestCase):
    def test_lookup_and_iter(self) -> None:
        path = Path(tempfile.mkdtemp(prefix="showref_idx_")) / "pack-x.idx"
        shas = ["00" + "1" * 38, "ab" + "2" * 38, "ab" + "3" * 38, "ff" + "4" * 38]
        write_idx_v2(path, shas)
        idx = IdxV2(path)
        self.assertEqual(len(list(idx.iter_shas(""))), 4)
        for sha in shas:
            self.assertTrue(idx.lookup(sha))
        self.assertFalse(idx.lookup("ab" + "4" * 38))
        self.assertEqual(list(idx.iter_shas("ab")), ["ab" + "2" * 38, "ab" + "3" * 38])

    def test_bad_signature(self) -> None:
        from showref.errors import IdxError
        path = Path(tempfile.mkdtemp(prefix="showref_idx_")) / "pack-bad.idx"
        path.write_bytes(b"\0" * 2000)
        with self.assertRaises(IdxError):
            IdxV2(path)


class TestAbbreviate(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = make_temp_repo()

    def test_unique_prefix_uses_minimum(self) -> None:
        sha = "1234567890" + "a" * 30
        touch_loose(self.repo.objects_dir, sha)
        store = ObjectStore(self.repo.objects_dir)
        self.assertEqual(store.find_unique_abbrev(sha, 7), "1234567")
        self.assertEqual(store.find_unique_abbrev(sha, 2), "1234")

    def test_ambiguous_prefix_grows(self) -> None:
        sha = "123456789a" + "0" * 30
        other = "123456789b" + "0" * 30
        touch_loose(self.repo.objects_dir, sha)
        touch_loose(self.repo.objects_dir, other)
        store = ObjectStore(self.repo.objects_dir)
        self.assertEqual(store.find_unique_abbrev(sha, 7), "123456789a")

    def test_packed_objects_count_for_uniqueness(self) -> None:
        sha = "abcdef1" + "0" * 33
        touch_loose(self.repo.objects_dir, sha)
        write_idx_v2(self.repo.objects_dir / "pack" / "pack-1.idx", ["abcdef1" + "1" * 33])
        store = ObjectStore(self.repo.objects_dir)
        self.assertTrue(store.exists("abcdef1" + "1" * 33))
        self.assertEqual(store.find_unique_abbrev(sha, 7), "abcdef10")

    def test_repository_abbreviate_modes(self) -> None:
        sha = "fedcba9876" + "5" * 30
        touch_loose(self.repo.objects_dir, sha)
        self.assertEqual(self.repo.abbreviate(sha, 0), sha)
        self.assertEqual(self.repo.abbreviate(sha, 40), sha)
        self.assertEqual(self.repo.abbreviate(sha, -1), "fedcba9")
        self.assertEqual(self.repo.abbreviate(sha, 10), "fedcba9876")


class TestPeel(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = make_temp_repo()
        self.blob = self.repo.store_object(Blob(b"content\n"))

    def test_non_tag_does_not_peel(self) -> None:
        self.assertIsNone(self.repo.peel(self.blob))

    def test_tag_peels_to_target(self) -> None:
        tag = self.repo.store_object(Tag(self.blob, "blob", "v1", "T <t@x>", "m\n"))
        self.assertEqual(self.repo.peel(tag), self.blob)

    def test_nested_tags_peel_fully(self) -> None:
        inner = self.repo.store_object(Tag(self.blob, "blob", "v1", "T <t@x>", "m\n"))
        outer = self.repo.store_object(Tag(inner, "tag", "v1-signed", "T <t@x>", "m\n"))
        self.assertEqual(self.repo.peel(outer), self.blob)

    def test_tag_to_missing_object(self) -> None:
        tag = self.repo.store_object(Tag("9" * 40, "commit", "v1", "T <t@x>", "m\n"))
        self.assertIsNone(self.repo.peel(tag))

    def test_packed_tag_uses_packed_refs_peeled_value(self) -> None:
        packed_tag = "7" * 40
        write_idx_v2(self.repo.objects_dir / "pack" / "pack-1.idx", [packed_tag])
        (self.repo.git_dir / "packed-refs").write_text(
            "# pack-refs with: peeled fully-peeled sorted \n"
            + packed_tag + " refs/tags/v2\n^" + self.blob + "\n"
        )
        repo = Repository(self.repo.path)
        self.assertEqual(repo.peel(packed_tag), self.blob)


if __name__ == "__main__":
    unittest.main()
