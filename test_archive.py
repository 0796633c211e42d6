from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from pman import Archive, FileRecord, decode, decode_with_entries, encode, header_size_for, load, save
from pman.constants import U32_MAX
from pman.errors import (
    ArchiveTooLarge,
    BadMagic,
    CopyrightTooLong,
    OverlappingEntries,
    TruncatedPayload,
    TruncatedZlib,
    UnexpectedNonZeroField,
)
from pman.serializer import layout_entries

from fixtures import (
    SAMPLE_COLL_INDEX,
    SAMPLE_COPYRIGHT,
    SAMPLE_COUNT,
    SAMPLE_FIRST_OFFSET,
    SAMPLE_FIRST_SIZE,
    SAMPLE_PADDING,
    build_sample,
    pack_raw,
    zl_member,
)


def _signature(arc: Archive):
    return arc.copyright, len(arc), [r.bytes() for r in arc]


class SampleArchiveTests(unittest.TestCase):
    def setUp(self):
        self.data, self.payloads = build_sample()

    def test_decode_sample(self):
        arc, entries = decode_with_entries(self.data)
        self.assertEqual(arc.copyright, SAMPLE_COPYRIGHT)
        self.assertEqual(len(arc), SAMPLE_COUNT)
        self.assertEqual((entries[0].offset, entries[0].size), (SAMPLE_FIRST_OFFSET, SAMPLE_FIRST_SIZE))
        self.assertEqual([r.bytes() for r in arc], self.payloads)
        self.assertEqual(arc.dropped_padding, SAMPLE_PADDING)

    def test_record_77_is_collision_data(self):
        arc = decode(self.data)
        rec = arc[SAMPLE_COLL_INDEX]
        self.assertTrue(rec.is_zlib_member())
        self.assertEqual(rec.decompressed()[:4], b"COLL")
        self.assertEqual(len(rec.decompressed()), rec.declared_size())
        # raw bytes are kept as stored
        self.assertEqual(rec.bytes(), self.payloads[SAMPLE_COLL_INDEX])
        self.assertEqual(sum(1 for r in arc if r.is_zlib_member()), 1)

    def test_encode_drops_padding(self):
        arc = decode(self.data)
        out = encode(arc)
        self.assertEqual(len(self.data) - len(out), SAMPLE_PADDING)
        self.assertNotEqual(out, self.data)

    def test_round_trip(self):
        first = decode(self.data)
        again = decode(encode(first))
        self.assertEqual(_signature(again), _signature(first))
        self.assertEqual(again.dropped_padding, 0)
        # packed output is a fixed point
        self.assertEqual(encode(again), encode(first))

    def test_offsets_are_packed(self):
        arc = decode(self.data)
        _, entries = decode_with_entries(encode(arc))
        offsets = [e.offset for e in entries]
        self.assertEqual(offsets, arc.offsets())
        self.assertEqual(offsets[0], header_size_for(SAMPLE_COUNT))
        for prev, cur in zip(entries, entries[1:]):
            self.assertEqual(prev.end, cur.offset)


class ArchiveModelTests(unittest.TestCase):
    def test_construct_and_encode(self):
        arc = Archive("test", [b"one", bytearray(b"two"), FileRecord(b"three")])
        self.assertEqual(len(arc), 3)
        self.assertEqual(arc.offsets(), [112, 115, 118])
        out = arc.to_bytes()
        self.assertEqual(len(out), 64 + 3 * 16 + 11)
        self.assertEqual(out[112:], b"onetwothree")
        self.assertEqual(_signature(decode(out)), ("test", 3, [b"one", b"two", b"three"]))

    def test_empty_archive(self):
        out = encode(Archive())
        self.assertEqual(len(out), 64)
        arc = decode(out)
        self.assertEqual((arc.copyright, len(arc)), ("", 0))

    def test_set_copyright(self):
        arc = Archive()
        for n in (0, 1, 54, 55):
            arc.set_copyright("c" * n)
            self.assertEqual(arc.copyright, "c" * n)
        with self.assertRaises(CopyrightTooLong):
            arc.set_copyright("c" * 56)
        self.assertEqual(arc.copyright, "c" * 55)
        with self.assertRaises(CopyrightTooLong):
            arc.copyright = "c" * 100
        with self.assertRaises(CopyrightTooLong):
            Archive("c" * 56)

    def test_records_are_mutable(self):
        data, _ = build_sample()
        arc = decode(data)
        arc[0].data[:4] = b"EDIT"
        arc.records.pop()
        arc.append(b"tail")
        arc.copyright = "Repacked"
        again = decode(encode(arc))
        self.assertEqual(again.copyright, "Repacked")
        self.assertEqual(len(again), SAMPLE_COUNT)
        self.assertEqual(again[0].bytes()[:4], b"EDIT")
        self.assertEqual(again[-1].bytes(), b"tail")

    def test_plain_bytes_in_records_list(self):
        arc = Archive("c", [b"one"])
        arc.records.append(b"xx")
        arc.records.append(bytearray(b"yz"))
        self.assertEqual(_signature(decode(encode(arc))), ("c", 3, [b"one", b"xx", b"yz"]))
        self.assertEqual(bytes(FileRecord(b"raw")), b"raw")

    def test_record_equality(self):
        self.assertEqual(FileRecord(b"ab"), FileRecord(bytearray(b"ab")))
        self.assertNotEqual(FileRecord(b"ab"), FileRecord(b"ac"))
        self.assertIn("zlib", repr(FileRecord(zl_member(b"x"))))

    def test_decompress_failure_is_per_record(self):
        arc = Archive("c", [zl_member(b"abc", declared=10), zl_member(b"fine")])
        arc2 = decode(encode(arc))
        with self.assertRaises(TruncatedZlib):
            arc2[0].decompressed()
        self.assertEqual(arc2[1].decompressed(), b"fine")

    def test_layout_overflow(self):
        with self.assertRaises(ArchiveTooLarge):
            layout_entries([U32_MAX])
        with self.assertRaises(ArchiveTooLarge):
            layout_entries([0x8000_0000, 0x8000_0000])
        self.assertEqual(layout_entries([U32_MAX - 80])[0].offset, 80)


class DecodeFailureTests(unittest.TestCase):
    def test_overlapping_entries(self):
        data = pack_raw("c", [(96, 4), (98, 2)], b"abcdef")
        with self.assertRaises(OverlappingEntries):
            decode(data)

    def test_decreasing_offsets(self):
        data = pack_raw("c", [(96, 0), (90, 2)], b"ab")
        with self.assertRaises(OverlappingEntries):
            decode(data)

    def test_truncated_payload(self):
        data = pack_raw("c", [(96, 4), (100, 4)], b"abcdef")
        with self.assertRaises(TruncatedPayload):
            decode(data)

    def test_reserved_field(self):
        data = pack_raw("c", [(80, 1)], b"a", reserved=(1, 0))
        with self.assertRaises(UnexpectedNonZeroField):
            decode(data)

    def test_bad_magic(self):
        data = b"NAMP" + pack_raw("c", [], b"")[4:]
        with self.assertRaises(BadMagic):
            decode(data)


class FileIOTests(unittest.TestCase):
    def run_with_tmpdir(self, func):
        with tempfile.TemporaryDirectory() as tmp:
            func(Path(tmp))

    def test_save_and_load(self):
        def scenario(tmp_path: Path):
            data, payloads = build_sample()
            src = tmp_path / "packfile.dat"
            src.write_bytes(data)
            arc = load(str(src))
            dst = tmp_path / "repacked.dat"
            written = save(arc, str(dst))
            self.assertEqual(written, os.path.getsize(dst))
            self.assertEqual(written, len(data) - SAMPLE_PADDING)
            self.assertEqual([r.bytes() for r in load(str(dst))], payloads)

        self.run_with_tmpdir(scenario)

    def test_missing_file(self):
        def scenario(tmp_path: Path):
            with self.assertRaises(FileNotFoundError):
                load(str(tmp_path / "nope.dat"))

        self.run_with_tmpdir(scenario)


if __name__ == "__main__":
    unittest.main()
