from __future__ import annotations

from typing import Iterable, Iterator, List, Tuple, Union

from . import zlibmember
from .constants import HEADER_SIZE
from .entries import FileEntry, parse_entry_table
from .extract import extract_files
from .header import encode_copyright, header_size_for, parse_header
from .serializer import layout_entries, to_bytes


BytesLike = Union[bytes, bytearray, memoryview]


class FileRecord:
    """One payload of an archive, held as an owned, mutable buffer.

    A payload may be a "ZL" zlib member; ``is_zlib_member``/``decompressed``
    look at it without touching the stored bytes, so re-encoding writes the
    member back exactly as it was read.
    """

    __slots__ = ("data",)

    def __init__(self, data: BytesLike = b""):
        self.data = bytearray(data)

    def __len__(self) -> int:
        return len(self.data)

    def __eq__(self, other) -> bool:
        if isinstance(other, FileRecord):
            return self.data == other.data
        return NotImplemented

    def __repr__(self) -> str:
        kind = "zlib" if self.is_zlib_member() else "raw"
        return f"FileRecord({kind}, {len(self.data)} bytes)"

    def __bytes__(self) -> bytes:
        return bytes(self.data)

    def bytes(self) -> bytes:
        return bytes(self.data)

    def is_zlib_member(self) -> bool:
        return zlibmember.is_member(self.data)

    def declared_size(self) -> int:
        return zlibmember.declared_size(self.data)

    def decompressed(self) -> bytes:
        return zlibmember.decompress(self.data)


class Archive:
    def __init__(self, copyright: str = "", records: Iterable[Union[FileRecord, BytesLike]] = ()):
        self._copyright = ""
        self.copyright = copyright
        self.records: List[FileRecord] = [r if isinstance(r, FileRecord) else FileRecord(r) for r in records]
        # Padding bytes discarded when this archive was decoded
        self.dropped_padding = 0

    @property
    def copyright(self) -> str:
        return self._copyright

    @copyright.setter
    def copyright(self, value: str) -> None:
        encode_copyright(value)
        self._copyright = value

    def set_copyright(self, value: str) -> None:
        self.copyright = value

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self.records)

    def __getitem__(self, index: int) -> FileRecord:
        return self.records[index]

    def __repr__(self) -> str:
        return f"Archive(copyright={self._copyright!r}, records={len(self.records)})"

    def append(self, data: Union[FileRecord, BytesLike]) -> FileRecord:
        rec = data if isinstance(data, FileRecord) else FileRecord(data)
        self.records.append(rec)
        return rec

    def offsets(self) -> List[int]:
        """Offsets each record will be written at by ``encode``."""
        return [e.offset for e in layout_entries([len(r) for r in self.records])]

    def to_bytes(self) -> bytes:
        return to_bytes(self)


def decode_with_entries(data: BytesLike) -> Tuple[Archive, List[FileEntry]]:
    """Decode ``data`` and also return the on-disk entry table.

    The entries carry the original offsets, which ``encode`` does not keep.
    """
    data = bytes(data)
    copyright, entry_count = parse_header(data)
    entries = parse_entry_table(data, entry_count, start=HEADER_SIZE)
    payloads, dropped = extract_files(data[header_size_for(entry_count) :], entries)
    archive = Archive(copyright, payloads)
    archive.dropped_padding = dropped
    return archive, entries


def decode(data: BytesLike) -> Archive:
    archive, _ = decode_with_entries(data)
    return archive


def encode(archive: Archive) -> bytes:
    return to_bytes(archive)


def load(path: str) -> Archive:
    with open(path, "rb") as f:
        return decode(f.read())


def save(archive: Archive, path: str) -> int:
    """Write ``archive`` to ``path``; returns the number of bytes written."""
    data = encode(archive)
    with open(path, "wb") as f:
        f.write(data)
    return len(data)
