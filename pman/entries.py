from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Iterable, List

from .constants import ENTRY_SIZE, U32_MAX
from .errors import ArchiveTooLarge, TruncatedInput, UnexpectedNonZeroField


# Entry record (fixed 16 bytes)
# struct: <I I I I
#  - reserved0 u32 (must be 0)
#  - offset u32, absolute position of the payload in the archive
#  - size u32
#  - reserved1 u32 (must be 0)
_ENTRY_STRUCT = struct.Struct("<IIII")

assert _ENTRY_STRUCT.size == ENTRY_SIZE


@dataclass(frozen=True)
class FileEntry:
    offset: int
    size: int

    @property
    def end(self) -> int:
        return self.offset + self.size


def parse_entry_table(data: bytes, entry_count: int, start: int = 0) -> List[FileEntry]:
    table_len = entry_count * ENTRY_SIZE
    if len(data) - start < table_len:
        raise TruncatedInput(
            f"entry table needs {table_len} bytes for {entry_count} entries, got {max(len(data) - start, 0)}"
        )
    entries: List[FileEntry] = []
    for i, (res0, offset, size, res1) in enumerate(_ENTRY_STRUCT.iter_unpack(data[start : start + table_len])):
        if res0 != 0:
            raise UnexpectedNonZeroField(f"entry {i}: leading reserved field is {res0:#x}, expected 0")
        if res1 != 0:
            raise UnexpectedNonZeroField(f"entry {i}: trailing reserved field is {res1:#x}, expected 0")
        entries.append(FileEntry(offset=offset, size=size))
    return entries


def write_entry_table(entries: Iterable[FileEntry]) -> bytes:
    out = bytearray()
    for i, e in enumerate(entries):
        if not (0 <= e.offset <= U32_MAX and 0 <= e.size <= U32_MAX):
            raise ArchiveTooLarge(f"entry {i}: offset {e.offset:#x} / size {e.size:#x} do not fit in 32 bits")
        out += _ENTRY_STRUCT.pack(0, e.offset, e.size, 0)
    return bytes(out)
