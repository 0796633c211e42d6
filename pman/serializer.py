from __future__ import annotations

from typing import List, Sequence

from .constants import U32_MAX
from .entries import FileEntry, write_entry_table
from .errors import ArchiveTooLarge
from .header import header_size_for, write_header


def layout_entries(sizes: Sequence[int]) -> List[FileEntry]:
    """Assign tightly packed offsets to payloads of the given sizes."""
    entries: List[FileEntry] = []
    offset = header_size_for(len(sizes))
    for i, size in enumerate(sizes):
        if offset + size > U32_MAX + 1:
            raise ArchiveTooLarge(f"record {i} ends past the 32-bit offset limit")
        entries.append(FileEntry(offset=offset, size=size))
        offset += size
    return entries


def to_bytes(archive) -> bytes:
    """
    Serialize ``archive`` as header + entry table + payloads.

    Offsets are recomputed from scratch and payloads are written back to back.
    Padding that sat between payloads in a decoded archive is not restored, so
    the output can be shorter than the bytes the archive was decoded from while
    still decoding to the same copyright and payloads.
    """
    # records may also be plain byte strings appended to the list directly
    payloads = [bytes(r) for r in archive.records]
    entries = layout_entries([len(p) for p in payloads])
    out = bytearray(write_header(len(payloads), archive.copyright))
    out += write_entry_table(entries)
    for p in payloads:
        out += p
    return bytes(out)
