from __future__ import annotations

from typing import List, Sequence, Tuple

from .entries import FileEntry
from .errors import OverlappingEntries, TruncatedPayload


def extract_files(region: bytes, entries: Sequence[FileEntry]) -> Tuple[List[bytes], int]:
    """Slice every entry's payload out of the payload region.

    Entry offsets are not guaranteed to follow on from the previous entry; the
    distance between one payload's end and the next one's offset is padding
    and is skipped. The cursor starts at the beginning of ``region``, which is
    taken to be where the first entry lives.

    Args:
        region: Bytes following the entry table.
        entries: Entries in table order.

    Returns:
        (payloads, dropped) where ``dropped`` counts the padding bytes skipped.
    """
    payloads: List[bytes] = []
    if not entries:
        return payloads, 0
    pos = 0
    dropped = 0
    prev_offset, prev_size = entries[0].offset, 0
    for i, e in enumerate(entries):
        gap = e.offset - (prev_offset + prev_size)
        if gap < 0:
            raise OverlappingEntries(
                f"entry {i} at {e.offset:#x} starts {-gap} byte(s) before the previous entry ends"
            )
        if pos + gap > len(region):
            raise TruncatedPayload(f"entry {i}: {gap} byte(s) of padding run past the end of the archive")
        pos += gap
        dropped += gap
        if pos + e.size > len(region):
            raise TruncatedPayload(
                f"entry {i}: needs {e.size} byte(s), only {len(region) - pos} remain"
            )
        payloads.append(region[pos : pos + e.size])
        pos += e.size
        prev_offset, prev_size = e.offset, e.size
    return payloads, dropped
