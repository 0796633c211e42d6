"""Synthetic PMAN archive laid out like the shipped packfile.dat.

158 entries under the Torus Games copyright, the first payload at 0xA20 with
size 0x6500, record 77 a ZL member whose contents start with "COLL", and 170
bytes of 0xCD padding spread between payloads.
"""

from __future__ import annotations

import struct
import zlib
from typing import List, Tuple


SAMPLE_COPYRIGHT = "Copyright (c) 2004 Torus Games Pty. Ltd."
SAMPLE_COUNT = 158
SAMPLE_FIRST_OFFSET = 0xA20
SAMPLE_FIRST_SIZE = 0x6500
SAMPLE_COLL_INDEX = 77
SAMPLE_PADDING = 170

# entry index -> padding bytes written after its payload
_GAP_AFTER = {3: 16, 20: 32, 41: 2, 77: 40, 100: 64, 130: 16}


def sample_payload(i: int) -> bytes:
    size = SAMPLE_FIRST_SIZE if i == 0 else 24 + (i * 37) % 200
    return bytes((i + j * 7) & 0xFF for j in range(size))


def coll_body() -> bytes:
    return b"COLL" + bytes(range(256)) * 4


def zl_member(body: bytes, declared: int | None = None) -> bytes:
    size = len(body) if declared is None else declared
    return b"ZL" + size.to_bytes(3, "little") + zlib.compress(body)


def pack_raw(copyright: str, table: List[Tuple[int, int]], region: bytes, *, reserved=(0, 0)) -> bytes:
    """Assemble an archive from explicit (offset, size) pairs and region bytes."""
    out = bytearray(struct.pack("<4sI55sB", b"PMAN", len(table), copyright.encode("utf-8"), 0))
    for offset, size in table:
        out += struct.pack("<IIII", reserved[0], offset, size, reserved[1])
    out += region
    return bytes(out)


def build_sample() -> Tuple[bytes, List[bytes]]:
    payloads = [sample_payload(i) for i in range(SAMPLE_COUNT)]
    payloads[SAMPLE_COLL_INDEX] = zl_member(coll_body())
    offset = 64 + SAMPLE_COUNT * 16
    table: List[Tuple[int, int]] = []
    region = bytearray()
    for i, p in enumerate(payloads):
        table.append((offset, len(p)))
        region += p
        gap = _GAP_AFTER.get(i, 0)
        region += b"\xCD" * gap
        offset += len(p) + gap
    return pack_raw(SAMPLE_COPYRIGHT, table, bytes(region)), payloads
