from __future__ import annotations

import zlib
from typing import Optional

from .constants import DEFAULT_ZLIB_LEVEL, ZLIB_HEADER_SIZE, ZLIB_MAX_SIZE, ZLIB_TAG
from .errors import ContractError, NotZlibMember, TruncatedZlib


def is_member(blob: bytes) -> bool:
    return len(blob) >= ZLIB_HEADER_SIZE and blob[:2] == ZLIB_TAG


def declared_size(blob: bytes) -> int:
    if not is_member(blob):
        raise NotZlibMember("payload is not a ZL member")
    return int.from_bytes(blob[2:ZLIB_HEADER_SIZE], "little")


def decompress(blob: bytes) -> bytes:
    """Inflate a "ZL" member.

    The result must be exactly the declared size; a stream that ends early,
    runs long or is corrupt raises TruncatedZlib. ``blob`` is never modified.
    """
    size = declared_size(blob)
    d = zlib.decompressobj()
    try:
        # Bound the output so a lying header cannot inflate without limit
        out = d.decompress(bytes(blob[ZLIB_HEADER_SIZE:]), size + 1)
    except zlib.error as e:
        raise TruncatedZlib(f"zlib stream is corrupt: {e}")
    if len(out) > size:
        raise TruncatedZlib(f"zlib stream inflates past its declared size of {size} bytes")
    if len(out) < size or not d.eof:
        raise TruncatedZlib(f"zlib stream ended after {len(out)} of {size} declared bytes")
    return out


def compress(data: bytes, level: Optional[int] = None) -> bytes:
    if len(data) > ZLIB_MAX_SIZE:
        raise ContractError(f"{len(data)} bytes exceed the {ZLIB_MAX_SIZE} byte limit of a ZL member")
    if level is not None and not -1 <= level <= 9:
        raise ContractError(f"zlib level must be between -1 and 9, got {level}")
    body = zlib.compress(bytes(data), level if level is not None else DEFAULT_ZLIB_LEVEL)
    return ZLIB_TAG + len(data).to_bytes(3, "little") + body
