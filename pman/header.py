from __future__ import annotations

import struct
from typing import Tuple

from .constants import COPYRIGHT_FIELD_SIZE, ENTRY_SIZE, HEADER_SIZE, PMAN_MAGIC, U32_MAX
from .errors import ArchiveTooLarge, BadMagic, ContractError, CopyrightTooLong, TruncatedInput, UnterminatedCopyright


# Header (fixed 64 bytes)
# struct: <4s I 55s B
#  - magic[4] "PMAN"
#  - entry_count u32
#  - copyright[55], zero padded
#  - terminator u8 (must be 0)
_HEADER_STRUCT = struct.Struct(f"<4sI{COPYRIGHT_FIELD_SIZE}sB")

assert _HEADER_STRUCT.size == HEADER_SIZE


def header_size_for(entry_count: int) -> int:
    """Size of the header plus entry table, i.e. where the payload region starts."""
    if entry_count < 0:
        raise ValueError("entry_count must be non-negative")
    return HEADER_SIZE + entry_count * ENTRY_SIZE


def encode_copyright(copyright: str) -> bytes:
    try:
        raw = copyright.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError as e:
        raise ContractError(f"copyright cannot be encoded: {e}")
    if len(raw) > COPYRIGHT_FIELD_SIZE:
        raise CopyrightTooLong(
            f"copyright is {len(raw)} bytes; at most {COPYRIGHT_FIELD_SIZE} fit in the header"
        )
    if b"\x00" in raw:
        raise ContractError("copyright must not contain a null byte")
    return raw


def parse_header(data: bytes) -> Tuple[str, int]:
    """
    Returns: (copyright, entry_count)
    """
    if len(data) < HEADER_SIZE:
        raise TruncatedInput(f"header needs {HEADER_SIZE} bytes, got {len(data)}")
    magic, entry_count, field, terminator = _HEADER_STRUCT.unpack_from(data, 0)
    if magic != PMAN_MAGIC:
        raise BadMagic(f"bad archive magic {magic!r}")
    if terminator != 0:
        raise UnterminatedCopyright("copyright field is not null terminated")
    copyright = field.split(b"\x00", 1)[0]
    return copyright.decode("utf-8", errors="surrogateescape"), entry_count


def write_header(entry_count: int, copyright: str) -> bytes:
    if not 0 <= entry_count <= U32_MAX:
        raise ArchiveTooLarge(f"entry count {entry_count} does not fit in 32 bits")
    # struct pads the 55s field with zeros
    return _HEADER_STRUCT.pack(PMAN_MAGIC, entry_count, encode_copyright(copyright), 0)
