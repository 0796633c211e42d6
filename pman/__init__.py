"""
PMAN archive codec

Reads and writes the "PMAN" asset archives shipped with Torus Games titles:
a 64-byte header (magic, entry count, copyright), a table of 16-byte entries
and the payload region. Current implementation includes:

- Header and entry table parsing/writing with strict reserved-field checks
- Payload extraction that skips padding between entries
- Lazy inflation of "ZL" zlib members
- Re-encoding with freshly packed offsets (interior padding is not kept)
- CLI to inspect, unpack and repack archives

Decoding is all-or-nothing: a malformed archive raises a FormatError and no
partial archive is returned.
"""

from .archive import Archive, FileRecord, decode, decode_with_entries, encode, load, save
from .header import header_size_for

__version__ = "0.1"

__all__ = [
    "Archive",
    "FileRecord",
    "decode",
    "decode_with_entries",
    "encode",
    "load",
    "save",
    "header_size_for",
]
