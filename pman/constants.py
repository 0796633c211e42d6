# Magic and layout
PMAN_MAGIC = b"PMAN"  # 4 bytes

HEADER_SIZE = 64
COPYRIGHT_FIELD_SIZE = 55  # followed by one null terminator
ENTRY_SIZE = 16  # reserved u32, offset u32, size u32, reserved u32

# Zlib member sub-format: "ZL" + u24 uncompressed size + zlib stream
ZLIB_TAG = b"ZL"
ZLIB_HEADER_SIZE = 5
ZLIB_MAX_SIZE = 0xFFFFFF

DEFAULT_ZLIB_LEVEL = 6

U32_MAX = 0xFFFFFFFF

# Extracted file naming
EXT_ZLIB = ".zlib"
EXT_DATA = ".dat"
EXT_INFLATED = ".bin"
