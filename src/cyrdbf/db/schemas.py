"""Format constants for dBase III+ table files.

Layout knowledge for the 32-byte header, the 32-byte field descriptors and
the record area. Only the plain dBase III+ variant without memo files is
understood, and Character fields are always stored in the Cyrillic Windows
codepage.
"""

import struct

# dBase III+ without memo
SUPPORTED_VERSION = 0x03

HEADER_SIZE = 32
# version, year, month, day, record count, header length, record length
HEADER_STRUCT = struct.Struct("<BBBBIHH")
YEAR_BASE = 1900

DESCRIPTOR_START = 0x20
DESCRIPTOR_SIZE = 32
# name, type tag, offset, length, decimal count; the 14 trailing bytes are reserved
DESCRIPTOR_STRUCT = struct.Struct("<11scIBB14x")

HEADER_TERMINATOR = 0x0D

LIVE_FLAG = b" "
DELETED_FLAG = b"*"

CODEPAGE = "cp1251"

CHARACTER = "C"
NUMERIC = "N"
FLOAT = "F"

# Type tag → name reported by list_columns
FIELD_TYPE_NAMES = {
    CHARACTER: "Character",
    NUMERIC: "Numeric",
    FLOAT: "Float",
}
