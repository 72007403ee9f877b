"""Parse the table header and field descriptors of a dBase III+ file.

The header is a fixed 32-byte structure at offset 0, followed by one 32-byte
descriptor per column starting at offset 0x20, and a single terminator byte at
``header_length - 1``. Parsing always starts from offset 0, wherever the
stream's cursor happens to be.
"""

import logging
from typing import BinaryIO

from cyrdbf.db.errors import (
    HeaderLengthMismatch,
    MalformedFieldDescriptor,
    UnrecognizedFieldType,
    UnsupportedVersion,
)
from cyrdbf.db.models import FieldDescriptor, TableHeader
from cyrdbf.db.schemas import (
    CODEPAGE,
    DESCRIPTOR_SIZE,
    DESCRIPTOR_START,
    DESCRIPTOR_STRUCT,
    FIELD_TYPE_NAMES,
    HEADER_STRUCT,
    HEADER_TERMINATOR,
    SUPPORTED_VERSION,
)

logger = logging.getLogger(__name__)


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes from the stream's current position.

    Raises
    ------
    EOFError
        If the stream ends before ``size`` bytes were read.
    """
    data = stream.read(size)
    if len(data) != size:
        raise EOFError(f"Expected {size} bytes, got {len(data)}")
    return data


def parse_header(stream: BinaryIO) -> tuple[TableHeader, list[FieldDescriptor]]:
    """Parse the header and field descriptors.

    Parameters
    ----------
    stream : BinaryIO
        A seekable binary stream holding the table.

    Returns
    -------
    tuple[TableHeader, list[FieldDescriptor]]
        The header and the descriptors in on-disk order. The stream is left
        positioned just past the header terminator.

    Raises
    ------
    UnsupportedVersion
        If the version tag is not dBase III+.
    UnrecognizedFieldType
        If a descriptor has a type tag other than Character, Numeric or Float.
    MalformedFieldDescriptor
        If a descriptor is truncated or its name cannot be decoded.
    HeaderLengthMismatch
        If the byte at ``header_length - 1`` is not the terminator.
    EOFError
        If the stream ends inside the fixed header or before the terminator.
    """
    stream.seek(0)
    version, year, month, day, record_count, header_length, record_length = HEADER_STRUCT.unpack(
        read_exact(stream, HEADER_STRUCT.size)
    )
    if version != SUPPORTED_VERSION:
        raise UnsupportedVersion(version)

    header = TableHeader(
        version=version,
        year=year,
        month=month,
        day=day,
        record_count=record_count,
        header_length=header_length,
        record_length=record_length,
    )

    stream.seek(DESCRIPTOR_START)
    fields = [
        _parse_descriptor(stream, offset)
        for offset in range(DESCRIPTOR_START, header_length - 1, DESCRIPTOR_SIZE)
    ]

    terminator = read_exact(stream, 1)[0]
    if terminator != HEADER_TERMINATOR:
        raise HeaderLengthMismatch(header_length, terminator)

    logger.debug(
        "Parsed header: %d fields, %d records of %d bytes, data at %d",
        len(fields),
        record_count,
        record_length,
        header_length,
    )
    return header, fields


def _parse_descriptor(stream: BinaryIO, offset: int) -> FieldDescriptor:
    raw = stream.read(DESCRIPTOR_SIZE)
    if len(raw) != DESCRIPTOR_SIZE:
        logger.warning("Field descriptor at %#x truncated to %d bytes", offset, len(raw))
        raise MalformedFieldDescriptor(offset, f"expected {DESCRIPTOR_SIZE} bytes, got {len(raw)}")

    raw_name, raw_type, field_offset, length, decimal_count = DESCRIPTOR_STRUCT.unpack(raw)
    field_type = raw_type.decode("latin-1")
    if field_type not in FIELD_TYPE_NAMES:
        raise UnrecognizedFieldType(field_type)

    try:
        name = raw_name.rstrip(b"\x00").decode(CODEPAGE)
    except UnicodeDecodeError as exc:
        logger.warning("Field descriptor at %#x has undecodable name %r", offset, raw_name)
        raise MalformedFieldDescriptor(offset, f"undecodable name {raw_name!r}") from exc

    return FieldDescriptor(
        name=name,
        field_type=field_type,
        offset=field_offset,
        length=length,
        decimal_count=decimal_count,
    )
