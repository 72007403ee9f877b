"""Decode records of a dBase III+ table into typed values."""

import re
from collections.abc import Sequence
from typing import BinaryIO

from cyrdbf.db.errors import CorruptDeletionFlag, FieldDecodeError, RecordDeleted
from cyrdbf.db.header import read_exact
from cyrdbf.db.models import FieldDescriptor, Float, Integer, Record, TableHeader, Text, Value
from cyrdbf.db.schemas import CHARACTER, CODEPAGE, DELETED_FLAG, FLOAT, LIVE_FLAG

_INTEGER_RE = re.compile(rb"[+-]?\d+")
# Integer values are signed 64-bit
INTEGER_MIN = -(2**63)
INTEGER_MAX = 2**63 - 1


def decode_value(field: FieldDescriptor, raw: bytes) -> Value:
    """Convert one field's raw bytes into its typed value.

    Surrounding ASCII whitespace is ignored. A blank field decodes to
    ``Float(0.0)``, ``Integer(0)`` or ``Text("")`` depending on its type.
    A Numeric field with decimal places decodes to a Float. Digit separators
    (``_``) are not accepted, and integers must fit in a signed 64-bit value.

    Raises
    ------
    FieldDecodeError
        If the bytes are not a valid literal of the field's type, or contain
        a byte the codepage does not define.
    """
    text = raw.strip()

    if field.field_type == CHARACTER:
        if not text:
            return Text("")
        try:
            return Text(text.decode(CODEPAGE))
        except UnicodeDecodeError as exc:
            raise FieldDecodeError(field.name, field.field_type, raw) from exc

    if not text:
        return Float(0.0) if field.field_type == FLOAT else Integer(0)

    if field.field_type == FLOAT or field.decimal_count > 0:
        if b"_" in text:
            raise FieldDecodeError(field.name, field.field_type, raw)
        try:
            return Float(text.decode("ascii"))
        except ValueError as exc:
            raise FieldDecodeError(field.name, field.field_type, raw) from exc

    if not _INTEGER_RE.fullmatch(text):
        raise FieldDecodeError(field.name, field.field_type, raw)
    value = int(text)
    if not INTEGER_MIN <= value <= INTEGER_MAX:
        raise FieldDecodeError(field.name, field.field_type, raw)
    return Integer(value)


def decode_record(
    stream: BinaryIO,
    header: TableHeader,
    fields: Sequence[FieldDescriptor],
    index: int,
) -> Record:
    """Seek to record ``index`` and decode all of its fields.

    The index is not checked against the declared record count; reading past
    the end of the data fails with whatever the stream reports, normally
    ``EOFError``. The caller must serialize access to ``stream``.

    Raises
    ------
    RecordDeleted
        If the record is marked deleted. No field is decoded.
    CorruptDeletionFlag
        If the deletion flag is neither live nor deleted. No field is decoded.
    FieldDecodeError
        If any field cannot be decoded. Nothing decoded so far is returned.
    EOFError
        If the stream ends inside the record.
    """
    stream.seek(header.record_offset(index))

    flag = read_exact(stream, 1)
    if flag == DELETED_FLAG:
        raise RecordDeleted(index)
    if flag != LIVE_FLAG:
        raise CorruptDeletionFlag(index, flag[0])

    record: Record = {}
    for field in fields:
        record[field.name] = decode_value(field, read_exact(stream, field.length))
    return record
