"""Tests for header and field descriptor parsing."""

import io
import logging

import pytest

from cyrdbf.db.errors import (
    HeaderLengthMismatch,
    MalformedFieldDescriptor,
    StructuralError,
    UnrecognizedFieldType,
    UnsupportedVersion,
)
from cyrdbf.db.header import parse_header
from cyrdbf.db.table import Table


def test_parse_header_layout(people):
    header, fields = parse_header(people)
    assert header.version == 0x03
    assert header.header_length == 97
    assert header.record_length == 37
    assert header.record_count == 3
    assert [f.name for f in fields] == ["ID", "NAME"]
    assert [f.field_type for f in fields] == ["N", "C"]
    assert [f.length for f in fields] == [10, 20]
    assert [f.offset for f in fields] == [1, 11]


def test_parse_header_leaves_cursor_after_terminator(people):
    people.seek(0, io.SEEK_END)
    parse_header(people)
    assert people.tell() == 97


def test_modification_date(people):
    table = Table(people)
    assert table.modification_date() == (2024, 10, 18)


def test_declared_record_count_includes_deleted(people):
    table = Table(people)
    assert table.declared_record_count() == 3
    assert len(table) == 3


def test_unsupported_version(make_dbf):
    stream = make_dbf([("ID", "N", 10, 0)], version=0x83)
    with pytest.raises(UnsupportedVersion, match="0x83") as exc_info:
        Table(stream)
    assert exc_info.value.version == 0x83
    assert isinstance(exc_info.value, StructuralError)


def test_version_checked_before_descriptors(make_dbf):
    stream = make_dbf([("MEMO", "M", 10, 0)], version=0x00)
    with pytest.raises(UnsupportedVersion):
        Table(stream)


def test_unrecognized_field_type(make_dbf):
    stream = make_dbf([("ID", "N", 10, 0), ("NOTES", "M", 10, 0)])
    with pytest.raises(UnrecognizedFieldType, match="'M'") as exc_info:
        Table(stream)
    assert exc_info.value.field_type == "M"


def test_header_terminator_mismatch(make_dbf):
    stream = make_dbf([("ID", "N", 10, 0), ("NAME", "C", 20, 0)], terminator=0x00)
    with pytest.raises(HeaderLengthMismatch, match="97 bytes long") as exc_info:
        Table(stream)
    assert exc_info.value.header_length == 97
    assert exc_info.value.found == 0x00


@pytest.mark.parametrize("name", ["A", "ABCDE", "ABCDEFGHIJK"])
def test_field_names_are_nul_trimmed(make_dbf, name):
    table = Table(make_dbf([(name, "C", 5, 0)]))
    assert table.field_names() == [name]
    assert table.field_name(0) == name


def test_cyrillic_field_name(make_dbf):
    table = Table(make_dbf([("ИМЯ", "C", 5, 0)]))
    assert table.field_names() == ["ИМЯ"]


def test_truncated_descriptor(caplog):
    data = bytearray(32)
    data[0] = 0x03
    data[8:10] = (129).to_bytes(2, "little")  # room for three descriptors
    data += b"ID\x00".ljust(11, b"\x00") + b"N"
    with caplog.at_level(logging.WARNING, logger="cyrdbf.db.header"):
        with pytest.raises(MalformedFieldDescriptor, match="expected 32 bytes, got 12"):
            Table(io.BytesIO(bytes(data)))
    assert "truncated" in caplog.text


def test_undecodable_field_name(make_dbf):
    with pytest.raises(MalformedFieldDescriptor, match="undecodable name"):
        Table(make_dbf([(b"\x98BAD", "C", 5, 0)]))


def test_truncated_fixed_header():
    with pytest.raises(EOFError):
        Table(io.BytesIO(b"\x03\x7c\x0a"))


def test_field_accessors(people):
    table = Table(people)
    assert table.field_count == 2
    assert table.fields[1].type_name == "Character"
    assert table.header.record_offset(2) == 97 + 37 * 2
