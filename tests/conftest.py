"""Shared fixtures: build dBase III+ table images in memory."""

import io
import struct

import pytest


def build_dbf(
    fields: list[tuple[str | bytes, str, int, int]],
    records: list[tuple[bytes, list[bytes]]] = (),
    *,
    version: int = 0x03,
    date: tuple[int, int, int] = (124, 10, 18),
    record_count: int | None = None,
    record_length: int | None = None,
    terminator: int = 0x0D,
) -> bytes:
    """Return the bytes of a table.

    ``fields`` holds ``(name, type, length, decimals)``. Each record is
    ``(deletion_flag, [raw field bytes])``; raw values are padded with spaces to
    their field length (right-aligned for numbers, left-aligned for text).
    """
    data_length = 1 + sum(length for _, _, length, _ in fields)
    if record_length is None:
        record_length = data_length
    if record_count is None:
        record_count = len(records)
    header_length = 32 + 32 * len(fields) + 1

    out = bytearray()
    out += struct.pack("<BBBBIHH", version, *date, record_count, header_length, record_length)
    out += bytes(20)

    offset = 1
    for name, field_type, length, decimals in fields:
        raw_name = name if isinstance(name, bytes) else name.encode("cp1251")
        out += struct.pack(
            "<11scIBB14x", raw_name.ljust(11, b"\x00"), field_type.encode(), offset, length, decimals
        )
        offset += length
    out.append(terminator)

    for flag, values in records:
        body = bytearray(flag)
        for (_, field_type, length, _), value in zip(fields, values, strict=True):
            body += value.ljust(length) if field_type == "C" else value.rjust(length)
        out += bytes(body).ljust(record_length, b" ")
    return bytes(out)


@pytest.fixture
def make_dbf():
    """Factory returning a BytesIO over a freshly built table."""

    def _make(*args, **kwargs) -> io.BytesIO:
        return io.BytesIO(build_dbf(*args, **kwargs))

    return _make


# Two-column layout: ID numeric(10, 0), NAME character(20), padded to 37 bytes.
PEOPLE_FIELDS = [("ID", "N", 10, 0), ("NAME", "C", 20, 0)]


@pytest.fixture
def people(make_dbf):
    """Table image with a live, a deleted and a blank-ID record."""
    return make_dbf(
        PEOPLE_FIELDS,
        [
            (b" ", [b"       42", b"  Ivan  "]),
            (b"*", [b"7", "Пётр".encode("cp1251")]),
            (b" ", [b"", "Мария".encode("cp1251")]),
        ],
        record_length=37,
    )
