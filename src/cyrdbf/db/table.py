"""Open dBase III+ tables and read their records.

A :class:`Table` owns a seekable binary stream. Every operation that moves
the stream's cursor holds the table's lock for its whole seek-and-read
sequence, so one table can be shared between threads.
"""

import threading
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from cyrdbf.db.errors import RecordDeleted
from cyrdbf.db.header import parse_header
from cyrdbf.db.models import FieldDescriptor, Record, TableHeader
from cyrdbf.db.records import decode_record


class Table:
    """Read-only handle on a dBase III+ table.

    Parameters
    ----------
    stream : BinaryIO
        A seekable binary stream positioned anywhere. The header is parsed
        immediately; structural problems raise a ``StructuralError``.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._lock = threading.Lock()
        with self._lock:
            header, fields = parse_header(stream)
        self._header = header
        self._fields = tuple(fields)

    @property
    def header(self) -> TableHeader:
        return self._header

    @property
    def fields(self) -> tuple[FieldDescriptor, ...]:
        return self._fields

    @property
    def field_count(self) -> int:
        return len(self._fields)

    def modification_date(self) -> tuple[int, int, int]:
        """Return ``(year, month, day)`` of the last modification."""
        return self._header.modification_date

    def field_name(self, i: int) -> str:
        return self._fields[i].name

    def field_names(self) -> list[str]:
        return [field.name for field in self._fields]

    def declared_record_count(self) -> int:
        """Record count as declared in the header, deleted records included."""
        return self._header.record_count

    def __len__(self) -> int:
        return self._header.record_count

    def read(self, index: int) -> Record:
        """Read and decode the record at zero-based ``index``.

        Raises
        ------
        RecordDeleted
            If the record is marked deleted.
        CorruptDeletionFlag
            If the deletion flag byte is not recognised.
        FieldDecodeError
            If a field cannot be decoded.
        EOFError
            If ``index`` points past the end of the data.
        """
        with self._lock:
            return decode_record(self._stream, self._header, self._fields, index)

    def records(self, skip_deleted: bool = True) -> Iterator[tuple[int, Record]]:
        """Iterate over ``(index, record)`` for every declared record.

        Deleted records are skipped unless ``skip_deleted`` is false, in which
        case :class:`RecordDeleted` propagates. Other errors always propagate.
        """
        for index in range(self.declared_record_count()):
            try:
                record = self.read(index)
            except RecordDeleted:
                if skip_deleted:
                    continue
                raise
            yield index, record

    def close(self) -> None:
        with self._lock:
            self._stream.close()

    def __enter__(self) -> "Table":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def open_table(path: str | Path) -> Table:
    """Open a table file.

    Parameters
    ----------
    path : str | Path
        Path to the .dbf file.

    Returns
    -------
    Table
        A table owning the opened file; close it with ``Table.close()`` or
        use it as a context manager.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    StructuralError
        If the file is not a supported dBase III+ table.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Table not found: {path}")
    stream = path.open("rb")
    try:
        return Table(stream)
    except Exception:
        stream.close()
        raise


def list_columns(table: Table) -> list[dict[str, str | int]]:
    """List the columns of a table with their types.

    Returns
    -------
    list[dict[str, str | int]]
        Dicts with 'name', 'type_name', 'length' and 'decimal_count' keys,
        in column order.
    """
    return [
        {
            "name": field.name,
            "type_name": field.type_name,
            "length": field.length,
            "decimal_count": field.decimal_count,
        }
        for field in table.fields
    ]


def read_table(path: str | Path) -> list[dict]:
    """Read all live records of a table file as a list of dicts."""
    with open_table(path) as table:
        return [record for _, record in table.records()]
