"""Data models for table headers, field descriptors and decoded values."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from cyrdbf.db.schemas import FIELD_TYPE_NAMES, YEAR_BASE


class TableHeader(BaseModel):
    """Fixed 32-byte table header."""

    model_config = ConfigDict(frozen=True)

    version: int = Field(ge=0, le=0xFF, description="Format version tag")
    year: int = Field(ge=0, le=0xFF, description="Last modification year, offset from 1900")
    month: int = Field(ge=0, le=0xFF)
    day: int = Field(ge=0, le=0xFF)
    record_count: int = Field(ge=0, description="Declared number of records")
    header_length: int = Field(ge=0, description="Header plus descriptors plus terminator, in bytes")
    record_length: int = Field(ge=0, description="Deletion flag plus all fields, in bytes")

    @property
    def modification_date(self) -> tuple[int, int, int]:
        return YEAR_BASE + self.year, self.month, self.day

    def record_offset(self, index: int) -> int:
        """Absolute byte offset of record ``index``."""
        return self.header_length + self.record_length * index


class FieldDescriptor(BaseModel):
    """One column of the table, in on-disk order."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Column name with NUL padding removed")
    field_type: Literal["C", "N", "F"] = Field(description="Type tag")
    offset: int = Field(ge=0, description="On-disk offset as written by the producer")
    length: int = Field(ge=0, le=0xFF, description="Raw width in bytes")
    decimal_count: int = Field(ge=0, le=0xFF, default=0, description="Decimal places (Numeric)")

    @property
    def type_name(self) -> str:
        return FIELD_TYPE_NAMES[self.field_type]


class Float(float):
    """Value of a Float field, or of a Numeric field with decimal places."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Float({float.__repr__(self)})"

    def __str__(self) -> str:
        return float.__repr__(self)


class Integer(int):
    """Value of a Numeric field without decimal places."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Integer({int.__repr__(self)})"

    def __str__(self) -> str:
        return int.__repr__(self)


class Text(str):
    """Value of a Character field."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Text({str.__repr__(self)})"


Value = Float | Integer | Text

# Field name → value, in descriptor order. Duplicate names: last one wins.
Record = dict[str, Value]
