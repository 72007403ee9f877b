"""Exceptions raised while opening and reading dBase III+ tables."""


class DBFError(Exception):
    """Base class for all table errors."""


class StructuralError(DBFError):
    """The header or field descriptors cannot be understood. Fatal to opening."""


class UnsupportedVersion(StructuralError):
    def __init__(self, version: int):
        self.version = version
        super().__init__(f"Unsupported file version: {version:#04x}")


class UnrecognizedFieldType(StructuralError):
    def __init__(self, field_type: str):
        self.field_type = field_type
        super().__init__(f"Unrecognized field type {field_type!r}")


class HeaderLengthMismatch(StructuralError):
    """The byte at ``header_length - 1`` is not the header terminator."""

    def __init__(self, header_length: int, found: int):
        self.header_length = header_length
        self.found = found
        super().__init__(
            f"Header was supposed to be {header_length} bytes long, but found byte "
            f"{found:#04x} at that offset instead of expected byte 0x0d"
        )


class MalformedFieldDescriptor(StructuralError):
    def __init__(self, offset: int, reason: str):
        self.offset = offset
        self.reason = reason
        super().__init__(f"Malformed field descriptor at offset {offset:#x}: {reason}")


class RecordError(DBFError):
    """A single record cannot be returned. The table stays usable."""

    def __init__(self, index: int, message: str):
        self.index = index
        super().__init__(message)


class RecordDeleted(RecordError):
    def __init__(self, index: int):
        super().__init__(index, f"Record {index} is deleted")


class CorruptDeletionFlag(RecordError):
    def __init__(self, index: int, flag: int):
        self.flag = flag
        super().__init__(
            index, f"Record {index} contained an unexpected value in the deleted flag: {flag:#04x}"
        )


class FieldDecodeError(DBFError):
    """A field's raw bytes could not be converted to its declared type."""

    def __init__(self, field_name: str, field_type: str, raw: bytes):
        self.field_name = field_name
        self.field_type = field_type
        self.raw = raw
        super().__init__(f"Cannot decode {field_type!r} field {field_name!r} from {raw!r}")
