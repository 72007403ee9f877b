"""Export a dBase III+ table to an Excel workbook.

Writes a "Fields" sheet describing every column and a "Records" sheet with
one row per live record.

Usage:
    uv run python scripts/export_workbook.py path/to/table.dbf [output.xlsx]
"""

from __future__ import annotations

import sys
from pathlib import Path

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from cyrdbf.db.table import Table, open_table

# ---------------------------------------------------------------------------
# Excel styling
# ---------------------------------------------------------------------------

HEADER_FONT = Font(name="Calibri", bold=True, size=11, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="2F5496", end_color="2F5496", fill_type="solid")
HEADER_ALIGN = Alignment(horizontal="center", vertical="center", wrap_text=True)
CELL_ALIGN = Alignment(vertical="top")

FIELD_HEADERS = ["Field Name", "Type", "Length", "Decimals", "Offset"]
FIELD_WIDTHS = [16, 12, 10, 10, 10]
# Character columns wider than this are capped in the Records sheet
MAX_RECORD_WIDTH = 60


def cell_value(value):
    """Drop control characters worksheets cannot hold from text values."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def write_header_row(ws, headers: list[str]) -> None:
    """Write a styled header row and freeze it."""
    for col_idx, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col_idx, value=cell_value(header))
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGN
    ws.freeze_panes = "A2"


def write_fields_sheet(ws, table: Table) -> None:
    """Write one row per field descriptor."""
    write_header_row(ws, FIELD_HEADERS)
    for row_idx, field in enumerate(table.fields, 2):
        values = [field.name, field.type_name, field.length, field.decimal_count, field.offset]
        for col_idx, value in enumerate(values, 1):
            ws.cell(row=row_idx, column=col_idx, value=cell_value(value)).alignment = CELL_ALIGN

    for i, w in enumerate(FIELD_WIDTHS, 1):
        ws.column_dimensions[get_column_letter(i)].width = w


def write_records_sheet(ws, table: Table) -> int:
    """Write every live record, one column per field. Returns the row count."""
    names = table.field_names()
    write_header_row(ws, names)

    written = 0
    for _, record in table.records():
        written += 1
        # Duplicate names collapse in the record, so look values up by name
        for col_idx, name in enumerate(names, 1):
            cell = ws.cell(row=written + 1, column=col_idx, value=cell_value(record[name]))
            cell.alignment = CELL_ALIGN

    for i, field in enumerate(table.fields, 1):
        width = max(len(field.name), field.length) + 2
        ws.column_dimensions[get_column_letter(i)].width = min(width, MAX_RECORD_WIDTH)
    return written


def export_workbook(table_path: Path, output_path: Path) -> int:
    """Export the table at ``table_path`` and return the number of records written."""
    wb = Workbook()
    # Remove default sheet
    wb.remove(wb.active)

    with open_table(table_path) as table:
        year, month, day = table.modification_date()
        print(f"Last modified {year:04d}-{month:02d}-{day:02d}, {len(table)} records declared")

        write_fields_sheet(wb.create_sheet(title="Fields"), table)
        written = write_records_sheet(wb.create_sheet(title="Records"), table)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output_path)
    return written


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if not args or len(args) > 2:
        print("Usage: export_workbook.py TABLE.dbf [OUTPUT.xlsx]", file=sys.stderr)
        sys.exit(2)

    table_path = Path(args[0])
    output_path = Path(args[1]) if len(args) == 2 else table_path.with_suffix(".xlsx")
    if not table_path.exists():
        print(f"ERROR: Table not found: {table_path}", file=sys.stderr)
        sys.exit(1)

    print(f"Reading {table_path.name}...")
    written = export_workbook(table_path, output_path)
    print(f"\nSaved: {output_path}")
    print(f"Live records: {written}")


if __name__ == "__main__":
    main()
