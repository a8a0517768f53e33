"""
Students Helpers

Parsing of the bulk student upload file.

Expected CSV layout (header row required, column order fixed):
    email,name,regNo,dept,batchYear,password
"""

import csv
import io

from pydantic import ValidationError as PydanticValidationError

from placement_portal.core.errors import ValidationError
from placement_portal.modules.students.schemas import BulkStudentRow

EXPECTED_COLUMNS = 6


def _decode(content: bytes) -> str:
    try:
        # utf-8-sig strips the BOM spreadsheet exports add
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValidationError("Upload must be a UTF-8 encoded CSV file.") from e


def parse_bulk_rows(content: bytes) -> list[BulkStudentRow]:
    """
    Parse a bulk upload CSV into validated rows.

    Blank lines are skipped. Each row carries its 1-based line number in
    the file (the header is line 1), and errors name the same line.

    Args:
        content: Raw uploaded bytes

    Returns:
        Rows in file order

    Raises:
        ValidationError: If the file is empty or any row is malformed
    """
    reader = csv.reader(io.StringIO(_decode(content)))

    header = next(reader, None)
    if header is None:
        raise ValidationError("Upload is empty.")

    rows: list[BulkStudentRow] = []
    for record in reader:
        line_number = reader.line_num
        if not any(cell.strip() for cell in record):
            continue

        if len(record) < EXPECTED_COLUMNS:
            raise ValidationError(
                f"Row {line_number}: expected {EXPECTED_COLUMNS} columns, got {len(record)}."
            )

        email, name, register_number, department, batch_year, password = (
            cell.strip() for cell in record[:EXPECTED_COLUMNS]
        )

        if not batch_year.isdigit():
            raise ValidationError(f"Row {line_number}: batch year must be a number.")

        try:
            rows.append(
                BulkStudentRow(
                    line_number=line_number,
                    email=email,
                    name=name,
                    register_number=register_number,
                    department=department,
                    batch_year=int(batch_year),
                    password=password,
                )
            )
        except PydanticValidationError as e:
            field = ".".join(str(part) for part in e.errors()[0]["loc"])
            raise ValidationError(f"Row {line_number}: invalid {field}.") from e

    if not rows:
        raise ValidationError("Upload contains no student rows.")

    return rows
