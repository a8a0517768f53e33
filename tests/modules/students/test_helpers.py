"""
Unit tests for bulk upload parsing.
"""

import pytest

from placement_portal.core.errors import ValidationError
from placement_portal.modules.students.helpers import parse_bulk_rows


class TestParseBulkRows:
    """Tests for parse_bulk_rows."""

    def test_parses_rows_in_order(self, csv_bytes):
        content = csv_bytes(
            "asha@college.edu,Asha K,21CS001,CSE,2025,secret1",
            "ravi@college.edu, Ravi M ,21CS002,ECE,2026,secret2",
        )

        rows = parse_bulk_rows(content)

        assert [row.register_number for row in rows] == ["21CS001", "21CS002"]
        assert [row.line_number for row in rows] == [2, 3]
        assert rows[1].name == "Ravi M"
        assert rows[1].batch_year == 2026

    def test_byte_order_mark_and_blank_lines(self, csv_bytes):
        content = b"\xef\xbb\xbf" + csv_bytes(
            "",
            "asha@college.edu,Asha K,21CS001,CSE,2025,secret1",
            "",
        )

        rows = parse_bulk_rows(content)

        assert len(rows) == 1
        # Header is line 1, the blank line is line 2
        assert rows[0].line_number == 3

    def test_empty_upload(self):
        with pytest.raises(ValidationError, match="empty"):
            parse_bulk_rows(b"")

    def test_header_only(self, csv_bytes):
        with pytest.raises(ValidationError, match="no student rows"):
            parse_bulk_rows(csv_bytes())

    def test_short_row_reports_line_number(self, csv_bytes):
        content = csv_bytes(
            "asha@college.edu,Asha K,21CS001,CSE,2025,secret1",
            "ravi@college.edu,Ravi M,21CS002",
        )

        with pytest.raises(ValidationError, match="Row 3: expected 6 columns, got 3"):
            parse_bulk_rows(content)

    def test_error_line_counts_blank_lines(self, csv_bytes):
        content = csv_bytes(
            "asha@college.edu,Asha K,21CS001,CSE,2025,secret1",
            "",
            "ravi@college.edu,Ravi M,21CS002,CSE,first,secret2",
        )

        with pytest.raises(ValidationError, match="Row 4: batch year must be a number"):
            parse_bulk_rows(content)

    def test_non_numeric_batch_year(self, csv_bytes):
        content = csv_bytes("asha@college.edu,Asha K,21CS001,CSE,final,secret1")

        with pytest.raises(ValidationError, match="Row 2: batch year must be a number"):
            parse_bulk_rows(content)

    def test_invalid_email(self, csv_bytes):
        content = csv_bytes("not-an-email,Asha K,21CS001,CSE,2025,secret1")

        with pytest.raises(ValidationError, match="Row 2: invalid email"):
            parse_bulk_rows(content)

    def test_short_password(self, csv_bytes):
        content = csv_bytes("asha@college.edu,Asha K,21CS001,CSE,2025,abc")

        with pytest.raises(ValidationError, match="Row 2: invalid password"):
            parse_bulk_rows(content)

    def test_not_utf8(self):
        with pytest.raises(ValidationError, match="UTF-8"):
            parse_bulk_rows(b"email,name\n\xff\xfe\xfa")
