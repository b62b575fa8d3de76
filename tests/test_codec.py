"""Tests for the line codec."""

from datetime import date, datetime

import pytest

from csvdb import FormatError
from csvdb.codec import decode, decode_all, encode, encode_all, to_text

FIELDS = ("name", "age", "email")


class TestToText:
    """Test value -> stored text conversion."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Alice", "Alice"),
            (25, "25"),
            (2.5, "2.5"),
            (True, "true"),
            (False, "false"),
            (None, ""),
            (10**20, "100000000000000000000"),
            (date(2024, 1, 2), "2024-01-02"),
            (datetime(2024, 1, 2, 3, 4, 5), "2024-01-02T03:04:05"),
        ],
    )
    def test_conversion(self, value, expected):
        assert to_text(value) == expected


class TestEncode:
    """Test record -> line encoding."""

    def test_schema_order(self):
        """Values follow the field order, not the record's key order."""
        record = {"email": "a@b.c", "name": "Alice", "age": 25}
        assert encode(record, FIELDS) == "Alice, 25, a@b.c"

    def test_missing_field_is_empty(self):
        assert encode({"name": "Alice"}, FIELDS) == "Alice, , "

    def test_extra_keys_not_written(self):
        record = {"name": "A", "age": 1, "email": "e", "role": "x"}
        assert encode(record, FIELDS) == "A, 1, e"

    def test_encode_all_terminates_every_line(self):
        records = [{"name": "A", "age": 1, "email": "e"}, {"name": "B", "age": 2, "email": "f"}]
        assert encode_all(records, FIELDS) == "A, 1, e\nB, 2, f\n"

    def test_encode_all_empty(self):
        assert encode_all([], FIELDS) == ""


class TestDecode:
    """Test line -> record decoding."""

    def test_values_are_text(self):
        assert decode("Alice, 25, a@b.c", FIELDS) == {
            "name": "Alice",
            "age": "25",
            "email": "a@b.c",
        }

    def test_short_line_padded(self):
        """Missing trailing fields become None."""
        assert decode("Alice", FIELDS) == {"name": "Alice", "age": None, "email": None}

    def test_extra_fields_dropped(self):
        assert decode("A, 1, e, extra", FIELDS) == {"name": "A", "age": "1", "email": "e"}

    def test_strict_rejects_short_line(self):
        with pytest.raises(FormatError, match="Expected 3 fields, found 1"):
            decode("Alice", FIELDS, strict=True)

    def test_strict_rejects_long_line(self):
        with pytest.raises(FormatError):
            decode("A, 1, e, extra", FIELDS, strict=True)

    def test_separator_inside_value_shifts_columns(self):
        """Values containing the separator are not escaped."""
        line = encode({"name": "Doe, John", "age": 25, "email": "e"}, FIELDS)
        assert decode(line, FIELDS) == {"name": "Doe", "age": "John", "email": "25"}


class TestDecodeAll:
    """Test whole-file decoding."""

    def test_trailing_newline_not_a_record(self):
        records = decode_all("A, 1, e\nB, 2, f\n", FIELDS)
        assert [r["name"] for r in records] == ["A", "B"]

    def test_missing_final_newline(self):
        assert len(decode_all("A, 1, e\nB, 2, f", FIELDS)) == 2

    def test_blank_lines_skipped(self):
        assert len(decode_all("A, 1, e\n\n\nB, 2, f\n", FIELDS)) == 2

    def test_empty_contents(self):
        assert decode_all("", FIELDS) == []
