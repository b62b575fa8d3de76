"""Tests for field types and their validators."""

import math
from datetime import date, datetime

import polars as pl
import pytest
from pydantic import ValidationError as PydanticValidationError

from csvdb import TYPE_TAGS, SchemaError
from csvdb.fields import (
    AnyValue,
    BigInt,
    Boolean,
    Date,
    Null,
    Number,
    String,
    Undefined,
    get_field_class_for_tag,
)


class TestTagLookup:
    """Test mapping of type tags to field classes."""

    @pytest.mark.parametrize(
        "tag,field_class",
        [
            ("string", String),
            ("number", Number),
            ("boolean", Boolean),
            ("bigint", BigInt),
            ("date", Date),
            ("undefined", Undefined),
            ("null", Null),
            ("any", AnyValue),
        ],
    )
    def test_known_tags(self, tag, field_class):
        """Every recognised tag maps to its field class."""
        assert get_field_class_for_tag(tag) is field_class
        assert field_class.tag == tag

    def test_all_tags_listed(self):
        """TYPE_TAGS lists exactly the eight recognised tags."""
        assert set(TYPE_TAGS) == {
            "string",
            "number",
            "boolean",
            "bigint",
            "date",
            "undefined",
            "null",
            "any",
        }

    def test_unknown_tag_raises(self):
        """Unknown tags fail fast instead of becoming permissive."""
        with pytest.raises(SchemaError, match="Unsupported type tag 'integer'"):
            get_field_class_for_tag("integer")

    def test_non_string_tag_raises(self):
        """Tags must be strings."""
        with pytest.raises(SchemaError):
            get_field_class_for_tag(int)


class TestStrictValidation:
    """Raw values must already have the declared kind."""

    def test_string(self):
        field = String()
        assert field.is_valid("Alice")
        assert field.is_valid("")
        assert not field.is_valid(123)
        assert not field.is_valid(None)

    def test_number(self):
        field = Number()
        assert field.is_valid(25)
        assert field.is_valid(2.5)
        assert not field.is_valid("25")
        assert not field.is_valid(True)
        assert not field.is_valid(math.nan)
        assert not field.is_valid(math.inf)

    def test_boolean(self):
        field = Boolean()
        assert field.is_valid(True)
        assert field.is_valid(False)
        assert not field.is_valid(1)
        assert not field.is_valid("true")

    def test_bigint(self):
        field = BigInt()
        assert field.is_valid(10**30)
        assert not field.is_valid(1.5)
        assert not field.is_valid(True)
        assert not field.is_valid("10")

    def test_date(self):
        field = Date()
        assert field.is_valid(date(2024, 1, 1))
        assert field.is_valid(datetime(2024, 1, 1, 12, 30))
        assert not field.is_valid("2024-01-01")
        assert not field.is_valid(1704067200)

    def test_undefined(self):
        field = Undefined()
        assert field.is_valid(None)
        assert not field.is_valid("x")
        assert field.required is False

    def test_null(self):
        field = Null()
        assert field.is_valid(None)
        assert not field.is_valid("")
        assert field.required is True

    def test_any(self):
        field = AnyValue()
        assert field.is_valid(object())
        assert field.is_valid(None)
        assert field.required is False

    def test_validate_returns_value_unchanged(self):
        """validate() performs no coercion on success."""
        assert Number().validate(25) == 25
        assert isinstance(Number().validate(25), int)
        assert String().validate("x") == "x"

    def test_validate_raises_pydantic_error(self):
        """validate() surfaces the underlying pydantic failure."""
        with pytest.raises(PydanticValidationError):
            String().validate(1)


class TestFieldTypeInformation:
    """Test type information exposed by fields."""

    def test_python_types(self):
        assert String().get_python_type() is str
        assert Boolean().get_python_type() is bool
        assert BigInt().get_python_type() is int

    def test_polars_dtypes(self):
        assert String().get_polars_dtype() == pl.Utf8
        assert Number().get_polars_dtype() == pl.Float64
        assert BigInt().get_polars_dtype() == pl.Int64
        assert Boolean().get_polars_dtype() == pl.Boolean
        assert Date().get_polars_dtype() == pl.Datetime
        assert AnyValue().get_polars_dtype() == pl.Utf8

    def test_name_unset_until_schema(self):
        """Field names are assigned by define_schema()."""
        assert String().name is None
