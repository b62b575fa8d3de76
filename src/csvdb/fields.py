"""Field types for every schema type tag, validated by pydantic in strict mode."""

from datetime import date, datetime
from typing import Any, Union

import polars as pl
from pydantic import ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import SchemaError

# Raw values must already have the declared kind; nothing is coerced.
_STRICT = ConfigDict(strict=True, allow_inf_nan=False)

# Type mapping from schema tags to Field classes (populated at module end)
_TAG_MAP: dict[str, type["FieldBase"]] = {}


class FieldBase:
    """
    Base field class for schema definitions.

    A field knows its type tag, the Python type a raw value must have, and
    how to validate a raw value against it. Fields are created by
    `define_schema()`, which also assigns their names.

    Attributes
    ----------
    tag : str
        The schema type tag handled by this class.
    required : bool
        Whether the key must be present in an inserted record.
    """

    tag: str = ""
    required: bool = True

    def __init__(self) -> None:
        self.name: str | None = None  # Set by define_schema()
        self._adapter = TypeAdapter(self.get_python_type(), config=_STRICT)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"

    def get_python_type(self) -> Any:
        """Return the Python type (annotation) accepted by this field."""
        raise NotImplementedError

    def get_polars_dtype(self):
        """Return the Polars dtype used when re-typing stored text."""
        return pl.Utf8

    def validate(self, value: Any) -> Any:
        """
        Validate a raw value.

        Returns the value unchanged on success; raises
        `pydantic.ValidationError` otherwise.
        """
        return self._adapter.validate_python(value)

    def is_valid(self, value: Any) -> bool:
        """Return True if `value` passes this field's validator."""
        try:
            self.validate(value)
        except PydanticValidationError:
            return False
        return True


class String(FieldBase):
    """Text values (`str`)."""

    tag = "string"

    def get_python_type(self):
        return str


class Number(FieldBase):
    """
    Finite numbers (`int` or `float`).

    Booleans are rejected even though `bool` subclasses `int`, and so are
    NaN and infinities.
    """

    tag = "number"

    def get_python_type(self):
        return Union[int, float]

    def get_polars_dtype(self):
        return pl.Float64


class Boolean(FieldBase):
    """`True` or `False` only; `0`/`1` and strings are rejected."""

    tag = "boolean"

    def get_python_type(self):
        return bool

    def get_polars_dtype(self):
        return pl.Boolean


class BigInt(FieldBase):
    """Arbitrary-precision integers (`int`, never `bool`)."""

    tag = "bigint"

    def get_python_type(self):
        return int

    def get_polars_dtype(self):
        return pl.Int64


class Date(FieldBase):
    """`datetime.datetime` or `datetime.date` instances; ISO strings are rejected."""

    tag = "date"

    def get_python_type(self):
        return Union[datetime, date]

    def get_polars_dtype(self):
        return pl.Datetime


class Undefined(FieldBase):
    """A field that must be absent or `None`."""

    tag = "undefined"
    required = False

    def get_python_type(self):
        return None


class Null(FieldBase):
    """A field that must be present and `None`."""

    tag = "null"

    def get_python_type(self):
        return None


class AnyValue(FieldBase):
    """Anything, including a missing key."""

    tag = "any"
    required = False

    def get_python_type(self):
        return Any


_TAG_MAP.update(
    {
        cls.tag: cls
        for cls in (String, Number, Boolean, BigInt, Date, Undefined, Null, AnyValue)
    }
)

TYPE_TAGS: tuple[str, ...] = tuple(_TAG_MAP)


def get_field_class_for_tag(tag: str) -> type[FieldBase]:
    """
    Get the Field class for a schema type tag.

    Parameters
    ----------
    tag : str
        One of ``string``, ``number``, ``boolean``, ``bigint``, ``date``,
        ``undefined``, ``null`` or ``any``.

    Returns
    -------
    type[FieldBase]
        The corresponding Field class.

    Raises
    ------
    SchemaError
        If the tag is not recognised.
    """
    field_class = _TAG_MAP.get(tag) if isinstance(tag, str) else None
    if field_class is None:
        raise SchemaError(
            f"Unsupported type tag {tag!r}. Supported tags: {', '.join(TYPE_TAGS)}"
        )
    return field_class
