"""
csvdb: Schema-Validated Flat-File Record Store

Define a schema once. Insert, find, update and delete records kept as
``", "``-separated lines in a single text file.
"""

from .codec import LINE_TERMINATOR, SEPARATOR
from .errors import (
    CsvdbError,
    FormatError,
    NotFoundError,
    SchemaError,
    ValidationError,
)
from .fields import TYPE_TAGS, FieldBase, get_field_class_for_tag
from .schema import Schema, define_schema
from .store import CsvStore

__version__ = "0.1.0"

__all__ = [
    # Core
    "CsvStore",
    "Schema",
    "define_schema",
    # Errors
    "CsvdbError",
    "SchemaError",
    "ValidationError",
    "NotFoundError",
    "FormatError",
    # Format
    "SEPARATOR",
    "LINE_TERMINATOR",
    # Internal (for advanced use)
    "FieldBase",
    "TYPE_TAGS",
    "get_field_class_for_tag",
]
