"""
Line codec: records <-> ``", "``-joined text lines.

Values are written without quoting or escaping. A value that contains the
separator or a newline cannot be read back intact.
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any

from .errors import FormatError

SEPARATOR = ", "
LINE_TERMINATOR = "\n"


def to_text(value: Any) -> str:
    """
    Convert a value to its stored text form.

    ``None`` becomes the empty string, booleans become ``"true"``/``"false"``
    and dates use ISO 8601. Everything else goes through `str()`.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def encode(record: Mapping[str, Any], field_order: Sequence[str]) -> str:
    """Encode one record as a line (without terminator), in `field_order`."""
    return SEPARATOR.join(to_text(record.get(name)) for name in field_order)


def encode_all(
    records: Iterable[Mapping[str, Any]], field_order: Sequence[str]
) -> str:
    """Encode records as file contents; every line ends with a terminator."""
    return "".join(
        encode(record, field_order) + LINE_TERMINATOR for record in records
    )


def decode(
    line: str, field_order: Sequence[str], strict: bool = False
) -> dict[str, str | None]:
    """
    Decode one stored line into a record.

    Parameters
    ----------
    line : str
        A stored line, without its terminator.
    field_order : Sequence[str]
        Schema field names in column order.
    strict : bool, default False
        If True, a line whose field count differs from `field_order` raises
        `FormatError`. Otherwise missing trailing fields become None and
        extra fields are dropped.

    Returns
    -------
    dict
        Field name -> text value (or None for a padded field).
    """
    values = line.split(SEPARATOR)
    if strict and len(values) != len(field_order):
        raise FormatError(
            f"Expected {len(field_order)} fields, found {len(values)}: {line!r}"
        )
    return {
        name: values[index] if index < len(values) else None
        for index, name in enumerate(field_order)
    }


def decode_all(
    contents: str, field_order: Sequence[str], strict: bool = False
) -> list[dict[str, str | None]]:
    """Decode whole file contents, skipping blank lines."""
    return [
        decode(line, field_order, strict=strict)
        for line in contents.split(LINE_TERMINATOR)
        if line
    ]
