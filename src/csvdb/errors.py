"""Exception hierarchy raised by csvdb."""

from typing import Any


class CsvdbError(Exception):
    """Base class for every error raised by csvdb."""


class SchemaError(CsvdbError):
    """Schema is missing or its definition is invalid."""


class ValidationError(CsvdbError):
    """
    A record failed validation against the schema.

    Parameters
    ----------
    errors : list[dict]
        One entry per failing field, shaped like pydantic error details
        (``loc``, ``msg``, ``type``, ``input``).
    """

    def __init__(self, errors: list[dict[str, Any]]):
        self.errors = errors
        lines = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in errors
        ]
        super().__init__(
            f"{len(errors)} validation error(s):\n" + "\n".join(lines)
        )


class NotFoundError(CsvdbError):
    """An update or delete matched no records."""


class FormatError(CsvdbError):
    """A stored line does not have the shape the schema expects."""
