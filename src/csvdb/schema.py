"""Compiled, immutable `Schema` and the `define_schema()` factory."""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .errors import SchemaError, ValidationError
from .fields import FieldBase, get_field_class_for_tag


class Schema:
    """
    Ordered set of named fields for one store.

    A Schema is produced once by `define_schema()` and never changes
    afterwards. Its field order is the column order on disk and the order
    used to decode stored lines.

    Examples
    --------
        >>> from csvdb import define_schema
        >>> schema = define_schema({"name": "string", "age": "number"})
        >>> schema.field_names
        ('name', 'age')
        >>> schema.validate({"name": "Alice", "age": 25})
        {'name': 'Alice', 'age': 25}
    """

    __slots__ = ("_fields", "_field_names")

    def __init__(self, fields: Mapping[str, FieldBase]):
        self._fields = MappingProxyType(dict(fields))
        self._field_names = tuple(self._fields)

    @property
    def field_names(self) -> tuple[str, ...]:
        """Field names in declaration order."""
        return self._field_names

    def fields(self) -> dict[str, FieldBase]:
        """Return a copy of the name -> field mapping."""
        return dict(self._fields)

    def tags(self) -> dict[str, str]:
        """Return the name -> type tag mapping this schema was built from."""
        return {name: field.tag for name, field in self._fields.items()}

    def __iter__(self) -> Iterator[str]:
        return iter(self._field_names)

    def __len__(self) -> int:
        return len(self._field_names)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return list(self.tags().items()) == list(other.tags().items())

    def __hash__(self) -> int:
        return hash(tuple(self.tags().items()))

    def __repr__(self) -> str:
        return f"Schema({self.tags()!r})"

    def validate(self, record: Any) -> dict[str, Any]:
        """
        Validate a record against every field.

        All fields are checked before reporting, so the raised error lists
        every failure at once. Keys that are not schema fields are ignored.

        Parameters
        ----------
        record : Mapping
            The raw record to validate.

        Returns
        -------
        dict
            The schema fields present in `record`, in schema order.

        Raises
        ------
        ValidationError
            If `record` is not a mapping or any field fails its validator.
        """
        if not isinstance(record, Mapping):
            raise ValidationError(
                [
                    {
                        "loc": (),
                        "msg": "Record must be a mapping",
                        "type": "dict_type",
                        "input": record,
                    }
                ]
            )

        errors: list[dict[str, Any]] = []
        validated: dict[str, Any] = {}
        for name, field in self._fields.items():
            if name not in record:
                if field.required:
                    errors.append(
                        {
                            "loc": (name,),
                            "msg": "Field required",
                            "type": "missing",
                            "input": None,
                        }
                    )
                continue
            try:
                validated[name] = field.validate(record[name])
            except PydanticValidationError as exc:
                for err in exc.errors():
                    errors.append(
                        {
                            "loc": (name, *err["loc"]),
                            "msg": err["msg"],
                            "type": err["type"],
                            "input": err.get("input"),
                        }
                    )

        if errors:
            raise ValidationError(errors)
        return validated

    def to_pydantic(self, name: str = "RecordModel") -> type:
        """
        Generate a strict Pydantic BaseModel from this schema.

        Returns
        -------
        type
            A dynamically created Pydantic BaseModel class.
        """
        from .generators.pydantic import create_pydantic_model

        return create_pydantic_model(self, name=name)


def define_schema(schema: Mapping[str, str]) -> Schema:
    """
    Compile a mapping of field name -> type tag into a `Schema`.

    Parameters
    ----------
    schema : Mapping[str, str]
        Field names mapped to one of ``string``, ``number``, ``boolean``,
        ``bigint``, ``date``, ``undefined``, ``null`` or ``any``. Insertion
        order becomes the column order.

    Returns
    -------
    Schema
        The compiled schema.

    Raises
    ------
    SchemaError
        If the mapping is empty, a field name is not a non-empty string, or
        a tag is not recognised.
    """
    if not isinstance(schema, Mapping):
        raise SchemaError(
            f"Schema must be a mapping of field name to type tag, got "
            f"{type(schema).__name__}"
        )
    if not schema:
        raise SchemaError("Schema must define at least one field")

    fields: dict[str, FieldBase] = {}
    for field_name, tag in schema.items():
        if not isinstance(field_name, str) or not field_name:
            raise SchemaError(
                f"Field names must be non-empty strings, got {field_name!r}"
            )
        try:
            field = get_field_class_for_tag(tag)()
        except SchemaError as exc:
            raise SchemaError(f"Field '{field_name}': {exc}") from exc
        field.name = field_name
        fields[field_name] = field

    return Schema(fields)
