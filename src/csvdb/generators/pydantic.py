"""Pydantic model generator for compiled schemas."""

from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, create_model

if TYPE_CHECKING:
    from ..schema import Schema


def create_pydantic_model(
    schema: "Schema", name: str = "RecordModel"
) -> type[BaseModel]:
    """
    Generate a strict Pydantic BaseModel from a compiled Schema.

    Fields that may be absent (``undefined`` and ``any``) default to None.
    Field names must be valid Pydantic field names (no leading underscore).

    Parameters
    ----------
    schema : Schema
        A schema returned by `define_schema()`.
    name : str, default "RecordModel"
        Class name of the generated model.

    Returns
    -------
    type[BaseModel]
        A dynamically created Pydantic BaseModel class.
    """
    pydantic_fields: dict[str, Any] = {}
    for field_name, field in schema.fields().items():
        python_type = field.get_python_type()
        if field.required:
            pydantic_fields[field_name] = (python_type, ...)
        else:
            pydantic_fields[field_name] = (Optional[python_type], None)

    # Pydantic's create_model is dynamically typed - returns type[BaseModel] at runtime
    return create_model(  # type: ignore[no-any-return, call-overload]
        name,
        __config__=ConfigDict(strict=True, allow_inf_nan=False),
        **pydantic_fields,
    )
