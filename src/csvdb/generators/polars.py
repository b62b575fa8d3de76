"""Polars DataFrame export for decoded records."""

from typing import TYPE_CHECKING, Any, Dict, List

import polars as pl
from loguru import logger

if TYPE_CHECKING:
    from ..fields import FieldBase
    from ..schema import Schema


def _typed_expr(name: str, field: "FieldBase") -> pl.Expr:
    """Build the expression that turns a stored text column into the field's dtype."""
    column = pl.col(name)
    dtype = field.get_polars_dtype()
    if dtype == pl.Utf8:
        return column
    # Stored booleans are "true"/"false", which a plain cast does not parse.
    if dtype == pl.Boolean:
        return (
            pl.when(column == "true")
            .then(pl.lit(True))
            .when(column == "false")
            .then(pl.lit(False))
            .otherwise(pl.lit(None, dtype=pl.Boolean))
        )
    if dtype == pl.Datetime:
        return column.str.to_datetime(strict=False)
    return column.cast(dtype, strict=False)


def records_to_polars(
    records: List[Dict[str, Any]], schema: "Schema", typed: bool = False
) -> pl.DataFrame:
    """
    Build a DataFrame with one column per schema field, in schema order.

    Parameters
    ----------
    records : list[dict]
        Decoded records (text values, None for padded fields).
    schema : Schema
        The schema the records were decoded with.
    typed : bool, default False
        If True, cast every column to its field's `get_polars_dtype()`
        (number -> Float64, bigint -> Int64, boolean -> Boolean,
        date -> Datetime). Casts are non-strict, so values that do not
        parse become null.

    Returns
    -------
    pl.DataFrame
        All columns are Utf8 unless `typed` is True.
    """
    names = schema.field_names
    df = pl.DataFrame(
        {name: [record.get(name) for record in records] for name in names},
        schema={name: pl.Utf8 for name in names},
    )
    if not typed:
        return df

    fields = schema.fields()
    df = df.select([_typed_expr(name, fields[name]).alias(name) for name in names])
    logger.debug(f"Re-typed {df.height} rows to {dict(df.schema)}")
    return df
