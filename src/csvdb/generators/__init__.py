"""Generators for different frameworks."""

from .polars import records_to_polars
from .pydantic import create_pydantic_model

__all__ = [
    "create_pydantic_model",
    "records_to_polars",
]
