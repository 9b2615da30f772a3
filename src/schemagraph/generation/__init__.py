"""Schema generation."""

from .generator import generate_schema, generate_schemas

__all__ = ["generate_schema", "generate_schemas"]
