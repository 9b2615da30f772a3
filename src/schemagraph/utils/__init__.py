"""Utility functions for common operations."""

from .schema_io import load_schemas_from_json, parse_schemas

__all__ = ["load_schemas_from_json", "parse_schemas"]
