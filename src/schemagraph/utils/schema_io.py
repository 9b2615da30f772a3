"""Utilities for loading schema descriptors from JSON files."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from schemagraph.ir.descriptor import SchemaDescriptor, define_schema, has_many, has_one


class RawSchema(BaseModel):
    """One schema as written in a schema file."""

    name: str
    id_attribute: Optional[str] = None
    # "Other" | {"has_one": "Other"} | {"has_many": "Other", "internal": true}
    attributes: Dict[str, Union[str, Dict[str, Any]]] = Field(default_factory=dict)


class SchemaFile(BaseModel):
    """Top-level layout of a schema file."""

    schemas: List[RawSchema]


def _attribute_value(value: Union[str, Dict[str, Any]]) -> Any:
    if isinstance(value, dict):
        internal = bool(value.get("internal", False))
        if "has_many" in value:
            return has_many(value["has_many"], internal=internal)
        if "has_one" in value:
            return has_one(value["has_one"], internal=internal)
    return value


def parse_schemas(raw: SchemaFile) -> List[SchemaDescriptor]:
    """Turn a parsed schema file into descriptors."""
    return [
        define_schema(
            s.name,
            {prop: _attribute_value(v) for prop, v in s.attributes.items()},
            id_attribute=s.id_attribute,
        )
        for s in raw.schemas
    ]


def load_schemas_from_json(schema_path: Path) -> List[SchemaDescriptor]:
    """
    Load schema descriptors from a JSON file.

    Args:
        schema_path: Path to the JSON file

    Returns:
        List of SchemaDescriptor, in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or not a valid schema file
        SchemaError: If a schema in the file is invalid
    """
    schema_path = Path(schema_path)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_path}")

    file_content = schema_path.read_text(encoding="utf-8").strip()
    if not file_content:
        raise ValueError(f"Schema file is empty: {schema_path}")

    try:
        raw = TypeAdapter(SchemaFile).validate_json(file_content)
    except ValidationError as e:
        raise ValueError(f"Failed to load schemas from {schema_path}: {e}") from e

    return parse_schemas(raw)
