"""Schema descriptors and relation markers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Annotated, Callable, Dict, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Discriminator, Field

from schemagraph.errors import (
    InvalidAttributesError,
    InvalidNameError,
    InvalidSchemaError,
    UnsupportedAttributeError,
)
from .node import COMPUTED_SLOT


class ComputedAttribute(BaseModel):
    """A value derived from the entity itself; never a relation."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["computed"] = "computed"
    fn: Callable[[Any], Any]
    internal: bool = True


class SingleReference(BaseModel):
    """Reference to exactly one entity of another schema."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["one"] = "one"
    related_schema: str
    internal: bool = False  # Internal references are skipped by back-reference discovery


class ArrayReference(BaseModel):
    """Reference to a list of entities of another schema (see has_many)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["many"] = "many"
    related_schema: str
    is_array: Literal[True] = True
    internal: bool = False


AttributeSpec = Annotated[
    Union[ComputedAttribute, SingleReference, ArrayReference],
    Discriminator("kind"),
]

ATTRIBUTE_TYPES = (ComputedAttribute, SingleReference, ArrayReference)


class SchemaDescriptor(BaseModel):
    """Named definition of an entity's attributes."""

    model_config = ConfigDict(frozen=True)

    name: str
    attributes: Dict[str, AttributeSpec] = Field(default_factory=dict)
    id_attribute: Optional[str] = None  # Falls back to Settings.id_attribute


def _schema_name(schema: Any) -> str:
    """Extract the schema name from a string, descriptor, mapping or named object."""
    if not schema:
        raise InvalidSchemaError(f"Invalid schema reference: {schema!r}")
    if isinstance(schema, str):
        return schema
    if isinstance(schema, Mapping):
        name = schema.get("name")
    else:
        name = getattr(schema, "name", None)
    if not isinstance(name, str) or not name:
        raise InvalidSchemaError(
            f"Invalid schema reference: {schema!r} is neither a schema name "
            f"nor an object with a name"
        )
    return name


def has_many(schema: Any, internal: bool = False) -> ArrayReference:
    """
    Declare a plural reference to another schema.

    Args:
        schema: Schema name, SchemaDescriptor, or anything carrying a ``name``
        internal: Hide this attribute from back-reference discovery

    Returns:
        ArrayReference marker

    Raises:
        InvalidSchemaError: If schema is empty or has no usable name
    """
    return ArrayReference(related_schema=_schema_name(schema), internal=internal)


def has_one(schema: Any, internal: bool = False) -> SingleReference:
    """Declare a singular reference to another schema (same rules as has_many)."""
    return SingleReference(related_schema=_schema_name(schema), internal=internal)


def _classify_attribute(schema_name: str, prop: str, value: Any) -> AttributeSpec:
    if isinstance(value, ATTRIBUTE_TYPES):
        return value
    if callable(value):
        return ComputedAttribute(fn=value)
    if isinstance(value, str) and value:
        return SingleReference(related_schema=value)
    if isinstance(value, SchemaDescriptor):
        return SingleReference(related_schema=value.name)
    if isinstance(value, Mapping) and (value.get("isArray") or value.get("is_array")):
        related = value.get("relatedSchema") or value.get("related_schema")
        try:
            return has_many(related)
        except InvalidSchemaError as e:
            raise UnsupportedAttributeError(
                f"{schema_name}.{prop}: array reference without a related schema"
            ) from e
    raise UnsupportedAttributeError(
        f"{schema_name}.{prop}: unsupported attribute value {value!r}. "
        f"Expected a function, a schema name, has_one(...) or has_many(...)"
    )


def define_schema(
    name: str,
    attributes: Optional[Mapping[str, Any]] = None,
    id_attribute: Optional[str] = None,
) -> SchemaDescriptor:
    """
    Define an entity schema.

    Attribute values are classified once, here: functions become computed
    attributes, strings and descriptors become single references, and
    has_many(...) markers become array references.

    Args:
        name: Schema name (non-empty)
        attributes: Mapping of attribute name to attribute value
        id_attribute: Key attribute of entity instances (defaults to settings)

    Returns:
        SchemaDescriptor

    Raises:
        InvalidNameError: If name is empty or not a string
        InvalidAttributesError: If attributes is not a mapping
        UnsupportedAttributeError: If an attribute value has no recognized shape
    """
    if not name or not isinstance(name, str):
        raise InvalidNameError(f"Invalid schema name: {name!r}")
    if not attributes:
        attributes = {}
    if not isinstance(attributes, Mapping):
        raise InvalidAttributesError(
            f"{name}: attributes must be a mapping, got {type(attributes).__name__}"
        )

    classified: Dict[str, AttributeSpec] = {}
    for prop, value in attributes.items():
        if not isinstance(prop, str) or not prop:
            raise InvalidAttributesError(f"{name}: invalid attribute name {prop!r}")
        if prop == COMPUTED_SLOT:
            raise InvalidAttributesError(f"{name}: attribute name {prop!r} is reserved")
        classified[prop] = _classify_attribute(name, prop, value)

    return SchemaDescriptor(name=name, attributes=classified, id_attribute=id_attribute)
