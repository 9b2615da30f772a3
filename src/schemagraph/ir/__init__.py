"""Schema descriptors, nodes and the registry that links them."""

from .descriptor import (
    ArrayReference,
    AttributeSpec,
    ComputedAttribute,
    SchemaDescriptor,
    SingleReference,
    define_schema,
    has_many,
    has_one,
)
from .node import COMPUTED_SLOT, ArrayOf, Relation, RelatedEntity, SchemaNode
from .registry import SchemaRegistry

__all__ = [
    "ArrayReference",
    "AttributeSpec",
    "ComputedAttribute",
    "SchemaDescriptor",
    "SingleReference",
    "define_schema",
    "has_many",
    "has_one",
    "COMPUTED_SLOT",
    "ArrayOf",
    "Relation",
    "RelatedEntity",
    "SchemaNode",
    "SchemaRegistry",
]
