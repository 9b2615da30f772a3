"""Entity schemas with relations, compiled into a normalization graph."""

from .errors import (
    SchemaError,
    InvalidNameError,
    InvalidAttributesError,
    UnsupportedAttributeError,
    InvalidSchemaError,
    InvalidSchemasError,
    UnresolvedReferenceError,
    UnknownRelationError,
    NormalizationError,
)
from .ir import (
    ArrayOf,
    Relation,
    SchemaDescriptor,
    SchemaNode,
    define_schema,
    has_many,
    has_one,
)
from .generation import generate_schemas
from .normalization import normalize, denormalize

__all__ = [
    "SchemaError",
    "InvalidNameError",
    "InvalidAttributesError",
    "UnsupportedAttributeError",
    "InvalidSchemaError",
    "InvalidSchemasError",
    "UnresolvedReferenceError",
    "UnknownRelationError",
    "NormalizationError",
    "ArrayOf",
    "Relation",
    "SchemaDescriptor",
    "SchemaNode",
    "define_schema",
    "has_many",
    "has_one",
    "generate_schemas",
    "normalize",
    "denormalize",
]
