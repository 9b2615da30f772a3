"""Exceptions raised while defining, generating and using schemas."""


class SchemaError(Exception):
    """Base class for all schemagraph errors."""

    pass


class InvalidNameError(SchemaError):
    """Raised when a schema name is empty, absent or not a string."""

    pass


class InvalidAttributesError(SchemaError):
    """Raised when the attributes of a schema are not a mapping."""

    pass


class UnsupportedAttributeError(InvalidAttributesError):
    """Raised when an attribute value has no recognized shape."""

    pass


class InvalidSchemaError(SchemaError):
    """Raised when a relation marker is given an empty or malformed schema."""

    pass


class InvalidSchemasError(SchemaError):
    """Raised when a batch of schemas cannot be generated."""

    pass


class UnresolvedReferenceError(SchemaError, KeyError):
    """Raised when a schema name is missing from the registry."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ""


class UnknownRelationError(SchemaError, LookupError):
    """Raised when a schema never declared a reference to the requested entity."""

    pass


class NormalizationError(SchemaError):
    """Raised when a payload cannot be flattened against a schema."""

    pass
