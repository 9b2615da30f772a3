"""Schema generation: compile descriptors into a linked graph of schema nodes."""

from typing import Any, Dict, List, Sequence

from schemagraph.config.logging import get_logger
from schemagraph.config.settings import get_settings
from schemagraph.errors import InvalidSchemasError
from schemagraph.ir.descriptor import (
    ArrayReference,
    ComputedAttribute,
    SchemaDescriptor,
    SingleReference,
)
from schemagraph.ir.node import COMPUTED_SLOT, ArrayOf, RelatedEntity, SchemaNode
from schemagraph.ir.registry import SchemaRegistry

logger = get_logger(__name__)


def generate_schema(descriptor: SchemaDescriptor, registry: SchemaRegistry) -> SchemaNode:
    """
    Generate one schema node in place.

    The node for ``descriptor.name`` must already be allocated in the
    registry, as must every schema its attributes reference.

    Args:
        descriptor: Schema to generate
        registry: Registry shared by the whole batch

    Returns:
        The registry's node for this schema, now fully defined

    Raises:
        UnresolvedReferenceError: If an attribute references an unknown schema
    """
    related_entities: List[RelatedEntity] = []
    definition: Dict[str, Any] = {}
    computed: Dict[str, Any] = {}
    internal: List[str] = []

    for prop, attribute in descriptor.attributes.items():
        if isinstance(attribute, ComputedAttribute):
            computed[prop] = attribute.fn
            continue

        related = registry.resolve(attribute.related_schema, referrer=f"{descriptor.name}.{prop}")
        related_entities.append(RelatedEntity(prop=prop, entity=attribute.related_schema))
        if isinstance(attribute, SingleReference):
            definition[prop] = related
        elif isinstance(attribute, ArrayReference):
            definition[prop] = ArrayOf(related)
        if attribute.internal:
            internal.append(prop)

    if computed:
        definition[COMPUTED_SLOT] = computed

    node = registry.resolve(descriptor.name)
    node.define(definition, internal=internal)
    node.related_entities = related_entities

    logger.debug(
        f"Generated schema {descriptor.name}: "
        f"{len(related_entities)} relation(s), {len(computed)} computed attribute(s)"
    )
    return node


def _validate_batch(schemas: Any) -> None:
    if not schemas:
        raise InvalidSchemasError("No schemas to generate")
    if not isinstance(schemas, (list, tuple)):
        raise InvalidSchemasError(
            f"Schemas must be a list or tuple, got {type(schemas).__name__}"
        )
    seen = set()
    for s in schemas:
        if not isinstance(s, SchemaDescriptor):
            raise InvalidSchemasError(
                f"Expected SchemaDescriptor, got {type(s).__name__} (use define_schema)"
            )
        if s.name in seen:
            raise InvalidSchemasError(f"Duplicate schema name: {s.name}")
        seen.add(s.name)


def generate_schemas(schemas: Sequence[SchemaDescriptor]) -> Dict[str, SchemaNode]:
    """
    Generate a batch of schemas that may reference each other.

    Runs in two passes: first one empty node is allocated per name, then
    each node's definition is generated against the shared registry. The
    first pass is what makes forward, circular and self references resolve.

    Args:
        schemas: Schema descriptors, typically built with define_schema

    Returns:
        Dictionary mapping schema name to its generated node, in input order

    Raises:
        InvalidSchemasError: If schemas is empty, not a list/tuple, contains
            something other than a SchemaDescriptor, or repeats a name
        UnresolvedReferenceError: If an attribute references a schema that
            is not part of the batch
    """
    _validate_batch(schemas)
    default_id_attribute = get_settings().id_attribute

    registry = SchemaRegistry()
    for s in schemas:
        registry.allocate(s.name, id_attribute=s.id_attribute or default_id_attribute)

    result = {s.name: generate_schema(s, registry) for s in schemas}
    logger.info(f"Generated {len(result)} schema(s): {', '.join(result)}")
    return result
