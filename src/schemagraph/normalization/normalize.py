"""Flatten nested payloads into id-indexed entity tables, and back."""

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Tuple, Union

from schemagraph.config.logging import get_logger
from schemagraph.errors import NormalizationError
from schemagraph.ir.node import ArrayOf, SchemaNode

logger = get_logger(__name__)

EntityTables = Dict[str, Dict[Any, Dict[str, Any]]]


@dataclass
class NormalizedData:
    """Result of normalize(): top-level id(s) plus one table per schema."""

    result: Any
    entities: EntityTables = field(default_factory=dict)


def _as_schema(schema: Any) -> Union[SchemaNode, ArrayOf]:
    if isinstance(schema, (SchemaNode, ArrayOf)):
        return schema
    if isinstance(schema, list) and len(schema) == 1 and isinstance(schema[0], SchemaNode):
        return ArrayOf(schema[0])
    raise NormalizationError(
        f"Expected a SchemaNode, ArrayOf or [SchemaNode], got {schema!r}"
    )


def _visit(value: Any, schema: Union[SchemaNode, ArrayOf], entities: EntityTables) -> Any:
    if value is None:
        return None
    if isinstance(schema, ArrayOf):
        if not isinstance(value, (list, tuple)):
            raise NormalizationError(
                f"Expected a list of {schema.get_item_schema().name}, got {type(value).__name__}"
            )
        return [_visit(v, schema.get_item_schema(), entities) for v in value]
    return _visit_entity(value, schema, entities)


def _visit_entity(value: Any, node: SchemaNode, entities: EntityTables) -> Any:
    if not isinstance(value, Mapping):
        # Already a reference
        return value

    entity_id = node.get_id(value)
    if entity_id is None:
        raise NormalizationError(
            f"{node.name} entity has no '{node.id_attribute}': {dict(value)!r}"
        )

    flat = dict(value)
    for prop, slot in node.relation_slots():
        if prop in flat:
            flat[prop] = _visit(flat[prop], slot, entities)

    table = entities.setdefault(node.name, {})
    table[entity_id] = {**table.get(entity_id, {}), **flat}
    return entity_id


def normalize(data: Any, schema: Any) -> NormalizedData:
    """
    Flatten a nested payload.

    Nested entities are replaced by their ids and stored, merged, in
    ``entities[schema_name][id]``.

    Args:
        data: Entity mapping, or list of them when schema is a list schema
        schema: SchemaNode, ArrayOf, or [SchemaNode]

    Returns:
        NormalizedData

    Raises:
        NormalizationError: If an entity has no id or a list is expected but missing
    """
    entities: EntityTables = {}
    result = _visit(data, _as_schema(schema), entities)
    logger.debug(
        "Normalized payload into "
        + ", ".join(f"{name}({len(rows)})" for name, rows in entities.items())
    )
    return NormalizedData(result=result, entities=entities)


def _expand(
    value: Any,
    schema: Union[SchemaNode, ArrayOf],
    entities: EntityTables,
    path: FrozenSet[Tuple[str, Any]],
) -> Any:
    if value is None:
        return None
    if isinstance(schema, ArrayOf):
        if not isinstance(value, (list, tuple)):
            raise NormalizationError(
                f"Expected a list of {schema.get_item_schema().name} ids, got {type(value).__name__}"
            )
        return [_expand(v, schema.get_item_schema(), entities, path) for v in value]

    if not isinstance(value, Hashable):
        raise NormalizationError(
            f"Expected a {schema.name} id, got {type(value).__name__}: {value!r}"
        )
    key = (schema.name, value)
    if key in path:
        return value
    entity = entities.get(schema.name, {}).get(value)
    if entity is None:
        return None

    expanded = dict(entity)
    inner = path | {key}
    for prop, slot in schema.relation_slots():
        if prop in expanded:
            expanded[prop] = _expand(expanded[prop], slot, entities, inner)
    expanded.update(schema.compute(expanded))
    return expanded


def denormalize(result: Any, schema: Any, entities: EntityTables) -> Any:
    """
    Rebuild nested entities from id tables, adding computed attributes.

    An entity already being expanded higher up the same branch is left as its
    id, so self-referencing data terminates. Unknown ids become None.
    """
    return _expand(result, _as_schema(schema), entities, frozenset())
