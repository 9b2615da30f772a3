"""Compiled schema nodes and the relation lookups they support."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, TYPE_CHECKING
from pydantic import BaseModel, ConfigDict

from schemagraph.errors import UnknownRelationError

if TYPE_CHECKING:
    from .registry import SchemaRegistry

# Definition slot holding {attribute name: function} for computed attributes
COMPUTED_SLOT = "_computed"


class RelatedEntity(BaseModel):
    """One declared reference: attribute ``prop`` points at schema ``entity``."""

    model_config = ConfigDict(frozen=True)

    prop: str
    entity: str


class Relation(BaseModel):
    """Relation between an entity instance and one of its related entities."""

    related: str
    related_prop_name: Optional[str] = None  # Back-reference on the related schema
    related_id: Any = None


def read_attribute(entity: Any, prop: str) -> Any:
    """Read ``prop`` from a mapping or an object, None when missing."""
    if isinstance(entity, Mapping):
        return entity.get(prop)
    return getattr(entity, prop, None)


class ArrayOf:
    """Definition slot for a list of entities sharing one schema."""

    def __init__(self, item_schema: SchemaNode):
        self.item_schema = item_schema

    def get_item_schema(self) -> SchemaNode:
        return self.item_schema

    def __repr__(self) -> str:
        return f"ArrayOf({self.item_schema.name!r})"


class SchemaNode:
    """
    Compiled, relation-aware representation of one entity schema.

    Nodes are allocated empty by a SchemaRegistry and filled in place by the
    generator, so other nodes may already hold a reference to this object
    before its own definition exists.
    """

    def __init__(self, name: str, registry: SchemaRegistry, id_attribute: str = "id"):
        self.name = name
        self.id_attribute = id_attribute
        self.definition: Dict[str, Any] = {}
        self.internal: Set[str] = {COMPUTED_SLOT}
        self.related_entities: List[RelatedEntity] = []
        self._registry = registry

    def __repr__(self) -> str:
        return f"SchemaNode({self.name!r})"

    def get_key(self) -> str:
        return self.name

    def get_id(self, entity: Any) -> Any:
        return read_attribute(entity, self.id_attribute)

    def define(self, definition: Dict[str, Any], internal: Iterable[str] = ()) -> None:
        """Merge a definition into this node, keeping the node's identity."""
        self.definition.update(definition)
        self.internal.update(internal)

    @property
    def computed(self) -> Dict[str, Callable[[Any], Any]]:
        return self.definition.get(COMPUTED_SLOT, {})

    def compute(self, entity: Any) -> Dict[str, Any]:
        """Evaluate every computed attribute against ``entity``."""
        return {prop: fn(entity) for prop, fn in self.computed.items()}

    def relation_slots(self):
        """Yield (prop, slot) for every non-computed definition slot, in order."""
        for prop, slot in self.definition.items():
            if prop != COMPUTED_SLOT:
                yield prop, slot

    def is_related_to(self, entity_name: str) -> bool:
        return any(e.entity == entity_name for e in self.related_entities)

    def related_through(self, other: SchemaNode) -> Optional[str]:
        """
        Find the attribute of this node that points at ``other``.

        Internal slots are skipped. A slot matches when it is ``other`` itself
        (compared by key) or a list of ``other``.

        Returns:
            The first matching attribute name, or None
        """
        for prop, slot in self.relation_slots():
            if prop in self.internal:
                continue
            if isinstance(slot, SchemaNode) and slot.get_key() == other.get_key():
                return prop
            if isinstance(slot, ArrayOf) and slot.get_item_schema().get_key() == other.get_key():
                return prop
        return None

    def get_relation(self, entity: Any, related_entity_name: str) -> Relation:
        """
        Describe how ``entity`` relates to the schema named ``related_entity_name``.

        The back-reference on the related schema is discovered by scanning its
        definition, so the inverse relation never has to be declared twice.

        Args:
            entity: Entity instance of this schema (mapping or object)
            related_entity_name: Name of a schema this schema references

        Returns:
            Relation with the foreign-key value and the back-reference name

        Raises:
            UnknownRelationError: If this schema declares no such reference
            UnresolvedReferenceError: If the related schema is not registered
        """
        entry = next(
            (e for e in self.related_entities if e.entity == related_entity_name),
            None,
        )
        if entry is None:
            raise UnknownRelationError(
                f"{self.name} has no relation to {related_entity_name!r}"
            )
        related_node = self._registry.resolve(related_entity_name, referrer=self.name)
        return Relation(
            related=related_entity_name,
            related_prop_name=related_node.related_through(self),
            related_id=read_attribute(entity, entry.prop),
        )

    def describe(self) -> Dict[str, Any]:
        """Plain structural summary of the node."""
        return {
            "name": self.name,
            "id_attribute": self.id_attribute,
            "relations": [
                {
                    "prop": e.prop,
                    "entity": e.entity,
                    "many": isinstance(self.definition.get(e.prop), ArrayOf),
                    "internal": e.prop in self.internal,
                }
                for e in self.related_entities
            ],
            "computed": list(self.computed),
        }
