"""Per-generation registry of schema nodes."""

from collections.abc import Mapping
from typing import Dict, Iterator, Optional

from schemagraph.errors import UnresolvedReferenceError
from .node import SchemaNode


class SchemaRegistry(Mapping):
    """
    Name-indexed arena of mutable schema nodes.

    Every node is allocated before any definition is generated, which lets
    schemas reference each other (or themselves) regardless of order.
    """

    def __init__(self):
        self._nodes: Dict[str, SchemaNode] = {}

    def allocate(self, name: str, id_attribute: str = "id") -> SchemaNode:
        """Create the empty node for ``name``."""
        node = SchemaNode(name, self, id_attribute=id_attribute)
        self._nodes[name] = node
        return node

    def resolve(self, name: str, referrer: Optional[str] = None) -> SchemaNode:
        """
        Look up a node by name.

        Raises:
            UnresolvedReferenceError: If no schema with that name was allocated
        """
        try:
            return self._nodes[name]
        except KeyError:
            where = f" (referenced from {referrer})" if referrer else ""
            raise UnresolvedReferenceError(f"Unknown schema {name!r}{where}") from None

    def __getitem__(self, name: str) -> SchemaNode:
        return self.resolve(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)
