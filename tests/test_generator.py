"""Tests for schema generation."""

import pytest
from schemagraph.errors import InvalidSchemasError, UnresolvedReferenceError
from schemagraph.generation import generate_schema, generate_schemas
from schemagraph.ir.descriptor import define_schema, has_many
from schemagraph.ir.node import COMPUTED_SLOT, ArrayOf, RelatedEntity, SchemaNode
from schemagraph.ir.registry import SchemaRegistry


def test_generate_schemas_links_nodes_by_identity(todo_descriptors):
    """Test that definitions hold the registry's own nodes."""
    nodes = generate_schemas(todo_descriptors)
    group, task, user = nodes["Group"], nodes["Task"], nodes["User"]

    assert list(nodes) == ["Group", "Task", "User"]
    assert isinstance(group.definition["tasks"], ArrayOf)
    assert group.definition["tasks"].get_item_schema() is task
    assert group.definition["owner"] is user
    assert task.definition["group"] is group
    assert task.definition["assignee"] is user


def test_related_entities_follow_declared_order(todo_descriptors):
    """Test that every non-computed attribute is recorded as a relation."""
    nodes = generate_schemas(todo_descriptors)
    assert nodes["Task"].related_entities == [
        RelatedEntity(prop="group", entity="Group"),
        RelatedEntity(prop="assignee", entity="User"),
    ]
    assert nodes["User"].related_entities == []


def test_computed_attributes_live_in_internal_slot(todo_descriptors):
    """Test that computed attributes are stored under the computed slot only."""
    task = generate_schemas(todo_descriptors)["Task"]
    assert "label" not in task.definition
    assert set(task.definition[COMPUTED_SLOT]) == {"label"}
    assert COMPUTED_SLOT in task.internal
    assert task.compute({"title": "dishes"}) == {"label": "DISHES"}


def test_self_reference_generates():
    """Test that a schema can reference itself."""
    nodes = generate_schemas([define_schema("Node", {"parent": "Node", "children": has_many("Node")})])
    node = nodes["Node"]
    assert node.definition["parent"] is node
    assert node.definition["children"].get_item_schema() is node


def test_generation_is_order_independent():
    """Test that input order does not change the generated structure."""
    a = define_schema("A", {"b": "B"})
    b = define_schema("B", {"as": has_many(a)})

    forward = generate_schemas([a, b])
    backward = generate_schemas([b, a])

    assert {k: v.describe() for k, v in forward.items()} == {
        k: v.describe() for k, v in backward.items()
    }
    assert list(backward) == ["B", "A"]


def test_each_call_builds_fresh_nodes(todo_descriptors):
    """Test that nodes are not shared between generation calls."""
    first = generate_schemas(todo_descriptors)
    second = generate_schemas(todo_descriptors)
    assert first["Task"] is not second["Task"]
    assert first["Task"].describe() == second["Task"].describe()


@pytest.mark.parametrize("schemas", [None, [], (), "Task", {"Task": None}])
def test_generate_schemas_rejects_invalid_input(schemas):
    """Test that empty or non-sequence input is rejected."""
    with pytest.raises(InvalidSchemasError):
        generate_schemas(schemas)


def test_generate_schemas_rejects_raw_dicts():
    """Test that elements must be built with define_schema."""
    with pytest.raises(InvalidSchemasError):
        generate_schemas([{"name": "Task", "attributes": {}}])


def test_generate_schemas_rejects_duplicate_names():
    """Test that a schema name may appear only once per batch."""
    with pytest.raises(InvalidSchemasError):
        generate_schemas([define_schema("Task"), define_schema("Task", {"a": "Task"})])


def test_unknown_reference_fails():
    """Test that referencing a schema outside the batch fails with context."""
    with pytest.raises(UnresolvedReferenceError) as exc_info:
        generate_schemas([define_schema("Task", {"group": "Group"})])
    assert isinstance(exc_info.value, KeyError)
    assert "Task.group" in str(exc_info.value)
    assert "'Group'" in str(exc_info.value)


def test_id_attribute_defaults_to_settings(monkeypatch):
    """Test that the key attribute falls back to the configured default."""
    monkeypatch.setenv("SCHEMAGRAPH_ID_ATTRIBUTE", "uuid")
    nodes = generate_schemas([define_schema("Task"), define_schema("Doc", id_attribute="slug")])
    assert nodes["Task"].id_attribute == "uuid"
    assert nodes["Doc"].id_attribute == "slug"


def test_generate_schema_mutates_allocated_node():
    """Test that generate_schema fills the pre-allocated node in place."""
    registry = SchemaRegistry()
    task_node = registry.allocate("Task")
    group_node = registry.allocate("Group")

    result = generate_schema(define_schema("Task", {"group": "Group"}), registry)

    assert result is task_node
    assert isinstance(result, SchemaNode)
    assert task_node.definition == {"group": group_node}
    assert len(registry) == 2
    assert set(registry) == {"Task", "Group"}
