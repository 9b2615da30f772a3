"""Tests for schema descriptors and relation markers."""

import pytest
from pydantic import ValidationError
from schemagraph.errors import (
    InvalidAttributesError,
    InvalidNameError,
    InvalidSchemaError,
    UnsupportedAttributeError,
)
from schemagraph.ir.descriptor import (
    ArrayReference,
    ComputedAttribute,
    SingleReference,
    define_schema,
    has_many,
    has_one,
)


def test_define_schema_keeps_name_and_attribute_order():
    """Test that define_schema keeps the name and declared attribute order."""
    schema = define_schema("Task", {"group": "Group", "owner": "User", "tags": has_many("Tag")})
    assert schema.name == "Task"
    assert list(schema.attributes) == ["group", "owner", "tags"]
    assert schema.attributes["group"] == SingleReference(related_schema="Group")
    assert schema.attributes["tags"] == ArrayReference(related_schema="Tag")
    assert schema.id_attribute is None


def test_define_schema_defaults_to_no_attributes():
    """Test that absent or falsy attributes mean an empty schema."""
    assert define_schema("Task").attributes == {}
    assert define_schema("Task", {}).attributes == {}
    assert define_schema("Task", None).attributes == {}
    assert define_schema("Task", "").attributes == {}


@pytest.mark.parametrize("name", ["", None, 42, ["Task"]])
def test_define_schema_rejects_invalid_name(name):
    """Test that empty or non-string names are rejected."""
    with pytest.raises(InvalidNameError):
        define_schema(name)


@pytest.mark.parametrize("attributes", ["group", 5, ["group"], True])
def test_define_schema_rejects_non_mapping_attributes(attributes):
    """Test that truthy non-mapping attributes are rejected."""
    with pytest.raises(InvalidAttributesError):
        define_schema("Task", attributes)


@pytest.mark.parametrize("value", [5, "", {"foo": "bar"}, {"isArray": True}, None])
def test_define_schema_rejects_unsupported_attribute_values(value):
    """Test that unrecognized attribute shapes fail instead of being dropped."""
    with pytest.raises(UnsupportedAttributeError):
        define_schema("Task", {"weird": value})


def test_unsupported_attribute_is_an_attributes_error():
    """Test the error hierarchy for unsupported attribute values."""
    with pytest.raises(InvalidAttributesError):
        define_schema("Task", {"weird": 3.5})


def test_callable_becomes_computed_attribute():
    """Test that functions are stored as computed, internal attributes."""

    def full_name(user):
        return f"{user['first']} {user['last']}"

    schema = define_schema("User", {"full_name": full_name})
    attribute = schema.attributes["full_name"]
    assert isinstance(attribute, ComputedAttribute)
    assert attribute.fn is full_name
    assert attribute.internal is True


def test_descriptor_value_becomes_single_reference():
    """Test that a descriptor used as an attribute value references its name."""
    group = define_schema("Group")
    task = define_schema("Task", {"group": group})
    assert task.attributes["group"] == SingleReference(related_schema="Group")


def test_raw_array_marker_is_accepted():
    """Test that marker dicts in either key style become array references."""
    schema = define_schema(
        "Group",
        {
            "tasks": {"relatedSchema": "Task", "isArray": True},
            "members": {"related_schema": "User", "is_array": True},
        },
    )
    assert schema.attributes["tasks"] == ArrayReference(related_schema="Task")
    assert schema.attributes["members"] == ArrayReference(related_schema="User")


def test_descriptor_is_immutable():
    """Test that descriptors cannot be modified after creation."""
    schema = define_schema("Task")
    with pytest.raises(ValidationError):
        schema.name = "Other"


def test_has_many_extracts_name_the_same_way():
    """Test that has_many gives the same marker for a name or a descriptor."""
    by_name = has_many("Task")
    by_descriptor = has_many(define_schema("Task"))
    by_mapping = has_many({"name": "Task"})
    assert by_name == by_descriptor == by_mapping
    assert by_name.related_schema == "Task"
    assert by_name.is_array is True
    assert by_name.internal is False


@pytest.mark.parametrize("schema", [None, "", {}, 5, {"title": "Task"}, {"name": ""}])
def test_has_many_rejects_invalid_schema(schema):
    """Test that has_many rejects empty or nameless schema references."""
    with pytest.raises(InvalidSchemaError):
        has_many(schema)


def test_has_one_builds_single_reference():
    """Test the explicit single reference builder."""
    assert has_one(define_schema("Group")) == SingleReference(related_schema="Group")
    assert has_one("Group", internal=True).internal is True
    with pytest.raises(InvalidSchemaError):
        has_one("")


def test_define_schema_rejects_reserved_computed_slot_name():
    """Test that the slot name used for computed attributes cannot be an attribute."""
    with pytest.raises(InvalidAttributesError):
        define_schema("A", {"_computed": "B", "label": lambda a: a["id"]})
    with pytest.raises(InvalidAttributesError):
        define_schema("A", {"_computed": "B"})
