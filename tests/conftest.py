"""Shared fixtures for schemagraph tests."""

import json

import pytest
from schemagraph.config.settings import reset_settings
from schemagraph.ir.descriptor import define_schema, has_many


@pytest.fixture(autouse=True)
def fresh_settings():
    """Make every test read settings from its own environment."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def todo_descriptors():
    """Group/Task/User schemas: a group has many tasks, tasks have an assignee."""
    group = define_schema("Group", {"tasks": has_many("Task"), "owner": "User"})
    task = define_schema(
        "Task",
        {
            "group": "Group",
            "assignee": "User",
            "label": lambda t: t["title"].upper(),
        },
    )
    user = define_schema("User")
    return [group, task, user]


@pytest.fixture
def schema_file(tmp_path):
    """Schema file equivalent to todo_descriptors, minus computed attributes."""
    path = tmp_path / "schemas.json"
    path.write_text(
        json.dumps(
            {
                "schemas": [
                    {
                        "name": "Group",
                        "attributes": {"tasks": {"has_many": "Task"}, "owner": "User"},
                    },
                    {"name": "Task", "attributes": {"group": "Group", "assignee": "User"}},
                    {"name": "User"},
                ]
            }
        ),
        encoding="utf-8",
    )
    return path
