"""Tests for schema presets and category lookup."""

import pytest

from nodedit.schema import BASE, SYSTEM, get_schema


class TestSchema:
    def test_projects_alias(self):
        assert BASE.category("projects").name == "project"
        assert SYSTEM.category("projects").value == "projects"

    def test_implied_categories(self):
        assert [c.name for c in BASE.implied_categories(None)] == ["admin", "project"]
        assert [c.name for c in SYSTEM.implied_categories(None)] == ["admin", "project"]
        assert [c.name for c in SYSTEM.implied_categories("process")] == ["process"]
        assert BASE.implied_categories("process") == []

    def test_titles(self):
        assert BASE.titles[:3] == ("Id", "Active", "Type")

    def test_resolve_verb(self):
        assert SYSTEM.resolve_verb("w") == "write"
        assert BASE.resolve_verb("w") == "w"

    def test_get_schema(self):
        assert get_schema("system") is SYSTEM
        with pytest.raises(ValueError):
            get_schema("nope")
