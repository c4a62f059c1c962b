"""Tests for the blueprint models and the Leaf / Node directory tree.

Covers:
- Blueprint validation (required fields, version coercion)
- Task-runner declaration shapes
- Null dependency blocks
- Structure -> tree conversion, order preservation, invalid shapes and names
"""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from idd_scaffold.blueprint.models import Blueprint, Leaf, Node, is_plain_name, to_entry, to_tree

pytestmark = pytest.mark.unit


class TestBlueprintModel:
    def test_minimal(self, minimal_blueprint: dict[str, Any]):
        bp = Blueprint.model_validate(minimal_blueprint)
        assert bp.version == "1.0.0"
        assert bp.npm.name == "demo"
        assert bp.npm.gulp is None
        assert bp.npm.grunt is None
        assert bp.npm.dependencies.prod == {}
        assert bp.structure == {"src": None}

    def test_name_required(self):
        with pytest.raises(ValidationError):
            Blueprint.model_validate({"version": "1.0.0", "npm": {}})

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Blueprint.model_validate({"version": "1.0.0", "npm": {"name": ""}})

    def test_version_required(self):
        with pytest.raises(ValidationError):
            Blueprint.model_validate({"npm": {"name": "demo"}})

    def test_numeric_version_coerced(self):
        bp = Blueprint.model_validate({"version": 1.0, "npm": {"name": "demo"}})
        assert bp.version == "1.0"

    def test_optional_sections_default(self):
        bp = Blueprint.model_validate({"version": "1.0.0", "npm": {"name": "demo"}})
        assert bp.npm.dependencies.prod is None
        assert bp.npm.dependencies.dev is None
        assert bp.structure is None
        assert bp.tree() == ()

    def test_null_dependencies_block(self):
        bp = Blueprint.model_validate(
            {"version": "1.0.0", "npm": {"name": "demo", "dependencies": None}}
        )
        assert bp.npm.dependencies.prod is None

    def test_unknown_keys_ignored(self):
        bp = Blueprint.model_validate(
            {"version": "1.0.0", "npm": {"name": "demo", "bower": True}, "extra": 1}
        )
        assert bp.npm.name == "demo"

    @pytest.mark.parametrize(
        "declaration",
        [
            None,
            True,
            False,
            ["gulp-sass", "gulp-concat"],
            {"gulp-sass": "^3.0.0", "gulp-concat": None},
            {},
        ],
    )
    def test_task_runner_declaration_shapes(self, declaration: Any):
        bp = Blueprint.model_validate(
            {"version": "1.0.0", "npm": {"name": "demo", "gulp": declaration}}
        )
        assert bp.npm.gulp == declaration

    def test_invalid_structure_rejected(self):
        with pytest.raises(ValidationError):
            Blueprint.model_validate(
                {"version": "1.0.0", "npm": {"name": "demo"}, "structure": {"src": "oops"}}
            )

    @pytest.mark.parametrize(
        "structure",
        [
            {"../escaped": None},
            {"src": {"..": None}},
            {"a/b": None},
            {"src": {"lib\\x": None}},
            {".": None},
        ],
    )
    def test_escaping_structure_rejected(self, structure: dict[str, Any]):
        with pytest.raises(ValidationError, match="plain directory name"):
            Blueprint.model_validate(
                {"version": "1.0.0", "npm": {"name": "demo"}, "structure": structure}
            )


class TestDirectoryTree:
    def test_leaf(self):
        assert to_entry("docs", None) == Leaf("docs")

    def test_nested(self):
        entry = to_entry("src", {"lib": None, "bin": {"tools": None}})
        assert entry == Node("src", (Leaf("lib"), Node("bin", (Leaf("tools"),))))

    def test_empty_mapping_is_node_without_children(self):
        assert to_entry("src", {}) == Node("src", ())

    def test_insertion_order_preserved(self):
        tree = to_tree({"zeta": None, "alpha": None, "mid": None})
        assert [e.name for e in tree] == ["zeta", "alpha", "mid"]

    def test_non_string_names_stringified(self):
        assert to_tree({2024: None}) == (Leaf("2024"),)

    def test_invalid_child_raises(self):
        with pytest.raises(ValueError, match="must map to null or a mapping"):
            to_entry("src", {"lib": ["a", "b"]})

    def test_blueprint_tree(self, full_blueprint: dict[str, Any]):
        bp = Blueprint.model_validate(full_blueprint)
        assert bp.tree() == (
            Node("src", (Leaf("lib"), Leaf("bin"))),
            Leaf("docs"),
        )

    @pytest.mark.parametrize("name", ["..", ".", "", "../escaped", "a/b", "a\\b"])
    def test_unsafe_names_raise(self, name: str):
        with pytest.raises(ValueError, match="plain directory name"):
            to_tree({name: None})


class TestIsPlainName:
    @pytest.mark.parametrize("name", ["src", ".github", "..hidden", "a.b", "my-app", "2024"])
    def test_plain(self, name: str):
        assert is_plain_name(name)

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "/abs", "a\\b", "../x"])
    def test_not_plain(self, name: str):
        assert not is_plain_name(name)
