"""Pydantic v2 models for the blueprint document.

A blueprint declares the project name, its npm dependencies, the task
runners to configure and the directory layout to create.  The ``structure``
mapping is kept as parsed and exposed as a typed ``Leaf`` / ``Node`` tree
through :meth:`Blueprint.tree`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

# A task-runner declaration: disabled (None/False), enabled without plugins
# (True), a bare list of plugin names, or a mapping of plugin name -> pin.
TaskRunnerDeclaration = Union[None, bool, list[str], dict[str, Any]]


# ---------------------------------------------------------------------------
# Directory tree
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Leaf:
    """An empty directory; receives a placeholder marker file."""
    name: str


@dataclass(frozen=True)
class Node:
    """A directory with child directories."""
    name: str
    children: tuple[Union[Leaf, "Node"], ...]


DirEntry = Union[Leaf, Node]


def is_plain_name(name: str) -> bool:
    """True when *name* is a single path segment (no separators, not ``.``/``..``)."""
    return name not in ("", ".", "..") and "/" not in name and "\\" not in name


def to_entry(name: str, children: Optional[Mapping[str, Any]]) -> DirEntry:
    """Convert one ``name: children`` pair of a structure mapping to a tree entry."""
    if not is_plain_name(name):
        raise ValueError(f"Directory name {name!r} must be a plain directory name")
    if children is None:
        return Leaf(name)
    if not isinstance(children, Mapping):
        raise ValueError(
            f"Directory '{name}' must map to null or a mapping, "
            f"got {type(children).__name__}"
        )
    return Node(name, tuple(to_entry(str(k), v) for k, v in children.items()))


def to_tree(structure: Optional[Mapping[str, Any]]) -> tuple[DirEntry, ...]:
    """Convert a whole structure mapping into top-level tree entries."""
    if not structure:
        return ()
    return tuple(to_entry(str(k), v) for k, v in structure.items())


# ---------------------------------------------------------------------------
# Blueprint sections
# ---------------------------------------------------------------------------

class Dependencies(BaseModel):
    """Production and development dependencies (name -> version pin or null)."""
    prod: Optional[dict[str, Any]] = Field(default=None)
    dev: Optional[dict[str, Any]] = Field(default=None)


class NpmSection(BaseModel):
    """The ``npm`` block of a blueprint."""
    name: str = Field(..., min_length=1, description="Package and project folder name")
    gulp: TaskRunnerDeclaration = Field(default=None)
    grunt: TaskRunnerDeclaration = Field(default=None)
    dependencies: Dependencies = Field(default_factory=Dependencies)

    @field_validator("dependencies", mode="before")
    @classmethod
    def _null_dependencies(cls, value: Any) -> Any:
        return {} if value is None else value


class Blueprint(BaseModel):
    """Root blueprint document."""
    version: str = Field(..., description="Blueprint format version, e.g. '1.0.0'")
    npm: NpmSection
    structure: Optional[dict[Any, Any]] = Field(default=None)

    @field_validator("version", mode="before")
    @classmethod
    def _stringify_version(cls, value: Any) -> Any:
        # YAML reads `version: 1.0` as a float.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("structure")
    @classmethod
    def _check_structure(cls, value: Optional[dict[Any, Any]]) -> Optional[dict[Any, Any]]:
        to_tree(value)
        return value

    def tree(self) -> tuple[DirEntry, ...]:
        """The declared directory layout as ``Leaf`` / ``Node`` entries."""
        return to_tree(self.structure)
