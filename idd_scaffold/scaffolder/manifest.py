"""``package.json`` assembly.

The :class:`ManifestBuilder` owns the manifest for the duration of a run.
The task-runner generators and the pipeline merge dependencies into it, and
it is written to the project root exactly once at the end.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from idd_scaffold.utils import dump_json

MANIFEST_FILE = "package.json"
DEFAULT_PIN = "latest"


class ManifestError(Exception):
    """Raised when the manifest is misused (e.g. written twice)."""


# ---------------------------------------------------------------------------
# Manifest model
# ---------------------------------------------------------------------------

class Bugs(BaseModel):
    email: str = ""
    url: str = ""


class Author(BaseModel):
    email: str = ""
    name: str = ""
    url: str = ""


class Repository(BaseModel):
    type: str = "git"
    url: str = ""


class Manifest(BaseModel):
    """The npm package descriptor, serialised with its camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    version: str = ""
    description: str = ""
    keywords: list[str] = Field(default_factory=list)
    homepage: str = ""
    bugs: Bugs = Field(default_factory=Bugs)
    license: str = ""
    author: Author = Field(default_factory=Author)
    contributors: list[Any] = Field(default_factory=list)
    repository: Repository = Field(default_factory=Repository)
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")
    prefer_global: bool = Field(default=False, alias="preferGlobal")
    private: bool = False

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def resolve_pin(pin: Any) -> str:
    """Return the version pin to record: the declared one, or ``latest``."""
    if pin is None or pin is False or pin == "":
        return DEFAULT_PIN
    return str(pin)


def _merge(target: dict[str, str], source: Optional[Mapping[str, Any]]) -> None:
    if not source:
        return
    for name, pin in source.items():
        target[str(name)] = resolve_pin(pin)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class ManifestBuilder:
    """Accumulates manifest fields and writes ``package.json`` once."""

    def __init__(self, name: str = "") -> None:
        self.manifest = Manifest(name=name)
        self.written_to: Path | None = None

    @property
    def dependencies(self) -> dict[str, str]:
        return self.manifest.dependencies

    @property
    def dev_dependencies(self) -> dict[str, str]:
        return self.manifest.dev_dependencies

    def set_name(self, name: str) -> None:
        self.manifest.name = name

    def add_dependencies(self, source: Optional[Mapping[str, Any]]) -> None:
        """Merge ``name -> pin`` entries into ``dependencies``."""
        _merge(self.manifest.dependencies, source)

    def add_dev_dependencies(self, source: Optional[Mapping[str, Any]]) -> None:
        """Merge ``name -> pin`` entries into ``devDependencies``."""
        _merge(self.manifest.dev_dependencies, source)

    def add_dev_dependency(self, name: str, pin: Any = None) -> None:
        self.manifest.dev_dependencies[name] = resolve_pin(pin)

    def render(self) -> str:
        """Return the manifest as pretty-printed JSON."""
        return dump_json(self.manifest.to_dict())

    def write(self, project_root: str | Path) -> Path:
        """Write ``package.json`` into *project_root*.

        Raises:
            ManifestError: If the manifest has already been written.
            OSError: If the file cannot be written.
        """
        if self.written_to is not None:
            raise ManifestError(f"Manifest already written to {self.written_to}")
        path = Path(project_root) / MANIFEST_FILE
        path.write_text(self.render(), encoding="utf-8")
        self.written_to = path
        return path
