"""Directory tree creation from a blueprint ``structure``.

Leaf directories get an empty ``.gitkeep`` so git keeps them; directories
with children are populated recursively in declaration order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from idd_scaffold.blueprint.models import DirEntry, Leaf, is_plain_name, to_entry

MARKER_FILE = ".gitkeep"


class DirectoryTreeBuilder:
    """Creates directory trees and records what it wrote."""

    def __init__(self, marker: str = MARKER_FILE) -> None:
        self.marker = marker
        self.created_dirs: list[Path] = []
        self.markers: list[Path] = []

    def build(self, parent: str | Path, entry: DirEntry) -> Path:
        """Create *entry* under *parent*, recursing into its children.

        Existing directories are reused.  Filesystem errors propagate.

        Returns:
            Path of the directory created for *entry*.

        Raises:
            ValueError: If an entry name is not a single path segment.
        """
        if not is_plain_name(entry.name):
            raise ValueError(f"Directory name {entry.name!r} must be a plain directory name")
        directory = Path(parent) / entry.name
        directory.mkdir(parents=True, exist_ok=True)
        self.created_dirs.append(directory)

        if isinstance(entry, Leaf):
            marker = directory / self.marker
            marker.write_text("", encoding="utf-8")
            self.markers.append(marker)
        else:
            for child in entry.children:
                self.build(directory, child)
        return directory

    def build_all(self, parent: str | Path, entries: Iterable[DirEntry]) -> list[Path]:
        """Create every top-level entry under *parent*."""
        return [self.build(parent, entry) for entry in entries]


def build_directory(
    parent: str | Path,
    name: str,
    children: Mapping[str, Any] | None,
) -> Path:
    """Create ``parent/name`` from an untyped ``name: children`` pair.

    ``children`` is ``None`` for an empty leaf directory or a mapping of the
    same shape for a directory with subdirectories.
    """
    return DirectoryTreeBuilder().build(parent, to_entry(name, children))
