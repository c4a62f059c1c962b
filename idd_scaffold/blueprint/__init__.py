"""Blueprint document loading.

Usage::

    from idd_scaffold.blueprint import load_blueprint, check_version

    blueprint = load_blueprint("blueprint.yaml")
    check_version(blueprint.version, "1.0.x")
    for entry in blueprint.tree():
        ...
"""

from idd_scaffold.blueprint.loader import (
    BlueprintError,
    check_version,
    load_blueprint,
    parse_blueprint,
)
from idd_scaffold.blueprint.models import (
    Blueprint,
    DirEntry,
    Leaf,
    Node,
    NpmSection,
    is_plain_name,
)

__all__ = [
    "Blueprint",
    "BlueprintError",
    "DirEntry",
    "Leaf",
    "Node",
    "NpmSection",
    "check_version",
    "is_plain_name",
    "load_blueprint",
    "parse_blueprint",
]
