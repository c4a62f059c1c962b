"""Blueprint loading and version checking.

Reads ``blueprint.yaml`` with PyYAML, validates it into a :class:`Blueprint`
and checks the declared format version against the supported range.
Supported ranges may use npm-style x-ranges (``1.0.x``) or PEP 440
specifiers (``>=1.0,<2``).
"""

from __future__ import annotations

import re
from pathlib import Path

import yaml
from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import Version
from pydantic import ValidationError

from .models import Blueprint


class BlueprintError(Exception):
    """Raised when a blueprint cannot be loaded or is not supported."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


_SEMVER = re.compile(
    r"(?P<major>0|[1-9][0-9]*)\.(?P<minor>0|[1-9][0-9]*)\.(?P<patch>0|[1-9][0-9]*)"
    r"(?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
)
_X_RANGE = re.compile(r"^\s*v?(\d+)(?:\.(\d+|[xX*]))?(?:\.(\d+|[xX*]))?\s*$")


def to_specifier(supported: str) -> SpecifierSet:
    """Translate a supported-version range into a ``SpecifierSet``.

    ``1.0.x`` becomes ``==1.0.*``, ``1.x`` becomes ``==1.*`` and a full
    version such as ``1.0.2`` becomes ``==1.0.2``.  Anything else is parsed
    as a PEP 440 specifier.
    """
    match = _X_RANGE.match(supported)
    if match:
        parts: list[str] = []
        for part in match.groups():
            if part is None:
                break
            if part in ("x", "X", "*"):
                parts.append("*")
                break
            parts.append(part)
        if parts[-1] != "*" and len(parts) < 3:
            parts.append("*")
        return SpecifierSet("==" + ".".join(parts))

    try:
        return SpecifierSet(supported)
    except InvalidSpecifier as exc:
        raise BlueprintError(f"Invalid supported version range: {supported!r}") from exc


def check_version(version: str, supported: str) -> Version:
    """Verify that *version* falls inside the *supported* range.

    *version* must be a strict semver string (``MAJOR.MINOR.PATCH`` with
    optional ``-prerelease`` and ``+build``).  Build metadata is ignored and
    pre-releases never match a range.

    Returns:
        The parsed ``MAJOR.MINOR.PATCH`` version.

    Raises:
        BlueprintError: If the version is not semver or is outside the range.
    """
    unsupported = BlueprintError(
        f"found version: {version}, supported versions: {supported}"
    )
    match = _SEMVER.fullmatch(version)
    if match is None or match.group("pre") is not None:
        raise unsupported

    parsed = Version(".".join(match.group("major", "minor", "patch")))
    if not to_specifier(supported).contains(parsed):
        raise unsupported
    return parsed


def parse_blueprint(text: str, source: str | Path | None = None) -> Blueprint:
    """Parse YAML *text* into a validated :class:`Blueprint`."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise BlueprintError(f"Blueprint is not valid YAML: {exc}", source) from exc

    if not isinstance(raw, dict):
        raise BlueprintError("Blueprint must be a YAML mapping", source)

    try:
        return Blueprint.model_validate(raw)
    except ValidationError as exc:
        raise BlueprintError(f"Invalid blueprint: {exc}", source) from exc


def load_blueprint(path: str | Path) -> Blueprint:
    """Read and parse the blueprint at *path*.

    Raises:
        BlueprintError: If the file is missing, unreadable, not YAML or does
            not match the blueprint schema.
    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise BlueprintError(f"Cannot read blueprint {file_path}: {exc}", file_path) from exc
    return parse_blueprint(text, file_path)
