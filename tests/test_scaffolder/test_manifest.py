"""Tests for package.json assembly.

Covers:
- Manifest defaults and key names / order
- Dependency merge semantics (pins, null -> latest, no-op, last write wins)
- JSON rendering round-trip
- Write-once behaviour
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from idd_scaffold.scaffolder.manifest import (
    DEFAULT_PIN,
    MANIFEST_FILE,
    Manifest,
    ManifestBuilder,
    ManifestError,
    resolve_pin,
)

pytestmark = pytest.mark.unit


class TestManifestModel:
    def test_defaults(self):
        data = Manifest().to_dict()
        assert list(data) == [
            "name", "version", "description", "keywords", "homepage", "bugs",
            "license", "author", "contributors", "repository", "dependencies",
            "devDependencies", "preferGlobal", "private",
        ]
        assert data["bugs"] == {"email": "", "url": ""}
        assert data["author"] == {"email": "", "name": "", "url": ""}
        assert data["repository"] == {"type": "git", "url": ""}
        assert data["dependencies"] == {}
        assert data["devDependencies"] == {}
        assert data["preferGlobal"] is False
        assert data["private"] is False

    def test_populate_by_alias_or_name(self):
        assert Manifest(devDependencies={"a": "1"}).dev_dependencies == {"a": "1"}
        assert Manifest(dev_dependencies={"a": "1"}).dev_dependencies == {"a": "1"}


class TestResolvePin:
    @pytest.mark.parametrize("pin", [None, "", False])
    def test_missing_pin_is_latest(self, pin):
        assert resolve_pin(pin) == DEFAULT_PIN == "latest"

    def test_pin_used_verbatim(self):
        assert resolve_pin("^4.0.0") == "^4.0.0"

    def test_numeric_pin_stringified(self):
        assert resolve_pin(3) == "3"


class TestManifestBuilder:
    def test_merge_dependencies(self):
        builder = ManifestBuilder("demo")
        builder.add_dependencies({"lodash": "^4.0.0", "chalk": None})
        assert builder.dependencies == {"lodash": "^4.0.0", "chalk": "latest"}

    @pytest.mark.parametrize("source", [None, {}])
    def test_merge_empty_is_noop(self, source):
        builder = ManifestBuilder("demo")
        builder.add_dependencies({"lodash": "^4.0.0"})
        builder.add_dependencies(source)
        builder.add_dev_dependencies(source)
        assert builder.dependencies == {"lodash": "^4.0.0"}
        assert builder.dev_dependencies == {}

    def test_last_write_wins(self):
        builder = ManifestBuilder()
        builder.add_dev_dependency("gulp")
        builder.add_dev_dependencies({"gulp": "^4.0.0"})
        assert builder.dev_dependencies == {"gulp": "^4.0.0"}

    def test_single_dev_dependency(self):
        builder = ManifestBuilder()
        builder.add_dev_dependency("grunt")
        builder.add_dev_dependency("grunt-contrib-uglify", "~2.0.0")
        assert builder.dev_dependencies == {"grunt": "latest", "grunt-contrib-uglify": "~2.0.0"}

    def test_set_name(self):
        builder = ManifestBuilder()
        builder.set_name("demo")
        assert builder.manifest.name == "demo"

    def test_render_round_trip(self):
        builder = ManifestBuilder("demo")
        builder.add_dependencies({"lodash": "^4.0.0", "chalk": None})
        builder.add_dev_dependencies({"mocha": None})
        text = builder.render()
        assert text.endswith("\n")
        data = json.loads(text)
        assert data == builder.manifest.to_dict()
        assert Manifest.model_validate(data) == builder.manifest

    def test_write(self, tmp_path: Path):
        builder = ManifestBuilder("demo")
        path = builder.write(tmp_path)
        assert path == tmp_path / MANIFEST_FILE
        assert json.loads(path.read_text(encoding="utf-8"))["name"] == "demo"
        assert builder.written_to == path

    def test_write_only_once(self, tmp_path: Path):
        builder = ManifestBuilder("demo")
        builder.write(tmp_path)
        with pytest.raises(ManifestError, match="already written"):
            builder.write(tmp_path)

    def test_write_to_missing_dir_raises(self, tmp_path: Path):
        with pytest.raises(OSError):
            ManifestBuilder("demo").write(tmp_path / "missing")
