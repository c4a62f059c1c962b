"""Shared pytest fixtures for the idd-scaffold test suite.

Provides reusable fixtures for:
- A temporary working directory with a ``.gitignore`` to copy
- Blueprint documents (dict form and written to ``blueprint.yaml``)
- A ``ScaffoldConfig`` that never touches npm
- An ``ElapsedLogger`` writing to in-memory consoles
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml
from rich.console import Console

from idd_scaffold.config import ScaffoldConfig
from idd_scaffold.utils import ElapsedLogger


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Working directory the tool is invoked from.

    The generated project lands next to it, inside ``tmp_path``.
    """
    work_dir = tmp_path / "workspace"
    work_dir.mkdir()
    (work_dir / ".gitignore").write_text("node_modules/\n", encoding="utf-8")
    yield work_dir


# ---------------------------------------------------------------------------
# Blueprints
# ---------------------------------------------------------------------------

@pytest.fixture
def minimal_blueprint() -> dict[str, Any]:
    """Smallest useful blueprint: no task runners, no dependencies, one dir."""
    return {
        "version": "1.0.0",
        "npm": {
            "name": "demo",
            "gulp": None,
            "grunt": None,
            "dependencies": {"prod": {}, "dev": {}},
        },
        "structure": {"src": None},
    }


@pytest.fixture
def full_blueprint() -> dict[str, Any]:
    """Blueprint exercising both task runners, dependencies and nesting."""
    return {
        "version": "1.0.3",
        "npm": {
            "name": "webapp",
            "gulp": {"gulp-sass": "^3.0.0", "gulp-concat": None},
            "grunt": {"grunt-contrib-uglify": "~2.0.0"},
            "dependencies": {
                "prod": {"lodash": "^4.0.0", "chalk": None},
                "dev": {"mocha": None},
            },
        },
        "structure": {
            "src": {"lib": None, "bin": None},
            "docs": None,
        },
    }


@pytest.fixture
def write_blueprint(workspace: Path) -> Callable[[dict[str, Any]], Path]:
    """Factory that writes a blueprint dict to ``workspace/blueprint.yaml``."""
    def _write(data: dict[str, Any], name: str = "blueprint.yaml") -> Path:
        path = workspace / name
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Configuration & console
# ---------------------------------------------------------------------------

@pytest.fixture
def config(workspace: Path) -> ScaffoldConfig:
    """Config rooted at the workspace with npm installs disabled."""
    return ScaffoldConfig(
        working_dir=workspace,
        install_packages=False,
        install_global_tools=False,
    )


@pytest.fixture
def console_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def error_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def logger(console_buffer: io.StringIO, error_buffer: io.StringIO) -> ElapsedLogger:
    """Logger whose output can be read back from ``console_buffer`` (progress,
    warnings) and ``error_buffer`` (errors)."""
    out = Console(file=console_buffer, width=200, color_system=None)
    err = Console(file=error_buffer, width=200, color_system=None)
    return ElapsedLogger(out, err)
