"""idd-scaffold configuration.

Typed configuration for a scaffolding run.  Settings are Pydantic v2 models
so they are validated at construction time and can be built from the CLI or
from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

SUPPORTED_VERSIONS = "1.0.x"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class ScaffoldConfig(BaseModel):
    """Settings for one scaffolding run.

    Paths that are left unset are derived from ``working_dir``: the blueprint
    and ignore file are read from it and the project is created next to it.
    """

    working_dir: Path = Field(default_factory=Path.cwd)
    blueprint_file: str = Field(default="blueprint.yaml")
    output_dir: Path | None = Field(
        default=None,
        description="Directory the project folder is created in (default: parent of working_dir)",
    )
    ignore_file: Path | None = Field(
        default=None,
        description="Ignore file copied into the project (default: working_dir/.gitignore)",
    )
    supported_versions: str = Field(default=SUPPORTED_VERSIONS)
    install_packages: bool = Field(
        default=True, description="Run the package installer inside the new project"
    )
    install_global_tools: bool = Field(
        default=True, description="Launch background global installs of task-runner CLIs"
    )
    npm_command: str = Field(default="npm")
    git_command: str = Field(default="git")

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def blueprint_path(self) -> Path:
        """Location of the blueprint document."""
        return self.working_dir / self.blueprint_file

    @property
    def projects_dir(self) -> Path:
        """Directory that receives the generated project folder."""
        if self.output_dir is not None:
            return self.output_dir
        return self.working_dir.parent

    @property
    def ignore_path(self) -> Path:
        if self.ignore_file is not None:
            return self.ignore_file
        return self.working_dir / ".gitignore"

    def project_path(self, name: str) -> Path:
        """Path of the project folder for a project called *name*."""
        return Path(os.path.normpath(self.projects_dir / name))

    @classmethod
    def from_env(cls) -> "ScaffoldConfig":
        """Build a ``ScaffoldConfig`` from environment variables.

        Recognised variables (all optional):
            IDD_WORKING_DIR, IDD_BLUEPRINT, IDD_OUTPUT_DIR, IDD_IGNORE_FILE,
            IDD_SUPPORTED_VERSIONS, IDD_INSTALL_PACKAGES,
            IDD_INSTALL_GLOBAL_TOOLS, IDD_NPM, IDD_GIT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("IDD_WORKING_DIR"):
            kwargs["working_dir"] = Path(os.environ["IDD_WORKING_DIR"])
        if os.environ.get("IDD_BLUEPRINT"):
            kwargs["blueprint_file"] = os.environ["IDD_BLUEPRINT"]
        if os.environ.get("IDD_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["IDD_OUTPUT_DIR"])
        if os.environ.get("IDD_IGNORE_FILE"):
            kwargs["ignore_file"] = Path(os.environ["IDD_IGNORE_FILE"])
        if os.environ.get("IDD_SUPPORTED_VERSIONS"):
            kwargs["supported_versions"] = os.environ["IDD_SUPPORTED_VERSIONS"]
        if os.environ.get("IDD_NPM"):
            kwargs["npm_command"] = os.environ["IDD_NPM"]
        if os.environ.get("IDD_GIT"):
            kwargs["git_command"] = os.environ["IDD_GIT"]

        return cls(
            install_packages=_env_flag("IDD_INSTALL_PACKAGES", True),
            install_global_tools=_env_flag("IDD_INSTALL_GLOBAL_TOOLS", True),
            **kwargs,
        )
