"""Task-runner configuration generation (gulp, grunt).

One :class:`TaskRunnerGenerator` handles both runners; a
:class:`TaskRunnerTemplate` supplies the package names, config file name
and Jinja template that differ between them.  Given a blueprint
declaration, the generator:

- launches a background global install of the runner's CLI,
- registers the runner and its plugins as devDependencies,
- renders a config file wiring the plugins into an empty default task.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from idd_scaffold.blueprint.models import TaskRunnerDeclaration
from idd_scaffold.utils import ElapsedLogger, spawn_detached

from .manifest import ManifestBuilder
from .templates import TemplateRenderer


@dataclass(frozen=True)
class TaskRunnerTemplate:
    """What varies between task runners."""

    runner: str
    cli_package: str
    config_file: str
    template: str


GULP = TaskRunnerTemplate(
    runner="gulp",
    cli_package="gulp",
    config_file="gulpfile.js",
    template="gulpfile.js.j2",
)

GRUNT = TaskRunnerTemplate(
    runner="grunt",
    cli_package="grunt-cli",
    config_file="Gruntfile.js",
    template="Gruntfile.js.j2",
)


@dataclass
class TaskRunnerResult:
    """Outcome of one generator run."""

    runner: str
    config_path: Path
    plugins: list[str] = field(default_factory=list)


def is_enabled(declaration: TaskRunnerDeclaration) -> bool:
    """``None`` and ``False`` switch a runner off; anything else enables it."""
    return declaration is not None and declaration is not False


def split_declaration(
    declaration: TaskRunnerDeclaration,
) -> tuple[list[str], dict[str, Any]]:
    """Split a declaration into ``(plugin names, pins to register)``.

    A mapping yields its keys and itself; a bare list yields its names and
    no pins; a bare enable signal yields neither.
    """
    if isinstance(declaration, Mapping):
        return [str(name) for name in declaration], dict(declaration)
    if isinstance(declaration, list):
        return [str(name) for name in declaration], {}
    return [], {}


class TaskRunnerGenerator:
    """Generates a task-runner config file and its devDependencies."""

    def __init__(
        self,
        template: TaskRunnerTemplate,
        renderer: TemplateRenderer,
        manifest: ManifestBuilder,
        *,
        install_cli: bool = True,
        npm_command: str = "npm",
        logger: ElapsedLogger | None = None,
        launcher: Callable[[list[str]], Any] = spawn_detached,
    ) -> None:
        self.template = template
        self.renderer = renderer
        self.manifest = manifest
        self.install_cli = install_cli
        self.npm_command = npm_command
        self.logger = logger or ElapsedLogger()
        self.launcher = launcher

    @property
    def install_command(self) -> list[str]:
        return [self.npm_command, "install", self.template.cli_package, "--global"]

    async def generate(
        self,
        declaration: TaskRunnerDeclaration,
        project_root: Path,
    ) -> Optional[TaskRunnerResult]:
        """Configure the task runner for *declaration*.

        Returns:
            ``None`` when the runner is not declared, otherwise the written
            config path and the plugins it wires in.
        """
        if not is_enabled(declaration):
            return None

        runner = self.template.runner
        if self.install_cli:
            self.logger.log(f"installing {runner} globally, asynchronously...")
            # Never awaited or checked; the CLI is only needed once a
            # developer runs the generated config.
            self.launcher(self.install_command)

        self.logger.log(f"configuring {runner}...")
        plugins, pins = split_declaration(declaration)
        # A pin for the runner itself overrides "latest" but is not a plugin.
        plugins = [name for name in plugins if name != runner]
        self.manifest.add_dev_dependency(runner)
        self.manifest.add_dev_dependencies(pins)

        context = {"runner": runner, "plugins": plugins}
        config_path = await self.renderer.render_to_file(
            self.template.template,
            Path(project_root) / self.template.config_file,
            context,
        )
        return TaskRunnerResult(runner=runner, config_path=config_path, plugins=plugins)
