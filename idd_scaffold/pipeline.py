"""idd-scaffold pipeline orchestrator.

Turns ``blueprint.yaml`` into a new project next to the working directory:

1. load the blueprint and check its version
2. (re)create the project folder
3. write README / LICENSE / .gitignore and run ``git init``
4. configure gulp, then grunt
5. merge dependencies, write ``package.json`` and run ``npm install``
6. create the declared directory structure

Every step runs to completion before the next starts and the first failure
stops the run.  Partially created projects are left in place.

Usage::

    python -m idd_scaffold.pipeline
    python -m idd_scaffold.pipeline --blueprint other.yaml --output /tmp
"""

from __future__ import annotations

import asyncio
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from idd_scaffold.blueprint import (
    Blueprint,
    BlueprintError,
    check_version,
    is_plain_name,
    load_blueprint,
)
from idd_scaffold.config import ScaffoldConfig
from idd_scaffold.scaffolder import (
    GRUNT,
    GULP,
    DirectoryTreeBuilder,
    ManifestBuilder,
    ManifestError,
    TaskRunnerGenerator,
    TaskRunnerTemplate,
    TemplateRenderer,
)
from idd_scaffold.utils import (
    ElapsedLogger,
    format_elapsed,
    print_summary_table,
    run_command,
    spawn_detached,
)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ScaffoldError(Exception):
    """Raised when a pipeline step fails.  Every failure ends the run."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(f"{step}: {message}")


@dataclass
class ScaffoldResult:
    """What a successful run produced."""

    project_path: Path
    manifest: dict[str, Any]
    config_files: list[Path] = field(default_factory=list)
    directories: list[Path] = field(default_factory=list)
    elapsed: float = 0.0


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class ScaffoldPipeline:
    """Runs the scaffolding steps over one blueprint.

    Attributes:
        config: Run configuration.
        manifest: The ``package.json`` under construction, shared with the
            task-runner generators.
        blueprint: The loaded blueprint (set by the first step).
        project_path: The project folder (set by ``create_project_folder``).
    """

    _STEPS: tuple[tuple[str, str], ...] = (
        ("load", "load_blueprint"),
        ("version", "check_version"),
        ("project folder", "create_project_folder"),
        ("initialize", "initialize_project"),
        ("gulp", "configure_gulp"),
        ("grunt", "configure_grunt"),
        ("npm", "install_dependencies"),
        ("structure", "create_structure"),
    )

    def __init__(
        self,
        config: ScaffoldConfig,
        logger: ElapsedLogger | None = None,
        launcher: Callable[[list[str]], Any] = spawn_detached,
    ) -> None:
        self.config = config
        self.logger = logger or ElapsedLogger()
        self.renderer = TemplateRenderer()
        self.manifest = ManifestBuilder()
        self.tree_builder = DirectoryTreeBuilder()
        self.blueprint: Blueprint | None = None
        self.project_path: Path | None = None
        self.config_files: list[Path] = []
        self.gulp = self._task_runner(GULP, launcher)
        self.grunt = self._task_runner(GRUNT, launcher)

    def _task_runner(
        self, template: TaskRunnerTemplate, launcher: Callable[[list[str]], Any]
    ) -> TaskRunnerGenerator:
        return TaskRunnerGenerator(
            template,
            self.renderer,
            self.manifest,
            install_cli=self.config.install_global_tools,
            npm_command=self.config.npm_command,
            logger=self.logger,
            launcher=launcher,
        )

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    async def run(self) -> ScaffoldResult:
        """Execute every step in order.

        Raises:
            ScaffoldError: On the first failing step.
        """
        self.logger.restart()

        for step, method_name in self._STEPS:
            method = getattr(self, method_name)
            try:
                await method()
            except ScaffoldError:
                raise
            except (BlueprintError, ManifestError, OSError) as exc:
                raise ScaffoldError(step, str(exc)) from exc

        self.logger.log("done. project is scaffolded.")
        result = ScaffoldResult(
            project_path=self.project_path,
            manifest=self.manifest.manifest.to_dict(),
            config_files=list(self.config_files),
            directories=list(self.tree_builder.created_dirs),
            elapsed=self.logger.elapsed,
        )
        self._print_summary(result)
        return result

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def load_blueprint(self) -> None:
        self.logger.log("loading blueprint...")
        self.blueprint = await asyncio.to_thread(load_blueprint, self.config.blueprint_path)
        self.logger.log(self.blueprint.model_dump_json())

    async def check_version(self) -> None:
        self.logger.log("checking version support...")
        check_version(self._require_blueprint().version, self.config.supported_versions)

    async def create_project_folder(self) -> None:
        """Compute the project folder, removing any previous one first."""
        self.logger.log("creating project folder...")
        name = self._require_blueprint().npm.name
        if not is_plain_name(name):
            raise ScaffoldError(
                "project folder",
                f"project name {name!r} must be a plain directory name",
            )

        project_path = self.config.project_path(name)
        self.manifest.set_name(name)
        await asyncio.to_thread(_recreate_dir, project_path)
        self.project_path = project_path

    async def initialize_project(self) -> None:
        """Write README, LICENSE and .gitignore, then ``git init``."""
        self.logger.log("initializing project...")
        root = self._require_project()
        await self.renderer.render_to_file(
            "README.md.j2",
            root / "README.md",
            {"project_name": self._require_blueprint().npm.name},
        )
        await asyncio.to_thread((root / "LICENSE").write_text, "", "utf-8")
        await asyncio.to_thread(shutil.copyfile, self.config.ignore_path, root / ".gitignore")

        returncode, _, stderr = await run_command(
            [self.config.git_command, "init"], cwd=root
        )
        if returncode != 0:
            self.logger.warning(f"git init exited with {returncode}: {stderr}")

    async def configure_gulp(self) -> None:
        result = await self.gulp.generate(
            self._require_blueprint().npm.gulp, self._require_project()
        )
        if result is not None:
            self.config_files.append(result.config_path)

    async def configure_grunt(self) -> None:
        result = await self.grunt.generate(
            self._require_blueprint().npm.grunt, self._require_project()
        )
        if result is not None:
            self.config_files.append(result.config_path)

    async def install_dependencies(self) -> None:
        """Merge blueprint dependencies, write ``package.json``, run ``npm install``."""
        self.logger.log("running npm...")
        root = self._require_project()
        dependencies = self._require_blueprint().npm.dependencies
        self.manifest.add_dependencies(dependencies.prod)
        self.manifest.add_dev_dependencies(dependencies.dev)
        await asyncio.to_thread(self.manifest.write, root)

        if not self.config.install_packages:
            self.logger.log("skipping npm install")
            return

        returncode, _, stderr = await run_command(
            [self.config.npm_command, "install"], cwd=root
        )
        if returncode != 0:
            self.logger.warning(f"npm install exited with {returncode}: {stderr}")

    async def create_structure(self) -> None:
        self.logger.log("creating project structure...")
        await asyncio.to_thread(
            self.tree_builder.build_all,
            self._require_project(),
            self._require_blueprint().tree(),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_blueprint(self) -> Blueprint:
        if self.blueprint is None:
            raise ScaffoldError("load", "blueprint has not been loaded")
        return self.blueprint

    def _require_project(self) -> Path:
        if self.project_path is None:
            raise ScaffoldError("project folder", "project folder has not been created")
        return self.project_path

    def _print_summary(self, result: ScaffoldResult) -> None:
        print_summary_table(
            {
                "Project": str(result.project_path),
                "Dependencies": str(len(result.manifest["dependencies"])),
                "Dev dependencies": str(len(result.manifest["devDependencies"])),
                "Config files": ", ".join(p.name for p in result.config_files) or "-",
                "Directories": str(len(result.directories)),
                "Duration": format_elapsed(result.elapsed),
            },
            title="Scaffold Results",
        )


def _recreate_dir(path: Path) -> None:
    """Delete whatever is at *path* and create an empty directory there."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()
    path.mkdir(parents=True)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``idd-scaffold`` / ``python -m idd_scaffold.pipeline``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Scaffold an npm project from a YAML blueprint",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  idd-scaffold\n"
            "  idd-scaffold --blueprint web.yaml --output ~/projects\n"
            "  idd-scaffold --no-install --no-global-tools\n"
        ),
    )
    parser.add_argument(
        "--blueprint", "-b",
        default=None,
        help="Blueprint file, relative to the working directory (default: blueprint.yaml)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Directory to create the project in (default: parent of the working directory)",
    )
    parser.add_argument(
        "--ignore-file",
        default=None,
        help="Ignore file to copy into the project (default: ./.gitignore)",
    )
    parser.add_argument(
        "--no-install",
        action="store_true",
        help="Write package.json without running npm install",
    )
    parser.add_argument(
        "--no-global-tools",
        action="store_true",
        help="Do not launch global installs of the gulp / grunt CLIs",
    )

    args = parser.parse_args(argv)

    overrides: dict[str, Any] = {}
    if args.blueprint:
        overrides["blueprint_file"] = args.blueprint
    if args.output:
        overrides["output_dir"] = Path(args.output)
    if args.ignore_file:
        overrides["ignore_file"] = Path(args.ignore_file)
    if args.no_install:
        overrides["install_packages"] = False
    if args.no_global_tools:
        overrides["install_global_tools"] = False

    config = ScaffoldConfig.from_env().model_copy(update=overrides)

    pipeline = ScaffoldPipeline(config)
    try:
        asyncio.run(pipeline.run())
    except ScaffoldError as exc:
        pipeline.logger.error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
