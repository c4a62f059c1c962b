"""idd-scaffold scaffolder -- the pieces that write a project to disk.

Quick usage::

    from idd_scaffold.scaffolder import (
        DirectoryTreeBuilder, ManifestBuilder, TaskRunnerGenerator,
        TemplateRenderer, GULP,
    )

    manifest = ManifestBuilder("demo")
    gulp = TaskRunnerGenerator(GULP, TemplateRenderer(), manifest)
    await gulp.generate({"gulp-sass": "^3.0.0"}, project_root)
    manifest.write(project_root)
"""

from idd_scaffold.scaffolder.manifest import Manifest, ManifestBuilder, ManifestError
from idd_scaffold.scaffolder.task_runner import (
    GRUNT,
    GULP,
    TaskRunnerGenerator,
    TaskRunnerResult,
    TaskRunnerTemplate,
)
from idd_scaffold.scaffolder.templates import TemplateRenderer
from idd_scaffold.scaffolder.tree import DirectoryTreeBuilder, build_directory

__all__ = [
    "DirectoryTreeBuilder",
    "GRUNT",
    "GULP",
    "Manifest",
    "ManifestBuilder",
    "ManifestError",
    "TaskRunnerGenerator",
    "TaskRunnerResult",
    "TaskRunnerTemplate",
    "TemplateRenderer",
    "build_directory",
]
