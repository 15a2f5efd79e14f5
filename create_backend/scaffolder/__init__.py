"""create-backend scaffolder -- writes backend project skeletons.

This package turns a ``ProjectChoices`` into a directory tree: a structure
descriptor per organizational style, the materializer that reproduces it on
disk, and the template providers for every configuration file.

Quick usage::

    from create_backend.scaffolder import ProjectChoices, ProjectGenerator

    choices = ProjectChoices(project_name="my-api", structure_style="ddd")
    result = await ProjectGenerator(choices).generate("/tmp/my-api")
"""

from create_backend.scaffolder.generator import (
    GenerationResult,
    ProjectChoices,
    ProjectGenerator,
    file_plan,
)
from create_backend.scaffolder.materializer import (
    FilesystemError,
    MaterializationOutcome,
    MaterializationReport,
    materialize,
    write_file,
)
from create_backend.scaffolder.providers import Framework
from create_backend.scaffolder.structures import (
    STRUCTURES,
    Directory,
    File,
    StructureStyle,
    get_structure,
)
from create_backend.scaffolder.templates import TemplateRenderer

__all__ = [
    "STRUCTURES",
    "Directory",
    "File",
    "FilesystemError",
    "Framework",
    "GenerationResult",
    "MaterializationOutcome",
    "MaterializationReport",
    "ProjectChoices",
    "ProjectGenerator",
    "StructureStyle",
    "TemplateRenderer",
    "file_plan",
    "get_structure",
    "materialize",
    "write_file",
]
