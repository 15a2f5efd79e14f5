"""Project generation.

Takes a ``ProjectChoices`` and writes a complete backend skeleton: the
framework baseline directories, the ``src/`` tree of the chosen
organizational style and the framework's configuration and source files.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import providers
from .docker_gen import DockerGenerator
from .materializer import (
    FilesystemError,
    MaterializationReport,
    make_executable,
    materialize,
    write_file,
)
from .providers import Framework
from .structures import StructureStyle, get_structure


# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------


class ProjectChoices(BaseModel):
    """Answers collected from the user; immutable once captured."""

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(..., description="Directory and package name")
    structure_style: StructureStyle = Field(default=StructureStyle.LAYERED)
    framework: Framework = Field(default=Framework.PLAIN)
    install_dependencies: bool = Field(default=False)
    initialize_version_control: bool = Field(default=False)
    attempt_auto_fix: bool = Field(default=False)

    @field_validator("project_name", mode="before")
    @classmethod
    def _check_name(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("Project name is required")
            if value in (".", "..") or "/" in value or "\\" in value:
                raise ValueError(
                    f"Project name {value!r} must be a single directory name"
                )
        return value


# ---------------------------------------------------------------------------
# Framework file plans
# ---------------------------------------------------------------------------

BASELINE_DIRS: dict[Framework, tuple[str, ...]] = {
    Framework.PLAIN: ("src", "src/config", "logs", ".husky"),
    Framework.NEST: ("src", "test", ".husky"),
}

GIT_HOOK_PATH = ".husky/pre-commit"


def file_plan(choices: ProjectChoices) -> list[tuple[str, str]]:
    """Return the ordered ``(relative path, content)`` list for *choices*.

    Container files are not part of the plan; ``DockerGenerator`` owns them.
    """
    plan: list[tuple[str, str]] = [
        ("package.json", providers.manifest_content(choices.project_name, choices.framework)),
        ("tsconfig.json", providers.compiler_config_content()),
        (
            "README.md",
            providers.readme_content(
                choices.project_name, choices.framework, choices.structure_style
            ),
        ),
        (".env", providers.env_content()),
        (".eslintrc.json", providers.eslint_config_content()),
        (".eslintignore", providers.eslint_ignore_content()),
        (".prettierrc", providers.prettier_config_content()),
        (".prettierignore", providers.prettier_ignore_content()),
        ("jest.config.js", providers.jest_config_content()),
        (GIT_HOOK_PATH, providers.git_hook_content()),
        (".lintstagedrc.json", providers.lint_staged_config_content()),
        (".gitignore", providers.gitignore_content()),
    ]

    if choices.framework is Framework.NEST:
        plan.extend([
            ("src/main.ts", providers.nest_entry_point_content()),
            ("src/app.module.ts", providers.nest_module_content()),
            ("src/app.controller.ts", providers.nest_controller_content()),
            ("src/app.service.ts", providers.nest_service_content()),
            ("nest-cli.json", providers.nest_cli_config_content()),
            ("test/jest-e2e.json", providers.nest_e2e_config_content()),
        ])
    else:
        plan.extend([
            ("src/app.ts", providers.entry_point_content()),
            ("src/config/logger.ts", providers.logger_config_content()),
        ])

    return plan


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


@dataclass
class GenerationResult:
    """What one ``ProjectGenerator.generate`` call put on disk."""

    root: Path
    files: list[Path] = field(default_factory=list)
    structure: MaterializationReport = field(default_factory=MaterializationReport)


class ProjectGenerator:
    """Writes a project skeleton for one set of choices."""

    def __init__(self, choices: ProjectChoices) -> None:
        self.choices = choices
        self.docker_gen = DockerGenerator(choices.framework)

    async def generate(self, root: str | Path) -> GenerationResult:
        """Generate the project under *root*, which must not exist yet.

        Raises:
            FilesystemError: If *root* already exists or any path cannot be
                created.  Paths written before the failure are kept.
        """
        root = Path(root)
        await asyncio.to_thread(_create_root, root)
        result = GenerationResult(root=root)

        # 1. Framework baseline directories
        for rel in BASELINE_DIRS[self.choices.framework]:
            await asyncio.to_thread(_ensure_dir, root / rel)

        # 2. Organizational style under src/
        descriptor = get_structure(self.choices.structure_style)
        await materialize(root / "src", descriptor, result.structure)

        # 3. Configuration and source files
        for rel, content in file_plan(self.choices):
            path = root / rel
            await write_file(path, content)
            result.files.append(path)

        # 4. Container files
        containers = await self.docker_gen.generate_all(root)
        result.files.extend(containers.values())

        await make_executable(root / GIT_HOOK_PATH)
        return result


def _create_root(root: Path) -> None:
    try:
        root.mkdir(parents=True)
    except FileExistsError as exc:
        raise FilesystemError(root, "target directory already exists") from exc
    except OSError as exc:
        raise FilesystemError(root, exc.strerror or str(exc)) from exc


def _ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(path, exc.strerror or str(exc)) from exc
