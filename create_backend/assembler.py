"""Project assembly: the top-level control flow of one generator run.

Order of a run:

1. Ask name, framework, structure (and the git / install confirmations).
2. Refuse to continue if the target directory exists; nothing is written.
3. Generate the skeleton (baseline dirs, style tree, templates).
4. Optionally ``git init``.
5. Optionally run the install flow, then offer the auto-fix.
6. Print a summary with next steps for the chosen framework.

Input errors, target collisions and the runtime gate are fatal.  Tool
failures after generation are reported and the run still succeeds.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .config import GeneratorConfig
from .prompts import (
    AUTO_FIX_QUESTION,
    INSTALL_QUESTION,
    PROJECT_QUESTIONS,
    VCS_QUESTION,
    Asker,
    ask,
)
from .scaffolder.generator import GenerationResult, ProjectChoices, ProjectGenerator
from .scaffolder.materializer import MaterializationOutcome
from .scaffolder.providers import Framework
from .tooling import InstallFlow, ToolRunner
from .utils import (
    console,
    print_hint,
    print_step,
    print_success,
    print_summary_table,
)


class ExitStatus(IntEnum):
    SUCCESS = 0
    INVALID_INPUT = 2
    TARGET_EXISTS = 3
    RUNTIME_VERSION = 4
    FILESYSTEM = 5
    INTERRUPTED = 130


class AssemblyError(Exception):
    """Fatal error that ends the run with a specific exit status."""

    status = ExitStatus.INVALID_INPUT

    def __init__(self, message: str, remedy: str = "") -> None:
        self.remedy = remedy
        super().__init__(message)


class InputError(AssemblyError):
    status = ExitStatus.INVALID_INPUT


class TargetExistsError(AssemblyError):
    status = ExitStatus.TARGET_EXISTS


@dataclass
class AssemblyReport:
    """Everything one run did; used for the summary and by tests."""

    choices: ProjectChoices
    root: Path
    generation: GenerationResult
    vcs_initialized: bool | None = None
    install_flow: InstallFlow | None = None


class ProjectAssembler:
    """Drives one interactive run from questions to summary."""

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        *,
        asker: Asker | None = None,
        runner: ToolRunner | None = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self.asker = asker
        self.runner = runner or ToolRunner(self.config)

    # -- Steps -------------------------------------------------------------

    def collect_choices(self) -> ProjectChoices:
        """Ask the project questions and validate the answers.

        Raises:
            InputError: If the project name is missing or invalid.
        """
        answers: dict[str, Any] = ask(PROJECT_QUESTIONS, asker=self.asker)
        name = answers.get("project_name")
        if not name or not str(name).strip():
            raise InputError("Aborted: Project name is required.")
        try:
            return ProjectChoices(
                project_name=str(name),
                framework=answers.get("framework") or Framework.PLAIN,
                structure_style=answers.get("structure_style"),
            )
        except ValidationError as exc:
            details = "; ".join(err["msg"] for err in exc.errors())
            raise InputError(f"Aborted: {details}") from exc

    def resolve_root(self, choices: ProjectChoices) -> Path:
        """Return the target directory for *choices*.

        Raises:
            TargetExistsError: If the directory already exists.
        """
        root = Path(self.config.output_dir) / choices.project_name
        # A dangling symlink reports exists() == False but still occupies the name.
        if root.exists() or root.is_symlink():
            raise TargetExistsError(
                f"Folder {choices.project_name} already exists.",
                remedy="Choose another name or delete the folder.",
            )
        return root.resolve()

    def collect_options(self, choices: ProjectChoices) -> ProjectChoices:
        answers = ask((VCS_QUESTION, INSTALL_QUESTION), asker=self.asker)
        return choices.model_copy(update={
            "initialize_version_control": bool(answers.get(VCS_QUESTION.name)),
            "install_dependencies": bool(answers.get(INSTALL_QUESTION.name)),
        })

    # -- Run ---------------------------------------------------------------

    async def assemble(self) -> AssemblyReport:
        """Run every step and return the report.

        Raises:
            AssemblyError: On invalid input or an existing target directory.
            RuntimeVersionError: If the runtime gate fails before installing.
            FilesystemError: If the skeleton cannot be written.
        """
        choices = self.collect_choices()
        root = self.resolve_root(choices)
        choices = self.collect_options(choices)

        print_step("Generating project")
        generation = await ProjectGenerator(choices).generate(root)
        print_success(
            f'Project "{choices.project_name}" created with '
            f"{choices.framework.label} and {choices.structure_style.label} structure!"
        )
        report = AssemblyReport(choices=choices, root=root, generation=generation)

        if choices.initialize_version_control:
            print_step("Version control")
            report.vcs_initialized = await self.runner.initialize_version_control(root)

        if choices.install_dependencies:
            print_step("Dependencies")
            flow = InstallFlow(self.runner, root)
            report.install_flow = flow
            await flow.run()
            fix_answer = ask((AUTO_FIX_QUESTION,), asker=self.asker)
            if fix_answer.get(AUTO_FIX_QUESTION.name):
                choices = choices.model_copy(update={"attempt_auto_fix": True})
                report.choices = choices
                await flow.auto_fix()
            flow.finish()

        print_summary(report)
        return report


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

_FRAMEWORK_FEATURES: dict[Framework, tuple[str, ...]] = {
    Framework.PLAIN: (
        "Express with TypeScript",
        "Environment variables (.env)",
        "Winston logging",
        "Security middleware (helmet, cors)",
    ),
    Framework.NEST: (
        "Dependency injection",
        "Modular architecture",
        "CLI for code generation",
    ),
}

COMMON_FEATURES: tuple[str, ...] = (
    "Jest testing setup",
    "ESLint + Prettier",
    "Docker support",
    "Husky git hooks",
)


def framework_features(framework: Framework) -> tuple[str, ...]:
    return _FRAMEWORK_FEATURES[framework]


def next_steps(choices: ProjectChoices, *, installed: bool = False) -> list[str]:
    """Commands to get going with the generated project."""
    steps = [f"cd {choices.project_name}"]
    if not installed:
        steps.append("npm install")
    if choices.framework is Framework.NEST:
        steps.append("npm run start:dev")
    else:
        steps.append("npm run dev")
    steps.extend(["npm test", "npm run lint", "npm run format"])
    return steps


def files_created(generation: GenerationResult) -> int:
    """Number of regular files the generator newly wrote (directories excluded)."""
    from_structure = sum(
        1 for entry in generation.structure.entries
        if entry.kind == "file" and entry.outcome is MaterializationOutcome.CREATED
    )
    return len(generation.files) + from_structure


def print_summary(report: AssemblyReport) -> None:
    choices = report.choices
    flow = report.install_flow
    installed = flow is not None and flow.installed

    rows = {
        "Project": choices.project_name,
        "Location": str(report.root),
        "Framework": choices.framework.label,
        "Structure": choices.structure_style.label,
        "Files created": str(files_created(report.generation)),
    }
    if report.vcs_initialized is not None:
        rows["Git repository"] = "initialized" if report.vcs_initialized else "failed"
    if flow is not None:
        rows["Dependencies"] = "installed" if installed else "failed"
    print_summary_table(rows, title="Project created")

    console.print("To get started:\n")
    for command in next_steps(choices, installed=installed):
        print_hint(command)
    console.print("\nFor Docker:\n")
    print_hint("docker-compose build")
    print_hint("docker-compose up")

    framework_name = "NestJS" if choices.framework is Framework.NEST else "Node.js"
    console.print(f"\n[bold]{framework_name} features included:[/bold]")
    for feature in framework_features(choices.framework):
        console.print(f"- {feature}")
    console.print("\n[bold]Common features:[/bold]")
    for feature in COMMON_FEATURES:
        console.print(f"- {feature}")
