"""Interactive questions.

Questions are plain descriptors; ``ask`` turns an ordered list of them into
a ``{name: answer}`` mapping.  The default asker uses ``rich.prompt``; tests
and non-interactive callers pass their own ``asker`` callable.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from rich.prompt import Confirm, Prompt

from .scaffolder.providers import Framework
from .scaffolder.structures import StructureStyle
from .utils import console


@dataclass(frozen=True)
class Choice:
    title: str
    value: str
    description: str = ""


@dataclass(frozen=True)
class Question:
    """One prompt: ``kind`` is ``"text"``, ``"select"`` or ``"confirm"``."""

    name: str
    message: str
    kind: str = "text"
    choices: tuple[Choice, ...] = field(default_factory=tuple)
    default: Any = None

    def __post_init__(self) -> None:
        if self.kind not in ("text", "select", "confirm"):
            raise ValueError(f"Unknown question kind: {self.kind!r}")
        if self.kind == "select" and not self.choices:
            raise ValueError(f"Select question {self.name!r} needs choices")


Asker = Callable[[Question], Any]


def rich_asker(question: Question) -> Any:
    """Ask *question* on the terminal with ``rich.prompt``."""
    if question.kind == "confirm":
        return Confirm.ask(question.message, default=bool(question.default), console=console)

    if question.kind == "select":
        for index, choice in enumerate(question.choices, start=1):
            line = f"  [cyan]{index}[/cyan]. {choice.title} [dim]({choice.value})[/dim]"
            if choice.description:
                line += f" [dim]- {choice.description}[/dim]"
            console.print(line)
        values = [c.value for c in question.choices]
        numbers = [str(i) for i in range(1, len(values) + 1)]
        default = question.default if question.default is not None else values[0]
        answer = Prompt.ask(
            question.message,
            choices=values + numbers,
            default=default,
            show_choices=False,
            console=console,
        )
        if answer in numbers:
            return values[int(answer) - 1]
        return answer

    if question.default is not None:
        return Prompt.ask(question.message, default=question.default, console=console)
    return Prompt.ask(question.message, console=console)


def ask(questions: Sequence[Question], *, asker: Asker | None = None) -> dict[str, Any]:
    """Ask every question in order and return ``{question.name: answer}``."""
    asker = asker or rich_asker
    return {question.name: asker(question) for question in questions}


# ---------------------------------------------------------------------------
# The generator's questions
# ---------------------------------------------------------------------------

PROJECT_NAME_QUESTION = Question(name="project_name", message="Project name")

FRAMEWORK_QUESTION = Question(
    name="framework",
    message="Choose your framework",
    kind="select",
    choices=(
        Choice(
            Framework.PLAIN.label,
            Framework.PLAIN.value,
            "Traditional Node.js with Express and TypeScript",
        ),
        Choice(
            Framework.NEST.label,
            Framework.NEST.value,
            "Opinionated framework with built-in architecture patterns",
        ),
    ),
    default=Framework.PLAIN.value,
)

STRUCTURE_QUESTION = Question(
    name="structure_style",
    message="Choose the project structure",
    kind="select",
    choices=tuple(Choice(style.label, style.value) for style in StructureStyle),
    default=StructureStyle.LAYERED.value,
)

PROJECT_QUESTIONS: tuple[Question, ...] = (
    PROJECT_NAME_QUESTION,
    FRAMEWORK_QUESTION,
    STRUCTURE_QUESTION,
)

VCS_QUESTION = Question(
    name="initialize_version_control",
    message="Initialize a Git repository?",
    kind="confirm",
    default=True,
)

INSTALL_QUESTION = Question(
    name="install_dependencies",
    message="Do you want to install dependencies now?",
    kind="confirm",
    default=True,
)

AUTO_FIX_QUESTION = Question(
    name="attempt_auto_fix",
    message="Would you like to try fixing potential issues automatically?",
    kind="confirm",
    default=False,
)
