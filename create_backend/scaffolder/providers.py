"""Template content providers.

Each function returns the full text of one generated file and depends only
on its arguments.  Providers without parameters always return the same text,
which keeps them usable for snapshot-style tests.
"""

from __future__ import annotations

from enum import Enum

from .structures import StructureStyle
from .templates import default_renderer


class Framework(str, Enum):
    """Server framework of the generated project."""

    PLAIN = "plain"
    NEST = "nest"

    @property
    def label(self) -> str:
        return _FRAMEWORK_LABELS[self]


_FRAMEWORK_LABELS = {
    Framework.PLAIN: "Node.js (Express + TypeScript)",
    Framework.NEST: "NestJS (TypeScript only)",
}


def _render(template_path: str, **context: object) -> str:
    return default_renderer().render(template_path, context)


# -- Manifest & compiler ---------------------------------------------------

def manifest_content(project_name: str, framework: Framework | str = Framework.PLAIN) -> str:
    """Return ``package.json`` for *project_name* and *framework*."""
    framework = Framework(framework)
    return _render(f"{framework.value}/package.json.j2", project_name=project_name)


def compiler_config_content() -> str:
    """Return ``tsconfig.json``."""
    return _render("common/tsconfig.json.j2")


# -- Entry points ----------------------------------------------------------

def entry_point_content() -> str:
    """Return ``src/app.ts``: Express app with health, root and error handler."""
    return _render("plain/app.ts.j2")


def logger_config_content() -> str:
    """Return ``src/config/logger.ts`` (winston, console + file transports)."""
    return _render("plain/logger.ts.j2")


def nest_entry_point_content() -> str:
    return _render("nest/main.ts.j2")


def nest_module_content() -> str:
    return _render("nest/app.module.ts.j2")


def nest_controller_content() -> str:
    return _render("nest/app.controller.ts.j2")


def nest_service_content() -> str:
    return _render("nest/app.service.ts.j2")


def nest_cli_config_content() -> str:
    return _render("nest/nest-cli.json.j2")


def nest_e2e_config_content() -> str:
    return _render("nest/jest-e2e.json.j2")


# -- Containers ------------------------------------------------------------

def dockerfile_content(framework: Framework | str = Framework.PLAIN) -> str:
    """Return the ``Dockerfile``; build and start commands differ per framework."""
    return _render("common/Dockerfile.j2", framework=Framework(framework).value)


def docker_compose_content() -> str:
    return _render("common/docker-compose.yml.j2")


# -- Lint / format ---------------------------------------------------------

def eslint_config_content() -> str:
    return _render("common/eslintrc.json.j2")


def eslint_ignore_content() -> str:
    return _render("common/eslintignore.j2")


def prettier_config_content() -> str:
    return _render("common/prettierrc.j2")


def prettier_ignore_content() -> str:
    return _render("common/prettierignore.j2")


# -- Environment, tests, hooks ---------------------------------------------

def env_content() -> str:
    """Return ``.env`` with PORT, NODE_ENV and LOG_LEVEL set, optional keys commented."""
    return _render("common/env.j2")


def jest_config_content() -> str:
    return _render("common/jest.config.js.j2")


def git_hook_content() -> str:
    """Return the husky ``pre-commit`` hook script."""
    return _render("common/pre-commit.j2")


def lint_staged_config_content() -> str:
    return _render("common/lintstagedrc.json.j2")


def gitignore_content() -> str:
    return _render("common/gitignore.j2")


def readme_content(
    project_name: str,
    framework: Framework | str = Framework.PLAIN,
    style: StructureStyle | str = StructureStyle.LAYERED,
) -> str:
    framework = Framework(framework)
    style = StructureStyle(style)
    return _render(
        "common/README.md.j2",
        project_name=project_name,
        framework=framework.value,
        framework_title=framework.label,
        structure_title=style.label,
    )
