"""create-backend configuration.

Typed settings for the generator itself (where to write projects, which
executables to call and how long to wait for them).  The interactive prompts
decide *what* gets generated; this model decides *how* the generator talks
to the host system.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator


def parse_version(text: str) -> tuple[int, ...]:
    """Parse ``"v14.18.0"`` / ``"14.18"`` into a tuple of ints.

    Raises:
        ValueError: If any component is not numeric.
    """
    cleaned = text.strip().lstrip("vV")
    if not cleaned:
        raise ValueError(f"Empty version string: {text!r}")
    return tuple(int(part) for part in cleaned.split("."))


class GeneratorConfig(BaseModel):
    """Global create-backend configuration.

    Instances are created once by the CLI entry point and handed to the
    assembler and the tool runner.
    """

    output_dir: Path = Field(default_factory=Path.cwd, description="Parent directory of new projects")
    package_manager: str = Field(default="npm")
    package_runner: str = Field(default="npx")
    vcs: str = Field(default="git")
    runtime: str = Field(default="node", description="Executable whose version is gated")
    min_runtime_version: tuple[int, int] = Field(
        default=(14, 18),
        description="Minimum (major, minor) runtime version required before installing",
    )
    command_timeout: int = Field(default=600, ge=10, description="Per-command timeout in seconds")

    @field_validator("min_runtime_version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        if isinstance(value, str):
            parts = parse_version(value)
            return (parts[0], parts[1] if len(parts) > 1 else 0)
        return value

    @property
    def min_runtime_label(self) -> str:
        """Human-readable minimum version, e.g. ``"14.18.0"``."""
        major, minor = self.min_runtime_version
        return f"{major}.{minor}.0"

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            CREATE_BACKEND_OUTPUT_DIR, CREATE_BACKEND_PACKAGE_MANAGER,
            CREATE_BACKEND_PACKAGE_RUNNER, CREATE_BACKEND_VCS,
            CREATE_BACKEND_RUNTIME, CREATE_BACKEND_MIN_RUNTIME,
            CREATE_BACKEND_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CREATE_BACKEND_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["CREATE_BACKEND_OUTPUT_DIR"])
        if os.environ.get("CREATE_BACKEND_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["CREATE_BACKEND_PACKAGE_MANAGER"]
        if os.environ.get("CREATE_BACKEND_PACKAGE_RUNNER"):
            kwargs["package_runner"] = os.environ["CREATE_BACKEND_PACKAGE_RUNNER"]
        if os.environ.get("CREATE_BACKEND_VCS"):
            kwargs["vcs"] = os.environ["CREATE_BACKEND_VCS"]
        if os.environ.get("CREATE_BACKEND_RUNTIME"):
            kwargs["runtime"] = os.environ["CREATE_BACKEND_RUNTIME"]
        if os.environ.get("CREATE_BACKEND_MIN_RUNTIME"):
            kwargs["min_runtime_version"] = os.environ["CREATE_BACKEND_MIN_RUNTIME"]
        if os.environ.get("CREATE_BACKEND_TIMEOUT"):
            kwargs["command_timeout"] = int(os.environ["CREATE_BACKEND_TIMEOUT"])
        return cls(**kwargs)
