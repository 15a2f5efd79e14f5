"""Shared pytest fixtures for the create-backend test suite.

Provides reusable fixtures for:
- Temporary output directories
- Scripted answers in place of the interactive prompts
- A fake command runner so no test ever calls npm, npx, git or node
- Mock subprocess helpers
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from create_backend.config import GeneratorConfig
from create_backend.prompts import Question
from create_backend.utils import console


# ---------------------------------------------------------------------------
# Console
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def wide_console():
    """Keep Rich from wrapping long paths and commands in captured output."""
    original = console.width
    console.width = 200
    yield console
    console.width = original


# ---------------------------------------------------------------------------
# Paths & configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Parent directory in which generated projects are created."""
    out = tmp_path / "workspace"
    out.mkdir()
    return out


@pytest.fixture
def generator_config(output_dir: Path) -> GeneratorConfig:
    return GeneratorConfig(output_dir=output_dir, command_timeout=30)


# ---------------------------------------------------------------------------
# Scripted prompts
# ---------------------------------------------------------------------------

class ScriptedAsker:
    """Answers questions from a dict and records which ones were asked."""

    def __init__(self, answers: dict[str, Any]) -> None:
        self.answers = answers
        self.asked: list[str] = []

    def __call__(self, question: Question) -> Any:
        self.asked.append(question.name)
        return self.answers.get(question.name)


@pytest.fixture
def scripted_asker():
    """Factory for ``ScriptedAsker`` instances.

    Usage:
        def test_run(scripted_asker):
            asker = scripted_asker(project_name="demo", structure_style="ddd")
    """
    def factory(**answers: Any) -> ScriptedAsker:
        defaults: dict[str, Any] = {
            "project_name": "test-project",
            "framework": "plain",
            "structure_style": "layer",
            "initialize_version_control": False,
            "install_dependencies": False,
            "attempt_auto_fix": False,
        }
        return ScriptedAsker({**defaults, **answers})

    return factory


# ---------------------------------------------------------------------------
# Fake external commands
# ---------------------------------------------------------------------------

class FakeCommands:
    """Stand-in for ``run_command`` keyed by the joined command line.

    Unknown commands succeed.  ``node --version`` answers with ``node_version``.
    """

    def __init__(self, node_version: str = "v20.11.1") -> None:
        self.node_version = node_version
        self.results: dict[str, tuple[int, str, str]] = {}
        self.missing: set[str] = set()
        self.calls: list[str] = []
        self.cwds: list[Path | None] = []

    def fail(self, command: str, returncode: int = 1, stderr: str = "boom") -> None:
        self.results[command] = (returncode, "", stderr)

    def make_missing(self, executable: str) -> None:
        self.missing.add(executable)

    async def __call__(self, cmd: list[str], cwd=None, timeout: int = 600, capture: bool = True, env=None):
        line = " ".join(cmd)
        self.calls.append(line)
        self.cwds.append(Path(cwd) if cwd else None)
        if cmd[0] in self.missing:
            raise FileNotFoundError(2, "No such file or directory", cmd[0])
        if cmd[1:] == ["--version"] and line not in self.results:
            return (0, self.node_version, "")
        return self.results.get(line, (0, "", ""))

    @property
    def npm_calls(self) -> list[str]:
        return [c for c in self.calls if c.startswith("npm ")]


@pytest.fixture
def fake_commands():
    """Patch ``create_backend.tooling.run_command`` with a ``FakeCommands``."""
    fake = FakeCommands()
    with patch("create_backend.tooling.run_command", new=fake):
        yield fake


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
