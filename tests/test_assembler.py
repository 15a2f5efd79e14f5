"""Tests for the top-level run: questions -> generation -> tools -> summary."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from create_backend.assembler import (
    ExitStatus,
    InputError,
    ProjectAssembler,
    TargetExistsError,
    files_created,
    framework_features,
    next_steps,
)
from create_backend.config import GeneratorConfig
from create_backend.scaffolder.generator import ProjectChoices
from create_backend.scaffolder.providers import Framework
from create_backend.scaffolder.structures import StructureStyle
from create_backend.tooling import InstallState, RuntimeVersionError, ToolRunner


pytestmark = pytest.mark.unit


@pytest.fixture
def make_assembler(generator_config: GeneratorConfig, fake_commands, scripted_asker):
    """Factory: ``make_assembler(**answers) -> (assembler, asker)``."""
    def factory(**answers):
        asker = scripted_asker(**answers)
        assembler = ProjectAssembler(
            generator_config, asker=asker, runner=ToolRunner(generator_config)
        )
        return assembler, asker

    return factory


class TestExitStatus:
    def test_values_are_distinct(self):
        values = [status.value for status in ExitStatus]
        assert len(values) == len(set(values))
        assert ExitStatus.SUCCESS == 0

    def test_error_statuses(self):
        assert InputError("x").status is ExitStatus.INVALID_INPUT
        assert TargetExistsError("x").status is ExitStatus.TARGET_EXISTS


class TestCollectChoices:
    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_missing_name(self, make_assembler, name):
        assembler, _ = make_assembler(project_name=name)
        with pytest.raises(InputError, match="Project name is required"):
            assembler.collect_choices()

    def test_invalid_name(self, make_assembler):
        assembler, _ = make_assembler(project_name="a/b")
        with pytest.raises(InputError, match="single directory name"):
            assembler.collect_choices()

    def test_choices(self, make_assembler):
        assembler, _ = make_assembler(project_name="shop", framework="nest", structure_style="modular")
        choices = assembler.collect_choices()
        assert choices.project_name == "shop"
        assert choices.framework is Framework.NEST
        assert choices.structure_style is StructureStyle.MODULAR


class TestAssemble:
    async def test_existing_folder_aborts_before_writing(self, make_assembler, output_dir: Path):
        existing = output_dir / "test-project"
        existing.mkdir()
        (existing / "notes.txt").write_text("keep", encoding="utf-8")
        assembler, asker = make_assembler()

        with patch("create_backend.assembler.ProjectGenerator") as generator:
            with pytest.raises(TargetExistsError) as exc_info:
                await assembler.assemble()

        generator.assert_not_called()
        assert str(exc_info.value) == "Folder test-project already exists."
        assert exc_info.value.remedy
        assert [p.name for p in existing.iterdir()] == ["notes.txt"]
        assert "install_dependencies" not in asker.asked

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    async def test_dangling_symlink_counts_as_existing(
        self, make_assembler, output_dir: Path, tmp_path: Path
    ):
        outside = tmp_path / "elsewhere" / "victim"
        (output_dir / "test-project").symlink_to(outside)
        assembler, _ = make_assembler()

        with pytest.raises(TargetExistsError):
            await assembler.assemble()

        assert not outside.exists()
        assert not outside.parent.exists()

    async def test_generates_selected_structure(self, make_assembler, output_dir, fake_commands):
        assembler, _ = make_assembler(project_name="demo", structure_style="ddd")

        report = await assembler.assemble()

        root = output_dir / "demo"
        assert report.root == root.resolve()
        assert (root / "src" / "domain" / "user" / "entities").is_dir()
        assert (root / "src" / "app.ts").is_file()
        assert '"name": "demo"' in (root / "package.json").read_text(encoding="utf-8")
        assert report.vcs_initialized is None
        assert report.install_flow is None
        assert fake_commands.calls == []

    async def test_version_control(self, make_assembler, output_dir, fake_commands):
        assembler, _ = make_assembler(initialize_version_control=True)
        report = await assembler.assemble()
        assert report.vcs_initialized is True
        assert fake_commands.calls == ["git init"]
        assert fake_commands.cwds == [(output_dir / "test-project").resolve()]

    async def test_version_control_failure_is_not_fatal(self, make_assembler, fake_commands):
        fake_commands.fail("git init")
        assembler, _ = make_assembler(initialize_version_control=True)
        report = await assembler.assemble()
        assert report.vcs_initialized is False

    async def test_install_and_auto_fix(self, make_assembler, fake_commands):
        assembler, asker = make_assembler(install_dependencies=True, attempt_auto_fix=True)

        report = await assembler.assemble()

        flow = report.install_flow
        assert flow is not None
        assert flow.state is InstallState.DONE
        assert InstallState.AUTO_FIXED in flow.history
        assert fake_commands.npm_calls[-1] == "npm audit fix"
        assert report.choices.attempt_auto_fix
        assert asker.asked[-1] == "attempt_auto_fix"

    async def test_install_without_auto_fix(self, make_assembler, fake_commands):
        assembler, _ = make_assembler(install_dependencies=True)
        report = await assembler.assemble()
        assert "npm audit fix" not in fake_commands.npm_calls
        assert report.install_flow.history[-1] is InstallState.DONE

    async def test_auto_fix_not_asked_without_install(self, make_assembler):
        assembler, asker = make_assembler(install_dependencies=False)
        await assembler.assemble()
        assert "attempt_auto_fix" not in asker.asked

    async def test_question_order(self, make_assembler):
        assembler, asker = make_assembler(install_dependencies=True)
        await assembler.assemble()
        assert asker.asked == [
            "project_name",
            "framework",
            "structure_style",
            "initialize_version_control",
            "install_dependencies",
            "attempt_auto_fix",
        ]

    async def test_runtime_gate_leaves_generated_project(self, make_assembler, output_dir, fake_commands):
        fake_commands.node_version = "v12.22.0"
        assembler, _ = make_assembler(install_dependencies=True)

        with pytest.raises(RuntimeVersionError):
            await assembler.assemble()

        assert (output_dir / "test-project" / "package.json").is_file()
        assert fake_commands.npm_calls == []

    async def test_files_created_counts_only_new_files(self, make_assembler):
        assembler, _ = make_assembler(structure_style="modular")
        report = await assembler.assemble()

        on_disk = sum(1 for p in report.root.rglob("*") if p.is_file())
        assert files_created(report.generation) == on_disk

    async def test_summary_printed(self, make_assembler, capsys):
        assembler, _ = make_assembler(project_name="svc", framework="nest")
        await assembler.assemble()
        out = capsys.readouterr().out
        assert 'Project "svc" created with NestJS (TypeScript only) and Layer Based structure!' in out
        assert "npm run start:dev" in out
        assert "docker-compose up" in out
        assert "Dependency injection" in out


class TestNextSteps:
    def test_plain(self):
        steps = next_steps(ProjectChoices(project_name="api"))
        assert steps[:3] == ["cd api", "npm install", "npm run dev"]
        assert "npm run start:dev" not in steps

    def test_nest_installed(self):
        steps = next_steps(ProjectChoices(project_name="api", framework="nest"), installed=True)
        assert steps[:2] == ["cd api", "npm run start:dev"]
        assert "npm install" not in steps

    def test_framework_features(self):
        assert "Security middleware (helmet, cors)" in framework_features(Framework.PLAIN)
        assert "Security middleware (helmet, cors)" not in framework_features(Framework.NEST)
