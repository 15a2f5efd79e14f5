"""Tests for container file generation.

Covers:
- Both files are written to the project root
- Compose file is valid YAML with the app service on port 3000
- Dockerfile start command per framework
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from create_backend.scaffolder.docker_gen import DockerGenerator
from create_backend.scaffolder.providers import Framework


pytestmark = pytest.mark.unit


class TestDockerGenerator:
    async def test_generate_all_writes_both_files(self, tmp_path: Path):
        result = await DockerGenerator().generate_all(tmp_path)

        assert result == {
            "image": tmp_path / "Dockerfile",
            "compose": tmp_path / "docker-compose.yml",
        }
        assert all(path.is_file() for path in result.values())

    async def test_compose_is_valid_yaml(self, tmp_path: Path):
        result = await DockerGenerator().generate_all(tmp_path)
        compose = yaml.safe_load(result["compose"].read_text(encoding="utf-8"))

        app = compose["services"]["app"]
        assert app["build"] == "."
        assert "3000:3000" in app["ports"]
        assert "NODE_ENV=development" in app["environment"]

    async def test_overwrites_existing(self, tmp_path: Path):
        (tmp_path / "Dockerfile").write_text("stale", encoding="utf-8")
        await DockerGenerator().generate_all(tmp_path)
        assert (tmp_path / "Dockerfile").read_text(encoding="utf-8") != "stale"

    def test_contents_per_framework(self):
        plain = DockerGenerator(Framework.PLAIN).contents()
        nest = DockerGenerator("nest").contents()

        assert 'CMD ["npm", "start"]' in plain["Dockerfile"]
        assert 'CMD ["npm", "run", "start:prod"]' in nest["Dockerfile"]
        assert plain["docker-compose.yml"] == nest["docker-compose.yml"]

    def test_rejects_unknown_framework(self):
        with pytest.raises(ValueError):
            DockerGenerator("django")
