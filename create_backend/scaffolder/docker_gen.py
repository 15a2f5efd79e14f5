"""Container file generation.

Writes the ``Dockerfile`` and ``docker-compose.yml`` for the generated
project.  The Dockerfile depends on the framework (NestJS installs its CLI
and starts with ``start:prod``); the Compose file is the same for both.
"""

from __future__ import annotations

from pathlib import Path

from .materializer import write_file
from .providers import Framework, docker_compose_content, dockerfile_content


class DockerGenerator:
    """Generates the container descriptors for one framework."""

    # Output file name -> descriptive label
    _LABELS: dict[str, str] = {
        "Dockerfile": "image",
        "docker-compose.yml": "compose",
    }

    def __init__(self, framework: Framework | str = Framework.PLAIN) -> None:
        self.framework = Framework(framework)

    def contents(self) -> dict[str, str]:
        """Return ``{file name: content}`` without touching the disk."""
        return {
            "Dockerfile": dockerfile_content(self.framework),
            "docker-compose.yml": docker_compose_content(),
        }

    async def generate_all(self, output_dir: Path) -> dict[str, Path]:
        """Write all container files to *output_dir*.

        Args:
            output_dir: Project root directory.

        Returns:
            Mapping of label to written path, e.g.
            ``{"image": Path(".../Dockerfile"), "compose": ...}``.
        """
        result: dict[str, Path] = {}
        for filename, content in self.contents().items():
            path = Path(output_dir) / filename
            await write_file(path, content)
            result[self._LABELS[filename]] = path
        return result
