"""CLI entry point for ``create-backend`` / ``python -m create_backend``.

The command takes no options: every parameter is asked interactively.
Generator settings (output directory, executables, timeout) come from
``CREATE_BACKEND_*`` environment variables.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from . import __version__
from .assembler import AssemblyError, ExitStatus, ProjectAssembler
from .config import GeneratorConfig
from .scaffolder.materializer import FilesystemError
from .tooling import RuntimeVersionError
from .utils import console, print_banner, print_error


def build_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        prog="create-backend",
        description="Interactive generator for backend project skeletons",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Environment:\n"
            "  CREATE_BACKEND_OUTPUT_DIR      parent directory of the new project\n"
            "  CREATE_BACKEND_MIN_RUNTIME     minimum node version, e.g. 14.18\n"
            "  CREATE_BACKEND_TIMEOUT         per-command timeout in seconds\n"
        ),
    )


def run(assembler: ProjectAssembler) -> ExitStatus:
    """Run *assembler* and translate fatal errors into an exit status."""
    try:
        asyncio.run(assembler.assemble())
    except AssemblyError as exc:
        print_error(str(exc))
        if exc.remedy:
            console.print(exc.remedy)
        return exc.status
    except RuntimeVersionError as exc:
        print_error(str(exc))
        console.print(
            f"Install Node.js {assembler.config.min_runtime_label} or newer, then run "
            f"[cyan]npm install[/cyan] inside the project."
        )
        return ExitStatus.RUNTIME_VERSION
    except FilesystemError as exc:
        print_error(f"Could not write {exc.path}: {exc.reason}")
        console.print("Check permissions and free space, remove the partial project and retry.")
        return ExitStatus.FILESYSTEM
    except EOFError:
        print_error("Aborted: no answer received.")
        return ExitStatus.INVALID_INPUT
    except KeyboardInterrupt:
        print_error("Aborted.")
        return ExitStatus.INTERRUPTED
    return ExitStatus.SUCCESS


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.parse_args(argv)

    print_banner("Welcome to BACKEND ULTIMATE CLI", f"Version {__version__} - Professional Template")
    status = run(ProjectAssembler(GeneratorConfig.from_env()))
    if status is not ExitStatus.SUCCESS:
        sys.exit(int(status))


if __name__ == "__main__":
    main()
