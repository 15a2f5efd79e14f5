"""External tool invocation: version control, package manager, audits.

Every command here is best-effort except the runtime version gate: a host
runtime older than the configured minimum stops the run before the package
manager is called.  Failed commands are reported together with the command
line the user can rerun by hand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .config import GeneratorConfig, parse_version
from .utils import (
    console,
    print_error,
    print_hint,
    print_success,
    print_warning,
    run_command,
)


class RuntimeVersionError(Exception):
    """Raised when the host runtime is missing or older than required."""

    def __init__(self, detected: tuple[int, ...] | None, required: tuple[int, int]) -> None:
        self.detected = detected
        self.required = required
        required_str = ".".join(str(p) for p in required)
        if detected is None:
            message = f"Could not determine the runtime version (>= {required_str} required)"
        else:
            detected_str = ".".join(str(p) for p in detected)
            message = f"Runtime {detected_str} found, {required_str} or newer is required"
        super().__init__(message)


@dataclass
class CommandResult:
    """Outcome of one external command."""

    command: str
    succeeded: bool
    error_message: str | None = None


@dataclass(frozen=True)
class InstallOptions:
    """Variants of the package-manager install command."""

    lockfile_only: bool = False
    ignore_scripts: bool = False

    def argv(self, package_manager: str) -> list[str]:
        cmd = [package_manager, "install"]
        if self.lockfile_only:
            cmd.append("--package-lock-only")
        if self.ignore_scripts:
            cmd.append("--ignore-scripts")
        return cmd


# ---------------------------------------------------------------------------
# ToolRunner
# ---------------------------------------------------------------------------


class ToolRunner:
    """Thin wrappers around the VCS and package-manager executables."""

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self.config = config or GeneratorConfig()

    async def _run(
        self,
        cmd: list[str],
        cwd: str | Path,
        *,
        capture: bool = False,
    ) -> CommandResult:
        cmd_str = " ".join(cmd)
        try:
            returncode, _stdout, stderr = await run_command(
                cmd,
                cwd=cwd,
                timeout=self.config.command_timeout,
                capture=capture,
            )
        except OSError as exc:
            return CommandResult(cmd_str, False, f"{cmd[0]}: {exc.strerror or exc}")
        if returncode != 0:
            return CommandResult(cmd_str, False, stderr or f"exit status {returncode}")
        return CommandResult(cmd_str, True)

    # -- Version control ---------------------------------------------------

    async def initialize_version_control(self, path: str | Path) -> bool:
        """Run ``git init`` inside *path*.  Never raises on command failure."""
        result = await self._run([self.config.vcs, "init"], path, capture=True)
        if result.succeeded:
            print_success("Git repository initialized")
            return True
        print_error(f"Failed to initialize Git repository: {result.error_message}")
        print_hint(f"cd {path} && {result.command}")
        return False

    # -- Runtime gate ------------------------------------------------------

    async def detect_runtime_version(self) -> tuple[int, ...] | None:
        """Return the host runtime version (``node --version``), or ``None``."""
        try:
            returncode, stdout, _stderr = await run_command(
                [self.config.runtime, "--version"], timeout=30
            )
        except OSError:
            return None
        if returncode != 0:
            return None
        try:
            return parse_version(stdout)
        except ValueError:
            return None

    async def check_runtime_version(
        self, version: tuple[int, ...] | str | None = None
    ) -> tuple[int, ...]:
        """Ensure the runtime meets ``config.min_runtime_version``.

        Args:
            version: Version to check; detected from the host when omitted.

        Returns:
            The checked version.

        Raises:
            RuntimeVersionError: If the version is unknown or too old.
        """
        if isinstance(version, str):
            try:
                version = parse_version(version)
            except ValueError as exc:
                raise RuntimeVersionError(None, self.config.min_runtime_version) from exc
        if version is None:
            version = await self.detect_runtime_version()
        required = self.config.min_runtime_version
        if version is None or tuple(version[:2]) < tuple(required):
            raise RuntimeVersionError(version, required)
        return version

    # -- Package manager ---------------------------------------------------

    async def run_package_install(
        self,
        path: str | Path,
        options: InstallOptions | None = None,
        runtime_version: tuple[int, ...] | str | None = None,
    ) -> CommandResult:
        """Run the package-manager install command in *path*.

        The runtime gate runs first; nothing is invoked if it fails.

        Raises:
            RuntimeVersionError: If the runtime gate fails.
        """
        options = options or InstallOptions()
        await self.check_runtime_version(runtime_version)

        result = await self._run(options.argv(self.config.package_manager), path)
        if result.succeeded:
            label = "Lockfile generated" if options.lockfile_only else "Dependencies installed"
            print_success(label)
        else:
            print_error(f"Command failed: {result.command} ({result.error_message})")
            print_hint(f"cd {path} && {result.command}")
        return result

    async def setup_git_hooks(self, path: str | Path) -> CommandResult:
        """Install husky hooks; skipped with a warning when unavailable."""
        result = await self._run(
            [self.config.package_runner, "husky", "install"], path, capture=True
        )
        if not result.succeeded:
            print_warning("Husky setup skipped (not available)")
            print_hint(f"cd {path} && {result.command}")
        return result

    async def run_audit(self, path: str | Path) -> CommandResult:
        """Run the vulnerability audit.  Failure is only a warning."""
        result = await self._run([self.config.package_manager, "audit"], path)
        if result.succeeded:
            print_success("All checks passed!")
        else:
            fix = f"{self.config.package_manager} audit fix"
            print_warning(f'Found potential issues. Run "{fix}" to address them.')
            print_hint(f"cd {path} && {result.command}")
            print_hint(f"cd {path} && {fix}")
        return result

    async def run_auto_fix(self, path: str | Path) -> CommandResult:
        """Run the automatic vulnerability fix."""
        result = await self._run([self.config.package_manager, "audit", "fix"], path)
        if result.succeeded:
            print_success("Automatic fixes applied")
        else:
            print_error(f"Automatic fix failed: {result.error_message}")
            print_hint(f"cd {path} && {result.command}")
        return result


# ---------------------------------------------------------------------------
# Install flow state machine
# ---------------------------------------------------------------------------


class InstallState(str, Enum):
    NOT_STARTED = "not_started"
    VERSION_CHECKED = "version_checked"
    LOCKFILE_GENERATED = "lockfile_generated"
    INSTALLED = "installed"
    AUDIT_CHECKED = "audit_checked"
    AUTO_FIXED = "auto_fixed"
    DONE = "done"
    FAILED = "failed"


@dataclass
class InstallFlow:
    """Sequences gate -> lockfile -> install -> hooks -> audit -> [fix] -> done.

    Only the runtime gate is fatal.  Every later step runs even if the one
    before it failed; failures are collected in ``failures``.
    """

    runner: ToolRunner
    path: Path
    state: InstallState = InstallState.NOT_STARTED
    history: list[InstallState] = field(default_factory=lambda: [InstallState.NOT_STARTED])
    failures: list[CommandResult] = field(default_factory=list)
    installed: bool = False

    @property
    def succeeded(self) -> bool:
        return self.state is not InstallState.FAILED and not self.failures

    def _advance(self, state: InstallState) -> None:
        self.state = state
        self.history.append(state)

    def _record(self, result: CommandResult) -> None:
        if not result.succeeded:
            self.failures.append(result)

    async def run(self, runtime_version: tuple[int, ...] | str | None = None) -> InstallState:
        """Run every step up to the audit.

        Raises:
            RuntimeVersionError: If the runtime gate fails (state ``FAILED``).
            RuntimeError: If the flow was already started.
        """
        if self.state is not InstallState.NOT_STARTED:
            raise RuntimeError(f"Install flow already started (state: {self.state.value})")

        console.print("[bold]Installing dependencies...[/bold]")
        try:
            version = await self.runner.check_runtime_version(runtime_version)
        except RuntimeVersionError:
            self._advance(InstallState.FAILED)
            raise
        self._advance(InstallState.VERSION_CHECKED)

        path = Path(self.path)
        if not (path / "package-lock.json").exists():
            self._record(await self.runner.run_package_install(
                path, InstallOptions(lockfile_only=True), runtime_version=version
            ))
        self._advance(InstallState.LOCKFILE_GENERATED)

        install = await self.runner.run_package_install(
            path, InstallOptions(), runtime_version=version
        )
        self._record(install)
        self.installed = install.succeeded
        # Hook setup is optional and does not count as a failure.
        await self.runner.setup_git_hooks(path)
        self._advance(InstallState.INSTALLED)

        console.print("[bold]Running post-install checks...[/bold]")
        self._record(await self.runner.run_audit(path))
        self._advance(InstallState.AUDIT_CHECKED)
        return self.state

    async def auto_fix(self) -> CommandResult:
        """Run the vulnerability auto-fix after the audit step."""
        if self.state is not InstallState.AUDIT_CHECKED:
            raise RuntimeError(f"Auto-fix requires a completed audit (state: {self.state.value})")
        result = await self.runner.run_auto_fix(Path(self.path))
        self._record(result)
        self._advance(InstallState.AUTO_FIXED)
        return result

    def finish(self) -> InstallState:
        if self.state is not InstallState.FAILED:
            self._advance(InstallState.DONE)
        return self.state
