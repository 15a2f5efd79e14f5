"""Turn a structure descriptor into real directories and files.

Pre-existing paths are never replaced: an existing directory is descended
into (merge), an existing file is left exactly as it is (skip).  The first
filesystem failure aborts the walk and whatever was already created stays on
disk.
"""

from __future__ import annotations

import asyncio
import stat
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .structures import Directory, File


class FilesystemError(Exception):
    """Raised when a path cannot be inspected, created or written."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class MaterializationOutcome(str, Enum):
    CREATED = "created"
    SKIPPED_ALREADY_EXISTS = "skipped"


@dataclass
class MaterializedPath:
    path: Path
    kind: str
    outcome: MaterializationOutcome


@dataclass
class MaterializationReport:
    """Per-path outcomes collected during one run."""

    entries: list[MaterializedPath] = field(default_factory=list)

    def add(self, path: Path, kind: str, outcome: MaterializationOutcome) -> None:
        self.entries.append(MaterializedPath(path, kind, outcome))

    @property
    def created(self) -> list[Path]:
        return [
            e.path for e in self.entries
            if e.outcome is MaterializationOutcome.CREATED
        ]

    @property
    def skipped(self) -> list[Path]:
        return [
            e.path for e in self.entries
            if e.outcome is MaterializationOutcome.SKIPPED_ALREADY_EXISTS
        ]

    def outcome_for(self, path: str | Path) -> MaterializationOutcome | None:
        """Return the recorded outcome for *path*, or ``None`` if untouched."""
        target = Path(path)
        for entry in self.entries:
            if entry.path == target:
                return entry.outcome
        return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def materialize(
    root: str | Path,
    descriptor: Directory,
    report: MaterializationReport | None = None,
) -> MaterializationReport:
    """Reproduce the children of *descriptor* under *root*.

    The descriptor's own name is not used as a path segment: *root* stands
    for it.  *root* must already exist.

    Args:
        root: Existing, writable directory.
        descriptor: Tree to reproduce.
        report: Optional report to append to (a new one is created otherwise).

    Returns:
        The report with one entry per visited path.

    Raises:
        FilesystemError: On the first path that cannot be checked or created.
    """
    if report is None:
        report = MaterializationReport()
    await asyncio.to_thread(_materialize_tree, Path(root), descriptor, report)
    return report


async def write_file(
    path: str | Path,
    content: str,
    *,
    overwrite: bool = True,
) -> MaterializationOutcome:
    """Write *content* to *path*, creating parent directories.

    With ``overwrite=False`` an existing file is left untouched and
    ``SKIPPED_ALREADY_EXISTS`` is returned.

    Raises:
        FilesystemError: If the file cannot be written.
    """
    return await asyncio.to_thread(_write_file, Path(path), content, overwrite)


async def make_executable(path: str | Path) -> None:
    """Set the executable bits on a file."""
    await asyncio.to_thread(_make_executable, Path(path))


# ---------------------------------------------------------------------------
# Synchronous workers (run in a thread)
# ---------------------------------------------------------------------------


def _materialize_tree(base: Path, directory: Directory, report: MaterializationReport) -> None:
    for node in directory.children:
        target = base / node.name
        if isinstance(node, Directory):
            report.add(target, "directory", _ensure_directory(target))
            _materialize_tree(target, node, report)
        elif isinstance(node, File):
            report.add(target, "file", _write_file(target, node.content, overwrite=False))
        else:
            raise TypeError(f"Unsupported descriptor node: {node!r}")


def _ensure_directory(target: Path) -> MaterializationOutcome:
    try:
        if target.is_dir():
            return MaterializationOutcome.SKIPPED_ALREADY_EXISTS
        if target.exists():
            raise FilesystemError(target, "exists and is not a directory")
        target.mkdir()
    except OSError as exc:
        raise FilesystemError(target, exc.strerror or str(exc)) from exc
    return MaterializationOutcome.CREATED


def _write_file(target: Path, content: str, overwrite: bool) -> MaterializationOutcome:
    try:
        if target.is_dir():
            raise FilesystemError(target, "exists and is a directory")
        if target.exists() and not overwrite:
            return MaterializationOutcome.SKIPPED_ALREADY_EXISTS
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
    except OSError as exc:
        raise FilesystemError(target, exc.strerror or str(exc)) from exc
    return MaterializationOutcome.CREATED


def _make_executable(path: Path) -> None:
    try:
        current = path.stat().st_mode
        path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as exc:
        raise FilesystemError(path, exc.strerror or str(exc)) from exc
