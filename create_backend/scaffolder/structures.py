"""Structure descriptors and the catalog of organizational styles.

A descriptor is an explicit tree of :class:`Directory` and :class:`File`
nodes.  Node kind is carried by the type, never inferred from the name, so a
directory may contain dots (``.husky``) and a file may have none
(``Dockerfile``).
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Union


class StructureStyle(str, Enum):
    """Organizational style of the generated ``src/`` tree."""

    LAYERED = "layer"
    MODULAR = "modular"
    DOMAIN_DRIVEN = "ddd"

    @property
    def label(self) -> str:
        return _STYLE_LABELS[self]


_STYLE_LABELS = {
    StructureStyle.LAYERED: "Layer Based",
    StructureStyle.MODULAR: "Modular",
    StructureStyle.DOMAIN_DRIVEN: "DDD",
}


@dataclass(frozen=True)
class File:
    """A file leaf with its literal initial content."""

    name: str
    content: str = ""


@dataclass(frozen=True)
class Directory:
    """A directory node with uniquely named children."""

    name: str
    children: tuple["Node", ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any iterable of nodes but store an immutable tuple.
        object.__setattr__(self, "children", tuple(self.children))
        seen: set[str] = set()
        for child in self.children:
            if child.name in seen:
                raise ValueError(
                    f"Duplicate entry {child.name!r} in directory {self.name!r}"
                )
            seen.add(child.name)

    def child(self, name: str) -> "Node":
        """Return the direct child called *name*.

        Raises:
            KeyError: If no such child exists.
        """
        for node in self.children:
            if node.name == name:
                return node
        raise KeyError(name)

    def walk(self) -> Iterator[tuple[PurePosixPath, "Node"]]:
        """Yield ``(relative_path, node)`` for every descendant, depth-first.

        Paths are relative to this directory; the directory itself is not
        yielded.
        """
        for node in self.children:
            path = PurePosixPath(node.name)
            yield path, node
            if isinstance(node, Directory):
                for sub_path, sub_node in node.walk():
                    yield path / sub_path, sub_node

    @classmethod
    def from_mapping(cls, name: str, mapping: Mapping[str, object]) -> "Directory":
        """Build a tree from nested dicts.

        Mapping values are directories and ``str`` values are files, e.g.
        ``{"user": {"user.service.ts": ""}, "auth": {}}``.
        """
        children: list[Node] = []
        for key, value in mapping.items():
            if isinstance(value, Mapping):
                children.append(cls.from_mapping(key, value))
            elif isinstance(value, str):
                children.append(File(key, value))
            else:
                raise TypeError(
                    f"Entry {key!r} must be a mapping or a string, got {type(value).__name__}"
                )
        return cls(name, tuple(children))


Node = Union[Directory, File]


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

_TEST_TIERS = {"unit": {}, "integration": {}, "e2e": {}}

LAYERED_STRUCTURE = Directory.from_mapping(
    "src",
    {
        "controllers": {},
        "services": {},
        "repositories": {},
        "models": {},
        "routes": {},
        "middlewares": {},
        "config": {},
        "utils": {},
        "tests": _TEST_TIERS,
    },
)

MODULAR_STRUCTURE = Directory.from_mapping(
    "src",
    {
        "modules": {
            "user": {
                "user.controller.ts": "",
                "user.service.ts": "",
                "user.repository.ts": "",
                "user.routes.ts": "",
                "user.spec.ts": "",
            },
            "auth": {},
            "product": {},
        },
        "shared": {
            "middlewares": {},
            "utils": {},
            "config": {},
            "tests": _TEST_TIERS,
        },
    },
)

DOMAIN_DRIVEN_STRUCTURE = Directory.from_mapping(
    "src",
    {
        "domain": {
            "user": {
                "entities": {},
                "repositories": {},
                "services": {},
                "tests": {},
            },
            "product": {},
        },
        "application": {
            "user": {},
            "product": {},
        },
        "infrastructure": {
            "repositories": {},
            "orm": {},
            "services": {},
        },
        "interfaces": {
            "controllers": {},
            "routes": {},
            "middlewares": {},
        },
        "shared": {
            "utils": {},
            "tests": _TEST_TIERS,
        },
    },
)

STRUCTURES: Mapping[StructureStyle, Directory] = MappingProxyType({
    StructureStyle.LAYERED: LAYERED_STRUCTURE,
    StructureStyle.MODULAR: MODULAR_STRUCTURE,
    StructureStyle.DOMAIN_DRIVEN: DOMAIN_DRIVEN_STRUCTURE,
})


def get_structure(style: StructureStyle | str) -> Directory:
    """Return the descriptor for *style* (enum member or its value)."""
    return STRUCTURES[StructureStyle(style)]
