"""
Core data models for workspace dependency reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Set, Tuple


class DependencyKind(Enum):
    """Category of a declared dependency, spelled as `cargo metadata` spells it."""

    NORMAL = "normal"
    DEVELOPMENT = "dev"
    BUILD = "build"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["DependencyKind"]:
        """Map a raw `kind` field to a DependencyKind.

        `cargo metadata` writes null for normal dependencies. Unknown kinds
        return None.
        """
        if value is None:
            return cls.NORMAL
        for kind in cls:
            if kind.value == value:
                return kind
        return None

    @property
    def order(self) -> int:
        return list(DependencyKind).index(self)


@dataclass(frozen=True)
class DependencyReference:
    """One dependency declared by a workspace member."""

    name: str
    kind: Optional[DependencyKind]
    registry: Optional[str] = None
    path: Optional[str] = None

    @property
    def is_public(self) -> bool:
        """True for dependencies on the default registry (crates.io)."""
        return self.registry is None and self.path is None


@dataclass(frozen=True)
class MemberComponent:
    """A crate that belongs to the workspace itself."""

    name: str
    dependencies: Tuple[DependencyReference, ...] = ()


@dataclass(frozen=True)
class PackageRecord:
    """Catalog entry for a package known to a workspace."""

    id: str
    name: str
    license: Optional[str] = None
    homepage: Optional[str] = None
    repository: Optional[str] = None

    @property
    def url(self) -> Optional[str]:
        if self.homepage is not None:
            return self.homepage
        return self.repository


@dataclass(frozen=True)
class WorkspaceDocument:
    """A decoded `cargo metadata` file."""

    path: Path
    members: Tuple[MemberComponent, ...]
    packages: Tuple[PackageRecord, ...]

    @property
    def label(self) -> str:
        return Path(self.path).stem

    def find_package(self, name: str) -> Optional[PackageRecord]:
        """Return the first catalog entry named exactly `name`."""
        for package in self.packages:
            if package.name == name:
                return package
        return None


@dataclass
class AggregatedDependency:
    """Everything known about one dependency across all workspaces."""

    name: str
    url: Optional[str] = None
    license: Optional[str] = None
    workspaces: Set[Path] = field(default_factory=set)
    components: Set[str] = field(default_factory=set)
    kinds: Set[DependencyKind] = field(default_factory=set)


@dataclass(frozen=True)
class UnresolvedDependency:
    """A dependency reference with no matching package in its workspace."""

    component: str
    dependency: str
    workspace: str
