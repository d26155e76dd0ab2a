"""
Load `cargo metadata` JSON output into WorkspaceDocument records.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Union

from .models import (
    DependencyKind,
    DependencyReference,
    MemberComponent,
    PackageRecord,
    WorkspaceDocument,
)


logger = logging.getLogger(__name__)


class MetadataError(Exception):
    """A metadata file could not be read or is not `cargo metadata` output."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


def load_workspace(path: Union[str, Path]) -> WorkspaceDocument:
    """Read and decode one `cargo metadata` JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        The decoded workspace

    Raises:
        MetadataError: If the file cannot be opened, is not valid JSON, or
            lacks the `packages` / `workspace_members` sections
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise MetadataError(path, f"cannot open metadata file: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MetadataError(path, f"invalid JSON: {e}") from e

    return parse_workspace(data, path)


def parse_workspace(data: Dict, path: Union[str, Path]) -> WorkspaceDocument:
    """Build a WorkspaceDocument from already-decoded `cargo metadata` JSON."""
    path = Path(path)
    if not isinstance(data, dict):
        raise MetadataError(path, "expected a JSON object at top level")

    raw_packages = data.get("packages")
    member_ids = data.get("workspace_members")
    if not isinstance(raw_packages, list):
        raise MetadataError(path, "missing 'packages' list")
    if not isinstance(member_ids, list):
        raise MetadataError(path, "missing 'workspace_members' list")

    try:
        packages = tuple(_parse_package(p) for p in raw_packages)
        member_set = set(member_ids)
        members = tuple(
            _parse_member(p) for p in raw_packages if p["id"] in member_set
        )
    except (KeyError, TypeError) as e:
        raise MetadataError(path, f"malformed package entry: {e!r}") from e

    logger.debug(
        "Loaded %s: %d members, %d packages", path, len(members), len(packages)
    )
    return WorkspaceDocument(path=path, members=members, packages=packages)


def load_workspaces(paths: Iterable[Union[str, Path]]) -> List[WorkspaceDocument]:
    """Load every path in order, stopping at the first one that fails."""
    return [load_workspace(path) for path in paths]


def _parse_package(raw: Dict) -> PackageRecord:
    return PackageRecord(
        id=raw["id"],
        name=raw["name"],
        license=raw.get("license"),
        homepage=raw.get("homepage"),
        repository=raw.get("repository"),
    )


def _parse_member(raw: Dict) -> MemberComponent:
    dependencies = tuple(
        DependencyReference(
            name=dep["name"],
            kind=DependencyKind.parse(dep.get("kind")),
            registry=dep.get("registry"),
            path=dep.get("path"),
        )
        for dep in raw.get("dependencies") or []
    )
    return MemberComponent(name=raw["name"], dependencies=dependencies)
