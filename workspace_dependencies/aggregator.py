"""
Core aggregation of direct dependencies across cargo workspaces.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .interfaces import MetadataLoader
from .loader import load_workspace
from .models import (
    AggregatedDependency,
    DependencyKind,
    MemberComponent,
    PackageRecord,
    UnresolvedDependency,
    WorkspaceDocument,
)


logger = logging.getLogger(__name__)


class DependencyAggregator:
    """Fold workspace documents into one map keyed by dependency name."""

    def __init__(self, include_private: bool = False):
        """Initialize the aggregator.

        Args:
            include_private: Also aggregate path dependencies and dependencies
                on registries other than crates.io
        """
        self.include_private = include_private
        self.dependencies: Dict[str, AggregatedDependency] = {}
        self.unresolved: List[UnresolvedDependency] = []
        self.documents: List[WorkspaceDocument] = []

    def add_document(self, document: WorkspaceDocument) -> None:
        """Aggregate the direct dependencies of every member of a workspace."""
        self.documents.append(document)
        for member in document.members:
            self._add_member(document, member)

    def add_path(
        self,
        path: Union[str, Path],
        loader: Optional[MetadataLoader] = None,
    ) -> WorkspaceDocument:
        """Load a metadata file and aggregate it.

        Loader errors propagate unchanged so the caller can abort the run.
        """
        logger.info("Processing metadata file: %s", path)
        document = (loader or load_workspace)(path)
        self.add_document(document)
        return document

    def _add_member(self, document: WorkspaceDocument, member: MemberComponent) -> None:
        for kind in DependencyKind:
            for dependency in member.dependencies:
                if dependency.kind is not kind:
                    continue
                if not (self.include_private or dependency.is_public):
                    continue

                package = document.find_package(dependency.name)
                if package is None:
                    logger.warning(
                        "No crate found for dependency %s of workspace crate %s "
                        "in workspace file %s",
                        dependency.name,
                        member.name,
                        document.path,
                    )
                    self.unresolved.append(
                        UnresolvedDependency(
                            component=member.name,
                            dependency=dependency.name,
                            workspace=document.label,
                        )
                    )
                    continue

                entry = self._entry_for(dependency.name, package, document)
                entry.workspaces.add(document.path)
                entry.components.add(member.name)
                entry.kinds.add(kind)

    def _entry_for(
        self, name: str, package: PackageRecord, document: WorkspaceDocument
    ) -> AggregatedDependency:
        entry = self.dependencies.get(name)
        if entry is None:
            entry = AggregatedDependency(
                name=name, url=package.url, license=package.license
            )
            self.dependencies[name] = entry
            return entry

        # The first workspace to introduce a name decides its license and URL.
        if package.license != entry.license:
            logger.warning(
                "License of %s differs in %s (%s); keeping %s",
                name,
                document.path,
                package.license,
                entry.license,
            )
        if package.url != entry.url:
            logger.warning(
                "URL of %s differs in %s (%s); keeping %s",
                name,
                document.path,
                package.url,
                entry.url,
            )
        return entry


def aggregate(
    documents: Iterable[WorkspaceDocument], include_private: bool = False
) -> Dict[str, AggregatedDependency]:
    """Aggregate dependencies of already-loaded workspaces, in input order."""
    aggregator = DependencyAggregator(include_private=include_private)
    for document in documents:
        aggregator.add_document(document)
    return aggregator.dependencies
