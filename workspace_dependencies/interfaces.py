"""
Interfaces for workspace metadata sources.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Union

from .models import WorkspaceDocument


class MetadataLoader(Protocol):
    """Decode one metadata file into a WorkspaceDocument."""

    def __call__(self, path: Union[str, Path]) -> WorkspaceDocument:
        ...
