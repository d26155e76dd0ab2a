"""
Reporting and export utilities.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Set

import pandas as pd

from .models import AggregatedDependency, UnresolvedDependency, WorkspaceDocument


logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "Crate Name",
    "URL",
    "License",
    "Components",
    "Dependency Of",
    "Dependency Type",
]

REPORT_SHEET = "dependencies"
SHEET_TITLE_LIMIT = 31
INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")


def workspace_labels(workspaces: Iterable[Path]) -> List[str]:
    """File stems of the given metadata paths, in a stable order."""
    ordered = sorted((Path(p) for p in workspaces), key=lambda p: (p.stem, str(p)))
    return [p.stem for p in ordered]


def format_row(dependency: AggregatedDependency) -> List[str]:
    """Render one aggregated dependency as a report row."""
    kinds = sorted(dependency.kinds, key=lambda kind: kind.order)
    return [
        dependency.name,
        dependency.url or "",
        dependency.license or "",
        ",".join(workspace_labels(dependency.workspaces)),
        ",".join(sorted(dependency.components)),
        ",".join(str(kind) for kind in kinds),
    ]


def build_report_frame(dependencies: Mapping[str, AggregatedDependency]) -> pd.DataFrame:
    """Build the report table, one row per dependency sorted by name."""
    rows = [format_row(dependencies[name]) for name in sorted(dependencies)]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS, dtype=str)


def write_report_csv(frame: pd.DataFrame, path: Path) -> Path:
    """Write the report table as CSV, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        frame.to_csv(f, index=False)
        f.flush()
    return path


def sheet_title(label: str, used: Set[str]) -> str:
    """Return a valid Excel sheet title for `label` not yet in `used`.

    Titles are compared case-insensitively, as Excel does. The chosen title
    is added to `used`.
    """
    # Excel sheet names have a 31 character limit
    base = INVALID_SHEET_CHARS.sub("_", label)[:SHEET_TITLE_LIMIT] or "workspace"
    title = base
    counter = 2
    while title.lower() in used:
        suffix = f"_{counter}"
        title = base[:SHEET_TITLE_LIMIT - len(suffix)] + suffix
        counter += 1
    used.add(title.lower())
    return title


def export_worksheets(
    frame: pd.DataFrame,
    dependencies: Mapping[str, AggregatedDependency],
    path: Path,
) -> Path:
    """Write the report plus one sheet per workspace to an Excel workbook."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    workspaces = sorted(
        {Path(p) for dep in dependencies.values() for p in dep.workspaces},
        key=lambda p: (p.stem, str(p)),
    )
    used = {REPORT_SHEET}
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name=REPORT_SHEET, index=False)
        for workspace in workspaces:
            referenced = {
                name: dep
                for name, dep in dependencies.items()
                if workspace in {Path(p) for p in dep.workspaces}
            }
            build_report_frame(referenced).to_excel(
                writer, sheet_name=sheet_title(workspace.stem, used), index=False
            )
    return path


def build_summary(
    documents: Iterable[WorkspaceDocument],
    dependencies: Mapping[str, AggregatedDependency],
    unresolved: Iterable[UnresolvedDependency],
    include_private: bool,
) -> Dict:
    """Collect run statistics for the JSON summary and the log."""
    unresolved = list(unresolved)
    return {
        "workspaces": [str(document.path) for document in documents],
        "include_private_crates": include_private,
        "num_dependencies": len(dependencies),
        "num_unresolved": len(unresolved),
        "unresolved": [
            {
                "workspace": item.workspace,
                "component": item.component,
                "dependency": item.dependency,
            }
            for item in unresolved
        ],
    }


def save_summary_json(summary: Dict, path: Path) -> Path:
    """Save the run summary as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(summary, f, indent=2, default=str)
    return path


def print_summary(summary: Dict) -> None:
    logger.info("=" * 60)
    logger.info("WORKSPACE DEPENDENCIES")
    logger.info("=" * 60)
    logger.info("Workspaces: %d", len(summary["workspaces"]))
    logger.info("Private crates included: %s", summary["include_private_crates"])
    logger.info("Unique dependencies: %d", summary["num_dependencies"])
    logger.info("Unresolved references: %d", summary["num_unresolved"])
    logger.info("=" * 60)
