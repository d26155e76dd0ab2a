#!/usr/bin/env python3
"""
Example script showing how to use the workspace-dependencies tool as a library.
"""

import sys
from pathlib import Path

from workspace_dependencies.aggregator import DependencyAggregator
from workspace_dependencies.reporting import build_report_frame, write_report_csv


def example_public_crates(metadata_files):
    """Example: Report only crates.io dependencies."""
    print("="*60)
    print("Example 1: Public crates")
    print("="*60)

    aggregator = DependencyAggregator()
    for metadata_file in metadata_files:
        aggregator.add_path(metadata_file)

    frame = build_report_frame(aggregator.dependencies)
    print(frame.to_string(index=False))
    print(f"\nUnresolved references: {len(aggregator.unresolved)}")


def example_private_crates(metadata_files):
    """Example: Include path and private-registry dependencies and save the CSV."""
    print("\n" + "="*60)
    print("Example 2: Including private crates")
    print("="*60)

    aggregator = DependencyAggregator(include_private=True)
    for metadata_file in metadata_files:
        aggregator.add_path(metadata_file)

    output = write_report_csv(
        build_report_frame(aggregator.dependencies),
        Path("./output/all_dependencies.csv"),
    )
    print(f"CSV file generated at: {output}")


if __name__ == "__main__":
    # Produce inputs with: cargo metadata --format-version 1 > workspace.json
    files = sys.argv[1:]
    if not files:
        print("usage: usage_examples.py METADATA_JSON [METADATA_JSON ...]")
        sys.exit(1)
    example_public_crates(files)
    example_private_crates(files)
