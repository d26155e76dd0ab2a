"""
Command-line interface for the workspace dependencies tool.
"""

import argparse
import logging
import sys
from pathlib import Path

from .aggregator import DependencyAggregator
from .loader import MetadataError
from .reporting import (
    build_report_frame,
    build_summary,
    export_worksheets,
    print_summary,
    save_summary_json,
    write_report_csv,
)


logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "workspace_dependencies.csv"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generates a CSV listing of all direct dependencies in one or more cargo workspaces"
    )

    parser.add_argument(
        "metadata_files",
        nargs="*",
        help=(
            "Path to the JSON file(s) containing the output of the `cargo metadata` command. "
            "Each file describes one cargo workspace"
        )
    )

    parser.add_argument(
        "--include-private-crates",
        action="store_true",
        help="Include path dependencies and crates on registries other than crates.io"
    )

    parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT,
        help=f"Path of the CSV report. Default: {DEFAULT_OUTPUT}"
    )

    parser.add_argument(
        "--get-worksheets",
        action="store_true",
        help="Also export the report to an Excel file with one sheet per workspace"
    )

    parser.add_argument(
        "--summary-json",
        action="store_true",
        help="Also save a JSON summary of the run next to the CSV report"
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    output_path = Path(args.output)
    aggregator = DependencyAggregator(include_private=args.include_private_crates)

    try:
        for metadata_file in args.metadata_files:
            aggregator.add_path(metadata_file)

        frame = build_report_frame(aggregator.dependencies)
        write_report_csv(frame, output_path)
        logger.info("CSV file generated at: %s", output_path)

        summary = build_summary(
            aggregator.documents,
            aggregator.dependencies,
            aggregator.unresolved,
            args.include_private_crates,
        )
        print_summary(summary)

        if args.summary_json:
            summary_file = output_path.with_name(f"{output_path.stem}_summary.json")
            save_summary_json(summary, summary_file)
            logger.info("Summary saved to: %s", summary_file)

        if args.get_worksheets:
            excel_file = output_path.with_suffix(".xlsx")
            try:
                export_worksheets(frame, aggregator.dependencies, excel_file)
            except ValueError as e:
                print(f"Error writing worksheets to {excel_file}: {e}", file=sys.stderr)
                sys.exit(1)
            logger.info("Worksheets saved to: %s", excel_file)

    except MetadataError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error writing report: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
