#!/usr/bin/env python3
"""
PHP hook and documentation export.

Discovers PHP files below a source directory, reflects them with hook
detection enabled and writes the exported records as one JSON document,
plus a run report.

Usage:
    python run_export.py --source-dir /path/to/wordpress
    python run_export.py --source-dir ./src --root . --output-file out/hooks.json
    python run_export.py --source-dir ./src --config phpextract.yml --continue-on-error
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from dataclasses import replace
from typing import Any, Optional, Sequence

from core.run_artifacts import write_export, write_run_report
from core.settings import ConfigValidationError, ExportSettings, load_settings
from core.structured_logging import configure_structured_logging, phase_scope, set_run_id
from exporter.entities import ExportStats, export_project
from hooks.detector import HookStrategy
from reflection.discovery import get_source_files
from reflection.errors import ExtractionError
from reflection.project import create_project

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="PHP hook & docblock export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_export.py --source-dir ./wordpress\n"
            "  python run_export.py --source-dir ./src --output-file out/hooks.json\n"
        ),
    )

    parser.add_argument(
        "--source-dir",
        required=True,
        help="Directory to search for PHP files.",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Project root used for relative paths. Default: the source directory.",
    )
    parser.add_argument(
        "--output-file",
        default=None,
        help="Path of the JSON export. Overrides the settings file.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Optional YAML or JSON settings file.",
    )
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        default=False,
        help="Skip files that fail to reflect instead of aborting.",
    )
    parser.add_argument(
        "--strict-config",
        action="store_true",
        default=False,
        help="Fail on invalid settings instead of falling back to defaults.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> ExportSettings:
    """Load settings and apply command-line overrides."""
    strict = True if args.strict_config else None
    settings = load_settings(args.config, strict=strict)

    overrides: dict[str, Any] = {}
    if args.output_file:
        overrides["output_file"] = args.output_file
    if args.continue_on_error:
        overrides["continue_on_error"] = True
    if args.verbose:
        overrides["log_level"] = "DEBUG"

    return replace(settings, **overrides)


def run_export(source_dir: str, root: str, settings: ExportSettings) -> dict[str, Any]:
    """Run the discover, parse, export and write phases.

    Args:
        source_dir: Directory to search for PHP files.
        root: Project root for relative paths.
        settings: Resolved export settings.

    Returns:
        Run report fragment with status, stats and output path.

    Raises:
        InvalidInputError: If ``source_dir`` is not a directory.
        DirectoryTraversalError: If a subdirectory cannot be read.
        ExtractionError: If a file fails and ``continue_on_error`` is off.
    """
    t0 = time.time()

    with phase_scope("discover"):
        files = get_source_files(source_dir, settings.extensions, settings.exclude_dirs)

    with phase_scope("parse"):
        project = create_project(
            settings.project_name,
            files,
            strategies=[HookStrategy()],
            continue_on_error=settings.continue_on_error,
            extensions=settings.extensions,
        )

    with phase_scope("export"):
        records = export_project(project, root)

    with phase_scope("write"):
        output_path = write_export(records, settings.output_file)
        logger.info(f"Wrote {len(records)} file records to {output_path}")

    stats = ExportStats.from_project(project)
    logger.info(f"Export completed in {time.time() - t0:.2f}s: {stats}")

    status = "success"
    if stats.files_failed:
        status = "partial_success" if stats.files_processed else "failed"

    return {
        "status": status,
        "source_dir": os.path.abspath(source_dir),
        "root": root,
        "output_file": output_path,
        "stats": stats.to_dict(),
        "failed_files": list(project.failed),
    }


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the export."""
    args = parse_args(argv)

    try:
        settings = resolve_settings(args)
    except ConfigValidationError as e:
        configure_structured_logging(level=logging.INFO)
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    configure_structured_logging(level=settings.log_level)
    run_id = set_run_id()
    root = args.root if args.root is not None else args.source_dir

    run_report: dict[str, Any] = {
        "run_id": run_id,
        "pipeline": "phpextract",
        "status": "failed",
    }
    try:
        run_report.update(run_export(args.source_dir, root, settings))
    except ExtractionError as e:
        run_report["error"] = str(e)
        logger.error(f"Export failed: {e}")
    except Exception as e:
        run_report["error"] = str(e)
        logger.error(f"Export failed: {e}", exc_info=True)

    report_path = write_run_report(run_report, run_id, settings.report_dir)
    logger.info("Run report written: %s", report_path)
    if run_report["status"] == "failed":
        sys.exit(1)


if __name__ == "__main__":
    main()
