"""Run artifact helpers: the export document and per-run reports."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Sequence


def _ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)


def write_export(records: Sequence[dict[str, Any]], output_file: str) -> str:
    """Write exported file records as one JSON array and return the path."""
    _ensure_parent_dir(output_file)
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(list(records), f, indent=2, ensure_ascii=False)
        f.write("\n")
    return output_file


def write_run_report(
    report: dict[str, Any],
    run_id: str,
    output_dir: str = "output/run_reports",
) -> str:
    """Write a JSON run report named after ``run_id`` and return its path.

    ``run_id`` and ``timestamp_utc`` are added unless the report already
    carries them.
    """
    os.makedirs(output_dir, exist_ok=True)
    payload = dict(report)
    payload.setdefault("run_id", run_id)
    payload.setdefault("timestamp_utc", datetime.now(timezone.utc).isoformat())
    path = os.path.join(output_dir, f"{run_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    return path
