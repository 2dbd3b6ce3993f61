"""
Reporting and export utilities.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from .checker import has_failures
from .models import PackageResult


logger = logging.getLogger(__name__)

TABLE_COLUMNS = ["Project", "Package", "Current", "Latest", "Status"]


def results_to_frame(results: Iterable[PackageResult]) -> pd.DataFrame:
    rows = [
        {
            "Project": r.project,
            "Package": r.package,
            "Current": r.current_version,
            "Latest": r.latest_version,
            "Status": r.status,
        }
        for r in results
    ]
    return pd.DataFrame(rows, columns=TABLE_COLUMNS)


def render_table(results: Iterable[PackageResult]) -> str:
    """Render results as a plain-text table for the console."""
    df = results_to_frame(results)
    if df.empty:
        return "No packages found."
    return df.to_string(index=False, justify="left")


def print_summary(results: List[PackageResult]) -> None:
    print()
    print(render_table(results))
    print()
    if has_failures(results):
        print("Some packages are out of date.")
    else:
        print("All packages are up to date.")


def export_results_csv(results: Iterable[PackageResult], path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame(
        [asdict(r) for r in results],
        columns=[
            "project",
            "package",
            "current_version",
            "latest_version",
            "is_up_to_date",
            "is_ignored",
        ],
    )
    df.to_csv(path, index=False)
    logger.info("Results saved to: %s", path)
    return path


def save_results_json(results: Iterable[PackageResult], path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    results = list(results)
    payload = {
        "has_failures": has_failures(results),
        "results": [asdict(r) for r in results],
    }
    with open(path, 'w', encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    logger.info("Results saved to: %s", path)
    return path
