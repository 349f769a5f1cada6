"""Utility for writing formatted progress tables using tabulate."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from tabulate import tabulate

from backend.services.progress_tracker import SplitProgressRow, overall_progress
from common.log_utils import log_info, log_warning

PROGRESS_HEADERS = ["Image", "Split", "Tagged", "Total", "Remaining", "Progress"]


def format_progress_table(rows: Sequence[SplitProgressRow]) -> Tuple[List[List[Any]], List[str]]:
    """Format per-split progress rows into table data for tabulate.

    A trailing ``TOTAL`` row sums every split.

    Returns:
        Tuple of (table_data, headers) ready for tabulate
    """
    table_data: List[List[Any]] = []
    for row in rows:
        progress = row.progress
        table_data.append([
            row.image_key,
            row.split_key,
            progress.tagged,
            progress.total,
            progress.remaining,
            f"{progress.percentage:.1f}%",
        ])
    if rows:
        total = overall_progress(rows)
        table_data.append(["TOTAL", "", total.tagged, total.total, total.remaining, f"{total.percentage:.1f}%"])
    return table_data, list(PROGRESS_HEADERS)


def render_progress_table(rows: Sequence[SplitProgressRow], *, tablefmt: str = "simple") -> str:
    table_data, headers = format_progress_table(rows)
    return tabulate(table_data, headers=headers, tablefmt=tablefmt)


def write_table_to_log(
    table_data: List[List[Any]],
    headers: List[str],
    log_name: str,
    *,
    tablefmt: str = "grid",
    logs_dir: Optional[Path] = None,
    overwrite: bool = True,
) -> Optional[Path]:
    """Write a formatted table to a log file.

    Args:
        table_data: List of rows, where each row is a list of cell values
        headers: List of column headers
        log_name: Base name for the log file (e.g., "tagging_progress")
        tablefmt: Table format for tabulate (default: "grid")
        logs_dir: Directory to write logs (default: <project_root>/logs/)
        overwrite: If True, overwrite existing file. If False, append timestamp to filename.

    Returns:
        Path to the written log file, or None if writing failed
    """
    if logs_dir is None:
        project_root = Path(__file__).resolve().parent.parent.parent.parent
        logs_dir = project_root / "logs"

    if overwrite:
        filename = f"{log_name}.txt"
    else:
        filename = f"{log_name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.txt"
    log_path = logs_dir / filename

    table_str = tabulate(table_data, headers=headers, tablefmt=tablefmt)
    header_lines = [
        "=" * 80,
        f"Table: {log_name}",
        f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"Rows: {len(table_data)}",
        "=" * 80,
        "",
    ]
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        with open(log_path, "w", encoding="utf-8") as f:
            f.write("\n".join(header_lines))
            f.write(table_str)
            f.write("\n")
    except OSError as e:
        log_warning(f"Failed to write table to {log_path}: {e}", "TABLE_WRITER")
        return None

    log_info(f"Table saved to {log_path}", "TABLE_WRITER")
    return log_path
