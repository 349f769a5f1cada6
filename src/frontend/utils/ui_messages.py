"""Shared UI strings and formatting helpers."""
from __future__ import annotations

from typing import Sequence, Tuple

from backend.services.progress_tracker import SplitProgress

STATUS_NO_DOCUMENT = "Load a JSON document to start tagging"
STATUS_NO_ROOT = "Choose the image directory to preview splits and masks"
STATUS_NO_MASKS = "No masks in this split"
PLACEHOLDER_SPLIT = "Split image"
PLACEHOLDER_MASK = "Mask image"
PLACEHOLDER_LOADING = "Loading…"
HELP_SHORTCUTS: Sequence[Tuple[str, str]] = [
    ("← / →", "Previous / next mask in the split"),
    ("1 … 9", "Tag the current mask with the matching category"),
    ("Ctrl+O", "Load a JSON document"),
    ("Ctrl+T", "Load a tag file"),
    ("Ctrl+D", "Choose the image directory"),
    ("Ctrl+E", "Export the tagged document"),
    ("Ctrl+U", "Toggle unlabeled-only traversal"),
]


def format_missing_asset(expected_path: str) -> str:
    return f"Could not find image file. Expected path: {expected_path}"


def format_progress(progress: SplitProgress) -> str:
    if progress.total == 0:
        return "No masks"
    return f"{progress.tagged}/{progress.total} tagged ({progress.percentage:.0f}%)"


def format_position(position: int, count: int) -> str:
    if count == 0 or position < 0:
        return "– / –"
    return f"{position + 1} / {count}"


def format_export_success(path: str) -> str:
    return f"Exported tagged data to {path}"


def format_tags_loaded(applied: int, skipped: int) -> str:
    if skipped:
        return f"Tags loaded successfully! ({applied} applied, {skipped} skipped)"
    return "Tags loaded successfully!"


def format_split_option(index: int) -> str:
    return f"Split {index}"


def help_text() -> str:
    return "\n".join(f"{keys}: {description}" for keys, description in HELP_SHORTCUTS)
