"""Labeling progress derived from the dataset for one split or for all of them."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from backend.dataset_store import Dataset, keys_of, label_of, masks_of, splits_of
from backend.utils.categories import UNKNOWN_LABEL


@dataclass(frozen=True)
class SplitProgress:
    tagged: int = 0
    total: int = 0
    percentage: float = 0.0

    @property
    def remaining(self) -> int:
        return self.total - self.tagged

    @property
    def complete(self) -> bool:
        return self.total > 0 and self.tagged == self.total


@dataclass(frozen=True)
class SplitProgressRow:
    image_key: str
    split_key: str
    progress: SplitProgress


def split_progress(
    dataset: Dataset,
    image_key: str,
    split_key: str,
    ordered_mask_keys: Sequence[str],
) -> SplitProgress:
    """Count tagged masks among ``ordered_mask_keys``; total is the length of the order."""
    masks = masks_of(dataset, image_key, split_key)
    tagged = sum(1 for key in ordered_mask_keys if label_of(masks.get(key)) != UNKNOWN_LABEL)
    total = len(ordered_mask_keys)
    percentage = 100.0 * tagged / total if total > 0 else 0.0
    return SplitProgress(tagged=tagged, total=total, percentage=percentage)


def dataset_progress(dataset: Dataset) -> List[SplitProgressRow]:
    rows: List[SplitProgressRow] = []
    for image_key in keys_of(dataset):
        for split_key in splits_of(dataset, image_key):
            keys = list(masks_of(dataset, image_key, split_key))
            rows.append(SplitProgressRow(image_key, split_key, split_progress(dataset, image_key, split_key, keys)))
    return rows


def overall_progress(rows: Sequence[SplitProgressRow]) -> SplitProgress:
    tagged = sum(row.progress.tagged for row in rows)
    total = sum(row.progress.total for row in rows)
    return SplitProgress(tagged, total, 100.0 * tagged / total if total else 0.0)
