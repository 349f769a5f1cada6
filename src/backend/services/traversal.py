"""Mask traversal order for a split and bounded prev/next navigation over it."""
from __future__ import annotations

from typing import List, Optional, Sequence

from PyQt6.QtCore import QObject, pyqtSignal

from backend.dataset_store import Dataset, label_of, masks_of
from backend.utils.categories import UNKNOWN_LABEL
from backend.utils.keys import MASK_PREFIX, numeric_sort_key
from common.log_utils import is_debug_enabled, log_debug

TRAVERSAL_ALL = "all"
TRAVERSAL_UNLABELED = "unlabeled"

TRAVERSAL_MODES = (TRAVERSAL_ALL, TRAVERSAL_UNLABELED)

TRAVERSAL_STATUS_TITLES = {
    TRAVERSAL_ALL: "All masks",
    TRAVERSAL_UNLABELED: "Unlabeled only",
}


def mask_order(
    dataset: Dataset,
    image_key: str,
    split_key: str,
    *,
    unlabeled_only: bool = False,
) -> List[str]:
    """Unlabeled masks first, then labeled ones; each group by ascending mask number."""
    masks = masks_of(dataset, image_key, split_key)
    unlabeled: List[str] = []
    labeled: List[str] = []
    for key, mask in masks.items():
        if label_of(mask) == UNKNOWN_LABEL:
            unlabeled.append(key)
        else:
            labeled.append(key)
    unlabeled.sort(key=lambda key: numeric_sort_key(key, MASK_PREFIX))
    if unlabeled_only:
        return unlabeled
    labeled.sort(key=lambda key: numeric_sort_key(key, MASK_PREFIX))
    return unlabeled + labeled


class MaskNavigator(QObject):
    """Tracks the current position inside the active mask order.

    Position is -1 only when the order is empty ("no current item").
    """

    positionChanged = pyqtSignal(int)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._order: List[str] = []
        self._position = -1

    @property
    def order(self) -> List[str]:
        return list(self._order)

    @property
    def position(self) -> int:
        return self._position

    def _set_position(self, value: int) -> None:
        if value == self._position:
            return
        if is_debug_enabled("nav"):
            log_debug(f"position {self._position} -> {value}", "NAV")
        self._position = value
        self.positionChanged.emit(value)

    def set_order(self, order: Sequence[str], *, reset: bool = False) -> None:
        """Install a freshly computed order and clamp the position into it."""
        self._order = list(order)
        if not self._order:
            self._set_position(-1)
            return
        target = 0 if reset or self._position < 0 else min(self._position, len(self._order) - 1)
        self._set_position(target)

    def reset(self) -> None:
        self._set_position(0 if self._order else -1)

    def count(self) -> int:
        return len(self._order)

    def current(self) -> Optional[str]:
        if 0 <= self._position < len(self._order):
            return self._order[self._position]
        return None

    def can_prev(self) -> bool:
        return self._position > 0

    def can_next(self) -> bool:
        return 0 <= self._position < len(self._order) - 1

    def prev(self) -> bool:
        """Move one step back; stays in place at the first mask."""
        if not self.can_prev():
            return False
        self._set_position(self._position - 1)
        return True

    def next(self) -> bool:
        """Move one step forward; stays in place at the last mask."""
        if not self.can_next():
            return False
        self._set_position(self._position + 1)
        return True

    def jump_to(self, target_index: int) -> bool:
        if 0 <= target_index < len(self._order):
            self._set_position(target_index)
            return True
        return False

    def index_of(self, mask_key: str) -> int:
        try:
            return self._order.index(mask_key)
        except ValueError:
            return -1
