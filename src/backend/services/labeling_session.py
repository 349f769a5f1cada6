"""Owns the loaded dataset and the image/split/mask selection.

Order and progress are recomputed from the dataset on every change, never patched.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple, Union

from PyQt6.QtCore import QObject, pyqtSignal

from backend.dataset_store import (EMPTY_DATASET, Dataset, DatasetLoadError,
                                   Document, apply_label, export_dataset,
                                   keys_of, label_of, load_dataset,
                                   load_dataset_file, load_tags_file,
                                   mask_of, merge_tags, splits_of)
from backend.services.progress_tracker import SplitProgress, split_progress
from backend.services.traversal import (TRAVERSAL_ALL, TRAVERSAL_MODES,
                                        TRAVERSAL_UNLABELED, MaskNavigator,
                                        mask_order)
from backend.utils.categories import UNKNOWN_LABEL, CategorySet, resolve_category_set
from backend.utils.keys import MASK_PREFIX, SplitScheme, mask_number
from common.log_utils import log_debug, log_info, log_warning
from config import get_config


class LabelingSession(QObject):
    datasetChanged = pyqtSignal()
    selectionChanged = pyqtSignal(str, int)  # image key, split index
    currentMaskChanged = pyqtSignal(object)  # mask key or None
    progressChanged = pyqtSignal(object)  # SplitProgress
    splitCompleted = pyqtSignal(str, int)
    statusMessage = pyqtSignal(str, int)
    errorRaised = pyqtSignal(str)

    def __init__(
        self,
        categories: Optional[CategorySet] = None,
        scheme: Optional[SplitScheme] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        config = get_config()
        self.categories = categories or resolve_category_set(config.category_set, config.categories_dir)
        self.scheme = scheme or SplitScheme(config.split_first_index)
        self.dataset: Dataset = EMPTY_DATASET
        self.loaded = False
        self.document_path: Optional[Path] = None
        self.last_error: Optional[DatasetLoadError] = None
        self.navigator = MaskNavigator(self)
        self._image_key: Optional[str] = None
        self._split_index = 1
        self._traversal_mode = TRAVERSAL_ALL
        self._progress = SplitProgress()

    # ------------------------------------------------------------------
    # Dataset lifecycle
    # ------------------------------------------------------------------
    def load(self, document: Document) -> bool:
        """Parse first, then swap; on failure the current dataset stays."""
        try:
            dataset = load_dataset(document)
        except DatasetLoadError as exc:
            self._report_load_error(exc)
            return False
        self.document_path = None
        self._install(dataset)
        return True

    def load_file(self, path: Union[str, Path]) -> bool:
        try:
            dataset = load_dataset_file(path)
        except DatasetLoadError as exc:
            self._report_load_error(exc)
            return False
        self.document_path = Path(path)
        self._install(dataset)
        self.statusMessage.emit(f"Loaded {Path(path).name}", 3000)
        return True

    def _report_load_error(self, exc: DatasetLoadError) -> None:
        self.last_error = exc
        log_warning(f"Dataset load failed: {exc}", "SESSION")
        self.errorRaised.emit(f"Error parsing JSON file: {exc}")

    def _install(self, dataset: Dataset) -> None:
        self.dataset = dataset
        self.loaded = True
        self.last_error = None
        images = keys_of(dataset)
        self._image_key = images[0] if images else None
        indices = self.split_indices()
        self._split_index = indices[0] if indices else 1
        log_info(f"Session ready: images={len(images)}, first={self._image_key}", "SESSION")
        self.datasetChanged.emit()
        self._emit_selection()
        self._recompute(reset=True)

    def set_categories(self, categories: CategorySet) -> None:
        self.categories = categories
        self.datasetChanged.emit()

    def set_scheme(self, scheme: SplitScheme) -> None:
        self.scheme = scheme
        indices = self.split_indices()
        self._split_index = indices[0] if indices else 1
        self._emit_selection()
        self._recompute(reset=True)

    def import_tags(self, path: Union[str, Path]) -> Optional[Tuple[int, int]]:
        """Apply a flat tag file; returns (applied, skipped) or None if it could not be read."""
        try:
            tags = load_tags_file(path)
        except DatasetLoadError as exc:
            log_warning(f"Tag file rejected: {exc}", "SESSION")
            self.errorRaised.emit(f"Error parsing tag file: {exc}")
            return None
        dataset, applied, skipped = merge_tags(self.dataset, tags, self.categories)
        self.dataset = dataset
        self.datasetChanged.emit()
        self._recompute(reset=False)
        return applied, skipped

    def export(self, path: Union[str, Path]) -> Path:
        return export_dataset(self.dataset, path, get_config().export_indent)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    @property
    def image_key(self) -> Optional[str]:
        return self._image_key

    @property
    def split_index(self) -> int:
        return self._split_index

    @property
    def split_key(self) -> Optional[str]:
        if self._image_key is None:
            return None
        return self.scheme.key(self._split_index)

    @property
    def traversal_mode(self) -> str:
        return self._traversal_mode

    def image_keys(self) -> List[str]:
        return keys_of(self.dataset)

    def split_keys(self, image_key: Optional[str] = None) -> List[str]:
        image_key = image_key if image_key is not None else self._image_key
        if image_key is None:
            return []
        return splits_of(self.dataset, image_key)

    def split_indices(self, image_key: Optional[str] = None) -> List[int]:
        image_key = image_key if image_key is not None else self._image_key
        if image_key is None:
            return []
        indices = (self.scheme.index(key) for key in splits_of(self.dataset, image_key))
        return sorted(index for index in indices if index is not None and index >= 1)

    def select_image(self, image_key: str) -> bool:
        if image_key == self._image_key or image_key not in self.dataset:
            return False
        self._image_key = image_key
        indices = self.split_indices()
        if indices and self._split_index not in indices:
            self._split_index = indices[0]
        self._emit_selection()
        self._recompute(reset=True)
        return True

    def select_split(self, split_index: int) -> bool:
        if split_index == self._split_index or split_index < 1:
            return False
        self._split_index = split_index
        self._emit_selection()
        self._recompute(reset=True)
        return True

    def set_traversal_mode(self, mode: str) -> None:
        if mode not in TRAVERSAL_MODES or mode == self._traversal_mode:
            return
        self._traversal_mode = mode
        self._recompute(reset=True)

    def _emit_selection(self) -> None:
        if self._image_key is not None:
            self.selectionChanged.emit(self._image_key, self._split_index)

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------
    def full_order(self) -> List[str]:
        split_key = self.split_key
        if self._image_key is None or split_key is None:
            return []
        return mask_order(self.dataset, self._image_key, split_key)

    def _active_order(self) -> List[str]:
        split_key = self.split_key
        if self._image_key is None or split_key is None:
            return []
        return mask_order(
            self.dataset,
            self._image_key,
            split_key,
            unlabeled_only=self._traversal_mode == TRAVERSAL_UNLABELED,
        )

    @property
    def order(self) -> List[str]:
        return self.navigator.order

    @property
    def position(self) -> int:
        return self.navigator.position

    @property
    def progress(self) -> SplitProgress:
        return self._progress

    @property
    def current_mask_key(self) -> Optional[str]:
        return self.navigator.current()

    @property
    def current_mask(self) -> Optional[Mapping[str, Any]]:
        key = self.current_mask_key
        split_key = self.split_key
        if key is None or self._image_key is None or split_key is None:
            return None
        return mask_of(self.dataset, self._image_key, split_key, key)

    @property
    def current_mask_index(self) -> Optional[Union[int, str]]:
        """Suffix used for the mask's image file name."""
        key = self.current_mask_key
        if key is None:
            return None
        number = mask_number(key)
        return number if number is not None else key[len(MASK_PREFIX):]

    def current_label(self) -> str:
        return label_of(self.current_mask)

    def _recompute(self, *, reset: bool) -> None:
        self.navigator.set_order(self._active_order(), reset=reset)
        self._refresh_progress()
        self.currentMaskChanged.emit(self.current_mask_key)

    def _refresh_progress(self) -> None:
        split_key = self.split_key
        if self._image_key is None or split_key is None:
            self._progress = SplitProgress()
        else:
            self._progress = split_progress(self.dataset, self._image_key, split_key, self.full_order())
        self.progressChanged.emit(self._progress)

    # ------------------------------------------------------------------
    # Navigation and labeling
    # ------------------------------------------------------------------
    def next(self) -> bool:
        moved = self.navigator.next()
        if moved:
            self.currentMaskChanged.emit(self.current_mask_key)
        return moved

    def prev(self) -> bool:
        moved = self.navigator.prev()
        if moved:
            self.currentMaskChanged.emit(self.current_mask_key)
        return moved

    def jump_to(self, position: int) -> bool:
        moved = self.navigator.jump_to(position)
        if moved:
            self.currentMaskChanged.emit(self.current_mask_key)
        return moved

    def tag_current(self, category: str) -> bool:
        """Label the current mask, then move to the next unlabeled one.

        When no unlabeled mask is left the selection stays on the mask just tagged.
        """
        mask_key = self.current_mask_key
        split_key = self.split_key
        if mask_key is None or self._image_key is None or split_key is None:
            return False
        if category not in self.categories:
            log_debug(f"Rejected category '{category}'", "SESSION")
            return False
        updated = apply_label(self.dataset, self._image_key, split_key, mask_key, category, self.categories)
        if updated is self.dataset:
            return False
        self.dataset = updated
        self.datasetChanged.emit()

        order = self._active_order()
        unlabeled_left = bool(order) and label_of(mask_of(updated, self._image_key, split_key, order[0])) == UNKNOWN_LABEL
        self.navigator.set_order(order)
        if unlabeled_left:
            self.navigator.jump_to(0)
        elif mask_key in order:
            self.navigator.jump_to(order.index(mask_key))
        self._refresh_progress()
        self.currentMaskChanged.emit(self.current_mask_key)

        if self._progress.complete:
            self.splitCompleted.emit(self._image_key, self._split_index)
            self.statusMessage.emit("All masks in this split have been tagged!", 5000)
        return True
