"""In-memory image → split → mask hierarchy loaded from a JSON document.

A ``Dataset`` is an immutable value. ``apply_label`` returns a new value that
shares every image, split and mask with the old one except along the edited path.
"""
from __future__ import annotations

import copy
import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from backend.utils.categories import UNKNOWN_LABEL, CategorySet, resolve_category_set
from backend.utils.keys import MASK_PREFIX, SPLIT_PREFIX, is_mask_key, is_split_key, numeric_sort_key
from common.dict_helpers import assoc_dict_path, get_dict_path
from common.log_utils import log_debug, log_info
from config import get_config

REASON_NOT_AN_OBJECT = "not-an-object"
REASON_PARSE_FAILURE = "parse-failure"

Document = Union[Mapping[str, Any], str, bytes, bytearray]


class DatasetLoadError(Exception):
    """The document could not be turned into a dataset."""

    def __init__(self, reason: str, detail: str = "") -> None:
        self.reason = reason
        self.detail = detail
        message = reason if not detail else f"{reason}: {detail}"
        super().__init__(message)


class Dataset:
    """Read-only view over the loaded document."""

    __slots__ = ("_images",)

    def __init__(self, images: Dict[str, Any]) -> None:
        self._images = images

    @property
    def images(self) -> Mapping[str, Any]:
        return MappingProxyType(self._images)

    def raw(self) -> Dict[str, Any]:
        """Underlying dict. Callers must treat it as frozen."""
        return self._images

    def __len__(self) -> int:
        return len(self._images)

    def __contains__(self, image_key: object) -> bool:
        return image_key in self._images

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dataset):
            return NotImplemented
        return self._images == other._images

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Dataset(images={len(self._images)})"


EMPTY_DATASET = Dataset({})


def _backfill_labels(images: Dict[str, Any]) -> int:
    """Give every label-less mask the Unknown label in place; returns the count."""
    filled = 0
    for image in images.values():
        if not isinstance(image, dict):
            continue
        for split_key_, split in image.items():
            if not is_split_key(split_key_) or not isinstance(split, dict):
                continue
            for mask_key_, mask in split.items():
                if is_mask_key(mask_key_) and isinstance(mask, dict) and mask.get("label") is None:
                    mask["label"] = UNKNOWN_LABEL
                    filled += 1
    return filled


def load_dataset(document: Document) -> Dataset:
    """Build a dataset from a parsed document or from raw JSON text.

    Raises:
        DatasetLoadError: ``parse-failure`` for invalid JSON, ``not-an-object``
            when the top level is not a mapping.
    """
    if isinstance(document, (str, bytes, bytearray)):
        try:
            document = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DatasetLoadError(REASON_PARSE_FAILURE, str(exc)) from exc
    if not isinstance(document, Mapping):
        raise DatasetLoadError(REASON_NOT_AN_OBJECT, f"top level is {type(document).__name__}")

    images = copy.deepcopy(dict(document))
    filled = _backfill_labels(images)
    log_info(f"Dataset loaded: images={len(images)}, unlabeled masks backfilled={filled}", "STORE")
    return Dataset(images)


def load_dataset_file(path: Union[str, Path]) -> Dataset:
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise DatasetLoadError(REASON_PARSE_FAILURE, f"cannot read {path}: {exc}") from exc
    return load_dataset(text)


# ----------------------------------------------------------------------
# Read accessors
# ----------------------------------------------------------------------

def keys_of(dataset: Dataset) -> List[str]:
    return list(dataset.raw().keys())


def splits_of(dataset: Dataset, image_key: str) -> List[str]:
    image = dataset.raw().get(image_key)
    if not isinstance(image, Mapping):
        return []
    keys = [key for key in image if is_split_key(key)]
    return sorted(keys, key=lambda key: numeric_sort_key(key, SPLIT_PREFIX))


def masks_of(dataset: Dataset, image_key: str, split_key: str) -> Mapping[str, Mapping[str, Any]]:
    split = get_dict_path(dataset.raw(), [image_key, split_key])
    if not isinstance(split, Mapping):
        return MappingProxyType({})
    return MappingProxyType(
        {key: MappingProxyType(mask) for key, mask in split.items() if is_mask_key(key) and isinstance(mask, Mapping)}
    )


def mask_of(dataset: Dataset, image_key: str, split_key: str, mask_key: str) -> Optional[Mapping[str, Any]]:
    mask = get_dict_path(dataset.raw(), [image_key, split_key, mask_key])
    if not is_mask_key(mask_key) or not isinstance(mask, Mapping):
        return None
    return MappingProxyType(mask)


def label_of(mask: Optional[Mapping[str, Any]]) -> str:
    if not mask:
        return UNKNOWN_LABEL
    label = mask.get("label")
    return label if isinstance(label, str) else UNKNOWN_LABEL


# ----------------------------------------------------------------------
# Mutation
# ----------------------------------------------------------------------

def _active_categories(categories: Optional[CategorySet]) -> CategorySet:
    if categories is not None:
        return categories
    config = get_config()
    return resolve_category_set(config.category_set, config.categories_dir)


def apply_label(
    dataset: Dataset,
    image_key: str,
    split_key: str,
    mask_key: str,
    category: str,
    categories: Optional[CategorySet] = None,
) -> Dataset:
    """Return a dataset where exactly one mask carries ``category``.

    ``categories`` defaults to the configured category set. An unknown path, the
    ``Unknown`` sentinel or a category outside the set leaves the dataset
    untouched and returns it as is.
    """
    categories = _active_categories(categories)
    if not isinstance(category, str) or category == UNKNOWN_LABEL or category not in categories:
        log_debug(f"Ignoring label '{category}' outside the category set", "STORE")
        return dataset
    mask = get_dict_path(dataset.raw(), [image_key, split_key, mask_key])
    if not is_mask_key(mask_key) or not isinstance(mask, Mapping):
        log_debug(f"Ignoring label for missing mask {image_key}/{split_key}/{mask_key}", "STORE")
        return dataset
    images = assoc_dict_path(dataset.raw(), [image_key, split_key, mask_key], {**mask, "label": category})
    return Dataset(images)


# ----------------------------------------------------------------------
# Export and legacy tag files
# ----------------------------------------------------------------------

def to_document(dataset: Dataset) -> Dict[str, Any]:
    """Plain copy of the dataset with every mask label written out."""
    document = copy.deepcopy(dataset.raw())
    _backfill_labels(document)
    return document


def dumps_dataset(dataset: Dataset, indent: int = 2) -> str:
    return json.dumps(to_document(dataset), indent=indent, ensure_ascii=False)


def export_dataset(dataset: Dataset, path: Union[str, Path], indent: int = 2) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_dataset(dataset, indent) + "\n", encoding="utf-8")
    log_info(f"Exported {len(dataset)} images to {path}", "STORE")
    return path


def load_tags_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a flat ``{"image/split/mask": category}`` tag file."""
    try:
        content = json.loads(Path(path).read_text(encoding="utf-8-sig"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DatasetLoadError(REASON_PARSE_FAILURE, str(exc)) from exc
    if not isinstance(content, dict):
        raise DatasetLoadError(REASON_NOT_AN_OBJECT, "tag file must be an object")
    return content


def parse_tag_key(key: str) -> Optional[Tuple[str, str, str]]:
    """Split ``image/split_N/mask_M``; the image key itself may contain slashes."""
    parts = key.rsplit("/", 2) if isinstance(key, str) else []
    if len(parts) != 3 or not all(parts):
        return None
    image_key, split_key_, mask_key_ = parts
    if not split_key_.startswith(SPLIT_PREFIX) or not mask_key_.startswith(MASK_PREFIX):
        return None
    return image_key, split_key_, mask_key_


def merge_tags(
    dataset: Dataset,
    tags: Mapping[str, Any],
    categories: Optional[CategorySet] = None,
) -> Tuple[Dataset, int, int]:
    """Apply every valid tag entry; returns the new dataset plus applied/skipped counts."""
    categories = _active_categories(categories)
    applied = 0
    skipped = 0
    for key, category in tags.items():
        path = parse_tag_key(key)
        if path is None:
            skipped += 1
            continue
        updated = apply_label(dataset, *path, category, categories)
        if updated is dataset:
            skipped += 1
            continue
        dataset = updated
        applied += 1
    log_info(f"Tags merged: applied={applied}, skipped={skipped}", "STORE")
    return dataset, applied, skipped


def iter_masks(dataset: Dataset) -> Iterable[Tuple[str, str, str, Mapping[str, Any]]]:
    for image_key in keys_of(dataset):
        for split_key_ in splits_of(dataset, image_key):
            for mask_key_, mask in masks_of(dataset, image_key, split_key_).items():
                yield image_key, split_key_, mask_key_, mask
