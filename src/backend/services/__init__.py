"""Service layer aggregation for the labeling session, traversal, progress, and assets.

Provides convenience re-exports so callers can import the core tagger services from a single namespace.
"""

from .asset_loader import KIND_MASK, KIND_SPLIT, AssetLoader, AssetRequest
from .asset_resolver import (AssetLedger, AssetNotFound, AssetRef,
                             LocalDirectoryHandle, grant_root, resolve_asset)
from .labeling_session import LabelingSession
from .preferences import PreferencesService
from .progress_tracker import SplitProgress, dataset_progress, split_progress
from .traversal import TRAVERSAL_ALL, TRAVERSAL_UNLABELED, MaskNavigator, mask_order

__all__ = [
    "AssetLedger",
    "AssetLoader",
    "AssetNotFound",
    "AssetRef",
    "AssetRequest",
    "KIND_MASK",
    "KIND_SPLIT",
    "LabelingSession",
    "LocalDirectoryHandle",
    "MaskNavigator",
    "PreferencesService",
    "SplitProgress",
    "TRAVERSAL_ALL",
    "TRAVERSAL_UNLABELED",
    "dataset_progress",
    "grant_root",
    "mask_order",
    "resolve_asset",
    "split_progress",
]
