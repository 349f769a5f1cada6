"""Resolves split and mask images on a thread pool and keeps only the latest result.

Every request captures the selection it was made for plus a generation number.
A result that arrives after a newer request for the same slot is stale: its asset
is released on arrival and never shown.
"""
from __future__ import annotations

from dataclasses import dataclass
from threading import Event
from typing import Dict, Optional, Set, Union

from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal

from backend.services.asset_resolver import (AssetLedger, AssetNotFound,
                                             AssetRef, DirectoryHandle,
                                             MaskIndex, resolve_asset)
from backend.utils.keys import SplitScheme
from common.log_utils import is_debug_enabled, log_debug
from config import get_config

KIND_SPLIT = "split"
KIND_MASK = "mask"
ASSET_KINDS = (KIND_SPLIT, KIND_MASK)


@dataclass(frozen=True)
class AssetRequest:
    kind: str
    image_key: str
    split_index: int
    mask_index: Optional[MaskIndex]
    generation: int

    def targets(self, image_key: str, split_index: int, mask_index: Optional[MaskIndex]) -> bool:
        return (self.image_key, self.split_index, self.mask_index) == (image_key, split_index, mask_index)


class AssetSlot:
    """Owns the asset currently shown for one kind and releases whatever it replaces."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._ref: Optional[AssetRef] = None

    @property
    def ref(self) -> Optional[AssetRef]:
        return self._ref

    def replace(self, ref: Optional[AssetRef]) -> None:
        previous, self._ref = self._ref, ref
        if previous is not None and previous is not ref:
            previous.release()

    def clear(self) -> None:
        self.replace(None)


class AssetTaskSignals(QObject):
    completed = pyqtSignal(object, object)  # task, AssetRef | AssetNotFound

    def __init__(self) -> None:
        super().__init__()


class AssetResolveTask(QRunnable):
    def __init__(
        self,
        request: AssetRequest,
        root: DirectoryHandle,
        scheme: SplitScheme,
        ledger: Optional[AssetLedger] = None,
    ) -> None:
        super().__init__()
        self.request = request
        self.root = root
        self.scheme = scheme
        self.ledger = ledger
        self.signals = AssetTaskSignals()
        self._cancel_event = Event()

    def cancel(self) -> None:
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def run(self) -> None:
        request = self.request
        result = resolve_asset(
            self.root,
            request.image_key,
            request.split_index,
            request.mask_index,
            scheme=self.scheme,
            ledger=self.ledger,
        )
        if self.cancelled:
            if isinstance(result, AssetRef):
                result.release()
            return
        try:
            self.signals.completed.emit(self, result)
        except RuntimeError:
            # Signals object already deleted with the window.
            if isinstance(result, AssetRef):
                result.release()


class AssetLoader(QObject):
    """Coordinates background resolution for the split slot and the mask slot."""

    assetLoading = pyqtSignal(str)
    assetReady = pyqtSignal(str, object)  # kind, AssetRef
    assetMissing = pyqtSignal(str, str)  # kind, expected path
    assetCleared = pyqtSignal(str)

    def __init__(
        self,
        thread_pool: Optional[QThreadPool] = None,
        ledger: Optional[AssetLedger] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        if thread_pool is None:
            thread_pool = QThreadPool(self)
            thread_pool.setMaxThreadCount(get_config().asset_worker_limit)
        self._pool = thread_pool
        self.ledger = ledger or AssetLedger()
        self._root: Optional[DirectoryHandle] = None
        self._scheme = SplitScheme(get_config().split_first_index)
        self._generation = 0
        self._pending: Dict[str, AssetRequest] = {}
        self._slots: Dict[str, AssetSlot] = {kind: AssetSlot(kind) for kind in ASSET_KINDS}
        self._inflight: Set[AssetResolveTask] = set()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    @property
    def root(self) -> Optional[DirectoryHandle]:
        return self._root

    def set_root(self, root: Optional[DirectoryHandle]) -> None:
        self._root = root
        for kind in ASSET_KINDS:
            self.clear(kind)

    def set_scheme(self, scheme: SplitScheme) -> None:
        self._scheme = scheme
        for kind in ASSET_KINDS:
            self.clear(kind)

    def slot(self, kind: str) -> AssetSlot:
        return self._slots[kind]

    def pending(self, kind: str) -> Optional[AssetRequest]:
        return self._pending.get(kind)

    def inflight_count(self) -> int:
        return len(self._inflight)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    def request_split(self, image_key: Optional[str], split_index: int, *, force: bool = False) -> Optional[AssetRequest]:
        return self._request(KIND_SPLIT, image_key, split_index, None, force)

    def request_mask(
        self,
        image_key: Optional[str],
        split_index: int,
        mask_index: Optional[MaskIndex],
        *,
        force: bool = False,
    ) -> Optional[AssetRequest]:
        if mask_index is None:
            self.clear(KIND_MASK)
            return None
        return self._request(KIND_MASK, image_key, split_index, mask_index, force)

    def clear(self, kind: str) -> None:
        """Forget the active request of ``kind`` and release its asset."""
        self._pending.pop(kind, None)
        self._slots[kind].clear()
        self.assetCleared.emit(kind)

    def shutdown(self) -> None:
        """Release everything; results still in flight are released on arrival."""
        for task in list(self._inflight):
            task.cancel()
        self._pending.clear()
        for slot in self._slots.values():
            slot.clear()

    def wait_for_done(self, msecs: int = 500) -> bool:
        return self._pool.waitForDone(msecs)

    def _request(
        self,
        kind: str,
        image_key: Optional[str],
        split_index: int,
        mask_index: Optional[MaskIndex],
        force: bool,
    ) -> Optional[AssetRequest]:
        if self._root is None or not image_key:
            self.clear(kind)
            return None
        active = self._pending.get(kind)
        if active is not None and not force and active.targets(image_key, split_index, mask_index):
            return active
        self._generation += 1
        request = AssetRequest(kind, image_key, split_index, mask_index, self._generation)
        self._pending[kind] = request
        task = AssetResolveTask(request, self._root, self._scheme, self.ledger)
        task.signals.completed.connect(self._handle_task_completed)
        self._inflight.add(task)
        self.assetLoading.emit(kind)
        self._pool.start(task)
        return request

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------
    def _handle_task_completed(self, task: AssetResolveTask, result: Union[AssetRef, AssetNotFound]) -> None:
        self._inflight.discard(task)
        request = task.request
        if request != self._pending.get(request.kind):
            if is_debug_enabled("assets"):
                log_debug(f"Discarding stale {request.kind} result (generation {request.generation})", "ASSETS")
            if isinstance(result, AssetRef):
                result.release()
            return
        slot = self._slots[request.kind]
        if isinstance(result, AssetRef):
            slot.replace(result)
            self.assetReady.emit(request.kind, result)
        else:
            slot.clear()
            self.assetMissing.emit(request.kind, result.expected_path)
