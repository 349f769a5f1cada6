"""Resolve split and mask images below a user-granted root directory.

Layout: ``<root>/<image_key>/split_<s>/split_<s>.jpg`` for the split image and
``<root>/<image_key>/split_<s>/mask_<m>.jpg`` for each mask. Resolution never
raises: a missing directory or file yields ``AssetNotFound`` with the expected path.
"""
from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol, Tuple, Union

from backend.utils.keys import MASK_PREFIX, SplitScheme
from common.log_utils import is_debug_enabled, log_debug, log_warning
from config import get_config

MaskIndex = Union[int, str]


class FileHandle(Protocol):
    name: str

    def read_bytes(self) -> bytes:
        ...


class DirectoryHandle(Protocol):
    name: str

    def get_child_directory(self, name: str) -> "DirectoryHandle":
        ...

    def get_child_file(self, name: str) -> FileHandle:
        ...


def _check_child_name(name: str) -> None:
    if not name or name in {".", ".."} or "/" in name or os.sep in name:
        raise ValueError(f"Invalid entry name: {name!r}")


class LocalFileHandle:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.name = path.name

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


class LocalDirectoryHandle:
    """Directory handle backed by the local filesystem."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.name = self.path.name

    def get_child_directory(self, name: str) -> "LocalDirectoryHandle":
        _check_child_name(name)
        candidate = self.path / name
        if not candidate.is_dir():
            raise FileNotFoundError(f"No directory '{name}' in {self.path}")
        return LocalDirectoryHandle(candidate)

    def get_child_file(self, name: str) -> LocalFileHandle:
        _check_child_name(name)
        candidate = self.path / name
        if not candidate.is_file():
            raise FileNotFoundError(f"No file '{name}' in {self.path}")
        return LocalFileHandle(candidate)

    def __repr__(self) -> str:
        return f"LocalDirectoryHandle({str(self.path)!r})"


def grant_root(path: Optional[Union[str, Path]]) -> Optional[LocalDirectoryHandle]:
    """Turn a picked directory into a root handle.

    A cancelled pick or a directory we may not read means "no directory selected";
    it is not reported as an error.
    """
    if not path:
        return None
    candidate = Path(path)
    if not candidate.is_dir() or not os.access(candidate, os.R_OK | os.X_OK):
        log_debug(f"Directory grant not usable: {candidate}", "ASSETS")
        return None
    return LocalDirectoryHandle(candidate)


class AssetLedger:
    """Counts asset refs that are still holding bytes."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._outstanding = 0
        self._total = 0

    def acquired(self) -> None:
        with self._lock:
            self._outstanding += 1
            self._total += 1

    def released(self) -> None:
        with self._lock:
            self._outstanding -= 1

    @property
    def outstanding(self) -> int:
        with self._lock:
            return self._outstanding

    @property
    def total(self) -> int:
        with self._lock:
            return self._total


@dataclass(frozen=True)
class AssetKey:
    image_key: str
    split_index: int
    mask_index: Optional[MaskIndex] = None

    @property
    def kind(self) -> str:
        return "split" if self.mask_index is None else "mask"


@dataclass(frozen=True)
class AssetNotFound:
    key: AssetKey
    expected_path: str
    detail: str = ""


@dataclass(eq=False)
class AssetRef:
    """Caller-owned bytes of one resolved image; release exactly once."""

    key: AssetKey
    path: str
    _data: Optional[bytes] = field(default=None, repr=False)
    _ledger: Optional[AssetLedger] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self._ledger is not None:
            self._ledger.acquired()

    @property
    def released(self) -> bool:
        return self._data is None

    @property
    def data(self) -> bytes:
        if self._data is None:
            raise RuntimeError(f"Asset {self.path} used after release")
        return self._data

    def release(self) -> bool:
        """Drop the bytes. A second call is a no-op and returns False."""
        if self._data is None:
            log_warning(f"Asset {self.path} released twice", "ASSETS")
            return False
        self._data = None
        if self._ledger is not None:
            self._ledger.released()
        if is_debug_enabled("assets"):
            log_debug(f"Released {self.path}", "ASSETS")
        return True


def asset_path_parts(
    image_key: str,
    split_index: int,
    mask_index: Optional[MaskIndex] = None,
    *,
    scheme: Optional[SplitScheme] = None,
    extension: Optional[str] = None,
) -> Tuple[str, str, str]:
    """Return ``(image_dir, split_dir, file_name)`` for a logical asset."""
    scheme = scheme or SplitScheme(get_config().split_first_index)
    extension = extension or get_config().image_extension
    split_name = scheme.key(split_index)
    if mask_index is None:
        file_name = f"{split_name}{extension}"
    else:
        file_name = f"{MASK_PREFIX}{mask_index}{extension}"
    return image_key, split_name, file_name


def expected_path(*parts: str) -> str:
    return "/" + "/".join(parts)


def resolve_asset(
    root: DirectoryHandle,
    image_key: str,
    split_index: int,
    mask_index: Optional[MaskIndex] = None,
    *,
    scheme: Optional[SplitScheme] = None,
    ledger: Optional[AssetLedger] = None,
    extension: Optional[str] = None,
) -> Union[AssetRef, AssetNotFound]:
    """Read one split or mask image below ``root``."""
    key = AssetKey(image_key, split_index, mask_index)
    parts = asset_path_parts(image_key, split_index, mask_index, scheme=scheme, extension=extension)
    path = expected_path(*parts)
    image_dir, split_dir, file_name = parts
    try:
        handle = root.get_child_directory(image_dir).get_child_directory(split_dir).get_child_file(file_name)
        data = handle.read_bytes()
    except (OSError, ValueError) as exc:
        if is_debug_enabled("assets"):
            log_debug(f"Asset missing {path}: {exc}", "ASSETS")
        return AssetNotFound(key, path, str(exc))
    if is_debug_enabled("assets"):
        log_debug(f"Resolved {path} ({len(data)} bytes)", "ASSETS")
    return AssetRef(key, path, data, ledger)
