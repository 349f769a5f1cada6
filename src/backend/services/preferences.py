"""Persistent user preferences stored in the YAML cache file."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from common.log_utils import log_debug, log_warning
from common.yaml_utils import get_timestamp_fields, load_yaml, save_yaml
from config import get_config

CacheData = Dict[str, Any]

RECENT_LIMIT = 10


def _default_cache() -> CacheData:
    return {
        "version": get_config().cache_version,
        "preferences": {},
        "recent_documents": [],
    }


def _normalize_cache(raw: Any) -> CacheData:
    cache = _default_cache()
    if not isinstance(raw, dict):
        return cache
    version = raw.get("version")
    if version != cache["version"]:
        log_warning(f"Cache version {version!r} ignored, starting fresh", "CACHE")
        return cache
    prefs = raw.get("preferences")
    if isinstance(prefs, dict):
        cache["preferences"] = dict(prefs)
    recent = raw.get("recent_documents")
    if isinstance(recent, list):
        cache["recent_documents"] = [str(item) for item in recent if isinstance(item, str)]
    return cache


def load_cache(cache_file: Optional[Path] = None) -> CacheData:
    cache_file = cache_file or get_config().cache_file
    if not cache_file.exists():
        return _default_cache()
    return _normalize_cache(load_yaml(cache_file))


def save_cache(cache: CacheData, cache_file: Optional[Path] = None) -> bool:
    cache_file = cache_file or get_config().cache_file
    payload = dict(cache)
    payload.update(get_timestamp_fields())
    return save_yaml(cache_file, payload, sort_keys=True)


class PreferencesService:
    """Remembers the last document, asset root and session options between runs."""

    def __init__(self, cache_file: Optional[Path] = None) -> None:
        self._cache_file = cache_file or get_config().cache_file
        self._cache: CacheData = load_cache(self._cache_file)

    @property
    def cache_file(self) -> Path:
        return self._cache_file

    def _ensure_preferences(self) -> Dict[str, Any]:
        prefs = self._cache.get("preferences")
        if not isinstance(prefs, dict):
            prefs = {}
            self._cache["preferences"] = prefs
        return prefs

    def get_preferences(self) -> Dict[str, Any]:
        return dict(self._ensure_preferences())

    def get_preference(self, key: str, default: Any = None) -> Any:
        return self._ensure_preferences().get(key, default)

    def set_preference(self, key: str, value: Any) -> None:
        self.set_preferences(**{key: value})

    def set_preferences(self, **kwargs: Any) -> None:
        prefs = self._ensure_preferences()
        changed = False
        for key, value in kwargs.items():
            if prefs.get(key) == value:
                continue
            prefs[key] = value
            changed = True
        if changed:
            self.save()

    def recent_documents(self, limit: int = 5) -> List[str]:
        return list(self._cache.get("recent_documents", []))[:limit]

    def touch_document(self, path: Path) -> None:
        """Move ``path`` to the front of the recent list and remember it as last document."""
        value = str(path)
        recent = [item for item in self._cache.get("recent_documents", []) if item != value]
        recent.insert(0, value)
        self._cache["recent_documents"] = recent[:RECENT_LIMIT]
        self._ensure_preferences()["last_document"] = value
        log_debug(f"Recorded recent document {path.name}", "CACHE")
        self.save()

    def last_document(self) -> Optional[str]:
        value = self.get_preference("last_document")
        return value if isinstance(value, str) else None

    def last_root(self) -> Optional[str]:
        value = self.get_preference("last_root")
        return value if isinstance(value, str) else None

    def save(self) -> bool:
        saved = save_cache(self._cache, self._cache_file)
        if not saved:
            log_warning(f"Could not write preferences to {self._cache_file}", "CACHE")
        return saved
