"""Category sets: canonical label names plus their display decorations.

The dataset only ever stores canonical names. Decorations are a bijective table
kept outside the dataset so button text can be mapped back without guessing.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from common.log_utils import log_debug, log_warning
from common.yaml_utils import load_yaml

UNKNOWN_LABEL = "Unknown"


class CategorySetError(ValueError):
    """Raised when a category set definition is not usable."""


@dataclass(frozen=True)
class CategorySet:
    version: str
    names: Tuple[str, ...]
    decorations: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.names:
            raise CategorySetError(f"Category set '{self.version}' is empty")
        if len(set(self.names)) != len(self.names):
            raise CategorySetError(f"Category set '{self.version}' repeats a name")
        if UNKNOWN_LABEL in self.names:
            raise CategorySetError(f"'{UNKNOWN_LABEL}' is reserved for unlabeled masks")
        extra = set(self.decorations) - set(self.names)
        if extra:
            raise CategorySetError(f"Decorations for unknown categories: {sorted(extra)}")
        displays = [self.display_for(name) for name in self.names]
        if len(set(displays)) != len(displays):
            raise CategorySetError(f"Category set '{self.version}' has colliding display strings")
        # A display string may not equal another category's canonical name.
        for name in self.names:
            display = self.display_for(name)
            if display != name and display in self.names:
                raise CategorySetError(f"Display '{display}' shadows a canonical name")

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __iter__(self):
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def display_for(self, name: str) -> str:
        return self.decorations.get(name, name)

    def canonical_for(self, display: str) -> Optional[str]:
        """Inverse of ``display_for``; returns None for strings outside the set."""
        for name in self.names:
            if self.display_for(name) == display:
                return name
        return None


BUILTIN_CATEGORY_SETS: Dict[str, CategorySet] = {
    "scene-v1": CategorySet(
        version="scene-v1",
        names=("Building", "Vehicle", "Tree", "Road", "Person", "Other"),
    ),
    "materials-v2": CategorySet(
        version="materials-v2",
        names=("Wood", "Glass", "Metal", "Plastic", "Paper", "Fabric", "Stone", "Other"),
        decorations={
            "Wood": "🪵 Wood",
            "Glass": "🥛 Glass",
            "Metal": "🔩 Metal",
            "Plastic": "🧴 Plastic",
            "Paper": "📄 Paper",
            "Fabric": "🧵 Fabric",
            "Stone": "🪨 Stone",
            "Other": "❓ Other",
        },
    ),
}


def category_set_from_dict(data: Mapping, fallback_version: str = "custom") -> CategorySet:
    """Build a category set from a parsed YAML mapping.

    Expected shape::

        version: materials-v3
        categories:
          - Wood
          - {name: Glass, display: "🥛 Glass"}
    """
    raw = data.get("categories")
    if not isinstance(raw, list):
        raise CategorySetError("'categories' must be a list")
    names: List[str] = []
    decorations: Dict[str, str] = {}
    for entry in raw:
        if isinstance(entry, str):
            names.append(entry.strip())
        elif isinstance(entry, dict) and isinstance(entry.get("name"), str):
            name = entry["name"].strip()
            names.append(name)
            display = entry.get("display")
            if isinstance(display, str) and display.strip():
                decorations[name] = display.strip()
        else:
            raise CategorySetError(f"Invalid category entry: {entry!r}")
    version = data.get("version")
    return CategorySet(
        version=str(version) if version else fallback_version,
        names=tuple(names),
        decorations=decorations,
    )


def load_category_set(path: Path) -> CategorySet:
    data = load_yaml(path)
    if not data:
        raise CategorySetError(f"Could not read category set from {path}")
    return category_set_from_dict(data, fallback_version=path.stem)


def resolve_category_set(name_or_path: Optional[str], categories_dir: Optional[Path] = None) -> CategorySet:
    """Resolve a category set by built-in name, by file in ``categories_dir`` or by path.

    Falls back to the default built-in set when nothing usable is found.
    """
    default = BUILTIN_CATEGORY_SETS["materials-v2"]
    if not name_or_path:
        return default
    if name_or_path in BUILTIN_CATEGORY_SETS:
        return BUILTIN_CATEGORY_SETS[name_or_path]
    candidates: Sequence[Path] = [Path(name_or_path)]
    if categories_dir is not None:
        candidates = [*candidates, categories_dir / f"{name_or_path}.yaml"]
    for candidate in candidates:
        if not candidate.is_file():
            continue
        try:
            category_set = load_category_set(candidate)
        except CategorySetError as exc:
            log_warning(f"Ignoring category set {candidate}: {exc}", "CATEGORIES")
            continue
        log_debug(f"Loaded category set '{category_set.version}' from {candidate}", "CATEGORIES")
        return category_set
    log_warning(f"Unknown category set '{name_or_path}', using '{default.version}'", "CATEGORIES")
    return default


def category_color(name: str) -> Tuple[int, int, int]:
    """Stable color per category name, used to tint the tag buttons."""
    seed = sum(ord(c) for c in name) or 1
    r = (seed * 37) % 255
    g = (seed * 57) % 255
    b = (seed * 97) % 255
    return r, g, b
