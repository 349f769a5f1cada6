"""Utilities for YAML serialization with compact, human-readable output.

Used for the preferences cache and for category set files:
- Dictionaries containing only basic types are written in flow style: {key: value}
- Lists of basic types are written in flow style: [a, b, c]
- Complex nested structures use block style for readability
"""
from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Union

import yaml


def get_timestamp_fields() -> Dict[str, Any]:
    """Generate last_updated timestamp fields for YAML persistence.

    Returns:
        Dict with 'last_updated' (float epoch) and 'last_updated_str' (human readable).
    """
    now = time.time()
    return {
        "last_updated": now,
        "last_updated_str": datetime.fromtimestamp(now).strftime("%Y-%m-%d %H:%M:%S"),
    }


def _is_basic_types(values: Any) -> bool:
    """Check if all values are of basic serializable types."""
    basic_types = (int, str, bool, float, type(None))
    if isinstance(values, dict):
        return all(isinstance(v, basic_types) for v in values.values())
    if isinstance(values, (list, tuple)):
        return all(isinstance(v, basic_types) for v in values)
    return isinstance(values, basic_types)


def _is_compact_dict(data: dict) -> bool:
    if not data:
        return True
    if len(data) > 6:
        return False
    return _is_basic_types(data)


def _is_compact_list(data: list) -> bool:
    if not data:
        return True
    if len(data) > 20:
        return False
    return _is_basic_types(data)


class CompactDumper(yaml.SafeDumper):
    """Custom YAML dumper that uses flow style for simple structures."""

    pass


def _represent_dict(dumper: CompactDumper, data: dict) -> yaml.Node:
    return dumper.represent_mapping("tag:yaml.org,2002:map", data, flow_style=_is_compact_dict(data))


def _represent_list(dumper: CompactDumper, data: list) -> yaml.Node:
    return dumper.represent_sequence("tag:yaml.org,2002:seq", data, flow_style=_is_compact_list(data))


CompactDumper.add_representer(dict, _represent_dict)
CompactDumper.add_representer(list, _represent_list)


def load_yaml(file_path: Union[str, Path]) -> dict:
    """Load a YAML file and return its contents as a dict.

    Returns:
        Parsed YAML content as dict. Returns empty dict on error.
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            result = yaml.safe_load(f)
            return result if isinstance(result, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


def save_yaml(file_path: Union[str, Path], data: Any, *, sort_keys: bool = False) -> bool:
    """Save data to a YAML file with compact formatting.

    Returns:
        True if successful, False on error.
    """
    try:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(dumps_yaml(data, sort_keys=sort_keys))
        return True
    except (OSError, yaml.YAMLError):
        return False


def dumps_yaml(data: Any, *, sort_keys: bool = False) -> str:
    """Serialize data to a YAML string with compact formatting."""
    return yaml.dump(
        data,
        Dumper=CompactDumper,
        default_flow_style=False,
        sort_keys=sort_keys,
        allow_unicode=True,
        width=5000,  # Prevent line wrapping in flow style
    )
