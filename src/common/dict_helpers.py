"""Safe dictionary access helpers for nested documents."""
from typing import Any, List, Mapping, Optional, TypeVar, Union, cast


T = TypeVar('T')


def _keys(path: Union[str, List[str]]) -> List[str]:
    return path.split(".") if isinstance(path, str) else list(path)


def get_dict_path(
    data: Any,
    path: Union[str, List[str]],
    default: Optional[T] = None,
    expected_type: Optional[type] = None,
) -> Optional[T]:
    """Safely navigate nested dictionary structure.

    Args:
        data: Root dictionary or object
        path: Key path as string "key1.key2.key3" or list ["key1", "key2", "key3"]
        default: Default value if path not found or type mismatch
        expected_type: Expected type for final value (validates type)

    Returns:
        Value at path or default if not found/type mismatch

    Examples:
        >>> data = {"img1": {"split_1": {"mask_0": {"label": "Wood"}}}}
        >>> get_dict_path(data, ["img1", "split_1", "mask_0", "label"])
        'Wood'
        >>> get_dict_path(data, ["img1", "split_2"], default={})
        {}
    """
    keys = _keys(path)
    if not keys:
        return default

    current = data
    for key in keys:
        if not isinstance(current, Mapping):
            return default
        if key not in current:
            return default
        current = current[key]

    if expected_type is not None and not isinstance(current, expected_type):
        return default

    return cast(Optional[T], current)


def has_dict_path(data: Any, path: Union[str, List[str]]) -> bool:
    """Check if path exists in nested dictionary.

    Examples:
        >>> has_dict_path({"img1": {"split_1": {}}}, ["img1", "split_1"])
        True
        >>> has_dict_path({"img1": {"split_1": {}}}, ["img1", "split_9"])
        False
    """
    keys = _keys(path)
    if not keys:
        return False

    current = data
    for key in keys:
        if not isinstance(current, Mapping) or key not in current:
            return False
        current = current[key]
    return True


def assoc_dict_path(data: Mapping, path: Union[str, List[str]], value: Any) -> dict:
    """Return a copy of ``data`` with ``value`` stored at ``path``.

    Only the dictionaries along ``path`` are copied; every other branch is shared
    with the input. Intermediate keys must already exist and hold mappings.

    Examples:
        >>> data = {"a": {"x": 1}, "b": {"y": 2}}
        >>> updated = assoc_dict_path(data, "a.x", 5)
        >>> updated["a"], updated["b"] is data["b"]
        ({'x': 5}, True)

    Raises:
        KeyError: if an intermediate key is missing or not a mapping.
    """
    keys = _keys(path)
    if not keys:
        raise KeyError("empty path")
    head, rest = keys[0], keys[1:]
    if not rest:
        return {**data, head: value}
    child = data.get(head)
    if not isinstance(child, Mapping):
        raise KeyError(head)
    return {**data, head: assoc_dict_path(child, rest, value)}


__all__ = [
    "assoc_dict_path",
    "get_dict_path",
    "has_dict_path",
]
