"""Key helpers for the image/split/mask hierarchy."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

SPLIT_PREFIX = "split_"
MASK_PREFIX = "mask_"


def key_suffix(key: str, prefix: str) -> Optional[int]:
    """Return the numeric suffix of ``<prefix><n>`` or None."""
    if not isinstance(key, str) or not key.startswith(prefix):
        return None
    tail = key[len(prefix):]
    if not tail.isdecimal():
        return None
    return int(tail)


def numeric_sort_key(key: str, prefix: str) -> Tuple[int, int, str]:
    """Sort key: numeric suffix ascending, non-numeric keys last by name."""
    number = key_suffix(key, prefix)
    if number is None:
        return (1, 0, key)
    return (0, number, key)


def is_mask_key(key: str) -> bool:
    return isinstance(key, str) and key.startswith(MASK_PREFIX)


def is_split_key(key: str) -> bool:
    return isinstance(key, str) and key.startswith(SPLIT_PREFIX)


def mask_number(key: str) -> Optional[int]:
    return key_suffix(key, MASK_PREFIX)


def mask_key(number: int) -> str:
    return f"{MASK_PREFIX}{number}"


@dataclass(frozen=True)
class SplitScheme:
    """Maps the 1-based split index shown in the UI to on-disk split keys.

    ``first_index`` is the suffix used by the first split of an image:
    1 for current documents (``split_1`` is split 1), 0 for documents written
    by the first version of the tool (``split_0`` is split 1).
    """

    first_index: int = 1

    def key(self, index: int) -> str:
        return f"{SPLIT_PREFIX}{index - 1 + self.first_index}"

    def index(self, key: str) -> Optional[int]:
        number = key_suffix(key, SPLIT_PREFIX)
        if number is None:
            return None
        return number + 1 - self.first_index


DEFAULT_SCHEME = SplitScheme()


def split_key(index: int, scheme: Optional[SplitScheme] = None) -> str:
    return (scheme or DEFAULT_SCHEME).key(index)


def split_index(key: str, scheme: Optional[SplitScheme] = None) -> Optional[int]:
    return (scheme or DEFAULT_SCHEME).index(key)
