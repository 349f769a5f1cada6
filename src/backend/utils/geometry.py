"""Bounding-box mapping from original split pixels into display coordinates."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Scale:
    x: Optional[float]
    y: Optional[float]


@dataclass(frozen=True)
class DisplayRect:
    left: float
    top: float
    width: float
    height: float

    def translated(self, dx: float, dy: float) -> "DisplayRect":
        return DisplayRect(self.left + dx, self.top + dy, self.width, self.height)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.left, self.top, self.width, self.height


def _coords(bbox: Any) -> Optional[Tuple[float, float, float, float]]:
    if not isinstance(bbox, Sequence) or isinstance(bbox, (str, bytes)) or len(bbox) != 4:
        return None
    try:
        x1, y1, x2, y2 = (float(v) for v in bbox)
    except (TypeError, ValueError):
        return None
    return x1, y1, x2, y2


def map_box(bbox: Any, scale: Optional[Scale]) -> Optional[DisplayRect]:
    """Scale ``[x1, y1, x2, y2]`` by the displayed/natural ratio of each axis.

    Returns None when there is no usable box or the image has not been measured yet.
    """
    coords = _coords(bbox)
    if coords is None or scale is None or not scale.x or not scale.y:
        return None
    x1, y1, x2, y2 = coords
    return DisplayRect(
        left=x1 * scale.x,
        top=y1 * scale.y,
        width=(x2 - x1) * scale.x,
        height=(y2 - y1) * scale.y,
    )


def scale_for(natural_size: Tuple[float, float], displayed_size: Tuple[float, float]) -> Optional[Scale]:
    """Per-axis ``displayed / natural`` factor; None until the natural size is known."""
    natural_w, natural_h = natural_size
    displayed_w, displayed_h = displayed_size
    if not natural_w or not natural_h:
        return None
    return Scale(displayed_w / natural_w, displayed_h / natural_h)


def mask_bbox(mask: Any) -> Any:
    """Return the mask's ``bbox`` or, for documents from the first tool version, its ``box``."""
    if not hasattr(mask, "get"):
        return None
    bbox = mask.get("bbox")
    if bbox is None:
        bbox = mask.get("box")
    return bbox
