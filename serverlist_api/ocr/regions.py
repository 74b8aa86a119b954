from __future__ import annotations

import math
from typing import Optional, Tuple

from .errors import InvalidRegionError
from .schema import CropLayout, Region

DEFAULT_LAYOUT = CropLayout()


def _span(total: int, start_frac: float, size_frac: float) -> Tuple[int, int]:
    # Floor both ends, keep at least one pixel and never run past the edge.
    start = min(int(math.floor(total * start_frac)), total - 1)
    size = max(1, int(math.floor(total * size_frac)))
    size = max(1, min(size, total - start))
    return start, size


def compute_regions(width: int, height: int, layout: Optional[CropLayout] = None) -> Tuple[Region, Region]:
    """
    Split a server-list screenshot into (identifier_region, timer_region).

    The fractions assume the two-column browser layout: names on the left, the two
    uptime timers on the right, with a gap between. A wrong layout is not an error
    here; it shows up later as a count mismatch.

    Images too narrow for two disjoint columns (width 1 with the default layout)
    raise InvalidRegionError: the one-pixel minimum would put both crops on the same pixels.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"image dimensions must be positive, got {width}x{height}")

    lay = layout or DEFAULT_LAYOUT
    y, h = _span(height, lay.y, lay.h)

    ix, iw = _span(width, lay.id_x, lay.id_w)
    tx, tw = _span(width, lay.timer_x, lay.timer_w)
    if ix < tx + tw and tx < ix + iw:
        raise InvalidRegionError(
            f"a {width}px wide image is too narrow to split into two columns "
            f"(identifiers x={ix}..{ix + iw}, timers x={tx}..{tx + tw})"
        )

    return Region(x=ix, y=y, w=iw, h=h), Region(x=tx, y=y, w=tw, h=h)
