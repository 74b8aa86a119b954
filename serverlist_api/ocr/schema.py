from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .errors import InvalidRegionError

# Grayscale (H,W) uint8 plane. Every color channel of the prepared crop carries this value.
ProcessedImage = np.ndarray

# Float slack for fraction sums such as 0.63 + 0.37.
_EPS = 1e-9


@dataclass(frozen=True)
class Region:
    x: int
    y: int
    w: int
    h: int

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """PIL crop box: (left, upper, right, lower)."""
        return (self.x, self.y, self.x + self.w, self.y + self.h)

    def validate(self, width: int, height: int) -> "Region":
        if self.w < 1 or self.h < 1:
            raise InvalidRegionError(f"degenerate region {self.w}x{self.h} at ({self.x},{self.y})")
        if self.x < 0 or self.y < 0 or self.x + self.w > width or self.y + self.h > height:
            raise InvalidRegionError(
                f"region {self.box} is outside the {width}x{height} image"
            )
        return self


@dataclass(frozen=True)
class CropLayout:
    """Proportional crop fractions for the two-column server browser screenshot.

    Defaults match the in-game list: server names on the left, the two timers on the right.
    """

    id_x: float = 0.0
    id_w: float = 0.55
    timer_x: float = 0.63
    timer_w: float = 0.34
    y: float = 0.0
    h: float = 1.0

    def __post_init__(self) -> None:
        for name in ("id_x", "id_w", "timer_x", "timer_w", "y", "h"):
            v = getattr(self, name)
            if not 0.0 <= v <= 1.0:
                raise ValueError(f"crop fraction {name}={v} must be within [0, 1]")
        for name in ("id_w", "timer_w", "h"):
            if getattr(self, name) <= 0.0:
                raise ValueError(f"crop fraction {name} must be greater than 0")
        if self.id_x + self.id_w > 1.0 + _EPS or self.timer_x + self.timer_w > 1.0 + _EPS:
            raise ValueError("crop region extends past the right edge")
        if self.y + self.h > 1.0 + _EPS:
            raise ValueError("crop region extends past the bottom edge")
        # Either column may be on the left; they only must not share pixels.
        if self.id_x < self.timer_x + self.timer_w - _EPS and self.timer_x < self.id_x + self.id_w - _EPS:
            raise ValueError("identifier and timer regions overlap")


@dataclass
class RegionText:
    """Outcome of recognizing one region: raw text, or the error that replaced it."""

    name: str
    region: Region
    text: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
