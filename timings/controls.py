import math
from dataclasses import dataclass, replace
from typing import Any, Dict

from .errors import TimingsDataError

# ------------------------------
# CONTROL RANGES
# ------------------------------
SCALE_MIN = 1
SCALE_MAX = 100
SCALE_DEFAULT = 20          # pixels per second before the width cap
MIN_UNIT_TIME_STEP = 0.1


@dataclass(frozen=True)
class Controls:
    """The two values the page controls feed into every render."""

    min_unit_time: float = 0.0
    scale: float = SCALE_DEFAULT

    def __post_init__(self):
        if not math.isfinite(self.min_unit_time) or self.min_unit_time < 0:
            raise TimingsDataError("min_unit_time must be a finite number >= 0")
        if not math.isfinite(self.scale) or not (SCALE_MIN <= self.scale <= SCALE_MAX):
            raise TimingsDataError(f"scale must be within {SCALE_MIN}..{SCALE_MAX}")

    def with_scale(self, scale: float) -> "Controls":
        return replace(self, scale=max(SCALE_MIN, min(SCALE_MAX, scale)))

    def with_min_unit_time(self, min_unit_time: float) -> "Controls":
        # Snap to the slider step so repeated nudges don't drift.
        snapped = round(max(0.0, min_unit_time) / MIN_UNIT_TIME_STEP) * MIN_UNIT_TIME_STEP
        return replace(self, min_unit_time=round(snapped, 6))

    def update(self, payload: Dict[str, Any]) -> "Controls":
        """New controls from a partial mapping; missing keys keep their value."""
        try:
            min_unit_time = float(payload.get("min_unit_time", self.min_unit_time))
            scale = float(payload.get("scale", self.scale))
        except (TypeError, ValueError):
            raise TimingsDataError("min_unit_time and scale must be numbers")
        return Controls(min_unit_time=min_unit_time, scale=scale)

    def as_dict(self) -> Dict[str, float]:
        return {"min_unit_time": self.min_unit_time, "scale": self.scale}
