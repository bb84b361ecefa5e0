import math
from dataclasses import dataclass
from typing import Optional

# Widest graph we ever lay out, in logical pixels. Very long builds or large
# scale factors would otherwise produce surfaces too big to allocate.
GRAPH_WIDTH_CAP = 4096


@dataclass(frozen=True)
class TimeScale:
    duration: float
    scale: float
    graph_width: float
    px_per_sec: float

    def x(self, t: float) -> float:
        return self.px_per_sec * t


def time_scale(duration: float, scale: float, cap: float = GRAPH_WIDTH_CAP) -> TimeScale:
    """Map seconds of the build onto horizontal pixels.

    `px_per_sec` is floored to whole pixels. Exception: when the cap squeezes
    the graph below one pixel per second the floor would be 0 and collapse
    every block onto the axis, so the unfloored `graph_width / duration` is
    returned instead. Callers must not assume an integer in that case.
    """
    graph_width = min(scale * duration, cap)
    if duration <= 0:
        return TimeScale(duration, scale, graph_width, 0)
    px_per_sec = math.floor(graph_width / duration)
    if px_per_sec == 0:
        px_per_sec = graph_width / duration
    return TimeScale(duration, scale, graph_width, px_per_sec)


def value_to_y(v: float, max_v: float, graph_height: float, top_margin: float = 0) -> Optional[float]:
    """Linear value axis with the origin at the top; None when there is no range."""
    if max_v <= 0:
        return None
    return top_margin + graph_height * (1.0 - (v / max_v))
