"""Pipeline graph layout: row placement, hit boxes and dependency edge routing.

Everything here is in logical pixels. Unit and edge coordinates are relative
to the plot origin `(X_LINE, MARGIN)`; hit boxes are in surface coordinates so
pointer positions can be tested directly.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .coords import TimeScale, time_scale
from .models import BuildTimings, Unit

# ------------------------------
# GRAPH GEOMETRY
# ------------------------------
X_LINE = 50            # position of the vertical axis
MARGIN = 5             # general-use margin
Y_LINE = 35            # position of the horizontal axis, from the bottom
MIN_TICK_DIST = 50     # minimum distance between time tick labels
RADIUS = 3             # rounded corner radius of unit boxes
BOX_HEIGHT = 25
Y_TICK_DIST = BOX_HEIGHT + 2
BUS_OFFSET = 5         # vertical run of an edge sits this far left of its exit point

Point = Tuple[float, float]


@dataclass(frozen=True)
class UnitCoords:
    x: float
    y: float
    width: float
    rmeta_x: Optional[float] = None

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass(frozen=True)
class HitBox:
    x: float
    y: float
    x2: float
    y2: float
    index: int

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x2 and self.y <= py <= self.y2


@dataclass(frozen=True)
class Edge:
    source: int
    target: int
    rmeta: bool                 # unlocked by metadata rather than completion
    points: Tuple[Point, ...]


@dataclass
class ReverseDeps:
    """Successor index -> index of the unit that unlocked it.

    When several units unlock the same successor only the last one seen is
    kept, so at most one incoming edge per variant is ever highlighted.
    """

    unit: Dict[int, int] = field(default_factory=dict)
    rmeta: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_units(cls, units: Iterable[Unit]) -> "ReverseDeps":
        deps = cls()
        for unit in units:
            for unlocked in unit.unlocked_units:
                deps.unit[unlocked] = unit.i
            for unlocked in unit.unlocked_rmeta_units:
                deps.rmeta[unlocked] = unit.i
        return deps


def route_edge(from_x: float, from_y: float, to: UnitCoords) -> Tuple[Point, ...]:
    """Elbowed connector: out to the bus, along it to the target row, into the target."""
    mid = BOX_HEIGHT / 2
    bus_x = from_x - BUS_OFFSET
    return (
        (from_x, from_y + mid),
        (bus_x, from_y + mid),
        (bus_x, to.y + mid),
        (to.x, to.y + mid),
    )


@dataclass
class PipelineLayout:
    units: List[Unit]                  # qualifying units, in row order
    coords: Dict[int, UnitCoords]      # unit index -> box
    hit_boxes: List[HitBox]
    scale: TimeScale
    min_unit_time: float

    @property
    def graph_height(self) -> float:
        return Y_TICK_DIST * len(self.units)

    def hit_test(self, px: float, py: float) -> Optional[int]:
        # Linear scan; rows never overlap so the first match is the only one.
        for box in self.hit_boxes:
            if box.contains(px, py):
                return box.index
        return None

    def _edge(self, source: int, from_x: Optional[float], from_y: float, target: int, rmeta: bool) -> Optional[Edge]:
        to = self.coords.get(target)
        if to is None or from_x is None:
            return None
        return Edge(source, target, rmeta, route_edge(from_x, from_y, to))

    def edges_from(self, unit: Unit) -> List[Edge]:
        """Edges to every laid-out unit this one unlocks (completion, then rmeta)."""
        src = self.coords.get(unit.i)
        if src is None:
            return []
        edges = []
        for unlocked in unit.unlocked_units:
            edge = self._edge(unit.i, src.right, src.y, unlocked, False)
            if edge is not None:
                edges.append(edge)
        for unlocked in unit.unlocked_rmeta_units:
            edge = self._edge(unit.i, src.rmeta_x, src.y, unlocked, True)
            if edge is not None:
                edges.append(edge)
        return edges

    def edges_into(self, index: int, reverse: ReverseDeps) -> List[Edge]:
        """The recorded incoming completion and rmeta edges of a unit, when laid out."""
        edges = []
        for unlocked_by, rmeta in ((reverse.unit, False), (reverse.rmeta, True)):
            dep = unlocked_by.get(index)
            src = self.coords.get(dep) if dep is not None else None
            if src is None:
                continue
            edge = self._edge(dep, src.rmeta_x if rmeta else src.right, src.y, index, rmeta)
            if edge is not None:
                edges.append(edge)
        return edges

    def highlight_edges(self, unit: Unit, reverse: ReverseDeps) -> List[Edge]:
        return self.edges_from(unit) + self.edges_into(unit.i, reverse)


def layout_pipeline(timings: BuildTimings, min_unit_time: float, scale: float) -> PipelineLayout:
    """Place one row per unit whose duration reaches `min_unit_time`."""
    ts = time_scale(timings.duration, scale)
    units = [u for u in timings.units if u.duration >= min_unit_time]

    coords: Dict[int, UnitCoords] = {}
    hit_boxes: List[HitBox] = []
    for row, unit in enumerate(units):
        y = row * Y_TICK_DIST
        x = ts.x(unit.start)
        rmeta_x = None
        if unit.rmeta_time is not None:
            rmeta_x = x + ts.x(unit.rmeta_time)
        # 1px floor keeps instant units visible and hoverable.
        width = max(ts.x(unit.duration), 1.0)
        coords[unit.i] = UnitCoords(x, y, width, rmeta_x)
        hit_boxes.append(HitBox(X_LINE + x, MARGIN + y, X_LINE + x + width, MARGIN + y + BOX_HEIGHT, unit.i))

    return PipelineLayout(units, coords, hit_boxes, ts, min_unit_time)
