import logging
from dataclasses import dataclass
from typing import Optional

from timings.layout import (
    BOX_HEIGHT,
    MARGIN,
    RADIUS,
    X_LINE,
    Y_TICK_DIST,
    PipelineLayout,
    ReverseDeps,
    layout_pipeline,
)
from timings.models import BuildTimings, Unit

from .draw_helpers import draw_graph_axes, fmt_num
from .surfaces import Canvas, setup_canvas
from .theme import (
    AXIS,
    CODEGEN_COLOR,
    DEP_DASH,
    DEP_LINE,
    DEP_LINE_HILITE,
    LABEL_FONT_SIZE,
    MODE_COLORS,
    MUTED,
    TEXT,
)

logger = logging.getLogger(__name__)


@dataclass
class PipelineView:
    content: Canvas     # units, axes and muted dependency lines
    overlay: Canvas     # hover highlight only
    layout: PipelineLayout

    @property
    def size(self):
        return self.content.width, self.content.height


def unit_label(unit: Unit) -> str:
    return f"{unit.label} {fmt_num(unit.duration)}s"


def clamp_label_x(x: float, text_w: float, graph_width: float) -> float:
    """Labels start just inside their block but are pulled left so they end at the graph edge."""
    return min(x + 5.0, graph_width - text_w)


def draw_dep_lines(canvas: Canvas, layout: PipelineLayout, unit: Unit, highlighted: bool):
    """Lines from `unit` to every laid-out unit it unlocks."""
    for edge in layout.edges_from(unit):
        draw_edge(canvas, edge.points, highlighted)


def draw_edge(canvas: Canvas, points, highlighted: bool):
    if highlighted:
        canvas.polyline(points, DEP_LINE_HILITE, width=2)
    else:
        canvas.polyline(points, DEP_LINE, dash=DEP_DASH)


class PipelineGraph:
    """Renders the per-unit pipeline graph and its hover overlay.

    The reverse-unlock maps are built once per data set; layout, hit boxes
    and both canvases are rebuilt on every `render`.
    """

    def __init__(self, timings: BuildTimings, dpr: float = 1.0):
        self.timings = timings
        self.dpr = dpr
        self.reverse = ReverseDeps.from_units(timings.units)
        self.view: Optional[PipelineView] = None

    def render(self, min_unit_time: float, scale: float) -> Optional[PipelineView]:
        if not self.timings.units:
            self.view = None
            return None

        layout = layout_pipeline(self.timings, min_unit_time, scale)
        frame = draw_graph_axes(layout.graph_height, self.timings.duration, scale, self.dpr)
        ctx = frame.canvas
        units = layout.units

        # Separate layer for hover highlights so they never repaint the units.
        overlay = setup_canvas(frame.width, frame.height, self.dpr, transparent=True)

        # Y tick marks between rows, row numbers beside them.
        for n in range(1, len(units)):
            y = MARGIN + n * Y_TICK_DIST - 1
            ctx.line(X_LINE, y, X_LINE - 5, y, AXIS)
        for n in range(len(units)):
            y = MARGIN + n * Y_TICK_DIST + BOX_HEIGHT / 2
            ctx.text(n + 1, X_LINE - 4, y, MUTED, align="end")

        with ctx.translated(X_LINE, MARGIN):
            for unit in units:
                c = layout.coords[unit.i]
                ctx.rounded_rect(c.x, c.y, c.width, BOX_HEIGHT, RADIUS, MODE_COLORS[unit.mode])

                split = unit.codegen_time
                if split is not None:
                    _, ctime = split
                    ctx.rounded_rect(c.rmeta_x, c.y, layout.scale.x(ctime), BOX_HEIGHT, RADIUS, CODEGEN_COLOR)

                label = unit_label(unit)
                text_w = ctx.measure_text(label, LABEL_FONT_SIZE)
                label_x = clamp_label_x(c.x, text_w, frame.graph_width)
                ctx.text(label, label_x, c.y + BOX_HEIGHT / 2, TEXT, size=LABEL_FONT_SIZE, align="start")

                draw_dep_lines(ctx, layout, unit, highlighted=False)

        logger.debug(
            "pipeline graph: %d/%d units, min %.2fs, %s px/s",
            len(units), len(self.timings.units), min_unit_time, layout.scale.px_per_sec,
        )
        self.view = PipelineView(ctx, overlay, layout)
        return self.view

    def highlight(self, layout: PipelineLayout, index: int):
        """Redraw the overlay with the edges into and out of unit `index`."""
        view = self.view
        if view is None or view.layout is not layout:
            logger.debug("ignoring highlight for a stale layout")
            return
        overlay = view.overlay
        overlay.clear()
        unit = self.timings.unit(index)
        with overlay.translated(X_LINE, MARGIN):
            for edge in layout.highlight_edges(unit, self.reverse):
                draw_edge(overlay, edge.points, highlighted=True)

    def clear_highlight(self):
        if self.view is not None:
            self.view.overlay.clear()
