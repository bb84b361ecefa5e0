import logging
from typing import Callable, List, Optional

from timings.coords import value_to_y
from timings.layout import MARGIN, MIN_TICK_DIST, X_LINE, Y_LINE
from timings.models import BuildTimings, ConcurrencySample
from timings.ticks import split_ticks

from .draw_helpers import draw_graph_axes, fmt_num
from .surfaces import Canvas
from .theme import (
    ACTIVE_COLOR,
    AXIS,
    CPU_FILL,
    INACTIVE_COLOR,
    MUTED,
    PANEL,
    TEXT,
    WAITING_COLOR,
)

logger = logging.getLogger(__name__)

HEIGHT = 400
AXIS_HEIGHT = HEIGHT - MARGIN - Y_LINE
TOP_MARGIN = 10
GRAPH_HEIGHT = AXIS_HEIGHT - TOP_MARGIN

LEGEND_W, LEGEND_H = 150, 82

SERIES = (
    ("Waiting", WAITING_COLOR, lambda c: c.waiting),
    ("Inactive", INACTIVE_COLOR, lambda c: c.inactive),
    ("Active", ACTIVE_COLOR, lambda c: c.active),
)


def _step_points(samples, key: Callable[[ConcurrencySample], int], coord):
    """Horizontal-then-vertical points: each value holds until the next sample."""
    first = samples[0]
    last = coord(first.t, key(first))
    points = [last]
    for c in samples[1:]:
        x, y = coord(c.t, key(c))
        points.append((x, last[1]))
        points.append((x, y))
        last = (x, y)
    return points


def y_tick_values(max_v: int) -> List[int]:
    """Tick values on the `# Units` axis; the planner may round past `max_v`, those are dropped."""
    step, top = split_ticks(max_v, GRAPH_HEIGHT / MIN_TICK_DIST)
    values = []
    for n in range(1, int(top // step) + 1):
        v = n * step
        if v > max_v:
            break
        values.append(v)
    return values


def draw_legend(ctx: Canvas, x: float, y: float):
    with ctx.translated(x, y):
        ctx.fill_rect(0, 0, LEGEND_W, LEGEND_H, PANEL)
        ctx.stroke_rect(0, 0, LEGEND_W, LEGEND_H, AXIS, width=1)
        for n, (label, color, _) in enumerate(SERIES):
            ly = 10 + n * 20
            ctx.line(5, ly, 50, ly, color, width=2)
            ctx.text(label, 54, ly + 1, TEXT, align="start")
        ctx.fill_rect(15, 60, 30, 15, CPU_FILL)
        ctx.text("CPU Usage", 54, 68, TEXT, align="start")


def render_timing_graph(timings: BuildTimings, scale: float, dpr: float = 1.0) -> Optional[Canvas]:
    """Concurrency and CPU usage over the build; None when nothing was sampled."""
    samples = timings.concurrency
    if not samples:
        return None

    frame = draw_graph_axes(AXIS_HEIGHT, timings.duration, scale, dpr)
    ctx = frame.canvas
    ts = frame.scale

    # Y tick marks and labels
    max_v = timings.max_concurrency()
    for v in y_tick_values(max_v):
        y = MARGIN + value_to_y(v, max_v, GRAPH_HEIGHT, TOP_MARGIN)
        ctx.line(X_LINE, y, X_LINE - 5, y, AXIS)
        ctx.text(fmt_num(v), X_LINE - 10, y, MUTED, align="end")

    # Label the Y axis
    ctx.text("# Units", 15, (HEIGHT - Y_LINE) / 2, TEXT, angle=90)

    if max_v > 0:
        def coord(t, v):
            return ts.x(t), value_to_y(v, max_v, GRAPH_HEIGHT, TOP_MARGIN)

        with ctx.translated(X_LINE, MARGIN):
            cpu = timings.cpu_usage
            if len(cpu) > 1:
                points = [coord(cpu[0].t, 0)]
                points.extend(coord(c.t, c.usage / 100.0 * max_v) for c in cpu)
                points.append(coord(cpu[-1].t, 0))
                ctx.fill_polygon(points, CPU_FILL)

            # Drawn back to front: inactive, waiting, active on top.
            for _, color, key in (SERIES[1], SERIES[0], SERIES[2]):
                ctx.polyline(_step_points(samples, key, coord), color)
    else:
        logger.debug("timing graph: all concurrency samples are zero, skipping plot")

    draw_legend(ctx, frame.width - 200, MARGIN)
    logger.debug("timing graph: %d samples, max %d, %d cpu points", len(samples), max_v, len(timings.cpu_usage))
    return ctx
