from dataclasses import dataclass

import pygame

from timings.coords import TimeScale, time_scale
from timings.layout import MARGIN, MIN_TICK_DIST, X_LINE, Y_LINE
from timings.ticks import split_ticks

from .surfaces import Canvas, setup_canvas
from .theme import AXIS, GRID, GRID_DASH, MUTED, TEXT, TOOLTIP_BG, TOOLTIP_BORDER


@dataclass
class GraphFrame:
    canvas: Canvas
    width: float
    height: float
    graph_width: float
    graph_height: float
    scale: TimeScale


def fmt_num(value) -> str:
    return f"{value:g}"


def draw_graph_axes(graph_height: float, duration: float, scale: float, dpr: float = 1.0) -> GraphFrame:
    """Create a graph canvas with both axes, the time ticks and their grid lines.

    Ticks sit at their true time positions; the planner only picks the step.
    """
    ts = time_scale(duration, scale)
    graph_width = ts.graph_width
    width = max(graph_width + X_LINE + 30, X_LINE + 250)
    height = graph_height + MARGIN + Y_LINE
    canvas = setup_canvas(width, height, dpr)

    canvas.polyline(
        [
            (X_LINE, MARGIN),
            (X_LINE, graph_height + MARGIN),
            (X_LINE + graph_width + 20, graph_height + MARGIN),
        ],
        AXIS,
    )

    step, top = split_ticks(duration, graph_width / MIN_TICK_DIST)
    axis_end = X_LINE + graph_width + 20
    for n in range(1, int(top // step) + 1):
        t = n * step
        x = X_LINE + ts.x(t)
        if x > axis_end:
            break
        canvas.line(x, height - Y_LINE, x, height - Y_LINE + 5, AXIS)
        canvas.text(f"{fmt_num(t)}s", x, height - Y_LINE + 20, MUTED)
        canvas.line(x, MARGIN, x, MARGIN + graph_height, GRID, dash=GRID_DASH)

    return GraphFrame(canvas, width, height, graph_width, graph_height, ts)


# ------------------------------
# Tooltip renderer (reusable)
# ------------------------------
def draw_tooltip(screen, pos, lines, font, max_w=460):
    """Simple hover tooltip. `lines` is a list[str]."""
    if not lines:
        return

    pad_x, pad_y = 10, 8
    line_h = font.get_height() + 4

    rendered = [font.render(str(ln), True, TEXT) for ln in lines]
    w = min(max(s.get_width() for s in rendered) + pad_x * 2, max_w)
    h = len(rendered) * line_h + pad_y * 2

    sw, sh = screen.get_size()
    mx, my = pos
    x = mx + 14
    y = my + 14

    # keep inside window
    if x + w > sw - 8:
        x = mx - w - 14
    if y + h > sh - 8:
        y = my - h - 14
    x = max(8, min(sw - w - 8, x))
    y = max(8, min(sh - h - 8, y))

    body = pygame.Surface((w, h), pygame.SRCALPHA)
    body.fill(TOOLTIP_BG)
    pygame.draw.rect(body, TOOLTIP_BORDER, pygame.Rect(0, 0, w, h), 1, border_radius=6)
    screen.blit(body, (x, y))

    ty = y + pad_y
    for surf in rendered:
        screen.blit(surf, (x + pad_x, ty))
        ty += line_h
