"""Drawing surfaces for the graphs.

A `Canvas` wraps a pygame surface sized in device pixels and takes logical
coordinates, scaling everything by the device pixel ratio so lines and text
stay crisp on dense displays.
"""
import math
from contextlib import contextmanager
from typing import Dict, Optional, Sequence, Tuple

import pygame

from .theme import BG, FONT_NAME, FONT_SIZE, TEXT, TRANSPARENT

Point = Tuple[float, float]

_FONTS: Dict[Tuple[str, int], pygame.font.Font] = {}


def get_font(size: int) -> pygame.font.Font:
    if not pygame.font.get_init():
        pygame.font.init()
    key = (FONT_NAME, size)
    font = _FONTS.get(key)
    if font is None:
        font = pygame.font.SysFont(FONT_NAME, size)
        _FONTS[key] = font
    return font


def _dash_segments(p0: Point, p1: Point, dash: Sequence[float]):
    """Split a segment into the visible pieces of a dash pattern."""
    (x0, y0), (x1, y1) = p0, p1
    length = math.hypot(x1 - x0, y1 - y0)
    if length == 0:
        return
    ux, uy = (x1 - x0) / length, (y1 - y0) / length
    pos = 0.0
    n = 0
    while pos < length:
        run = dash[n % len(dash)]
        end = min(length, pos + run)
        if n % 2 == 0:
            yield (x0 + ux * pos, y0 + uy * pos), (x0 + ux * end, y0 + uy * end)
        pos = end
        n += 1


class Canvas:
    def __init__(self, width: float, height: float, dpr: float = 1.0, transparent: bool = False):
        self.width = width
        self.height = height
        self.dpr = dpr
        self.transparent = transparent
        size = (max(1, math.ceil(width * dpr)), max(1, math.ceil(height * dpr)))
        self.surface = pygame.Surface(size, pygame.SRCALPHA if transparent else 0)

        self.background = TRANSPARENT if transparent else BG
        self.line_width = 1
        self.font_size = FONT_SIZE
        self.text_align = "start"
        self._origin = (0.0, 0.0)

    # -------- coordinate helpers --------
    def _px(self, x: float, y: float) -> Point:
        ox, oy = self._origin
        return ((ox + x) * self.dpr, (oy + y) * self.dpr)

    def _width(self, width: Optional[float]) -> int:
        return max(1, round((width or self.line_width) * self.dpr))

    @contextmanager
    def translated(self, dx: float, dy: float):
        prev = self._origin
        self._origin = (prev[0] + dx, prev[1] + dy)
        try:
            yield self
        finally:
            self._origin = prev

    # -------- primitives --------
    def clear(self):
        self.surface.fill(self.background)

    def fill_rect(self, x, y, w, h, color):
        x0, y0 = self._px(x, y)
        x1, y1 = self._px(x + w, y + h)
        rect = pygame.Rect(round(x0), round(y0), max(1, round(x1) - round(x0)), max(1, round(y1) - round(y0)))
        if len(color) == 4 and not self.transparent:
            layer = pygame.Surface(rect.size, pygame.SRCALPHA)
            layer.fill(color)
            self.surface.blit(layer, rect.topleft)
        else:
            self.surface.fill(color, rect)

    def stroke_rect(self, x, y, w, h, color, width=None):
        x0, y0 = self._px(x, y)
        x1, y1 = self._px(x + w, y + h)
        rect = pygame.Rect(round(x0), round(y0), max(1, round(x1) - round(x0)), max(1, round(y1) - round(y0)))
        pygame.draw.rect(self.surface, color, rect, self._width(width))

    def rounded_rect(self, x, y, w, h, r, color):
        r = min(r, w, h)
        x0, y0 = self._px(x, y)
        x1, y1 = self._px(x + w, y + h)
        rect = pygame.Rect(round(x0), round(y0), max(1, round(x1) - round(x0)), max(1, round(y1) - round(y0)))
        pygame.draw.rect(self.surface, color, rect, border_radius=int(r * self.dpr))

    def polyline(self, points: Sequence[Point], color, width=None, dash: Optional[Sequence[float]] = None):
        if len(points) < 2:
            return
        lw = self._width(width)
        if not dash:
            pygame.draw.lines(self.surface, color, False, [self._px(*p) for p in points], lw)
            return
        dash = [d * self.dpr for d in dash]
        for a, b in zip(points, points[1:]):
            for s0, s1 in _dash_segments(self._px(*a), self._px(*b), dash):
                pygame.draw.line(self.surface, color, s0, s1, lw)

    def line(self, x0, y0, x1, y1, color, width=None, dash=None):
        self.polyline([(x0, y0), (x1, y1)], color, width, dash)

    def fill_polygon(self, points: Sequence[Point], color):
        if len(points) < 3:
            return
        pts = [self._px(*p) for p in points]
        if len(color) == 4 and not self.transparent:
            layer = pygame.Surface(self.surface.get_size(), pygame.SRCALPHA)
            pygame.draw.polygon(layer, color, pts)
            self.surface.blit(layer, (0, 0))
        else:
            pygame.draw.polygon(self.surface, color, pts)

    # -------- text --------
    def _font(self, size: Optional[int]) -> pygame.font.Font:
        return get_font(max(1, round((size or self.font_size) * self.dpr)))

    def measure_text(self, text: str, size: Optional[int] = None) -> float:
        return self._font(size).size(text)[0] / self.dpr

    def text(self, text: str, x: float, y: float, color=TEXT, size: Optional[int] = None,
             align: Optional[str] = None, baseline: str = "middle", angle: int = 0):
        """Draw `text` anchored at (x, y).

        `align` is start/center/end (defaults to the canvas setting) and
        `baseline` is top/middle/bottom.
        """
        surf = self._font(size).render(str(text), True, color)
        if angle:
            surf = pygame.transform.rotate(surf, angle)
        px, py = self._px(x, y)
        align = align or self.text_align
        if align == "center":
            px -= surf.get_width() / 2
        elif align == "end":
            px -= surf.get_width()
        if baseline == "middle":
            py -= surf.get_height() / 2
        elif baseline == "bottom":
            py -= surf.get_height()
        self.surface.blit(surf, (round(px), round(py)))


def setup_canvas(width: float, height: float, dpr: float = 1.0, transparent: bool = False) -> Canvas:
    """Prepare a surface for one graph layer.

    Opaque canvases get the light background; every canvas starts with a 2px
    stroke, the axis font and centered text.
    """
    canvas = Canvas(width, height, dpr, transparent)
    canvas.clear()
    canvas.line_width = 2
    canvas.font_size = FONT_SIZE
    canvas.text_align = "center"
    return canvas
