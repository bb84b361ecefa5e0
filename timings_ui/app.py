import logging
from typing import Optional

import pygame

from timings import (
    Controls,
    HoverController,
    TimingsError,
    build_default_timings,
    load_timings_json,
)
from timings.controls import MIN_UNIT_TIME_STEP

from .draw_helpers import draw_tooltip, fmt_num
from .panels import draw_empty_notice, draw_status_bar, draw_unit_table
from .pipeline_graph import PipelineGraph
from .theme import DPR_DEFAULT, FONT_NAME, FPS, H, SCROLL_STEP, STATUS_H, W, WINDOW_BG
from .timing_graph import render_timing_graph

logger = logging.getLogger(__name__)

GRAPH_GAP = 24


def unit_tooltip_lines(unit):
    lines = [
        f"{unit.name} v{unit.version}{unit.target}" if unit.version else unit.label,
        f"Mode: {unit.mode.value}",
        f"Start: {fmt_num(unit.start)}s   Duration: {fmt_num(unit.duration)}s",
    ]
    split = unit.codegen_time
    if split is not None:
        rmeta, ctime = split
        lines.append(f"Metadata ready: {fmt_num(rmeta)}s   Codegen: {fmt_num(ctime)}s")
    lines.append(f"Unlocks: {len(unit.unlocked_units)}   Unlocks at rmeta: {len(unit.unlocked_rmeta_units)}")
    if unit.features:
        lines.append("Features: " + ", ".join(unit.features))
    return lines


def run(path: Optional[str] = None, controls: Optional[Controls] = None, dpr: float = DPR_DEFAULT):
    pygame.init()

    screen = pygame.display.set_mode((W, H), pygame.RESIZABLE)
    pygame.display.set_caption("Build Timings")
    clock = pygame.time.Clock()

    font = pygame.font.SysFont(FONT_NAME, 18, bold=True)
    small = pygame.font.SysFont(FONT_NAME, 15)

    timings = load_timings_json(path) if path else build_default_timings()
    controls = controls or Controls()
    logger.info("loaded %d units, %d concurrency samples, %.2fs build",
                len(timings.units), len(timings.concurrency), timings.duration)

    pipeline = PipelineGraph(timings, dpr)
    hover = HoverController(pipeline.highlight)
    timing_canvas = None
    status_msg = ""

    def render_pipeline():
        nonlocal status_msg
        try:
            pipeline.render(controls.min_unit_time, controls.scale)
        except TimingsError as exc:
            # Previous view stays on screen.
            logger.error("pipeline graph render failed: %s", exc)
            status_msg = f"Pipeline render failed: {exc}"
            return
        hover.reset()

    def render_timing():
        nonlocal timing_canvas, status_msg
        try:
            timing_canvas = render_timing_graph(timings, controls.scale, dpr)
        except TimingsError as exc:
            logger.error("timing graph render failed: %s", exc)
            status_msg = f"Timing render failed: {exc}"

    render_pipeline()
    render_timing()

    scroll_x = 0
    scroll_y = 0
    table_open = False
    table_scroll = 0

    def content_size():
        w = h = 0
        if pipeline.view is not None:
            pw, ph = pipeline.view.content.surface.get_size()
            w, h = max(w, pw), h + ph + GRAPH_GAP
        if timing_canvas is not None:
            tw, th = timing_canvas.surface.get_size()
            w, h = max(w, tw), h + th
        return w, h

    def clamp_scroll():
        nonlocal scroll_x, scroll_y
        cw, ch = content_size()
        sw, sh = screen.get_size()
        scroll_x = max(0, min(scroll_x, cw - sw))
        scroll_y = max(0, min(scroll_y, ch - (sh - STATUS_H)))

    def pipeline_pos(pos):
        """Window position -> logical pipeline surface coordinates."""
        mx, my = pos
        return (mx + scroll_x) / dpr, (my - STATUS_H + scroll_y) / dpr

    running = True
    while running:
        clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    if table_open:
                        table_open = False
                    else:
                        running = False
                elif event.key == pygame.K_t:
                    table_open = not table_open
                elif event.key in (pygame.K_LEFT, pygame.K_RIGHT):
                    delta = -1 if event.key == pygame.K_LEFT else 1
                    controls = controls.with_scale(controls.scale + delta)
                    logger.info("scale -> %g", controls.scale)
                    status_msg = ""
                    render_pipeline()
                    render_timing()
                elif event.key in (pygame.K_UP, pygame.K_DOWN):
                    delta = MIN_UNIT_TIME_STEP if event.key == pygame.K_UP else -MIN_UNIT_TIME_STEP
                    controls = controls.with_min_unit_time(controls.min_unit_time + delta)
                    logger.info("min unit time -> %.1fs", controls.min_unit_time)
                    status_msg = ""
                    render_pipeline()

            elif event.type == pygame.MOUSEWHEEL:
                if table_open:
                    table_scroll -= event.y * 3
                elif pygame.key.get_mods() & pygame.KMOD_SHIFT:
                    scroll_x -= event.y * SCROLL_STEP
                else:
                    scroll_y -= event.y * SCROLL_STEP
                    scroll_x -= event.x * SCROLL_STEP

            elif event.type == pygame.MOUSEMOTION and not table_open:
                if pipeline.view is not None:
                    x, y = pipeline_pos(event.pos)
                    hover.pointer_moved(pipeline.view.layout, x, y)

        clamp_scroll()

        screen.fill(WINDOW_BG)
        top = STATUS_H - scroll_y
        if pipeline.view is not None:
            screen.blit(pipeline.view.content.surface, (-scroll_x, top))
            screen.blit(pipeline.view.overlay.surface, (-scroll_x, top))
            top += pipeline.view.content.surface.get_height() + GRAPH_GAP
        else:
            draw_empty_notice(screen, pygame.Rect(0, top, screen.get_width(), 40), small, "(no units recorded)")
            top += 40 + GRAPH_GAP
        if timing_canvas is not None:
            screen.blit(timing_canvas.surface, (-scroll_x, top))

        draw_status_bar(screen, controls, timings, small, status_msg)

        if table_open:
            sw, sh = screen.get_size()
            panel = pygame.Rect(40, STATUS_H + 20, sw - 80, sh - STATUS_H - 40)
            table_scroll = draw_unit_table(screen, panel, timings, font, small, table_scroll)
        elif pipeline.view is not None:
            mouse = pygame.mouse.get_pos()
            if mouse[1] > STATUS_H:
                index = pipeline.view.layout.hit_test(*pipeline_pos(mouse))
                if index is not None:
                    draw_tooltip(screen, mouse, unit_tooltip_lines(timings.unit(index)), small)

        pygame.display.flip()

    pygame.quit()
