import pygame

from timings.controls import Controls
from timings.metrics import compute_summary, compute_unit_rows
from timings.models import BuildTimings

from .theme import BORDER, MUTED, PANEL, STATUS_H, TEXT, WINDOW_BG


def _clip_text(font, text: str, max_px: int) -> str:
    if font.size(text)[0] <= max_px:
        return text
    ell = "…"
    lo, hi = 0, len(text)
    while lo < hi:
        mid = (lo + hi) // 2
        if font.size(text[:mid] + ell)[0] <= max_px:
            lo = mid + 1
        else:
            hi = mid
    return text[:max(0, lo - 1)] + ell


def draw_status_bar(screen, controls: Controls, timings: BuildTimings, font, message: str = ""):
    rect = pygame.Rect(0, 0, screen.get_width(), STATUS_H)
    pygame.draw.rect(screen, PANEL, rect)
    pygame.draw.line(screen, BORDER, rect.bottomleft, rect.bottomright, 1)

    shown = sum(1 for u in timings.units if u.duration >= controls.min_unit_time)
    left = (
        f"Min unit time: {controls.min_unit_time:.1f}s (↑/↓)   "
        f"Scale: {controls.scale:g} (←/→)   "
        f"Units: {shown}/{len(timings.units)}   T: unit table"
    )
    screen.blit(font.render(left, True, TEXT), (12, 8))
    if message:
        msg = font.render(message, True, MUTED)
        screen.blit(msg, (rect.right - 12 - msg.get_width(), 8))


def draw_unit_table(screen, rect, timings: BuildTimings, font, small, scroll_rows: int = 0):
    """Units sorted by duration, slowest first. Returns the clamped scroll offset."""
    pygame.draw.rect(screen, PANEL, rect, border_radius=10)
    pygame.draw.rect(screen, BORDER, rect, 2, border_radius=10)
    screen.blit(font.render("Units", True, TEXT), (rect.x + 12, rect.y + 10))

    summary = compute_summary(timings)
    line = (
        f"Units: {summary['units']}   Total time: {summary['total_time']:.1f}s   "
        f"Max concurrency: {summary['max_concurrency']}   "
        f"Avg CPU: {summary['avg_cpu_usage']:.1f}%   Pipelined: {summary['pipelined_units']}"
    )
    screen.blit(small.render(line, True, MUTED), (rect.x + 12, rect.y + 40))

    cols = ["#", "Unit", "Mode", "Total", "Codegen", "Features"]
    col_w = [44, 300, 140, 80, 130, rect.w - 24 - 694]
    x = rect.x + 12
    y = rect.y + 68
    for c, w in zip(cols, col_w):
        screen.blit(small.render(c, True, TEXT), (x, y))
        x += w
    y += 24

    rows = compute_unit_rows(timings)
    if not rows:
        screen.blit(small.render("(no units)", True, MUTED), (rect.x + 12, y))
        return 0

    row_h = 20
    max_rows = max(1, (rect.bottom - y - 12) // row_h)
    max_scroll = max(0, len(rows) - max_rows)
    scroll_rows = max(0, min(max_scroll, int(scroll_rows)))

    for r in rows[scroll_rows: scroll_rows + max_rows]:
        x = rect.x + 12
        for c, w in zip(cols, col_w):
            text = _clip_text(small, str(r[c]), max(8, w - 8))
            screen.blit(small.render(text, True, MUTED), (x, y))
            x += w
        y += row_h

    if max_scroll > 0:
        info = small.render(f"Rows {scroll_rows + 1}-{min(scroll_rows + max_rows, len(rows))} / {len(rows)}", True, MUTED)
        screen.blit(info, (rect.right - 12 - info.get_width(), rect.y + 12))

    return scroll_rows


def draw_empty_notice(screen, rect, font, text: str):
    pygame.draw.rect(screen, WINDOW_BG, rect)
    msg = font.render(text, True, MUTED)
    screen.blit(msg, (rect.x + 12, rect.y + 12))
