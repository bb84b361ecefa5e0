import io
import logging
from threading import Lock
from typing import Any, Dict, List, Optional

import pygame

from timings import (
    BuildTimings,
    Controls,
    HoverController,
    TickPlanningError,
    TimingsDataError,
    build_default_timings,
    compute_summary,
    compute_unit_rows,
    timings_from_dict,
)
from timings.layout import Edge
from timings_ui.pipeline_graph import PipelineGraph
from timings_ui.surfaces import Canvas
from timings_ui.timing_graph import render_timing_graph

from timings_api.serializers import serialize_edges, serialize_state

logger = logging.getLogger(__name__)

_session_lock = Lock()

timings: Optional[BuildTimings] = None
pipeline: Optional[PipelineGraph] = None
hover: Optional[HoverController] = None
timing_canvas: Optional[Canvas] = None
controls: Controls = Controls()
settings: Dict[str, Any] = {"dpr": 1.0}
render_errors: Dict[str, str] = {}   # graph name -> last planning failure

GRAPHS = {"pipeline", "timing", "overlay"}


def _safe_dpr(value: Any) -> float:
    try:
        dpr = float(value)
    except (TypeError, ValueError):
        raise TimingsDataError("dpr must be a number")
    if not (0.5 <= dpr <= 4.0):
        raise TimingsDataError("dpr must be within 0.5..4")
    return dpr


def _current_edges() -> List[Edge]:
    if pipeline is None or pipeline.view is None or hover is None or hover.highlighted is None:
        return []
    unit = pipeline.timings.unit(hover.highlighted)
    return pipeline.view.layout.highlight_edges(unit, pipeline.reverse)


def _state() -> Dict[str, Any]:
    return serialize_state(
        timings,
        controls,
        pipeline.view if pipeline else None,
        timing_canvas,
        hover.highlighted if hover else None,
        _current_edges(),
        render_errors,
    )


def _try_render(name: str, errors: Dict[str, str], render, *args):
    """Run one graph's render pass. A planning failure is recorded for that graph only.

    Returns `(ok, result)`.
    """
    try:
        result = render(*args)
    except TickPlanningError as exc:
        logger.error("%s graph render failed: %s", name, exc)
        errors[name] = str(exc)
        return False, None
    errors.pop(name, None)
    return True, result


def _render_pipeline(new_controls: Controls):
    # On failure the previous view (and its highlight) stays.
    ok, _ = _try_render("pipeline", render_errors, pipeline.render, new_controls.min_unit_time, new_controls.scale)
    if ok:
        hover.reset()


def _render_timing(new_controls: Controls):
    global timing_canvas
    ok, canvas = _try_render("timing", render_errors, render_timing_graph, timings, new_controls.scale, settings["dpr"])
    if ok:
        timing_canvas = canvas


def _load(new_timings: BuildTimings, new_controls: Controls, dpr: float):
    global timings, pipeline, hover, controls, timing_canvas, render_errors
    errors: Dict[str, str] = {}
    new_pipeline = PipelineGraph(new_timings, dpr)
    _try_render("pipeline", errors, new_pipeline.render, new_controls.min_unit_time, new_controls.scale)
    _, new_timing = _try_render("timing", errors, render_timing_graph, new_timings, new_controls.scale, dpr)

    timings = new_timings
    pipeline = new_pipeline
    hover = HoverController(new_pipeline.highlight)
    timing_canvas = new_timing
    controls = new_controls
    render_errors = errors
    settings["dpr"] = dpr
    logger.info("session loaded: %d units, %.2fs", len(new_timings.units), new_timings.duration)


def _ensure_session():
    if timings is None:
        _load(build_default_timings(), Controls(), settings["dpr"])


# -------- public API (each call holds the session lock) --------
def init_session(payload: Dict[str, Any]) -> Dict[str, Any]:
    with _session_lock:
        trace = payload.get("timings")
        new_timings = timings_from_dict(trace) if trace is not None else build_default_timings()
        new_controls = Controls().update(payload)
        dpr = _safe_dpr(payload.get("dpr", settings["dpr"]))
        _load(new_timings, new_controls, dpr)
        return _state()


def reset_session() -> Dict[str, Any]:
    with _session_lock:
        _load(build_default_timings(), Controls(), 1.0)
        return _state()


def get_state() -> Dict[str, Any]:
    with _session_lock:
        _ensure_session()
        return _state()


def set_controls(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Apply control changes; scale re-renders both graphs, the filter only the pipeline."""
    global controls
    with _session_lock:
        _ensure_session()
        new_controls = controls.update(payload)
        scale_changed = new_controls.scale != controls.scale
        filter_changed = new_controls.min_unit_time != controls.min_unit_time

        if scale_changed or filter_changed:
            _render_pipeline(new_controls)
        if scale_changed:
            _render_timing(new_controls)
        if scale_changed or filter_changed:
            logger.info("controls -> min %.2fs, scale %g", new_controls.min_unit_time, new_controls.scale)
        controls = new_controls
        return _state()


def pointer_move(x: float, y: float) -> Dict[str, Any]:
    with _session_lock:
        _ensure_session()
        view = pipeline.view
        changed = hover.pointer_moved(view.layout if view else None, x, y)
        return {
            "changed": changed,
            "highlighted": hover.highlighted,
            "edges": serialize_edges(_current_edges()),
        }


def get_units() -> Dict[str, Any]:
    with _session_lock:
        _ensure_session()
        return {"rows": compute_unit_rows(timings), "summary": compute_summary(timings)}


def render_png(name: str) -> Optional[bytes]:
    """PNG bytes of one graph layer, or None when that graph has nothing to draw."""
    if name not in GRAPHS:
        raise TimingsDataError(f"unknown graph {name!r}, expected one of {sorted(GRAPHS)}")
    with _session_lock:
        _ensure_session()
        if name == "timing":
            canvas = timing_canvas
        elif pipeline.view is None:
            canvas = None
        else:
            canvas = pipeline.view.content if name == "pipeline" else pipeline.view.overlay
        if canvas is None:
            return None
        buf = io.BytesIO()
        pygame.image.save(canvas.surface, buf, "png")
        return buf.getvalue()
