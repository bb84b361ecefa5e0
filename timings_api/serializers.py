from typing import Any, Dict, List, Optional

from timings.controls import Controls
from timings.layout import Edge
from timings.metrics import compute_summary
from timings.models import BuildTimings
from timings_ui.pipeline_graph import PipelineView, unit_label
from timings_ui.surfaces import Canvas


def serialize_edge(edge: Edge) -> Dict[str, Any]:
    return {
        "source": edge.source,
        "target": edge.target,
        "rmeta": edge.rmeta,
        "points": [[x, y] for x, y in edge.points],
    }


def serialize_edges(edges: List[Edge]) -> List[Dict[str, Any]]:
    return [serialize_edge(e) for e in edges]


def serialize_pipeline(view: Optional[PipelineView]) -> Optional[Dict[str, Any]]:
    if view is None:
        return None
    layout = view.layout
    units = []
    for row, unit in enumerate(layout.units):
        c = layout.coords[unit.i]
        units.append({
            "i": unit.i,
            "row": row,
            "label": unit_label(unit),
            "mode": unit.mode.value,
            "x": c.x,
            "y": c.y,
            "width": c.width,
            "rmeta_x": c.rmeta_x,
        })
    width, height = view.size
    return {
        "width": width,
        "height": height,
        "graph_width": layout.scale.graph_width,
        "px_per_sec": layout.scale.px_per_sec,
        "units": units,
        "hit_boxes": [
            {"x": b.x, "y": b.y, "x2": b.x2, "y2": b.y2, "i": b.index} for b in layout.hit_boxes
        ],
    }


def serialize_canvas(canvas: Optional[Canvas]) -> Optional[Dict[str, float]]:
    if canvas is None:
        return None
    return {"width": canvas.width, "height": canvas.height}


def serialize_state(
    timings: BuildTimings,
    controls: Controls,
    view: Optional[PipelineView],
    timing_canvas: Optional[Canvas],
    highlighted: Optional[int],
    edges: Optional[List[Edge]] = None,
    errors: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    return {
        "controls": controls.as_dict(),
        "duration": timings.duration,
        "summary": compute_summary(timings),
        "pipeline": serialize_pipeline(view),
        "timing": serialize_canvas(timing_canvas),
        "highlighted": highlighted,
        "edges": serialize_edges(edges or []),
        "errors": dict(errors or {}),
    }
