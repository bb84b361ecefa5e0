from .pipeline_graph import PipelineGraph, PipelineView
from .surfaces import Canvas, setup_canvas
from .timing_graph import render_timing_graph

__all__ = [
    "Canvas",
    "PipelineGraph",
    "PipelineView",
    "render_timing_graph",
    "setup_canvas",
]
