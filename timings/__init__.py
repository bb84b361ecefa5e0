from .controls import Controls
from .coords import GRAPH_WIDTH_CAP, TimeScale, time_scale, value_to_y
from .datasets import build_default_timings, load_timings_json, timings_from_dict
from .errors import TickPlanningError, TimingsDataError, TimingsError
from .hover import HoverController
from .layout import HitBox, PipelineLayout, ReverseDeps, UnitCoords, layout_pipeline
from .metrics import compute_summary, compute_unit_rows
from .models import BuildTimings, ConcurrencySample, CpuSample, Unit, UnitMode
from .ticks import round_up, split_ticks

__all__ = [
    "BuildTimings",
    "ConcurrencySample",
    "Controls",
    "CpuSample",
    "GRAPH_WIDTH_CAP",
    "HitBox",
    "HoverController",
    "PipelineLayout",
    "ReverseDeps",
    "TickPlanningError",
    "TimeScale",
    "TimingsDataError",
    "TimingsError",
    "Unit",
    "UnitCoords",
    "UnitMode",
    "build_default_timings",
    "compute_summary",
    "compute_unit_rows",
    "layout_pipeline",
    "load_timings_json",
    "round_up",
    "split_ticks",
    "time_scale",
    "timings_from_dict",
    "value_to_y",
]
