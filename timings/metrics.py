from typing import Any, Dict, List

from .models import BuildTimings


def _fmt_secs(value: float) -> str:
    return f"{value:.2f}s"


def compute_unit_rows(timings: BuildTimings) -> List[Dict[str, Any]]:
    """Per-unit table rows, slowest first.

    `Codegen` is the time spent after metadata was ready, with its share of
    the total, or "-" for units that were not pipelined.
    """
    rows = []
    ordered = sorted(timings.units, key=lambda u: (-u.duration, u.i))
    for rank, unit in enumerate(ordered, start=1):
        split = unit.codegen_time
        if split is None:
            codegen = "-"
        else:
            _, ctime = split
            pct = (ctime / unit.duration * 100.0) if unit.duration else 0.0
            codegen = f"{_fmt_secs(ctime)} ({pct:.0f}%)"
        rows.append({
            "#": rank,
            "i": unit.i,
            "Unit": f"{unit.name} v{unit.version}{unit.target}" if unit.version else unit.label,
            "Mode": unit.mode.value,
            "Total": _fmt_secs(unit.duration),
            "Codegen": codegen,
            "Features": ", ".join(unit.features),
        })
    return rows


def compute_summary(timings: BuildTimings) -> Dict[str, Any]:
    cpu = timings.cpu_usage
    avg_cpu = (sum(c.usage for c in cpu) / len(cpu)) if cpu else 0.0
    max_active = max((c.active for c in timings.concurrency), default=0)
    pipelined = sum(1 for u in timings.units if u.rmeta_time is not None)

    return {
        "units": len(timings.units),
        "total_time": timings.duration,
        "max_concurrency": max_active,
        "avg_cpu_usage": avg_cpu,
        "pipelined_units": pipelined,
    }
