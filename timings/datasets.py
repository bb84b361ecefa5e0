import json
import os
from typing import Any, Dict, List

from .errors import TimingsDataError
from .models import BuildTimings, ConcurrencySample, CpuSample, Unit


def _unit_from_dict(item: Dict[str, Any], position: int) -> Unit:
    rmeta_time = item.get("rmeta_time")
    try:
        return Unit(
            i=int(item.get("i", position)),
            name=str(item["name"]),
            target=str(item.get("target", "")),
            mode=item.get("mode", "build"),
            start=float(item.get("start", 0.0)),
            duration=float(item.get("duration", 0.0)),
            rmeta_time=None if rmeta_time is None else float(rmeta_time),
            unlocked_units=item.get("unlocked_units") or (),
            unlocked_rmeta_units=item.get("unlocked_rmeta_units") or (),
            version=str(item.get("version", "")),
            features=item.get("features") or (),
        )
    except TimingsDataError:
        raise
    except KeyError as exc:
        raise TimingsDataError(f"unit #{position} is missing {exc.args[0]!r}")
    except (TypeError, ValueError) as exc:
        raise TimingsDataError(f"unit #{position}: {exc}")


def _count(sample: Dict[str, Any], key: str) -> int:
    value = float(sample.get(key, 0))
    if not value.is_integer():
        raise TimingsDataError(f"concurrency sample at t={sample.get('t')}: {key} must be a whole number, got {value}")
    return int(value)


def _cpu_from_item(item: Any) -> CpuSample:
    if isinstance(item, dict):
        return CpuSample(float(item["t"]), float(item["usage"]))
    t, usage = item
    return CpuSample(float(t), float(usage))


def timings_from_dict(data: Dict[str, Any]) -> BuildTimings:
    """Build the resident data set from a decoded trace document.

    Expected keys: `duration`, `units` (list of unit objects), and optionally
    `concurrency` (objects with `t`, `active`, `waiting`, `inactive`) and
    `cpu_usage` (`[t, percent]` pairs).
    """
    if not isinstance(data, dict):
        raise TimingsDataError("trace must be a JSON object")
    units_raw = data.get("units") or []
    if not isinstance(units_raw, list):
        raise TimingsDataError("units must be an array")

    units = [_unit_from_dict(item, n) for n, item in enumerate(units_raw)]

    try:
        concurrency = [
            ConcurrencySample(
                t=float(c["t"]),
                active=_count(c, "active"),
                waiting=_count(c, "waiting"),
                inactive=_count(c, "inactive"),
            )
            for c in data.get("concurrency") or []
        ]
        cpu_usage = [_cpu_from_item(c) for c in data.get("cpu_usage") or []]
        duration = data.get("duration")
        if duration is None:
            duration = max((u.start + u.duration for u in units), default=0.0)
        duration = float(duration)
    except TimingsDataError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise TimingsDataError(f"malformed samples: {exc}")

    return BuildTimings(units=units, duration=duration, concurrency=concurrency, cpu_usage=cpu_usage)


def load_timings_json(path: str) -> BuildTimings:
    with open(os.path.expanduser(path), "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise TimingsDataError(f"{path}: not valid JSON ({exc})")
    return timings_from_dict(data)


# ------------------------------
# Built-in trace (small workspace build)
# ------------------------------
def build_default_timings() -> BuildTimings:
    units: List[Unit] = [
        Unit(0, "cfg-if", "(lib)", "build", start=0.0, duration=0.12, rmeta_time=0.08,
             unlocked_rmeta_units=[3], version="1.0.0"),
        Unit(1, "libc", "(build-script)", "build", start=0.0, duration=0.45,
             unlocked_units=[2], version="0.2.155"),
        Unit(2, "libc", "(run)", "run-custom-build", start=0.45, duration=0.21,
             unlocked_units=[3], version="0.2.155"),
        Unit(3, "libc", "(lib)", "build", start=0.66, duration=1.84, rmeta_time=0.72,
             unlocked_rmeta_units=[4, 5], version="0.2.155", features=["default", "std"]),
        Unit(4, "getrandom", "(lib)", "build", start=1.38, duration=0.95, rmeta_time=0.41,
             unlocked_units=[6], version="0.2.15", features=["std"]),
        Unit(5, "memchr", "(lib)", "build", start=1.38, duration=1.2, rmeta_time=0.5,
             unlocked_units=[6], version="2.7.4", features=["alloc", "std"]),
        Unit(6, "demo", '(bin "demo")', "build", start=2.58, duration=2.42, version="0.1.0"),
    ]
    concurrency = [
        ConcurrencySample(0.0, active=2, waiting=0, inactive=5),
        ConcurrencySample(0.12, active=1, waiting=0, inactive=5),
        ConcurrencySample(0.45, active=1, waiting=0, inactive=4),
        ConcurrencySample(0.66, active=1, waiting=0, inactive=3),
        ConcurrencySample(1.38, active=3, waiting=0, inactive=1),
        ConcurrencySample(2.33, active=2, waiting=0, inactive=1),
        ConcurrencySample(2.58, active=1, waiting=0, inactive=0),
        ConcurrencySample(5.0, active=0, waiting=0, inactive=0),
    ]
    cpu_usage = [
        CpuSample(0.0, 35.0),
        CpuSample(0.5, 48.0),
        CpuSample(1.0, 52.5),
        CpuSample(1.5, 96.0),
        CpuSample(2.0, 91.0),
        CpuSample(2.5, 64.0),
        CpuSample(3.0, 27.0),
        CpuSample(4.0, 25.5),
        CpuSample(5.0, 12.0),
    ]
    return BuildTimings(units=units, duration=5.0, concurrency=concurrency, cpu_usage=cpu_usage)
