import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Render off-screen; no window is ever opened by the tests.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from timings import BuildTimings, ConcurrencySample, CpuSample, Unit, build_default_timings  # noqa: E402


@pytest.fixture
def sample_timings() -> BuildTimings:
    return build_default_timings()


@pytest.fixture
def chain_timings() -> BuildTimings:
    """Four units over a 10s build.

    a unlocks b on completion and c at metadata; b and c both unlock d, and
    c is listed last, so c is the recorded predecessor of d.
    """
    units = [
        Unit(0, "a", "(lib)", "build", start=0.0, duration=4.0, rmeta_time=2.0,
             unlocked_units=[1], unlocked_rmeta_units=[2]),
        Unit(1, "b", "(lib)", "build", start=4.0, duration=3.0, unlocked_units=[3]),
        Unit(2, "c", "(build-script)", "run-custom-build", start=2.0, duration=0.5, unlocked_units=[3]),
        Unit(3, "d", "(bin)", "build", start=7.0, duration=3.0),
    ]
    concurrency = [
        ConcurrencySample(0.0, active=1, waiting=0, inactive=3),
        ConcurrencySample(2.0, active=2, waiting=1, inactive=2),
        ConcurrencySample(4.0, active=1, waiting=0, inactive=1),
        ConcurrencySample(7.0, active=1, waiting=0, inactive=0),
        ConcurrencySample(10.0, active=0, waiting=0, inactive=0),
    ]
    cpu = [CpuSample(0.0, 40.0), CpuSample(5.0, 80.0), CpuSample(10.0, 10.0)]
    return BuildTimings(units=units, duration=10.0, concurrency=concurrency, cpu_usage=cpu)
