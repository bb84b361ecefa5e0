import math
from typing import Tuple

from .errors import TickPlanningError

# Upper bound on the multiples of 10 probed by split_ticks.
MAX_TICK_PROBES = 100


def round_up(n, step):
    """Smallest multiple of `step` that is >= `n`."""
    if n % step == 0:
        return n
    return (step - n % step) + n


def split_ticks(n, max_ticks) -> Tuple[int, float]:
    """Determine the `(step, top)` of the ticks along an axis covering `0..n`.

    `top` is a multiple of `step` no smaller than `n`, and at most
    `ceil(max_ticks)` steps fit below it. Steps are tried in the order
    1, 2, 4, 5, 10, 20, 30, ... and the first one that fits wins.
    """
    max_ticks = math.ceil(max_ticks) if math.isfinite(max_ticks) else max_ticks

    for step in (1, 2, 4, 5):
        if n <= max_ticks * step:
            return step, round_up(n, step)

    step = 10
    count = 0
    while True:
        if count > MAX_TICK_PROBES:
            raise TickPlanningError(f"tick loop too long (n={n}, max_ticks={max_ticks})")
        count += 1
        top = round_up(n, step)
        if top <= max_ticks * step:
            return step, top
        step += 10
