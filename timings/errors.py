class TimingsError(Exception):
    """Base class for every error raised by the timings engine."""


class TimingsDataError(TimingsError, ValueError):
    """The trace or a control value breaks one of the data invariants."""


class TickPlanningError(TimingsError):
    """The tick search for an axis did not converge (non-finite range, zero ticks)."""
