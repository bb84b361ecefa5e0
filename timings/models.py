from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .errors import TimingsDataError


class UnitMode(str, Enum):
    BUILD = "build"
    CHECK = "check"
    RUN_CUSTOM_BUILD = "run-custom-build"   # build script execution
    DOC = "doc"
    DOCTEST = "doctest"
    TEST = "test"

    @classmethod
    def parse(cls, value) -> "UnitMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise TimingsDataError(f"unknown unit mode: {value!r}")


@dataclass(frozen=True)
class Unit:
    i: int
    name: str
    target: str = ""
    mode: UnitMode = UnitMode.BUILD

    # Seconds from the start of the build
    start: float = 0.0
    duration: float = 0.0

    # Seconds after `start` when the metadata (rmeta) was ready, if pipelined
    rmeta_time: Optional[float] = None

    # Indices of units that were waiting on this one
    unlocked_units: Tuple[int, ...] = ()
    unlocked_rmeta_units: Tuple[int, ...] = ()

    # Display only
    version: str = ""
    features: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "mode", UnitMode.parse(self.mode))
        object.__setattr__(self, "unlocked_units", tuple(int(u) for u in self.unlocked_units))
        object.__setattr__(self, "unlocked_rmeta_units", tuple(int(u) for u in self.unlocked_rmeta_units))
        object.__setattr__(self, "features", tuple(str(f) for f in self.features))

        if self.start < 0:
            raise TimingsDataError(f"unit {self.i}: start must be >= 0")
        if self.duration < 0:
            raise TimingsDataError(f"unit {self.i}: duration must be >= 0")
        if self.rmeta_time is not None and not (0 <= self.rmeta_time <= self.duration):
            raise TimingsDataError(f"unit {self.i}: rmeta_time must lie within [0, duration]")

    @property
    def label(self) -> str:
        return f"{self.name}{self.target}"

    @property
    def codegen_time(self) -> Optional[Tuple[float, float]]:
        """`(rmeta_time, codegen)` split of the duration, or None if not pipelined."""
        if self.rmeta_time is None:
            return None
        return self.rmeta_time, self.duration - self.rmeta_time


@dataclass(frozen=True)
class ConcurrencySample:
    t: float
    active: int = 0     # currently executing
    waiting: int = 0    # queued for a job slot
    inactive: int = 0   # blocked on dependencies

    def __post_init__(self):
        if min(self.active, self.waiting, self.inactive) < 0:
            raise TimingsDataError(f"concurrency sample at t={self.t}: counts must be >= 0")


@dataclass(frozen=True)
class CpuSample:
    t: float
    usage: float  # percent

    def __post_init__(self):
        if not (0 <= self.usage <= 100):
            raise TimingsDataError(f"cpu sample at t={self.t}: usage must be within [0, 100]")


@dataclass
class BuildTimings:
    """Everything recorded for one build, resident before the first render."""

    units: List[Unit]
    duration: float
    concurrency: List[ConcurrencySample] = field(default_factory=list)
    cpu_usage: List[CpuSample] = field(default_factory=list)

    def __post_init__(self):
        if self.duration < 0:
            raise TimingsDataError("duration must be >= 0")

        self._by_index: Dict[int, Unit] = {}
        for unit in self.units:
            if unit.i in self._by_index:
                raise TimingsDataError(f"duplicate unit index {unit.i}")
            self._by_index[unit.i] = unit

        for unit in self.units:
            for unlocked in unit.unlocked_units + unit.unlocked_rmeta_units:
                if unlocked not in self._by_index:
                    raise TimingsDataError(f"unit {unit.i} unlocks unknown unit {unlocked}")

    def unit(self, index: int) -> Unit:
        return self._by_index[index]

    def max_concurrency(self) -> int:
        """Largest value seen across the active/waiting/inactive series."""
        max_v = 0
        for c in self.concurrency:
            max_v = max(max_v, c.active, c.waiting, c.inactive)
        return max_v
