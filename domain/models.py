# -*- coding: utf-8 -*-

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Phase:
    index: int
    key: str  # setup | work | away
    name: str
    default_minutes: int


PHASES: Tuple[Phase, ...] = (
    Phase(index=0, key="setup", name="Setup", default_minutes=5),
    Phase(index=1, key="work", name="Work Time", default_minutes=30),
    Phase(index=2, key="away", name="Clean Up", default_minutes=5),
)


def clamp_index(index: int, count: int = len(PHASES)) -> int:
    return max(0, min(count - 1, int(index)))


@dataclass
class TimerState:
    phase_index: int = 0
    remaining_sec: float = 0.0
    duration_sec: float = 0.0
    running: bool = False
    last_tick: Optional[float] = None  # monotonic seconds, None = no baseline


def _finite_number(value: Any) -> Optional[float]:
    # bool is an int subclass; a stored true/false is not a number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        if not math.isfinite(value):
            return None
        return float(value)
    except OverflowError:
        # int too large for a float
        return None


@dataclass(frozen=True)
class PersistedSnapshot:
    """
    Serialized timer state. Wire keys match the stored JSON:
    {"idx", "remaining", "running", "durations", "savedAt"}.
    """

    phase_index: int
    remaining_sec: Optional[float]
    running: bool
    durations_minutes: Dict[str, Any] = field(default_factory=dict)
    saved_at_ms: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "idx": self.phase_index,
            "remaining": max(0.0, self.remaining_sec or 0.0),
            "running": self.running,
            "durations": dict(self.durations_minutes),
            "savedAt": self.saved_at_ms,
        }

    @classmethod
    def from_dict(cls, payload: Any, phase_count: int = len(PHASES)) -> "PersistedSnapshot":
        if not isinstance(payload, dict):
            raise ValueError(f"snapshot must be an object, got {type(payload).__name__}")

        idx = _finite_number(payload.get("idx"))
        phase_index = clamp_index(idx, phase_count) if idx is not None else 0

        remaining = _finite_number(payload.get("remaining"))
        if remaining is not None:
            remaining = max(0.0, remaining)

        durations = payload.get("durations")
        if not isinstance(durations, dict):
            durations = {}

        return cls(
            phase_index=phase_index,
            remaining_sec=remaining,
            running=bool(payload.get("running")),
            durations_minutes=dict(durations),
            saved_at_ms=_finite_number(payload.get("savedAt")),
        )


class LoadStatus(str, Enum):
    OK = "ok"
    CORRUPT = "corrupt"
    ABSENT = "absent"


@dataclass(frozen=True)
class LoadResult:
    status: LoadStatus
    snapshot: Optional[PersistedSnapshot] = None
    error: Optional[Exception] = None

    @classmethod
    def ok(cls, snapshot: PersistedSnapshot) -> "LoadResult":
        return cls(LoadStatus.OK, snapshot=snapshot)

    @classmethod
    def corrupt(cls, error: Exception) -> "LoadResult":
        return cls(LoadStatus.CORRUPT, error=error)

    @classmethod
    def absent(cls) -> "LoadResult":
        return cls(LoadStatus.ABSENT)


@dataclass(frozen=True)
class RenderFrame:
    formatted_time: str  # MM:SS
    percent_complete: float  # 0..100
    phase_name: str
    progress_value: int  # rounded percent for progress widgets
