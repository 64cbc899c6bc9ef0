# -*- coding: utf-8 -*-

import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from domain.models import PHASES, Phase, clamp_index

MIN_MINUTES = 1
MAX_MINUTES = 999

# leading integer, the way a number field is read ("12abc" -> 12, "2.5" -> 2)
_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_minutes(raw: Any) -> Optional[int]:
    if raw is None:
        return None
    m = _INT_PREFIX_RE.match(str(raw))
    return int(m.group(1)) if m else None


class MemoryInput:
    """
    Plain minutes field. Same get/set surface as tk.StringVar,
    so the UI can hand its variables straight to DurationSource.
    """

    def __init__(self, value: Any = "", min_value: int = MIN_MINUTES, max_value: int = MAX_MINUTES):
        self._value = "" if value is None else str(value)
        self.min_value = min_value
        self.max_value = max_value

    def get(self) -> str:
        return self._value

    def set(self, value: Any) -> None:
        self._value = "" if value is None else str(value)


class DurationSource:
    """
    Resolves configured minutes per phase from user-editable inputs.
    Out-of-range or non-numeric input is normalised in place, never rejected.
    """

    def __init__(self, inputs: Sequence[Any], phases: Sequence[Phase] = PHASES):
        if len(inputs) != len(phases):
            raise ValueError(f"Expected {len(phases)} duration inputs, got {len(inputs)}.")
        self.inputs = list(inputs)
        self.phases = tuple(phases)

    @classmethod
    def with_defaults(cls, phases: Sequence[Phase] = PHASES) -> "DurationSource":
        return cls([MemoryInput(p.default_minutes) for p in phases], phases)

    def _bounds(self, field) -> tuple:
        lo = getattr(field, "min_value", None) or MIN_MINUTES
        hi = getattr(field, "max_value", None) or MAX_MINUTES
        return int(lo), int(hi)

    def minutes_for(self, index: int) -> int:
        index = clamp_index(index, len(self.phases))
        field = self.inputs[index]
        lo, hi = self._bounds(field)

        raw = field.get()
        value = parse_minutes(raw)
        if value is None:
            value = self.phases[index].default_minutes
        value = min(hi, max(lo, value))

        if str(value) != str(raw):
            field.set(str(value))
        return value

    def durations_sec(self) -> List[float]:
        return [self.minutes_for(i) * 60.0 for i in range(len(self.phases))]

    def as_snapshot(self) -> Dict[str, int]:
        return {p.key: self.minutes_for(p.index) for p in self.phases}

    def restore(self, durations_minutes: Mapping[str, Any]) -> None:
        # falsy values (missing, 0, "") keep whatever the input already holds
        for p in self.phases:
            value = durations_minutes.get(p.key)
            if value:
                self.inputs[p.index].set(str(value))
