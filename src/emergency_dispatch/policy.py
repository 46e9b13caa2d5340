from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

# Facility tag on a node -> type of unit stationed there.
UNIT_TYPE_BY_FACILITY = {
    "hospital": "ambulance",
    "fire": "fire",
    "police": "police",
}

UNIT_ID_BASE = {
    "ambulance": 1000,
    "fire": 2000,
    "police": 3000,
}

DEFAULT_UNIT_TYPES = {
    5: "ambulance",
    4: "ambulance",
    3: "police",
    2: "fire",
    1: "fire",
}


class ReleasePolicy(str, Enum):
    """When an assigned unit becomes available again."""

    IMMEDIATE = "immediate"
    ON_COMPLETION = "on_completion"


class SearchOrigin(str, Enum):
    """Where shortest-path searches start for a dispatch decision."""

    INCIDENT = "incident"
    UNITS = "units"


@dataclass(frozen=True)
class DispatchPolicy:
    unit_types: Dict[int, str] = field(default_factory=lambda: dict(DEFAULT_UNIT_TYPES))
    average_speed_kmh: float = 40.0
    release: ReleasePolicy = ReleasePolicy.IMMEDIATE
    search_origin: SearchOrigin = SearchOrigin.INCIDENT
    queue_capacity: Optional[int] = None

    def __post_init__(self) -> None:
        if self.average_speed_kmh <= 0:
            raise ValueError("average_speed_kmh must be positive")
        if self.queue_capacity is not None and self.queue_capacity <= 0:
            raise ValueError("queue_capacity must be positive or None")

    def required_unit_type(self, severity: int) -> str:
        try:
            return self.unit_types[severity]
        except KeyError:
            raise ValueError(f"severity must be one of {sorted(self.unit_types)}, got {severity!r}") from None

    def eta_minutes(self, distance: float) -> float:
        return (distance / self.average_speed_kmh) * 60
