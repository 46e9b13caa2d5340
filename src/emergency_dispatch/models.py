from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

LOCATION_NOT_FOUND = "location not found"
NO_PATH = "no path"
UNITS_BUSY = "units busy"


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass
class Node:
    index: int
    external_id: int
    coordinates: Coordinates = Coordinates(0.0, 0.0)
    name: Optional[str] = None
    facility_type: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name if self.name else str(self.external_id)


@dataclass(frozen=True)
class Edge:
    source: int
    target: int
    weight: float


@dataclass(frozen=True)
class Call:
    call_id: int
    location: str
    severity: int
    arrival: int


@dataclass
class Unit:
    unit_id: int
    home_node: int
    unit_type: str
    available: bool = True


class CallStatus(str, Enum):
    PENDING = "pending"
    MATCHING = "matching"
    ASSIGNED = "assigned"
    COMPLETED = "completed"
    UNSERVICEABLE = "unserviceable"


@dataclass
class DispatchOutcome:
    call: Call
    status: CallStatus
    unit: Optional[Unit] = None
    target: Optional[int] = None
    distance: Optional[float] = None
    eta_minutes: Optional[float] = None
    route: List[int] = field(default_factory=list)
    route_names: List[str] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (CallStatus.ASSIGNED, CallStatus.COMPLETED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "call": {
                "call_id": self.call.call_id,
                "location": self.call.location,
                "severity": self.call.severity,
                "arrival": self.call.arrival,
            },
            "status": self.status.value,
            "unit": None
            if self.unit is None
            else {"unit_id": self.unit.unit_id, "unit_type": self.unit.unit_type, "home_node": self.unit.home_node},
            "target": self.target,
            "distance": None if self.distance is None else round(self.distance, 3),
            "eta_minutes": None if self.eta_minutes is None else round(self.eta_minutes, 1),
            "route": self.route_names,
            "reason": self.reason,
        }


@dataclass
class RouteResult:
    source: Optional[int] = None
    destination: Optional[int] = None
    distance: Optional[float] = None
    eta_minutes: Optional[float] = None
    route: List[int] = field(default_factory=list)
    route_names: List[str] = field(default_factory=list)
    reason: Optional[str] = None
    maps_url: Optional[str] = None

    @property
    def reachable(self) -> bool:
        return self.reason is None and self.distance is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reachable": self.reachable,
            "source": self.source,
            "destination": self.destination,
            "distance": None if self.distance is None else round(self.distance, 3),
            "eta_minutes": None if self.eta_minutes is None else round(self.eta_minutes, 1),
            "route": self.route_names,
            "reason": self.reason,
            "maps_url": self.maps_url,
        }
