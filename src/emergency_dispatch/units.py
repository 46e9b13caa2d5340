from __future__ import annotations

import threading
from typing import Callable, Dict, Iterable, Iterator, List, NamedTuple, Optional

from emergency_dispatch.graph import GraphStore
from emergency_dispatch.intelligence import matches_type_or_name, normalize
from emergency_dispatch.models import Unit
from emergency_dispatch.policy import UNIT_ID_BASE, UNIT_TYPE_BY_FACILITY
from emergency_dispatch.routing import INF


class Claim(NamedTuple):
    """Result of :meth:`UnitRegistry.claim_nearest`.

    ``candidates`` counts the available units of the type seen under the lock,
    so a failed claim tells "all busy" (0) apart from "none reachable".
    """

    unit: Optional[Unit]
    distance: float
    candidates: int

    @property
    def claimed(self) -> bool:
        return self.unit is not None


class UnitRegistry:
    """Response units and their availability.

    Every availability change goes through the registry lock, so a
    select-and-mark decision is atomic with respect to other dispatchers.
    """

    def __init__(self, units: Iterable[Unit] = ()) -> None:
        self._units: List[Unit] = []
        self._by_id: Dict[int, Unit] = {}
        self._lock = threading.Lock()
        for unit in units:
            self.add(unit)

    @classmethod
    def from_graph(cls, graph: GraphStore) -> "UnitRegistry":
        registry = cls()
        for node in graph:
            for facility, unit_type in UNIT_TYPE_BY_FACILITY.items():
                if matches_type_or_name(node, facility):
                    registry.add(Unit(UNIT_ID_BASE[unit_type] + node.index, node.index, unit_type))
        return registry

    def add(self, unit: Unit) -> None:
        if unit.unit_id in self._by_id:
            raise ValueError(f"duplicate unit id {unit.unit_id}")
        self._units.append(unit)
        self._by_id[unit.unit_id] = unit

    def __iter__(self) -> Iterator[Unit]:
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def get(self, unit_id: int) -> Unit:
        try:
            return self._by_id[unit_id]
        except KeyError:
            raise KeyError(f"unknown unit {unit_id}") from None

    def of_type(self, unit_type: str, available_only: bool = True) -> List[Unit]:
        wanted = normalize(unit_type)
        return [
            unit
            for unit in self._units
            if normalize(unit.unit_type) == wanted and (unit.available or not available_only)
        ]

    def claim(self, unit_id: int) -> bool:
        unit = self.get(unit_id)
        with self._lock:
            if not unit.available:
                return False
            unit.available = False
            return True

    def release(self, unit_id: int) -> None:
        unit = self.get(unit_id)
        with self._lock:
            unit.available = True

    def claim_nearest(self, unit_type: str, distance_of: Callable[[Unit], float]) -> Claim:
        """Mark the closest available unit of ``unit_type`` busy.

        Units at an infinite distance are never chosen. The returned claim has
        no unit when every unit of the type is busy or none can reach.
        """
        with self._lock:
            candidates = self.of_type(unit_type)
            best: Optional[Unit] = None
            best_distance = INF
            for unit in candidates:
                distance = distance_of(unit)
                if distance < best_distance:
                    best, best_distance = unit, distance
            if best is not None:
                best.available = False
            return Claim(best, best_distance, len(candidates))
