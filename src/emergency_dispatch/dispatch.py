from __future__ import annotations

import itertools
import logging
import threading
from typing import Dict, List, Optional

from emergency_dispatch.call_queue import CallQueue
from emergency_dispatch.graph import GraphStore
from emergency_dispatch.models import (
    LOCATION_NOT_FOUND,
    NO_PATH,
    UNITS_BUSY,
    Call,
    CallStatus,
    DispatchOutcome,
    Unit,
)
from emergency_dispatch.policy import DispatchPolicy, ReleasePolicy, SearchOrigin
from emergency_dispatch.routing import ShortestPaths, dijkstra
from emergency_dispatch.units import UnitRegistry

logger = logging.getLogger(__name__)


class DispatchAllocator:
    """Drains the call queue, matching each call to the nearest available unit.

    A call moves Pending -> Matching -> Assigned -> Completed, or ends
    Unserviceable when its location cannot be resolved or no unit of the
    required type can reach it. Unserviceable calls are reported and dropped.

    With ``SearchOrigin.INCIDENT`` one Dijkstra runs from the incident node and
    units are compared on ``dist[home]``; the reported route runs from the
    incident to the unit's home. With ``SearchOrigin.UNITS`` Dijkstra runs from
    every candidate home and the route runs from the unit to the incident.
    """

    def __init__(
        self,
        graph: GraphStore,
        policy: Optional[DispatchPolicy] = None,
        registry: Optional[UnitRegistry] = None,
    ) -> None:
        self.graph = graph
        self.policy = policy or DispatchPolicy()
        self.units = registry if registry is not None else UnitRegistry.from_graph(graph)
        self.queue = CallQueue(capacity=self.policy.queue_capacity)
        self._arrivals = itertools.count(1)
        self._call_ids = itertools.count(1)
        self._statuses: Dict[int, CallStatus] = {}
        # unit id -> call id for units held until completion
        self._assignments: Dict[int, int] = {}
        self._state_lock = threading.Lock()

    @property
    def pending(self) -> int:
        return len(self.queue)

    def required_unit_type(self, severity: int) -> str:
        return self.policy.required_unit_type(severity)

    def eta_minutes(self, distance: float) -> float:
        return self.policy.eta_minutes(distance)

    def status(self, call_id: int) -> CallStatus:
        with self._state_lock:
            try:
                return self._statuses[call_id]
            except KeyError:
                raise KeyError(f"unknown call {call_id}") from None

    def _set_status(self, call: Call, status: CallStatus) -> None:
        with self._state_lock:
            self._statuses[call.call_id] = status

    def submit(self, location: str, severity: int, call_id: Optional[int] = None) -> Call:
        self.required_unit_type(severity)
        call = Call(
            call_id=next(self._call_ids) if call_id is None else call_id,
            location=location.strip(),
            severity=severity,
            arrival=next(self._arrivals),
        )
        self.queue.insert(call)
        self._set_status(call, CallStatus.PENDING)
        logger.debug("queued call %s at %r (severity %d)", call.call_id, call.location, call.severity)
        return call

    def dispatch_next(self) -> Optional[DispatchOutcome]:
        call = self.queue.extract_max()
        if call is None:
            return None
        return self.allocate(call)

    def dispatch_all(self) -> List[DispatchOutcome]:
        outcomes = []
        while True:
            outcome = self.dispatch_next()
            if outcome is None:
                return outcomes
            outcomes.append(outcome)

    def complete(self, unit_id: int) -> Unit:
        """Release a unit; the call it was serving, if any, becomes completed."""
        self.units.release(unit_id)
        with self._state_lock:
            call_id = self._assignments.pop(unit_id, None)
            if call_id is not None:
                self._statuses[call_id] = CallStatus.COMPLETED
        logger.info("unit %s released", unit_id)
        return self.units.get(unit_id)

    def allocate(self, call: Call) -> DispatchOutcome:
        self._set_status(call, CallStatus.MATCHING)
        target = self.graph.find_by_name(call.location)
        if target is None:
            return self._unserviceable(call, LOCATION_NOT_FOUND)

        required = self.required_unit_type(call.severity)
        if self.policy.search_origin is SearchOrigin.INCIDENT:
            from_incident = dijkstra(self.graph, target)
            claim = self.units.claim_nearest(required, lambda unit: from_incident.dist[unit.home_node])
            if claim.claimed:
                route = from_incident.path_to(claim.unit.home_node)
        else:
            searches: Dict[int, ShortestPaths] = {}

            def distance_from_home(unit: Unit) -> float:
                if unit.home_node not in searches:
                    searches[unit.home_node] = dijkstra(self.graph, unit.home_node)
                return searches[unit.home_node].dist[target]

            claim = self.units.claim_nearest(required, distance_from_home)
            if claim.claimed:
                route = searches[claim.unit.home_node].path_to(target)

        if not claim.claimed:
            return self._unserviceable(call, UNITS_BUSY if claim.candidates == 0 else NO_PATH, target)

        unit, distance = claim.unit, claim.distance
        outcome = DispatchOutcome(
            call=call,
            status=CallStatus.ASSIGNED,
            unit=unit,
            target=target,
            distance=distance,
            eta_minutes=self.eta_minutes(distance),
            route=route,
            route_names=[self.graph.display_name(index) for index in route],
        )
        logger.info(
            "dispatched %s unit %s to %r: %.2f km, ETA %.1f min",
            unit.unit_type,
            unit.unit_id,
            self.graph.display_name(target),
            distance,
            outcome.eta_minutes,
        )

        if self.policy.release is ReleasePolicy.IMMEDIATE:
            self.units.release(unit.unit_id)
            outcome.status = CallStatus.COMPLETED
        else:
            with self._state_lock:
                self._assignments[unit.unit_id] = call.call_id
        self._set_status(call, outcome.status)
        return outcome

    def _unserviceable(self, call: Call, reason: str, target: Optional[int] = None) -> DispatchOutcome:
        logger.warning("call %s at %r unserviceable: %s", call.call_id, call.location, reason)
        self._set_status(call, CallStatus.UNSERVICEABLE)
        return DispatchOutcome(call=call, status=CallStatus.UNSERVICEABLE, target=target, reason=reason)
