from __future__ import annotations

from typing import List, Optional
from urllib.parse import urlencode

from emergency_dispatch.dispatch import DispatchAllocator
from emergency_dispatch.graph import GraphStore
from emergency_dispatch.intelligence import FACILITY_TYPES, matches_type_or_name, parse_facility_query
from emergency_dispatch.loader import PathLike, load_edges, load_nodes
from emergency_dispatch.locator import nearest_facility
from emergency_dispatch.models import (
    LOCATION_NOT_FOUND,
    NO_PATH,
    UNITS_BUSY,
    Call,
    CallStatus,
    DispatchOutcome,
    RouteResult,
)
from emergency_dispatch.policy import DispatchPolicy
from emergency_dispatch.routing import dijkstra
from emergency_dispatch.units import UnitRegistry

MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir/"


class DispatchSystem:
    """Single entry point for front ends: call intake, dispatch and route queries."""

    def __init__(self, graph: GraphStore, policy: Optional[DispatchPolicy] = None) -> None:
        self.graph = graph
        self.allocator = DispatchAllocator(graph, policy)

    @classmethod
    def from_csv(
        cls,
        nodes_path: PathLike,
        edges_path: PathLike,
        policy: Optional[DispatchPolicy] = None,
        weight: str = "distance",
    ) -> "DispatchSystem":
        graph = GraphStore()
        load_nodes(graph, nodes_path)
        load_edges(graph, edges_path, weight=weight)
        return cls(graph, policy)

    @property
    def policy(self) -> DispatchPolicy:
        return self.allocator.policy

    @property
    def units(self) -> UnitRegistry:
        return self.allocator.units

    def report(self, location: str, severity: int) -> Call:
        return self.allocator.submit(location, severity)

    def run(self) -> List[DispatchOutcome]:
        return self.allocator.dispatch_all()

    def route(self, source_query: str, destination_query: str, facilities_only: bool = False) -> RouteResult:
        """Shortest route between two places; either side may be a generic query like "any hospital".

        With ``facilities_only`` a named destination must be a hospital, fire
        or police facility.
        """
        source_type = parse_facility_query(source_query)
        destination_type = parse_facility_query(destination_query)

        source = destination = None
        if source_type is None:
            source = self.graph.find_by_name(source_query)
            if source is None:
                return RouteResult(reason=f"source '{source_query.strip()}' not found")
        if destination_type is None:
            destination = self.graph.find_by_name(destination_query)
            if destination is None:
                return RouteResult(reason=f"destination '{destination_query.strip()}' not found")
            if facilities_only and not any(
                matches_type_or_name(self.graph.node(destination), facility) for facility in FACILITY_TYPES
            ):
                return RouteResult(
                    destination=destination,
                    reason=f"destination '{self.graph.display_name(destination)}' is not a hospital/fire/police facility",
                )

        if destination_type is not None:
            if source is not None:
                destination, _ = nearest_facility(self.graph, source, destination_type)
            else:
                destination = next(
                    (node.index for node in self.graph if matches_type_or_name(node, destination_type)), None
                )
            if destination is None:
                return RouteResult(source=source, reason=f"no facility of type '{destination_type}' found")

        if source_type is not None:
            source, _ = nearest_facility(self.graph, destination, source_type)
            if source is None:
                return RouteResult(destination=destination, reason=f"no facility of type '{source_type}' found")

        paths = dijkstra(self.graph, source)
        if not paths.reachable(destination):
            return RouteResult(source=source, destination=destination, reason=NO_PATH)

        route = paths.path_to(destination)
        distance = paths.dist[destination]
        return RouteResult(
            source=source,
            destination=destination,
            distance=distance,
            eta_minutes=self.policy.eta_minutes(distance),
            route=route,
            route_names=[self.graph.display_name(index) for index in route],
            maps_url=self.maps_url(source, destination),
        )

    def maps_url(self, source: int, destination: int) -> str:
        query = urlencode(
            {
                "api": 1,
                "origin": self.graph.display_name(source),
                "destination": self.graph.display_name(destination),
            }
        )
        return f"{MAPS_DIRECTIONS_URL}?{query}"

    def format_outcome(self, outcome: DispatchOutcome) -> List[str]:
        call = outcome.call
        if outcome.reason == LOCATION_NOT_FOUND:
            return [f"Location '{call.location}' not found. Skipping."]

        required = self.allocator.required_unit_type(call.severity)
        if outcome.reason == UNITS_BUSY:
            return [f"All {required} units busy. Skipping '{call.location}'."]
        if outcome.reason == NO_PATH:
            return [f"No path from any available {required} unit to '{call.location}'. Skipping."]

        unit = outcome.unit
        lines = [
            f"Dispatching {unit.unit_type} unit {unit.unit_id} to '{self.graph.display_name(outcome.target)}'",
            f" Distance: {outcome.distance:.2f} km | ETA: {outcome.eta_minutes:.1f} min",
            f" Route: {' -> '.join(outcome.route_names)}",
        ]
        if outcome.status is CallStatus.COMPLETED:
            lines.append(f" Unit {unit.unit_id} now available.")
        return lines

    def format_route(self, result: RouteResult) -> List[str]:
        if result.reason == NO_PATH:
            return [
                f"No path found from '{self.graph.display_name(result.source)}' "
                f"to '{self.graph.display_name(result.destination)}'"
            ]
        if not result.reachable:
            return [result.reason[0].upper() + result.reason[1:]]
        return [
            f"Shortest distance = {result.distance:.2f} km (ETA {result.eta_minutes:.1f} min)",
            f"Route: {' -> '.join(result.route_names)}",
        ]
