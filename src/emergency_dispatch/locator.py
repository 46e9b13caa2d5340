from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple

from emergency_dispatch.graph import GraphStore
from emergency_dispatch.intelligence import matches_type_or_name
from emergency_dispatch.models import Node
from emergency_dispatch.routing import INF, ShortestPaths, dijkstra

NodePredicate = Callable[[Node], bool]


def facility_predicate(request: str) -> NodePredicate:
    return lambda node: matches_type_or_name(node, request)


def nearest_matching(graph: GraphStore, dist: Sequence[float], predicate: NodePredicate) -> Optional[int]:
    """Index of the closest reachable node satisfying ``predicate``.

    Ties go to the lowest index.
    """
    best = INF
    best_index = None
    for node in graph:
        if dist[node.index] < best and predicate(node):
            best = dist[node.index]
            best_index = node.index
    return best_index


def nearest_facility(graph: GraphStore, origin: int, request: str) -> Tuple[Optional[int], ShortestPaths]:
    paths = dijkstra(graph, origin)
    return nearest_matching(graph, paths.dist, facility_predicate(request)), paths
