"""Single-source shortest paths over a :class:`GraphStore`.

Classic Dijkstra with a binary heap and lazy deletion: improved distances are
pushed again and stale heap entries are skipped when popped. Edge weights must
be non-negative; results for graphs with negative weights are undefined.
"""

from __future__ import annotations

import heapq
import math
from typing import List, NamedTuple, Optional, Sequence

from emergency_dispatch.graph import GraphStore

INF = math.inf


class ShortestPaths(NamedTuple):
    dist: List[float]
    parent: List[Optional[int]]

    def reachable(self, target: int) -> bool:
        return self.dist[target] != INF

    def path_to(self, target: int) -> Optional[List[int]]:
        if not self.reachable(target):
            return None
        return reconstruct_path(self.parent, target)


def dijkstra(graph: GraphStore, source: int) -> ShortestPaths:
    graph.node(source)
    n = len(graph)
    dist = [INF] * n
    parent: List[Optional[int]] = [None] * n
    dist[source] = 0.0

    heap = [(0.0, source)]
    while heap:
        d, u = heapq.heappop(heap)
        if d > dist[u]:
            continue
        for edge in graph.edges_from(u):
            nd = d + edge.weight
            if nd < dist[edge.target]:
                dist[edge.target] = nd
                parent[edge.target] = u
                heapq.heappush(heap, (nd, edge.target))

    return ShortestPaths(dist, parent)


def reconstruct_path(parent: Sequence[Optional[int]], target: int) -> List[int]:
    """Walk predecessors back from ``target`` and return the path source-first.

    Callers check reachability first; an unreachable target comes back as a
    single-node path.
    """
    path = []
    current: Optional[int] = target
    while current is not None:
        path.append(current)
        current = parent[current]
    path.reverse()
    return path


def path_weight(graph: GraphStore, path: Sequence[int]) -> float:
    total = 0.0
    for u, v in zip(path, path[1:]):
        weights = [edge.weight for edge in graph.edges_from(u) if edge.target == v]
        if not weights:
            raise ValueError(f"no edge from {u} to {v}")
        total += min(weights)
    return total
