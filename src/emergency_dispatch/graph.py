from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional

from emergency_dispatch.intelligence import fuzzy_match, haversine_km
from emergency_dispatch.models import Coordinates, Edge, Node

logger = logging.getLogger(__name__)


class GraphStore:
    """Road network of locations and facilities.

    Nodes get dense internal indices in creation order; callers address them
    by their external identifier through ``index_of``/``get_or_create``.
    Edges are directed. Weights are expected to be non-negative; negative
    weights are undefined input for the shortest-path engine and are not
    rejected here.
    """

    def __init__(self) -> None:
        self._nodes: List[Node] = []
        self._adjacency: List[List[Edge]] = []
        self._index_by_external: Dict[int, int] = {}
        self._edge_count = 0

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    @property
    def edge_count(self) -> int:
        return self._edge_count

    def add_node(
        self,
        external_id: int,
        latitude: float = 0.0,
        longitude: float = 0.0,
        name: Optional[str] = None,
        facility_type: Optional[str] = None,
    ) -> int:
        name = name.strip() if name and name.strip() else None
        facility_type = facility_type.strip() if facility_type and facility_type.strip() else None
        coordinates = Coordinates(float(latitude), float(longitude))

        index = self._index_by_external.get(external_id)
        if index is not None:
            node = self._nodes[index]
            node.coordinates = coordinates
            node.name = name
            node.facility_type = facility_type
            logger.debug("updated node %s (index %d)", external_id, index)
            return index

        index = len(self._nodes)
        self._nodes.append(Node(index, external_id, coordinates, name, facility_type))
        self._adjacency.append([])
        self._index_by_external[external_id] = index
        return index

    def get_or_create(self, external_id: int) -> int:
        index = self._index_by_external.get(external_id)
        if index is not None:
            return index
        return self.add_node(external_id)

    def index_of(self, external_id: int) -> Optional[int]:
        return self._index_by_external.get(external_id)

    def node(self, index: int) -> Node:
        self._check_index(index)
        return self._nodes[index]

    def display_name(self, index: int) -> str:
        return self.node(index).display_name

    def add_edge(self, source: int, target: int, weight: float) -> None:
        self._check_index(source)
        self._check_index(target)
        self._adjacency[source].append(Edge(source, target, float(weight)))
        self._edge_count += 1

    def add_road(self, a: int, b: int, weight: Optional[float] = None, directed: bool = False) -> float:
        """Connect two nodes; the weight defaults to their great-circle distance in km."""
        if weight is None:
            weight = haversine_km(self.node(a).coordinates, self.node(b).coordinates)
        self.add_edge(a, b, weight)
        if not directed:
            self.add_edge(b, a, weight)
        return weight

    def edges_from(self, index: int) -> List[Edge]:
        self._check_index(index)
        return self._adjacency[index]

    def find_by_name(self, query: str) -> Optional[int]:
        for node in self._nodes:
            if fuzzy_match(node.name, query):
                return node.index
        return None

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise IndexError(f"node index must be an int, got {index!r}")
        if not 0 <= index < len(self._nodes):
            raise IndexError(f"node index {index} out of range (0..{len(self._nodes) - 1})")
