import random

import pytest

from emergency_dispatch.graph import GraphStore
from emergency_dispatch.routing import INF, dijkstra, path_weight, reconstruct_path


def _random_graph(rng: random.Random, size: int, edges: int) -> GraphStore:
    graph = GraphStore()
    for ext in range(size):
        graph.add_node(ext)
    for _ in range(edges):
        u, v = rng.randrange(size), rng.randrange(size)
        graph.add_edge(u, v, rng.choice([0, 1, 2, 3, 5, 8, 13]) + rng.random())
    return graph


def _brute_force_distances(graph: GraphStore, source: int) -> list:
    """Minimum weight over every simple path, by exhaustive enumeration."""
    best = [INF] * len(graph)
    best[source] = 0.0

    def walk(node: int, cost: float, seen: frozenset) -> None:
        for edge in graph.edges_from(node):
            if edge.target in seen:
                continue
            total = cost + edge.weight
            if total < best[edge.target]:
                best[edge.target] = total
            walk(edge.target, total, seen | {edge.target})

    walk(source, 0.0, frozenset([source]))
    return best


@pytest.mark.parametrize("seed", range(12))
def test_dijkstra_matches_brute_force(seed: int) -> None:
    rng = random.Random(seed)
    graph = _random_graph(rng, size=6, edges=rng.randrange(0, 14))

    for source in range(len(graph)):
        dist, _ = dijkstra(graph, source)
        expected = _brute_force_distances(graph, source)
        for got, want in zip(dist, expected):
            assert got == pytest.approx(want)


@pytest.mark.parametrize("seed", range(12))
def test_reconstructed_paths_sum_to_distance(seed: int) -> None:
    rng = random.Random(1000 + seed)
    graph = _random_graph(rng, size=7, edges=16)

    paths = dijkstra(graph, 0)
    for target in range(len(graph)):
        if not paths.reachable(target):
            assert paths.path_to(target) is None
            assert paths.parent[target] is None
            continue
        path = paths.path_to(target)
        assert path[0] == 0
        assert path[-1] == target
        assert path_weight(graph, path) == pytest.approx(paths.dist[target])


def test_unreachable_nodes_keep_sentinel_distance() -> None:
    graph = GraphStore()
    a, b, c = (graph.add_node(ext) for ext in (1, 2, 3))
    graph.add_edge(a, b, 1.0)
    graph.add_edge(c, a, 1.0)

    dist, parent = dijkstra(graph, a)

    assert dist == [0.0, 1.0, INF]
    assert parent == [None, a, None]


def test_source_path_is_single_node() -> None:
    graph = GraphStore()
    graph.add_node(1)

    paths = dijkstra(graph, 0)

    assert paths.path_to(0) == [0]
    assert reconstruct_path(paths.parent, 0) == [0]


def test_dijkstra_prefers_cheaper_longer_route() -> None:
    graph = GraphStore()
    for ext in range(4):
        graph.add_node(ext)
    graph.add_road(0, 3, 10.0)
    graph.add_road(0, 1, 1.0)
    graph.add_road(1, 2, 1.0)
    graph.add_road(2, 3, 1.0)

    paths = dijkstra(graph, 0)

    assert paths.dist[3] == 3.0
    assert paths.path_to(3) == [0, 1, 2, 3]


def test_zero_weight_edges_are_supported() -> None:
    graph = GraphStore()
    for ext in range(3):
        graph.add_node(ext)
    graph.add_edge(0, 1, 0.0)
    graph.add_edge(1, 2, 0.0)

    assert dijkstra(graph, 0).dist == [0.0, 0.0, 0.0]


def test_dijkstra_rejects_invalid_source() -> None:
    graph = GraphStore()
    graph.add_node(1)

    with pytest.raises(IndexError):
        dijkstra(graph, 5)


def test_path_weight_rejects_missing_edges() -> None:
    graph = GraphStore()
    graph.add_node(1)
    graph.add_node(2)

    with pytest.raises(ValueError):
        path_weight(graph, [0, 1])
