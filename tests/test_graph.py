import pytest

from emergency_dispatch.graph import GraphStore
from emergency_dispatch.intelligence import haversine_km
from emergency_dispatch.models import Coordinates


def test_add_node_is_an_upsert_by_external_id() -> None:
    graph = GraphStore()
    first = graph.add_node(42, 1.0, 2.0, name="Old Name", facility_type="police")
    other = graph.add_node(7, 0.0, 0.0, name="Other")

    again = graph.add_node(42, 3.0, 4.0, name="New Name", facility_type="hospital")

    assert again == first
    assert len(graph) == 2
    node = graph.node(first)
    assert node.name == "New Name"
    assert node.facility_type == "hospital"
    assert node.coordinates == Coordinates(3.0, 4.0)
    assert graph.index_of(7) == other


def test_blank_name_and_type_are_stored_as_none() -> None:
    graph = GraphStore()
    index = graph.add_node(5, 0.0, 0.0, name="  ", facility_type="")

    assert graph.node(index).name is None
    assert graph.node(index).facility_type is None
    assert graph.display_name(index) == "5"


def test_get_or_create_reuses_known_ids_and_creates_bare_nodes() -> None:
    graph = GraphStore()
    known = graph.add_node(10, 5.0, 5.0, name="Known")

    assert graph.get_or_create(10) == known
    created = graph.get_or_create(11)
    assert created == 1
    node = graph.node(created)
    assert node.name is None and node.facility_type is None
    assert node.coordinates == Coordinates(0.0, 0.0)


def test_indices_are_dense_and_stable() -> None:
    graph = GraphStore()
    indices = [graph.add_node(ext) for ext in (100, 200, 300)]
    graph.add_node(200, name="renamed")

    assert indices == [0, 1, 2]
    assert [graph.index_of(ext) for ext in (100, 200, 300)] == [0, 1, 2]


def test_add_edge_is_directed() -> None:
    graph = GraphStore()
    a, b = graph.add_node(1), graph.add_node(2)
    graph.add_edge(a, b, 2.5)

    assert [(e.target, e.weight) for e in graph.edges_from(a)] == [(b, 2.5)]
    assert graph.edges_from(b) == []
    assert graph.edge_count == 1


@pytest.mark.parametrize("bad_index", [-1, 2, 99, None, "0"])
def test_add_edge_rejects_invalid_indices(bad_index) -> None:
    graph = GraphStore()
    graph.add_node(1)
    graph.add_node(2)

    with pytest.raises(IndexError):
        graph.add_edge(0, bad_index, 1.0)
    with pytest.raises(IndexError):
        graph.add_edge(bad_index, 0, 1.0)


def test_add_road_inserts_both_directions_and_derives_weight() -> None:
    graph = GraphStore()
    a = graph.add_node(1, 30.3196, 78.0413)
    b = graph.add_node(2, 30.315, 78.035)

    weight = graph.add_road(a, b)

    expected = haversine_km(Coordinates(30.3196, 78.0413), Coordinates(30.315, 78.035))
    assert weight == pytest.approx(expected)
    assert graph.edges_from(a)[0].target == b
    assert graph.edges_from(b)[0].target == a
    assert graph.edge_count == 2


def test_add_road_directed_inserts_one_edge() -> None:
    graph = GraphStore()
    a, b = graph.add_node(1), graph.add_node(2)
    graph.add_road(a, b, 4.0, directed=True)

    assert graph.edge_count == 1
    assert graph.edges_from(b) == []


def test_find_by_name_is_case_insensitive_substring_in_index_order() -> None:
    graph = GraphStore()
    graph.add_node(1, name="Clock Tower")
    graph.add_node(2, name="Tower Hospital", facility_type="hospital")
    graph.add_node(3)

    assert graph.find_by_name("clock") == 0
    assert graph.find_by_name("TOWER") == 0
    assert graph.find_by_name("hospital") == 1
    assert graph.find_by_name("stadium") is None
    assert graph.find_by_name("") is None
