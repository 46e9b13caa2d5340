from typing import Iterator, Optional

import pytest
from fastapi.testclient import TestClient

from app.main import app, get_system
from emergency_dispatch.graph import GraphStore
from emergency_dispatch.policy import DispatchPolicy, ReleasePolicy
from emergency_dispatch.system import DispatchSystem


def _small_system(policy: Optional[DispatchPolicy] = None) -> DispatchSystem:
    graph = GraphStore()
    a = graph.add_node(1, name='A')
    b = graph.add_node(2, name='B')
    hospital = graph.add_node(3, name='Hospital', facility_type='hospital')
    station = graph.add_node(4, name='Fire Station', facility_type='fire')
    graph.add_road(a, b, 1.0)
    graph.add_road(b, hospital, 1.0)
    graph.add_road(b, station, 2.0)
    return DispatchSystem(graph, policy)


@pytest.fixture
def client() -> Iterator[TestClient]:
    system = _small_system(DispatchPolicy(release=ReleasePolicy.ON_COMPLETION))
    app.dependency_overrides[get_system] = lambda: system
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_and_summary(client: TestClient) -> None:
    assert client.get('/health').json() == {'status': 'ok'}

    summary = client.get('/graph/summary').json()
    assert summary == {'nodes': 4, 'edges': 6, 'units': 2, 'pending_calls': 0}


def test_submit_and_dispatch_call(client: TestClient) -> None:
    created = client.post('/calls', json={'location': 'A', 'severity': 5})
    assert created.status_code == 200
    assert created.json()['call']['call_id'] == 1
    assert created.json()['pending'] == 1

    pending = client.get('/calls').json()
    assert pending['pending'] == 1
    assert pending['next']['location'] == 'A'

    resp = client.post('/dispatch/next')
    assert resp.status_code == 200
    body = resp.json()
    assert body['status'] == 'assigned'
    assert body['unit']['unit_id'] == 1002
    assert body['distance'] == 2.0
    assert body['eta_minutes'] == 3.0
    assert body['route'] == ['A', 'B', 'Hospital']
    assert body['report'][0] == "Dispatching ambulance unit 1002 to 'A'"

    held = client.get('/units', params={'available': False}).json()
    assert [u['unit_id'] for u in held] == [1002]

    released = client.post('/units/1002/release')
    assert released.status_code == 200
    assert released.json()['available'] is True


def test_invalid_calls_are_rejected(client: TestClient) -> None:
    assert client.post('/calls', json={'location': 'A', 'severity': 9}).status_code == 422
    assert client.post('/calls', json={'location': '', 'severity': 3}).status_code == 422
    assert client.get('/calls').json() == {'pending': 0, 'next': None}


def test_dispatch_next_with_empty_queue(client: TestClient) -> None:
    resp = client.post('/dispatch/next')

    assert resp.status_code == 404
    assert resp.json()['detail'] == 'No pending calls'


def test_dispatch_all_reports_each_outcome(client: TestClient) -> None:
    client.post('/calls', json={'location': 'B', 'severity': 1})
    client.post('/calls', json={'location': 'Nowhere', 'severity': 4})

    body = client.post('/dispatch').json()

    assert body['processed'] == 2
    unknown, fire = body['outcomes']
    assert unknown['status'] == 'unserviceable'
    assert unknown['report'] == ["Location 'Nowhere' not found. Skipping."]
    assert fire['unit']['unit_id'] == 2003
    assert fire['route'] == ['B', 'Fire Station']


def test_units_filter_and_unknown_release(client: TestClient) -> None:
    fire = client.get('/units', params={'unit_type': 'fire'}).json()
    assert fire == [{'unit_id': 2003, 'unit_type': 'fire', 'home_node': 3, 'home': 'Fire Station', 'available': True}]

    assert client.post('/units/999/release').status_code == 404


def test_route_queries(client: TestClient) -> None:
    resp = client.get('/route', params={'source': 'A', 'destination': 'any hospital'})
    assert resp.status_code == 200
    body = resp.json()
    assert body['reachable'] is True
    assert body['route'] == ['A', 'B', 'Hospital']
    assert body['maps_url'].startswith('https://www.google.com/maps/dir/?api=1&origin=A')

    missing = client.get('/route', params={'source': 'Atlantis', 'destination': 'B'})
    assert missing.status_code == 404
    assert missing.json()['detail'] == "source 'Atlantis' not found"


def test_full_queue_returns_503() -> None:
    system = _small_system(DispatchPolicy(queue_capacity=1))
    app.dependency_overrides[get_system] = lambda: system
    try:
        client = TestClient(app)
        assert client.post('/calls', json={'location': 'A', 'severity': 2}).status_code == 200
        assert client.post('/calls', json={'location': 'B', 'severity': 2}).status_code == 503
    finally:
        app.dependency_overrides.clear()


def test_route_facilities_only(client: TestClient) -> None:
    body = client.get('/route', params={'source': 'A', 'destination': 'B', 'facilities_only': True}).json()
    assert body['reachable'] is False
    assert body['reason'] == "destination 'B' is not a hospital/fire/police facility"

    body = client.get('/route', params={'source': 'A', 'destination': 'station', 'facilities_only': True}).json()
    assert body['route'] == ['A', 'B', 'Fire Station']
