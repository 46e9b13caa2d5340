"""Demonstration road network for Dehradun.

Road weights are great-circle distances in km between the two endpoints.
"""

from __future__ import annotations

from emergency_dispatch.graph import GraphStore

LOCATIONS = [
    ("Graphic Era University", 30.3196, 78.0413),
    ("Clement Town", 30.315, 78.035),
    ("ISBT", 30.317, 78.028),
    ("Clock Tower", 30.325, 78.040),
    ("Rajpur Road", 30.353, 78.075),
    ("Subhash Nagar", 30.317, 78.030),
]

STATIONS = [
    ("Shri Mahant Indiresh Hospital", 30.3047, 78.0207, "hospital"),
    ("Panacea Hospital Dehradun", 30.3175, 78.0260, "hospital"),
    ("Max Super Speciality Hospital", 30.3829, 78.0891, "hospital"),
    ("Synergy Hospital", 30.3375, 78.0136, "hospital"),
    ("Clement Town Police Station", 30.3156, 78.0361, "police"),
    ("ISBT Police Chowki", 30.2884, 77.9972, "police"),
    ("Ghanta Ghar Police Chowki", 30.3240, 78.0416, "police"),
    ("Rajpur Police Station", 30.3631, 78.0683, "police"),
    ("Dehradun Fire Station", 30.3165, 78.0322, "fire"),
    ("Rajpur Road Fire Station", 30.3371, 78.0528, "fire"),
]

ROADS = [
    ("Graphic Era University", "Clement Town"),
    ("Clement Town", "ISBT"),
    ("ISBT", "Clock Tower"),
    ("Clock Tower", "Graphic Era University"),
    ("Clock Tower", "Rajpur Road"),
    ("ISBT", "Subhash Nagar"),
    ("Subhash Nagar", "Graphic Era University"),
    ("Shri Mahant Indiresh Hospital", "ISBT"),
    ("Shri Mahant Indiresh Hospital", "Subhash Nagar"),
    ("Panacea Hospital Dehradun", "ISBT"),
    ("Synergy Hospital", "Clock Tower"),
    ("Max Super Speciality Hospital", "Rajpur Road"),
    ("Clement Town Police Station", "Clement Town"),
    ("ISBT Police Chowki", "ISBT"),
    ("Ghanta Ghar Police Chowki", "Clock Tower"),
    ("Rajpur Police Station", "Rajpur Road"),
    ("Dehradun Fire Station", "Clement Town"),
    ("Dehradun Fire Station", "Clock Tower"),
    ("Dehradun Fire Station", "Rajpur Road"),
    ("Rajpur Road Fire Station", "Rajpur Road"),
]


def build_sample_graph() -> GraphStore:
    graph = GraphStore()
    index = {}
    external_id = 1
    for name, lat, lon in LOCATIONS:
        index[name] = graph.add_node(external_id, lat, lon, name=name)
        external_id += 1
    for name, lat, lon, facility_type in STATIONS:
        index[name] = graph.add_node(external_id, lat, lon, name=name, facility_type=facility_type)
        external_id += 1

    for a, b in ROADS:
        graph.add_road(index[a], index[b])
    return graph
