from __future__ import annotations

import math
from typing import Optional

from emergency_dispatch.models import Coordinates, Node

FACILITY_TYPES = ("hospital", "fire", "police")

FACILITY_ALIASES = {
    "hospital": {"hospital", "any hospital", "from hospital"},
    "fire": {"fire", "firestation", "fire station", "any fire", "any fire station", "from fire"},
    "police": {"police", "police station", "any police", "from police"},
}


def normalize(text: Optional[str]) -> str:
    if text is None:
        return ""
    return text.strip().casefold()


def fuzzy_match(candidate: Optional[str], query: Optional[str]) -> bool:
    """True when ``query`` is a case-insensitive substring of ``candidate``."""
    needle = normalize(query)
    if candidate is None or not needle:
        return False
    return needle in normalize(candidate)


def matches_type_or_name(node: Node, request: Optional[str]) -> bool:
    return fuzzy_match(node.facility_type, request) or fuzzy_match(node.name, request)


def parse_facility_query(text: str) -> Optional[str]:
    """Resolve generic queries such as "any hospital" to a facility type.

    Returns None when the text names a specific place instead.
    """
    low = normalize(text)
    for facility, aliases in FACILITY_ALIASES.items():
        if low in aliases:
            return facility

    if low.startswith("any ") or low.startswith("from any "):
        for facility in FACILITY_TYPES:
            if facility in low:
                return facility
    return None


def haversine_km(origin: Coordinates, target: Coordinates) -> float:
    r = 6371.0
    lat1, lon1 = math.radians(origin.latitude), math.radians(origin.longitude)
    lat2, lon2 = math.radians(target.latitude), math.radians(target.longitude)
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return r * c
