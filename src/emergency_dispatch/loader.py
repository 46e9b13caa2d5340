"""CSV loaders for the road network.

``nodes.csv``: ``id,lat,lon,name,type``
``edges.csv``: ``edge_id,from,to,distance_m,travel_time,one_way``

A header row is optional. Rows that cannot be parsed are skipped without
aborting the load. Node ids and edge endpoints must be plain integers
(``12``, not ``12.0``); any other id skips the row.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from emergency_dispatch.graph import GraphStore

logger = logging.getLogger(__name__)

NODE_COLUMNS = ["id", "lat", "lon", "name", "type"]
EDGE_COLUMNS = ["edge_id", "from", "to", "distance_m", "travel_time", "one_way"]
EDGE_WEIGHTS = ("distance", "travel_time")
TRUTHY = {"1", "true", "yes", "y"}

PathLike = Union[str, Path]


def _read(path: PathLike, columns: list[str]) -> pd.DataFrame:
    try:
        return pd.read_csv(
            path,
            header=None,
            names=columns,
            index_col=False,
            dtype=str,
            encoding="utf-8-sig",
            skipinitialspace=True,
            skip_blank_lines=True,
            on_bad_lines="skip",
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=columns)


def _parse_int(value) -> Optional[int]:
    if not isinstance(value, str):
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _parse_float(value) -> Optional[float]:
    if not isinstance(value, str):
        return None
    try:
        number = float(value.strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _text(value) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def load_nodes(graph: GraphStore, path: PathLike) -> int:
    records = _read(path, NODE_COLUMNS).to_dict("records")

    loaded = 0
    for record in records:
        external_id = _parse_int(record["id"])
        if external_id is None:
            continue
        graph.add_node(
            external_id,
            _parse_float(record["lat"]) or 0.0,
            _parse_float(record["lon"]) or 0.0,
            name=_text(record["name"]),
            facility_type=_text(record["type"]),
        )
        loaded += 1

    logger.info("loaded %d node records from %s (%d skipped)", loaded, path, len(records) - loaded)
    return loaded


def load_edges(graph: GraphStore, path: PathLike, weight: str = "distance") -> int:
    """Add roads from ``path``; ``weight`` picks km (``distance``) or seconds (``travel_time``)."""
    if weight not in EDGE_WEIGHTS:
        raise ValueError(f"weight must be one of {EDGE_WEIGHTS}, got {weight!r}")

    records = _read(path, EDGE_COLUMNS).to_dict("records")

    loaded = 0
    for record in records:
        source, target = _parse_int(record["from"]), _parse_int(record["to"])
        if source is None or target is None:
            continue
        if weight == "distance":
            meters = _parse_float(record["distance_m"])
            cost = meters / 1000.0 if meters is not None and meters > 0 else 1.0
        else:
            cost = _parse_float(record["travel_time"]) or 0.0
        one_way = str(record["one_way"]).strip().lower() in TRUTHY
        graph.add_road(graph.get_or_create(source), graph.get_or_create(target), cost, directed=one_way)
        loaded += 1

    logger.info("loaded %d edge records from %s (%d skipped)", loaded, path, len(records) - loaded)
    return loaded
