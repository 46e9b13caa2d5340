from __future__ import annotations

import logging
import threading
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from emergency_dispatch.call_queue import QueueFullError
from emergency_dispatch.models import Call, Unit
from emergency_dispatch.policy import DispatchPolicy, ReleasePolicy, SearchOrigin
from emergency_dispatch.sample_data import build_sample_graph
from emergency_dispatch.system import DispatchSystem

from .config import (
    AVERAGE_SPEED_KMH,
    EDGE_WEIGHT,
    EDGES_CSV,
    LOG_LEVEL,
    NODES_CSV,
    QUEUE_CAPACITY,
    RELEASE_POLICY,
    SEARCH_ORIGIN,
)

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Emergency Dispatch")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_system: Optional[DispatchSystem] = None
_system_lock = threading.Lock()


class CallIn(BaseModel):
    location: str = Field(min_length=1)
    severity: int = Field(ge=1, le=5)


def build_policy() -> DispatchPolicy:
    return DispatchPolicy(
        average_speed_kmh=AVERAGE_SPEED_KMH,
        release=ReleasePolicy(RELEASE_POLICY),
        search_origin=SearchOrigin(SEARCH_ORIGIN),
        queue_capacity=QUEUE_CAPACITY or None,
    )


def build_system() -> DispatchSystem:
    policy = build_policy()
    if NODES_CSV.exists() and EDGES_CSV.exists():
        logger.info("loading road network from %s and %s", NODES_CSV, EDGES_CSV)
        return DispatchSystem.from_csv(NODES_CSV, EDGES_CSV, policy, weight=EDGE_WEIGHT)
    logger.info("no network files under %s, using the sample network", NODES_CSV.parent)
    return DispatchSystem(build_sample_graph(), policy)


def get_system() -> DispatchSystem:
    global _system
    with _system_lock:
        if _system is None:
            _system = build_system()
        return _system


def call_to_dict(call: Call) -> dict:
    return {"call_id": call.call_id, "location": call.location, "severity": call.severity, "arrival": call.arrival}


def unit_to_dict(system: DispatchSystem, unit: Unit) -> dict:
    return {
        "unit_id": unit.unit_id,
        "unit_type": unit.unit_type,
        "home_node": unit.home_node,
        "home": system.graph.display_name(unit.home_node),
        "available": unit.available,
    }


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/graph/summary")
def graph_summary(system: DispatchSystem = Depends(get_system)):
    return {
        "nodes": len(system.graph),
        "edges": system.graph.edge_count,
        "units": len(system.units),
        "pending_calls": system.allocator.pending,
    }


@app.post("/calls")
def create_call(payload: CallIn, system: DispatchSystem = Depends(get_system)):
    try:
        call = system.report(payload.location, payload.severity)
    except QueueFullError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"call": call_to_dict(call), "pending": system.allocator.pending}


@app.get("/calls")
def pending_calls(system: DispatchSystem = Depends(get_system)):
    upcoming = system.allocator.queue.peek()
    return {
        "pending": system.allocator.pending,
        "next": None if upcoming is None else call_to_dict(upcoming),
    }


@app.post("/dispatch/next")
def dispatch_next(system: DispatchSystem = Depends(get_system)):
    outcome = system.allocator.dispatch_next()
    if outcome is None:
        raise HTTPException(status_code=404, detail="No pending calls")
    return {**outcome.to_dict(), "report": system.format_outcome(outcome)}


@app.post("/dispatch")
def dispatch_all(system: DispatchSystem = Depends(get_system)):
    outcomes = system.run()
    return {
        "processed": len(outcomes),
        "outcomes": [{**o.to_dict(), "report": system.format_outcome(o)} for o in outcomes],
    }


@app.get("/units")
def list_units(
    unit_type: Optional[str] = None,
    available: Optional[bool] = None,
    system: DispatchSystem = Depends(get_system),
):
    units = list(system.units) if unit_type is None else system.units.of_type(unit_type, available_only=False)
    if available is not None:
        units = [u for u in units if u.available == available]
    return [unit_to_dict(system, u) for u in units]


@app.post("/units/{unit_id}/release")
def release_unit(unit_id: int, system: DispatchSystem = Depends(get_system)):
    try:
        unit = system.allocator.complete(unit_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Unit not found") from exc
    return unit_to_dict(system, unit)


@app.get("/route")
def route(
    source: str,
    destination: str,
    facilities_only: bool = False,
    system: DispatchSystem = Depends(get_system),
):
    result = system.route(source, destination, facilities_only=facilities_only)
    if result.reason and result.reason.endswith("not found"):
        raise HTTPException(status_code=404, detail=result.reason)
    return {**result.to_dict(), "report": system.format_route(result)}
