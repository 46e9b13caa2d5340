from __future__ import annotations

import argparse
from typing import List, Optional, Sequence

from emergency_dispatch.policy import DispatchPolicy, ReleasePolicy, SearchOrigin
from emergency_dispatch.sample_data import build_sample_graph
from emergency_dispatch.system import DispatchSystem

DEFAULT_CALLS = [
    ("Clock Tower", 5),
    ("Subhash Nagar", 2),
    ("Rajpur Road", 3),
    ("Clement Town", 4),
    ("Paltan Bazaar", 5),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Emergency dispatch console")
    parser.add_argument("--nodes", help="nodes.csv (id,lat,lon,name,type)")
    parser.add_argument("--edges", help="edges.csv (edge_id,from,to,distance_m,travel_time,one_way)")
    parser.add_argument("--weight", choices=["distance", "travel_time"], default="distance")
    parser.add_argument("--speed", type=float, default=40.0, help="average unit speed in km/h")
    parser.add_argument("--release", choices=[p.value for p in ReleasePolicy], default=ReleasePolicy.IMMEDIATE.value)
    parser.add_argument("--search", choices=[o.value for o in SearchOrigin], default=SearchOrigin.INCIDENT.value)
    parser.add_argument("--route", nargs=2, metavar=("SOURCE", "DESTINATION"), help="answer one route query and exit")
    parser.add_argument(
        "--facilities-only",
        action="store_true",
        help="with --route, require a named destination to be a hospital, fire or police facility",
    )
    parser.add_argument(
        "--call",
        nargs=2,
        action="append",
        metavar=("LOCATION", "SEVERITY"),
        help="queue a call (repeatable); defaults to a scripted set",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    policy = DispatchPolicy(
        average_speed_kmh=args.speed,
        release=ReleasePolicy(args.release),
        search_origin=SearchOrigin(args.search),
    )

    if args.nodes and args.edges:
        system = DispatchSystem.from_csv(args.nodes, args.edges, policy, weight=args.weight)
    else:
        system = DispatchSystem(build_sample_graph(), policy)

    print(f"System ready with {len(system.graph)} locations and {len(system.units)} units.")

    if args.route:
        for line in system.format_route(system.route(*args.route, facilities_only=args.facilities_only)):
            print(line)
        return 0

    print("Severity guide: 4-5 => Hospital/Ambulance | 3 => Police | 1-2 => Fire\n")
    calls: List[tuple] = args.call or DEFAULT_CALLS
    for location, severity in calls:
        try:
            call = system.report(location, int(severity))
        except ValueError as exc:
            print(f"Rejected call at '{location}': {exc}")
            continue
        print(f"Recorded: [{call.location}] (severity {call.severity})")

    print("\nAutomatic dispatch starting...")
    for outcome in system.run():
        print()
        for line in system.format_outcome(outcome):
            print(line)

    print("\nAll incidents processed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
