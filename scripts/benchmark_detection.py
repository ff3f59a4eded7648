"""Compare the collision policies on random networks of growing engine counts.

Usage:
    python scripts/benchmark_detection.py -Min 10 -Max 50 -Step 10 -Stations 20 -RouteLen 6
    python -m scripts.benchmark_detection -Min 10 -Max 50 -Step 10 -Json

Every policy runs over the same routes, so crash counts are comparable:
the head-on policy looks at branch passes (≈ O(M²) per busy branch), the
station policy sorts arrivals once (≈ O(M log M)).
"""

from __future__ import annotations
import argparse, random, json, time, os, sys
from typing import Dict, List

# Ensure project root on path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from railcrash.core.detector import detect_collisions  # type: ignore
from railcrash.core.models import RailNetConfig  # type: ignore
from railcrash.core.policies import HeadOnPolicy, StationArrivalPolicy  # type: ignore
from railcrash.core.timeline import collect_arrivals, collect_passes  # type: ignore
from railcrash.sim.loader import load_payload  # type: ignore
from scripts.generate_random_network import build_branches, build_routes  # type: ignore

POLICIES = (HeadOnPolicy.policy_id, StationArrivalPolicy.policy_id)


def measure(cfg: RailNetConfig) -> Dict:
    """Run both policies over one loaded network and count what each one saw."""
    row: Dict = {
        "engines": cfg.routes.engine_count,
        "passes": len(collect_passes(cfg.network, cfg.routes)),
        "arrivals": len(collect_arrivals(cfg.network, cfg.routes)),
    }
    for policy in POLICIES:
        t0 = time.perf_counter()
        crashes = detect_collisions(cfg.network, cfg.routes, policy=policy)
        row[f"{policy}_ms"] = (time.perf_counter() - t0) * 1000
        row[f"{policy}_crashes"] = len(crashes)
    return row


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument('-Min', type=int, default=10)
    ap.add_argument('-Max', type=int, default=50)
    ap.add_argument('-Step', type=int, default=10)
    ap.add_argument('-Stations', type=int, default=20)
    ap.add_argument('-Extra', type=int, default=10)
    ap.add_argument('-RouteLen', type=int, default=6)
    ap.add_argument('-Seed', type=int, default=42)
    ap.add_argument('-Json', action='store_true')
    args = ap.parse_args()

    random.seed(args.Seed)
    branches = build_branches(args.Stations, args.Extra, 5)
    rows: List[Dict] = []
    for n in range(args.Min, args.Max + 1, args.Step):
        routes = build_routes(n, branches, args.Stations, args.RouteLen)
        cfg = load_payload({"station_count": args.Stations, "engine_count": n, "branches": branches, "routes": routes})
        rows.append(measure(cfg))

    if args.Json:
        print(json.dumps(rows, indent=2))
        return
    print(f"{'engines':>7} {'passes':>7} {'arrivals':>8} | {'head-on':>8} {'ms':>7} | {'station':>8} {'ms':>7}")
    for r in rows:
        print(
            f"{r['engines']:>7} {r['passes']:>7} {r['arrivals']:>8} | "
            f"{r['branch_crashes']:>8} {r['branch_ms']:7.2f} | "
            f"{r['station_crashes']:>8} {r['station_ms']:7.2f}"
        )


if __name__ == '__main__':
    main()
