"""Search a railway network definition for engine crashes.

Usage:
    python -m railcrash.main railcrash/data/sample_network.xml
    python -m railcrash.main net.json --policy both --json
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from typing import List, Optional

from railcrash.core.config import DetectorConfig
from railcrash.core.models import ConfigError
from railcrash.core.policies import POLICY_IDS
from railcrash.sim.audit import write_audit
from railcrash.sim.loader import load_file
from railcrash.sim.report import format_report
from railcrash.sim.scenario import run_scenario, scenario_json


def build_parser(cfg: DetectorConfig) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="railcrash", description="Detect engine crashes on a single-track network")
    ap.add_argument("path", help="network definition (.xml or .json)")
    ap.add_argument("--policy", choices=POLICY_IDS, default=cfg.policy)
    ap.add_argument("--strict-stations", action="store_true", default=cfg.strict_stations,
                    help="require an outgoing and an incoming branch at every station")
    ap.add_argument("--include-trivial-routes", action="store_true", default=cfg.include_trivial_routes,
                    help="let single-station routes take part in station crashes")
    ap.add_argument("--json", action="store_true", help="print the report as JSON")
    ap.add_argument("--audit", type=str, default=cfg.audit_file, help="append a JSONL audit entry to this file")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    cfg = DetectorConfig()
    ap = build_parser(cfg)
    args = ap.parse_args(argv)
    # argparse does not check a default against choices
    if args.policy not in POLICY_IDS:
        ap.error(f"Unknown policy {args.policy!r} from RAILCRASH_POLICY, expected one of {', '.join(POLICY_IDS)}")
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if not args.json:
            print(f"loading network definition {args.path}  ...")
        net = load_file(args.path, strict_stations=args.strict_stations)
        if not args.json:
            print("OK")
            print("Searching for crashes...")
        result = run_scenario(net, policy=args.policy, include_trivial_routes=args.include_trivial_routes)
    except ConfigError as e:
        print(f"Error: {e.message}")
        return 1

    if args.json:
        print(json.dumps(scenario_json(result), indent=2))
    else:
        for line in format_report(result["crashes"]):
            print(line)

    if args.audit:
        write_audit({
            "ts": datetime.now(timezone.utc).isoformat(),
            "source": str(args.path),
            "policy": args.policy,
            "crash_count": len(result["crashes"]),
        }, args.audit)
    return 0


if __name__ == "__main__":
    sys.exit(main())
