"""Random network generator for larger detection runs.

Usage:
    python scripts/generate_random_network.py -Stations 30 -Engines 20 -RouteLen 8 -Out big_net.xml
    python scripts/generate_random_network.py -Stations 30 -Engines 20 -Out big_net.json
"""
import argparse, random, json
import xml.etree.ElementTree as ET
from typing import Dict, List


def build_branches(n_stations: int, extra: int, max_len: int) -> List[Dict]:
    # a chain keeps every station reachable, extra branches add loops
    pairs = {(i, i + 1) for i in range(n_stations - 1)}
    tries = 0
    while len(pairs) < n_stations - 1 + extra and tries < extra * 20:
        a, b = random.sample(range(n_stations), 2)
        pairs.add((min(a, b), max(a, b)))
        tries += 1
    return [{"from": a, "to": b, "length": random.randint(1, max_len)} for a, b in sorted(pairs)]


def build_routes(n_engines: int, branches: List[Dict], n_stations: int, avg_len: int) -> List[Dict]:
    adj: Dict[int, List[int]] = {s: [] for s in range(n_stations)}
    for b in branches:
        adj[b["from"]].append(b["to"])
        adj[b["to"]].append(b["from"])
    routes: List[Dict] = []
    for e in range(n_engines):
        length = max(1, int(random.gauss(avg_len, 2)))
        st = random.randrange(n_stations)
        stations = [st]
        for _ in range(length - 1):
            st = random.choice(adj[st])
            stations.append(st)
        routes.append({"engine": e, "stations": stations})
    return routes


def to_xml(payload: Dict) -> str:
    root = ET.Element("rail_net", StatNumber=str(payload["station_count"]), EngineNumber=str(payload["engine_count"]))
    for b in payload["branches"]:
        ET.SubElement(root, "branch", From=str(b["from"]), To=str(b["to"]), Length=str(b["length"]))
    for r in payload["routes"]:
        re = ET.SubElement(root, "route", Engine=str(r["engine"]))
        for s in r["stations"]:
            ET.SubElement(re, "track", Stat=str(s))
    ET.indent(root)
    return ET.tostring(root, encoding="unicode")


def main():
    p = argparse.ArgumentParser()
    p.add_argument('-Stations', type=int, default=20)
    p.add_argument('-Engines', type=int, default=10)
    p.add_argument('-Extra', type=int, default=10)
    p.add_argument('-MaxLen', type=int, default=5)
    p.add_argument('-RouteLen', type=int, default=6)
    p.add_argument('-Seed', type=int, default=42)
    p.add_argument('-Out', type=str, default='random_network.xml')
    a = p.parse_args()

    random.seed(a.Seed)
    branches = build_branches(a.Stations, a.Extra, a.MaxLen)
    routes = build_routes(a.Engines, branches, a.Stations, a.RouteLen)
    payload = {"station_count": a.Stations, "engine_count": a.Engines, "branches": branches, "routes": routes}
    with open(a.Out, 'w') as f:
        if a.Out.lower().endswith('.json'):
            json.dump(payload, f, indent=2)
        else:
            f.write(to_xml(payload))
    print(f"Wrote {len(branches)} branches & {len(routes)} routes -> {a.Out}")


if __name__ == '__main__':
    main()
