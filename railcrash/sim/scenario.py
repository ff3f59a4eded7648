from typing import Any, Dict, List

from railcrash.core.detector import detect_collisions
from railcrash.core.models import RailNetConfig
from railcrash.core.timeline import build_arrivals, build_timeline
from railcrash.sim.report import report_json


def run_scenario(cfg: RailNetConfig, policy: str = "branch", include_trivial_routes: bool = False) -> Dict[str, Any]:
    crashes = detect_collisions(cfg.network, cfg.routes, policy=policy, include_trivial_routes=include_trivial_routes)
    return {
        "policy": policy,
        "crashes": crashes,
    }


def timeline_json(cfg: RailNetConfig) -> List[Dict[str, Any]]:
    # one entry per engine: its branch passes and its station arrivals
    out: List[Dict[str, Any]] = []
    for eng in cfg.routes.engines():
        route = cfg.routes.get_route(eng)
        out.append({
            "engine": eng,
            "route": list(route),
            "passes": [
                {"from": bp.st1, "to": bp.st2, "start": bp.t1, "end": bp.t2}
                for bp in build_timeline(eng, route, cfg.network)
            ],
            "arrivals": [
                {"station": a.station, "time": a.time}
                for a in build_arrivals(eng, route, cfg.network)
            ],
        })
    return out


def scenario_json(result: Dict[str, Any]) -> Dict[str, Any]:
    crashes = report_json(result["crashes"])
    return {"policy": result["policy"], "count": len(crashes), "crashes": crashes}
