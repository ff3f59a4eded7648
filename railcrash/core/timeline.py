from typing import List, Sequence

from .models import Arrival, BranchPass, Engine, Network, RouteRegistry, Station

# Engines move at one distance unit per time unit and never wait, so the time
# at each station is the accumulated length of the branches passed so far.


def build_timeline(engine: Engine, route: Sequence[Station], network: Network) -> List[BranchPass]:
    passes: List[BranchPass] = []
    if not route:
        return passes
    st1, t1 = route[0], 0
    for st2 in route[1:]:
        length = network.branch_length(st1, st2)
        assert length is not None, f"branch {st1} -> {st2} missing from a validated route"
        t2 = t1 + length
        passes.append(BranchPass(engine=engine, st1=st1, st2=st2, t1=t1, t2=t2))
        st1, t1 = st2, t2
    return passes


def build_arrivals(engine: Engine, route: Sequence[Station], network: Network) -> List[Arrival]:
    """Vertex-visit projection of the timeline, including the start station at time 0."""
    if not route:
        return []
    arrivals = [Arrival(time=0, station=route[0], engine=engine)]
    for bp in build_timeline(engine, route, network):
        arrivals.append(Arrival(time=bp.t2, station=bp.st2, engine=engine))
    return arrivals


def collect_passes(network: Network, routes: RouteRegistry) -> List[BranchPass]:
    # all engines, in engine order
    out: List[BranchPass] = []
    for eng in routes.engines():
        out.extend(build_timeline(eng, routes.get_route(eng), network))
    return out


def collect_arrivals(network: Network, routes: RouteRegistry, include_trivial_routes: bool = False) -> List[Arrival]:
    out: List[Arrival] = []
    for eng in routes.engines():
        route = routes.get_route(eng)
        if len(route) < 2 and not include_trivial_routes:
            continue
        out.extend(build_arrivals(eng, route, network))
    return out
