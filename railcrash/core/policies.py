"""
Collision policies.

Each policy:
- Has a unique identifier
- Derives engine movements from the network and the route registry
- Returns a deduplicated list of crashes ordered by time

The two policies are not equivalent. The head-on policy finds meetings inside
a branch between exactly two engines; the station policy finds simultaneous
arrivals of two or more engines at one station.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from itertools import groupby
from typing import Dict, Iterable, List, Sequence, Tuple, TypeVar, Union

from .models import BranchCrash, BranchPass, Network, RouteRegistry, StationCrash
from .timeline import collect_arrivals, collect_passes

logger = logging.getLogger(__name__)

Crash = Union[BranchCrash, StationCrash]
C = TypeVar("C", BranchCrash, StationCrash)


def deduplicate(crashes: Iterable[C]) -> List[C]:
    """Keep the first crash of every canonical key, preserving input order."""
    seen = set()
    out: List[C] = []
    for cr in crashes:
        k = cr.key
        if k in seen:
            continue
        seen.add(k)
        out.append(cr)
    return out


def order_by_time(crashes: Iterable[C]) -> List[C]:
    # equal times are ordered by canonical key so the report is deterministic
    return sorted(crashes, key=lambda cr: cr.key)


class CollisionPolicy(ABC):
    """Base class for collision policies."""

    policy_id: str
    description: str

    @abstractmethod
    def detect(self, network: Network, routes: RouteRegistry) -> List[Crash]:
        """Return deduplicated crashes in non-decreasing time order."""


class HeadOnPolicy(CollisionPolicy):
    """
    Two engines traverse the same branch in opposite directions with
    overlapping occupancy intervals. The crash time is the midpoint
    (p.t1 + q.t2) / 2, which may be fractional.
    """

    policy_id = "branch"
    description = "Head-on meeting inside a single-track branch"

    def find_crashes(self, passes: Sequence[BranchPass]) -> List[BranchCrash]:
        # Only passes over the same branch can meet, so index them first.
        by_branch: Dict[Tuple[int, int], List[BranchPass]] = {}
        for bp in passes:
            by_branch.setdefault((min(bp.st1, bp.st2), max(bp.st1, bp.st2)), []).append(bp)

        found: List[BranchCrash] = []
        for group in by_branch.values():
            for p in group:
                for q in group:
                    if p.is_crashed(q):
                        found.append(BranchCrash(
                            station_a=p.st1,
                            station_b=p.st2,
                            engine_1=p.engine,
                            engine_2=q.engine,
                            time=p.crash_time(q),
                        ))
        return order_by_time(deduplicate(found))

    def detect(self, network: Network, routes: RouteRegistry) -> List[BranchCrash]:
        passes = collect_passes(network, routes)
        crashes = self.find_crashes(passes)
        logger.debug("head-on policy: %d passes, %d crashes", len(passes), len(crashes))
        return crashes


class StationArrivalPolicy(CollisionPolicy):
    """
    Two or more engines arrive at the same station at the same time.
    The start station of every route counts as an arrival at time 0.
    """

    policy_id = "station"
    description = "Simultaneous arrival of engines at a station"

    def __init__(self, include_trivial_routes: bool = False):
        # single-station routes never move; they only take part when asked to
        self.include_trivial_routes = include_trivial_routes

    def detect(self, network: Network, routes: RouteRegistry) -> List[StationCrash]:
        arrivals = collect_arrivals(network, routes, include_trivial_routes=self.include_trivial_routes)
        arrivals.sort(key=lambda a: (a.time, a.station, a.engine))

        crashes: List[StationCrash] = []
        for (time, station), group in groupby(arrivals, key=lambda a: (a.time, a.station)):
            engines = tuple(sorted({a.engine for a in group}))
            if len(engines) >= 2:
                crashes.append(StationCrash(station=station, time=time, engines=engines))
        logger.debug("station policy: %d arrivals, %d crashes", len(arrivals), len(crashes))
        # grouping already yields one record per (time, station) in time order
        return crashes


class CombinedPolicy(CollisionPolicy):
    """
    Both reports side by side: the union of the head-on and station crashes,
    ordered by time with branch crashes first at equal times. Records keep
    their own shape and are not deduplicated against each other.
    """

    policy_id = "both"
    description = "Head-on and simultaneous-arrival crashes together"

    def __init__(self, include_trivial_routes: bool = False):
        self.head_on = HeadOnPolicy()
        self.station = StationArrivalPolicy(include_trivial_routes=include_trivial_routes)

    def detect(self, network: Network, routes: RouteRegistry) -> List[Crash]:
        merged: List[Crash] = [*self.head_on.detect(network, routes), *self.station.detect(network, routes)]
        # sorted() is stable, and branch crashes come first in the input
        return sorted(merged, key=lambda cr: cr.time)


POLICY_IDS = (HeadOnPolicy.policy_id, StationArrivalPolicy.policy_id, CombinedPolicy.policy_id)


def make_policy(policy_id: str, include_trivial_routes: bool = False) -> CollisionPolicy:
    if policy_id == HeadOnPolicy.policy_id:
        return HeadOnPolicy()
    if policy_id == StationArrivalPolicy.policy_id:
        return StationArrivalPolicy(include_trivial_routes=include_trivial_routes)
    if policy_id == CombinedPolicy.policy_id:
        return CombinedPolicy(include_trivial_routes=include_trivial_routes)
    raise ValueError(f"Unknown collision policy {policy_id!r}, expected one of {', '.join(POLICY_IDS)}")
