from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

Station = int
Engine = int
Time = int


class ConfigError(ValueError):
    """Invalid network or route definition. Aborts the whole run."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def require(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


@dataclass(frozen=True)
class Branch:
    # normalized so that a < b
    a: Station
    b: Station
    length: int

    @staticmethod
    def key(s1: Station, s2: Station) -> Tuple[Station, Station]:
        return (min(s1, s2), max(s1, s2))


@dataclass
class Network:
    station_count: int
    # Stricter completeness: every station must be the From end of some branch
    # and the To end of some branch, as written in the input.
    strict_stations: bool = False
    _lengths: Dict[Tuple[Station, Station], int] = field(default_factory=dict, init=False, repr=False)
    _outgoing: Set[Station] = field(default_factory=set, init=False, repr=False)
    _incoming: Set[Station] = field(default_factory=set, init=False, repr=False)

    def __post_init__(self) -> None:
        require(self.station_count > 1, f"Station count must be greater than 1, got {self.station_count}")

    def has_station(self, st: Station) -> bool:
        return 0 <= st < self.station_count

    def add_branch(self, a: Station, b: Station, length: int) -> None:
        require(self.has_station(a), f"Station {a} is out of range [0, {self.station_count})")
        require(self.has_station(b), f"Station {b} is out of range [0, {self.station_count})")
        require(a != b, f"Branch {a} <-> {b} connects a station to itself")
        require(length > 0, f"The Length of branch {a} <-> {b} must be positive, got {length}")
        k = Branch.key(a, b)
        known = self._lengths.get(k)
        require(
            known is None or known == length,
            f"The Length of branch {k[0]} <-> {k[1]} is ambiguously defined: {known} / {length}",
        )
        self._lengths[k] = length
        self._outgoing.add(a)
        self._incoming.add(b)

    def branch_length(self, s1: Station, s2: Station) -> Optional[int]:
        # None when there is no direct branch s1 <-> s2
        return self._lengths.get(Branch.key(s1, s2))

    def branches(self) -> List[Branch]:
        return [Branch(a, b, length) for (a, b), length in sorted(self._lengths.items())]

    def is_complete(self) -> bool:
        if not self._lengths:
            return False
        if self.strict_stations:
            stations = set(range(self.station_count))
            return stations <= self._outgoing and stations <= self._incoming
        return True

    def validate(self) -> None:
        require(bool(self._lengths), "The configuration doesn't have any <branch> nodes")
        if self.strict_stations:
            for st in range(self.station_count):
                require(st in self._outgoing, f"Station {st} has no outgoing branch")
                require(st in self._incoming, f"Station {st} has no incoming branch")


@dataclass
class RouteRegistry:
    network: Network
    engine_count: int
    _routes: Dict[Engine, Tuple[Station, ...]] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        require(self.engine_count > 0, f"Engine count must be positive, got {self.engine_count}")

    def add_route(self, engine: Engine, stations: List[Station]) -> None:
        self.network.validate()
        require(0 <= engine < self.engine_count, f"Engine {engine} is out of range [0, {self.engine_count})")
        require(engine not in self._routes, f"Duplicate route definition for Engine {engine}")
        require(len(stations) > 0, f"Route for engine {engine} has no stations")
        for st in stations:
            require(self.network.has_station(st), f"Station {st} is out of range [0, {self.network.station_count})")
        for st1, st2 in zip(stations, stations[1:]):
            require(self.network.branch_length(st1, st2) is not None, f"Branch {st1} -> {st2} doesn't exist")
        self._routes[engine] = tuple(stations)

    def get_route(self, engine: Engine) -> Tuple[Station, ...]:
        return self._routes.get(engine, ())

    def engines(self) -> range:
        return range(self.engine_count)

    def is_complete(self) -> bool:
        return all(e in self._routes for e in self.engines())

    def validate(self) -> None:
        for e in self.engines():
            require(e in self._routes, f"Route for engine {e} is not defined")


@dataclass(frozen=True)
class BranchPass:
    """Time interval an engine occupies the branch st1 -> st2."""
    engine: Engine
    st1: Station
    st2: Station
    t1: Time
    t2: Time

    def is_crashed(self, other: "BranchPass") -> bool:
        # same branch, opposite directions, overlapping occupancy
        return (
            self.engine != other.engine
            and self.st1 == other.st2
            and self.st2 == other.st1
            and self.t1 <= other.t2
            and self.t2 >= other.t1
        )

    def crash_time(self, other: "BranchPass") -> float:
        assert self.is_crashed(other)
        return (self.t1 + other.t2) / 2.0


@dataclass(frozen=True)
class Arrival:
    time: Time
    station: Station
    engine: Engine


@dataclass(frozen=True)
class BranchCrash:
    station_a: Station
    station_b: Station
    engine_1: Engine
    engine_2: Engine
    time: float

    kind = "branch"

    @property
    def key(self) -> Tuple:
        # two crashes are the same event iff their keys are equal
        return (
            self.time,
            min(self.station_a, self.station_b),
            max(self.station_a, self.station_b),
            min(self.engine_1, self.engine_2),
            max(self.engine_1, self.engine_2),
        )


@dataclass(frozen=True)
class StationCrash:
    station: Station
    time: Time
    engines: Tuple[Engine, ...]

    kind = "station"

    @property
    def key(self) -> Tuple:
        return (self.time, self.station, tuple(sorted(self.engines)))


@dataclass
class RailNetConfig:
    network: Network
    routes: RouteRegistry
