from typing import Any, Dict, List, Sequence

from railcrash.core.models import BranchCrash, StationCrash
from railcrash.core.policies import Crash


def sort_by_time(crashes: Sequence[Crash]) -> List[Crash]:
    # stable: records with equal times keep their relative order
    return sorted(crashes, key=lambda cr: cr.time)


def format_crash(index: int, cr: Crash) -> str:
    # index is 1-based and assigned here, it is not part of the record
    if isinstance(cr, BranchCrash):
        return (
            f"Crash {index}: stations: {cr.station_a}<->{cr.station_b} "
            f"engines: {cr.engine_1}, {cr.engine_2} time: {cr.time}"
        )
    engines = ", ".join(str(e) for e in cr.engines)
    return f"Crash {index}: time: {cr.time} station: {cr.station} engines: {engines}"


def format_report(crashes: Sequence[Crash]) -> List[str]:
    ordered = sort_by_time(crashes)
    lines = [f"{len(ordered)} crashes detected"]
    lines.extend(format_crash(i, cr) for i, cr in enumerate(ordered, start=1))
    return lines


def crash_json(cr: Crash) -> Dict[str, Any]:
    if isinstance(cr, StationCrash):
        return {"kind": cr.kind, "station": cr.station, "time": cr.time, "engines": list(cr.engines)}
    return {
        "kind": cr.kind,
        "stations": [cr.station_a, cr.station_b],
        "engines": [cr.engine_1, cr.engine_2],
        "time": cr.time,
    }


def report_json(crashes: Sequence[Crash]) -> List[Dict[str, Any]]:
    return [crash_json(cr) for cr in sort_by_time(crashes)]
