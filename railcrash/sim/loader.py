"""Build the network and the route registry from a definition file.

Two equivalent input shapes are accepted:

XML attribute tree::

    <rail_net StatNumber="3" EngineNumber="2">
      <branch From="0" To="1" Length="1"/>
      <route Engine="0"><track Stat="0"/><track Stat="1"/></route>
    </rail_net>

JSON payload::

    {"station_count": 3, "engine_count": 2,
     "branches": [{"from": 0, "to": 1, "length": 1}],
     "routes": [{"engine": 0, "stations": [0, 1]}]}

Both go through ``Network.add_branch`` / ``RouteRegistry.add_route`` so they
fail with the same ``ConfigError`` messages.
"""

from __future__ import annotations
import json
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Tuple

from railcrash.core.models import ConfigError, Network, RailNetConfig, RouteRegistry, require

logger = logging.getLogger(__name__)

Validator = Callable[[int], bool]


def get_int_attrib(attrs: Mapping[str, Any], name: str, is_valid: Validator = lambda _: True, kind: str = "xml") -> int:
    """Extract an integer attribute and check it with ``is_valid``."""
    require(name in attrs and attrs[name] is not None, f"A {kind} node doesn't have attribute {name}")
    raw = attrs[name]
    if isinstance(raw, bool):
        raise ConfigError(f"An invalid value of {kind} attribute {name} = {raw}")
    try:
        value = raw if isinstance(raw, int) else int(str(raw).strip())
    except ValueError:
        raise ConfigError(f"An invalid value of {kind} attribute {name} = {raw}") from None
    require(is_valid(value), f"An invalid value of {kind} attribute {name} = {value}")
    return value


def _build(
    stat_attrs: Mapping[str, Any],
    branches: Iterable[Mapping[str, Any]],
    routes: Iterable[Tuple[Mapping[str, Any], List[Mapping[str, Any]]]],
    names: Dict[str, str],
    kind: str,
    strict_stations: bool,
) -> RailNetConfig:
    station_count = get_int_attrib(stat_attrs, names["stations"], lambda n: n > 1, kind)
    network = Network(station_count=station_count, strict_stations=strict_stations)

    for be in branches:
        frm = get_int_attrib(be, names["from"], lambda f: 0 <= f < station_count, kind)
        to = get_int_attrib(be, names["to"], lambda t: 0 <= t < station_count and t != frm, kind)
        length = get_int_attrib(be, names["length"], lambda n: n > 0, kind)
        network.add_branch(frm, to, length)
    network.validate()
    logger.debug("loaded %d branches over %d stations", len(network.branches()), station_count)

    engine_count = get_int_attrib(stat_attrs, names["engines"], lambda n: n > 0, kind)
    registry = RouteRegistry(network=network, engine_count=engine_count)
    for re_attrs, tracks in routes:
        engine = get_int_attrib(re_attrs, names["engine"], lambda e: 0 <= e < engine_count, kind)
        stations = [get_int_attrib(te, names["stat"], network.has_station, kind) for te in tracks]
        registry.add_route(engine, stations)
    registry.validate()
    logger.debug("loaded routes for %d engines", engine_count)

    return RailNetConfig(network=network, routes=registry)


_XML_NAMES = {
    "stations": "StatNumber", "engines": "EngineNumber",
    "from": "From", "to": "To", "length": "Length",
    "engine": "Engine", "stat": "Stat",
}

_JSON_NAMES = {
    "stations": "station_count", "engines": "engine_count",
    "from": "from", "to": "to", "length": "length",
    "engine": "engine", "stat": "station",
}


def load_xml_string(text: str | bytes, strict_stations: bool = False) -> RailNetConfig:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ConfigError(f"Malformed XML: {e}") from None
    require(root.tag == "rail_net", "The root node of configuration must be <rail_net ...>")
    branches = [be.attrib for be in root if be.tag == "branch"]
    routes = [
        (node.attrib, [te.attrib for te in node if te.tag == "track"])
        for node in root if node.tag == "route"
    ]
    return _build(root.attrib, branches, routes, _XML_NAMES, "xml", strict_stations)


def load_payload(data: Dict[str, Any], strict_stations: bool = False) -> RailNetConfig:
    require(isinstance(data, dict), "The configuration must be a JSON object")
    branches = data.get("branches") or []
    raw_routes = data.get("routes") or []
    require(isinstance(branches, list), "branches must be a list")
    require(isinstance(raw_routes, list), "routes must be a list")
    require(all(isinstance(b, dict) for b in branches), "every branch must be a JSON object")
    routes = []
    for r in raw_routes:
        require(isinstance(r, dict), "every route must be a JSON object")
        stations = r.get("stations") or []
        require(isinstance(stations, list), "route stations must be a list")
        routes.append((r, [{"station": s} for s in stations]))
    return _build(data, branches, routes, _JSON_NAMES, "json", strict_stations)


def load_file(path: Path | str, strict_stations: bool = False) -> RailNetConfig:
    p = Path(path)
    try:
        raw = p.read_bytes()
    except OSError as e:
        raise ConfigError(f"Cannot read {p}: {e.strerror}") from None
    if p.suffix.lower() == ".json":
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigError(f"Malformed JSON: {e}") from None
        return load_payload(data, strict_stations=strict_stations)
    return load_xml_string(raw, strict_stations=strict_stations)
