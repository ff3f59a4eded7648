import pytest

from railcrash.core.models import ConfigError, Network, RouteRegistry


def _line_network() -> Network:
    # 0 - 1 - 2 - 3
    net = Network(station_count=4)
    net.add_branch(0, 1, 2)
    net.add_branch(1, 2, 3)
    net.add_branch(2, 3, 1)
    return net


def test_route_covered_by_branches_is_accepted():
    routes = RouteRegistry(network=_line_network(), engine_count=2)
    routes.add_route(0, [0, 1, 2, 3])
    routes.add_route(1, [3, 2])
    assert routes.get_route(0) == (0, 1, 2, 3)
    assert routes.is_complete()
    routes.validate()


def test_route_with_gap_rejected():
    routes = RouteRegistry(network=_line_network(), engine_count=1)
    with pytest.raises(ConfigError) as ei:
        routes.add_route(0, [0, 2])
    assert ei.value.message == "Branch 0 -> 2 doesn't exist"


def test_route_repeating_a_station_rejected():
    routes = RouteRegistry(network=_line_network(), engine_count=1)
    with pytest.raises(ConfigError, match="Branch 1 -> 1 doesn't exist"):
        routes.add_route(0, [0, 1, 1])


def test_duplicate_route_rejected():
    routes = RouteRegistry(network=_line_network(), engine_count=1)
    routes.add_route(0, [0, 1])
    with pytest.raises(ConfigError, match="Duplicate route definition for Engine 0"):
        routes.add_route(0, [1, 2])
    assert routes.get_route(0) == (0, 1)


def test_engine_out_of_range_rejected():
    routes = RouteRegistry(network=_line_network(), engine_count=1)
    with pytest.raises(ConfigError):
        routes.add_route(1, [0, 1])


def test_missing_route_detected():
    routes = RouteRegistry(network=_line_network(), engine_count=3)
    routes.add_route(0, [0, 1])
    routes.add_route(2, [2])
    assert routes.get_route(1) == ()
    assert not routes.is_complete()
    with pytest.raises(ConfigError, match="Route for engine 1 is not defined"):
        routes.validate()


def test_single_station_route_is_legal_but_empty_is_not():
    routes = RouteRegistry(network=_line_network(), engine_count=2)
    routes.add_route(0, [3])
    with pytest.raises(ConfigError, match="has no stations"):
        routes.add_route(1, [])


def test_routes_need_a_loaded_network():
    routes = RouteRegistry(network=Network(station_count=2), engine_count=1)
    with pytest.raises(ConfigError):
        routes.add_route(0, [0])


def test_engine_count_must_be_positive():
    with pytest.raises(ConfigError):
        RouteRegistry(network=_line_network(), engine_count=0)
