import pytest

from railcrash.core.models import Branch, ConfigError, Network


def test_branch_length_is_symmetric():
    net = Network(station_count=3)
    net.add_branch(0, 1, 4)
    net.add_branch(2, 1, 7)
    assert net.branch_length(0, 1) == net.branch_length(1, 0) == 4
    assert net.branch_length(1, 2) == net.branch_length(2, 1) == 7
    # no direct branch
    assert net.branch_length(0, 2) is None


def test_same_branch_twice_with_equal_length_is_noop():
    net = Network(station_count=2)
    net.add_branch(0, 1, 3)
    net.add_branch(1, 0, 3)
    assert net.branches() == [Branch(0, 1, 3)]


def test_ambiguous_branch_length_rejected():
    net = Network(station_count=2)
    net.add_branch(0, 1, 3)
    with pytest.raises(ConfigError) as ei:
        net.add_branch(1, 0, 5)
    assert ei.value.message == "The Length of branch 0 <-> 1 is ambiguously defined: 3 / 5"
    assert net.branch_length(0, 1) == 3


@pytest.mark.parametrize("a,b,length", [
    (0, 0, 1),   # self loop
    (0, 1, 0),   # non-positive length
    (0, 1, -2),
    (0, 3, 1),   # out of range
    (-1, 1, 1),
])
def test_invalid_branch_rejected(a, b, length):
    net = Network(station_count=3)
    with pytest.raises(ConfigError):
        net.add_branch(a, b, length)


def test_station_count_must_exceed_one():
    with pytest.raises(ConfigError):
        Network(station_count=1)


def test_network_without_branches_is_incomplete():
    net = Network(station_count=2)
    assert not net.is_complete()
    with pytest.raises(ConfigError, match="doesn't have any <branch> nodes"):
        net.validate()
    net.add_branch(0, 1, 1)
    assert net.is_complete()
    net.validate()


def test_strict_stations_need_both_directions():
    net = Network(station_count=3, strict_stations=True)
    net.add_branch(0, 1, 1)
    net.add_branch(1, 2, 1)
    # station 0 is never a To end, station 2 never a From end
    assert not net.is_complete()
    with pytest.raises(ConfigError, match="Station 0 has no incoming branch"):
        net.validate()

    net.add_branch(2, 0, 5)
    assert net.is_complete()
    net.validate()


def test_lenient_network_ignores_direction():
    net = Network(station_count=3)
    net.add_branch(0, 1, 1)
    net.add_branch(1, 2, 1)
    assert net.is_complete()
