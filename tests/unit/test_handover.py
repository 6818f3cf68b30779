"""
Tests for ground station handover selection
"""

import pytest

from leo_mesh import InvalidNodeError, Node, NodeNotFoundError, OrbitalPosition


def _satellite(node_id=1, lat=0.0, lon=0.0):
    return Node.satellite(node_id, OrbitalPosition(lat, lon, 400.0))


def test_unknown_satellite(network):
    with pytest.raises(NodeNotFoundError):
        network.select_ground_station(42)


def test_non_satellite_rejected(network):
    network.add_node(Node.ground_station(100, 0.0, 0.0))
    network.add_node(Node.relay(5, OrbitalPosition(0.0, 1.0, 400.0)))

    with pytest.raises(InvalidNodeError):
        network.select_ground_station(100)
    with pytest.raises(InvalidNodeError):
        network.select_ground_station(5)


def test_single_station_in_range(network):
    network.add_node(_satellite())
    network.add_node(Node.ground_station(100, 5.0, 5.0))

    assert network.select_ground_station(1) == 100
    assert network.get_statistics().handovers_completed == 1


def test_closest_station_wins(network):
    network.add_node(_satellite())
    network.add_node(Node.ground_station(100, 20.0, 20.0))
    network.add_node(Node.ground_station(101, 1.0, 1.0))

    assert network.select_ground_station(1) == 101


def test_range_relative_quality(network):
    """A farther station with a much larger range has the better signal"""
    network.add_node(_satellite())
    network.add_node(Node.ground_station(100, 0.0, 3.0, communication_range=1000.0))
    network.add_node(Node.ground_station(101, 0.0, 10.0, communication_range=20000.0))

    assert network.select_ground_station(1) == 101


def test_equal_quality_prefers_lowest_id(network):
    network.add_node(_satellite())
    network.add_node(Node.ground_station(102, 0.0, 2.0))
    network.add_node(Node.ground_station(101, 0.0, -2.0))

    assert network.select_ground_station(1) == 101


def test_no_station_in_range(network):
    network.add_node(_satellite())
    network.add_node(Node.ground_station(100, 0.0, 90.0, communication_range=100.0))

    assert network.select_ground_station(1) is None
    assert network.get_statistics().handovers_completed == 0


def test_inactive_station_ignored(network):
    network.add_node(_satellite())
    station = Node.ground_station(100, 0.0, 1.0)
    station.is_active = False
    network.add_node(station)

    assert network.select_ground_station(1) is None


def test_best_station_reports_quality(network):
    network.add_node(_satellite())
    network.add_node(Node.ground_station(100, 0.0, 0.0, altitude=400.0))

    station_id, quality = network.handover.best_station(1)

    assert station_id == 100
    assert quality == pytest.approx(1.0)
    assert network.get_statistics().handovers_completed == 0
