"""
Tests for on-demand route search and the distance-vector table
"""

import pytest

from leo_mesh import (
    MeshNetwork,
    Node,
    NodeNotFoundError,
    NodeRegistry,
    NoRouteError,
    OrbitalPosition,
    RoutingEntry,
    RoutingTable,
    build_demo_constellation,
)
from leo_mesh.core.routing import RouteFinder, build_routing_table


def test_route_to_self_is_empty(network):
    build_demo_constellation(network)
    network.initialize_routing()
    for node in network.nodes:
        assert network.find_route(node.node_id, node.node_id) == []


def test_route_along_chain(relay_chain):
    net = relay_chain(5)
    assert net.find_route(0, 4) == [1, 2, 3, 4]
    assert net.find_route(4, 1) == [3, 2, 1]


def test_no_route_between_distant_nodes(network):
    network.add_node(Node.satellite(1, OrbitalPosition(0.0, 0.0, 3629.0)))
    network.add_node(Node.satellite(2, OrbitalPosition(0.0, 180.0, 3629.0)))
    network.initialize_routing()

    with pytest.raises(NoRouteError):
        network.find_route(1, 2)


def test_unknown_endpoints(relay_chain):
    net = relay_chain(3)
    with pytest.raises(NodeNotFoundError):
        net.find_route(0, 99)
    with pytest.raises(NodeNotFoundError):
        net.find_route(99, 0)


def test_equal_cost_tie_breaks_to_lowest_id(network):
    """Two mirror-image relays give equal-cost paths; the lower id wins"""
    network.add_node(Node.relay(0, OrbitalPosition(0.0, -1.0, 400.0), communication_range=200.0))
    network.add_node(Node.relay(2, OrbitalPosition(-0.5, 0.0, 400.0), communication_range=200.0))
    network.add_node(Node.relay(1, OrbitalPosition(0.5, 0.0, 400.0), communication_range=200.0))
    network.add_node(Node.relay(3, OrbitalPosition(0.0, 1.0, 400.0), communication_range=200.0))
    network.initialize_routing()

    assert 3 not in network.get_node(0).neighbors
    assert network.find_route(0, 3) == [1, 3]
    assert network.find_route(0, 3) == network.find_route(0, 3)


def test_route_prefers_cheaper_path(network):
    """The chosen route is never costlier than the direct link"""
    network.add_node(Node.relay(1, OrbitalPosition(0.0, 0.0, 400.0), communication_range=1000.0))
    network.add_node(Node.relay(2, OrbitalPosition(0.0, 2.0, 400.0), communication_range=1000.0))
    network.add_node(Node.relay(3, OrbitalPosition(0.0, 4.0, 400.0), communication_range=1000.0))
    network.initialize_routing()

    assert 3 in network.get_node(1).neighbors
    route = network.find_route(1, 3)
    finder = network.route_finder
    assert finder.path_cost(1, route) <= finder.path_cost(1, [3])


def test_routing_table_entries_bounded(relay_chain):
    net = relay_chain(6)
    assert len(net.routing_table) == 6
    for entry in net.routing_table:
        assert entry.hop_count < 16
        assert 0.0 <= entry.reliability <= 1.0
        assert entry.cost > 0.0


def test_reliability_hint_defaults_to_one():
    table = RoutingTable()
    assert table.reliability_hint(7) == 1.0

    table.replace({7: RoutingEntry(7, 3, 2, 1.0, 0.0, 0.855)})
    assert table.reliability_hint(7) == 0.855
    assert table.get_next_hop(7) == 3


def test_purge_removes_destination_and_next_hop():
    table = RoutingTable()
    table.replace({
        1: RoutingEntry(1, 1, 1, 1.0, 0.0, 0.9),
        2: RoutingEntry(2, 1, 2, 2.0, 0.0, 0.855),
        3: RoutingEntry(3, 3, 1, 1.0, 0.0, 0.9),
    })
    assert table.purge(1) == 2
    assert 1 not in table and 2 not in table
    assert 3 in table


def test_remove_node_purges_routing_table(relay_chain):
    net = relay_chain(5)
    assert 2 in net.routing_table

    net.remove_node(2)

    for entry in net.routing_table:
        assert entry.destination != 2
        assert entry.next_hop != 2
    for node in net.nodes:
        assert 2 not in node.neighbors


def test_seeding_keeps_cheapest_direct_route():
    registry = NodeRegistry()
    for node_id in (1, 2, 3):
        registry.add(Node.relay(node_id, OrbitalPosition(0.0, float(node_id), 400.0)))
    registry.get(1).neighbors = {3}
    registry.get(2).neighbors = {3}
    registry.get(3).neighbors = {1, 2}
    costs = {(1, 3): 5.0, (2, 3): 2.0, (3, 1): 4.0, (3, 2): 4.0}

    entries = build_routing_table(registry, lambda a, b: costs[(a, b)], timestamp=12.0)

    assert entries[3].cost == 2.0
    assert entries[3].next_hop == 3
    assert entries[3].hop_count == 1
    assert entries[3].reliability == 0.9
    assert entries[3].last_updated == 12.0


def test_route_finder_standalone():
    registry = NodeRegistry()
    for node_id in (1, 2):
        registry.add(Node.relay(node_id, OrbitalPosition(0.0, float(node_id), 400.0)))
    registry.get(1).neighbors = {2}
    registry.get(2).neighbors = {1}

    finder = RouteFinder(registry, lambda a, b: 1.0)
    assert finder.find_route(1, 2) == [2]
    assert finder.path_cost(1, [2]) == 1.0


def _line_registry():
    """Relays 1 -> 2 -> 3 with one-way neighbor sets"""
    registry = NodeRegistry()
    for node_id in (1, 2, 3):
        registry.add(Node.relay(node_id, OrbitalPosition(0.0, float(node_id), 400.0)))
    registry.get(1).neighbors = {2}
    registry.get(2).neighbors = {3}
    return registry


def test_relaxation_replaces_with_cheaper_multi_hop_entry():
    costs = {(1, 2): -4.0, (2, 3): 10.0}
    entries = build_routing_table(
        _line_registry(), lambda a, b: costs[(a, b)],
        timestamp=3.0, max_hop_count=3
    )

    for destination in (2, 3):
        entry = entries[destination]
        assert entry.hop_count == 2
        assert entry.next_hop == 2
        assert entry.cost == pytest.approx(6.0)
        assert entry.reliability == pytest.approx(0.9 * 0.95)
        assert entry.last_updated == 3.0


def test_relaxation_respects_hop_bound():
    costs = {(1, 2): -4.0, (2, 3): 10.0}
    entries = build_routing_table(
        _line_registry(), lambda a, b: costs[(a, b)], max_hop_count=5
    )

    assert all(entry.hop_count < 5 for entry in entries.values())
    assert entries[3].hop_count == 4
    assert entries[3].reliability == pytest.approx(0.9 * 0.95 ** 3)


def test_relaxation_needs_strictly_cheaper_cost():
    costs = {(1, 2): 0.0, (2, 3): 10.0}
    entries = build_routing_table(_line_registry(), lambda a, b: costs[(a, b)])

    assert entries[2].hop_count == 1
    assert entries[3].hop_count == 1
    assert entries[3].cost == 10.0
    assert entries[3].reliability == 0.9
