"""
Shared fixtures for mesh routing tests
"""

import pytest

from leo_mesh import MeshConfig, MeshNetwork, Node, OrbitalPosition

# 1 degree along the equator at 400 km is ~118 km; 2 degrees is ~236 km
CHAIN_RANGE_KM = 150.0


def _add_relay_chain(network, count, altitude=400.0, spacing_deg=1.0):
    for i in range(count):
        network.add_node(Node.relay(
            i,
            OrbitalPosition(0.0, i * spacing_deg, altitude),
            communication_range=CHAIN_RANGE_KM
        ))
    return list(range(count))


@pytest.fixture
def network():
    return MeshNetwork(MeshConfig(seed=42))


@pytest.fixture
def add_relay_chain():
    """Adds relays 0..count-1 along the equator, each in range of its direct neighbors only"""
    return _add_relay_chain


@pytest.fixture
def relay_chain():
    """Factory building an initialized relay chain of the given length"""
    def _build(count):
        net = MeshNetwork(MeshConfig(seed=7))
        _add_relay_chain(net, count)
        net.initialize_routing()
        return net
    return _build
