"""
Tests for the multi-factor link cost model
"""

import math

import pytest

from leo_mesh import Node, NodeRegistry, OrbitalPosition
from leo_mesh.core.cost import LinkCostModel
from leo_mesh.core.topology import calculate_distance


class FixedReliability:
    def __init__(self, hints):
        self.hints = hints

    def reliability_hint(self, destination):
        return self.hints.get(destination, 1.0)


@pytest.fixture
def registry():
    reg = NodeRegistry()
    reg.add(Node.satellite(1, OrbitalPosition(0.0, 0.0, 400.0), battery_level=0.5))
    reg.add(Node.satellite(2, OrbitalPosition(0.0, 1.0, 400.0)))
    reg.add(Node.relay(3, OrbitalPosition(0.0, 2.0, 400.0)))
    return reg


def _distance(registry, a, b):
    return calculate_distance(registry.get(a).position, registry.get(b).position)


def test_cost_uses_distance_and_lowest_battery(registry):
    model = LinkCostModel(registry)
    expected = _distance(registry, 1, 2) / 1000.0 * (2.0 - 0.5)
    assert model.cost(1, 2) == pytest.approx(expected)
    assert model.cost(2, 1) == pytest.approx(expected)


def test_type_mismatch_penalty(registry):
    model = LinkCostModel(registry)
    expected = _distance(registry, 2, 3) / 1000.0 * 1.5
    assert model.cost(2, 3) == pytest.approx(expected)


def test_reliability_hint_of_receiving_node(registry):
    model = LinkCostModel(registry, reliability=FixedReliability({2: 0.5}))
    base = _distance(registry, 1, 2) / 1000.0 * 1.5
    assert model.cost(1, 2) == pytest.approx(base * 1.5)
    # Hint only applies to the receiving end
    assert model.cost(2, 1) == pytest.approx(base)


def test_unknown_node_costs_infinity(registry):
    model = LinkCostModel(registry)
    assert math.isinf(model.cost(1, 42))
    assert math.isinf(model.cost(42, 1))


def test_model_is_callable(registry):
    model = LinkCostModel(registry)
    assert model(1, 2) == model.cost(1, 2)
