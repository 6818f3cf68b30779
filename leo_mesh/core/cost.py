"""
Link Cost Model

Turns a node pair into a routing cost combining distance, battery,
historical reliability and node-type mismatch.
"""

from typing import Optional, Protocol

from .topology import NodeRegistry, calculate_distance, EARTH_RADIUS_KM


class ReliabilitySource(Protocol):
    """Anything that can report how reliable a destination has been"""

    def reliability_hint(self, destination: int) -> float:
        ...


class LinkCostModel:
    """
    Multi-factor link cost

    cost = (distance_km / 1000)
         * (2 - min(battery_a, battery_b))
         * (2 - reliability_hint(b))
         * (mismatch_penalty if type_a != type_b else 1)

    Prefers links through well-charged, historically reliable nodes and
    penalizes satellite/ground transitions.
    """

    def __init__(
        self,
        registry: NodeRegistry,
        reliability: Optional[ReliabilitySource] = None,
        type_mismatch_penalty: float = 1.5,
        earth_radius_km: float = EARTH_RADIUS_KM
    ):
        self.registry = registry
        self.reliability = reliability
        self.type_mismatch_penalty = type_mismatch_penalty
        self.earth_radius_km = earth_radius_km

    def _hint(self, destination: int) -> float:
        if self.reliability is None:
            return 1.0
        return self.reliability.reliability_hint(destination)

    def cost(self, node_a: int, node_b: int) -> float:
        """
        Cost of the link from node_a to node_b

        Returns:
            Non-negative cost, or infinity if either node is unknown
        """
        a = self.registry.find(node_a)
        b = self.registry.find(node_b)
        if a is None or b is None:
            return float('inf')

        distance = calculate_distance(a.position, b.position, self.earth_radius_km)
        cost = distance / 1000.0
        cost *= 2.0 - min(a.battery_level, b.battery_level)
        cost *= 2.0 - self._hint(node_b)
        if a.node_type != b.node_type:
            cost *= self.type_mismatch_penalty
        return cost

    __call__ = cost
