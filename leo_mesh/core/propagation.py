"""
Position Propagation

A simple stand-in for an orbital propagator. It produces per-tick position
updates from each node's velocity and hands them to the engine through
update_node_position, which is the only way node positions change.
"""

from dataclasses import dataclass
from typing import List, Optional, Set

from .topology import NodeType, OrbitalPosition

KM_PER_DEGREE = 111.0  # Rough surface distance per degree


@dataclass
class PositionUpdate:
    """One entry of the position feed"""
    node_id: int
    position: OrbitalPosition


def _wrap_longitude(lon: float) -> float:
    return (lon + 180.0) % 360.0 - 180.0


class LinearPropagator:
    """
    Dead-reckoning position feed

    Latitude and longitude advance by velocity * dt / 111 degrees, altitude
    by vz * dt. Only moves node types listed in `moving_types`.
    """

    def __init__(self, moving_types: Optional[Set[NodeType]] = None):
        self.moving_types = moving_types or {NodeType.SATELLITE}

    def propagate(self, network, dt: float) -> List[PositionUpdate]:
        """Compute the updates for one tick without applying them"""
        updates = []
        for node in network.nodes:
            if node.node_type not in self.moving_types:
                continue
            pos = node.position
            vx, vy, vz = pos.velocity
            latitude = min(90.0, max(-90.0, pos.latitude + vx * dt / KM_PER_DEGREE))
            longitude = _wrap_longitude(pos.longitude + vy * dt / KM_PER_DEGREE)
            altitude = max(0.0, pos.altitude + vz * dt)
            updates.append(PositionUpdate(
                node_id=node.node_id,
                position=OrbitalPosition(latitude, longitude, altitude, pos.velocity)
            ))
        return updates

    def step(self, network, dt: float) -> List[PositionUpdate]:
        """Compute and apply one tick of updates"""
        updates = self.propagate(network, dt)
        for update in updates:
            network.update_node_position(update.node_id, update.position)
        return updates
