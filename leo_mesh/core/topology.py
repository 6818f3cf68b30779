"""
Mesh Network Topology Module

This module provides the node model of a mobile mesh constellation
(satellites, ground stations, relays), the registry that owns the nodes,
and the topology builder that derives neighbor sets, link quality and
connectivity from current node positions.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Tuple

import networkx as nx
import numpy as np

from .errors import DuplicateNodeError, NodeNotFoundError

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


class NodeType(Enum):
    """Type of mesh node"""
    SATELLITE = "satellite"
    GROUND_STATION = "ground_station"
    RELAY = "relay"


# Per-type constants
DEFAULT_RANGE_KM: Dict[NodeType, float] = {
    NodeType.SATELLITE: 1000.0,
    NodeType.GROUND_STATION: 5000.0,   # Extended range for ground stations
    NodeType.RELAY: 1500.0,
}

PROCESSING_DELAY_S: Dict[NodeType, float] = {
    NodeType.SATELLITE: 0.001,       # 1ms
    NodeType.GROUND_STATION: 0.005,  # 5ms
    NodeType.RELAY: 0.002,           # 2ms
}


@dataclass
class OrbitalPosition:
    """
    Geographic position of a node

    Attributes:
        latitude: Latitude in degrees
        longitude: Longitude in degrees
        altitude: Altitude above Earth surface in km
        velocity: (vx, vy, vz) in km/s
    """
    latitude: float
    longitude: float
    altitude: float = 0.0
    velocity: Tuple[float, float, float] = (0.0, 0.0, 0.0)


def to_cartesian(
    position: OrbitalPosition,
    earth_radius_km: float = EARTH_RADIUS_KM
) -> Tuple[float, float, float]:
    """Convert a geographic position to Earth-centered Cartesian km"""
    r = earth_radius_km + position.altitude
    lat_rad = math.radians(position.latitude)
    lon_rad = math.radians(position.longitude)
    x = r * math.cos(lat_rad) * math.cos(lon_rad)
    y = r * math.cos(lat_rad) * math.sin(lon_rad)
    z = r * math.sin(lat_rad)
    return x, y, z


def calculate_distance(
    pos1: OrbitalPosition,
    pos2: OrbitalPosition,
    earth_radius_km: float = EARTH_RADIUS_KM
) -> float:
    """
    Calculate 3D straight-line distance between two positions

    Args:
        pos1: First position
        pos2: Second position
        earth_radius_km: Earth radius used for the conversion

    Returns:
        Distance in km
    """
    x1, y1, z1 = to_cartesian(pos1, earth_radius_km)
    x2, y2, z2 = to_cartesian(pos2, earth_radius_km)
    return math.sqrt((x2 - x1)**2 + (y2 - y1)**2 + (z2 - z1)**2)


@dataclass
class Node:
    """
    Represents a mesh network node

    Attributes:
        node_id: Unique identifier
        node_type: Satellite, ground station or relay
        position: Current geographic position
        communication_range: Maximum link distance in km (type default if None)
        is_active: Inactive nodes take part in no links
        last_seen: Timestamp of the last position update
        battery_level: Remaining battery in [0, 1]
        neighbors: Node ids in mutual range as of the last topology rebuild
    """
    node_id: int
    node_type: NodeType
    position: OrbitalPosition
    communication_range: Optional[float] = None
    is_active: bool = True
    last_seen: float = 0.0
    battery_level: float = 1.0

    # Derived state, recomputed by the topology builder
    neighbors: Set[int] = field(default_factory=set)

    def __post_init__(self):
        if self.communication_range is None:
            self.communication_range = DEFAULT_RANGE_KM[self.node_type]
        if self.communication_range < 0:
            raise ValueError(
                f"Node {self.node_id}: communication range must not be negative"
            )
        if not 0.0 <= self.battery_level <= 1.0:
            raise ValueError(
                f"Node {self.node_id}: battery level must be in [0, 1]"
            )
        # Ground stations are mains powered
        if self.node_type == NodeType.GROUND_STATION:
            self.battery_level = 1.0

    @property
    def is_ground_station(self) -> bool:
        return self.node_type == NodeType.GROUND_STATION

    @property
    def processing_delay(self) -> float:
        """Per-hop processing delay in seconds when this node receives"""
        return PROCESSING_DELAY_S[self.node_type]

    @classmethod
    def satellite(
        cls,
        node_id: int,
        position: OrbitalPosition,
        communication_range: Optional[float] = None,
        battery_level: float = 1.0
    ) -> "Node":
        return cls(
            node_id=node_id,
            node_type=NodeType.SATELLITE,
            position=position,
            communication_range=communication_range,
            battery_level=battery_level
        )

    @classmethod
    def ground_station(
        cls,
        node_id: int,
        latitude: float,
        longitude: float,
        altitude: float = 0.0,
        communication_range: Optional[float] = None
    ) -> "Node":
        return cls(
            node_id=node_id,
            node_type=NodeType.GROUND_STATION,
            position=OrbitalPosition(latitude, longitude, altitude),
            communication_range=communication_range
        )

    @classmethod
    def relay(
        cls,
        node_id: int,
        position: OrbitalPosition,
        communication_range: Optional[float] = None,
        battery_level: float = 1.0
    ) -> "Node":
        return cls(
            node_id=node_id,
            node_type=NodeType.RELAY,
            position=position,
            communication_range=communication_range,
            battery_level=battery_level
        )


class NodeRegistry:
    """
    Owns all node records of a mesh network

    Node ids are unique; every lookup of an unknown id raises
    NodeNotFoundError.
    """

    def __init__(self):
        self._nodes: Dict[int, Node] = {}

    def add(self, node: Node):
        if node.node_id in self._nodes:
            raise DuplicateNodeError(node.node_id)
        self._nodes[node.node_id] = node

    def remove(self, node_id: int) -> Node:
        node = self._nodes.pop(node_id, None)
        if node is None:
            raise NodeNotFoundError(node_id)
        # Drop dangling neighbor references until the next rebuild
        for other in self._nodes.values():
            other.neighbors.discard(node_id)
        return node

    def get(self, node_id: int) -> Node:
        node = self._nodes.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def find(self, node_id: int) -> Optional[Node]:
        """Return the node or None, without raising"""
        return self._nodes.get(node_id)

    def ids(self) -> List[int]:
        """All node ids in ascending order"""
        return sorted(self._nodes)

    def of_type(self, node_type: NodeType) -> List[Node]:
        """Nodes of one type, ordered by id"""
        return [
            self._nodes[node_id] for node_id in self.ids()
            if self._nodes[node_id].node_type == node_type
        ]

    def ground_station_ids(self) -> List[int]:
        return [n.node_id for n in self.of_type(NodeType.GROUND_STATION)]

    def __contains__(self, node_id) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter([self._nodes[node_id] for node_id in self.ids()])

    def __len__(self) -> int:
        return len(self._nodes)


class NetworkTopology:
    """
    Topology derived from node positions and communication ranges

    Holds a directed NetworkX graph whose edges are the in-range ordered
    node pairs, with `link_quality` and `distance_km` attributes. The graph
    is rebuilt from scratch on request, never patched incrementally.
    """

    def __init__(
        self,
        registry: NodeRegistry,
        earth_radius_km: float = EARTH_RADIUS_KM
    ):
        """
        Initialize topology

        Args:
            registry: Node registry the topology is derived from
            earth_radius_km: Earth radius used for distance calculation
        """
        self.registry = registry
        self.earth_radius_km = earth_radius_km
        self.graph: nx.DiGraph = nx.DiGraph()

    def distance(self, node_a: int, node_b: int) -> float:
        """Distance in km between two registered nodes"""
        a = self.registry.get(node_a)
        b = self.registry.get(node_b)
        return calculate_distance(a.position, b.position, self.earth_radius_km)

    def _compute_links(self) -> Tuple[List[int], np.ndarray, np.ndarray, np.ndarray]:
        """
        Compute pairwise distances and the in-range mask

        Returns:
            (node ids, distance matrix, max range matrix, in-range mask)
        """
        ids = self.registry.ids()
        nodes = [self.registry.get(node_id) for node_id in ids]

        coords = np.array(
            [to_cartesian(n.position, self.earth_radius_km) for n in nodes],
            dtype=float
        ).reshape(-1, 3)
        diff = coords[:, np.newaxis, :] - coords[np.newaxis, :, :]
        distances = np.sqrt((diff ** 2).sum(axis=-1))

        ranges = np.array([n.communication_range for n in nodes], dtype=float)
        max_range = np.minimum.outer(ranges, ranges)

        active = np.array([n.is_active for n in nodes], dtype=bool)
        in_range = (distances <= max_range) & np.logical_and.outer(active, active)
        np.fill_diagonal(in_range, False)

        return ids, distances, max_range, in_range

    def discover_neighbors(self):
        """Recompute every node's neighbor set from current positions"""
        ids, _, _, in_range = self._compute_links()
        self._assign_neighbors(ids, in_range)

        total = sum(len(n.neighbors) for n in self.registry)
        logger.info("Neighbor discovery completed. Found %d total connections", total)

    def _assign_neighbors(self, ids: List[int], in_range: np.ndarray):
        for i, node_id in enumerate(ids):
            node = self.registry.get(node_id)
            node.neighbors = {ids[j] for j in np.flatnonzero(in_range[i])}

    def rebuild(self):
        """Recompute neighbor sets, adjacency and connectivity"""
        ids, distances, max_range, in_range = self._compute_links()
        self._assign_neighbors(ids, in_range)

        self.graph.clear()
        for node_id in ids:
            node = self.registry.get(node_id)
            self.graph.add_node(
                node_id,
                type=node.node_type,
                position=node.position
            )

        for i, j in zip(*np.nonzero(in_range)):
            limit = max_range[i, j]
            distance_km = float(distances[i, j])
            quality = 1.0 - distance_km / limit if limit > 0 else 1.0
            self.graph.add_edge(
                ids[i],
                ids[j],
                link_quality=max(0.1, quality),
                distance_km=distance_km
            )

        logger.debug(
            "Topology rebuilt: %d nodes, %d directed links",
            self.graph.number_of_nodes(),
            self.graph.number_of_edges()
        )

    @property
    def adjacency(self) -> Dict[Tuple[int, int], float]:
        """Ordered node pair -> link quality"""
        return {
            (u, v): data["link_quality"]
            for u, v, data in self.graph.edges(data=True)
        }

    @property
    def connectivity(self) -> Dict[int, Set[int]]:
        """Node -> set of reachable neighbor ids"""
        return {
            node_id: set(self.graph.successors(node_id))
            for node_id in self.graph.nodes()
        }

    def link_quality(self, node_a: int, node_b: int) -> Optional[float]:
        """Link quality of an existing link, or None"""
        if self.graph.has_edge(node_a, node_b):
            return self.graph.edges[node_a, node_b]["link_quality"]
        return None

    def neighbors(self, node_id: int) -> List[int]:
        """Neighbor ids of a node, ascending"""
        return sorted(self.registry.get(node_id).neighbors)

    def utilization(self) -> float:
        """Fraction of possible directed links that currently exist"""
        n = self.graph.number_of_nodes()
        if n < 2:
            return 0.0
        return self.graph.number_of_edges() / (n * (n - 1))

    def is_connected(self) -> bool:
        """Whether every node can reach every other node"""
        if self.graph.number_of_nodes() == 0:
            return True
        return nx.is_strongly_connected(self.graph)

    def __repr__(self):
        return (f"NetworkTopology(nodes={self.graph.number_of_nodes()}, "
                f"links={self.graph.number_of_edges()})")
