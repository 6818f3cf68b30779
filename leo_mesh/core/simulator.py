"""
Mesh Network Engine Module

This module provides the MeshNetwork engine that owns the node registry,
topology, routing table and statistics of one constellation, and the
driver that advances it through simulated time.
"""

import logging
import threading
from typing import Callable, List, Optional

from tqdm import tqdm

from .config import MeshConfig
from .cost import LinkCostModel
from .handover import HandoverSelector
from .routing import RouteFinder, RoutingTable, build_routing_table
from .statistics import NetworkStatistics, StatisticsCollector
from .topology import Node, NodeRegistry, NodeType, NetworkTopology, OrbitalPosition
from .traffic import NetworkPacket, PacketForwarder

logger = logging.getLogger(__name__)


class MeshNetwork:
    """
    Mesh routing engine for a mobile constellation

    Coordinates neighbor discovery, the link cost model, on-demand route
    search, the distance-vector reliability table, packet forwarding and
    ground station handover. All public operations run to completion
    synchronously; mutating operations are serialized behind one lock so
    an instance may be shared between threads.
    """

    def __init__(
        self,
        config: Optional[MeshConfig] = None,
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Initialize engine

        Args:
            config: Engine configuration (defaults if None)
            clock: Time source for timestamps; simulated time if None
        """
        self.config = config or MeshConfig()
        self._clock = clock
        self._lock = threading.RLock()

        # Simulation state
        self.current_time: float = 0.0
        self.step_count: int = 0

        self.registry = NodeRegistry()
        self.topology = NetworkTopology(
            self.registry, earth_radius_km=self.config.earth_radius_km
        )
        self.routing_table = RoutingTable()
        self.cost_model = LinkCostModel(
            self.registry,
            reliability=self.routing_table,
            type_mismatch_penalty=self.config.type_mismatch_penalty,
            earth_radius_km=self.config.earth_radius_km
        )
        self.route_finder = RouteFinder(self.registry, self.cost_model.cost)
        self.stats = StatisticsCollector()
        self.forwarder = PacketForwarder(
            self.registry,
            self.route_finder,
            self.stats,
            max_ttl=self.config.max_ttl,
            default_priority=self.config.default_priority,
            speed_of_light_km_s=self.config.speed_of_light_km_s,
            earth_radius_km=self.config.earth_radius_km,
            seed=self.config.seed,
            clock=self.now
        )
        self.handover = HandoverSelector(
            self.registry, self.stats, earth_radius_km=self.config.earth_radius_km
        )

    def now(self) -> float:
        """Current timestamp from the clock, or simulated time"""
        if self._clock is not None:
            return self._clock()
        return self.current_time

    # ------------------------------------------------------------------
    # Node lifecycle
    # ------------------------------------------------------------------

    def add_node(self, node: Node, rebuild: bool = False):
        """
        Add a node to the mesh

        Args:
            node: Node record; its id must be unique
            rebuild: Rebuild topology immediately
        """
        with self._lock:
            self.registry.add(node)
            node.last_seen = self.now()
            if rebuild:
                self.rebuild_topology()
            logger.info("Added node %d (%s) to mesh network", node.node_id, node.node_type.value)

    def remove_node(self, node_id: int) -> Node:
        """
        Remove a node, purge routes through it and rebuild topology

        Raises:
            NodeNotFoundError: node_id is not registered
        """
        with self._lock:
            node = self.registry.remove(node_id)
            purged = self.routing_table.purge(node_id)
            self.rebuild_topology()
            logger.info(
                "Removed node %d from mesh network (%d routes purged)",
                node_id, purged
            )
            return node

    def get_node(self, node_id: int) -> Node:
        return self.registry.get(node_id)

    @property
    def nodes(self) -> List[Node]:
        return list(self.registry)

    @property
    def ground_stations(self) -> List[int]:
        return self.registry.ground_station_ids()

    def update_node_position(
        self,
        node_id: int,
        position: OrbitalPosition,
        rebuild: bool = False
    ):
        """
        Apply a position from the external propagator

        Raises:
            NodeNotFoundError: node_id is not registered
        """
        with self._lock:
            node = self.registry.get(node_id)
            node.position = position
            node.last_seen = self.now()
            if rebuild:
                self.rebuild_topology()
            logger.debug("Updated position for node %d", node_id)

    # ------------------------------------------------------------------
    # Topology and routing table
    # ------------------------------------------------------------------

    def initialize_routing(self):
        """Run neighbor discovery and build the initial routing table"""
        with self._lock:
            logger.info("Initializing mesh network routing")
            self.rebuild_topology()
            self.rebuild_routing_table()
            for node in self.registry.of_type(NodeType.GROUND_STATION):
                # Always powered
                node.battery_level = 1.0
                logger.info(
                    "Initialized ground station %d with %.0f km range",
                    node.node_id, node.communication_range
                )

    def discover_neighbors(self):
        with self._lock:
            self.topology.discover_neighbors()

    def rebuild_topology(self):
        with self._lock:
            self.topology.rebuild()
            self.stats.set_network_utilization(self.topology.utilization())

    def rebuild_routing_table(self):
        """Rebuild the distance-vector table from current neighbor sets"""
        with self._lock:
            # Costs are evaluated against the previous table until the swap
            entries = build_routing_table(
                self.registry,
                self.cost_model.cost,
                timestamp=self.now(),
                max_hop_count=self.config.max_hop_count,
                initial_reliability=self.config.initial_reliability,
                reliability_decay=self.config.reliability_decay
            )
            self.routing_table.replace(entries)

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def find_route(self, source: int, destination: int) -> List[int]:
        """
        Cheapest hop sequence from source (excluded) to destination

        Raises:
            NodeNotFoundError: unknown endpoint
            NoRouteError: destination unreachable
        """
        with self._lock:
            return self.route_finder.find_route(source, destination)

    def forward_packet(self, packet: NetworkPacket, route: List[int]) -> NetworkPacket:
        """
        Forward a packet along a route

        Raises:
            TTLExceededError: hop budget exhausted (counted as dropped)
        """
        with self._lock:
            return self.forwarder.forward_packet(packet, route)

    def route_message(self, source: int, destination: int, payload: bytes = b"") -> bool:
        """Route a message; True if delivered, False if dropped"""
        with self._lock:
            return self.forwarder.route_message(source, destination, payload)

    def select_ground_station(self, satellite_id: int) -> Optional[int]:
        """
        Best ground station for a satellite, or None if none in range

        Raises:
            NodeNotFoundError: unknown satellite id
            InvalidNodeError: node is not a satellite
        """
        with self._lock:
            return self.handover.select_ground_station(satellite_id)

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def simulate_step(self, delta_time: float):
        """
        Advance simulated time by delta_time seconds

        Drains satellite batteries, rebuilds topology, periodically
        rebuilds the routing table and records a statistics row. Node
        positions are left to the external propagator.
        """
        if delta_time < 0:
            raise ValueError(f"delta_time must not be negative, got {delta_time}")

        with self._lock:
            self.current_time += delta_time
            self.step_count += 1

            drain = self.config.battery_drain_per_second * delta_time
            for node in self.registry.of_type(NodeType.SATELLITE):
                if node.is_active:
                    node.battery_level = max(0.0, node.battery_level - drain)

            self.rebuild_topology()

            if self.step_count % self.config.table_refresh_interval == 0:
                self.rebuild_routing_table()

            self.stats.take_snapshot(
                self.current_time,
                additional_data={"routing_entries": len(self.routing_table)}
            )

    def get_statistics(self) -> NetworkStatistics:
        """Immutable snapshot of the engine's statistics"""
        with self._lock:
            return self.stats.snapshot()

    def __repr__(self):
        return (f"MeshNetwork(nodes={len(self.registry)}, "
                f"ground_stations={len(self.ground_stations)}, "
                f"routes={len(self.routing_table)})")


def run_simulation(
    network: MeshNetwork,
    duration: float,
    time_step: float = 1.0,
    propagator=None,
    progress_bar: bool = True
) -> StatisticsCollector:
    """
    Drive a network through simulated time

    Args:
        network: Engine to advance
        duration: Simulation duration in seconds
        time_step: Step length in seconds
        propagator: Optional position source with a step(network, dt) method,
            applied before every engine step
        progress_bar: Show progress bar

    Returns:
        The engine's statistics collector
    """
    if time_step <= 0:
        raise ValueError(f"time_step must be positive, got {time_step}")

    num_steps = int(round(duration / time_step))

    iterator = range(num_steps)
    if progress_bar:
        iterator = tqdm(iterator, desc="Simulating", unit="step")

    for _ in iterator:
        if propagator is not None:
            propagator.step(network, time_step)
        network.simulate_step(time_step)

    return network.stats
