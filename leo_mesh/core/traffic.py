"""
Packet Forwarding Module

This module provides the network packet model and the forwarder that
simulates hop-by-hop transit of a message along a freshly computed route,
applying TTL and transmission delay.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from .errors import MeshNetworkError, TTLExceededError
from .routing import RouteFinder
from .statistics import StatisticsCollector
from .topology import NodeRegistry, calculate_distance, EARTH_RADIUS_KM

logger = logging.getLogger(__name__)

SPEED_OF_LIGHT_KM_S = 299792.458


@dataclass
class NetworkPacket:
    """
    Represents a packet routed through the mesh

    Attributes:
        packet_id: Unique packet identifier
        source: Source node ID
        destination: Destination node ID
        next_hop: Node the packet is currently sent to
        ttl: Remaining hop budget
        priority: Packet priority
        timestamp: Creation time
        payload: Opaque payload bytes
        route_history: Visited node ids, source first
    """
    packet_id: int
    source: int
    destination: int
    next_hop: Optional[int] = None
    ttl: int = 32
    priority: int = 1
    timestamp: float = 0.0
    payload: bytes = b""
    route_history: List[int] = field(default_factory=list)

    # Runtime state
    latency: float = 0.0  # seconds accumulated in transit

    def __post_init__(self):
        if not self.route_history:
            self.route_history = [self.source]

    @property
    def hops_taken(self) -> int:
        return len(self.route_history) - 1

    def has_reached_destination(self) -> bool:
        return self.route_history[-1] == self.destination


class PacketForwarder:
    """
    Simulates delivery of packets over routes found by a RouteFinder

    Drops (no route, TTL exceeded) and deliveries are recorded in the
    owning engine's StatisticsCollector.
    """

    def __init__(
        self,
        registry: NodeRegistry,
        route_finder: RouteFinder,
        stats: StatisticsCollector,
        max_ttl: int = 32,
        default_priority: int = 1,
        speed_of_light_km_s: float = SPEED_OF_LIGHT_KM_S,
        earth_radius_km: float = EARTH_RADIUS_KM,
        seed: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Initialize forwarder

        Args:
            registry: Node registry
            route_finder: Route finder used for every message
            stats: Statistics collector to update
            max_ttl: Initial TTL of new packets
            default_priority: Priority of new packets
            speed_of_light_km_s: Signal propagation speed
            earth_radius_km: Earth radius for distance calculation
            seed: Random seed for packet ids
            clock: Time source for packet timestamps
        """
        self.registry = registry
        self.route_finder = route_finder
        self.stats = stats
        self.max_ttl = max_ttl
        self.default_priority = default_priority
        self.speed_of_light_km_s = speed_of_light_km_s
        self.earth_radius_km = earth_radius_km
        self.rng = np.random.default_rng(seed)
        self.clock = clock or (lambda: 0.0)

    def create_packet(
        self,
        source: int,
        destination: int,
        payload: bytes = b""
    ) -> NetworkPacket:
        """Build a new packet with a random 32-bit id"""
        return NetworkPacket(
            packet_id=int(self.rng.integers(0, 2**32)),
            source=source,
            destination=destination,
            ttl=self.max_ttl,
            priority=self.default_priority,
            timestamp=self.clock(),
            payload=bytes(payload),
            route_history=[source]
        )

    def transmission_delay(self, from_node: int, to_node: int) -> float:
        """
        Per-hop delay in seconds

        Propagation delay over the straight-line distance plus the
        processing delay of the receiving node's type.
        """
        a = self.registry.get(from_node)
        b = self.registry.get(to_node)
        distance = calculate_distance(a.position, b.position, self.earth_radius_km)
        return distance / self.speed_of_light_km_s + b.processing_delay

    def forward_packet(self, packet: NetworkPacket, route: List[int]) -> NetworkPacket:
        """
        Walk a packet along a route

        Args:
            packet: Packet positioned at its source
            route: Hop ids excluding the source

        Returns:
            The delivered packet

        Raises:
            NodeNotFoundError: a hop is not registered
            TTLExceededError: hop budget ran out before the destination
        """
        # Validate every hop before touching the packet
        self.registry.get(packet.source)
        for hop in route:
            self.registry.get(hop)

        current = packet.source
        for i, hop in enumerate(route):
            packet.next_hop = hop
            delay = self.transmission_delay(current, hop)
            packet.latency += delay
            packet.route_history.append(hop)
            packet.ttl -= 1

            logger.debug(
                "Forwarding packet %d to node %d (delay: %.2fms)",
                packet.packet_id, hop, delay * 1000.0
            )

            if packet.ttl <= 0 and i < len(route) - 1:
                logger.warning("Packet %d exceeded TTL", packet.packet_id)
                self.stats.record_packet_dropped()
                raise TTLExceededError(packet.packet_id, packet.hops_taken)

            current = hop

        self.stats.record_packet_routed(len(route), packet.latency)
        return packet

    def route_message(
        self,
        source: int,
        destination: int,
        payload: bytes = b""
    ) -> bool:
        """
        Route a message from source to destination

        Returns:
            True if delivered, False if dropped (no route, TTL exceeded or
            unknown endpoint)
        """
        packet = self.create_packet(source, destination, payload)

        try:
            route = self.route_finder.find_route(source, destination)
        except MeshNetworkError as e:
            logger.warning("No route found from %s to %s: %s", source, destination, e)
            self.stats.record_packet_dropped()
            return False

        try:
            self.forward_packet(packet, route)
        except TTLExceededError:
            return False

        logger.info(
            "Successfully routed message from %d to %d via %d hops",
            source, destination, len(route)
        )
        return True
