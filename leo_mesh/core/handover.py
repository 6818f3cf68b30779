"""
Ground Station Handover

Chooses the ground station a satellite should hand over to, based on
signal quality relative to each station's range.
"""

import logging
from typing import Optional, Tuple

from .errors import InvalidNodeError
from .statistics import StatisticsCollector
from .topology import NodeRegistry, NodeType, calculate_distance, EARTH_RADIUS_KM

logger = logging.getLogger(__name__)


class HandoverSelector:
    """Selects the best ground station for a satellite"""

    def __init__(
        self,
        registry: NodeRegistry,
        stats: StatisticsCollector,
        earth_radius_km: float = EARTH_RADIUS_KM
    ):
        self.registry = registry
        self.stats = stats
        self.earth_radius_km = earth_radius_km

    def best_station(self, satellite_id: int) -> Optional[Tuple[int, float]]:
        """
        Find the eligible ground station with the highest signal quality

        A station is eligible when the satellite is within the station's
        range; quality is max(0, 1 - distance / range). Ties go to the
        lowest station id. Does not touch statistics.

        Returns:
            (station id, signal quality), or None if no station is eligible
        """
        satellite = self.registry.get(satellite_id)
        if satellite.node_type != NodeType.SATELLITE:
            raise InvalidNodeError(f"Node {satellite_id} is not a satellite")

        best = None
        for station in self.registry.of_type(NodeType.GROUND_STATION):
            if not station.is_active:
                continue
            distance = calculate_distance(
                satellite.position, station.position, self.earth_radius_km
            )
            if distance > station.communication_range:
                continue
            if station.communication_range > 0:
                quality = max(0.0, 1.0 - distance / station.communication_range)
            else:
                quality = 1.0
            if best is None or quality > best[1]:
                best = (station.node_id, quality)
        return best

    def select_ground_station(self, satellite_id: int) -> Optional[int]:
        """
        Select the ground station for a satellite handover

        Raises:
            NodeNotFoundError: satellite_id is not registered
            InvalidNodeError: the node is not a satellite

        Returns:
            Station id, or None when no station is in range
        """
        best = self.best_station(satellite_id)
        if best is None:
            logger.info("No ground station in range of satellite %d", satellite_id)
            return None

        station_id, quality = best
        self.stats.record_handover()
        logger.info(
            "Handover completed: satellite %d -> ground station %d (quality: %.2f)",
            satellite_id, station_id, quality
        )
        return station_id
