"""
Scenario Builders

Ground station catalog and ready-made constellations for examples and
tests.
"""

from typing import List, Optional, Tuple

from .topology import Node, OrbitalPosition

# (name, latitude, longitude, altitude km)
ESA_GROUND_STATIONS: List[Tuple[str, float, float, float]] = [
    ("ESOC Darmstadt", 49.8728, 8.6512, 0.144),
    ("Kourou", 5.1664, -52.6843, 0.050),
    ("Redu", 50.0019, 5.1456, 0.380),
    ("Kiruna", 67.8558, 20.2253, 0.419),
    ("Malargue", -35.7767, -69.3983, 1.550),
    ("New Norcia", -31.0482, 116.1914, 0.252),
    ("Cebreros", 40.4530, -4.3677, 0.794),
    ("Maspalomas", 27.7628, -15.6338, 0.205),
]

FIRST_GROUND_STATION_ID = 100

BERLIN = (52.5, 13.4)


def add_ground_station_network(
    network,
    count: Optional[int] = None,
    communication_range: Optional[float] = None,
    first_id: int = FIRST_GROUND_STATION_ID
) -> List[int]:
    """
    Add stations from the catalog with consecutive ids

    Args:
        network: MeshNetwork to populate
        count: Number of stations (all if None)
        communication_range: Override of the ground station default range
        first_id: Id of the first station

    Returns:
        Ids of the added stations
    """
    if count is None:
        count = len(ESA_GROUND_STATIONS)
    added = []
    for i, (_, lat, lon, alt) in enumerate(ESA_GROUND_STATIONS[:count]):
        station_id = first_id + i
        network.add_node(Node.ground_station(
            station_id, lat, lon, altitude=alt,
            communication_range=communication_range
        ))
        added.append(station_id)
    return added


def build_demo_constellation(
    network,
    num_satellites: int = 5,
    altitude_km: float = 400.0,
    communication_range: float = 1500.0
) -> List[int]:
    """
    Satellites strung out towards a ground station in Berlin

    Satellite i (from 1) sits at latitude 44 + 2(i-1), longitude
    5 + 2(i-1), so neighbors are a few hundred km apart and the last one
    passes close to the station (id 100).

    Returns:
        Satellite ids
    """
    satellite_ids = []
    for i in range(1, num_satellites + 1):
        position = OrbitalPosition(
            latitude=44.0 + 2.0 * (i - 1),
            longitude=5.0 + 2.0 * (i - 1),
            altitude=altitude_km,
            velocity=(7.66, 0.0, 0.0)
        )
        network.add_node(Node.satellite(i, position, communication_range=communication_range))
        satellite_ids.append(i)

    network.add_node(Node.ground_station(FIRST_GROUND_STATION_ID, *BERLIN))
    return satellite_ids
