"""
LEO Mesh Routing Engine

Routing for constellations of mobile network nodes (satellites, ground
stations, relays) whose reachability changes as they move.

Modules:
- core: Topology, link cost, routing, forwarding, handover, statistics
"""

from .core import (
    # Errors
    MeshNetworkError,
    NodeNotFoundError,
    DuplicateNodeError,
    InvalidNodeError,
    NoRouteError,
    TTLExceededError,
    # Config
    MeshConfig,
    load_config,
    # Topology
    NodeType,
    OrbitalPosition,
    Node,
    NodeRegistry,
    NetworkTopology,
    # Routing
    RoutingEntry,
    RoutingTable,
    NetworkPacket,
    # Statistics
    NetworkStatistics,
    StatisticsCollector,
    # Engine
    MeshNetwork,
    run_simulation,
    LinearPropagator,
    build_demo_constellation,
    add_ground_station_network
)

__version__ = "0.1.0"

__all__ = [
    'MeshNetworkError',
    'NodeNotFoundError',
    'DuplicateNodeError',
    'InvalidNodeError',
    'NoRouteError',
    'TTLExceededError',
    'MeshConfig',
    'load_config',
    'NodeType',
    'OrbitalPosition',
    'Node',
    'NodeRegistry',
    'NetworkTopology',
    'RoutingEntry',
    'RoutingTable',
    'NetworkPacket',
    'NetworkStatistics',
    'StatisticsCollector',
    'MeshNetwork',
    'run_simulation',
    'LinearPropagator',
    'build_demo_constellation',
    'add_ground_station_network'
]
