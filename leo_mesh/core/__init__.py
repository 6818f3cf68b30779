"""
LEO Mesh Routing - Core Module

This module contains the core components of the mesh routing engine:
- Topology: Node model, registry and neighbor discovery
- Cost: Multi-factor link cost model
- Routing: On-demand route search and distance-vector table
- Traffic: Packets and hop-by-hop forwarding
- Handover: Ground station selection
- Statistics: Counters and history
- Simulator: Engine facade and simulation driver
- Visualization: Plotting tools
"""

from .errors import (
    MeshNetworkError,
    NodeNotFoundError,
    DuplicateNodeError,
    InvalidNodeError,
    NoRouteError,
    TTLExceededError
)

from .config import MeshConfig, load_config

from .topology import (
    NodeType,
    OrbitalPosition,
    Node,
    NodeRegistry,
    NetworkTopology,
    calculate_distance,
    to_cartesian
)

from .cost import LinkCostModel

from .routing import (
    RoutingEntry,
    RoutingTable,
    RouteFinder,
    build_routing_table
)

from .traffic import NetworkPacket, PacketForwarder

from .handover import HandoverSelector

from .statistics import NetworkStatistics, StatisticsCollector

from .simulator import MeshNetwork, run_simulation

from .propagation import PositionUpdate, LinearPropagator

from .scenario import (
    ESA_GROUND_STATIONS,
    add_ground_station_network,
    build_demo_constellation
)

from .visualization import (
    plot_topology_2d,
    plot_statistics,
    save_all_plots
)

__all__ = [
    # Errors
    'MeshNetworkError',
    'NodeNotFoundError',
    'DuplicateNodeError',
    'InvalidNodeError',
    'NoRouteError',
    'TTLExceededError',
    # Config
    'MeshConfig',
    'load_config',
    # Topology
    'NodeType',
    'OrbitalPosition',
    'Node',
    'NodeRegistry',
    'NetworkTopology',
    'calculate_distance',
    'to_cartesian',
    # Cost
    'LinkCostModel',
    # Routing
    'RoutingEntry',
    'RoutingTable',
    'RouteFinder',
    'build_routing_table',
    # Traffic
    'NetworkPacket',
    'PacketForwarder',
    # Handover
    'HandoverSelector',
    # Statistics
    'NetworkStatistics',
    'StatisticsCollector',
    # Simulator
    'MeshNetwork',
    'run_simulation',
    # Propagation
    'PositionUpdate',
    'LinearPropagator',
    # Scenarios
    'ESA_GROUND_STATIONS',
    'add_ground_station_network',
    'build_demo_constellation',
    # Visualization
    'plot_topology_2d',
    'plot_statistics',
    'save_all_plots'
]
