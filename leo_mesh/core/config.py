"""
Configuration Module

Tunable parameters of the mesh routing engine, grouped in a single
dataclass that can be loaded from and saved to JSON.
"""

import json
from dataclasses import dataclass, asdict, fields
from typing import Dict, Optional


@dataclass
class MeshConfig:
    """
    Configuration for a mesh routing engine

    Attributes:
        max_ttl: Initial time-to-live of every packet (hops)
        max_hop_count: Routing table entries must stay below this hop count
        initial_reliability: Reliability of one-hop routing entries
        reliability_decay: Reliability factor applied per additional hop
        type_mismatch_penalty: Cost multiplier for links between node types
        earth_radius_km: Radius used for spherical-to-Cartesian conversion
        speed_of_light_km_s: Propagation speed for transmission delay
        table_refresh_interval: Simulation steps between routing table rebuilds
        battery_drain_per_second: Satellite battery drain per simulated second
        default_priority: Priority assigned to routed packets
        seed: Random seed for packet id generation
    """
    max_ttl: int = 32
    max_hop_count: int = 16
    initial_reliability: float = 0.9
    reliability_decay: float = 0.95
    type_mismatch_penalty: float = 1.5
    earth_radius_km: float = 6371.0
    speed_of_light_km_s: float = 299792.458
    table_refresh_interval: int = 10
    battery_drain_per_second: float = 0.001
    default_priority: int = 1
    seed: Optional[int] = None

    def __post_init__(self):
        if self.max_ttl <= 0:
            raise ValueError(f"max_ttl must be positive, got {self.max_ttl}")
        if self.max_hop_count <= 1:
            raise ValueError(
                f"max_hop_count must be greater than 1, got {self.max_hop_count}"
            )
        for name in ("initial_reliability", "reliability_decay"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if self.table_refresh_interval <= 0:
            raise ValueError(
                "table_refresh_interval must be positive, "
                f"got {self.table_refresh_interval}"
            )
        if self.battery_drain_per_second < 0:
            raise ValueError("battery_drain_per_second must not be negative")

    @classmethod
    def from_dict(cls, data: Dict) -> "MeshConfig":
        """Build a config from a dict, rejecting unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict:
        return asdict(self)

    def save(self, filepath: str):
        """Write config to a JSON file"""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


def load_config(filepath: str) -> MeshConfig:
    """
    Load a MeshConfig from a JSON file

    Args:
        filepath: Path to JSON file with a flat object of config values

    Returns:
        Parsed configuration
    """
    with open(filepath, 'r') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {filepath} must contain a JSON object")
    return MeshConfig.from_dict(data)
