"""
Statistics Collection Module

This module provides the network statistics snapshot exposed to callers
and the collector that the engine updates as packets are routed, dropped
and handed over.
"""

import json
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class NetworkStatistics:
    """
    Immutable snapshot of network statistics

    Attributes:
        packets_routed: Packets delivered to their destination
        packets_dropped: Packets dropped (no route or TTL exceeded)
        average_hop_count: Running mean of hops per delivered packet
        handovers_completed: Successful ground station selections
        total_latency: Accumulated transit latency of delivered packets (s)
        network_utilization: Fraction of possible directed links present
    """
    packets_routed: int = 0
    packets_dropped: int = 0
    average_hop_count: float = 0.0
    handovers_completed: int = 0
    total_latency: float = 0.0
    network_utilization: float = 0.0

    def to_dict(self) -> Dict:
        return asdict(self)


class StatisticsCollector:
    """
    Collects statistics for one engine instance

    Counters only grow; the average hop count is a running mean. A history
    row is appended for every simulation step.
    """

    def __init__(self):
        """Initialize statistics collector"""
        self.packets_routed: int = 0
        self.packets_dropped: int = 0
        self.average_hop_count: float = 0.0
        self.handovers_completed: int = 0
        self.total_latency: float = 0.0
        self.network_utilization: float = 0.0

        # Per-packet latency samples for percentile reporting
        self.latencies: List[float] = []

        # Snapshot storage
        self.snapshots: List[Dict] = []

    def record_packet_routed(self, hop_count: int, latency: float):
        """Record successful packet delivery"""
        self.packets_routed += 1
        n = self.packets_routed
        self.average_hop_count = (self.average_hop_count * (n - 1) + hop_count) / n
        self.total_latency += latency
        self.latencies.append(latency)

    def record_packet_dropped(self):
        """Record packet drop"""
        self.packets_dropped += 1

    def record_handover(self):
        self.handovers_completed += 1

    def set_network_utilization(self, utilization: float):
        self.network_utilization = utilization

    def get_delivery_rate(self) -> float:
        """Fraction of routing attempts that were delivered"""
        total = self.packets_routed + self.packets_dropped
        if total == 0:
            return 0.0
        return self.packets_routed / total

    def get_average_latency(self) -> float:
        """Average latency per delivered packet in seconds"""
        if self.packets_routed == 0:
            return 0.0
        return self.total_latency / self.packets_routed

    def get_latency_percentile(self, p: float) -> float:
        if not self.latencies:
            return 0.0
        return float(np.percentile(self.latencies, p))

    def snapshot(self) -> NetworkStatistics:
        """Immutable copy of the current counters"""
        return NetworkStatistics(
            packets_routed=self.packets_routed,
            packets_dropped=self.packets_dropped,
            average_hop_count=self.average_hop_count,
            handovers_completed=self.handovers_completed,
            total_latency=self.total_latency,
            network_utilization=self.network_utilization
        )

    def take_snapshot(self, timestamp: float, additional_data: Optional[Dict] = None):
        """
        Append a history row for the current counters

        Args:
            timestamp: Current simulation time
            additional_data: Additional data to include in the row
        """
        row = {"timestamp": timestamp}
        row.update(self.snapshot().to_dict())
        row["delivery_rate"] = self.get_delivery_rate()
        if additional_data:
            row.update(additional_data)
        self.snapshots.append(row)

    def get_summary(self) -> Dict:
        """Get comprehensive statistics summary"""
        return {
            "overview": {
                "packets_routed": self.packets_routed,
                "packets_dropped": self.packets_dropped,
                "delivery_rate": self.get_delivery_rate(),
                "average_hop_count": self.average_hop_count,
                "handovers_completed": self.handovers_completed,
                "network_utilization": self.network_utilization,
            },
            "latency": {
                "total_s": self.total_latency,
                "avg_ms": self.get_average_latency() * 1000.0,
                "p50_ms": self.get_latency_percentile(50) * 1000.0,
                "p95_ms": self.get_latency_percentile(95) * 1000.0,
                "max_ms": max(self.latencies) * 1000.0 if self.latencies else 0.0,
            },
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Convert snapshot history to a DataFrame"""
        return pd.DataFrame(self.snapshots)

    def save_to_json(self, filepath: str):
        """Save summary and history to a JSON file"""

        def convert_numpy(obj):
            if isinstance(obj, np.integer):
                return int(obj)
            if isinstance(obj, np.floating):
                return float(obj)
            if isinstance(obj, np.ndarray):
                return obj.tolist()
            raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

        data = {
            "summary": self.get_summary(),
            "snapshots": self.snapshots,
        }
        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2, default=convert_numpy)

    def print_summary(self):
        """Print statistics summary"""
        summary = self.get_summary()

        print("\n" + "="*60)
        print("MESH NETWORK STATISTICS SUMMARY")
        print("="*60)

        print("\n--- Overview ---")
        for key, value in summary["overview"].items():
            if isinstance(value, float):
                print(f"  {key}: {value:.4f}")
            else:
                print(f"  {key}: {value}")

        print("\n--- Latency (ms) ---")
        print(f"  Average: {summary['latency']['avg_ms']:.2f}")
        print(f"  P50: {summary['latency']['p50_ms']:.2f}")
        print(f"  P95: {summary['latency']['p95_ms']:.2f}")
        print(f"  Max: {summary['latency']['max_ms']:.2f}")

        print("\n" + "="*60)
