"""
Visualization Module

Provides functions for visualizing mesh network topology and the
statistics history recorded during simulation.
"""

import os
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt

from .statistics import StatisticsCollector
from .topology import NodeType

NODE_STYLES = {
    NodeType.SATELLITE: {"c": "tab:blue", "marker": "o", "s": 50},
    NodeType.GROUND_STATION: {"c": "orange", "marker": "^", "s": 100},
    NodeType.RELAY: {"c": "tab:green", "marker": "s", "s": 60},
}


def plot_topology_2d(
    network,
    figsize: Tuple[int, int] = (14, 8),
    show_links: bool = True,
    highlight_route: Optional[List[int]] = None,
    title: str = "Mesh Network Topology"
) -> plt.Figure:
    """
    Plot 2D projection of the mesh (lat/lon)

    Args:
        network: MeshNetwork to plot
        figsize: Figure size
        show_links: Whether to draw current links
        highlight_route: Node ids of a route to draw on top, source first
        title: Plot title

    Returns:
        Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=figsize)

    if show_links:
        for (u, v), quality in network.topology.adjacency.items():
            if u > v:
                continue  # Each undirected link once
            a = network.get_node(u).position
            b = network.get_node(v).position
            if abs(a.longitude - b.longitude) > 180:
                continue  # Skip wrap-around links for clarity
            ax.plot(
                [a.longitude, b.longitude], [a.latitude, b.latitude],
                c='gray', alpha=0.2 + 0.6 * quality, linewidth=0.8, zorder=1
            )

    for node_type, style in NODE_STYLES.items():
        members = [n for n in network.nodes if n.node_type == node_type]
        if not members:
            continue
        ax.scatter(
            [n.position.longitude for n in members],
            [n.position.latitude for n in members],
            label=node_type.value, zorder=3,
            edgecolors='black', linewidths=0.5,
            **style
        )

    if highlight_route and len(highlight_route) > 1:
        positions = [network.get_node(node_id).position for node_id in highlight_route]
        ax.plot(
            [p.longitude for p in positions], [p.latitude for p in positions],
            c='red', linewidth=2, zorder=4, label='route'
        )

    ax.set_xlim(-180, 180)
    ax.set_ylim(-90, 90)
    ax.set_xlabel("Longitude (degrees)")
    ax.set_ylabel("Latitude (degrees)")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    ax.legend(loc='upper right', fontsize=8)

    plt.tight_layout()
    return fig


def plot_statistics(
    stats: StatisticsCollector,
    figsize: Tuple[int, int] = (14, 10),
    title: str = "Simulation Results"
) -> plt.Figure:
    """
    Plot the statistics history

    Args:
        stats: Statistics collector with snapshot history
        figsize: Figure size
        title: Plot title

    Returns:
        Matplotlib figure
    """
    fig, axes = plt.subplots(2, 2, figsize=figsize)
    df = stats.to_dataframe()

    panels = [
        (axes[0, 0], "packets_routed", "Packets Routed", 'b-'),
        (axes[0, 1], "packets_dropped", "Packets Dropped", 'r-'),
        (axes[1, 0], "network_utilization", "Network Utilization", 'g-'),
    ]
    for ax, column, label, style in panels:
        if not df.empty:
            ax.plot(df["timestamp"], df[column], style, linewidth=1)
        ax.set_xlabel("Time (s)")
        ax.set_ylabel(label)
        ax.set_title(f"{label} Over Time")
        ax.grid(True, alpha=0.3)

    # Latency distribution
    ax = axes[1, 1]
    if stats.latencies:
        ax.hist(
            [lat * 1000.0 for lat in stats.latencies],
            bins=50, color='purple', alpha=0.7, edgecolor='black'
        )
    ax.set_xlabel("Latency (ms)")
    ax.set_ylabel("Count")
    ax.set_title("Latency Distribution")
    ax.grid(True, alpha=0.3)

    fig.suptitle(title, fontsize=14, fontweight='bold')
    plt.tight_layout()
    return fig


def save_all_plots(
    network,
    output_dir: str = ".",
    prefix: str = "mesh"
):
    """
    Save all standard plots to files

    Args:
        network: MeshNetwork whose topology and statistics are plotted
        output_dir: Output directory
        prefix: Filename prefix
    """
    os.makedirs(output_dir, exist_ok=True)

    fig = plot_topology_2d(network)
    fig.savefig(os.path.join(output_dir, f"{prefix}_topology_2d.png"), dpi=150)
    plt.close(fig)

    fig = plot_statistics(network.stats)
    fig.savefig(os.path.join(output_dir, f"{prefix}_results.png"), dpi=150)
    plt.close(fig)

    print(f"Plots saved to {output_dir}/")
