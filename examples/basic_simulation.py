#!/usr/bin/env python3
"""
Example: Basic Mesh Routing Simulation

This script demonstrates the basic usage of the mesh routing engine,
including:
- Building a small constellation with a ground station in Berlin
- Routing messages between satellites and to the ground
- Ground station handover
- Advancing the simulation with a position propagator
"""

import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from leo_mesh import (
    MeshConfig,
    MeshNetwork,
    LinearPropagator,
    build_demo_constellation,
    add_ground_station_network,
    run_simulation
)
from leo_mesh.core.scenario import FIRST_GROUND_STATION_ID
from leo_mesh.core.visualization import save_all_plots


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    print("="*70)
    print("LEO Mesh Routing - Basic Example")
    print("="*70)

    # =====================================================
    # Step 1: Build the mesh
    # =====================================================
    print("\n[1] Building constellation...")

    network = MeshNetwork(MeshConfig(seed=42))
    satellites = build_demo_constellation(network, num_satellites=5)

    # A few ESA stations alongside Berlin
    add_ground_station_network(network, count=3, first_id=FIRST_GROUND_STATION_ID + 1)

    network.initialize_routing()
    print(f"  Created: {network}")
    print(f"  Satellites: {satellites}")
    print(f"  Ground stations: {network.ground_stations}")
    print(f"  Topology: {network.topology}")

    # =====================================================
    # Step 2: Route messages
    # =====================================================
    print("\n[2] Routing messages...")

    route = network.find_route(1, FIRST_GROUND_STATION_ID)
    print(f"  Route 1 -> {FIRST_GROUND_STATION_ID}: {[1] + route}")

    for source in satellites:
        delivered = network.route_message(source, FIRST_GROUND_STATION_ID, b"telemetry")
        print(f"  Satellite {source} -> ground: {'delivered' if delivered else 'dropped'}")

    # =====================================================
    # Step 3: Handover
    # =====================================================
    print("\n[3] Ground station handover...")

    for sat_id in satellites:
        station = network.select_ground_station(sat_id)
        print(f"  Satellite {sat_id} -> station {station}")

    # =====================================================
    # Step 4: Advance time
    # =====================================================
    print("\n[4] Running simulation...")

    stats = run_simulation(
        network,
        duration=60.0,
        time_step=1.0,
        propagator=LinearPropagator()
    )

    for source in satellites:
        network.route_message(source, FIRST_GROUND_STATION_ID)

    # =====================================================
    # Step 5: Results
    # =====================================================
    print("\n[5] Simulation Results:")
    stats.print_summary()

    output_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "output")
    save_all_plots(network, output_dir=output_dir, prefix="basic")
    stats.save_to_json(os.path.join(output_dir, "basic_stats.json"))

    print("\nDone!")


if __name__ == "__main__":
    main()
