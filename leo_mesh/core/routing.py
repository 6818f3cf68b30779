"""
Routing Module

This module provides the two cooperating path computation strategies of
the mesh network:
- an on-demand shortest path search (Dijkstra) used to forward packets
- a precomputed distance-vector table used only as a reliability signal
  for the link cost model
"""

import heapq
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional

from .errors import NodeNotFoundError, NoRouteError
from .topology import NodeRegistry

logger = logging.getLogger(__name__)

CostFunction = Callable[[int, int], float]


@dataclass
class RoutingEntry:
    """Routing table entry"""
    destination: int
    next_hop: int
    hop_count: int
    cost: float
    last_updated: float
    reliability: float  # 0.0 to 1.0


class RoutingTable:
    """
    Distance-vector routing table keyed by destination only

    A single table shared by the whole network rather than one table per
    node. Consumers should go through reliability_hint() so a per-source
    table can replace this one later.
    """

    def __init__(self):
        self._entries: Dict[int, RoutingEntry] = {}

    def reliability_hint(self, destination: int) -> float:
        """Reliability of the best known route to destination, 1.0 if unknown"""
        entry = self._entries.get(destination)
        if entry is None:
            return 1.0
        return entry.reliability

    def get(self, destination: int) -> Optional[RoutingEntry]:
        return self._entries.get(destination)

    def get_next_hop(self, destination: int) -> Optional[int]:
        entry = self._entries.get(destination)
        return entry.next_hop if entry else None

    def replace(self, entries: Dict[int, RoutingEntry]):
        """Swap in a freshly built set of entries"""
        self._entries = dict(entries)

    def purge(self, node_id: int) -> int:
        """
        Remove every entry whose destination or next hop is node_id

        Returns:
            Number of entries removed
        """
        stale = [
            dest for dest, entry in self._entries.items()
            if entry.destination == node_id or entry.next_hop == node_id
        ]
        for dest in stale:
            del self._entries[dest]
        return len(stale)

    def clear(self):
        self._entries.clear()

    def entries(self) -> List[RoutingEntry]:
        """Entries ordered by destination"""
        return [self._entries[dest] for dest in sorted(self._entries)]

    def __contains__(self, destination) -> bool:
        return destination in self._entries

    def __iter__(self) -> Iterator[RoutingEntry]:
        return iter(self.entries())

    def __len__(self) -> int:
        return len(self._entries)


def build_routing_table(
    registry: NodeRegistry,
    cost: CostFunction,
    timestamp: float = 0.0,
    max_hop_count: int = 16,
    initial_reliability: float = 0.9,
    reliability_decay: float = 0.95
) -> Dict[int, RoutingEntry]:
    """
    Build distance-vector entries by Bellman-Ford style relaxation

    One-hop entries are seeded from every node's neighbor set, then up to
    N rounds propose cost(u, v) + entry.cost for each edge u -> v and each
    known entry. A candidate replaces the current entry only when strictly
    cheaper and while its hop count stays below max_hop_count.

    Args:
        registry: Nodes with up-to-date neighbor sets
        cost: Link cost function
        timestamp: Value stored as last_updated
        max_hop_count: Exclusive hop count bound
        initial_reliability: Reliability of one-hop entries
        reliability_decay: Reliability factor per additional hop

    Returns:
        Mapping destination -> best entry
    """
    entries: Dict[int, RoutingEntry] = {}
    nodes = list(registry)

    # Direct routes
    for node in nodes:
        for neighbor in sorted(node.neighbors):
            link_cost = cost(node.node_id, neighbor)
            existing = entries.get(neighbor)
            if existing is None or link_cost < existing.cost:
                entries[neighbor] = RoutingEntry(
                    destination=neighbor,
                    next_hop=neighbor,
                    hop_count=1,
                    cost=link_cost,
                    last_updated=timestamp,
                    reliability=initial_reliability
                )

    # Multi-hop relaxation, bounded by node count
    rounds = 0
    for _ in range(len(nodes)):
        rounds += 1
        updated = False

        for node in nodes:
            for neighbor in sorted(node.neighbors):
                link_cost = cost(node.node_id, neighbor)
                for route in list(entries.values()):
                    if route.destination == node.node_id:
                        continue
                    new_hop_count = route.hop_count + 1
                    if new_hop_count >= max_hop_count:
                        continue
                    new_cost = link_cost + route.cost
                    existing = entries.get(route.destination)
                    if existing is None or new_cost < existing.cost:
                        entries[route.destination] = RoutingEntry(
                            destination=route.destination,
                            next_hop=neighbor,
                            hop_count=new_hop_count,
                            cost=new_cost,
                            last_updated=timestamp,
                            reliability=route.reliability * reliability_decay
                        )
                        updated = True

        if not updated:
            break

    logger.info(
        "Routing table built with %d entries (%d relaxation rounds)",
        len(entries), rounds
    )
    return entries


class RouteFinder:
    """
    On-demand shortest path search over current neighbor sets

    Uses a binary heap ordered by (distance, node id), so candidates of
    equal cost are settled lowest id first and results are reproducible.
    """

    def __init__(self, registry: NodeRegistry, cost: CostFunction):
        """
        Initialize route finder

        Args:
            registry: Node registry with up-to-date neighbor sets
            cost: Edge weight function
        """
        self.registry = registry
        self.cost = cost

    def find_route(self, source: int, destination: int) -> List[int]:
        """
        Compute the cheapest route from source to destination

        Args:
            source: Source node ID
            destination: Destination node ID

        Returns:
            Hop ids from (excluding) source up to destination; empty when
            source equals destination

        Raises:
            NodeNotFoundError: source or destination is not registered
            NoRouteError: destination is unreachable
        """
        if source not in self.registry:
            raise NodeNotFoundError(source)
        if destination not in self.registry:
            raise NodeNotFoundError(destination)
        if source == destination:
            return []

        distances: Dict[int, float] = {source: 0.0}
        previous: Dict[int, int] = {}
        visited = set()
        heap = [(0.0, source)]

        while heap:
            dist, current = heapq.heappop(heap)
            if current in visited:
                continue
            visited.add(current)

            if current == destination:
                break

            for neighbor in sorted(self.registry.get(current).neighbors):
                if neighbor in visited or neighbor not in self.registry:
                    continue
                alt = dist + self.cost(current, neighbor)
                if alt < distances.get(neighbor, float('inf')):
                    distances[neighbor] = alt
                    previous[neighbor] = current
                    heapq.heappush(heap, (alt, neighbor))

        if destination not in visited:
            raise NoRouteError(source, destination)

        path = []
        current = destination
        while current != source:
            path.append(current)
            current = previous[current]
        path.reverse()
        return path

    def path_cost(self, source: int, route: List[int]) -> float:
        """Total link cost of a route starting at source"""
        total = 0.0
        current = source
        for hop in route:
            total += self.cost(current, hop)
            current = hop
        return total
