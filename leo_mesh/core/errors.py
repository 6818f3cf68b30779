"""
Error Types

Failures raised by the mesh routing engine. Every lookup validates node ids
against the registry first, so callers only ever see these types.
"""


class MeshNetworkError(Exception):
    """Base class for all mesh routing failures"""


class NodeNotFoundError(MeshNetworkError, KeyError):
    """Operation referenced a node id that is not registered"""

    def __init__(self, node_id):
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self):
        return f"Node {self.node_id} not found"


class DuplicateNodeError(MeshNetworkError, ValueError):
    """A node with the same id is already registered"""

    def __init__(self, node_id):
        super().__init__(f"Node {node_id} already registered")
        self.node_id = node_id


class InvalidNodeError(MeshNetworkError, ValueError):
    """Operation applied to a node of the wrong type"""


class NoRouteError(MeshNetworkError):
    """No path exists between source and destination"""

    def __init__(self, source, destination):
        super().__init__(f"No route from {source} to {destination}")
        self.source = source
        self.destination = destination


class TTLExceededError(MeshNetworkError):
    """Packet consumed its hop budget before reaching the destination"""

    def __init__(self, packet_id, hops_taken):
        super().__init__(
            f"Packet {packet_id} exceeded TTL after {hops_taken} hops"
        )
        self.packet_id = packet_id
        self.hops_taken = hops_taken
