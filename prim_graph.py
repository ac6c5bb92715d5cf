"""
Graph model for the Prim visualizer
Undirected weighted graph with id-indexed nodes and edges
"""

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


class GraphError(Exception):
    """Base class for rejected graph mutations"""


class UnknownNodeError(GraphError):
    """Raised when a node id does not exist in the graph"""


class InvalidEdgeError(GraphError):
    """Raised for an edge whose endpoints are the same node"""


class DuplicateEdgeError(GraphError):
    """Raised when an edge already joins the same pair of nodes"""


class InvalidWeightError(GraphError):
    """Raised when an edge weight is not a positive integer"""


def default_label(node_id):
    """Letter label for the first 26 ids, N<id> afterwards"""
    if 0 <= node_id < 26:
        return chr(65 + node_id)
    return f"N{node_id}"


def validate_weight(weight):
    """Return weight if it is a positive integer, raise otherwise"""
    # bool is an int subclass but never a meaningful weight
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise InvalidWeightError(f"weight must be an integer, got {weight!r}")
    if weight <= 0:
        raise InvalidWeightError(f"weight must be positive, got {weight}")
    return weight


@dataclass
class Node:
    node_id: int
    label: str
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Edge:
    edge_id: int
    a: int
    b: int
    weight: int

    @property
    def key(self):
        return frozenset((self.a, self.b))

    def has(self, node_id):
        return node_id == self.a or node_id == self.b

    def other(self, node_id):
        """Return the endpoint opposite to node_id"""
        if node_id == self.a:
            return self.b
        if node_id == self.b:
            return self.a
        raise UnknownNodeError(f"node {node_id} is not an endpoint of edge {self.edge_id}")


@dataclass(frozen=True)
class GraphSnapshot:
    """Read-only copy of a graph taken when a run starts"""

    node_ids: tuple = ()
    edges: tuple = ()
    labels: dict = field(default_factory=dict)

    def __contains__(self, node_id):
        return node_id in self.node_ids

    def __len__(self):
        return len(self.node_ids)

    def label(self, node_id):
        return self.labels.get(node_id, str(node_id))


class GraphModel:
    """Nodes and undirected edges, both kept in creation order"""

    def __init__(self):
        self.nodes = {}  # node_id -> Node, creation order
        self.edges = {}  # edge_id -> Edge, creation order
        self._pairs = {}  # frozenset({a, b}) -> edge_id
        self._next_node_id = 0
        self._next_edge_id = 0

    def __len__(self):
        return len(self.nodes)

    def __contains__(self, node_id):
        return node_id in self.nodes

    # Nodes

    def add_node(self, x=0.0, y=0.0, label=None, node_id=None):
        """Create a node and return it"""
        if node_id is None:
            node_id = self._next_node_id
        elif isinstance(node_id, bool) or not isinstance(node_id, int):
            raise GraphError(f"node id must be an integer, got {node_id!r}")
        elif node_id in self.nodes:
            raise GraphError(f"node id {node_id} already exists")

        node = Node(node_id, label or default_label(node_id), float(x), float(y))
        self.nodes[node_id] = node
        self._next_node_id = max(self._next_node_id, node_id + 1)
        logger.debug("Added node %s (%s)", node_id, node.label)
        return node

    def get_node(self, node_id):
        try:
            return self.nodes[node_id]
        except KeyError:
            raise UnknownNodeError(f"unknown node {node_id}") from None

    def remove_node(self, node_id):
        """Delete a node together with every incident edge"""
        node = self.get_node(node_id)
        for edge in [e for e in self.edges.values() if e.has(node_id)]:
            self._drop_edge(edge)
        del self.nodes[node_id]
        logger.debug("Removed node %s", node_id)
        return node

    def rename_node(self, node_id, label, max_length=3):
        node = self.get_node(node_id)
        trimmed = (label or "").strip()[:max_length]
        if not trimmed:
            raise ValueError("label must contain at least one visible character")
        node.label = trimmed
        return node

    def move_node(self, node_id, x, y, bounds=None):
        """Set node position, clamped into (width, height, radius) bounds if given"""
        node = self.get_node(node_id)
        if bounds is not None:
            width, height, radius = bounds
            x = min(max(x, radius), width - radius)
            y = min(max(y, radius), height - radius)
        node.x = float(x)
        node.y = float(y)
        return node

    def find_node_at(self, x, y, radius=25):
        """Return the topmost node whose circle contains (x, y)"""
        for node in reversed(list(self.nodes.values())):
            dx = x - node.x
            dy = y - node.y
            if dx * dx + dy * dy <= radius * radius:
                return node
        return None

    # Edges

    def add_edge(self, a, b, weight):
        """Join two existing nodes with a weighted edge"""
        self.get_node(a)
        self.get_node(b)
        if a == b:
            raise InvalidEdgeError(f"self-loop on node {a} is not allowed")
        validate_weight(weight)
        pair = frozenset((a, b))
        if pair in self._pairs:
            raise DuplicateEdgeError(f"edge between {a} and {b} already exists")

        edge = Edge(self._next_edge_id, a, b, weight)
        self._next_edge_id += 1
        self.edges[edge.edge_id] = edge
        self._pairs[pair] = edge.edge_id
        logger.debug("Added edge %s: %s-%s (w=%s)", edge.edge_id, a, b, weight)
        return edge

    def get_edge(self, edge_id):
        try:
            return self.edges[edge_id]
        except KeyError:
            raise GraphError(f"unknown edge {edge_id}") from None

    def remove_edge(self, edge):
        """Delete an edge given the Edge itself or its id"""
        edge_id = edge.edge_id if isinstance(edge, Edge) else edge
        found = self.get_edge(edge_id)
        self._drop_edge(found)
        logger.debug("Removed edge %s", edge_id)
        return found

    def _drop_edge(self, edge):
        del self.edges[edge.edge_id]
        del self._pairs[edge.key]

    def find_edge(self, a, b):
        edge_id = self._pairs.get(frozenset((a, b)))
        return None if edge_id is None else self.edges[edge_id]

    def edge_exists(self, a, b):
        return frozenset((a, b)) in self._pairs

    def neighbors(self, node_id):
        """Yield (neighbor_id, weight) pairs in edge creation order"""
        self.get_node(node_id)
        for edge in self.edges.values():
            if edge.has(node_id):
                yield edge.other(node_id), edge.weight

    def clear(self):
        self.nodes.clear()
        self.edges.clear()
        self._pairs.clear()
        self._next_node_id = 0
        self._next_edge_id = 0

    # Views

    def adjacency_lines(self):
        """One text line per node listing its neighbors and weights"""
        lines = []
        for node in self.nodes.values():
            entries = sorted(
                f"{self.nodes[other].label} ({weight})"
                for other, weight in self.neighbors(node.node_id)
            )
            lines.append(f"{node.label} -> {', '.join(entries) if entries else '(none)'}")
        return lines

    def snapshot(self):
        return GraphSnapshot(
            node_ids=tuple(self.nodes),
            edges=tuple(self.edges.values()),
            labels={node_id: node.label for node_id, node in self.nodes.items()},
        )
