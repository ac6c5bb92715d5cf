"""
JSON import and export of graph state
Format: {"nodes": [{id, label, x, y}], "edges": [{source, target, weight}]}
"""

import json
import logging
import numbers

from prim_graph import DuplicateEdgeError, GraphError, GraphModel

logger = logging.getLogger(__name__)


class ImportParseError(ValueError):
    """Raised when graph JSON cannot be turned into a graph model"""


def export_graph(graph):
    """Plain dict in the interchange format"""
    return {
        "nodes": [
            {"id": node.node_id, "label": node.label, "x": node.x, "y": node.y}
            for node in graph.nodes.values()
        ],
        "edges": [
            {"source": edge.a, "target": edge.b, "weight": edge.weight}
            for edge in graph.edges.values()
        ],
    }


def dumps_graph(graph):
    return json.dumps(export_graph(graph), indent=2)


def _coordinate(record, key):
    value = record.get(key, 0.0)
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ImportParseError(f"node {key} must be a number, got {value!r}")
    return float(value)


def _known(graph, node_id):
    # JSON ids may be any value; only plain integers name a node
    if isinstance(node_id, bool) or not isinstance(node_id, int):
        return False
    return node_id in graph.nodes


def import_graph(text):
    """Build a new GraphModel from JSON text

    Edges that reference unknown nodes are dropped, as are self-loops and
    repeated edges between the same pair of nodes. A missing or falsy weight becomes 1.
    The caller's graph is never touched: a fresh model is returned.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ImportParseError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ImportParseError("top-level JSON value must be an object")
    nodes = data.get("nodes")
    edges = data.get("edges")
    if not isinstance(nodes, list) or not isinstance(edges, list):
        raise ImportParseError("'nodes' and 'edges' must both be arrays")

    graph = GraphModel()
    for record in nodes:
        if not isinstance(record, dict):
            raise ImportParseError("node entries must be objects")
        label = record.get("label")
        if label is not None and not isinstance(label, str):
            raise ImportParseError(f"node label must be a string, got {label!r}")
        try:
            graph.add_node(
                x=_coordinate(record, "x"),
                y=_coordinate(record, "y"),
                label=label,
                node_id=record.get("id"),
            )
        except GraphError as e:
            raise ImportParseError(str(e)) from e

    dropped = 0
    for record in edges:
        if not isinstance(record, dict):
            raise ImportParseError("edge entries must be objects")
        source = record.get("source")
        target = record.get("target")
        if not (_known(graph, source) and _known(graph, target)) or source == target:
            dropped += 1
            continue
        weight = record.get("weight") or 1
        try:
            graph.add_edge(source, target, weight)
        except DuplicateEdgeError:
            dropped += 1
        except GraphError as e:
            raise ImportParseError(str(e)) from e

    if dropped:
        logger.warning("Dropped %d edge record(s) during import", dropped)
    logger.info("Imported graph with %d nodes and %d edges", len(graph.nodes), len(graph.edges))
    return graph


def load_graph(path):
    """Read a graph JSON file"""
    with open(path) as f:
        return import_graph(f.read())


def save_graph(path, graph):
    """Write graph to path as JSON"""
    with open(path, "w") as f:
        f.write(dumps_graph(graph))
