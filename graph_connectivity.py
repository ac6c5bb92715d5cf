"""
Connectivity checks over a graph model
Advisory only: the Prim engine detects disconnection on its own
"""

from collections import namedtuple

import networkx as nx

ConnectivityReport = namedtuple("ConnectivityReport", ["connected", "unreachable_count"])
HealthReport = namedtuple("HealthReport", ["text", "state"])


def _node_ids_and_edges(graph):
    # Works for both GraphModel and GraphSnapshot
    if hasattr(graph, "node_ids"):
        return list(graph.node_ids), list(graph.edges)
    return list(graph.nodes), list(graph.edges.values())


def check_connectivity(graph):
    """Reachability from the first node by creation order"""
    node_ids, edges = _node_ids_and_edges(graph)
    if len(node_ids) <= 1:
        return ConnectivityReport(True, 0)

    G = nx.Graph()
    G.add_nodes_from(node_ids)
    G.add_edges_from((edge.a, edge.b) for edge in edges)
    reached = nx.node_connected_component(G, node_ids[0])

    unreachable = len(node_ids) - len(reached)
    return ConnectivityReport(unreachable == 0, unreachable)


def analyze_graph(graph):
    """Readiness summary shown before a run"""
    node_ids, edges = _node_ids_and_edges(graph)
    if not node_ids:
        return HealthReport("No nodes yet.", "idle")
    if len(node_ids) == 1:
        return HealthReport("Single node is trivially connected.", "good")
    if not edges:
        return HealthReport("Graph disconnected. Add edges.", "bad")

    report = check_connectivity(graph)
    if report.connected:
        return HealthReport("Connected graph, ready for Prim's.", "good")
    return HealthReport(
        f"Graph disconnected: {report.unreachable_count} node(s) unreachable.", "bad"
    )
