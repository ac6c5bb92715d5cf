"""
Reference MST computed with NetworkX (Kruskal)
Used to confirm the stepwise engine reaches an optimal tree
"""

import sys

import networkx as nx


def to_networkx(graph):
    """Build an undirected networkx graph from a GraphModel"""
    G = nx.Graph()
    G.add_nodes_from(graph.nodes)
    for edge in graph.edges.values():
        G.add_edge(edge.a, edge.b, weight=edge.weight)
    return G


def reference_mst(graph):
    """Minimum spanning forest edges as sorted (u, v, weight) tuples"""
    G = to_networkx(graph)
    mst = nx.minimum_spanning_tree(G, weight="weight", algorithm="kruskal")
    return sorted(
        (min(u, v), max(u, v), data["weight"]) for u, v, data in mst.edges(data=True)
    )


def reference_mst_weight(graph):
    return sum(weight for _, _, weight in reference_mst(graph))


def verify_state(graph, state):
    """Check a finished run for completeness and optimality

    Returns a list of problems; an empty list means the run is a valid MST.
    """
    problems = []
    n = len(graph.nodes)
    if len(state.tree_nodes) != n:
        problems.append(f"tree has {len(state.tree_nodes)} of {n} nodes")
    if len(state.tree_edges) != max(n - 1, 0):
        problems.append(f"tree has {len(state.tree_edges)} edges, expected {max(n - 1, 0)}")
    if state.total_weight != sum(edge.weight for edge in state.tree_edges):
        problems.append("total weight does not match committed edges")
    expected = reference_mst_weight(graph)
    if state.total_weight != expected:
        problems.append(f"total weight {state.total_weight}, networkx MST weight {expected}")
    return problems


def main(argv=None):
    """Print the expected MST for a graph JSON file"""
    from graph_io import ImportParseError, load_graph

    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("usage: check_mst.py GRAPH.json")
        return 2

    try:
        graph = load_graph(argv[0])
    except (OSError, ImportParseError) as e:
        print(f"Unable to load graph: {e}")
        return 1

    G = to_networkx(graph)
    edges = reference_mst(graph)
    print("Expected MST edges:")
    for u, v, w in edges:
        print(f"  ({graph.nodes[u].label},{graph.nodes[v].label}): {w}")
    print(f"\nTotal weight: {sum(w for _, _, w in edges)}")
    print(f"Number of edges: {len(edges)}")
    print(f"\nOriginal graph connected: {len(G) > 0 and nx.is_connected(G)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
