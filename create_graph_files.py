"""
Create graph files for the stepwise Prim visualizer
Sample graph, random connected graphs, JSON export and a picture
"""

import math
import os
import random

import matplotlib.pyplot as plt
import networkx as nx

from check_mst import reference_mst_weight, to_networkx
from graph_io import save_graph
from prim_config import VisualizerConfig
from prim_graph import GraphModel

SAMPLE_POSITIONS = [
    (150, 100),
    (350, 100),
    (550, 100),
    (150, 250),
    (350, 250),
    (550, 250),
    (250, 420),
    (450, 420),
]

# (node, node, weight) in declaration order; (0,1,4) precedes (5,7,4)
SAMPLE_EDGES = [
    (0, 1, 4), (0, 3, 2),
    (1, 2, 6), (1, 4, 5),
    (2, 5, 3),
    (3, 4, 1), (3, 6, 8),
    (4, 5, 7), (4, 6, 9), (4, 7, 2),
    (5, 7, 4),
    (6, 7, 3),
]


def create_sample_graph():
    """The eight node demonstration graph"""
    graph = GraphModel()
    for x, y in SAMPLE_POSITIONS:
        graph.add_node(x, y)
    for u, v, w in SAMPLE_EDGES:
        graph.add_edge(u, v, w)
    return graph


def create_random_graph(num_nodes=8, density=0.4, seed=None, config=None):
    """Create a random connected graph with random weights

    Nodes sit on a jittered circle. Consecutive nodes are always joined so the
    graph is connected, then shuffled pairs are added until the requested
    share of all possible edges exists.
    """
    if num_nodes < 1:
        raise ValueError("num_nodes must be at least 1")
    if not 0.0 <= density <= 1.0:
        raise ValueError("density must be between 0 and 1")

    config = config or VisualizerConfig()
    rng = random.Random(seed)
    graph = GraphModel()

    # Layout
    center_x = config.canvas_width / 2
    center_y = config.canvas_height / 2
    radius = min(config.canvas_width, config.canvas_height) / 2.4
    for i in range(num_nodes):
        angle = (i / num_nodes) * math.pi * 2
        jitter_x = (rng.random() - 0.5) * config.random_jitter
        jitter_y = (rng.random() - 0.5) * config.random_jitter
        graph.add_node(
            center_x + math.cos(angle) * radius + jitter_x,
            center_y + math.sin(angle) * radius + jitter_y,
        )

    node_ids = list(graph.nodes)
    potential = [
        (node_ids[i], node_ids[j])
        for i in range(num_nodes)
        for j in range(i + 1, num_nodes)
    ]
    rng.shuffle(potential)
    desired = max(num_nodes - 1, math.floor(density * len(potential) + 0.5))

    def weight():
        return rng.randint(config.min_random_weight, config.max_random_weight)

    # Chain keeps the graph connected
    for prev, curr in zip(node_ids, node_ids[1:]):
        graph.add_edge(prev, curr, weight())

    for a, b in potential:
        if len(graph.edges) >= desired:
            break
        if graph.edge_exists(a, b):
            continue
        graph.add_edge(a, b, weight())

    return graph


def visualize_graph(graph, output_file):
    """Visualize the graph and save to file"""
    G = to_networkx(graph)
    plt.figure(figsize=(10, 8))
    pos = {node_id: (node.x, -node.y) for node_id, node in graph.nodes.items()}

    nx.draw(
        G,
        pos,
        labels={node_id: node.label for node_id, node in graph.nodes.items()},
        node_color="lightblue",
        node_size=700,
        font_size=12,
        font_weight="bold",
        edge_color="gray",
        width=2,
    )
    edge_labels = nx.get_edge_attributes(G, "weight")
    nx.draw_networkx_edge_labels(G, pos, edge_labels, font_size=10)

    plt.title("Input Graph for Prim's Algorithm", fontsize=14, fontweight="bold")
    plt.savefig(output_file, dpi=150, bbox_inches="tight")
    print(f"\n  Visualization saved to {output_file}")
    plt.close()


def print_graph_summary(graph):
    """Print summary of the graph"""
    G = to_networkx(graph)
    print("\n" + "=" * 70)
    print("Graph Summary")
    print("=" * 70)
    print(f"Number of nodes: {len(graph.nodes)}")
    print(f"Number of edges: {len(graph.edges)}")
    print(f"Is connected: {len(G) > 0 and nx.is_connected(G)}")

    print("\nEdge list (with weights):")
    for edge in graph.edges.values():
        a = graph.nodes[edge.a].label
        b = graph.nodes[edge.b].label
        print(f"  ({a}, {b}): weight = {edge.weight}")

    print(f"\nExpected MST weight (NetworkX): {reference_mst_weight(graph)}")
    print("=" * 70)


def main(argv=None):
    """Main function to create graph files"""
    import argparse

    parser = argparse.ArgumentParser(
        description="Generate graph files for the stepwise Prim visualizer"
    )
    parser.add_argument(
        "--sample", action="store_true", help="Write the built-in sample graph"
    )
    parser.add_argument(
        "--nodes", type=int, default=8, help="Number of nodes (default: 8)"
    )
    parser.add_argument(
        "--density",
        type=float,
        default=0.4,
        help="Share of possible edges to create (default: 0.4)",
    )
    parser.add_argument(
        "--seed", type=int, default=42, help="Random seed (default: 42)"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="graph_data",
        help="Output directory (default: graph_data)",
    )
    parser.add_argument(
        "--no-picture", action="store_true", help="Skip the matplotlib picture"
    )

    args = parser.parse_args(argv)

    print("=" * 70)
    print("Graph File Generator for the Prim Visualizer")
    print("=" * 70)

    if args.sample:
        print("\nUsing the sample graph")
        graph = create_sample_graph()
    else:
        print("\nGenerating random graph...")
        print(f"  Nodes: {args.nodes}")
        print(f"  Density: {args.density}")
        print(f"  Random seed: {args.seed}")
        try:
            graph = create_random_graph(args.nodes, args.density, args.seed)
        except ValueError as e:
            print(f"Unable to generate graph: {e}")
            return 1

    print_graph_summary(graph)

    os.makedirs(args.output_dir, exist_ok=True)
    graph_file = os.path.join(args.output_dir, "graph.json")
    save_graph(graph_file, graph)
    print(f"\n  Created {graph_file}")

    if not args.no_picture:
        visualize_graph(graph, os.path.join(args.output_dir, "input_graph.png"))

    print("\n" + "=" * 70)
    print("Graph files created successfully!")
    print("=" * 70)
    print("\nTo step through Prim's algorithm:")
    print(f"  python prim_visualizer.py --import {graph_file}")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
