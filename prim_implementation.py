"""
Stepwise Prim's Algorithm Implementation
Advances the MST construction by exactly one observable micro-step per call
"""

import json
import logging
import os
from dataclasses import dataclass
from enum import Enum

import matplotlib.pyplot as plt
import networkx as nx

from prim_graph import GraphModel

logger = logging.getLogger(__name__)


class PrimEngineError(Exception):
    """Base class for engine errors"""


class InvalidStartNodeError(PrimEngineError):
    """Raised when the start node is missing or not part of the graph"""


class RunInProgressError(PrimEngineError):
    """Raised by initialize() when a previous run has not been reset"""


class Phase(Enum):
    NOT_STARTED = "NotStarted"
    SELECT_START = "SelectStart"
    ADD_START = "AddStart"
    CHECK_COMPLETE = "CheckComplete"
    COMPUTE_FRONTIER = "ComputeFrontier"
    SELECT_MIN_EDGE = "SelectMinEdge"
    ADD_NODE = "AddNode"
    COMMIT_EDGE = "CommitEdge"
    LOOP_BACK = "LoopBack"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"

    @property
    def terminal(self):
        return self in (Phase.SUCCEEDED, Phase.FAILED)


@dataclass(frozen=True)
class RunState:
    """Read-only view of the engine after a step"""

    phase: Phase = Phase.NOT_STARTED
    tree_nodes: tuple = ()
    tree_edges: tuple = ()
    frontier: tuple = ()
    current_node: object = None
    total_weight: int = 0
    start_node: object = None
    node_count: int = 0
    steps: int = 0

    @property
    def running(self):
        return self.phase is not Phase.NOT_STARTED and not self.phase.terminal


class PrimStepEngine:
    """Resumable state machine for Prim's algorithm

    Each call to step() performs the action of the pending phase and moves to
    the next one. The phase therefore always names the work the next step()
    will do. Edges are scanned in creation order and ties on weight keep the
    earliest edge, so the same graph and start node always give the same run.
    """

    def __init__(self):
        self._clear()

    def _clear(self):
        self.graph = None
        self.phase = Phase.NOT_STARTED
        self.start_node = None
        self.current_node = None
        self.tree_nodes = []  # admission order
        self._tree_node_set = set()
        self.tree_edges = []  # commit order
        self._committed_edge_ids = set()
        self.frontier = []
        self.total_weight = 0
        self.steps = 0

    def initialize(self, graph, start_node_id):
        """Bind a graph snapshot and seed node; the run starts in SelectStart"""
        if self.phase is not Phase.NOT_STARTED:
            raise RunInProgressError(
                f"engine is in phase {self.phase.value}; call reset() first"
            )
        snapshot = graph.snapshot() if isinstance(graph, GraphModel) else graph
        if len(snapshot) == 0:
            raise InvalidStartNodeError("graph has no nodes")
        if start_node_id is None or start_node_id not in snapshot:
            raise InvalidStartNodeError(f"start node {start_node_id!r} is not in the graph")

        self.graph = snapshot
        self.start_node = start_node_id
        self.current_node = start_node_id
        self.phase = Phase.SELECT_START
        logger.info(
            "Prim run initialized from node %s (%d nodes, %d edges)",
            snapshot.label(start_node_id),
            len(snapshot.node_ids),
            len(snapshot.edges),
        )

    def reset(self):
        """Discard all run state and return to NotStarted"""
        self._clear()

    def step(self):
        """Advance one phase; return True while more steps remain"""
        if self.phase is Phase.NOT_STARTED or self.phase.terminal:
            return False

        handlers = {
            Phase.SELECT_START: self._select_start,
            Phase.ADD_START: self._add_start,
            Phase.CHECK_COMPLETE: self._check_complete,
            Phase.COMPUTE_FRONTIER: self._compute_frontier,
            Phase.SELECT_MIN_EDGE: self._select_min_edge,
            Phase.ADD_NODE: self._add_node,
            Phase.COMMIT_EDGE: self._commit_edge,
            Phase.LOOP_BACK: self._loop_back,
        }

        previous = self.phase
        self.phase = handlers[previous]()
        self.steps += 1
        logger.debug("Step %d: %s -> %s", self.steps, previous.value, self.phase.value)
        return not self.phase.terminal

    def get_state(self):
        return RunState(
            phase=self.phase,
            tree_nodes=tuple(self.tree_nodes),
            tree_edges=tuple(self.tree_edges),
            frontier=tuple(self.frontier),
            current_node=self.current_node,
            total_weight=self.total_weight,
            start_node=self.start_node,
            node_count=len(self.graph) if self.graph is not None else 0,
            steps=self.steps,
        )

    # Phase actions

    def _admit(self, node_id):
        self.tree_nodes.append(node_id)
        self._tree_node_set.add(node_id)

    def _select_start(self):
        # The seed is already current_node; this checkpoint only announces it
        return Phase.ADD_START

    def _add_start(self):
        self._admit(self.current_node)
        return Phase.CHECK_COMPLETE

    def _check_complete(self):
        if len(self._tree_node_set) == len(self.graph):
            self.current_node = None
            self.frontier = []
            logger.info(
                "MST complete: %d edges, total weight %d",
                len(self.tree_edges),
                self.total_weight,
            )
            return Phase.SUCCEEDED
        return Phase.COMPUTE_FRONTIER

    def _compute_frontier(self):
        in_tree = self._tree_node_set
        self.frontier = [
            edge
            for edge in self.graph.edges
            if (edge.a in in_tree) != (edge.b in in_tree)
            and edge.edge_id not in self._committed_edge_ids
        ]
        return Phase.SELECT_MIN_EDGE

    def _select_min_edge(self):
        if not self.frontier:
            logger.warning(
                "No edge leaves the tree: %d of %d nodes reached, graph is disconnected",
                len(self.tree_nodes),
                len(self.graph),
            )
            return Phase.FAILED

        # Strict comparison keeps the earliest-declared edge among equal weights
        best = self.frontier[0]
        for edge in self.frontier[1:]:
            if edge.weight < best.weight:
                best = edge

        self.current_node = best.b if best.a in self._tree_node_set else best.a
        self.frontier = [best]
        return Phase.ADD_NODE

    def _add_node(self):
        self._admit(self.current_node)
        return Phase.COMMIT_EDGE

    def _commit_edge(self):
        edge = self.frontier[0]
        self.tree_edges.append(edge)
        self._committed_edge_ids.add(edge.edge_id)
        self.total_weight += edge.weight
        return Phase.LOOP_BACK

    def _loop_back(self):
        self.frontier = []
        return Phase.CHECK_COMPLETE


def iter_steps(engine):
    """Drive the engine to a terminal phase, yielding the state after each step"""
    while engine.phase is not Phase.NOT_STARTED and not engine.phase.terminal:
        engine.step()
        yield engine.get_state()


def run_to_completion(engine):
    for _ in iter_steps(engine):
        pass
    return engine.get_state()


def _positions(graph):
    pos = {node_id: (node.x, -node.y) for node_id, node in graph.nodes.items()}
    # Imported or generated graphs without coordinates fall back to a layout
    if len(set(pos.values())) < len(pos):
        nx_graph = nx.Graph()
        nx_graph.add_nodes_from(graph.nodes)
        nx_graph.add_edges_from((e.a, e.b) for e in graph.edges.values())
        pos = nx.spring_layout(nx_graph, seed=42)
    return pos


def visualize(graph, state, save_path="prim_mst.png"):
    """Draw the graph with run highlights next to the tree built so far"""
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

    pos = _positions(graph)
    labels = {node_id: node.label for node_id, node in graph.nodes.items()}
    tree_ids = {edge.edge_id for edge in state.tree_edges}
    frontier_ids = {edge.edge_id for edge in state.frontier}
    in_tree = set(state.tree_nodes)

    full = nx.Graph()
    full.add_nodes_from(graph.nodes)
    edge_colors = []
    edge_widths = []
    for edge in graph.edges.values():
        full.add_edge(edge.a, edge.b, weight=edge.weight)
    for a, b in full.edges():
        edge = graph.find_edge(a, b)
        if edge.edge_id in tree_ids:
            edge_colors.append("#16a34a")
            edge_widths.append(4)
        elif edge.edge_id in frontier_ids:
            edge_colors.append("#2563eb")
            edge_widths.append(3)
        else:
            edge_colors.append("#94a3b8")
            edge_widths.append(2)

    node_colors = []
    for node_id in full.nodes():
        if node_id == state.current_node:
            node_colors.append("#fde047")
        elif node_id in in_tree:
            node_colors.append("#86efac")
        else:
            node_colors.append("white")

    # Whole graph
    ax1.set_title(f"Graph ({state.phase.value})", fontsize=14, fontweight="bold")
    nx.draw(
        full,
        pos,
        ax=ax1,
        labels=labels,
        node_color=node_colors,
        edgecolors="black",
        node_size=700,
        font_size=12,
        font_weight="bold",
        edge_color=edge_colors,
        width=edge_widths,
    )
    nx.draw_networkx_edge_labels(
        full, pos, nx.get_edge_attributes(full, "weight"), ax=ax1
    )

    # Tree only
    ax2.set_title(
        f"MST (total weight {state.total_weight})", fontsize=14, fontweight="bold"
    )
    mst_graph = nx.Graph()
    mst_graph.add_nodes_from(graph.nodes)
    for edge in state.tree_edges:
        mst_graph.add_edge(edge.a, edge.b, weight=edge.weight)

    nx.draw(
        mst_graph,
        pos,
        ax=ax2,
        labels=labels,
        node_color=["#86efac" if n in in_tree else "white" for n in mst_graph.nodes()],
        edgecolors="black",
        node_size=700,
        font_size=12,
        font_weight="bold",
        edge_color="#16a34a",
        width=4,
    )
    if state.tree_edges:
        nx.draw_networkx_edge_labels(
            mst_graph, pos, nx.get_edge_attributes(mst_graph, "weight"), ax=ax2
        )

    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    logger.info("Visualization saved to %s", save_path)
    plt.close(fig)

    return mst_graph


def run_experiment(graph, experiment_num, start_node=None, output_dir=None):
    """Run the step engine on one graph and compare with networkx"""
    from check_mst import reference_mst_weight

    print(f"\n{'=' * 70}")
    print(
        f"Experiment {experiment_num}: {len(graph.nodes)} nodes, {len(graph.edges)} edges"
    )
    print("=" * 70)

    if start_node is None:
        start_node = next(iter(graph.nodes))

    engine = PrimStepEngine()
    engine.initialize(graph, start_node)
    state = run_to_completion(engine)

    nx_weight = reference_mst_weight(graph)
    is_correct = (
        state.phase is Phase.SUCCEEDED
        and state.total_weight == nx_weight
        and len(state.tree_edges) == len(graph.nodes) - 1
    )

    print(f"\nSteps taken: {state.steps}")
    print(f"Terminal phase: {state.phase.value}")
    print(f"MST Weight: {state.total_weight}")
    print(f"MST Edges Found: {len(state.tree_edges)}/{len(graph.nodes) - 1} expected")
    print(f"NetworkX MST Weight: {nx_weight}")
    print(f"Status: {'CORRECT' if is_correct else 'INCORRECT'}")

    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
        visualize(graph, state, os.path.join(output_dir, f"prim_mst_exp{experiment_num}.png"))

    return {
        "experiment": experiment_num,
        "num_nodes": len(graph.nodes),
        "num_edges": len(graph.edges),
        "steps": state.steps,
        "mst_edges": [(e.a, e.b, e.weight) for e in state.tree_edges],
        "mst_weight": state.total_weight,
        "networkx_weight": nx_weight,
        "is_correct": is_correct,
        "edges_found": len(state.tree_edges),
        "edges_expected": len(graph.nodes) - 1,
    }


def main(argv=None):
    """Run the step engine over several seeded random graphs"""
    import argparse

    from create_graph_files import create_random_graph

    parser = argparse.ArgumentParser(
        description="Check the stepwise Prim engine against networkx on random graphs"
    )
    parser.add_argument(
        "--output", type=str, default="prim_experiments.json", help="Results file"
    )
    parser.add_argument(
        "--plots", type=str, default=None, help="Directory for per-experiment pictures"
    )
    parser.add_argument("--verbose", action="store_true", help="Log every step")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    print("=" * 70)
    print(" " * 15 + "Stepwise Prim - Multiple Experiments")
    print("=" * 70)

    graph_configs = [
        {"num_nodes": 5, "density": 0.5, "seed": 42},
        {"num_nodes": 6, "density": 0.4, "seed": 100},
        {"num_nodes": 7, "density": 0.6, "seed": 200},
        {"num_nodes": 6, "density": 0.7, "seed": 300},
        {"num_nodes": 10, "density": 0.8, "seed": 400},
        {"num_nodes": 20, "density": 0.3, "seed": 500},
    ]

    all_results = []
    for i, config in enumerate(graph_configs, 1):
        graph = create_random_graph(**config)
        all_results.append(run_experiment(graph, i, output_dir=args.plots))

    # Summary
    print("\n" + "=" * 70)
    print(" " * 25 + "SUMMARY")
    print("=" * 70)
    print(
        f"{'Exp':<5} {'Nodes':<7} {'Edges':<7} {'Steps':<7} {'MST Wt':<9} {'Found':<10} {'Status':<10}"
    )
    print("-" * 70)
    for result in all_results:
        status = "PASS" if result["is_correct"] else "FAIL"
        found_str = f"{result['edges_found']}/{result['edges_expected']}"
        print(
            f"{result['experiment']:<5} {result['num_nodes']:<7} {result['num_edges']:<7} "
            f"{result['steps']:<7} {result['mst_weight']:<9} {found_str:<10} {status:<10}"
        )

    with open(args.output, "w") as f:
        json.dump(all_results, f, indent=2)

    print("\n" + "=" * 70)
    print(f"All results saved to: {args.output}")
    print("=" * 70)

    return 0 if all(r["is_correct"] for r in all_results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
