"""
Interactive session for stepping through Prim's algorithm
Owns the graph, the engine, the narration and the auto-run timer
"""

import logging
import sys

from auto_run import AutoRunner, run_until_done
from create_graph_files import create_random_graph, create_sample_graph
from graph_connectivity import analyze_graph
from graph_io import ImportParseError, dumps_graph, import_graph, load_graph, save_graph
from prim_config import VisualizerConfig, load_config
from prim_graph import GraphError, GraphModel
from prim_implementation import (
    InvalidStartNodeError,
    Phase,
    PrimEngineError,
    PrimStepEngine,
    visualize,
)
from prim_narration import (
    Narrator,
    format_candidates,
    format_stats,
    format_tree_edges,
)

logger = logging.getLogger(__name__)


class PrimVisualizer:
    """Editing and playback controller

    Any structural edit resets the current run, so the engine never sees a
    graph that changed under it. Moving a node keeps the run.
    """

    def __init__(self, config=None, timer_factory=None):
        self.config = config or VisualizerConfig()
        self.graph = GraphModel()
        self.engine = PrimStepEngine()
        self.narrator = Narrator(self.config.history_limit)
        runner_kwargs = {"on_stop": self._auto_stopped, "config": self.config}
        if timer_factory is not None:
            runner_kwargs["timer_factory"] = timer_factory
        self.auto_runner = AutoRunner(self.step, self.config.interval_ms, **runner_kwargs)
        self.start_node = None
        self.mst_only = False
        self.status = "Welcome! Load the sample graph or start drawing."

    # Graph editing

    def _structure_changed(self, message):
        self.reset()
        if self.start_node not in self.graph.nodes:
            self.start_node = next(iter(self.graph.nodes), None)
        self.status = message
        logger.debug(message)

    def add_node(self, x, y, label=None):
        node = self.graph.add_node(x, y, label)
        self._structure_changed(f"Node {node.label} added.")
        return node

    def remove_node(self, node_id):
        node = self.graph.remove_node(node_id)
        self._structure_changed(f"Node {node.label} removed.")
        return node

    def rename_node(self, node_id, label):
        node = self.graph.rename_node(node_id, label, self.config.max_label_length)
        self._structure_changed(f"Node renamed to {node.label}.")
        return node

    def move_node(self, node_id, x, y):
        return self.graph.move_node(node_id, x, y, self.config.bounds)

    def add_edge(self, a, b, weight=None):
        """Join two nodes; a rejected edge keeps the current run and re-raises"""
        if weight is None:
            weight = self.config.default_edge_weight
        try:
            edge = self.graph.add_edge(a, b, weight)
        except GraphError as e:
            self.status = str(e)
            raise
        labels = self.labels
        self._structure_changed(
            f"Edge added: {labels[a]}-{labels[b]} (w={edge.weight})."
        )
        return edge

    def remove_edge(self, edge):
        removed = self.graph.remove_edge(edge)
        self._structure_changed("Edge removed.")
        return removed

    def clear(self):
        self.graph.clear()
        self._structure_changed("Canvas cleared.")

    def load_sample(self):
        self.graph = create_sample_graph()
        self._structure_changed("Sample graph loaded! Start Prim's to visualize.")

    def generate_random(self, num_nodes, density, seed=None):
        self.graph = create_random_graph(num_nodes, density, seed, self.config)
        self._structure_changed("Random, connected graph generated.")

    def import_json(self, text):
        """Replace the graph from JSON; the current graph survives a parse error"""
        try:
            graph = import_graph(text)
        except ImportParseError:
            self.status = "Unable to import graph. Please provide valid JSON."
            raise
        self.graph = graph
        self._structure_changed("Graph imported from JSON.")

    def load_file(self, path):
        self.graph = load_graph(path)
        self._structure_changed(f"Graph loaded from {path}.")

    def export_json(self):
        self.status = "Graph exported to JSON."
        return dumps_graph(self.graph)

    def select_start(self, node_id):
        self.graph.get_node(node_id)
        self.start_node = node_id

    # Playback

    def start(self):
        """Reset any previous run and initialize from the selected start node"""
        if not self.graph.nodes:
            self.status = "Please add some nodes first!"
            raise InvalidStartNodeError("graph has no nodes")
        self.reset()
        start = self.start_node if self.start_node in self.graph.nodes else None
        if start is None:
            start = next(iter(self.graph.nodes))
        self.start_node = start
        self.engine.initialize(self.graph, start)
        self.narrator.observe(self.engine.get_state(), self.labels)
        self.status = (
            f"Prim's initialized from node {self.graph.nodes[start].label}. "
            "Step through or auto run."
        )

    def step(self):
        more = self.engine.step()
        state = self.engine.get_state()
        self.narrator.observe(state, self.labels)
        return more

    def toggle_auto(self):
        if not self.engine.get_state().running:
            return False
        return self.auto_runner.toggle()

    def set_interval(self, interval_ms):
        self.auto_runner.set_interval(interval_ms)

    def reset(self):
        self.auto_runner.pause()
        self.engine.reset()
        self.narrator.reset()
        self.mst_only = False

    def _auto_stopped(self):
        self.status = f"Auto run stopped: {self.engine.phase.value}."

    def toggle_mst_only(self):
        """Show only tree edges; available after a successful run"""
        if self.engine.phase is not Phase.SUCCEEDED:
            self.mst_only = False
            return False
        self.mst_only = not self.mst_only
        return self.mst_only

    # Views

    @property
    def labels(self):
        return {node_id: node.label for node_id, node in self.graph.nodes.items()}

    @property
    def state(self):
        return self.engine.get_state()

    def health(self):
        return analyze_graph(self.graph)

    def visible_edges(self):
        state = self.engine.get_state()
        if self.mst_only:
            return list(state.tree_edges)
        return list(self.graph.edges.values())

    def summary_lines(self):
        state = self.engine.get_state()
        lines = [format_stats(state), "MST edges:"]
        lines += [f"  {line}" for line in format_tree_edges(state, self.labels)]
        lines.append("Candidates:")
        lines += [f"  {line}" for line in format_candidates(state, self.labels)]
        return lines


def main(argv=None):
    """Step through Prim's algorithm on a graph from the command line"""
    import argparse

    parser = argparse.ArgumentParser(
        description="Watch Prim's algorithm build a minimum spanning tree step by step"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--sample", action="store_true", help="Use the sample graph (default)")
    source.add_argument("--random", type=int, metavar="N", help="Random graph with N nodes")
    source.add_argument("--import", dest="import_path", type=str, help="Graph JSON file")
    parser.add_argument("--density", type=float, default=0.4, help="Random graph density")
    parser.add_argument("--seed", type=int, default=None, help="Random graph seed")
    parser.add_argument("--start", type=int, default=None, help="Start node id")
    parser.add_argument("--config", type=str, default=None, help="JSON config file")
    parser.add_argument("--interval", type=int, default=0, help="Delay between steps in ms")
    parser.add_argument("--export", type=str, default=None, help="Write the graph JSON here")
    parser.add_argument("--plot", type=str, default=None, help="Save the final picture here")
    parser.add_argument("--verbose", action="store_true", help="Log every step")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        config = load_config(args.config)
        session = PrimVisualizer(config)
        if args.random is not None:
            session.generate_random(args.random, args.density, args.seed)
        elif args.import_path:
            session.load_file(args.import_path)
        else:
            session.load_sample()
        if args.start is not None:
            session.select_start(args.start)
    except (OSError, ValueError, GraphError) as e:
        print(f"Unable to prepare graph: {e}")
        return 1

    print("=" * 70)
    print("Stepwise Prim's Algorithm")
    print("=" * 70)
    print(session.status)
    print(f"Health: {session.health().text}")
    print("\nAdjacency:")
    for line in session.graph.adjacency_lines():
        print(f"  {line}")

    try:
        session.start()
    except PrimEngineError as e:
        print(f"Unable to start: {e}")
        return 1

    print("\n" + "-" * 70)
    print(f"[{0:>3}] {session.narrator.narration.current}")

    def step_and_print():
        more = session.step()
        state = session.state
        print(f"[{state.steps:>3}] {session.narrator.narration.current}")
        return more

    run_until_done(step_and_print, args.interval)

    print("-" * 70)
    for line in session.summary_lines():
        print(line)

    if args.export:
        save_graph(args.export, session.graph)
        print(f"\nGraph saved to {args.export}")
    if args.plot:
        visualize(session.graph, session.state, args.plot)
        print(f"Visualization saved to {args.plot}")

    print("=" * 70)
    return 0 if session.state.phase is Phase.SUCCEEDED else 1


if __name__ == "__main__":
    sys.exit(main())
