"""
Narration for Prim runs
Turns consecutive engine states into explanations, hints and history
"""

from collections import deque, namedtuple

from prim_implementation import Phase

Narration = namedtuple("Narration", ["prev", "current", "next"])

PSEUDOCODE = [
    "MST = {} ; total = 0",
    "u = start node",
    "add u to MST",
    "while MST has fewer nodes than the graph:",
    "    candidates = edges with exactly one end in MST",
    "    if candidates is empty: graph is disconnected",
    "    (scan candidates in declaration order)",
    "    e = cheapest candidate, earliest on ties",
    "    add the outside end of e to MST",
    "    add e to MST edges ; total += weight(e)",
    "    repeat",
    "return MST",
]

IDLE_TEXT = Narration(
    "Previous step will appear here.",
    "Press start to begin the visualization.",
    "Next: initialize Prim's when you press start.",
)


def _label(labels, node_id):
    return labels.get(node_id, str(node_id))


def format_edge(edge, labels):
    return f"{_label(labels, edge.a)} - {_label(labels, edge.b)} (w={edge.weight})"


def format_stats(state):
    return (
        f"Total Weight: {state.total_weight} | Edges: {len(state.tree_edges)} | "
        f"Nodes in MST: {len(state.tree_nodes)}/{state.node_count}"
    )


def format_candidates(state, labels):
    """Frontier edges cheapest first; sorting is stable so ties keep declaration order"""
    if not state.frontier:
        return ["Queue empty."]
    ordered = sorted(state.frontier, key=lambda edge: edge.weight)
    return [format_edge(edge, labels) for edge in ordered]


def format_tree_edges(state, labels):
    if not state.tree_edges:
        return ["No edges yet."]
    return [format_edge(edge, labels) for edge in state.tree_edges]


def describe(state, labels):
    """Explanation and next-step hint for the step that produced this state"""
    phase = state.phase
    current = _label(labels, state.current_node)

    if phase is Phase.SELECT_START:
        return ("Initializing Prim's algorithm. MST is empty.",
                "Next: choose the starting node to seed the MST.")
    if phase is Phase.ADD_START:
        return (f"Selected starting node: {current}",
                f"Next: add {current} to the MST.")
    if phase is Phase.CHECK_COMPLETE and not state.tree_edges:
        return (f"Added node {current} to MST. MST now has {len(state.tree_nodes)} node(s).",
                "Next: check whether all nodes are already in the MST.")
    if phase is Phase.CHECK_COMPLETE:
        return ("Returning to loop condition check.",
                "Next: evaluate whether the MST is complete.")
    if phase is Phase.SUCCEEDED:
        return ("MST is complete! All nodes are connected.",
                "Process complete. No further steps.")
    if phase is Phase.COMPUTE_FRONTIER:
        return (f"MST has {len(state.tree_nodes)}/{state.node_count} nodes. Continuing loop.",
                "Next: gather candidate edges along the frontier.")
    if phase is Phase.SELECT_MIN_EDGE:
        return (f"Found {len(state.frontier)} candidate edge(s) spanning the frontier.",
                "Next: choose the cheapest frontier edge.")
    if phase is Phase.FAILED:
        return ("No edges bridge the frontier. Graph is disconnected.",
                "Cannot continue without connecting edges.")
    if phase is Phase.ADD_NODE:
        edge = state.frontier[0]
        old = _label(labels, edge.other(state.current_node))
        return (f"Cheapest edge {old}-{current} (w={edge.weight}) selected.",
                f"Next: add node {current} into the MST.")
    if phase is Phase.COMMIT_EDGE:
        return (f"Added node {current} to MST.",
                "Next: lock the selected edge into the MST.")
    if phase is Phase.LOOP_BACK:
        return (f"Edge committed. Total MST weight now {state.total_weight}.",
                "Next: return to the loop condition.")
    return IDLE_TEXT.current, IDLE_TEXT.next


def code_lines(state):
    """Pseudocode line numbers to highlight for a state"""
    phase = state.phase
    if phase is Phase.CHECK_COMPLETE:
        return (10,) if state.tree_edges else (2,)
    return {
        Phase.SELECT_START: (0,),
        Phase.ADD_START: (1,),
        Phase.COMPUTE_FRONTIER: (3,),
        Phase.SELECT_MIN_EDGE: (4, 5, 6),
        Phase.ADD_NODE: (7,),
        Phase.COMMIT_EDGE: (8,),
        Phase.LOOP_BACK: (9,),
        Phase.SUCCEEDED: (11,),
    }.get(phase, ())


class Narrator:
    """Keeps the prev/current/next narration and a newest-first history"""

    def __init__(self, history_limit=14):
        self.history = deque(maxlen=history_limit)
        self.narration = IDLE_TEXT
        self.highlight = ()
        self._last = None

    def reset(self):
        self.history.clear()
        self.narration = Narration(self.narration.current, IDLE_TEXT.current, IDLE_TEXT.next)
        self.highlight = ()
        self._last = None

    def observe(self, state, labels):
        """Record a new engine state; returns the explanation, or None if unchanged"""
        before = self._last
        self._last = state
        if before is not None and before.steps == state.steps and before.phase is state.phase:
            return None
        text, hint = describe(state, labels)
        self.narration = Narration(self.narration.current, text, hint)
        self.highlight = code_lines(state)
        self.history.appendleft(text)
        return text

    def history_lines(self):
        return list(self.history) if self.history else ["No steps yet."]
