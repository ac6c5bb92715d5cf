import json
import random

import pytest

from check_mst import reference_mst_weight, verify_state
from create_graph_files import create_random_graph
from prim_graph import Edge, GraphModel, GraphSnapshot
from prim_implementation import (
    InvalidStartNodeError,
    Phase,
    PrimStepEngine,
    RunInProgressError,
    iter_steps,
    run_to_completion,
    visualize,
)

LOOP = [
    Phase.COMPUTE_FRONTIER,
    Phase.SELECT_MIN_EDGE,
    Phase.ADD_NODE,
    Phase.COMMIT_EDGE,
    Phase.LOOP_BACK,
    Phase.CHECK_COMPLETE,
]


def triples(edges):
    return [(e.a, e.b, e.weight) for e in edges]


def started(graph, start=0):
    engine = PrimStepEngine()
    engine.initialize(graph, start)
    return engine


def test_sample_scenario(sample_graph):
    engine = started(sample_graph)
    state = run_to_completion(engine)
    assert state.phase is Phase.SUCCEEDED
    assert triples(state.tree_edges) == [
        (0, 3, 2), (3, 4, 1), (4, 7, 2), (6, 7, 3), (0, 1, 4), (5, 7, 4), (2, 5, 3),
    ]
    assert state.total_weight == 19
    assert state.tree_nodes == (0, 3, 4, 7, 6, 1, 5, 2)
    assert state.current_node is None
    assert state.frontier == ()
    assert state.steps == 3 + 6 * 7


def test_sample_phase_sequence(sample_graph):
    engine = started(sample_graph)
    assert engine.get_state().phase is Phase.SELECT_START
    phases = [state.phase for state in iter_steps(engine)]
    expected = [Phase.ADD_START, Phase.CHECK_COMPLETE] + LOOP * 7 + [Phase.SUCCEEDED]
    assert phases == expected


def test_equal_weights_keep_earliest_edge(sample_graph):
    engine = started(sample_graph)
    # Run until (0,1,4) and (5,7,4) are both on the frontier and one is chosen
    for state in iter_steps(engine):
        if state.phase is Phase.ADD_NODE and len(state.tree_edges) == 4:
            break
    assert triples(state.frontier) == [(0, 1, 4)]
    assert state.current_node == 1


@pytest.mark.parametrize("first,second", [((0, 1), (0, 2)), ((0, 2), (0, 1))])
def test_tie_break_follows_declaration_order(first, second):
    graph = GraphModel()
    for _ in range(3):
        graph.add_node()
    graph.add_edge(*first, 5)
    graph.add_edge(*second, 5)
    state = run_to_completion(started(graph))
    assert (state.tree_edges[0].a, state.tree_edges[0].b) == first


def test_single_node_succeeds_after_three_steps():
    graph = GraphModel()
    graph.add_node()
    engine = started(graph)
    assert engine.step() is True
    assert engine.step() is True
    assert engine.step() is False
    state = engine.get_state()
    assert state.phase is Phase.SUCCEEDED
    assert state.tree_nodes == (0,)
    assert state.tree_edges == ()
    assert state.total_weight == 0
    assert state.steps == 3


def test_disconnected_graph_fails_with_partial_tree(split_graph):
    engine = started(split_graph)
    state = run_to_completion(engine)
    assert state.phase is Phase.FAILED
    assert state.tree_nodes == (0, 1)
    assert triples(state.tree_edges) == [(0, 1, 1)]
    assert state.total_weight == 1
    assert state.steps == 11
    assert state.current_node == 1


def test_terminal_step_is_a_noop(sample_graph, split_graph):
    for graph in (sample_graph, split_graph):
        engine = started(graph)
        final = run_to_completion(engine)
        assert engine.step() is False
        assert engine.step() is False
        assert engine.get_state() == final


def test_step_before_initialize_does_nothing():
    engine = PrimStepEngine()
    assert engine.step() is False
    assert engine.get_state() == PrimStepEngine().get_state()
    assert list(iter_steps(engine)) == []


def test_reset_matches_fresh_engine(sample_graph):
    engine = started(sample_graph)
    for _ in range(17):
        engine.step()
    engine.reset()
    assert engine.get_state() == PrimStepEngine().get_state()
    engine.reset()
    assert engine.get_state().phase is Phase.NOT_STARTED
    # Usable again after reset
    engine.initialize(sample_graph, 5)
    assert run_to_completion(engine).total_weight == 19


def test_initialize_rejects_bad_start_nodes(sample_graph):
    engine = PrimStepEngine()
    with pytest.raises(InvalidStartNodeError):
        engine.initialize(GraphModel(), 0)
    with pytest.raises(InvalidStartNodeError):
        engine.initialize(sample_graph, None)
    with pytest.raises(InvalidStartNodeError):
        engine.initialize(sample_graph, 42)
    assert engine.get_state().phase is Phase.NOT_STARTED


def test_initialize_requires_reset_after_a_run(split_graph):
    engine = started(split_graph)
    with pytest.raises(RunInProgressError):
        engine.initialize(split_graph, 0)
    run_to_completion(engine)
    with pytest.raises(RunInProgressError):
        engine.initialize(split_graph, 2)
    engine.reset()
    engine.initialize(split_graph, 2)
    assert engine.get_state().start_node == 2


def test_run_ignores_edits_after_initialize(sample_graph):
    engine = started(sample_graph)
    sample_graph.add_node()
    sample_graph.remove_edge(sample_graph.find_edge(0, 3))
    state = run_to_completion(engine)
    assert state.phase is Phase.SUCCEEDED
    assert state.node_count == 8
    assert state.total_weight == 19


def test_initialize_accepts_snapshot(sample_graph):
    engine = PrimStepEngine()
    engine.initialize(sample_graph.snapshot(), 0)
    assert run_to_completion(engine).total_weight == 19


def test_runs_are_deterministic(sample_graph):
    runs = []
    for _ in range(3):
        engine = started(sample_graph, 6)
        runs.append([(s.phase, s.tree_edges, s.total_weight) for s in iter_steps(engine)])
    assert runs[0] == runs[1] == runs[2]


def test_invariants_hold_at_checkpoints(sample_graph):
    engine = started(sample_graph, 2)
    for state in iter_steps(engine):
        assert state.total_weight == sum(e.weight for e in state.tree_edges)
        in_tree = set(state.tree_nodes)
        if state.phase in (Phase.CHECK_COMPLETE, Phase.SUCCEEDED, Phase.FAILED):
            assert len(state.tree_edges) == len(state.tree_nodes) - 1
        if state.phase is Phase.SELECT_MIN_EDGE:
            assert all((e.a in in_tree) != (e.b in in_tree) for e in state.frontier)
        if state.phase is Phase.ADD_NODE:
            assert len(state.frontier) == 1
            assert state.current_node not in in_tree


def test_frontier_recomputed_in_creation_order(sample_graph):
    engine = started(sample_graph)
    for state in iter_steps(engine):
        if state.phase is Phase.SELECT_MIN_EDGE and len(state.tree_nodes) == 3:
            break
    # Tree is {0, 3, 4}
    assert triples(state.frontier) == [
        (0, 1, 4), (1, 4, 5), (3, 6, 8), (4, 5, 7), (4, 6, 9), (4, 7, 2),
    ]


@pytest.mark.parametrize("seed", range(25))
def test_random_graphs_reach_optimal_tree(seed):
    rng = random.Random(seed)
    num_nodes = rng.randint(1, 14)
    graph = create_random_graph(num_nodes, rng.random(), seed=seed)
    start = rng.choice(list(graph.nodes))
    state = run_to_completion(started(graph, start))
    assert state.phase is Phase.SUCCEEDED
    assert len(state.tree_edges) == num_nodes - 1
    assert len(set(state.tree_nodes)) == num_nodes
    assert state.total_weight == reference_mst_weight(graph)
    assert verify_state(graph, state) == []


def test_verify_state_reports_incomplete_run(split_graph):
    state = run_to_completion(started(split_graph))
    problems = verify_state(split_graph, state)
    assert "tree has 2 of 4 nodes" in problems


def test_visualize_writes_picture(sample_graph, tmp_path):
    engine = started(sample_graph)
    for _ in range(10):
        engine.step()
    path = tmp_path / "step.png"
    mst_graph = visualize(sample_graph, engine.get_state(), str(path))
    assert path.exists() and path.stat().st_size > 0
    assert mst_graph.number_of_edges() == len(engine.get_state().tree_edges)


def test_experiments_cli_writes_results(tmp_path, capsys):
    from prim_implementation import main

    output = tmp_path / "results.json"
    assert main(["--output", str(output)]) == 0
    results = json.loads(output.read_text())
    assert len(results) == 6
    assert all(r["is_correct"] for r in results)
    assert results[0]["steps"] == 3 + 6 * 4
    assert "SUMMARY" in capsys.readouterr().out


def test_initialize_accepts_snapshot_without_labels():
    snapshot = GraphSnapshot(node_ids=(0, 1), edges=(Edge(0, 0, 1, 3),))
    engine = PrimStepEngine()
    engine.initialize(snapshot, 0)
    state = run_to_completion(engine)
    assert state.phase is Phase.SUCCEEDED
    assert state.total_weight == 3
    with pytest.raises(InvalidStartNodeError):
        PrimStepEngine().initialize(snapshot, 2)
