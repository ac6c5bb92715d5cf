import json

import pytest

from check_mst import main as check_main, reference_mst, reference_mst_weight
from create_graph_files import create_random_graph, create_sample_graph, main
from graph_connectivity import check_connectivity


def test_sample_graph_shape():
    graph = create_sample_graph()
    assert len(graph.nodes) == 8
    assert len(graph.edges) == 12
    assert [node.label for node in graph.nodes.values()] == list("ABCDEFGH")
    assert reference_mst_weight(graph) == 19


@pytest.mark.parametrize("num_nodes,density,expected", [
    (10, 0.5, 23),
    (10, 1.0, 45),
    (10, 0.0, 9),
    (1, 0.7, 0),
    (2, 0.0, 1),
])
def test_random_graph_edge_counts(num_nodes, density, expected):
    graph = create_random_graph(num_nodes, density, seed=3)
    assert len(graph.nodes) == num_nodes
    assert len(graph.edges) == expected
    assert check_connectivity(graph).connected


def test_random_graph_is_deterministic_per_seed():
    first = create_random_graph(9, 0.4, seed=11)
    second = create_random_graph(9, 0.4, seed=11)
    assert list(first.edges.values()) == list(second.edges.values())
    assert [(n.x, n.y) for n in first.nodes.values()] == [(n.x, n.y) for n in second.nodes.values()]


def test_random_weights_in_range():
    graph = create_random_graph(14, 0.8, seed=5)
    assert all(1 <= edge.weight <= 19 for edge in graph.edges.values())


@pytest.mark.parametrize("num_nodes,density", [(0, 0.5), (5, -0.1), (5, 1.5)])
def test_random_graph_rejects_bad_arguments(num_nodes, density):
    with pytest.raises(ValueError):
        create_random_graph(num_nodes, density)


def test_reference_mst_for_sample():
    weights = sorted(w for _, _, w in reference_mst(create_sample_graph()))
    assert weights == [1, 2, 2, 3, 3, 4, 4]


def test_main_writes_graph_file(tmp_path, capsys):
    assert main(["--nodes", "6", "--density", "0.5", "--seed", "1",
                 "--output-dir", str(tmp_path), "--no-picture"]) == 0
    data = json.loads((tmp_path / "graph.json").read_text())
    assert len(data["nodes"]) == 6
    assert len(data["edges"]) == 8
    assert not (tmp_path / "input_graph.png").exists()
    assert "Graph files created successfully!" in capsys.readouterr().out


def test_main_sample_with_picture(tmp_path):
    assert main(["--sample", "--output-dir", str(tmp_path)]) == 0
    assert (tmp_path / "input_graph.png").exists()
    assert check_main([str(tmp_path / "graph.json")]) == 0


def test_main_rejects_bad_density(tmp_path, capsys):
    assert main(["--density", "2", "--output-dir", str(tmp_path)]) == 1
    assert "Unable to generate graph" in capsys.readouterr().out
