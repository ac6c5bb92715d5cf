import os
import sys

import matplotlib

# Tests never open windows
matplotlib.use("Agg")

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from create_graph_files import create_sample_graph
from prim_graph import GraphModel


@pytest.fixture
def sample_graph():
    return create_sample_graph()


@pytest.fixture
def split_graph():
    """Two components: A-B and C-D"""
    graph = GraphModel()
    for _ in range(4):
        graph.add_node()
    graph.add_edge(0, 1, 1)
    graph.add_edge(2, 3, 1)
    return graph
