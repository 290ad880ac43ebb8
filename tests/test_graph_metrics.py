"""
Unit Tests for centr_impact.analysis.graph_metrics

Tests for:
    - Graph construction (sorted node order, attributes)
    - Topology measures (efficiency, connectedness, hierarchy, LUB)
    - Per-node measures and their degradation
"""

import math

import igraph as ig
import networkx as nx
import numpy as np
import pytest

from centr_impact.analysis import graph_metrics
from centr_impact.analysis.graph_metrics import (
    TopologyMetrics,
    build_graph,
    compute_topology,
    degrades_as,
    krackhardt_connectedness,
    krackhardt_hierarchy,
    least_upper_boundedness,
)
from centr_impact.core import ComputationDegradation


@pytest.fixture
def triangle():
    return build_graph([1, 2, 3], [(1, 2), (1, 3), (2, 3)])


@pytest.fixture
def bridged_triangles():
    return build_graph(
        range(1, 7),
        [(1, 2), (1, 3), (2, 3), (4, 5), (4, 6), (5, 6), (3, 4)],
    )


class TestBuildGraph:

    def test_sorted_node_order(self):
        graph = build_graph([3, 1, 2], [(3, 1), (1, 2)])
        assert list(graph.nodes()) == [1, 2, 3]

    def test_numbers_before_strings(self):
        graph = build_graph(["b", 2, "a", 1], [])
        assert list(graph.nodes()) == [1, 2, "a", "b"]

    def test_parallel_edges_collapse(self):
        graph = build_graph([1, 2], [(1, 2), (2, 1), (1, 2)])
        assert graph.number_of_edges() == 1
        assert not graph.is_directed()

    def test_node_attributes(self):
        graph = build_graph([1, 2], [(1, 2)], layer={1: 1, 2: 4})
        assert graph.nodes[2]["layer"] == 4


class TestTopology:

    def test_clique(self, triangle):
        topology = compute_topology(triangle)
        assert topology.efficiency == pytest.approx(1.0)
        assert topology.connectedness == pytest.approx(1.0)
        assert topology.hierarchy == pytest.approx(0.0)
        assert topology.lubness == pytest.approx(1.0)
        assert topology.mean() == pytest.approx(0.75)

    def test_path(self):
        topology = compute_topology(build_graph([1, 2, 3, 4], [(1, 2), (2, 3), (3, 4)]))
        assert topology.efficiency == pytest.approx((3 + 2 * 0.5 + 1 / 3) / 6)
        assert topology.connectedness == pytest.approx(1.0)

    def test_disconnected_pairs(self):
        topology = compute_topology(build_graph([1, 2, 3, 4], [(1, 2), (3, 4)]))
        assert topology.connectedness == pytest.approx(1 / 3)
        assert math.isnan(topology.lubness)
        # lubness is skipped in the average
        assert topology.mean() == pytest.approx((1 / 3 + 1 / 3 + 1.0) / 3)

    def test_no_finite_measure(self):
        nan = float("nan")
        assert TopologyMetrics(nan, nan, nan, nan).mean() == 0.0
        assert TopologyMetrics(nan, nan, nan, nan).to_dict()["lubness"] is None

    def test_single_node(self):
        graph = build_graph([1], [])
        assert math.isnan(krackhardt_connectedness(graph))
        assert math.isnan(krackhardt_hierarchy(graph))

    def test_directed_hierarchy(self):
        graph = nx.DiGraph([(1, 2), (2, 3)])
        assert krackhardt_hierarchy(graph) == pytest.approx(2 / 3)

    def test_lub_out_star_violates(self):
        graph = nx.DiGraph([(1, 2), (1, 3)])
        assert least_upper_boundedness(graph) == pytest.approx(0.0)

    def test_lub_in_star_is_bounded(self):
        graph = nx.DiGraph([(2, 1), (3, 1)])
        assert least_upper_boundedness(graph) == pytest.approx(1.0)


class TestNodeMetrics:

    def test_community_membership(self, bridged_triangles):
        membership = graph_metrics.community_membership(bridged_triangles)
        assert membership[0] == membership[1] == membership[2]
        assert membership[3] == membership[4] == membership[5]
        assert set(membership.tolist()) == {1.0, 2.0}

    def test_community_ids_follow_node_order(self):
        # small triangle first, larger K4 second: ids are not size-ranked
        edges = [(1, 2), (1, 3), (2, 3), (3, 4),
                 (4, 5), (4, 6), (4, 7), (5, 6), (5, 7), (6, 7)]
        graph = build_graph(range(1, 8), edges)
        membership = graph_metrics.community_membership(graph)
        assert membership.tolist() == [1.0, 1.0, 1.0, 2.0, 2.0, 2.0, 2.0]

    def test_star_is_one_community(self):
        graph = build_graph([1, 2, 3, 4], [(1, 2), (1, 3), (1, 4)])
        membership = graph_metrics.community_membership(graph)
        assert membership.tolist() == [1.0, 1.0, 1.0, 1.0]

    def test_to_igraph_keeps_node_order(self):
        graph = build_graph(["b", "a", 3], [("a", 3), ("b", "a")])
        copy = graph_metrics.to_igraph(graph)
        assert copy.vcount() == 3
        assert not copy.is_directed()
        # node order is [3, "a", "b"]
        assert sorted(tuple(sorted(e.tuple)) for e in copy.es) == [(0, 1), (1, 2)]

    def test_igraph_errors_become_degradation(self):
        @degrades_as("community")
        def broken(graph):
            raise ig.InternalError("walktrap failed")

        with pytest.raises(ComputationDegradation) as exc_info:
            broken(nx.Graph())
        assert exc_info.value.metric == "community"

    def test_clustering_undefined_below_degree_two(self):
        graph = build_graph([1, 2, 3], [(1, 2), (2, 3)])
        clustering = graph_metrics.local_clustering(graph)
        assert math.isnan(clustering[0])
        assert clustering[1] == 0.0
        assert math.isnan(clustering[2])

    def test_betweenness(self):
        graph = build_graph([1, 2, 3], [(1, 2), (2, 3)])
        np.testing.assert_allclose(graph_metrics.betweenness(graph), [0.0, 1.0, 0.0])

    def test_symmetric_graph_gives_equal_values(self, triangle):
        for func in (graph_metrics.structural_constraint,
                     graph_metrics.eigenvector,
                     graph_metrics.harmonic):
            values = func(triangle)
            assert values.shape == (3,)
            assert np.allclose(values, values[0])

    def test_harmonic(self, triangle):
        np.testing.assert_allclose(graph_metrics.harmonic(triangle), [2.0, 2.0, 2.0])

    def test_alpha_centrality(self, triangle):
        values = graph_metrics.alpha_centrality(triangle, alpha=0.9)
        assert values.shape == (3,)
        assert np.isfinite(values).all()

    def test_alpha_singular_system_degrades(self):
        graph = build_graph([1, 2], [(1, 2)])
        with pytest.raises(ComputationDegradation) as exc_info:
            graph_metrics.alpha_centrality(graph, alpha=1.0)
        assert exc_info.value.metric == "alpha"

    def test_library_errors_become_degradation(self):
        @degrades_as("broken")
        def broken(graph):
            raise nx.NetworkXError("no solution")

        with pytest.raises(ComputationDegradation) as exc_info:
            broken(nx.Graph())
        assert exc_info.value.metric == "broken"
        assert "no solution" in str(exc_info.value)
