"""
Graph Metrics

NetworkX-backed structural measures used by the cascade analysis. Community
detection runs on an igraph copy of the graph.

Topology (one value per graph):
- Global efficiency
- Krackhardt connectedness
- Krackhardt hierarchy (1 - dyadic reciprocity)
- Krackhardt least-upper-boundedness

Per-node measures (one raw value per node, in graph node order):
- Community membership (Walktrap via python-igraph, ordinal ids starting at 1)
- Burt's constraint
- Local clustering coefficient (NaN below degree 2)
- Normalized betweenness centrality
- Eigenvector centrality
- Harmonic centrality
- Alpha centrality

Per-node functions raise ComputationDegradation when the library cannot
produce a value for the given topology. Normalization is left to the caller.
"""

from __future__ import annotations

import functools
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Tuple

import igraph as ig
import networkx as nx
import numpy as np

from ..core.exceptions import ComputationDegradation
from ..core.records import label_sort_key
from .numeric import finite_or_none


def build_graph(nodes: Iterable[Any], edges: Iterable[Tuple[Any, Any]],
                **node_attributes: Dict[Any, Any]) -> nx.Graph:
    """
    Build a simple undirected graph with nodes in sorted id order.

    Parallel edges collapse. Keyword arguments are node attribute maps,
    e.g. ``build_graph(nodes, edges, layer=layers, gamma=gammas)``.
    """
    graph = nx.Graph()
    graph.add_nodes_from(sorted(set(nodes), key=label_sort_key))
    graph.add_edges_from(edges)
    for name, values in node_attributes.items():
        nx.set_node_attributes(graph, values, name)
    return graph


# =============================================================================
# Topology
# =============================================================================

@dataclass(frozen=True)
class TopologyMetrics:
    """Graph-level structure measures. NaN marks an undefined measure."""
    efficiency: float
    connectedness: float
    hierarchy: float
    lubness: float

    def components(self) -> List[float]:
        """Measures oriented so that higher means more cohesive."""
        return [
            self.efficiency,
            self.connectedness,
            1.0 - self.hierarchy,
            1.0 - self.lubness,
        ]

    def mean(self) -> float:
        """Average of the finite components; 0 when none are finite."""
        finite = [v for v in self.components() if math.isfinite(v)]
        return float(np.mean(finite)) if finite else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "efficiency": finite_or_none(self.efficiency, 6),
            "connectedness": finite_or_none(self.connectedness, 6),
            "hierarchy": finite_or_none(self.hierarchy, 6),
            "lubness": finite_or_none(self.lubness, 6),
        }


def _components(graph: nx.Graph) -> List[set]:
    if graph.is_directed():
        return [set(c) for c in nx.weakly_connected_components(graph)]
    return [set(c) for c in nx.connected_components(graph)]


def global_efficiency(graph: nx.Graph) -> float:
    """Average inverse shortest-path length over all node pairs."""
    if graph.number_of_nodes() < 2:
        return float("nan")
    if graph.is_directed():
        graph = graph.to_undirected()
    return float(nx.global_efficiency(graph))


def krackhardt_connectedness(graph: nx.Graph) -> float:
    """
    Fraction of node pairs that are (weakly) reachable from each other.

    Returns NaN for graphs with fewer than two nodes.
    """
    n = graph.number_of_nodes()
    if n < 2:
        return float("nan")

    reachable = sum(len(c) * (len(c) - 1) / 2 for c in _components(graph))
    return float(reachable / (n * (n - 1) / 2))


def krackhardt_hierarchy(graph: nx.Graph) -> float:
    """
    1 - dyadic reciprocity.

    Reciprocity counts symmetric dyads (mutual or null) among all unordered
    pairs. An undirected graph is fully reciprocal, so its hierarchy is 0.
    """
    n = graph.number_of_nodes()
    if n < 2:
        return float("nan")

    adjacency = nx.to_numpy_array(graph, weight=None) > 0
    upper = np.triu_indices(n, k=1)
    symmetric = adjacency[upper] == adjacency.T[upper]
    return float(1.0 - symmetric.mean())


def least_upper_boundedness(graph: nx.Graph) -> float:
    """
    Krackhardt's LUB: share of node pairs with a least upper bound.

    Within every weak component of more than two nodes, a pair (i, j)
    violates the condition when no node is reachable from both, or when
    none of their common upper bounds reaches all the others. The result is
    1 - violations / max_violations, with max_violations summing
    (s-1)(s-2)/2 over those components. NaN when no component qualifies.
    """
    nodes = list(graph.nodes())
    index = {node: i for i, node in enumerate(nodes)}

    # reflexive reachability: reach[a, b] means b is reachable from a
    reach = np.eye(len(nodes), dtype=bool)
    for node in nodes:
        for other in nx.descendants(graph, node):
            reach[index[node], index[other]] = True

    violations = 0.0
    max_violations = 0.0
    for component in _components(graph):
        size = len(component)
        if size <= 2:
            continue
        max_violations += (size - 1) * (size - 2) / 2

        members = np.array(sorted(index[v] for v in component))
        sub = reach[np.ix_(members, members)]
        if sub.all():
            continue

        for a in range(size):
            for b in range(a + 1, size):
                bounds = np.flatnonzero(sub[a] & sub[b])
                if bounds.size == 0:
                    violations += 1
                    continue
                among = sub[np.ix_(bounds, bounds)]
                if not among.all(axis=1).any():
                    violations += 1

    if max_violations == 0:
        return float("nan")
    return float(1.0 - violations / max_violations)


def compute_topology(graph: nx.Graph) -> TopologyMetrics:
    return TopologyMetrics(
        efficiency=global_efficiency(graph),
        connectedness=krackhardt_connectedness(graph),
        hierarchy=krackhardt_hierarchy(graph),
        lubness=least_upper_boundedness(graph),
    )


# =============================================================================
# Per-node metrics
# =============================================================================

_LIBRARY_ERRORS = (
    nx.NetworkXException,
    np.linalg.LinAlgError,
    ArithmeticError,
    ValueError,
    ig.InternalError,
)


def degrades_as(metric: str) -> Callable:
    """Re-raise library failures of a metric as ComputationDegradation."""
    def decorator(func: Callable[[nx.Graph], np.ndarray]) -> Callable[[nx.Graph], np.ndarray]:
        @functools.wraps(func)
        def wrapper(graph: nx.Graph) -> np.ndarray:
            try:
                return func(graph)
            except _LIBRARY_ERRORS as e:
                raise ComputationDegradation(metric, str(e)) from e
        return wrapper
    return decorator


def _ordered(graph: nx.Graph, values: Dict[Any, float]) -> np.ndarray:
    return np.array([values.get(node, np.nan) for node in graph.nodes()], dtype=float)


def to_igraph(graph: nx.Graph) -> ig.Graph:
    """Undirected igraph copy; vertex i is the i-th node of ``graph``."""
    index = {node: i for i, node in enumerate(graph.nodes())}
    return ig.Graph(
        n=len(index),
        edges=[(index[u], index[v]) for u, v in graph.edges()],
        directed=False,
    )


@degrades_as("community")
def community_membership(graph: nx.Graph) -> np.ndarray:
    """
    1-based Walktrap community id of each node.

    The dendrogram is cut at its modularity maximum. Ids follow first
    appearance in node order, so the first node is always in community 1.
    """
    clustering = to_igraph(graph).community_walktrap().as_clustering()
    return np.array(clustering.membership, dtype=float) + 1.0


@degrades_as("constraint")
def structural_constraint(graph: nx.Graph) -> np.ndarray:
    """Burt's constraint; NaN for isolated nodes."""
    return _ordered(graph, nx.constraint(graph))


@degrades_as("clustering")
def local_clustering(graph: nx.Graph) -> np.ndarray:
    """Local clustering coefficient, undefined (NaN) for degree below 2."""
    clustering = nx.clustering(graph)
    values = {
        node: clustering[node] if graph.degree(node) >= 2 else np.nan
        for node in graph.nodes()
    }
    return _ordered(graph, values)


@degrades_as("betweenness")
def betweenness(graph: nx.Graph) -> np.ndarray:
    return _ordered(graph, nx.betweenness_centrality(graph, normalized=True))


@degrades_as("eigenvector")
def eigenvector(graph: nx.Graph) -> np.ndarray:
    return _ordered(graph, nx.eigenvector_centrality(graph, max_iter=1000))


@degrades_as("harmonic")
def harmonic(graph: nx.Graph) -> np.ndarray:
    return _ordered(graph, nx.harmonic_centrality(graph))


def alpha_centrality(graph: nx.Graph, alpha: float = 0.9) -> np.ndarray:
    """
    Bonacich alpha centrality, x = (I - alpha * A^T)^-1 * 1.

    Solved directly (Katz with unit exogenous status, unnormalized), so no
    convergence condition on alpha applies; a singular system degrades.
    """
    try:
        values = nx.katz_centrality_numpy(graph, alpha=alpha, beta=1.0, normalized=False)
    except _LIBRARY_ERRORS as e:
        raise ComputationDegradation("alpha", str(e)) from e

    result = _ordered(graph, values)
    if not np.isfinite(result).all():
        raise ComputationDegradation("alpha", "non-finite solution")
    return result
