"""
Cascade Analyzer

Implements the "Cascade" component of CEnTR*IMPACT: how evenly social
influence is spread across the degrees of separation of a project network.

Pipeline:
1. Node layer = minimum layer over incident edges (default 4)
2. gamma(layer) discount: 1 -> 0.9, 2 -> 0.5, 3 -> 0.45, otherwise 0.1
3. Topology bonus T = lambda * mean(efficiency, connectedness,
   1 - hierarchy, 1 - lubness), identical for every node
4. Four influence roles per node, each min-max normalized:

       knitting   = gamma * (a * community    + b * eigenvector) + T
       bridging   = gamma * (a * cross_clique + b * betweenness) + T
       channeling = gamma * (a * betweenness  + b * alpha)       + T
       reaching   = gamma * (a * clustering   + b * harmonic)    + T

5. composite = mean of the roles; layer score = mean composite per layer
6. S_c = 1 - Gini(layer scores)

A per-node metric that cannot be computed for the topology is replaced by
a zero vector and named in ``degraded_metrics``.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import networkx as nx
import numpy as np
import pandas as pd

from ..core.exceptions import ComputationDegradation, SchemaError
from ..core.records import RecordInput, coerce_float, coerce_rows, is_missing, native
from . import graph_metrics
from .graph_metrics import TopologyMetrics, build_graph, compute_topology
from .interpretation import BalanceLevel
from .numeric import finite_or_none, gini_balance, normalize


REQUIRED_FIELDS = ("from", "to", "layer")

DEFAULT_LAYER = 4

GAMMA_BY_LAYER = {1: 0.9, 2: 0.5, 3: 0.45}
DEFAULT_GAMMA = 0.1


def layer_gamma(layer: int) -> float:
    """Influence discount for a degree of separation."""
    return GAMMA_BY_LAYER.get(layer, DEFAULT_GAMMA)


def layer_label(layer: int) -> str:
    """'1st degree', '2nd degree', '3rd degree', 'Nth degree' beyond."""
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(layer, "th")
    return f"{layer}{suffix} degree"


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class CascadeWeights:
    """
    Composite weights.

    Attributes:
        local_weight: alpha, weight of the local metric in each role
        global_weight: beta, weight of the global metric in each role
        topology_weight: lambda, scale of the topology bonus
    """
    local_weight: float = 0.4
    global_weight: float = 0.3
    topology_weight: float = 0.3

    def __post_init__(self):
        for name in ("local_weight", "global_weight", "topology_weight"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite non-negative number, got {value}")

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class NodeInfluence:
    """Influence roles of one network member."""
    id: Any
    layer: int
    gamma: float
    knitting: float
    bridging: float
    channeling: float
    reaching: float
    composite_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "layer": self.layer,
            "gamma": self.gamma,
            "knitting": finite_or_none(self.knitting, 6),
            "bridging": finite_or_none(self.bridging, 6),
            "channeling": finite_or_none(self.channeling, 6),
            "reaching": finite_or_none(self.reaching, 6),
            "composite_score": finite_or_none(self.composite_score, 6),
        }


@dataclass(frozen=True)
class LayerSummary:
    """Mean influence of the members of one layer."""
    layer: int
    label: str
    count: int
    mean_gamma: float
    mean_knitting: float
    mean_bridging: float
    mean_channeling: float
    mean_reaching: float
    layer_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layer": self.layer,
            "label": self.label,
            "count": self.count,
            "mean_gamma": finite_or_none(self.mean_gamma, 6),
            "mean_knitting": finite_or_none(self.mean_knitting, 6),
            "mean_bridging": finite_or_none(self.mean_bridging, 6),
            "mean_channeling": finite_or_none(self.mean_channeling, 6),
            "mean_reaching": finite_or_none(self.mean_reaching, 6),
            "layer_score": finite_or_none(self.layer_score, 6),
        }


@dataclass(frozen=True)
class CascadeResult:
    """Complete cascade analysis"""
    nodes: Tuple[NodeInfluence, ...]
    layers: Tuple[LayerSummary, ...]
    cascade_score: float
    topology_score: float
    topology: TopologyMetrics
    degraded_metrics: Tuple[str, ...] = ()
    edges: Tuple[Tuple[Any, Any, Optional[int]], ...] = field(default=(), repr=False)

    @property
    def level(self) -> BalanceLevel:
        return BalanceLevel.from_score(self.cascade_score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cascade_score": finite_or_none(self.cascade_score, 4),
            "level": self.level.value,
            "topology_score": finite_or_none(self.topology_score, 6),
            "topology": self.topology.to_dict(),
            "degraded_metrics": list(self.degraded_metrics),
            "layers": [layer.to_dict() for layer in self.layers],
            "nodes": [node.to_dict() for node in self.nodes],
        }

    def node_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [asdict(node) for node in self.nodes],
            columns=["id", "layer", "gamma", "knitting", "bridging",
                     "channeling", "reaching", "composite_score"],
        )

    def layer_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [asdict(layer) for layer in self.layers],
            columns=["layer", "label", "count", "mean_gamma", "mean_knitting",
                     "mean_bridging", "mean_channeling", "mean_reaching", "layer_score"],
        )

    def edge_frame(self) -> pd.DataFrame:
        """The validated edge list, one row per input edge."""
        return pd.DataFrame(list(self.edges), columns=["from", "to", "layer"])


# =============================================================================
# Analyzer
# =============================================================================

class CascadeAnalyzer:
    """
    Computes the CEnTR*IMPACT Cascade Score.

    Args:
        alpha_parameter: Damping of the alpha centrality
        weights: Composite weights (defaults to alpha=0.4, beta=0.3, lambda=0.3)
    """

    def __init__(self, alpha_parameter: float = 0.9, weights: Optional[CascadeWeights] = None):
        self.alpha_parameter = alpha_parameter
        self.weights = weights or CascadeWeights()
        self.logger = logging.getLogger(__name__)

    def analyze(self, edges: RecordInput) -> CascadeResult:
        """
        Analyze influence distribution over a network.

        Args:
            edges: DataFrame or sequence of NetworkEdge / mappings with
                from, to and layer

        Returns:
            CascadeResult

        Raises:
            SchemaError: missing columns, empty input, missing endpoints or
                a layer that is not an integer >= 1
        """
        edge_list = self._validate(coerce_rows(edges, REQUIRED_FIELDS, "Cascade"))
        self.logger.info(f"Analyzing cascade over {len(edge_list)} edges...")

        layers = self._node_layers(edge_list)
        gammas = {node: layer_gamma(layer) for node, layer in layers.items()}

        graph = build_graph(
            layers.keys(),
            ((source, target) for source, target, _ in edge_list),
            layer=layers,
            gamma=gammas,
        )
        nodes = list(graph.nodes())
        self.logger.debug(
            f"Built graph: {graph.number_of_nodes()} nodes, {graph.number_of_edges()} edges"
        )

        topology = compute_topology(graph)
        topology_score = self.weights.topology_weight * topology.mean()
        self.logger.debug(f"Topology: {topology.to_dict()}, score={topology_score:.4f}")

        degraded: List[str] = []
        metrics = self._node_metrics(graph, degraded)

        gamma = np.array([gammas[node] for node in nodes], dtype=float)
        a, b = self.weights.local_weight, self.weights.global_weight

        def role(local: np.ndarray, global_: np.ndarray) -> np.ndarray:
            return normalize(gamma * (a * local + b * global_) + topology_score)

        knitting = role(metrics["local_community"], metrics["global_eigen"])
        bridging = role(metrics["local_cross_clique"], metrics["global_betweenness"])
        channeling = role(metrics["local_betweenness"], metrics["global_alpha"])
        reaching = role(metrics["local_clustering"], metrics["global_harmonic"])
        composite = (knitting + bridging + channeling + reaching) / 4.0

        node_rows = tuple(
            NodeInfluence(
                id=node,
                layer=layers[node],
                gamma=gammas[node],
                knitting=float(knitting[i]),
                bridging=float(bridging[i]),
                channeling=float(channeling[i]),
                reaching=float(reaching[i]),
                composite_score=float(composite[i]),
            )
            for i, node in enumerate(nodes)
        )

        layer_rows = self._summarize_layers(node_rows)
        cascade_score = gini_balance([row.layer_score for row in layer_rows])

        self.logger.info(
            f"Cascade analysis complete: {len(nodes)} nodes in {len(layer_rows)} layers, "
            f"score={cascade_score:.4f}"
        )

        return CascadeResult(
            nodes=node_rows,
            layers=layer_rows,
            cascade_score=cascade_score,
            topology_score=float(topology_score),
            topology=topology,
            degraded_metrics=tuple(degraded),
            edges=tuple(edge_list),
        )

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _validate(self, rows: List[Dict[str, Any]]) -> List[Tuple[Any, Any, Optional[int]]]:
        edge_list = []
        for position, row in enumerate(rows):
            source, target = native(row["from"]), native(row["to"])
            if is_missing(source) or is_missing(target):
                raise SchemaError(f"Edge {position} is missing an endpoint")
            edge_list.append((source, target, self._layer(row["layer"], position)))
        return edge_list

    @staticmethod
    def _layer(value: Any, position: int) -> Optional[int]:
        if is_missing(value):
            return None
        number = coerce_float(value, "layer")
        if not number.is_integer() or number < 1:
            raise SchemaError(f"Edge {position}: layer must be an integer >= 1, got {value!r}")
        return int(number)

    @staticmethod
    def _node_layers(edge_list: List[Tuple[Any, Any, Optional[int]]]) -> Dict[Any, int]:
        """Minimum layer over incident edges; unresolved nodes get DEFAULT_LAYER."""
        resolved: Dict[Any, int] = {}
        endpoints = []
        for source, target, layer in edge_list:
            for node in (source, target):
                endpoints.append(node)
                if layer is not None:
                    resolved[node] = min(resolved.get(node, layer), layer)
        return {node: resolved.get(node, DEFAULT_LAYER) for node in endpoints}

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    def _node_metrics(self, graph: nx.Graph, degraded: List[str]) -> Dict[str, np.ndarray]:
        """Normalized local and global metric vectors, in graph node order."""
        def safe(name: str, func: Callable[[nx.Graph], np.ndarray]) -> np.ndarray:
            return self._safe_metric(name, func, graph, degraded)

        betweenness = safe("betweenness", graph_metrics.betweenness)
        metrics = {
            "local_community": safe("local_community", graph_metrics.community_membership),
            "local_cross_clique": np.nan_to_num(
                safe("local_cross_clique", lambda g: 1.0 - graph_metrics.structural_constraint(g)),
                nan=0.0,
            ),
            "local_clustering": np.nan_to_num(
                safe("local_clustering", graph_metrics.local_clustering), nan=0.0
            ),
            # same measure under both names
            "local_betweenness": betweenness,
            "global_betweenness": betweenness,
            "global_eigen": safe("global_eigen", graph_metrics.eigenvector),
            "global_harmonic": safe("global_harmonic", graph_metrics.harmonic),
            "global_alpha": safe(
                "global_alpha",
                lambda g: graph_metrics.alpha_centrality(g, alpha=self.alpha_parameter),
            ),
        }
        return metrics

    def _safe_metric(self, name: str, func: Callable[[nx.Graph], np.ndarray],
                     graph: nx.Graph, degraded: List[str]) -> np.ndarray:
        try:
            return normalize(func(graph))
        except ComputationDegradation as e:
            self.logger.warning(f"Metric '{name}' degraded to zero vector: {e}")
            degraded.append(name)
            return np.zeros(graph.number_of_nodes())

    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------

    @staticmethod
    def _summarize_layers(node_rows: Tuple[NodeInfluence, ...]) -> Tuple[LayerSummary, ...]:
        by_layer: Dict[int, List[NodeInfluence]] = defaultdict(list)
        for row in node_rows:
            by_layer[row.layer].append(row)

        summaries = []
        for layer in sorted(by_layer):
            members = by_layer[layer]

            def mean(attr: str) -> float:
                return float(np.mean([getattr(m, attr) for m in members]))

            summaries.append(LayerSummary(
                layer=layer,
                label=layer_label(layer),
                count=len(members),
                mean_gamma=mean("gamma"),
                mean_knitting=mean("knitting"),
                mean_bridging=mean("bridging"),
                mean_channeling=mean("channeling"),
                mean_reaching=mean("reaching"),
                layer_score=mean("composite_score"),
            ))
        return tuple(summaries)


def analyze_cascade(edges: RecordInput, alpha_parameter: float = 0.9,
                    weights: Optional[CascadeWeights] = None) -> CascadeResult:
    """Compute the Cascade balance score for a network edge list."""
    return CascadeAnalyzer(alpha_parameter=alpha_parameter, weights=weights).analyze(edges)
