"""
CEnTR*IMPACT Analysis Module

Scoring components for community-engaged research projects:
- Alignment: researcher/partner agreement (interpolated medians + ICC)
- Dynamics: balance of effort across CBPR domains (geometric means + Gini)
- Cascade: balance of network influence across layers (centrality composites + Gini)

Usage:
    from centr_impact.analysis import analyze_alignment, analyze_dynamics, analyze_cascade

    alignment = analyze_alignment(ratings_df)
    print(alignment.alignment_score)

    dynamics = analyze_dynamics(dynamics_df)
    print(dynamics.dynamics_score, dynamics.level.label)

    cascade = analyze_cascade(edges_df, alpha_parameter=0.9)
    print(cascade.layer_frame())
"""

# Numeric utilities
from .numeric import (
    normalize,
    gini_balance,
    geometric_mean,
    interpolated_median,
)

# ICC
from .icc import (
    IccResult,
    intraclass_correlation,
)

# Interpretation
from .interpretation import BalanceLevel

# Alignment
from .alignment_analyzer import (
    CategorySummary,
    AlignmentPlotRow,
    AlignmentResult,
    AlignmentAnalyzer,
    analyze_alignment,
)

# Dynamics
from .dynamics_analyzer import (
    DynamicsRow,
    DomainScore,
    DynamicsResult,
    DynamicsAnalyzer,
    analyze_dynamics,
)

# Graph metrics
from .graph_metrics import (
    TopologyMetrics,
    build_graph,
    compute_topology,
)

# Cascade
from .cascade_analyzer import (
    GAMMA_BY_LAYER,
    CascadeWeights,
    NodeInfluence,
    LayerSummary,
    CascadeResult,
    CascadeAnalyzer,
    analyze_cascade,
    layer_gamma,
    layer_label,
)

__all__ = [
    # Numeric
    "normalize",
    "gini_balance",
    "geometric_mean",
    "interpolated_median",
    # ICC
    "IccResult",
    "intraclass_correlation",
    # Interpretation
    "BalanceLevel",
    # Alignment
    "CategorySummary",
    "AlignmentPlotRow",
    "AlignmentResult",
    "AlignmentAnalyzer",
    "analyze_alignment",
    # Dynamics
    "DynamicsRow",
    "DomainScore",
    "DynamicsResult",
    "DynamicsAnalyzer",
    "analyze_dynamics",
    # Graph metrics
    "TopologyMetrics",
    "build_graph",
    "compute_topology",
    # Cascade
    "GAMMA_BY_LAYER",
    "CascadeWeights",
    "NodeInfluence",
    "LayerSummary",
    "CascadeResult",
    "CascadeAnalyzer",
    "analyze_cascade",
    "layer_gamma",
    "layer_label",
]
