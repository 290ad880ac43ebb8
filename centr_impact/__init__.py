"""
CEnTR*IMPACT

Alignment, Dynamics and Cascade scores for community-engaged research.

Usage:
    from centr_impact import analyze_alignment, analyze_dynamics, analyze_cascade
    from centr_impact import generate_cascade_data

    result = analyze_cascade(generate_cascade_data(seed=42))
    print(result.cascade_score, result.level.label)
"""

__version__ = "0.1.0"

from .core import (
    SchemaError,
    ComputationDegradation,
    Role,
    RatingRecord,
    DynamicsRecord,
    NetworkEdge,
    ImpactDataGenerator,
    DynamicsConfig,
    generate_alignment_data,
    generate_cascade_data,
    generate_dynamics_data,
)

from .analysis import (
    BalanceLevel,
    AlignmentAnalyzer,
    AlignmentResult,
    analyze_alignment,
    DynamicsAnalyzer,
    DynamicsResult,
    analyze_dynamics,
    CascadeAnalyzer,
    CascadeResult,
    CascadeWeights,
    analyze_cascade,
)

from .config import Settings

__all__ = [
    "__version__",
    # Errors
    "SchemaError",
    "ComputationDegradation",
    # Records
    "Role",
    "RatingRecord",
    "DynamicsRecord",
    "NetworkEdge",
    # Generators
    "ImpactDataGenerator",
    "DynamicsConfig",
    "generate_alignment_data",
    "generate_cascade_data",
    "generate_dynamics_data",
    # Analysis
    "BalanceLevel",
    "AlignmentAnalyzer",
    "AlignmentResult",
    "analyze_alignment",
    "DynamicsAnalyzer",
    "DynamicsResult",
    "analyze_dynamics",
    "CascadeAnalyzer",
    "CascadeResult",
    "CascadeWeights",
    "analyze_cascade",
    # Config
    "Settings",
]
