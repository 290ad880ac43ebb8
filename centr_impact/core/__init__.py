"""
CEnTR*IMPACT Core Module

Input records, error types and synthetic data generation shared by the
analysis components.

Usage:
    from centr_impact.core import generate_cascade_data, NetworkEdge, SchemaError

    edges = generate_cascade_data(seed=42)
"""

from .exceptions import (
    SchemaError,
    ComputationDegradation,
)

from .records import (
    Role,
    RatingRecord,
    DynamicsRecord,
    NetworkEdge,
    coerce_rows,
    is_missing,
    label_sort_key,
)

from .data_generator import (
    DynamicsConfig,
    ImpactDataGenerator,
    generate_alignment_data,
    generate_cascade_data,
    generate_dynamics_data,
)

__all__ = [
    # Errors
    "SchemaError",
    "ComputationDegradation",
    # Records
    "Role",
    "RatingRecord",
    "DynamicsRecord",
    "NetworkEdge",
    "coerce_rows",
    "is_missing",
    "label_sort_key",
    # Generators
    "DynamicsConfig",
    "ImpactDataGenerator",
    "generate_alignment_data",
    "generate_cascade_data",
    "generate_dynamics_data",
]
