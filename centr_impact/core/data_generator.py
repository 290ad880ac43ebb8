"""
Synthetic Data Generator

Generates reproducible CEnTR*IMPACT input tables:
- Alignment surveys (researcher and partner ratings across 8 categories)
- Cascade networks (layer 1 clique, layer 2 partners, layer 3 community)
- Project dynamics (5 CBPR domains, 21 dimensions, weight and salience)

All randomness flows through an explicit numpy Generator, so two generators
built from the same seed produce identical tables regardless of call order
elsewhere in the process.

Usage:
    from centr_impact.core.data_generator import generate_cascade_data, ImpactDataGenerator

    # Simple usage
    edges = generate_cascade_data(seed=42)

    # Shared generator
    generator = ImpactDataGenerator(seed=7)
    ratings = generator.alignment()
    dynamics = generator.dynamics(DynamicsConfig(domain_variance=True))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import combinations
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd


# =============================================================================
# Configuration
# =============================================================================

ALIGNMENT_CATEGORIES = (
    "Goals", "Values", "Roles", "Resources",
    "Activities", "Empowerment", "Outputs", "Outcomes",
)

ALIGNMENT_RATING_RANGE = (0.36, 1.0)

# (domain, dimension, observations)
DYNAMICS_SCHEMA: Tuple[Tuple[str, str, int], ...] = (
    ("Contexts", "Challenge", 5),
    ("Contexts", "Diversity", 5),
    ("Contexts", "Resources", 5),
    ("Contexts", "Trust", 5),
    ("Partnerships", "Beneficence", 5),
    ("Partnerships", "Decisions", 5),
    ("Partnerships", "Reflection", 5),
    ("Partnerships", "Tools", 5),
    ("Research", "Design", 5),
    ("Research", "Duration", 5),
    ("Research", "Frequency", 5),
    ("Research", "Questions", 5),
    ("Research", "Voice", 5),
    ("Learning", "Civic Learning", 5),
    ("Learning", "Integration", 4),
    ("Learning", "Learning Goals", 5),
    ("Learning", "Reciprocity", 5),
    ("Outcomes", "Capabilities", 5),
    ("Outcomes", "Goals", 4),
    ("Outcomes", "Outputs", 5),
    ("Outcomes", "Sustainability", 5),
)

SALIENCE_SET = (1.0, 0.8, 0.6, 0.4, 0.2)
DEFAULT_WEIGHT_SET = (0.78, 0.84, 0.90, 0.95, 1.00)

# Per-domain performance tiers used when domain_variance is enabled
VARIANCE_TIERS = ("low", "high", "mixed")
VARIANCE_TIER_PROBS = (0.45, 0.45, 0.10)

# Cascade network shape
LAYER1_SIZE_RANGE = (3, 10)
CHILDREN_RANGE = (1, 3)
LAYER2_INTERNAL_SHARE = 0.36
LAYER3_INTERNAL_SHARE = 0.10
LAYER2_PARENT_PROBABILITY = 0.72


@dataclass
class DynamicsConfig:
    """Configuration for dynamics data generation"""
    exclude: List[str] = field(default_factory=list)
    na_prob: float = 0.05
    weight_set: Sequence[float] = DEFAULT_WEIGHT_SET
    domain_variance: bool = False

    def __post_init__(self):
        if not 0.0 <= self.na_prob <= 1.0:
            raise ValueError(f"na_prob must be between 0 and 1, got {self.na_prob}")

        if len(self.weight_set) == 0:
            raise ValueError("weight_set must contain at least one value")

        for weight in self.weight_set:
            if not 0.0 < weight <= 1.0:
                raise ValueError(f"Invalid weight {weight}. Weights must be in (0, 1]")


# =============================================================================
# Generator
# =============================================================================

class ImpactDataGenerator:
    """
    Generates synthetic CEnTR*IMPACT input tables.

    Either pass a seed (a fresh numpy Generator is built from it) or an
    existing Generator to share one random stream across several tables.
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.logger = logging.getLogger(__name__)

    def _integer(self, low: int, high: int) -> int:
        """Uniform integer in the closed range [low, high]."""
        return int(self.rng.integers(low, high + 1))

    # -------------------------------------------------------------------------
    # Alignment
    # -------------------------------------------------------------------------

    def alignment(self) -> pd.DataFrame:
        """
        Generate researcher and partner ratings for every alignment category.

        Returns:
            DataFrame with columns alignment, role, rating
        """
        researchers = self._integer(1, 10)
        partners = self._integer(researchers + 1, 15)
        roles = ["researcher"] * researchers + ["partner"] * partners

        low, high = ALIGNMENT_RATING_RANGE
        ratings = np.round(self.rng.uniform(low, high, size=len(ALIGNMENT_CATEGORIES) * len(roles)), 2)

        frame = pd.DataFrame({
            "alignment": np.repeat(ALIGNMENT_CATEGORIES, len(roles)),
            "role": roles * len(ALIGNMENT_CATEGORIES),
            "rating": ratings,
        })

        self.logger.info(
            f"Generated alignment data: {researchers} researchers, {partners} partners, "
            f"{len(frame)} ratings"
        )
        return frame

    # -------------------------------------------------------------------------
    # Cascade
    # -------------------------------------------------------------------------

    def _internal_edges(self, ids: Sequence[int], max_share: float, layer: int) -> List[Tuple[int, int, int]]:
        """Randomly connect up to max_share of the possible pairs within one layer."""
        if len(ids) < 2:
            return []

        pairs = list(combinations(ids, 2))
        limit = int(np.floor(len(pairs) * max_share))
        count = self._integer(0, limit)
        if count == 0:
            return []

        chosen = self.rng.choice(len(pairs), size=count, replace=False)
        return [(pairs[i][0], pairs[i][1], layer) for i in chosen]

    def cascade(self) -> pd.DataFrame:
        """
        Generate a three-layer cascade network edge list.

        Layer 1 is a fully connected core team. Each core member brings 1-3
        layer 2 partners, which are sparsely interconnected. Most partners
        (72%) in turn bring 1-3 layer 3 community members.

        Returns:
            DataFrame with columns from, to, layer
        """
        n_l1 = self._integer(*LAYER1_SIZE_RANGE)
        ids_l1 = list(range(1, n_l1 + 1))
        last_id = n_l1

        edges: List[Tuple[int, int, int]] = [(a, b, 1) for a, b in combinations(ids_l1, 2)]

        # Layer 2: children of every core member
        children_l1 = self.rng.integers(CHILDREN_RANGE[0], CHILDREN_RANGE[1] + 1, size=n_l1)
        n_l2 = int(children_l1.sum())
        ids_l2 = list(range(last_id + 1, last_id + n_l2 + 1))
        last_id += n_l2

        parents = np.repeat(ids_l1, children_l1)
        edges.extend((int(p), child, 2) for p, child in zip(parents, ids_l2))
        edges.extend(self._internal_edges(ids_l2, LAYER2_INTERNAL_SHARE, 2))

        # Layer 3: children of the partners that act as parents
        is_parent = self.rng.uniform(size=n_l2) <= LAYER2_PARENT_PROBABILITY
        parents_l2 = [node for node, flag in zip(ids_l2, is_parent) if flag]

        n_l3 = 0
        if parents_l2:
            children_l2 = self.rng.integers(CHILDREN_RANGE[0], CHILDREN_RANGE[1] + 1, size=len(parents_l2))
            n_l3 = int(children_l2.sum())
            ids_l3 = list(range(last_id + 1, last_id + n_l3 + 1))

            parents = np.repeat(parents_l2, children_l2)
            edges.extend((int(p), child, 3) for p, child in zip(parents, ids_l3))
            edges.extend(self._internal_edges(ids_l3, LAYER3_INTERNAL_SHARE, 3))

        self.logger.info(
            f"Generated cascade network: {n_l1 + n_l2 + n_l3} participants "
            f"({n_l1}/{n_l2}/{n_l3} per layer), {len(edges)} edges"
        )
        return pd.DataFrame(edges, columns=["from", "to", "layer"])

    # -------------------------------------------------------------------------
    # Dynamics
    # -------------------------------------------------------------------------

    def _domain_weights(self, weights: np.ndarray, domain_variance: bool) -> np.ndarray:
        """Pick the weight pool for one domain (polarized when domain_variance is set)."""
        if not domain_variance:
            return weights

        tier = self.rng.choice(VARIANCE_TIERS, p=VARIANCE_TIER_PROBS)
        if tier == "low":
            return weights[:min(2, len(weights))]
        if tier == "high":
            return weights[max(0, len(weights) - 2):]
        return weights

    def dynamics(self, config: Optional[DynamicsConfig] = None) -> pd.DataFrame:
        """
        Generate weight/salience observations for the five CBPR domains.

        Returns:
            DataFrame with columns domain, dimension, salience, weight
            (weight may be NaN)
        """
        config = config or DynamicsConfig()

        domains = {domain for domain, _, _ in DYNAMICS_SCHEMA}
        unknown = [name for name in config.exclude if name not in domains]
        if unknown:
            self.logger.warning(f"Excluded domain(s) not found in schema: {unknown}")

        schema = [item for item in DYNAMICS_SCHEMA if item[0] not in config.exclude]
        columns = ["domain", "dimension", "salience", "weight"]
        if not schema:
            return pd.DataFrame({
                "domain": pd.Series(dtype=str),
                "dimension": pd.Series(dtype=str),
                "salience": pd.Series(dtype=float),
                "weight": pd.Series(dtype=float),
            }, columns=columns)

        weights = np.sort(np.asarray(config.weight_set, dtype=float))
        rows = []
        current_domain = None
        domain_weights = weights

        for domain, dimension, count in schema:
            if domain != current_domain:
                current_domain = domain
                domain_weights = self._domain_weights(weights, config.domain_variance)

            saliences = self.rng.choice(SALIENCE_SET, size=count, replace=False)
            sampled = self.rng.choice(domain_weights, size=count, replace=True)
            rows.extend(
                (domain, dimension, float(s), float(w))
                for s, w in zip(saliences, sampled)
            )

        frame = pd.DataFrame(rows, columns=columns)

        if config.na_prob > 0:
            mask = self.rng.random(len(frame)) < config.na_prob
            frame.loc[mask, "weight"] = np.nan

        self.logger.info(
            f"Generated dynamics data: {frame['domain'].nunique()} domains, "
            f"{frame['dimension'].nunique()} dimensions, {len(frame)} rows, "
            f"{int(frame['weight'].isna().sum())} missing weights"
        )
        return frame


# =============================================================================
# Convenience Functions
# =============================================================================

def generate_alignment_data(seed: Optional[int] = None,
                            rng: Optional[np.random.Generator] = None) -> pd.DataFrame:
    """Generate a synthetic alignment survey."""
    return ImpactDataGenerator(seed=seed, rng=rng).alignment()


def generate_cascade_data(seed: Optional[int] = None,
                          rng: Optional[np.random.Generator] = None) -> pd.DataFrame:
    """Generate a synthetic three-layer cascade network."""
    return ImpactDataGenerator(seed=seed, rng=rng).cascade()


def generate_dynamics_data(seed: Optional[int] = None,
                           rng: Optional[np.random.Generator] = None,
                           exclude: Optional[Sequence[str]] = None,
                           na_prob: float = 0.05,
                           weight_set: Sequence[float] = DEFAULT_WEIGHT_SET,
                           domain_variance: bool = False) -> pd.DataFrame:
    """Generate synthetic project dynamics data."""
    config = DynamicsConfig(
        exclude=list(exclude or []),
        na_prob=na_prob,
        weight_set=weight_set,
        domain_variance=domain_variance,
    )
    return ImpactDataGenerator(seed=seed, rng=rng).dynamics(config)
