"""
Dynamics Analyzer

Implements the "Dynamics" component of CEnTR*IMPACT: how evenly a project's
effort is spread over the domains of the CBPR framework.

Scoring:
    dimension_value = weight x salience                       (per row)
    dimension_score = round(geomean(dimension_value), 2)      (per dimension label)
    domain_score    = round(geomean(dimension_score), 2)      (per domain)
    S_d             = 1 - Gini(domain_score)                  (project)

Dimension scores are keyed by the dimension label alone, so a label reused
in two domains contributes one merged score to both.

Rows with a missing weight stay in the output with a NaN dimension_value.
A dimension whose values are all missing scores NaN. A domain skips NaN
dimension scores and is NaN only when all of them are.
NaN never turns into 0.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

import pandas as pd

from ..core.exceptions import SchemaError
from ..core.records import RecordInput, coerce_float, coerce_rows, is_missing, native
from .interpretation import BalanceLevel
from .numeric import finite_or_none, geometric_mean, gini_balance


REQUIRED_FIELDS = ("domain", "dimension", "salience", "weight")


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class DynamicsRow:
    """One input observation with its derived scores."""
    domain: str
    dimension: str
    salience: float
    weight: float
    dimension_value: float
    dimension_score: float
    domain_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "dimension": self.dimension,
            "salience": finite_or_none(self.salience),
            "weight": finite_or_none(self.weight),
            "dimension_value": finite_or_none(self.dimension_value, 4),
            "dimension_score": finite_or_none(self.dimension_score),
            "domain_score": finite_or_none(self.domain_score),
        }


@dataclass(frozen=True)
class DomainScore:
    domain: str
    domain_score: float
    dimensions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "domain_score": finite_or_none(self.domain_score),
            "dimensions": list(self.dimensions),
        }


@dataclass(frozen=True)
class DynamicsResult:
    """Complete dynamics analysis"""
    rows: Tuple[DynamicsRow, ...]
    domains: Tuple[DomainScore, ...]
    dimension_scores: Mapping[Any, float]
    dynamics_score: float

    @property
    def level(self) -> BalanceLevel:
        return BalanceLevel.from_score(self.dynamics_score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dynamics_score": finite_or_none(self.dynamics_score, 4),
            "level": self.level.value,
            "domains": [d.to_dict() for d in self.domains],
            "dimension_scores": {k: finite_or_none(v) for k, v in self.dimension_scores.items()},
            "rows": [r.to_dict() for r in self.rows],
        }

    def to_frame(self) -> pd.DataFrame:
        """Per-row detail table."""
        return pd.DataFrame(
            [asdict(row) for row in self.rows],
            columns=["domain", "dimension", "salience", "weight",
                     "dimension_value", "dimension_score", "domain_score"],
        )

    def domain_frame(self) -> pd.DataFrame:
        """Domain scores in first-seen order."""
        return pd.DataFrame(
            [{"domain": d.domain, "domain_score": d.domain_score} for d in self.domains],
            columns=["domain", "domain_score"],
        )


# =============================================================================
# Analyzer
# =============================================================================

class DynamicsAnalyzer:
    """
    Computes the CEnTR*IMPACT Dynamics (developmental balance) Score.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def analyze(self, records: RecordInput) -> DynamicsResult:
        """
        Analyze project dynamics.

        Args:
            records: DataFrame or sequence of DynamicsRecord / mappings with
                domain, dimension, salience and weight

        Returns:
            DynamicsResult

        Raises:
            SchemaError: missing fields, empty input, weight or salience
                outside (0, 1], or no row with a domain label
        """
        rows = self._validate(coerce_rows(records, REQUIRED_FIELDS, "Dynamics"))
        self.logger.info(f"Analyzing dynamics over {len(rows)} observations...")

        # dimension -> values, over all domains
        values_by_dimension: Dict[Any, List[float]] = defaultdict(list)
        for row in rows:
            values_by_dimension[row["dimension"]].append(row["dimension_value"])

        dimension_scores = {
            dimension: round(geometric_mean(values), 2)
            for dimension, values in values_by_dimension.items()
        }

        # domain -> distinct dimensions, first-seen order
        dimensions_by_domain: Dict[Any, List[Any]] = {}
        for row in rows:
            members = dimensions_by_domain.setdefault(row["domain"], [])
            if row["dimension"] not in members:
                members.append(row["dimension"])

        domains = []
        for domain, dimensions in dimensions_by_domain.items():
            scores = [dimension_scores[d] for d in dimensions]
            # NaN dimension scores are skipped; all-NaN gives NaN
            domain_score = round(geometric_mean(scores), 2)
            domains.append(DomainScore(domain, domain_score, tuple(dimensions)))

        domain_lookup = {d.domain: d.domain_score for d in domains}
        detail = tuple(
            DynamicsRow(
                domain=row["domain"],
                dimension=row["dimension"],
                salience=row["salience"],
                weight=row["weight"],
                dimension_value=row["dimension_value"],
                dimension_score=dimension_scores[row["dimension"]],
                domain_score=domain_lookup[row["domain"]],
            )
            for row in rows
        )

        dynamics_score = gini_balance([d.domain_score for d in domains])

        nan_domains = [d.domain for d in domains if math.isnan(d.domain_score)]
        if nan_domains:
            self.logger.warning(f"Domains without computable scores: {nan_domains}")

        self.logger.info(
            f"Dynamics analysis complete: {len(domains)} domains, "
            f"{len(dimension_scores)} dimensions, score={dynamics_score:.4f}"
        )

        return DynamicsResult(
            rows=detail,
            domains=tuple(domains),
            dimension_scores=MappingProxyType(dimension_scores),
            dynamics_score=dynamics_score,
        )

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _validate(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Check value ranges, drop orphaned rows, derive dimension_value."""
        cleaned = []
        for row in rows:
            weight = self._bounded(row["weight"], "weight")
            salience = self._bounded(row["salience"], "salience")
            cleaned.append({
                "domain": native(row["domain"]),
                "dimension": native(row["dimension"]),
                "salience": salience,
                "weight": weight,
                "dimension_value": weight * salience,
            })

        valid = [
            row for row in cleaned
            if not is_missing(row["domain"]) and str(row["domain"]).strip() != ""
        ]

        dropped = len(cleaned) - len(valid)
        if dropped:
            self.logger.warning(f"Dropped {dropped} row(s) without a domain label")

        if not valid:
            raise SchemaError("No valid domain values found after filtering")

        return valid

    @staticmethod
    def _bounded(value: Any, field_name: str) -> float:
        """Present values must satisfy 0 < x <= 1; missing values become NaN."""
        if is_missing(value):
            return float("nan")

        number = coerce_float(value, field_name)
        if not 0.0 < number <= 1.0:
            raise SchemaError(
                f"{field_name} must be strictly greater than 0 and less than or equal to 1, "
                f"got {number}"
            )
        return number


def analyze_dynamics(records: RecordInput) -> DynamicsResult:
    """Compute the Dynamics balance score for a set of observations."""
    return DynamicsAnalyzer().analyze(records)
