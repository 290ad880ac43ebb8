"""
Alignment Analyzer

Measures agreement between researcher and partner perspectives.

Per alignment category:
- Interpolated median, min and max rating of each role
- Overall consensus: geometric mean of the two role medians

Across categories:
- ICC(A,1) of the researcher vs. partner medians
- Alignment Score S_a = |ICC|

A failed ICC (too few categories, zero variance) leaves the score missing;
the per-category summaries are still returned.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from ..core.records import (
    RecordInput,
    Role,
    coerce_float,
    coerce_rows,
    is_missing,
    label_sort_key,
    native,
)
from .icc import IccResult, intraclass_correlation
from .numeric import finite_or_none, geometric_mean, interpolated_median


REQUIRED_FIELDS = ("role", "alignment", "rating")


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class CategorySummary:
    """Wide-format summary of one alignment category."""
    category: Any
    researcher_median: Optional[float]
    partner_median: Optional[float]
    overall: float
    min: float
    max: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "researcher_median": finite_or_none(self.researcher_median, 4),
            "partner_median": finite_or_none(self.partner_median, 4),
            "overall": finite_or_none(self.overall, 4),
            "min": finite_or_none(self.min, 4),
            "max": finite_or_none(self.max, 4),
        }


@dataclass(frozen=True)
class AlignmentPlotRow:
    """Long-format row: one role (or the overall consensus) in one category."""
    category: Any
    role: str
    rating: float
    min: Optional[float] = None
    max: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "role": self.role,
            "rating": finite_or_none(self.rating, 4),
            "min": finite_or_none(self.min, 4),
            "max": finite_or_none(self.max, 4),
        }


@dataclass(frozen=True)
class AlignmentResult:
    """Complete alignment analysis"""
    table: Mapping[Any, CategorySummary]
    plot_data: Tuple[AlignmentPlotRow, ...]
    icc: Optional[IccResult]

    @property
    def icc_value(self) -> Optional[float]:
        return self.icc.value if self.icc is not None else None

    @property
    def alignment_score(self) -> Optional[float]:
        return abs(self.icc.value) if self.icc is not None else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "alignment_score": finite_or_none(self.alignment_score, 4),
            "icc_value": finite_or_none(self.icc_value, 4),
            "icc": self.icc.to_dict() if self.icc else None,
            "table": {name: summary.to_dict() for name, summary in self.table.items()},
            "plot_data": [row.to_dict() for row in self.plot_data],
        }

    def table_frame(self) -> pd.DataFrame:
        """Wide table: one row per category."""
        return pd.DataFrame(
            [asdict(summary) for summary in self.table.values()],
            columns=["category", "researcher_median", "partner_median", "overall", "min", "max"],
        )

    def plot_frame(self) -> pd.DataFrame:
        """Long table for slopegraph-style charts."""
        return pd.DataFrame(
            [asdict(row) for row in self.plot_data],
            columns=["category", "role", "rating", "min", "max"],
        )


# =============================================================================
# Analyzer
# =============================================================================

class AlignmentAnalyzer:
    """
    Computes the CEnTR*IMPACT Alignment Score.

    Args:
        median_width: Class width used by the interpolated median
        conf_level: Confidence level reported with the ICC
    """

    def __init__(self, median_width: float = 1.0, conf_level: float = 0.95):
        self.median_width = median_width
        self.conf_level = conf_level
        self.logger = logging.getLogger(__name__)

    def analyze(self, records: RecordInput) -> AlignmentResult:
        """
        Analyze researcher/partner alignment.

        Args:
            records: DataFrame or sequence of RatingRecord / mappings with
                role, alignment and rating

        Returns:
            AlignmentResult

        Raises:
            SchemaError: if role, alignment or rating is absent
        """
        rows = coerce_rows(records, REQUIRED_FIELDS, "Alignment")
        self.logger.info(f"Analyzing alignment over {len(rows)} ratings...")

        groups = self._group_ratings(rows)
        role_rows = self._summarize_roles(groups)

        # Pivot medians to one entry per category
        medians: Dict[Any, Dict[str, float]] = defaultdict(dict)
        for row in role_rows:
            medians[row.category][row.role] = row.rating

        table: Dict[Any, CategorySummary] = {}
        overall_rows: List[AlignmentPlotRow] = []
        for category in sorted(medians, key=label_sort_key):
            researcher = medians[category].get(Role.RESEARCHER.value)
            partner = medians[category].get(Role.PARTNER.value)
            overall = geometric_mean([researcher, partner])

            ratings = [r for (cat, _), values in groups.items() if cat == category for r in values]
            present = [r for r in ratings if not is_missing(r)]
            table[category] = CategorySummary(
                category=category,
                researcher_median=researcher,
                partner_median=partner,
                overall=overall,
                min=min(present) if present else float("nan"),
                max=max(present) if present else float("nan"),
            )
            overall_rows.append(AlignmentPlotRow(category, Role.OVERALL.value, overall))

        icc = self._compute_icc(table)

        result = AlignmentResult(
            table=MappingProxyType(table),
            plot_data=tuple(role_rows) + tuple(overall_rows),
            icc=icc,
        )

        score = result.alignment_score
        self.logger.info(
            f"Alignment analysis complete: {len(table)} categories, "
            f"score={'N/A' if score is None else f'{score:.4f}'}"
        )
        return result

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _group_ratings(self, rows: List[Dict[str, Any]]) -> Dict[Tuple[Any, str], List[float]]:
        """Map (category, role) -> ratings."""
        groups: Dict[Tuple[Any, str], List[float]] = defaultdict(list)
        for row in rows:
            role = native(getattr(row["role"], "value", row["role"]))
            category = native(row["alignment"])
            rating = row["rating"]
            value = float("nan") if is_missing(rating) else coerce_float(rating, "rating")
            groups[(category, str(role))].append(value)
        return groups

    def _summarize_roles(self, groups: Dict[Tuple[Any, str], List[float]]) -> List[AlignmentPlotRow]:
        """Interpolated median, min and max per (category, role), sorted by both."""
        summaries = []
        for category, role in sorted(groups, key=lambda key: (label_sort_key(key[0]), key[1])):
            values = [v for v in groups[(category, role)] if not is_missing(v)]
            summaries.append(AlignmentPlotRow(
                category=category,
                role=role,
                rating=interpolated_median(values, self.median_width),
                min=min(values) if values else float("nan"),
                max=max(values) if values else float("nan"),
            ))
        self.logger.debug(f"Summarized {len(summaries)} category/role groups")
        return summaries

    def _compute_icc(self, table: Mapping[Any, CategorySummary]) -> Optional[IccResult]:
        """ICC over researcher/partner medians; None when it cannot be computed."""
        matrix = [
            [
                float("nan") if is_missing(s.researcher_median) else s.researcher_median,
                float("nan") if is_missing(s.partner_median) else s.partner_median,
            ]
            for s in table.values()
        ]
        if not matrix:
            self.logger.warning("ICC could not be computed: no categories")
            return None

        try:
            return intraclass_correlation(matrix, conf_level=self.conf_level)
        except ValueError as e:
            self.logger.warning(f"ICC could not be computed: {e}")
            return None


def analyze_alignment(records: RecordInput, median_width: float = 1.0) -> AlignmentResult:
    """Compute the Alignment Score for a set of researcher/partner ratings."""
    return AlignmentAnalyzer(median_width=median_width).analyze(records)
