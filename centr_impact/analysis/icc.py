"""
Intraclass Correlation

Two-way, absolute-agreement, single-measure intraclass correlation, ICC(A,1)
in McGraw & Wong's notation. Subjects are rows, raters are columns.

    ICC = (MSR - MSE) / (MSR + (k-1)*MSE + k/n*(MSC - MSE))

The result also carries the F test against ICC = 0 and the confidence
interval, so callers can report more than the point estimate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict

import numpy as np
from scipy import stats

from .numeric import finite_or_none


@dataclass(frozen=True)
class IccResult:
    """ICC(A,1) estimate with its F test and confidence interval."""
    subjects: int
    raters: int
    value: float
    f_value: float
    df1: float
    df2: float
    p_value: float
    lower_bound: float
    upper_bound: float
    conf_level: float = 0.95
    model: str = "twoway"
    type: str = "agreement"
    unit: str = "single"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subjects": self.subjects,
            "raters": self.raters,
            "model": self.model,
            "type": self.type,
            "unit": self.unit,
            "value": finite_or_none(self.value, 6),
            "f_value": finite_or_none(self.f_value, 6),
            "df1": finite_or_none(self.df1, 6),
            "df2": finite_or_none(self.df2, 6),
            "p_value": finite_or_none(self.p_value, 6),
            "conf_level": self.conf_level,
            "lower_bound": finite_or_none(self.lower_bound, 6),
            "upper_bound": finite_or_none(self.upper_bound, 6),
        }


def intraclass_correlation(ratings: Any, conf_level: float = 0.95) -> IccResult:
    """
    Compute ICC(A,1) for a subjects x raters matrix.

    Rows containing a missing rating are dropped first.

    Args:
        ratings: 2-D array-like, one row per subject, one column per rater
        conf_level: Confidence level of the interval

    Returns:
        IccResult

    Raises:
        ValueError: fewer than two complete subjects or two raters, or the
            coefficient is undefined (for example zero variance)
    """
    matrix = np.asarray(ratings, dtype=float)
    if matrix.ndim != 2:
        raise ValueError(f"ratings must be a 2-D matrix, got {matrix.ndim} dimension(s)")

    matrix = matrix[~np.isnan(matrix).any(axis=1)]
    ns, nr = matrix.shape
    if ns < 2:
        raise ValueError(f"ICC needs at least 2 complete subjects, got {ns}")
    if nr < 2:
        raise ValueError(f"ICC needs at least 2 raters, got {nr}")

    with np.errstate(divide="ignore", invalid="ignore"):
        ss_total = np.var(matrix, ddof=1) * (ns * nr - 1)
        ms_r = np.var(matrix.mean(axis=1), ddof=1) * nr
        ms_c = np.var(matrix.mean(axis=0), ddof=1) * ns
        ms_e = (ss_total - ms_r * (ns - 1) - ms_c * (nr - 1)) / ((ns - 1) * (nr - 1))

        coeff = (ms_r - ms_e) / (ms_r + (nr - 1) * ms_e + (nr / ns) * (ms_c - ms_e))
        if not math.isfinite(coeff):
            raise ValueError("ICC is undefined for these ratings (zero variance)")

        # F test against r0 = 0
        f_value = ms_r / ms_e
        df1 = ns - 1

        a = (nr * coeff) / (ns * (1 - coeff))
        b = 1 + (nr * coeff * (ns - 1)) / (ns * (1 - coeff))
        df2 = (a * ms_c + b * ms_e) ** 2 / (
            (a * ms_c) ** 2 / (nr - 1) + (b * ms_e) ** 2 / ((ns - 1) * (nr - 1))
        )

        p_value = float(stats.f.sf(f_value, df1, df2))

        alpha = 1 - conf_level
        f_lower = stats.f.ppf(1 - alpha / 2, ns - 1, df2)
        f_upper = stats.f.ppf(1 - alpha / 2, df2, ns - 1)

        lower = (ns * (ms_r - f_lower * ms_e)) / (
            f_lower * (nr * ms_c + (nr * ns - nr - ns) * ms_e) + ns * ms_r
        )
        upper = (ns * (f_upper * ms_r - ms_e)) / (
            nr * ms_c + (nr * ns - nr - ns) * ms_e + ns * f_upper * ms_r
        )

    return IccResult(
        subjects=int(ns),
        raters=int(nr),
        value=float(coeff),
        f_value=float(f_value),
        df1=float(df1),
        df2=float(df2),
        p_value=p_value,
        lower_bound=float(lower),
        upper_bound=float(upper),
        conf_level=conf_level,
    )
