"""
Balance Score Interpretation

Rule-of-thumb bands for Gini-based balance scores (Dynamics S_d and
Cascade S_c), following Haddad et al. (2024) and Wang et al. (2020):

    S < 0.50          Very Low Balance
    0.50 <= S < 0.60  Low Balance
    0.60 <= S < 0.70  Moderate Balance
    0.70 <= S < 0.80  High Balance
    S >= 0.80         Very High Balance
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional

from ..core.records import is_missing


class BalanceLevel(Enum):
    """Interpretation band of a balance score"""
    UNDEFINED = "undefined"
    VERY_LOW = "very_low"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"

    @property
    def label(self) -> str:
        if self is BalanceLevel.UNDEFINED:
            return "N/A"
        return f"{self.value.replace('_', ' ').title()} Balance"

    @classmethod
    def from_score(cls, score: Optional[Any]) -> BalanceLevel:
        """Classify a balance score; missing or NaN scores are UNDEFINED."""
        if is_missing(score) or not math.isfinite(float(score)):
            return cls.UNDEFINED

        score = float(score)
        if score < 0.50:
            return cls.VERY_LOW
        if score < 0.60:
            return cls.LOW
        if score < 0.70:
            return cls.MODERATE
        if score < 0.80:
            return cls.HIGH
        return cls.VERY_HIGH
