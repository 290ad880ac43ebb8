"""
Error Types

Two categories of failure:
    SchemaError            - input is unusable (missing fields, empty, out of range).
                             Raised before any computation starts.
    ComputationDegradation - a single graph metric could not be computed for
                             the given topology. Raised by the metric helpers
                             and caught by the analyzer, which substitutes the
                             documented fallback.
"""

from typing import Iterable, Optional


class SchemaError(ValueError):
    """Input records do not match the expected schema or value ranges."""

    def __init__(self, message: str, missing: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.missing = tuple(missing) if missing else ()


class ComputationDegradation(RuntimeError):
    """A named metric could not be computed for the current graph."""

    def __init__(self, metric: str, reason: str = ""):
        message = f"{metric} could not be computed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.metric = metric
        self.reason = reason
