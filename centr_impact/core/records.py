"""
Input Records

Typed records for the three analysis inputs and the coercion layer that turns
whatever the caller hands over (a pandas DataFrame, a list of dicts, a list of
records) into plain row dictionaries.

Records:
    RatingRecord   - one rater's rating of one alignment category
    DynamicsRecord - one weight/salience observation of a dimension
    NetworkEdge    - one tie in the cascade network
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, is_dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .exceptions import SchemaError


class Role(str, Enum):
    """Rater roles in an alignment survey."""
    RESEARCHER = "researcher"
    PARTNER = "partner"
    OVERALL = "overall"


@dataclass(frozen=True)
class RatingRecord:
    role: str
    alignment: str
    rating: float

    def to_dict(self) -> Dict[str, Any]:
        role = self.role.value if isinstance(self.role, Role) else self.role
        return {"role": role, "alignment": self.alignment, "rating": self.rating}


@dataclass(frozen=True)
class DynamicsRecord:
    domain: str
    dimension: str
    salience: float
    weight: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NetworkEdge:
    """
    A tie between two participants.

    ``from`` is a keyword in Python, so the endpoints are stored as
    ``source``/``target`` and exported under the tabular names ``from``/``to``.
    """
    source: Any
    target: Any
    layer: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.source, "to": self.target, "layer": self.layer}


RecordInput = Union[pd.DataFrame, Iterable[Any]]


# =============================================================================
# Missing-value helpers
# =============================================================================

def is_missing(value: Any) -> bool:
    """True for None, NaN and pandas NA scalars."""
    if value is None:
        return True
    if isinstance(value, str):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def native(value: Any) -> Any:
    """Unwrap numpy scalars so ids and labels hash and serialize cleanly."""
    if isinstance(value, np.generic):
        return value.item()
    return value


def label_sort_key(value: Any) -> Tuple[bool, Any]:
    """Numbers before strings, each in natural order (2 before 10)."""
    if isinstance(value, (int, float)):
        return (False, value)
    return (True, str(value))


def coerce_float(value: Any, field_name: str) -> float:
    """Convert a present value to float, raising SchemaError if it is not numeric."""
    if isinstance(value, bool):
        raise SchemaError(f"{field_name} must be numeric, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise SchemaError(f"{field_name} must be numeric, got {value!r}")


# =============================================================================
# Row coercion
# =============================================================================

def _as_mapping(item: Any) -> Dict[str, Any]:
    if isinstance(item, Mapping):
        return dict(item)
    if isinstance(item, pd.Series):
        return item.to_dict()
    if hasattr(item, "to_dict"):
        return dict(item.to_dict())
    if is_dataclass(item) and not isinstance(item, type):
        return asdict(item)
    raise SchemaError(f"Unsupported record type: {type(item).__name__}")


def coerce_rows(data: RecordInput, required: Sequence[str], source: str) -> List[Dict[str, Any]]:
    """
    Normalize tabular input into a list of row dictionaries.

    Args:
        data: DataFrame, or an iterable of mappings / records
        required: Field names every row must carry (values may be missing)
        source: Label used in error messages

    Returns:
        List of row dictionaries in input order

    Raises:
        SchemaError: if a required field is absent or there are no rows
    """
    if data is None:
        raise SchemaError(f"{source} input is required")

    if isinstance(data, pd.DataFrame):
        missing = [name for name in required if name not in data.columns]
        if missing:
            raise SchemaError(
                f"{source} input must contain columns: {', '.join(required)} "
                f"(missing: {', '.join(missing)})",
                missing=missing,
            )
        rows = data.to_dict(orient="records")
    else:
        if isinstance(data, (str, bytes, Mapping)):
            raise SchemaError(f"{source} input must be a table or a sequence of records")
        rows = [_as_mapping(item) for item in data]
        absent = {name for row in rows for name in required if name not in row}
        if absent:
            missing = [name for name in required if name in absent]
            raise SchemaError(
                f"{source} input must contain fields: {', '.join(required)} "
                f"(missing: {', '.join(missing)})",
                missing=missing,
            )

    if not rows:
        raise SchemaError(f"{source} input must contain at least one row")

    return rows
