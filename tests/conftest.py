"""
Test Configuration and Fixtures
================================

Shared pytest fixtures for testing the CEnTR*IMPACT package.

Usage:
    pytest tests/                    # Run all tests
    pytest tests/ -v                 # Verbose output
    pytest tests/ -k "cascade"       # Run only cascade tests
    pytest tests/ --quick            # Quick subset
"""

import sys
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))


# =============================================================================
# Custom Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


def pytest_addoption(parser):
    """Add custom command line options"""
    parser.addoption(
        "--quick",
        action="store_true",
        default=False,
        help="Skip slow tests",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests if --quick is specified"""
    if config.getoption("--quick"):
        skip_slow = pytest.mark.skip(reason="Skipped with --quick")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


# =============================================================================
# Alignment Fixtures
# =============================================================================

def ratings(category: str, researcher: List[float], partner: List[float]) -> List[Dict[str, Any]]:
    """Rating rows for one category."""
    rows = [{"role": "researcher", "alignment": category, "rating": r} for r in researcher]
    rows += [{"role": "partner", "alignment": category, "rating": r} for r in partner]
    return rows


@pytest.fixture
def consensus_ratings() -> List[Dict[str, Any]]:
    """Three categories with close researcher/partner agreement (ICC = 0.96)."""
    return (
        ratings("Goals", [0.9], [0.8])
        + ratings("Roles", [0.5], [0.6])
        + ratings("Values", [0.2], [0.1])
    )


@pytest.fixture
def opposed_ratings() -> List[Dict[str, Any]]:
    """Researcher and partner rank categories in opposite order (ICC = -3)."""
    return (
        ratings("Goals", [1.0], [0.0])
        + ratings("Roles", [0.0], [1.0])
        + ratings("Values", [0.5], [0.5])
    )


# =============================================================================
# Dynamics Fixtures
# =============================================================================

@pytest.fixture
def balanced_dynamics() -> pd.DataFrame:
    return pd.DataFrame({
        "domain": ["A", "A"],
        "dimension": ["d1", "d2"],
        "salience": [1.0, 1.0],
        "weight": [1.0, 1.0],
    })


@pytest.fixture
def uneven_dynamics() -> pd.DataFrame:
    """Domain A scores 1.0, domain B scores 0.5."""
    return pd.DataFrame({
        "domain": ["A", "B"],
        "dimension": ["d1", "d2"],
        "salience": [1.0, 1.0],
        "weight": [1.0, 0.5],
    })


# =============================================================================
# Cascade Fixtures
# =============================================================================

@pytest.fixture
def clique_edges() -> pd.DataFrame:
    """Fully connected three-member core team."""
    return pd.DataFrame({
        "from": [1, 1, 2],
        "to": [2, 3, 3],
        "layer": [1, 1, 1],
    })


@pytest.fixture
def chain_edges() -> List[Dict[str, Any]]:
    """1 - 2 - 3 - 4 with layers 1, 2, 3 on the edges."""
    return [
        {"from": 1, "to": 2, "layer": 1},
        {"from": 2, "to": 3, "layer": 2},
        {"from": 3, "to": 4, "layer": 3},
    ]
