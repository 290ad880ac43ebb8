"""
Application Settings

Environment configuration for the analyzers and the command-line tool.
"""

import logging
import os
from dataclasses import dataclass

from ..analysis.cascade_analyzer import CascadeWeights


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass
class Settings:
    """Application settings from environment."""

    # Cascade
    alpha_parameter: float = 0.9
    local_weight: float = 0.4
    global_weight: float = 0.3
    topology_weight: float = 0.3

    # Alignment
    median_width: float = 1.0
    icc_conf_level: float = 0.95

    # Logging
    log_level: str = "INFO"

    def __post_init__(self):
        if self.median_width <= 0:
            raise ValueError(f"median_width must be positive, got {self.median_width}")
        if not 0 < self.icc_conf_level < 1:
            raise ValueError(f"icc_conf_level must be in (0, 1), got {self.icc_conf_level}")
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            alpha_parameter=_env_float("CENTR_IMPACT_ALPHA_PARAMETER", 0.9),
            local_weight=_env_float("CENTR_IMPACT_LOCAL_WEIGHT", 0.4),
            global_weight=_env_float("CENTR_IMPACT_GLOBAL_WEIGHT", 0.3),
            topology_weight=_env_float("CENTR_IMPACT_TOPOLOGY_WEIGHT", 0.3),
            median_width=_env_float("CENTR_IMPACT_MEDIAN_WIDTH", 1.0),
            icc_conf_level=_env_float("CENTR_IMPACT_ICC_CONF_LEVEL", 0.95),
            log_level=os.getenv("CENTR_IMPACT_LOG_LEVEL", "INFO"),
        )

    def cascade_weights(self) -> CascadeWeights:
        return CascadeWeights(
            local_weight=self.local_weight,
            global_weight=self.global_weight,
            topology_weight=self.topology_weight,
        )
