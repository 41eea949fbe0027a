"""
Configuration Module - Valuation Engine
=======================================

Centralizes logging, output locations, default market assumptions,
recommendation thresholds and shared enumerations for the DCF / DDM
valuation pipeline.

Version: 1.0.0
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List
from enum import Enum


# =============================================================================
# DIRECTORY CONFIGURATION
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.absolute()
OUTPUT_DIR = PROJECT_ROOT / "outputs"


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Configure and return a logger instance with professional formatting."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


LOGGER = setup_logger("ValuationEngine")


# =============================================================================
# VALUATION DEFAULTS
# =============================================================================

class ValuationConfig:
    """Default assumptions and fixed parameters for DCF and DDM valuation."""

    # Market assumptions (dashboard defaults)
    RISK_FREE_RATE: float = 0.045  # 4.5%
    MARKET_RETURN: float = 0.10    # 10%
    TERMINAL_GROWTH_RATE: float = 0.025  # 2.5%
    TAX_RATE: float = 0.21  # 21% US corporate rate
    FORECAST_YEARS: int = 5

    # Revenue x margin projection
    FCF_CONVERSION: float = 0.85  # FCF approximated as 85% of NOPAT

    # DDM applicability
    MIN_DIVIDEND_YEARS: int = 3

    # Scenario analysis: fixed FCF growth per case
    BEAR_CASE_GROWTH: float = 0.01
    BASE_CASE_GROWTH: float = 0.03
    BULL_CASE_GROWTH: float = 0.05

    # Sensitivity analysis ranges
    GROWTH_SENSITIVITY_RANGE: List[float] = [-0.02, -0.01, 0, 0.01, 0.02]
    WACC_SENSITIVITY_RANGE: List[float] = [-0.02, -0.01, 0, 0.01, 0.02]


class RecommendationConfig:
    """Upside thresholds for the rating. Comparisons are strict (>)."""

    STRONG_BUY_THRESHOLD: float = 0.15
    BUY_THRESHOLD: float = 0.05
    HOLD_THRESHOLD: float = -0.05


# =============================================================================
# ENUMERATIONS
# =============================================================================

class ScenarioType(Enum):
    """Valuation scenario types."""
    BEAR = "bear"
    BASE = "base"
    BULL = "bull"


class GrowthSourceType(Enum):
    """Where projection growth comes from."""
    FROM_HISTORY = "from_history"
    FROM_ASSUMPTIONS = "from_assumptions"


__all__ = [
    "PROJECT_ROOT",
    "OUTPUT_DIR",
    "LOGGER",
    "setup_logger",
    "ValuationConfig",
    "RecommendationConfig",
    "ScenarioType",
    "GrowthSourceType",
]
