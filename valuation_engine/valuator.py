"""
Comprehensive Valuator
======================

Runs the full valuation for one company profile:

    1. DCF valuation (growth from history or from assumptions)
    2. DDM valuation (applicability-gated)
    3. Recommendation synthesis
    4. Scenario and sensitivity analysis (optional)

and persists the combined result as a JSON report.

Version: 1.0.0
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Any

from .config import LOGGER, OUTPUT_DIR
from .models import FinancialProfile, MarketAssumptions, FromHistory, GrowthSource
from .dcf_valuator import DCFEngine, DCFResult, ScenarioValuation, SensitivityMatrix
from .ddm_valuator import DDMEngine, DDMResult
from .recommendation import Recommendation, RecommendationSynthesizer
from .exceptions import UndefinedUpside


__version__ = "1.0.0"


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass(frozen=True)
class ComprehensiveValuation:
    """Combined DCF, DDM and recommendation output for one company."""

    ticker: str
    assumptions: MarketAssumptions
    dcf: DCFResult
    ddm: DDMResult
    recommendation: Optional[Recommendation] = None
    scenarios: Optional[List[ScenarioValuation]] = None
    sensitivity: Optional[SensitivityMatrix] = None
    valuation_date: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ticker": self.ticker,
            "valuation_date": self.valuation_date.isoformat(),
            "assumptions": self.assumptions.to_dict(),
            "dcf": self.dcf.to_dict(),
            "ddm": self.ddm.to_dict(),
            "recommendation": self.recommendation.to_dict() if self.recommendation else None,
            "scenarios": [s.to_dict() for s in self.scenarios] if self.scenarios is not None else None,
            "sensitivity": self.sensitivity.to_dict() if self.sensitivity else None,
        }


# =============================================================================
# VALUATOR
# =============================================================================

class ComprehensiveValuator:
    """
    Orchestrates the DCF and DDM engines and the recommendation synthesizer.

    Usage:
        valuator = ComprehensiveValuator()
        result = valuator.value(profile, MarketAssumptions())
        valuator.save_report(result)
    """

    def __init__(self):
        self.dcf_engine = DCFEngine()
        self.ddm_engine = DDMEngine()
        self.synthesizer = RecommendationSynthesizer()
        self.logger = LOGGER

    def value(
        self,
        profile: FinancialProfile,
        assumptions: Optional[MarketAssumptions] = None,
        growth_source: Optional[GrowthSource] = None,
        include_analysis: bool = True,
    ) -> ComprehensiveValuation:
        """
        Value a company with every applicable model.

        Args:
            profile: Company financial profile
            assumptions: Market assumptions (defaults applied when omitted)
            growth_source: FromHistory (default) or FromAssumptions
            include_analysis: Also run scenario and sensitivity analysis

        Returns:
            ComprehensiveValuation; `recommendation` is None when the DCF
            upside is undefined

        Raises:
            ValuationError subclasses from the DCF engine
        """
        assumptions = assumptions or MarketAssumptions()
        growth_source = growth_source or FromHistory()

        self.logger.info(f"Starting comprehensive valuation for {profile.ticker}")

        dcf = self.dcf_engine.value(profile, assumptions, growth_source)
        ddm = self.ddm_engine.value(profile, assumptions)

        try:
            recommendation = self.synthesizer.synthesize(dcf, ddm)
            self.logger.info(
                f"  Recommendation: {recommendation.rating.to_display()} "
                f"({recommendation.average_upside:.1%} average upside)"
            )
        except UndefinedUpside as e:
            self.logger.warning(f"  No recommendation for {profile.ticker}: {e.message}")
            recommendation = None

        scenarios = None
        sensitivity = None
        if include_analysis:
            self.logger.info("  Running scenario and sensitivity analysis")
            scenarios = self.dcf_engine.run_scenarios(profile, assumptions, growth_source)
            sensitivity = self.dcf_engine.sensitivity(profile, assumptions, growth_source)

        self.logger.info(f"Comprehensive valuation complete for {profile.ticker}")

        return ComprehensiveValuation(
            ticker=profile.ticker,
            assumptions=assumptions,
            dcf=dcf,
            ddm=ddm,
            recommendation=recommendation,
            scenarios=scenarios,
            sensitivity=sensitivity,
        )

    def save_report(
        self,
        result: ComprehensiveValuation,
        output_dir: Optional[Path] = None,
    ) -> Path:
        """
        Save the valuation report to JSON.

        Args:
            result: ComprehensiveValuation from `value`
            output_dir: Optional output directory (defaults to OUTPUT_DIR)

        Returns:
            Path to saved JSON file
        """
        if output_dir is None:
            output_dir = OUTPUT_DIR

        ticker_dir = Path(output_dir) / result.ticker
        ticker_dir.mkdir(parents=True, exist_ok=True)

        filepath = ticker_dir / f"{result.ticker}_valuation.json"

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2, default=str)

        self.logger.info(f"Saved valuation report to {filepath}")
        return filepath


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def value_company(
    profile: FinancialProfile,
    assumptions: Optional[MarketAssumptions] = None,
    growth_source: Optional[GrowthSource] = None,
) -> ComprehensiveValuation:
    """
    Convenience function for a full valuation.

    Args:
        profile: Company financial profile
        assumptions: Market assumptions (defaults applied when omitted)
        growth_source: FromHistory (default) or FromAssumptions

    Returns:
        ComprehensiveValuation with DCF, DDM and recommendation
    """
    return ComprehensiveValuator().value(profile, assumptions, growth_source)


__all__ = [
    "__version__",
    "ComprehensiveValuation",
    "ComprehensiveValuator",
    "value_company",
]
