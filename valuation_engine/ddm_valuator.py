"""
DDM Valuation Module
====================

Dividend Discount Model valuation using the Gordon Growth Model.

Methodology:
    g  = average year-over-year growth of dividends per share
    Ke = Rf + Beta * ERP (CAPM)
    D1 = D0 * (1 + g)
    Intrinsic Value per Share = D1 / (Ke - g)

    Note: DDM values equity per share directly (not enterprise value like DCF)

Applicability:
    - The company pays dividends (at least one positive year)
    - At least 3 years of dividend history
    - Dividend growth below cost of equity (otherwise the perpetuity diverges)

An inapplicable DDM is reported through the result, never raised.

Version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Any

from .config import LOGGER, ValuationConfig
from .models import FinancialProfile, MarketAssumptions
from .growth_estimator import GrowthEstimator
from .cost_of_capital import CostOfCapitalCalculator
from .dcf_valuator import calculate_upside
from .exceptions import UndefinedUpside


__version__ = "1.0.0"


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass(frozen=True)
class DDMResult:
    """DDM valuation output. `reason` is set only when not applicable."""

    ticker: str
    applicable: bool
    current_price: float
    reason: Optional[str] = None
    years_of_dividends: int = 0
    cost_of_equity: Optional[float] = None
    average_dividend_growth: Optional[float] = None
    current_dividend: Optional[float] = None
    next_year_dividend: Optional[float] = None
    intrinsic_value: Optional[float] = None
    upside: Optional[float] = None

    @property
    def implied_dividend_yield(self) -> Optional[float]:
        if not self.applicable or not self.intrinsic_value:
            return None
        return self.current_dividend / self.intrinsic_value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ticker": self.ticker,
            "applicable": self.applicable,
            "reason": self.reason,
            "years_of_dividends": self.years_of_dividends,
            "cost_of_equity": self.cost_of_equity,
            "average_dividend_growth": self.average_dividend_growth,
            "current_dividend": self.current_dividend,
            "next_year_dividend": self.next_year_dividend,
            "intrinsic_value": self.intrinsic_value,
            "current_price": self.current_price,
            "upside": self.upside,
            "implied_dividend_yield": self.implied_dividend_yield,
        }


# =============================================================================
# DDM ENGINE
# =============================================================================

class DDMEngine:
    """
    Applicability gate plus Gordon Growth valuation of dividends.

    Usage:
        engine = DDMEngine()
        result = engine.value(profile, assumptions)
    """

    def __init__(self):
        self.growth_estimator = GrowthEstimator()
        self.capital_calculator = CostOfCapitalCalculator()
        self.logger = LOGGER

    def _not_applicable(self, profile: FinancialProfile, reason: str, **extra: Any) -> DDMResult:
        self.logger.info(f"  DDM not applicable: {reason}")
        return DDMResult(
            ticker=profile.ticker,
            applicable=False,
            current_price=profile.current_price,
            reason=reason,
            years_of_dividends=len(profile.dividends_per_share),
            **extra,
        )

    def value(self, profile: FinancialProfile, assumptions: MarketAssumptions) -> DDMResult:
        """
        Perform DDM valuation.

        Args:
            profile: Company financial profile (dividends oldest-first)
            assumptions: Market assumptions for CAPM

        Returns:
            DDMResult, with `applicable=False` and a reason when the model
            cannot be used
        """
        self.logger.info(f"Starting DDM valuation for {profile.ticker}")

        dividends = profile.dividends_per_share

        # Step 1: Applicability
        if not profile.pays_dividends:
            return self._not_applicable(profile, "Company does not pay dividends")

        if len(dividends) < ValuationConfig.MIN_DIVIDEND_YEARS:
            return self._not_applicable(
                profile,
                f"Insufficient dividend history: {len(dividends)} years "
                f"(minimum {ValuationConfig.MIN_DIVIDEND_YEARS})",
            )

        # Step 2: Growth and cost of equity
        growth = self.growth_estimator.average_growth(dividends)
        ke = self.capital_calculator.cost_of_equity(
            profile.beta, assumptions.risk_free_rate, assumptions.equity_risk_premium
        )

        if growth >= ke:
            return self._not_applicable(
                profile,
                f"Dividend growth exceeds cost of equity "
                f"({growth:.2%} >= {ke:.2%})",
                cost_of_equity=ke,
                average_dividend_growth=growth,
            )

        # Step 3: Gordon Growth
        current_dividend = dividends[-1]
        next_year_dividend = current_dividend * (1 + growth)
        intrinsic_value = next_year_dividend / (ke - growth)

        # Step 4: Market comparison
        try:
            upside = calculate_upside(intrinsic_value, profile.current_price)
        except UndefinedUpside as e:
            self.logger.warning(f"  {profile.ticker}: {e.message}")
            upside = None

        self.logger.info(
            f"DDM complete: Intrinsic Value ${intrinsic_value:.2f}, "
            f"Dividend Growth {growth:.2%}, Ke {ke:.2%}"
        )

        return DDMResult(
            ticker=profile.ticker,
            applicable=True,
            current_price=profile.current_price,
            years_of_dividends=len(dividends),
            cost_of_equity=ke,
            average_dividend_growth=growth,
            current_dividend=current_dividend,
            next_year_dividend=next_year_dividend,
            intrinsic_value=intrinsic_value,
            upside=upside,
        )


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def value_company_ddm(
    profile: FinancialProfile,
    assumptions: Optional[MarketAssumptions] = None,
) -> DDMResult:
    """Convenience function for DDM valuation."""
    return DDMEngine().value(profile, assumptions or MarketAssumptions())


__all__ = [
    "__version__",
    "DDMResult",
    "DDMEngine",
    "value_company_ddm",
]
