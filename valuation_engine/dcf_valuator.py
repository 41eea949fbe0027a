"""
DCF Valuation Module
====================

Discounted Cash Flow valuation using Free Cash Flow projections,
WACC-based discounting and Gordon Growth terminal value.

Methodology:
    Enterprise Value = Sum of PV(FCF) for Years 1-N + PV(Terminal Value)
    Equity Value = Enterprise Value - Total Debt
    Fair Value per Share = Equity Value / Shares Outstanding
    Upside = (Fair Value - Current Price) / Current Price

Growth Sources:
    - FromHistory: average year-over-year growth of historical FCF
      (operating cash flow + capex), applied uniformly
    - FromAssumptions: per-year revenue growth and operating margin,
      FCF = Revenue * Margin * (1 - tax) * FCF conversion

Additional Analysis:
    - Scenario Analysis: Bear, Base and Bull cases at fixed FCF growth
    - Sensitivity Analysis: growth rate vs discount rate matrix

Total debt stands in for net debt; cash is not modeled separately.

Version: 1.0.0
"""

from __future__ import annotations

import math
import pandas as pd
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Any, Tuple, Sequence

from .config import (
    LOGGER,
    ValuationConfig,
    ScenarioType,
)
from .exceptions import (
    InsufficientHistory,
    InvalidCapitalStructure,
    NonConvergentTerminalValue,
    UndefinedUpside,
)
from .models import (
    FinancialProfile,
    MarketAssumptions,
    FromHistory,
    FromAssumptions,
    GrowthSource,
)
from .growth_estimator import GrowthEstimator
from .cost_of_capital import CostOfCapital, CostOfCapitalCalculator
from .cash_flow_projector import (
    CashFlowProjector,
    TerminalValue,
    TerminalValueCalculator,
    YearlyProjection,
)


__version__ = "1.0.0"


def calculate_upside(fair_value: float, current_price: Optional[float]) -> float:
    """
    Fractional upside of a fair value over the market price.

    Raises:
        UndefinedUpside: current price is zero, missing or not finite
    """
    if not current_price or not math.isfinite(current_price):
        raise UndefinedUpside(
            "Upside is undefined without a non-zero current price",
            details={"fair_value": fair_value, "current_price": current_price},
        )
    return (fair_value - current_price) / current_price


def _pad(values: Sequence[float], length: int) -> List[float]:
    """Truncate or extend with the last value to exactly `length` entries."""
    values = list(values)
    if len(values) >= length:
        return values[:length]
    return values + [values[-1]] * (length - len(values))


# =============================================================================
# DATA CONTAINERS - DCF RESULT
# =============================================================================

@dataclass(frozen=True)
class DCFResult:
    """Complete DCF valuation output."""

    ticker: str
    growth_source: str
    cost_of_capital: CostOfCapital

    # Projection
    base_free_cash_flow: float
    growth_rates: Tuple[float, ...]
    projected_free_cash_flows: Tuple[float, ...]
    present_values: Tuple[float, ...]
    terminal: TerminalValue

    # Equity bridge
    enterprise_value: float
    total_debt: float
    equity_value: float
    shares_outstanding: float
    price_per_share: float

    # Market comparison
    current_price: float
    upside: Optional[float]

    @property
    def wacc(self) -> float:
        return self.cost_of_capital.wacc

    @property
    def cost_of_equity(self) -> float:
        return self.cost_of_capital.cost_of_equity

    @property
    def cost_of_debt(self) -> float:
        return self.cost_of_capital.cost_of_debt

    @property
    def terminal_value(self) -> float:
        return self.terminal.terminal_value

    @property
    def terminal_present_value(self) -> float:
        return self.terminal.present_value

    @property
    def sum_of_pv_fcf(self) -> float:
        return sum(self.present_values)

    @property
    def terminal_value_share(self) -> Optional[float]:
        """PV of terminal value as a fraction of enterprise value."""
        if self.enterprise_value == 0:
            return None
        return self.terminal_present_value / self.enterprise_value

    def yearly_projections(self) -> List[YearlyProjection]:
        return CashFlowProjector().yearly_projections(
            self.projected_free_cash_flows, self.growth_rates, self.wacc
        )

    def to_frame(self) -> pd.DataFrame:
        """Year-by-year projection table."""
        frame = pd.DataFrame([p.to_dict() for p in self.yearly_projections()])
        return frame.set_index("year")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ticker": self.ticker,
            "growth_source": self.growth_source,
            "wacc": self.wacc,
            "cost_of_equity": self.cost_of_equity,
            "cost_of_debt": self.cost_of_debt,
            "cost_of_capital": self.cost_of_capital.to_dict(),
            "base_free_cash_flow": self.base_free_cash_flow,
            "growth_rates": list(self.growth_rates),
            "projected_free_cash_flows": list(self.projected_free_cash_flows),
            "present_values": list(self.present_values),
            "terminal_value": self.terminal_value,
            "terminal_present_value": self.terminal_present_value,
            "terminal": self.terminal.to_dict(),
            "terminal_value_share": self.terminal_value_share,
            "enterprise_value": self.enterprise_value,
            "total_debt": self.total_debt,
            "equity_value": self.equity_value,
            "shares_outstanding": self.shares_outstanding,
            "price_per_share": self.price_per_share,
            "current_price": self.current_price,
            "upside": self.upside,
        }


# =============================================================================
# DATA CONTAINERS - SCENARIO & SENSITIVITY ANALYSIS
# =============================================================================

@dataclass(frozen=True)
class ScenarioValuation:
    """Single scenario valuation result."""

    scenario: ScenarioType
    growth_rate: float
    enterprise_value: float
    equity_value: float
    price_per_share: float
    upside: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario": self.scenario.value,
            "growth_rate": self.growth_rate,
            "enterprise_value": self.enterprise_value,
            "equity_value": self.equity_value,
            "price_per_share": self.price_per_share,
            "upside": self.upside,
        }


@dataclass(frozen=True)
class SensitivityMatrix:
    """Price per share across growth rate and discount rate combinations."""

    growth_rates: Tuple[float, ...]
    discount_rates: Tuple[float, ...]

    # values[i][j] = price at growth_rates[i] and discount_rates[j];
    # NaN where the terminal value does not converge
    values: Tuple[Tuple[float, ...], ...]

    base_growth_idx: int = 0
    base_wacc_idx: int = 0

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [list(row) for row in self.values],
            index=pd.Index(self.growth_rates, name="growth_rate"),
            columns=pd.Index(self.discount_rates, name="discount_rate"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "growth_rates": list(self.growth_rates),
            "discount_rates": list(self.discount_rates),
            "values": [
                [None if math.isnan(v) else v for v in row]
                for row in self.values
            ],
            "base_growth_idx": self.base_growth_idx,
            "base_wacc_idx": self.base_wacc_idx,
        }


# =============================================================================
# DCF ENGINE
# =============================================================================

class DCFEngine:
    """
    Orchestrates cost of capital, growth, projection and terminal value
    into a fair value per share.

    Usage:
        engine = DCFEngine()
        result = engine.value(profile, assumptions)
        result = engine.value(profile, assumptions, FromAssumptions(rates, margins))
    """

    def __init__(self):
        self.growth_estimator = GrowthEstimator()
        self.capital_calculator = CostOfCapitalCalculator()
        self.projector = CashFlowProjector()
        self.terminal_calculator = TerminalValueCalculator()
        self.logger = LOGGER

    def value(
        self,
        profile: FinancialProfile,
        assumptions: MarketAssumptions,
        growth_source: Optional[GrowthSource] = None,
    ) -> DCFResult:
        """
        Perform DCF valuation.

        Args:
            profile: Company financial profile (series oldest-first)
            assumptions: Market assumptions
            growth_source: FromHistory (default) or FromAssumptions

        Returns:
            DCFResult with fair value per share

        Raises:
            InvalidCapitalStructure: non-positive capital or share count
            NonConvergentTerminalValue: WACC does not exceed terminal growth
            InsufficientHistory: too little history for the growth source
        """
        if growth_source is None:
            growth_source = FromHistory()

        self.logger.info(f"Starting DCF valuation for {profile.ticker} ({growth_source.kind.value})")

        # Step 1: Cost of capital
        self.logger.info("  Calculating WACC")
        cost_of_capital = self.capital_calculator.calculate(profile, assumptions)
        wacc = cost_of_capital.wacc

        # Step 2-3: Growth and projected FCF
        self.logger.info("  Projecting free cash flows")
        base_fcf, rates, projected = self._project(profile, assumptions, growth_source)

        # Step 4-8: Terminal value, discounting, equity bridge
        terminal, present_values, enterprise_value, equity_value, price = self._discounted_value(
            profile, projected, wacc, assumptions.terminal_growth_rate
        )

        # Step 9: Market comparison
        upside = self._upside(price, profile)

        result = DCFResult(
            ticker=profile.ticker,
            growth_source=growth_source.kind.value,
            cost_of_capital=cost_of_capital,
            base_free_cash_flow=base_fcf,
            growth_rates=tuple(rates),
            projected_free_cash_flows=tuple(projected),
            present_values=tuple(present_values),
            terminal=terminal,
            enterprise_value=enterprise_value,
            total_debt=profile.total_debt,
            equity_value=equity_value,
            shares_outstanding=profile.shares_outstanding,
            price_per_share=price,
            current_price=profile.current_price,
            upside=upside,
        )

        upside_text = f"{upside:.1%}" if upside is not None else "N/A"
        self.logger.info(
            f"DCF complete: Fair Value ${price:.2f}, WACC {wacc:.2%}, Upside {upside_text}"
        )
        return result

    def _project(
        self,
        profile: FinancialProfile,
        assumptions: MarketAssumptions,
        growth_source: GrowthSource,
        growth_shift: float = 0.0,
    ) -> Tuple[float, List[float], List[float]]:
        """Base FCF, growth rates and projected FCF, with growth shifted by `growth_shift`."""
        if isinstance(growth_source, FromAssumptions):
            if growth_shift:
                growth_source = replace(
                    growth_source,
                    revenue_growth_rates=tuple(
                        r + growth_shift for r in growth_source.revenue_growth_rates
                    ),
                )
            return self._project_from_assumptions(profile, assumptions, growth_source)
        return self._project_from_history(profile, assumptions, growth_shift)

    def _project_from_history(
        self,
        profile: FinancialProfile,
        assumptions: MarketAssumptions,
        growth_shift: float = 0.0,
    ) -> Tuple[float, List[float], List[float]]:
        """Latest FCF compounded at the average historical FCF growth."""
        history = profile.historical_free_cash_flow()
        if len(history) < 2:
            raise InsufficientHistory("free cash flow", len(history), 2)

        base_fcf = history[-1]
        growth = self.growth_estimator.average_growth(history) + growth_shift
        rates = self.projector.growth_schedule(growth, assumptions.forecast_years)
        projected = self.projector.project(base_fcf, rates, assumptions.forecast_years)

        self.logger.debug(
            f"  Historical FCF growth {growth:.2%} over {len(history)} years"
        )
        return base_fcf, rates, projected

    def _project_from_assumptions(
        self,
        profile: FinancialProfile,
        assumptions: MarketAssumptions,
        source: FromAssumptions,
    ) -> Tuple[float, List[float], List[float]]:
        """Revenue projected per year, converted to FCF through margin and tax."""
        base_revenue = source.base_revenue
        if base_revenue is None:
            if not profile.revenue:
                raise InsufficientHistory("revenue", 0, 1)
            base_revenue = profile.revenue[-1]

        years = assumptions.forecast_years
        revenue_growth = _pad(source.revenue_growth_rates, years)
        margins = _pad(source.operating_margins, years)
        after_tax = (1 - assumptions.tax_rate) * source.fcf_conversion

        revenues = self.projector.project(base_revenue, revenue_growth, years)
        projected = [
            revenue * margin * after_tax
            for revenue, margin in zip(revenues, margins)
        ]
        base_fcf = base_revenue * margins[0] * after_tax
        return base_fcf, revenue_growth, projected

    def _discounted_value(
        self,
        profile: FinancialProfile,
        projected: Sequence[float],
        wacc: float,
        terminal_growth_rate: float,
    ) -> Tuple[TerminalValue, List[float], float, float, float]:
        """Terminal value, PVs, enterprise value, equity value and price."""
        years = len(projected)
        terminal = self.terminal_calculator.calculate(
            projected[-1], terminal_growth_rate, wacc, years
        )
        present_values = self.projector.discount(projected, wacc)
        enterprise_value = sum(present_values) + terminal.present_value
        equity_value = enterprise_value - profile.total_debt

        if profile.shares_outstanding <= 0:
            raise InvalidCapitalStructure(
                f"Shares outstanding must be positive, got {profile.shares_outstanding}",
                details={"shares_outstanding": profile.shares_outstanding},
            )
        price = equity_value / profile.shares_outstanding
        return terminal, present_values, enterprise_value, equity_value, price

    def _upside(self, price: float, profile: FinancialProfile) -> Optional[float]:
        try:
            return calculate_upside(price, profile.current_price)
        except UndefinedUpside as e:
            self.logger.warning(f"  {profile.ticker}: {e.message}")
            return None

    # -------------------------------------------------------------------------
    # Scenario & sensitivity analysis
    # -------------------------------------------------------------------------

    def run_scenarios(
        self,
        profile: FinancialProfile,
        assumptions: MarketAssumptions,
        growth_source: Optional[GrowthSource] = None,
    ) -> List[ScenarioValuation]:
        """
        Bear, Base and Bull valuations at fixed FCF growth rates.

        Each case compounds the same base FCF the headline valuation starts
        from: the latest historical FCF, or the first assumption-year FCF
        under FromAssumptions.

        Returns:
            Scenarios ordered bear, base, bull
        """
        growth_source = growth_source or FromHistory()
        base_fcf, _, _ = self._project(profile, assumptions, growth_source)
        wacc = self.capital_calculator.calculate(profile, assumptions).wacc
        cases = [
            (ScenarioType.BEAR, ValuationConfig.BEAR_CASE_GROWTH),
            (ScenarioType.BASE, ValuationConfig.BASE_CASE_GROWTH),
            (ScenarioType.BULL, ValuationConfig.BULL_CASE_GROWTH),
        ]

        scenarios = []
        for scenario, growth in cases:
            projected = self.projector.project(base_fcf, growth, assumptions.forecast_years)
            _, _, ev, equity, price = self._discounted_value(
                profile, projected, wacc, assumptions.terminal_growth_rate
            )
            scenarios.append(ScenarioValuation(
                scenario=scenario,
                growth_rate=growth,
                enterprise_value=ev,
                equity_value=equity,
                price_per_share=price,
                upside=self._upside(price, profile),
            ))
        return scenarios

    def sensitivity(
        self,
        profile: FinancialProfile,
        assumptions: MarketAssumptions,
        growth_source: Optional[GrowthSource] = None,
    ) -> SensitivityMatrix:
        """
        Price per share over a growth rate vs WACC grid.

        Rows shift the growth of the chosen source (historical FCF growth,
        or every assumed revenue growth rate) and are labelled by the
        resulting first-year rate. The centre cell reproduces the headline
        DCF price for the same source.

        Args:
            profile: Company financial profile
            assumptions: Market assumptions
            growth_source: FromHistory (default) or FromAssumptions

        Returns:
            SensitivityMatrix; non-convergent cells hold NaN
        """
        growth_source = growth_source or FromHistory()
        base_wacc = self.capital_calculator.calculate(profile, assumptions).wacc

        growth_deltas = ValuationConfig.GROWTH_SENSITIVITY_RANGE
        wacc_deltas = ValuationConfig.WACC_SENSITIVITY_RANGE
        discount_rates = [base_wacc + d for d in wacc_deltas]

        growth_rates = []
        values = []
        for delta in growth_deltas:
            _, rates, projected = self._project(profile, assumptions, growth_source, delta)
            growth_rates.append(rates[0])
            row = []
            for wacc in discount_rates:
                try:
                    *_, price = self._discounted_value(
                        profile, projected, wacc, assumptions.terminal_growth_rate
                    )
                except NonConvergentTerminalValue:
                    price = float("nan")
                row.append(price)
            values.append(tuple(row))

        return SensitivityMatrix(
            growth_rates=tuple(growth_rates),
            discount_rates=tuple(discount_rates),
            values=tuple(values),
            base_growth_idx=growth_deltas.index(0),
            base_wacc_idx=wacc_deltas.index(0),
        )


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def value_company_dcf(
    profile: FinancialProfile,
    assumptions: Optional[MarketAssumptions] = None,
    growth_source: Optional[GrowthSource] = None,
) -> DCFResult:
    """Convenience function for DCF valuation."""
    return DCFEngine().value(profile, assumptions or MarketAssumptions(), growth_source)


__all__ = [
    "__version__",
    "calculate_upside",
    "DCFResult",
    "ScenarioValuation",
    "SensitivityMatrix",
    "DCFEngine",
    "value_company_dcf",
]
