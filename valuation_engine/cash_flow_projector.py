"""
Cash Flow Projection Module
===========================

Projects free cash flow over the explicit forecast horizon and values the
cash flows beyond it with the Gordon Growth perpetuity.

    FCF_1 = Base * (1 + g_1)
    FCF_t = FCF_{t-1} * (1 + g_t)
    PV_t  = FCF_t / (1 + WACC)^t
    TV    = FCF_N * (1 + g_terminal) / (WACC - g_terminal)
    PV_TV = TV / (1 + WACC)^N

Negative or shrinking cash flows are projected as-is; nothing is clamped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Any, Sequence, Union

from .exceptions import NonConvergentTerminalValue


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass(frozen=True)
class YearlyProjection:
    """Single year FCF projection."""

    year: int
    fcf: float
    growth_rate: float
    discount_factor: float
    present_value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "fcf": self.fcf,
            "growth_rate": self.growth_rate,
            "discount_factor": self.discount_factor,
            "present_value": self.present_value,
        }


@dataclass(frozen=True)
class TerminalValue:
    """Terminal value calculation using Gordon Growth Model."""

    final_year_fcf: float
    terminal_growth_rate: float
    discount_rate: float
    forecast_years: int

    terminal_year_fcf: float
    terminal_value: float
    discount_factor: float
    present_value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "final_year_fcf": self.final_year_fcf,
            "terminal_growth_rate": self.terminal_growth_rate,
            "discount_rate": self.discount_rate,
            "forecast_years": self.forecast_years,
            "terminal_year_fcf": self.terminal_year_fcf,
            "terminal_value_undiscounted": self.terminal_value,
            "discount_factor": self.discount_factor,
            "present_value": self.present_value,
            "formula": "FCF * (1+g) / (WACC - g)",
        }


# =============================================================================
# CASH FLOW PROJECTOR
# =============================================================================

class CashFlowProjector:
    """Compounds a base cash flow forward by one rate or a per-year schedule."""

    def growth_schedule(
        self,
        growth_rate: Union[float, Sequence[float]],
        forecast_years: int,
    ) -> List[float]:
        """Expand a single rate to the horizon, or check a per-year schedule."""
        if forecast_years < 1:
            raise ValueError(f"forecast_years must be positive, got {forecast_years}")
        if isinstance(growth_rate, (int, float)):
            return [float(growth_rate)] * forecast_years
        rates = [float(r) for r in growth_rate]
        if len(rates) != forecast_years:
            raise ValueError(
                f"Growth schedule has {len(rates)} rates for a {forecast_years}-year horizon"
            )
        return rates

    def project(
        self,
        base_fcf: float,
        growth_rate: Union[float, Sequence[float]],
        forecast_years: int,
    ) -> List[float]:
        """
        Project FCF for each forecast year.

        Args:
            base_fcf: Starting FCF (latest year)
            growth_rate: Single rate or one rate per forecast year
            forecast_years: Horizon length

        Returns:
            List of exactly `forecast_years` projected cash flows
        """
        projected = []
        current_fcf = base_fcf
        for rate in self.growth_schedule(growth_rate, forecast_years):
            current_fcf = current_fcf * (1 + rate)
            projected.append(current_fcf)
        return projected

    def discount(self, cash_flows: Sequence[float], discount_rate: float) -> List[float]:
        """Present value of each year's cash flow, year 1 discounted once."""
        return [
            fcf / (1 + discount_rate) ** year
            for year, fcf in enumerate(cash_flows, start=1)
        ]

    def yearly_projections(
        self,
        cash_flows: Sequence[float],
        growth_rates: Sequence[float],
        discount_rate: float,
    ) -> List[YearlyProjection]:
        """Year-by-year breakdown for reporting."""
        rows = []
        for year, (fcf, rate) in enumerate(zip(cash_flows, growth_rates), start=1):
            discount_factor = 1 / ((1 + discount_rate) ** year)
            rows.append(YearlyProjection(
                year=year,
                fcf=fcf,
                growth_rate=rate,
                discount_factor=discount_factor,
                present_value=fcf * discount_factor,
            ))
        return rows


# =============================================================================
# TERMINAL VALUE CALCULATOR
# =============================================================================

class TerminalValueCalculator:
    """Gordon Growth terminal value, discounted back over the horizon."""

    def calculate(
        self,
        final_year_fcf: float,
        terminal_growth_rate: float,
        wacc: float,
        forecast_years: int,
    ) -> TerminalValue:
        """
        Calculate terminal value and its present value.

        Raises:
            NonConvergentTerminalValue: WACC does not exceed terminal growth
        """
        if wacc <= terminal_growth_rate:
            raise NonConvergentTerminalValue(wacc, terminal_growth_rate)

        terminal_year_fcf = final_year_fcf * (1 + terminal_growth_rate)
        terminal_value = terminal_year_fcf / (wacc - terminal_growth_rate)
        discount_factor = 1 / ((1 + wacc) ** forecast_years)

        return TerminalValue(
            final_year_fcf=final_year_fcf,
            terminal_growth_rate=terminal_growth_rate,
            discount_rate=wacc,
            forecast_years=forecast_years,
            terminal_year_fcf=terminal_year_fcf,
            terminal_value=terminal_value,
            discount_factor=discount_factor,
            present_value=terminal_value / ((1 + wacc) ** forecast_years),
        )


__all__ = [
    "YearlyProjection",
    "TerminalValue",
    "CashFlowProjector",
    "TerminalValueCalculator",
]
