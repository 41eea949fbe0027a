"""
Cost of Capital Module
======================

Computes the discount rates used by the DCF and DDM valuations.

Components:
    - Cost of Equity via CAPM: Rf + Beta * (Rm - Rf)
    - Cost of Debt: Interest Expense / Total Debt * (1 - Tax Rate)
    - Weights: Market Cap / (Market Cap + Debt)
    - WACC: We * Ke + Wd * Kd

A company without debt, or with net cash (negative total debt), carries a
zero cost of debt and a zero debt weight; the cash still reaches equity
through the DCF equity bridge.
Total capital (market cap + debt) must be positive.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any

from .config import LOGGER
from .exceptions import InvalidCapitalStructure
from .models import FinancialProfile, MarketAssumptions


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass(frozen=True)
class CostOfCapital:
    """WACC breakdown with all intermediate inputs."""

    # Cost of equity inputs
    risk_free_rate: float
    beta: float
    equity_risk_premium: float
    cost_of_equity: float

    # Cost of debt inputs
    interest_expense: float
    total_debt: float
    tax_rate: float
    pre_tax_cost_of_debt: float
    cost_of_debt: float

    # Capital structure
    market_capitalization: float
    equity_weight: float
    debt_weight: float

    wacc: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "risk_free_rate": self.risk_free_rate,
            "beta": self.beta,
            "equity_risk_premium": self.equity_risk_premium,
            "cost_of_equity": self.cost_of_equity,
            "interest_expense": self.interest_expense,
            "total_debt": self.total_debt,
            "tax_rate": self.tax_rate,
            "pre_tax_cost_of_debt": self.pre_tax_cost_of_debt,
            "cost_of_debt": self.cost_of_debt,
            "market_capitalization": self.market_capitalization,
            "equity_weight": self.equity_weight,
            "debt_weight": self.debt_weight,
            "wacc": self.wacc,
            "formula": "We * (Rf + Beta * ERP) + Wd * Kd * (1 - t)",
        }


# =============================================================================
# CALCULATOR
# =============================================================================

class CostOfCapitalCalculator:
    """CAPM cost of equity, after-tax cost of debt and WACC."""

    def cost_of_equity(self, beta: float, risk_free_rate: float, equity_risk_premium: float) -> float:
        """Ke = Rf + Beta * ERP"""
        return risk_free_rate + beta * equity_risk_premium

    def compute(
        self,
        beta: float,
        risk_free_rate: float,
        equity_risk_premium: float,
        total_debt: float,
        interest_expense: float,
        market_capitalization: float,
        tax_rate: float,
    ) -> CostOfCapital:
        """
        Calculate the full WACC breakdown.

        Args:
            beta: Equity beta
            risk_free_rate: Risk-free rate
            equity_risk_premium: Market return minus risk-free rate
            total_debt: Total (net) debt
            interest_expense: Annual interest expense
            market_capitalization: Market value of equity
            tax_rate: Marginal tax rate applied to interest

        Returns:
            CostOfCapital with all components

        Raises:
            InvalidCapitalStructure: market cap plus debt is not positive
        """
        total_capital = market_capitalization + total_debt
        if total_capital <= 0:
            raise InvalidCapitalStructure(
                f"Total capital must be positive, got {total_capital:,.2f}",
                details={
                    "market_capitalization": market_capitalization,
                    "total_debt": total_debt,
                },
            )

        ke = self.cost_of_equity(beta, risk_free_rate, equity_risk_premium)

        if total_debt > 0:
            pre_tax_kd = interest_expense / total_debt
            kd = pre_tax_kd * (1 - tax_rate)
            equity_weight = market_capitalization / total_capital
            debt_weight = 1 - equity_weight
        else:
            pre_tax_kd = 0.0
            kd = 0.0
            equity_weight = 1.0
            debt_weight = 0.0

        wacc = equity_weight * ke + debt_weight * kd

        return CostOfCapital(
            risk_free_rate=risk_free_rate,
            beta=beta,
            equity_risk_premium=equity_risk_premium,
            cost_of_equity=ke,
            interest_expense=interest_expense,
            total_debt=total_debt,
            tax_rate=tax_rate,
            pre_tax_cost_of_debt=pre_tax_kd,
            cost_of_debt=kd,
            market_capitalization=market_capitalization,
            equity_weight=equity_weight,
            debt_weight=debt_weight,
            wacc=wacc,
        )

    def calculate(self, profile: FinancialProfile, assumptions: MarketAssumptions) -> CostOfCapital:
        """WACC for a profile under the given market assumptions."""
        result = self.compute(
            beta=profile.beta,
            risk_free_rate=assumptions.risk_free_rate,
            equity_risk_premium=assumptions.equity_risk_premium,
            total_debt=profile.total_debt,
            interest_expense=profile.interest_expense,
            market_capitalization=profile.market_capitalization,
            tax_rate=assumptions.tax_rate,
        )
        LOGGER.debug(
            f"  {profile.ticker}: Ke {result.cost_of_equity:.2%}, "
            f"Kd {result.cost_of_debt:.2%}, WACC {result.wacc:.2%}"
        )
        return result


__all__ = [
    "CostOfCapital",
    "CostOfCapitalCalculator",
]
