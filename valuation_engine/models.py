"""
Valuation Input Models
======================

Immutable input records consumed by the valuation engine:

    FinancialProfile   - historical series and current snapshot of a company
    MarketAssumptions  - analyst-supplied market parameters
    FromHistory / FromAssumptions - the two growth sources a DCF can use

All historical series are ordered oldest-to-newest (index 0 = earliest
fiscal year). Ingestion code is responsible for normalizing to that order.

Version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Any, Tuple, Union, Sequence

from .config import ValuationConfig, GrowthSourceType
from .exceptions import InvalidAssumptions


def _as_series(values: Optional[Sequence[float]]) -> Tuple[float, ...]:
    if values is None:
        return ()
    return tuple(float(v) for v in values)


# =============================================================================
# FINANCIAL PROFILE
# =============================================================================

@dataclass(frozen=True)
class FinancialProfile:
    """
    Company historical and current financial state.

    Series may differ in length when the source was incomplete; every
    consumer handles each series independently. Capital expenditure is
    stored as a negative cash adjustment.
    """

    # Identification
    ticker: str

    # Historical series (oldest-first)
    revenue: Tuple[float, ...] = ()
    net_income: Tuple[float, ...] = ()
    operating_income: Tuple[float, ...] = ()
    cash_from_operations: Tuple[float, ...] = ()
    capital_expenditure: Tuple[float, ...] = ()
    dividends_per_share: Tuple[float, ...] = ()

    # Snapshot values
    beta: float = 1.0
    total_debt: float = 0.0
    interest_expense: float = 0.0
    market_capitalization: float = 0.0
    shares_outstanding: float = 0.0
    current_price: float = 0.0
    tax_rate: float = ValuationConfig.TAX_RATE

    def __post_init__(self):
        for name in (
            "revenue",
            "net_income",
            "operating_income",
            "cash_from_operations",
            "capital_expenditure",
            "dividends_per_share",
        ):
            object.__setattr__(self, name, _as_series(getattr(self, name)))
        object.__setattr__(self, "ticker", self.ticker.upper())

    @property
    def pays_dividends(self) -> bool:
        return any(d > 0 for d in self.dividends_per_share)

    def historical_free_cash_flow(self) -> Tuple[float, ...]:
        """
        Free cash flow by year: operating cash flow plus (negative) capex.

        The two series are aligned on their most recent year, so the result
        covers only the years both series report.
        """
        n = min(len(self.cash_from_operations), len(self.capital_expenditure))
        if n == 0:
            return ()
        cfo = self.cash_from_operations[len(self.cash_from_operations) - n:]
        capex = self.capital_expenditure[len(self.capital_expenditure) - n:]
        return tuple(c + x for c, x in zip(cfo, capex))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ticker": self.ticker,
            "revenue": list(self.revenue),
            "net_income": list(self.net_income),
            "operating_income": list(self.operating_income),
            "cash_from_operations": list(self.cash_from_operations),
            "capital_expenditure": list(self.capital_expenditure),
            "dividends_per_share": list(self.dividends_per_share),
            "beta": self.beta,
            "total_debt": self.total_debt,
            "interest_expense": self.interest_expense,
            "market_capitalization": self.market_capitalization,
            "shares_outstanding": self.shares_outstanding,
            "current_price": self.current_price,
            "tax_rate": self.tax_rate,
        }


# =============================================================================
# MARKET ASSUMPTIONS
# =============================================================================

@dataclass(frozen=True)
class MarketAssumptions:
    """
    User or analyst supplied market parameters, as decimal fractions.

    Either `market_return` or `market_risk_premium` drives CAPM. When a
    premium is given it takes precedence over the market return.
    """

    risk_free_rate: float = ValuationConfig.RISK_FREE_RATE
    market_return: Optional[float] = ValuationConfig.MARKET_RETURN
    market_risk_premium: Optional[float] = None
    terminal_growth_rate: float = ValuationConfig.TERMINAL_GROWTH_RATE
    tax_rate: float = ValuationConfig.TAX_RATE
    forecast_years: int = ValuationConfig.FORECAST_YEARS

    def __post_init__(self):
        if self.market_return is None and self.market_risk_premium is None:
            raise InvalidAssumptions(
                "Either market_return or market_risk_premium is required"
            )
        if isinstance(self.forecast_years, bool) or not isinstance(self.forecast_years, int) \
                or self.forecast_years < 1:
            raise InvalidAssumptions(
                f"forecast_years must be a positive integer, got {self.forecast_years!r}",
                details={"forecast_years": self.forecast_years},
            )
        if not 0 <= self.tax_rate <= 1:
            raise InvalidAssumptions(
                f"tax_rate must lie in [0, 1], got {self.tax_rate}",
                details={"tax_rate": self.tax_rate},
            )

    @property
    def equity_risk_premium(self) -> float:
        if self.market_risk_premium is not None:
            return self.market_risk_premium
        return self.market_return - self.risk_free_rate

    @property
    def expected_market_return(self) -> float:
        return self.risk_free_rate + self.equity_risk_premium

    def to_dict(self) -> Dict[str, Any]:
        return {
            "risk_free_rate": self.risk_free_rate,
            "market_return": self.expected_market_return,
            "market_risk_premium": self.equity_risk_premium,
            "terminal_growth_rate": self.terminal_growth_rate,
            "tax_rate": self.tax_rate,
            "forecast_years": self.forecast_years,
        }


# =============================================================================
# GROWTH SOURCES
# =============================================================================

@dataclass(frozen=True)
class FromHistory:
    """Project FCF at the average historical FCF growth rate."""

    @property
    def kind(self) -> GrowthSourceType:
        return GrowthSourceType.FROM_HISTORY

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value}


@dataclass(frozen=True)
class FromAssumptions:
    """
    Project revenue per year and convert it to FCF through margin and tax.

        FCF_t = Revenue_t * OperatingMargin_t * (1 - tax) * fcf_conversion

    `base_revenue` defaults to the most recent historical revenue.
    """

    revenue_growth_rates: Tuple[float, ...] = field(default_factory=tuple)
    operating_margins: Tuple[float, ...] = field(default_factory=tuple)
    base_revenue: Optional[float] = None
    fcf_conversion: float = ValuationConfig.FCF_CONVERSION

    def __post_init__(self):
        object.__setattr__(self, "revenue_growth_rates", _as_series(self.revenue_growth_rates))
        object.__setattr__(self, "operating_margins", _as_series(self.operating_margins))
        if not self.revenue_growth_rates or not self.operating_margins:
            raise InvalidAssumptions(
                "Revenue growth rates and operating margins must both be non-empty"
            )

    @property
    def kind(self) -> GrowthSourceType:
        return GrowthSourceType.FROM_ASSUMPTIONS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "revenue_growth_rates": list(self.revenue_growth_rates),
            "operating_margins": list(self.operating_margins),
            "base_revenue": self.base_revenue,
            "fcf_conversion": self.fcf_conversion,
        }


GrowthSource = Union[FromHistory, FromAssumptions]


__all__ = [
    "FinancialProfile",
    "MarketAssumptions",
    "FromHistory",
    "FromAssumptions",
    "GrowthSource",
]
