"""Shared pytest fixtures: sample company profiles and market assumptions."""

from __future__ import annotations

import pytest

from valuation_engine import FinancialProfile, MarketAssumptions


@pytest.fixture
def sample_profile() -> FinancialProfile:
    """The dashboard sample company, series oldest-first."""
    return FinancialProfile(
        ticker="acme",
        revenue=[80000, 85000, 90000, 95000, 100000],
        net_income=[11000, 12000, 13000, 14000, 15000],
        operating_income=[16000, 17000, 18000, 19000, 20000],
        cash_from_operations=[14000, 15000, 16000, 17000, 18000],
        capital_expenditure=[-1600, -1700, -1800, -1900, -2000],
        dividends_per_share=[2.10, 2.20, 2.30, 2.40, 2.50],
        beta=1.2,
        total_debt=50000,
        interest_expense=2000,
        market_capitalization=500000,
        shares_outstanding=10000,
        current_price=50.0,
    )


@pytest.fixture
def debt_free_profile() -> FinancialProfile:
    """No debt and no dividends, so WACC equals the cost of equity."""
    return FinancialProfile(
        ticker="NODEBT",
        revenue=[1000, 1100, 1210],
        cash_from_operations=[200, 220, 242],
        capital_expenditure=[-100, -110, -121],
        beta=1.0,
        market_capitalization=10000,
        shares_outstanding=100,
        current_price=100.0,
    )


@pytest.fixture
def assumptions() -> MarketAssumptions:
    return MarketAssumptions()


@pytest.fixture
def simple_assumptions() -> MarketAssumptions:
    """Rf 4%, market 9%: ERP 5%."""
    return MarketAssumptions(
        risk_free_rate=0.04,
        market_return=0.09,
        terminal_growth_rate=0.025,
        tax_rate=0.21,
        forecast_years=5,
    )
