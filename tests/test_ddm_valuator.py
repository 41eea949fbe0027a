from __future__ import annotations

import pytest

from valuation_engine import DDMEngine, FinancialProfile, MarketAssumptions, value_company_ddm


def _dividend_payer(dividends, **overrides) -> FinancialProfile:
    fields = dict(
        ticker="DIV",
        dividends_per_share=dividends,
        beta=1.0,
        market_capitalization=1000,
        shares_outstanding=10,
        current_price=50.0,
    )
    fields.update(overrides)
    return FinancialProfile(**fields)


def test_non_payer_is_not_applicable(assumptions) -> None:
    result = DDMEngine().value(_dividend_payer([0, 0, 0, 0, 0]), assumptions)

    assert result.applicable is False
    assert result.reason == "Company does not pay dividends"
    assert result.intrinsic_value is None


def test_short_history_is_not_applicable(assumptions) -> None:
    result = DDMEngine().value(_dividend_payer([2.0, 2.1]), assumptions)

    assert result.applicable is False
    assert "Insufficient dividend history" in result.reason


def test_growing_dividends_are_valued(sample_profile, assumptions) -> None:
    result = value_company_ddm(sample_profile, assumptions)

    rates = [0.10 / 2.10, 0.10 / 2.20, 0.10 / 2.30, 0.10 / 2.40]
    growth = sum(rates) / len(rates)
    ke = 0.045 + 1.2 * 0.055

    assert result.applicable is True
    assert result.reason is None
    assert result.average_dividend_growth == pytest.approx(growth)
    assert result.cost_of_equity == pytest.approx(ke)
    assert result.next_year_dividend == pytest.approx(2.50 * (1 + growth))
    assert result.intrinsic_value == pytest.approx(2.50 * (1 + growth) / (ke - growth))
    assert result.upside == pytest.approx((result.intrinsic_value - 50.0) / 50.0)


def test_growth_above_cost_of_equity_is_not_applicable(assumptions) -> None:
    result = DDMEngine().value(_dividend_payer([1.0, 2.0, 4.0]), assumptions)

    assert result.applicable is False
    assert "exceeds cost of equity" in result.reason
    assert result.average_dividend_growth == pytest.approx(1.0)


def test_flat_dividends() -> None:
    assumptions = MarketAssumptions(risk_free_rate=0.04, market_return=0.09)
    result = DDMEngine().value(_dividend_payer([1.0, 1.0, 1.0]), assumptions)

    assert result.applicable is True
    assert result.intrinsic_value == pytest.approx(1.0 / 0.09)


def test_missing_price_leaves_upside_undefined(assumptions) -> None:
    result = DDMEngine().value(_dividend_payer([1.0, 1.0, 1.0], current_price=0.0), assumptions)

    assert result.applicable is True
    assert result.upside is None


def test_empty_dividend_history_is_not_applicable(assumptions) -> None:
    result = DDMEngine().value(_dividend_payer([]), assumptions)

    assert result.applicable is False
    assert result.reason == "Company does not pay dividends"
    assert result.years_of_dividends == 0
