from __future__ import annotations

import pytest

from valuation_engine import CostOfCapitalCalculator, InvalidCapitalStructure, MarketAssumptions


def test_debt_free_wacc_equals_cost_of_equity() -> None:
    result = CostOfCapitalCalculator().compute(
        beta=1.2,
        risk_free_rate=0.04,
        equity_risk_premium=0.05,
        total_debt=0,
        interest_expense=0,
        market_capitalization=1000,
        tax_rate=0.21,
    )
    assert result.cost_of_equity == pytest.approx(0.10)
    assert result.wacc == pytest.approx(0.10)
    assert result.cost_of_debt == 0.0
    assert result.debt_weight == 0.0
    assert result.equity_weight == 1.0


def test_levered_wacc() -> None:
    result = CostOfCapitalCalculator().compute(
        beta=1.0,
        risk_free_rate=0.04,
        equity_risk_premium=0.05,
        total_debt=100,
        interest_expense=5,
        market_capitalization=300,
        tax_rate=0.20,
    )
    assert result.cost_of_equity == pytest.approx(0.09)
    assert result.pre_tax_cost_of_debt == pytest.approx(0.05)
    assert result.cost_of_debt == pytest.approx(0.04)
    assert result.equity_weight == pytest.approx(0.75)
    assert result.debt_weight == pytest.approx(0.25)
    assert result.wacc == pytest.approx(0.0775)


def test_non_positive_capital_is_rejected() -> None:
    with pytest.raises(InvalidCapitalStructure) as exc_info:
        CostOfCapitalCalculator().compute(
            beta=1.0,
            risk_free_rate=0.04,
            equity_risk_premium=0.05,
            total_debt=0,
            interest_expense=0,
            market_capitalization=0,
            tax_rate=0.21,
        )
    assert exc_info.value.error_code == "INVALID_CAPITAL_STRUCTURE"


def test_calculate_uses_assumptions_tax_rate(sample_profile, assumptions) -> None:
    result = CostOfCapitalCalculator().calculate(sample_profile, assumptions)
    assert result.tax_rate == assumptions.tax_rate
    assert result.cost_of_equity == pytest.approx(0.045 + 1.2 * 0.055)
    assert result.cost_of_debt == pytest.approx(2000 / 50000 * (1 - 0.21))
    assert 0 < result.wacc < result.cost_of_equity


def test_market_risk_premium_takes_precedence(sample_profile) -> None:
    assumptions = MarketAssumptions(market_return=0.20, market_risk_premium=0.05)
    result = CostOfCapitalCalculator().calculate(sample_profile, assumptions)
    assert result.equity_risk_premium == pytest.approx(0.05)


def test_net_cash_is_treated_as_all_equity() -> None:
    result = CostOfCapitalCalculator().compute(
        beta=1.0,
        risk_free_rate=0.04,
        equity_risk_premium=0.05,
        total_debt=-200,
        interest_expense=0,
        market_capitalization=1000,
        tax_rate=0.21,
    )

    assert result.equity_weight == 1.0
    assert result.debt_weight == 0.0
    assert result.cost_of_debt == 0.0
    assert result.wacc == pytest.approx(0.09)
