from __future__ import annotations

import math

import pytest

from valuation_engine import (
    DCFEngine,
    FinancialProfile,
    FromAssumptions,
    InsufficientHistory,
    InvalidAssumptions,
    InvalidCapitalStructure,
    MarketAssumptions,
    NonConvergentTerminalValue,
    ScenarioType,
    UndefinedUpside,
    calculate_upside,
    value_company_dcf,
)


def test_sample_company_has_finite_fair_value(sample_profile, assumptions) -> None:
    result = DCFEngine().value(sample_profile, assumptions)

    assert math.isfinite(result.price_per_share)
    assert result.price_per_share > 0
    assert len(result.projected_free_cash_flows) == assumptions.forecast_years
    assert result.base_free_cash_flow == pytest.approx(16000)
    assert result.growth_source == "from_history"


def test_equity_bridge(sample_profile, assumptions) -> None:
    result = DCFEngine().value(sample_profile, assumptions)

    assert result.enterprise_value == pytest.approx(
        sum(result.present_values) + result.terminal_present_value
    )
    assert result.equity_value == pytest.approx(result.enterprise_value - 50000)
    assert result.price_per_share == pytest.approx(result.equity_value / 10000)
    assert result.upside == pytest.approx((result.price_per_share - 50.0) / 50.0)


def test_valuation_is_idempotent(sample_profile, assumptions) -> None:
    engine = DCFEngine()
    assert engine.value(sample_profile, assumptions) == engine.value(sample_profile, assumptions)


def test_debt_free_discounting_uses_cost_of_equity(debt_free_profile, simple_assumptions) -> None:
    result = DCFEngine().value(debt_free_profile, simple_assumptions)

    assert result.wacc == pytest.approx(0.09)
    assert result.growth_rates == pytest.approx((0.10,) * 5)
    assert result.projected_free_cash_flows[0] == pytest.approx(121 * 1.1)


def test_single_year_history_is_insufficient(assumptions) -> None:
    profile = FinancialProfile(
        ticker="NEW",
        cash_from_operations=[100],
        capital_expenditure=[-10],
        market_capitalization=1000,
        shares_outstanding=10,
        current_price=100,
    )
    with pytest.raises(InsufficientHistory) as exc_info:
        DCFEngine().value(profile, assumptions)
    assert exc_info.value.details["available"] == 1


def test_assumptions_mode_projects_from_revenue(sample_profile, assumptions) -> None:
    source = FromAssumptions(revenue_growth_rates=[0.10], operating_margins=[0.20])
    result = DCFEngine().value(sample_profile, assumptions, source)

    expected_first = 100000 * 1.10 * 0.20 * (1 - 0.21) * 0.85
    assert result.growth_source == "from_assumptions"
    assert result.growth_rates == pytest.approx((0.10,) * 5)
    assert result.projected_free_cash_flows[0] == pytest.approx(expected_first)
    assert result.projected_free_cash_flows[-1] == pytest.approx(expected_first * 1.1 ** 4)


def test_assumptions_mode_without_history(assumptions) -> None:
    profile = FinancialProfile(
        ticker="PRE",
        market_capitalization=1000,
        shares_outstanding=10,
        current_price=100,
    )
    with pytest.raises(InsufficientHistory):
        DCFEngine().value(profile, assumptions, FromAssumptions([0.05], [0.10]))

    result = DCFEngine().value(
        profile, assumptions, FromAssumptions([0.05], [0.10], base_revenue=5000)
    )
    assert math.isfinite(result.price_per_share)


def test_empty_assumption_sequences_are_invalid() -> None:
    with pytest.raises(InvalidAssumptions):
        FromAssumptions(revenue_growth_rates=[], operating_margins=[0.2])


def test_non_positive_shares_are_rejected(sample_profile, assumptions) -> None:
    profile = FinancialProfile(**{**sample_profile.to_dict(), "shares_outstanding": 0})
    with pytest.raises(InvalidCapitalStructure):
        DCFEngine().value(profile, assumptions)


def test_terminal_growth_above_wacc_is_rejected(sample_profile) -> None:
    assumptions = MarketAssumptions(terminal_growth_rate=0.20)
    with pytest.raises(NonConvergentTerminalValue):
        DCFEngine().value(sample_profile, assumptions)


def test_missing_current_price_leaves_upside_undefined(sample_profile, assumptions) -> None:
    profile = FinancialProfile(**{**sample_profile.to_dict(), "current_price": 0.0})
    result = value_company_dcf(profile, assumptions)

    assert result.upside is None
    assert math.isfinite(result.price_per_share)


def test_calculate_upside() -> None:
    assert calculate_upside(60.0, 50.0) == pytest.approx(0.20)
    with pytest.raises(UndefinedUpside) as exc_info:
        calculate_upside(60.0, 0.0)
    assert exc_info.value.error_code == "DIVISION_BY_ZERO"


def test_scenarios_are_ordered(sample_profile, assumptions) -> None:
    scenarios = DCFEngine().run_scenarios(sample_profile, assumptions)

    assert [s.scenario for s in scenarios] == [ScenarioType.BEAR, ScenarioType.BASE, ScenarioType.BULL]
    assert [s.growth_rate for s in scenarios] == [0.01, 0.03, 0.05]
    bear, base, bull = (s.price_per_share for s in scenarios)
    assert bear < base < bull


def test_sensitivity_grid(sample_profile, assumptions) -> None:
    matrix = DCFEngine().sensitivity(sample_profile, assumptions)
    frame = matrix.to_frame()

    assert frame.shape == (5, 5)
    assert not frame.isna().any().any()
    base = DCFEngine().value(sample_profile, assumptions)
    assert matrix.values[matrix.base_growth_idx][matrix.base_wacc_idx] == pytest.approx(
        base.price_per_share
    )


def test_sensitivity_marks_non_convergent_cells(debt_free_profile) -> None:
    assumptions = MarketAssumptions(
        risk_free_rate=0.04, market_return=0.09, terminal_growth_rate=0.075
    )
    matrix = DCFEngine().sensitivity(debt_free_profile, assumptions)

    # discount rates 7%..11% around a 9% WACC; 7% does not exceed 7.5%
    assert all(math.isnan(row[0]) for row in matrix.values)
    assert all(math.isfinite(v) for row in matrix.values for v in row[1:])
    assert matrix.to_dict()["values"][0][0] is None


def test_to_frame_has_one_row_per_year(sample_profile, assumptions) -> None:
    frame = DCFEngine().value(sample_profile, assumptions).to_frame()
    assert list(frame.index) == [1, 2, 3, 4, 5]
    assert frame["present_value"].sum() == pytest.approx(
        DCFEngine().value(sample_profile, assumptions).sum_of_pv_fcf
    )


@pytest.mark.parametrize("current_price", [float("nan"), float("inf"), None])
def test_non_finite_price_leaves_upside_undefined(current_price) -> None:
    with pytest.raises(UndefinedUpside):
        calculate_upside(60.0, current_price)


def test_sensitivity_centres_on_assumptions_projection(sample_profile, assumptions) -> None:
    source = FromAssumptions(revenue_growth_rates=[0.08, 0.06], operating_margins=[0.25])
    engine = DCFEngine()
    headline = engine.value(sample_profile, assumptions, source)

    matrix = engine.sensitivity(sample_profile, assumptions, source)

    assert matrix.values[matrix.base_growth_idx][matrix.base_wacc_idx] == pytest.approx(
        headline.price_per_share
    )
    assert matrix.growth_rates == pytest.approx((0.06, 0.07, 0.08, 0.09, 0.10))
    prices = [row[matrix.base_wacc_idx] for row in matrix.values]
    assert prices == sorted(prices)


def test_scenarios_start_from_assumptions_base_fcf(sample_profile, assumptions) -> None:
    source = FromAssumptions(revenue_growth_rates=[0.08], operating_margins=[0.25])
    engine = DCFEngine()
    headline = engine.value(sample_profile, assumptions, source)

    scenarios = engine.run_scenarios(sample_profile, assumptions, source)

    base_case = scenarios[1]
    expected = engine.projector.project(
        headline.base_free_cash_flow, base_case.growth_rate, assumptions.forecast_years
    )
    expected_ev = sum(engine.projector.discount(expected, headline.wacc)) + (
        engine.terminal_calculator.calculate(
            expected[-1], assumptions.terminal_growth_rate, headline.wacc,
            assumptions.forecast_years,
        ).present_value
    )
    assert base_case.enterprise_value == pytest.approx(expected_ev)
