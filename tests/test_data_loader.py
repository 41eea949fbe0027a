from __future__ import annotations

import pytest

from valuation_engine import ProfileSchemaError, load_profile_csv, profile_from_mapping, sample_csv
from valuation_engine.data_loader import normalize_metric_name


@pytest.fixture
def sample_path(tmp_path):
    path = tmp_path / "acme.csv"
    path.write_text(sample_csv(), encoding="utf-8")
    return path


def test_sample_csv_is_reordered_oldest_first(sample_path) -> None:
    profile = load_profile_csv(sample_path)

    assert profile.ticker == "ACME"
    assert profile.revenue == (80000, 85000, 90000, 95000, 100000)
    assert profile.dividends_per_share == pytest.approx((2.10, 2.20, 2.30, 2.40, 2.50))
    assert profile.capital_expenditure == (-1600, -1700, -1800, -1900, -2000)
    assert profile.market_capitalization == 500000
    assert profile.shares_outstanding == 10000
    assert profile.beta == pytest.approx(1.2)
    assert profile.current_price == pytest.approx(50.0)


def test_oldest_first_layout_is_kept(sample_path) -> None:
    profile = load_profile_csv(sample_path, ticker="xyz", newest_first=False)

    assert profile.ticker == "XYZ"
    assert profile.revenue[0] == 100000
    assert profile.dividends_per_share[0] == pytest.approx(2.50)


def test_aliases_and_defaults() -> None:
    profile = profile_from_mapping(
        {
            "Total Revenue": [300, 200, 100],
            "Operating Cash Flow": [60, 50, 40],
            "capital_expenditures": [6, 5, 4],
            "Market Cap": 1000,
            "Shares Outstanding": 10,
        },
        ticker="alias",
    )

    assert profile.revenue == (100, 200, 300)
    assert profile.cash_from_operations == (40, 50, 60)
    assert profile.capital_expenditure == (-4, -5, -6)
    assert profile.beta == 1.0
    assert profile.total_debt == 0.0
    assert profile.current_price == pytest.approx(100.0)


def test_ticker_from_mapping() -> None:
    profile = profile_from_mapping(
        {"ticker": "abc", "marketCap": 100, "sharesOutstanding": 1}
    )
    assert profile.ticker == "ABC"


def test_unknown_metrics_are_ignored() -> None:
    profile = profile_from_mapping(
        {"marketCap": 100, "sharesOutstanding": 1, "employeeCount": 42}, ticker="T"
    )
    assert profile.market_capitalization == 100


def test_missing_required_scalar(tmp_path) -> None:
    path = tmp_path / "broken.csv"
    path.write_text("metric,year1,year2\nrevenue,200,100\nsharesOutstanding,10\n", encoding="utf-8")

    with pytest.raises(ProfileSchemaError) as exc_info:
        load_profile_csv(path)
    assert exc_info.value.details == {"missing": ["market_capitalization"]}


def test_non_numeric_value_is_rejected() -> None:
    with pytest.raises(ProfileSchemaError):
        profile_from_mapping(
            {"revenue": [100, "n/a"], "marketCap": 100, "sharesOutstanding": 1}, ticker="T"
        )


def test_non_positive_share_count_is_rejected() -> None:
    with pytest.raises(ProfileSchemaError):
        profile_from_mapping({"marketCap": 100, "sharesOutstanding": 0}, ticker="T")


def test_duplicate_metrics_are_rejected(tmp_path) -> None:
    path = tmp_path / "dupes.csv"
    path.write_text(
        "metric,year1\nmarketCap,100\nmarketCap,200\nsharesOutstanding,1\n", encoding="utf-8"
    )
    with pytest.raises(ProfileSchemaError):
        load_profile_csv(path)


def test_normalize_metric_name() -> None:
    assert normalize_metric_name("cashFromOps") == "cashfromops"
    assert normalize_metric_name("Cash From Ops") == "cashfromops"
    assert normalize_metric_name("cash_from_ops") == "cashfromops"


def test_blank_newest_year_is_rejected(tmp_path) -> None:
    path = tmp_path / "gap.csv"
    path.write_text(
        "metric,year1,year2,year3\n"
        "cashFromOps,,170,160\n"
        "capex,-20,-19,-18\n"
        "marketCap,1000\n"
        "sharesOutstanding,10\n",
        encoding="utf-8",
    )

    with pytest.raises(ProfileSchemaError) as exc_info:
        load_profile_csv(path)
    assert exc_info.value.details["metric"] == "cashFromOps"


def test_interior_blank_is_rejected() -> None:
    with pytest.raises(ProfileSchemaError):
        profile_from_mapping(
            {"revenue": [300, None, 100], "marketCap": 100, "sharesOutstanding": 1}, ticker="T"
        )


def test_shorter_series_keeps_fiscal_years_aligned(tmp_path) -> None:
    path = tmp_path / "short.csv"
    path.write_text(
        "metric,year1,year2,year3\n"
        "cashFromOps,180,170,\n"
        "capex,-20,-19,-18\n"
        "marketCap,1000\n"
        "sharesOutstanding,10\n",
        encoding="utf-8",
    )

    profile = load_profile_csv(path)

    assert profile.cash_from_operations == (170, 180)
    assert profile.historical_free_cash_flow() == (151, 160)
