"""
Profile Loader - Ingestion Boundary
===================================

Turns loosely-typed financial data (dashboard CSV exports or plain
mappings) into a validated FinancialProfile.

CSV layout (one metric per row, most recent year first):

    metric,year1,year2,year3,year4,year5
    revenue,100000,95000,90000,85000,80000
    ...
    marketCap,500000

Metric names are matched against an explicit field map of accepted aliases;
unknown metrics are logged and ignored. Series are reordered oldest-first
before they reach the engine. Capital expenditure is normalized to a
negative outflow.
"""

from __future__ import annotations

import re
import numpy as np
import pandas as pd
from pathlib import Path
from typing import Dict, List, Optional, Any, Mapping, Union

from .config import LOGGER, ValuationConfig
from .exceptions import ProfileSchemaError
from .models import FinancialProfile


# =============================================================================
# FIELD MAPPINGS
# =============================================================================

# Historical series: normalized alias -> profile field
SERIES_FIELD_MAP: Dict[str, str] = {
    "revenue": "revenue",
    "totalrevenue": "revenue",
    "netincome": "net_income",
    "operatingincome": "operating_income",
    "cashfromops": "cash_from_operations",
    "cashfromoperations": "cash_from_operations",
    "operatingcashflow": "cash_from_operations",
    "capex": "capital_expenditure",
    "capitalexpenditure": "capital_expenditure",
    "capitalexpenditures": "capital_expenditure",
    "dividends": "dividends_per_share",
    "dividendspershare": "dividends_per_share",
    "dps": "dividends_per_share",
}

# Snapshot values: normalized alias -> profile field
SCALAR_FIELD_MAP: Dict[str, str] = {
    "beta": "beta",
    "totaldebt": "total_debt",
    "interestexpense": "interest_expense",
    "marketcap": "market_capitalization",
    "marketcapitalization": "market_capitalization",
    "sharesoutstanding": "shares_outstanding",
    "currentprice": "current_price",
    "price": "current_price",
    "taxrate": "tax_rate",
}

REQUIRED_SCALARS = ("market_capitalization", "shares_outstanding")

SCALAR_DEFAULTS: Dict[str, float] = {
    "beta": 1.0,
    "total_debt": 0.0,
    "interest_expense": 0.0,
    "tax_rate": ValuationConfig.TAX_RATE,
}

SAMPLE_CSV_ROWS: List[str] = [
    "metric,year1,year2,year3,year4,year5",
    "revenue,100000,95000,90000,85000,80000",
    "netIncome,15000,14000,13000,12000,11000",
    "operatingIncome,20000,19000,18000,17000,16000",
    "cashFromOps,18000,17000,16000,15000,14000",
    "capex,-2000,-1900,-1800,-1700,-1600",
    "dividends,2.50,2.40,2.30,2.20,2.10",
    "marketCap,500000",
    "beta,1.2",
    "totalDebt,50000",
    "interestExpense,2000",
    "sharesOutstanding,10000",
    "currentPrice,50.00",
]


def normalize_metric_name(name: str) -> str:
    """'cashFromOps', 'Cash From Ops' and 'cash_from_ops' all map to 'cashfromops'."""
    return re.sub(r"[^a-z0-9]", "", str(name).lower())


def sample_csv() -> str:
    """Sample dashboard CSV, most recent year first."""
    return "\n".join(SAMPLE_CSV_ROWS) + "\n"


# =============================================================================
# VALIDATION
# =============================================================================

def _to_numbers(metric: str, values: Any) -> List[Optional[float]]:
    """Coerce a scalar or sequence to floats, keeping blanks in place as None."""
    if isinstance(values, (str, int, float)) or values is None:
        values = [values]
    numbers = []
    for raw in values:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            numbers.append(None)
            continue
        if isinstance(raw, float) and np.isnan(raw):
            numbers.append(None)
            continue
        try:
            numbers.append(float(raw))
        except (TypeError, ValueError):
            raise ProfileSchemaError(
                f"Non-numeric value {raw!r} for metric '{metric}'",
                details={"metric": metric, "value": raw},
            )
    return numbers


def _to_series(metric: str, values: Any, newest_first: bool) -> List[float]:
    """
    Oldest-first series with fiscal years kept in position.

    Blanks at the oldest end mean the series starts later and are dropped;
    a blank anywhere else would shift years out of line and is rejected.
    """
    series = _to_numbers(metric, values)
    if newest_first:
        series = series[::-1]
    while series and series[0] is None:
        series.pop(0)
    gaps = [i for i, v in enumerate(series) if v is None]
    if gaps:
        raise ProfileSchemaError(
            f"Missing value for metric '{metric}' inside its history",
            details={"metric": metric, "missing_positions_oldest_first": gaps},
        )
    return series


def profile_from_mapping(
    data: Mapping[str, Any],
    ticker: Optional[str] = None,
    newest_first: bool = True,
) -> FinancialProfile:
    """
    Validate a metric mapping and build a FinancialProfile.

    Args:
        data: Metric name -> value or sequence of values
        ticker: Ticker symbol (falls back to a 'ticker' entry in `data`)
        newest_first: Whether series in `data` list the most recent year first

    Returns:
        FinancialProfile with oldest-first series

    Raises:
        ProfileSchemaError: missing ticker or required scalars, gaps inside a
            series, or non-numeric values
    """
    data = dict(data)
    if ticker is None:
        raw_ticker = data.pop("ticker", None)
        ticker = str(raw_ticker).strip() if raw_ticker is not None else ""
    else:
        data.pop("ticker", None)
    if not ticker:
        raise ProfileSchemaError("A ticker is required to build a profile")

    fields: Dict[str, Any] = {}
    for metric, values in data.items():
        key = normalize_metric_name(metric)
        if key in SERIES_FIELD_MAP:
            name = SERIES_FIELD_MAP[key]
            series = _to_series(metric, values, newest_first)
            if name == "capital_expenditure":
                series = [-abs(v) for v in series]
            fields[name] = series
        elif key in SCALAR_FIELD_MAP:
            name = SCALAR_FIELD_MAP[key]
            numbers = [v for v in _to_numbers(metric, values) if v is not None]
            if numbers:
                fields[name] = numbers[0]
        else:
            LOGGER.warning(f"  Ignoring unknown metric '{metric}'")

    missing = [name for name in REQUIRED_SCALARS if name not in fields]
    if missing:
        raise ProfileSchemaError(
            f"Missing required fields: {', '.join(missing)}",
            details={"missing": missing},
        )
    if fields["shares_outstanding"] <= 0:
        raise ProfileSchemaError(
            "shares_outstanding must be positive",
            details={"shares_outstanding": fields["shares_outstanding"]},
        )

    for name, default in SCALAR_DEFAULTS.items():
        if name not in fields:
            LOGGER.info(f"  {ticker.upper()}: {name} not supplied, using {default}")
            fields[name] = default

    if "current_price" not in fields:
        fields["current_price"] = fields["market_capitalization"] / fields["shares_outstanding"]
        LOGGER.info(
            f"  {ticker.upper()}: current price derived from market cap: "
            f"${fields['current_price']:.2f}"
        )

    return FinancialProfile(ticker=ticker, **fields)


def load_profile_csv(
    path: Union[str, Path],
    ticker: Optional[str] = None,
    newest_first: bool = True,
) -> FinancialProfile:
    """
    Load a FinancialProfile from a dashboard CSV export.

    Args:
        path: CSV file path
        ticker: Ticker symbol (defaults to the file stem)
        newest_first: Whether year columns run from most recent to oldest

    Returns:
        Validated FinancialProfile
    """
    path = Path(path)
    LOGGER.info(f"Loading financial profile from {path}")

    frame = pd.read_csv(path, index_col=0, dtype=str, skipinitialspace=True)
    if frame.index.has_duplicates:
        duplicates = sorted(set(frame.index[frame.index.duplicated()]))
        raise ProfileSchemaError(
            f"Duplicate metrics in {path.name}: {', '.join(duplicates)}",
            details={"duplicates": duplicates},
        )

    # Blank cells stay in their year column; series validation decides
    data = {
        str(metric): row.tolist()
        for metric, row in frame.iterrows()
    }
    return profile_from_mapping(data, ticker=ticker or path.stem, newest_first=newest_first)


__all__ = [
    "SERIES_FIELD_MAP",
    "SCALAR_FIELD_MAP",
    "REQUIRED_SCALARS",
    "normalize_metric_name",
    "sample_csv",
    "profile_from_mapping",
    "load_profile_csv",
]
