#!/usr/bin/env python3
"""
Valuation Engine - DCF, DDM & Recommendation Demo
=================================================

Loads a company profile from a dashboard CSV export and runs the complete
valuation pipeline:

DCF Valuation
- WACC via CAPM and after-tax cost of debt
- 5-year FCF projection (historical growth or revenue x margin assumptions)
- Gordon Growth terminal value
- Fair value per share with market comparison
- Scenario analysis (Bear, Base, Bull cases)
- Sensitivity analysis (growth vs WACC matrix)

DDM Valuation
- Applicability assessment
- Gordon Growth intrinsic value per share

Recommendation
- Strong Buy / Buy / Hold / Sell with narrative, risks and strengths

Usage:
    python run_demo.py company.csv                   # Value a CSV profile
    python run_demo.py company.csv --ticker ACME     # Override ticker
    python run_demo.py --sample                      # Print a sample CSV
    python run_demo.py company.csv --revenue-growth 0.08 0.06 --margins 0.2
    python run_demo.py company.csv --save            # Write JSON report

Version: 1.0.0
"""

import argparse
import math
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from valuation_engine import (
    __version__,
    ComprehensiveValuator,
    ComprehensiveValuation,
    DCFResult,
    DDMResult,
    FromAssumptions,
    FromHistory,
    MarketAssumptions,
    ValuationConfig,
    ValuationError,
    load_profile_csv,
    sample_csv,
)


# =============================================================================
# FORMATTING UTILITIES
# =============================================================================

def format_currency(value, scale=1e6, suffix="M"):
    """Format value as currency with scale."""
    if value is None:
        return "N/A"
    return f"${value/scale:,.2f}{suffix}"


def format_percent(value, decimals=2):
    """Format value as percentage."""
    if value is None:
        return "N/A"
    return f"{value*100:.{decimals}f}%"


def format_price(value):
    if value is None or math.isnan(value):
        return "N/A"
    return f"${value:,.2f}"


def print_line(char="=", length=80):
    """Print separator line."""
    print(char * length)


def print_header(title):
    """Print section header."""
    print()
    print_line("=")
    print(f"  {title}")
    print_line("=")


def print_subheader(title):
    """Print subsection header."""
    print()
    print(f"  {title}")
    print_line("-", 50)


# =============================================================================
# OUTPUT FUNCTIONS
# =============================================================================

def print_banner():
    """Print application banner."""
    print()
    print_line()
    print("  VALUATION ENGINE")
    print("  DCF, DDM & Investment Recommendation")
    print_line()
    print(f"  Version: {__version__}")
    print_line()


def print_assumptions(assumptions: MarketAssumptions):
    print_header("MARKET ASSUMPTIONS")
    print(f"  Risk-Free Rate:           {format_percent(assumptions.risk_free_rate)}")
    print(f"  Expected Market Return:   {format_percent(assumptions.expected_market_return)}")
    print(f"  Equity Risk Premium:      {format_percent(assumptions.equity_risk_premium)}")
    print(f"  Terminal Growth Rate:     {format_percent(assumptions.terminal_growth_rate)}")
    print(f"  Tax Rate:                 {format_percent(assumptions.tax_rate)}")
    print(f"  Forecast Years:           {assumptions.forecast_years}")


def print_wacc_calculation(result: DCFResult):
    """Print WACC calculation details."""
    print_header("WEIGHTED AVERAGE COST OF CAPITAL")

    coc = result.cost_of_capital

    print_subheader("Cost of Equity (CAPM)")
    print(f"  Risk-Free Rate:           {format_percent(coc.risk_free_rate)}")
    print(f"  Beta:                     {coc.beta:.2f}")
    print(f"  Equity Risk Premium:      {format_percent(coc.equity_risk_premium)}")
    print_line("-", 50)
    print(f"  Cost of Equity:           {format_percent(coc.cost_of_equity)}")

    print_subheader("Cost of Debt")
    print(f"  Pre-Tax Cost of Debt:     {format_percent(coc.pre_tax_cost_of_debt)}")
    print(f"  Tax Rate:                 {format_percent(coc.tax_rate)}")
    print(f"  After-Tax Cost of Debt:   {format_percent(coc.cost_of_debt)}")

    print_subheader("Capital Structure")
    print(f"  Equity Weight:            {format_percent(coc.equity_weight)}")
    print(f"  Debt Weight:              {format_percent(coc.debt_weight)}")
    print_line("-", 50)
    print(f"  WACC:                     {format_percent(coc.wacc)}")


def print_dcf_projection(result: DCFResult):
    """Print DCF projection details."""
    print_header(f"DCF PROJECTION ({len(result.projected_free_cash_flows)}-YEAR)")

    print(f"  Growth Source:            {result.growth_source}")
    print(f"  Base FCF:                 {format_currency(result.base_free_cash_flow)}")

    print_subheader("Projected Free Cash Flows")
    print(f"  {'Year':<6} {'FCF':>14} {'Growth':>10} {'Discount':>10} {'PV':>14}")
    print_line("-", 60)

    for yp in result.yearly_projections():
        print(f"  {yp.year:<6} {format_currency(yp.fcf):>14} {format_percent(yp.growth_rate):>10} "
              f"{yp.discount_factor:>10.4f} {format_currency(yp.present_value):>14}")

    print_line("-", 60)
    print(f"  {'Sum PV FCF':<6} {'':<14} {'':<10} {'':<10} {format_currency(result.sum_of_pv_fcf):>14}")

    print_subheader("Terminal Value (Gordon Growth Model)")
    tv = result.terminal
    print(f"  Final Year FCF:           {format_currency(tv.final_year_fcf)}")
    print(f"  Terminal Growth Rate:     {format_percent(tv.terminal_growth_rate)}")
    print(f"  Terminal Year FCF:        {format_currency(tv.terminal_year_fcf)}")
    print(f"  Terminal Value:           {format_currency(tv.terminal_value)}")
    print(f"  Discount Factor:          {tv.discount_factor:.4f}")
    print(f"  PV of Terminal Value:     {format_currency(tv.present_value)}")


def print_valuation_summary(result: DCFResult):
    """Print DCF equity bridge and market comparison."""
    print_header("DCF VALUATION SUMMARY")

    print_subheader("Equity Bridge")
    print(f"  Enterprise Value:         {format_currency(result.enterprise_value)}")
    print(f"  Less: Total Debt:         {format_currency(result.total_debt)}")
    print_line("-", 50)
    print(f"  Equity Value:             {format_currency(result.equity_value)}")
    print(f"  Terminal Value % of EV:   {format_percent(result.terminal_value_share)}")

    print_subheader("Per Share Value")
    print(f"  Shares Outstanding:       {result.shares_outstanding:,.0f}")
    print(f"  Fair Value/Share:         {format_price(result.price_per_share)}")

    print_subheader("Market Comparison")
    if result.upside is not None:
        print(f"  Current Market Price:     {format_price(result.current_price)}")
        print(f"  Upside/(Downside):        {format_percent(result.upside)}")
    else:
        print("  Current price not available")


def print_analysis(valuation: ComprehensiveValuation):
    """Print scenario and sensitivity analysis."""
    if valuation.sensitivity is None or valuation.scenarios is None:
        return

    print_header("SENSITIVITY ANALYSIS")

    matrix = valuation.sensitivity

    print_subheader("Growth Rate vs WACC Sensitivity Matrix")
    print("  Fair Value per Share at various Growth and WACC combinations:")
    print()

    header = "  Growth \\ WACC"
    for wacc in matrix.discount_rates:
        header += f"  {format_percent(wacc):>8}"
    print(header)
    print_line("-", len(header))

    for i, growth in enumerate(matrix.growth_rates):
        row = f"  {format_percent(growth):>12}"
        for j, value in enumerate(matrix.values[i]):
            marker = " *" if (i == matrix.base_growth_idx and j == matrix.base_wacc_idx) else "  "
            cell = "N/A" if math.isnan(value) else f"${value:.0f}"
            row += f"  {cell:>7}{marker}"
        print(row)

    print()
    print("  * = Base case, N/A = WACC at or below terminal growth")

    print_subheader("Scenario Analysis")
    print(f"  {'Scenario':<12} {'Growth':>10} {'EV':>14} {'Value/Shr':>12} {'Upside':>10}")
    print_line("-", 64)

    for scenario in valuation.scenarios:
        print(f"  {scenario.scenario.value.upper():<12} "
              f"{format_percent(scenario.growth_rate):>10} "
              f"{format_currency(scenario.enterprise_value):>14} "
              f"{format_price(scenario.price_per_share):>12} "
              f"{format_percent(scenario.upside):>10}")


def print_ddm_valuation(result: DDMResult):
    """Print DDM valuation or the reason it does not apply."""
    print_header("DDM VALUATION")

    if not result.applicable:
        print(f"  Not applicable: {result.reason}")
        return

    print(f"  Years of Dividends:       {result.years_of_dividends}")
    print(f"  Current Dividend (D0):    {format_price(result.current_dividend)}")
    print(f"  Dividend Growth:          {format_percent(result.average_dividend_growth)}")
    print(f"  Next Year Dividend (D1):  {format_price(result.next_year_dividend)}")
    print(f"  Cost of Equity:           {format_percent(result.cost_of_equity)}")
    print_line("-", 50)
    print(f"  Intrinsic Value/Share:    {format_price(result.intrinsic_value)}")
    if result.upside is not None:
        print(f"  Upside/(Downside):        {format_percent(result.upside)}")


def print_recommendation(valuation: ComprehensiveValuation):
    print_header("INVESTMENT RECOMMENDATION")

    rec = valuation.recommendation
    if rec is None:
        print("  No recommendation: upside is undefined without a current price")
        return

    print(f"  Rating:                   {rec.rating.to_display().upper()}")
    print(f"  Average Upside:           {format_percent(rec.average_upside)}")
    print(f"  Models Used:              {', '.join(rec.models_used)}")
    print()
    print(f"  {rec.narrative}")

    print_subheader("Key Risks")
    for risk in rec.key_risks:
        print(f"  - {risk}")

    print_subheader("Key Strengths")
    for strength in rec.key_strengths:
        print(f"  + {strength}")


def print_valuation(valuation: ComprehensiveValuation, quiet: bool = False):
    if not quiet:
        print_assumptions(valuation.assumptions)
        print_wacc_calculation(valuation.dcf)
        print_dcf_projection(valuation.dcf)
    print_valuation_summary(valuation.dcf)
    if not quiet:
        print_analysis(valuation)
    print_ddm_valuation(valuation.ddm)
    print_recommendation(valuation)


# =============================================================================
# MAIN FUNCTION
# =============================================================================

def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Valuation Engine - DCF, DDM & Recommendation"
    )
    parser.add_argument(
        "csv_path",
        nargs="?",
        help="Financial profile CSV (metric,year1,...,yearN)"
    )
    parser.add_argument(
        "--ticker",
        type=str,
        default=None,
        help="Ticker symbol (default: CSV file name)"
    )
    parser.add_argument(
        "--sample",
        action="store_true",
        help="Print a sample CSV and exit"
    )
    parser.add_argument(
        "--oldest-first",
        action="store_true",
        help="CSV year columns run oldest to newest (default: newest first)"
    )
    parser.add_argument(
        "--risk-free-rate",
        type=float,
        default=ValuationConfig.RISK_FREE_RATE,
        help="Risk-free rate as a decimal (default: 0.045)"
    )
    parser.add_argument(
        "--market-return",
        type=float,
        default=ValuationConfig.MARKET_RETURN,
        help="Expected market return as a decimal (default: 0.10)"
    )
    parser.add_argument(
        "--terminal-growth",
        type=float,
        default=ValuationConfig.TERMINAL_GROWTH_RATE,
        help="Terminal growth rate as a decimal (default: 0.025)"
    )
    parser.add_argument(
        "--tax-rate",
        type=float,
        default=ValuationConfig.TAX_RATE,
        help="Tax rate as a decimal (default: 0.21)"
    )
    parser.add_argument(
        "--years",
        type=int,
        default=ValuationConfig.FORECAST_YEARS,
        help="Forecast horizon in years (default: 5)"
    )
    parser.add_argument(
        "--revenue-growth",
        type=float,
        nargs="+",
        default=None,
        help="Per-year revenue growth rates; switches DCF to revenue x margin projection"
    )
    parser.add_argument(
        "--margins",
        type=float,
        nargs="+",
        default=None,
        help="Per-year operating margins (used with --revenue-growth)"
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Save the JSON valuation report to the outputs directory"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress detailed output"
    )

    args = parser.parse_args()

    if args.sample:
        print(sample_csv(), end="")
        return 0

    if not args.csv_path:
        parser.error("csv_path is required unless --sample is given")

    print_banner()

    try:
        profile = load_profile_csv(
            args.csv_path,
            ticker=args.ticker,
            newest_first=not args.oldest_first,
        )
        assumptions = MarketAssumptions(
            risk_free_rate=args.risk_free_rate,
            market_return=args.market_return,
            terminal_growth_rate=args.terminal_growth,
            tax_rate=args.tax_rate,
            forecast_years=args.years,
        )
        if args.revenue_growth:
            growth_source = FromAssumptions(
                revenue_growth_rates=args.revenue_growth,
                operating_margins=args.margins or [],
            )
        else:
            growth_source = FromHistory()

        print(f"\nValuing {profile.ticker}...\n")

        valuator = ComprehensiveValuator()
        valuation = valuator.value(profile, assumptions, growth_source)
    except ValuationError as e:
        print(f"\nError [{e.error_code}]: {e.message}")
        sys.exit(1)

    print_valuation(valuation, quiet=args.quiet)

    if args.save:
        output_path = valuator.save_report(valuation)
        print(f"\n  Report saved to: {output_path}")

    print()
    print_line()
    print(f"  Valuation Complete for {valuation.ticker}")
    print(f"  Fair Value/Share: {format_price(valuation.dcf.price_per_share)}")
    if valuation.recommendation:
        print(f"  Recommendation: {valuation.recommendation.rating.to_display()}")
    print_line()
    print()

    return 0


if __name__ == "__main__":
    sys.exit(main())
