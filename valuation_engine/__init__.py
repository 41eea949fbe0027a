"""
Valuation Engine - DCF, DDM & Investment Recommendation
=======================================================

Growth Estimation
- Average period-over-period growth of any historical series

Cost of Capital
- Cost of Equity via CAPM
- After-tax Cost of Debt
- Market-value weighted WACC

DCF Valuation
- FCF projection from historical growth or revenue x margin assumptions
- Gordon Growth terminal value
- Equity bridge and fair value per share
- Scenario analysis (Bear, Base, Bull cases)
- Sensitivity analysis (growth vs WACC matrix)

DDM Valuation
- Applicability assessment (dividend history and growth vs cost of equity)
- Gordon Growth intrinsic value per share

Recommendation
- Strong Buy / Buy / Hold / Sell from averaged model upside
- Narrative, key risks and strengths

Ingestion
- Schema-validated CSV and mapping loaders for FinancialProfile

Version: 1.0.0
"""

from .config import (
    LOGGER,
    OUTPUT_DIR,
    PROJECT_ROOT,
    setup_logger,
    ValuationConfig,
    RecommendationConfig,
    ScenarioType,
    GrowthSourceType,
)

from .exceptions import (
    ValuationError,
    InvalidCapitalStructure,
    NonConvergentTerminalValue,
    InsufficientHistory,
    UndefinedUpside,
    InvalidAssumptions,
    ProfileSchemaError,
)

from .models import (
    FinancialProfile,
    MarketAssumptions,
    FromHistory,
    FromAssumptions,
    GrowthSource,
)

from .growth_estimator import GrowthEstimator, average_growth_rate
from .cost_of_capital import CostOfCapital, CostOfCapitalCalculator

from .cash_flow_projector import (
    YearlyProjection,
    TerminalValue,
    CashFlowProjector,
    TerminalValueCalculator,
)

from .dcf_valuator import (
    calculate_upside,
    DCFResult,
    ScenarioValuation,
    SensitivityMatrix,
    DCFEngine,
    value_company_dcf,
)

from .ddm_valuator import DDMResult, DDMEngine, value_company_ddm

from .recommendation import (
    RecommendationType,
    Recommendation,
    RecommendationSynthesizer,
    KEY_RISKS,
    KEY_STRENGTHS,
)

from .valuator import ComprehensiveValuation, ComprehensiveValuator, value_company

from .data_loader import (
    load_profile_csv,
    profile_from_mapping,
    sample_csv,
)


__version__ = "1.0.0"

__all__ = [
    "__version__",

    # Configuration
    "LOGGER",
    "OUTPUT_DIR",
    "PROJECT_ROOT",
    "setup_logger",
    "ValuationConfig",
    "RecommendationConfig",
    "ScenarioType",
    "GrowthSourceType",

    # Exceptions
    "ValuationError",
    "InvalidCapitalStructure",
    "NonConvergentTerminalValue",
    "InsufficientHistory",
    "UndefinedUpside",
    "InvalidAssumptions",
    "ProfileSchemaError",

    # Inputs
    "FinancialProfile",
    "MarketAssumptions",
    "FromHistory",
    "FromAssumptions",
    "GrowthSource",

    # Components
    "GrowthEstimator",
    "average_growth_rate",
    "CostOfCapital",
    "CostOfCapitalCalculator",
    "YearlyProjection",
    "TerminalValue",
    "CashFlowProjector",
    "TerminalValueCalculator",

    # DCF
    "calculate_upside",
    "DCFResult",
    "ScenarioValuation",
    "SensitivityMatrix",
    "DCFEngine",
    "value_company_dcf",

    # DDM
    "DDMResult",
    "DDMEngine",
    "value_company_ddm",

    # Recommendation
    "RecommendationType",
    "Recommendation",
    "RecommendationSynthesizer",
    "KEY_RISKS",
    "KEY_STRENGTHS",

    # Orchestration
    "ComprehensiveValuation",
    "ComprehensiveValuator",
    "value_company",

    # Ingestion
    "load_profile_csv",
    "profile_from_mapping",
    "sample_csv",
]
