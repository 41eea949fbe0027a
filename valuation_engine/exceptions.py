"""
Valuation Exception Classes

Typed failures raised by the valuation engine. Each carries a stable
error code and a details mapping so callers can report the kind and
reason of a failed valuation.
"""

from __future__ import annotations

from typing import Optional, Dict, Any


class ValuationError(Exception):
    """Base exception class for all valuation errors."""

    error_code_default = "VALUATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code or self.error_code_default
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidCapitalStructure(ValuationError):
    """Raised when total capital or share count cannot support a valuation."""

    error_code_default = "INVALID_CAPITAL_STRUCTURE"


class NonConvergentTerminalValue(ValuationError):
    """Raised when the perpetuity growth rate is not below the discount rate."""

    error_code_default = "NON_CONVERGENT_TERMINAL_VALUE"

    def __init__(self, discount_rate: float, growth_rate: float):
        message = (
            f"Discount rate ({discount_rate:.2%}) must exceed terminal growth "
            f"({growth_rate:.2%})"
        )
        super().__init__(
            message=message,
            details={"discount_rate": discount_rate, "growth_rate": growth_rate},
        )


class InsufficientHistory(ValuationError):
    """Raised when a series is too short to infer growth and no assumptions are given."""

    error_code_default = "INSUFFICIENT_HISTORY"

    def __init__(self, series: str, available: int, required: int):
        message = (
            f"Insufficient {series} history: {available} data points "
            f"(minimum {required})"
        )
        super().__init__(
            message=message,
            details={"series": series, "available": available, "required": required},
        )


class UndefinedUpside(ValuationError):
    """Raised when upside is requested against a zero or unknown price."""

    error_code_default = "DIVISION_BY_ZERO"


class InvalidAssumptions(ValuationError):
    """Raised when market assumptions are out of range or incomplete."""

    error_code_default = "INVALID_ASSUMPTIONS"


class ProfileSchemaError(ValuationError):
    """Raised when ingested financial data does not match the profile schema."""

    error_code_default = "PROFILE_SCHEMA_ERROR"


__all__ = [
    "ValuationError",
    "InvalidCapitalStructure",
    "NonConvergentTerminalValue",
    "InsufficientHistory",
    "UndefinedUpside",
    "InvalidAssumptions",
    "ProfileSchemaError",
]
