"""
Recommendation Synthesizer
==========================

Combines DCF and DDM outputs into a rating, a short narrative and lists of
key risks and strengths.

    upside = mean(DCF upside, DDM upside)   when DDM is applicable
    upside = DCF upside                     otherwise

    upside >  15%  -> Strong Buy
    upside >   5%  -> Buy
    upside >  -5%  -> Hold
    otherwise      -> Sell

Deterministic; no external calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Tuple
from enum import Enum

from .config import RecommendationConfig
from .dcf_valuator import DCFResult
from .ddm_valuator import DDMResult
from .exceptions import UndefinedUpside


# =============================================================================
# ENUMERATIONS
# =============================================================================

class RecommendationType(Enum):
    STRONG_BUY = "strong_buy"
    BUY = "buy"
    HOLD = "hold"
    SELL = "sell"

    @classmethod
    def from_upside(cls, upside: float) -> "RecommendationType":
        if upside > RecommendationConfig.STRONG_BUY_THRESHOLD:
            return cls.STRONG_BUY
        elif upside > RecommendationConfig.BUY_THRESHOLD:
            return cls.BUY
        elif upside > RecommendationConfig.HOLD_THRESHOLD:
            return cls.HOLD
        return cls.SELL

    def to_display(self) -> str:
        return self.value.replace("_", " ").title()


KEY_RISKS: Tuple[str, ...] = (
    "Market volatility and economic headwinds",
    "Interest rate sensitivity affecting discount rates",
    "Competitive pressure in core markets",
)

KEY_STRENGTHS: Tuple[str, ...] = (
    "Strong cash flow generation capability",
    "Established market position",
    "Professional financial modeling approach",
)


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass(frozen=True)
class Recommendation:
    rating: RecommendationType
    average_upside: float
    narrative: str
    models_used: Tuple[str, ...] = ()
    key_risks: Tuple[str, ...] = field(default_factory=tuple)
    key_strengths: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rating": self.rating.value,
            "rating_display": self.rating.to_display(),
            "average_upside": self.average_upside,
            "narrative": self.narrative,
            "models_used": list(self.models_used),
            "key_risks": list(self.key_risks),
            "key_strengths": list(self.key_strengths),
        }


# =============================================================================
# SYNTHESIZER
# =============================================================================

def _direction(upside: float) -> str:
    return "upside" if upside > 0 else "downside"


class RecommendationSynthesizer:
    """Pure mapping from valuation results to a recommendation."""

    def average_upside(self, dcf: DCFResult, ddm: Optional[DDMResult]) -> Tuple[float, List[str]]:
        if dcf.upside is None:
            raise UndefinedUpside(
                f"Cannot rate {dcf.ticker}: DCF upside is undefined",
                details={"current_price": dcf.current_price},
            )
        if ddm is not None and ddm.applicable and ddm.upside is not None:
            return (dcf.upside + ddm.upside) / 2, ["DCF", "DDM"]
        return dcf.upside, ["DCF"]

    def synthesize(self, dcf: DCFResult, ddm: Optional[DDMResult] = None) -> Recommendation:
        """
        Build the recommendation.

        Raises:
            UndefinedUpside: DCF upside is undefined (no current price)
        """
        upside, models = self.average_upside(dcf, ddm)
        rating = RecommendationType.from_upside(upside)

        if "DDM" in models:
            # Lead with the model showing the smaller move
            if abs(dcf.upside) < abs(ddm.upside):
                narrative = (
                    f"Based on our dual valuation approach, the DCF model suggests a "
                    f"{abs(dcf.upside):.1%} {_direction(dcf.upside)} while the DDM indicates "
                    f"{abs(ddm.upside):.1%} {_direction(ddm.upside)}. "
                )
            else:
                narrative = (
                    f"The DDM valuation shows {abs(ddm.upside):.1%} {_direction(ddm.upside)} "
                    f"compared to the DCF's {abs(dcf.upside):.1%} {_direction(dcf.upside)}. "
                )
            closing = {
                RecommendationType.STRONG_BUY: "Strong Buy recommendation based on significant undervaluation across both models.",
                RecommendationType.BUY: "Buy recommendation with moderate upside potential.",
                RecommendationType.HOLD: "Hold recommendation as the stock appears fairly valued.",
                RecommendationType.SELL: "Sell recommendation due to overvaluation signals.",
            }[rating]
        else:
            narrative = (
                f"Based on DCF analysis, the stock shows {abs(dcf.upside):.1%} "
                f"{_direction(dcf.upside)}. "
            )
            if ddm is not None and not ddm.applicable:
                narrative += f"DDM is not applicable: {ddm.reason}. "
            closing = {
                RecommendationType.STRONG_BUY: "Strong Buy recommendation based on DCF undervaluation.",
                RecommendationType.BUY: "Buy recommendation with moderate upside.",
                RecommendationType.HOLD: "Hold recommendation as the stock appears fairly valued.",
                RecommendationType.SELL: "Sell recommendation due to DCF overvaluation.",
            }[rating]

        return Recommendation(
            rating=rating,
            average_upside=upside,
            narrative=narrative + closing,
            models_used=tuple(models),
            key_risks=KEY_RISKS,
            key_strengths=KEY_STRENGTHS,
        )


__all__ = [
    "RecommendationType",
    "Recommendation",
    "RecommendationSynthesizer",
    "KEY_RISKS",
    "KEY_STRENGTHS",
]
