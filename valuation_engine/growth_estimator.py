"""
Growth Estimator
================

Derives a representative growth rate from an oldest-to-newest numeric
series (revenue, FCF or dividends per share).

    g_t = (x_t - x_{t-1}) / |x_{t-1}|      for every pair with x_{t-1} != 0
    g   = mean(g_t)                         or 0.0 when no pair is usable

Pairs with a zero predecessor are skipped rather than treated as errors,
and a series without any usable pair yields 0.0.
"""

from __future__ import annotations

import numpy as np
from typing import List, Sequence


class GrowthEstimator:
    """Average period-over-period growth of a historical series."""

    def period_growth_rates(self, series: Sequence[float]) -> List[float]:
        """Growth for each adjacent pair whose earlier value is non-zero."""
        rates = []
        for prev, curr in zip(series[:-1], series[1:]):
            if prev != 0:
                rates.append((curr - prev) / abs(prev))
        return rates

    def average_growth(self, series: Sequence[float]) -> float:
        rates = self.period_growth_rates(series)
        if not rates:
            return 0.0
        return float(np.mean(rates))


def average_growth_rate(series: Sequence[float]) -> float:
    """Convenience wrapper around GrowthEstimator.average_growth."""
    return GrowthEstimator().average_growth(series)


__all__ = [
    "GrowthEstimator",
    "average_growth_rate",
]
