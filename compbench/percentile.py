"""Percentile model over a five-number salary summary.

The distribution is a presentation aid: a Gaussian kernel centred on the
median with sigma taken from the interquartile range, sampled at ten bucket
midpoints between min and max. It is not a fitted model.
"""
from __future__ import annotations

import math

from compbench.log import get_logger
from compbench.models import (
    DistributionBucket,
    EmploymentType,
    MarketPosition,
    SalarySummary,
)
from compbench.rounding import round_half_up, round_int

log = get_logger(__name__)

BUCKET_COUNT = 10
# IQR of the standard normal is ~1.35 sigma
IQR_TO_SIGMA = 1.35


def _bucket_label(lo: float, hi: float, employment_type: EmploymentType) -> str:
    if employment_type == EmploymentType.FULL_TIME:
        return f"{round_int(lo / 10000)}〜{round_int(hi / 10000)}万"
    return f"{round_int(lo)}〜{round_int(hi)}円"


def _median_bucket(summary: SalarySummary, width: float) -> int:
    if width <= 0:
        return 0
    return min(int((summary.median - summary.minimum) / width), BUCKET_COUNT - 1)


def synthesize_distribution(summary: SalarySummary) -> list[DistributionBucket]:
    """Return ten contiguous equal-width buckets spanning [min, max].

    Percentages are normalized to 100 and rounded once to one decimal; the
    leftover rounding error is not redistributed. When p25 == p75 there is no
    spread to model, so the bucket holding the median gets everything.
    """
    width = (summary.maximum - summary.minimum) / BUCKET_COUNT
    sigma = (summary.p75 - summary.p25) / IQR_TO_SIGMA

    bounds: list[tuple[float, float]] = []
    densities: list[float] = []
    for i in range(BUCKET_COUNT):
        lo = summary.minimum + width * i
        hi = lo + width
        bounds.append((lo, hi))
        if sigma > 0:
            z = ((lo + hi) / 2 - summary.median) / sigma
            densities.append(math.exp(-0.5 * z * z))

    total = sum(densities)
    if sigma <= 0 or total <= 0:
        densities = [0.0] * BUCKET_COUNT
        densities[_median_bucket(summary, width)] = 1.0
        total = 1.0

    buckets: list[DistributionBucket] = []
    for (lo, hi), density in zip(bounds, densities):
        buckets.append(
            DistributionBucket(
                range_min=lo,
                range_max=hi,
                percentage=round_half_up(density / total * 100, 1),
                is_below_25=hi <= summary.p25,
                is_25_to_75=lo >= summary.p25 and hi <= summary.p75,
                is_above_75=lo >= summary.p75,
                label=_bucket_label(lo, hi, summary.employment_type),
            )
        )

    log.debug(
        "Distribution for %s/%s: sigma=%.1f width=%.1f",
        summary.region, summary.role, sigma, width,
    )
    return buckets


def _anchors(summary: SalarySummary) -> list[tuple[float, float]]:
    return [
        (summary.minimum, 0.0),
        (summary.p25, 25.0),
        (summary.median, 50.0),
        (summary.p75, 75.0),
        (summary.maximum, 100.0),
    ]


def locate_percentile(value: float, summary: SalarySummary) -> float:
    """Piecewise-linear percentile of *value*: min→0, p25→25, … max→100.

    Inside (min, max) the median always maps to 50, even when it coincides
    with a quartile; the curve then steps at that point and stays monotone.
    """
    if value <= summary.minimum:
        return 0.0
    if value >= summary.maximum:
        return 100.0
    # interior anchors can only coincide with each other through the median
    if value == summary.median:
        return 50.0

    anchors = _anchors(summary)
    for (x0, y0), (x1, y1) in zip(anchors, anchors[1:]):
        if value <= x1:
            if x1 == x0:
                return y1
            return y0 + (value - x0) / (x1 - x0) * (y1 - y0)
    return 100.0


def classify_market_position(value: float, summary: SalarySummary) -> MarketPosition:
    if value < summary.p25:
        return MarketPosition.TOO_LOW
    if value <= summary.p75:
        if value < summary.median:
            return MarketPosition.FAIR_LOW
        return MarketPosition.FAIR
    return MarketPosition.COMPETITIVE
