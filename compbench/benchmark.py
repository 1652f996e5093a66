"""
Salary benchmark lookup for one region / role / employment type.

Runs: reference lookup → distribution → candidate position → premium-adjusted range.
"""
from __future__ import annotations

from typing import Iterable

from compbench.config import Catalog
from compbench.errors import BenchmarkNotFound
from compbench.log import get_logger
from compbench.models import BenchmarkResult, EmploymentType, SalarySummary
from compbench.percentile import (
    classify_market_position,
    locate_percentile,
    synthesize_distribution,
)
from compbench.premium import PremiumAdjuster
from compbench.rounding import round_int
from compbench.sources.base import BenchmarkSource

log = get_logger(__name__)


class BenchmarkService:
    def __init__(self, source: BenchmarkSource, catalog: Catalog | None = None) -> None:
        self.source = source
        self.catalog = catalog or Catalog()
        self.adjuster = PremiumAdjuster(self.catalog.premiums)

    def summary(self, region: str, role: str, employment_type: EmploymentType | str) -> SalarySummary:
        found = self.source.lookup(region, role, employment_type)
        if found is None:
            raise BenchmarkNotFound(region, role, EmploymentType(employment_type).value)
        return found

    def annual_cost(self, salary: float, employment_type: EmploymentType | str) -> int | None:
        """Yearly employer cost of a monthly salary including social insurance."""
        if EmploymentType(employment_type) != EmploymentType.FULL_TIME:
            return None
        return round_int(salary * 12 * self.catalog.annual_cost_factor)

    def monthly_equivalent(self, hourly: float, employment_type: EmploymentType | str) -> int | None:
        """Full-time equivalent monthly pay of a PART_TIME hourly rate."""
        if EmploymentType(employment_type) != EmploymentType.PART_TIME:
            return None
        return round_int(hourly * self.catalog.ft_equivalent_hours)

    def evaluate(
        self,
        region: str,
        role: str,
        employment_type: EmploymentType | str,
        candidate: float | None = None,
        enabled_premiums: Iterable[str] = (),
    ) -> BenchmarkResult:
        summary = self.summary(region, role, employment_type)
        value = summary.median if candidate is None else candidate
        adjusted = self.adjuster.compute_adjusted_range(
            summary,
            enabled_premiums,
            granularity=self.catalog.granularity_for(summary.employment_type),
        )
        result = BenchmarkResult(
            summary=summary,
            candidate=value,
            buckets=synthesize_distribution(summary),
            position_percentile=locate_percentile(value, summary),
            market_position=classify_market_position(value, summary),
            adjusted_range=adjusted,
            annual_cost=self.annual_cost(value, summary.employment_type),
            monthly_equivalent=self.monthly_equivalent(value, summary.employment_type),
        )
        log.info(
            "Benchmark %s/%s/%s: candidate=%s → P%.1f (%s), recommended=%d",
            region, role, summary.employment_type.value, value,
            result.position_percentile, result.market_position.value,
            adjusted.recommended,
        )
        return result

    def comparison_table(self, region: str, employment_type: EmploymentType | str) -> list[SalarySummary]:
        """Every role's summary in one region, for side-by-side display."""
        return self.source.entries(region=region, employment_type=employment_type)
