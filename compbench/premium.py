"""Premium uplifts applied to the recommended salary range."""
from __future__ import annotations

from typing import Iterable

from compbench.log import get_logger
from compbench.models import AdjustedRange, PremiumOption, SalarySummary
from compbench.rounding import round_half_up, round_to

log = get_logger(__name__)


class PremiumAdjuster:
    """Sums the uplift of every enabled premium and scales p25/median/p75.

    Uplifts add up (3% + 5% = 8%), they do not compound.
    """

    def __init__(self, options: Iterable[PremiumOption]) -> None:
        self._rates: dict[str, float] = {o.id: o.uplift for o in options}

    def total_rate(self, enabled_ids: Iterable[str]) -> float:
        enabled = set(enabled_ids)
        unknown = enabled - self._rates.keys()
        if unknown:
            log.debug("Ignoring unknown premium ids: %s", ", ".join(sorted(unknown)))
        return sum(self._rates[i] for i in sorted(enabled) if i in self._rates)

    def compute_adjusted_range(
        self,
        summary: SalarySummary,
        enabled_ids: Iterable[str],
        granularity: int = 1,
    ) -> AdjustedRange:
        """Scale the interquartile anchors and round to *granularity*.

        Callers pass 100 for monthly salaries and 10 for hourly rates, which
        keeps results on the same grid as the seeded reference data.
        """
        enabled = set(enabled_ids)
        rate = self.total_rate(enabled)
        multiplier = 1 + rate
        return AdjustedRange(
            minimum=round_to(summary.p25 * multiplier, granularity),
            recommended=round_to(summary.median * multiplier, granularity),
            maximum=round_to(summary.p75 * multiplier, granularity),
            total_rate=round_half_up(rate, 4),
        )
