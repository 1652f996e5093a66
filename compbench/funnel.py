"""Hiring funnel: how many applicants reached each pipeline stage."""
from __future__ import annotations

from typing import Iterable, Sequence

from compbench.log import get_logger
from compbench.models import FunnelRow, FunnelStage, TrackedEntity
from compbench.rounding import round_int

log = get_logger(__name__)


class PipelineFunnel:
    """Cumulative reach counts over a fixed list of stages.

    Reaching a stage implies having passed every earlier one. Applicants in a
    terminal stage (rejected, withdrawn) are credited with the furthest
    ordered stage found in their history.

    *stages* are the rows to report; *order* ranks all pipeline stages and
    defaults to the full NEW → ACCEPTED sequence, so a shortened report still
    credits applicants who went further than its last row.
    """

    def __init__(
        self,
        stages: Sequence[FunnelStage],
        order: Sequence[FunnelStage] | None = None,
    ) -> None:
        self.stages: tuple[FunnelStage, ...] = tuple(stages)
        self._rank: dict[FunnelStage, int] = {
            s: i for i, s in enumerate(order or FunnelStage.ordered())
        }
        missing = [s.value for s in self.stages if s not in self._rank]
        if missing:
            raise ValueError(f"Stages not in pipeline order: {', '.join(missing)}")

    def reached_rank(self, entity: TrackedEntity) -> int:
        if entity.stage in self._rank:
            return self._rank[entity.stage]
        ranks = [self._rank[h.to_stage] for h in entity.history if h.to_stage in self._rank]
        if not ranks:
            # every applicant enters at the first stage
            log.debug("No ordered stage in history for %s; assuming first stage", entity.entity_id)
            return 0
        return max(ranks)

    def counts(self, entities: Iterable[TrackedEntity]) -> dict[FunnelStage, int]:
        counts = {s: 0 for s in self.stages}
        for entity in entities:
            reached = self.reached_rank(entity)
            for stage in self.stages:
                if self._rank[stage] <= reached:
                    counts[stage] += 1
        return counts

    def compute(self, entities: Iterable[TrackedEntity]) -> list[FunnelRow]:
        counts = self.counts(entities)
        if not self.stages:
            return []
        base = counts[self.stages[0]] or 1
        rows = [
            FunnelRow(stage=s, count=counts[s], rate_percent=round_int(counts[s] / base * 100))
            for s in self.stages
        ]
        log.info(
            "Funnel: %s",
            " → ".join(f"{r.stage.value}={r.count}" for r in rows),
        )
        return rows
