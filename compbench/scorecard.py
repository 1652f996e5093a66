"""Score our organization against a competitor on six radar axes."""
from __future__ import annotations

import re
from bisect import bisect_left
from typing import Iterable, Sequence

from compbench.config import ScoringCatalog
from compbench.log import get_logger
from compbench.models import (
    ComparisonResult,
    ComparisonRow,
    Competitor,
    OwnPosition,
    ParsedField,
    ParseStatus,
    ScorecardResult,
)
from compbench.rounding import round_int

log = get_logger(__name__)

AXES: tuple[str, ...] = (
    "salary", "holidays", "benefits", "access", "education", "work_life_balance",
)

_NUMBER_RE = re.compile(r"\d+", re.ASCII)
_MAX_DAY_DIGITS = 6


def _has(v: float | None) -> bool:
    return v is not None and v > 0


def salary_midpoint(low: float | None, high: float | None) -> int | None:
    """Midpoint of a salary range; a single bound stands in for the range."""
    if _has(low) and _has(high):
        return round_int((low + high) / 2)
    if _has(low):
        return round_int(low)
    if _has(high):
        return round_int(high)
    return None


def _mean_midpoint(midpoints: Iterable[int | None]) -> int | None:
    values = [m for m in midpoints if m is not None]
    if not values:
        return None
    return round_int(sum(values) / len(values))


def _by_threshold(value: float, table: Sequence[tuple[float, int]], floor: int) -> int:
    for bound, score in table:
        if value >= bound:
            return score
    return floor


def _join_texts(texts: Iterable[str | None]) -> str | None:
    present = [t for t in texts if t is not None]
    if not present:
        return None
    return ", ".join(present)


class CompetitiveScorecard:
    """Per-axis 1–5 scores for radar comparison.

    Every axis has a defined fallback, so scoring never fails on missing or
    messy data; no overall winner is computed here.
    """

    def __init__(self, catalog: ScoringCatalog | None = None) -> None:
        self.catalog = catalog or ScoringCatalog()
        self._delimiters = re.compile(
            "|".join(re.escape(d) for d in self.catalog.benefit_delimiters)
        )

    # ── salary ──

    @staticmethod
    def salary_pool(
        positions: Iterable[OwnPosition], competitors: Iterable[Competitor]
    ) -> list[int]:
        """Every known salary midpoint: our active positions and all competitor conditions."""
        pool = [
            m for m in (salary_midpoint(p.salary_min, p.salary_max) for p in positions if p.is_active)
            if m is not None
        ]
        for comp in competitors:
            for cond in comp.conditions:
                m = salary_midpoint(cond.salary_min, cond.salary_max)
                if m is not None:
                    pool.append(m)
        return sorted(pool)

    def score_salary(self, midpoint: int | None, pool: Sequence[int]) -> int:
        if midpoint is None or not pool:
            return self.catalog.neutral_score
        ordered = sorted(pool)
        percentile = min((bisect_left(ordered, midpoint) + 1) / len(ordered), 1.0)
        return _by_threshold(percentile, self.catalog.salary_thresholds, self.catalog.floor_score)

    # ── free-text fields ──

    def parse_holidays(self, text: str | None) -> ParsedField:
        """Largest integer in a holiday policy ("年間休日120日" → 120).

        Only ASCII digits count. Digit runs are compared as strings so an
        absurdly long number still scores; ``value`` stays None for those.
        """
        if text is None or not text.strip():
            return ParsedField(ParseStatus.ABSENT, self.catalog.neutral_score)
        numbers = [n.lstrip("0") or "0" for n in _NUMBER_RE.findall(text)]
        if not numbers:
            return ParsedField(ParseStatus.UNPARSED, self.catalog.neutral_score)
        largest = max(numbers, key=lambda n: (len(n), n))
        days = int(largest) if len(largest) <= _MAX_DAY_DIGITS else None
        magnitude = days if days is not None else float("inf")
        score = _by_threshold(magnitude, self.catalog.holiday_thresholds, self.catalog.floor_score)
        return ParsedField(ParseStatus.PARSED, score, days)

    def parse_benefits(self, text: str | None) -> ParsedField:
        """Count delimited benefit items; absent and empty text both floor at 1."""
        if text is None:
            return ParsedField(ParseStatus.ABSENT, self.catalog.floor_score)
        items = [s.strip() for s in self._delimiters.split(text)]
        count = sum(1 for s in items if s)
        if count == 0:
            return ParsedField(ParseStatus.UNPARSED, self.catalog.floor_score, 0)
        score = _by_threshold(count, self.catalog.benefit_thresholds, self.catalog.floor_score)
        return ParsedField(ParseStatus.PARSED, score, count)

    def score_access(self, distance_km: float | None) -> int:
        if not _has(distance_km):
            return self.catalog.neutral_score
        for max_km, score in self.catalog.access_thresholds:
            if distance_km <= max_km:
                return score
        return self.catalog.access_far_score

    def score_keywords(self, text: str | None, keywords: Iterable[str]) -> int:
        if text and any(k in text for k in keywords):
            return self.catalog.keyword_match_score
        return self.catalog.neutral_score

    # ── sides ──

    def _text_scores(self, benefits_text: str | None) -> dict[str, int]:
        return {
            "benefits": self.parse_benefits(benefits_text).score,
            "education": self.score_keywords(benefits_text, self.catalog.education_keywords),
            "work_life_balance": self.score_keywords(
                benefits_text, self.catalog.work_life_balance_keywords
            ),
        }

    def score_own(
        self,
        positions: Sequence[OwnPosition],
        pool: Sequence[int],
        holidays: str | None = None,
    ) -> dict[str, int]:
        active = [p for p in positions if p.is_active]
        midpoint = _mean_midpoint(salary_midpoint(p.salary_min, p.salary_max) for p in active)
        benefits_text = _join_texts(p.benefits for p in active if p.benefits)
        scores = {
            "salary": self.score_salary(midpoint, pool),
            "holidays": self.parse_holidays(holidays).score,
            # no distance-to-self
            "access": self.catalog.neutral_score,
            **self._text_scores(benefits_text),
        }
        return {axis: scores[axis] for axis in AXES}

    def score_competitor(self, competitor: Competitor, pool: Sequence[int]) -> dict[str, int]:
        conditions = competitor.conditions
        midpoint = _mean_midpoint(salary_midpoint(c.salary_min, c.salary_max) for c in conditions)

        holiday_scores = [self.parse_holidays(c.holidays).score for c in conditions if c.holidays is not None]
        if holiday_scores:
            holidays = round_int(sum(holiday_scores) / len(holiday_scores))
        else:
            holidays = self.catalog.neutral_score

        benefits_text = _join_texts(c.benefits for c in conditions)
        scores = {
            "salary": self.score_salary(midpoint, pool),
            "holidays": holidays,
            "access": self.score_access(competitor.distance_km),
            **self._text_scores(benefits_text),
        }
        return {axis: scores[axis] for axis in AXES}

    def compare(
        self,
        positions: Sequence[OwnPosition],
        competitors: Sequence[Competitor],
        competitor: Competitor,
        own_holidays: str | None = None,
    ) -> ScorecardResult:
        if competitor not in competitors:
            competitors = [*competitors, competitor]
        pool = self.salary_pool(positions, competitors)
        result = ScorecardResult(
            competitor_name=competitor.name,
            own_scores=self.score_own(positions, pool, own_holidays),
            competitor_scores=self.score_competitor(competitor, pool),
        )
        log.info(
            "Scorecard vs %s (pool=%d): own=%s competitor=%s",
            competitor.name, len(pool), result.own_scores, result.competitor_scores,
        )
        return result


# ── Salary comparison table ──────────────────────────────────────────────


def _titles_match(own: str, theirs: str) -> bool:
    return own in theirs or theirs in own or own.lower() == theirs.lower()


def compare_salaries(ours: int | None, theirs: int | None, tolerance: float = 0.05) -> ComparisonResult:
    """WIN/LOSE outside a ±tolerance band of the larger figure, else DRAW."""
    if ours is None or theirs is None:
        return ComparisonResult.NA
    diff = ours - theirs
    threshold = max(ours, theirs) * tolerance
    if diff > threshold:
        return ComparisonResult.WIN
    if diff < -threshold:
        return ComparisonResult.LOSE
    return ComparisonResult.DRAW


def build_comparison_rows(
    positions: Sequence[OwnPosition],
    competitors: Sequence[Competitor],
    tolerance: float = 0.05,
) -> list[ComparisonRow]:
    """One row per competitor condition, matched to our first active position by title."""
    rows: list[ComparisonRow] = []
    for comp in competitors:
        for cond in comp.conditions:
            matched = next(
                (p for p in positions if p.is_active and _titles_match(p.title, cond.job_title)),
                None,
            )
            ours = salary_midpoint(matched.salary_min, matched.salary_max) if matched else None
            theirs = salary_midpoint(cond.salary_min, cond.salary_max)
            rows.append(
                ComparisonRow(
                    job_title=cond.job_title,
                    competitor_name=comp.name,
                    own_salary=ours,
                    competitor_salary=theirs,
                    diff=ours - theirs if ours is not None and theirs is not None else None,
                    result=compare_salaries(ours, theirs, tolerance),
                )
            )
    log.debug("Built %d salary comparison rows", len(rows))
    return rows
