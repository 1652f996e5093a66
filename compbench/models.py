"""Data models for salary benchmarks, competitors and the hiring pipeline."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class EmploymentType(str, Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"


class MarketPosition(str, Enum):
    TOO_LOW = "TOO_LOW"
    FAIR_LOW = "FAIR_LOW"
    FAIR = "FAIR"
    COMPETITIVE = "COMPETITIVE"


class FunnelStage(str, Enum):
    NEW = "NEW"
    SCREENING = "SCREENING"
    INTERVIEW_1 = "INTERVIEW_1"
    INTERVIEW_2 = "INTERVIEW_2"
    OFFER = "OFFER"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"

    @classmethod
    def ordered(cls) -> tuple["FunnelStage", ...]:
        """Stages that form the pipeline, earliest first."""
        return (
            cls.NEW, cls.SCREENING, cls.INTERVIEW_1,
            cls.INTERVIEW_2, cls.OFFER, cls.ACCEPTED,
        )

    @property
    def is_terminal(self) -> bool:
        return self in (FunnelStage.REJECTED, FunnelStage.WITHDRAWN)


class ParseStatus(str, Enum):
    PARSED = "PARSED"
    ABSENT = "ABSENT"
    UNPARSED = "UNPARSED"


class ComparisonResult(str, Enum):
    WIN = "WIN"
    LOSE = "LOSE"
    DRAW = "DRAW"
    NA = "NA"


# ── Benchmarks ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SalarySummary:
    """Five-number summary for one (region, role, employment type).

    Values share one unit: monthly yen for FULL_TIME, hourly yen otherwise.
    """
    minimum: float
    p25: float
    median: float
    p75: float
    maximum: float
    sample_size: int = 0
    region: str = ""
    role: str = ""
    employment_type: EmploymentType = EmploymentType.FULL_TIME

    def to_dict(self) -> dict[str, Any]:
        return {
            "region": self.region,
            "role": self.role,
            "employment_type": self.employment_type.value,
            "min": self.minimum,
            "p25": self.p25,
            "median": self.median,
            "p75": self.p75,
            "max": self.maximum,
            "sample_size": self.sample_size,
        }


@dataclass
class DistributionBucket:
    range_min: float
    range_max: float
    percentage: float
    is_below_25: bool = False
    is_25_to_75: bool = False
    is_above_75: bool = False
    label: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PremiumOption:
    id: str
    label: str
    uplift: float


@dataclass(frozen=True)
class AdjustedRange:
    minimum: int
    recommended: int
    maximum: int
    total_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "min": self.minimum,
            "recommended": self.recommended,
            "max": self.maximum,
            "total_rate": self.total_rate,
        }


@dataclass
class BenchmarkResult:
    summary: SalarySummary
    candidate: float
    buckets: list[DistributionBucket]
    position_percentile: float
    market_position: MarketPosition
    adjusted_range: AdjustedRange
    annual_cost: int | None = None
    monthly_equivalent: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "candidate": self.candidate,
            "buckets": [b.to_dict() for b in self.buckets],
            "position_percentile": self.position_percentile,
            "market_position": self.market_position.value,
            "adjusted_range": self.adjusted_range.to_dict(),
            "annual_cost": self.annual_cost,
            "monthly_equivalent": self.monthly_equivalent,
        }


# ── Competitors ───────────────────────────────────────────────────────────


@dataclass
class CompetitorCondition:
    job_title: str
    salary_min: float | None = None
    salary_max: float | None = None
    hourly_rate: float | None = None
    benefits: str | None = None
    working_hours: str | None = None
    holidays: str | None = None
    source: str | None = None


@dataclass
class Competitor:
    name: str
    distance_km: float | None = None
    address: str | None = None
    website: str | None = None
    conditions: list[CompetitorCondition] = field(default_factory=list)


@dataclass
class OwnPosition:
    title: str
    salary_min: float | None = None
    salary_max: float | None = None
    benefits: str | None = None
    is_active: bool = True
    employment_type: EmploymentType = EmploymentType.FULL_TIME


@dataclass(frozen=True)
class ParsedField:
    """Outcome of parsing one free-text field into a score."""
    status: ParseStatus
    score: int
    value: int | None = None


@dataclass
class ComparisonRow:
    job_title: str
    competitor_name: str
    own_salary: int | None
    competitor_salary: int | None
    diff: int | None
    result: ComparisonResult

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["result"] = self.result.value
        return d


@dataclass
class ScorecardResult:
    competitor_name: str
    own_scores: dict[str, int]
    competitor_scores: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "competitor": self.competitor_name,
            "own_scores": dict(self.own_scores),
            "competitor_scores": dict(self.competitor_scores),
        }

    def radar_rows(self, labels: dict[str, str] | None = None) -> list[dict[str, Any]]:
        labels = labels or {}
        return [
            {
                "axis": labels.get(axis, axis),
                "own": self.own_scores[axis],
                "competitor": self.competitor_scores[axis],
            }
            for axis in self.own_scores
        ]


# ── Pipeline ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class StatusHistoryEntry:
    to_stage: FunnelStage
    changed_at: datetime
    from_stage: FunnelStage | None = None
    note: str = ""


@dataclass
class TrackedEntity:
    entity_id: str
    stage: FunnelStage
    history: list[StatusHistoryEntry] = field(default_factory=list)


@dataclass
class FunnelRow:
    stage: FunnelStage
    count: int
    rate_percent: int

    def to_dict(self) -> dict[str, Any]:
        return {"stage": self.stage.value, "count": self.count, "rate_percent": self.rate_percent}
