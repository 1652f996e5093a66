"""Seeded reference table of medical-sector salaries in Japan.

Figures are modelled on public salary surveys: a Tokyo base per job title,
scaled by a regional multiplier, with quartiles and extremes at fixed ratios
of the median. Sample sizes come from a fixed-seed generator so the table is
identical on every import.
"""
from __future__ import annotations

from compbench.log import get_logger
from compbench.models import EmploymentType, SalarySummary
from compbench.rounding import round_int, round_to
from compbench.sources.base import BenchmarkSource, filter_entries

log = get_logger(__name__)

PREFECTURES: tuple[str, ...] = (
    "東京都", "大阪府", "愛知県", "福岡県", "北海道", "神奈川県", "埼玉県", "千葉県",
)

JOB_TITLES: tuple[str, ...] = (
    "看護師", "歯科衛生士", "歯科助手", "医療事務",
    "理学療法士", "薬剤師", "作業療法士", "介護福祉士",
)

# Tokyo full-time median, JPY per month
BASE_FULL_TIME: dict[str, int] = {
    "看護師": 300000,
    "歯科衛生士": 280000,
    "歯科助手": 200000,
    "医療事務": 220000,
    "理学療法士": 285000,
    "薬剤師": 350000,
    "作業療法士": 275000,
    "介護福祉士": 250000,
}

# Tokyo part-time median, JPY per hour
BASE_PART_TIME: dict[str, int] = {
    "看護師": 1800,
    "歯科衛生士": 1600,
    "歯科助手": 1150,
    "医療事務": 1200,
    "理学療法士": 1750,
    "薬剤師": 2200,
    "作業療法士": 1700,
    "介護福祉士": 1400,
}

REGIONAL_MULTIPLIER: dict[str, float] = {
    "東京都": 1.0,
    "神奈川県": 0.97,
    "大阪府": 0.95,
    "愛知県": 0.93,
    "千葉県": 0.94,
    "埼玉県": 0.93,
    "福岡県": 0.89,
    "北海道": 0.88,
}

SAMPLE_SIZE_BASE: dict[str, int] = {
    "東京都": 1200,
    "神奈川県": 680,
    "大阪府": 900,
    "愛知県": 620,
    "千葉県": 520,
    "埼玉県": 500,
    "福岡県": 480,
    "北海道": 400,
}

# (p25, p75, min, max) as ratios of the median
_FULL_TIME_RATIOS = (0.88, 1.13, 0.72, 1.32)
_PART_TIME_RATIOS = (0.90, 1.12, 0.78, 1.30)

_MODULUS = 2147483647


class _ParkMiller:
    """Minimal-standard LCG (multiplier 16807) driving the sample sizes."""

    def __init__(self, seed: int = 42) -> None:
        self.state = seed

    def random(self) -> float:
        self.state = (self.state * 16807) % _MODULUS
        return (self.state - 1) / (_MODULUS - 1)


def generate_entry(
    prefecture: str,
    job_title: str,
    employment_type: EmploymentType,
    rng: _ParkMiller,
) -> SalarySummary:
    mult = REGIONAL_MULTIPLIER.get(prefecture, 1.0)
    base_sample = SAMPLE_SIZE_BASE.get(prefecture, 500)

    if employment_type == EmploymentType.FULL_TIME:
        base = BASE_FULL_TIME.get(job_title, 250000)
        step, ratios, sample_scale = 100, _FULL_TIME_RATIOS, 1.0
    else:
        base = BASE_PART_TIME.get(job_title, 1300)
        step, ratios, sample_scale = 10, _PART_TIME_RATIOS, 0.6

    median = round_to(base * mult, step)
    p25, p75, low, high = (round_to(median * r, step) for r in ratios)
    sample_size = round_int(base_sample * sample_scale * (0.7 + rng.random() * 0.6))
    return SalarySummary(
        minimum=low,
        p25=p25,
        median=median,
        p75=p75,
        maximum=high,
        sample_size=sample_size,
        region=prefecture,
        role=job_title,
        employment_type=employment_type,
    )


def build_salary_data(seed: int = 42) -> list[SalarySummary]:
    rng = _ParkMiller(seed)
    data: list[SalarySummary] = []
    for prefecture in PREFECTURES:
        for job_title in JOB_TITLES:
            data.append(generate_entry(prefecture, job_title, EmploymentType.FULL_TIME, rng))
            data.append(generate_entry(prefecture, job_title, EmploymentType.PART_TIME, rng))
    return data


class SeededBenchmarkSource(BenchmarkSource):
    def __init__(self, seed: int = 42) -> None:
        self._data = build_salary_data(seed)
        log.debug("Seeded benchmark table: %d entries", len(self._data))

    def entries(self, region=None, role=None, employment_type=None) -> list[SalarySummary]:
        return filter_entries(self._data, region, role, employment_type)
