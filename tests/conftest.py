"""
Pytest configuration and shared fixtures.
"""

import os

os.environ.setdefault("COMPBENCH_NO_LOG_FILE", "1")

from datetime import datetime, timedelta, timezone

import pytest

from compbench.config import Catalog
from compbench.models import (
    Competitor,
    CompetitorCondition,
    EmploymentType,
    FunnelStage,
    OwnPosition,
    SalarySummary,
    StatusHistoryEntry,
    TrackedEntity,
)


@pytest.fixture
def nurse_summary() -> SalarySummary:
    """Monthly salary summary with evenly spaced quartiles."""
    return SalarySummary(
        minimum=200000,
        p25=260000,
        median=300000,
        p75=340000,
        maximum=400000,
        sample_size=1200,
        region="東京都",
        role="看護師",
        employment_type=EmploymentType.FULL_TIME,
    )


@pytest.fixture
def hourly_summary() -> SalarySummary:
    return SalarySummary(
        minimum=1400,
        p25=1620,
        median=1800,
        p75=2020,
        maximum=2340,
        sample_size=700,
        region="東京都",
        role="看護師",
        employment_type=EmploymentType.PART_TIME,
    )


@pytest.fixture
def catalog() -> Catalog:
    return Catalog()


@pytest.fixture
def own_positions() -> list[OwnPosition]:
    return [
        OwnPosition(
            title="看護師",
            salary_min=280000,
            salary_max=340000,
            benefits="社会保険完備, 交通費支給, 院内研修あり, 育児休暇",
        ),
        OwnPosition(
            title="医療事務",
            salary_min=200000,
            salary_max=240000,
            benefits="社会保険完備、交通費支給",
        ),
        OwnPosition(title="歯科助手", salary_min=190000, salary_max=210000, is_active=False),
    ]


@pytest.fixture
def midori() -> Competitor:
    return Competitor(
        name="みどり病院",
        distance_km=3.5,
        conditions=[
            CompetitorCondition(
                job_title="看護師",
                salary_min=300000,
                salary_max=360000,
                holidays="年間休日120日",
                benefits="社会保険完備, 交通費支給, 退職金制度, 住宅手当, 託児所, 学会参加支援",
            ),
            CompetitorCondition(
                job_title="医療事務",
                salary_min=190000,
                salary_max=220000,
                holidays="週休2日・年間休日105日",
            ),
        ],
    )


@pytest.fixture
def aoba() -> Competitor:
    return Competitor(
        name="あおば内科",
        distance_km=12,
        conditions=[
            CompetitorCondition(
                job_title="看護師",
                salary_min=270000,
                salary_max=310000,
                benefits="社会保険完備",
            ),
        ],
    )


@pytest.fixture
def competitors(midori, aoba) -> list[Competitor]:
    return [midori, aoba]


def _history(*stages: FunnelStage) -> list[StatusHistoryEntry]:
    """History entries for a stage walk given oldest first, returned newest first."""
    start = datetime(2024, 4, 1, tzinfo=timezone.utc)
    entries = []
    prev = None
    for i, stage in enumerate(stages):
        entries.append(StatusHistoryEntry(to_stage=stage, changed_at=start + timedelta(days=i), from_stage=prev))
        prev = stage
    return list(reversed(entries))


@pytest.fixture
def make_entity():
    def _make(entity_id: str, stage: FunnelStage, *walk: FunnelStage) -> TrackedEntity:
        return TrackedEntity(entity_id=entity_id, stage=stage, history=_history(*walk))
    return _make


@pytest.fixture
def tracker_files(tmp_path, monkeypatch):
    """Point the CSV tracker at a temporary directory."""
    from compbench import tracker

    monkeypatch.setattr(tracker, "ENTITIES_CSV", tmp_path / "entities.csv")
    monkeypatch.setattr(tracker, "HISTORY_CSV", tmp_path / "status_history.csv")
    return tmp_path
