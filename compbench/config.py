"""Load catalog and env configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from compbench.errors import CatalogError
from compbench.log import get_logger
from compbench.models import (
    Competitor,
    CompetitorCondition,
    EmploymentType,
    FunnelStage,
    OwnPosition,
    PremiumOption,
)

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
CATALOG_PATH: Path = CONFIG_DIR / "catalog.yaml"
ORGANIZATION_PATH: Path = CONFIG_DIR / "organization.yaml"
DATA_DIR: Path = ROOT_DIR / "data"
REPORTS_DIR: Path = ROOT_DIR / "reports"

Thresholds = tuple[tuple[float, int], ...]

DEFAULT_PREMIUMS: tuple[PremiumOption, ...] = (
    PremiumOption("station", "駅徒歩5分以内", 0.03),
    PremiumOption("nursery", "託児所完備", 0.05),
    PremiumOption("days_off", "週休3日制", 0.07),
    PremiumOption("no_overtime", "残業ほぼなし", 0.02),
)

DEFAULT_STAGE_LABELS: dict[str, str] = {
    "NEW": "新規",
    "SCREENING": "書類選考中",
    "INTERVIEW_1": "一次面接",
    "INTERVIEW_2": "二次面接",
    "OFFER": "内定",
    "ACCEPTED": "承諾",
    "REJECTED": "不採用",
    "WITHDRAWN": "辞退",
}

DEFAULT_AXIS_LABELS: dict[str, str] = {
    "salary": "給与水準",
    "holidays": "休日数",
    "benefits": "福利厚生",
    "access": "アクセス",
    "education": "教育・研修",
    "work_life_balance": "ワークライフバランス",
}


@dataclass(frozen=True)
class ScoringCatalog:
    """Thresholds and keyword lists behind the competitor radar scores.

    Threshold tables are ``(lower_bound, score)`` pairs, highest bound first;
    the first bound the value reaches wins.
    """
    salary_thresholds: Thresholds = ((0.75, 5), (0.50, 4), (0.25, 3), (0.10, 2))
    holiday_thresholds: Thresholds = ((120, 5), (110, 4), (100, 3), (90, 2))
    benefit_thresholds: Thresholds = ((8, 5), (6, 4), (4, 3), (2, 2))
    # (max_km, score), nearest first
    access_thresholds: Thresholds = ((5, 4), (10, 3))
    access_far_score: int = 2
    neutral_score: int = 3
    floor_score: int = 1
    keyword_match_score: int = 4
    benefit_delimiters: tuple[str, ...] = (",", "、", "，", "\n")
    education_keywords: tuple[str, ...] = ("研修", "教育", "資格", "学会", "セミナー")
    work_life_balance_keywords: tuple[str, ...] = (
        "育児", "介護", "時短", "フレックス", "リモート", "テレワーク",
    )
    draw_tolerance: float = 0.05


@dataclass(frozen=True)
class Catalog:
    premiums: tuple[PremiumOption, ...] = DEFAULT_PREMIUMS
    scoring: ScoringCatalog = field(default_factory=ScoringCatalog)
    rounding: Mapping[EmploymentType, int] = field(
        default_factory=lambda: MappingProxyType({
            EmploymentType.FULL_TIME: 100,
            EmploymentType.PART_TIME: 10,
            EmploymentType.CONTRACT: 100,
        })
    )
    annual_cost_factor: float = 1.15
    # hours per month used to express an hourly rate as a full-time salary
    ft_equivalent_hours: int = 160
    funnels: Mapping[str, tuple[FunnelStage, ...]] = field(
        default_factory=lambda: MappingProxyType({
            "dashboard": FunnelStage.ordered(),
            "export": FunnelStage.ordered(),
        })
    )
    stage_labels: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_STAGE_LABELS))
    )
    axis_labels: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_AXIS_LABELS))
    )

    def granularity_for(self, employment_type: EmploymentType | str) -> int:
        """Rounding step for adjusted ranges: ¥100 monthly, ¥10 hourly."""
        return self.rounding.get(EmploymentType(employment_type), 1)

    def funnel(self, name: str) -> tuple[FunnelStage, ...]:
        try:
            return self.funnels[name]
        except KeyError:
            raise CatalogError(f"Unknown funnel {name!r}") from None


def _thresholds(raw: Any, key: str) -> Thresholds:
    try:
        pairs = tuple((float(bound), int(score)) for bound, score in raw)
    except (TypeError, ValueError) as exc:
        raise CatalogError(f"scoring.{key} must be a list of [bound, score] pairs") from exc
    return pairs


def _stage_list(raw: Any, name: str) -> tuple[FunnelStage, ...]:
    try:
        stages = tuple(FunnelStage(s) for s in raw)
    except (TypeError, ValueError) as exc:
        raise CatalogError(f"funnels.{name} contains an unknown stage") from exc
    if not stages or any(s.is_terminal for s in stages):
        raise CatalogError(f"funnels.{name} must list pipeline stages only")
    return stages


def _parse_scoring(raw: dict[str, Any]) -> ScoringCatalog:
    base = ScoringCatalog()
    overrides: dict[str, Any] = {}
    for key in ("salary_thresholds", "holiday_thresholds", "benefit_thresholds", "access_thresholds"):
        if key in raw:
            overrides[key] = _thresholds(raw[key], key)
    for key in ("access_far_score", "neutral_score", "floor_score", "keyword_match_score"):
        if key in raw:
            overrides[key] = int(raw[key])
    for key in ("benefit_delimiters", "education_keywords", "work_life_balance_keywords"):
        if key in raw:
            overrides[key] = tuple(str(v) for v in raw[key])
    if "draw_tolerance" in raw:
        overrides["draw_tolerance"] = float(raw["draw_tolerance"])
    unknown = set(raw) - {f.name for f in fields(ScoringCatalog)}
    if unknown:
        log.warning("Ignoring unknown scoring keys: %s", ", ".join(sorted(unknown)))
    return replace(base, **overrides)


def parse_catalog(data: dict[str, Any] | None) -> Catalog:
    """Build a Catalog from a parsed YAML mapping; missing sections keep defaults."""
    if not data:
        return Catalog()
    if not isinstance(data, dict):
        raise CatalogError("catalog root must be a mapping")

    overrides: dict[str, Any] = {}

    if "premiums" in data:
        try:
            overrides["premiums"] = tuple(
                PremiumOption(str(p["id"]), str(p.get("label", p["id"])), float(p["uplift"]))
                for p in data["premiums"]
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise CatalogError("premiums entries need id and numeric uplift") from exc

    if "scoring" in data:
        overrides["scoring"] = _parse_scoring(data["scoring"] or {})

    if "rounding" in data:
        try:
            overrides["rounding"] = MappingProxyType({
                EmploymentType(k): int(v) for k, v in data["rounding"].items()
            })
        except (AttributeError, ValueError) as exc:
            raise CatalogError("rounding maps employment types to integer steps") from exc

    if "annual_cost_factor" in data:
        overrides["annual_cost_factor"] = float(data["annual_cost_factor"])

    if "ft_equivalent_hours" in data:
        try:
            overrides["ft_equivalent_hours"] = int(data["ft_equivalent_hours"])
        except (TypeError, ValueError) as exc:
            raise CatalogError("ft_equivalent_hours must be an integer") from exc

    if "funnels" in data:
        overrides["funnels"] = MappingProxyType({
            name: _stage_list(stages, name) for name, stages in data["funnels"].items()
        })

    for key, defaults in (("stage_labels", DEFAULT_STAGE_LABELS), ("axis_labels", DEFAULT_AXIS_LABELS)):
        if key in data:
            merged = dict(defaults)
            merged.update({str(k): str(v) for k, v in (data[key] or {}).items()})
            overrides[key] = MappingProxyType(merged)

    return Catalog(**overrides)


def load_catalog(path: Path | None = None) -> Catalog:
    path = path or Path(get_env("COMPBENCH_CATALOG") or CATALOG_PATH)
    if not path.exists():
        log.info("No catalog at %s — using built-in defaults", path)
        return Catalog()
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise CatalogError(f"Invalid YAML in {path}: {exc}") from exc
    catalog = parse_catalog(data)
    log.debug("Loaded catalog from %s (%d premiums)", path, len(catalog.premiums))
    return catalog


@dataclass
class Organization:
    name: str
    positions: list[OwnPosition]
    competitors: list[Competitor]
    holidays: str | None = None


def _opt_float(v: Any) -> float | None:
    return None if v is None or v == "" else float(v)


def _opt_str(v: Any) -> str | None:
    return None if v is None else str(v)


def parse_organization(data: dict[str, Any]) -> Organization:
    positions = [
        OwnPosition(
            title=str(p["title"]),
            salary_min=_opt_float(p.get("salary_min")),
            salary_max=_opt_float(p.get("salary_max")),
            benefits=_opt_str(p.get("benefits")),
            is_active=bool(p.get("is_active", True)),
            employment_type=EmploymentType(p.get("employment_type", "FULL_TIME")),
        )
        for p in data.get("positions") or []
    ]
    competitors = [
        Competitor(
            name=str(c["name"]),
            distance_km=_opt_float(c.get("distance_km")),
            address=_opt_str(c.get("address")),
            website=_opt_str(c.get("website")),
            conditions=[
                CompetitorCondition(
                    job_title=str(cond["job_title"]),
                    salary_min=_opt_float(cond.get("salary_min")),
                    salary_max=_opt_float(cond.get("salary_max")),
                    hourly_rate=_opt_float(cond.get("hourly_rate")),
                    benefits=_opt_str(cond.get("benefits")),
                    working_hours=_opt_str(cond.get("working_hours")),
                    holidays=_opt_str(cond.get("holidays")),
                    source=_opt_str(cond.get("source")),
                )
                for cond in c.get("conditions") or []
            ],
        )
        for c in data.get("competitors") or []
    ]
    return Organization(
        name=str(data.get("name", "自院")),
        positions=positions,
        competitors=competitors,
        holidays=_opt_str(data.get("holidays")),
    )


def load_organization(path: Path | None = None) -> Organization | None:
    """Own positions and registered competitors, or None if no file exists."""
    path = path or ORGANIZATION_PATH
    if not path.exists():
        return None
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise CatalogError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise CatalogError(f"Invalid organization file {path}: root must be a mapping")
    try:
        org = parse_organization(data)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise CatalogError(f"Invalid organization file {path}: {exc}") from exc
    log.debug(
        "Loaded organization %s: %d positions, %d competitors",
        org.name, len(org.positions), len(org.competitors),
    )
    return org


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()

