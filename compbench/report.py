"""Generate a markdown benchmarking report."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from compbench.config import REPORTS_DIR
from compbench.log import get_logger
from compbench.models import (
    BenchmarkResult,
    ComparisonRow,
    EmploymentType,
    FunnelRow,
    ScorecardResult,
)
from compbench.rounding import round_int

log = get_logger(__name__)

_MARKET_LABELS: dict[str, str] = {
    "TOO_LOW": "低すぎる",
    "FAIR_LOW": "適正（低め）",
    "FAIR": "適正",
    "COMPETITIVE": "競争力あり",
}

_RESULT_LABELS: dict[str, str] = {
    "WIN": "自院が上",
    "LOSE": "競合が上",
    "DRAW": "同等",
    "NA": "-",
}


def format_currency(amount: float) -> str:
    return f"¥{round_int(amount):,}"


def _unit(employment_type: EmploymentType) -> str:
    return "/月" if employment_type == EmploymentType.FULL_TIME else "/時"


def _bar(percentage: float) -> str:
    return "█" * int(percentage // 2.5)


def benchmark_section(result: BenchmarkResult) -> list[str]:
    s = result.summary
    unit = _unit(s.employment_type)
    adj = result.adjusted_range
    lines: list[str] = [
        f"## 給与ベンチマーク — {s.region} / {s.role} ({s.employment_type.value})",
        "",
        f"- **中央値:** {format_currency(s.median)}{unit} (n={s.sample_size})",
        f"- **25–75%:** {format_currency(s.p25)} – {format_currency(s.p75)}{unit}",
        f"- **最小–最大:** {format_currency(s.minimum)} – {format_currency(s.maximum)}{unit}",
        f"- **自院の提示額:** {format_currency(result.candidate)}{unit} "
        f"— P{result.position_percentile:.1f} "
        f"({_MARKET_LABELS.get(result.market_position.value, result.market_position.value)})",
        f"- **推奨レンジ (+{adj.total_rate:.0%}):** {format_currency(adj.minimum)} / "
        f"**{format_currency(adj.recommended)}** / {format_currency(adj.maximum)}{unit}",
    ]
    if result.annual_cost is not None:
        lines.append(f"- **年間人件費（社保込み）:** {format_currency(result.annual_cost)}")
    if result.monthly_equivalent is not None:
        lines.append(f"- **フルタイム換算月収:** {format_currency(result.monthly_equivalent)}/月")
    lines += ["", "| レンジ | 割合 | |", "|------|-----:|---|"]
    for b in result.buckets:
        lines.append(f"| {b.label} | {b.percentage:.1f}% | {_bar(b.percentage)} |")
    lines.append("")
    return lines


def scorecard_section(
    scorecard: ScorecardResult,
    axis_labels: Mapping[str, str] | None = None,
) -> list[str]:
    lines: list[str] = [
        f"## 競合比較 — 自院 vs {scorecard.competitor_name}",
        "",
        f"| 項目 | 自院 | {scorecard.competitor_name} |",
        "|------|-----:|-----:|",
    ]
    for row in scorecard.radar_rows(dict(axis_labels or {})):
        lines.append(f"| {row['axis']} | {row['own']} | {row['competitor']} |")
    lines.append("")
    return lines


def comparison_section(rows: list[ComparisonRow]) -> list[str]:
    if not rows:
        return []
    lines: list[str] = [
        "## 職種別給与比較",
        "",
        "| 職種 | 競合 | 自院 | 競合 | 差額 | 判定 |",
        "|------|------|-----:|-----:|-----:|------|",
    ]
    for r in rows:
        ours = format_currency(r.own_salary) if r.own_salary is not None else "—"
        theirs = format_currency(r.competitor_salary) if r.competitor_salary is not None else "—"
        diff = f"{r.diff:+,}" if r.diff is not None else "—"
        lines.append(
            f"| {r.job_title} | {r.competitor_name} | {ours} | {theirs} | {diff} "
            f"| {_RESULT_LABELS[r.result.value]} |"
        )
    lines.append("")
    return lines


def funnel_section(rows: list[FunnelRow], stage_labels: Mapping[str, str] | None = None) -> list[str]:
    labels = stage_labels or {}
    lines: list[str] = [
        "## 選考パイプライン",
        "",
        "| ステージ | 人数 | 通過率 |",
        "|------|-----:|-----:|",
    ]
    for r in rows:
        lines.append(f"| {labels.get(r.stage.value, r.stage.value)} | {r.count} | {r.rate_percent}% |")
    lines.append("")
    return lines


def build_report(
    *,
    benchmark: BenchmarkResult | None = None,
    scorecards: list[ScorecardResult] | None = None,
    comparison: list[ComparisonRow] | None = None,
    funnel: list[FunnelRow] | None = None,
    axis_labels: Mapping[str, str] | None = None,
    stage_labels: Mapping[str, str] | None = None,
) -> str:
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    lines: list[str] = [f"# 採用ベンチマークレポート — {date}", ""]

    if benchmark is not None:
        lines += benchmark_section(benchmark)
    for sc in scorecards or []:
        lines += scorecard_section(sc, axis_labels)
    lines += comparison_section(comparison or [])
    if funnel:
        lines += funnel_section(funnel, stage_labels)

    log.info(
        "Built report: benchmark=%s, %d scorecard(s), %d funnel rows",
        "yes" if benchmark else "no", len(scorecards or []), len(funnel or []),
    )
    return "\n".join(lines)


def write_report(content: str) -> Path:
    REPORTS_DIR.mkdir(parents=True, exist_ok=True)
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    path = REPORTS_DIR / f"benchmark_{date}.md"
    path.write_text(content, encoding="utf-8")
    log.info("Report written → %s", path)
    return path
