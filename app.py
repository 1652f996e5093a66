"""Streamlit UI for the compensation benchmarking engine."""
from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from compbench.benchmark import BenchmarkService
from compbench.config import (
    CONFIG_DIR,
    ORGANIZATION_PATH,
    get_env,
    load_catalog,
    load_organization,
)
from compbench.errors import BenchmarkError
from compbench.funnel import PipelineFunnel
from compbench.log import get_logger
from compbench.models import EmploymentType
from compbench.report import format_currency
from compbench.scorecard import CompetitiveScorecard, build_comparison_rows
from compbench.sources import get_source
from compbench.sources.seeded import JOB_TITLES, PREFECTURES
from compbench.tracker import load_entities

log = get_logger(__name__)

_MARKET_BADGES: dict[str, str] = {
    "TOO_LOW": ":red[低すぎる]",
    "FAIR_LOW": ":green[適正（低め）]",
    "FAIR": ":green[適正]",
    "COMPETITIVE": ":blue[競争力あり]",
}


@st.cache_resource
def _service() -> BenchmarkService:
    return BenchmarkService(get_source(get_env), load_catalog())


def _organization():
    path = ORGANIZATION_PATH if ORGANIZATION_PATH.exists() else CONFIG_DIR / "organization.example.yaml"
    return load_organization(path)


# ── Page: Salary benchmark ───────────────────────────────────────────────


def page_salary() -> None:
    st.header("適正給与設定")
    service = _service()

    c1, c2, c3 = st.columns(3)
    region = c1.selectbox("エリア", PREFECTURES)
    role = c2.selectbox("職種", JOB_TITLES)
    employment_type = c3.radio(
        "雇用形態", [EmploymentType.FULL_TIME.value, EmploymentType.PART_TIME.value], horizontal=True,
    )

    try:
        summary = service.summary(region, role, employment_type)
    except BenchmarkError as exc:
        st.warning(str(exc))
        return

    step = 5000 if employment_type == EmploymentType.FULL_TIME.value else 50
    salary = st.slider(
        "自院の提示額", int(summary.minimum), int(summary.maximum), int(summary.median), step=step,
    )
    enabled = [
        p.id for p in service.catalog.premiums
        if st.checkbox(f"{p.label} (+{p.uplift:.0%})", key=f"premium_{p.id}")
    ]
    result = service.evaluate(region, role, employment_type, candidate=salary, enabled_premiums=enabled)

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("中央値", format_currency(summary.median))
    m2.metric("パーセンタイル", f"{result.position_percentile:.1f}")
    m3.metric("推奨額", format_currency(result.adjusted_range.recommended))
    if result.annual_cost is not None:
        m4.metric("年間人件費", format_currency(result.annual_cost))
    elif result.monthly_equivalent is not None:
        m4.metric("フルタイム換算月収", format_currency(result.monthly_equivalent))
    st.markdown(f"市場ポジション: {_MARKET_BADGES[result.market_position.value]}")

    df = pd.DataFrame([b.to_dict() for b in result.buckets])
    st.bar_chart(df, x="label", y="percentage")

    st.subheader("職種別比較")
    table = pd.DataFrame([s.to_dict() for s in service.comparison_table(region, employment_type)])
    st.dataframe(table, use_container_width=True, hide_index=True)


# ── Page: Competitors ────────────────────────────────────────────────────


def page_competitors() -> None:
    st.header("競合比較")
    org = _organization()
    if org is None or not org.competitors:
        st.info("No competitors registered — add them to `config/organization.yaml`.")
        return

    catalog = _service().catalog
    scorer = CompetitiveScorecard(catalog.scoring)
    name = st.selectbox("競合", [c.name for c in org.competitors])
    competitor = next(c for c in org.competitors if c.name == name)
    result = scorer.compare(org.positions, org.competitors, competitor, own_holidays=org.holidays)

    radar = pd.DataFrame(result.radar_rows(dict(catalog.axis_labels)))
    radar = radar.rename(columns={"own": org.name, "competitor": name}).set_index("axis")
    st.bar_chart(radar)

    rows = build_comparison_rows(org.positions, org.competitors, catalog.scoring.draw_tolerance)
    st.subheader("職種別給与比較")
    st.dataframe(pd.DataFrame([r.to_dict() for r in rows]), use_container_width=True, hide_index=True)


# ── Page: Pipeline ───────────────────────────────────────────────────────


def page_pipeline() -> None:
    st.header("選考パイプライン")
    catalog = _service().catalog
    entities = load_entities()
    if not entities:
        st.info("No applicants tracked yet.")
        return

    rows = PipelineFunnel(catalog.funnel("dashboard")).compute(entities)
    df = pd.DataFrame([r.to_dict() for r in rows])
    df["stage"] = df["stage"].map(lambda s: catalog.stage_labels.get(s, s))
    st.dataframe(
        df,
        use_container_width=True,
        column_config={
            "rate_percent": st.column_config.ProgressColumn("通過率", min_value=0, max_value=100, format="%d%%"),
        },
        hide_index=True,
    )


PAGES = {
    "適正給与設定": page_salary,
    "競合比較": page_competitors,
    "選考パイプライン": page_pipeline,
}


def main() -> None:
    st.set_page_config(page_title="Compensation Benchmark", layout="wide")
    choice = st.sidebar.radio("Menu", list(PAGES))
    PAGES[choice]()


if __name__ == "__main__":
    main()
