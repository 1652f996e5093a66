#!/usr/bin/env python3
"""Entry point to build a salary / competitor / pipeline benchmark report."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from compbench.config import CONFIG_DIR, ORGANIZATION_PATH, get_env, load_catalog, load_organization
from compbench.errors import BenchmarkError
from compbench.log import get_logger

log = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Build a compensation benchmark report")
    p.add_argument("--region", default="東京都")
    p.add_argument("--role", default="看護師")
    p.add_argument("--employment-type", default="FULL_TIME", choices=["FULL_TIME", "PART_TIME"])
    p.add_argument("--salary", type=float, default=None, help="Offer to position (default: median)")
    p.add_argument("--premium", action="append", default=[], help="Enabled premium id (repeatable)")
    p.add_argument("--org", type=Path, default=None, help="Organization YAML (positions + competitors)")
    p.add_argument("--funnel", default="export", help="Funnel stage list from the catalog")
    p.add_argument("--no-write", action="store_true", help="Print the report instead of saving it")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    from compbench.benchmark import BenchmarkService
    from compbench.funnel import PipelineFunnel
    from compbench.report import build_report, write_report
    from compbench.scorecard import CompetitiveScorecard, build_comparison_rows
    from compbench.sources import get_source
    from compbench.tracker import load_entities

    try:
        catalog = load_catalog()
        service = BenchmarkService(get_source(get_env), catalog)
        benchmark = service.evaluate(
            args.region, args.role, args.employment_type,
            candidate=args.salary, enabled_premiums=args.premium,
        )

        org_path = args.org or ORGANIZATION_PATH
        if not org_path.exists():
            org_path = CONFIG_DIR / "organization.example.yaml"
        org = load_organization(org_path)

        scorecards, comparison = [], []
        if org is not None:
            scorer = CompetitiveScorecard(catalog.scoring)
            scorecards = [
                scorer.compare(org.positions, org.competitors, comp, own_holidays=org.holidays)
                for comp in org.competitors
            ]
            comparison = build_comparison_rows(
                org.positions, org.competitors, catalog.scoring.draw_tolerance,
            )

        funnel = PipelineFunnel(catalog.funnel(args.funnel)).compute(load_entities())
    except BenchmarkError as exc:
        log.error("Report failed: %s", exc)
        return 1

    content = build_report(
        benchmark=benchmark,
        scorecards=scorecards,
        comparison=comparison,
        funnel=funnel,
        axis_labels=catalog.axis_labels,
        stage_labels=catalog.stage_labels,
    )
    if args.no_write:
        print(content)
    else:
        path = write_report(content)
        log.info("Report: %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
