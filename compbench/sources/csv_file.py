"""Benchmark table loaded from a CSV export of salary survey data."""
from __future__ import annotations

import csv
from pathlib import Path

from compbench.log import get_logger
from compbench.models import EmploymentType, SalarySummary
from compbench.sources.base import BenchmarkSource, filter_entries

log = get_logger(__name__)

HEADERS: list[str] = [
    "region", "role", "employment_type",
    "min", "p25", "median", "p75", "max", "sample_size",
]


def _row_to_summary(row: dict[str, str]) -> SalarySummary:
    return SalarySummary(
        minimum=float(row["min"]),
        p25=float(row["p25"]),
        median=float(row["median"]),
        p75=float(row["p75"]),
        maximum=float(row["max"]),
        sample_size=int(row.get("sample_size") or 0),
        region=row["region"].strip(),
        role=row["role"].strip(),
        employment_type=EmploymentType(row["employment_type"].strip()),
    )


class CsvBenchmarkSource(BenchmarkSource):
    """Rows that fail to parse are skipped with a warning."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._data: list[SalarySummary] = []
        with open(self.path, "r", encoding="utf-8", newline="") as f:
            for line_no, row in enumerate(csv.DictReader(f), start=2):
                try:
                    self._data.append(_row_to_summary(row))
                except (KeyError, TypeError, ValueError) as exc:
                    log.warning("%s:%d skipped (%s)", self.path.name, line_no, exc)
        log.info("Loaded %d benchmark rows from %s", len(self._data), self.path.name)

    def entries(self, region=None, role=None, employment_type=None) -> list[SalarySummary]:
        return filter_entries(self._data, region, role, employment_type)


def write_summaries(path: Path, summaries: list[SalarySummary]) -> None:
    """Dump summaries in the layout CsvBenchmarkSource reads."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=HEADERS)
        writer.writeheader()
        for s in summaries:
            d = s.to_dict()
            writer.writerow({k: d[k] for k in HEADERS})
