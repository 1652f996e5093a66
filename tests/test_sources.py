"""
Tests for the seeded benchmark table and the CSV source.
"""

import pytest

from compbench.models import EmploymentType, SalarySummary
from compbench.sources import (
    CsvBenchmarkSource,
    SeededBenchmarkSource,
    get_source,
)
from compbench.sources.csv_file import HEADERS, write_summaries
from compbench.sources.seeded import JOB_TITLES, PREFECTURES, build_salary_data


@pytest.fixture(scope="module")
def seeded() -> SeededBenchmarkSource:
    return SeededBenchmarkSource()


class TestSeededTable:

    def test_covers_every_combination(self, seeded):
        entries = seeded.entries()
        assert len(entries) == len(PREFECTURES) * len(JOB_TITLES) * 2 == 128

    def test_tokyo_nurse_full_time(self, seeded):
        s = seeded.lookup("東京都", "看護師", EmploymentType.FULL_TIME)
        assert (s.minimum, s.p25, s.median, s.p75, s.maximum) == (216000, 264000, 300000, 339000, 396000)

    def test_tokyo_nurse_part_time(self, seeded):
        s = seeded.lookup("東京都", "看護師", "PART_TIME")
        assert (s.minimum, s.p25, s.median, s.p75, s.maximum) == (1400, 1620, 1800, 2020, 2340)

    def test_regional_multiplier(self, seeded):
        osaka = seeded.lookup("大阪府", "看護師", EmploymentType.FULL_TIME)
        assert osaka.median == 285000

    def test_deterministic(self):
        assert build_salary_data() == build_salary_data()

    def test_seed_changes_sample_sizes_only(self):
        a, b = build_salary_data(42), build_salary_data(7)
        assert [x.median for x in a] == [x.median for x in b]
        assert [x.sample_size for x in a] != [x.sample_size for x in b]

    def test_rounding_granularity(self, seeded):
        for s in seeded.entries():
            step = 100 if s.employment_type == EmploymentType.FULL_TIME else 10
            for v in (s.minimum, s.p25, s.median, s.p75, s.maximum):
                assert v % step == 0

    def test_summaries_are_ordered(self, seeded):
        for s in seeded.entries():
            assert s.minimum <= s.p25 <= s.median <= s.p75 <= s.maximum
            assert s.sample_size > 0

    def test_lookup_miss(self, seeded):
        assert seeded.lookup("沖縄県", "看護師", EmploymentType.FULL_TIME) is None
        assert seeded.lookup("東京都", "看護師", EmploymentType.CONTRACT) is None

    def test_filter_by_region(self, seeded):
        entries = seeded.entries(region="福岡県", employment_type=EmploymentType.FULL_TIME)
        assert len(entries) == len(JOB_TITLES)
        assert {e.role for e in entries} == set(JOB_TITLES)


class TestCsvSource:

    def test_round_trip_through_csv(self, seeded, tmp_path):
        path = tmp_path / "bench.csv"
        write_summaries(path, seeded.entries(region="東京都"))
        source = CsvBenchmarkSource(path)
        assert len(source.entries()) == 16
        s = source.lookup("東京都", "看護師", EmploymentType.FULL_TIME)
        assert s.median == 300000
        assert s.sample_size == seeded.lookup("東京都", "看護師", EmploymentType.FULL_TIME).sample_size

    def test_bad_rows_skipped(self, tmp_path):
        path = tmp_path / "bench.csv"
        path.write_text(
            ",".join(HEADERS) + "\n"
            "東京都,看護師,FULL_TIME,200000,260000,300000,340000,400000,50\n"
            "東京都,薬剤師,FULL_TIME,abc,1,2,3,4,5\n"
            "東京都,医療事務,SEASONAL,1,2,3,4,5,6\n",
            encoding="utf-8",
        )
        source = CsvBenchmarkSource(path)
        assert source.entries() == [
            SalarySummary(
                minimum=200000, p25=260000, median=300000, p75=340000, maximum=400000,
                sample_size=50, region="東京都", role="看護師",
                employment_type=EmploymentType.FULL_TIME,
            )
        ]


class TestGetSource:

    def test_defaults_to_seeded(self):
        assert isinstance(get_source(lambda key: None), SeededBenchmarkSource)

    def test_missing_csv_falls_back(self, tmp_path):
        missing = str(tmp_path / "nope.csv")
        assert isinstance(get_source({"BENCHMARK_CSV": missing}.get), SeededBenchmarkSource)

    def test_csv_when_present(self, seeded, tmp_path):
        path = tmp_path / "bench.csv"
        write_summaries(path, seeded.entries(region="北海道"))
        source = get_source({"BENCHMARK_CSV": str(path)}.get)
        assert isinstance(source, CsvBenchmarkSource)
        assert len(source.entries()) == 16
