"""
Tests for distribution synthesis, percentile lookup and market position.
"""

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from compbench.models import EmploymentType, MarketPosition, SalarySummary
from compbench.percentile import (
    classify_market_position,
    locate_percentile,
    synthesize_distribution,
)


class TestSynthesizeDistribution:
    """Bucket shape and normalization."""

    def test_ten_contiguous_buckets(self, nurse_summary):
        buckets = synthesize_distribution(nurse_summary)
        assert len(buckets) == 10
        assert buckets[0].range_min == 200000
        assert buckets[-1].range_max == pytest.approx(400000)
        for a, b in zip(buckets, buckets[1:]):
            assert a.range_max == pytest.approx(b.range_min)

    def test_percentages_sum_to_100(self, nurse_summary, hourly_summary):
        for summary in (nurse_summary, hourly_summary):
            total = sum(b.percentage for b in synthesize_distribution(summary))
            assert abs(total - 100) <= 0.5

    def test_peak_around_median(self, nurse_summary):
        buckets = synthesize_distribution(nurse_summary)
        peak = max(b.percentage for b in buckets)
        # median sits on the boundary between buckets 4 and 5
        assert buckets[4].percentage == peak
        assert buckets[5].percentage == peak
        assert buckets[0].percentage < buckets[4].percentage

    def test_one_decimal_rounding(self, nurse_summary):
        for b in synthesize_distribution(nurse_summary):
            assert round(b.percentage, 1) == b.percentage

    def test_quartile_flags(self, nurse_summary):
        buckets = synthesize_distribution(nurse_summary)
        # [240000, 260000) ends at p25
        assert buckets[2].is_below_25
        assert not buckets[2].is_25_to_75
        # [260000, 280000) and [320000, 340000) are inside the IQR
        assert buckets[3].is_25_to_75
        assert buckets[6].is_25_to_75
        # [340000, 360000) starts at p75
        assert buckets[7].is_above_75
        assert not buckets[7].is_25_to_75

    def test_straddling_bucket_has_no_flag(self):
        summary = SalarySummary(minimum=200000, p25=255000, median=300000, p75=345000, maximum=400000)
        bucket = synthesize_distribution(summary)[2]  # [240000, 260000)
        assert not (bucket.is_below_25 or bucket.is_25_to_75 or bucket.is_above_75)

    def test_zero_spread_puts_all_mass_in_median_bucket(self):
        summary = SalarySummary(minimum=200000, p25=300000, median=300000, p75=300000, maximum=400000)
        buckets = synthesize_distribution(summary)
        assert [b.percentage for b in buckets] == [0, 0, 0, 0, 0, 100.0, 0, 0, 0, 0]

    def test_zero_width_range(self):
        summary = SalarySummary(minimum=250000, p25=250000, median=250000, p75=250000, maximum=250000)
        buckets = synthesize_distribution(summary)
        assert len(buckets) == 10
        assert buckets[0].percentage == 100.0
        assert sum(b.percentage for b in buckets) == 100.0

    def test_labels_by_unit(self, nurse_summary, hourly_summary):
        assert synthesize_distribution(nurse_summary)[0].label == "20〜22万"
        assert hourly_summary.employment_type == EmploymentType.PART_TIME
        assert synthesize_distribution(hourly_summary)[0].label.endswith("円")


class TestLocatePercentile:
    """Piecewise-linear interpolation over the five anchors."""

    def test_anchor_points(self, nurse_summary):
        assert locate_percentile(200000, nurse_summary) == 0
        assert locate_percentile(260000, nurse_summary) == 25
        assert locate_percentile(300000, nurse_summary) == 50
        assert locate_percentile(340000, nurse_summary) == 75
        assert locate_percentile(400000, nurse_summary) == 100

    def test_interpolates_between_anchors(self, nurse_summary):
        assert locate_percentile(280000, nurse_summary) == pytest.approx(37.5)
        assert locate_percentile(370000, nurse_summary) == pytest.approx(87.5)
        assert locate_percentile(230000, nurse_summary) == pytest.approx(12.5)

    def test_clamps_outside_range(self, nurse_summary):
        assert locate_percentile(150000, nurse_summary) == 0
        assert locate_percentile(500000, nurse_summary) == 100

    def test_monotonic(self, nurse_summary):
        values = [locate_percentile(v, nurse_summary) for v in range(180000, 420001, 2500)]
        assert values == sorted(values)

    def test_collapsed_quartiles_do_not_divide_by_zero(self):
        summary = SalarySummary(minimum=200000, p25=300000, median=300000, p75=300000, maximum=400000)
        assert locate_percentile(300000, summary) == 50
        assert locate_percentile(250000, summary) == pytest.approx(12.5)
        assert locate_percentile(350000, summary) == pytest.approx(87.5)

    def test_median_equal_to_p25_maps_to_50(self):
        summary = SalarySummary(minimum=200000, p25=300000, median=300000, p75=340000, maximum=400000)
        assert locate_percentile(300000, summary) == 50
        assert locate_percentile(299999, summary) < 25
        assert locate_percentile(320000, summary) == pytest.approx(62.5)


# Non-decreasing five-number summaries; a narrow value range forces ties
_anchor_values = st.one_of(
    st.integers(min_value=0, max_value=6),
    st.integers(min_value=100000, max_value=600000),
)
summaries = st.lists(_anchor_values, min_size=5, max_size=5).map(sorted).map(
    lambda v: SalarySummary(minimum=v[0], p25=v[1], median=v[2], p75=v[3], maximum=v[4])
)


class TestSummaryProperties:
    """Properties that hold for every non-decreasing summary."""

    @given(summary=summaries)
    @settings(max_examples=300)
    def test_extremes_and_median(self, summary):
        assert locate_percentile(summary.minimum, summary) == 0
        assert locate_percentile(summary.maximum, summary) == 100 or summary.maximum == summary.minimum
        assume(summary.minimum < summary.median < summary.maximum)
        assert locate_percentile(summary.median, summary) == 50

    @given(summary=summaries, a=st.integers(-10, 700000), b=st.integers(-10, 700000))
    @settings(max_examples=300)
    def test_monotonic(self, summary, a, b):
        low, high = sorted((a, b))
        assert locate_percentile(low, summary) <= locate_percentile(high, summary)

    @given(summary=summaries, value=st.integers(-10, 700000))
    @settings(max_examples=200)
    def test_bounded(self, summary, value):
        assert 0 <= locate_percentile(value, summary) <= 100

    @given(summary=summaries)
    @settings(max_examples=300)
    def test_buckets_sum_to_100(self, summary):
        buckets = synthesize_distribution(summary)
        assert len(buckets) == 10
        assert abs(sum(b.percentage for b in buckets) - 100) <= 0.5


class TestClassifyMarketPosition:
    """Four bands with fixed boundary ownership."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (259999, MarketPosition.TOO_LOW),
            (260000, MarketPosition.FAIR_LOW),
            (280000, MarketPosition.FAIR_LOW),
            (300000, MarketPosition.FAIR),
            (340000, MarketPosition.FAIR),
            (340001, MarketPosition.COMPETITIVE),
        ],
    )
    def test_bands(self, nurse_summary, value, expected):
        assert classify_market_position(value, nurse_summary) == expected

    def test_idempotent(self, nurse_summary):
        first = classify_market_position(280000, nurse_summary)
        assert classify_market_position(280000, nurse_summary) == first
