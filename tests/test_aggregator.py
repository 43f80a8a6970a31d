"""Tests for summary statistics and hourly trend bucketing."""

from datetime import timedelta

import pytest

from hatewatch.aggregator import (
    average_confidence,
    count_classifications,
    dashboard_metrics,
    hourly_trend,
    percent_distribution,
    recent_activity,
    summarize,
)


def test_counts_sum_to_total(sample_results):
    counts = count_classifications(sample_results)

    assert counts.to_dict() == {"neutral": 2, "offensive": 1, "hate": 1}
    assert counts.total == len(sample_results)


def test_empty_collection_has_zero_defaults(fixed_now):
    summary = summarize([], now=fixed_now)

    assert summary.total == 0
    assert summary.average_confidence == 0.0
    assert summary.percent_distribution.to_dict() == {"neutral": 0.0, "offensive": 0.0, "hate": 0.0}
    assert summary.trend.neutral == [0.0] * 7
    assert summary.trend.hate == [0.0] * 7


def test_three_way_split_at_ninety(fixed_now, result_factory):
    results = [result_factory(name, 90.0) for name in ("Neutral", "Offensive", "Hate")]

    summary = summarize(results, now=fixed_now)

    assert summary.total == 3
    assert summary.average_confidence == pytest.approx(90.0)
    assert summary.classification_counts.to_dict() == {"neutral": 1, "offensive": 1, "hate": 1}
    distribution = summary.percent_distribution
    assert distribution.neutral == pytest.approx(33.33, abs=0.01)
    assert distribution.offensive == pytest.approx(33.33, abs=0.01)
    assert distribution.hate == pytest.approx(33.33, abs=0.01)


def test_distribution_sums_to_hundred(sample_results):
    distribution = percent_distribution(count_classifications(sample_results))
    assert sum(distribution.to_dict().values()) == pytest.approx(100.0)


def test_average_confidence(sample_results):
    assert average_confidence(sample_results) == pytest.approx((95 + 85 + 70 + 87.25) / 4)


def test_summarize_does_not_mutate_input(sample_results, fixed_now):
    snapshot = list(sample_results)
    summarize(sample_results, now=fixed_now)
    assert sample_results == snapshot


def test_trend_buckets_end_at_current_hour(fixed_now, result_factory):
    results = [
        result_factory("Hate", 90.0, timestamp=fixed_now.replace(hour=13, minute=10)),
        result_factory("Neutral", 90.0, timestamp=fixed_now.replace(hour=14, minute=5)),
        result_factory("Offensive", 90.0, timestamp=fixed_now.replace(hour=14, minute=20)),
    ]

    trend = hourly_trend(results, now=fixed_now)

    assert trend.hours == [8, 9, 10, 11, 12, 13, 14]
    assert trend.hate[5] == pytest.approx(100.0)
    assert trend.neutral[6] == pytest.approx(50.0)
    assert trend.offensive[6] == pytest.approx(50.0)
    assert trend.neutral[0] == 0.0


def test_trend_wraps_around_midnight(fixed_now):
    now = fixed_now.replace(hour=2)
    trend = hourly_trend([], now=now)
    assert trend.hours == [20, 21, 22, 23, 0, 1, 2]


def test_trend_uses_hour_of_day_unless_rolling(fixed_now, result_factory):
    yesterday = result_factory("Hate", 90.0, timestamp=fixed_now - timedelta(days=1))

    by_hour = hourly_trend([yesterday], now=fixed_now)
    rolling = hourly_trend([yesterday], now=fixed_now, rolling=True)

    assert by_hour.hate[-1] == pytest.approx(100.0)
    assert rolling.hate[-1] == 0.0


def test_recent_activity_is_newest_first(sample_results, fixed_now):
    activity = recent_activity(sample_results, limit=2, now=fixed_now)

    assert [item.id for item in activity] == ["r1", "r2"]
    assert activity[0].time == "2 mins ago"
    assert activity[1].time == "1 hour ago"


def test_dashboard_metrics(sample_results, fixed_now):
    metrics = dashboard_metrics(sample_results, now=fixed_now)

    assert metrics.total == 4
    assert metrics.hate_percent == pytest.approx(25.0)
    assert metrics.offensive_percent == pytest.approx(25.0)
    assert len(metrics.recent_activity) == 4


@pytest.mark.parametrize("hours", [0, -1, 25])
def test_trend_rejects_hours_outside_a_day(fixed_now, hours):
    with pytest.raises(ValueError):
        hourly_trend([], now=fixed_now, hours=hours)


def test_full_day_trend_has_distinct_buckets(fixed_now):
    trend = hourly_trend([], now=fixed_now, hours=24)
    assert sorted(trend.hours) == list(range(24))


def test_dashboard_accepts_utc_timestamps(fixed_now, result_factory):
    from hatewatch.normalizer import normalize_record

    utc_result = normalize_record(
        {"Tweet": "late post", "Prediction": "hate", "Score": "0.9", "Timestamp": "2026-10-19T14:00:00Z"}
    )
    results = [utc_result, result_factory("Neutral", 80.0, timestamp=fixed_now)]

    metrics = dashboard_metrics(results, now=fixed_now)
    trend = hourly_trend(results, now=fixed_now, rolling=True)

    assert metrics.total == 2
    assert len(metrics.recent_activity) == 2
    assert len(trend.hours) == 7
