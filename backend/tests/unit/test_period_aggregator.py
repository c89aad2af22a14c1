import pytest
from datetime import date, timedelta

from app.domain.models.metrics import DailyMetrics
from app.domain.services.period_aggregator import PeriodAggregator, percentage_change, trend

START = date(2024, 3, 4)


@pytest.fixture
def aggregator(metrics_store):
    return PeriodAggregator(metrics_store)


def seed(store, offset, **fields):
    store.save_daily_metrics(DailyMetrics(user_id=1, metric_date=START + timedelta(days=offset), **fields))


class TestHelpers:

    @pytest.mark.parametrize("old, new, expected", [
        (10, 15, 50.0),
        (10, 5, -50.0),
        (0, 5, 100.0),
        (0, 0, 0.0),
        (None, 3, 0.0),
    ])
    def test_percentage_change(self, old, new, expected):
        assert percentage_change(old, new) == pytest.approx(expected)

    @pytest.mark.parametrize("change, expected", [
        (4.99, "stable"), (-4.99, "stable"), (5.0, "up"), (-5.0, "down"), (None, "stable"),
    ])
    def test_trend(self, change, expected):
        assert trend(change) == expected


class TestSummarize:

    def test_missing_days_count_as_zero(self, aggregator, metrics_store):
        seed(metrics_store, 0, tasks_completed=6, focus_minutes=100, productivity_score=60.0)
        seed(metrics_store, 2, tasks_completed=3, focus_minutes=50, productivity_score=30.0)

        s = aggregator.summarize(1, START, START + timedelta(days=3))

        assert s.days == 4
        assert s.totals["tasks_completed"] == 9
        assert s.tasks_completed == 2          # 9 // 4
        assert s.focus_minutes == 37           # 150 // 4
        assert s.productivity_score == pytest.approx(22.5)

    def test_completion_rate_from_totals(self, aggregator, metrics_store):
        seed(metrics_store, 0, tasks_created=4, tasks_completed_same_day=4)
        seed(metrics_store, 1, tasks_created=6, tasks_completed_same_day=1)
        s = aggregator.summarize(1, START, START + timedelta(days=1))
        assert s.completion_rate == pytest.approx(50.0)

    def test_empty_period(self, aggregator):
        s = aggregator.summarize(1, START, START + timedelta(days=6))
        assert s.days == 7
        assert s.completion_rate == 0.0
        assert s.burnout_risk_score == 0.0

    def test_other_users_ignored(self, aggregator, metrics_store):
        metrics_store.save_daily_metrics(DailyMetrics(user_id=2, metric_date=START, tasks_completed=50))
        assert aggregator.summarize(1, START, START).tasks_completed == 0

    def test_reversed_range_rejected(self, aggregator):
        with pytest.raises(ValueError):
            aggregator.summarize(1, START, START - timedelta(days=1))

    def test_daily_series_is_contiguous(self, aggregator, metrics_store):
        seed(metrics_store, 1, tasks_completed=2)
        series = aggregator.daily_series(1, START, START + timedelta(days=2))
        assert [m.metric_date for m in series] == [START + timedelta(days=i) for i in range(3)]
        assert [m.tasks_completed for m in series] == [0, 2, 0]


class TestCompare:

    def test_week_over_week(self, aggregator, metrics_store):
        for i in range(7):
            seed(metrics_store, i, tasks_completed=2, focus_minutes=60, productivity_score=40.0)
            seed(metrics_store, i + 7, tasks_completed=3, focus_minutes=61, productivity_score=40.0,
                 burnout_risk_score=10.0)

        previous = aggregator.summarize(1, START, START + timedelta(days=6))
        current = aggregator.summarize(1, START + timedelta(days=7), START + timedelta(days=13))
        result = aggregator.compare(current, previous)

        assert result.tasks.change == 50.0
        assert result.tasks.trend == "up"
        assert result.productivity.trend == "stable"
        assert result.focus.change == pytest.approx(1.67)
        assert result.focus.trend == "stable"
        assert result.burnout.change == 100.0
        assert result.burnout.previous == 0.0
