"""
Period Aggregator: averages persisted daily metrics over a date range and
compares two ranges.
"""
from datetime import date, timedelta
from typing import Dict, List

from app.domain.models.metrics import DailyMetrics, PeriodSummary, PeriodComparison, MetricChange
from app.domain.ports import MetricsStore

STABLE_THRESHOLD = 5.0

COUNT_FIELDS = [
    "tasks_created", "tasks_completed", "tasks_completed_same_day",
    "pomodoros_completed", "focus_minutes", "break_minutes",
]
SCORE_FIELDS = ["productivity_score", "focus_score", "burnout_risk_score"]


def percentage_change(old: float, new: float) -> float:
    if old is None or new is None:
        return 0.0
    if old == 0:
        return 100.0 if new > 0 else 0.0
    return (new - old) / old * 100


def trend(change: float) -> str:
    if change is None or abs(change) < STABLE_THRESHOLD:
        return "stable"
    return "up" if change > 0 else "down"


class PeriodAggregator:
    def __init__(self, metrics: MetricsStore):
        self.metrics = metrics

    def daily_series(self, user_id: int, start: date, end: date) -> List[DailyMetrics]:
        """One row per calendar day; days without a persisted row are zero rows."""
        by_day: Dict[date, DailyMetrics] = {
            m.metric_date: m for m in self.metrics.list_between(user_id, start, end)
        }
        series = []
        day = start
        while day <= end:
            series.append(by_day.get(day) or DailyMetrics(user_id=user_id, metric_date=day))
            day += timedelta(days=1)
        return series

    def summarize(self, user_id: int, start: date, end: date) -> PeriodSummary:
        if end < start:
            raise ValueError("end date must not be before start date")

        series = self.daily_series(user_id, start, end)
        days = len(series)
        totals = {f: sum(getattr(m, f) for m in series) for f in COUNT_FIELDS}

        summary = PeriodSummary(user_id=user_id, start_date=start, end_date=end, days=days, totals=totals)
        for f in COUNT_FIELDS:
            setattr(summary, f, totals[f] // days)
        for f in SCORE_FIELDS:
            setattr(summary, f, sum(getattr(m, f) for m in series) / days)
        summary.completion_rate = (
            totals["tasks_completed_same_day"] / totals["tasks_created"] * 100
            if totals["tasks_created"] else 0.0
        )
        return summary

    def compare(self, current: PeriodSummary, previous: PeriodSummary) -> PeriodComparison:
        def change(attr: str) -> MetricChange:
            old, new = getattr(previous, attr), getattr(current, attr)
            pct = percentage_change(old, new)
            return MetricChange(previous=old, current=new, change=round(pct, 2), trend=trend(pct))

        return PeriodComparison(
            current=current,
            previous=previous,
            tasks=change("tasks_completed"),
            productivity=change("productivity_score"),
            focus=change("focus_minutes"),
            burnout=change("burnout_risk_score"),
        )
