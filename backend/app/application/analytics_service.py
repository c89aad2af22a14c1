"""
Analytics use cases for the request path.
Wires the domain services to SQLAlchemy repositories and decides when the
metrics cache is consulted.
"""
from datetime import date, timedelta
from typing import List

from sqlalchemy.orm import Session

from app.domain.models.metrics import DailyMetrics, PeriodSummary, PeriodComparison
from app.domain.models.user import User, StreakStats
from app.domain.services.daily_metrics import DailyMetricsCalculator
from app.domain.services.period_aggregator import PeriodAggregator
from app.domain.services.score_engine import ScoreEngine
from app.domain.services.streak_tracker import StreakTracker
from app.infrastructure.cache.metrics_cache import MetricsCache, metrics_cache, daily_key, period_key
from app.infrastructure.repositories.activity_repository import ActivityRepository
from app.infrastructure.repositories.metrics_repository import MetricsRepository
from app.infrastructure.repositories.user_repository import UserRepository


class AnalyticsService:
    def __init__(self, db: Session, cache: MetricsCache = None):
        self.cache = cache if cache is not None else metrics_cache
        self.users = UserRepository(db)
        self.metrics = MetricsRepository(db)
        self.streaks = StreakTracker(self.users, self.metrics)
        self.calculator = DailyMetricsCalculator(
            ActivityRepository(db), self.metrics, self.users, self.streaks, ScoreEngine()
        )
        self.periods = PeriodAggregator(self.metrics)

    def daily(self, user_id: int, day: date, refresh: bool = False) -> DailyMetrics:
        key = daily_key(user_id, day)
        if not refresh:
            cached = self.cache.get(key)
            if cached is not None:
                return cached
        result = self.calculator.calculate(user_id, day)
        self.cache.put(key, result)
        return result

    def recalculate(self, user_id: int, day: date) -> DailyMetrics:
        """Recomputes day and drops every cached aggregate that covered it."""
        self.cache.invalidate_user_day(user_id, day)
        return self.daily(user_id, day, refresh=True)

    def daily_range(self, user_id: int, days: int, today: date) -> List[DailyMetrics]:
        start = today - timedelta(days=days - 1)
        return [self.daily(user_id, start + timedelta(days=i)) for i in range(days)]

    def summarize(self, user_id: int, start: date, end: date, today: date) -> PeriodSummary:
        key = period_key(user_id, start, end)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        if start <= today <= end:
            # today's row is not written by the nightly job yet
            self.daily(user_id, today)
        summary = self.periods.summarize(user_id, start, end)
        self.cache.put(key, summary)
        return summary

    def compare(
        self,
        user_id: int,
        current_start: date,
        current_end: date,
        previous_start: date,
        previous_end: date,
        today: date,
    ) -> PeriodComparison:
        current = self.summarize(user_id, current_start, current_end, today)
        previous = self.summarize(user_id, previous_start, previous_end, today)
        return self.periods.compare(current, previous)

    def refresh(self, user_id: int):
        self.cache.invalidate_user(user_id)

    def evaluate_streak(self, user_id: int, day: date) -> User:
        return self.streaks.evaluate(user_id, day, self.daily(user_id, day))

    def streak(self, user_id: int, today: date) -> StreakStats:
        """On-demand streak evaluation for today, then the read model."""
        self.evaluate_streak(user_id, today)
        return self.streaks.stats(user_id, today)
