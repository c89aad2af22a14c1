"""
Daily Metrics Calculator.

Builds one DailyMetrics row for (user, date) from raw tasks and focus sessions,
then scores it. Recomputing the same day overwrites the existing row.
"""
from datetime import date, datetime, time, timedelta
from typing import List, Tuple

from app.core.exceptions import UserNotFoundError
from app.core.logging import get_logger
from app.domain.models.focus_session import FocusSession, DayPeriod
from app.domain.models.metrics import DailyMetrics
from app.domain.models.task import Task, EisenhowerQuadrant
from app.domain.ports import ActivityReader, MetricsStore, UserStore
from app.domain.services.score_engine import ScoreEngine, MAX_HEALTHY_MINUTES
from app.domain.services.streak_tracker import StreakTracker

logger = get_logger(__name__)

_PERIOD_FIELDS = {
    DayPeriod.MORNING: "morning_focus_minutes",
    DayPeriod.AFTERNOON: "afternoon_focus_minutes",
    DayPeriod.EVENING: "evening_focus_minutes",
    DayPeriod.NIGHT: "night_focus_minutes",
}

_QUADRANT_FIELDS = {
    EisenhowerQuadrant.URGENT_IMPORTANT: "urgent_important",
    EisenhowerQuadrant.NOT_URGENT_IMPORTANT: "not_urgent_important",
    EisenhowerQuadrant.URGENT_NOT_IMPORTANT: "urgent_not_important",
    EisenhowerQuadrant.NOT_URGENT_NOT_IMPORTANT: "not_urgent_not_important",
}


def day_window(target_date: date) -> Tuple[datetime, datetime]:
    """[target_date 00:00, target_date+1 00:00)"""
    start = datetime.combine(target_date, time.min)
    return start, start + timedelta(days=1)


class DailyMetricsCalculator:
    def __init__(
        self,
        activity: ActivityReader,
        metrics: MetricsStore,
        users: UserStore,
        streaks: StreakTracker,
        scores: ScoreEngine = None,
    ):
        self.activity = activity
        self.metrics = metrics
        self.users = users
        self.streaks = streaks
        self.scores = scores or ScoreEngine()

    # ──── Public API ──────────────────────────────────────────────────────────
    def calculate(self, user_id: int, target_date: date) -> DailyMetrics:
        if self.users.get_user(user_id) is None:
            raise UserNotFoundError(user_id)

        existing = self.metrics.find_daily_metrics(user_id, target_date)
        row = DailyMetrics(
            user_id=user_id,
            metric_date=target_date,
            id=existing.id if existing else None,
        )

        start, end = day_window(target_date)
        self._task_metrics(row, user_id, start, end)
        self._session_metrics(row, self.activity.list_sessions_started_between(user_id, start, end))
        self._eisenhower_distribution(row, self.activity.list_open_tasks(user_id))
        row.consecutive_work_days = self.streaks.consecutive_work_days(
            user_id, target_date, row.is_productive()
        )
        self.scores.apply(row)

        saved = self.metrics.save_daily_metrics(row)
        logger.debug(
            "Daily metrics calculated",
            user_id=user_id,
            day=str(target_date),
            productivity=round(saved.productivity_score, 2),
            focus=round(saved.focus_score, 2),
            burnout=round(saved.burnout_risk_score, 2),
        )
        return saved

    # ──── Private helpers ─────────────────────────────────────────────────────
    def _task_metrics(self, row: DailyMetrics, user_id: int, start: datetime, end: datetime):
        created = self.activity.list_tasks_created_between(user_id, start, end)
        completed = self.activity.list_tasks_completed_between(user_id, start, end)

        row.tasks_created = len(created)
        row.tasks_completed = len(completed)
        row.tasks_completed_same_day = sum(1 for t in created if t.completed_within(start, end))
        row.completion_rate = (
            round(row.tasks_completed_same_day / row.tasks_created * 100, 2)
            if row.tasks_created else 0.0
        )

    def _session_metrics(self, row: DailyMetrics, sessions: List[FocusSession]):
        for session in sessions:
            if session.completed:
                duration = session.work_duration()
                row.pomodoros_completed += 1
                row.focus_minutes += duration
                row.break_minutes += session.break_minutes or 0
                field = _PERIOD_FIELDS[session.period()]
                setattr(row, field, getattr(row, field) + duration)
            else:
                row.interrupted_sessions += 1

            if session.is_late_night():
                row.late_night_sessions += 1

        row.overwork_minutes = max(0, row.focus_minutes - MAX_HEALTHY_MINUTES)

    def _eisenhower_distribution(self, row: DailyMetrics, open_tasks: List[Task]):
        for task in open_tasks:
            field = _QUADRANT_FIELDS[task.quadrant()]
            setattr(row, field, getattr(row, field) + 1)
