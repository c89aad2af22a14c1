"""
Streak Tracker: consecutive productive days per user.

A productive day is >= 30 focus minutes or >= 1 completed task. Streak state
lives on the user row and only this module writes it.
"""
from datetime import date, timedelta
from typing import List

from app.core.exceptions import UserNotFoundError
from app.core.logging import get_logger
from app.domain.models.metrics import DailyMetrics
from app.domain.models.user import User, StreakStats
from app.domain.ports import MetricsStore, UserStore

LOOKBACK_DAYS = 30

logger = get_logger(__name__)


class StreakTracker:
    def __init__(self, users: UserStore, metrics: MetricsStore):
        self.users = users
        self.metrics = metrics

    # ──── Daily evaluation ────────────────────────────────────────────────────
    def evaluate(self, user_id: int, today: date, today_metrics: DailyMetrics) -> User:
        user = self.users.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        if not today_metrics.is_productive():
            # grace until the day boundary passes; the nightly sweep handles resets
            logger.debug("Not a productive day yet", user_id=user_id, day=str(today))
            return user

        last = user.last_activity_date
        yesterday = today - timedelta(days=1)

        if last is None:
            user.current_streak = 1
            user.longest_streak = max(user.longest_streak, 1)
            logger.info("First streak started", user_id=user_id)
        elif last >= today:
            return user
        elif last == yesterday:
            user.current_streak += 1
            if user.current_streak > user.longest_streak:
                user.longest_streak = user.current_streak
                logger.info("New longest streak", user_id=user_id, days=user.current_streak)
        else:
            logger.info("Streak broken, restarting", user_id=user_id, previous=user.current_streak)
            user.current_streak = 1
            user.longest_streak = max(user.longest_streak, 1)

        user.last_activity_date = today
        return self.users.save_user(user)

    # ──── Nightly reset ───────────────────────────────────────────────────────
    def reset_broken_streaks(self, today: date) -> int:
        """Zeroes current_streak for users who missed yesterday. Keeps longest and last date."""
        yesterday = today - timedelta(days=1)
        broken: List[User] = self.users.list_users_with_broken_streaks(yesterday)
        count = 0
        for user in broken:
            try:
                previous = user.current_streak
                user.current_streak = 0
                self.users.save_user(user)
                count += 1
                logger.info(
                    "Streak reset", user_id=user.id, previous=previous,
                    last_activity=str(user.last_activity_date)
                )
            except Exception:
                logger.exception("Streak reset failed", user_id=user.id)
        return count

    # ──── Read model ──────────────────────────────────────────────────────────
    def stats(self, user_id: int, today: date) -> StreakStats:
        user = self.users.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        current = 0 if user.streak_broken_as_of(today) else user.current_streak
        return StreakStats(
            current_streak=current,
            longest_streak=user.longest_streak,
            last_activity_date=user.last_activity_date,
        )

    # ──── Backward lookback ───────────────────────────────────────────────────
    def consecutive_work_days(self, user_id: int, target_date: date, today_productive: bool) -> int:
        if not today_productive:
            return 0

        days = 1
        check = target_date - timedelta(days=1)
        for _ in range(LOOKBACK_DAYS):
            previous = self.metrics.find_daily_metrics(user_id, check)
            if previous is None or not previous.is_productive():
                break
            days += 1
            check -= timedelta(days=1)
        return days
