"""
Persistence boundary consumed by the analytics engine.
SQLAlchemy adapters live in app.infrastructure.repositories.
"""
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional

from app.domain.models.task import Task
from app.domain.models.focus_session import FocusSession
from app.domain.models.metrics import DailyMetrics
from app.domain.models.goal import Goal
from app.domain.models.badge import Badge, BadgeType
from app.domain.models.user import User


class ActivityReader(ABC):
    """Read-only view over tasks and focus sessions."""

    @abstractmethod
    def list_tasks_created_between(self, user_id: int, start: datetime, end: datetime) -> List[Task]:
        pass

    @abstractmethod
    def list_tasks_completed_between(self, user_id: int, start: datetime, end: datetime) -> List[Task]:
        """Tasks in COMPLETED status whose status changed inside [start, end)."""
        pass

    @abstractmethod
    def list_open_tasks(self, user_id: int) -> List[Task]:
        """Every task not in COMPLETED status, regardless of date."""
        pass

    @abstractmethod
    def list_sessions_started_between(self, user_id: int, start: datetime, end: datetime) -> List[FocusSession]:
        pass

    @abstractmethod
    def count_completed_tasks(self, user_id: int) -> int:
        pass

    @abstractmethod
    def count_completed_work_sessions(self, user_id: int) -> int:
        pass


class UserStore(ABC):
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    def save_user(self, user: User) -> User:
        """Persists the streak fields only."""
        pass

    @abstractmethod
    def list_user_ids(self) -> List[int]:
        pass

    @abstractmethod
    def list_users_with_broken_streaks(self, yesterday: date) -> List[User]:
        """Users with current_streak > 0 and last_activity_date < yesterday."""
        pass


class MetricsStore(ABC):
    @abstractmethod
    def find_daily_metrics(self, user_id: int, metric_date: date) -> Optional[DailyMetrics]:
        pass

    @abstractmethod
    def save_daily_metrics(self, metrics: DailyMetrics) -> DailyMetrics:
        """Upsert on (user_id, metric_date)."""
        pass

    @abstractmethod
    def list_between(self, user_id: int, start: date, end: date) -> List[DailyMetrics]:
        pass

    @abstractmethod
    def delete_before(self, cutoff: date) -> int:
        pass


class GoalStore(ABC):
    @abstractmethod
    def find_goals(self, user_id: int, active_only: bool = False) -> List[Goal]:
        pass

    @abstractmethod
    def get_goal(self, goal_id: int, user_id: int) -> Optional[Goal]:
        pass

    @abstractmethod
    def save_goal(self, goal: Goal) -> Goal:
        pass

    @abstractmethod
    def count_completed_goals(self, user_id: int) -> int:
        pass


class BadgeStore(ABC):
    @abstractmethod
    def badge_exists(self, user_id: int, badge_type: BadgeType) -> bool:
        pass

    @abstractmethod
    def save_badge(self, badge: Badge) -> Optional[Badge]:
        """Returns None when the (user, badge_type) pair already exists."""
        pass

    @abstractmethod
    def list_badges(self, user_id: int) -> List[Badge]:
        pass
