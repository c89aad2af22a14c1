"""
In-memory implementations of the domain ports.
Unit tests run the real services against these, no database involved.
"""
import copy
import pytest
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from app.domain.models.badge import Badge, BadgeType
from app.domain.models.focus_session import FocusSession
from app.domain.models.goal import Goal
from app.domain.models.metrics import DailyMetrics
from app.domain.models.task import Task
from app.domain.models.user import User
from app.domain.ports import ActivityReader, BadgeStore, GoalStore, MetricsStore, UserStore


class InMemoryActivity(ActivityReader):
    def __init__(self):
        self.tasks: List[Task] = []
        self.sessions: List[FocusSession] = []
        self.completed_goals = 0

    def list_tasks_created_between(self, user_id, start, end):
        return [t for t in self.tasks if t.user_id == user_id and start <= t.created_at < end]

    def list_tasks_completed_between(self, user_id, start, end):
        return [t for t in self.tasks if t.user_id == user_id and t.completed_within(start, end)]

    def list_open_tasks(self, user_id):
        return [t for t in self.tasks if t.user_id == user_id and not t.is_completed()]

    def list_sessions_started_between(self, user_id, start, end):
        return [s for s in self.sessions if s.user_id == user_id and start <= s.started_at < end]

    def count_completed_tasks(self, user_id):
        return sum(1 for t in self.tasks if t.user_id == user_id and t.is_completed())

    def count_completed_work_sessions(self, user_id):
        return sum(1 for s in self.sessions if s.user_id == user_id and s.is_completed_work())


class InMemoryUsers(UserStore):
    def __init__(self):
        self.users: Dict[int, User] = {}
        self.saves = 0

    def add(self, user: User) -> User:
        self.users[user.id] = user
        return user

    def get_user(self, user_id):
        user = self.users.get(user_id)
        return copy.copy(user) if user else None

    def save_user(self, user):
        self.saves += 1
        self.users[user.id] = copy.copy(user)
        return copy.copy(user)

    def list_user_ids(self):
        return sorted(self.users)

    def list_users_with_broken_streaks(self, yesterday: date):
        return [
            copy.copy(u) for u in self.users.values()
            if u.current_streak > 0 and u.last_activity_date and u.last_activity_date < yesterday
        ]


class InMemoryMetrics(MetricsStore):
    def __init__(self):
        self.rows: Dict[Tuple[int, date], DailyMetrics] = {}
        self._next_id = 1

    def find_daily_metrics(self, user_id, metric_date):
        row = self.rows.get((user_id, metric_date))
        return copy.copy(row) if row else None

    def save_daily_metrics(self, metrics):
        key = (metrics.user_id, metrics.metric_date)
        if metrics.id is None:
            existing = self.rows.get(key)
            metrics.id = existing.id if existing else self._next_id
            if not existing:
                self._next_id += 1
        self.rows[key] = copy.copy(metrics)
        return copy.copy(metrics)

    def list_between(self, user_id, start, end):
        return sorted(
            (copy.copy(m) for (uid, d), m in self.rows.items() if uid == user_id and start <= d <= end),
            key=lambda m: m.metric_date,
        )

    def delete_before(self, cutoff):
        stale = [k for k in self.rows if k[1] < cutoff]
        for k in stale:
            del self.rows[k]
        return len(stale)


class InMemoryGoals(GoalStore):
    def __init__(self):
        self.goals: Dict[int, Goal] = {}
        self._next_id = 1

    def find_goals(self, user_id, active_only=False):
        return [
            copy.copy(g) for g in self.goals.values()
            if g.user_id == user_id and (not active_only or not g.completed)
        ]

    def get_goal(self, goal_id, user_id) -> Optional[Goal]:
        goal = self.goals.get(goal_id)
        return copy.copy(goal) if goal and goal.user_id == user_id else None

    def save_goal(self, goal):
        if goal.id is None:
            goal.id = self._next_id
            self._next_id += 1
        self.goals[goal.id] = copy.copy(goal)
        return copy.copy(goal)

    def count_completed_goals(self, user_id):
        return sum(1 for g in self.goals.values() if g.user_id == user_id and g.completed)


class InMemoryBadges(BadgeStore):
    def __init__(self):
        self.badges: List[Badge] = []

    def badge_exists(self, user_id, badge_type: BadgeType):
        return any(b.user_id == user_id and b.badge_type == badge_type for b in self.badges)

    def save_badge(self, badge):
        if self.badge_exists(badge.user_id, badge.badge_type):
            return None
        badge.id = len(self.badges) + 1
        self.badges.append(badge)
        return badge

    def list_badges(self, user_id):
        return [b for b in self.badges if b.user_id == user_id]


# ──── Fixtures ────────────────────────────────────────────────────────────────
@pytest.fixture
def activity():
    return InMemoryActivity()


@pytest.fixture
def users():
    store = InMemoryUsers()
    store.add(User(id=1, email="ana@lockin.dev", username="ana", created_at=datetime(2024, 1, 1)))
    return store


@pytest.fixture
def metrics_store():
    return InMemoryMetrics()


@pytest.fixture
def goal_store():
    return InMemoryGoals()


@pytest.fixture
def badge_store():
    return InMemoryBadges()
