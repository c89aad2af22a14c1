"""
Post-commit reactions to completion events: streaks, goal progress and badge awards.

Each handler opens its own DB session, so a failure stays inside that one
reaction and never touches the completion that triggered it.
"""
from contextlib import contextmanager
from datetime import date, datetime
from typing import Callable

from sqlalchemy.orm import Session

from app.application.analytics_service import AnalyticsService
from app.core.logging import get_logger
from app.domain.models.badge import BadgeCategory
from app.domain.models.events import TaskCompletedEvent, SessionCompletedEvent, GoalCompletedEvent
from app.domain.models.focus_session import SessionType
from app.domain.services.badge_evaluator import BadgeEvaluator
from app.domain.services.goal_progress import GoalProgressAggregator
from app.infrastructure.cache.metrics_cache import MetricsCache, metrics_cache
from app.infrastructure.database.session import SessionLocal
from app.infrastructure.events.bus import EventBus
from app.infrastructure.repositories.activity_repository import ActivityRepository
from app.infrastructure.repositories.badge_repository import BadgeRepository
from app.infrastructure.repositories.goal_repository import GoalRepository

logger = get_logger(__name__)


@contextmanager
def session_scope(session_factory: Callable[[], Session]):
    db = session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def register_reactions(
    bus: EventBus,
    session_factory: Callable[[], Session] = SessionLocal,
    cache: MetricsCache = metrics_cache,
):
    """Subscribes streak, goal and badge consumers on bus. Returns the unsubscribe callables."""

    def _streak(user_id: int, day: date):
        with session_scope(session_factory) as db:
            AnalyticsService(db, cache).evaluate_streak(user_id, day)

    def _badges(user_id: int, category: BadgeCategory):
        with session_scope(session_factory) as db:
            evaluator = BadgeEvaluator(ActivityRepository(db), GoalRepository(db), BadgeRepository(db))
            return evaluator.evaluate(user_id, category)

    def _publish_completed_goals(goals):
        for goal in goals:
            bus.publish(GoalCompletedEvent(user_id=goal.user_id, goal_id=goal.id, completed_at=datetime.utcnow()))

    def streak_on_task_completed(event: TaskCompletedEvent):
        _streak(event.user_id, event.completed_at.date())

    def streak_on_session_completed(event: SessionCompletedEvent):
        if event.completed and event.session_type == SessionType.WORK:
            # sessions count towards the day they started
            _streak(event.user_id, (event.started_at or event.completed_at).date())

    def goals_on_task_completed(event: TaskCompletedEvent):
        with session_scope(session_factory) as db:
            completed = GoalProgressAggregator(GoalRepository(db)).on_task_completed(event)
        _publish_completed_goals(completed)

    def goals_on_session_completed(event: SessionCompletedEvent):
        with session_scope(session_factory) as db:
            completed = GoalProgressAggregator(GoalRepository(db)).on_session_completed(event)
        _publish_completed_goals(completed)

    def badges_on_task_completed(event: TaskCompletedEvent):
        _badges(event.user_id, BadgeCategory.TASK)

    def badges_on_session_completed(event: SessionCompletedEvent):
        if event.completed and event.session_type == SessionType.WORK:
            _badges(event.user_id, BadgeCategory.POMODORO)

    def badges_on_goal_completed(event: GoalCompletedEvent):
        logger.info("Goal completed event", goal_id=event.goal_id, user_id=event.user_id)
        _badges(event.user_id, BadgeCategory.GOAL)

    return [
        bus.subscribe(TaskCompletedEvent, streak_on_task_completed),
        bus.subscribe(SessionCompletedEvent, streak_on_session_completed),
        bus.subscribe(TaskCompletedEvent, goals_on_task_completed),
        bus.subscribe(TaskCompletedEvent, badges_on_task_completed),
        bus.subscribe(SessionCompletedEvent, goals_on_session_completed),
        bus.subscribe(SessionCompletedEvent, badges_on_session_completed),
        bus.subscribe(GoalCompletedEvent, badges_on_goal_completed),
    ]
