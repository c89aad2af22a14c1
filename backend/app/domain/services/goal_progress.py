"""
Goal Progress Aggregator.

Applies completion events to the user's active goals as capped increments.
A goal whose progress reaches 100% is marked completed once and never
incremented again.
"""
from datetime import date
from typing import Callable, List, Optional

from app.core.exceptions import GoalNotFoundError, GoalValidationError
from app.core.logging import get_logger
from app.domain.models.events import TaskCompletedEvent, SessionCompletedEvent
from app.domain.models.focus_session import SessionType
from app.domain.models.goal import Goal
from app.domain.ports import GoalStore

logger = get_logger(__name__)


class GoalProgressAggregator:
    def __init__(self, goals: GoalStore):
        self.goals = goals

    # ──── Creation ────────────────────────────────────────────────────────────
    def create_goal(self, goal: Goal) -> Goal:
        for name in ("target_tasks", "target_pomodoros", "target_focus_minutes"):
            value = getattr(goal, name)
            if value is not None and value <= 0:
                raise GoalValidationError(f"{name} must be greater than 0 when set")
        if not goal.has_target():
            raise GoalValidationError("At least one target (tasks, pomodoros or focus minutes) is required")
        if goal.end_date < goal.start_date:
            raise GoalValidationError("end_date must not be before start_date")

        goal.current_tasks = goal.current_pomodoros = goal.current_focus_minutes = 0
        goal.completed = False
        goal.completed_date = None
        saved = self.goals.save_goal(goal)
        logger.info("Goal created", goal_id=saved.id, user_id=saved.user_id, goal_type=saved.goal_type.value)
        return saved

    def get_goal(self, goal_id: int, user_id: int) -> Goal:
        goal = self.goals.get_goal(goal_id, user_id)
        if goal is None:
            raise GoalNotFoundError(goal_id)
        return goal

    # ──── Event handlers ──────────────────────────────────────────────────────
    def on_task_completed(self, event: TaskCompletedEvent, today: Optional[date] = None) -> List[Goal]:
        """Returns the goals this event completed."""
        return self._apply(event.user_id, event.completed_at.date(), self._add_task, today)

    def on_session_completed(self, event: SessionCompletedEvent, today: Optional[date] = None) -> List[Goal]:
        def add_session(goal: Goal) -> bool:
            changed = False
            if event.session_type == SessionType.WORK and event.completed:
                if goal.target_pomodoros and goal.current_pomodoros < goal.target_pomodoros:
                    goal.current_pomodoros += 1
                    changed = True
            minutes = event.actual_minutes or 0
            if minutes > 0 and goal.target_focus_minutes and goal.current_focus_minutes < goal.target_focus_minutes:
                room = goal.target_focus_minutes - goal.current_focus_minutes
                goal.current_focus_minutes += min(minutes, room)
                changed = True
            return changed

        return self._apply(event.user_id, event.completed_at.date(), add_session, today)

    # ──── Private helpers ─────────────────────────────────────────────────────
    @staticmethod
    def _add_task(goal: Goal) -> bool:
        if goal.target_tasks and goal.current_tasks < goal.target_tasks:
            goal.current_tasks += 1
            return True
        return False

    def _apply(
        self,
        user_id: int,
        completion_date: date,
        increment: Callable[[Goal], bool],
        today: Optional[date],
    ) -> List[Goal]:
        today = today or date.today()
        completed_now = []

        for goal in self.goals.find_goals(user_id, active_only=True):
            if not goal.is_active_on(completion_date):
                continue
            if not increment(goal):
                continue

            if goal.progress_percentage() >= 100:
                goal.mark_completed(today)
                completed_now.append(goal)
                logger.info("Goal completed", goal_id=goal.id, user_id=user_id)

            self.goals.save_goal(goal)
            logger.debug(
                "Goal progress updated",
                goal_id=goal.id,
                tasks=f"{goal.current_tasks}/{goal.target_tasks}",
                pomodoros=f"{goal.current_pomodoros}/{goal.target_pomodoros}",
                focus=f"{goal.current_focus_minutes}/{goal.target_focus_minutes}",
            )

        return completed_now
