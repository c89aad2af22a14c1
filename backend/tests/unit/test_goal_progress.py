import pytest
from datetime import date, datetime

from app.core.exceptions import GoalNotFoundError, GoalValidationError
from app.domain.models.events import TaskCompletedEvent, SessionCompletedEvent
from app.domain.models.focus_session import SessionType
from app.domain.models.goal import Goal, GoalType
from app.domain.services.goal_progress import GoalProgressAggregator

TODAY = date(2024, 3, 6)


@pytest.fixture
def aggregator(goal_store):
    return GoalProgressAggregator(goal_store)


def make_goal(**kwargs):
    defaults = dict(
        id=None, user_id=1, title="Ship it", goal_type=GoalType.WEEKLY,
        start_date=date(2024, 3, 4), end_date=date(2024, 3, 10),
    )
    defaults.update(kwargs)
    return Goal(**defaults)


def task_event(when=datetime(2024, 3, 6, 14, 0), user_id=1):
    return TaskCompletedEvent(user_id=user_id, task_id=1, completed_at=when)


def session_event(minutes=25, session_type=SessionType.WORK, completed=True):
    return SessionCompletedEvent(
        user_id=1, session_id=1, completed_at=datetime(2024, 3, 6, 10, 0),
        session_type=session_type, completed=completed, actual_minutes=minutes,
    )


class TestGoalModel:

    def test_progress_is_mean_of_tracked_metrics(self):
        g = make_goal(target_tasks=4, target_pomodoros=10, current_tasks=2, current_pomodoros=10)
        assert g.progress_breakdown() == {"tasks": 50.0, "pomodoros": 100.0}
        assert g.progress_percentage() == 75.0

    def test_progress_capped_per_metric(self):
        g = make_goal(target_tasks=2, current_tasks=5)
        assert g.progress_percentage() == 100.0

    def test_no_targets_means_zero(self):
        assert make_goal().progress_percentage() == 0.0


class TestCreateGoal:

    def test_resets_progress(self, aggregator):
        saved = aggregator.create_goal(make_goal(target_tasks=5, current_tasks=3, completed=True))
        assert saved.id is not None
        assert saved.current_tasks == 0
        assert not saved.completed

    @pytest.mark.parametrize("kwargs", [
        {},
        {"target_tasks": 0},
        {"target_pomodoros": -1, "target_tasks": 2},
        {"target_tasks": 3, "end_date": date(2024, 3, 1)},
    ])
    def test_rejects_invalid(self, aggregator, kwargs):
        with pytest.raises(GoalValidationError):
            aggregator.create_goal(make_goal(**kwargs))

    def test_get_goal_missing(self, aggregator):
        with pytest.raises(GoalNotFoundError):
            aggregator.get_goal(99, 1)


class TestTaskEvents:

    def test_scenario_four_of_five_completes(self, aggregator, goal_store):
        goal = goal_store.save_goal(make_goal(target_tasks=5, current_tasks=4))

        completed = aggregator.on_task_completed(task_event(), today=TODAY)

        stored = goal_store.get_goal(goal.id, 1)
        assert [g.id for g in completed] == [goal.id]
        assert stored.current_tasks == 5
        assert stored.progress_percentage() == 100.0
        assert stored.completed
        assert stored.completed_date == TODAY

        # completed goals receive no further increments
        assert aggregator.on_task_completed(task_event(), today=TODAY) == []
        assert goal_store.get_goal(goal.id, 1).current_tasks == 5

    def test_event_outside_window_ignored(self, aggregator, goal_store):
        goal = goal_store.save_goal(make_goal(target_tasks=5))
        aggregator.on_task_completed(task_event(when=datetime(2024, 3, 11, 9, 0)), today=TODAY)
        assert goal_store.get_goal(goal.id, 1).current_tasks == 0

    def test_other_users_goals_untouched(self, aggregator, goal_store):
        goal = goal_store.save_goal(make_goal(target_tasks=5))
        aggregator.on_task_completed(task_event(user_id=2), today=TODAY)
        assert goal_store.get_goal(goal.id, 1).current_tasks == 0

    def test_goal_without_task_target_not_saved(self, aggregator, goal_store):
        goal = goal_store.save_goal(make_goal(target_pomodoros=3))
        aggregator.on_task_completed(task_event(), today=TODAY)
        assert goal_store.get_goal(goal.id, 1).current_pomodoros == 0


class TestSessionEvents:

    def test_work_session_counts_pomodoro_and_minutes(self, aggregator, goal_store):
        goal = goal_store.save_goal(make_goal(target_pomodoros=4, target_focus_minutes=100))
        aggregator.on_session_completed(session_event(minutes=25), today=TODAY)
        stored = goal_store.get_goal(goal.id, 1)
        assert stored.current_pomodoros == 1
        assert stored.current_focus_minutes == 25
        assert stored.progress_percentage() == 25.0

    def test_minutes_capped_at_target(self, aggregator, goal_store):
        goal = goal_store.save_goal(make_goal(target_focus_minutes=60, current_focus_minutes=50))
        completed = aggregator.on_session_completed(session_event(minutes=25), today=TODAY)
        stored = goal_store.get_goal(goal.id, 1)
        assert stored.current_focus_minutes == 60
        assert stored.completed
        assert len(completed) == 1

    def test_break_session_does_not_count_as_pomodoro(self, aggregator, goal_store):
        goal = goal_store.save_goal(make_goal(target_pomodoros=4))
        aggregator.on_session_completed(session_event(session_type=SessionType.SHORT_BREAK), today=TODAY)
        assert goal_store.get_goal(goal.id, 1).current_pomodoros == 0
