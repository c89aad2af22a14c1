import threading
import pytest
from datetime import datetime

from app.domain.models.events import TaskCompletedEvent, GoalCompletedEvent
from app.infrastructure.events.bus import EventBus

NOW = datetime(2024, 3, 6, 12, 0)


@pytest.fixture
def bus():
    bus = EventBus(workers=2)
    yield bus
    bus.shutdown()


def task_done(user_id, task_id=1):
    return TaskCompletedEvent(user_id=user_id, task_id=task_id, completed_at=NOW)


class TestEventBus:

    def test_events_are_immutable(self):
        event = task_done(1)
        with pytest.raises(Exception):
            event.user_id = 2

    def test_handlers_receive_matching_events_only(self, bus):
        seen = []
        bus.subscribe(TaskCompletedEvent, seen.append)
        bus.publish(task_done(1))
        bus.publish(GoalCompletedEvent(user_id=1, goal_id=3, completed_at=NOW))
        bus.flush()
        assert len(seen) == 1
        assert seen[0].task_id == 1

    def test_per_user_order_preserved(self, bus):
        seen = []
        lock = threading.Lock()

        def record(event):
            with lock:
                seen.append((event.user_id, event.task_id))

        bus.subscribe(TaskCompletedEvent, record)
        for i in range(20):
            bus.publish(task_done(1, i))
            bus.publish(task_done(2, i))
        bus.flush()

        assert [t for u, t in seen if u == 1] == list(range(20))
        assert [t for u, t in seen if u == 2] == list(range(20))

    def test_failing_handler_does_not_block_others(self, bus):
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(TaskCompletedEvent, broken)
        bus.subscribe(TaskCompletedEvent, seen.append)
        bus.publish(task_done(1))
        bus.flush()
        assert len(seen) == 1

    def test_flush_waits_for_follow_up_events(self, bus):
        goals = []
        bus.subscribe(
            TaskCompletedEvent,
            lambda e: bus.publish(GoalCompletedEvent(user_id=e.user_id, goal_id=7, completed_at=NOW)),
        )
        bus.subscribe(GoalCompletedEvent, goals.append)
        bus.publish(task_done(1))
        bus.flush()
        assert [g.goal_id for g in goals] == [7]

    def test_unsubscribe(self, bus):
        seen = []
        unsubscribe = bus.subscribe(TaskCompletedEvent, seen.append)
        unsubscribe()
        bus.publish(task_done(1))
        bus.flush()
        assert seen == []

    def test_synchronous_mode_dispatches_inline(self):
        bus = EventBus(workers=1, synchronous=True)
        seen = []
        bus.subscribe(TaskCompletedEvent, seen.append)
        bus.publish(task_done(1))
        assert len(seen) == 1
        bus.shutdown()

    def test_synchronous_failing_handler_is_logged_and_skipped(self):
        bus = EventBus(workers=1, synchronous=True)
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(TaskCompletedEvent, broken)
        bus.subscribe(TaskCompletedEvent, seen.append)
        bus.publish(task_done(1))
        assert len(seen) == 1
        bus.shutdown()
