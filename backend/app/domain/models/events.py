"""
Completion events. Immutable value records handed to the event bus once the
originating write is committed.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from app.domain.models.focus_session import SessionType


@dataclass(frozen=True)
class TaskCompletedEvent:
    user_id: int
    task_id: int
    completed_at: datetime


@dataclass(frozen=True)
class SessionCompletedEvent:
    user_id: int
    session_id: int
    completed_at: datetime
    session_type: SessionType = SessionType.WORK
    completed: bool = True
    actual_minutes: Optional[int] = None
    started_at: Optional[datetime] = None


@dataclass(frozen=True)
class GoalCompletedEvent:
    user_id: int
    goal_id: int
    completed_at: datetime
