from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from enum import Enum


class SessionType(str, Enum):
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


class DayPeriod(str, Enum):
    MORNING = "morning"      # 06-12
    AFTERNOON = "afternoon"  # 12-18
    EVENING = "evening"      # 18-24
    NIGHT = "night"          # 00-06


LATE_NIGHT_HOUR = 22


@dataclass
class FocusSession:
    id: Optional[int]
    user_id: int
    planned_minutes: int
    started_at: datetime
    actual_minutes: Optional[int] = None
    session_type: SessionType = SessionType.WORK
    completed: bool = False
    completed_at: Optional[datetime] = None
    break_minutes: Optional[int] = None
    task_id: Optional[int] = None

    def work_duration(self) -> int:
        if self.completed and self.actual_minutes is not None:
            return self.actual_minutes
        return self.planned_minutes or 0

    def is_late_night(self) -> bool:
        return self.started_at.hour >= LATE_NIGHT_HOUR

    def is_completed_work(self) -> bool:
        return self.completed and self.session_type == SessionType.WORK

    def period(self) -> DayPeriod:
        hour = self.started_at.hour
        if 6 <= hour < 12:
            return DayPeriod.MORNING
        elif 12 <= hour < 18:
            return DayPeriod.AFTERNOON
        elif hour >= 18:
            return DayPeriod.EVENING
        return DayPeriod.NIGHT
