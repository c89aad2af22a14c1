from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Dict
from datetime import datetime, date


# ──── Daily Metrics ───────────────────────────────────────────────────────────
class DailyMetricsResponse(BaseModel):
    metric_date: date
    tasks_created: int
    tasks_completed: int
    tasks_completed_same_day: int
    completion_rate: float
    pomodoros_completed: int
    focus_minutes: int
    break_minutes: int
    interrupted_sessions: int
    late_night_sessions: int
    overwork_minutes: int
    consecutive_work_days: int
    morning_focus_minutes: int
    afternoon_focus_minutes: int
    evening_focus_minutes: int
    night_focus_minutes: int
    urgent_important: int
    not_urgent_important: int
    urgent_not_important: int
    not_urgent_not_important: int
    productivity_score: float
    focus_score: float
    burnout_risk_score: float
    burnout_label: str

    class Config:
        from_attributes = True


# ──── Periods ─────────────────────────────────────────────────────────────────
class PeriodSummaryResponse(BaseModel):
    start_date: date
    end_date: date
    days: int
    tasks_created: int
    tasks_completed: int
    tasks_completed_same_day: int
    pomodoros_completed: int
    focus_minutes: int
    break_minutes: int
    completion_rate: float
    productivity_score: float
    focus_score: float
    burnout_risk_score: float
    totals: Dict[str, int]

    class Config:
        from_attributes = True


class DateRange(BaseModel):
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_order(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class CompareRequest(BaseModel):
    current: DateRange
    previous: DateRange


class MetricChangeResponse(BaseModel):
    previous: float
    current: float
    change: float
    trend: str

    class Config:
        from_attributes = True


class ComparisonResponse(BaseModel):
    current: PeriodSummaryResponse
    previous: PeriodSummaryResponse
    tasks: MetricChangeResponse
    productivity: MetricChangeResponse
    focus: MetricChangeResponse
    burnout: MetricChangeResponse

    class Config:
        from_attributes = True


# ──── Streak ──────────────────────────────────────────────────────────────────
class StreakResponse(BaseModel):
    current_streak: int
    longest_streak: int
    last_activity_date: Optional[date]

    class Config:
        from_attributes = True


# ──── Goals ───────────────────────────────────────────────────────────────────
class GoalCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    goal_type: str = Field(default="daily", pattern="^(daily|weekly|monthly)$")
    start_date: date
    end_date: date
    target_tasks: Optional[int] = None
    target_pomodoros: Optional[int] = None
    target_focus_minutes: Optional[int] = None


class GoalResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    goal_type: str
    start_date: date
    end_date: date
    target_tasks: Optional[int]
    target_pomodoros: Optional[int]
    target_focus_minutes: Optional[int]
    current_tasks: int
    current_pomodoros: int
    current_focus_minutes: int
    completed: bool
    completed_date: Optional[date]
    progress_percentage: float
    progress: Dict[str, float]


# ──── Badges ──────────────────────────────────────────────────────────────────
class BadgeResponse(BaseModel):
    badge_type: str
    name: str
    description: str
    icon: str
    requirement: int
    category: str
    earned: bool
    earned_at: Optional[datetime] = None


# ──── Activity ────────────────────────────────────────────────────────────────
class TaskCompleteRequest(BaseModel):
    completed_at: Optional[datetime] = None


class SessionCompleteRequest(BaseModel):
    actual_minutes: Optional[int] = Field(None, ge=0, le=720)
    break_minutes: Optional[int] = Field(None, ge=0, le=720)
    completed_at: Optional[datetime] = None


class ActivityResponse(BaseModel):
    id: int
    completed_at: datetime
    message: str


# ──── Generic ─────────────────────────────────────────────────────────────────
class MessageResponse(BaseModel):
    message: str
