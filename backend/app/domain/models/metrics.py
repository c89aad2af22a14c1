from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Dict


PRODUCTIVE_FOCUS_MINUTES = 30
PRODUCTIVE_TASKS_COMPLETED = 1


# ──── Daily Metrics ───────────────────────────────────────────────────────────
@dataclass
class DailyMetrics:
    """Computed analytics row, one per user per calendar date."""
    user_id: int
    metric_date: date
    id: Optional[int] = None

    # tasks
    tasks_created: int = 0
    tasks_completed: int = 0
    tasks_completed_same_day: int = 0
    completion_rate: float = 0.0

    # sessions
    pomodoros_completed: int = 0
    focus_minutes: int = 0
    break_minutes: int = 0
    interrupted_sessions: int = 0
    late_night_sessions: int = 0
    overwork_minutes: int = 0
    consecutive_work_days: int = 0
    morning_focus_minutes: int = 0
    afternoon_focus_minutes: int = 0
    evening_focus_minutes: int = 0
    night_focus_minutes: int = 0

    # Eisenhower snapshot of open tasks
    urgent_important: int = 0
    not_urgent_important: int = 0
    urgent_not_important: int = 0
    not_urgent_not_important: int = 0

    # scores, all in [0, 100]
    productivity_score: float = 0.0
    focus_score: float = 0.0
    burnout_risk_score: float = 0.0

    def is_productive(self) -> bool:
        return (
            self.focus_minutes >= PRODUCTIVE_FOCUS_MINUTES
            or self.tasks_completed >= PRODUCTIVE_TASKS_COMPLETED
        )

    def total_sessions(self) -> int:
        return self.pomodoros_completed + self.interrupted_sessions


# ──── Period read models ──────────────────────────────────────────────────────
@dataclass
class PeriodSummary:
    """Per-day averages over [start_date, end_date], plus raw totals."""
    user_id: int
    start_date: date
    end_date: date
    days: int
    tasks_created: int = 0
    tasks_completed: int = 0
    tasks_completed_same_day: int = 0
    pomodoros_completed: int = 0
    focus_minutes: int = 0
    break_minutes: int = 0
    completion_rate: float = 0.0
    productivity_score: float = 0.0
    focus_score: float = 0.0
    burnout_risk_score: float = 0.0
    totals: Dict[str, int] = field(default_factory=dict)


@dataclass
class MetricChange:
    previous: float
    current: float
    change: float
    trend: str  # "up" | "down" | "stable"


@dataclass
class PeriodComparison:
    current: PeriodSummary
    previous: PeriodSummary
    tasks: MetricChange
    productivity: MetricChange
    focus: MetricChange
    burnout: MetricChange
