from dataclasses import dataclass, field
from datetime import datetime, date
from typing import Optional, Dict, List, Tuple
from enum import Enum


class GoalType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass
class Goal:
    id: Optional[int]
    user_id: int
    title: str
    goal_type: GoalType
    start_date: date
    end_date: date
    description: Optional[str] = None
    target_tasks: Optional[int] = None
    target_pomodoros: Optional[int] = None
    target_focus_minutes: Optional[int] = None
    current_tasks: int = 0
    current_pomodoros: int = 0
    current_focus_minutes: int = 0
    completed: bool = False
    completed_date: Optional[date] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    # ──── Business Rules ────────────────────────────────────────────
    def tracked_metrics(self) -> List[Tuple[str, int, int]]:
        """(name, current, target) for every metric that has a target."""
        metrics = []
        if self.target_tasks:
            metrics.append(("tasks", self.current_tasks, self.target_tasks))
        if self.target_pomodoros:
            metrics.append(("pomodoros", self.current_pomodoros, self.target_pomodoros))
        if self.target_focus_minutes:
            metrics.append(("focus_minutes", self.current_focus_minutes, self.target_focus_minutes))
        return metrics

    def progress_breakdown(self) -> Dict[str, float]:
        return {
            name: min(100.0, current / target * 100)
            for name, current, target in self.tracked_metrics()
        }

    def progress_percentage(self) -> float:
        breakdown = self.progress_breakdown()
        if not breakdown:
            return 0.0
        return sum(breakdown.values()) / len(breakdown)

    def is_active_on(self, day: date) -> bool:
        return not self.completed and self.start_date <= day <= self.end_date

    def has_target(self) -> bool:
        return bool(self.tracked_metrics())

    def mark_completed(self, on: date):
        if self.completed:
            return
        self.completed = True
        self.completed_date = on
