from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from enum import Enum


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class EisenhowerQuadrant(str, Enum):
    URGENT_IMPORTANT = "urgent_important"              # do first
    NOT_URGENT_IMPORTANT = "not_urgent_important"      # schedule
    URGENT_NOT_IMPORTANT = "urgent_not_important"      # delegate
    NOT_URGENT_NOT_IMPORTANT = "not_urgent_not_important"  # eliminate


@dataclass
class Task:
    id: Optional[int]
    user_id: int
    title: str
    status: TaskStatus = TaskStatus.TODO
    is_urgent: bool = False
    is_important: bool = False
    completed_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    # ──── Business Rules ────────────────────────────────────────────
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def completed_within(self, start: datetime, end: datetime) -> bool:
        """Completed, with the status change inside [start, end)."""
        if not self.is_completed() or self.updated_at is None:
            return False
        return start <= self.updated_at < end

    def quadrant(self) -> EisenhowerQuadrant:
        if self.is_urgent and self.is_important:
            return EisenhowerQuadrant.URGENT_IMPORTANT
        if self.is_important:
            return EisenhowerQuadrant.NOT_URGENT_IMPORTANT
        if self.is_urgent:
            return EisenhowerQuadrant.URGENT_NOT_IMPORTANT
        return EisenhowerQuadrant.NOT_URGENT_NOT_IMPORTANT

    def mark_completed(self, at: Optional[datetime] = None):
        now = at or datetime.utcnow()
        self.status = TaskStatus.COMPLETED
        self.completed_at = now
        self.updated_at = now
