from dataclasses import dataclass, field
from datetime import datetime, date
from typing import Optional


@dataclass
class User:
    id: Optional[int]
    email: str
    username: str
    is_active: bool = True
    current_streak: int = 0
    longest_streak: int = 0
    last_activity_date: Optional[date] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def streak_broken_as_of(self, today: date) -> bool:
        """Last productive day is older than yesterday."""
        if self.last_activity_date is None:
            return False
        return (today - self.last_activity_date).days > 1


@dataclass
class StreakStats:
    current_streak: int
    longest_streak: int
    last_activity_date: Optional[date]
