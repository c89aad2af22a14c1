from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from enum import Enum


class BadgeCategory(str, Enum):
    TASK = "task"
    POMODORO = "pomodoro"
    GOAL = "goal"


class BadgeType(Enum):
    # Task completion badges
    FIRST_STEPS = ("First Steps", "Complete your first task", "🎯", 1, BadgeCategory.TASK)
    TASK_WARRIOR = ("Task Warrior", "Complete 10 tasks", "⚔️", 10, BadgeCategory.TASK)
    TASK_MASTER = ("Task Master", "Complete 50 tasks", "👑", 50, BadgeCategory.TASK)
    TASK_TERMINATOR = ("Task Terminator", "Complete 100 tasks", "🏆", 100, BadgeCategory.TASK)

    # Pomodoro badges
    FOCUS_NOVICE = ("Focus Novice", "Complete your first pomodoro", "🌱", 1, BadgeCategory.POMODORO)
    FOCUS_APPRENTICE = ("Focus Apprentice", "Complete 25 pomodoros", "🔥", 25, BadgeCategory.POMODORO)
    POMODORO_100 = ("Pomodoro Pro", "Complete 100 pomodoros", "💯", 100, BadgeCategory.POMODORO)
    POMODORO_500 = ("Pomodoro Legend", "Complete 500 pomodoros", "⭐", 500, BadgeCategory.POMODORO)

    # Goal badges
    GOAL_SETTER = ("Goal Setter", "Complete your first goal", "🎪", 1, BadgeCategory.GOAL)
    GOAL_ACHIEVER = ("Goal Achiever", "Complete 5 goals", "🎊", 5, BadgeCategory.GOAL)
    GOAL_CRUSHER = ("Goal Crusher", "Complete 10 goals", "💪", 10, BadgeCategory.GOAL)

    def __init__(self, display_name: str, description: str, icon: str,
                 requirement: int, category: BadgeCategory):
        self.display_name = display_name
        self.description = description
        self.icon = icon
        self.requirement = requirement
        self.category = category

    @classmethod
    def by_category(cls, category: BadgeCategory) -> List["BadgeType"]:
        return sorted(
            (b for b in cls if b.category == category),
            key=lambda b: b.requirement,
        )


@dataclass
class Badge:
    """Award record. Immutable once saved; unique per (user_id, badge_type)."""
    id: Optional[int]
    user_id: int
    badge_type: BadgeType
    earned_at: datetime = field(default_factory=datetime.utcnow)
