"""
Badge Evaluator: threshold check over lifetime counters.
Awarding is additive and safe to repeat.
"""
from typing import Dict, List

from app.core.logging import get_logger
from app.domain.models.badge import Badge, BadgeCategory, BadgeType
from app.domain.ports import ActivityReader, BadgeStore, GoalStore

logger = get_logger(__name__)


class BadgeEvaluator:
    def __init__(self, activity: ActivityReader, goals: GoalStore, badges: BadgeStore):
        self.activity = activity
        self.goals = goals
        self.badges = badges

    def lifetime_count(self, user_id: int, category: BadgeCategory) -> int:
        if category == BadgeCategory.TASK:
            return self.activity.count_completed_tasks(user_id)
        if category == BadgeCategory.POMODORO:
            return self.activity.count_completed_work_sessions(user_id)
        return self.goals.count_completed_goals(user_id)

    def evaluate(self, user_id: int, category: BadgeCategory) -> List[Badge]:
        """Awards every badge of category the user now qualifies for. Returns the new awards."""
        count = self.lifetime_count(user_id, category)
        awarded = []
        for badge_type in BadgeType.by_category(category):
            if badge_type.requirement > count:
                break
            if self.badges.badge_exists(user_id, badge_type):
                continue
            saved = self.badges.save_badge(Badge(id=None, user_id=user_id, badge_type=badge_type))
            if saved is None:
                # lost a race with a concurrent award
                continue
            awarded.append(saved)
            logger.info("Badge awarded", badge=badge_type.name, user_id=user_id, count=count)
        return awarded

    def catalogue(self, user_id: int) -> List[Dict]:
        """Every badge type, with earned state for this user."""
        earned = {b.badge_type: b for b in self.badges.list_badges(user_id)}
        return [
            {
                "badge_type": badge_type,
                "earned": badge_type in earned,
                "earned_at": earned[badge_type].earned_at if badge_type in earned else None,
            }
            for badge_type in BadgeType
        ]
