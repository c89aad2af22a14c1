"""
Domain exceptions raised by the analytics engine.
Routes translate them to HTTP errors; batch jobs log them and move on.
"""


class AnalyticsError(Exception):
    """Base class for analytics/aggregation failures."""


class UserNotFoundError(AnalyticsError):
    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class GoalNotFoundError(AnalyticsError):
    def __init__(self, goal_id: int):
        super().__init__(f"Goal {goal_id} not found")
        self.goal_id = goal_id


class GoalValidationError(AnalyticsError):
    pass
