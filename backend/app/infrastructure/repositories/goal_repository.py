from sqlalchemy.orm import Session
from typing import Optional, List
from app.domain.models.goal import Goal, GoalType
from app.domain.ports import GoalStore
from app.infrastructure.database.models import GoalORM

GOAL_COLUMNS = [
    "title", "description", "target_tasks", "target_pomodoros", "target_focus_minutes",
    "current_tasks", "current_pomodoros", "current_focus_minutes",
    "start_date", "end_date", "completed", "completed_date",
]


def goal_to_entity(model: GoalORM) -> Goal:
    return Goal(
        id=model.id,
        user_id=model.user_id,
        title=model.title,
        description=model.description,
        goal_type=GoalType(model.goal_type),
        target_tasks=model.target_tasks,
        target_pomodoros=model.target_pomodoros,
        target_focus_minutes=model.target_focus_minutes,
        current_tasks=model.current_tasks or 0,
        current_pomodoros=model.current_pomodoros or 0,
        current_focus_minutes=model.current_focus_minutes or 0,
        start_date=model.start_date,
        end_date=model.end_date,
        completed=bool(model.completed),
        completed_date=model.completed_date,
        created_at=model.created_at,
    )


class GoalRepository(GoalStore):
    def __init__(self, db: Session):
        self.db = db

    def find_goals(self, user_id: int, active_only: bool = False) -> List[Goal]:
        q = self.db.query(GoalORM).filter(GoalORM.user_id == user_id)
        if active_only:
            q = q.filter(GoalORM.completed == False)  # noqa: E712
        return [goal_to_entity(g) for g in q.order_by(GoalORM.created_at.desc(), GoalORM.id.desc()).all()]

    def get_goal(self, goal_id: int, user_id: int) -> Optional[Goal]:
        model = self.db.query(GoalORM).filter(
            GoalORM.id == goal_id, GoalORM.user_id == user_id
        ).first()
        return goal_to_entity(model) if model else None

    def save_goal(self, goal: Goal) -> Goal:
        data = {c: getattr(goal, c) for c in GOAL_COLUMNS}
        data["goal_type"] = goal.goal_type.value
        model = self.db.query(GoalORM).filter(GoalORM.id == goal.id).first() if goal.id else None
        if model is None:
            model = GoalORM(user_id=goal.user_id, **data)
            self.db.add(model)
        else:
            for k, v in data.items():
                setattr(model, k, v)
        self.db.commit()
        self.db.refresh(model)
        return goal_to_entity(model)

    def count_completed_goals(self, user_id: int) -> int:
        return self.db.query(GoalORM).filter(
            GoalORM.user_id == user_id, GoalORM.completed == True  # noqa: E712
        ).count()
