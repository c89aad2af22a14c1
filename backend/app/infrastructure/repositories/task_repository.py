from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified
from typing import Optional
from datetime import datetime
from app.infrastructure.database.models import TaskORM, FocusSessionORM


class TaskRepository:
    """Request-path writes for tasks. The analytics engine reads through ActivityRepository."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, task_id: int, user_id: int) -> Optional[TaskORM]:
        return self.db.query(TaskORM).filter(
            TaskORM.id == task_id, TaskORM.user_id == user_id
        ).first()

    def create(self, user_id: int, data: dict) -> TaskORM:
        task = TaskORM(user_id=user_id, **data)
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def mark_completed(self, task: TaskORM, at: Optional[datetime] = None) -> TaskORM:
        now = at or datetime.utcnow()
        task.status = "completed"
        task.completed_at = now
        task.updated_at = now
        # an unchanged value would otherwise be replaced by the onupdate clock
        flag_modified(task, "updated_at")
        self.db.commit()
        self.db.refresh(task)
        return task


class FocusSessionRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, session_id: int, user_id: int) -> Optional[FocusSessionORM]:
        return self.db.query(FocusSessionORM).filter(
            FocusSessionORM.id == session_id, FocusSessionORM.user_id == user_id
        ).first()

    def create(self, user_id: int, data: dict) -> FocusSessionORM:
        session = FocusSessionORM(user_id=user_id, **data)
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def mark_completed(
        self,
        session: FocusSessionORM,
        actual_minutes: Optional[int] = None,
        break_minutes: Optional[int] = None,
        at: Optional[datetime] = None,
    ) -> FocusSessionORM:
        session.completed = True
        session.completed_at = at or datetime.utcnow()
        session.actual_minutes = actual_minutes if actual_minutes is not None else session.planned_minutes
        if break_minutes is not None:
            session.break_minutes = break_minutes
        self.db.commit()
        self.db.refresh(session)
        return session
