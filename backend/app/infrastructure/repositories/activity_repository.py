from sqlalchemy.orm import Session
from typing import List
from datetime import datetime
from app.domain.models.task import Task, TaskStatus
from app.domain.models.focus_session import FocusSession, SessionType
from app.domain.ports import ActivityReader
from app.infrastructure.database.models import TaskORM, FocusSessionORM


def task_to_entity(model: TaskORM) -> Task:
    return Task(
        id=model.id,
        user_id=model.user_id,
        title=model.title,
        status=TaskStatus(model.status),
        is_urgent=bool(model.is_urgent),
        is_important=bool(model.is_important),
        completed_at=model.completed_at,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def session_to_entity(model: FocusSessionORM) -> FocusSession:
    return FocusSession(
        id=model.id,
        user_id=model.user_id,
        task_id=model.task_id,
        planned_minutes=model.planned_minutes,
        actual_minutes=model.actual_minutes,
        started_at=model.started_at,
        completed_at=model.completed_at,
        session_type=SessionType(model.session_type),
        completed=bool(model.completed),
        break_minutes=model.break_minutes,
    )


class ActivityRepository(ActivityReader):
    def __init__(self, db: Session):
        self.db = db

    def list_tasks_created_between(self, user_id: int, start: datetime, end: datetime) -> List[Task]:
        rows = self.db.query(TaskORM).filter(
            TaskORM.user_id == user_id,
            TaskORM.created_at >= start,
            TaskORM.created_at < end,
        ).all()
        return [task_to_entity(t) for t in rows]

    def list_tasks_completed_between(self, user_id: int, start: datetime, end: datetime) -> List[Task]:
        rows = self.db.query(TaskORM).filter(
            TaskORM.user_id == user_id,
            TaskORM.status == TaskStatus.COMPLETED.value,
            TaskORM.updated_at >= start,
            TaskORM.updated_at < end,
        ).all()
        return [task_to_entity(t) for t in rows]

    def list_open_tasks(self, user_id: int) -> List[Task]:
        rows = self.db.query(TaskORM).filter(
            TaskORM.user_id == user_id,
            TaskORM.status != TaskStatus.COMPLETED.value,
        ).all()
        return [task_to_entity(t) for t in rows]

    def list_sessions_started_between(self, user_id: int, start: datetime, end: datetime) -> List[FocusSession]:
        rows = self.db.query(FocusSessionORM).filter(
            FocusSessionORM.user_id == user_id,
            FocusSessionORM.started_at >= start,
            FocusSessionORM.started_at < end,
        ).order_by(FocusSessionORM.started_at).all()
        return [session_to_entity(s) for s in rows]

    def count_completed_tasks(self, user_id: int) -> int:
        return self.db.query(TaskORM).filter(
            TaskORM.user_id == user_id,
            TaskORM.status == TaskStatus.COMPLETED.value,
        ).count()

    def count_completed_work_sessions(self, user_id: int) -> int:
        return self.db.query(FocusSessionORM).filter(
            FocusSessionORM.user_id == user_id,
            FocusSessionORM.completed == True,  # noqa: E712
            FocusSessionORM.session_type == SessionType.WORK.value,
        ).count()
