from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.infrastructure.database.session import get_db
from app.infrastructure.database.models import UserORM
from app.infrastructure.repositories.task_repository import TaskRepository, FocusSessionRepository
from app.infrastructure.cache.metrics_cache import MetricsCache
from app.infrastructure.events.bus import EventBus
from app.domain.models.events import TaskCompletedEvent, SessionCompletedEvent
from app.domain.models.focus_session import SessionType
from app.api.dependencies.auth import get_current_user
from app.api.dependencies.analytics import get_metrics_cache, get_event_bus
from app.api.schemas import TaskCompleteRequest, SessionCompleteRequest, ActivityResponse
from app.core.logging import get_logger

router = APIRouter(prefix="/activity", tags=["Activity"])
logger = get_logger(__name__)


@router.post("/tasks/{task_id}/complete", response_model=ActivityResponse)
def complete_task(
    task_id: int,
    data: TaskCompleteRequest = TaskCompleteRequest(),
    db: Session = Depends(get_db),
    cache: MetricsCache = Depends(get_metrics_cache),
    bus: EventBus = Depends(get_event_bus),
    current_user: UserORM = Depends(get_current_user)
):
    """Mark a task completed. Goal progress and badges follow asynchronously."""
    repo = TaskRepository(db)
    task = repo.get_by_id(task_id, current_user.id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    if task.status == "completed":
        raise HTTPException(status_code=409, detail="Task already completed")

    task = repo.mark_completed(task, data.completed_at)
    cache.invalidate_user_day(current_user.id, task.completed_at.date())
    bus.publish(TaskCompletedEvent(user_id=current_user.id, task_id=task.id, completed_at=task.completed_at))
    logger.info("Task completed", task_id=task.id, user_id=current_user.id)
    return ActivityResponse(id=task.id, completed_at=task.completed_at, message="Task completed")


@router.post("/sessions/{session_id}/complete", response_model=ActivityResponse)
def complete_session(
    session_id: int,
    data: SessionCompleteRequest = SessionCompleteRequest(),
    db: Session = Depends(get_db),
    cache: MetricsCache = Depends(get_metrics_cache),
    bus: EventBus = Depends(get_event_bus),
    current_user: UserORM = Depends(get_current_user)
):
    """Mark a focus session completed with its actual duration."""
    repo = FocusSessionRepository(db)
    session = repo.get_by_id(session_id, current_user.id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    if session.completed:
        raise HTTPException(status_code=409, detail="Session already completed")

    session = repo.mark_completed(session, data.actual_minutes, data.break_minutes, data.completed_at)
    # sessions are bucketed by the day they started
    cache.invalidate_user_day(current_user.id, session.started_at.date())
    bus.publish(SessionCompletedEvent(
        user_id=current_user.id,
        session_id=session.id,
        completed_at=session.completed_at,
        session_type=SessionType(session.session_type),
        completed=True,
        actual_minutes=session.actual_minutes,
        started_at=session.started_at,
    ))
    logger.info("Focus session completed", session_id=session.id, user_id=current_user.id,
                minutes=session.actual_minutes)
    return ActivityResponse(id=session.id, completed_at=session.completed_at, message="Session completed")
