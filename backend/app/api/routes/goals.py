from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List
from app.infrastructure.database.session import get_db
from app.infrastructure.database.models import UserORM
from app.infrastructure.repositories.goal_repository import GoalRepository
from app.domain.models.goal import Goal, GoalType
from app.domain.services.goal_progress import GoalProgressAggregator
from app.api.dependencies.auth import get_current_user
from app.api.schemas import GoalCreate, GoalResponse
from app.core.exceptions import GoalNotFoundError, GoalValidationError

router = APIRouter(prefix="/goals", tags=["Goals"])


def _to_response(goal: Goal) -> GoalResponse:
    return GoalResponse(
        id=goal.id,
        title=goal.title,
        description=goal.description,
        goal_type=goal.goal_type.value,
        start_date=goal.start_date,
        end_date=goal.end_date,
        target_tasks=goal.target_tasks,
        target_pomodoros=goal.target_pomodoros,
        target_focus_minutes=goal.target_focus_minutes,
        current_tasks=goal.current_tasks,
        current_pomodoros=goal.current_pomodoros,
        current_focus_minutes=goal.current_focus_minutes,
        completed=goal.completed,
        completed_date=goal.completed_date,
        progress_percentage=round(goal.progress_percentage(), 2),
        progress={k: round(v, 2) for k, v in goal.progress_breakdown().items()},
    )


@router.post("", response_model=GoalResponse, status_code=201)
def create_goal(
    data: GoalCreate,
    db: Session = Depends(get_db),
    current_user: UserORM = Depends(get_current_user)
):
    """Create a goal. Progress starts at zero and advances with completed tasks and sessions."""
    goal = Goal(id=None, user_id=current_user.id, **{**data.model_dump(), "goal_type": GoalType(data.goal_type)})
    try:
        saved = GoalProgressAggregator(GoalRepository(db)).create_goal(goal)
    except GoalValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _to_response(saved)


@router.get("", response_model=List[GoalResponse])
def list_goals(
    active_only: bool = Query(False, description="Only goals not yet completed"),
    db: Session = Depends(get_db),
    current_user: UserORM = Depends(get_current_user)
):
    return [_to_response(g) for g in GoalRepository(db).find_goals(current_user.id, active_only=active_only)]


@router.get("/{goal_id}", response_model=GoalResponse)
def get_goal(
    goal_id: int,
    db: Session = Depends(get_db),
    current_user: UserORM = Depends(get_current_user)
):
    try:
        goal = GoalProgressAggregator(GoalRepository(db)).get_goal(goal_id, current_user.id)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _to_response(goal)
