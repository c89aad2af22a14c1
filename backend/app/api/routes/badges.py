from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from app.infrastructure.database.session import get_db
from app.infrastructure.database.models import UserORM
from app.infrastructure.repositories.activity_repository import ActivityRepository
from app.infrastructure.repositories.badge_repository import BadgeRepository
from app.infrastructure.repositories.goal_repository import GoalRepository
from app.domain.models.badge import BadgeType
from app.domain.services.badge_evaluator import BadgeEvaluator
from app.api.dependencies.auth import get_current_user
from app.api.schemas import BadgeResponse

router = APIRouter(prefix="/badges", tags=["Badges"])


def _to_response(badge_type: BadgeType, earned: bool, earned_at=None) -> BadgeResponse:
    return BadgeResponse(
        badge_type=badge_type.name,
        name=badge_type.display_name,
        description=badge_type.description,
        icon=badge_type.icon,
        requirement=badge_type.requirement,
        category=badge_type.category.value,
        earned=earned,
        earned_at=earned_at,
    )


@router.get("", response_model=List[BadgeResponse])
def list_badges(
    db: Session = Depends(get_db),
    current_user: UserORM = Depends(get_current_user)
):
    """Full badge catalogue with the user's earned state."""
    evaluator = BadgeEvaluator(ActivityRepository(db), GoalRepository(db), BadgeRepository(db))
    return [
        _to_response(entry["badge_type"], entry["earned"], entry["earned_at"])
        for entry in evaluator.catalogue(current_user.id)
    ]


@router.get("/earned", response_model=List[BadgeResponse])
def list_earned_badges(
    db: Session = Depends(get_db),
    current_user: UserORM = Depends(get_current_user)
):
    return [
        _to_response(b.badge_type, True, b.earned_at)
        for b in BadgeRepository(db).list_badges(current_user.id)
    ]
