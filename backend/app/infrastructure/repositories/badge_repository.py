from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional, List
from app.domain.models.badge import Badge, BadgeType
from app.domain.ports import BadgeStore
from app.infrastructure.database.models import BadgeORM


def badge_to_entity(model: BadgeORM) -> Badge:
    return Badge(
        id=model.id,
        user_id=model.user_id,
        badge_type=BadgeType[model.badge_type],
        earned_at=model.earned_at,
    )


class BadgeRepository(BadgeStore):
    def __init__(self, db: Session):
        self.db = db

    def badge_exists(self, user_id: int, badge_type: BadgeType) -> bool:
        return self.db.query(BadgeORM.id).filter(
            BadgeORM.user_id == user_id, BadgeORM.badge_type == badge_type.name
        ).first() is not None

    def save_badge(self, badge: Badge) -> Optional[Badge]:
        row = BadgeORM(user_id=badge.user_id, badge_type=badge.badge_type.name, earned_at=badge.earned_at)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            # unique (user_id, badge_type): someone else awarded it first
            self.db.rollback()
            return None
        self.db.refresh(row)
        return badge_to_entity(row)

    def list_badges(self, user_id: int) -> List[Badge]:
        rows = self.db.query(BadgeORM).filter(
            BadgeORM.user_id == user_id
        ).order_by(BadgeORM.earned_at.desc()).all()
        return [badge_to_entity(r) for r in rows]
