from sqlalchemy.orm import Session
from typing import Optional, List
from datetime import date, datetime
from app.domain.models.user import User
from app.domain.ports import UserStore
from app.infrastructure.database.models import UserORM


def user_to_entity(model: UserORM) -> User:
    return User(
        id=model.id,
        email=model.email,
        username=model.username,
        is_active=model.is_active,
        current_streak=model.current_streak or 0,
        longest_streak=model.longest_streak or 0,
        last_activity_date=model.last_activity_date,
        created_at=model.created_at,
    )


class UserRepository(UserStore):
    def __init__(self, db: Session):
        self.db = db

    def _get_orm(self, user_id: int) -> Optional[UserORM]:
        return self.db.query(UserORM).filter(UserORM.id == user_id, UserORM.is_active == True).first()  # noqa: E712

    def get_by_id(self, user_id: int) -> Optional[UserORM]:
        return self._get_orm(user_id)

    def create(self, email: str, username: str) -> UserORM:
        user = UserORM(email=email, username=username)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    # ──── UserStore ───────────────────────────────────────────────────────────
    def get_user(self, user_id: int) -> Optional[User]:
        model = self._get_orm(user_id)
        return user_to_entity(model) if model else None

    def save_user(self, user: User) -> User:
        model = self._get_orm(user.id)
        if model is None:
            raise ValueError(f"Cannot save streak for unknown user {user.id}")
        model.current_streak = user.current_streak
        model.longest_streak = user.longest_streak
        model.last_activity_date = user.last_activity_date
        model.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(model)
        return user_to_entity(model)

    def list_user_ids(self) -> List[int]:
        return [row.id for row in self.db.query(UserORM.id).filter(UserORM.is_active == True).all()]  # noqa: E712

    def list_users_with_broken_streaks(self, yesterday: date) -> List[User]:
        rows = self.db.query(UserORM).filter(
            UserORM.is_active == True,  # noqa: E712
            UserORM.current_streak > 0,
            UserORM.last_activity_date < yesterday,
        ).all()
        return [user_to_entity(u) for u in rows]
