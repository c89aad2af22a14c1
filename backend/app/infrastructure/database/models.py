from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Date,
    Float, Text, ForeignKey, Enum as SAEnum, UniqueConstraint
)
from sqlalchemy.orm import relationship
from datetime import datetime
from app.infrastructure.database.session import Base


class UserORM(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), unique=True, nullable=False)
    is_active = Column(Boolean, default=True)
    # streak state, written only by the streak tracker
    current_streak = Column(Integer, default=0, nullable=False)
    longest_streak = Column(Integer, default=0, nullable=False)
    last_activity_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    tasks = relationship("TaskORM", back_populates="user", cascade="all, delete-orphan")
    sessions = relationship("FocusSessionORM", back_populates="user", cascade="all, delete-orphan")
    daily_metrics = relationship("DailyMetricsORM", back_populates="user", cascade="all, delete-orphan")
    goals = relationship("GoalORM", back_populates="user", cascade="all, delete-orphan")
    badges = relationship("BadgeORM", back_populates="user", cascade="all, delete-orphan")


class TaskORM(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(SAEnum("todo", "in_progress", "completed", name="task_status"), default="todo")
    is_urgent = Column(Boolean, default=False)
    is_important = Column(Boolean, default=False)
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserORM", back_populates="tasks")


class FocusSessionORM(Base):
    __tablename__ = "focus_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True)
    planned_minutes = Column(Integer, nullable=False)
    actual_minutes = Column(Integer)
    started_at = Column(DateTime, nullable=False)
    completed_at = Column(DateTime)
    session_type = Column(SAEnum("work", "short_break", "long_break", name="session_type"), default="work")
    completed = Column(Boolean, default=False)
    break_minutes = Column(Integer)
    notes = Column(Text)

    user = relationship("UserORM", back_populates="sessions")


class DailyMetricsORM(Base):
    __tablename__ = "daily_metrics"
    __table_args__ = (UniqueConstraint("user_id", "metric_date", name="uq_daily_metrics_user_date"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    metric_date = Column(Date, nullable=False, index=True)

    tasks_created = Column(Integer, default=0)
    tasks_completed = Column(Integer, default=0)
    tasks_completed_same_day = Column(Integer, default=0)
    completion_rate = Column(Float, default=0.0)

    pomodoros_completed = Column(Integer, default=0)
    focus_minutes = Column(Integer, default=0)
    break_minutes = Column(Integer, default=0)
    interrupted_sessions = Column(Integer, default=0)
    late_night_sessions = Column(Integer, default=0)
    overwork_minutes = Column(Integer, default=0)
    consecutive_work_days = Column(Integer, default=0)
    morning_focus_minutes = Column(Integer, default=0)    # 06-12
    afternoon_focus_minutes = Column(Integer, default=0)  # 12-18
    evening_focus_minutes = Column(Integer, default=0)    # 18-24
    night_focus_minutes = Column(Integer, default=0)      # 00-06

    urgent_important = Column(Integer, default=0)
    not_urgent_important = Column(Integer, default=0)
    urgent_not_important = Column(Integer, default=0)
    not_urgent_not_important = Column(Integer, default=0)

    productivity_score = Column(Float, default=0.0)
    focus_score = Column(Float, default=0.0)
    burnout_risk_score = Column(Float, default=0.0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserORM", back_populates="daily_metrics")


class GoalORM(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(String(1000))
    goal_type = Column(SAEnum("daily", "weekly", "monthly", name="goal_type"), nullable=False)
    target_tasks = Column(Integer)
    target_pomodoros = Column(Integer)
    target_focus_minutes = Column(Integer)
    current_tasks = Column(Integer, default=0, nullable=False)
    current_pomodoros = Column(Integer, default=0, nullable=False)
    current_focus_minutes = Column(Integer, default=0, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    completed_date = Column(Date)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserORM", back_populates="goals")


class BadgeORM(Base):
    __tablename__ = "badges"
    __table_args__ = (UniqueConstraint("user_id", "badge_type", name="uq_badges_user_type"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    badge_type = Column(String(50), nullable=False)
    earned_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("UserORM", back_populates="badges")
