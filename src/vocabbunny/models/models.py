"""Database models."""
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from vocabbunny.config import settings
from vocabbunny.models.base import Base, TimestampMixin


def _new_id() -> str:
    return uuid4().hex


class User(Base, TimestampMixin):
    """User profile model."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=_new_id)
    email = Column(String, unique=True, nullable=False, index=True)
    daily_goal = Column(Integer, default=settings.learning.default_daily_goal, nullable=False)

    # Relationships
    words = relationship(
        "Word",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Word.position",
    )
    progress = relationship(
        "DailyProgress",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    logs = relationship("UserLog", back_populates="user", cascade="all, delete-orphan")


class Word(Base, TimestampMixin):
    """Vocabulary entry owned by a single user."""

    __tablename__ = "words"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # insertion order within the user's list
    english = Column(String, nullable=False)
    translation = Column(String, nullable=False)
    pos = Column(String, nullable=False)
    examples = Column(JSON, nullable=False, default=list)
    theme = Column(String, nullable=False, default=settings.learning.default_theme)
    times_quizzed = Column(Integer, nullable=False, default=0)
    correct_count = Column(Integer, nullable=False, default=0)
    last_quizzed_at = Column(DateTime(timezone=True), nullable=True)
    is_starred = Column(Boolean, nullable=False, default=False)

    # Relationships
    user = relationship("User", back_populates="words")


class DailyProgress(Base):
    """Current day's quiz counters, one row per user."""

    __tablename__ = "daily_progress"

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    date = Column(Date, nullable=False)
    unique_correct_words = Column(JSON, nullable=False, default=list)
    quizzes_done = Column(Integer, nullable=False, default=0)

    # Relationships
    user = relationship("User", back_populates="progress")


class UserLog(Base, TimestampMixin):
    """User activity log model."""

    __tablename__ = "user_logs"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    message = Column(String, nullable=False)
    level = Column(String, nullable=False)  # INFO, WARNING, ERROR
    category = Column(String, nullable=False)  # e.g., "quiz", "settings"

    # Relationships
    user = relationship("User", back_populates="logs")
