"""User service for managing profiles and learning statistics."""
from datetime import UTC, datetime
from typing import Optional
import logging

from sqlalchemy.orm import Session

from vocabbunny.config import settings
from vocabbunny.exceptions import ProfileNotFoundError
from vocabbunny.models.models import DailyProgress, User, UserLog
from vocabbunny.services.quiz_service import QuizService
from vocabbunny.services.review_engine import compute_mastery, today, word_accuracy
from vocabbunny.services.word_store import SqlWordStore

# Configure logging
logger = logging.getLogger(__name__)


class UserService:
    """Service for managing profiles and their settings."""

    def __init__(self, db: Session, quiz_service: Optional[QuizService] = None):
        """Initialize the service with a database session."""
        self.db = db
        self.store = SqlWordStore(db)
        self.quiz_service = quiz_service or QuizService(self.store)

    def get_user(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email, ignoring case."""
        return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def get_or_create_user(self, email: str, daily_goal: Optional[int] = None) -> User:
        """Get existing user or create a new one."""
        email = email.strip().lower()
        if not email:
            raise ValueError("Email is required")

        user = self.get_user_by_email(email)
        if not user:
            daily_goal = settings.learning.default_daily_goal if daily_goal is None else daily_goal
            self._check_goal(daily_goal)
            user = User(email=email, daily_goal=daily_goal)
            user.progress = DailyProgress(
                date=today(datetime.now(UTC)),
                unique_correct_words=[],
                quizzes_done=0,
            )
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)

            self.log_user_activity(
                user.id,
                "User created",
                "INFO",
                "user_created",
            )

        return user

    @staticmethod
    def _check_goal(daily_goal: int) -> None:
        if not isinstance(daily_goal, int) or daily_goal < 1:
            raise ValueError(f"Daily goal must be a positive integer, got {daily_goal!r}")

    def update_daily_goal(self, user_id: str, daily_goal: int) -> User:
        """Change the number of distinct words to get right each day."""
        self._check_goal(daily_goal)
        user = self.get_user(user_id)
        if not user:
            raise ProfileNotFoundError(user_id)

        user.daily_goal = daily_goal
        self.db.commit()
        self.db.refresh(user)

        self.log_user_activity(
            user.id,
            f"User settings updated: [ daily_goal: {daily_goal} ]",
            "INFO",
            "settings_updated",
        )
        return user

    def get_user_statistics(self, user_id: str, now: Optional[datetime] = None) -> dict:
        """Get mastery and today's goal progress for the user."""
        progress = self.quiz_service.get_daily_progress(user_id, now)
        profile = self.store.get_profile(user_id)
        words = profile.words

        unique_correct = progress.unique_correct_count
        goal = profile.daily_goal

        return {
            "total_words": len(words),
            "total_quizzed": sum(word.times_quizzed for word in words),
            "total_correct": sum(word.correct_count for word in words),
            "mastery": compute_mastery(words),
            "daily_goal": goal,
            "unique_correct_today": unique_correct,
            "quizzes_done_today": progress.quizzes_done,
            "goal_percent": min(100.0, unique_correct / goal * 100),
            "goal_reached": unique_correct >= goal,
            "word_accuracy": [
                {
                    "id": word.id,
                    "english": word.english,
                    "times_quizzed": word.times_quizzed,
                    "accuracy": word_accuracy(word),
                }
                for word in words
            ],
        }

    def log_user_activity(
        self,
        user_id: str,
        message: str,
        level: str,
        category: str,
    ) -> None:
        """Log user activity."""
        logger.log(logging.getLevelName(level), f"Logging user activity: {message}")
        log = UserLog(
            user_id=user_id,
            message=message,
            level=level,
            category=category,
        )
        self.db.add(log)
        self.db.commit()
