"""Application wiring."""
import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from vocabbunny.config import ensure_directories, settings
from vocabbunny.logging_config import setup_logging
from vocabbunny.models.base import SessionLocal, init_db
from vocabbunny.models.records import Outcome
from vocabbunny.monitoring import start_monitoring
from vocabbunny.services.pronunciation_service import PronunciationService
from vocabbunny.services.quiz_service import QuizService
from vocabbunny.services.user_service import UserService
from vocabbunny.services.word_service import WordService
from vocabbunny.services.word_store import SqlWordStore


class VocabBunnyApp:
    """Builds the services around one database session."""

    def __init__(self, bind: Optional[Engine] = None):
        """Initialize the application, optionally on a specific engine."""
        self.bind = bind
        if bind is not None:
            self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=bind)
        else:
            self.session_factory = SessionLocal
        self.db: Optional[Session] = None
        self.store: Optional[SqlWordStore] = None
        self.quiz_service: Optional[QuizService] = None
        self.word_service: Optional[WordService] = None
        self.user_service: Optional[UserService] = None
        self.pronunciation_service: Optional[PronunciationService] = None
        self.running = False
        self.logger = logging.getLogger(__name__)

    def start(self, configure_logging: bool = True) -> None:
        """Start the application."""
        if self.running:
            return

        ensure_directories()
        if configure_logging:
            setup_logging("Starting VocabBunny ...")

        try:
            init_db(self.bind)
            self.db = self.session_factory()
            self.logger.info("Database initialized")

            self.store = SqlWordStore(self.db)
            self.quiz_service = QuizService(self.store)
            self.word_service = WordService(self.store)
            self.user_service = UserService(self.db, quiz_service=self.quiz_service)
            self.pronunciation_service = PronunciationService()
            self.quiz_service.add_goal_listener(self._on_goal_reached)
            self.logger.info("Services created")

            if settings.monitoring.enabled:
                start_monitoring(settings.monitoring.port)
                self.logger.info(f"Metrics server listening on port {settings.monitoring.port}")

            self.running = True

        except Exception as e:
            self.logger.error("Failed to start application: %s", str(e))
            self.stop()
            raise

    def _on_goal_reached(self, profile_id: str, outcome: Outcome) -> None:
        """Record the daily goal in the user's activity log."""
        self.user_service.log_user_activity(
            profile_id,
            f"Daily goal reached with {outcome.progress.unique_correct_count} words",
            "INFO",
            "goal_reached",
        )

    def stop(self) -> None:
        """Stop the application."""
        if self.db:
            self.db.close()
            self.db = None
            self.logger.info("Database session closed")

        self.store = None
        self.quiz_service = None
        self.word_service = None
        self.user_service = None
        self.pronunciation_service = None
        self.running = False
