"""Service for running quizzes against a user's word list."""
import logging
import threading
import weakref
from datetime import UTC, datetime
from typing import Callable, List, Optional, Union

from vocabbunny.exceptions import EmptyPoolError, WordNotFoundError
from vocabbunny.models.records import DailyProgress, Outcome, QuizMode, WordRecord
from vocabbunny.monitoring import daily_goals_reached, error_count, quizzes_graded
from vocabbunny.services.review_engine import ReviewEngine
from vocabbunny.services.word_store import WordStore

logger = logging.getLogger(__name__)

GoalListener = Callable[[str, Outcome], None]


class QuizService:
    """Selects quiz words and records self-graded answers."""
    # Entries disappear once no grading call holds the lock
    _locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
    _locks_guard = threading.Lock()

    def __init__(
        self,
        store: WordStore,
        engine: Optional[ReviewEngine] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the service with a word store."""
        self.store = store
        self.engine = engine or ReviewEngine()
        self.clock = clock or (lambda: datetime.now(UTC))
        self.goal_listeners: List[GoalListener] = []

    @classmethod
    def _profile_lock(cls, profile_id: str) -> threading.Lock:
        with cls._locks_guard:
            lock = cls._locks.get(profile_id)
            if lock is None:
                lock = threading.Lock()
                cls._locks[profile_id] = lock
            return lock

    def _now(self, now: Optional[datetime]) -> datetime:
        now = now or self.clock()
        # Timestamps are stored as UTC
        if now.tzinfo is None:
            return now.replace(tzinfo=UTC)
        return now.astimezone(UTC)

    def add_goal_listener(self, listener: GoalListener) -> None:
        """Register a callback run once when a user reaches the daily goal."""
        self.goal_listeners.append(listener)

    def start_quiz(self, profile_id: str, mode: Union[QuizMode, str] = QuizMode.SMART) -> WordRecord:
        """Choose the word to quiz next."""
        profile = self.store.get_profile(profile_id)
        try:
            word = self.engine.select_next_word(profile, mode)
        except EmptyPoolError:
            logger.info(f"User {profile_id} has no words to quiz")
            raise
        logger.debug(f"Quiz word for user {profile_id} in {QuizMode(mode).value} mode: {word.id}")
        return word

    def start_speaking(self, profile_id: str) -> WordRecord:
        """Choose a random word for speaking practice."""
        return self.start_quiz(profile_id, QuizMode.RANDOM)

    def grade(
        self,
        profile_id: str,
        word_id: str,
        is_correct: bool,
        now: Optional[datetime] = None,
    ) -> Outcome:
        """Record a self-graded answer and persist it as one unit."""
        now = self._now(now)
        # Rollover and the unique-word insert are read-modify-write
        with self._profile_lock(profile_id):
            profile = self.store.get_profile(profile_id)
            try:
                outcome = self.engine.record_outcome(profile, word_id, is_correct, now)
            except WordNotFoundError as e:
                error_count.labels(error_type="word_not_found").inc()
                logger.error(f"Cannot grade answer: {e}")
                raise
            self.store.save_outcome(profile_id, outcome.word, outcome.progress)

        quizzes_graded.labels(result="correct" if is_correct else "incorrect").inc()
        logger.info(
            f"User {profile_id} answered {word_id} {'correctly' if is_correct else 'incorrectly'} "
            f"({outcome.progress.unique_correct_count}/{profile.daily_goal} today)"
        )
        if outcome.goal_reached:
            daily_goals_reached.inc()
            for listener in self.goal_listeners:
                listener(profile_id, outcome)
        return outcome

    def get_daily_progress(self, profile_id: str, now: Optional[datetime] = None) -> DailyProgress:
        """Return today's progress, persisting a reset on the first read of a new day."""
        now = self._now(now)
        with self._profile_lock(profile_id):
            stored = self.store.get_progress(profile_id)
            progress = self.engine.reconcile_progress(stored, now)
            if progress != stored:
                self.store.set_progress(profile_id, progress)
                logger.info(f"Daily progress for user {profile_id} reset for {progress.date}")
        return progress
