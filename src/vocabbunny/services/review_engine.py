"""Word selection and grading rules for quizzes."""
import logging
import math
import random
from collections import defaultdict
from dataclasses import replace
from datetime import UTC, date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Union

from vocabbunny.config import settings
from vocabbunny.exceptions import EmptyPoolError, WordNotFoundError
from vocabbunny.models.records import (
    DailyProgress,
    Outcome,
    QuizMode,
    UserProfile,
    WordRecord,
)

logger = logging.getLogger(__name__)


def today(now: datetime) -> date:
    """Return the UTC calendar day of ``now``. Naive datetimes are taken as UTC."""
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(UTC).date()


class ReviewEngine:
    """Chooses the next word to quiz and applies self-graded outcomes.

    The engine does no I/O. It works on a ``UserProfile`` snapshot and returns
    new values instead of mutating its inputs, so the caller decides when and
    how the result is persisted.
    """

    def __init__(self, rng: Optional[random.Random] = None, smart_pool_size: Optional[int] = None):
        """Initialize the engine with a random source."""
        self.rng = rng or random.Random()
        self.smart_pool_size = smart_pool_size or settings.learning.smart_pool_size

    def smart_candidates(self, words: Sequence[WordRecord]) -> List[WordRecord]:
        """Return the least quizzed words, ties kept in insertion order."""
        # sorted() is stable, so equal counts keep their list order
        ranked = sorted(words, key=lambda word: word.times_quizzed)
        return ranked[:min(self.smart_pool_size, len(ranked))]

    def select_next_word(self, profile: UserProfile, mode: Union[QuizMode, str] = QuizMode.SMART) -> WordRecord:
        """Pick the next word to quiz from the profile's words."""
        mode = QuizMode(mode)
        if not profile.words:
            raise EmptyPoolError(f"User {profile.id} has no words to quiz")

        if mode is QuizMode.RANDOM:
            return self.rng.choice(profile.words)
        return self.rng.choice(self.smart_candidates(profile.words))

    def reconcile_progress(self, progress: Optional[DailyProgress], now: datetime) -> DailyProgress:
        """Return progress for the day of ``now``, starting fresh on a new day."""
        day = today(now)
        if progress is not None and progress.date == day:
            return progress
        logger.debug(f"Daily progress rolled over to {day}")
        return DailyProgress.fresh(day)

    def record_outcome(
        self,
        profile: UserProfile,
        word_id: str,
        is_correct: bool,
        now: datetime,
    ) -> Outcome:
        """Apply one graded answer to the word and today's progress."""
        word = profile.find_word(word_id)
        if word is None:
            raise WordNotFoundError(profile.id, word_id)

        updated_word = word.graded(is_correct, now)

        progress = self.reconcile_progress(profile.progress, now)
        before = progress.unique_correct_count
        unique_correct_words = progress.unique_correct_words
        if is_correct:
            unique_correct_words = unique_correct_words | {word_id}
        progress = replace(
            progress,
            unique_correct_words=unique_correct_words,
            quizzes_done=progress.quizzes_done + 1,
        )

        # Fires on the crossing only, not on every answer at or above the goal
        after = progress.unique_correct_count
        goal_reached = after > before and after == profile.daily_goal
        if goal_reached:
            logger.info(f"User {profile.id} reached the daily goal of {profile.daily_goal} words")

        return Outcome(word=updated_word, progress=progress, goal_reached=goal_reached)


def compute_mastery(words: Iterable[WordRecord]) -> float:
    """Aggregate accuracy over all grading events, as a percentage.

    Words answered more often weigh more. Returns 0 when nothing was quizzed.
    """
    total_quizzed = 0
    total_correct = 0
    for word in words:
        total_quizzed += word.times_quizzed
        total_correct += word.correct_count
    if total_quizzed == 0:
        return 0.0
    return total_correct / total_quizzed * 100


def word_accuracy(word: WordRecord) -> int:
    """Accuracy of a single word as a whole percentage, rounded half up."""
    if word.times_quizzed == 0:
        return 0
    return math.floor(word.correct_count / word.times_quizzed * 100 + 0.5)


def filter_words(
    words: Iterable[WordRecord],
    query: str = "",
    starred_only: bool = False,
) -> List[WordRecord]:
    """Case-insensitive substring search over text, translation and theme."""
    needle = query.lower()
    result = []
    for word in words:
        if starred_only and not word.is_starred:
            continue
        if needle and not (
            needle in word.english.lower()
            or needle in word.translation.lower()
            or needle in word.theme.lower()
        ):
            continue
        result.append(word)
    return result


def group_by_theme(words: Iterable[WordRecord]) -> Dict[str, List[WordRecord]]:
    """Group words by theme label, themes in first-seen order."""
    groups = defaultdict(list)
    for word in words:
        groups[word.theme].append(word)
    return dict(groups)
