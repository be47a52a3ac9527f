"""Value types passed between the review engine and its collaborators."""
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from enum import Enum
from typing import FrozenSet, Optional, Tuple
from uuid import uuid4

from vocabbunny.config import settings


class PartOfSpeech(Enum):
    """Grammatical category tags."""
    NOUN = "Noun"
    VERB = "Verb"
    ADJECTIVE = "Adjective"
    ADVERB = "Adverb"
    PREPOSITION = "Preposition"
    CONJUNCTION = "Conjunction"
    INTERJECTION = "Interjection"
    OTHER = "Other"


class QuizMode(Enum):
    """Word selection strategies."""
    SMART = "smart"  # biased toward the least quizzed words
    RANDOM = "random"  # uniform over the whole pool


def new_word_id() -> str:
    """Generate an opaque word id."""
    return uuid4().hex


@dataclass(frozen=True)
class WordRecord:
    """One vocabulary entry with its quiz statistics."""
    english: str
    translation: str
    pos: str
    examples: Tuple[str, ...]
    theme: str = settings.learning.default_theme
    id: str = field(default_factory=new_word_id)
    times_quizzed: int = 0
    correct_count: int = 0
    last_quizzed_at: Optional[datetime] = None
    is_starred: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        # Accept any sequence of examples but always store a tuple
        object.__setattr__(self, "examples", tuple(self.examples))
        if not self.id:
            raise ValueError("Word id cannot be empty")
        if not self.english.strip():
            raise ValueError("Word text cannot be empty")
        if not self.examples:
            raise ValueError(f"Word {self.english!r} needs at least one example")
        if self.times_quizzed < 0:
            raise ValueError("times_quizzed cannot be negative")
        if self.correct_count < 0 or self.correct_count > self.times_quizzed:
            raise ValueError("correct_count must be between 0 and times_quizzed")
        if (self.last_quizzed_at is None) != (self.times_quizzed == 0):
            raise ValueError("last_quizzed_at must be set exactly when the word was quizzed")

    def graded(self, is_correct: bool, now: datetime) -> "WordRecord":
        """Return a copy with one more grading event applied."""
        return replace(
            self,
            times_quizzed=self.times_quizzed + 1,
            correct_count=self.correct_count + (1 if is_correct else 0),
            last_quizzed_at=now,
        )


@dataclass(frozen=True)
class DailyProgress:
    """Quiz counters for a single calendar day."""
    date: date
    unique_correct_words: FrozenSet[str] = frozenset()
    quizzes_done: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "unique_correct_words", frozenset(self.unique_correct_words))
        if self.quizzes_done < 0:
            raise ValueError("quizzes_done cannot be negative")
        if len(self.unique_correct_words) > self.quizzes_done:
            raise ValueError("unique_correct_words cannot exceed quizzes_done")

    @classmethod
    def fresh(cls, day: date) -> "DailyProgress":
        """Empty progress for the given day."""
        return cls(date=day)

    @property
    def unique_correct_count(self) -> int:
        return len(self.unique_correct_words)


@dataclass(frozen=True)
class UserProfile:
    """A user's words, daily goal and current daily progress."""
    id: str
    email: str
    progress: DailyProgress
    words: Tuple[WordRecord, ...] = ()
    daily_goal: int = settings.learning.default_daily_goal

    def __post_init__(self) -> None:
        object.__setattr__(self, "words", tuple(self.words))
        if self.daily_goal < 1:
            raise ValueError("daily_goal must be positive")

    def find_word(self, word_id: str) -> Optional[WordRecord]:
        """Return the word with the given id, if the profile owns it."""
        for word in self.words:
            if word.id == word_id:
                return word
        return None


@dataclass(frozen=True)
class Outcome:
    """Result of recording one self-graded answer."""
    word: WordRecord
    progress: DailyProgress
    goal_reached: bool = False


@dataclass(frozen=True)
class EnrichedWord:
    """Structured data returned by the enrichment service for one token."""
    english: str
    translation: str
    pos: str
    examples: Tuple[str, ...]
