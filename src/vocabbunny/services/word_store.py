"""Persistence of word lists and daily progress."""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import replace
from datetime import UTC, date, datetime
from typing import Any, Iterator, List, Mapping, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vocabbunny.exceptions import PersistenceError, ProfileNotFoundError, WordNotFoundError
from vocabbunny.models import models
from vocabbunny.models.records import DailyProgress, UserProfile, WordRecord
from vocabbunny.monitoring import db_errors

logger = logging.getLogger(__name__)

# Fields a caller may change through update_word; statistics go through save_outcome
EDITABLE_FIELDS = frozenset({"english", "translation", "pos", "examples", "theme", "is_starred"})


class WordStore(ABC):
    """Storage collaborator for a user's words and daily progress.

    Implementations must give read-your-writes within one session. Failures
    surface as ``PersistenceError``; the store never retries on its own.
    """

    @abstractmethod
    def get_profile(self, profile_id: str) -> UserProfile:
        """Load the full profile snapshot."""

    @abstractmethod
    def list_words(self, profile_id: str) -> List[WordRecord]:
        """Return the user's words in insertion order."""

    @abstractmethod
    def get_word(self, profile_id: str, word_id: str) -> WordRecord:
        """Return one word or raise ``WordNotFoundError``."""

    @abstractmethod
    def add_words(self, profile_id: str, words: Sequence[WordRecord]) -> List[WordRecord]:
        """Append words to the end of the user's list."""

    @abstractmethod
    def update_word(self, profile_id: str, word_id: str, patch: Mapping[str, Any]) -> WordRecord:
        """Change editable fields of one word."""

    @abstractmethod
    def delete_word(self, profile_id: str, word_id: str) -> None:
        """Remove one word."""

    @abstractmethod
    def get_progress(self, profile_id: str) -> Optional[DailyProgress]:
        """Return the stored daily progress, if any."""

    @abstractmethod
    def set_progress(self, profile_id: str, progress: DailyProgress) -> None:
        """Replace the stored daily progress."""

    @abstractmethod
    def save_outcome(self, profile_id: str, word: WordRecord, progress: DailyProgress) -> None:
        """Write a graded word and the matching progress as one unit."""


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class SqlWordStore(WordStore):
    """Word store backed by the SQLAlchemy session."""

    def __init__(self, db: Session):
        """Initialize the store with a database session."""
        self.db = db

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        """Commit on success, roll back and wrap database errors otherwise."""
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            db_errors.labels(error_type=type(e).__name__).inc()
            logger.error(f"Database error while trying to {operation}: {e}")
            raise PersistenceError(f"Failed to {operation}") from e
        except Exception:
            self.db.rollback()
            raise

    def _get_user(self, profile_id: str) -> models.User:
        user = self.db.query(models.User).filter(models.User.id == profile_id).first()
        if not user:
            raise ProfileNotFoundError(profile_id)
        return user

    def _get_word(self, profile_id: str, word_id: str) -> models.Word:
        word = (
            self.db.query(models.Word)
            .filter(models.Word.user_id == profile_id, models.Word.id == word_id)
            .first()
        )
        if not word:
            raise WordNotFoundError(profile_id, word_id)
        return word

    def _query_words(self, profile_id: str) -> List[models.Word]:
        return (
            self.db.query(models.Word)
            .filter(models.Word.user_id == profile_id)
            .order_by(models.Word.position)
            .all()
        )

    @staticmethod
    def _to_record(row: models.Word) -> WordRecord:
        return WordRecord(
            id=row.id,
            english=row.english,
            translation=row.translation,
            pos=row.pos,
            examples=tuple(row.examples or ()),
            theme=row.theme,
            times_quizzed=row.times_quizzed,
            correct_count=row.correct_count,
            last_quizzed_at=_as_utc(row.last_quizzed_at),
            is_starred=row.is_starred,
            created_at=_as_utc(row.created_at) or datetime.now(UTC),
        )

    @staticmethod
    def _to_progress(row: models.DailyProgress) -> DailyProgress:
        return DailyProgress(
            date=row.date,
            unique_correct_words=frozenset(row.unique_correct_words or ()),
            quizzes_done=row.quizzes_done,
        )

    @staticmethod
    def _write_word(row: models.Word, word: WordRecord) -> None:
        row.english = word.english
        row.translation = word.translation
        row.pos = word.pos
        row.examples = list(word.examples)
        row.theme = word.theme
        row.times_quizzed = word.times_quizzed
        row.correct_count = word.correct_count
        row.last_quizzed_at = word.last_quizzed_at
        row.is_starred = word.is_starred

    def _write_progress(self, profile_id: str, progress: DailyProgress) -> None:
        row = self.db.get(models.DailyProgress, profile_id)
        if row is None:
            row = models.DailyProgress(user_id=profile_id)
            self.db.add(row)
        row.date = progress.date
        row.unique_correct_words = sorted(progress.unique_correct_words)
        row.quizzes_done = progress.quizzes_done

    def get_profile(self, profile_id: str) -> UserProfile:
        """Load the user with words and progress."""
        with self._transaction("load profile"):
            user = self._get_user(profile_id)
            if user.progress is not None:
                progress = self._to_progress(user.progress)
            else:
                # Never quizzed yet; the engine rolls this over on first use
                progress = DailyProgress.fresh(date.min)
            profile = UserProfile(
                id=user.id,
                email=user.email,
                daily_goal=user.daily_goal,
                words=tuple(self._to_record(row) for row in self._query_words(profile_id)),
                progress=progress,
            )
        return profile

    def list_words(self, profile_id: str) -> List[WordRecord]:
        """Return the user's words in insertion order."""
        with self._transaction("list words"):
            self._get_user(profile_id)
            words = [self._to_record(row) for row in self._query_words(profile_id)]
        return words

    def get_word(self, profile_id: str, word_id: str) -> WordRecord:
        """Return one word of the user."""
        with self._transaction("get word"):
            word = self._to_record(self._get_word(profile_id, word_id))
        return word

    def add_words(self, profile_id: str, words: Sequence[WordRecord]) -> List[WordRecord]:
        """Append words after the user's existing ones."""
        if not words:
            return []
        with self._transaction("add words"):
            self._get_user(profile_id)
            last_position = (
                self.db.query(func.max(models.Word.position))
                .filter(models.Word.user_id == profile_id)
                .scalar()
            )
            next_position = 0 if last_position is None else last_position + 1
            for offset, word in enumerate(words):
                row = models.Word(
                    id=word.id,
                    user_id=profile_id,
                    position=next_position + offset,
                    created_at=word.created_at,
                )
                self._write_word(row, word)
                self.db.add(row)
        logger.info(f"Stored {len(words)} words for user {profile_id}")
        return list(words)

    def update_word(self, profile_id: str, word_id: str, patch: Mapping[str, Any]) -> WordRecord:
        """Apply a patch of editable fields to one word."""
        unknown = set(patch) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update word fields: {', '.join(sorted(unknown))}")
        with self._transaction("update word"):
            row = self._get_word(profile_id, word_id)
            # Building the record validates the patched values before writing
            updated = replace(self._to_record(row), **patch)
            self._write_word(row, updated)
        return updated

    def delete_word(self, profile_id: str, word_id: str) -> None:
        """Delete one word of the user."""
        with self._transaction("delete word"):
            row = self._get_word(profile_id, word_id)
            self.db.delete(row)

    def get_progress(self, profile_id: str) -> Optional[DailyProgress]:
        """Return stored progress or None if the user never had any."""
        with self._transaction("get progress"):
            self._get_user(profile_id)
            row = self.db.get(models.DailyProgress, profile_id)
            progress = self._to_progress(row) if row is not None else None
        return progress

    def set_progress(self, profile_id: str, progress: DailyProgress) -> None:
        """Replace the user's progress row."""
        with self._transaction("set progress"):
            self._get_user(profile_id)
            self._write_progress(profile_id, progress)

    def save_outcome(self, profile_id: str, word: WordRecord, progress: DailyProgress) -> None:
        """Persist a graded word together with the updated progress."""
        with self._transaction("save outcome"):
            row = self._get_word(profile_id, word.id)
            self._write_word(row, word)
            self._write_progress(profile_id, progress)
