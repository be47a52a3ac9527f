"""Tests for record types and database models."""
from dataclasses import replace
from datetime import date

import pytest
from sqlalchemy.orm import Session

from vocabbunny.models.models import DailyProgress as DailyProgressRow
from vocabbunny.models.models import User, UserLog, Word
from vocabbunny.models.records import DailyProgress, UserProfile, WordRecord
from vocabbunny.tests.helpers import DAY1, fake, make_profile, make_word


def test_word_record_defaults() -> None:
    """Test a new word starts unquizzed under the default theme."""
    word = WordRecord(english="apple", translation="quả táo", pos="Noun", examples=["I ate an apple."])

    assert word.id
    assert word.theme == "General"
    assert word.times_quizzed == 0
    assert word.correct_count == 0
    assert word.last_quizzed_at is None
    assert word.is_starred is False
    assert word.examples == ("I ate an apple.",)


def test_word_record_ids_are_unique() -> None:
    """Test every word gets its own id."""
    assert make_word("a").id != make_word("b").id


@pytest.mark.parametrize(
    "changes",
    [
        {"examples": ()},
        {"english": "  "},
        {"id": ""},
        {"times_quizzed": -1, "last_quizzed_at": DAY1},
        {"times_quizzed": 2, "correct_count": 3, "last_quizzed_at": DAY1},
        {"times_quizzed": 1, "correct_count": -1, "last_quizzed_at": DAY1},
        {"times_quizzed": 1, "last_quizzed_at": None},
        {"last_quizzed_at": DAY1},
    ],
)
def test_word_record_rejects_invalid_values(changes) -> None:
    """Test invariants are enforced on construction and replacement."""
    with pytest.raises(ValueError):
        replace(make_word("pear"), **changes)


def test_graded_returns_new_record() -> None:
    """Test grading leaves the original record untouched."""
    word = make_word("house")
    graded = word.graded(True, DAY1)

    assert word.times_quizzed == 0
    assert graded.times_quizzed == 1
    assert graded.correct_count == 1
    assert graded.last_quizzed_at == DAY1
    assert graded.id == word.id


def test_daily_progress_invariants() -> None:
    """Test unique correct words can never outnumber quizzes."""
    with pytest.raises(ValueError):
        DailyProgress(date=date(2024, 1, 1), unique_correct_words={"a", "b"}, quizzes_done=1)
    with pytest.raises(ValueError):
        DailyProgress(date=date(2024, 1, 1), quizzes_done=-1)

    progress = DailyProgress(date=date(2024, 1, 1), unique_correct_words=["a", "a"], quizzes_done=2)
    assert progress.unique_correct_words == frozenset({"a"})
    assert progress.unique_correct_count == 1


def test_profile_requires_positive_goal() -> None:
    """Test the daily goal must be at least one word."""
    with pytest.raises(ValueError):
        make_profile(daily_goal=0)


def test_profile_find_word() -> None:
    """Test looking a word up by id."""
    word = make_word("river")
    profile = make_profile([word])

    assert profile.find_word(word.id) == word
    assert profile.find_word("missing") is None
    assert isinstance(profile, UserProfile)


def test_user_creation(db: Session) -> None:
    """Test user creation with default goal."""
    user = User(email=fake.email())
    db.add(user)
    db.commit()
    db.refresh(user)

    assert user.id is not None
    assert user.daily_goal == 5
    assert user.created_at is not None


def test_word_and_progress_rows(db: Session) -> None:
    """Test word and progress rows hang off the user."""
    user = User(email=fake.email())
    db.add(user)
    db.commit()

    word = Word(
        user_id=user.id,
        position=0,
        english="hello",
        translation="xin chào",
        pos="Interjection",
        examples=["Hello, how are you?"],
    )
    progress = DailyProgressRow(user_id=user.id, date=date(2024, 1, 1), unique_correct_words=[], quizzes_done=0)
    db.add_all([word, progress])
    db.commit()
    db.refresh(user)

    assert [w.english for w in user.words] == ["hello"]
    assert user.words[0].examples == ["Hello, how are you?"]
    assert user.words[0].theme == "General"
    assert user.progress.quizzes_done == 0


def test_deleting_user_removes_owned_rows(db: Session) -> None:
    """Test words, progress and logs are owned by the user."""
    user = User(email=fake.email())
    user.words.append(Word(position=0, english="tree", translation="cây", pos="Noun", examples=["A tall tree."]))
    user.progress = DailyProgressRow(date=date(2024, 1, 1), unique_correct_words=[], quizzes_done=0)
    user.logs.append(UserLog(message="User created", level="INFO", category="user_created"))
    db.add(user)
    db.commit()

    db.delete(user)
    db.commit()

    assert db.query(Word).count() == 0
    assert db.query(DailyProgressRow).count() == 0
    assert db.query(UserLog).count() == 0
