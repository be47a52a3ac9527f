"""Shared test data builders."""
from datetime import UTC, datetime

from faker import Faker

from vocabbunny.models.records import DailyProgress, UserProfile, WordRecord

fake = Faker()

DAY1 = datetime(2024, 3, 10, 9, 30, tzinfo=UTC)
DAY2 = datetime(2024, 3, 11, 8, 0, tzinfo=UTC)


def make_word(english: str = None, times_quizzed: int = 0, correct_count: int = 0, **kwargs) -> WordRecord:
    """Build a word record with sensible test defaults."""
    english = english or fake.unique.word()
    return WordRecord(
        english=english,
        translation=kwargs.pop("translation", fake.word()),
        pos=kwargs.pop("pos", "Noun"),
        examples=kwargs.pop("examples", (f"An example with {english}.",)),
        times_quizzed=times_quizzed,
        correct_count=correct_count,
        last_quizzed_at=DAY1 if times_quizzed else None,
        **kwargs,
    )


def make_profile(words=(), daily_goal: int = 5, progress: DailyProgress = None) -> UserProfile:
    """Build a profile snapshot without touching the database."""
    return UserProfile(
        id="user-1",
        email="learner@example.com",
        daily_goal=daily_goal,
        words=tuple(words),
        progress=progress or DailyProgress.fresh(DAY1.date()),
    )
