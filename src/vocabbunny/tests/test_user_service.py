"""Tests for user service."""
from datetime import UTC, datetime

import pytest
from faker import Faker
from sqlalchemy.orm import Session

from vocabbunny.exceptions import ProfileNotFoundError
from vocabbunny.models.models import User, UserLog
from vocabbunny.services.user_service import UserService
from vocabbunny.tests.helpers import DAY1, DAY2, make_word

fake = Faker()


def test_get_or_create_user(user_service: UserService) -> None:
    """Test user creation and retrieval."""
    email = fake.email()
    user = user_service.get_or_create_user(email)

    assert user.email == email.lower()
    assert user.daily_goal == 5
    assert user.progress is not None
    assert user.progress.date == datetime.now(UTC).date()
    assert user.progress.quizzes_done == 0

    existing_user = user_service.get_or_create_user(email.upper())
    assert existing_user.id == user.id


def test_get_or_create_user_logs_creation(user_service: UserService, db: Session) -> None:
    """Test a new user gets a creation log entry."""
    user = user_service.get_or_create_user(fake.email())

    logs = db.query(UserLog).filter(UserLog.user_id == user.id).all()
    assert [log.category for log in logs] == ["user_created"]


def test_get_or_create_user_validation(user_service: UserService) -> None:
    """Test email and goal are validated."""
    with pytest.raises(ValueError):
        user_service.get_or_create_user("  ")
    with pytest.raises(ValueError):
        user_service.get_or_create_user(fake.email(), daily_goal=0)


def test_get_user(user_service: UserService, user: User) -> None:
    """Test lookups by id and email."""
    assert user_service.get_user(user.id).email == user.email
    assert user_service.get_user_by_email(user.email).id == user.id
    assert user_service.get_user("missing") is None
    assert user_service.get_user_by_email("missing@example.com") is None


def test_update_daily_goal(user_service: UserService, user: User, db: Session) -> None:
    """Test changing the daily goal."""
    updated = user_service.update_daily_goal(user.id, 10)

    assert updated.daily_goal == 10
    log = db.query(UserLog).filter(UserLog.category == "settings_updated").one()
    assert "daily_goal: 10" in log.message


@pytest.mark.parametrize("goal", [0, -3])
def test_update_daily_goal_rejects_non_positive(user_service: UserService, user: User, goal: int) -> None:
    """Test the goal must stay positive."""
    with pytest.raises(ValueError):
        user_service.update_daily_goal(user.id, goal)


def test_update_daily_goal_unknown_user(user_service: UserService) -> None:
    """Test updating a missing user."""
    with pytest.raises(ProfileNotFoundError):
        user_service.update_daily_goal("missing", 3)


def test_user_statistics(user_service: UserService, user: User) -> None:
    """Test mastery and goal progress reported for the dashboard."""
    store = user_service.store
    often = make_word("often", times_quizzed=10, correct_count=8)
    never = make_word("never")
    store.add_words(user.id, [often, never])
    user_service.quiz_service.grade(user.id, never.id, True, now=DAY1)

    stats = user_service.get_user_statistics(user.id, now=DAY1)

    assert stats["total_words"] == 2
    assert stats["total_quizzed"] == 11
    assert stats["total_correct"] == 9
    assert stats["mastery"] == pytest.approx(9 / 11 * 100)
    assert stats["daily_goal"] == 3
    assert stats["unique_correct_today"] == 1
    assert stats["quizzes_done_today"] == 1
    assert stats["goal_percent"] == pytest.approx(100 / 3)
    assert stats["goal_reached"] is False
    assert [(row["english"], row["accuracy"]) for row in stats["word_accuracy"]] == [
        ("often", 80),
        ("never", 100),
    ]


def test_user_statistics_on_next_day(user_service: UserService, user: User) -> None:
    """Test today's counters reset while mastery is kept."""
    store = user_service.store
    words = [make_word(f"s{i}") for i in range(4)]
    store.add_words(user.id, words)
    for word in words:
        user_service.quiz_service.grade(user.id, word.id, True, now=DAY1)

    day_one = user_service.get_user_statistics(user.id, now=DAY1)
    day_two = user_service.get_user_statistics(user.id, now=DAY2)

    assert day_one["goal_reached"] is True
    assert day_one["goal_percent"] == 100.0
    assert day_two["unique_correct_today"] == 0
    assert day_two["quizzes_done_today"] == 0
    assert day_two["goal_reached"] is False
    assert day_two["mastery"] == 100.0


def test_log_user_activity(user_service: UserService, user: User, db: Session) -> None:
    """Test activity log entries are stored."""
    user_service.log_user_activity(user.id, "Daily goal reached", "INFO", "goal_reached")

    log = db.query(UserLog).filter(UserLog.category == "goal_reached").one()
    assert log.user_id == user.id
    assert log.level == "INFO"
