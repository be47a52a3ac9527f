"""Test configuration."""
import os
from pathlib import Path
from typing import Generator

import pytest
from dotenv import load_dotenv

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite://")

# Load test environment variables
test_env_path = Path(__file__).parent.parent.parent.parent / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from vocabbunny.models.base import Base, init_db
from vocabbunny.models.models import User
from vocabbunny.services.user_service import UserService
from vocabbunny.services.word_store import SqlWordStore
from vocabbunny.tests.helpers import fake


@pytest.fixture(autouse=True)
def setup_test_environment(tmp_path, monkeypatch):
    """Keep generated files inside a temporary data directory."""
    from vocabbunny.config import settings

    monkeypatch.setattr(settings.paths, "pronunciations_dir", tmp_path / "pronunciations")
    yield


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Create an in-memory database shared by all sessions of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def store(db: Session) -> SqlWordStore:
    """Create a SQL word store."""
    return SqlWordStore(db)


@pytest.fixture
def user_service(db: Session) -> UserService:
    """Create a user service instance."""
    return UserService(db)


@pytest.fixture
def user(user_service: UserService) -> User:
    """Create a test user."""
    return user_service.get_or_create_user(fake.unique.email(), daily_goal=3)
