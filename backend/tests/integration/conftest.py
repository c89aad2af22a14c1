"""
Shared SQLite database for integration tests.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.infrastructure.database import models  # noqa: F401
from app.infrastructure.database.session import Base
from app.infrastructure.repositories.user_repository import UserRepository

TEST_DATABASE_URL = "sqlite:///./test_lockin.db"

engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    return UserRepository(db).create(email="ana@lockin.dev", username="ana")
