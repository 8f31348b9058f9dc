import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Settings are read at import time, so the environment must be ready first
os.environ.update({
    "SECRET_KEY": "test-secret-key",
    "JWT_ALGORITHM": "HS256",
    "DATABASE_URL": "sqlite:///:memory:",
    "LOG_TO_FILE": "false",
    "LOG_LEVEL": "WARNING",
})

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.database import Base, enable_sqlite_savepoints
from app.crud.store import MemoryProgressStore, SQLProgressStore
from app.models import course_progress, lesson_progress  # noqa: F401
from app.services.progress_tracker import ProgressTracker
from app.utils import deps as deps_utils
import main

test_db_url = settings.TEST_DATABASE_URL or "sqlite:///:memory:"


class FakeClock:
    """Controllable stand-in for ``datetime.now``."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, days: int = 0, seconds: int = 0):
        self.current = self.current + timedelta(days=days, seconds=seconds)
        return self.current


@pytest.fixture(scope="session")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(
            test_db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        enable_sqlite_savepoints(engine)
    else:
        engine = create_engine(test_db_url)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()

@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()

@pytest.fixture(scope="function")
def client(db_session):
    def override_db():
        yield db_session

    main.app.dependency_overrides[deps_utils.get_db] = override_db
    main.app.dependency_overrides[deps_utils.get_transactional_db] = override_db
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()

@pytest.fixture(scope="function")
def committing_client(database_engine, monkeypatch):
    """Client running the real request-scoped sessions, so requests commit or roll back."""
    monkeypatch.setattr(
        deps_utils, "SessionLocal", sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    )
    with TestClient(main.app, raise_server_exceptions=False) as test_client:
        yield test_client

@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 2, 9, 30, 0))

@pytest.fixture(params=["memory", "sql"])
def store(request, db_session):
    if request.param == "memory":
        return MemoryProgressStore()
    return SQLProgressStore(db_session)

@pytest.fixture
def tracker(store, clock):
    return ProgressTracker(store, clock=clock)

@pytest.fixture
def token_for_user():
    """Mint identity-provider style access tokens for arbitrary users."""
    def _token_for_user(user_id: str = None, expires_in: int = 3600, secret: str = None) -> str:
        payload = {
            "sub": user_id or str(uuid.uuid4()),
            "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
            "role": "authenticated",
        }
        return jwt.encode(payload, secret or settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return _token_for_user

@pytest.fixture
def student_headers(token_for_user):
    user_id = f"student-{uuid.uuid4()}"
    return user_id, {"Authorization": f"Bearer {token_for_user(user_id)}"}
