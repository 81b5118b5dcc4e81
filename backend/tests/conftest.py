"""Shared pytest fixtures: in-memory database, API client and auth helpers."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
import models  # noqa: F401
from main import app
from models.location import Location
from models.user import User
from services.achievement_service import sync_achievement_catalog
from services.location_service import register_location
from services.mission_service import seed_default_missions
from tests.fixtures.test_data import BRANDENBURG_GATE


def create_jwt_token(user: User, token_version: int = None) -> str:
    """Mint an access token the way the identity provider does."""
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "type": "access",
        "token_ver": user.token_version if token_version is None else token_version,
        "exp": datetime.utcnow() + timedelta(hours=1),
    }
    return jwt.encode(payload, "test-secret-key", algorithm="HS256")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Session:
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    sync_achievement_catalog(session)
    seed_default_missions(session)
    session.commit()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session: Session) -> TestClient:
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db: Session, username: str, **kwargs) -> User:
    user = User(username=username, email=f"{username}@example.com", **kwargs)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_user(db_session: Session) -> User:
    return make_user(db_session, "testuser")


@pytest.fixture
def other_user(db_session: Session) -> User:
    return make_user(db_session, "otheruser")


@pytest.fixture
def valid_jwt_token(test_user: User) -> str:
    return create_jwt_token(test_user)


@pytest.fixture
def auth_headers(valid_jwt_token: str) -> dict:
    return {"Authorization": f"Bearer {valid_jwt_token}"}


@pytest.fixture
def landmark(db_session: Session) -> Location:
    """Active location with a 100 m geofence."""
    return register_location(
        db_session,
        name=BRANDENBURG_GATE["name"],
        latitude=BRANDENBURG_GATE["latitude"],
        longitude=BRANDENBURG_GATE["longitude"],
        radius_m=100,
        category="landmark",
    )
