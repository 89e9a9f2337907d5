"""Pytest bootstrap: test settings, an in-memory database and record factories."""

import os
from pathlib import Path
import sys

# Settings are read at import time; provide them before `skillmarket` loads.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("EMAIL_NOTIFICATIONS_ENABLED", "false")

# Ensure project root is on sys.path so `import skillmarket` works uninstalled
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from skillmarket.database import Base, get_db
from skillmarket.models import Profile, User


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def api_client(db_session):
    from fastapi.testclient import TestClient
    from skillmarket.main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def create_user(db_session):
    def _create_user(email: str, full_name: str = "Test User", *, verified: bool = True) -> User:
        user = User(
            full_name=full_name,
            email=email,
            password_hash="hash",
            email_verified=verified,
            is_active=True,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def create_profile(db_session, create_user):
    counter = {"n": 0}

    def _create_profile(name: str, **fields) -> Profile:
        counter["n"] += 1
        user = fields.pop("user", None) or create_user(f"user{counter['n']}@example.org", name)
        profile = Profile(
            id=user.id,
            name=name,
            location=fields.pop("location", None),
            skills_offered=fields.pop("skills_offered", []),
            skills_wanted=fields.pop("skills_wanted", []),
            availability=fields.pop("availability", "weekends"),
            profile_visibility=fields.pop("profile_visibility", "public"),
            **fields,
        )
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile

    return _create_profile
