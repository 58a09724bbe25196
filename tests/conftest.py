"""
Shared fixtures: in-memory SQLite database replacing PostgreSQL through
FastAPI dependency overrides.
"""

import os

# Must be set before verified_km.Core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from verified_km.Controller.deps import get_DB
from verified_km.DB.database import create_all_tables, drop_all_tables
from verified_km.main import app
from verified_km.Repositories.attendance import create_attendance
from verified_km.Schemas.attendance import Attendance_create

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

SHIFT_START = datetime(2025, 1, 2, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture()
def db():
    create_all_tables(bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_all_tables(bind=test_engine)


@pytest.fixture()
def client(db):
    def _override_get_DB():
        yield db

    app.dependency_overrides[get_DB] = _override_get_DB
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def attendance(db):
    return create_attendance(db, Attendance_create(
        user_id="mr-001",
        start_time=SHIFT_START,
        start_lat=12.9716,
        start_lon=77.5946,
    ))
