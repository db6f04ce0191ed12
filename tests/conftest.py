"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

import os
import tempfile
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

_TMP_DIR = Path(tempfile.mkdtemp(prefix="progressive-tests-"))
os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL") or f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["LOG_DIR"] = str(_TMP_DIR / "logs")

from progressive.logging_config import configure_logging

configure_logging()

from progressive.database import Base, SessionLocal, engine
from progressive.main import app
from progressive.models import database_models  # noqa: F401
from progressive.models.schemas import ProgramCreate
from progressive.services.program_service import create_program

Base.metadata.create_all(engine)

# A Monday; windows created here run 2026-10-19 .. 2026-11-15.
WINDOW_START = date(2026, 10, 19)


@pytest.fixture(scope="session")
def test_client() -> TestClient:
    """Provide a FastAPI test client."""

    return TestClient(app)


@pytest.fixture
def db_session():
    """Provide a database session closed after the test."""

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def clean_tables():
    """Empty every table after each test."""

    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def make_program(db_session):
    """Factory creating a program through the service layer."""

    def _make(
        owner_id: int = 1,
        exercise_key: str = "pushups",
        method: str = "submax",
        test_max: int = 12,
        preferred_days: tuple[str, ...] = ("Mon", "Wed", "Fri"),
        test_every_weeks: int | None = None,
        start: date = WINDOW_START,
    ):
        request = ProgramCreate(
            exercise_key=exercise_key,
            method=method,
            test_max=test_max,
            days_per_week=len(preferred_days),
            preferred_days=list(preferred_days),
            test_every_weeks=test_every_weeks,
        )
        program, _ = create_program(db_session, owner_id, request, today=start)
        return program

    return _make
