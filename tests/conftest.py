from __future__ import annotations

import os
from typing import Any, Callable, Iterator

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ["DB_URL"] = "sqlite:///./test.db"
    os.environ["ORM_DB_URL"] = "sqlite:///./test.db"
    os.environ["ORM_USE_MYSQL"] = "false"

    # Ensure a local .env cannot leak into tests.
    os.environ["ENVIRONMENT"] = "test"
    os.environ["CORPUS_WARMUP"] = "false"


@pytest.fixture()
def db() -> Iterator[Any]:
    from app.database import Base, SessionLocal, engine
    import app.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db: Any) -> Iterator[TestClient]:
    from app.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_user(db: Any) -> Callable[..., Any]:
    from app.models.user import User

    counter = {"n": 0}

    def _make(
        skills: str | None = None,
        *,
        extracted_skills: list[str] | None = None,
        extracted_interests: list[str] | None = None,
        bio: str | None = None,
        first_name: str | None = None,
    ) -> User:
        counter["n"] += 1
        user = User(
            email=f"user{counter['n']}@example.com",
            first_name=first_name or f"User{counter['n']}",
            last_name="Test",
            bio=bio,
            skills=skills,
            extracted_skills=extracted_skills or [],
            extracted_interests=extracted_interests or [],
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def make_course(db: Any) -> Callable[..., Any]:
    from app.models.course import Course

    def _make(title: str, *, category: str | None = "PROGRAMMING", level: str | None = "BEGINNER") -> Course:
        course = Course(title=title, category=category, level=level, price=0.0)
        db.add(course)
        db.commit()
        db.refresh(course)
        return course

    return _make


@pytest.fixture()
def enroll(db: Any) -> Callable[[Any, Any], Any]:
    from app.models.enrollment import Enrollment

    def _enroll(user: Any, course: Any) -> Enrollment:
        enrollment = Enrollment(user_id=user.id, course_id=course.id)
        db.add(enrollment)
        db.commit()
        return enrollment

    return _enroll
