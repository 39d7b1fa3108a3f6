# data_source.py
from typing import Sequence
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.user import User
from app.services.corpus import CourseRecord
from app.services.errors import NotFoundError


def load_courses(db: Session) -> list[CourseRecord]:
    rows = db.query(Course).order_by(Course.id).all()
    return [
        CourseRecord(course_id=row.id, title=row.title or "", category=row.category, level=row.level)
        for row in rows
    ]


def get_user_or_raise(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def load_enrolled_course_ids(db: Session, user_id: int) -> list[int]:
    rows = (
        db.query(Enrollment.course_id)
        .filter(Enrollment.user_id == user_id)
        .order_by(Enrollment.id)
        .all()
    )
    return [row.course_id for row in rows]


def count_enrollments(db: Session, course_ids: Sequence[int]) -> dict[int, int]:
    if not course_ids:
        return {}
    rows = (
        db.query(Enrollment.course_id, func.count(Enrollment.id))
        .filter(Enrollment.course_id.in_(list(course_ids)))
        .group_by(Enrollment.course_id)
        .all()
    )
    counts = {course_id: 0 for course_id in course_ids}
    for course_id, count in rows:
        counts[course_id] = int(count)
    return counts


def count_enrollments_for_course(db: Session, course_id: int) -> int:
    return int(db.query(func.count(Enrollment.id)).filter(Enrollment.course_id == course_id).scalar() or 0)
