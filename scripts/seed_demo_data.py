from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from app.database import Base, SessionLocal, engine  # noqa: E402
from app.models.course import Course, CourseCategory  # noqa: E402
from app.models.enrollment import Enrollment  # noqa: E402
from app.models.user import User  # noqa: E402
from app.services.nlp_extractor import analyze_user_bio  # noqa: E402


def _load_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed demo users, courses and enrollments into ORM tables.")
    parser.add_argument(
        "--data-file",
        default=str(Path(__file__).resolve().parents[1] / "app" / "data" / "datasets" / "demo.json"),
    )
    parser.add_argument("--truncate", action="store_true")
    parser.add_argument("--skip-bio-analysis", action="store_true")
    args = parser.parse_args(argv)

    Base.metadata.create_all(bind=engine)
    data = _load_json(Path(args.data_file))

    with SessionLocal() as db:
        if args.truncate:
            db.query(Enrollment).delete()
            db.query(Course).delete()
            db.query(User).delete()
            db.commit()

        inserted = {"users": 0, "courses": 0, "enrollments": 0}

        for item in data.get("users") or []:
            email = str(item.get("email") or "").strip().lower()
            if not email or db.query(User).filter(User.email == email).first():
                continue
            db.add(
                User(
                    email=email,
                    first_name=item.get("first_name"),
                    last_name=item.get("last_name"),
                    bio=item.get("bio"),
                    skills=item.get("skills"),
                )
            )
            inserted["users"] += 1

        for item in data.get("courses") or []:
            title = str(item.get("title") or "").strip()
            if not title or db.query(Course).filter(Course.title == title).first():
                continue
            category = str(item.get("category") or CourseCategory.OTHER.value).upper()
            db.add(
                Course(
                    title=title,
                    description=item.get("description"),
                    category=CourseCategory(category).value,
                    level=item.get("level"),
                    price=float(item.get("price") or 0.0),
                )
            )
            inserted["courses"] += 1
        db.commit()

        for item in data.get("enrollments") or []:
            user = db.query(User).filter(User.email == str(item.get("email") or "").strip().lower()).first()
            course = db.query(Course).filter(Course.title == str(item.get("course") or "").strip()).first()
            if user is None or course is None:
                continue
            exists = (
                db.query(Enrollment)
                .filter(Enrollment.user_id == user.id, Enrollment.course_id == course.id)
                .first()
            )
            if exists:
                continue
            db.add(Enrollment(user_id=user.id, course_id=course.id))
            inserted["enrollments"] += 1
        db.commit()

        if not args.skip_bio_analysis:
            for user in db.query(User).order_by(User.id).all():
                analyze_user_bio(db, user.id)

    print("seeded", inserted, "from", args.data_file)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
