from __future__ import annotations

import pytest

from app.services import course_recommender
from app.services.corpus import CorpusCache
from app.services.course_recommender import recommend_courses
from app.services.errors import InvalidInputError, NotFoundError


def _titles(results) -> list[str]:
    return [item.title for item in results]


@pytest.fixture()
def ml_catalog(make_course):
    # "machin" is shared by three titles and "learn" by two, so the neighbours of
    # the first course are Projects, then Vision, then everything else at 0.
    courses = {
        "basics": make_course("Machine Learning Basics", level="BEGINNER"),
        "projects": make_course("Machine Learning Projects", level="ADVANCED"),
        "vision": make_course("Machine Vision", level="BEGINNER"),
    }
    for title in ["Cooking", "Painting", "Music Theory", "Ancient History", "Chemistry"]:
        courses[title] = make_course(title, category="OTHER", level="ADVANCED")
    return courses


def test_title_match_prefers_lexical_overlap(make_user, make_course, db) -> None:
    user = make_user()
    make_course("Intro to Python")
    make_course("Python for Data Science")
    make_course("History of Art")

    results = recommend_courses(db, CorpusCache(), user.id, course_title="Intro to Python", num_rec=1)
    assert _titles(results) == ["Python for Data Science"]

    results = recommend_courses(db, CorpusCache(), user.id, course_title="Intro to Python", num_rec=2)
    assert _titles(results) == ["Python for Data Science", "History of Art"]


def test_empty_corpus_returns_empty_list(make_user, db) -> None:
    user = make_user()
    assert recommend_courses(db, CorpusCache(), user.id, course_title="Anything", num_rec=3) == []
    assert recommend_courses(db, CorpusCache(), user.id, num_rec=3) == []


def test_unknown_user_is_not_found(make_course, db) -> None:
    make_course("Intro to Python")
    with pytest.raises(NotFoundError) as exc_info:
        recommend_courses(db, CorpusCache(), 404, course_title="Intro to Python", num_rec=1)
    assert exc_info.value.entity == "User"
    assert exc_info.value.entity_id == 404


def test_invalid_input_is_rejected(make_user, db) -> None:
    user = make_user()
    with pytest.raises(InvalidInputError):
        recommend_courses(db, CorpusCache(), None, num_rec=1)
    with pytest.raises(InvalidInputError):
        recommend_courses(db, CorpusCache(), user.id, num_rec=0)
    with pytest.raises(InvalidInputError):
        recommend_courses(db, CorpusCache(), user.id, num_rec=-3)


def test_title_path_ranks_by_cosine_and_excludes_target(make_user, ml_catalog, db) -> None:
    user = make_user()
    results = recommend_courses(db, CorpusCache(), user.id, course_title="machine learning basics", num_rec=2)
    assert _titles(results) == ["Machine Learning Projects", "Machine Vision"]
    assert results[0].score > results[1].score > 0
    assert all(item.course_id != ml_catalog["basics"].id for item in results)


def test_title_path_excludes_enrolled_courses(make_user, ml_catalog, enroll, db) -> None:
    user = make_user()
    enroll(user, ml_catalog["projects"])
    results = recommend_courses(db, CorpusCache(), user.id, course_title="Machine Learning Basics", num_rec=1)
    assert _titles(results) == ["Machine Vision"]


def test_level_and_category_filters_are_case_insensitive(make_user, ml_catalog, db) -> None:
    user = make_user()
    results = recommend_courses(
        db, CorpusCache(), user.id, course_title="Machine Learning Basics", skill="beginner", num_rec=5
    )
    assert _titles(results) == ["Machine Vision"]

    results = recommend_courses(
        db, CorpusCache(), user.id, course_title="Machine Learning Basics", category="other", num_rec=2
    )
    assert all(item.category == "OTHER" for item in results)
    assert len(results) == 2


def test_filter_before_truncate_backfills_past_the_pool(make_user, ml_catalog, db) -> None:
    user = make_user()
    kwargs = dict(course_title="Machine Learning Basics", skill="BEGINNER", num_rec=1, pool_size=1)

    legacy = recommend_courses(db, CorpusCache(), user.id, filter_before_truncate=False, **kwargs)
    assert legacy == []

    fixed = recommend_courses(db, CorpusCache(), user.id, filter_before_truncate=True, **kwargs)
    assert _titles(fixed) == ["Machine Vision"]


def test_popularity_decides_final_order(make_user, ml_catalog, enroll, db) -> None:
    user = make_user()
    for _ in range(3):
        enroll(make_user(), ml_catalog["vision"])
    enroll(make_user(), ml_catalog["projects"])

    results = recommend_courses(db, CorpusCache(), user.id, course_title="Machine Learning Basics", num_rec=2)
    assert _titles(results) == ["Machine Vision", "Machine Learning Projects"]
    assert results[0].popularity == 1.0
    assert results[1].popularity == pytest.approx(1 / 3, abs=1e-6)
    # Similarity still picked the set: Projects is the closer neighbour.
    assert results[1].score > results[0].score


def test_enrollment_path_sums_similarity(make_user, ml_catalog, enroll, db) -> None:
    user = make_user()
    enroll(user, ml_catalog["basics"])

    results = recommend_courses(db, CorpusCache(), user.id, course_title="Unknown course", num_rec=2)
    assert _titles(results) == ["Machine Learning Projects", "Machine Vision"]
    assert all(item.course_id != ml_catalog["basics"].id for item in results)


def test_enrollment_path_applies_filters(make_user, ml_catalog, enroll, db) -> None:
    user = make_user()
    enroll(user, ml_catalog["basics"])
    results = recommend_courses(db, CorpusCache(), user.id, skill="beginner", num_rec=5)
    assert _titles(results) == ["Machine Vision"]


def test_no_title_and_no_enrollments_returns_empty(make_user, ml_catalog, db) -> None:
    user = make_user()
    assert recommend_courses(db, CorpusCache(), user.id, num_rec=3) == []


def test_repeated_calls_are_deterministic(make_user, ml_catalog, enroll, db) -> None:
    user = make_user()
    enroll(user, ml_catalog["Cooking"])
    cache = CorpusCache()
    first = recommend_courses(db, cache, user.id, num_rec=5)
    second = recommend_courses(db, cache, user.id, num_rec=5)
    assert first == second
    assert len(first) == 5


def test_popularity_lookup_failure_degrades_gracefully(make_user, ml_catalog, enroll, db, monkeypatch) -> None:
    user = make_user()
    for _ in range(2):
        enroll(make_user(), ml_catalog["vision"])

    def broken_batch(db, ids):
        raise RuntimeError("enrollment service unavailable")

    monkeypatch.setattr(course_recommender, "count_enrollments", broken_batch)
    results = recommend_courses(db, CorpusCache(), user.id, course_title="Machine Learning Basics", num_rec=2)
    assert _titles(results) == ["Machine Vision", "Machine Learning Projects"]


def test_corpus_is_cached_until_invalidated(make_user, ml_catalog, make_course, enroll, db) -> None:
    user = make_user()
    enroll(user, ml_catalog["basics"])
    cache = CorpusCache()
    recommend_courses(db, cache, user.id, num_rec=10)

    make_course("Machine Learning Ethics", level="BEGINNER")
    stale = recommend_courses(db, cache, user.id, num_rec=10)
    assert "Machine Learning Ethics" not in _titles(stale)

    cache.invalidate()
    fresh = recommend_courses(db, cache, user.id, num_rec=10)
    assert "Machine Learning Ethics" in _titles(fresh)
