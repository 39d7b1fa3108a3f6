from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np
from sqlalchemy.orm import Session

from app.config import settings
from app.services.corpus import CorpusCache, CourseCorpus, CourseRecord
from app.services.data_source import (
    count_enrollments,
    count_enrollments_for_course,
    get_user_or_raise,
    load_courses,
    load_enrolled_course_ids,
)
from app.services.errors import InvalidInputError
from app.services.popularity import rerank_by_popularity, resolve_enrollment_counts


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedCourse:
    course_id: int
    title: str
    category: str | None
    level: str | None
    # Similarity score that got the course selected.
    score: float
    # Enrollment count normalized by the most enrolled candidate; decides the final order.
    popularity: float


def _matches(value: str | None, wanted: str | None) -> bool:
    if wanted is None:
        return True
    if value is None:
        return False
    return value.lower() == wanted.lower()


def passes_filters(course: CourseRecord, skill: str | None, category: str | None) -> bool:
    # "skill" filters on the course level (BEGINNER, INTERMEDIATE, ...).
    return _matches(course.level, skill) and _matches(course.category, category)


def _clean_filter(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _rank_indices(scores: np.ndarray, candidates: Iterable[int]) -> list[int]:
    # Stable: equal scores keep corpus order.
    return sorted(candidates, key=lambda index: float(scores[index]), reverse=True)


def select_similar_courses(
    corpus: CourseCorpus,
    course_index: int,
    enrolled_ids: set[int],
    skill: str | None,
    category: str | None,
    num_rec: int,
    *,
    pool_size: int,
    filter_before_truncate: bool,
) -> list[tuple[CourseRecord, float]]:
    """Nearest neighbours of one course by cosine similarity.

    With ``filter_before_truncate`` the filters run over every course and the
    best ``num_rec`` survivors are kept. Without it only the top ``pool_size``
    neighbours are considered and filtered afterwards, so strict filters can
    return fewer than ``num_rec`` courses.
    """
    scores = corpus.similarity[course_index]
    ranked = _rank_indices(scores, (i for i in range(len(corpus)) if i != course_index))
    if not filter_before_truncate:
        ranked = ranked[:pool_size]

    selected: list[tuple[CourseRecord, float]] = []
    for index in ranked:
        course = corpus.courses[index]
        if course.course_id in enrolled_ids or not passes_filters(course, skill, category):
            continue
        selected.append((course, float(scores[index])))
        if len(selected) >= num_rec:
            break
    return selected


def select_courses_from_enrollments(
    corpus: CourseCorpus,
    enrolled_ids: list[int],
    skill: str | None,
    category: str | None,
    num_rec: int,
) -> list[tuple[CourseRecord, float]]:
    """Rank courses by their summed similarity to everything the user is enrolled in."""
    enrolled_indices = [index for index in (corpus.index_of(cid) for cid in enrolled_ids) if index is not None]
    if not enrolled_indices:
        return []

    enrolled_set = set(enrolled_ids)
    summed = corpus.similarity[enrolled_indices].sum(axis=0)
    candidates = [
        index
        for index, course in enumerate(corpus.courses)
        if course.course_id not in enrolled_set and passes_filters(course, skill, category)
    ]
    ranked = _rank_indices(summed, candidates)[:num_rec]
    return [(corpus.courses[index], float(summed[index])) for index in ranked]


def apply_popularity(db: Session, selected: list[tuple[CourseRecord, float]]) -> list[RankedCourse]:
    ids = [course.course_id for course, _ in selected]
    counts = resolve_enrollment_counts(
        ids,
        batch_lookup=lambda batch: count_enrollments(db, batch),
        single_lookup=lambda course_id: count_enrollments_for_course(db, course_id),
    )
    reranked = rerank_by_popularity(selected, [counts[course_id] for course_id in ids])
    return [
        RankedCourse(
            course_id=course.course_id,
            title=course.title,
            category=course.category,
            level=course.level,
            score=round(score, 6),
            popularity=round(popularity, 6),
        )
        for (course, score), popularity in reranked
    ]


def recommend_courses(
    db: Session,
    cache: CorpusCache,
    user_id: int | None,
    course_title: str | None = None,
    skill: str | None = None,
    category: str | None = None,
    num_rec: int | None = None,
    *,
    pool_size: int | None = None,
    filter_before_truncate: bool | None = None,
) -> list[RankedCourse]:
    """Recommend courses for a user.

    If ``course_title`` names a course in the corpus, its nearest neighbours
    are recommended; otherwise the user's enrollments drive the ranking. Both
    paths drop courses the user is enrolled in, apply the optional level
    (``skill``) and ``category`` filters, and finish with the popularity
    re-rank. An empty course pool yields an empty list.
    """
    if user_id is None:
        raise InvalidInputError("user_id is required")
    if num_rec is None:
        num_rec = settings.default_num_recommendations
    if num_rec <= 0:
        raise InvalidInputError("num_rec must be a positive integer")
    if pool_size is None:
        pool_size = settings.similarity_pool_size
    if filter_before_truncate is None:
        filter_before_truncate = settings.filter_before_truncate

    get_user_or_raise(db, user_id)
    corpus = cache.get(lambda: load_courses(db))
    if corpus.is_empty:
        return []

    skill = _clean_filter(skill)
    category = _clean_filter(category)
    enrolled_ids = load_enrolled_course_ids(db, user_id)

    course_index = corpus.find_title(course_title)
    if course_index is not None:
        selected = select_similar_courses(
            corpus,
            course_index,
            set(enrolled_ids),
            skill,
            category,
            num_rec,
            pool_size=pool_size,
            filter_before_truncate=filter_before_truncate,
        )
    else:
        selected = select_courses_from_enrollments(corpus, enrolled_ids, skill, category, num_rec)

    results = apply_popularity(db, selected)
    logger.info(
        "recommend.courses user_id=%s by_title=%s enrolled=%s results=%s",
        user_id,
        course_index is not None,
        len(enrolled_ids),
        len(results),
    )
    return results
