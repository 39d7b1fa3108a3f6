# courses.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.config import settings
from app.database import get_db
from app.routers.dependencies import get_corpus_cache, to_http_error
from app.schemas.recommendation import CorpusRebuildResponse, CourseRecommendation
from app.services.corpus import CorpusCache
from app.services.course_recommender import recommend_courses
from app.services.data_source import load_courses
from app.services.errors import RecommendationError


router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("/recommendations", response_model=list[CourseRecommendation])
def recommend_courses_endpoint(
    user_id: int = Query(...),
    course_title: Optional[str] = Query(default=None),
    skill: Optional[str] = Query(default=None, description="Course level filter"),
    category: Optional[str] = Query(default=None),
    num_rec: int = Query(default=settings.default_num_recommendations, ge=1, le=settings.max_num_recommendations),
    db: Session = Depends(get_db),
    cache: CorpusCache = Depends(get_corpus_cache),
) -> list[CourseRecommendation]:
    try:
        ranked = recommend_courses(
            db,
            cache,
            user_id,
            course_title=course_title,
            skill=skill,
            category=category,
            num_rec=num_rec,
        )
    except RecommendationError as exc:
        raise to_http_error(exc) from exc
    return [CourseRecommendation.model_validate(item) for item in ranked]


@router.post("/recommendations/rebuild", response_model=CorpusRebuildResponse)
def rebuild_corpus_endpoint(
    db: Session = Depends(get_db),
    cache: CorpusCache = Depends(get_corpus_cache),
) -> CorpusRebuildResponse:
    corpus = cache.rebuild(lambda: load_courses(db))
    return CorpusRebuildResponse(courses=len(corpus), terms=corpus.tfidf.num_terms)
