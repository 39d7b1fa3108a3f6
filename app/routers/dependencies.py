# dependencies.py
from fastapi import HTTPException, Request, status
from app.services.corpus import CorpusCache
from app.services.errors import InvalidInputError, NotFoundError, RecommendationError


def get_corpus_cache(request: Request) -> CorpusCache:
    cache = getattr(request.app.state, "course_corpus", None)
    if cache is None:
        cache = CorpusCache()
        request.app.state.course_corpus = cache
    return cache


def to_http_error(exc: RecommendationError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, InvalidInputError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
