# skill_matching.py
from typing import Callable, Optional, Tuple
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import User
from app.routers.dependencies import to_http_error
from app.schemas.recommendation import UserMatch
from app.services.errors import RecommendationError
from app.services.skill_matcher import find_complementary_users, find_matching_users, find_potential_mentors


router = APIRouter(prefix="/skill-matching", tags=["skill-matching"])

Finder = Callable[[Session, Optional[int]], list[Tuple[User, float]]]


def _run(finder: Finder, db: Session, user_id: int) -> list[UserMatch]:
    try:
        matches = finder(db, user_id)
    except RecommendationError as exc:
        raise to_http_error(exc) from exc
    return [
        UserMatch(
            user_id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            skills=user.skills,
            score=round(score, 6),
        )
        for user, score in matches
    ]


@router.get("/{user_id}/matching", response_model=list[UserMatch])
def matching_users_endpoint(user_id: int, db: Session = Depends(get_db)) -> list[UserMatch]:
    return _run(find_matching_users, db, user_id)


@router.get("/{user_id}/complementary", response_model=list[UserMatch])
def complementary_users_endpoint(user_id: int, db: Session = Depends(get_db)) -> list[UserMatch]:
    return _run(find_complementary_users, db, user_id)


@router.get("/{user_id}/mentors", response_model=list[UserMatch])
def potential_mentors_endpoint(user_id: int, db: Session = Depends(get_db)) -> list[UserMatch]:
    return _run(find_potential_mentors, db, user_id)
