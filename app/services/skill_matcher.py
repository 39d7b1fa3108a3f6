# skill_matcher.py
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple
from sqlalchemy.orm import Session
from app.config import settings
from app.models.user import User
from app.services.data_source import get_user_or_raise
from app.services.errors import InvalidInputError
from app.services.similarity import jaccard_similarity
from app.services.text_processing import normalize_tag, split_tags


logger = logging.getLogger(__name__)

MATCH_SKILL_WEIGHT = 0.6
MATCH_INTEREST_WEIGHT = 0.3
MATCH_COMPLEMENTARY_BONUS = 0.05

COMPLEMENTARY_WEIGHT = 0.7
COMMON_WEIGHT = 0.3

MENTOR_SKILL_WEIGHT = 0.7
MENTOR_INTEREST_WEIGHT = 0.3


@dataclass(frozen=True)
class UserTags:
    skills: frozenset[str]
    interests: frozenset[str]


def _normalize_all(values: Iterable[str] | None) -> set[str]:
    result: set[str] = set()
    for value in values or []:
        if value is None:
            continue
        tag = normalize_tag(str(value))
        if tag:
            result.add(tag)
    return result


def extract_all_skills(user: User) -> set[str]:
    """Manual comma-separated skills plus the ones extracted from the bio."""
    skills = set(split_tags(user.skills))
    skills.update(_normalize_all(user.extracted_skills))
    return skills


def extract_interests(user: User) -> set[str]:
    return _normalize_all(user.extracted_interests)


def user_tags(user: User) -> UserTags:
    return UserTags(skills=frozenset(extract_all_skills(user)), interests=frozenset(extract_interests(user)))


def score_matching(target: UserTags, candidate: UserTags) -> float:
    skill_similarity = jaccard_similarity(target.skills, candidate.skills)
    interest_similarity = jaccard_similarity(target.interests, candidate.interests)
    complementary = candidate.skills - target.skills
    return (
        skill_similarity * MATCH_SKILL_WEIGHT
        + interest_similarity * MATCH_INTEREST_WEIGHT
        + len(complementary) * MATCH_COMPLEMENTARY_BONUS
    )


def score_complementary(target: UserTags, candidate: UserTags) -> float:
    complementary = candidate.skills - target.skills
    common = candidate.skills & target.skills
    return len(complementary) * COMPLEMENTARY_WEIGHT + len(common) * COMMON_WEIGHT


def score_mentor(target: UserTags, candidate: UserTags) -> Optional[float]:
    """Mentor score, or None when the candidate shares none of the user's skills."""
    matched_skills = candidate.skills & target.skills
    if not matched_skills:
        return None
    matched_interests = candidate.interests & target.interests
    return len(matched_skills) * MENTOR_SKILL_WEIGHT + len(matched_interests) * MENTOR_INTEREST_WEIGHT


def _load_candidates(db: Session, user_id: int) -> list[User]:
    return db.query(User).filter(User.id != user_id).order_by(User.id).all()


def _rank_users(
    db: Session,
    user_id: Optional[int],
    scorer: Callable[[UserTags, UserTags], Optional[float]],
    limit: int,
    label: str,
) -> list[Tuple[User, float]]:
    if user_id is None:
        raise InvalidInputError("user_id is required")
    user = get_user_or_raise(db, user_id)
    target = user_tags(user)

    scored: list[Tuple[User, float]] = []
    for candidate in _load_candidates(db, user_id):
        score = scorer(target, user_tags(candidate))
        if score is not None:
            scored.append((candidate, score))
    # Stable sort: ties keep candidate (id) order.
    scored.sort(key=lambda item: item[1], reverse=True)
    results = scored[:limit]
    logger.info("skill_matching.%s user_id=%s candidates=%s results=%s", label, user_id, len(scored), len(results))
    return results


def find_matching_users(db: Session, user_id: Optional[int], limit: Optional[int] = None) -> list[Tuple[User, float]]:
    return _rank_users(db, user_id, score_matching, limit or settings.matching_limit, "matching")


def find_complementary_users(
    db: Session, user_id: Optional[int], limit: Optional[int] = None
) -> list[Tuple[User, float]]:
    return _rank_users(db, user_id, score_complementary, limit or settings.complementary_limit, "complementary")


def find_potential_mentors(db: Session, user_id: Optional[int], limit: Optional[int] = None) -> list[Tuple[User, float]]:
    return _rank_users(db, user_id, score_mentor, limit or settings.mentor_limit, "mentors")
