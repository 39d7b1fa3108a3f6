# nlp_extractor.py
import logging
import re
from functools import lru_cache
from typing import Iterable
from sqlalchemy.orm import Session
from app.schemas.nlp import NlpAnalysisResult
from app.services.data_source import get_user_or_raise


logger = logging.getLogger(__name__)


COMMON_SKILLS = frozenset({
    "java", "python", "javascript", "typescript", "angular", "react", "node", "spring",
    "programming", "development", "software", "web", "mobile", "coding", "app",
    "database", "sql", "nosql", "mongodb", "mysql", "postgresql", "oracle", "frontend", "backend",
    "fullstack", "ai", "machine learning", "data science", "deep learning", "nlp", "cloud",
    "aws", "azure", "gcp", "devops", "docker", "kubernetes", "microservices",
    "leadership", "management", "communication", "teamwork", "problem solving",
    "critical thinking", "creativity", "research", "analysis", "writing", "presentation",
    "physics", "chemistry", "biology", "mathematics", "engineering", "teaching", "tutoring",
})

COMMON_INTERESTS = frozenset({
    "reading", "writing", "traveling", "music", "sports", "fitness", "yoga", "meditation",
    "cooking", "baking", "photography", "art", "painting", "drawing", "design", "movies",
    "series", "tv shows", "theatre", "hiking", "biking", "cycling", "swimming", "running",
    "jogging", "gaming", "video games", "board games", "chess", "volunteering", "community service",
    "environment", "sustainability", "climate", "politics", "history", "psychology",
    "philosophy", "languages", "culture", "travel", "exploration", "adventure", "technology",
    "innovation", "science", "research", "learning", "education", "teaching", "mentoring",
})

PERSONALITY_TRAITS: dict[str, tuple[str, ...]] = {
    "analytical": (
        "analytical", "logical", "systematic", "rational", "methodical", "detail-oriented",
        "precise", "thorough", "critical", "research", "study", "examine", "investigate",
    ),
    "creative": (
        "creative", "innovative", "artistic", "imaginative", "original", "inventive",
        "design", "create", "build", "craft", "develop", "vision", "idea",
    ),
    "leadership": (
        "leadership", "leader", "manager", "direct", "guide", "mentor", "initiative",
        "responsibility", "decision", "authority", "influence", "motivate", "inspire",
    ),
    "team-oriented": (
        "team", "collaborate", "cooperation", "group", "together", "community",
        "support", "assist", "help", "share", "contribute", "partnership",
    ),
    "detail-oriented": (
        "detail", "precise", "thorough", "meticulous", "careful", "accurate",
        "exact", "perfectionist", "organized", "structured", "methodical",
    ),
    "adaptable": (
        "adaptable", "flexible", "versatile", "adjust", "change", "dynamic",
        "evolving", "agile", "responsive", "open-minded",
    ),
}


@lru_cache(maxsize=None)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(r"\b" + re.escape(keyword) + r"\b")


def extract_keywords(text: str, keywords: Iterable[str]) -> list[str]:
    lowered = text.lower()
    return sorted(keyword for keyword in keywords if _keyword_pattern(keyword).search(lowered))


def score_personality_traits(text: str) -> dict[str, float]:
    lowered = text.lower()
    scores: dict[str, float] = {}
    for trait, keywords in PERSONALITY_TRAITS.items():
        hits = sum(len(_keyword_pattern(keyword).findall(lowered)) for keyword in keywords)
        scores[trait] = hits / len(keywords) if hits else 0.0
    return scores


def analyze_text(text: str | None) -> NlpAnalysisResult:
    if not text or not text.strip():
        return NlpAnalysisResult()

    traits = score_personality_traits(text)
    dominant = max(traits, key=traits.__getitem__) if any(traits.values()) else None
    return NlpAnalysisResult(
        extracted_skills=extract_keywords(text, COMMON_SKILLS),
        extracted_interests=extract_keywords(text, COMMON_INTERESTS),
        personality_traits=traits,
        dominant_trait=dominant,
    )


def analyze_user_bio(db: Session, user_id: int) -> NlpAnalysisResult:
    """Analyze a user's bio and store the extracted tags on the user."""
    user = get_user_or_raise(db, user_id)
    result = analyze_text(user.bio).model_copy(update={"user_id": user_id})
    if not user.bio or not user.bio.strip():
        return result

    user.extracted_skills = result.extracted_skills
    user.extracted_interests = result.extracted_interests
    user.personality_traits = result.personality_traits
    user.dominant_trait = result.dominant_trait
    db.add(user)
    db.commit()
    logger.info(
        "nlp.analyze_bio user_id=%s skills=%s interests=%s dominant=%s",
        user_id,
        len(result.extracted_skills),
        len(result.extracted_interests),
        result.dominant_trait,
    )
    return result
