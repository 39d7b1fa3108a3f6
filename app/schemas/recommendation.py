# recommendation.py
from typing import Optional
from pydantic import BaseModel, ConfigDict


class CourseRecommendation(BaseModel):
    course_id: int
    title: str
    category: Optional[str] = None
    level: Optional[str] = None
    score: float
    popularity: float

    model_config = ConfigDict(from_attributes=True)


class CorpusRebuildResponse(BaseModel):
    courses: int
    terms: int


class UserMatch(BaseModel):
    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    skills: Optional[str] = None
    score: float
