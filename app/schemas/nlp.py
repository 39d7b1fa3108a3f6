# nlp.py
from typing import Optional
from pydantic import BaseModel, Field


class TextAnalysisRequest(BaseModel):
    text: str = Field(default="")


class NlpAnalysisResult(BaseModel):
    user_id: Optional[int] = None
    extracted_skills: list[str] = Field(default_factory=list)
    extracted_interests: list[str] = Field(default_factory=list)
    personality_traits: dict[str, float] = Field(default_factory=dict)
    dominant_trait: Optional[str] = None
