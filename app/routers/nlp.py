# nlp.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.routers.dependencies import to_http_error
from app.schemas.nlp import NlpAnalysisResult, TextAnalysisRequest
from app.services.errors import RecommendationError
from app.services.nlp_extractor import analyze_text, analyze_user_bio


router = APIRouter(prefix="/nlp", tags=["nlp"])


@router.post("/analyze", response_model=NlpAnalysisResult)
def analyze_text_endpoint(payload: TextAnalysisRequest) -> NlpAnalysisResult:
    return analyze_text(payload.text)


@router.post("/users/{user_id}/analyze-bio", response_model=NlpAnalysisResult)
def analyze_bio_endpoint(user_id: int, db: Session = Depends(get_db)) -> NlpAnalysisResult:
    try:
        return analyze_user_bio(db, user_id)
    except RecommendationError as exc:
        raise to_http_error(exc) from exc
