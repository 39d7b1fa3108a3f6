# __init__.py
from app.schemas.nlp import NlpAnalysisResult, TextAnalysisRequest
from app.schemas.recommendation import CorpusRebuildResponse, CourseRecommendation, UserMatch

__all__ = [
	"CorpusRebuildResponse",
	"CourseRecommendation",
	"NlpAnalysisResult",
	"TextAnalysisRequest",
	"UserMatch",
]
