from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.database import engine, mask_db_url
from app.config import build_sqlalchemy_db_url, settings


router = APIRouter(prefix="/health", tags=["health"])


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime


class DBHealthStatus(BaseModel):
    orm: str
    orm_db_url: str
    corpus_built: bool
    timestamp: datetime


@router.get("/", response_model=HealthStatus, summary="API heartbeat")
def health_check() -> HealthStatus:
    return HealthStatus(status="ok", timestamp=datetime.now(timezone.utc))


@router.get("/db", response_model=DBHealthStatus, summary="DB connectivity checks")
def db_health_check(request: Request) -> DBHealthStatus:
    orm_status = "ok"
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        orm_status = "error"

    cache = getattr(request.app.state, "course_corpus", None)
    return DBHealthStatus(
        orm=orm_status,
        orm_db_url=mask_db_url(build_sqlalchemy_db_url(settings)),
        corpus_built=bool(cache is not None and cache.is_built),
        timestamp=datetime.now(timezone.utc),
    )
