# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.config import build_sqlalchemy_db_url
from app.database import Base, SessionLocal, engine
from app import models  # noqa: F401  # register ORM tables
from app.api.routes.health import router as health_router
from app.routers.courses import router as courses_router
from app.routers.nlp import router as nlp_router
from app.routers.skill_matching import router as skill_matching_router
from app.services.corpus import CorpusCache
from app.services.data_source import load_courses


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Built lazily on the first recommendation request unless warmup is enabled.
        app.state.course_corpus = CorpusCache()
        if settings.corpus_warmup:
            db = SessionLocal()
            try:
                app.state.course_corpus.get(lambda: load_courses(db))
            finally:
                db.close()
        yield

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoints (do not depend on API_PREFIX)
    application.include_router(health_router)

    application.include_router(courses_router, prefix=settings.api_prefix)
    application.include_router(skill_matching_router, prefix=settings.api_prefix)
    application.include_router(nlp_router, prefix=settings.api_prefix)

    # Avoid accidental schema changes in shared MySQL databases.
    # For local/test sqlite usage, auto-create ORM tables is still convenient.
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
        logger.info("sqlite schema ensured")
    return application


app = create_app()
