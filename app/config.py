from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load project-root .env early so both pydantic-settings and any direct os.getenv access
# see consistent values, even if the process CWD is not the repo root.
_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_IN_TEST = (os.getenv("ENVIRONMENT") or "").lower() == "test" or bool(os.getenv("PYTEST_CURRENT_TEST"))
if _ENV_PATH.exists() and not _IN_TEST:
    load_dotenv(dotenv_path=_ENV_PATH, override=True)


def _parse_origins(raw: Any) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, (list, tuple, set)):
        return [str(item).strip() for item in raw if str(item).strip()]
    if isinstance(raw, str):
        s = raw.strip()
        if not s:
            return []
        # Support JSON array string or comma-separated string.
        if s.startswith("["):
            try:
                parsed = json.loads(s)
                items = parsed if isinstance(parsed, list) else [parsed]
            except ValueError:
                items = s.split(",")
        else:
            items = s.split(",")
        return [str(item).strip() for item in items if str(item).strip()]
    return [str(raw)]


class Settings(BaseSettings):
    app_name: str = Field(default="UniHelp Recommender")
    api_prefix: str = Field(default="/api")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=True)

    # Database configuration
    # DB_URL / ORM_DB_URL win over the discrete DB_* parts.
    db_url: str | None = Field(default=None, validation_alias="DB_URL")
    orm_db_url: str | None = Field(default=None, validation_alias="ORM_DB_URL")
    orm_use_mysql: bool = Field(default=False, validation_alias="ORM_USE_MYSQL")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_name: str = Field(default="unihelp", validation_alias="DB_NAME")
    db_user: str = Field(default="root", validation_alias="DB_USER")
    db_password: str = Field(default="password", validation_alias="DB_PASSWORD")
    db_charset: str = Field(default="utf8mb4", validation_alias="DB_CHARSET")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200", "http://127.0.0.1:4200"],
        validation_alias="CORS_ORIGINS",
    )

    # Course recommendation tuning
    # Size of the nearest-neighbour pool used when the query title is in the corpus.
    similarity_pool_size: int = Field(default=10, ge=1, validation_alias="SIMILARITY_POOL_SIZE")
    # When False, the pool is truncated first and only then filtered (legacy behaviour,
    # which can return fewer than num_rec courses under strict filters).
    filter_before_truncate: bool = Field(default=True, validation_alias="FILTER_BEFORE_TRUNCATE")
    default_num_recommendations: int = Field(default=5, ge=1, validation_alias="DEFAULT_NUM_RECOMMENDATIONS")
    max_num_recommendations: int = Field(default=50, ge=1, validation_alias="MAX_NUM_RECOMMENDATIONS")
    # Build the course corpus in the startup hook instead of on the first request.
    corpus_warmup: bool = Field(default=False, validation_alias="CORPUS_WARMUP")

    # Peer / mentor discovery limits
    matching_limit: int = Field(default=10, ge=1, validation_alias="MATCHING_LIMIT")
    complementary_limit: int = Field(default=10, ge=1, validation_alias="COMPLEMENTARY_LIMIT")
    mentor_limit: int = Field(default=5, ge=1, validation_alias="MENTOR_LIMIT")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> list[str]:
        return _parse_origins(v)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def build_sqlalchemy_db_url(settings: Settings) -> str:
    if settings.orm_db_url:
        return settings.orm_db_url

    # Deployments that only set DB_URL should not silently fall back to sqlite.
    if settings.db_url:
        return settings.db_url

    mysql_url = (
        f"mysql+pymysql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
        f"?charset={settings.db_charset}"
    )

    # In development, default ORM to sqlite unless explicitly configured.
    if settings.environment.lower() in {"development", "test"}:
        if settings.orm_use_mysql:
            return mysql_url
        return "sqlite:///./dev.db"

    # NOTE: passwords with special chars should go through DB_URL instead.
    return mysql_url
