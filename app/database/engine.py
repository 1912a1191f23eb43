"""
Direct Postgres access for the setup statements.

PostgREST cannot run DDL, so the bootstrap goes over DATABASE_URL
(the Supabase connection string on port 5432) with SQLAlchemy.
"""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from app.config.settings import settings


def _normalize_url(database_url: str) -> str:
    # Supabase hands out postgres:// URLs, which SQLAlchemy no longer accepts
    if database_url.startswith("postgres://"):
        return "postgresql://" + database_url[len("postgres://"):]
    return database_url.replace("postgresql+asyncpg://", "postgresql://")


def create_setup_engine(database_url: Optional[str] = None) -> Engine:
    url = database_url or settings.database_url
    if not url:
        raise ValueError("DATABASE_URL is not configured")
    return create_engine(_normalize_url(url), pool_pre_ping=True)
