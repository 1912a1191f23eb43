"""
Development-only database bootstrap.

POST runs the setup statements over DATABASE_URL and reports each one;
GET reports whether the profiles table is reachable through the API.
Both return 403 in production.
"""

import hmac
import httpx
import logging
from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError
from supabase import Client
from typing import Optional

from app.config.settings import settings
from app.core.dependencies import get_system_supabase, require_development
from app.database.engine import create_setup_engine
from app.modules.setup.service import SetupService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/setup",
    tags=["setup"],
    dependencies=[Depends(require_development)],
)


def verify_setup_secret(x_setup_secret: Optional[str] = Header(default=None)) -> None:
    if not x_setup_secret or not hmac.compare_digest(x_setup_secret.encode(), settings.setup_secret.encode()):
        raise HTTPException(status_code=401, detail="Invalid setup secret")


def get_setup_service() -> SetupService:
    if not settings.database_url:
        raise HTTPException(
            status_code=500,
            detail="DATABASE_URL is not configured. Run the SQL from `python -m app.scripts.setup_database --print-sql` manually."
        )
    return SetupService(engine=create_setup_engine())


@router.post("/database", dependencies=[Depends(verify_setup_secret)])
async def setup_database(service: SetupService = Depends(get_setup_service)):
    """Create the profiles table, signup trigger and RLS policies"""
    try:
        report = service.setup()
    finally:
        service.engine.dispose()

    if not report["ok"]:
        return JSONResponse(
            status_code=500,
            content={
                "error": "Database setup failed. Please run the SQL manually in the Supabase dashboard.",
                "details": report["results"],
                "table_reachable": report["table_reachable"],
            },
        )
    return {
        "message": "Database setup completed successfully!",
        "results": report["results"],
        "note": "Make sure to configure the email templates in the Supabase dashboard.",
    }


@router.get("/database")
async def database_status(system: Client = Depends(get_system_supabase)):
    """Report whether the database has been initialized"""
    try:
        return SetupService(system=system).status()
    except (APIError, httpx.HTTPError) as e:
        details = e.message if isinstance(e, APIError) else str(e)
        logger.error("Database status check failed: %s", details)
        return JSONResponse(
            status_code=500,
            content={
                "initialized": False,
                "error": "Failed to check database status",
                "details": details,
            },
        )
