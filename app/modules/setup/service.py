import logging
from postgrest.exceptions import APIError
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from supabase import Client
from typing import Any, Dict, List, Optional

from app.modules.setup.sql import SETUP_STATEMENTS

logger = logging.getLogger(__name__)

# duplicate_table, duplicate_object, duplicate_function
ALREADY_EXISTS_SQLSTATES = {"42P07", "42710", "42723"}

# undefined_table from Postgres, schema-cache miss from PostgREST
MISSING_TABLE_CODES = {"42P01", "PGRST205"}

PREVIEW_LENGTH = 50


def _preview(statement: str) -> str:
    return statement[:PREVIEW_LENGTH] + "..."


def _error_message(error: SQLAlchemyError) -> str:
    # The DB-API message only; str(error) would append the statement and parameters
    if isinstance(error, DBAPIError) and error.orig is not None:
        return str(error.orig).strip()
    return str(error).strip()


def is_already_exists(error: SQLAlchemyError) -> bool:
    if isinstance(error, DBAPIError) and error.orig is not None:
        if getattr(error.orig, "pgcode", None) in ALREADY_EXISTS_SQLSTATES:
            return True
    return "already exists" in _error_message(error).lower()


class SetupService:
    """Runs the bootstrap statements and reports on the profiles table"""

    def __init__(self, engine: Optional[Engine] = None, system: Optional[Client] = None):
        self.engine = engine
        self.system = system

    def execute_statement(self, statement: str) -> Dict[str, Any]:
        """Run one statement in its own transaction; errors are returned, not raised"""
        try:
            with self.engine.begin() as conn:
                conn.execute(text(statement))
            logger.info("Setup statement applied: %s", _preview(statement))
            return {"sql": _preview(statement), "success": True}
        except SQLAlchemyError as e:
            if is_already_exists(e):
                logger.info("Setup statement already applied: %s", _preview(statement))
                return {"sql": _preview(statement), "success": True}
            message = _error_message(e)
            logger.error("Setup statement failed: %s: %s", _preview(statement), message)
            return {"sql": _preview(statement), "error": message}

    def run_statements(self, statements: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        """Run every statement even after a failure, so the caller gets a full report"""
        return [self.execute_statement(s) for s in (statements or SETUP_STATEMENTS)]

    def table_reachable(self) -> bool:
        """Whether public.profiles can be read over the direct connection"""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1 FROM public.profiles LIMIT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error("Profiles table check failed: %s", _error_message(e))
            return False

    def setup(self) -> Dict[str, Any]:
        results = self.run_statements()
        failed = [r for r in results if "error" in r]
        reachable = self.table_reachable()
        if failed:
            logger.warning("Database setup finished with %d failed statement(s)", len(failed))
        return {
            "ok": not failed and reachable,
            "results": results,
            "table_reachable": reachable,
        }

    def status(self) -> Dict[str, Any]:
        """Check through the API whether the profiles table exists; other store errors propagate"""
        try:
            self.system.table("profiles").select("id").limit(1).execute()
        except APIError as e:
            if e.code in MISSING_TABLE_CODES:
                return {
                    "initialized": False,
                    "message": "Database not initialized. Run POST /api/v1/setup/database to set up.",
                }
            raise
        return {"initialized": True, "message": "Database is already initialized."}
