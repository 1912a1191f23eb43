"""
Database Setup Script
Applies the profiles table, signup trigger and RLS policies over DATABASE_URL.
Safe to run repeatedly; every statement is idempotent.

    python -m app.scripts.setup_database             # apply
    python -m app.scripts.setup_database --print-sql # print the SQL instead
"""

import argparse
import sys
import logging

from app.database.engine import create_setup_engine
from app.modules.setup.service import SetupService
from app.modules.setup.sql import as_script

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Set up the profiles table, trigger and policies")
    parser.add_argument("--print-sql", action="store_true", help="print the setup SQL and exit")
    args = parser.parse_args(argv)

    if args.print_sql:
        print(as_script())
        return 0

    try:
        engine = create_setup_engine()
    except ValueError as e:
        logger.error("%s", e)
        return 1

    try:
        logger.info("Starting database setup...")
        report = SetupService(engine=engine).setup()
    finally:
        engine.dispose()

    for result in report["results"]:
        if "error" in result:
            logger.error("FAILED %s %s", result["sql"], result["error"])

    if not report["ok"]:
        logger.error("Database setup did not complete")
        return 1

    logger.info("Database setup completed successfully! (%d statements)", len(report["results"]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
